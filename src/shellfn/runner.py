"""Runner - executes a resolved call against a compiled script."""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import List

from shellfn.cli.spec import FnCall
from shellfn.compiler.script import Script
from shellfn.config import ShellfnConfig

log = logging.getLogger(__name__)


class ScriptRunner:
    """Runs one function of a script in a fresh shell process."""

    def __init__(self, config: ShellfnConfig | None = None):
        self.config = config or ShellfnConfig()

    def build_source(self, script: Script, call: FnCall) -> str:
        """Compiled script followed by the call; body lines stay where they were."""
        lines = [script.render()]
        if call.debug:
            lines.append(self.config.debug_command)
        lines.append(f'{call.name} "$@"')
        return "\n".join(lines)

    def build_command(self, script: Script, call: FnCall, program_name: str) -> List[str]:
        """Argv for the shell; call arguments become its positional parameters."""
        return [
            self.config.shell,
            *self.config.shell_args,
            "-c",
            self.build_source(script, call),
            program_name,
            *call.args,
        ]

    def run(self, script: Script, call: FnCall, program_name: str) -> int:
        cmd = self.build_command(script, call, program_name)
        log.info("Running %s %s", call.name, shlex.join(call.args))
        log.debug("Shell: %s", shlex.join([self.config.shell, *self.config.shell_args]))
        result = subprocess.run(cmd)
        return result.returncode
