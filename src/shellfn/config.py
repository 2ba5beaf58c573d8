"""Configuration parsing for shellfn.yaml"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from shellfn.exceptions import ConfigError

CONFIG_FILENAME = "shellfn.yaml"


class ShellfnConfig(BaseModel):
    """How compiled scripts are executed."""

    shell: str = Field(default="bash", description="Shell used to run scripts")
    shell_args: list[str] = Field(
        default_factory=list, description="Extra flags passed to the shell"
    )
    debug_command: str = Field(
        default="set -x", description="Command run before the call when --debug is set"
    )

    @classmethod
    def load(cls, path: Path) -> "ShellfnConfig":
        """Load config from a yaml file, or defaults if it does not exist."""
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(str(path), str(exc)) from exc

        if not isinstance(data, dict):
            raise ConfigError(str(path), "top level must be a mapping")

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(path), str(exc)) from exc


def find_config_file(start: Path) -> Path | None:
    """Find shellfn.yaml in `start` or its parents."""
    start = start.resolve()
    for parent in [start] + list(start.parents):
        candidate = parent / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def load_config(start: Path, path: Path | None = None) -> ShellfnConfig:
    """Load an explicit config file, or the nearest one above `start`."""
    if path is not None:
        if not path.exists():
            raise ConfigError(str(path), "file not found")
        return ShellfnConfig.load(path)

    found = find_config_file(start)
    if found is None:
        return ShellfnConfig()
    return ShellfnConfig.load(found)
