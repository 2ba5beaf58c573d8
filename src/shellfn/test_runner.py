import shutil
from types import SimpleNamespace

import pytest

from shellfn.cli.spec import FnCall
from shellfn.compiler import Script
from shellfn.config import ShellfnConfig
from shellfn.runner import ScriptRunner


SOURCE = "pub fn build(target) {\n  echo \"$target\"\n}\npub fn test() {}\n"


def test_build_command_places_script_first():
    script = Script.parse(SOURCE)
    call = FnCall(name="build", args=["release build"])
    cmd = ScriptRunner().build_command(script, call, "tasks.fn")

    assert cmd[:2] == ["bash", "-c"]
    assert cmd[2] == script.render() + '\nbuild "$@"'
    assert cmd[3:] == ["tasks.fn", "release build"]


def test_debug_runs_trace_command_before_call():
    script = Script.parse(SOURCE)
    call = FnCall(name="test", debug=True)
    source = ScriptRunner().build_source(script, call)

    assert source.endswith('\nset -x\ntest "$@"')


def test_config_controls_shell():
    config = ShellfnConfig(shell="sh", shell_args=["-e"], debug_command="set -v")
    script = Script.parse(SOURCE)
    cmd = ScriptRunner(config).build_command(
        script, FnCall(name="test", debug=True), "tasks.fn"
    )

    assert cmd[:3] == ["sh", "-e", "-c"]
    assert "\nset -v\n" in cmd[3]


def test_run_returns_exit_code(monkeypatch):
    calls = []

    def fake_run(cmd):
        calls.append(cmd)
        return SimpleNamespace(returncode=3)

    monkeypatch.setattr("shellfn.runner.subprocess.run", fake_run)
    script = Script.parse(SOURCE)

    code = ScriptRunner().run(script, FnCall(name="build", args=["x"]), "tasks.fn")

    assert code == 3
    assert calls[0][-2:] == ["tasks.fn", "x"]


@pytest.mark.skipif(shutil.which("bash") is None, reason="bash not installed")
def test_run_with_bash(capfd):
    script = Script.parse(
        "pub fn main(code, word) {\n  echo \"got $word\"\n  exit \"$code\"\n}\n"
    )
    call = script.parse_args("prog", ["4", "hello world"])

    code = ScriptRunner().run(script, call, "prog")

    assert code == 4
    assert capfd.readouterr().out == "got hello world\n"


@pytest.mark.skipif(shutil.which("bash") is None, reason="bash not installed")
def test_run_one_line_body_with_bash(capfd):
    script = Script.parse(
        'fn helper() {}\npub fn main(word) { helper; echo "got $word" }\n'
    )
    call = script.parse_args("prog", ["hi"])

    code = ScriptRunner().run(script, call, "prog")

    assert code == 0
    assert capfd.readouterr().out == "got hi\n"
