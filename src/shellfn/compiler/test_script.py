"""Tests for Script validation and argument resolution."""

import pytest

from shellfn.cli.spec import ArgSpec, CommandSpec, FnCall
from shellfn.compiler import Script
from shellfn.exceptions import InvariantError


def test_duplicate_names_are_fatal():
    with pytest.raises(InvariantError, match="more than once"):
        Script.parse("fn a() {}\npub fn a() {}\n")


def test_lone_pub_main_is_single_entry():
    script = Script.parse("fn helper() {}\npub fn main() {}\nfn other() {}\n")
    assert script.only_pub_main_index == 1


def test_second_pub_item_disables_single_entry():
    script = Script.parse("pub fn main() {}\npub fn other() {}\n")
    assert script.only_pub_main_index is None


def test_lone_pub_item_not_named_main_uses_subcommands():
    script = Script.parse("pub fn run() {}\nfn main() {}\n")
    assert script.only_pub_main_index is None
    assert [cmd.name for cmd in script.cli_spec("prog").subcommands] == ["run"]


def test_private_main_is_not_an_entry_point():
    script = Script.parse("fn main() {}\n")
    spec = script.cli_spec("prog")
    assert spec.entry is None
    assert spec.subcommands == ()


def test_cli_spec_single_entry():
    script = Script.parse("// Copies.\npub fn main(\n  src, // the source\n  dst\n) {}\n")
    spec = script.cli_spec("prog")

    assert spec.is_single_entry
    assert spec.program_name == "prog"
    assert spec.description == "Copies."
    assert spec.entry == CommandSpec(
        name="main",
        description="Copies.",
        args=(ArgSpec("src", "the source"), ArgSpec("dst", None)),
    )


def test_cli_spec_subcommands_keep_order_and_skip_private():
    script = Script.parse(
        "pub fn zeta() {}\nfn hidden() {}\n// Build it.\npub fn alpha(target) {}\n"
    )
    spec = script.cli_spec("prog")

    assert not spec.is_single_entry
    assert [cmd.name for cmd in spec.subcommands] == ["zeta", "alpha"]
    assert spec.subcommands[1].description == "Build it."
    assert spec.subcommands[1].args == (ArgSpec("target"),)


def test_single_entry_call():
    script = Script.parse("pub fn main(path) {}\n")

    assert script.render() == "main () { :; }"
    assert script.parse_args("prog", ["/tmp/x"]) == FnCall(
        name="main", args=["/tmp/x"], debug=False
    )


def test_single_entry_debug_flag():
    script = Script.parse("pub fn main(path) {}\n")
    call = script.parse_args("prog", ["--debug", "/tmp/x"])
    assert call == FnCall(name="main", args=["/tmp/x"], debug=True)


def test_subcommand_call_with_trailing_debug():
    script = Script.parse("pub fn build() {}\npub fn test() {}\n")

    assert script.parse_args("prog", ["build", "--debug"]) == FnCall(
        name="build", args=[], debug=True
    )
    assert script.parse_args("prog", ["--debug", "test"]) == FnCall(
        name="test", args=[], debug=True
    )
    assert script.parse_args("prog", ["test"]).debug is False


def test_subcommand_is_required(capsys):
    script = Script.parse("// Builds.\npub fn build() {}\npub fn test() {}\n")

    with pytest.raises(SystemExit) as exc_info:
        script.parse_args("prog", [])

    assert exc_info.value.code == 2
    err = capsys.readouterr().err
    assert "Usage: prog" in err
    assert "Commands:" in err
    assert "Builds." in err
    assert "Missing command." in err


def test_unknown_subcommand_is_usage_error():
    script = Script.parse("pub fn build() {}\npub fn test() {}\n")
    with pytest.raises(SystemExit) as exc_info:
        script.parse_args("prog", ["deploy"])
    assert exc_info.value.code == 2


def test_private_items_are_not_subcommands():
    script = Script.parse("pub fn build() {}\nfn helper() {}\npub fn test() {}\n")
    with pytest.raises(SystemExit) as exc_info:
        script.parse_args("prog", ["helper"])
    assert exc_info.value.code == 2


def test_missing_argument_is_usage_error():
    script = Script.parse("pub fn cp(src, dst) {}\npub fn other() {}\n")
    with pytest.raises(SystemExit) as exc_info:
        script.parse_args("prog", ["cp", "a"])
    assert exc_info.value.code == 2


def test_argument_values_in_declaration_order():
    script = Script.parse("pub fn cp(src, dst, mode) {}\npub fn other() {}\n")
    call = script.parse_args("prog", ["cp", "a", "b", "0644"])
    assert call.args == ["a", "b", "0644"]


def test_help_lists_descriptions(capsys):
    script = Script.parse(
        "// Copies things.\npub fn main(\n  src // the source\n) {}\n"
    )
    with pytest.raises(SystemExit) as exc_info:
        script.parse_args("prog", ["--help"])

    assert exc_info.value.code == 0
    out = capsys.readouterr().out
    assert "Copies things." in out
    assert "Arguments:" in out
    assert "the source" in out
    assert "--debug" in out
