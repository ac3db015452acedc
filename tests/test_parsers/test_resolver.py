import pytest

from flagtree import Command, TypeHandler
from flagtree.exceptions import (
    ConflictingOptionsError,
    DuplicateOptionError,
    InvalidValueError,
    MissingArgumentError,
    MissingOptionDependencyError,
    MissingOptionValueError,
    MissingRequiredOptionError,
    UnknownCommandError,
    UnknownOptionError,
    UnknownTypeError,
)


def build_flag_command() -> Command:
    return Command("app").add_option("-f, --flag [value:string]", "A flag.")


def test_optional_value_flag_without_value():
    result = build_flag_command().parse(["-f"])
    assert dict(result.options) == {"flag": True}
    assert result.args == ()


def test_optional_value_flag_with_value():
    result = build_flag_command().parse(["--flag", "value"])
    assert dict(result.options) == {"flag": "value"}
    assert result.args == ()


def test_unconsumed_token_is_unknown_command():
    with pytest.raises(UnknownCommandError) as excinfo:
        build_flag_command().parse(["-f", "value", "unknown"])
    assert str(excinfo.value) == "Unknown command: unknown"
    assert excinfo.value.token == "unknown"


def test_resolution_is_idempotent():
    command = build_flag_command().add_arguments("[name:string]")
    argv = ["-f", "value", "name"]
    assert command.parse(argv) == command.parse(argv)


def test_result_is_read_only():
    result = build_flag_command().parse(["-f"])
    with pytest.raises(TypeError):
        result.options["flag"] = False


def test_unknown_option():
    with pytest.raises(UnknownOptionError) as excinfo:
        build_flag_command().parse(["--nope"])
    assert str(excinfo.value) == "Unknown option: --nope"


def test_inline_values():
    command = (
        Command("app")
        .add_option("-p, --port <port:number>")
        .add_option("-v, --verbose")
    )
    result = command.parse(["--port=8080", "--verbose=false"])
    assert dict(result.options) == {"port": 8080, "verbose": False}
    assert command.parse(["-p=80"]).options["port"] == 80


def test_required_value_missing():
    command = Command("app").add_option("--port <port:number>").add_option("--verbose")
    with pytest.raises(MissingOptionValueError):
        command.parse(["--port"])
    with pytest.raises(MissingOptionValueError):
        command.parse(["--port", "--verbose"])


def test_invalid_value():
    command = Command("app").add_option("--port <port:number>")
    with pytest.raises(InvalidValueError, match="option --port"):
        command.parse(["--port", "http"])


def test_optional_value_skips_token_of_wrong_type():
    command = (
        Command("app")
        .add_option("--level [level:integer]")
        .add_arguments("[name:string]")
    )
    result = command.parse(["--level", "deploy"])
    assert dict(result.options) == {"level": True}
    assert result.args == ("deploy",)
    assert command.parse(["--level", "3"]).options["level"] == 3


def test_short_flag_cluster():
    command = (
        Command("app")
        .add_option("-a, --all")
        .add_option("-b, --brief")
        .add_option("-p, --port <port:number>")
    )
    result = command.parse(["-abp", "80"])
    assert dict(result.options) == {"all": True, "brief": True, "port": 80}

    result = command.parse(["-ap80"])
    assert dict(result.options) == {"all": True, "port": 80}


def test_short_flag_cluster_with_optional_boolean_values():
    command = (
        Command("app")
        .add_option("-v, --verbose [arg:boolean]")
        .add_option("-q, --quiet")
        .add_option("-l, --level [level:integer]")
    )
    assert dict(command.parse(["-vq"]).options) == {"verbose": True, "quiet": True}
    assert dict(command.parse(["-vfalse"]).options) == {"verbose": False}
    assert dict(command.parse(["-lv"]).options) == {"level": True, "verbose": True}
    assert dict(command.parse(["-l3"]).options) == {"level": 3}


def test_short_flag_cluster_with_unknown_letter():
    command = Command("app").add_option("-a, --all")
    with pytest.raises(UnknownOptionError, match="-z"):
        command.parse(["-az"])


def test_double_dash_ends_option_scanning():
    command = (
        Command("app")
        .add_option("-v, --verbose")
        .add_arguments("[rest...:string]")
    )
    result = command.parse(["-v", "--", "-v", "--help"])
    assert dict(result.options) == {"verbose": True}
    assert result.args == (["-v", "--help"],)


def test_negative_numbers():
    command = (
        Command("app")
        .add_option("--offset <offset:number>")
        .add_arguments("<count:number>")
    )
    result = command.parse(["--offset", "-5", "-1.5"])
    assert result.options["offset"] == -5
    assert result.args == (-1.5,)


def test_declared_numeric_flag_wins_over_negative_number():
    command = Command("app").add_option("-1, --once")
    assert command.parse(["-1"]).options["once"] is True


def test_variadic_option_stops_at_next_flag():
    command = (
        Command("app")
        .add_option("--files <files...:string>")
        .add_option("--verbose")
    )
    result = command.parse(["--files", "a", "b", "--verbose"])
    assert dict(result.options) == {"files": ["a", "b"], "verbose": True}


def test_list_values_are_split():
    command = (
        Command("app")
        .add_option("--tags <tags:string[]>")
        .add_arguments("<ids:integer[]>")
    )
    result = command.parse(["--tags", "a,b", "1,2,3"])
    assert result.options["tags"] == ["a", "b"]
    assert result.args == ([1, 2, 3],)


def test_collect_option():
    command = Command("app").add_option("-i, --include <path:string>", collect=True)
    result = command.parse(["-i", "a", "--include", "b"])
    assert result.options["include"] == ["a", "b"]


def test_duplicate_option():
    command = Command("app").add_option("-i, --include <path:string>")
    with pytest.raises(DuplicateOptionError) as excinfo:
        command.parse(["-i", "a", "-i", "b"])
    assert str(excinfo.value) == "Duplicate option: --include"


def test_duplicate_option_across_sub_command():
    root = Command("git").add_option("-f, --force")
    root.add_command("push")
    root.get_command("push").add_option("-f, --force")
    assert dict(root.parse(["push", "-f"]).options) == {"force": True}
    with pytest.raises(DuplicateOptionError, match="--force"):
        root.parse(["--force", "push", "--force"])


@pytest.mark.parametrize(
    "argv, message",
    [
        (["--alpha", "--beta"], "Option --beta conflicts with option --alpha"),
        (["--beta", "--alpha"], "Option --alpha conflicts with option --beta"),
    ],
)
def test_conflicts_are_symmetric(argv, message):
    command = (
        Command("app")
        .add_option("--alpha")
        .add_option("--beta", conflicts=["alpha"])
    )
    with pytest.raises(ConflictingOptionsError) as excinfo:
        command.parse(argv)
    assert str(excinfo.value) == message


def test_defaults_do_not_conflict():
    command = (
        Command("app")
        .add_option("--alpha <alpha:string>", default="one")
        .add_option("--beta", conflicts=["alpha"])
    )
    result = command.parse(["--beta"])
    assert dict(result.options) == {"beta": True, "alpha": "one"}
    assert result.supplied == ("beta",)


def test_missing_required_option():
    command = Command("app").add_option("--name <name:string>", required=True)
    with pytest.raises(MissingRequiredOptionError) as excinfo:
        command.parse([])
    assert str(excinfo.value) == "Missing required option: --name"


def test_default_values_are_copied():
    command = Command("app").add_option("--tags <tags:string[]>", default=["a"])
    first = command.parse([])
    first.options["tags"].append("b")
    assert command.parse([]).options["tags"] == ["a"]


def test_missing_dependency():
    command = (
        Command("app")
        .add_option("--user <user:string>")
        .add_option("--password <password:string>", depends=["user"])
    )
    with pytest.raises(MissingOptionDependencyError) as excinfo:
        command.parse(["--password", "secret"])
    assert str(excinfo.value) == "Option --password depends on option --user"
    result = command.parse(["--password", "secret", "--user", "me"])
    assert dict(result.options) == {"password": "secret", "user": "me"}


def test_standalone_option_bypasses_validation():
    command = (
        Command("app")
        .add_option("-h, --help [arg:boolean]", standalone=True)
        .add_option("--name <name:string>", required=True)
        .add_arguments("<target:string>")
    )
    result = command.parse(["-h", "ignored", "--unknown"])
    assert result.standalone is not None
    assert result.standalone.name == "help"
    assert result.short_circuited
    assert dict(result.options) == {"help": True}
    assert result.args == ()


def test_missing_argument():
    command = Command("app").add_arguments("<source:string> <target:string>")
    with pytest.raises(MissingArgumentError) as excinfo:
        command.parse(["a"])
    assert str(excinfo.value) == "Missing argument: target"


def test_optional_arguments_may_be_omitted():
    command = Command("app").add_arguments("<source:string> [target:string]")
    assert command.parse(["a"]).args == ("a",)
    assert command.parse(["a", "b"]).args == ("a", "b")


def build_tree() -> Command:
    root = (
        Command("git")
        .add_option("-v, --verbose", "Verbose output.", inherited=True)
        .add_option("--debug", "Debug output.")
    )
    remote = Command("remote", aliases=["r"]).add_command(
        "add <name:string> <url:string>", "Add a remote."
    )
    root.add_command("remote", remote)
    return root


def test_descends_into_sub_commands():
    root = build_tree()
    result = root.parse(["remote", "add", "origin", "https://example.com"])
    assert result.command.name == "add"
    assert result.command.parent.name == "remote"
    assert result.args == ("origin", "https://example.com")


def test_descends_by_alias():
    result = build_tree().parse(["r"])
    assert result.command.name == "remote"


def test_inherited_option_is_visible_in_children():
    result = build_tree().parse(["remote", "add", "-v", "origin", "url"])
    assert result.options["verbose"] is True


def test_non_inherited_option_is_not_visible_in_children():
    root = build_tree()
    with pytest.raises(UnknownOptionError):
        root.parse(["remote", "--debug"])
    result = root.parse(["--debug", "remote"])
    assert result.command.name == "remote"
    assert result.options["debug"] is True


def test_positional_stops_command_descent():
    root = build_tree().add_arguments("[path:string]")
    with pytest.raises(UnknownCommandError, match="remote"):
        root.parse(["src", "remote"])


def test_inherited_required_option_is_checked_in_child():
    root = Command("app").add_option("--token <token:string>", required=True, inherited=True)
    root.add_command("status")
    with pytest.raises(MissingRequiredOptionError):
        root.parse(["status"])


def test_parent_required_option_is_not_checked_after_descent():
    root = Command("app").add_option("--name <name:string>", required=True)
    root.add_command("status")
    assert root.parse(["status"]).command.name == "status"


def test_default_sub_command():
    root = Command("app")
    root.add_command("status", "Show status.").add_command("log", "Show log.")
    root.set_default("status")
    assert root.parse([]).command.name == "status"
    assert root.parse(["log"]).command.name == "log"


def test_unknown_default_sub_command():
    root = Command("app").set_default("missing")
    with pytest.raises(UnknownCommandError, match="missing"):
        root.parse([])


def test_custom_type_inherited_by_children():
    root = Command("paint").add_type(
        "color", TypeHandler("color", str.upper, lambda value: value in {"red", "green"})
    )
    root.add_command("wall <color:color>")
    assert root.parse(["wall", "red"]).args == ("RED",)
    with pytest.raises(InvalidValueError, match="expected color"):
        root.parse(["wall", "blue"])


def test_non_inherited_type_is_unknown_in_children():
    root = Command("app").add_type("secret", str, inherited=False)
    root.add_command("login <password:secret>")
    with pytest.raises(UnknownTypeError):
        root.parse(["login", "hunter2"])


def test_child_type_overrides_builtin():
    command = Command("app").add_type("string", str.upper).add_arguments("<name>")
    assert command.parse(["abc"]).args == ("ABC",)
