import pytest

from flagtree import Capability, Command, default_command, install_defaults


def build_app() -> Command:
    app = default_command("app", "An example application.", version="1.0.0")
    app.add_option("--name <name:string>", "Your name.", required=True)
    app.add_command("deploy <service:string>", "Deploy a service.")
    return app


def test_default_command_installs_options_and_help_command():
    app = build_app()
    assert app.find_option("-h").name == "help"
    assert app.find_option("--version").standalone is True
    assert app.find_command("help") is not None


def test_children_are_default_commands():
    app = build_app()
    deploy = app.get_command("deploy")
    assert deploy.find_option("--help") is not None
    assert deploy.find_command("help") is not None
    assert deploy.get_args_definition() == "<service:string>"


def test_install_selected_capabilities():
    command = install_defaults(Command("tool"), ["help"])
    assert command.find_option("--help") is not None
    assert command.find_option("--version") is None


@pytest.mark.parametrize(
    "value, expected",
    [
        ("help", Capability.HELP),
        ("H", Capability.HELP),
        ("version", Capability.VERSION),
        ("v", Capability.VERSION),
        (Capability.VERSION, Capability.VERSION),
    ],
)
def test_capability_aliases(value, expected):
    assert Capability(value) is expected


def test_invalid_capability():
    with pytest.raises(ValueError, match="Invalid Capability"):
        Capability("colors")


def test_help_flag_short_circuits_required_options():
    result = build_app().parse(["--help"])
    assert result.standalone.name == "help"


@pytest.mark.parametrize("argv, expected", [(["-hV"], "help"), (["-Vh"], "version")])
def test_clustered_default_flags(argv, expected):
    result = build_app().parse(argv)
    assert result.standalone.name == expected
    assert dict(result.options) == {expected: True}


@pytest.mark.asyncio
async def test_help_flag_renders_help(capsys):
    assert await build_app().run(["-h"]) == 0
    captured = capsys.readouterr()
    assert "Usage:" in captured.out
    assert "An example application." in captured.out
    assert "Show this help." in captured.out


@pytest.mark.asyncio
async def test_version_flag(capsys):
    assert await build_app().run(["-V"]) == 0
    captured = capsys.readouterr()
    assert "1.0.0" in captured.out


@pytest.mark.asyncio
async def test_child_version_falls_back_to_parent(capsys):
    assert await build_app().run(["deploy", "--version"]) == 0
    captured = capsys.readouterr()
    assert "1.0.0" in captured.out


@pytest.mark.asyncio
async def test_help_sub_command_for_child(capsys):
    assert await build_app().run(["help", "deploy"]) == 0
    captured = capsys.readouterr()
    assert "Deploy a service." in captured.out


@pytest.mark.asyncio
async def test_help_sub_command_for_parent(capsys):
    assert await build_app().run(["help"]) == 0
    captured = capsys.readouterr()
    assert "An example application." in captured.out


@pytest.mark.asyncio
async def test_help_sub_command_rejects_unknown_command(capsys):
    assert await build_app().run(["help", "nope"]) == 1
    captured = capsys.readouterr()
    assert "'nope'" in captured.out


@pytest.mark.asyncio
async def test_missing_required_option_suggests_help(capsys):
    assert await build_app().run([]) == 1
    captured = capsys.readouterr()
    assert "Missing required option: --name" in captured.out
    assert "--help" in captured.out
