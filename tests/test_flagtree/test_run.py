import sys

import pytest

from flagtree import Command, ControlSignal
from flagtree.exceptions import UnknownTypeError


def recorder(calls, name, signal=None):
    def hook(result):
        calls.append(name)
        return signal

    return hook


@pytest.mark.asyncio
async def test_hooks_run_in_given_order_then_action():
    calls = []
    command = (
        Command("app")
        .add_option("--first", action=recorder(calls, "first"))
        .add_option("--second", action=recorder(calls, "second"))
        .add_option("--unused", action=recorder(calls, "unused"))
        .set_action(recorder(calls, "action"))
    )
    assert await command.run(["--second", "--first"]) == 0
    assert calls == ["second", "first", "action"]


@pytest.mark.asyncio
async def test_defaulted_options_do_not_run_hooks():
    calls = []
    command = Command("app").add_option(
        "--level <level:integer>", default=1, action=recorder(calls, "level")
    )
    assert await command.run([]) == 0
    assert calls == []


@pytest.mark.asyncio
async def test_async_hooks_are_awaited():
    seen = []

    async def action(result):
        seen.append((result.command.name, result.args, dict(result.options)))

    command = (
        Command("app")
        .add_option("--port <port:number>")
        .add_arguments("<name:string>")
        .set_action(action)
    )
    assert await command.run(["--port", "80", "web"]) == 0
    assert seen == [("app", ("web",), {"port": 80})]


@pytest.mark.asyncio
async def test_terminate_signal_stops_the_chain():
    calls = []
    command = (
        Command("app")
        .add_option("--stop", action=recorder(calls, "stop", ControlSignal.terminate(3)))
        .set_action(recorder(calls, "action"))
    )
    assert await command.run(["--stop"]) == 3
    assert calls == ["stop"]


@pytest.mark.asyncio
async def test_standalone_hook_runs_alone():
    calls = []
    command = (
        Command("app")
        .add_option("--verbose", action=recorder(calls, "verbose"))
        .add_option(
            "--info",
            standalone=True,
            action=recorder(calls, "info", ControlSignal.terminate(0)),
        )
        .set_action(recorder(calls, "action"))
    )
    assert await command.run(["--verbose", "--info"]) == 0
    assert calls == ["info"]


@pytest.mark.asyncio
async def test_sub_command_action_runs():
    calls = []
    root = Command("app").set_action(recorder(calls, "root"))
    root.add_command("status", Command(action=recorder(calls, "status")))
    assert await root.run(["status"]) == 0
    assert calls == ["status"]


@pytest.mark.asyncio
async def test_resolution_error_exits_with_one(capsys):
    command = Command("app").add_option("--verbose")
    assert await command.run(["nope"]) == 1
    captured = capsys.readouterr()
    assert "Unknown command: nope" in captured.out


@pytest.mark.asyncio
async def test_error_message_is_printed_literally(capsys):
    command = Command("app").add_arguments("[count:integer]")
    assert await command.run(["many"]) == 1
    captured = capsys.readouterr()
    assert "Invalid value for argument [count]" in captured.out


@pytest.mark.asyncio
async def test_definition_error_is_raised():
    command = Command("app").add_arguments("<value:missing>")
    with pytest.raises(UnknownTypeError):
        await command.run(["1"])


@pytest.mark.asyncio
async def test_hook_must_return_signal_or_none():
    command = Command("app").set_action(lambda result: "done")
    with pytest.raises(TypeError):
        await command.run([])


@pytest.mark.asyncio
async def test_run_defaults_to_sys_argv(monkeypatch):
    calls = []
    command = Command("app").add_option("--flag").set_action(
        lambda result: calls.append(dict(result.options))
    )
    monkeypatch.setattr(sys, "argv", ["app", "--flag"])
    assert await command.run() == 0
    assert calls == [{"flag": True}]


def test_main_exits_with_code():
    command = Command("app").set_action(lambda result: ControlSignal.terminate(4))
    with pytest.raises(SystemExit) as excinfo:
        command.main([])
    assert excinfo.value.code == 4


def test_main_exits_with_one_on_error():
    with pytest.raises(SystemExit) as excinfo:
        Command("app").main(["--nope"])
    assert excinfo.value.code == 1
