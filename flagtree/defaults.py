# Flagtree CLI Builder — (c) 2025 rtj.dev LLC — MIT Licensed
"""defaults.py

Standard capabilities that can be installed on any `Command`.

Rather than subclassing, a command opts in to standard behaviour by calling
`install_defaults` (or by being built with `default_command`):

- `Capability.HELP`: `-h, --help` option and a `help [command]` sub-command.
- `Capability.VERSION`: `-V, --version` option.

Both options are standalone: they short-circuit resolution, so
`app --help` works even when a required option is missing. Their hooks render
output and return `ControlSignal.terminate(0)`; the process boundary turns that
into the exit code.

Children added with `add_command(name)` on a default command are themselves
default commands, so the whole tree supports help and version.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

from flagtree.command import Command
from flagtree.help import render_help
from flagtree.parser.parser_types import ResolutionResult
from flagtree.parser.type_registry import TypeHandler
from flagtree.signals import ControlSignal


class Capability(Enum):
    """Standard behaviours `install_defaults` can add to a command."""

    HELP = "help"
    VERSION = "version"

    @classmethod
    def _missing_(cls, value: object) -> Capability:
        if isinstance(value, str):
            normalized = value.strip().lower()
            alias = {"h": "help", "v": "version"}.get(normalized, normalized)
            for member in cls:
                if member.value == alias:
                    return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid Capability: '{value}'. Must be one of: {valid}")


DEFAULT_CAPABILITIES = (Capability.HELP, Capability.VERSION)


def show_help(result: ResolutionResult) -> ControlSignal:
    render_help(result.command)
    return ControlSignal.terminate(0)


def show_version(result: ResolutionResult) -> ControlSignal:
    command = result.command
    command.console.print(command.get_version() or "unknown", highlight=False)
    return ControlSignal.terminate(0)


def build_help_command(parent: Command) -> Command:
    """
    Build the `help [command:command]` sub-command for `parent`.

    The `command` type only accepts names (or aliases) of the parent's children.
    """
    help_command = Command(description="Show this help or the help of a sub-command.")

    def is_sub_command(value: str) -> bool:
        return parent.find_command(value) is not None

    def show(result: ResolutionResult) -> ControlSignal:
        target = parent.get_command(result.args[0]) if result.args else parent
        render_help(target, console=parent.console)
        return ControlSignal.terminate(0)

    help_command.add_type(
        "command", TypeHandler("command", str, is_sub_command), inherited=False
    )
    help_command.add_arguments("[command:command]")
    help_command.set_action(show)
    return help_command


def install_defaults(
    command: Command,
    capabilities: Iterable[Capability | str] = DEFAULT_CAPABILITIES,
) -> Command:
    """
    Install standard options and sub-commands on `command`.

    Args:
        command (Command): The command to extend.
        capabilities (Iterable[Capability | str]): Which behaviours to install.

    Returns:
        Command: The same command, for chaining.
    """
    capabilities = [Capability(capability) for capability in capabilities]
    if Capability.HELP in capabilities:
        command.add_option(
            "-h, --help [arg:boolean]",
            "Show this help.",
            standalone=True,
            action=show_help,
        )
    if Capability.VERSION in capabilities:
        command.add_option(
            "-V, --version [arg:boolean]",
            "Show the version number for this program.",
            standalone=True,
            action=show_version,
        )
    if Capability.HELP in capabilities:
        command.add_command("help", build_help_command(command))
    command.set_command_factory(lambda: default_command(capabilities=capabilities))
    return command


def default_command(
    name: str = "",
    description: str = "",
    capabilities: Iterable[Capability | str] = DEFAULT_CAPABILITIES,
    **kwargs: Any,
) -> Command:
    """
    Build a command with the standard capabilities installed.

    Args:
        name (str): Command name; empty means the program invocation is shown.
        description (str): Help text.
        capabilities (Iterable[Capability | str]): Which behaviours to install.
        **kwargs: Further `Command` keyword arguments (version, aliases, ...).
    """
    command = Command(name, description, **kwargs)
    return install_defaults(command, capabilities)
