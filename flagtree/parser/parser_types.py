# Flagtree CLI Builder — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Result and metadata types shared by the Flagtree resolver and help assembler.

Contents:
- `ResolutionResult`: The immutable outcome of resolving an argument vector.
- `EnvVariable`: A declared environment variable, shown in help output.
- `Example`: A named usage example, shown in help output.
- `CommandMap`: A child command with its aliases, as listed in help output.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from flagtree.command import Command
    from flagtree.parser.option import OptionDescriptor


@dataclass(frozen=True)
class ResolutionResult:
    """
    The outcome of a successful resolution.

    Attributes:
        command (Command): The command that was finally selected.
        options (Mapping[str, Any]): Read-only canonical option name -> value.
        args (tuple[Any, ...]): Coerced positional values; a variadic slot holds a list.
        standalone (OptionDescriptor | None): The standalone option that
            short-circuited resolution, if any.
        supplied (tuple[str, ...]): Canonical names of the options given on the
            command line, in the order they were first seen. Defaults are not listed.
    """

    command: Command
    options: Mapping[str, Any] = field(default_factory=dict)
    args: tuple[Any, ...] = ()
    standalone: OptionDescriptor | None = None
    supplied: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.options, MappingProxyType):
            object.__setattr__(self, "options", MappingProxyType(dict(self.options)))
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))
        if not isinstance(self.supplied, tuple):
            object.__setattr__(self, "supplied", tuple(self.supplied))

    @property
    def short_circuited(self) -> bool:
        return self.standalone is not None

    def __str__(self) -> str:
        options = ", ".join(f"{key}={value!r}" for key, value in self.options.items())
        return (
            f"ResolutionResult(command='{self.command.get_name()}', "
            f"options={{{options}}}, args={list(self.args)!r})"
        )


@dataclass(frozen=True)
class EnvVariable:
    """Represents a declared environment variable."""

    names: tuple[str, ...]
    type_name: str = "string"
    description: str = ""
    value_name: str = "value"

    def get_type_definition(self) -> str:
        return f"<{self.value_name}:{self.type_name}>"


@dataclass(frozen=True)
class Example:
    """Represents a usage example for help output."""

    name: str
    description: str


@dataclass(frozen=True)
class CommandMap:
    """A child command with the names it answers to."""

    name: str
    aliases: tuple[str, ...]
    command: Command
