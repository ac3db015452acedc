# Flagtree CLI Builder — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `OptionDescriptor`, `OptionConfig` and `parse_option`, which turn a flag
specification such as

    -p, --port <port:number>
    -v, --verbose
    -t, --tags [tags:string[]]

into a structured option: its aliases, canonical name, optional value argument
and the constraints declared in its configuration.

Key Attributes:
- `flags`: Short and long aliases (e.g. `-p`, `--port`)
- `name`: Canonical name used as the key in resolved options (`--dry-run` -> `dry_run`)
- `value_arg`: `ArgumentDescriptor` for the value, or None for a boolean flag
- `required` / `default` / `conflicts` / `depends`: Resolution constraints
- `standalone`: Short-circuits resolution (help, version)
- `inherited`: Visible to every descendant command
- `collect`: May be repeated; values accumulate into a list

Configuration is validated with pydantic so that a misconfigured option fails
at definition time with a `MalformedDefinitionError`.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from flagtree.exceptions import DuplicateAliasError, MalformedDefinitionError
from flagtree.parser.argument import ArgumentDescriptor, parse_arguments_definition

_SHORT_FLAG = re.compile(r"^-[A-Za-z0-9]$")
_LONG_FLAG = re.compile(r"^--[A-Za-z0-9][\w-]*$")
_FLAG_SEPARATOR = re.compile(r"[,\s]+")


def option_name(flag: str) -> str:
    """
    Convert a flag or option reference to its canonical name.

    Example:
        option_name("--dry-run") -> "dry_run"
        option_name("-n") -> "n"
    """
    return flag.strip().lstrip("-").replace("-", "_")


class OptionConfig(BaseModel):
    """
    Validated configuration for an option.

    Attributes:
        required (bool): The option must be supplied.
        default (Any): Value used when the option is absent.
        conflicts (list[str]): Options that may not be combined with this one.
        depends (list[str]): Options that must be supplied alongside this one.
        standalone (bool): Short-circuits resolution and skips validation.
        inherited (bool): Visible to descendant commands.
        hidden (bool): Omitted from help listings.
        collect (bool): May be repeated; values are collected into a list.
        action (Callable | None): Hook invoked after successful resolution.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    required: bool = False
    default: Any = None
    conflicts: list[str] = Field(default_factory=list)
    depends: list[str] = Field(default_factory=list)
    standalone: bool = False
    inherited: bool = False
    hidden: bool = False
    collect: bool = False
    action: Callable[..., Any] | None = None

    @field_validator("conflicts", "depends", mode="before")
    @classmethod
    def normalize_names(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        names = []
        for item in value:
            if not isinstance(item, str) or not option_name(item):
                raise ValueError(f"Invalid option reference: {item!r}")
            names.append(option_name(item))
        return names

    @model_validator(mode="after")
    def check_combinations(self) -> OptionConfig:
        if self.required and self.standalone:
            raise ValueError("A standalone option cannot be required")
        if self.required and self.default is not None:
            raise ValueError("A required option cannot have a default value")
        return self


@dataclass(frozen=True)
class OptionDescriptor:
    """
    Represents a declared command-line option.

    Attributes:
        flags (tuple[str, ...]): Aliases in declared order.
        name (str): Canonical name used in resolution results.
        description (str): Help text.
        value_arg (ArgumentDescriptor | None): Value contract; None for boolean flags.
        required (bool): Must be supplied.
        default (Any): Value applied when absent.
        conflicts (tuple[str, ...]): Canonical names this option excludes.
        depends (tuple[str, ...]): Canonical names this option requires.
        standalone (bool): Bypasses validation and short-circuits resolution.
        inherited (bool): Visible in descendant commands.
        hidden (bool): Omitted from help.
        collect (bool): Repeatable; values accumulate in a list.
        action (Callable | None): Hook run after resolution.
    """

    flags: tuple[str, ...]
    name: str
    description: str = ""
    value_arg: ArgumentDescriptor | None = None
    required: bool = False
    default: Any = None
    conflicts: tuple[str, ...] = ()
    depends: tuple[str, ...] = ()
    standalone: bool = False
    inherited: bool = False
    hidden: bool = False
    collect: bool = False
    action: Callable[..., Any] | None = field(default=None, compare=False)

    @property
    def is_boolean(self) -> bool:
        return self.value_arg is None

    @property
    def display_flag(self) -> str:
        """The flag used in messages: the first long alias, else the first alias."""
        return next((flag for flag in self.flags if flag.startswith("--")), self.flags[0])

    @property
    def type_definition(self) -> str:
        return self.value_arg.render() if self.value_arg else ""

    @property
    def flags_text(self) -> str:
        return ", ".join(self.flags)

    def get_flags_definition(self) -> str:
        """Render the flag specification, e.g. `-p, --port <port:number>`."""
        if self.value_arg:
            return f"{self.flags_text} {self.type_definition}"
        return self.flags_text

    def __hash__(self) -> int:
        return hash((self.flags, self.name, self.value_arg))

    def __str__(self) -> str:
        return f"Option({self.get_flags_definition()})"


def _split_flags_spec(flags_spec: str) -> tuple[list[str], str]:
    positions = [index for index in (flags_spec.find("<"), flags_spec.find("[")) if index != -1]
    if not positions:
        return [flag for flag in _FLAG_SEPARATOR.split(flags_spec) if flag], ""
    start = min(positions)
    flags = [flag for flag in _FLAG_SEPARATOR.split(flags_spec[:start]) if flag]
    return flags, flags_spec[start:]


def _validate_flags(flags: list[str], flags_spec: str) -> None:
    if not flags:
        raise MalformedDefinitionError(f"No flags provided in option '{flags_spec}'")
    seen: set[str] = set()
    for flag in flags:
        if not (_SHORT_FLAG.match(flag) or _LONG_FLAG.match(flag)):
            raise MalformedDefinitionError(
                f"Invalid flag '{flag}' in option '{flags_spec}': "
                "use '-x' for short flags and '--word' for long flags"
            )
        if flag in seen:
            raise DuplicateAliasError(
                f"Flag '{flag}' is declared twice in option '{flags_spec}'"
            )
        seen.add(flag)


def parse_option(
    flags_spec: str,
    description: str = "",
    config: OptionConfig | Mapping[str, Any] | None = None,
) -> OptionDescriptor:
    """
    Parse a flag specification into an `OptionDescriptor`.

    Args:
        flags_spec (str): Aliases separated by commas/spaces, optionally followed by
            one bracketed value definition, e.g. "-f, --flag [value:string]".
        description (str): Help text.
        config (OptionConfig | Mapping | None): Constraints and hooks.

    Raises:
        MalformedDefinitionError: If the flags or config are invalid.
        DuplicateAliasError: If an alias is repeated.
    """
    if not isinstance(flags_spec, str):
        raise MalformedDefinitionError(
            f"Option specification must be a string, got {type(flags_spec).__name__}"
        )
    if config is None:
        config = OptionConfig()
    elif not isinstance(config, OptionConfig):
        try:
            config = OptionConfig(**dict(config))
        except ValidationError as error:
            raise MalformedDefinitionError(
                f"Invalid configuration for option '{flags_spec}': {error}"
            ) from error

    flags, arguments_spec = _split_flags_spec(flags_spec.strip())
    _validate_flags(flags, flags_spec)

    value_arg = None
    if arguments_spec:
        descriptors = parse_arguments_definition(arguments_spec)
        if len(descriptors) != 1:
            raise MalformedDefinitionError(
                f"Option '{flags_spec}' must declare exactly one value argument"
            )
        value_arg = descriptors[0]

    long_flags = [flag for flag in flags if flag.startswith("--")]
    name = option_name(long_flags[0] if long_flags else flags[0])
    if name in config.conflicts:
        raise MalformedDefinitionError(f"Option '{flags_spec}' cannot conflict with itself")
    if name in config.depends:
        raise MalformedDefinitionError(f"Option '{flags_spec}' cannot depend on itself")

    return OptionDescriptor(
        flags=tuple(flags),
        name=name,
        description=description,
        value_arg=value_arg,
        required=config.required,
        default=config.default,
        conflicts=tuple(config.conflicts),
        depends=tuple(config.depends),
        standalone=config.standalone,
        inherited=config.inherited,
        hidden=config.hidden,
        collect=config.collect,
        action=config.action,
    )
