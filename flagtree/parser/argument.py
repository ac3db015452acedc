# Flagtree CLI Builder — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `ArgumentDescriptor` and the parser for Flagtree's compact argument
definition syntax.

An argument definition is a whitespace-separated list of bracketed descriptors:

    <name:type>        required value
    [name:type]        optional value
    <name...:type>     variadic, consumes every remaining positional token
    <name:type[]>      list, the value is split on ',' into several scalars

The type defaults to `string` when omitted (`<name>`, `<names[]>`). The same
syntax is used for positional arguments (`Command.add_arguments`) and for option
values (`-p, --port <port:number>`), so help rendering and resolution always
agree on structure.

Functions:
- parse_arguments_definition: Parse a definition string into descriptors.
- render_arguments_definition: Render descriptors back to their canonical text.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from flagtree.exceptions import MalformedDefinitionError

DEFAULT_TYPE = "string"

_INNER_PATTERN = re.compile(
    r"^(?P<name>[A-Za-z_][\w-]*)(?P<variadic>\.\.\.)?(?:(?P<list>\[\])|:(?P<type>.*))?$"
)
_TYPE_PATTERN = re.compile(r"^[A-Za-z_][\w-]*$")


@dataclass(frozen=True)
class ArgumentDescriptor:
    """
    Represents one positional argument or option value.

    Attributes:
        name (str): Display name of the value.
        type_name (str): Registered type used to coerce the raw value.
        optional_value (bool): True for `[...]`, False for `<...>`.
        variadic (bool): Consumes all remaining tokens.
        list (bool): The raw value is split on ',' into several values.
    """

    name: str
    type_name: str = DEFAULT_TYPE
    optional_value: bool = False
    variadic: bool = False
    list: bool = False

    @property
    def required(self) -> bool:
        return not self.optional_value

    @property
    def label(self) -> str:
        """Short form used in error messages, e.g. `<port>`."""
        if self.optional_value:
            return f"[{self.name}]"
        return f"<{self.name}>"

    def render(self) -> str:
        """Render the descriptor in canonical definition syntax."""
        opening, closing = ("[", "]") if self.optional_value else ("<", ">")
        name = f"{self.name}..." if self.variadic else self.name
        type_name = f"{self.type_name}[]" if self.list else self.type_name
        return f"{opening}{name}:{type_name}{closing}"

    def __str__(self) -> str:
        return self.render()


def _scan_descriptors(spec: str) -> list[tuple[bool, str]]:
    """Split a definition string into (optional, inner text) pairs."""
    chunks: list[tuple[bool, str]] = []
    i = 0
    length = len(spec)
    while i < length:
        char = spec[i]
        if char.isspace():
            i += 1
            continue
        if char not in "<[":
            raise MalformedDefinitionError(
                f"Unexpected '{char}' at position {i} in argument definition '{spec}'"
            )
        closing = ">" if char == "<" else "]"
        j = i + 1
        while j < length:
            if spec.startswith("[]", j):
                j += 2
                continue
            if spec[j] == closing:
                break
            if spec[j] in "<>[]":
                raise MalformedDefinitionError(
                    f"Unexpected '{spec[j]}' at position {j} in argument definition '{spec}'"
                )
            j += 1
        if j >= length:
            raise MalformedDefinitionError(
                f"Missing '{closing}' in argument definition '{spec}'"
            )
        if j + 1 < length and not spec[j + 1].isspace():
            raise MalformedDefinitionError(
                f"Arguments must be separated by whitespace in '{spec}'"
            )
        chunks.append((char == "[", spec[i + 1 : j].strip()))
        i = j + 1
    return chunks


def _parse_inner(inner: str, optional: bool, spec: str) -> ArgumentDescriptor:
    match = _INNER_PATTERN.match(inner)
    if not match:
        raise MalformedDefinitionError(
            f"Invalid argument '{inner}' in argument definition '{spec}'"
        )
    name = match.group("name")
    variadic = bool(match.group("variadic"))
    type_name = match.group("type")
    is_list = bool(match.group("list"))

    if type_name is None:
        type_name = DEFAULT_TYPE
    else:
        if type_name.endswith("...") and not variadic:
            variadic = True
            type_name = type_name[:-3]
        if type_name.endswith("[]"):
            is_list = True
            type_name = type_name[:-2]
        if not type_name:
            raise MalformedDefinitionError(
                f"Missing type for argument '{name}' in argument definition '{spec}'"
            )
        if not _TYPE_PATTERN.match(type_name):
            raise MalformedDefinitionError(
                f"Invalid type '{type_name}' for argument '{name}' in '{spec}'"
            )

    return ArgumentDescriptor(
        name=name,
        type_name=type_name,
        optional_value=optional,
        variadic=variadic,
        list=is_list,
    )


def parse_arguments_definition(spec: str) -> list[ArgumentDescriptor]:
    """
    Parse an argument definition string.

    Args:
        spec (str): e.g. "<source:string> [targets...:string]".

    Returns:
        list[ArgumentDescriptor]: Descriptors in declared order.

    Raises:
        MalformedDefinitionError: On bracket mismatch, a missing type after ':',
            a variadic argument that is not last, or a required argument
            following an optional one.
    """
    if not isinstance(spec, str):
        raise MalformedDefinitionError(
            f"Argument definition must be a string, got {type(spec).__name__}"
        )
    descriptors = [
        _parse_inner(inner, optional, spec)
        for optional, inner in _scan_descriptors(spec)
    ]

    seen_optional = False
    for index, descriptor in enumerate(descriptors):
        if descriptor.variadic and index != len(descriptors) - 1:
            raise MalformedDefinitionError(
                f"Variadic argument '{descriptor.name}' must be the last argument in '{spec}'"
            )
        if descriptor.optional_value:
            seen_optional = True
        elif seen_optional:
            raise MalformedDefinitionError(
                f"Required argument '{descriptor.name}' cannot follow an optional argument in '{spec}'"
            )
    return descriptors


def render_arguments_definition(descriptors: list[ArgumentDescriptor]) -> str:
    """Render descriptors back into a definition string."""
    return " ".join(descriptor.render() for descriptor in descriptors)
