# Flagtree CLI Builder — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the `TypeHandler` and `TypeRegistry` used to coerce raw command-line
strings into typed values.

Type names referenced from argument definitions (`<port:number>`) are looked up
in a registry at resolution time. Registration is explicit and keyed by name;
a later registration for the same name replaces the earlier one, so user types
can override the built-ins without special-casing.

Built-in types (in `default_registry`):
- string: identity
- boolean: 'true' / 'false' / '1' / '0'
- number: int for integer literals, float otherwise
- integer: base-10 int
- date: any date string understood by python-dateutil

Example:
    registry = TypeRegistry()
    registry.register("port", TypeHandler("port", int, str.isdigit))
    registry.coerce("port", "8080", "--port")  # 8080
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator

from flagtree.exceptions import InvalidValueError, UnknownTypeError
from flagtree.logger import logger
from flagtree.parser.utils import (
    coerce_bool,
    coerce_date,
    coerce_integer,
    coerce_number,
    coerce_string,
    is_bool,
    is_date,
    is_integer,
    is_number,
)


@dataclass(frozen=True)
class TypeHandler:
    """
    A named coercion function with an optional validity predicate.

    Attributes:
        name (str): Type name used in argument definitions.
        parse (Callable[[str], Any]): Converts a raw string, raising ValueError on failure.
        validate (Callable[[str], bool] | None): Returns True if the raw string looks
            like a value of this type. Used to decide whether an optional value
            consumes the next token.
    """

    name: str
    parse: Callable[[str], Any]
    validate: Callable[[str], bool] | None = None

    def accepts(self, raw: str) -> bool:
        """Return True if `raw` passes the validity predicate (or there is none)."""
        if self.validate is None:
            return True
        return bool(self.validate(raw))


class TypeRegistry:
    """
    Maps type names to `TypeHandler`s.

    Methods:
        register(name, handler): Add or replace a handler.
        resolve(name): Return the handler or raise UnknownTypeError.
        coerce(name, raw, label): Convert a raw value, raising InvalidValueError.
    """

    def __init__(self, handlers: dict[str, TypeHandler] | None = None) -> None:
        self._handlers: dict[str, TypeHandler] = dict(handlers or {})

    def register(
        self, name: str, handler: TypeHandler | Callable[[str], Any]
    ) -> TypeRegistry:
        """
        Register a handler under `name`, replacing any existing one.

        Args:
            name (str): The type name.
            handler (TypeHandler | Callable): A handler, or a plain parse callable.
        """
        if not name or not isinstance(name, str):
            raise ValueError("Type name must be a non-empty string")
        if not isinstance(handler, TypeHandler):
            if not callable(handler):
                raise TypeError(f"Type handler for '{name}' must be callable")
            handler = TypeHandler(name=name, parse=handler)
        if name in self._handlers:
            logger.debug("Overriding type handler '%s'", name)
        self._handlers[name] = handler
        return self

    def get(self, name: str) -> TypeHandler | None:
        return self._handlers.get(name)

    def resolve(self, name: str) -> TypeHandler:
        try:
            return self._handlers[name]
        except KeyError:
            raise UnknownTypeError(name) from None

    def coerce(self, name: str, raw: str, label: str) -> Any:
        """Coerce `raw` with the handler registered as `name`."""
        return coerce_with(self.resolve(name), raw, label)

    def names(self) -> list[str]:
        return list(self._handlers)

    def copy(self) -> TypeRegistry:
        return TypeRegistry(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __str__(self) -> str:
        return f"TypeRegistry(types={', '.join(self._handlers)})"


def coerce_with(handler: TypeHandler, raw: str, label: str) -> Any:
    """
    Run a handler against a raw value.

    Args:
        handler (TypeHandler): The handler to apply.
        raw (str): The raw command-line value.
        label (str): What the value belongs to, e.g. "option --port" or "argument <port>".

    Raises:
        InvalidValueError: If validation or parsing fails.
    """
    if not handler.accepts(raw):
        raise InvalidValueError(
            f"Invalid value for {label}: expected {handler.name}, got '{raw}'"
        )
    try:
        return handler.parse(raw)
    except (ValueError, TypeError) as error:
        raise InvalidValueError(
            f"Invalid value for {label}: expected {handler.name}, got '{raw}' ({error})"
        ) from error


def _builtin_handlers() -> dict[str, TypeHandler]:
    return {
        "string": TypeHandler("string", coerce_string),
        "boolean": TypeHandler("boolean", coerce_bool, is_bool),
        "number": TypeHandler("number", coerce_number, is_number),
        "integer": TypeHandler("integer", coerce_integer, is_integer),
        "date": TypeHandler("date", coerce_date, is_date),
    }


default_registry = TypeRegistry(_builtin_handlers())
