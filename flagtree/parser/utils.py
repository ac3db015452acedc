# Flagtree CLI Builder — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Contains the value coercion helpers behind Flagtree's built-in types.

Each `coerce_*` function converts a raw command-line string into a Python value
and raises `ValueError` when it cannot. Each `is_*` function is the matching
validity predicate, used to decide whether an optional option value may consume
the next token.

Functions:
- coerce_string / coerce_bool / coerce_number / coerce_integer / coerce_date
- is_bool / is_number / is_integer / is_date
- looks_like_number: True for negative-number tokens such as "-5" or "-1.5".
"""
import math
import re
from datetime import datetime
from typing import Any

from dateutil import parser as date_parser

TRUE_VALUES = frozenset({"true", "1"})
FALSE_VALUES = frozenset({"false", "0"})

_NUMBER_PATTERN = re.compile(r"^-?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?$", re.ASCII)
_INTEGER_PATTERN = re.compile(r"^-?\d+$", re.ASCII)


def coerce_string(value: str) -> str:
    return value


def coerce_bool(value: Any) -> bool:
    """
    Convert a string to a boolean.

    Accepts 'true' / 'false' and '1' / '0', case-insensitively.

    Raises:
        ValueError: For any other input.
    """
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise ValueError(f"'{value}' is not a boolean (expected true or false)")


def is_bool(value: str) -> bool:
    return value.strip().lower() in TRUE_VALUES | FALSE_VALUES


def coerce_number(value: str) -> int | float:
    """
    Convert a string to an int when it is an integer literal, else to a float.

    Only plain decimal literals are accepted: no underscores, no non-ASCII
    digits, no `inf` or `nan`.

    Raises:
        ValueError: If the value is not numeric or not finite.
    """
    text = value.strip()
    if _INTEGER_PATTERN.match(text):
        return int(text)
    if not _NUMBER_PATTERN.match(text):
        raise ValueError(f"'{value}' is not a number")
    number = float(text)
    if not math.isfinite(number):
        raise ValueError(f"'{value}' is not a finite number")
    return number


def is_number(value: str) -> bool:
    try:
        coerce_number(value)
    except ValueError:
        return False
    return True


def coerce_integer(value: str) -> int:
    text = value.strip()
    if not _INTEGER_PATTERN.match(text):
        raise ValueError(f"'{value}' is not an integer")
    return int(text)


def is_integer(value: str) -> bool:
    try:
        coerce_integer(value)
    except ValueError:
        return False
    return True


def coerce_date(value: str) -> datetime:
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError) as error:
        raise ValueError(f"'{value}' could not be parsed as a date") from error


def is_date(value: str) -> bool:
    try:
        coerce_date(value)
    except ValueError:
        return False
    return True


def looks_like_number(token: str) -> bool:
    """Return True if the token is a (possibly negative) numeric literal."""
    return bool(_NUMBER_PATTERN.match(token))
