# Flagtree CLI Builder — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used by Flagtree.

Errors fall into two families:

- `DefinitionError`: the CLI author built an invalid command tree (bad flag
  spec, bad argument definition, duplicate alias, unknown type). These are
  programming errors and should abort startup.
- `ResolutionError`: the user supplied an argument vector the tree cannot
  resolve (unknown command or option, bad value, conflicting or missing
  options). These are recoverable at the process boundary, which prints the
  message and exits non-zero.

Exception Hierarchy:
- FlagtreeError
    ├── DefinitionError
    │   ├── MalformedDefinitionError
    │   ├── DuplicateAliasError
    │   ├── UnknownTypeError
    │   └── CommandAlreadyExistsError
    └── ResolutionError
        ├── UnknownCommandError
        ├── UnknownOptionError
        ├── InvalidValueError
        │   └── MissingOptionValueError
        ├── ConflictingOptionsError
        ├── MissingRequiredOptionError
        ├── MissingOptionDependencyError
        ├── MissingArgumentError
        └── DuplicateOptionError
"""
from __future__ import annotations


class FlagtreeError(Exception):
    """Base exception for Flagtree."""


class DefinitionError(FlagtreeError):
    """Raised when a command, option or argument definition is invalid."""


class MalformedDefinitionError(DefinitionError):
    """Raised when a flag or argument specification string violates the grammar."""


class DuplicateAliasError(DefinitionError):
    """Raised when an alias is registered twice on the same command."""


class UnknownTypeError(DefinitionError):
    """Raised when a type name does not resolve in any type registry."""

    def __init__(self, type_name: str):
        super().__init__(f"Unknown type: {type_name}")
        self.type_name = type_name


class CommandAlreadyExistsError(DefinitionError):
    """Raised when a sub-command with the same name already exists."""


class ResolutionError(FlagtreeError):
    """Raised when an argument vector cannot be resolved against a command tree."""


class UnknownCommandError(ResolutionError):
    """Raised when a positional token names no command and binds no argument."""

    def __init__(self, token: str):
        super().__init__(f"Unknown command: {token}")
        self.token = token


class UnknownOptionError(ResolutionError):
    """Raised when a flag matches no option visible to the current command."""

    def __init__(self, token: str):
        super().__init__(f"Unknown option: {token}")
        self.token = token


class InvalidValueError(ResolutionError):
    """Raised when a value cannot be coerced to the declared type."""


class MissingOptionValueError(InvalidValueError):
    """Raised when an option that requires a value is given none."""


class ConflictingOptionsError(ResolutionError):
    """Raised when two mutually exclusive options are both supplied."""

    def __init__(self, option: str, other: str):
        super().__init__(f"Option {option} conflicts with option {other}")
        self.option = option
        self.other = other


class MissingRequiredOptionError(ResolutionError):
    """Raised when a required option is absent after scanning."""

    def __init__(self, option: str):
        super().__init__(f"Missing required option: {option}")
        self.option = option


class MissingOptionDependencyError(ResolutionError):
    """Raised when an option is supplied without an option it depends on."""

    def __init__(self, option: str, dependency: str):
        super().__init__(f"Option {option} depends on option {dependency}")
        self.option = option
        self.dependency = dependency


class MissingArgumentError(ResolutionError):
    """Raised when a required positional argument is absent."""

    def __init__(self, name: str):
        super().__init__(f"Missing argument: {name}")
        self.name = name


class DuplicateOptionError(ResolutionError):
    """Raised when a non-collecting option is supplied more than once."""

    def __init__(self, option: str):
        super().__init__(f"Duplicate option: {option}")
        self.option = option
