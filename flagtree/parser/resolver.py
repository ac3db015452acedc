# Flagtree CLI Builder — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Resolves an argument vector against a command tree.

`resolve(tokens, root)` walks the tokens once, left to right, and returns a
`ResolutionResult` or raises a `ResolutionError`. It never runs hooks and never
mutates the tree, so resolving the same vector twice yields equal results.

Scanning rules:
- `--` ends option scanning; every later token is positional and no further
  command descent happens.
- `--name` / `--name=value` address long flags, `-x` / `-x=value` short flags.
  Short flags may be clustered (`-abc`): boolean letters are set to True, and
  the first letter that takes a value consumes the rest of the cluster as its
  value (or the next token when it is the last letter). A letter with an
  optional value only does so when its type accepts the rest of the cluster,
  so `-hV` sets both `[arg:boolean]` flags.
- A token that looks like a negative number is positional unless a matching
  flag is declared.
- A positional token naming a child command descends into it, as long as no
  positional token has been collected for the current command yet.
- A standalone option (help, version) short-circuits everything else.

After scanning, the default sub-command is applied, positionals are bound to
the selected command's argument definitions, and option constraints are
validated (required, depends) before defaults are filled in.
"""
from __future__ import annotations

from copy import deepcopy
from typing import TYPE_CHECKING, Any, Sequence

from flagtree.exceptions import (
    ConflictingOptionsError,
    DuplicateOptionError,
    MissingArgumentError,
    MissingOptionDependencyError,
    MissingOptionValueError,
    MissingRequiredOptionError,
    UnknownCommandError,
    UnknownOptionError,
)
from flagtree.logger import logger
from flagtree.parser.argument import ArgumentDescriptor
from flagtree.parser.option import OptionDescriptor
from flagtree.parser.parser_types import ResolutionResult
from flagtree.parser.type_registry import TypeHandler, coerce_with
from flagtree.parser.utils import looks_like_number

if TYPE_CHECKING:
    from flagtree.command import Command

END_OF_OPTIONS = "--"


class Resolver:
    """
    Holds the state of a single resolution pass.

    A new instance is created per call to `resolve`; none of its state outlives
    the call.
    """

    def __init__(self, root: Command) -> None:
        root.check_option_references()
        self.command: Command = root
        self.options: dict[str, Any] = {}
        self.seen: dict[str, OptionDescriptor] = {}
        self.supplied: list[str] = []
        self.positionals: list[str] = []
        self.literal = False
        self.standalone: OptionDescriptor | None = None

    def is_flag(self, token: str) -> bool:
        if token == END_OF_OPTIONS or not token.startswith("-") or len(token) == 1:
            return False
        if looks_like_number(token):
            return self.command.find_option(token) is not None
        return True

    def resolve(self, tokens: Sequence[str]) -> ResolutionResult:
        tokens = list(tokens)
        index = 0
        while index < len(tokens):
            token = tokens[index]
            if self.literal:
                self.positionals.append(token)
                index += 1
            elif token == END_OF_OPTIONS:
                self.literal = True
                index += 1
            elif self.is_flag(token):
                index = self.consume_flag(tokens, index)
                if self.standalone is not None:
                    return self.short_circuit()
            else:
                child = None if self.positionals else self.command.find_command(token)
                if child is not None:
                    self.descend(child)
                else:
                    self.positionals.append(token)
                index += 1

        self.apply_default_command()
        args = self.bind_arguments()
        self.validate_options()
        return ResolutionResult(
            command=self.command,
            options=self.options,
            args=args,
            supplied=self.supplied,
        )

    def descend(self, child: Command) -> None:
        logger.debug("Descending from '%s' into '%s'", self.command.get_name(), child.name)
        child.check_option_references()
        self.command = child

    def short_circuit(self) -> ResolutionResult:
        logger.debug(
            "Standalone option %s short-circuits resolution of '%s'",
            self.standalone.display_flag,
            self.command.get_name(),
        )
        return ResolutionResult(
            command=self.command,
            options=self.options,
            args=(),
            standalone=self.standalone,
            supplied=self.supplied,
        )

    def find_option(self, flag: str) -> OptionDescriptor:
        option = self.command.find_option(flag)
        if option is None:
            raise UnknownOptionError(flag)
        return option

    def consume_flag(self, tokens: list[str], index: int) -> int:
        """Record the flag at `index` and return the index of the next unread token."""
        token = tokens[index]
        if token.startswith("--"):
            flag, sep, inline = token.partition("=")
            option = self.find_option(flag)
            value, index = self.take_value(option, flag, inline if sep else None, tokens, index + 1)
            self.record(option, value)
            return index

        letters, sep, inline = token[1:].partition("=")
        if not letters:
            raise UnknownOptionError(token)
        for position, letter in enumerate(letters):
            flag = f"-{letter}"
            option = self.find_option(flag)
            rest = letters[position + 1 :]
            if not rest:
                value, next_index = self.take_value(
                    option, flag, inline if sep else None, tokens, index + 1
                )
                self.record(option, value)
                return next_index
            if self.is_cluster_switch(option, rest):
                self.record(option, True)
                if self.standalone is not None:
                    return index + 1
                continue
            attached = f"{rest}={inline}" if sep else rest
            value, next_index = self.take_value(option, flag, attached, tokens, index + 1)
            self.record(option, value)
            return next_index
        return index + 1

    def is_cluster_switch(self, option: OptionDescriptor, rest: str) -> bool:
        """True if a clustered letter is set to True instead of taking `rest` as its value."""
        argument = option.value_arg
        if argument is None:
            return True
        if argument.required or argument.variadic:
            return False
        return not self.command.get_type(argument.type_name).accepts(rest)

    def take_value(
        self,
        option: OptionDescriptor,
        flag: str,
        inline: str | None,
        tokens: list[str],
        index: int,
    ) -> tuple[Any, int]:
        """Return the option's value and the index of the next unread token."""
        label = f"option {flag}"
        argument = option.value_arg
        if argument is None:
            if inline is None:
                return True, index
            return coerce_with(self.command.get_type("boolean"), inline, label), index

        handler = self.command.get_type(argument.type_name)
        if inline is not None:
            if argument.variadic:
                raw_values = [inline]
                while index < len(tokens) and self.is_value_token(tokens[index]):
                    raw_values.append(tokens[index])
                    index += 1
                return self.convert_many(argument, handler, raw_values, label), index
            return self.convert(argument, handler, inline, label), index

        if argument.variadic:
            raw_values = []
            while index < len(tokens) and self.is_value_token(tokens[index]):
                raw_values.append(tokens[index])
                index += 1
            if raw_values:
                return self.convert_many(argument, handler, raw_values, label), index
        elif index < len(tokens) and self.is_value_token(tokens[index]):
            raw = tokens[index]
            if argument.required or handler.accepts(raw):
                return self.convert(argument, handler, raw, label), index + 1

        if argument.optional_value:
            return True, index
        raise MissingOptionValueError(
            f"Missing value for option {flag}: expected {argument.render()}"
        )

    def is_value_token(self, token: str) -> bool:
        return token != END_OF_OPTIONS and not self.is_flag(token)

    @staticmethod
    def convert(
        argument: ArgumentDescriptor, handler: TypeHandler, raw: str, label: str
    ) -> Any:
        if argument.list:
            return [coerce_with(handler, part, label) for part in raw.split(",")]
        return coerce_with(handler, raw, label)

    def convert_many(
        self,
        argument: ArgumentDescriptor,
        handler: TypeHandler,
        raw_values: list[str],
        label: str,
    ) -> list[Any]:
        values: list[Any] = []
        for raw in raw_values:
            value = self.convert(argument, handler, raw, label)
            if argument.list:
                values.extend(value)
            else:
                values.append(value)
        return values

    def record(self, option: OptionDescriptor, value: Any) -> None:
        if option.standalone:
            self.options[option.name] = value
            self.supplied.append(option.name)
            self.standalone = option
            return

        previous = self.seen.get(option.name)
        if previous is not None:
            if not (option.collect and previous.collect):
                raise DuplicateOptionError(option.display_flag)
        else:
            self.check_conflicts(option)
            self.seen[option.name] = option
            if option.name not in self.supplied:
                self.supplied.append(option.name)
            if option.collect:
                self.options[option.name] = []

        if option.collect:
            collected = self.options[option.name]
            if isinstance(value, list) and option.value_arg is not None and (
                option.value_arg.variadic or option.value_arg.list
            ):
                collected.extend(value)
            else:
                collected.append(value)
        else:
            self.options[option.name] = value

    def check_conflicts(self, option: OptionDescriptor) -> None:
        for name, other in self.seen.items():
            if name in option.conflicts or option.name in other.conflicts:
                raise ConflictingOptionsError(option.display_flag, other.display_flag)

    def apply_default_command(self) -> None:
        while not self.positionals and not self.literal and self.command.action is None:
            default = self.command.get_default_command_name()
            if not default:
                return
            child = self.command.find_command(default)
            if child is None:
                raise UnknownCommandError(default)
            logger.debug("Using default command '%s'", default)
            self.descend(child)

    def bind_arguments(self) -> tuple[Any, ...]:
        descriptors = self.command.get_arguments()
        handlers = [self.command.get_type(d.type_name) for d in descriptors]
        tokens = self.positionals
        args: list[Any] = []
        index = 0
        for descriptor, handler in zip(descriptors, handlers):
            label = f"argument {descriptor.label}"
            if descriptor.variadic:
                rest = tokens[index:]
                if not rest and descriptor.required:
                    raise MissingArgumentError(descriptor.name)
                if rest:
                    args.append(self.convert_many(descriptor, handler, rest, label))
                index = len(tokens)
                break
            if index >= len(tokens):
                if descriptor.required:
                    raise MissingArgumentError(descriptor.name)
                break
            args.append(self.convert(descriptor, handler, tokens[index], label))
            index += 1

        if index < len(tokens):
            leftover = tokens[index]
            if self.is_flag(leftover):
                raise UnknownOptionError(leftover)
            raise UnknownCommandError(leftover)
        return tuple(args)

    def validate_options(self) -> None:
        visible = self.command.get_visible_options()
        for option in visible:
            if option.value_arg is not None:
                self.command.get_type(option.value_arg.type_name)
            if option.name in self.seen:
                for dependency in option.depends:
                    if dependency not in self.seen:
                        raise MissingOptionDependencyError(
                            option.display_flag, self.display_name(visible, dependency)
                        )
                continue
            if option.name in self.options:
                continue
            if option.required:
                raise MissingRequiredOptionError(option.display_flag)
            if option.default is not None:
                self.options[option.name] = deepcopy(option.default)

    @staticmethod
    def display_name(options: list[OptionDescriptor], name: str) -> str:
        option = next((option for option in options if option.name == name), None)
        if option is not None:
            return option.display_flag
        return f"--{name.replace('_', '-')}"


def resolve(tokens: Sequence[str], root: Command) -> ResolutionResult:
    """
    Resolve an argument vector against a command tree.

    Args:
        tokens (Sequence[str]): The argument vector, without the program name.
        root (Command): The command resolution starts from.

    Returns:
        ResolutionResult: The selected command, its options and positional values.

    Raises:
        ResolutionError: If the vector cannot be resolved.
        UnknownTypeError: If a definition references an unregistered type.
    """
    return Resolver(root).resolve(tokens)
