# Flagtree CLI Builder — (c) 2025 rtj.dev LLC — MIT Licensed
"""command.py

Defines the `Command` class, one node of a Flagtree command tree.

A command holds its own options, positional argument definitions, child
commands, environment variable declarations, usage examples and custom types.
Trees are built once at startup with the fluent builder methods, each of which
mutates the command and returns it:

    cli = (
        Command("deploy", "Deploy the application.", version="1.2.0")
        .add_option("-e, --env <env:string>", "Target environment.", required=True)
        .add_option("--dry-run", "Print actions without running them.")
        .add_arguments("<service:string> [replicas:integer]")
        .set_action(deploy)
    )

Resolution (`parse`) is read-only with respect to the tree. `execute` runs the
action hooks after a successful resolution and `run` / `main` form the process
boundary that turns errors and control signals into exit codes.
"""
from __future__ import annotations

import asyncio
import re
import sys
import weakref
from typing import Any, Awaitable, Callable, Mapping, Sequence

from rich.console import Console
from rich.markup import escape

from flagtree.console import console as default_console
from flagtree.exceptions import (
    CommandAlreadyExistsError,
    DefinitionError,
    DuplicateAliasError,
    MalformedDefinitionError,
    ResolutionError,
    UnknownCommandError,
)
from flagtree.logger import logger
from flagtree.parser.argument import (
    ArgumentDescriptor,
    parse_arguments_definition,
    render_arguments_definition,
)
from flagtree.parser.option import OptionConfig, OptionDescriptor, parse_option
from flagtree.parser.parser_types import (
    CommandMap,
    EnvVariable,
    Example,
    ResolutionResult,
)
from flagtree.parser.resolver import resolve
from flagtree.parser.type_registry import TypeHandler, TypeRegistry, default_registry
from flagtree.signals import CONTINUE, ControlSignal
from flagtree.themes import OneColors
from flagtree.utils import ensure_async, get_program_invocation

Hook = Callable[[ResolutionResult], "ControlSignal | None | Awaitable[ControlSignal | None]"]

_COMMAND_NAME = re.compile(r"^[A-Za-z0-9][\w.:-]*$")
_ENV_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class Command:
    """
    A node in a command tree.

    Attributes:
        name (str): Name used to invoke the command. The root may leave it empty,
            in which case the program invocation is used for display.
        description (str): Help text; the first line is used in command listings.
        version (str | None): Version string; falls back to the parent's version.
        aliases (list[str]): Alternate names answered by the command.
        action (Hook | None): Invoked with the `ResolutionResult` after resolution.
        hidden (bool): Omit the command from its parent's help listing.
        console (Console): Console used for help and error output.
    """

    def __init__(
        self,
        name: str = "",
        description: str = "",
        version: str | None = None,
        aliases: Sequence[str] | None = None,
        action: Hook | None = None,
        hidden: bool = False,
        console: Console | None = None,
    ) -> None:
        self.name: str = name
        self.description: str = description
        self.version: str | None = version
        self.aliases: list[str] = []
        self.action: Hook | None = action
        self.hidden: bool = hidden
        self.console: Console = console or default_console
        self._parent: weakref.ReferenceType[Command] | None = None
        self._options: list[OptionDescriptor] = []
        self._flag_map: dict[str, OptionDescriptor] = {}
        self._arguments: list[ArgumentDescriptor] = []
        self._commands: dict[str, Command] = {}
        self._env_vars: list[EnvVariable] = []
        self._examples: list[Example] = []
        self._types: TypeRegistry = TypeRegistry()
        self._inherited_types: set[str] = set()
        self._default_command: str | None = None
        self._command_factory: Callable[[], Command] | None = None
        if aliases:
            self.add_alias(*aliases)

    @property
    def parent(self) -> Command | None:
        """The parent command, if this command is attached to one."""
        if self._parent is None:
            return None
        return self._parent()

    def iter_ancestors(self):
        """Yield the parent, grandparent, ... up to the root."""
        parent = self.parent
        while parent is not None:
            yield parent
            parent = parent.parent

    # Builder methods

    def add_command(
        self,
        name_and_arguments: str,
        command: Command | str | None = None,
        override: bool = False,
    ) -> Command:
        """
        Attach a child command.

        Args:
            name_and_arguments (str): The child's name, optionally followed by its
                argument definition, e.g. "copy <source:string> <target:string>".
            command (Command | str | None): The child command, a description for a
                new child, or None for a new child built by this command's factory.
            override (bool): Replace an existing child with the same name or alias.

        Raises:
            MalformedDefinitionError: If the name or argument definition is invalid.
            CommandAlreadyExistsError: If the name is taken and `override` is False.
            DuplicateAliasError: If one of the child's aliases is already taken.
        """
        if not isinstance(name_and_arguments, str) or not name_and_arguments.strip():
            raise MalformedDefinitionError("Command name must be a non-empty string")
        parts = name_and_arguments.strip().split(maxsplit=1)
        name = parts[0]
        arguments_spec = parts[1] if len(parts) > 1 else ""
        if not _COMMAND_NAME.match(name):
            raise MalformedDefinitionError(f"Invalid command name: '{name}'")

        description = None
        if isinstance(command, str):
            description = command
            command = None
        if command is None:
            command = self._command_factory() if self._command_factory else Command()
        elif not isinstance(command, Command):
            raise MalformedDefinitionError(
                f"Sub-command '{name}' must be a Command, got {type(command).__name__}"
            )

        existing = self.find_command(name)
        if existing is not None and not override:
            raise CommandAlreadyExistsError(f"Command '{name}' already exists")
        for alias in command.aliases:
            clash = self.find_command(alias)
            if clash is not None and clash is not existing:
                raise DuplicateAliasError(
                    f"Name '{alias}' is already used by a sub-command of '{self.get_name()}'"
                )
        if arguments_spec:
            command.add_arguments(arguments_spec)

        if existing is not None:
            logger.debug("Overriding command '%s' on '%s'", name, self.get_name())
            del self._commands[existing.name]
            existing._parent = None
        command.name = name
        if description is not None:
            command.description = description
        command._parent = weakref.ref(self)
        self._commands[name] = command
        return self

    def add_option(
        self,
        flags_spec: str,
        description: str = "",
        config: OptionConfig | Mapping[str, Any] | None = None,
        **config_kwargs: Any,
    ) -> Command:
        """
        Declare an option.

        Args:
            flags_spec (str): e.g. "-p, --port <port:number>".
            description (str): Help text.
            config (OptionConfig | Mapping | None): Option configuration.
            **config_kwargs: Configuration keys, merged over `config`.

        Raises:
            MalformedDefinitionError: If the flags or config are invalid.
            DuplicateAliasError: If an alias or the canonical name is already used.
        """
        if config_kwargs:
            if isinstance(config, OptionConfig):
                config = config.model_dump()
            config = {**dict(config or {}), **config_kwargs}
        option = parse_option(flags_spec, description, config)

        for flag in option.flags:
            if flag in self._flag_map:
                existing = self._flag_map[flag]
                raise DuplicateAliasError(
                    f"Flag '{flag}' is already used by option '{existing.name}'"
                )
        if any(declared.name == option.name for declared in self._options):
            raise DuplicateAliasError(f"Option '{option.name}' is already defined")

        self._options.append(option)
        for flag in option.flags:
            self._flag_map[flag] = option
        return self

    def add_arguments(self, spec: str) -> Command:
        """
        Append positional argument definitions.

        Raises:
            MalformedDefinitionError: If the combined definition is invalid.
        """
        combined = " ".join(
            filter(None, [render_arguments_definition(self._arguments), spec])
        )
        self._arguments = parse_arguments_definition(combined)
        return self

    def add_alias(self, *aliases: str) -> Command:
        """
        Add alternate names for this command.

        Raises:
            MalformedDefinitionError: If an alias is not a valid command name.
            DuplicateAliasError: If an alias is already used here or by a sibling.
        """
        for alias in aliases:
            if not isinstance(alias, str) or not _COMMAND_NAME.match(alias):
                raise MalformedDefinitionError(f"Invalid command alias: '{alias}'")
            if alias == self.name or alias in self.aliases:
                raise DuplicateAliasError(
                    f"Alias '{alias}' is already used by command '{self.get_name()}'"
                )
            parent = self.parent
            if parent is not None:
                parent._ensure_name_available(alias)
            self.aliases.append(alias)
        return self

    def set_description(self, description: str) -> Command:
        self.description = description
        return self

    def set_version(self, version: str) -> Command:
        self.version = version
        return self

    def set_action(self, action: Hook) -> Command:
        if not callable(action):
            raise MalformedDefinitionError(
                f"Action for command '{self.get_name()}' must be callable"
            )
        self.action = action
        return self

    def add_env(self, spec: str, description: str = "") -> Command:
        """
        Declare an environment variable for help output.

        Args:
            spec (str): Names followed by an optional value definition,
                e.g. "APP_HOME, HOME <path:string>".
            description (str): Help text.
        """
        positions = [index for index in (spec.find("<"), spec.find("[")) if index != -1]
        names_part, value_part = (spec, "")
        if positions:
            names_part, value_part = spec[: min(positions)], spec[min(positions) :]
        names = [name for name in re.split(r"[,\s]+", names_part) if name]
        if not names:
            raise MalformedDefinitionError(
                f"No environment variable name in '{spec}'"
            )
        for name in names:
            if not _ENV_NAME.match(name):
                raise MalformedDefinitionError(
                    f"Invalid environment variable name '{name}' in '{spec}'"
                )
        type_name, value_name = "string", "value"
        if value_part:
            descriptors = parse_arguments_definition(value_part)
            if len(descriptors) != 1:
                raise MalformedDefinitionError(
                    f"Environment variable '{spec}' must declare exactly one value"
                )
            type_name, value_name = descriptors[0].type_name, descriptors[0].name
        self._env_vars.append(
            EnvVariable(
                names=tuple(names),
                type_name=type_name,
                description=description,
                value_name=value_name,
            )
        )
        return self

    def add_example(self, name: str, description: str) -> Command:
        self._examples.append(Example(name=name, description=description))
        return self

    def add_type(
        self,
        name: str,
        handler: TypeHandler | Callable[[str], Any],
        inherited: bool = True,
    ) -> Command:
        """
        Register a custom type on this command.

        Args:
            name (str): Type name referenced from argument definitions.
            handler (TypeHandler | Callable): Handler or parse callable.
            inherited (bool): Make the type visible to descendant commands.
        """
        self._types.register(name, handler)
        if inherited:
            self._inherited_types.add(name)
        else:
            self._inherited_types.discard(name)
        return self

    def set_default(self, name: str) -> Command:
        """Select the child command used when no sub-command is given."""
        self._default_command = name
        return self

    def set_command_factory(self, factory: Callable[[], Command] | None) -> Command:
        """Set the callable that builds children for `add_command(name)`."""
        self._command_factory = factory
        return self

    # Lookup

    def _ensure_name_available(self, name: str) -> None:
        if self.find_command(name) is not None:
            raise DuplicateAliasError(
                f"Name '{name}' is already used by a sub-command of '{self.get_name()}'"
            )

    def find_command(self, name: str) -> Command | None:
        """Return the child with this name or alias, or None."""
        command = self._commands.get(name)
        if command is not None:
            return command
        return next(
            (child for child in self._commands.values() if name in child.aliases),
            None,
        )

    def get_command(self, name: str) -> Command:
        """
        Return the child with this name or alias, falling back to the default
        sub-command.

        Raises:
            UnknownCommandError: If nothing matches.
        """
        command = self.find_command(name)
        if command is not None:
            return command
        if self._default_command:
            default = self.find_command(self._default_command)
            if default is not None:
                return default
        raise UnknownCommandError(name)

    def get_default_command_name(self) -> str | None:
        return self._default_command

    def find_option(self, flag: str) -> OptionDescriptor | None:
        """Return the option for a flag: own options first, then inherited ones."""
        option = self._flag_map.get(flag)
        if option is not None:
            return option
        for ancestor in self.iter_ancestors():
            option = ancestor._flag_map.get(flag)
            if option is not None and option.inherited:
                return option
        return None

    def find_option_by_name(self, name: str) -> OptionDescriptor | None:
        """Return a visible option by canonical name."""
        return next(
            (option for option in self.get_visible_options() if option.name == name),
            None,
        )

    def check_option_references(self) -> None:
        """
        Check that `conflicts` and `depends` name options visible on this command.

        References may point forward, so this runs once the tree is built, when
        resolution reaches the command.

        Raises:
            MalformedDefinitionError: If a reference names an undeclared option.
        """
        for option in self._options:
            for reference in option.conflicts + option.depends:
                if self.find_option_by_name(reference) is None:
                    raise MalformedDefinitionError(
                        f"Option '{option.display_flag}' references undeclared option '{reference}'"
                    )

    def get_visible_options(self) -> list[OptionDescriptor]:
        """Own options followed by inherited ancestor options they do not shadow."""
        visible = list(self._options)
        names = {option.name for option in visible}
        flags = set(self._flag_map)
        for ancestor in self.iter_ancestors():
            for option in ancestor._options:
                if not option.inherited or option.name in names:
                    continue
                if any(flag in flags for flag in option.flags):
                    continue
                visible.append(option)
                names.add(option.name)
                flags.update(option.flags)
        return visible

    def get_type(self, name: str) -> TypeHandler:
        """
        Resolve a type name: own types, inherited ancestor types, then built-ins.

        Raises:
            UnknownTypeError: If the name is not registered anywhere.
        """
        handler = self._types.get(name)
        if handler is not None:
            return handler
        for ancestor in self.iter_ancestors():
            if name in ancestor._inherited_types:
                handler = ancestor._types.get(name)
                if handler is not None:
                    return handler
        return default_registry.resolve(name)

    # Read accessors used by help

    def get_name(self) -> str:
        return self.name or get_program_invocation()

    def get_path(self) -> str:
        """Names from the root down to this command, e.g. "app remote add"."""
        names = [self.get_name()]
        names.extend(ancestor.get_name() for ancestor in self.iter_ancestors())
        return " ".join(reversed(names))

    def get_version(self) -> str | None:
        if self.version is not None:
            return self.version
        parent = self.parent
        return parent.get_version() if parent else None

    def get_description(self) -> str:
        return self.description

    def get_short_description(self) -> str:
        return self.description.split("\n", 1)[0]

    def get_arguments(self) -> list[ArgumentDescriptor]:
        return list(self._arguments)

    def get_args_definition(self) -> str:
        return render_arguments_definition(self._arguments)

    def get_usage(self) -> str:
        parts = [self.get_path()]
        if self.get_visible_options():
            parts.append("[options]")
        if self._commands:
            parts.append("[command]")
        if self._arguments:
            parts.append(self.get_args_definition())
        return " ".join(parts)

    def get_options(self, hidden: bool = False) -> list[OptionDescriptor]:
        return [
            option for option in self.get_visible_options() if hidden or not option.hidden
        ]

    def has_options(self, hidden: bool = False) -> bool:
        return bool(self.get_options(hidden))

    def get_commands(self, hidden: bool = False) -> list[Command]:
        return [
            command for command in self._commands.values() if hidden or not command.hidden
        ]

    def get_command_maps(self, hidden: bool = False) -> list[CommandMap]:
        return [
            CommandMap(name=name, aliases=tuple(command.aliases), command=command)
            for name, command in self._commands.items()
            if hidden or not command.hidden
        ]

    def has_commands(self, hidden: bool = False) -> bool:
        return bool(self.get_commands(hidden))

    def get_env_vars(self) -> list[EnvVariable]:
        return list(self._env_vars)

    def has_env_vars(self) -> bool:
        return bool(self._env_vars)

    def get_examples(self) -> list[Example]:
        return list(self._examples)

    def has_examples(self) -> bool:
        return bool(self._examples)

    # Resolution and execution

    def parse(self, argv: Sequence[str]) -> ResolutionResult:
        """Resolve an argument vector against this command. Never runs hooks."""
        return resolve(argv, self)

    def _find_supplied_option(
        self, command: Command, name: str
    ) -> OptionDescriptor | None:
        option = command.find_option_by_name(name)
        if option is not None:
            return option
        for ancestor in command.iter_ancestors():
            option = next((o for o in ancestor._options if o.name == name), None)
            if option is not None:
                return option
        return None

    def _collect_hooks(self, result: ResolutionResult) -> list[Hook]:
        if result.standalone is not None:
            return [result.standalone.action] if result.standalone.action else []
        hooks: list[Hook] = []
        for name in result.supplied:
            option = self._find_supplied_option(result.command, name)
            if option is not None and option.action is not None:
                hooks.append(option.action)
        if result.command.action is not None:
            hooks.append(result.command.action)
        return hooks

    async def dispatch(self, result: ResolutionResult) -> ControlSignal:
        """
        Run the hooks for a resolution result, one at a time.

        A standalone option's hook runs alone. Otherwise the hooks of the supplied
        options run in the order given, followed by the command's action. The first
        terminate signal stops the chain.
        """
        for hook in self._collect_hooks(result):
            signal = await ensure_async(hook)(result)
            if signal is None:
                continue
            if not isinstance(signal, ControlSignal):
                raise TypeError(
                    f"Hook {getattr(hook, '__name__', hook)!r} returned "
                    f"{type(signal).__name__}, expected ControlSignal or None"
                )
            if signal.is_terminal:
                logger.debug(
                    "Hook %s terminated with exit code %d",
                    getattr(hook, "__name__", hook),
                    signal.exit_code,
                )
                return signal
        return CONTINUE

    async def execute(self, argv: Sequence[str]) -> ControlSignal:
        """Resolve `argv` and run the resulting hooks."""
        result = self.parse(argv)
        logger.debug("Resolved %s", result)
        return await self.dispatch(result)

    async def run(self, argv: Sequence[str] | None = None) -> int:
        """
        Process boundary: execute and map the outcome to an exit code.

        Resolution errors are printed and mapped to exit code 1. Definition errors
        are fatal and re-raised.
        """
        if argv is None:
            argv = sys.argv[1:]
        try:
            signal = await self.execute(argv)
        except ResolutionError as error:
            logger.debug("Resolution failed: %s", error)
            self.console.print(
                f"[{OneColors.DARK_RED}]❌ Error: {escape(str(error))}[/]", highlight=False
            )
            if self.find_option("--help") is not None:
                self.console.print(
                    f"Run '{self.get_path()} --help' to see available options.",
                    style="dim",
                    highlight=False,
                )
            return 1
        except DefinitionError as error:
            logger.error("Invalid command definition: %s", error)
            raise
        return signal.exit_code if signal.is_terminal else 0

    def main(self, argv: Sequence[str] | None = None) -> None:
        """Run the command and exit the process with the resulting code."""
        sys.exit(asyncio.run(self.run(argv)))

    def __str__(self) -> str:
        return (
            f"Command(name='{self.get_name()}', options={len(self._options)}, "
            f"arguments={len(self._arguments)}, commands={len(self._commands)})"
        )

    def __repr__(self) -> str:
        return str(self)
