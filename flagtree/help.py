# Flagtree CLI Builder — (c) 2025 rtj.dev LLC — MIT Licensed
"""help.py

Builds and renders help output for a command.

`HelpAssembler` turns a command's read accessors into display rows, one list of
styled `rich.text.Text` cells per row, grouped in sections:

- Header: usage line and version
- Description
- Options: flags, value definition, separator, description, hints
- Commands: names and aliases, argument definition, separator, description
- Environment variables
- Examples

`render_help` lays the rows out with `rich.table.Table` and prints them. The
assembler never touches the console, so its rows can be inspected directly.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pprint import pformat
from typing import TYPE_CHECKING

from rich.console import Console
from rich.padding import Padding
from rich.table import Table
from rich.text import Text

from flagtree.console import console as default_console
from flagtree.parser.argument import parse_arguments_definition
from flagtree.parser.option import OptionDescriptor

if TYPE_CHECKING:
    from flagtree.command import Command

INDENT = 2


def highlight(definition: str) -> Text:
    """Colorize an argument definition such as `<name...:string[]>`."""
    text = Text()
    if not definition:
        return text
    for index, argument in enumerate(parse_arguments_definition(definition)):
        if index:
            text.append(" ")
        opening, closing = ("[", "]") if argument.optional_value else ("<", ">")
        name = f"{argument.name}..." if argument.variadic else argument.name
        text.append(opening, style="bracket")
        text.append(name, style="arg")
        text.append(":", style="bracket")
        text.append(argument.type_name, style="type")
        if argument.list:
            text.append("[]", style="list")
        text.append(closing, style="bracket")
    return text


def _names(names: list[str], style: str) -> Text:
    return Text(", ").join(Text(name, style=style) for name in names)


def _separator() -> Text:
    return Text("-", style="separator")


def _format_default(value: object) -> str:
    if isinstance(value, str):
        return value
    return pformat(value, compact=True)


@dataclass
class HelpSection:
    """A titled group of rows. The header section has no title."""

    title: str | None
    rows: list[list[Text]] = field(default_factory=list)


class HelpAssembler:
    """
    Collects the help rows for a command.

    Example:
        sections = HelpAssembler(command).assemble()
        for section in sections:
            print(section.title, [[cell.plain for cell in row] for row in section.rows])
    """

    def __init__(self, command: Command) -> None:
        self.command = command

    def get_header(self) -> list[list[Text]]:
        command = self.command
        usage = command.get_path()
        if command.get_args_definition():
            usage = f"{usage} {command.get_args_definition()}"
        rows = [[Text("Usage:", style="label"), Text(usage, style="usage")]]
        version = command.get_version()
        if version:
            rows.append([Text("Version:", style="label"), Text(f"v{version}", style="version")])
        return rows

    def get_description(self) -> list[list[Text]]:
        return [[Text(self.command.get_description())]]

    def get_hints(self, option: OptionDescriptor) -> Text:
        hints: list[Text] = []
        if option.required:
            hints.append(Text("required", style="required"))
        if option.default is not None:
            hints.append(
                Text.assemble(
                    ("Default: ", "default"), (_format_default(option.default), "flag")
                )
            )
        if option.conflicts:
            hints.append(
                Text.assemble(
                    ("conflicts: ", "conflicts"),
                    (", ".join(option.conflicts), "error"),
                )
            )
        if option.depends:
            hints.append(
                Text.assemble(("depends: ", "required"), ", ".join(option.depends))
            )
        if not hints:
            return Text()
        return Text.assemble("(", Text(", ").join(hints), ")")

    def get_options(self) -> list[list[Text]]:
        return [
            [
                _names(list(option.flags), "flag"),
                highlight(option.type_definition),
                _separator(),
                Text(option.description.split("\n", 1)[0]),
                self.get_hints(option),
            ]
            for option in self.command.get_options()
        ]

    def get_commands(self) -> list[list[Text]]:
        return [
            [
                _names([command_map.name, *command_map.aliases], "command"),
                highlight(command_map.command.get_args_definition()),
                _separator(),
                Text(command_map.command.get_short_description()),
            ]
            for command_map in self.command.get_command_maps()
        ]

    def get_env_vars(self) -> list[list[Text]]:
        return [
            [
                _names(list(env_var.names), "flag"),
                highlight(env_var.get_type_definition()),
                _separator(),
                Text(env_var.description),
            ]
            for env_var in self.command.get_env_vars()
        ]

    def get_examples(self) -> list[list[Text]]:
        return [
            [
                Text(f"{example.name[:1].upper()}{example.name[1:]}:", style="example"),
                Text(example.description),
            ]
            for example in self.command.get_examples()
        ]

    def assemble(self) -> list[HelpSection]:
        command = self.command
        sections = [HelpSection(None, self.get_header())]
        if command.get_description():
            sections.append(HelpSection("Description", self.get_description()))
        if command.has_options():
            sections.append(HelpSection("Options", self.get_options()))
        if command.has_commands():
            sections.append(HelpSection("Commands", self.get_commands()))
        if command.has_env_vars():
            sections.append(HelpSection("Environment variables", self.get_env_vars()))
        if command.has_examples():
            sections.append(HelpSection("Examples", self.get_examples()))
        return sections


def _build_table(rows: list[list[Text]]) -> Table:
    table = Table(show_header=False, box=None, pad_edge=False, padding=(0, 1))
    width = max((len(row) for row in rows), default=0)
    for column in range(width):
        table.add_column(no_wrap=column == 0)
    for row in rows:
        table.add_row(*row, *(Text() for _ in range(width - len(row))))
    return table


def render_help(command: Command, console: Console | None = None) -> None:
    """Print the help of `command`."""
    console = console or command.console or default_console
    console.print()
    for section in HelpAssembler(command).assemble():
        if section.title:
            console.print()
            console.print(Text(f"{section.title}:", style="label"))
            console.print()
            console.print(Padding(_build_table(section.rows), (0, 0, 0, INDENT * 2)))
        else:
            console.print(Padding(_build_table(section.rows), (0, 0, 0, INDENT)))
    console.print()
