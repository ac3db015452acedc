"""
Flagtree CLI Builder

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .argument import (
    ArgumentDescriptor,
    parse_arguments_definition,
    render_arguments_definition,
)
from .option import OptionConfig, OptionDescriptor, option_name, parse_option
from .parser_types import CommandMap, EnvVariable, Example, ResolutionResult
from .resolver import resolve
from .type_registry import TypeHandler, TypeRegistry, default_registry

__all__ = [
    "ArgumentDescriptor",
    "parse_arguments_definition",
    "render_arguments_definition",
    "OptionConfig",
    "OptionDescriptor",
    "option_name",
    "parse_option",
    "CommandMap",
    "EnvVariable",
    "Example",
    "ResolutionResult",
    "resolve",
    "TypeHandler",
    "TypeRegistry",
    "default_registry",
]
