"""
Flagtree CLI Builder

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

import logging

from .command import Command
from .defaults import Capability, default_command, install_defaults
from .help import HelpAssembler, render_help
from .parser import OptionConfig, ResolutionResult, TypeHandler, TypeRegistry
from .signals import CONTINUE, ControlSignal, SignalKind

logger = logging.getLogger("flagtree")


__all__ = [
    "Command",
    "Capability",
    "default_command",
    "install_defaults",
    "HelpAssembler",
    "render_help",
    "OptionConfig",
    "ResolutionResult",
    "TypeHandler",
    "TypeRegistry",
    "CONTINUE",
    "ControlSignal",
    "SignalKind",
]
