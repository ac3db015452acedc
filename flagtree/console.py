# Flagtree CLI Builder — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global console instance for Flagtree CLI applications."""
from rich.console import Console

from flagtree.themes import get_theme

console = Console(color_system="truecolor", theme=get_theme())
