# Flagtree CLI Builder — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Color constants and the Rich theme used by Flagtree help output.

`OneColors` holds hex values (with `_b` bold variants) usable directly in Rich
markup, e.g. `f"[{OneColors.BLUE}]--flag[/]"`. `get_theme()` returns a Rich
`Theme` that maps the semantic help styles (flag, type, hint, ...) onto them.
"""
from rich.style import Style
from rich.theme import Theme


class ColorsMeta(type):
    """Resolves `NAME_b` attributes to the bold variant of `NAME`."""

    def __getattr__(cls, name: str) -> str:
        if name.endswith("_b"):
            base = name[:-2]
            value = cls.__dict__.get(base)
            if isinstance(value, str):
                return f"bold {value}"
        raise AttributeError(f"'{cls.__name__}' has no color named '{name}'")


class OneColors(metaclass=ColorsMeta):
    BLACK = "#282C34"
    GUTTER_GREY = "#4B5263"
    COMMENT_GREY = "#5C6370"
    WHITE = "#ABB2BF"
    DARK_RED = "#BE5046"
    LIGHT_RED = "#E06C75"
    DARK_YELLOW = "#D19A66"
    LIGHT_YELLOW = "#E5C07B"
    GREEN = "#98C379"
    CYAN = "#56B6C2"
    BLUE = "#61AFEF"
    MAGENTA = "#C678DD"


def get_theme() -> Theme:
    """Return the Rich theme for help rendering."""
    return Theme(
        {
            "flag": Style(color=OneColors.BLUE),
            "command": Style(color=OneColors.BLUE),
            "usage": Style(color=OneColors.MAGENTA),
            "version": Style(color=OneColors.LIGHT_YELLOW),
            "bracket": Style(color=OneColors.LIGHT_YELLOW),
            "arg": Style(color=OneColors.MAGENTA),
            "type": Style(color=OneColors.LIGHT_RED),
            "list": Style(color=OneColors.GREEN),
            "separator": Style(color=OneColors.LIGHT_RED, bold=True),
            "required": Style(color=OneColors.LIGHT_YELLOW),
            "default": Style(color=OneColors.BLUE, bold=True),
            "conflicts": Style(color=OneColors.LIGHT_RED, bold=True),
            "label": Style(bold=True),
            "example": Style(dim=True, bold=True),
            "error": Style(color=OneColors.DARK_RED),
        }
    )
