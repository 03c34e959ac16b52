"""Rich Console factory and theme for themeguard output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

THEMEGUARD_THEME = Theme(
    {
        "tg.ok": "bold green",
        "tg.error": "bold red",
        "tg.warning": "bold yellow",
        "tg.op": "bold cyan",
        "tg.key": "dim",
        "tg.selector": "bold blue",
        "tg.prop": "magenta",
        "tg.var": "green",
        "tg.count": "bold",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=THEMEGUARD_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_property(name: str) -> str:
    """Custom properties render green, literal properties magenta."""
    return "tg.var" if name.startswith("--") else "tg.prop"
