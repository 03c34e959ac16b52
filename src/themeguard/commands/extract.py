"""Command: list the rules and declarations of compiled CSS."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from themeguard.commands._base import ThemeguardCommand, read_source

if TYPE_CHECKING:
    from themeguard.commands._context import AppContext


@click.command(
    cls=ThemeguardCommand,
    examples="""\
  themeguard extract theme.css
  themeguard -v extract theme.css
  themeguard --json extract theme.css""",
)
@click.argument("css_file", type=click.Path(dir_okay=False, allow_dash=True))
@click.pass_obj
def extract(app: AppContext, css_file: str) -> None:
    """Parse CSS_FILE (``-`` for stdin) into rule records."""
    from themeguard.services.check import ThemeCheckService

    css = read_source(css_file) or ""
    app.emit(ThemeCheckService(app.workspace).extract(css))
