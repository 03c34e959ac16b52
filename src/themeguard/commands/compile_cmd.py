"""Command: compile a theme fragment to CSS."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from themeguard.commands._base import ThemeguardCommand, read_source

if TYPE_CHECKING:
    from themeguard.commands._context import AppContext


@click.command(
    "compile",
    cls=ThemeguardCommand,
    examples="""\
  themeguard compile fragment.scss
  themeguard -q compile fragment.scss > out.css
  echo 'html { @include mat.all-component-themes($theme); }' | themeguard compile -
  themeguard compile --raw standalone.scss""",
)
@click.argument(
    "fragment", required=False, default="-", type=click.Path(dir_okay=False, allow_dash=True)
)
@click.option("--raw", is_flag=True, help="Compile as-is, without the configured preamble.")
@click.pass_obj
def compile_cmd(app: AppContext, fragment: str, raw: bool) -> None:
    """Compile FRAGMENT (stdin when omitted or ``-``) and print the CSS."""
    from themeguard.services.check import ThemeCheckService

    source = read_source(fragment) or ""
    app.emit(ThemeCheckService(app.workspace).transpile(source, raw=raw))
