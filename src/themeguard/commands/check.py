"""Command group: structural checks on compiled theme output.

Every subcommand takes an optional FRAGMENT. Without one, the check
builds its canonical fragment from the [theme] config section. With
``--css`` the compile step is skipped and the file is checked directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from themeguard.commands._base import ThemeguardGroup, read_source
from themeguard.domain.checks import NESTING_MODES

if TYPE_CHECKING:
    from themeguard.commands._context import AppContext

_fragment_argument = click.argument(
    "fragment",
    required=False,
    type=click.Path(dir_okay=False, allow_dash=True),
)
_css_option = click.option(
    "--css",
    "css_file",
    type=click.Path(dir_okay=False, allow_dash=True),
    help="Check already-compiled CSS instead of compiling.",
)
_selector_option = click.option("--selector", default=None, help="Expected wrapping selector.")
_nesting_option = click.option(
    "--nesting",
    type=click.Choice(NESTING_MODES),
    default=None,
    help="Group nested rules under their own selector, their outermost ancestor, or every ancestor.",
)


@click.group(
    cls=ThemeguardGroup,
    examples="""\
  themeguard check all
  themeguard check scope --selector :root
  themeguard check variables my-fragment.scss
  themeguard check dimensions --nesting root
  themeguard check dimensions --dimension base=mat.button-base --dimension color=mat.button-color
  themeguard --json check all --css dist/theme.css""",
)
def check() -> None:
    """Verify scope, variables-only, and dimension partition."""


@check.command()
@_fragment_argument
@_css_option
@_selector_option
@click.pass_obj
def scope(
    app: AppContext, fragment: str | None, css_file: str | None, selector: str | None
) -> None:
    """Every rule must sit under one selector."""
    from themeguard.services.check import ThemeCheckService

    app.emit(
        ThemeCheckService(app.workspace).check_scope(
            read_source(fragment),
            selector=selector,
            css=read_source(css_file),
        )
    )


@check.command()
@_fragment_argument
@_css_option
@_selector_option
@click.pass_obj
def variables(
    app: AppContext, fragment: str | None, css_file: str | None, selector: str | None
) -> None:
    """Every declaration must be a custom property."""
    from themeguard.services.check import ThemeCheckService

    app.emit(
        ThemeCheckService(app.workspace).check_variables(
            read_source(fragment),
            selector=selector,
            css=read_source(css_file),
        )
    )


@check.command()
@_fragment_argument
@_css_option
@_nesting_option
@click.option(
    "--dimension",
    "dimension_specs",
    multiple=True,
    metavar="LABEL=MIXIN",
    help="Override the configured dimensions (repeatable).",
)
@click.pass_obj
def dimensions(
    app: AppContext,
    fragment: str | None,
    css_file: str | None,
    nesting: str | None,
    dimension_specs: tuple[str, ...],
) -> None:
    """No custom property may be emitted by two dimensions."""
    from themeguard.domain.fragments import parse_dimension_spec
    from themeguard.services.check import ThemeCheckService

    try:
        overrides = parse_dimension_spec(dimension_specs) if dimension_specs else None
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--dimension") from exc

    app.emit(
        ThemeCheckService(app.workspace).check_dimensions(
            read_source(fragment),
            css=read_source(css_file),
            nesting=nesting,  # type: ignore[arg-type]
            dimensions=overrides,
        )
    )


@check.command("all")
@_fragment_argument
@_css_option
@_selector_option
@_nesting_option
@click.pass_obj
def check_all(
    app: AppContext,
    fragment: str | None,
    css_file: str | None,
    selector: str | None,
    nesting: str | None,
) -> None:
    """Run scope, variables, and dimensions in turn."""
    from themeguard.services.check import ThemeCheckService

    app.emit(
        ThemeCheckService(app.workspace).check_all(
            read_source(fragment),
            selector=selector,
            css=read_source(css_file),
            nesting=nesting,  # type: ignore[arg-type]
        )
    )
