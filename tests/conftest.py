"""Shared pytest fixtures and test helpers for themeguard tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
from click.testing import CliRunner

from themeguard.config.settings import ThemeguardSettings
from themeguard.infrastructure.compiler import CompileError
from themeguard.infrastructure.resolvers import ImportResolver
from themeguard.infrastructure.workspace import Workspace


class StubCompiler:
    """Compiler double: returns canned CSS and records every source it saw.

    *output* is either a CSS string or a callable mapping source to CSS.
    An *error* makes every call raise it instead.
    """

    def __init__(
        self,
        output: str | Callable[[str], str] = "",
        *,
        error: CompileError | None = None,
    ) -> None:
        self.output = output
        self.error = error
        self.sources: list[str] = []

    def compile(
        self,
        source: str,
        *,
        search_paths: Sequence[Path] = (),
        resolvers: Sequence[ImportResolver] = (),
    ) -> str:
        self.sources.append(source)
        if self.error is not None:
            raise self.error
        if callable(self.output):
            return self.output(source)
        return self.output


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary project directory with no config file, isolated from env."""
    monkeypatch.delenv("THEMEGUARD_CONFIG", raising=False)
    return tmp_path


@pytest.fixture
def settings(project_root: Path) -> ThemeguardSettings:
    return ThemeguardSettings.from_cli(project_root=project_root)


@pytest.fixture
def stub_compiler() -> StubCompiler:
    return StubCompiler()


@pytest.fixture
def workspace(settings: ThemeguardSettings, stub_compiler: StubCompiler) -> Workspace:
    """Workspace whose compiler is the stub."""
    return Workspace(settings, compiler=stub_compiler)


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp project so the CLI finds no stray config.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.chdir(project_root)


def dimension_css(**dimensions: dict[str, str]) -> str:
    """Build compiled-looking CSS with one block per dimension label."""
    blocks = []
    for label, decls in dimensions.items():
        body = "\n".join(f"  {prop}: {value};" for prop, value in decls.items())
        blocks.append(f"{label} {{\n{body}\n}}\n")
    return "\n".join(blocks)


def material_package(root: Path, *, density_extra: str = "") -> Path:
    """Write a minimal ``material`` Sass module under *root*; return *root*.

    It provides ``define-theme()`` and the aggregate and per-dimension
    mixins the default theme config includes. *density_extra* is spliced
    into the densities mixin to provoke overlaps.
    """
    package = root / "material"
    package.mkdir(parents=True, exist_ok=True)
    (package / "_index.scss").write_text(
        f"""\
@use 'sass:map';

@function define-theme($config: ()) {{
  @return (primary: #005cbb, font: Roboto);
}}

@mixin all-component-bases($theme) {{
  --mat-shape: 4px;
}}

@mixin all-component-colors($theme) {{
  --mat-primary: #{{map.get($theme, primary)}};
}}

@mixin all-component-typographies($theme) {{
  --mat-font: #{{map.get($theme, font)}};
}}

@mixin all-component-densities($theme) {{
  --mat-height: 40px;
  {density_extra}
}}

@mixin all-component-themes($theme) {{
  @include all-component-bases($theme);
  @include all-component-colors($theme);
  @include all-component-typographies($theme);
  @include all-component-densities($theme);
}}
"""
    )
    return root
