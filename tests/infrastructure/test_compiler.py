"""Tests for the style compiler backends."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

import pytest

from themeguard.config.models import DEFAULT_PREAMBLE, CompilerConfig
from themeguard.domain.fragments import scoped_fragment, wrap_fragment
from themeguard.infrastructure.compiler import (
    CompileError,
    DartSassCompiler,
    LibSassCompiler,
    create_compiler,
)
from themeguard.infrastructure.resolvers import PackageAliasResolver
from tests.conftest import material_package

# ---------------------------------------------------------------------------
# libsass
# ---------------------------------------------------------------------------


class TestLibSassCompiler:
    @pytest.fixture(autouse=True)
    def _require_libsass(self) -> None:
        pytest.importorskip("sass")

    def test_compiles_custom_properties(self) -> None:
        css = LibSassCompiler().compile("html { --a: 1; --b: 2; }")
        assert "html {" in css
        assert "--a: 1;" in css
        assert "--b: 2;" in css

    def test_include_paths(self, tmp_path: Path) -> None:
        (tmp_path / "_tokens.scss").write_text("@mixin tokens { --tok: 1px; }\n")
        css = LibSassCompiler().compile(
            '@import "tokens";\nhtml { @include tokens; }',
            search_paths=[tmp_path],
        )
        assert "--tok: 1px;" in css

    def test_resolver_becomes_importer(self, tmp_path: Path) -> None:
        (tmp_path / "theming").mkdir()
        (tmp_path / "theming" / "_index.scss").write_text("@mixin theme { --from-alias: 1; }\n")
        css = LibSassCompiler().compile(
            '@import "@acme/theming";\nhtml { @include theme; }',
            resolvers=[PackageAliasResolver("@acme", tmp_path)],
        )
        assert "--from-alias: 1;" in css

    def test_syntax_error_has_location(self) -> None:
        with pytest.raises(CompileError) as excinfo:
            LibSassCompiler().compile("html { --a: 1;")
        assert excinfo.value.location is not None
        assert excinfo.value.location.startswith("stdin:1:")

    def test_unresolved_import(self) -> None:
        with pytest.raises(CompileError):
            LibSassCompiler().compile('@import "does-not-exist";')


class TestLibSassModuleRules:
    def test_use_rejected_before_compiling(self) -> None:
        with pytest.raises(CompileError, match=r"does not support @use") as excinfo:
            LibSassCompiler().compile("\n@use '@angular/material' as mat;\nhtml {}")
        assert excinfo.value.location == "stdin:2:1"
        assert 'backend = "dart-sass"' in excinfo.value.message

    def test_forward_rejected(self) -> None:
        with pytest.raises(CompileError, match=r"@forward"):
            LibSassCompiler().compile("  @forward 'tokens';")

    def test_default_preamble_rejected(self) -> None:
        with pytest.raises(CompileError):
            LibSassCompiler().compile(wrap_fragment("html {}", DEFAULT_PREAMBLE))

    def test_mid_line_mention_allowed(self) -> None:
        pytest.importorskip("sass")
        css = LibSassCompiler().compile("// avoid @use here\nhtml { --a: 1; }")
        assert "--a: 1;" in css


# ---------------------------------------------------------------------------
# dart-sass
# ---------------------------------------------------------------------------


class TestDartSassCompiler:
    def test_missing_executable(self) -> None:
        compiler = DartSassCompiler(executable="themeguard-no-such-sass")
        with pytest.raises(CompileError, match="not found"):
            compiler.compile("html { --a: 1; }")

    def test_command_line(self, tmp_path: Path) -> None:
        cmd = DartSassCompiler(output_style="compressed")._command([tmp_path])
        assert cmd[:3] == ["sass", "--stdin", "--no-source-map"]
        assert "--style=compressed" in cmd
        assert f"--load-path={tmp_path}" in cmd

    def test_failure_reports_location(self, monkeypatch: pytest.MonkeyPatch) -> None:
        stderr = (
            'Error: expected "}".\n'
            "  ╷\n"
            "1 │ html { --a: 1;\n"
            "  │               ^\n"
            "  ╵\n"
            "  - 1:15  root stylesheet\n"
        )

        def fake_run(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
            return subprocess.CompletedProcess(cmd, 65, stdout="", stderr=stderr)

        monkeypatch.setattr(subprocess, "run", fake_run)
        with pytest.raises(CompileError) as excinfo:
            DartSassCompiler().compile("html { --a: 1;")
        assert excinfo.value.message == 'Error: expected "}".'
        assert excinfo.value.location == "stdin:1:15"

    def test_resolvers_staged_as_load_paths(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        seen: list[list[str]] = []

        def fake_run(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
            seen.append(cmd)
            return subprocess.CompletedProcess(cmd, 0, stdout="html {\n  --a: 1;\n}\n", stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)
        out = DartSassCompiler().compile(
            "html { --a: 1; }",
            search_paths=[tmp_path],
            resolvers=[PackageAliasResolver("@acme", tmp_path)],
        )
        assert out.startswith("html {")
        load_paths = [arg for arg in seen[0] if arg.startswith("--load-path=")]
        assert len(load_paths) == 2
        assert load_paths[0] == f"--load-path={tmp_path}"

    def test_success_stderr_goes_to_sass_logger(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        def fake_run(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
            return subprocess.CompletedProcess(
                cmd, 0, stdout="html {}\n", stderr="Deprecation Warning: slash-div\n"
            )

        monkeypatch.setattr(subprocess, "run", fake_run)
        with caplog.at_level(logging.WARNING, logger="themeguard.sass"):
            assert DartSassCompiler().compile("html {}") == "html {}\n"
        assert [r.name for r in caplog.records] == ["themeguard.sass"]
        assert caplog.records[0].getMessage() == "Deprecation Warning: slash-div"

    @pytest.mark.skipif(shutil.which("sass") is None, reason="dart-sass not installed")
    def test_real_compile(self) -> None:
        css = DartSassCompiler().compile("html { --a: 1; }")
        assert "--a: 1;" in css

    @pytest.mark.skipif(shutil.which("sass") is None, reason="dart-sass not installed")
    def test_use_through_alias(self, tmp_path: Path) -> None:
        source = wrap_fragment(
            scoped_fragment("html", ["mat.all-component-themes"]), DEFAULT_PREAMBLE
        )
        css = DartSassCompiler().compile(
            source,
            resolvers=[PackageAliasResolver("@angular", material_package(tmp_path / "pkgs"))],
        )
        assert "--mat-primary: #005cbb;" in css
        assert "--mat-font: Roboto;" in css


# ---------------------------------------------------------------------------
# create_compiler
# ---------------------------------------------------------------------------


class TestCreateCompiler:
    def test_dart_sass_default(self) -> None:
        assert isinstance(create_compiler(CompilerConfig()), DartSassCompiler)

    def test_libsass(self) -> None:
        compiler = create_compiler(CompilerConfig(backend="libsass", output_style="compressed"))
        assert isinstance(compiler, LibSassCompiler)
        assert compiler.output_style == "compressed"

    def test_dart_sass(self) -> None:
        compiler = create_compiler(
            CompilerConfig(backend="dart-sass", executable="/opt/sass", timeout=5)
        )
        assert isinstance(compiler, DartSassCompiler)
        assert compiler.executable == "/opt/sass"
        assert compiler.timeout == 5


class TestCompileError:
    def test_str_includes_location(self) -> None:
        err = CompileError("Undefined mixin.", "stdin:4:3")
        assert str(err) == "Undefined mixin. at stdin:4:3"

    def test_str_without_location(self) -> None:
        assert str(CompileError("boom")) == "boom"
