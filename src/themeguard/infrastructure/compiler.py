"""Style compilers — Sass source text in, CSS text out.

The compiler is an external collaborator. Everything downstream only
sees :class:`StyleCompiler`: ``compile(source, search_paths, resolvers)``.

Two backends:

* ``dart-sass`` (default) — the ``sass`` executable fed through stdin.
  Resolvers are staged as load paths in a temporary directory, so
  ``@use '@alias/pkg'`` resolves like any other load-path module.
* ``libsass`` — in-process via the libsass bindings. Resolvers become
  importer callbacks. ``@import`` only; sources with ``@use`` or
  ``@forward`` are rejected up front.

Both raise :class:`CompileError` with the compiler-reported location.
"""

from __future__ import annotations

import logging
import re
import subprocess
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from themeguard.infrastructure.resolvers import ImportResolver

if TYPE_CHECKING:
    from themeguard.config.models import CompilerConfig

logger = logging.getLogger(__name__)
# @warn output and deprecation notices printed by the compiler.
sass_logger = logging.getLogger("themeguard.sass")

BACKENDS: tuple[str, ...] = ("libsass", "dart-sass")

# libsass: "on line 3:9 of stdin"; dart-sass trace: "  - 3:9  root stylesheet"
_LIBSASS_LOCATION = re.compile(r"on line (\d+):(\d+) of (\S+)")
_DART_LOCATION = re.compile(r"^\s+(\S+)\s+(\d+):(\d+)\s+", re.MULTILINE)
# libsass predates the module system.
_MODULE_RULE = re.compile(r"^[ \t]*@(use|forward)\b", re.MULTILINE)


class CompileError(Exception):
    """The style source could not be compiled."""

    def __init__(self, message: str, location: str | None = None) -> None:
        self.message = message.strip()
        self.location = location
        text = f"{self.message} at {location}" if location else self.message
        super().__init__(text)


class StyleCompiler(Protocol):
    """Compile Sass source text into CSS text."""

    def compile(
        self,
        source: str,
        *,
        search_paths: Sequence[Path] = (),
        resolvers: Sequence[ImportResolver] = (),
    ) -> str: ...


class LibSassCompiler:
    """In-process compiler backed by the libsass bindings."""

    def __init__(self, *, output_style: str = "expanded") -> None:
        self.output_style = output_style

    def compile(
        self,
        source: str,
        *,
        search_paths: Sequence[Path] = (),
        resolvers: Sequence[ImportResolver] = (),
    ) -> str:
        module_rule = _MODULE_RULE.search(source)
        if module_rule:
            line = source.count("\n", 0, module_rule.start()) + 1
            raise CompileError(
                f"libsass does not support @{module_rule.group(1)}; "
                'set [compiler] backend = "dart-sass"',
                f"stdin:{line}:1",
            )
        try:
            import sass
        except ImportError as exc:
            raise CompileError("libsass is not installed (pip install libsass)") from exc

        def importer(specifier: str, prev: str | None = None) -> list[tuple[str, str]] | None:
            for resolver in resolvers:
                found = resolver.resolve(specifier)
                if found is not None:
                    return [(str(found), found.read_text(encoding="utf-8"))]
            return None

        options: dict[str, Any] = {
            "string": source,
            "output_style": self.output_style,
            "include_paths": [str(p) for p in search_paths],
        }
        if resolvers:
            options["importers"] = [(0, importer)]
        logger.debug("libsass compile: %d bytes, %d search paths", len(source), len(search_paths))
        try:
            return sass.compile(**options)
        except sass.CompileError as exc:
            message = str(exc)
            match = _LIBSASS_LOCATION.search(message)
            location = f"{match.group(3)}:{match.group(1)}:{match.group(2)}" if match else None
            first_line = message.splitlines()[0] if message else "libsass failed"
            raise CompileError(first_line, location) from exc


class DartSassCompiler:
    """Compiler that shells out to the dart-sass ``sass`` executable."""

    def __init__(
        self,
        *,
        executable: str = "sass",
        output_style: str = "expanded",
        timeout: float = 120.0,
    ) -> None:
        self.executable = executable
        self.output_style = output_style
        self.timeout = timeout

    def _command(self, load_paths: Sequence[Path]) -> list[str]:
        cmd = [
            self.executable,
            "--stdin",
            "--no-source-map",
            f"--style={self.output_style}",
        ]
        cmd.extend(f"--load-path={path}" for path in load_paths)
        return cmd

    def compile(
        self,
        source: str,
        *,
        search_paths: Sequence[Path] = (),
        resolvers: Sequence[ImportResolver] = (),
    ) -> str:
        with tempfile.TemporaryDirectory(prefix="themeguard-") as tmp:
            staging = Path(tmp)
            load_paths = list(search_paths)
            for resolver in resolvers:
                path = resolver.load_path(staging)
                if path not in load_paths:
                    load_paths.append(path)
            cmd = self._command(load_paths)
            logger.debug("dart-sass compile: %s", " ".join(cmd))
            try:
                proc = subprocess.run(
                    cmd,
                    input=source,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                    check=False,
                )
            except FileNotFoundError as exc:
                raise CompileError(f"Sass executable not found: {self.executable}") from exc
            except subprocess.TimeoutExpired as exc:
                raise CompileError(f"Sass compile timed out after {self.timeout}s") from exc

        if proc.returncode != 0:
            stderr = proc.stderr.strip()
            match = _DART_LOCATION.search(stderr)
            location = None
            if match:
                origin = "stdin" if match.group(1) == "-" else match.group(1)
                location = f"{origin}:{match.group(2)}:{match.group(3)}"
            first_line = stderr.splitlines()[0] if stderr else f"sass exited with {proc.returncode}"
            raise CompileError(first_line, location)
        if proc.stderr.strip():
            sass_logger.warning(proc.stderr.strip())
        return proc.stdout


def create_compiler(config: CompilerConfig) -> StyleCompiler:
    """Build the compiler backend named by ``config.backend``."""
    if config.backend == "libsass":
        return LibSassCompiler(output_style=config.output_style)
    if config.backend == "dart-sass":
        return DartSassCompiler(
            executable=config.executable,
            output_style=config.output_style,
            timeout=config.timeout,
        )
    raise ValueError(f"Unknown compiler backend: {config.backend!r} (expected one of {BACKENDS})")
