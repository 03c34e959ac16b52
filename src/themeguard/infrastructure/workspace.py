"""Workspace — settings bound to a compiler and its import resolvers.

Services receive a Workspace at construction time. It owns the one
stateful-on-disk collaborator (the style compiler) so the checkers stay
pure.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from themeguard.infrastructure.compiler import StyleCompiler, create_compiler
from themeguard.infrastructure.resolvers import (
    ImportResolver,
    PackageAliasResolver,
    VendorResolver,
)

if TYPE_CHECKING:
    from pathlib import Path

    from themeguard.config.settings import ThemeguardSettings

logger = logging.getLogger(__name__)


class Workspace:
    """Compile theme sources with the configured backend and resolvers."""

    def __init__(
        self,
        settings: ThemeguardSettings,
        *,
        compiler: StyleCompiler | None = None,
    ) -> None:
        self.settings = settings
        self._compiler = compiler

    @property
    def root(self) -> Path:
        return self.settings.project_root

    @property
    def compiler(self) -> StyleCompiler:
        """The compiler backend (created lazily on first access)."""
        if self._compiler is None:
            self._compiler = create_compiler(self.settings.compiler)
        return self._compiler

    @property
    def search_paths(self) -> list[Path]:
        return [self.settings.resolve_path(p) for p in self.settings.compiler.load_paths]

    @property
    def resolvers(self) -> list[ImportResolver]:
        """Alias resolvers first, then vendor resolvers, in config order."""
        cfg = self.settings.resolvers
        resolvers: list[ImportResolver] = [
            PackageAliasResolver(alias, self.settings.resolve_path(root))
            for alias, root in cfg.aliases.items()
        ]
        resolvers.extend(
            VendorResolver(prefix, self.settings.resolve_path(root))
            for prefix, root in cfg.vendor.items()
        )
        return resolvers

    def compile(self, source: str) -> str:
        """Compile *source*; raises CompileError on failure."""
        logger.debug("compiling %d bytes with %s", len(source), type(self.compiler).__name__)
        return self.compiler.compile(
            source,
            search_paths=self.search_paths,
            resolvers=self.resolvers,
        )
