"""Import resolvers — map module specifiers to files on disk.

Two flavours cover the theme libraries we check:

* :class:`PackageAliasResolver` maps a logical package alias (``@acme``)
  onto a source directory, so ``@acme/ui/theming`` loads
  ``<root>/ui/theming``.
* :class:`VendorResolver` maps vendor modules by prefix into an install
  directory, so ``@vendor/button`` loads ``<node_modules>/@vendor/button``.

Compilers with importer hooks call :meth:`resolve`. Compilers that only
accept search paths call :meth:`load_path` and get a directory to add.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


def find_sass_file(base: Path) -> Path | None:
    """Return the file Sass would load for *base*, or None.

    Tries the path itself, then partial/extension variants, then
    ``_index``/``index`` files when *base* is a directory.
    """
    if base.is_file():
        return base
    parent, name = base.parent, base.name
    candidates = [
        parent / f"{name}.scss",
        parent / f"_{name}.scss",
        parent / f"{name}.sass",
        parent / f"_{name}.sass",
        parent / f"{name}.css",
        base / "_index.scss",
        base / "index.scss",
        base / "_index.sass",
        base / "index.sass",
    ]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


@runtime_checkable
class ImportResolver(Protocol):
    """Resolve a module specifier to a concrete file."""

    def resolve(self, specifier: str) -> Path | None: ...

    def load_path(self, staging: Path) -> Path: ...


class PackageAliasResolver:
    """Resolve ``<alias>/<rest>`` to ``<root>/<rest>``."""

    def __init__(self, alias: str, root: Path) -> None:
        self.alias = alias.rstrip("/")
        self.root = root

    def __repr__(self) -> str:
        return f"PackageAliasResolver({self.alias!r}, {str(self.root)!r})"

    def resolve(self, specifier: str) -> Path | None:
        prefix = f"{self.alias}/"
        if not specifier.startswith(prefix):
            return None
        found = find_sass_file(self.root / specifier[len(prefix) :])
        logger.debug("alias %s -> %s", specifier, found)
        return found

    def load_path(self, staging: Path) -> Path:
        """Link ``<staging>/<alias>`` to the root; return *staging*."""
        link = staging / self.alias
        link.parent.mkdir(parents=True, exist_ok=True)
        if not link.exists():
            link.symlink_to(self.root.resolve(), target_is_directory=True)
        return staging


class VendorResolver:
    """Resolve specifiers starting with *prefix* under *root*, verbatim."""

    def __init__(self, prefix: str, root: Path) -> None:
        self.prefix = prefix
        self.root = root

    def __repr__(self) -> str:
        return f"VendorResolver({self.prefix!r}, {str(self.root)!r})"

    def resolve(self, specifier: str) -> Path | None:
        if not specifier.startswith(self.prefix):
            return None
        found = find_sass_file(self.root / specifier)
        logger.debug("vendor %s -> %s", specifier, found)
        return found

    def load_path(self, staging: Path) -> Path:
        return self.root
