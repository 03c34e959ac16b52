"""Locate themeguard.toml.

The nearest ``themeguard.toml`` in the working directory or any parent
wins. ``THEMEGUARD_CONFIG`` names a file explicitly and disables the
search; ``--config`` bypasses discovery altogether (see settings).
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "themeguard.toml"
CONFIG_ENV_VAR = "THEMEGUARD_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: cwd), or None.

    An env override pointing at a missing file yields None rather than
    falling back to the search.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
