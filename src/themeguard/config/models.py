"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, themeguard.toml only contains
overrides. A theme library using the stock mixin names needs only
[resolvers] entries pointing at its sources.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_HINT = "Did you forget to wrap these in `_hardcode()`?"

DEFAULT_PREAMBLE = """\
@use '@angular/material' as mat;

$theme: mat.define-theme();
"""


def _default_dimensions() -> dict[str, str]:
    return {
        "base": "mat.all-component-bases",
        "color": "mat.all-component-colors",
        "typography": "mat.all-component-typographies",
        "density": "mat.all-component-densities",
    }


# --- themeguard.toml sections ---


class CompilerConfig(BaseModel):
    """[compiler] section."""

    model_config = {"frozen": True}

    backend: Literal["libsass", "dart-sass"] = "dart-sass"
    executable: str = "sass"
    load_paths: list[str] = Field(default_factory=list)
    output_style: str = "expanded"
    timeout: float = 120.0


class ResolversConfig(BaseModel):
    """[resolvers] section.

    ``aliases`` maps a package alias to its source directory; ``vendor``
    maps a module prefix to the directory holding vendor modules.
    """

    model_config = {"frozen": True}

    aliases: dict[str, str] = Field(default_factory=dict)
    vendor: dict[str, str] = Field(default_factory=dict)


class ThemeConfig(BaseModel):
    """[theme] section."""

    model_config = {"frozen": True}

    selector: str = "html"
    preamble: str = DEFAULT_PREAMBLE
    theme_var: str = "$theme"
    all_mixin: str = "mat.all-component-themes"
    dimensions: dict[str, str] = Field(default_factory=_default_dimensions)
    hint: str = DEFAULT_HINT
    nesting: Literal["own", "root", "ancestors"] = "own"

    @field_validator("selector")
    @classmethod
    def _selector_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("selector must not be empty")
        return value.strip()

