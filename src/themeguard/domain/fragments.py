"""Theme fragment builders.

A fragment is a block of Sass statements that includes the theming
library's mixins. The preamble (``@use`` lines and the ``$theme``
definition) is configured separately and prepended by :func:`wrap_fragment`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

# CSS type selector: the dimension label doubles as the rule's selector.
_LABEL_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_-]*$")


def wrap_fragment(content: str, preamble: str) -> str:
    """Prepend *preamble* to a fragment, separated by a blank line."""
    if not preamble.strip():
        return content
    return f"{preamble.rstrip()}\n\n{content}"


def _include(mixin: str, theme_var: str) -> str:
    return f"@include {mixin}({theme_var});"


def scoped_fragment(selector: str, mixins: Iterable[str], theme_var: str = "$theme") -> str:
    """Include every mixin inside a single *selector* block."""
    if not selector.strip():
        raise ValueError("Selector must not be empty")
    body = "\n".join(f"  {_include(mixin, theme_var)}" for mixin in mixins)
    return f"{selector} {{\n{body}\n}}\n"


def dimension_fragment(dimensions: Mapping[str, str], theme_var: str = "$theme") -> str:
    """Emit one block per dimension, each including that dimension's mixin.

    ``{"base": "mat.all-component-bases"}`` produces::

        base {
          @include mat.all-component-bases($theme);
        }
    """
    blocks: list[str] = []
    for label, mixin in dimensions.items():
        if not _LABEL_PATTERN.match(label):
            raise ValueError(f"Dimension label is not a type selector: {label!r}")
        blocks.append(scoped_fragment(label, [mixin], theme_var))
    return "".join(blocks)


def parse_dimension_spec(entries: Iterable[str]) -> dict[str, str]:
    """Parse ``label=mixin`` strings into an ordered mapping.

    Duplicate labels raise ValueError; a dimension appears once per check.
    """
    dimensions: dict[str, str] = {}
    for entry in entries:
        label, sep, mixin = entry.partition("=")
        label, mixin = label.strip(), mixin.strip()
        if not sep or not label or not mixin:
            raise ValueError(f"Expected label=mixin, got {entry!r}")
        if label in dimensions:
            raise ValueError(f"Duplicate dimension label: {label!r}")
        dimensions[label] = mixin
    return dimensions
