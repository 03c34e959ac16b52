"""Rule records produced by the declaration extractor.

Pure data, no parsing here. A compiled style sheet becomes an ordered
sequence of :class:`Rule` values, each carrying its own declarations.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

CUSTOM_PROPERTY_PREFIX = "--"


class StylesheetParseError(ValueError):
    """Compiled output could not be read as rules and declarations."""

    def __init__(self, message: str, *, line: int | None = None, column: int | None = None) -> None:
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column or 0})"
        super().__init__(message)


@dataclass(frozen=True)
class Declaration:
    """A single ``property: value`` pair."""

    property: str
    value: str
    important: bool = False


@dataclass(frozen=True)
class Rule:
    """A rule block: verbatim selector plus its direct declarations."""

    selector: str
    declarations: tuple[Declaration, ...] = ()
    ancestors: tuple[str, ...] = field(default=())  # outermost first

    def __post_init__(self) -> None:
        if not self.selector:
            raise StylesheetParseError("Rule selector must not be empty")

    @property
    def properties(self) -> Iterator[str]:
        return (decl.property for decl in self.declarations)

    @property
    def depth(self) -> int:
        return len(self.ancestors)

    def to_dict(self) -> dict[str, object]:
        return {
            "selector": self.selector,
            "ancestors": list(self.ancestors),
            "declarations": [
                {"property": d.property, "value": d.value, "important": d.important}
                for d in self.declarations
            ],
        }


@dataclass(frozen=True)
class DimensionGroup:
    """All property names emitted under one dimension label."""

    label: str
    properties: frozenset[str] = frozenset()

    def __len__(self) -> int:
        return len(self.properties)
