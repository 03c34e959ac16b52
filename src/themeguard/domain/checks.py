"""Structural checkers over extracted rules.

Pure functions, no infrastructure dependencies. Each checker reports
what it found rather than returning a boolean, so a failing comparison
against the expected literal shows exactly which selectors or properties
leaked.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from itertools import combinations
from typing import Literal

from themeguard.domain.rules import CUSTOM_PROPERTY_PREFIX, DimensionGroup, Rule

NestingMode = Literal["own", "root", "ancestors"]
NESTING_MODES: tuple[str, ...] = ("own", "root", "ancestors")

# ---------------------------------------------------------------------------
# Selector scope
# ---------------------------------------------------------------------------


def selector_scope(rules: Iterable[Rule]) -> list[str]:
    """Return the distinct selectors of *rules* in first-seen order.

    Compared against ``[expected]``, any extra entry is a stray rule.
    """
    return list(dict.fromkeys(rule.selector for rule in rules))


def scope_violations(rules: Iterable[Rule], expected: str) -> list[str]:
    """Return the distinct selectors that are not *expected*."""
    return [selector for selector in selector_scope(rules) if selector != expected]


# ---------------------------------------------------------------------------
# Variables only
# ---------------------------------------------------------------------------


def is_custom_property(name: str) -> bool:
    return name.startswith(CUSTOM_PROPERTY_PREFIX)


def non_variable_properties(rules: Iterable[Rule]) -> list[str]:
    """Return every declared property that is not a custom property.

    Document order, repeats kept.
    """
    return [prop for rule in rules for prop in rule.properties if not is_custom_property(prop)]


# ---------------------------------------------------------------------------
# Dimension partition
# ---------------------------------------------------------------------------


def _labels_for(rule: Rule, nesting: NestingMode) -> list[str]:
    if nesting == "own" or not rule.ancestors:
        return [rule.selector]
    # At-rule wrappers never name a dimension.
    enclosing = [a for a in rule.ancestors if not a.startswith("@")]
    if nesting == "root":
        return enclosing[:1] or [rule.selector]
    return [rule.selector, *enclosing]


def dimension_groups(
    rules: Iterable[Rule], *, nesting: NestingMode = "own"
) -> list[DimensionGroup]:
    """Group property names by dimension label.

    With ``nesting="own"`` a rule's properties count under its own
    selector only. ``"root"`` moves them to the outermost enclosing rule.
    ``"ancestors"`` counts them under the rule's own selector and under
    every enclosing rule's selector, so a nested declaration belongs to
    each block that contains it. Rules sharing a label merge; repeated
    properties within a label collapse.
    """
    if nesting not in NESTING_MODES:
        raise ValueError(f"Unknown nesting mode: {nesting!r}")
    collected: dict[str, set[str]] = {}
    for rule in rules:
        for label in _labels_for(rule, nesting):
            collected.setdefault(label, set()).update(rule.properties)
    return [
        DimensionGroup(label=label, properties=frozenset(props))
        for label, props in collected.items()
    ]


def overlap_matrix(groups: Sequence[DimensionGroup]) -> dict[tuple[str, str], list[str]]:
    """Return the non-empty pairwise intersections keyed by label pair."""
    labels = [group.label for group in groups]
    if len(set(labels)) != len(labels):
        raise ValueError(f"Dimension labels must be unique: {labels}")
    matrix: dict[tuple[str, str], list[str]] = {}
    for first, second in combinations(groups, 2):
        shared = first.properties & second.properties
        if shared:
            matrix[(first.label, second.label)] = sorted(shared)
    return matrix


def dimension_overlap(
    rules: Iterable[Rule] | Sequence[DimensionGroup],
    *,
    nesting: NestingMode = "own",
) -> list[str]:
    """Return property names emitted by more than one dimension, sorted.

    Accepts either extracted rules or prebuilt groups. Empty means the
    dimensions partition the custom properties cleanly.
    """
    items = list(rules)
    if items and all(isinstance(item, DimensionGroup) for item in items):
        groups: list[DimensionGroup] = items  # type: ignore[assignment]
    else:
        groups = dimension_groups(items, nesting=nesting)  # type: ignore[arg-type]
    overlap: set[str] = set()
    for shared in overlap_matrix(groups).values():
        overlap.update(shared)
    return sorted(overlap)
