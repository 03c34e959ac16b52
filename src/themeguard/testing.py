"""Assertion helpers for theme library test suites.

Usage in a pytest module::

    from themeguard.domain.extract import extract_rules
    from themeguard.testing import assert_disjoint_dimensions

    def test_dimensions_are_disjoint(compiled_css):
        assert_disjoint_dimensions(extract_rules(compiled_css))

Each helper compares a checker's report against the expected literal and
raises AssertionError naming the offending selectors or properties.
"""

from __future__ import annotations

from collections.abc import Iterable

from themeguard.config.models import DEFAULT_HINT
from themeguard.domain.checks import (
    NestingMode,
    dimension_overlap,
    non_variable_properties,
    selector_scope,
)
from themeguard.domain.rules import Rule


def assert_scoped_to(rules: Iterable[Rule], selector: str) -> None:
    selectors = selector_scope(rules)
    if selectors != [selector]:
        raise AssertionError(f"Expected all rules under {[selector]!r}, got {selectors!r}")


def assert_only_variables(rules: Iterable[Rule]) -> None:
    offending = non_variable_properties(rules)
    if offending:
        raise AssertionError(f"Expected only custom properties, found {offending!r}")


def assert_disjoint_dimensions(
    rules: Iterable[Rule],
    hint: str = DEFAULT_HINT,
    *,
    nesting: NestingMode = "own",
) -> None:
    """Fail if any property is emitted by more than one dimension.

    The failure message leads with *hint*, the expected remediation.
    """
    overlap = dimension_overlap(list(rules), nesting=nesting)
    if overlap:
        raise AssertionError(f"{hint}\nExpected [] but dimensions overlap on {overlap!r}")
