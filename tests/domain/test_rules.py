"""Tests for rule records."""

from __future__ import annotations

import pytest

from themeguard.domain.rules import Declaration, DimensionGroup, Rule, StylesheetParseError


class TestRule:
    def test_empty_selector_rejected(self) -> None:
        with pytest.raises(StylesheetParseError):
            Rule(selector="")

    def test_frozen(self) -> None:
        rule = Rule(selector="html")
        with pytest.raises(AttributeError):
            rule.selector = "body"  # type: ignore[misc]

    def test_to_dict(self) -> None:
        rule = Rule(
            selector="html",
            declarations=(Declaration("--a", "1", important=True),),
            ancestors=("@media print",),
        )
        assert rule.to_dict() == {
            "selector": "html",
            "ancestors": ["@media print"],
            "declarations": [{"property": "--a", "value": "1", "important": True}],
        }


class TestDimensionGroup:
    def test_len(self) -> None:
        group = DimensionGroup(label="base", properties=frozenset({"--a", "--b"}))
        assert len(group) == 2

    def test_default_empty(self) -> None:
        assert len(DimensionGroup(label="density")) == 0


class TestStylesheetParseError:
    def test_message_with_location(self) -> None:
        err = StylesheetParseError("bad", line=3, column=7)
        assert str(err) == "bad (line 3, column 7)"
        assert err.line == 3

    def test_message_without_location(self) -> None:
        assert str(StylesheetParseError("bad")) == "bad"
