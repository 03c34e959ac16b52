"""Tests for telemetry primitives: Span, trace_span, @traced."""

from __future__ import annotations

import time
from collections.abc import Generator

import pytest

from themeguard.services.result import ServiceResult
from themeguard.services.telemetry import (
    Span,
    _current_span,
    disable_telemetry,
    enable_telemetry,
    get_current_span,
    trace_span,
    traced,
)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """Ensure clean telemetry state for every test."""
    yield
    disable_telemetry()
    _current_span.set(None)


# ── Span ─────────────────────────────────────────────────────────────


class TestSpan:
    def test_duration_before_end_is_zero(self) -> None:
        assert Span(name="test").duration_ms == 0.0

    def test_duration_after_end(self) -> None:
        span = Span(name="test")
        time.sleep(0.005)
        span.end()
        assert span.duration_ms > 0

    def test_to_dict_minimal(self) -> None:
        span = Span(name="root")
        span.end()
        d = span.to_dict()
        assert d["name"] == "root"
        assert "duration_ms" in d
        assert "children" not in d
        assert "annotations" not in d

    def test_to_dict_with_children(self) -> None:
        root = Span(name="root")
        root.children.append(Span(name="compile"))
        d = root.to_dict()
        assert d["children"][0]["name"] == "compile"

    def test_annotate(self) -> None:
        span = Span(name="extract")
        span.annotate("rules", 4)
        assert span.to_dict()["annotations"] == {"rules": 4}


# ── trace_span ───────────────────────────────────────────────────────


class TestTraceSpan:
    def test_disabled_yields_none(self) -> None:
        with trace_span("compile") as span:
            assert span is None

    def test_no_root_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("compile") as span:
            assert span is None

    def test_enabled_with_root(self) -> None:
        enable_telemetry()
        root = Span(name="root")
        token = _current_span.set(root)
        try:
            with trace_span("compile") as span:
                assert span is not None
                assert get_current_span() is span
            assert root.children[0].end_time is not None
            assert get_current_span() is root
        finally:
            _current_span.reset(token)


# ── @traced ──────────────────────────────────────────────────────────


@traced
def _check() -> ServiceResult:
    with trace_span("compile"):
        pass
    with trace_span("verify"):
        pass
    return ServiceResult(ok=True, op="check", meta={"existing": 1})


@traced
def _plain() -> int:
    return 7


class TestTraced:
    def test_disabled_leaves_result_alone(self) -> None:
        result = _check()
        assert result.meta == {"existing": 1}

    def test_enabled_merges_span_tree(self) -> None:
        enable_telemetry()
        result = _check()
        assert result.meta is not None
        assert result.meta["existing"] == 1
        tree = result.meta["telemetry"]
        assert tree["name"].endswith("_check")
        assert [c["name"] for c in tree["children"]] == ["compile", "verify"]

    def test_non_result_return_passes_through(self) -> None:
        enable_telemetry()
        assert _plain() == 7

    def test_nested_traced_calls_attach_to_parent(self) -> None:
        @traced
        def outer() -> ServiceResult:
            _check()
            return ServiceResult(ok=True, op="outer")

        enable_telemetry()
        result = outer()
        assert result.meta is not None
        children = result.meta["telemetry"]["children"]
        assert len(children) == 1
        assert children[0]["name"].endswith("_check")

    def test_current_span_reset_after_call(self) -> None:
        enable_telemetry()
        _check()
        assert get_current_span() is None
