"""ThemeCheckService — compile a theme fragment and verify its output.

Each check runs its own isolated cycle: wrap the fragment in the
configured preamble, compile, extract rules, verify. Three checks:

* scope      — every rule sits under one selector
* variables  — every declaration is a custom property
* dimensions — base/color/typography/density emit disjoint properties

Checks that find problems return ``ok=False`` with their findings still
in ``data`` so callers can show exactly what leaked.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from themeguard.domain.checks import (
    NestingMode,
    dimension_groups,
    non_variable_properties,
    overlap_matrix,
    scope_violations,
    selector_scope,
)
from themeguard.domain.extract import extract_rules
from themeguard.domain.fragments import dimension_fragment, scoped_fragment, wrap_fragment
from themeguard.domain.rules import Rule, StylesheetParseError
from themeguard.infrastructure.compiler import CompileError
from themeguard.services.base import BaseService
from themeguard.services.result import ServiceError, ServiceResult
from themeguard.services.telemetry import trace_span, traced

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

COMPILE_ERROR = "COMPILE_ERROR"
PARSE_ERROR = "PARSE_ERROR"
INVALID_INPUT = "INVALID_INPUT"
SCOPE_VIOLATION = "SCOPE_VIOLATION"
NON_VARIABLE_PROPERTIES = "NON_VARIABLE_PROPERTIES"
DIMENSION_OVERLAP = "DIMENSION_OVERLAP"
CHECKS_FAILED = "CHECKS_FAILED"


def _exception_result(op: str, exc: Exception) -> ServiceResult:
    if isinstance(exc, CompileError):
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code=COMPILE_ERROR,
                message=str(exc),
                detail={"location": exc.location},
            ),
        )
    if isinstance(exc, StylesheetParseError):
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code=PARSE_ERROR,
                message=str(exc),
                detail={"line": exc.line, "column": exc.column},
            ),
        )
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=INVALID_INPUT, message=str(exc)),
    )


class ThemeCheckService(BaseService):
    """Compile theme fragments and run the structural checks."""

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    def _source(self, fragment: str, *, raw: bool = False) -> str:
        if raw:
            return fragment
        return wrap_fragment(fragment, self.settings.theme.preamble)

    def _compile(self, fragment: str, *, raw: bool = False) -> str:
        with trace_span("compile") as span:
            css = self._workspace.compile(self._source(fragment, raw=raw))
            if span:
                span.annotate("bytes", len(css))
        return css

    def _extract(self, css: str) -> list[Rule]:
        with trace_span("extract") as span:
            rules = extract_rules(css)
            if span:
                span.annotate("rules", len(rules))
        return rules

    def _rules(self, fragment: str, css: str | None) -> list[Rule]:
        """Extract rules from *css* when given, else compile *fragment*."""
        if css is None:
            css = self._compile(fragment)
        return self._extract(css)

    # ------------------------------------------------------------------
    # Compile / extract
    # ------------------------------------------------------------------

    @traced
    def transpile(self, fragment: str, *, raw: bool = False) -> ServiceResult:
        """Compile a fragment (wrapped in the preamble unless *raw*)."""
        try:
            css = self._compile(fragment, raw=raw)
            rules = self._extract(css)
        except (CompileError, StylesheetParseError) as exc:
            return _exception_result("compile", exc)
        return ServiceResult(
            ok=True,
            op="compile",
            data={"css": css, "rule_count": len(rules)},
        )

    @traced
    def extract(self, css: str) -> ServiceResult:
        """Parse already-compiled CSS into rule records."""
        try:
            rules = self._extract(css)
        except StylesheetParseError as exc:
            return _exception_result("extract", exc)
        return ServiceResult(
            ok=True,
            op="extract",
            data={"rules": [rule.to_dict() for rule in rules], "count": len(rules)},
        )

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    @traced
    def check_scope(
        self,
        fragment: str | None = None,
        *,
        selector: str | None = None,
        css: str | None = None,
    ) -> ServiceResult:
        """Verify every emitted rule is nested under *selector*.

        The default fragment includes the aggregate mixin and every
        dimension mixin inside one ``selector { ... }`` block.
        """
        op = "check_scope"
        theme = self.settings.theme
        expected = selector or theme.selector
        try:
            if fragment is None and css is None:
                mixins = [theme.all_mixin, *theme.dimensions.values()]
                fragment = scoped_fragment(expected, mixins, theme.theme_var)
            rules = self._rules(fragment or "", css)
        except (CompileError, StylesheetParseError, ValueError) as exc:
            return _exception_result(op, exc)

        with trace_span("verify"):
            selectors = selector_scope(rules)
            violations = scope_violations(rules, expected)
        data = {
            "expected": expected,
            "selectors": selectors,
            "violations": violations,
            "rule_count": len(rules),
        }
        if selectors == [expected]:
            return ServiceResult(ok=True, op=op, data=data)

        if not selectors:
            message = f"No rules emitted under '{expected}'"
        else:
            message = f"Rules emitted outside '{expected}': {', '.join(violations)}"
        return ServiceResult(
            ok=False,
            op=op,
            data=data,
            error=ServiceError(
                code=SCOPE_VIOLATION,
                message=message,
                detail={"violations": violations},
            ),
        )

    @traced
    def check_variables(
        self,
        fragment: str | None = None,
        *,
        selector: str | None = None,
        css: str | None = None,
    ) -> ServiceResult:
        """Verify every declared property is a custom property (``--*``)."""
        op = "check_variables"
        theme = self.settings.theme
        try:
            if fragment is None and css is None:
                fragment = scoped_fragment(
                    selector or theme.selector, [theme.all_mixin], theme.theme_var
                )
            rules = self._rules(fragment or "", css)
        except (CompileError, StylesheetParseError, ValueError) as exc:
            return _exception_result(op, exc)

        with trace_span("verify"):
            offending = non_variable_properties(rules)
        declaration_count = sum(len(rule.declarations) for rule in rules)
        data = {"non_variable": offending, "declaration_count": declaration_count}
        if not offending:
            return ServiceResult(ok=True, op=op, data=data)

        distinct = list(dict.fromkeys(offending))
        return ServiceResult(
            ok=False,
            op=op,
            data=data,
            error=ServiceError(
                code=NON_VARIABLE_PROPERTIES,
                message=(
                    "Literal properties emitted instead of custom properties: "
                    + ", ".join(distinct)
                ),
                detail={"properties": distinct},
            ),
        )

    @traced
    def check_dimensions(
        self,
        fragment: str | None = None,
        *,
        css: str | None = None,
        nesting: NestingMode | None = None,
        dimensions: Mapping[str, str] | None = None,
    ) -> ServiceResult:
        """Verify no custom property is emitted by more than one dimension.

        The default fragment wraps each dimension mixin in a block named
        after the dimension, so each rule's selector is its dimension label.
        """
        op = "check_dimensions"
        theme = self.settings.theme
        mode: NestingMode = nesting or theme.nesting
        configured = dict(dimensions if dimensions is not None else theme.dimensions)
        generated = fragment is None and css is None
        try:
            if generated:
                fragment = dimension_fragment(configured, theme.theme_var)
            rules = self._rules(fragment or "", css)
            with trace_span("verify") as span:
                groups = dimension_groups(rules, nesting=mode)
                pairs = overlap_matrix(groups)
                if span:
                    span.annotate("groups", len(groups))
        except (CompileError, StylesheetParseError, ValueError) as exc:
            return _exception_result(op, exc)

        overlap = sorted({prop for shared in pairs.values() for prop in shared})
        warnings: list[str] = []
        if generated:
            sizes = {group.label: len(group) for group in groups}
            for label in configured:
                if not sizes.get(label):
                    warnings.append(f"Dimension '{label}' emitted no declarations")

        data: dict[str, Any] = {
            "groups": {group.label: len(group) for group in groups},
            "overlap": overlap,
            "pairs": [
                {"dimensions": [first, second], "properties": props}
                for (first, second), props in pairs.items()
            ],
            "nesting": mode,
        }
        if not overlap:
            return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

        return ServiceResult(
            ok=False,
            op=op,
            data=data,
            warnings=warnings,
            error=ServiceError(
                code=DIMENSION_OVERLAP,
                message=f"{len(overlap)} token(s) emitted by more than one dimension. {theme.hint}",
                detail={"overlap": overlap, "hint": theme.hint},
            ),
        )

    @traced
    def check_all(
        self,
        fragment: str | None = None,
        *,
        selector: str | None = None,
        css: str | None = None,
        nesting: NestingMode | None = None,
    ) -> ServiceResult:
        """Run every check, each with its own compile cycle."""
        results = [
            self.check_scope(fragment, selector=selector, css=css),
            self.check_variables(fragment, selector=selector, css=css),
            self.check_dimensions(fragment, css=css, nesting=nesting),
        ]
        failed = [r.op for r in results if not r.ok]
        data = {
            "checks": {
                r.op: {
                    "ok": r.ok,
                    "data": r.data,
                    "error": r.error.model_dump() if r.error else None,
                }
                for r in results
            },
            "passed": len(results) - len(failed),
            "failed": failed,
        }
        warnings = [w for r in results for w in r.warnings]
        if not failed:
            return ServiceResult(ok=True, op="check_all", data=data, warnings=warnings)

        messages = "; ".join(r.error.message for r in results if r.error)
        return ServiceResult(
            ok=False,
            op="check_all",
            data=data,
            warnings=warnings,
            error=ServiceError(
                code=CHECKS_FAILED,
                message=f"{len(failed)} of {len(results)} checks failed: {messages}",
                detail={"failed": failed},
            ),
        )
