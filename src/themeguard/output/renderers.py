"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer. Failed checks
render their error line followed by the findings that caused it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from themeguard.output.console import create_console, get_output, style_for_property

if TYPE_CHECKING:
    from rich.console import Console

    from themeguard.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        _status_line(console, result)
    else:
        _render_error(result, console, verbose=verbose)
    renderer = _OP_RENDERERS.get(result.op, _render_generic)
    renderer(result, console, verbose=verbose)
    if verbose:
        _render_meta(console, result)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op == "compile":
        return str(result.data.get("css", "")).rstrip("\n")
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="tg.ok")
    op = Text(f"  {result.op}", style="tg.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    line = Text(f"  {key}: ", style="tg.key")
    line.append(str(value))
    console.print(line)


def _name_list(console: Console, key: str, names: list[str]) -> None:
    """Print a labelled list of selectors or properties, one per line."""
    if not names:
        return
    console.print(Text(f"  {key}:", style="tg.key"))
    for name in names:
        style = "tg.selector" if key == "violations" else style_for_property(name)
        console.print(Text(f"    {name}", style=style))


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="tg.error")
    op = Text(f"  {result.op}", style="tg.op")
    console.print(label, op, Text(" — "), Text(msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(Text(f"    {k}: {v}"))


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    style = "bold red" if duration > 1000 else "yellow" if duration > 100 else "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += f"  ({', '.join(f'{k}={v}' for k, v in annotations.items())})"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Op renderers ──────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    for key, value in result.data.items():
        _field(console, key, value)


def _render_compile(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    if not result.ok:
        return
    _field(console, "rules", result.data.get("rule_count", 0))
    console.print()
    console.print(Text(str(result.data.get("css", "")).rstrip("\n")))


def _render_extract(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    rules = result.data.get("rules", [])
    if not result.ok:
        return
    _field(console, "count", len(rules))
    if not rules:
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Selector", style="tg.selector")
    table.add_column("Within", style="dim")
    table.add_column("Decls", justify="right")
    for idx, rule in enumerate(rules, start=1):
        table.add_row(
            str(idx),
            rule["selector"],
            " > ".join(rule.get("ancestors", [])),
            str(len(rule.get("declarations", []))),
        )
    console.print(table)

    if verbose:
        for rule in rules:
            console.print(Text(f"  {rule['selector']}", style="tg.selector"))
            for decl in rule.get("declarations", []):
                line = Text(f"    {decl['property']}", style=style_for_property(decl["property"]))
                line.append(f": {decl['value']}")
                console.print(line)


def _render_scope(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    if not data:
        return
    _field(console, "expected", data.get("expected"))
    _field(console, "rules", data.get("rule_count", 0))
    if result.ok:
        return
    _name_list(console, "violations", data.get("violations", []))


def _render_variables(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    if not data:
        return
    _field(console, "declarations", data.get("declaration_count", 0))
    _name_list(console, "non_variable", list(dict.fromkeys(data.get("non_variable", []))))


def _render_dimensions(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    if not data:
        return
    groups: dict[str, int] = data.get("groups", {})
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Dimension", style="tg.selector")
    table.add_column("Tokens", justify="right", style="tg.count")
    for label, count in groups.items():
        table.add_row(label, str(count))
    console.print(table)

    for pair in data.get("pairs", []):
        first, second = pair["dimensions"]
        console.print(Text(f"  {first} ∩ {second}:", style="tg.error"))
        for prop in pair["properties"]:
            console.print(Text(f"    {prop}", style=style_for_property(prop)))


def _render_all(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    checks: dict[str, Any] = result.data.get("checks", {})
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Check", style="tg.op")
    table.add_column("Status")
    table.add_column("Detail")
    for op, outcome in checks.items():
        status = Text("OK", style="tg.ok") if outcome["ok"] else Text("FAIL", style="tg.error")
        detail = outcome["error"]["message"] if outcome.get("error") else ""
        table.add_row(op, status, detail)
    console.print(table)


_OP_RENDERERS = {
    "compile": _render_compile,
    "extract": _render_extract,
    "check_scope": _render_scope,
    "check_variables": _render_variables,
    "check_dimensions": _render_dimensions,
    "check_all": _render_all,
}
