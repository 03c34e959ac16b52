"""Declaration extractor — compiled CSS text to rule records.

Pure function over tinycss2's parse tree. Rules come out in document
order; a rule always precedes the rules nested inside it.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import tinycss2

from themeguard.domain.rules import Declaration, Rule, StylesheetParseError


def extract_rules(css: str) -> list[Rule]:
    """Parse compiled style-sheet output into an ordered list of rules.

    Nested qualified rules and rules inside block at-rules (``@media``,
    ``@supports``) are captured with their enclosing selectors in
    ``Rule.ancestors``. At-rules that hold declarations directly, such as
    ``@font-face``, become a rule named after the at-rule header.
    Statement at-rules (``@charset``, ``@import``) produce nothing.

    Raises:
        StylesheetParseError: The text is not valid rule/declaration
            structure.
    """
    nodes = tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True)
    rules: list[Rule] = []
    _walk(nodes, (), rules)
    return rules


def _walk(nodes: Iterable[Any], ancestors: tuple[str, ...], out: list[Rule]) -> None:
    for node in nodes:
        if node.type == "error":
            _raise_node_error(node)
        elif node.type == "qualified-rule":
            selector = tinycss2.serialize(node.prelude).strip()
            if not selector:
                raise StylesheetParseError(
                    "Empty selector",
                    line=node.source_line,
                    column=node.source_column,
                )
            _consume_block(selector, node.content, ancestors, out, keep_empty=True)
        elif node.type == "at-rule":
            if node.content is None:
                continue
            _consume_block(_at_rule_header(node), node.content, ancestors, out, keep_empty=False)
        else:
            raise StylesheetParseError(
                f"Unexpected {node.type} outside a rule block",
                line=getattr(node, "source_line", None),
                column=getattr(node, "source_column", None),
            )


def _consume_block(
    name: str,
    content: list[Any],
    ancestors: tuple[str, ...],
    out: list[Rule],
    *,
    keep_empty: bool,
) -> None:
    children = tinycss2.parse_blocks_contents(content, skip_comments=True, skip_whitespace=True)
    declarations: list[Declaration] = []
    nested: list[Any] = []
    for child in children:
        if child.type == "error":
            _raise_node_error(child)
        elif child.type == "declaration":
            declarations.append(
                Declaration(
                    property=child.name,
                    value=tinycss2.serialize(child.value).strip(),
                    important=child.important,
                )
            )
        else:
            nested.append(child)

    if declarations or keep_empty:
        out.append(Rule(selector=name, declarations=tuple(declarations), ancestors=ancestors))
    _walk(nested, (*ancestors, name), out)


def _at_rule_header(node: Any) -> str:
    prelude = tinycss2.serialize(node.prelude).strip()
    return f"@{node.at_keyword} {prelude}" if prelude else f"@{node.at_keyword}"


def _raise_node_error(node: Any) -> None:
    raise StylesheetParseError(
        node.message,
        line=node.source_line,
        column=node.source_column,
    )
