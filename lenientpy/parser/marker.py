"""Markers that collect a node's own tokens while it is being parsed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from lenientpy.ast import Node, compute_span
from lenientpy.lexer import Token

if TYPE_CHECKING:
    from lenientpy.parser.parser import Parser


@dataclass(slots=True)
class Marker:
    """An open node. Tokens bumped while it is innermost become its own.

    Markers nest strictly: the innermost one must be completed or abandoned
    before its parent.
    """

    depth: int
    anchor: Token

    def complete[N: Node](self, parser: Parser, node_type: type[N], **fields: Any) -> N:
        tokens = parser.close_marker(self)
        node = node_type(tokens=tokens, **fields)
        compute_span(node, self.anchor)
        return node

    def merge_into(self, parser: Parser, node: Node) -> Node:
        """Close and hand the collected tokens (grouping parentheses) to `node`.

        The node's span is left as is.
        """
        node.tokens.extend(parser.close_marker(self))
        return node

    def abandon(self, parser: Parser) -> None:
        """Close without building a node; collected tokens move to the parent."""
        tokens = parser.close_marker(self)
        parser.collect(tokens)
