"""Reusable statement-list parse loop."""

from collections.abc import Callable
from dataclasses import dataclass

from lenientpy.ast import AnyNode
from lenientpy.lexer import TokenKind
from lenientpy.parser.parsed_syntax import ParsedSyntax
from lenientpy.parser.parser import Parser, ParserProgress


@dataclass(slots=True)
class ParseNodeList:
    """Non-separated list parser with progress and recovery hooks.

    The loop ends at EOF, at the list end, when recovery reports it cannot
    continue, or when an iteration consumed nothing (a stall).
    """

    is_at_list_end: Callable[[Parser], bool]
    parse_element: Callable[[Parser], ParsedSyntax]
    recover: Callable[[Parser, ParsedSyntax], bool]

    def parse_list(self, parser: Parser) -> list[AnyNode]:
        nodes: list[AnyNode] = []
        progress = ParserProgress()

        while not parser.at(TokenKind.EOF) and not self.is_at_list_end(parser):
            if not progress.has_progressed(parser):
                break
            parsed_element = self.parse_element(parser)
            nodes.extend(parsed_element.nodes)
            if not self.recover(parser, parsed_element):
                break

        return nodes
