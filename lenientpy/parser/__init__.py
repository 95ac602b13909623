"""Parser infrastructure (token stream + recursive-descent parser + recovery)."""

from lenientpy.parser.marker import Marker
from lenientpy.parser.options import DEFAULT_DEDENT_SEARCH_BUDGET, ParseOptions
from lenientpy.parser.parse_lists import ParseNodeList
from lenientpy.parser.parsed_syntax import ParsedSyntax
from lenientpy.parser.parser import Parser, ParserCheckpoint, ParserProgress
from lenientpy.parser.recovery import DECISION_TABLE, RecoveryEngine, RecoveryOutcome
from lenientpy.parser.session import DocumentSnapshot, ParseResult, ParseSession, parse, reparse
from lenientpy.parser.specials import attach_comments
from lenientpy.parser.statements import parse_file_input, parse_statement_list
from lenientpy.parser.token_stream import LazyTokenStream, TokenStream, TokenStreamCheckpoint

__all__ = [
    "DECISION_TABLE",
    "DEFAULT_DEDENT_SEARCH_BUDGET",
    "DocumentSnapshot",
    "LazyTokenStream",
    "Marker",
    "ParseNodeList",
    "ParseOptions",
    "ParseResult",
    "ParseSession",
    "ParsedSyntax",
    "Parser",
    "ParserCheckpoint",
    "ParserProgress",
    "RecoveryEngine",
    "RecoveryOutcome",
    "TokenStream",
    "TokenStreamCheckpoint",
    "attach_comments",
    "parse",
    "parse_file_input",
    "parse_statement_list",
    "reparse",
]
