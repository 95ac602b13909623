"""Error-tolerant parser and pretty printer for Python 2.4 to 3.0 source."""

from lenientpy.format import PrettyPrinterPrefs, pretty_print
from lenientpy.grammar import LATEST_GRAMMAR_VERSION, GrammarContractError, GrammarVersion, grammar_version_from_str
from lenientpy.parser import DocumentSnapshot, ParseOptions, ParseResult, ParseSession, parse, reparse

__all__ = [
    "LATEST_GRAMMAR_VERSION",
    "DocumentSnapshot",
    "GrammarContractError",
    "GrammarVersion",
    "ParseOptions",
    "ParseResult",
    "ParseSession",
    "PrettyPrinterPrefs",
    "grammar_version_from_str",
    "parse",
    "pretty_print",
    "reparse",
]
