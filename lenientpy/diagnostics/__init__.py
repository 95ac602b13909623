"""Diagnostics."""

from lenientpy.diagnostics.codes import (
    PARSER_COMPOUND_STATEMENT_MALFORMED,
    PARSER_DEDENT_EXPECTED,
    PARSER_DICT_VALUE_MISSING,
    PARSER_EMPTY_SUITE_DETECTED,
    PARSER_EOF_EXPECTED,
    PARSER_INDENT_EXPECTED,
    PARSER_NAME_EXPECTED,
    PARSER_NEWLINE_EXPECTED,
    PARSER_STATEMENT_MALFORMED,
    PARSER_SUITE_MATCH_FAILED,
    PARSER_UNMATCHED_PAREN_NEARBY,
    DiagnosticSpec,
    ParseErrorKind,
    Severity,
    spec_for,
)
from lenientpy.diagnostics.diagnostic import ParseError
from lenientpy.diagnostics.report import format_errors, has_errors

__all__ = [
    "PARSER_COMPOUND_STATEMENT_MALFORMED",
    "PARSER_DEDENT_EXPECTED",
    "PARSER_DICT_VALUE_MISSING",
    "PARSER_EMPTY_SUITE_DETECTED",
    "PARSER_EOF_EXPECTED",
    "PARSER_INDENT_EXPECTED",
    "PARSER_NAME_EXPECTED",
    "PARSER_NEWLINE_EXPECTED",
    "PARSER_STATEMENT_MALFORMED",
    "PARSER_SUITE_MATCH_FAILED",
    "PARSER_UNMATCHED_PAREN_NEARBY",
    "DiagnosticSpec",
    "ParseError",
    "ParseErrorKind",
    "Severity",
    "format_errors",
    "has_errors",
    "spec_for",
]
