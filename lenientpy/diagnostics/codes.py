"""Diagnostic codes and messages."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Final, Literal

Severity = Literal["error", "warning"]


class ParseErrorKind(StrEnum):
    """Every recoverable condition the parser can diagnose."""

    INDENT_EXPECTED = "indent_expected"
    DEDENT_EXPECTED = "dedent_expected"
    NAME_EXPECTED = "name_expected"
    UNMATCHED_PAREN_NEARBY = "unmatched_paren_nearby"
    STATEMENT_MALFORMED = "statement_malformed"
    COMPOUND_STATEMENT_MALFORMED = "compound_statement_malformed"
    NEWLINE_EXPECTED = "newline_expected"
    EOF_EXPECTED = "eof_expected"
    DICT_VALUE_MISSING = "dict_value_missing"
    SUITE_MATCH_FAILED = "suite_match_failed"
    EMPTY_SUITE_DETECTED = "empty_suite_detected"


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None


PARSER_INDENT_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_INDENT_EXPECTED",
    message="Expected an indented block.",
    hint="Indent the statements that belong to this block.",
    category="parser",
)

PARSER_DEDENT_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_DEDENT_EXPECTED",
    message="Expected the end of the indented block.",
    category="parser",
)

PARSER_NAME_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_NAME_EXPECTED",
    message="Expected a name.",
    category="parser",
)

PARSER_UNMATCHED_PAREN_NEARBY: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNMATCHED_PAREN_NEARBY",
    message="Expected a closing bracket.",
    hint="Check that every opening bracket is closed on the same logical line.",
    category="parser",
)

PARSER_STATEMENT_MALFORMED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_STATEMENT_MALFORMED",
    message="Invalid statement.",
    category="parser",
)

PARSER_COMPOUND_STATEMENT_MALFORMED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_COMPOUND_STATEMENT_MALFORMED",
    message="Invalid compound statement header.",
    category="parser",
)

PARSER_NEWLINE_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_NEWLINE_EXPECTED",
    message="Expected the end of the statement.",
    hint="Put each statement on its own line or separate them with `;`.",
    category="parser",
)

PARSER_EOF_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EOF_EXPECTED",
    message="Unexpected token at module level.",
    category="parser",
)

PARSER_DICT_VALUE_MISSING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_DICT_VALUE_MISSING",
    message="Dictionary key has no value.",
    hint="Write entries as `key: value`.",
    category="parser",
)

PARSER_SUITE_MATCH_FAILED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_SUITE_MATCH_FAILED",
    message="Expected a statement or a newline after `:`.",
    category="parser",
)

PARSER_EMPTY_SUITE_DETECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EMPTY_SUITE_DETECTED",
    message="Block has no statements.",
    hint="Add `pass` if the block is meant to be empty.",
    category="parser",
)

SPECS_BY_KIND: Final[Mapping[ParseErrorKind, DiagnosticSpec]] = MappingProxyType(
    {
        ParseErrorKind.INDENT_EXPECTED: PARSER_INDENT_EXPECTED,
        ParseErrorKind.DEDENT_EXPECTED: PARSER_DEDENT_EXPECTED,
        ParseErrorKind.NAME_EXPECTED: PARSER_NAME_EXPECTED,
        ParseErrorKind.UNMATCHED_PAREN_NEARBY: PARSER_UNMATCHED_PAREN_NEARBY,
        ParseErrorKind.STATEMENT_MALFORMED: PARSER_STATEMENT_MALFORMED,
        ParseErrorKind.COMPOUND_STATEMENT_MALFORMED: PARSER_COMPOUND_STATEMENT_MALFORMED,
        ParseErrorKind.NEWLINE_EXPECTED: PARSER_NEWLINE_EXPECTED,
        ParseErrorKind.EOF_EXPECTED: PARSER_EOF_EXPECTED,
        ParseErrorKind.DICT_VALUE_MISSING: PARSER_DICT_VALUE_MISSING,
        ParseErrorKind.SUITE_MATCH_FAILED: PARSER_SUITE_MATCH_FAILED,
        ParseErrorKind.EMPTY_SUITE_DETECTED: PARSER_EMPTY_SUITE_DETECTED,
    }
)


def spec_for(kind: ParseErrorKind) -> DiagnosticSpec:
    return SPECS_BY_KIND[kind]
