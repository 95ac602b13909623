"""Recovery strategies applied when a production fails to match.

Each recoverable error kind maps to one strategy in `DECISION_TABLE`. A
strategy may reposition the token stream, splice in a synthetic token, or
simply leave the decision to the calling production; in every case the
error is recorded first.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from lenientpy.diagnostics import ParseError, ParseErrorKind
from lenientpy.lexer import CLOSING_BRACKETS, MISSING_NAME, OPENING_BRACKETS, Token, TokenKind
from lenientpy.parser.options import ParseOptions
from lenientpy.parser.token_stream import TokenStream

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RecoveryOutcome:
    """What a strategy did, so the calling production can continue.

    `skipped` tokens were passed over by a forward resynchronization and must
    be owned by the node under construction. `empty_suite` asks the caller to
    fold the block away; `escalate` means the strategy gave up and the
    enclosing production should fail softly too.
    """

    error: ParseError
    skipped: tuple[Token, ...] = ()
    synthetic: Token | None = None
    empty_suite: bool = False
    escalate: bool = False
    resumed: bool = False


type RecoveryStrategy = Callable[[RecoveryEngine, ParseError, frozenset[TokenKind]], RecoveryOutcome]


class RecoveryEngine:
    """Records parse errors and applies the matching recovery strategy."""

    def __init__(self, stream: TokenStream, options: ParseOptions | None = None) -> None:
        self._stream = stream
        self._options = options or ParseOptions()
        self._errors: list[ParseError] = []

    @property
    def stream(self) -> TokenStream:
        return self._stream

    @property
    def options(self) -> ParseOptions:
        return self._options

    @property
    def errors(self) -> list[ParseError]:
        return self._errors

    @property
    def first_error(self) -> ParseError | None:
        return self._errors[0] if self._errors else None

    def record(self, kind: ParseErrorKind, message: str | None = None, *, token: Token | None = None) -> ParseError:
        error = ParseError.new(kind, token or self._stream.current, message)
        self._errors.append(error)
        return error

    def recover(
        self,
        kind: ParseErrorKind,
        message: str | None = None,
        *,
        closers: frozenset[TokenKind] = frozenset(),
    ) -> RecoveryOutcome:
        error = self.record(kind, message)
        outcome = DECISION_TABLE[kind](self, error, closers)
        if self._options.trace_recovery:
            self._trace(outcome)
        return outcome

    def truncate(self, length: int) -> None:
        """Drop errors recorded after a parser checkpoint that was rewound."""
        del self._errors[length:]

    def following(self, token: Token) -> Token | None:
        """Next non-comment token after `token`."""
        candidate = self._stream.next_token(token)
        while candidate is not None and candidate.kind == TokenKind.COMMENT:
            candidate = self._stream.next_token(candidate)
        return candidate

    def preceding(self, token: Token) -> Token | None:
        """Previous non-comment token before `token`."""
        candidate = self._stream.previous_token(token)
        while candidate is not None and candidate.kind == TokenKind.COMMENT:
            candidate = self._stream.previous_token(candidate)
        return candidate

    def _trace(self, outcome: RecoveryOutcome) -> None:
        token = outcome.error.token
        before = self.preceding(token)
        after = self.following(token)
        logger.debug(
            "recovered %s at %d:%d: %s | context %r [%r] %r | skipped=%d synthetic=%s empty_suite=%s escalate=%s",
            outcome.error.kind.value,
            token.line,
            token.column,
            outcome.error.message,
            before.text if before is not None else None,
            token.text,
            after.text if after is not None else None,
            len(outcome.skipped),
            outcome.synthetic is not None,
            outcome.empty_suite,
            outcome.escalate,
        )


def _continue_without_indent(engine: RecoveryEngine, error: ParseError, _: frozenset[TokenKind]) -> RecoveryOutcome:
    # the suite goes on to its statements as if the INDENT had been there
    return RecoveryOutcome(error=error)


def _fold_empty_suite(engine: RecoveryEngine, error: ParseError, _: frozenset[TokenKind]) -> RecoveryOutcome:
    return RecoveryOutcome(error=error, empty_suite=True)


def _resync_at_dedent(engine: RecoveryEngine, error: ParseError, _: frozenset[TokenKind]) -> RecoveryOutcome:
    token: Token | None = engine.stream.current
    level = 0
    skipped: list[Token] = []
    for _step in range(engine.options.dedent_search_budget):
        if token is None or token.kind == TokenKind.EOF:
            break
        if token.kind == TokenKind.DEDENT:
            if level == 0:
                engine.stream.rewind_to(token)
                return RecoveryOutcome(error=error, skipped=tuple(skipped), resumed=True)
            level -= 1
        elif token.kind == TokenKind.INDENT:
            level += 1
        skipped.append(token)
        token = engine.following(token)
    return RecoveryOutcome(error=error, escalate=True)


def _synthesize_name(engine: RecoveryEngine, error: ParseError, _: frozenset[TokenKind]) -> RecoveryOutcome:
    stream = engine.stream
    synthetic = stream.insert_synthetic(stream.previous_token(stream.current), TokenKind.NAME, MISSING_NAME)
    return RecoveryOutcome(error=error, synthetic=synthetic)


def _scan_to_closer(engine: RecoveryEngine, error: ParseError, closers: frozenset[TokenKind]) -> RecoveryOutcome:
    wanted = closers or frozenset({TokenKind.RPAR})
    token: Token | None = engine.stream.current
    depth = 0
    skipped: list[Token] = []
    while token is not None and token.kind not in (TokenKind.NEWLINE, TokenKind.EOF):
        if depth == 0 and token.kind in wanted:
            engine.stream.rewind_to(token)
            return RecoveryOutcome(error=error, skipped=tuple(skipped), resumed=True)
        if token.kind in OPENING_BRACKETS:
            depth += 1
        elif token.kind in CLOSING_BRACKETS:
            depth = max(0, depth - 1)
        skipped.append(token)
        token = engine.following(token)
    return RecoveryOutcome(error=error)


def _record_only(engine: RecoveryEngine, error: ParseError, _: frozenset[TokenKind]) -> RecoveryOutcome:
    return RecoveryOutcome(error=error)


DECISION_TABLE: Final[Mapping[ParseErrorKind, RecoveryStrategy]] = MappingProxyType(
    {
        ParseErrorKind.INDENT_EXPECTED: _continue_without_indent,
        ParseErrorKind.EMPTY_SUITE_DETECTED: _fold_empty_suite,
        ParseErrorKind.DEDENT_EXPECTED: _resync_at_dedent,
        ParseErrorKind.NAME_EXPECTED: _synthesize_name,
        ParseErrorKind.UNMATCHED_PAREN_NEARBY: _scan_to_closer,
        ParseErrorKind.STATEMENT_MALFORMED: _record_only,
        ParseErrorKind.COMPOUND_STATEMENT_MALFORMED: _record_only,
        ParseErrorKind.NEWLINE_EXPECTED: _record_only,
        ParseErrorKind.EOF_EXPECTED: _record_only,
        ParseErrorKind.DICT_VALUE_MISSING: _record_only,
        ParseErrorKind.SUITE_MATCH_FAILED: _record_only,
    }
)
