"""Recursive-descent parser core."""

from collections.abc import Iterable
from dataclasses import dataclass

from lenientpy.ast import Node
from lenientpy.diagnostics import ParseError, ParseErrorKind
from lenientpy.grammar import Grammar, GrammarFeatures
from lenientpy.lexer import Token, TokenKind
from lenientpy.parser.marker import Marker
from lenientpy.parser.options import ParseOptions
from lenientpy.parser.recovery import RecoveryEngine, RecoveryOutcome
from lenientpy.parser.token_stream import TokenStream, TokenStreamCheckpoint


@dataclass(frozen=True, slots=True)
class ParserCheckpoint:
    stream_checkpoint: TokenStreamCheckpoint
    errors_len: int
    markers_len: int
    collected_len: int
    position: int


@dataclass(slots=True)
class ParserProgress:
    """Detect parser stalls inside list-style loops."""

    _position: int | None = None

    def has_progressed(self, parser: "Parser") -> bool:
        has_progressed = self._position is None or self._position < parser.position
        self._position = parser.position
        return has_progressed


class Parser:
    """Token-consuming core shared by all productions.

    One instance per parse: it owns the token stream cursor, the stack of
    open markers and the recovery engine.
    """

    def __init__(self, stream: TokenStream, options: ParseOptions | None = None) -> None:
        self._stream = stream
        self._grammar = stream.grammar
        self._options = options or ParseOptions()
        self._recovery = RecoveryEngine(stream, self._options)
        self._collectors: list[list[Token]] = []
        self._position = 0

    @property
    def stream(self) -> TokenStream:
        return self._stream

    @property
    def grammar(self) -> Grammar:
        return self._grammar

    @property
    def features(self) -> GrammarFeatures:
        return self._grammar.features

    @property
    def options(self) -> ParseOptions:
        return self._options

    @property
    def recovery(self) -> RecoveryEngine:
        return self._recovery

    @property
    def errors(self) -> list[ParseError]:
        return self._recovery.errors

    @property
    def current(self) -> TokenKind:
        return self._stream.current.kind

    @property
    def current_token(self) -> Token:
        return self._stream.current

    @property
    def position(self) -> int:
        """Number of source tokens consumed so far."""
        return self._position

    def at(self, kind: TokenKind) -> bool:
        return self.current == kind

    def at_set(self, kinds: frozenset[TokenKind] | set[TokenKind]) -> bool:
        return self.current in kinds

    def nth(self, n: int) -> TokenKind:
        return self._stream.peek_kind(n)

    # -------------------------
    # Markers
    # -------------------------

    def start(self) -> Marker:
        self._collectors.append([])
        return Marker(depth=len(self._collectors) - 1, anchor=self._stream.current)

    def close_marker(self, marker: Marker) -> list[Token]:
        if marker.depth != len(self._collectors) - 1:
            raise RuntimeError("Markers must be closed innermost first")
        return self._collectors.pop()

    def collect(self, tokens: Iterable[Token]) -> None:
        self._collectors[-1].extend(tokens)

    def take(self, token: Token) -> Token:
        """Hand a token that is not the current one (a synthetic) to the open marker."""
        self._collectors[-1].append(token)
        return token

    def attach(self, node: Node, token: Token) -> Token:
        """Give a consumed token to an already completed node, outside its span."""
        collector = self._collectors[-1]
        if collector and collector[-1] is token:
            collector.pop()
        else:
            collector.remove(token)
        node.tokens.append(token)
        return token

    # -------------------------
    # Consuming
    # -------------------------

    def bump(self) -> Token:
        token = self._stream.current
        if token.kind == TokenKind.EOF:
            return token
        self._stream.advance()
        self._collectors[-1].append(token)
        self._position += 1
        return token

    def eat(self, kind: TokenKind) -> Token | None:
        if self.current == kind:
            return self.bump()
        return None

    def eat_into(self, node: Node, kind: TokenKind) -> Token | None:
        """Consume `kind` if present and give it to `node`."""
        if self.current != kind:
            return None
        return self.attach(node, self.bump())

    # -------------------------
    # Errors and recovery
    # -------------------------

    def recover(
        self,
        kind: ParseErrorKind,
        message: str | None = None,
        *,
        closers: frozenset[TokenKind] = frozenset(),
    ) -> RecoveryOutcome:
        outcome = self._recovery.recover(kind, message, closers=closers)
        if outcome.skipped:
            self.collect(outcome.skipped)
            self._position += len(outcome.skipped)
        return outcome

    def expect_closer(self, kind: TokenKind, message: str | None = None) -> Token | None:
        """Consume the closing bracket `kind`, scanning ahead for it if needed."""
        if self.at(kind):
            return self.bump()
        outcome = self.recover(ParseErrorKind.UNMATCHED_PAREN_NEARBY, message, closers=frozenset({kind}))
        if outcome.resumed:
            return self.bump()
        return None

    def take_missing_name(self, message: str | None = None) -> Token:
        """Record NAME_EXPECTED and hand the placeholder NAME to the open marker."""
        outcome = self.recover(ParseErrorKind.NAME_EXPECTED, message)
        if outcome.synthetic is None:
            raise RuntimeError("NAME_EXPECTED recovery did not produce a placeholder")
        return self.take(outcome.synthetic)

    def skip_line(self) -> None:
        """Consume tokens up to and including the end of the logical line."""
        while not self.at_set(_LINE_END):
            self.bump()
        self.eat(TokenKind.NEWLINE)

    # -------------------------
    # Checkpoints
    # -------------------------

    def checkpoint(self) -> ParserCheckpoint:
        return ParserCheckpoint(
            stream_checkpoint=self._stream.checkpoint(),
            errors_len=len(self.errors),
            markers_len=len(self._collectors),
            collected_len=len(self._collectors[-1]) if self._collectors else 0,
            position=self._position,
        )

    def rewind(self, checkpoint: ParserCheckpoint) -> None:
        self._stream.rewind(checkpoint.stream_checkpoint)
        self._recovery.truncate(checkpoint.errors_len)
        del self._collectors[checkpoint.markers_len :]
        if self._collectors:
            del self._collectors[-1][checkpoint.collected_len :]
        self._position = checkpoint.position

    def finish(self) -> list[ParseError]:
        if self._collectors:
            raise RuntimeError(f"{len(self._collectors)} marker(s) left open at the end of the parse")
        return self.errors


_LINE_END = frozenset({TokenKind.NEWLINE, TokenKind.EOF, TokenKind.DEDENT})
