"""Index-addressed token arena consumed by the parser."""

from collections.abc import Iterator
from dataclasses import dataclass

from lenientpy.grammar import Grammar
from lenientpy.lexer import Lexer, Token, TokenFlags, TokenKind
from lenientpy.text import TextRange


@dataclass(frozen=True, slots=True)
class TokenStreamCheckpoint:
    position: int


class TokenStream:
    """Doubly linked token sequence stored in an arena.

    Tokens are never removed: recovery may only link synthetic tokens in.
    The current position is an arena index, so rewinding is O(1). Comments
    stay in the sequence but `current`, `advance` and `peek_kind` skip them.

    This implementation lexes the whole input when constructed.
    """

    def __init__(self, lexer: Lexer) -> None:
        self._lexer = lexer
        self._grammar = lexer.grammar
        self._arena: list[Token] = []
        self._head = -1
        self._last = -1
        self._exhausted = False
        self._prime()
        self._current = self._skip_comments(self._head)

    @property
    def grammar(self) -> Grammar:
        return self._grammar

    @property
    def source(self) -> str:
        return self._lexer.source

    @property
    def current(self) -> Token:
        return self._arena[self._current]

    @property
    def position(self) -> int:
        return self._current

    def checkpoint(self) -> TokenStreamCheckpoint:
        return TokenStreamCheckpoint(position=self._current)

    def rewind(self, checkpoint: TokenStreamCheckpoint) -> None:
        self._current = checkpoint.position

    def rewind_to(self, token: Token) -> None:
        """Make `token` (or the first significant token after it) current."""
        if not (0 <= token.index < len(self._arena)) or self._arena[token.index] is not token:
            raise ValueError(f"{token!r} does not belong to this token stream")
        self._current = self._skip_comments(token.index)

    def advance(self) -> Token:
        """Consume the current token; EOF is never consumed past."""
        token = self.current
        if token.kind != TokenKind.EOF:
            self._current = self._skip_comments(self._next_index(self._current))
        return token

    def peek(self, offset: int = 1) -> Token:
        index = self._current
        for _ in range(offset):
            if self._arena[index].kind == TokenKind.EOF:
                break
            index = self._skip_comments(self._next_index(index))
        return self._arena[index]

    def peek_kind(self, offset: int = 1) -> TokenKind:
        return self.peek(offset).kind

    def next_token(self, token: Token) -> Token | None:
        """Raw successor in document order, comments included."""
        index = self._next_index(token.index)
        return self._arena[index] if index != -1 else None

    def previous_token(self, token: Token) -> Token | None:
        """Raw predecessor in document order, comments included."""
        return self._arena[token.prev] if token.prev != -1 else None

    def insert_synthetic(self, after: Token | None, kind: TokenKind, text: str) -> Token:
        """Link a new zero-width token right after `after`, or at the head when `after` is None.

        The new token takes over the prefix of the token it lands in front
        of, so it prints where the missing token would have been written.
        """
        following = self._arena[self._head] if after is None else self.next_token(after)
        if following is None:
            raise ValueError("Cannot link a token after EOF")
        offset = following.range.start.value
        token = self._synthetic(kind, text, offset, following.line, following.column, following.prefix)
        token.flags |= following.flags & TokenFlags.PRECEDING_LINE_BREAK
        following.prefix = ""
        self._link_after(after, token)
        return token

    def _synthetic(self, kind: TokenKind, text: str, offset: int, line: int, column: int, prefix: str) -> Token:
        self._grammar.require(kind)
        token = Token(
            kind=kind,
            text=text,
            prefix=prefix,
            range=TextRange(offset, offset),
            line=line,
            column=column,
            end_line=line,
            end_column=column,
            flags=TokenFlags.SYNTHETIC,
            index=len(self._arena),
        )
        self._arena.append(token)
        return token

    def _link_after(self, after: Token | None, token: Token) -> None:
        if after is None:
            token.next = self._head
            if self._head != -1:
                self._arena[self._head].prev = token.index
            self._head = token.index
        else:
            token.prev = after.index
            token.next = after.next
            if after.next != -1:
                self._arena[after.next].prev = token.index
            after.next = token.index
        if token.next == -1:
            self._last = token.index

    def iter_tokens(self) -> Iterator[Token]:
        """Every token in document order, comments and synthetic tokens included."""
        index = self._head
        while index != -1:
            yield self._arena[index]
            index = self._next_index(index)

    def finish(self) -> list[Token]:
        """Assign document order to every token and return them in that order."""
        tokens = list(self.iter_tokens())
        for order, token in enumerate(tokens):
            token.order = order
        return tokens

    # -------------------------
    # Arena maintenance
    # -------------------------

    def _prime(self) -> None:
        while self._pull():
            pass

    def _pull(self) -> bool:
        if self._exhausted:
            return False
        token = self._lexer.next_token()
        self._grammar.require(token.kind)
        token.index = len(self._arena)
        self._arena.append(token)
        if self._last == -1:
            self._head = token.index
        else:
            token.prev = self._last
            self._arena[self._last].next = token.index
        self._last = token.index
        if token.kind == TokenKind.EOF:
            self._exhausted = True
        return True

    def _next_index(self, index: int) -> int:
        token = self._arena[index]
        while token.next == -1 and not self._exhausted and index == self._last:
            self._pull()
        return token.next

    def _skip_comments(self, index: int) -> int:
        while self._arena[index].kind == TokenKind.COMMENT:
            index = self._next_index(index)
        return index


class LazyTokenStream(TokenStream):
    """Token stream that pulls tokens from the lexer only when needed."""

    def _prime(self) -> None:
        self._pull()
