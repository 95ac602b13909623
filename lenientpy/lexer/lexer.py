"""Version-aware Python tokenizer."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from lenientpy.lexer.tokens import CLOSING_BRACKETS, OPENING_BRACKETS, Token, TokenFlags, TokenKind
from lenientpy.text import LineIndex, TextRange

if TYPE_CHECKING:
    from lenientpy.grammar import Grammar

_STRING_PREFIX_CHARS = "rRuUbB"
_QUOTES = "'\""
_DIGITS = "0123456789"
_HEX_DIGITS = "0123456789abcdefABCDEF"
_OCT_DIGITS = "01234567"
_BIN_DIGITS = "01"


class Lexer:
    """Pull-based tokenizer producing one `Token` at a time.

    Indentation is tracked with a stack (tabs advance to the next multiple of
    eight). Blank lines, comment-only lines and newlines inside brackets never
    produce NEWLINE tokens; their bytes end up in the next token's prefix.
    INDENT and DEDENT are zero width with an empty prefix.
    """

    def __init__(self, source: str, grammar: Grammar) -> None:
        self._source = source
        self._grammar = grammar
        self._lines = LineIndex(source)
        self._position = 0
        self._prefix_start = 0
        self._indents: list[int] = [0]
        self._depth = 0
        self._at_line_start = True
        self._last_kind: TokenKind | None = None
        self._last_line: int | None = None
        self._pending: deque[Token] = deque()
        self._eof: Token | None = None
        max_len = max((len(op) for op in grammar.operators), default=1)
        self._operator_lengths = tuple(range(max_len, 0, -1))

    @property
    def source(self) -> str:
        return self._source

    @property
    def grammar(self) -> Grammar:
        return self._grammar

    def next_token(self) -> Token:
        """Return the next token; EOF is returned again once reached."""
        while not self._pending:
            if self._eof is not None:
                return self._eof
            self._scan()
        return self._pending.popleft()

    def lex(self) -> list[Token]:
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.kind == TokenKind.EOF:
                return

    # -------------------------
    # Scanning
    # -------------------------

    def _scan(self) -> None:
        source = self._source
        length = len(source)
        while True:
            if self._at_line_start and self._depth == 0:
                column, pos = self._measure_indent(self._position)
                self._position = pos
                if pos >= length:
                    self._finish()
                    return
                char = source[pos]
                if char == "#":
                    self._lex_comment(pos)
                    return
                if char in "\r\n":
                    self._position = pos + self._newline_length(pos)
                    continue
                self._at_line_start = False
                self._queue_indentation(column, pos)
                if self._pending:
                    return
                continue

            pos = self._skip_spaces(self._position)
            self._position = pos
            if pos >= length:
                self._finish()
                return

            char = source[pos]
            if char == "#":
                self._lex_comment(pos)
                return
            if char == "\\" and pos + 1 < length and source[pos + 1] in "\r\n":
                self._position = pos + 1 + self._newline_length(pos + 1)
                continue
            if char in "\r\n":
                end = pos + self._newline_length(pos)
                if self._depth > 0:
                    self._position = end
                    continue
                self._emit(TokenKind.NEWLINE, pos, end)
                self._at_line_start = True
                return

            self._lex_significant(pos)
            return

    def _measure_indent(self, pos: int) -> tuple[int, int]:
        source = self._source
        column = 0
        while pos < len(source):
            char = source[pos]
            if char == " ":
                column += 1
            elif char == "\t":
                column = (column // 8 + 1) * 8
            elif char == "\f":
                column = 0
            else:
                break
            pos += 1
        return column, pos

    def _skip_spaces(self, pos: int) -> int:
        source = self._source
        while pos < len(source) and source[pos] in " \t\f":
            pos += 1
        return pos

    def _newline_length(self, pos: int) -> int:
        if self._source.startswith("\r\n", pos):
            return 2
        return 1

    def _queue_indentation(self, column: int, pos: int) -> None:
        indents = self._indents
        if column > indents[-1]:
            indents.append(column)
            self._emit_detached(TokenKind.INDENT, pos)
            return
        while column < indents[-1]:
            indents.pop()
            self._emit_detached(TokenKind.DEDENT, pos)
        if column > indents[-1]:
            # inconsistent dedent: re-open a block at the new column
            indents.append(column)
            self._emit_detached(TokenKind.INDENT, pos)

    def _finish(self) -> None:
        end = len(self._source)
        if self._last_kind is not None and self._last_kind != TokenKind.NEWLINE:
            self._emit_detached(TokenKind.NEWLINE, end)
        while len(self._indents) > 1:
            self._indents.pop()
            self._emit_detached(TokenKind.DEDENT, end)
        self._emit(TokenKind.EOF, end, end)
        self._eof = self._pending[-1]

    # -------------------------
    # Token kinds
    # -------------------------

    def _lex_comment(self, pos: int) -> None:
        source = self._source
        end = pos
        while end < len(source) and source[end] not in "\r\n":
            end += 1
        self._emit(TokenKind.COMMENT, pos, end)

    def _lex_significant(self, pos: int) -> None:
        source = self._source
        char = source[pos]

        prefix_length = self._string_prefix_length(pos)
        if prefix_length is not None:
            self._lex_string(pos, prefix_length)
            return
        if self._is_name_start(char):
            self._lex_name(pos)
            return
        if char in _DIGITS or (char == "." and pos + 1 < len(source) and source[pos + 1] in _DIGITS):
            self._lex_number(pos)
            return

        for length in self._operator_lengths:
            text = source[pos : pos + length]
            # slices are short at end of input
            if len(text) != length:
                continue
            kind = self._grammar.operators.get(text)
            if kind is None:
                continue
            if kind in OPENING_BRACKETS:
                self._depth += 1
            elif kind in CLOSING_BRACKETS:
                self._depth = max(0, self._depth - 1)
            self._emit(kind, pos, pos + length)
            return

        self._emit(TokenKind.ERRORTOKEN, pos, pos + 1)

    def _string_prefix_length(self, pos: int) -> int | None:
        source = self._source
        end = pos
        while end < len(source) and end - pos < 2 and source[end] in _STRING_PREFIX_CHARS:
            end += 1
        if end < len(source) and source[end] in _QUOTES:
            if source[pos:end].lower() in self._grammar.string_prefixes:
                return end - pos
        return None

    def _lex_string(self, pos: int, prefix_length: int) -> None:
        source = self._source
        length = len(source)
        index = pos + prefix_length
        quote = source[index]
        triple = quote * 3

        if source.startswith(triple, index):
            index += 3
            while index < length:
                if source[index] == "\\":
                    index += 2
                    continue
                if source.startswith(triple, index):
                    self._emit(TokenKind.STRING, pos, index + 3)
                    return
                index += 1
            self._emit(TokenKind.ERRORTOKEN, pos, length)
            return

        index += 1
        while index < length:
            char = source[index]
            if char == "\\":
                index += 3 if source.startswith("\r\n", index + 1) else 2
                continue
            if char == quote:
                self._emit(TokenKind.STRING, pos, index + 1)
                return
            if char in "\r\n":
                break
            index += 1
        self._emit(TokenKind.ERRORTOKEN, pos, min(index, length))

    def _is_name_start(self, char: str) -> bool:
        if char == "_":
            return True
        return char.isalpha() and (char.isascii() or self._grammar.features.unicode_identifiers)

    def _is_name_char(self, char: str) -> bool:
        if char == "_":
            return True
        return char.isalnum() and (char.isascii() or self._grammar.features.unicode_identifiers)

    def _lex_name(self, pos: int) -> None:
        source = self._source
        end = pos + 1
        while end < len(source) and self._is_name_char(source[end]):
            end += 1
        self._emit(self._grammar.keyword_kind(source[pos:end]), pos, end)

    def _lex_number(self, pos: int) -> None:
        source = self._source
        features = self._grammar.features
        length = len(source)
        index = pos

        radix_digits: str | None = None
        if source[index] == "0" and index + 1 < length:
            marker = source[index + 1]
            if marker in "xX":
                radix_digits = _HEX_DIGITS
            elif marker in "oO" and features.octal_o_prefix:
                radix_digits = _OCT_DIGITS
            elif marker in "bB" and features.binary_literals:
                radix_digits = _BIN_DIGITS

        if radix_digits is not None:
            index = self._take(index + 2, radix_digits)
            self._emit(TokenKind.NUMBER, pos, self._take_long_suffix(index))
            return

        index = self._take(index, _DIGITS)
        is_float = False
        if index < length and source[index] == ".":
            is_float = True
            index = self._take(index + 1, _DIGITS)
        if index < length and source[index] in "eE":
            exponent = index + 1
            if exponent < length and source[exponent] in "+-":
                exponent += 1
            if exponent < length and source[exponent] in _DIGITS:
                is_float = True
                index = self._take(exponent, _DIGITS)
        if index < length and source[index] in "jJ":
            self._emit(TokenKind.NUMBER, pos, index + 1)
            return
        if not is_float:
            digits = source[pos:index]
            if len(digits) > 1 and digits[0] == "0" and digits.strip("0") and not features.legacy_octal:
                self._emit(TokenKind.ERRORTOKEN, pos, index)
                return
            index = self._take_long_suffix(index)
        self._emit(TokenKind.NUMBER, pos, index)

    def _take(self, index: int, allowed: str) -> int:
        source = self._source
        while index < len(source) and source[index] in allowed:
            index += 1
        return index

    def _take_long_suffix(self, index: int) -> int:
        if self._grammar.features.long_suffix and index < len(self._source) and self._source[index] in "lL":
            return index + 1
        return index

    # -------------------------
    # Emission
    # -------------------------

    def _emit(self, kind: TokenKind, start: int, end: int) -> None:
        line, column = self._lines.line_col(start)
        end_line, end_column = self._lines.line_col(end)
        flags = TokenFlags.NONE
        if self._last_line is None or line > self._last_line:
            flags |= TokenFlags.PRECEDING_LINE_BREAK
        self._last_line = self._lines.line_col(end - 1)[0] if end > start else line

        token = Token(
            kind=kind,
            text=self._source[start:end],
            prefix=self._source[self._prefix_start : start],
            range=TextRange(start, end),
            line=line,
            column=column,
            end_line=end_line,
            end_column=end_column,
            flags=flags,
        )
        self._prefix_start = end
        self._position = end
        if kind != TokenKind.COMMENT:
            self._last_kind = kind
        self._pending.append(token)

    def _emit_detached(self, kind: TokenKind, offset: int) -> None:
        """Emit a zero-width token that leaves the pending prefix untouched."""
        line, column = self._lines.line_col(offset)
        self._pending.append(
            Token(
                kind=kind,
                text="",
                prefix="",
                range=TextRange(offset, offset),
                line=line,
                column=column,
                end_line=line,
                end_column=column,
            )
        )
        if kind == TokenKind.NEWLINE:
            self._last_kind = kind


def dump_tokens(tokens: Iterable[Token]) -> str:
    """Render tokens one per line, for debugging and the `tokens` command."""
    lines: list[str] = []
    for index, token in enumerate(tokens):
        lines.append(
            f"{index:04d} {token.kind.name:<16} {token.line}:{token.column}-{token.end_line}:{token.end_column} "
            f"prefix={token.prefix!r} text={token.text!r}"
        )
    return "\n".join(lines)
