"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Final

from lenientpy.text import TextRange


class TokenKind(IntEnum):
    # -------------------------
    # Special / sentinels
    # -------------------------
    EOF = 0
    NEWLINE = 1
    INDENT = 2
    DEDENT = 3
    COMMENT = 4
    ERRORTOKEN = 5

    # -------------------------
    # Identifiers / literals
    # -------------------------
    NAME = 10
    NUMBER = 11
    STRING = 12

    # -------------------------
    # Brackets and punctuation
    # -------------------------
    LPAR = 20  # (
    RPAR = 21  # )
    LSQB = 22  # [
    RSQB = 23  # ]
    LBRACE = 24  # {
    RBRACE = 25  # }
    COLON = 26  # :
    COMMA = 27  # ,
    SEMI = 28  # ;
    DOT = 29  # .
    AT = 30  # @
    BACKQUOTE = 31  # ` (2.x only)
    RARROW = 32  # -> (3.0 only)
    ELLIPSIS = 33  # ... (3.0 only)

    # -------------------------
    # Operators
    # -------------------------
    PLUS = 40  # +
    MINUS = 41  # -
    STAR = 42  # *
    SLASH = 43  # /
    VBAR = 44  # |
    AMPER = 45  # &
    LESS = 46  # <
    GREATER = 47  # >
    EQUAL = 48  # =
    PERCENT = 49  # %
    TILDE = 50  # ~
    CIRCUMFLEX = 51  # ^
    EQEQUAL = 52  # ==
    NOTEQUAL = 53  # !=
    LEGACY_NOTEQUAL = 54  # <> (2.x only)
    LESSEQUAL = 55  # <=
    GREATEREQUAL = 56  # >=
    LEFTSHIFT = 57  # <<
    RIGHTSHIFT = 58  # >>
    DOUBLESTAR = 59  # **
    DOUBLESLASH = 60  # //

    # -------------------------
    # Augmented assignment
    # -------------------------
    PLUSEQUAL = 70
    MINEQUAL = 71
    STAREQUAL = 72
    SLASHEQUAL = 73
    PERCENTEQUAL = 74
    AMPEREQUAL = 75
    VBAREQUAL = 76
    CIRCUMFLEXEQUAL = 77
    LEFTSHIFTEQUAL = 78
    RIGHTSHIFTEQUAL = 79
    DOUBLESTAREQUAL = 80
    DOUBLESLASHEQUAL = 81

    # -------------------------
    # Keywords (the active grammar decides which exist)
    # -------------------------
    AND = 100
    AS = 101
    ASSERT = 102
    BREAK = 103
    CLASS = 104
    CONTINUE = 105
    DEF = 106
    DEL = 107
    ELIF = 108
    ELSE = 109
    EXCEPT = 110
    EXEC = 111
    FINALLY = 112
    FOR = 113
    FROM = 114
    GLOBAL = 115
    IF = 116
    IMPORT = 117
    IN = 118
    IS = 119
    LAMBDA = 120
    NONLOCAL = 121
    NOT = 122
    OR = 123
    PASS = 124
    PRINT = 125
    RAISE = 126
    RETURN = 127
    TRY = 128
    WHILE = 129
    WITH = 130
    YIELD = 131
    TRUE = 132
    FALSE = 133
    NONE = 134

    @property
    def is_keyword(self) -> bool:
        return self.value >= 100

    @property
    def is_layout(self) -> bool:
        """Zero-width block structure tokens."""
        return self in (TokenKind.INDENT, TokenKind.DEDENT)


OPENING_BRACKETS: Final[frozenset[TokenKind]] = frozenset({TokenKind.LPAR, TokenKind.LSQB, TokenKind.LBRACE})
CLOSING_BRACKETS: Final[frozenset[TokenKind]] = frozenset({TokenKind.RPAR, TokenKind.RSQB, TokenKind.RBRACE})

AUGMENTED_ASSIGNMENTS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.PLUSEQUAL,
        TokenKind.MINEQUAL,
        TokenKind.STAREQUAL,
        TokenKind.SLASHEQUAL,
        TokenKind.PERCENTEQUAL,
        TokenKind.AMPEREQUAL,
        TokenKind.VBAREQUAL,
        TokenKind.CIRCUMFLEXEQUAL,
        TokenKind.LEFTSHIFTEQUAL,
        TokenKind.RIGHTSHIFTEQUAL,
        TokenKind.DOUBLESTAREQUAL,
        TokenKind.DOUBLESLASHEQUAL,
    }
)


class TokenFlags(IntFlag):
    """Token metadata flags."""

    NONE = 0
    PRECEDING_LINE_BREAK = 1 << 0  # first token on its physical line
    SYNTHETIC = 1 << 1  # spliced in by recovery, not present in the source


@dataclass(slots=True)
class Token:
    """A single lexed token.

    `prefix` holds the raw source between the previous token and this one
    (whitespace, blank lines, backslash continuations). Tokens are mutable
    only so the token stream can link them and assign document order.
    """

    kind: TokenKind
    text: str
    prefix: str
    range: TextRange
    line: int
    column: int
    end_line: int
    end_column: int
    flags: TokenFlags = TokenFlags.NONE
    index: int = -1
    prev: int = -1
    next: int = -1
    order: int = -1

    def has_preceding_line_break(self) -> bool:
        return bool(self.flags & TokenFlags.PRECEDING_LINE_BREAK)

    @property
    def is_synthetic(self) -> bool:
        return bool(self.flags & TokenFlags.SYNTHETIC)

    @property
    def position(self) -> tuple[int, int]:
        return (self.line, self.column)

    @property
    def end_position(self) -> tuple[int, int]:
        return (self.end_line, self.end_column)

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r}, {self.line}:{self.column})"


MISSING_NAME: Final[str] = "!<MissingName>!"
"""Placeholder text carried by NAME tokens synthesized during recovery."""
