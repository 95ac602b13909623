"""Lexer."""

from lenientpy.lexer.lexer import Lexer, dump_tokens
from lenientpy.lexer.tokens import (
    AUGMENTED_ASSIGNMENTS,
    CLOSING_BRACKETS,
    MISSING_NAME,
    OPENING_BRACKETS,
    Token,
    TokenFlags,
    TokenKind,
)

__all__ = [
    "AUGMENTED_ASSIGNMENTS",
    "CLOSING_BRACKETS",
    "MISSING_NAME",
    "OPENING_BRACKETS",
    "Lexer",
    "Token",
    "TokenFlags",
    "TokenKind",
    "dump_tokens",
]
