"""Grammar versions and their immutable production tables.

Each supported Python dialect is described by one frozen `Grammar` value:
the keyword and operator spellings the lexer recognizes, the token kinds the
dialect defines, the statement productions reachable from each leading
keyword, and feature flags for the syntax that differs between versions.
Tables are built once, on first use, and shared read-only by every parse.
"""

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import Final

from lenientpy.lexer.tokens import TokenKind

logger = logging.getLogger(__name__)


class GrammarVersion(IntEnum):
    PYTHON_2_4 = 10
    PYTHON_2_5 = 11
    PYTHON_2_6 = 12
    PYTHON_3_0 = 99

    @property
    def label(self) -> str:
        return _VERSION_LABELS[self]


_VERSION_LABELS: Final[Mapping[GrammarVersion, str]] = MappingProxyType(
    {
        GrammarVersion.PYTHON_2_4: "2.4",
        GrammarVersion.PYTHON_2_5: "2.5",
        GrammarVersion.PYTHON_2_6: "2.6",
        GrammarVersion.PYTHON_3_0: "3.0",
    }
)

LATEST_GRAMMAR_VERSION: Final[GrammarVersion] = GrammarVersion.PYTHON_2_6
"""Latest grammar of the 2.x series; the default for unversioned requests."""


class GrammarContractError(ValueError):
    """A token kind reached the parser that the active grammar does not define.

    This is a programming error in the token producer, not a syntax error in
    the input, so it aborts the parse instead of being recovered.
    """

    def __init__(self, kind: TokenKind, version: GrammarVersion) -> None:
        super().__init__(f"Token kind {kind.name} is not defined by the Python {version.label} grammar")
        self.kind = kind
        self.version = version


@dataclass(frozen=True, slots=True)
class GrammarFeatures:
    """Syntax switches that differ between dialects."""

    conditional_expressions: bool
    with_statement: bool
    unified_try: bool
    relative_imports: bool
    yield_expressions: bool
    empty_class_bases: bool
    except_as: bool
    except_comma: bool
    class_decorators: bool
    tuple_parameters: bool
    tuple_comprehension_iterables: bool
    keyword_only_arguments: bool
    annotations: bool
    raise_from: bool
    raise_with_arguments: bool
    set_literals: bool
    set_dict_comprehensions: bool
    octal_o_prefix: bool
    binary_literals: bool
    legacy_octal: bool
    long_suffix: bool
    unicode_identifiers: bool


@dataclass(frozen=True, slots=True)
class Grammar:
    version: GrammarVersion
    keywords: Mapping[str, TokenKind]
    operators: Mapping[str, TokenKind]
    token_kinds: frozenset[TokenKind]
    simple_statements: Mapping[TokenKind, str]
    compound_statements: Mapping[TokenKind, str]
    string_prefixes: frozenset[str]
    features: GrammarFeatures

    def defines(self, kind: TokenKind) -> bool:
        return kind in self.token_kinds

    def require(self, kind: TokenKind) -> None:
        if kind not in self.token_kinds:
            raise GrammarContractError(kind, self.version)

    def keyword_kind(self, text: str) -> TokenKind:
        return self.keywords.get(text, TokenKind.NAME)


_STRUCTURAL_KINDS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.EOF,
        TokenKind.NEWLINE,
        TokenKind.INDENT,
        TokenKind.DEDENT,
        TokenKind.COMMENT,
        TokenKind.ERRORTOKEN,
        TokenKind.NAME,
        TokenKind.NUMBER,
        TokenKind.STRING,
    }
)

_COMMON_KEYWORDS: Final[Mapping[str, TokenKind]] = {
    "and": TokenKind.AND,
    "as": TokenKind.AS,
    "assert": TokenKind.ASSERT,
    "break": TokenKind.BREAK,
    "class": TokenKind.CLASS,
    "continue": TokenKind.CONTINUE,
    "def": TokenKind.DEF,
    "del": TokenKind.DEL,
    "elif": TokenKind.ELIF,
    "else": TokenKind.ELSE,
    "except": TokenKind.EXCEPT,
    "finally": TokenKind.FINALLY,
    "for": TokenKind.FOR,
    "from": TokenKind.FROM,
    "global": TokenKind.GLOBAL,
    "if": TokenKind.IF,
    "import": TokenKind.IMPORT,
    "in": TokenKind.IN,
    "is": TokenKind.IS,
    "lambda": TokenKind.LAMBDA,
    "not": TokenKind.NOT,
    "or": TokenKind.OR,
    "pass": TokenKind.PASS,
    "raise": TokenKind.RAISE,
    "return": TokenKind.RETURN,
    "try": TokenKind.TRY,
    "while": TokenKind.WHILE,
    "yield": TokenKind.YIELD,
}

_PYTHON2_KEYWORDS: Final[Mapping[str, TokenKind]] = {
    "print": TokenKind.PRINT,
    "exec": TokenKind.EXEC,
}

_PYTHON3_KEYWORDS: Final[Mapping[str, TokenKind]] = {
    "nonlocal": TokenKind.NONLOCAL,
    "True": TokenKind.TRUE,
    "False": TokenKind.FALSE,
    "None": TokenKind.NONE,
}

_COMMON_OPERATORS: Final[Mapping[str, TokenKind]] = {
    "(": TokenKind.LPAR,
    ")": TokenKind.RPAR,
    "[": TokenKind.LSQB,
    "]": TokenKind.RSQB,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMI,
    ".": TokenKind.DOT,
    "@": TokenKind.AT,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "|": TokenKind.VBAR,
    "&": TokenKind.AMPER,
    "<": TokenKind.LESS,
    ">": TokenKind.GREATER,
    "=": TokenKind.EQUAL,
    "%": TokenKind.PERCENT,
    "~": TokenKind.TILDE,
    "^": TokenKind.CIRCUMFLEX,
    "==": TokenKind.EQEQUAL,
    "!=": TokenKind.NOTEQUAL,
    "<=": TokenKind.LESSEQUAL,
    ">=": TokenKind.GREATEREQUAL,
    "<<": TokenKind.LEFTSHIFT,
    ">>": TokenKind.RIGHTSHIFT,
    "**": TokenKind.DOUBLESTAR,
    "//": TokenKind.DOUBLESLASH,
    "+=": TokenKind.PLUSEQUAL,
    "-=": TokenKind.MINEQUAL,
    "*=": TokenKind.STAREQUAL,
    "/=": TokenKind.SLASHEQUAL,
    "%=": TokenKind.PERCENTEQUAL,
    "&=": TokenKind.AMPEREQUAL,
    "|=": TokenKind.VBAREQUAL,
    "^=": TokenKind.CIRCUMFLEXEQUAL,
    "<<=": TokenKind.LEFTSHIFTEQUAL,
    ">>=": TokenKind.RIGHTSHIFTEQUAL,
    "**=": TokenKind.DOUBLESTAREQUAL,
    "//=": TokenKind.DOUBLESLASHEQUAL,
}

_PYTHON2_OPERATORS: Final[Mapping[str, TokenKind]] = {
    "<>": TokenKind.LEGACY_NOTEQUAL,
    "`": TokenKind.BACKQUOTE,
}

_PYTHON3_OPERATORS: Final[Mapping[str, TokenKind]] = {
    "->": TokenKind.RARROW,
    "...": TokenKind.ELLIPSIS,
}

_COMMON_SIMPLE_STATEMENTS: Final[Mapping[TokenKind, str]] = {
    TokenKind.PASS: "pass_stmt",
    TokenKind.BREAK: "break_stmt",
    TokenKind.CONTINUE: "continue_stmt",
    TokenKind.RETURN: "return_stmt",
    TokenKind.RAISE: "raise_stmt",
    TokenKind.GLOBAL: "global_stmt",
    TokenKind.DEL: "del_stmt",
    TokenKind.IMPORT: "import_name",
    TokenKind.FROM: "import_from",
    TokenKind.ASSERT: "assert_stmt",
    TokenKind.YIELD: "yield_stmt",
}

_COMMON_COMPOUND_STATEMENTS: Final[Mapping[TokenKind, str]] = {
    TokenKind.IF: "if_stmt",
    TokenKind.WHILE: "while_stmt",
    TokenKind.FOR: "for_stmt",
    TokenKind.TRY: "try_stmt",
    TokenKind.DEF: "funcdef",
    TokenKind.CLASS: "classdef",
    TokenKind.AT: "decorated",
}

_PYTHON2_STRING_PREFIXES: Final[frozenset[str]] = frozenset({"", "r", "u", "ur"})


def _features(version: GrammarVersion) -> GrammarFeatures:
    at_least_25 = version >= GrammarVersion.PYTHON_2_5
    at_least_26 = version >= GrammarVersion.PYTHON_2_6
    py3 = version == GrammarVersion.PYTHON_3_0
    return GrammarFeatures(
        conditional_expressions=at_least_25,
        with_statement=at_least_25,
        unified_try=at_least_25,
        relative_imports=at_least_25,
        yield_expressions=at_least_25,
        empty_class_bases=at_least_25,
        except_as=at_least_26,
        except_comma=not py3,
        class_decorators=at_least_26,
        tuple_parameters=not py3,
        tuple_comprehension_iterables=not py3,
        keyword_only_arguments=py3,
        annotations=py3,
        raise_from=py3,
        raise_with_arguments=not py3,
        set_literals=py3,
        set_dict_comprehensions=py3,
        octal_o_prefix=at_least_26,
        binary_literals=at_least_26,
        legacy_octal=not py3,
        long_suffix=not py3,
        unicode_identifiers=py3,
    )


def _build_grammar(version: GrammarVersion) -> Grammar:
    py3 = version == GrammarVersion.PYTHON_3_0

    keywords = dict(_COMMON_KEYWORDS)
    keywords.update(_PYTHON3_KEYWORDS if py3 else _PYTHON2_KEYWORDS)
    if version >= GrammarVersion.PYTHON_2_5:
        keywords["with"] = TokenKind.WITH

    operators = dict(_COMMON_OPERATORS)
    operators.update(_PYTHON3_OPERATORS if py3 else _PYTHON2_OPERATORS)

    simple = dict(_COMMON_SIMPLE_STATEMENTS)
    if py3:
        simple[TokenKind.NONLOCAL] = "nonlocal_stmt"
    else:
        simple[TokenKind.PRINT] = "print_stmt"
        simple[TokenKind.EXEC] = "exec_stmt"

    compound = dict(_COMMON_COMPOUND_STATEMENTS)
    if version >= GrammarVersion.PYTHON_2_5:
        compound[TokenKind.WITH] = "with_stmt"

    if py3:
        string_prefixes = frozenset({"", "r", "b", "br"})
    elif version >= GrammarVersion.PYTHON_2_6:
        string_prefixes = _PYTHON2_STRING_PREFIXES | {"b", "br"}
    else:
        string_prefixes = _PYTHON2_STRING_PREFIXES

    token_kinds = _STRUCTURAL_KINDS | frozenset(keywords.values()) | frozenset(operators.values())

    return Grammar(
        version=version,
        keywords=MappingProxyType(keywords),
        operators=MappingProxyType(operators),
        token_kinds=token_kinds,
        simple_statements=MappingProxyType(simple),
        compound_statements=MappingProxyType(compound),
        string_prefixes=string_prefixes,
        features=_features(version),
    )


class GrammarRegistry:
    """Lazily built, process-wide table of grammars.

    The first lookup builds every table under a lock; later lookups read the
    published mapping without locking.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._grammars: Mapping[GrammarVersion, Grammar] | None = None

    def get(self, version: GrammarVersion) -> Grammar:
        grammars = self._grammars
        if grammars is None:
            with self._lock:
                if self._grammars is None:
                    logger.debug("building grammar tables for %d versions", len(GrammarVersion))
                    self._grammars = MappingProxyType({v: _build_grammar(v) for v in GrammarVersion})
                grammars = self._grammars
        return grammars[GrammarVersion(version)]

    @property
    def is_initialized(self) -> bool:
        return self._grammars is not None


DEFAULT_REGISTRY: Final[GrammarRegistry] = GrammarRegistry()


def grammar_for(version: GrammarVersion) -> Grammar:
    """Return the shared grammar table for `version`."""
    return DEFAULT_REGISTRY.get(version)


def grammar_version_from_str(version: str | None) -> GrammarVersion:
    """Map a "2.x"/"3.x" version string to the closest supported grammar.

    Older 2.x releases use the 2.4 grammar (the dialects are backward
    compatible); unknown 2.x versions use the latest 2.x grammar and any 3.x
    version uses the 3.0 grammar.
    """
    match version:
        case "2.1" | "2.2" | "2.3" | "2.4":
            return GrammarVersion.PYTHON_2_4
        case "2.5":
            return GrammarVersion.PYTHON_2_5
        case "2.6":
            return GrammarVersion.PYTHON_2_6
        case "3.0":
            return GrammarVersion.PYTHON_3_0

    if version is not None:
        if version.startswith("3"):
            return GrammarVersion.PYTHON_3_0
        if version.startswith("2"):
            return LATEST_GRAMMAR_VERSION

    logger.warning("unable to recognize grammar version %r, using %s", version, LATEST_GRAMMAR_VERSION.label)
    return LATEST_GRAMMAR_VERSION
