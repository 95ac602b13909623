"""Centralized Python source cases used across lexer/parser/printer tests."""

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from pathlib import Path

from lenientpy.diagnostics import ParseErrorKind
from lenientpy.grammar import Grammar, GrammarVersion, grammar_for
from lenientpy.lexer import Lexer, Token, TokenKind
from lenientpy.text import TextRange

PY24 = GrammarVersion.PYTHON_2_4
PY25 = GrammarVersion.PYTHON_2_5
PY26 = GrammarVersion.PYTHON_2_6
PY30 = GrammarVersion.PYTHON_3_0

DATA_DIR = Path(__file__).parent / "data"


@dataclass(frozen=True, slots=True)
class PythonCase:
    name: str
    source: str
    grammar: GrammarVersion = PY26


@dataclass(frozen=True, slots=True)
class ErrorCase:
    name: str
    source: str
    first_error: ParseErrorKind
    grammar: GrammarVersion = PY26


@dataclass(frozen=True, slots=True)
class VersionGatedCase:
    """Source accepted by one grammar and rejected by another."""

    name: str
    source: str
    accepted_by: GrammarVersion
    rejected_by: GrammarVersion


def _dedent(text: str) -> str:
    return textwrap.dedent(text).lstrip()


def load_fixture(name: str) -> str:
    with open(DATA_DIR / name, encoding="utf-8", newline="") as handle:
        return handle.read()


VALID_CASES: tuple[PythonCase, ...] = (
    PythonCase(
        name="assignments",
        source=_dedent(
            """
            x = 1
            y += 2
            a, b = b, a
            x = y = z
            first = 1; second = 2;
            """
        ),
    ),
    PythonCase(
        name="print_statement_forms",
        source=_dedent(
            """
            print
            print "a", "b",
            print >>sys.stderr, "x"
            """
        ),
    ),
    PythonCase(
        name="import_forms",
        source=_dedent(
            """
            import os
            import os.path as osp, sys
            from os import path, sep
            from os import (path,
                sep,)
            from . import sibling
            from ..pkg import mod as m
            from sys import *
            """
        ),
    ),
    PythonCase(
        name="compound_statements",
        source=_dedent(
            """
            if a:
                pass
            elif b:
                x = 1
            else:
                x = 2
            while x:
                x -= 1
            else:
                done = True
            for i, item in enumerate(items):
                if item is not None and i not in seen:
                    continue
                break
            else:
                pass
            try:
                risky()
            except (IOError, OSError), e:
                handle(e)
            except:
                raise
            else:
                ok()
            finally:
                cleanup()
            with open(path) as handle:
                data = handle.read()
            """
        ),
    ),
    PythonCase(
        name="function_definitions",
        source=_dedent(
            """
            @staticmethod
            @memoize(10)
            def f(self, (a, b), c=1, *args, **kwargs):
                global counter
                counter += 1
                return a, b
            def gen():
                yield 1
                x = yield
            square = lambda x, y=2: x ** y
            """
        ),
    ),
    PythonCase(
        name="class_definitions",
        source=_dedent(
            """
            class Base(object):
                \"\"\"Docstring.\"\"\"
                def method(self):
                    return self
            @register
            class Child(Base, mixins.Mixin):
                attr = 1
            """
        ),
    ),
    PythonCase(
        name="expression_forms",
        source=_dedent(
            """
            x = a if b else c
            evens = [n * 2 for n in range(10) if n % 2]
            total = sum(n for n in numbers)
            table = dict((k, v) for k, v in pairs)
            d = {"a": 1, "b": [1, 2, 3], "c": {}}
            part = s[1:2] + s[::2] + s[:-1]
            cube = m[..., 1]
            text = `value`
            same = a <> b
            n = -x + ~y - 2 ** -1
            s = ("abc"
                 "def")
            numbers = 0777 + 10L + 0x1F + 1.5e3 + 2j + 0o17 + 0b101
            ok = not x in y or x is not None and 1 < y <= 3
            """
        ),
    ),
    PythonCase(
        name="miscellaneous_simple_statements",
        source=_dedent(
            """
            exec code in ns, local
            del x[0], y
            assert x, 'msg'
            raise ValueError, 'bad'
            total = 1 + \\
                2
            """
        ),
    ),
    PythonCase(
        name="python_24_try_forms",
        source=_dedent(
            """
            try:
                pass
            except E, e:
                pass
            try:
                pass
            finally:
                pass
            """
        ),
        grammar=PY24,
    ),
    PythonCase(
        name="python_30_signatures",
        source=_dedent(
            """
            def f(a: int, *args: str, b=1, **kw) -> str:
                nonlocal x
                return ...
            def g(*, key=None):
                pass
            """
        ),
        grammar=PY30,
    ),
    PythonCase(
        name="python_30_expressions",
        source=_dedent(
            """
            try:
                raise E from e
            except E as err:
                pass
            s = {1, 2}
            c = {x for x in y}
            d = {k: v for k, v in items}
            flag = True
            print(flag)
            """
        ),
        grammar=PY30,
    ),
)


ERROR_CASES: tuple[ErrorCase, ...] = (
    ErrorCase(name="missing_indent", source="if a:\npass\n", first_error=ParseErrorKind.INDENT_EXPECTED),
    ErrorCase(name="empty_suite_at_eof", source="if a:\n", first_error=ParseErrorKind.EMPTY_SUITE_DETECTED),
    ErrorCase(
        name="empty_nested_suite",
        source="class A:\n    def f(self):\nx = 1\n",
        first_error=ParseErrorKind.EMPTY_SUITE_DETECTED,
    ),
    ErrorCase(name="missing_function_name", source="def (a):\n    pass\n", first_error=ParseErrorKind.NAME_EXPECTED),
    ErrorCase(name="missing_assignment_value", source="x = \n", first_error=ParseErrorKind.NAME_EXPECTED),
    ErrorCase(name="unmatched_call_paren", source="f(a b)\n", first_error=ParseErrorKind.UNMATCHED_PAREN_NEARBY),
    ErrorCase(
        name="unterminated_call_at_end_of_input",
        source="def m():\n    call(a,",
        first_error=ParseErrorKind.UNMATCHED_PAREN_NEARBY,
    ),
    ErrorCase(name="stray_closer", source=") = 1\n", first_error=ParseErrorKind.STATEMENT_MALFORMED),
    ErrorCase(name="invalid_character", source="$x = 1\n", first_error=ParseErrorKind.STATEMENT_MALFORMED),
    ErrorCase(name="unexpected_indent", source="x = 1\n    y = 2\n", first_error=ParseErrorKind.STATEMENT_MALFORMED),
    ErrorCase(
        name="missing_colon",
        source="if a\n    pass\n",
        first_error=ParseErrorKind.COMPOUND_STATEMENT_MALFORMED,
    ),
    ErrorCase(
        name="else_without_if",
        source="else:\n    pass\n",
        first_error=ParseErrorKind.COMPOUND_STATEMENT_MALFORMED,
    ),
    ErrorCase(
        name="try_without_handlers",
        source="try:\n    pass\nx = 1\n",
        first_error=ParseErrorKind.COMPOUND_STATEMENT_MALFORMED,
    ),
    ErrorCase(name="trailing_tokens", source="x = 1 2\n", first_error=ParseErrorKind.NEWLINE_EXPECTED),
    ErrorCase(name="dict_missing_value", source="d = {a: }\n", first_error=ParseErrorKind.DICT_VALUE_MISSING),
    ErrorCase(name="set_display_in_2x", source="s = {a}\n", first_error=ParseErrorKind.DICT_VALUE_MISSING),
    ErrorCase(name="suite_starts_with_closer", source="if a: )\n", first_error=ParseErrorKind.SUITE_MATCH_FAILED),
)


VERSION_GATED_CASES: tuple[VersionGatedCase, ...] = (
    VersionGatedCase("conditional_expression", "x = a if b else c\n", accepted_by=PY25, rejected_by=PY24),
    VersionGatedCase("with_statement", "with open(f) as g:\n    pass\n", accepted_by=PY25, rejected_by=PY24),
    VersionGatedCase("empty_class_bases", "class B2():\n    pass\n", accepted_by=PY25, rejected_by=PY24),
    VersionGatedCase("relative_import", "from . import x\n", accepted_by=PY25, rejected_by=PY24),
    VersionGatedCase("yield_expression", "def g():\n    x = yield\n", accepted_by=PY25, rejected_by=PY24),
    VersionGatedCase(
        "unified_try",
        "try:\n    pass\nexcept E:\n    pass\nfinally:\n    pass\n",
        accepted_by=PY25,
        rejected_by=PY24,
    ),
    VersionGatedCase("except_as", "try:\n    pass\nexcept E as e:\n    pass\n", accepted_by=PY26, rejected_by=PY25),
    VersionGatedCase("class_decorator", "@dec\nclass A:\n    pass\n", accepted_by=PY26, rejected_by=PY25),
    VersionGatedCase("octal_o_prefix", "x = 0o777\n", accepted_by=PY26, rejected_by=PY25),
    VersionGatedCase("binary_literal", "x = 0b101\n", accepted_by=PY26, rejected_by=PY25),
    VersionGatedCase("bytes_prefix", 'x = b"data"\n', accepted_by=PY26, rejected_by=PY25),
    VersionGatedCase("except_comma", "try:\n    pass\nexcept E, e:\n    pass\n", accepted_by=PY26, rejected_by=PY30),
    VersionGatedCase("print_statement", 'print "x"\n', accepted_by=PY26, rejected_by=PY30),
    VersionGatedCase("raise_with_arguments", "raise E, V\n", accepted_by=PY26, rejected_by=PY30),
    VersionGatedCase("backquote_repr", "x = `y`\n", accepted_by=PY26, rejected_by=PY30),
    VersionGatedCase("legacy_not_equal", "if a <> b:\n    pass\n", accepted_by=PY26, rejected_by=PY30),
    VersionGatedCase("legacy_octal", "x = 0777\n", accepted_by=PY26, rejected_by=PY30),
    VersionGatedCase("long_suffix", "x = 10L\n", accepted_by=PY26, rejected_by=PY30),
    VersionGatedCase("unicode_prefix", 'x = u"text"\n', accepted_by=PY26, rejected_by=PY30),
    VersionGatedCase("tuple_comprehension_iterable", "[x for x in 1,2,3,4]\n", accepted_by=PY26, rejected_by=PY30),
    VersionGatedCase(
        "lambda_comprehension_iterable",
        "[x() for x in lambda: True, lambda: False if x() ]\n",
        accepted_by=PY26,
        rejected_by=PY30,
    ),
    VersionGatedCase("raise_from", "raise E from e\n", accepted_by=PY30, rejected_by=PY26),
    VersionGatedCase("nonlocal", "def f():\n    nonlocal x\n", accepted_by=PY30, rejected_by=PY26),
    VersionGatedCase("keyword_only_arguments", "def f(a, *, b):\n    pass\n", accepted_by=PY30, rejected_by=PY26),
    VersionGatedCase("annotations", "def f(a: int) -> str:\n    pass\n", accepted_by=PY30, rejected_by=PY26),
    VersionGatedCase("set_literal", "s = {1, 2}\n", accepted_by=PY30, rejected_by=PY26),
)


CASE_BY_NAME: dict[str, PythonCase] = {case.name: case for case in VALID_CASES}


def case_source(name: str) -> str:
    return CASE_BY_NAME[name].source


def case_id(case: PythonCase | ErrorCase | VersionGatedCase) -> str:
    return case.name


class KindInjectingLexer:
    """Lexer wrapper that emits one extra zero-width `kind` token just before EOF.

    Produces token sequences the real lexer never does (a stray DEDENT at
    module level, a token kind outside the grammar).
    """

    def __init__(self, source: str, version: GrammarVersion, kind: TokenKind) -> None:
        self._inner = Lexer(source, grammar_for(version))
        self._kind = kind
        self._injected = False

    @property
    def source(self) -> str:
        return self._inner.source

    @property
    def grammar(self) -> Grammar:
        return self._inner.grammar

    def next_token(self) -> Token:
        token = self._inner.next_token()
        if token.kind != TokenKind.EOF or self._injected:
            return token
        self._injected = True
        offset = token.range.start.value
        return Token(
            kind=self._kind,
            text="",
            prefix="",
            range=TextRange(offset, offset),
            line=token.line,
            column=token.column,
            end_line=token.line,
            end_column=token.column,
        )


class KindDroppingLexer:
    """Lexer wrapper that never emits `kind`; dropping DEDENT leaves blocks unclosed."""

    def __init__(self, source: str, version: GrammarVersion, kind: TokenKind) -> None:
        self._inner = Lexer(source, grammar_for(version))
        self._kind = kind

    @property
    def source(self) -> str:
        return self._inner.source

    @property
    def grammar(self) -> Grammar:
        return self._inner.grammar

    def next_token(self) -> Token:
        token = self._inner.next_token()
        while token.kind == self._kind:
            token = self._inner.next_token()
        return token
