import textwrap

import pytest

from lenientpy.ast import (
    Assign,
    Attribute,
    Call,
    ClassDef,
    Compare,
    Dict,
    DictComp,
    EllipsisLiteral,
    Exec,
    Expr,
    FunctionDef,
    GeneratorExp,
    Global,
    If,
    IfExp,
    ImportFrom,
    Lambda,
    ListComp,
    Module,
    Name,
    Num,
    Pass,
    Print,
    Raise,
    Repr,
    Return,
    Set,
    SetComp,
    Slice,
    Str,
    Subscript,
    Try,
    Tuple,
    With,
    Yield,
)
from lenientpy.diagnostics import ParseError, ParseErrorKind
from lenientpy.grammar import GrammarVersion
from lenientpy.lexer import MISSING_NAME, TokenKind
from lenientpy.parser import (
    ParseOptions,
    ParseResult,
    Parser,
    TokenStream,
    attach_comments,
    parse,
    parse_file_input,
)
from tests._debug import debug_dump_ast, debug_dump_diagnostics
from tests._shared_cases import (
    ERROR_CASES,
    PY24,
    PY26,
    PY30,
    VALID_CASES,
    VERSION_GATED_CASES,
    ErrorCase,
    KindDroppingLexer,
    KindInjectingLexer,
    PythonCase,
    VersionGatedCase,
    case_id,
)


def _parse(name: str, source: str, version: GrammarVersion = PY26, options: ParseOptions | None = None) -> ParseResult:
    result = parse(source, version, options)
    debug_dump_ast(name, result.tree, source)
    debug_dump_diagnostics(name, result.errors)
    return result


def _kinds(result: ParseResult) -> list[ParseErrorKind]:
    return [error.kind for error in result.errors]


def _assert_lossless(result: ParseResult) -> None:
    assert result.pretty_print().replace(MISSING_NAME, "") == result.source_text


def _single_statement(source: str, version: GrammarVersion = PY26):
    result = _parse("single_statement", source, version)
    assert result.errors == ()
    assert len(result.tree.body) == 1
    return result.tree.body[0]


@pytest.mark.parametrize("case", VALID_CASES, ids=case_id)
def test_valid_cases_parse_cleanly(case: PythonCase) -> None:
    result = _parse(case.name, case.source, case.grammar)
    assert result.errors == ()
    _assert_lossless(result)


@pytest.mark.parametrize("case", VALID_CASES, ids=case_id)
def test_lazy_token_stream_gives_same_result(case: PythonCase) -> None:
    fast = _parse(case.name, case.source, case.grammar)
    lazy = _parse(case.name, case.source, case.grammar, ParseOptions(fast_token_stream=False))
    assert [(e.kind, e.line, e.column, e.message) for e in lazy.errors] == [
        (e.kind, e.line, e.column, e.message) for e in fast.errors
    ]
    assert lazy.pretty_print() == fast.pretty_print()
    assert [type(node) for node in lazy.tree.body] == [type(node) for node in fast.tree.body]


@pytest.mark.parametrize("case", ERROR_CASES, ids=case_id)
def test_error_cases_report_first_error(case: ErrorCase) -> None:
    result = _parse(case.name, case.source, case.grammar)
    assert result.has_errors
    assert result.first_error is not None
    assert result.first_error.kind == case.first_error
    _assert_lossless(result)


@pytest.mark.parametrize("case", VERSION_GATED_CASES, ids=case_id)
def test_version_gated_syntax(case: VersionGatedCase) -> None:
    accepted = _parse(case.name, case.source, case.accepted_by)
    rejected = _parse(case.name, case.source, case.rejected_by)
    assert accepted.errors == ()
    assert rejected.errors != ()
    _assert_lossless(accepted)
    _assert_lossless(rejected)


# -------------------------
# Tree shapes
# -------------------------


def test_simple_assignment() -> None:
    statement = _single_statement("x = 1\n")
    assert isinstance(statement, Assign)
    assert [type(target) for target in statement.targets] == [Name]
    assert statement.targets[0].id == "x"
    assert isinstance(statement.value, Num)
    assert statement.value.n == "1"
    assert statement.begin == (1, 1)
    assert statement.end == (1, 6)


@pytest.mark.parametrize(
    ("source", "errors"),
    [
        ("f()", []),
        ("d = {}", []),
        ("x = (1, 2)", []),
        ("x = a +", [ParseErrorKind.NAME_EXPECTED]),
        ("def m():\n    call(a,", [ParseErrorKind.UNMATCHED_PAREN_NEARBY]),
    ],
)
def test_source_without_final_newline(source: str, errors: list[ParseErrorKind]) -> None:
    result = _parse("no_final_newline", source)
    assert _kinds(result) == errors
    assert isinstance(result.tree, Module)
    assert result.tree.body
    _assert_lossless(result)


def test_call_at_end_of_input() -> None:
    result = _parse("call_at_end", "f()")
    (statement,) = result.tree.body
    assert isinstance(statement.value, Call)
    assert statement.value.end == (1, 4)


def test_chained_assignment_and_tuple_targets() -> None:
    statement = _single_statement("a, b = c = 1, 2\n")
    assert isinstance(statement, Assign)
    assert isinstance(statement.targets[0], Tuple)
    assert isinstance(statement.targets[1], Name)
    assert isinstance(statement.value, Tuple)
    assert len(statement.value.elts) == 2


def test_semicolon_separated_statements() -> None:
    result = _parse("semicolons", "x = 1; y = 2\n")
    assert result.errors == ()
    first, second = result.tree.body
    assert [token.kind for token in first.tokens if token.kind == TokenKind.SEMI] == [TokenKind.SEMI]
    assert [token.kind for token in second.tokens if token.kind == TokenKind.NEWLINE] == [TokenKind.NEWLINE]


def test_elif_chain_nests_in_orelse() -> None:
    source = textwrap.dedent(
        """
        if a:
            pass
        elif b:
            pass
        else:
            x
        """
    ).lstrip()
    statement = _single_statement(source)
    assert isinstance(statement, If)
    assert len(statement.orelse) == 1
    inner = statement.orelse[0]
    assert isinstance(inner, If)
    assert isinstance(inner.test, Name) and inner.test.id == "b"
    assert isinstance(inner.orelse[0], Expr)
    assert inner.begin == (3, 1)


def test_long_elif_ladder() -> None:
    source = "if a:\n    pass\n" + "elif b:\n    pass\n" * 2000
    result = _parse("long_elif_ladder", source)
    assert result.errors == ()
    depth = 0
    node = result.tree.body[0]
    while node.orelse:
        node = node.orelse[0]
        depth += 1
    assert depth == 2000


def test_print_statement() -> None:
    statement = _single_statement('print >>sys.stderr, "x", 1,\n')
    assert isinstance(statement, Print)
    assert isinstance(statement.dest, Attribute)
    assert [type(value) for value in statement.values] == [Str, Num]
    assert statement.nl is False


def test_relative_import_from() -> None:
    statement = _single_statement("from ..pkg import mod as m, other\n")
    assert isinstance(statement, ImportFrom)
    assert statement.level == 2
    assert statement.module_name == "pkg"
    assert [alias.dotted_name for alias in statement.names] == ["mod", "other"]
    assert statement.names[0].asname is not None and statement.names[0].asname.id == "m"


def test_ellipsis_token_counts_three_levels_in_python_3() -> None:
    statement = _single_statement("from ...pkg import mod\n", PY30)
    assert isinstance(statement, ImportFrom)
    assert statement.level == 3


def test_function_parameters_python_2() -> None:
    statement = _single_statement("def f(self, (a, b), c=1, *args, **kwargs):\n    pass\n")
    assert isinstance(statement, FunctionDef)
    args = statement.args
    assert [type(arg) for arg in args.args] == [Name, Tuple, Name]
    assert [default.n for default in args.defaults] == ["1"]
    assert args.vararg is not None and args.vararg.id == "args"
    assert args.kwarg is not None and args.kwarg.id == "kwargs"
    assert args.annotations == [None, None, None]
    assert args.kwonlyargs == []


def test_function_parameters_python_3() -> None:
    source = "def f(a: int, *args: str, b=1, **kw) -> str:\n    pass\n"
    statement = _single_statement(source, PY30)
    assert isinstance(statement, FunctionDef)
    args = statement.args
    assert [arg.id for arg in args.args] == ["a"]
    assert [annotation.id for annotation in args.annotations] == ["int"]
    assert args.vararg_annotation is not None and args.vararg_annotation.id == "str"
    assert [arg.id for arg in args.kwonlyargs] == ["b"]
    assert [default.n for default in args.kw_defaults] == ["1"]
    assert args.kwonly_annotations == [None]
    assert isinstance(statement.returns, Name)


def test_bare_star_starts_keyword_only_arguments() -> None:
    statement = _single_statement("def g(*, key=None):\n    pass\n", PY30)
    assert isinstance(statement, FunctionDef)
    assert statement.args.vararg is None
    assert [arg.id for arg in statement.args.kwonlyargs] == ["key"]
    assert [default.id for default in statement.args.kw_defaults] == ["None"]


def test_decorators() -> None:
    source = "@staticmethod\n@cache.memoize(10)\ndef f():\n    pass\n"
    statement = _single_statement(source)
    assert isinstance(statement, FunctionDef)
    assert len(statement.decorators) == 2
    assert isinstance(statement.decorators[0].func, Name)
    call = statement.decorators[1].func
    assert isinstance(call, Call)
    assert isinstance(call.func, Attribute)
    assert statement.begin == (1, 1)


def test_class_definition() -> None:
    statement = _single_statement("class A(Base, mixins.Mixin):\n    pass\n")
    assert isinstance(statement, ClassDef)
    assert statement.name.id == "A"
    assert [type(base) for base in statement.bases] == [Name, Attribute]
    assert [type(node) for node in statement.body] == [Pass]
    assert statement.begin == (1, 1)
    assert statement.end == (2, 9)


def test_call_arguments() -> None:
    statement = _single_statement("f(a, b=1, *rest, **opts)\n")
    assert isinstance(statement, Expr)
    call = statement.value
    assert isinstance(call, Call)
    assert [arg.id for arg in call.args] == ["a"]
    assert [keyword.arg.id for keyword in call.keywords] == ["b"]
    assert isinstance(call.starargs, Name) and call.starargs.id == "rest"
    assert isinstance(call.kwargs, Name) and call.kwargs.id == "opts"


def test_generator_argument_shares_call_parentheses() -> None:
    statement = _single_statement("sum(x for x in y)\n")
    call = statement.value
    assert isinstance(call, Call)
    assert isinstance(call.args[0], GeneratorExp)
    assert len(call.args[0].generators) == 1


def test_subscripts_and_slices() -> None:
    statement = _single_statement("m[1:2, ..., ::3]\n")
    subscript = statement.value
    assert isinstance(subscript, Subscript)
    index = subscript.slice
    assert isinstance(index, Tuple)
    first, second, third = index.elts
    assert isinstance(first, Slice) and first.lower is not None and first.upper is not None
    assert isinstance(second, EllipsisLiteral)
    assert isinstance(third, Slice) and third.lower is None and third.upper is None and third.step is not None


def test_adjacent_strings_concatenate() -> None:
    statement = _single_statement("s = ('abc'\n     \"def\" r'\\n')\n")
    assert isinstance(statement.value, Str)
    assert statement.value.s == "abcdef\\n"


def test_comparison_operators() -> None:
    statement = _single_statement("a not in b is not c < d\n")
    compare = statement.value
    assert isinstance(compare, Compare)
    assert compare.ops == ["not in", "is not", "<"]
    assert len(compare.comparators) == 3


def test_conditional_expression_and_lambda() -> None:
    result = _parse("conditional", "x = a if b else c\nf = lambda x, y=2: x\n")
    assert result.errors == ()
    conditional, function = result.tree.body
    assert isinstance(conditional.value, IfExp)
    assert conditional.value.test.id == "b"
    assert isinstance(function.value, Lambda)
    assert [arg.id for arg in function.value.args.args] == ["x", "y"]
    assert len(function.value.args.defaults) == 1


def test_displays_and_comprehensions_python_3() -> None:
    source = "s = {1, 2}\nc = {x for x in y}\nd = {k: v for k, v in items}\nl = [x for x in y if x]\n"
    result = _parse("displays", source, PY30)
    assert result.errors == ()
    values = [statement.value for statement in result.tree.body]
    assert [type(value) for value in values] == [Set, SetComp, DictComp, ListComp]
    assert len(values[3].generators[0].ifs) == 1


def test_tuple_iterable_in_python_2_list_comprehension() -> None:
    statement = _single_statement("[x for x in 1, 2]\n")
    comprehension = statement.value.generators[0]
    assert isinstance(comprehension.iter, Tuple)


def test_statement_forms() -> None:
    source = textwrap.dedent(
        """
        exec code in ns, local
        global a, b
        raise E, V, tb
        x = `y`
        def g():
            x = yield
        """
    ).lstrip()
    result = _parse("statement_forms", source)
    assert result.errors == ()
    exec_statement, global_statement, raise_statement, repr_assign, function = result.tree.body
    assert isinstance(exec_statement, Exec) and exec_statement.locals is not None
    assert isinstance(global_statement, Global) and [name.id for name in global_statement.names] == ["a", "b"]
    assert isinstance(raise_statement, Raise) and raise_statement.tback is not None
    assert isinstance(repr_assign.value, Repr)
    assert isinstance(function.body[0].value, Yield) and function.body[0].value.value is None


def test_raise_from_python_3() -> None:
    statement = _single_statement("raise E from e\n", PY30)
    assert isinstance(statement, Raise)
    assert statement.cause is not None and statement.inst is None


def test_try_and_with() -> None:
    source = textwrap.dedent(
        """
        try:
            pass
        except (IOError, OSError), e:
            pass
        except:
            pass
        else:
            pass
        finally:
            pass
        with open(f) as g:
            pass
        """
    ).lstrip()
    result = _parse("try_and_with", source)
    assert result.errors == ()
    try_statement, with_statement = result.tree.body
    assert isinstance(try_statement, Try)
    assert len(try_statement.handlers) == 2
    assert isinstance(try_statement.handlers[0].type, Tuple)
    assert try_statement.handlers[1].type is None
    assert len(try_statement.orelse) == 1 and len(try_statement.finalbody) == 1
    assert isinstance(with_statement, With)
    assert isinstance(with_statement.optional_vars, Name)


def test_python_3_names_are_keyword_atoms() -> None:
    statement = _single_statement("x = True\n", PY30)
    assert isinstance(statement.value, Name)
    assert statement.value.id == "True"


# -------------------------
# Recovery
# -------------------------


def test_missing_indent_keeps_following_statement_as_body() -> None:
    result = _parse("missing_indent", "if a:\npass\n")
    assert _kinds(result) == [ParseErrorKind.INDENT_EXPECTED]
    (if_statement,) = result.tree.body
    assert isinstance(if_statement, If)
    assert [type(node) for node in if_statement.body] == [Pass]
    _assert_lossless(result)


def test_missing_indent_in_function_body() -> None:
    result = _parse("missing_indent_def", "def f():\nreturn 1\n")
    assert _kinds(result) == [ParseErrorKind.INDENT_EXPECTED]
    (function,) = result.tree.body
    assert isinstance(function, FunctionDef)
    assert [type(node) for node in function.body] == [Return]


def test_missing_indent_body_runs_to_enclosing_block_end() -> None:
    result = _parse("missing_indent_nested", "class C:\n    def f(self):\n    return 1\n")
    assert _kinds(result) == [ParseErrorKind.INDENT_EXPECTED]
    (class_def,) = result.tree.body
    assert isinstance(class_def, ClassDef)
    (function,) = class_def.body
    assert isinstance(function, FunctionDef)
    assert [type(node) for node in function.body] == [Return]
    _assert_lossless(result)


def test_missing_indent_body_stops_at_clause_keyword() -> None:
    result = _parse("missing_indent_else", "if a:\nx = 1\nelse:\n    y = 2\n")
    assert _kinds(result) == [ParseErrorKind.INDENT_EXPECTED]
    (if_statement,) = result.tree.body
    assert [type(node) for node in if_statement.body] == [Assign]
    assert [type(node) for node in if_statement.orelse] == [Assign]
    _assert_lossless(result)


def test_empty_suite_before_clause_keyword_is_folded() -> None:
    result = _parse("empty_suite_else", "if a:\nelse:\n    pass\n")
    assert _kinds(result) == [ParseErrorKind.EMPTY_SUITE_DETECTED]
    (if_statement,) = result.tree.body
    assert if_statement.body == []
    assert [type(node) for node in if_statement.orelse] == [Pass]


def test_empty_nested_suite_reports_once() -> None:
    result = _parse("empty_nested_suite", "class A:\n    def f(self):\nx = 1\n")
    assert _kinds(result) == [ParseErrorKind.EMPTY_SUITE_DETECTED]
    class_def, assign = result.tree.body
    assert isinstance(class_def, ClassDef)
    assert isinstance(class_def.body[0], FunctionDef) and class_def.body[0].body == []
    assert isinstance(assign, Assign)


def test_missing_name_is_synthesized() -> None:
    result = _parse("missing_name", "def (a):\n    pass\n")
    assert _kinds(result) == [ParseErrorKind.NAME_EXPECTED]
    function = result.tree.body[0]
    assert isinstance(function, FunctionDef)
    assert function.name.is_missing
    assert function.name.id == MISSING_NAME
    assert function.name.begin == (1, 5)
    assert [arg.id for arg in function.args.args] == ["a"]
    assert result.pretty_print().startswith("def " + MISSING_NAME + "(a):")


def test_missing_expression_is_synthesized() -> None:
    result = _parse("missing_expression", "x = \n")
    assert _kinds(result) == [ParseErrorKind.NAME_EXPECTED]
    assert result.first_error.message == "Expected an expression"
    assert result.tree.body[0].value.is_missing


def test_unmatched_paren_skips_to_closer() -> None:
    result = _parse("unmatched_paren", "f(a b)\ny = 1\n")
    assert _kinds(result) == [ParseErrorKind.UNMATCHED_PAREN_NEARBY]
    call = result.tree.body[0].value
    assert isinstance(call, Call)
    assert [arg.id for arg in call.args] == ["a"]
    assert "b" in [token.text for token in call.tokens]
    assert isinstance(result.tree.body[1], Assign)


def test_trailing_tokens_are_attached_to_statement() -> None:
    result = _parse("trailing_tokens", "x = 1 2\n")
    assert _kinds(result) == [ParseErrorKind.NEWLINE_EXPECTED]
    error = result.first_error
    assert (error.line, error.column) == (1, 7)
    assert error.message == "Expected end of statement, found '2'"
    statement = result.tree.body[0]
    assert statement.end == (1, 6)
    assert "2" in [token.text for token in statement.tokens]


def test_dict_key_without_value() -> None:
    result = _parse("dict_value_missing", "d = {a: }\n")
    assert _kinds(result) == [ParseErrorKind.DICT_VALUE_MISSING]
    value = result.tree.body[0].value
    assert isinstance(value, Dict)
    assert value.values == [None]


def test_brace_display_without_colon_depends_on_grammar() -> None:
    python_2 = _parse("brace_display_2x", "s = {a}\n", PY26)
    assert _kinds(python_2) == [ParseErrorKind.DICT_VALUE_MISSING]
    assert isinstance(python_2.tree.body[0].value, Dict)

    python_3 = _parse("brace_display_3x", "s = {a}\n", PY30)
    assert python_3.errors == ()
    assert isinstance(python_3.tree.body[0].value, Set)


def test_unexpected_indent_flattens_block() -> None:
    result = _parse("unexpected_indent", "x = 1\n    y = 2\nz = 3\n")
    assert _kinds(result) == [ParseErrorKind.STATEMENT_MALFORMED]
    assert result.first_error.message == "Unexpected indent"
    assert [type(node) for node in result.tree.body] == [Assign, Assign, Assign]


def test_missing_colon_resumes_at_suite() -> None:
    result = _parse("missing_colon", "if a\n    pass\n")
    assert _kinds(result) == [ParseErrorKind.COMPOUND_STATEMENT_MALFORMED]
    statement = result.tree.body[0]
    assert isinstance(statement, If)
    assert [type(node) for node in statement.body] == [Pass]


def test_stray_tokens_before_colon_are_skipped() -> None:
    result = _parse("stray_tokens_before_colon", "while a b c:\n    pass\n")
    assert _kinds(result) == [ParseErrorKind.COMPOUND_STATEMENT_MALFORMED]
    assert [type(node) for node in result.tree.body[0].body] == [Pass]
    _assert_lossless(result)


def test_suite_match_failure_is_reported_first() -> None:
    result = _parse("suite_match_failed", "if a: )\n")
    assert _kinds(result)[0] == ParseErrorKind.SUITE_MATCH_FAILED


def test_else_without_if() -> None:
    result = _parse("else_without_if", "else:\n    pass\n")
    assert _kinds(result) == [ParseErrorKind.COMPOUND_STATEMENT_MALFORMED, ParseErrorKind.STATEMENT_MALFORMED]
    assert [type(node) for node in result.tree.body] == [Pass]


def test_decorator_without_definition() -> None:
    result = _parse("dangling_decorator", "@dec\nx = 1\n")
    assert _kinds(result)[0] == ParseErrorKind.NAME_EXPECTED
    function = result.tree.body[0]
    assert isinstance(function, FunctionDef)
    assert function.name.is_missing
    assert len(function.decorators) == 1
    _assert_lossless(result)


def test_deep_nesting_is_reported_not_raised() -> None:
    source = "x = " + "(" * 1000 + "1" + ")" * 1000 + "\ny = 2\n"
    result = _parse("deep_nesting", source)
    assert _kinds(result) == [ParseErrorKind.STATEMENT_MALFORMED]
    assert result.first_error.message == "Statement is nested too deeply to parse"
    assert [type(node) for node in result.tree.body] == [Assign]
    _assert_lossless(result)


def test_stray_dedent_at_module_level() -> None:
    lexer = KindInjectingLexer("x = 1\n", PY26, TokenKind.DEDENT)
    stream = TokenStream(lexer)  # type: ignore[arg-type]
    parser = Parser(stream)
    tree = parse_file_input(parser)
    errors = parser.finish()
    attach_comments(tree, stream.finish())

    assert [error.kind for error in errors] == [ParseErrorKind.EOF_EXPECTED]
    assert errors[0].message == "Unexpected dedent at module level"
    assert [type(node) for node in tree.body] == [Assign]
    assert tree.tokens[-1].kind == TokenKind.EOF


def _parse_with_lexer(lexer: KindDroppingLexer) -> tuple[Module, list[ParseError]]:
    stream = TokenStream(lexer)  # type: ignore[arg-type]
    parser = Parser(stream)
    tree = parse_file_input(parser)
    errors = parser.finish()
    attach_comments(tree, stream.finish())
    return tree, errors


def test_unclosed_block_stops_compound_statement() -> None:
    tree, errors = _parse_with_lexer(KindDroppingLexer("try:\n    x = 1\n", PY26, TokenKind.DEDENT))
    # the missing handler is not reported once the block itself failed
    assert [error.kind for error in errors] == [ParseErrorKind.DEDENT_EXPECTED]
    (statement,) = tree.body
    assert isinstance(statement, Try)
    assert [type(node) for node in statement.body] == [Assign]
    assert statement.handlers == [] and statement.finalbody == []


def test_closed_try_block_without_handler_is_reported() -> None:
    result = _parse("try_without_handler", "try:\n    x = 1\n")
    assert _kinds(result) == [ParseErrorKind.COMPOUND_STATEMENT_MALFORMED]
    assert [type(node) for node in result.tree.body[0].body] == [Assign]


def test_unclosed_if_block_skips_else_lookup() -> None:
    tree, errors = _parse_with_lexer(KindDroppingLexer("if a:\n    if b:\n        x\n", PY26, TokenKind.DEDENT))
    assert [error.kind for error in errors] == [ParseErrorKind.DEDENT_EXPECTED, ParseErrorKind.DEDENT_EXPECTED]
    (outer,) = tree.body
    assert isinstance(outer, If) and outer.orelse == []
    (inner,) = outer.body
    assert isinstance(inner, If) and [type(node) for node in inner.body] == [Expr]


def test_error_format() -> None:
    result = _parse("error_format", "x = 1 2\n")
    assert str(result.first_error) == "1:7: PARSER_NEWLINE_EXPECTED: Expected end of statement, found '2'"
    assert result.first_error.hint is not None


def test_python_24_rejects_combined_try() -> None:
    source = "try:\n    pass\nexcept E:\n    pass\nfinally:\n    pass\n"
    result = _parse("combined_try_24", source, PY24)
    assert _kinds(result) == [ParseErrorKind.COMPOUND_STATEMENT_MALFORMED]
    assert len(result.tree.body[0].finalbody) == 1
