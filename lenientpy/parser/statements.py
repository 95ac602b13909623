"""Statement productions and the `file_input` entry point.

Compound statements own their keywords, `:`, and the NEWLINE/INDENT/DEDENT
tokens of their suites. Simple statements own their keywords and the `;` or
NEWLINE that ends them, appended after the node is built so that the
terminator stays outside the statement's span.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from lenientpy.ast import (
    Alias,
    Arguments,
    Assert,
    Assign,
    Attribute,
    AugAssign,
    Break,
    ClassDef,
    Continue,
    Decorator,
    Delete,
    ExceptHandler,
    Exec,
    Expr,
    Expression,
    For,
    FunctionDef,
    Global,
    If,
    Import,
    ImportFrom,
    Module,
    Name,
    Nonlocal,
    Pass,
    Print,
    Raise,
    Return,
    Statement,
    Try,
    While,
    With,
)
from lenientpy.diagnostics import ParseErrorKind
from lenientpy.lexer import AUGMENTED_ASSIGNMENTS, MISSING_NAME, Token, TokenKind
from lenientpy.parser.expressions import (
    can_start_expression,
    parse_call,
    parse_dotted_name,
    parse_expr,
    parse_exprlist,
    parse_name,
    parse_parameter_list,
    parse_test,
    parse_testlist,
    parse_testlist_or_yield,
    parse_yield_expression,
)
from lenientpy.parser.marker import Marker
from lenientpy.parser.parse_lists import ParseNodeList
from lenientpy.parser.parsed_syntax import ParsedSyntax
from lenientpy.parser.parser import Parser

_BLOCK_END: Final[frozenset[TokenKind]] = frozenset({TokenKind.DEDENT, TokenKind.EOF})
_LINE_END: Final[frozenset[TokenKind]] = frozenset({TokenKind.NEWLINE, TokenKind.EOF, TokenKind.DEDENT})
_CLAUSE_KEYWORDS: Final[frozenset[TokenKind]] = frozenset(
    {TokenKind.ELSE, TokenKind.ELIF, TokenKind.EXCEPT, TokenKind.FINALLY}
)
_UNINDENTED_BODY_END: Final[frozenset[TokenKind]] = _BLOCK_END | _CLAUSE_KEYWORDS


@dataclass(frozen=True, slots=True)
class Suite:
    """Statements of one block.

    `failed` is set when the block could not be closed; the statement that
    owns it stops there instead of looking for further clauses.
    """

    body: list[Statement]
    failed: bool = False


def parse_file_input(parser: Parser) -> Module:
    """`file_input: (NEWLINE | stmt)* ENDMARKER`; always returns a Module."""
    marker = parser.start()
    body: list[Statement] = []
    while True:
        body.extend(parse_statement_list(parser, stop_at=frozenset({TokenKind.EOF})))
        if parser.at(TokenKind.EOF):
            break
        parser.recover(ParseErrorKind.EOF_EXPECTED, f"Unexpected {_describe(parser.current_token)} at module level")
        parser.bump()
    parser.take(parser.current_token)
    return marker.complete(parser, Module, body=body)


# -------------------------
# Statement lists
# -------------------------


def parse_statement_list(parser: Parser, *, stop_at: frozenset[TokenKind]) -> list[Statement]:
    def is_at_list_end(p: Parser) -> bool:
        return p.at_set(stop_at)

    return ParseNodeList(  # type: ignore[return-value]
        is_at_list_end=is_at_list_end,
        parse_element=parse_statement,
        recover=_recover_statement,
    ).parse_list(parser)


def _recover_statement(parser: Parser, parsed: ParsedSyntax) -> bool:
    if parsed.is_present():
        return True
    if parser.at_set(_BLOCK_END):
        return False
    kind = (
        ParseErrorKind.COMPOUND_STATEMENT_MALFORMED
        if parser.current in _CLAUSE_KEYWORDS
        else ParseErrorKind.STATEMENT_MALFORMED
    )
    parser.recover(kind, f"Unexpected {_describe(parser.current_token)}")
    parser.skip_line()
    return True


def parse_statement(parser: Parser) -> ParsedSyntax:
    checkpoint = parser.checkpoint()
    try:
        return _parse_statement(parser)
    except RecursionError:
        parser.rewind(checkpoint)
        parser.recover(ParseErrorKind.STATEMENT_MALFORMED, "Statement is nested too deeply to parse")
        parser.skip_line()
        return ParsedSyntax.present()


def _parse_statement(parser: Parser) -> ParsedSyntax:
    if parser.at(TokenKind.INDENT):
        return _parse_unexpected_block(parser)
    production = parser.grammar.compound_statements.get(parser.current)
    if production is not None:
        return ParsedSyntax.present(COMPOUND_PRODUCTIONS[production](parser))
    if can_start_simple_statement(parser):
        return ParsedSyntax.present(*parse_simple_statement(parser))
    return ParsedSyntax.absent()


def _parse_unexpected_block(parser: Parser) -> ParsedSyntax:
    """An indented block where none may start: keep its statements, flattened."""
    parser.recover(ParseErrorKind.STATEMENT_MALFORMED, "Unexpected indent")
    parser.bump()
    statements = parse_statement_list(parser, stop_at=frozenset({TokenKind.DEDENT}))
    parser.eat(TokenKind.DEDENT)
    return ParsedSyntax.present(*statements)


def can_start_simple_statement(parser: Parser) -> bool:
    return parser.current in parser.grammar.simple_statements or can_start_expression(parser)


def parse_simple_statement(parser: Parser) -> list[Statement]:
    """`small_stmt (';' small_stmt)* [';'] NEWLINE`"""
    statements: list[Statement] = []
    while True:
        statement = _parse_small_statement(parser)
        statements.append(statement)
        if not parser.eat_into(statement, TokenKind.SEMI):
            break
        if not can_start_simple_statement(parser):
            break

    last = statements[-1]
    if not parser.at_set(_LINE_END):
        parser.recover(
            ParseErrorKind.NEWLINE_EXPECTED,
            f"Expected end of statement, found {_describe(parser.current_token)}",
        )
        while not parser.at_set(_LINE_END):
            parser.attach(last, parser.bump())
    parser.eat_into(last, TokenKind.NEWLINE)
    return statements


def _parse_small_statement(parser: Parser) -> Statement:
    production = parser.grammar.simple_statements.get(parser.current)
    if production is None:
        return parse_expression_statement(parser)
    return SIMPLE_PRODUCTIONS[production](parser)


# -------------------------
# Simple statements
# -------------------------


def parse_expression_statement(parser: Parser) -> Statement:
    marker = parser.start()
    first = parse_testlist_or_yield(parser)

    if parser.current in AUGMENTED_ASSIGNMENTS:
        op = parser.bump().text
        value = parse_testlist_or_yield(parser)
        return marker.complete(parser, AugAssign, target=first, op=op, value=value)

    if parser.at(TokenKind.EQUAL):
        targets = [first]
        while parser.eat(TokenKind.EQUAL):
            targets.append(parse_testlist_or_yield(parser))
        value = targets.pop()
        return marker.complete(parser, Assign, targets=targets, value=value)

    return marker.complete(parser, Expr, value=first)


def parse_print_statement(parser: Parser) -> Print:
    marker = parser.start()
    parser.bump()
    dest: Expression | None = None
    values: list[Expression] = []
    nl = True

    if parser.eat(TokenKind.RIGHTSHIFT):
        dest = parse_test(parser)
    elif can_start_expression(parser):
        values.append(parse_test(parser))

    while parser.eat(TokenKind.COMMA):
        nl = False
        if not can_start_expression(parser):
            break
        values.append(parse_test(parser))
        nl = True
    return marker.complete(parser, Print, dest=dest, values=values, nl=nl)


def parse_del_statement(parser: Parser) -> Delete:
    marker = parser.start()
    parser.bump()
    targets = [parse_expr(parser)]
    while parser.eat(TokenKind.COMMA):
        if not can_start_expression(parser):
            break
        targets.append(parse_expr(parser))
    return marker.complete(parser, Delete, targets=targets)


def parse_pass_statement(parser: Parser) -> Pass:
    return _parse_keyword_statement(parser, Pass)


def parse_break_statement(parser: Parser) -> Break:
    return _parse_keyword_statement(parser, Break)


def parse_continue_statement(parser: Parser) -> Continue:
    return _parse_keyword_statement(parser, Continue)


def _parse_keyword_statement[S: (Pass, Break, Continue)](parser: Parser, node_type: type[S]) -> S:
    marker = parser.start()
    parser.bump()
    return marker.complete(parser, node_type)


def parse_return_statement(parser: Parser) -> Return:
    marker = parser.start()
    parser.bump()
    value = parse_testlist(parser) if can_start_expression(parser) else None
    return marker.complete(parser, Return, value=value)


def parse_raise_statement(parser: Parser) -> Raise:
    """2.x `raise [type [, inst [, tback]]]`, 3.0 `raise [exc [from cause]]`."""
    marker = parser.start()
    parser.bump()
    fields: dict[str, Expression | None] = {}
    if can_start_expression(parser):
        fields["type"] = parse_test(parser)
        if parser.features.raise_from and parser.eat(TokenKind.FROM):
            fields["cause"] = parse_test(parser)
        elif parser.features.raise_with_arguments and parser.eat(TokenKind.COMMA):
            fields["inst"] = parse_test(parser)
            if parser.eat(TokenKind.COMMA):
                fields["tback"] = parse_test(parser)
    return marker.complete(parser, Raise, **fields)


def parse_global_statement(parser: Parser) -> Global:
    marker = parser.start()
    parser.bump()
    return marker.complete(parser, Global, names=_parse_name_list(parser))


def parse_nonlocal_statement(parser: Parser) -> Nonlocal:
    marker = parser.start()
    parser.bump()
    return marker.complete(parser, Nonlocal, names=_parse_name_list(parser))


def _parse_name_list(parser: Parser) -> list[Name]:
    names = [parse_name(parser)]
    while parser.eat(TokenKind.COMMA):
        names.append(parse_name(parser))
    return names


def parse_exec_statement(parser: Parser) -> Exec:
    marker = parser.start()
    parser.bump()
    body = parse_expr(parser)
    scope: dict[str, Expression] = {}
    if parser.eat(TokenKind.IN):
        scope["globals"] = parse_test(parser)
        if parser.eat(TokenKind.COMMA):
            scope["locals"] = parse_test(parser)
    return marker.complete(parser, Exec, body=body, **scope)


def parse_assert_statement(parser: Parser) -> Assert:
    marker = parser.start()
    parser.bump()
    test = parse_test(parser)
    msg = parse_test(parser) if parser.eat(TokenKind.COMMA) else None
    return marker.complete(parser, Assert, test=test, msg=msg)


def parse_yield_statement(parser: Parser) -> Expr:
    marker = parser.start()
    value = parse_yield_expression(parser)
    return marker.complete(parser, Expr, value=value)


def parse_import_name(parser: Parser) -> Import:
    marker = parser.start()
    parser.bump()
    names = [_parse_dotted_as_name(parser)]
    while parser.eat(TokenKind.COMMA):
        names.append(_parse_dotted_as_name(parser))
    return marker.complete(parser, Import, names=names)


def _parse_dotted_as_name(parser: Parser) -> Alias:
    marker = parser.start()
    name = parse_dotted_name(parser)
    asname = parse_name(parser) if parser.eat(TokenKind.AS) else None
    return marker.complete(parser, Alias, name=name, asname=asname)


def parse_import_from(parser: Parser) -> ImportFrom:
    marker = parser.start()
    parser.bump()

    level = 0
    while parser.at_set({TokenKind.DOT, TokenKind.ELLIPSIS}):
        if level == 0 and not parser.features.relative_imports:
            parser.recover(ParseErrorKind.STATEMENT_MALFORMED, "Relative imports are not supported by this grammar")
        level += 3 if parser.bump().kind == TokenKind.ELLIPSIS else 1

    module: list[Name] = []
    if level == 0 or parser.at(TokenKind.NAME):
        module = parse_dotted_name(parser)

    if not parser.eat(TokenKind.IMPORT):
        parser.recover(ParseErrorKind.STATEMENT_MALFORMED, "Expected 'import'")
        return marker.complete(parser, ImportFrom, module=module, level=level)

    if parser.eat(TokenKind.STAR):
        return marker.complete(parser, ImportFrom, module=module, level=level, star=True)

    parenthesized = parser.eat(TokenKind.LPAR) is not None
    names = [_parse_import_as_name(parser)]
    while parser.eat(TokenKind.COMMA):
        if parenthesized and parser.at(TokenKind.RPAR):
            break
        names.append(_parse_import_as_name(parser))
    if parenthesized:
        parser.expect_closer(TokenKind.RPAR)
    return marker.complete(parser, ImportFrom, module=module, level=level, names=names)


def _parse_import_as_name(parser: Parser) -> Alias:
    marker = parser.start()
    name = parse_name(parser)
    asname = parse_name(parser) if parser.eat(TokenKind.AS) else None
    return marker.complete(parser, Alias, name=[name], asname=asname)


# -------------------------
# Suites
# -------------------------


def parse_suite(parser: Parser) -> Suite:
    """`simple_stmt | NEWLINE INDENT stmt+ DEDENT`.

    Without the INDENT the statements that follow still form the body, up to
    the enclosing block's end or the next clause keyword. A suite with
    nothing in it is folded away and the enclosing statement carries on.
    """
    if parser.eat(TokenKind.NEWLINE):
        if parser.eat(TokenKind.INDENT):
            return _parse_block(parser)
        kind = (
            ParseErrorKind.EMPTY_SUITE_DETECTED
            if parser.at_set(_UNINDENTED_BODY_END)
            else ParseErrorKind.INDENT_EXPECTED
        )
        outcome = parser.recover(kind)
        if outcome.empty_suite:
            return Suite([])
        # no INDENT was opened, so no DEDENT closes this body
        return Suite(parse_statement_list(parser, stop_at=_UNINDENTED_BODY_END))

    if can_start_simple_statement(parser):
        return Suite(parse_simple_statement(parser))

    parser.recover(
        ParseErrorKind.SUITE_MATCH_FAILED,
        f"Expected a statement or an indented block, found {_describe(parser.current_token)}",
    )
    return Suite([])


def _parse_block(parser: Parser) -> Suite:
    body = parse_statement_list(parser, stop_at=frozenset({TokenKind.DEDENT}))
    if parser.eat(TokenKind.DEDENT):
        return Suite(body)
    outcome = parser.recover(ParseErrorKind.DEDENT_EXPECTED)
    if outcome.escalate:
        return Suite(body, failed=True)
    if outcome.resumed:
        parser.bump()
    return Suite(body)


def _expect_colon(parser: Parser, construct: str) -> None:
    """Consume the `:` ending a clause header, skipping stray tokens before it."""
    if parser.eat(TokenKind.COLON):
        return
    parser.recover(ParseErrorKind.COMPOUND_STATEMENT_MALFORMED, f"Expected ':' after {construct}")
    distance = 0
    while parser.nth(distance) != TokenKind.COLON:
        if parser.nth(distance) in _LINE_END or parser.nth(distance) == TokenKind.INDENT:
            return
        distance += 1
    for _ in range(distance + 1):
        parser.bump()


def _parse_else_clause(parser: Parser, construct: str, after: Suite) -> list[Statement]:
    if after.failed or not parser.eat(TokenKind.ELSE):
        return []
    _expect_colon(parser, f"'else' in {construct}")
    return parse_suite(parser).body


# -------------------------
# Compound statements
# -------------------------


def parse_if_statement(parser: Parser) -> If:
    """`if`/`elif`/`else`. Each `elif` becomes a nested If in `orelse`.

    The chain is parsed iteratively so long `elif` ladders do not recurse.
    """
    clauses: list[tuple[Marker, Expression, list[Statement]]] = []
    while True:
        marker = parser.start()
        keyword = parser.bump().text
        test = parse_test(parser)
        _expect_colon(parser, f"'{keyword}' condition")
        suite = parse_suite(parser)
        clauses.append((marker, test, suite.body))
        if suite.failed or not parser.at(TokenKind.ELIF):
            break

    orelse = _parse_else_clause(parser, "if statement", suite)
    *outer, (marker, test, body) = clauses
    node = marker.complete(parser, If, test=test, body=body, orelse=orelse)
    for marker, test, body in reversed(outer):
        node = marker.complete(parser, If, test=test, body=body, orelse=[node])
    return node


def parse_while_statement(parser: Parser) -> While:
    marker = parser.start()
    parser.bump()
    test = parse_test(parser)
    _expect_colon(parser, "'while' condition")
    suite = parse_suite(parser)
    orelse = _parse_else_clause(parser, "while loop", suite)
    return marker.complete(parser, While, test=test, body=suite.body, orelse=orelse)


def parse_for_statement(parser: Parser) -> For:
    marker = parser.start()
    parser.bump()
    target = parse_exprlist(parser)
    if not parser.eat(TokenKind.IN):
        parser.recover(ParseErrorKind.COMPOUND_STATEMENT_MALFORMED, "Expected 'in' in for loop")
    iterable = parse_testlist(parser)
    _expect_colon(parser, "'for' clause")
    suite = parse_suite(parser)
    orelse = _parse_else_clause(parser, "for loop", suite)
    return marker.complete(parser, For, target=target, iter=iterable, body=suite.body, orelse=orelse)


def parse_try_statement(parser: Parser) -> Try:
    marker = parser.start()
    parser.bump()
    _expect_colon(parser, "'try'")
    suite = parse_suite(parser)
    body = suite.body
    handlers: list[ExceptHandler] = []
    orelse: list[Statement] = []
    finalbody: list[Statement] = []

    while not suite.failed and parser.at(TokenKind.EXCEPT):
        handler, suite = _parse_except_handler(parser)
        handlers.append(handler)

    if not suite.failed and parser.at(TokenKind.ELSE):
        if not handlers:
            parser.recover(ParseErrorKind.COMPOUND_STATEMENT_MALFORMED, "'else' in try statement needs an 'except'")
        parser.bump()
        _expect_colon(parser, "'else' in try statement")
        suite = parse_suite(parser)
        orelse = suite.body

    has_finally = not suite.failed and parser.at(TokenKind.FINALLY)
    if has_finally:
        if handlers and not parser.features.unified_try:
            parser.recover(
                ParseErrorKind.COMPOUND_STATEMENT_MALFORMED,
                "'except' and 'finally' cannot be combined in this grammar",
            )
        parser.bump()
        _expect_colon(parser, "'finally'")
        finalbody = parse_suite(parser).body

    if not handlers and not has_finally and not suite.failed:
        parser.recover(ParseErrorKind.COMPOUND_STATEMENT_MALFORMED, "Expected 'except' or 'finally' after try block")

    return marker.complete(parser, Try, body=body, handlers=handlers, orelse=orelse, finalbody=finalbody)


def _parse_except_handler(parser: Parser) -> tuple[ExceptHandler, Suite]:
    marker = parser.start()
    parser.bump()
    exc_type: Expression | None = None
    name: Expression | None = None

    if can_start_expression(parser):
        exc_type = parse_test(parser)
        if parser.at(TokenKind.AS):
            if not parser.features.except_as:
                parser.recover(ParseErrorKind.COMPOUND_STATEMENT_MALFORMED, "'except ... as' is not valid in this grammar")
            parser.bump()
            name = parse_test(parser) if parser.features.except_comma else parse_name(parser)
        elif parser.at(TokenKind.COMMA):
            if not parser.features.except_comma:
                parser.recover(ParseErrorKind.COMPOUND_STATEMENT_MALFORMED, "'except E, e' is not valid in this grammar")
            parser.bump()
            name = parse_test(parser)

    _expect_colon(parser, "'except' clause")
    suite = parse_suite(parser)
    return marker.complete(parser, ExceptHandler, type=exc_type, name=name, body=suite.body), suite


def parse_with_statement(parser: Parser) -> With:
    marker = parser.start()
    parser.bump()
    context_expr = parse_test(parser)
    optional_vars = parse_expr(parser) if parser.eat(TokenKind.AS) else None
    _expect_colon(parser, "'with' clause")
    body = parse_suite(parser).body
    return marker.complete(parser, With, context_expr=context_expr, optional_vars=optional_vars, body=body)


def parse_funcdef(
    parser: Parser,
    marker: Marker | None = None,
    decorators: list[Decorator] | None = None,
) -> FunctionDef:
    marker = marker or parser.start()
    parser.bump()
    name = parse_name(parser)
    args = _parse_parameters(parser)
    returns = parse_test(parser) if parser.features.annotations and parser.eat(TokenKind.RARROW) else None
    _expect_colon(parser, "function signature")
    body = parse_suite(parser).body
    return marker.complete(
        parser,
        FunctionDef,
        decorators=decorators or [],
        name=name,
        args=args,
        returns=returns,
        body=body,
    )


def _parse_parameters(parser: Parser) -> Arguments:
    marker = parser.start()
    if not parser.eat(TokenKind.LPAR):
        parser.recover(ParseErrorKind.COMPOUND_STATEMENT_MALFORMED, "Expected '(' after function name")
        return marker.complete(parser, Arguments)
    fields = parse_parameter_list(parser, end=TokenKind.RPAR, annotations=parser.features.annotations)
    parser.expect_closer(TokenKind.RPAR)
    return marker.complete(parser, Arguments, **fields)


def parse_classdef(
    parser: Parser,
    marker: Marker | None = None,
    decorators: list[Decorator] | None = None,
) -> ClassDef:
    marker = marker or parser.start()
    parser.bump()
    name = parse_name(parser)
    bases: list[Expression] = []
    if parser.eat(TokenKind.LPAR):
        if parser.at(TokenKind.RPAR) and not parser.features.empty_class_bases:
            parser.recover(ParseErrorKind.COMPOUND_STATEMENT_MALFORMED, "Empty base class list is not valid in this grammar")
        while can_start_expression(parser):
            bases.append(parse_test(parser))
            if not parser.eat(TokenKind.COMMA):
                break
        parser.expect_closer(TokenKind.RPAR)
    _expect_colon(parser, "class header")
    body = parse_suite(parser).body
    return marker.complete(parser, ClassDef, decorators=decorators or [], name=name, bases=bases, body=body)


def parse_decorated(parser: Parser) -> Statement:
    marker = parser.start()
    decorators: list[Decorator] = []
    while parser.at(TokenKind.AT):
        decorators.append(_parse_decorator(parser))

    if parser.at(TokenKind.DEF):
        return parse_funcdef(parser, marker, decorators)
    if parser.at(TokenKind.CLASS):
        if not parser.features.class_decorators:
            parser.recover(ParseErrorKind.COMPOUND_STATEMENT_MALFORMED, "Class decorators are not valid in this grammar")
        return parse_classdef(parser, marker, decorators)

    name_marker = parser.start()
    parser.take_missing_name("Expected 'def' or 'class' after decorator")
    name = name_marker.complete(parser, Name, id=MISSING_NAME)
    args_marker = parser.start()
    args = args_marker.complete(parser, Arguments)
    return marker.complete(parser, FunctionDef, decorators=decorators, name=name, args=args)


def _parse_decorator(parser: Parser) -> Decorator:
    marker = parser.start()
    parser.bump()
    func: Expression = parse_name(parser)
    while parser.at(TokenKind.DOT):
        attribute_marker = parser.start()
        parser.bump()
        attr = parse_name(parser)
        func = attribute_marker.complete(parser, Attribute, value=func, attr=attr)
    if parser.at(TokenKind.LPAR):
        func = parse_call(parser, func)
    decorator = marker.complete(parser, Decorator, func=func)

    if not parser.at(TokenKind.NEWLINE):
        parser.recover(
            ParseErrorKind.NEWLINE_EXPECTED,
            f"Expected end of decorator, found {_describe(parser.current_token)}",
        )
        while not parser.at_set(_LINE_END):
            parser.attach(decorator, parser.bump())
    parser.eat_into(decorator, TokenKind.NEWLINE)
    return decorator


def _describe(token: Token) -> str:
    if token.kind == TokenKind.EOF:
        return "end of file"
    if token.kind in (TokenKind.NEWLINE, TokenKind.INDENT, TokenKind.DEDENT):
        return token.kind.name.lower()
    return repr(token.text)


SIMPLE_PRODUCTIONS: Final[Mapping[str, Callable[[Parser], Statement]]] = MappingProxyType(
    {
        "pass_stmt": parse_pass_statement,
        "break_stmt": parse_break_statement,
        "continue_stmt": parse_continue_statement,
        "return_stmt": parse_return_statement,
        "raise_stmt": parse_raise_statement,
        "global_stmt": parse_global_statement,
        "nonlocal_stmt": parse_nonlocal_statement,
        "del_stmt": parse_del_statement,
        "import_name": parse_import_name,
        "import_from": parse_import_from,
        "assert_stmt": parse_assert_statement,
        "yield_stmt": parse_yield_statement,
        "print_stmt": parse_print_statement,
        "exec_stmt": parse_exec_statement,
    }
)

COMPOUND_PRODUCTIONS: Final[Mapping[str, Callable[[Parser], Statement]]] = MappingProxyType(
    {
        "if_stmt": parse_if_statement,
        "while_stmt": parse_while_statement,
        "for_stmt": parse_for_statement,
        "try_stmt": parse_try_statement,
        "with_stmt": parse_with_statement,
        "funcdef": parse_funcdef,
        "classdef": parse_classdef,
        "decorated": parse_decorated,
    }
)
