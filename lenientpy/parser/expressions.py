"""Expression productions.

Each function parses one grammar rule starting at the current token and
returns the finished node. None of them fails outright: a missing operand
becomes a synthetic `Name` and a missing closing bracket triggers the
closer scan, so callers always get a node back.
"""

from collections.abc import Callable, Mapping
from typing import Final

from lenientpy.ast import (
    Arguments,
    Attribute,
    BinOp,
    BoolOp,
    Call,
    Compare,
    Comprehension,
    Dict,
    DictComp,
    EllipsisLiteral,
    Expression,
    GeneratorExp,
    IfExp,
    Keyword,
    Lambda,
    List,
    ListComp,
    Name,
    Num,
    Repr,
    Set,
    SetComp,
    Slice,
    Str,
    Subscript,
    Tuple,
    UnaryOp,
    Yield,
)
from lenientpy.diagnostics import ParseErrorKind
from lenientpy.lexer import MISSING_NAME, TokenKind
from lenientpy.parser.marker import Marker
from lenientpy.parser.parser import Parser, ParserProgress

_ATOM_START: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.NAME,
        TokenKind.NUMBER,
        TokenKind.STRING,
        TokenKind.LPAR,
        TokenKind.LSQB,
        TokenKind.LBRACE,
        TokenKind.BACKQUOTE,
        TokenKind.ELLIPSIS,
        TokenKind.TRUE,
        TokenKind.FALSE,
        TokenKind.NONE,
    }
)

_EXPRESSION_START: Final[frozenset[TokenKind]] = _ATOM_START | {
    TokenKind.PLUS,
    TokenKind.MINUS,
    TokenKind.TILDE,
    TokenKind.NOT,
    TokenKind.LAMBDA,
}

_COMPARISON_OPERATORS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.LESS,
        TokenKind.GREATER,
        TokenKind.EQEQUAL,
        TokenKind.NOTEQUAL,
        TokenKind.LEGACY_NOTEQUAL,
        TokenKind.LESSEQUAL,
        TokenKind.GREATEREQUAL,
        TokenKind.IN,
        TokenKind.IS,
    }
)

_BITWISE_OR: Final[Mapping[TokenKind, str]] = {TokenKind.VBAR: "|"}
_BITWISE_XOR: Final[Mapping[TokenKind, str]] = {TokenKind.CIRCUMFLEX: "^"}
_BITWISE_AND: Final[Mapping[TokenKind, str]] = {TokenKind.AMPER: "&"}
_SHIFT: Final[Mapping[TokenKind, str]] = {TokenKind.LEFTSHIFT: "<<", TokenKind.RIGHTSHIFT: ">>"}
_ARITHMETIC: Final[Mapping[TokenKind, str]] = {TokenKind.PLUS: "+", TokenKind.MINUS: "-"}
_TERM: Final[Mapping[TokenKind, str]] = {
    TokenKind.STAR: "*",
    TokenKind.SLASH: "/",
    TokenKind.PERCENT: "%",
    TokenKind.DOUBLESLASH: "//",
}
_UNARY: Final[Mapping[TokenKind, str]] = {TokenKind.PLUS: "+", TokenKind.MINUS: "-", TokenKind.TILDE: "~"}


def can_start_expression(parser: Parser) -> bool:
    return parser.current in _EXPRESSION_START


# -------------------------
# Names
# -------------------------


def parse_name(parser: Parser, message: str | None = None) -> Name:
    """Parse a NAME, or splice in a placeholder when there is none."""
    marker = parser.start()
    if parser.at(TokenKind.NAME):
        token = parser.bump()
        return marker.complete(parser, Name, id=token.text)
    parser.take_missing_name(message)
    return marker.complete(parser, Name, id=MISSING_NAME)


def parse_dotted_name(parser: Parser) -> list[Name]:
    """`a.b.c`; the dots belong to the enclosing open node."""
    parts = [parse_name(parser)]
    while parser.eat(TokenKind.DOT):
        parts.append(parse_name(parser))
    return parts


# -------------------------
# Lists of expressions
# -------------------------


def parse_testlist(parser: Parser, item: Callable[[Parser], Expression] | None = None) -> Expression:
    """`item (',' item)* [',']`; more than one item (or a trailing comma) is a Tuple."""
    parse_item = item or parse_test
    first = parse_item(parser)
    if not parser.at(TokenKind.COMMA):
        return first
    marker = parser.start()
    elts = [first]
    while parser.eat(TokenKind.COMMA):
        if not can_start_expression(parser):
            break
        elts.append(parse_item(parser))
    return marker.complete(parser, Tuple, elts=elts)


def parse_exprlist(parser: Parser) -> Expression:
    return parse_testlist(parser, parse_expr)


def parse_old_test(parser: Parser) -> Expression:
    """A test without a trailing conditional expression (`old_test`)."""
    return parse_test(parser, allow_conditional=False)


def parse_testlist_or_yield(parser: Parser) -> Expression:
    if parser.at(TokenKind.YIELD) and parser.features.yield_expressions:
        return parse_yield_expression(parser)
    return parse_testlist(parser)


# -------------------------
# Boolean and conditional expressions
# -------------------------


def parse_test(parser: Parser, *, allow_conditional: bool = True) -> Expression:
    if parser.at(TokenKind.LAMBDA):
        return parse_lambda(parser, allow_conditional=allow_conditional)

    expression = parse_or_test(parser)
    if not (allow_conditional and parser.features.conditional_expressions and parser.at(TokenKind.IF)):
        return expression

    marker = parser.start()
    parser.bump()
    test = parse_or_test(parser)
    if parser.eat(TokenKind.ELSE):
        orelse = parse_test(parser)
    else:
        orelse = parse_name(parser, "Expected 'else' in conditional expression")
    return marker.complete(parser, IfExp, body=expression, test=test, orelse=orelse)


def parse_or_test(parser: Parser) -> Expression:
    return _parse_bool_op(parser, TokenKind.OR, "or", parse_and_test)


def parse_and_test(parser: Parser) -> Expression:
    return _parse_bool_op(parser, TokenKind.AND, "and", parse_not_test)


def _parse_bool_op(
    parser: Parser,
    kind: TokenKind,
    op: str,
    operand: Callable[[Parser], Expression],
) -> Expression:
    first = operand(parser)
    if not parser.at(kind):
        return first
    marker = parser.start()
    values = [first]
    while parser.eat(kind):
        values.append(operand(parser))
    return marker.complete(parser, BoolOp, op=op, values=values)


def parse_not_test(parser: Parser) -> Expression:
    if not parser.at(TokenKind.NOT):
        return parse_comparison(parser)
    marker = parser.start()
    parser.bump()
    operand = parse_not_test(parser)
    return marker.complete(parser, UnaryOp, op="not", operand=operand)


def parse_comparison(parser: Parser) -> Expression:
    left = parse_expr(parser)
    if not _at_comparison(parser):
        return left
    marker = parser.start()
    ops: list[str] = []
    comparators: list[Expression] = []
    while _at_comparison(parser):
        ops.append(_bump_comparison_operator(parser))
        comparators.append(parse_expr(parser))
    return marker.complete(parser, Compare, left=left, ops=ops, comparators=comparators)


def _at_comparison(parser: Parser) -> bool:
    if parser.at(TokenKind.NOT):
        return parser.nth(1) == TokenKind.IN
    return parser.current in _COMPARISON_OPERATORS


def _bump_comparison_operator(parser: Parser) -> str:
    token = parser.bump()
    if token.kind == TokenKind.NOT:
        parser.bump()
        return "not in"
    if token.kind == TokenKind.IS and parser.eat(TokenKind.NOT):
        return "is not"
    return token.text


# -------------------------
# Arithmetic
# -------------------------


def parse_expr(parser: Parser) -> Expression:
    return _parse_binary(parser, _BITWISE_OR, _parse_xor_expr)


def _parse_xor_expr(parser: Parser) -> Expression:
    return _parse_binary(parser, _BITWISE_XOR, _parse_and_expr)


def _parse_and_expr(parser: Parser) -> Expression:
    return _parse_binary(parser, _BITWISE_AND, _parse_shift_expr)


def _parse_shift_expr(parser: Parser) -> Expression:
    return _parse_binary(parser, _SHIFT, _parse_arith_expr)


def _parse_arith_expr(parser: Parser) -> Expression:
    return _parse_binary(parser, _ARITHMETIC, _parse_term)


def _parse_term(parser: Parser) -> Expression:
    return _parse_binary(parser, _TERM, parse_factor)


def _parse_binary(
    parser: Parser,
    operators: Mapping[TokenKind, str],
    operand: Callable[[Parser], Expression],
) -> Expression:
    left = operand(parser)
    while parser.current in operators:
        marker = parser.start()
        op = operators[parser.bump().kind]
        right = operand(parser)
        left = marker.complete(parser, BinOp, left=left, op=op, right=right)
    return left


def parse_factor(parser: Parser) -> Expression:
    op = _UNARY.get(parser.current)
    if op is None:
        return parse_power(parser)
    marker = parser.start()
    parser.bump()
    operand = parse_factor(parser)
    return marker.complete(parser, UnaryOp, op=op, operand=operand)


def parse_power(parser: Parser) -> Expression:
    node = parse_atom_with_trailers(parser)
    if not parser.at(TokenKind.DOUBLESTAR):
        return node
    marker = parser.start()
    parser.bump()
    right = parse_factor(parser)
    return marker.complete(parser, BinOp, left=node, op="**", right=right)


# -------------------------
# Trailers
# -------------------------


def parse_atom_with_trailers(parser: Parser) -> Expression:
    node = parse_atom(parser)
    while True:
        match parser.current:
            case TokenKind.LPAR:
                node = parse_call(parser, node)
            case TokenKind.LSQB:
                marker = parser.start()
                parser.bump()
                index = _parse_subscript_list(parser)
                parser.expect_closer(TokenKind.RSQB)
                node = marker.complete(parser, Subscript, value=node, slice=index)
            case TokenKind.DOT:
                marker = parser.start()
                parser.bump()
                attr = parse_name(parser)
                node = marker.complete(parser, Attribute, value=node, attr=attr)
            case _:
                return node


def parse_call(parser: Parser, func: Expression) -> Call:
    marker = parser.start()
    parser.bump()

    args: list[Expression] = []
    keywords: list[Keyword] = []
    starargs: Expression | None = None
    kwargs: Expression | None = None
    progress = ParserProgress()

    while not parser.at(TokenKind.RPAR) and progress.has_progressed(parser):
        if parser.eat(TokenKind.STAR):
            starargs = parse_test(parser)
        elif parser.eat(TokenKind.DOUBLESTAR):
            kwargs = parse_test(parser)
        elif parser.at(TokenKind.NAME) and parser.nth(1) == TokenKind.EQUAL:
            keyword_marker = parser.start()
            name = parse_name(parser)
            parser.bump()
            value = parse_test(parser)
            keywords.append(keyword_marker.complete(parser, Keyword, arg=name, value=value))
        elif can_start_expression(parser):
            value = parse_test(parser)
            if parser.at(TokenKind.FOR):
                value = _parse_generator_tail(parser, value)
            args.append(value)
        else:
            break
        if not parser.eat(TokenKind.COMMA):
            break

    parser.expect_closer(TokenKind.RPAR)
    return marker.complete(parser, Call, func=func, args=args, keywords=keywords, starargs=starargs, kwargs=kwargs)


def _parse_subscript_list(parser: Parser) -> Expression:
    first = _parse_subscript(parser)
    if not parser.at(TokenKind.COMMA):
        return first
    marker = parser.start()
    elts = [first]
    while parser.eat(TokenKind.COMMA):
        if parser.at(TokenKind.RSQB):
            break
        elts.append(_parse_subscript(parser))
    return marker.complete(parser, Tuple, elts=elts)


def _parse_subscript(parser: Parser) -> Expression:
    if _at_dotted_ellipsis(parser):
        marker = parser.start()
        for _ in range(3):
            parser.bump()
        return marker.complete(parser, EllipsisLiteral)

    marker = parser.start()
    lower: Expression | None = None
    if not parser.at(TokenKind.COLON):
        lower = parse_test(parser)
        if not parser.at(TokenKind.COLON):
            marker.abandon(parser)
            return lower

    parser.bump()
    upper = parse_test(parser) if can_start_expression(parser) else None
    step = None
    if parser.eat(TokenKind.COLON) and can_start_expression(parser):
        step = parse_test(parser)
    return marker.complete(parser, Slice, lower=lower, upper=upper, step=step)


def _at_dotted_ellipsis(parser: Parser) -> bool:
    return (
        not parser.grammar.defines(TokenKind.ELLIPSIS)
        and parser.at(TokenKind.DOT)
        and parser.nth(1) == TokenKind.DOT
        and parser.nth(2) == TokenKind.DOT
    )


# -------------------------
# Atoms
# -------------------------


def parse_atom(parser: Parser) -> Expression:
    match parser.current:
        case TokenKind.NAME | TokenKind.TRUE | TokenKind.FALSE | TokenKind.NONE:
            marker = parser.start()
            token = parser.bump()
            return marker.complete(parser, Name, id=token.text)
        case TokenKind.NUMBER:
            marker = parser.start()
            token = parser.bump()
            return marker.complete(parser, Num, n=token.text)
        case TokenKind.STRING:
            marker = parser.start()
            parts: list[str] = []
            while parser.at(TokenKind.STRING):
                parts.append(string_contents(parser.bump().text))
            return marker.complete(parser, Str, s="".join(parts))
        case TokenKind.ELLIPSIS:
            marker = parser.start()
            parser.bump()
            return marker.complete(parser, EllipsisLiteral)
        case TokenKind.LPAR:
            return _parse_parenthesized(parser)
        case TokenKind.LSQB:
            return _parse_list_display(parser)
        case TokenKind.LBRACE:
            return _parse_brace_display(parser)
        case TokenKind.BACKQUOTE:
            marker = parser.start()
            parser.bump()
            value = parse_testlist(parser)
            parser.expect_closer(TokenKind.BACKQUOTE, "Expected closing '`'")
            return marker.complete(parser, Repr, value=value)
        case _:
            return parse_name(parser, "Expected an expression")


def string_contents(text: str) -> str:
    """Strip the prefix letters and the quotes from a string literal."""
    start = 0
    while start < len(text) and text[start] in "rRuUbB":
        start += 1
    body = text[start:]
    quote = body[:3] if body[:3] in ('"""', "'''") else body[:1]
    if len(body) >= 2 * len(quote) and body.endswith(quote):
        return body[len(quote) : len(body) - len(quote)]
    # unterminated literal
    return body[len(quote) :]


def _parse_parenthesized(parser: Parser) -> Expression:
    marker = parser.start()
    parser.bump()
    if parser.eat(TokenKind.RPAR):
        return marker.complete(parser, Tuple)

    first = parse_testlist_or_yield_item(parser)
    if parser.at(TokenKind.FOR):
        generators = parse_comprehension_clauses(parser, list_comprehension=False)
        parser.expect_closer(TokenKind.RPAR)
        return marker.complete(parser, GeneratorExp, elt=first, generators=generators)

    if parser.at(TokenKind.COMMA):
        elts = [first]
        while parser.eat(TokenKind.COMMA):
            if not can_start_expression(parser):
                break
            elts.append(parse_test(parser))
        parser.expect_closer(TokenKind.RPAR)
        return marker.complete(parser, Tuple, elts=elts)

    parser.expect_closer(TokenKind.RPAR)
    marker.merge_into(parser, first)
    return first


def parse_testlist_or_yield_item(parser: Parser) -> Expression:
    if parser.at(TokenKind.YIELD) and parser.features.yield_expressions:
        return parse_yield_expression(parser)
    return parse_test(parser)


def _parse_list_display(parser: Parser) -> Expression:
    marker = parser.start()
    parser.bump()
    if parser.eat(TokenKind.RSQB):
        return marker.complete(parser, List)

    first = parse_test(parser)
    if parser.at(TokenKind.FOR):
        generators = parse_comprehension_clauses(parser, list_comprehension=True)
        parser.expect_closer(TokenKind.RSQB)
        return marker.complete(parser, ListComp, elt=first, generators=generators)

    elts = _parse_display_items(parser, first, TokenKind.RSQB)
    parser.expect_closer(TokenKind.RSQB)
    return marker.complete(parser, List, elts=elts)


def _parse_brace_display(parser: Parser) -> Expression:
    marker = parser.start()
    parser.bump()
    if parser.eat(TokenKind.RBRACE):
        return marker.complete(parser, Dict)

    first = parse_test(parser)
    if parser.eat(TokenKind.COLON):
        value = _parse_dict_value(parser)
        if parser.at(TokenKind.FOR) and parser.features.set_dict_comprehensions:
            generators = parse_comprehension_clauses(parser, list_comprehension=False)
            parser.expect_closer(TokenKind.RBRACE)
            if value is None:
                value = parse_name(parser, "Expected a value in dict comprehension")
            return marker.complete(parser, DictComp, key=first, value=value, generators=generators)
        return _finish_dict(parser, marker, first, value)

    if not parser.features.set_literals:
        parser.recover(ParseErrorKind.DICT_VALUE_MISSING, "Expected ':' and a value after dict key")
        return _finish_dict(parser, marker, first, None)

    if parser.at(TokenKind.FOR):
        generators = parse_comprehension_clauses(parser, list_comprehension=False)
        parser.expect_closer(TokenKind.RBRACE)
        return marker.complete(parser, SetComp, elt=first, generators=generators)

    elts = _parse_display_items(parser, first, TokenKind.RBRACE)
    parser.expect_closer(TokenKind.RBRACE)
    return marker.complete(parser, Set, elts=elts)


def _finish_dict(parser: Parser, marker: Marker, key: Expression, value: Expression | None) -> Dict:
    keys = [key]
    values = [value]
    while parser.eat(TokenKind.COMMA):
        if parser.at(TokenKind.RBRACE) or not can_start_expression(parser):
            break
        keys.append(parse_test(parser))
        if parser.eat(TokenKind.COLON):
            values.append(_parse_dict_value(parser))
        else:
            parser.recover(ParseErrorKind.DICT_VALUE_MISSING, "Expected ':' and a value after dict key")
            values.append(None)
    parser.expect_closer(TokenKind.RBRACE)
    return marker.complete(parser, Dict, keys=keys, values=values)


def _parse_dict_value(parser: Parser) -> Expression | None:
    if can_start_expression(parser):
        return parse_test(parser)
    parser.recover(ParseErrorKind.DICT_VALUE_MISSING)
    return None


def _parse_display_items(parser: Parser, first: Expression, closer: TokenKind) -> list[Expression]:
    elts = [first]
    while parser.eat(TokenKind.COMMA):
        if parser.at(closer) or not can_start_expression(parser):
            break
        elts.append(parse_test(parser))
    return elts


# -------------------------
# Comprehensions
# -------------------------


def parse_comprehension_clauses(parser: Parser, *, list_comprehension: bool) -> list[Comprehension]:
    """One or more `for ... in ... [if ...]` clauses.

    2.x list comprehensions accept an unparenthesized tuple as iterable
    (`[x for x in 1, 2]`); every other form takes a single `or_test`.
    """
    tuple_iterables = list_comprehension and parser.features.tuple_comprehension_iterables
    generators: list[Comprehension] = []
    while parser.at(TokenKind.FOR):
        marker = parser.start()
        parser.bump()
        target = parse_exprlist(parser)
        if not parser.eat(TokenKind.IN):
            parser.recover(ParseErrorKind.STATEMENT_MALFORMED, "Expected 'in' in comprehension")
        iterable = parse_testlist(parser, parse_old_test) if tuple_iterables else parse_or_test(parser)
        ifs: list[Expression] = []
        while parser.eat(TokenKind.IF):
            ifs.append(parse_old_test(parser))
        generators.append(marker.complete(parser, Comprehension, target=target, iter=iterable, ifs=ifs))
    return generators


def _parse_generator_tail(parser: Parser, elt: Expression) -> GeneratorExp:
    """`f(x for x in y)`: the call's parentheses double as the generator's."""
    marker = parser.start()
    generators = parse_comprehension_clauses(parser, list_comprehension=False)
    return marker.complete(parser, GeneratorExp, elt=elt, generators=generators)


# -------------------------
# Lambda, yield and parameter lists
# -------------------------


def parse_lambda(parser: Parser, *, allow_conditional: bool = True) -> Lambda:
    marker = parser.start()
    parser.bump()
    args_marker = parser.start()
    args = args_marker.complete(parser, Arguments, **parse_parameter_list(parser, end=TokenKind.COLON, annotations=False))
    if not parser.eat(TokenKind.COLON):
        parser.recover(ParseErrorKind.STATEMENT_MALFORMED, "Expected ':' in lambda")
    body = parse_test(parser, allow_conditional=allow_conditional)
    return marker.complete(parser, Lambda, args=args, body=body)


def parse_yield_expression(parser: Parser) -> Yield:
    marker = parser.start()
    parser.bump()
    value = parse_testlist(parser) if can_start_expression(parser) else None
    return marker.complete(parser, Yield, value=value)


def parse_parameter_list(parser: Parser, *, end: TokenKind, annotations: bool) -> dict[str, object]:
    """Fields for an `Arguments` node: `varargslist` or 3.0 `typedargslist`.

    The caller owns the marker and any enclosing parentheses. Parameters
    after a bare `*` or `*args` are keyword-only in 3.0.
    """
    args: list[Expression] = []
    defaults: list[Expression] = []
    arg_annotations: list[Expression | None] = []
    kwonlyargs: list[Expression] = []
    kw_defaults: list[Expression | None] = []
    kwonly_annotations: list[Expression | None] = []
    fields: dict[str, object] = {
        "args": args,
        "defaults": defaults,
        "annotations": arg_annotations,
        "kwonlyargs": kwonlyargs,
        "kw_defaults": kw_defaults,
        "kwonly_annotations": kwonly_annotations,
    }
    keyword_only = False
    progress = ParserProgress()

    while not parser.at(end) and progress.has_progressed(parser):
        if parser.eat(TokenKind.STAR):
            keyword_only = parser.features.keyword_only_arguments
            if not (keyword_only and parser.at(TokenKind.COMMA)):
                fields["vararg"] = parse_name(parser)
                fields["vararg_annotation"] = _parse_annotation(parser, annotations)
        elif parser.eat(TokenKind.DOUBLESTAR):
            fields["kwarg"] = parse_name(parser)
            fields["kwarg_annotation"] = _parse_annotation(parser, annotations)
        elif parser.at(TokenKind.NAME) or (parser.at(TokenKind.LPAR) and parser.features.tuple_parameters):
            parameter = _parse_parameter(parser)
            annotation = _parse_annotation(parser, annotations)
            default = parse_test(parser) if parser.eat(TokenKind.EQUAL) else None
            if keyword_only:
                kwonlyargs.append(parameter)
                kw_defaults.append(default)
                kwonly_annotations.append(annotation)
            else:
                args.append(parameter)
                arg_annotations.append(annotation)
                if default is not None:
                    defaults.append(default)
        else:
            break
        if not parser.eat(TokenKind.COMMA):
            break
    return fields


def _parse_parameter(parser: Parser) -> Expression:
    """A parameter name, or a 2.x nested tuple parameter `(a, (b, c))`."""
    if not parser.at(TokenKind.LPAR):
        return parse_name(parser)
    marker = parser.start()
    parser.bump()
    elts = [_parse_parameter(parser)]
    while parser.eat(TokenKind.COMMA):
        if parser.at(TokenKind.RPAR):
            break
        elts.append(_parse_parameter(parser))
    parser.expect_closer(TokenKind.RPAR)
    return marker.complete(parser, Tuple, elts=elts)


def _parse_annotation(parser: Parser, annotations: bool) -> Expression | None:
    if annotations and parser.eat(TokenKind.COLON):
        return parse_test(parser)
    return None
