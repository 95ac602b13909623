"""Token-driven pretty printer.

Every node re-emits the tokens it owns, interleaved with its children in
document order, so an unmodified tree prints back to its source. The
preferences only touch whitespace between tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from lenientpy.ast import AnyNode, Node, NodeVisitor
from lenientpy.lexer import CLOSING_BRACKETS, Token, TokenKind

_LINE_ENDINGS: Final[frozenset[str]] = frozenset({"\n", "\r\n", "\r"})
_NO_SPACE_AFTER_COMMA: Final[frozenset[TokenKind]] = CLOSING_BRACKETS | {
    TokenKind.NEWLINE,
    TokenKind.EOF,
    TokenKind.COMMENT,
}
_INVISIBLE: Final[frozenset[TokenKind]] = frozenset({TokenKind.INDENT, TokenKind.DEDENT})


@dataclass(frozen=True, slots=True)
class PrettyPrinterPrefs:
    """Whitespace preferences. `None` keeps what the source had."""

    spaces_after_comma: int | None = None
    spaces_before_comment: int | None = None
    line_ending: str | None = None

    def __post_init__(self) -> None:
        for name in ("spaces_after_comma", "spaces_before_comment"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        if self.line_ending is not None and self.line_ending not in _LINE_ENDINGS:
            raise ValueError(f"Unsupported line ending {self.line_ending!r}")


class PrettyPrinter(NodeVisitor[None]):
    """Visitor that writes a subtree back out as source text."""

    def __init__(self, prefs: PrettyPrinterPrefs | None = None) -> None:
        self._prefs = prefs or PrettyPrinterPrefs()
        self._parts: list[str] = []
        self._previous_kind: TokenKind | None = None
        self._first_order: dict[int, int | None] = {}

    def print_node(self, node: AnyNode) -> str:
        node.accept(self)
        return "".join(self._parts)

    def _print(self, node: Node) -> None:
        for special in node.before:
            self._emit(special)

        items: list[tuple[int, Token | AnyNode]] = [(token.order, token) for token in node.tokens]
        for child in node.children():
            order = self._subtree_order(child)
            if order is not None:
                items.append((order, child))
        items.sort(key=lambda item: item[0])
        for _, item in items:
            if isinstance(item, Token):
                self._emit(item)
            else:
                item.accept(self)

        for special in node.after:
            self._emit(special)

    def _subtree_order(self, node: Node) -> int | None:
        key = id(node)
        if key in self._first_order:
            return self._first_order[key]
        orders = [token.order for token in node.tokens]
        orders.extend(
            order for child in node.children() if (order := self._subtree_order(child)) is not None
        )
        first = min(orders) if orders else None
        self._first_order[key] = first
        return first

    def _emit(self, token: Token) -> None:
        prefs = self._prefs
        prefix = token.prefix
        text = token.text
        inline = not token.has_preceding_line_break() and _is_inline_whitespace(prefix)

        if token.kind == TokenKind.COMMENT:
            if prefs.spaces_before_comment is not None and inline and self._previous_kind is not None:
                prefix = " " * prefs.spaces_before_comment
        elif (
            prefs.spaces_after_comma is not None
            and self._previous_kind == TokenKind.COMMA
            and token.kind not in _NO_SPACE_AFTER_COMMA
            and inline
        ):
            prefix = " " * prefs.spaces_after_comma

        if prefs.line_ending is not None:
            prefix = _normalize_line_endings(prefix, prefs.line_ending)
            if token.kind == TokenKind.NEWLINE and text:
                text = prefs.line_ending

        self._parts.append(prefix)
        self._parts.append(text)
        if token.kind not in _INVISIBLE:
            self._previous_kind = token.kind

    # Every node prints the same way: its tokens and children in document order.
    visit_module = _print
    visit_expr = _print
    visit_assign = _print
    visit_aug_assign = _print
    visit_print = _print
    visit_delete = _print
    visit_pass = _print
    visit_break = _print
    visit_continue = _print
    visit_return = _print
    visit_raise = _print
    visit_global = _print
    visit_nonlocal = _print
    visit_exec = _print
    visit_assert = _print
    visit_alias = _print
    visit_import = _print
    visit_import_from = _print
    visit_if = _print
    visit_while = _print
    visit_for = _print
    visit_except_handler = _print
    visit_try = _print
    visit_with = _print
    visit_decorator = _print
    visit_arguments = _print
    visit_function_def = _print
    visit_class_def = _print
    visit_bool_op = _print
    visit_bin_op = _print
    visit_unary_op = _print
    visit_lambda = _print
    visit_if_exp = _print
    visit_dict = _print
    visit_set = _print
    visit_comprehension = _print
    visit_list_comp = _print
    visit_set_comp = _print
    visit_dict_comp = _print
    visit_generator_exp = _print
    visit_yield = _print
    visit_compare = _print
    visit_keyword = _print
    visit_call = _print
    visit_repr = _print
    visit_num = _print
    visit_str = _print
    visit_attribute = _print
    visit_subscript = _print
    visit_slice = _print
    visit_ellipsis = _print
    visit_name = _print
    visit_list = _print
    visit_tuple = _print


def pretty_print(node: AnyNode, prefs: PrettyPrinterPrefs | None = None) -> str:
    return PrettyPrinter(prefs).print_node(node)


def _is_inline_whitespace(prefix: str) -> bool:
    return all(char in " \t" for char in prefix)


def _normalize_line_endings(text: str, line_ending: str) -> str:
    if "\r" not in text and "\n" not in text:
        return text
    return text.replace("\r\n", "\n").replace("\r", "\n").replace("\n", line_ending)
