"""Visitor dispatch over the closed set of node variants."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import assert_never

from lenientpy.ast.nodes import (
    Alias,
    AnyNode,
    Arguments,
    Assert,
    Assign,
    Attribute,
    AugAssign,
    BinOp,
    BoolOp,
    Break,
    Call,
    ClassDef,
    Compare,
    Comprehension,
    Continue,
    Decorator,
    Delete,
    Dict,
    DictComp,
    EllipsisLiteral,
    ExceptHandler,
    Exec,
    Expr,
    For,
    FunctionDef,
    GeneratorExp,
    Global,
    If,
    IfExp,
    Import,
    ImportFrom,
    Keyword,
    Lambda,
    List,
    ListComp,
    Module,
    Name,
    Node,
    Nonlocal,
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
    UnaryOp,
    While,
    With,
    Yield,
)


class NodeVisitor[R](ABC):
    """Base visitor: one abstract method per node variant.

    `visit` dispatches with an exhaustive match, so adding a variant without
    a handler fails type checking, and a subclass that skips a variant cannot
    be instantiated.
    """

    def visit(self, node: AnyNode) -> R:
        match node:
            case Module():
                return self.visit_module(node)
            case Expr():
                return self.visit_expr(node)
            case Assign():
                return self.visit_assign(node)
            case AugAssign():
                return self.visit_aug_assign(node)
            case Print():
                return self.visit_print(node)
            case Delete():
                return self.visit_delete(node)
            case Pass():
                return self.visit_pass(node)
            case Break():
                return self.visit_break(node)
            case Continue():
                return self.visit_continue(node)
            case Return():
                return self.visit_return(node)
            case Raise():
                return self.visit_raise(node)
            case Global():
                return self.visit_global(node)
            case Nonlocal():
                return self.visit_nonlocal(node)
            case Exec():
                return self.visit_exec(node)
            case Assert():
                return self.visit_assert(node)
            case Alias():
                return self.visit_alias(node)
            case Import():
                return self.visit_import(node)
            case ImportFrom():
                return self.visit_import_from(node)
            case If():
                return self.visit_if(node)
            case While():
                return self.visit_while(node)
            case For():
                return self.visit_for(node)
            case ExceptHandler():
                return self.visit_except_handler(node)
            case Try():
                return self.visit_try(node)
            case With():
                return self.visit_with(node)
            case Decorator():
                return self.visit_decorator(node)
            case Arguments():
                return self.visit_arguments(node)
            case FunctionDef():
                return self.visit_function_def(node)
            case ClassDef():
                return self.visit_class_def(node)
            case BoolOp():
                return self.visit_bool_op(node)
            case BinOp():
                return self.visit_bin_op(node)
            case UnaryOp():
                return self.visit_unary_op(node)
            case Lambda():
                return self.visit_lambda(node)
            case IfExp():
                return self.visit_if_exp(node)
            case Dict():
                return self.visit_dict(node)
            case Set():
                return self.visit_set(node)
            case Comprehension():
                return self.visit_comprehension(node)
            case ListComp():
                return self.visit_list_comp(node)
            case SetComp():
                return self.visit_set_comp(node)
            case DictComp():
                return self.visit_dict_comp(node)
            case GeneratorExp():
                return self.visit_generator_exp(node)
            case Yield():
                return self.visit_yield(node)
            case Compare():
                return self.visit_compare(node)
            case Keyword():
                return self.visit_keyword(node)
            case Call():
                return self.visit_call(node)
            case Repr():
                return self.visit_repr(node)
            case Num():
                return self.visit_num(node)
            case Str():
                return self.visit_str(node)
            case Attribute():
                return self.visit_attribute(node)
            case Subscript():
                return self.visit_subscript(node)
            case Slice():
                return self.visit_slice(node)
            case EllipsisLiteral():
                return self.visit_ellipsis(node)
            case Name():
                return self.visit_name(node)
            case List():
                return self.visit_list(node)
            case Tuple():
                return self.visit_tuple(node)
            case _:
                assert_never(node)

    # statements

    @abstractmethod
    def visit_module(self, node: Module) -> R: ...

    @abstractmethod
    def visit_expr(self, node: Expr) -> R: ...

    @abstractmethod
    def visit_assign(self, node: Assign) -> R: ...

    @abstractmethod
    def visit_aug_assign(self, node: AugAssign) -> R: ...

    @abstractmethod
    def visit_print(self, node: Print) -> R: ...

    @abstractmethod
    def visit_delete(self, node: Delete) -> R: ...

    @abstractmethod
    def visit_pass(self, node: Pass) -> R: ...

    @abstractmethod
    def visit_break(self, node: Break) -> R: ...

    @abstractmethod
    def visit_continue(self, node: Continue) -> R: ...

    @abstractmethod
    def visit_return(self, node: Return) -> R: ...

    @abstractmethod
    def visit_raise(self, node: Raise) -> R: ...

    @abstractmethod
    def visit_global(self, node: Global) -> R: ...

    @abstractmethod
    def visit_nonlocal(self, node: Nonlocal) -> R: ...

    @abstractmethod
    def visit_exec(self, node: Exec) -> R: ...

    @abstractmethod
    def visit_assert(self, node: Assert) -> R: ...

    @abstractmethod
    def visit_alias(self, node: Alias) -> R: ...

    @abstractmethod
    def visit_import(self, node: Import) -> R: ...

    @abstractmethod
    def visit_import_from(self, node: ImportFrom) -> R: ...

    @abstractmethod
    def visit_if(self, node: If) -> R: ...

    @abstractmethod
    def visit_while(self, node: While) -> R: ...

    @abstractmethod
    def visit_for(self, node: For) -> R: ...

    @abstractmethod
    def visit_except_handler(self, node: ExceptHandler) -> R: ...

    @abstractmethod
    def visit_try(self, node: Try) -> R: ...

    @abstractmethod
    def visit_with(self, node: With) -> R: ...

    @abstractmethod
    def visit_decorator(self, node: Decorator) -> R: ...

    @abstractmethod
    def visit_arguments(self, node: Arguments) -> R: ...

    @abstractmethod
    def visit_function_def(self, node: FunctionDef) -> R: ...

    @abstractmethod
    def visit_class_def(self, node: ClassDef) -> R: ...

    # expressions

    @abstractmethod
    def visit_bool_op(self, node: BoolOp) -> R: ...

    @abstractmethod
    def visit_bin_op(self, node: BinOp) -> R: ...

    @abstractmethod
    def visit_unary_op(self, node: UnaryOp) -> R: ...

    @abstractmethod
    def visit_lambda(self, node: Lambda) -> R: ...

    @abstractmethod
    def visit_if_exp(self, node: IfExp) -> R: ...

    @abstractmethod
    def visit_dict(self, node: Dict) -> R: ...

    @abstractmethod
    def visit_set(self, node: Set) -> R: ...

    @abstractmethod
    def visit_comprehension(self, node: Comprehension) -> R: ...

    @abstractmethod
    def visit_list_comp(self, node: ListComp) -> R: ...

    @abstractmethod
    def visit_set_comp(self, node: SetComp) -> R: ...

    @abstractmethod
    def visit_dict_comp(self, node: DictComp) -> R: ...

    @abstractmethod
    def visit_generator_exp(self, node: GeneratorExp) -> R: ...

    @abstractmethod
    def visit_yield(self, node: Yield) -> R: ...

    @abstractmethod
    def visit_compare(self, node: Compare) -> R: ...

    @abstractmethod
    def visit_keyword(self, node: Keyword) -> R: ...

    @abstractmethod
    def visit_call(self, node: Call) -> R: ...

    @abstractmethod
    def visit_repr(self, node: Repr) -> R: ...

    @abstractmethod
    def visit_num(self, node: Num) -> R: ...

    @abstractmethod
    def visit_str(self, node: Str) -> R: ...

    @abstractmethod
    def visit_attribute(self, node: Attribute) -> R: ...

    @abstractmethod
    def visit_subscript(self, node: Subscript) -> R: ...

    @abstractmethod
    def visit_slice(self, node: Slice) -> R: ...

    @abstractmethod
    def visit_ellipsis(self, node: EllipsisLiteral) -> R: ...

    @abstractmethod
    def visit_name(self, node: Name) -> R: ...

    @abstractmethod
    def visit_list(self, node: List) -> R: ...

    @abstractmethod
    def visit_tuple(self, node: Tuple) -> R: ...


class NodeCollector(NodeVisitor[None]):
    """Collects every node of a tree in depth-first, document order.

    Usage: `NodeCollector.collect(module, FunctionDef, ClassDef)`.
    """

    def __init__(self, *node_types: type[Node]) -> None:
        self._node_types = node_types
        self.nodes: list[AnyNode] = []

    @classmethod
    def collect(cls, root: AnyNode, *node_types: type[Node]) -> list[AnyNode]:
        collector = cls(*node_types)
        root.accept(collector)
        return collector.nodes

    def _record(self, node: AnyNode) -> None:
        if not self._node_types or isinstance(node, self._node_types):
            self.nodes.append(node)
        node.traverse(self)

    visit_module = _record
    visit_expr = _record
    visit_assign = _record
    visit_aug_assign = _record
    visit_print = _record
    visit_delete = _record
    visit_pass = _record
    visit_break = _record
    visit_continue = _record
    visit_return = _record
    visit_raise = _record
    visit_global = _record
    visit_nonlocal = _record
    visit_exec = _record
    visit_assert = _record
    visit_alias = _record
    visit_import = _record
    visit_import_from = _record
    visit_if = _record
    visit_while = _record
    visit_for = _record
    visit_except_handler = _record
    visit_try = _record
    visit_with = _record
    visit_decorator = _record
    visit_arguments = _record
    visit_function_def = _record
    visit_class_def = _record

    visit_bool_op = _record
    visit_bin_op = _record
    visit_unary_op = _record
    visit_lambda = _record
    visit_if_exp = _record
    visit_dict = _record
    visit_set = _record
    visit_comprehension = _record
    visit_list_comp = _record
    visit_set_comp = _record
    visit_dict_comp = _record
    visit_generator_exp = _record
    visit_yield = _record
    visit_compare = _record
    visit_keyword = _record
    visit_call = _record
    visit_repr = _record
    visit_num = _record
    visit_str = _record
    visit_attribute = _record
    visit_subscript = _record
    visit_slice = _record
    visit_ellipsis = _record
    visit_name = _record
    visit_list = _record
    visit_tuple = _record
