"""AST node model and visitors."""

from lenientpy.ast.nodes import (
    NODE_TYPES,
    Alias,
    AnyNode,
    Arguments,
    Assert,
    Assign,
    Attribute,
    AugAssign,
    Auxiliary,
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
    Expression,
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
    Statement,
    Str,
    Subscript,
    Try,
    Tuple,
    UnaryOp,
    While,
    With,
    Yield,
    compute_span,
)
from lenientpy.ast.visitor import NodeCollector, NodeVisitor

__all__ = [
    "NODE_TYPES",
    "Alias",
    "AnyNode",
    "Arguments",
    "Assert",
    "Assign",
    "Attribute",
    "AugAssign",
    "Auxiliary",
    "BinOp",
    "BoolOp",
    "Break",
    "Call",
    "ClassDef",
    "Compare",
    "Comprehension",
    "Continue",
    "Decorator",
    "Delete",
    "Dict",
    "DictComp",
    "EllipsisLiteral",
    "ExceptHandler",
    "Exec",
    "Expr",
    "Expression",
    "For",
    "FunctionDef",
    "GeneratorExp",
    "Global",
    "If",
    "IfExp",
    "Import",
    "ImportFrom",
    "Keyword",
    "Lambda",
    "List",
    "ListComp",
    "Module",
    "Name",
    "Node",
    "NodeCollector",
    "NodeVisitor",
    "Nonlocal",
    "Num",
    "Pass",
    "Print",
    "Raise",
    "Repr",
    "Return",
    "Set",
    "SetComp",
    "Slice",
    "Statement",
    "Str",
    "Subscript",
    "Try",
    "Tuple",
    "UnaryOp",
    "While",
    "With",
    "Yield",
    "compute_span",
]
