"""AST data model for Python source.

Every node keeps the tokens it owns (keywords, punctuation, layout tokens
and anything skipped by recovery while it was being built) next to its typed
children, plus the comments attached before and after it. Reprinting the
tokens of a tree in document order reproduces the source.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from lenientpy.lexer import Token, TokenKind

if TYPE_CHECKING:
    from lenientpy.ast.visitor import NodeVisitor

_SPANLESS_KINDS = frozenset({TokenKind.NEWLINE, TokenKind.INDENT, TokenKind.DEDENT, TokenKind.COMMENT})


@dataclass(slots=True, kw_only=True)
class Node:
    _fields: ClassVar[tuple[str, ...]] = ()

    tokens: list[Token] = field(default_factory=list, repr=False)
    before: list[Token] = field(default_factory=list, repr=False)
    after: list[Token] = field(default_factory=list, repr=False)
    begin_line: int = 0
    begin_column: int = 0
    end_line: int = 0
    end_column: int = 0

    def children(self) -> list[AnyNode]:
        """Direct children in document order."""
        found: list[AnyNode] = []
        for name in self._fields:
            value = getattr(self, name)
            if isinstance(value, Node):
                found.append(value)  # type: ignore[arg-type]
            elif isinstance(value, list):
                found.extend(item for item in value if isinstance(item, Node))
        found.sort(key=lambda child: (child.begin_line, child.begin_column))
        return found

    def accept[R](self, visitor: NodeVisitor[R]) -> R:
        return visitor.visit(self)  # type: ignore[arg-type]

    def traverse(self, visitor: NodeVisitor[object]) -> None:
        for child in self.children():
            child.accept(visitor)

    @property
    def begin(self) -> tuple[int, int]:
        return (self.begin_line, self.begin_column)

    @property
    def end(self) -> tuple[int, int]:
        return (self.end_line, self.end_column)

    @property
    def specials_before(self) -> list[str]:
        return [token.text for token in self.before]

    @property
    def specials_after(self) -> list[str]:
        return [token.text for token in self.after]


def compute_span(node: Node, anchor: Token) -> None:
    """Set the node's begin/end from its own tokens and its children.

    Layout tokens, NEWLINE and comments never widen a span. A node without
    any positioned token collapses to the anchor position.
    """
    begin: tuple[int, int] | None = None
    end: tuple[int, int] | None = None
    for token in node.tokens:
        if token.kind in _SPANLESS_KINDS:
            continue
        if begin is None or token.position < begin:
            begin = token.position
        if end is None or token.end_position > end:
            end = token.end_position
    for child in node.children():
        if begin is None or child.begin < begin:
            begin = child.begin
        if end is None or child.end > end:
            end = child.end
    if begin is None or end is None:
        begin = end = anchor.position
    node.begin_line, node.begin_column = begin
    node.end_line, node.end_column = end


# -------------------------
# Module and statements
# -------------------------


@dataclass(slots=True, kw_only=True)
class Module(Node):
    """Root of every parse, even a failed one."""

    _fields: ClassVar[tuple[str, ...]] = ("body",)
    body: list[Statement] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class Expr(Node):
    """Expression used as a statement."""

    _fields: ClassVar[tuple[str, ...]] = ("value",)
    value: Expression


@dataclass(slots=True, kw_only=True)
class Assign(Node):
    _fields: ClassVar[tuple[str, ...]] = ("targets", "value")
    targets: list[Expression]
    value: Expression


@dataclass(slots=True, kw_only=True)
class AugAssign(Node):
    _fields: ClassVar[tuple[str, ...]] = ("target", "value")
    target: Expression
    op: str
    value: Expression


@dataclass(slots=True, kw_only=True)
class Print(Node):
    """Python 2 `print` statement; `nl` is False after a trailing comma."""

    _fields: ClassVar[tuple[str, ...]] = ("dest", "values")
    dest: Expression | None = None
    values: list[Expression] = field(default_factory=list)
    nl: bool = True


@dataclass(slots=True, kw_only=True)
class Delete(Node):
    _fields: ClassVar[tuple[str, ...]] = ("targets",)
    targets: list[Expression] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class Pass(Node):
    pass


@dataclass(slots=True, kw_only=True)
class Break(Node):
    pass


@dataclass(slots=True, kw_only=True)
class Continue(Node):
    pass


@dataclass(slots=True, kw_only=True)
class Return(Node):
    _fields: ClassVar[tuple[str, ...]] = ("value",)
    value: Expression | None = None


@dataclass(slots=True, kw_only=True)
class Raise(Node):
    """`raise type, inst, tback` (2.x) or `raise type from cause` (3.0)."""

    _fields: ClassVar[tuple[str, ...]] = ("type", "inst", "tback", "cause")
    type: Expression | None = None
    inst: Expression | None = None
    tback: Expression | None = None
    cause: Expression | None = None


@dataclass(slots=True, kw_only=True)
class Global(Node):
    _fields: ClassVar[tuple[str, ...]] = ("names",)
    names: list[Name] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class Nonlocal(Node):
    _fields: ClassVar[tuple[str, ...]] = ("names",)
    names: list[Name] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class Exec(Node):
    _fields: ClassVar[tuple[str, ...]] = ("body", "globals", "locals")
    body: Expression
    globals: Expression | None = None
    locals: Expression | None = None


@dataclass(slots=True, kw_only=True)
class Assert(Node):
    _fields: ClassVar[tuple[str, ...]] = ("test", "msg")
    test: Expression
    msg: Expression | None = None


@dataclass(slots=True, kw_only=True)
class Alias(Node):
    """Dotted import name with an optional `as` name."""

    _fields: ClassVar[tuple[str, ...]] = ("name", "asname")
    name: list[Name] = field(default_factory=list)
    asname: Name | None = None

    @property
    def dotted_name(self) -> str:
        return ".".join(part.id for part in self.name)


@dataclass(slots=True, kw_only=True)
class Import(Node):
    _fields: ClassVar[tuple[str, ...]] = ("names",)
    names: list[Alias] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class ImportFrom(Node):
    """`from <dots><module> import ...`; `level` counts the leading dots."""

    _fields: ClassVar[tuple[str, ...]] = ("module", "names")
    module: list[Name] = field(default_factory=list)
    level: int = 0
    names: list[Alias] = field(default_factory=list)
    star: bool = False

    @property
    def module_name(self) -> str:
        return ".".join(part.id for part in self.module)


@dataclass(slots=True, kw_only=True)
class If(Node):
    """`elif` chains nest as a single If inside `orelse`."""

    _fields: ClassVar[tuple[str, ...]] = ("test", "body", "orelse")
    test: Expression
    body: list[Statement] = field(default_factory=list)
    orelse: list[Statement] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class While(Node):
    _fields: ClassVar[tuple[str, ...]] = ("test", "body", "orelse")
    test: Expression
    body: list[Statement] = field(default_factory=list)
    orelse: list[Statement] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class For(Node):
    _fields: ClassVar[tuple[str, ...]] = ("target", "iter", "body", "orelse")
    target: Expression
    iter: Expression
    body: list[Statement] = field(default_factory=list)
    orelse: list[Statement] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class ExceptHandler(Node):
    _fields: ClassVar[tuple[str, ...]] = ("type", "name", "body")
    type: Expression | None = None
    name: Expression | None = None
    body: list[Statement] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class Try(Node):
    _fields: ClassVar[tuple[str, ...]] = ("body", "handlers", "orelse", "finalbody")
    body: list[Statement] = field(default_factory=list)
    handlers: list[ExceptHandler] = field(default_factory=list)
    orelse: list[Statement] = field(default_factory=list)
    finalbody: list[Statement] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class With(Node):
    _fields: ClassVar[tuple[str, ...]] = ("context_expr", "optional_vars", "body")
    context_expr: Expression
    optional_vars: Expression | None = None
    body: list[Statement] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class Decorator(Node):
    _fields: ClassVar[tuple[str, ...]] = ("func",)
    func: Expression


@dataclass(slots=True, kw_only=True)
class Arguments(Node):
    """Parameter list of a def or lambda.

    `defaults` align with the tail of `args`; `annotations` align with
    `args` one to one (None where absent).
    """

    _fields: ClassVar[tuple[str, ...]] = (
        "args",
        "defaults",
        "annotations",
        "vararg",
        "vararg_annotation",
        "kwonlyargs",
        "kw_defaults",
        "kwonly_annotations",
        "kwarg",
        "kwarg_annotation",
    )
    args: list[Expression] = field(default_factory=list)
    defaults: list[Expression] = field(default_factory=list)
    annotations: list[Expression | None] = field(default_factory=list)
    vararg: Name | None = None
    vararg_annotation: Expression | None = None
    kwonlyargs: list[Name] = field(default_factory=list)
    kw_defaults: list[Expression | None] = field(default_factory=list)
    kwonly_annotations: list[Expression | None] = field(default_factory=list)
    kwarg: Name | None = None
    kwarg_annotation: Expression | None = None


@dataclass(slots=True, kw_only=True)
class FunctionDef(Node):
    _fields: ClassVar[tuple[str, ...]] = ("decorators", "name", "args", "returns", "body")
    decorators: list[Decorator] = field(default_factory=list)
    name: Name
    args: Arguments
    returns: Expression | None = None
    body: list[Statement] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class ClassDef(Node):
    _fields: ClassVar[tuple[str, ...]] = ("decorators", "name", "bases", "body")
    decorators: list[Decorator] = field(default_factory=list)
    name: Name
    bases: list[Expression] = field(default_factory=list)
    body: list[Statement] = field(default_factory=list)


# -------------------------
# Expressions
# -------------------------


@dataclass(slots=True, kw_only=True)
class BoolOp(Node):
    _fields: ClassVar[tuple[str, ...]] = ("values",)
    op: str
    values: list[Expression] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class BinOp(Node):
    _fields: ClassVar[tuple[str, ...]] = ("left", "right")
    left: Expression
    op: str
    right: Expression


@dataclass(slots=True, kw_only=True)
class UnaryOp(Node):
    _fields: ClassVar[tuple[str, ...]] = ("operand",)
    op: str
    operand: Expression


@dataclass(slots=True, kw_only=True)
class Lambda(Node):
    _fields: ClassVar[tuple[str, ...]] = ("args", "body")
    args: Arguments
    body: Expression


@dataclass(slots=True, kw_only=True)
class IfExp(Node):
    """Conditional expression `body if test else orelse`."""

    _fields: ClassVar[tuple[str, ...]] = ("body", "test", "orelse")
    body: Expression
    test: Expression
    orelse: Expression


@dataclass(slots=True, kw_only=True)
class Dict(Node):
    """Dict display; a value is None when recovery found a key without one."""

    _fields: ClassVar[tuple[str, ...]] = ("keys", "values")
    keys: list[Expression] = field(default_factory=list)
    values: list[Expression | None] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class Set(Node):
    _fields: ClassVar[tuple[str, ...]] = ("elts",)
    elts: list[Expression] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class Comprehension(Node):
    """One `for target in iter if ...` clause."""

    _fields: ClassVar[tuple[str, ...]] = ("target", "iter", "ifs")
    target: Expression
    iter: Expression
    ifs: list[Expression] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class ListComp(Node):
    _fields: ClassVar[tuple[str, ...]] = ("elt", "generators")
    elt: Expression
    generators: list[Comprehension] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class SetComp(Node):
    _fields: ClassVar[tuple[str, ...]] = ("elt", "generators")
    elt: Expression
    generators: list[Comprehension] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class DictComp(Node):
    _fields: ClassVar[tuple[str, ...]] = ("key", "value", "generators")
    key: Expression
    value: Expression
    generators: list[Comprehension] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class GeneratorExp(Node):
    _fields: ClassVar[tuple[str, ...]] = ("elt", "generators")
    elt: Expression
    generators: list[Comprehension] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class Yield(Node):
    _fields: ClassVar[tuple[str, ...]] = ("value",)
    value: Expression | None = None


@dataclass(slots=True, kw_only=True)
class Compare(Node):
    _fields: ClassVar[tuple[str, ...]] = ("left", "comparators")
    left: Expression
    ops: list[str] = field(default_factory=list)
    comparators: list[Expression] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class Keyword(Node):
    _fields: ClassVar[tuple[str, ...]] = ("arg", "value")
    arg: Name
    value: Expression


@dataclass(slots=True, kw_only=True)
class Call(Node):
    _fields: ClassVar[tuple[str, ...]] = ("func", "args", "keywords", "starargs", "kwargs")
    func: Expression
    args: list[Expression] = field(default_factory=list)
    keywords: list[Keyword] = field(default_factory=list)
    starargs: Expression | None = None
    kwargs: Expression | None = None


@dataclass(slots=True, kw_only=True)
class Repr(Node):
    """Backquote repr, 2.x only."""

    _fields: ClassVar[tuple[str, ...]] = ("value",)
    value: Expression


@dataclass(slots=True, kw_only=True)
class Num(Node):
    """Numeric literal, kept as its source spelling."""

    n: str


@dataclass(slots=True, kw_only=True)
class Str(Node):
    """String literal; adjacent literals concatenate into one node.

    `s` holds the literal contents without prefixes and quotes, escapes
    left as written.
    """

    s: str


@dataclass(slots=True, kw_only=True)
class Attribute(Node):
    _fields: ClassVar[tuple[str, ...]] = ("value", "attr")
    value: Expression
    attr: Name


@dataclass(slots=True, kw_only=True)
class Subscript(Node):
    _fields: ClassVar[tuple[str, ...]] = ("value", "slice")
    value: Expression
    slice: Expression


@dataclass(slots=True, kw_only=True)
class Slice(Node):
    _fields: ClassVar[tuple[str, ...]] = ("lower", "upper", "step")
    lower: Expression | None = None
    upper: Expression | None = None
    step: Expression | None = None


@dataclass(slots=True, kw_only=True)
class EllipsisLiteral(Node):
    """`...`, written as three dots in 2.x subscripts and as a token in 3.0."""


@dataclass(slots=True, kw_only=True)
class Name(Node):
    id: str

    @property
    def is_missing(self) -> bool:
        """True for placeholder names produced by recovery."""
        return any(token.is_synthetic for token in self.tokens)


@dataclass(slots=True, kw_only=True)
class List(Node):
    _fields: ClassVar[tuple[str, ...]] = ("elts",)
    elts: list[Expression] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class Tuple(Node):
    _fields: ClassVar[tuple[str, ...]] = ("elts",)
    elts: list[Expression] = field(default_factory=list)


type Statement = (
    Expr
    | Assign
    | AugAssign
    | Print
    | Delete
    | Pass
    | Break
    | Continue
    | Return
    | Raise
    | Global
    | Nonlocal
    | Exec
    | Assert
    | Import
    | ImportFrom
    | If
    | While
    | For
    | Try
    | With
    | FunctionDef
    | ClassDef
)

type Expression = (
    BoolOp
    | BinOp
    | UnaryOp
    | Lambda
    | IfExp
    | Dict
    | Set
    | ListComp
    | SetComp
    | DictComp
    | GeneratorExp
    | Yield
    | Compare
    | Call
    | Repr
    | Num
    | Str
    | Attribute
    | Subscript
    | Slice
    | EllipsisLiteral
    | Name
    | List
    | Tuple
)

type Auxiliary = Alias | ExceptHandler | Decorator | Arguments | Comprehension | Keyword

type AnyNode = Module | Statement | Expression | Auxiliary

NODE_TYPES: tuple[type[Node], ...] = (
    Module,
    Expr,
    Assign,
    AugAssign,
    Print,
    Delete,
    Pass,
    Break,
    Continue,
    Return,
    Raise,
    Global,
    Nonlocal,
    Exec,
    Assert,
    Alias,
    Import,
    ImportFrom,
    If,
    While,
    For,
    ExceptHandler,
    Try,
    With,
    Decorator,
    Arguments,
    FunctionDef,
    ClassDef,
    BoolOp,
    BinOp,
    UnaryOp,
    Lambda,
    IfExp,
    Dict,
    Set,
    Comprehension,
    ListComp,
    SetComp,
    DictComp,
    GeneratorExp,
    Yield,
    Compare,
    Keyword,
    Call,
    Repr,
    Num,
    Str,
    Attribute,
    Subscript,
    Slice,
    EllipsisLiteral,
    Name,
    List,
    Tuple,
)
"""Every concrete node variant, in declaration order."""
