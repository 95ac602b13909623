"""Attach comments to the nodes around them.

Runs once per parse, after the token stream has assigned document order.
A comment goes, in order of preference:

1. before the outermost node that starts at the next significant token;
2. before the Module when no significant token precedes it;
3. after the outermost node that ends at the previous significant token;
4. otherwise into the token list of whichever node owns the next token,
   where the printer emits it in place.
"""

from lenientpy.ast import Module, Node
from lenientpy.lexer import Token, TokenKind

_INSIGNIFICANT = frozenset({TokenKind.INDENT, TokenKind.DEDENT, TokenKind.COMMENT})


class _CommentIndex:
    def __init__(self, module: Module) -> None:
        self.owners: dict[int, Node] = {}
        self.starts_at: dict[int, Node] = {}
        self.ends_at: dict[int, Node] = {}
        self._index(module)

    def _index(self, module: Module) -> None:
        # post-order without recursion; long elif chains nest thousands deep
        bounds: dict[int, tuple[int, int] | None] = {}
        stack: list[tuple[Node, bool]] = [(module, False)]
        while stack:
            node, expanded = stack.pop()
            if not expanded:
                stack.append((node, True))
                stack.extend((child, False) for child in node.children())
                continue

            first: int | None = None
            last: int | None = None
            for token in node.tokens:
                self.owners[token.order] = node
                if token.kind in _INSIGNIFICANT:
                    continue
                first = token.order if first is None else min(first, token.order)
                last = token.order if last is None else max(last, token.order)
            for child in node.children():
                child_bounds = bounds.pop(id(child), None)
                if child_bounds is None:
                    continue
                first = child_bounds[0] if first is None else min(first, child_bounds[0])
                last = child_bounds[1] if last is None else max(last, child_bounds[1])
            if first is None or last is None:
                bounds[id(node)] = None
                continue
            # parents are indexed after their children, so the outermost node wins
            if not isinstance(node, Module):
                self.starts_at[first] = node
                self.ends_at[last] = node
            bounds[id(node)] = (first, last)


def attach_comments(module: Module, tokens: list[Token]) -> None:
    """Distribute every COMMENT token of `tokens` (document order) onto the tree."""
    index = _CommentIndex(module)
    previous: Token | None = None
    pending: list[Token] = []

    for token in tokens:
        if token.kind == TokenKind.COMMENT:
            pending.append(token)
            continue
        # layout tokens and unowned synthetic tokens left behind by a rewind
        if token.kind in _INSIGNIFICANT or token.order not in index.owners:
            continue
        if pending:
            _place(index, module, pending, previous, token)
            pending = []
        previous = token

    if pending:
        module.before.extend(pending)


def _place(
    index: _CommentIndex,
    module: Module,
    comments: list[Token],
    previous: Token | None,
    following: Token,
) -> None:
    node: Node | None = index.starts_at.get(following.order)
    if node is not None:
        node.before.extend(comments)
        return
    if previous is None:
        module.before.extend(comments)
        return
    node = index.ends_at.get(previous.order)
    if node is not None:
        node.after.extend(comments)
        return
    index.owners[following.order].tokens.extend(comments)
