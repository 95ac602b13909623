"""Parsed syntax result utilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lenientpy.ast import AnyNode


@dataclass(frozen=True, slots=True)
class ParsedSyntax:
    """Success/failure wrapper for statement-level parse routines.

    A present result may carry several nodes (`a = 1; b = 2` or the
    statements of a stray indented block).
    """

    ok: bool
    nodes: tuple[AnyNode, ...] = ()

    @staticmethod
    def present(*nodes: AnyNode) -> ParsedSyntax:
        return ParsedSyntax(ok=True, nodes=nodes)

    @staticmethod
    def absent() -> ParsedSyntax:
        return ParsedSyntax(ok=False)

    def is_present(self) -> bool:
        return self.ok

    def is_absent(self) -> bool:
        return not self.ok
