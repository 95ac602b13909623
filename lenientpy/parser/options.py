"""Parser configuration and debug flags."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

DEFAULT_DEDENT_SEARCH_BUDGET: Final[int] = 50

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class ParseOptions:
    """Immutable per-session flags controlling diagnostics and recovery.

    `trace_recovery` logs every recovery with its token context.
    `fast_token_stream` lexes the whole input up front; when False tokens are
    pulled from the lexer on demand. `dedent_search_budget` bounds how many
    tokens the dedent recovery scans before giving up.
    """

    trace_recovery: bool = False
    fast_token_stream: bool = True
    dedent_search_budget: int = DEFAULT_DEDENT_SEARCH_BUDGET

    def __post_init__(self) -> None:
        if self.dedent_search_budget < 1:
            raise ValueError("dedent_search_budget must be at least 1")

    @staticmethod
    def from_environ(environ: Mapping[str, str] | None = None) -> "ParseOptions":
        """Read the process-wide debug flags, once, at startup."""
        env = os.environ if environ is None else environ
        budget = env.get("LENIENTPY_DEDENT_BUDGET")
        return ParseOptions(
            trace_recovery=env.get("LENIENTPY_TRACE_RECOVERY", "0").lower() in _TRUTHY,
            fast_token_stream=env.get("LENIENTPY_NAIVE_TOKEN_STREAM", "0").lower() not in _TRUTHY,
            dedent_search_budget=int(budget) if budget else DEFAULT_DEDENT_SEARCH_BUDGET,
        )
