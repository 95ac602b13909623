"""Diagnostics helpers."""

from __future__ import annotations

from collections.abc import Iterable

from lenientpy.diagnostics.diagnostic import ParseError


def has_errors(errors: Iterable[ParseError]) -> bool:
    return any(e.severity == "error" for e in errors)


def format_errors(errors: Iterable[ParseError], *, path: str | None = None) -> str:
    """One line per error, optionally prefixed with a file path."""
    prefix = f"{path}:" if path else ""
    return "\n".join(f"{prefix}{error}" for error in errors)
