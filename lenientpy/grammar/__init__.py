"""Grammar versions and their shared, read-only tables."""

from lenientpy.grammar.versions import (
    DEFAULT_REGISTRY,
    LATEST_GRAMMAR_VERSION,
    Grammar,
    GrammarContractError,
    GrammarFeatures,
    GrammarRegistry,
    GrammarVersion,
    grammar_for,
    grammar_version_from_str,
)

__all__ = [
    "DEFAULT_REGISTRY",
    "LATEST_GRAMMAR_VERSION",
    "Grammar",
    "GrammarContractError",
    "GrammarFeatures",
    "GrammarRegistry",
    "GrammarVersion",
    "grammar_for",
    "grammar_version_from_str",
]
