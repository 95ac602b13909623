"""Parse entry points: text in, tree plus errors out."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lenientpy.ast import Module
from lenientpy.diagnostics import ParseError, has_errors
from lenientpy.grammar import DEFAULT_REGISTRY, LATEST_GRAMMAR_VERSION, GrammarRegistry, GrammarVersion
from lenientpy.lexer import Lexer, Token
from lenientpy.parser.options import ParseOptions
from lenientpy.parser.parser import Parser
from lenientpy.parser.specials import attach_comments
from lenientpy.parser.statements import parse_file_input
from lenientpy.parser.token_stream import LazyTokenStream, TokenStream

if TYPE_CHECKING:
    from lenientpy.format import PrettyPrinterPrefs

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DocumentSnapshot:
    """Editor document state handed to `reparse`."""

    text: str
    grammar_version: GrammarVersion = LATEST_GRAMMAR_VERSION


@dataclass(slots=True)
class ParseResult:
    """Tree, errors and tokens of one parse.

    Each parse builds its own result; nothing in it is shared with other
    parses, so results may be handed across threads.
    """

    source_text: str
    tree: Module
    errors: tuple[ParseError, ...]
    grammar_version: GrammarVersion
    tokens: list[Token] = field(default_factory=list, repr=False)
    _source_print: str | None = field(default=None, init=False, repr=False)

    @property
    def first_error(self) -> ParseError | None:
        return self.errors[0] if self.errors else None

    @property
    def has_errors(self) -> bool:
        return has_errors(self.errors)

    def pretty_print(self, prefs: PrettyPrinterPrefs | None = None) -> str:
        from lenientpy.format import pretty_print

        if prefs is not None:
            return pretty_print(self.tree, prefs)
        if self._source_print is None:
            self._source_print = pretty_print(self.tree)
        return self._source_print


class ParseSession:
    """Parses documents with one grammar version and one set of options.

    A session holds no per-parse state, so one instance may serve many
    threads at once.
    """

    def __init__(
        self,
        grammar_version: GrammarVersion = LATEST_GRAMMAR_VERSION,
        options: ParseOptions | None = None,
        *,
        registry: GrammarRegistry | None = None,
    ) -> None:
        self._grammar_version = grammar_version
        self._options = options or ParseOptions()
        self._registry = registry or DEFAULT_REGISTRY

    @property
    def grammar_version(self) -> GrammarVersion:
        return self._grammar_version

    @property
    def options(self) -> ParseOptions:
        return self._options

    def parse(self, text: str) -> ParseResult:
        return self._parse(text, self._grammar_version)

    def reparse(self, snapshot: DocumentSnapshot) -> ParseResult:
        """Parse the snapshot from scratch; no state from earlier parses is reused."""
        return self._parse(snapshot.text, snapshot.grammar_version)

    def _parse(self, text: str, version: GrammarVersion) -> ParseResult:
        started = time.perf_counter()
        grammar = self._registry.get(version)
        lexer = Lexer(text, grammar)
        stream = TokenStream(lexer) if self._options.fast_token_stream else LazyTokenStream(lexer)
        parser = Parser(stream, self._options)

        tree = parse_file_input(parser)
        errors = parser.finish()
        tokens = stream.finish()
        attach_comments(tree, tokens)

        logger.debug(
            "parsed %d chars with grammar %s: %d statements, %d errors in %.2fms",
            len(text),
            version.label,
            len(tree.body),
            len(errors),
            (time.perf_counter() - started) * 1000,
        )
        return ParseResult(
            source_text=text,
            tree=tree,
            errors=tuple(errors),
            grammar_version=version,
            tokens=tokens,
        )


def parse(
    text: str,
    grammar_version: GrammarVersion = LATEST_GRAMMAR_VERSION,
    options: ParseOptions | None = None,
) -> ParseResult:
    return ParseSession(grammar_version, options).parse(text)


def reparse(snapshot: DocumentSnapshot, options: ParseOptions | None = None) -> ParseResult:
    return ParseSession(snapshot.grammar_version, options).reparse(snapshot)
