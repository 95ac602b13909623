"""Diagnostics core types."""

from dataclasses import dataclass

from lenientpy.diagnostics.codes import DiagnosticSpec, ParseErrorKind, Severity, spec_for
from lenientpy.lexer import Token


@dataclass(frozen=True, slots=True)
class ParseError:
    """A recovered syntax error, recorded where the parser detected it."""

    kind: ParseErrorKind
    token: Token
    message: str

    @staticmethod
    def new(kind: ParseErrorKind, token: Token, message: str | None = None) -> "ParseError":
        return ParseError(kind=kind, token=token, message=message or spec_for(kind).message)

    @property
    def spec(self) -> DiagnosticSpec:
        return spec_for(self.kind)

    @property
    def code(self) -> str:
        return self.spec.code

    @property
    def severity(self) -> Severity:
        return self.spec.severity

    @property
    def hint(self) -> str | None:
        return self.spec.hint

    @property
    def line(self) -> int:
        return self.token.line

    @property
    def column(self) -> int:
        return self.token.column

    def __str__(self) -> str:
        return f"{self.line}:{self.column}: {self.code}: {self.message}"
