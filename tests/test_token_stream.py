import pytest

from lenientpy.grammar import GrammarContractError, GrammarVersion, grammar_for
from lenientpy.lexer import MISSING_NAME, Lexer, TokenKind
from lenientpy.parser import LazyTokenStream, TokenStream
from tests._shared_cases import KindInjectingLexer

SOURCE = "x = 1  # note\nif a:\n    y\n"


def _stream(source: str = SOURCE, *, lazy: bool = False) -> TokenStream:
    lexer = Lexer(source, grammar_for(GrammarVersion.PYTHON_2_6))
    return LazyTokenStream(lexer) if lazy else TokenStream(lexer)


@pytest.mark.parametrize("lazy", [False, True], ids=["fast", "lazy"])
def test_current_and_advance_skip_comments(lazy: bool) -> None:
    stream = _stream(lazy=lazy)
    texts: list[str] = []
    while stream.current.kind != TokenKind.EOF:
        texts.append(stream.advance().text)
    assert "# note" not in texts
    assert texts[:4] == ["x", "=", "1", "\n"]


@pytest.mark.parametrize("lazy", [False, True], ids=["fast", "lazy"])
def test_iter_tokens_keeps_comments_in_document_order(lazy: bool) -> None:
    stream = _stream(lazy=lazy)
    while stream.current.kind != TokenKind.EOF:
        stream.advance()
    tokens = stream.finish()
    assert [token.text for token in tokens[:5]] == ["x", "=", "1", "# note", "\n"]
    assert [token.order for token in tokens] == list(range(len(tokens)))


def test_advance_never_moves_past_eof() -> None:
    stream = _stream("")
    eof = stream.current
    assert eof.kind == TokenKind.EOF
    assert stream.advance() is eof
    assert stream.current is eof
    assert stream.peek(5) is eof


def test_peek_skips_comments() -> None:
    stream = _stream()
    stream.advance()
    stream.advance()
    assert stream.current.text == "1"
    assert stream.peek().kind == TokenKind.NEWLINE
    assert stream.peek_kind(2) == TokenKind.IF


def test_checkpoint_and_rewind() -> None:
    stream = _stream()
    checkpoint = stream.checkpoint()
    stream.advance()
    stream.advance()
    stream.rewind(checkpoint)
    assert stream.current.text == "x"


def test_rewind_to_rejects_foreign_token() -> None:
    stream = _stream()
    other = _stream()
    with pytest.raises(ValueError):
        stream.rewind_to(other.current)


def test_insert_synthetic_takes_over_prefix() -> None:
    stream = _stream()
    first = stream.advance()
    equals = stream.current
    synthetic = stream.insert_synthetic(first, TokenKind.NAME, MISSING_NAME)
    assert synthetic.is_synthetic
    assert synthetic.range.is_empty()
    assert synthetic.position == equals.position == (1, 3)
    assert synthetic.prefix == " "
    assert equals.prefix == ""
    assert stream.previous_token(synthetic) is first
    assert stream.next_token(synthetic) is equals
    assert stream.current is equals
    tokens = stream.finish()
    assert [token.text for token in tokens[:3]] == ["x", MISSING_NAME, "="]
    assert "".join(token.prefix + token.text for token in tokens).replace(MISSING_NAME, "") == SOURCE


def test_insert_synthetic_at_head() -> None:
    stream = _stream("  \nx\n")
    synthetic = stream.insert_synthetic(None, TokenKind.NAME, MISSING_NAME)
    assert synthetic.position == (2, 1)
    assert synthetic.prefix == "  \n"
    assert stream.current.prefix == ""
    assert stream.finish()[0] is synthetic


def test_insert_synthetic_in_lazy_stream_pulls_successor() -> None:
    stream = _stream(lazy=True)
    first = stream.current
    synthetic = stream.insert_synthetic(first, TokenKind.NAME, MISSING_NAME)
    assert synthetic.position == (1, 3)
    assert stream.next_token(synthetic).text == "="


def test_insert_synthetic_after_eof_is_rejected() -> None:
    stream = _stream()
    eof = stream.finish()[-1]
    with pytest.raises(ValueError):
        stream.insert_synthetic(eof, TokenKind.NAME, MISSING_NAME)


def test_insert_synthetic_rejects_kind_outside_grammar() -> None:
    stream = _stream()
    first = stream.advance()
    with pytest.raises(GrammarContractError):
        stream.insert_synthetic(first, TokenKind.NONLOCAL, "nonlocal")
    assert stream.current.prefix == " "


def test_lazy_stream_pulls_tokens_on_demand() -> None:
    stream = _stream(lazy=True)
    assert len(stream._arena) == 1
    stream.peek(3)
    assert 1 < len(stream._arena) < len(_stream().finish())


def test_token_kind_outside_grammar_is_fatal() -> None:
    lexer = KindInjectingLexer("x = 1\n", GrammarVersion.PYTHON_3_0, TokenKind.BACKQUOTE)
    with pytest.raises(GrammarContractError) as exc_info:
        TokenStream(lexer)  # type: ignore[arg-type]
    assert exc_info.value.kind == TokenKind.BACKQUOTE
    assert exc_info.value.version == GrammarVersion.PYTHON_3_0


def test_lazy_stream_reports_contract_violation_when_reached() -> None:
    lexer = KindInjectingLexer("x = 1\n", GrammarVersion.PYTHON_3_0, TokenKind.PRINT)
    stream = LazyTokenStream(lexer)  # type: ignore[arg-type]
    with pytest.raises(GrammarContractError):
        while stream.current.kind != TokenKind.EOF:
            stream.advance()
