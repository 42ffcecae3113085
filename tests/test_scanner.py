from collections.abc import Callable

import pytest
from hypothesis import given
from hypothesis import strategies as st

from loxlang.lox_constants import KEYWORDS, TokenType
from loxlang.lox_errors import ErrorReporter
from loxlang.lox_scanner import Scanner, Token, scan

Scan = Callable[[str], list[Token]]


def types(tokens: list[Token]) -> list[TokenType]:
    return [t.type for t in tokens]


def test_arithmetic_expression_tokens(scan: Scan) -> None:
    tokens = scan("1 + 2 * 3")
    assert types(tokens) == [
        TokenType.NUMBER,
        TokenType.PLUS,
        TokenType.NUMBER,
        TokenType.STAR,
        TokenType.NUMBER,
        TokenType.EOF,
    ]
    assert [t.literal for t in tokens if t.type == TokenType.NUMBER] == [1.0, 2.0, 3.0]


def test_single_char_tokens(scan: Scan) -> None:
    assert types(scan("(){},.-+;*/")) == [
        TokenType.LEFT_PAREN,
        TokenType.RIGHT_PAREN,
        TokenType.LEFT_BRACE,
        TokenType.RIGHT_BRACE,
        TokenType.COMMA,
        TokenType.DOT,
        TokenType.MINUS,
        TokenType.PLUS,
        TokenType.SEMICOLON,
        TokenType.STAR,
        TokenType.SLASH,
        TokenType.EOF,
    ]


@pytest.mark.parametrize(
    "source, expected",
    [
        ("!", TokenType.BANG),
        ("!=", TokenType.BANG_EQUAL),
        ("=", TokenType.EQUAL),
        ("==", TokenType.EQUAL_EQUAL),
        ("<", TokenType.LESS),
        ("<=", TokenType.LESS_EQUAL),
        (">", TokenType.GREATER),
        (">=", TokenType.GREATER_EQUAL),
    ],
)
def test_one_or_two_char_operators(scan: Scan, source: str, expected: TokenType) -> None:
    tokens = scan(source)
    assert types(tokens) == [expected, TokenType.EOF]
    assert tokens[0].lexeme == source


def test_triple_equals_is_two_tokens(scan: Scan) -> None:
    assert types(scan("===")) == [TokenType.EQUAL_EQUAL, TokenType.EQUAL, TokenType.EOF]


def test_eof_always_last(scan: Scan) -> None:
    tokens = scan("")
    assert tokens == [Token(TokenType.EOF, "", None, 1)]


def test_comment_is_skipped_without_report(scan: Scan, reporter: ErrorReporter) -> None:
    tokens = scan("// nothing to see @ here\nvar")
    assert types(tokens) == [TokenType.VAR, TokenType.EOF]
    assert tokens[0].line == 2
    assert reporter.diagnostics == []


def test_comment_at_end_of_input(scan: Scan, reporter: ErrorReporter) -> None:
    assert types(scan("1 // trailing")) == [TokenType.NUMBER, TokenType.EOF]
    assert not reporter.had_error


def test_string_literal(scan: Scan) -> None:
    tok = scan('"hello world"')[0]
    assert tok.type == TokenType.STRING
    assert tok.lexeme == '"hello world"'
    assert tok.literal == "hello world"


def test_multiline_string_counts_lines(scan: Scan) -> None:
    tokens = scan('"a\nb\nc" x')
    assert tokens[0].literal == "a\nb\nc"
    assert tokens[0].line == 3
    assert tokens[1].line == 3


def test_unterminated_string_reported_at_end_line(scan: Scan, reporter: ErrorReporter) -> None:
    source = 'var a;\nvar b;\n"starts on line 3\nstill going\nstops here'
    tokens = scan(source)
    assert reporter.diagnostics == ["[line 5] Error: Unterminated string."]
    assert TokenType.STRING not in types(tokens)
    assert tokens[-1].type == TokenType.EOF


def test_integer_number_is_float_literal(scan: Scan) -> None:
    tok = scan("123")[0]
    assert tok.type == TokenType.NUMBER
    assert tok.lexeme == "123"
    assert tok.literal == 123.0
    assert isinstance(tok.literal, float)


def test_decimal_number(scan: Scan) -> None:
    tok = scan("123.456")[0]
    assert tok.lexeme == "123.456"
    assert tok.literal == 123.456


def test_trailing_dot_not_part_of_number(scan: Scan) -> None:
    tokens = scan("123.")
    assert types(tokens) == [TokenType.NUMBER, TokenType.DOT, TokenType.EOF]
    assert tokens[0].lexeme == "123"


def test_method_call_on_number_keeps_dot(scan: Scan) -> None:
    assert types(scan("1.abs")) == [
        TokenType.NUMBER,
        TokenType.DOT,
        TokenType.IDENTIFIER,
        TokenType.EOF,
    ]


def test_identifier_token(scan: Scan) -> None:
    tok = scan("_my_var1")[0]
    assert tok.type == TokenType.IDENTIFIER
    assert tok.lexeme == "_my_var1"
    assert tok.literal is None


@pytest.mark.parametrize("word", sorted(KEYWORDS))
def test_keywords(scan: Scan, word: str) -> None:
    assert scan(word)[0].type == KEYWORDS[word]


def test_keyword_prefix_is_identifier(scan: Scan) -> None:
    assert scan("classy")[0].type == TokenType.IDENTIFIER
    assert scan("orchid")[0].type == TokenType.IDENTIFIER


def test_unexpected_character_reported_and_skipped(scan: Scan, reporter: ErrorReporter) -> None:
    tokens = scan("1 @ 2")
    assert types(tokens) == [TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF]
    assert reporter.diagnostics == ["[line 1] Error: Unexpected character: @."]


def test_whitespace_and_newlines(scan: Scan) -> None:
    tokens = scan(" \t\r\nfoo\n\nbar")
    assert [(t.lexeme, t.line) for t in tokens] == [("foo", 2), ("bar", 4), ("", 4)]


def test_token_is_immutable() -> None:
    tok = Token(TokenType.NIL, "nil", None, 1)
    with pytest.raises(AttributeError):
        tok.line = 2  # type: ignore[misc]


def test_scan_helper_default_reporter(capsys: pytest.CaptureFixture[str]) -> None:
    tokens = scan("#")
    assert types(tokens) == [TokenType.EOF]
    assert "Unexpected character: #." in capsys.readouterr().err


@given(st.text(max_size=200))
def test_scanner_never_raises(source: str) -> None:
    tokens = Scanner(source, ErrorReporter(quiet=True)).scan_tokens()
    assert tokens[-1].type == TokenType.EOF
    assert sum(1 for t in tokens if t.type == TokenType.EOF) == 1


@given(st.integers(min_value=0, max_value=10**9), st.integers(min_value=0, max_value=999))
def test_number_literals(whole: int, frac: int) -> None:
    text = f"{whole}.{frac}"
    tokens = Scanner(text, ErrorReporter(quiet=True)).scan_tokens()
    assert types(tokens) == [TokenType.NUMBER, TokenType.EOF]
    assert tokens[0].literal == float(text)


@given(st.from_regex(r"[A-Za-z_][A-Za-z0-9_]{0,20}", fullmatch=True))
def test_identifiers_or_keywords(word: str) -> None:
    tok = Scanner(word, ErrorReporter(quiet=True)).scan_tokens()[0]
    assert tok.lexeme == word
    assert tok.type == KEYWORDS.get(word, TokenType.IDENTIFIER)
