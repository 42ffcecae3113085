import io

import pytest

from loxlang.lox_constants import TokenType
from loxlang.lox_errors import ErrorReporter, LoxRuntimeError, ParseError
from loxlang.lox_scanner import Token


def test_report_formats_and_flags() -> None:
    stream = io.StringIO()
    reporter = ErrorReporter(stream)
    reporter.report(3, "Unterminated string.")
    assert reporter.had_error
    assert not reporter.had_runtime_error
    assert stream.getvalue() == "[line 3] Error: Unterminated string.\n"


def test_error_at_token_returns_parse_error() -> None:
    reporter = ErrorReporter(quiet=True)
    signal = reporter.error(Token(TokenType.IDENTIFIER, "foo", None, 2), "Expect ';'.")
    assert isinstance(signal, ParseError)
    assert isinstance(signal, SyntaxError)
    assert reporter.diagnostics == ["[line 2] Error at 'foo': Expect ';'."]


def test_error_at_eof() -> None:
    reporter = ErrorReporter(quiet=True)
    reporter.error(Token(TokenType.EOF, "", None, 9), "Expect expression.")
    assert reporter.diagnostics == ["[line 9] Error at end: Expect expression."]


def test_runtime_error_and_reset() -> None:
    reporter = ErrorReporter(quiet=True)
    token = Token(TokenType.IDENTIFIER, "x", None, 4)
    reporter.runtime_error(LoxRuntimeError(token, "Undefined property 'x'."))
    assert reporter.had_runtime_error
    assert reporter.diagnostics == ["Undefined property 'x'.\n[line 4]"]
    reporter.reset()
    assert not reporter.had_runtime_error
    assert not reporter.had_error
    assert len(reporter.diagnostics) == 1


def test_default_stream_is_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    ErrorReporter().report(1, "boom")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "[line 1] Error: boom\n"


def test_runtime_error_is_runtime_error() -> None:
    err = LoxRuntimeError(Token(TokenType.DOT, ".", None, 1), "msg")
    assert isinstance(err, RuntimeError)
    assert str(err) == "msg"
