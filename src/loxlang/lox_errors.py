"""
Diagnostics and error types for the Lox tool chain.

Classes:
    ParseError: Raised inside the parser to abandon the current declaration.
    LoxRuntimeError: Raised by the runtime model and interpreter; carries the
        offending token so the driver can point at a source line.
    ErrorReporter: Collects lexical, syntax and runtime diagnostics and prints
        them as they arrive.

Reporting never stops the scanner or the parser. Both keep going and the
caller inspects `had_error` afterwards to decide whether to run the program.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from loxlang.lox_constants import TokenType

if TYPE_CHECKING:  # pragma: no cover
    from loxlang.lox_scanner import Token


class ParseError(SyntaxError):
    """Signals a grammar violation; caught by the parser's declaration loop."""


class LoxRuntimeError(RuntimeError):
    """
    A runtime failure raised while evaluating Lox code.

    Attributes:
        token (Token): The token closest to the failure (operator, name, paren).
        message (str): Human readable description, e.g. "Undefined property 'x'.".
    """

    def __init__(self, token: Token, message: str) -> None:
        super().__init__(message)
        self.token = token
        self.message = message


class ErrorReporter:
    """
    Records diagnostics produced while scanning, parsing and running Lox code.

    Attributes:
        diagnostics (list[str]): Formatted messages, in the order reported.
        had_error (bool): True once any lexical or syntax error was reported.
        had_runtime_error (bool): True once a runtime error was reported.
    """

    def __init__(self, stream: TextIO | None = None, quiet: bool = False) -> None:
        self.stream = stream
        self.quiet = quiet
        self.diagnostics: list[str] = []
        self.had_error = False
        self.had_runtime_error = False

    def report(self, line: int, message: str, where: str = "") -> None:
        """Records a lexical or syntax diagnostic attributed to `line`."""
        self._emit(f"[line {line}] Error{where}: {message}")
        self.had_error = True

    def error(self, token: Token, message: str) -> ParseError:
        """
        Reports a syntax error at `token` and returns the signal to raise.

        The parser decides whether to raise the returned `ParseError`; some
        problems (invalid assignment targets, oversized argument lists) are
        only reported.
        """
        if token.type == TokenType.EOF:
            self.report(token.line, message, " at end")
        else:
            self.report(token.line, message, f" at '{token.lexeme}'")
        return ParseError(message)

    def runtime_error(self, error: LoxRuntimeError) -> None:
        self._emit(f"{error.message}\n[line {error.token.line}]")
        self.had_runtime_error = True

    def reset(self) -> None:
        """Clears the error flags between REPL inputs; diagnostics are kept."""
        self.had_error = False
        self.had_runtime_error = False

    def _emit(self, text: str) -> None:
        self.diagnostics.append(text)
        if not self.quiet:
            print(text, file=self.stream or sys.stderr)


__all__ = ["ErrorReporter", "LoxRuntimeError", "ParseError"]
