import io
import os
from collections.abc import Callable
from typing import Any

import pytest

from loxlang.lox_ast import Stmt
from loxlang.lox_errors import ErrorReporter
from loxlang.lox_interpreter import Interpreter
from loxlang.lox_parser import Parser
from loxlang.lox_scanner import Scanner, Token

# Monkeypatch coverage to bypass teardown crash in act/docker
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

    # Nukes the teardown assertion that fails in act
    import coverage.collector

    def safe_stop(self: Any) -> None:
        if self in getattr(self, "_collectors", []):
            self._collectors.remove(self)

    coverage.collector.Collector.stop = safe_stop


@pytest.fixture
def reporter() -> ErrorReporter:
    return ErrorReporter(quiet=True)


@pytest.fixture
def scan(reporter: ErrorReporter) -> Callable[[str], list[Token]]:
    def _scan(source: str) -> list[Token]:
        return Scanner(source, reporter).scan_tokens()

    return _scan


@pytest.fixture
def parse(reporter: ErrorReporter) -> Callable[[str], list[Stmt]]:
    def _parse(source: str) -> list[Stmt]:
        return Parser(Scanner(source, reporter).scan_tokens(), reporter).parse()

    return _parse


@pytest.fixture
def run(reporter: ErrorReporter) -> Callable[[str], str]:
    """Runs a program in a fresh interpreter and returns what it printed."""

    def _run(source: str) -> str:
        out = io.StringIO()
        statements = Parser(Scanner(source, reporter).scan_tokens(), reporter).parse()
        assert not reporter.had_error, reporter.diagnostics
        Interpreter(reporter, out=out).interpret(statements)
        return out.getvalue()

    return _run
