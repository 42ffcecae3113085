# tests/test_ast_printer.py

from collections.abc import Callable

import pytest

from loxlang.emitters.ast_printer import AstPrinter
from loxlang.lox_ast import Binary, Expr, Grouping, Literal, Stmt, Unary
from loxlang.lox_constants import TokenType
from loxlang.lox_scanner import Token

Parse = Callable[[str], list[Stmt]]


def test_emit_literals() -> None:
    printer = AstPrinter()
    assert printer.emit_literal(Literal(1.0)) == "1"
    assert printer.emit_literal(Literal(1.5)) == "1.5"
    assert printer.emit_literal(Literal("hi")) == "'hi'"
    assert printer.emit_literal(Literal(None)) == "nil"
    assert printer.emit_literal(Literal(True)) == "true"


def test_emit_expr_nested() -> None:
    minus = Token(TokenType.MINUS, "-", None, 1)
    star = Token(TokenType.STAR, "*", None, 1)
    expr = Binary(Unary(minus, Literal(123.0)), star, Grouping(Literal(45.67)))
    assert AstPrinter().emit_expr(expr) == "(* (- 123) (group 45.67))"


@pytest.mark.parametrize(
    "source, expected",
    [
        ("var a;", "(var a)"),
        ("var a = 1;", "(var a = 1)"),
        ("a.b = c;", "(; (= (. a b) c))"),
        ("this.x;", "(; (. this x))"),
        ("if (a) print 1;", "(if a (print 1))"),
        ("if (a) print 1; else print 2;", "(if-else a (print 1) (print 2))"),
        ("{ }", "(block)"),
        ("fun f(a, b) { return a; }", "(fun f (a b) (return a))"),
        ("fun f() { return; }", "(fun f () (return))"),
        ("class C { m() {} }", "(class C (fun m ()))"),
    ],
)
def test_statement_forms(parse: Parse, source: str, expected: str) -> None:
    assert AstPrinter().print_program(parse(source)) == expected


def test_visit_buffers_statements_only(parse: Parse) -> None:
    printer = AstPrinter()
    (stmt,) = parse("print 1;")
    assert printer._visit(stmt) is None
    assert printer._visit(Literal(2.0)) == "2"
    assert printer.get_output() == "(print 1)"


def test_unknown_kind_raises() -> None:
    class Mystery(Expr):
        kind = "mystery"

    with pytest.raises(NotImplementedError):
        AstPrinter().emit_expr(Mystery())
