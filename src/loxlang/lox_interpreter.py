"""
Tree-walking evaluator for Lox programs.

The `Interpreter` walks the statements produced by the parser. Nodes are
dispatched on their `kind` tag to `visit_<kind>` methods; a node kind without
a visitor raises `NotImplementedError`.

Statement visitors return `ReturnSignal | None`. A block or loop stops at the
first signal and returns it, so a `return` unwinds straight to the enclosing
`LoxFunction.call`, which consumes it.

Semantics:
    - `nil` and `false` are falsey, everything else is truthy.
    - `==` never coerces; values of different types are never equal.
    - `+` adds two numbers or concatenates two strings.
    - Other arithmetic and comparisons require numbers.
    - `and`/`or` short-circuit and yield the deciding operand.

Name lookup is dynamic: variables are found by walking the scope chain.

Raises:
    LoxRuntimeError: From `evaluate`/`execute`. `interpret` catches it and
        reports it, ending that run.
"""

from __future__ import annotations

import math
import sys
from collections.abc import Sequence
from typing import Any, TextIO

from loxlang import lox_ast as ast
from loxlang.lox_constants import TokenType
from loxlang.lox_environment import Environment
from loxlang.lox_errors import ErrorReporter, LoxRuntimeError
from loxlang.lox_runtime import (
    LoxCallable,
    LoxClass,
    LoxFunction,
    LoxInstance,
    ReturnSignal,
    native_globals,
)
from loxlang.lox_scanner import Token

T = TokenType


def is_truthy(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    if a is None:
        return b is None
    # bool is an int subclass in Python; keep `true == 1` false.
    return type(a) is type(b) and a == b


def stringify(value: Any) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return f"{value:.0f}"
        return repr(value)
    return str(value)


class Interpreter:
    """
    Evaluates Lox statements against a persistent global environment.

    Attributes:
        globals (Environment): Outermost scope, pre-populated with natives.
        environment (Environment): Scope currently in effect.
        reporter (ErrorReporter): Receives runtime errors from `interpret`.
        out (TextIO | None): Destination of `print`; stdout when None.
    """

    def __init__(self, reporter: ErrorReporter | None = None, out: TextIO | None = None) -> None:
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.out = out
        self.globals = Environment()
        for name, native in native_globals().items():
            self.globals.define(name, native)
        self.environment = self.globals

    def interpret(self, statements: Sequence[ast.Stmt]) -> None:
        """Runs a program; a runtime error is reported and stops the run."""
        try:
            for statement in statements:
                self.execute(statement)
        except LoxRuntimeError as error:
            self.reporter.runtime_error(error)

    # Dispatch

    def execute(self, stmt: ast.Stmt) -> ReturnSignal | None:
        method = getattr(self, f"visit_{stmt.kind}_stmt", None)
        if method is None:
            raise NotImplementedError(f"Interpreter: no visitor for statement {stmt.kind}")
        return method(stmt)  # type: ignore[no-any-return]

    def evaluate(self, expr: ast.Expr) -> Any:
        method = getattr(self, f"visit_{expr.kind}_expr", None)
        if method is None:
            raise NotImplementedError(f"Interpreter: no visitor for expression {expr.kind}")
        return method(expr)

    def execute_block(
        self, statements: Sequence[ast.Stmt], environment: Environment
    ) -> ReturnSignal | None:
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                signal = self.execute(statement)
                if signal is not None:
                    return signal
            return None
        finally:
            self.environment = previous

    # Statements

    def visit_expression_stmt(self, stmt: ast.Expression) -> None:
        self.evaluate(stmt.expression)

    def visit_print_stmt(self, stmt: ast.Print) -> None:
        value = self.evaluate(stmt.expression)
        print(stringify(value), file=self.out or sys.stdout)

    def visit_var_stmt(self, stmt: ast.Var) -> None:
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)
        self.environment.define(stmt.name.lexeme, value)

    def visit_block_stmt(self, stmt: ast.Block) -> ReturnSignal | None:
        return self.execute_block(stmt.statements, Environment(self.environment))

    def visit_if_stmt(self, stmt: ast.If) -> ReturnSignal | None:
        if is_truthy(self.evaluate(stmt.condition)):
            return self.execute(stmt.then_branch)
        if stmt.else_branch is not None:
            return self.execute(stmt.else_branch)
        return None

    def visit_while_stmt(self, stmt: ast.While) -> ReturnSignal | None:
        while is_truthy(self.evaluate(stmt.condition)):
            signal = self.execute(stmt.body)
            if signal is not None:
                return signal
        return None

    def visit_function_stmt(self, stmt: ast.Function) -> None:
        self.environment.define(stmt.name.lexeme, LoxFunction(stmt, self.environment))

    def visit_return_stmt(self, stmt: ast.Return) -> ReturnSignal:
        value = None if stmt.value is None else self.evaluate(stmt.value)
        return ReturnSignal(value)

    def visit_class_stmt(self, stmt: ast.Class) -> None:
        self.environment.define(stmt.name.lexeme, None)
        methods = {
            method.name.lexeme: LoxFunction(
                method, self.environment, is_initializer=method.name.lexeme == "init"
            )
            for method in stmt.methods
        }
        klass = LoxClass(stmt.name.lexeme, None, methods)
        self.environment.assign(stmt.name, klass)

    # Expressions

    def visit_literal_expr(self, expr: ast.Literal) -> Any:
        return expr.value

    def visit_grouping_expr(self, expr: ast.Grouping) -> Any:
        return self.evaluate(expr.expression)

    def visit_unary_expr(self, expr: ast.Unary) -> Any:
        right = self.evaluate(expr.right)
        if expr.operator.type == T.BANG:
            return not is_truthy(right)
        if expr.operator.type == T.MINUS:
            self._check_number_operand(expr.operator, right)
            return -right
        raise AssertionError(f"Unexpected unary operator: {expr.operator}")  # pragma: no cover

    def visit_binary_expr(self, expr: ast.Binary) -> Any:
        op = expr.operator
        left = self.evaluate(expr.left)

        if op.type == T.OR:
            return left if is_truthy(left) else self.evaluate(expr.right)
        if op.type == T.AND:
            return left if not is_truthy(left) else self.evaluate(expr.right)

        right = self.evaluate(expr.right)

        if op.type == T.EQUAL_EQUAL:
            return is_equal(left, right)
        if op.type == T.BANG_EQUAL:
            return not is_equal(left, right)
        if op.type == T.PLUS:
            if _is_number(left) and _is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(op, "Operands must be two numbers or two strings.")

        self._check_number_operands(op, left, right)
        if op.type == T.MINUS:
            return left - right
        if op.type == T.STAR:
            return left * right
        if op.type == T.SLASH:
            if right == 0:
                raise LoxRuntimeError(op, "Division by zero.")
            return left / right
        if op.type == T.GREATER:
            return left > right
        if op.type == T.GREATER_EQUAL:
            return left >= right
        if op.type == T.LESS:
            return left < right
        if op.type == T.LESS_EQUAL:
            return left <= right
        raise AssertionError(f"Unexpected binary operator: {op}")  # pragma: no cover

    def visit_variable_expr(self, expr: ast.Variable) -> Any:
        return self.environment.get(expr.name)

    def visit_assign_expr(self, expr: ast.Assign) -> Any:
        value = self.evaluate(expr.value)
        self.environment.assign(expr.name, value)
        return value

    def visit_get_expr(self, expr: ast.Get) -> Any:
        obj = self.evaluate(expr.object)
        if isinstance(obj, LoxInstance):
            return obj.get(expr.name)
        raise LoxRuntimeError(expr.name, "Only instances have properties.")

    def visit_set_expr(self, expr: ast.Set) -> Any:
        obj = self.evaluate(expr.object)
        if not isinstance(obj, LoxInstance):
            raise LoxRuntimeError(expr.name, "Only instances have fields.")
        value = self.evaluate(expr.value)
        obj.set(expr.name, value)
        return value

    def visit_call_expr(self, expr: ast.Call) -> Any:
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")
        if len(arguments) != callee.arity():
            raise LoxRuntimeError(
                expr.paren,
                f"Expected {callee.arity()} arguments but got {len(arguments)}.",
            )
        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LoxRuntimeError(expr.paren, "Stack overflow.") from None

    def visit_this_expr(self, expr: ast.This) -> Any:
        return self.environment.get(expr.keyword)

    # Helpers

    @staticmethod
    def _check_number_operand(operator: Token, operand: Any) -> None:
        if not _is_number(operand):
            raise LoxRuntimeError(operator, "Operand must be a number.")

    @staticmethod
    def _check_number_operands(operator: Token, left: Any, right: Any) -> None:
        if not (_is_number(left) and _is_number(right)):
            raise LoxRuntimeError(operator, "Operands must be numbers.")


def _is_number(value: Any) -> bool:
    return isinstance(value, float)


__all__ = ["Interpreter", "is_equal", "is_truthy", "stringify"]
