"""
Renders Lox AST nodes as parenthesized prefix text.

This module defines the `AstPrinter` class, a debugging emitter that turns the
parser's output into a compact Lisp-like form. It is used by the CLI `--ast`
flag, the REPL's verbose mode, and the test-suite to assert tree shapes.

Examples:
    1 + 2 * 3          ->  (+ 1 (* 2 3))
    a = b = 3;         ->  (; (= a (= b 3)))
    print a.b(c);      ->  (print (call (. a b) c))
    var x;             ->  (var x)

Behavior:
    - Expressions are returned from `emit_expr` as strings.
    - Statements are appended to a line buffer (`lines`), retrieved with
      `get_output()`; nested statements are rendered inline.

Raises:
    - `NotImplementedError`: If a node kind has no emitter.
"""

from typing import Any

from loxlang import lox_ast as ast
from loxlang.lox_interpreter import stringify


class AstPrinter:
    """Emits prefix text for Lox AST nodes.

    Attributes:
        lines (list[str]): One rendered line per top-level statement.
    """

    def __init__(self) -> None:
        self.lines: list[str] = []

    def get_output(self) -> str:
        return "\n".join(self.lines)

    def print_program(self, statements: list[ast.Stmt]) -> str:
        """Renders every statement, one per line."""
        for stmt in statements:
            self._visit(stmt)
        return self.get_output()

    def parenthesize(self, name: str, *parts: Any) -> str:
        rendered = [name]
        for part in parts:
            if isinstance(part, ast.Node):
                rendered.append(self.render(part))
            elif isinstance(part, (list, tuple)):
                rendered.extend(self.render(p) for p in part)
            else:
                rendered.append(str(part))
        return "(" + " ".join(rendered) + ")"

    # Expressions

    def emit_literal(self, node: ast.Literal) -> str:
        if isinstance(node.value, str):
            return repr(node.value)
        return stringify(node.value)

    def emit_grouping(self, node: ast.Grouping) -> str:
        return self.parenthesize("group", node.expression)

    def emit_unary(self, node: ast.Unary) -> str:
        return self.parenthesize(node.operator.lexeme, node.right)

    def emit_binary(self, node: ast.Binary) -> str:
        return self.parenthesize(node.operator.lexeme, node.left, node.right)

    def emit_variable(self, node: ast.Variable) -> str:
        return node.name.lexeme

    def emit_assign(self, node: ast.Assign) -> str:
        return self.parenthesize("=", node.name.lexeme, node.value)

    def emit_get(self, node: ast.Get) -> str:
        return self.parenthesize(".", node.object, node.name.lexeme)

    def emit_set(self, node: ast.Set) -> str:
        return self.parenthesize("=", self.emit_get(ast.Get(node.object, node.name)), node.value)

    def emit_call(self, node: ast.Call) -> str:
        return self.parenthesize("call", node.callee, node.arguments)

    def emit_this(self, node: ast.This) -> str:
        return "this"

    # Statements

    def emit_expression(self, node: ast.Expression) -> str:
        return self.parenthesize(";", node.expression)

    def emit_print(self, node: ast.Print) -> str:
        return self.parenthesize("print", node.expression)

    def emit_var(self, node: ast.Var) -> str:
        if node.initializer is None:
            return self.parenthesize("var", node.name.lexeme)
        return self.parenthesize("var", node.name.lexeme, "=", node.initializer)

    def emit_block(self, node: ast.Block) -> str:
        return self.parenthesize("block", node.statements)

    def emit_if(self, node: ast.If) -> str:
        if node.else_branch is None:
            return self.parenthesize("if", node.condition, node.then_branch)
        return self.parenthesize("if-else", node.condition, node.then_branch, node.else_branch)

    def emit_while(self, node: ast.While) -> str:
        return self.parenthesize("while", node.condition, node.body)

    def emit_function(self, node: ast.Function) -> str:
        params = "(" + " ".join(p.lexeme for p in node.params) + ")"
        return self.parenthesize("fun", node.name.lexeme, params, node.body)

    def emit_return(self, node: ast.Return) -> str:
        if node.value is None:
            return "(return)"
        return self.parenthesize("return", node.value)

    def emit_class(self, node: ast.Class) -> str:
        return self.parenthesize("class", node.name.lexeme, node.methods)

    # Dispatch

    def render(self, node: ast.Node) -> str:
        """Renders any node to a string without touching the line buffer."""
        meth = getattr(self, f"emit_{node.kind}", None)
        if meth is None:
            raise NotImplementedError(f"AstPrinter: no emitter for {node.kind}")
        return str(meth(node))

    def emit_expr(self, node: ast.Expr) -> str:
        return self.render(node)

    def _visit(self, node: ast.Node) -> str | None:
        """Renders a node; statements are also appended to `lines`."""
        text = self.render(node)
        if isinstance(node, ast.Stmt):
            self.lines.append(text)
            return None
        return text


__all__ = ["AstPrinter"]
