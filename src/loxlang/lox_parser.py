"""
Lox Language Parser

Parses Lox source tokens into an abstract syntax tree of statements.

This module implements a recursive-descent parser with one-token lookahead.
Operator precedence is encoded by one method per grammar level, lowest first:

    assignment (right-assoc) -> or -> and -> equality -> comparison
    -> term (+ -) -> factor (* /) -> unary (! -) -> call -> primary

All binary levels share `_binary`, a left fold: parse one operand, then while
the next token is one of the level's operators, consume it and wrap the result
so far as the left operand of a new `Binary` node.

Supported Constructs
--------------------
- Declarations: `class`, `fun`, `var`
- Statements: `for` (desugared to `while`), `if`/`else`, `print`, `return`,
  `while`, `{ ... }` blocks, expression statements
- Expressions: literals, grouping, unary, binary, assignment, property get/set,
  calls (chained in any order, e.g. `a.b().c`), `this`

Error Recovery
--------------
Grammar violations raise `ParseError` (a `SyntaxError`). `parse()` catches it
per declaration, calls `synchronize()` to skip to the next statement boundary,
and keeps going. The result is a best-effort list of statements; every problem
is recorded on the `ErrorReporter`.

Some problems are reported without raising: an invalid assignment target and
parameter/argument lists of 255 or more entries.
"""

from __future__ import annotations

from collections.abc import Callable

from loxlang.lox_ast import (
    Assign,
    Binary,
    Block,
    Call,
    Class,
    Expr,
    Expression,
    Function,
    Get,
    Grouping,
    If,
    Literal,
    Print,
    Return,
    Set,
    Stmt,
    This,
    Unary,
    Var,
    Variable,
    While,
)
from loxlang.lox_constants import MAX_ARGUMENTS, SYNC_TOKENS, TokenType
from loxlang.lox_errors import ErrorReporter, ParseError
from loxlang.lox_scanner import Token

T = TokenType


class Parser:
    """
    Lox Parser Class

    Attributes
    ----------
    tokens : list[Token]
        The input token stream, terminated by an EOF token.
    reporter : ErrorReporter
        Receives syntax diagnostics.
    current : int
        Index of the next token to consume. Only ever moves forward.

    Methods
    -------
    parse() -> list[Stmt]
        Parse a complete program, recovering from errors per declaration.
    parse_expression() -> Expr | None
        Parse a single expression (used by the REPL and tests).
    """

    def __init__(self, tokens: list[Token], reporter: ErrorReporter | None = None) -> None:
        if not tokens or tokens[-1].type != T.EOF:
            line = tokens[-1].line if tokens else 1
            tokens = list(tokens) + [Token(T.EOF, "", None, line)]
        self.tokens: list[Token] = tokens
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.current: int = 0

    def parse(self) -> list[Stmt]:
        """Parse a full Lox program and return its top-level statements."""
        statements: list[Stmt] = []
        while not self.is_at_end():
            try:
                stmt = self.declaration()
            except RecursionError:
                self.error(self.peek(), "Too much nesting.")
                self.synchronize()
                continue
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_expression(self) -> Expr | None:
        """Parse one expression; returns None (after reporting) if it is malformed."""
        try:
            return self.expression()
        except ParseError:
            return None
        except RecursionError:
            self.error(self.peek(), "Too much nesting.")
            return None

    # Declarations

    def declaration(self) -> Stmt | None:
        try:
            if self.match(T.CLASS):
                return self.class_declaration()
            if self.match(T.FUN):
                return self.function("function")
            if self.match(T.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None

    def class_declaration(self) -> Stmt:
        name = self.consume(T.IDENTIFIER, "Expect class name.")
        self.consume(T.LEFT_BRACE, "Expect '{' before class body.")
        methods: list[Function] = []
        while not self.check(T.RIGHT_BRACE) and not self.is_at_end():
            methods.append(self.function("method"))
        self.consume(T.RIGHT_BRACE, "Expect '}' after class body.")
        return Class(name, tuple(methods))

    def function(self, kind: str) -> Function:
        """Parse `name(params) { body }`; `kind` only flavours the messages."""
        name = self.consume(T.IDENTIFIER, f"Expect {kind} name.")
        self.consume(T.LEFT_PAREN, f"Expect '(' after {kind} name.")
        params: list[Token] = []
        if not self.check(T.RIGHT_PAREN):
            params.append(self.consume(T.IDENTIFIER, "Expect parameter name."))
            while self.match(T.COMMA):
                params.append(self.consume(T.IDENTIFIER, "Expect parameter name."))
        if len(params) >= MAX_ARGUMENTS:
            self.error(self.peek(), f"Can't have {MAX_ARGUMENTS} or more parameters.")
        self.consume(T.RIGHT_PAREN, "Expect ')' after parameters.")
        self.consume(T.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        body = self.block()
        return Function(name, tuple(params), tuple(body))

    def var_declaration(self) -> Stmt:
        name = self.consume(T.IDENTIFIER, "Expect variable name.")
        initializer = self.expression() if self.match(T.EQUAL) else None
        self.consume(T.SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    # Statements

    def statement(self) -> Stmt:
        if self.match(T.FOR):
            return self.for_statement()
        if self.match(T.IF):
            return self.if_statement()
        if self.match(T.PRINT):
            return self.print_statement()
        if self.match(T.RETURN):
            return self.return_statement()
        if self.match(T.WHILE):
            return self.while_statement()
        if self.match(T.LEFT_BRACE):
            return Block(tuple(self.block()))
        return self.expression_statement()

    def for_statement(self) -> Stmt:
        """
        Desugar `for (init; cond; incr) body` into

            { init; while (cond) { body; incr; } }

        A missing condition becomes `true`; a missing init or increment is
        left out of the wrapping blocks.
        """
        self.consume(T.LEFT_PAREN, "Expect '(' after 'for'.")

        initializer: Stmt | None
        if self.match(T.SEMICOLON):
            initializer = None
        elif self.match(T.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition: Expr = Literal(True)
        if not self.check(T.SEMICOLON):
            condition = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after loop condition.")

        increment: Expr | None = None
        if not self.check(T.RIGHT_PAREN):
            increment = self.expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()
        if increment is not None:
            body = Block((body, Expression(increment)))
        body = While(condition, body)
        if initializer is not None:
            body = Block((initializer, body))
        return body

    def if_statement(self) -> Stmt:
        self.consume(T.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after if condition.")
        then_branch = self.statement()
        # the innermost pending `if` claims the `else`
        else_branch = self.statement() if self.match(T.ELSE) else None
        return If(condition, then_branch, else_branch)

    def print_statement(self) -> Stmt:
        value = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def return_statement(self) -> Stmt:
        keyword = self.previous()
        value = None if self.check(T.SEMICOLON) else self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after return value.")
        return Return(keyword, value)

    def while_statement(self) -> Stmt:
        self.consume(T.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after condition.")
        return While(condition, self.statement())

    def block(self) -> list[Stmt]:
        """Parse declarations up to the closing brace; the '{' is already consumed."""
        statements: list[Stmt] = []
        while not self.check(T.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume(T.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def expression_statement(self) -> Stmt:
        expr = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    # Expressions

    def expression(self) -> Expr:
        return self.assignment()

    def assignment(self) -> Expr:
        expr = self.logic_or()

        if self.match(T.EQUAL):
            equals = self.previous()
            value = self.assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            if isinstance(expr, Get):
                return Set(expr.object, expr.name, value)
            # Reported, not raised: the parser is not confused, so no recovery.
            self.error(equals, "Invalid assignment target.")

        return expr

    def logic_or(self) -> Expr:
        return self._binary(self.logic_and, T.OR)

    def logic_and(self) -> Expr:
        return self._binary(self.equality, T.AND)

    def equality(self) -> Expr:
        return self._binary(self.comparison, T.BANG_EQUAL, T.EQUAL_EQUAL)

    def comparison(self) -> Expr:
        return self._binary(self.term, T.GREATER, T.GREATER_EQUAL, T.LESS, T.LESS_EQUAL)

    def term(self) -> Expr:
        return self._binary(self.factor, T.MINUS, T.PLUS)

    def factor(self) -> Expr:
        return self._binary(self.unary, T.SLASH, T.STAR)

    def unary(self) -> Expr:
        if self.match(T.BANG, T.MINUS):
            operator = self.previous()
            return Unary(operator, self.unary())
        return self.call()

    def call(self) -> Expr:
        expr = self.primary()
        while True:
            if self.match(T.LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(T.DOT):
                name = self.consume(T.IDENTIFIER, "Expect property name after '.'.")
                expr = Get(expr, name)
            else:
                break
        return expr

    def finish_call(self, callee: Expr) -> Expr:
        arguments: list[Expr] = []
        if not self.check(T.RIGHT_PAREN):
            arguments.append(self.expression())
            while self.match(T.COMMA):
                arguments.append(self.expression())
        if len(arguments) >= MAX_ARGUMENTS:
            self.error(self.peek(), f"Can't have {MAX_ARGUMENTS} or more arguments.")
        paren = self.consume(T.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, tuple(arguments))

    def primary(self) -> Expr:
        if self.match(T.FALSE):
            return Literal(False)
        if self.match(T.TRUE):
            return Literal(True)
        if self.match(T.NIL):
            return Literal(None)
        if self.match(T.NUMBER, T.STRING):
            return Literal(self.previous().literal)
        if self.match(T.THIS):
            return This(self.previous())
        if self.match(T.IDENTIFIER):
            return Variable(self.previous())
        if self.match(T.LEFT_PAREN):
            expr = self.expression()
            self.consume(T.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        raise self.error(self.peek(), "Expect expression.")

    def _binary(self, operand: Callable[[], Expr], *operators: TokenType) -> Expr:
        expr = operand()
        while self.match(*operators):
            operator = self.previous()
            right = operand()
            expr = Binary(expr, operator, right)
        return expr

    # Recovery

    def synchronize(self) -> None:
        """Discard tokens until a likely statement boundary."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type == T.SEMICOLON:
                return
            if self.peek().type in SYNC_TOKENS:
                return
            self.advance()

    # Token cursor

    def match(self, *types: TokenType) -> bool:
        for type_ in types:
            if self.check(type_):
                self.advance()
                return True
        return False

    def consume(self, type_: TokenType, message: str) -> Token:
        if self.check(type_):
            return self.advance()
        raise self.error(self.peek(), message)

    def check(self, type_: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type == type_

    def advance(self) -> Token:
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self) -> bool:
        return self.peek().type == T.EOF

    def peek(self) -> Token:
        return self.tokens[self.current]

    def previous(self) -> Token:
        return self.tokens[self.current - 1]

    def error(self, token: Token, message: str) -> ParseError:
        return self.reporter.error(token, message)


def parse(tokens: list[Token], reporter: ErrorReporter | None = None) -> list[Stmt]:
    """Convenience wrapper: parses `tokens` and returns the statements."""
    return Parser(tokens, reporter).parse()


__all__ = ["Parser", "parse"]
