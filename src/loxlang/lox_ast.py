"""
Defines the abstract syntax tree (AST) node structure for the Lox programming language.

Two closed families of nodes are produced by the parser and only read afterwards:

Expressions (`Expr`):
    Literal, Grouping, Unary, Binary, Variable, Assign, Get, Set, Call, This

Statements (`Stmt`):
    Expression, Print, Var, Block, If, While, Function, Return, Class

Each node is a frozen dataclass with a class-level `kind` tag. Consumers
(the interpreter, the AST printer) dispatch on `kind` to a `visit_<kind>` or
`emit_<kind>` method. Sequences are stored as tuples so a finished tree cannot
be mutated.

Every node carries the tokens needed for later error reporting (operators,
names, the closing paren of a call, the `return` keyword).

Example:
    Binary(Literal(1.0), Token(TokenType.PLUS, "+"), Literal(2.0)).to_dict()
"""

from dataclasses import dataclass, fields
from typing import Any, ClassVar

from loxlang.lox_scanner import Token


class Node:
    """Shared behaviour of every AST node."""

    kind: ClassVar[str] = "node"

    def to_dict(self) -> dict[str, Any]:
        """Converts the node (and all descendants) into nested plain data."""
        out: dict[str, Any] = {"kind": self.kind}
        for f in fields(self):  # type: ignore[arg-type]
            out[f.name] = _plain(getattr(self, f.name))
        return out


def _plain(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, Token):
        return value.lexeme
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


class Expr(Node):
    kind: ClassVar[str] = "expr"


class Stmt(Node):
    kind: ClassVar[str] = "stmt"


# Expressions


@dataclass(frozen=True)
class Literal(Expr):
    kind: ClassVar[str] = "literal"
    value: str | float | bool | None


@dataclass(frozen=True)
class Grouping(Expr):
    kind: ClassVar[str] = "grouping"
    expression: Expr


@dataclass(frozen=True)
class Unary(Expr):
    kind: ClassVar[str] = "unary"
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    """Any infix operator, including the short-circuiting `and` / `or`."""

    kind: ClassVar[str] = "binary"
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Variable(Expr):
    kind: ClassVar[str] = "variable"
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    kind: ClassVar[str] = "assign"
    name: Token
    value: Expr


@dataclass(frozen=True)
class Get(Expr):
    kind: ClassVar[str] = "get"
    object: Expr
    name: Token


@dataclass(frozen=True)
class Set(Expr):
    kind: ClassVar[str] = "set"
    object: Expr
    name: Token
    value: Expr


@dataclass(frozen=True)
class Call(Expr):
    """A call; `paren` is the closing parenthesis, used to locate runtime errors."""

    kind: ClassVar[str] = "call"
    callee: Expr
    paren: Token
    arguments: tuple[Expr, ...]


@dataclass(frozen=True)
class This(Expr):
    kind: ClassVar[str] = "this"
    keyword: Token


# Statements


@dataclass(frozen=True)
class Expression(Stmt):
    kind: ClassVar[str] = "expression"
    expression: Expr


@dataclass(frozen=True)
class Print(Stmt):
    kind: ClassVar[str] = "print"
    expression: Expr


@dataclass(frozen=True)
class Var(Stmt):
    kind: ClassVar[str] = "var"
    name: Token
    initializer: Expr | None = None


@dataclass(frozen=True)
class Block(Stmt):
    kind: ClassVar[str] = "block"
    statements: tuple[Stmt, ...]


@dataclass(frozen=True)
class If(Stmt):
    kind: ClassVar[str] = "if"
    condition: Expr
    then_branch: Stmt
    else_branch: Stmt | None = None


@dataclass(frozen=True)
class While(Stmt):
    kind: ClassVar[str] = "while"
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class Function(Stmt):
    kind: ClassVar[str] = "function"
    name: Token
    params: tuple[Token, ...]
    body: tuple[Stmt, ...]


@dataclass(frozen=True)
class Return(Stmt):
    kind: ClassVar[str] = "return"
    keyword: Token
    value: Expr | None = None


@dataclass(frozen=True)
class Class(Stmt):
    kind: ClassVar[str] = "class"
    name: Token
    methods: tuple[Function, ...]


__all__ = [
    "Assign",
    "Binary",
    "Block",
    "Call",
    "Class",
    "Expr",
    "Expression",
    "Function",
    "Get",
    "Grouping",
    "If",
    "Literal",
    "Node",
    "Print",
    "Return",
    "Set",
    "Stmt",
    "This",
    "Unary",
    "Var",
    "Variable",
    "While",
]
