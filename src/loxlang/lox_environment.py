"""
Lexical scope storage for the Lox runtime.

An `Environment` maps names to values and links to the lexically enclosing
environment. Closures hold a reference to the environment they were declared
in, so a scope stays alive for as long as any function captured it.

Lookup and assignment walk outward through `enclosing` until the name is
found; assignment never creates a binding, only `define` does.
"""

from __future__ import annotations

from typing import Any

from loxlang.lox_errors import LoxRuntimeError
from loxlang.lox_scanner import Token


class Environment:
    """
    One scope in the scope chain.

    Attributes:
        values (dict[str, Any]): Bindings owned by this scope.
        enclosing (Environment | None): The parent scope, None for globals.
    """

    def __init__(self, enclosing: Environment | None = None) -> None:
        self.values: dict[str, Any] = {}
        self.enclosing = enclosing

    def define(self, name: str, value: Any) -> None:
        """Binds `name` in this scope, replacing any existing binding."""
        self.values[name] = value

    def get(self, name: Token) -> Any:
        env: Environment | None = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any) -> None:
        env: Environment | None = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance: int) -> Environment:
        env = self
        for _ in range(distance):
            if env.enclosing is None:
                raise ValueError(f"No scope {distance} levels out")
            env = env.enclosing
        return env

    def get_at(self, distance: int, name: str) -> Any:
        """Reads `name` from the scope exactly `distance` hops outward."""
        return self.ancestor(distance).values.get(name)

    def assign_at(self, distance: int, name: Token, value: Any) -> None:
        self.ancestor(distance).values[name.lexeme] = value

    def __repr__(self) -> str:
        depth = 0
        env = self.enclosing
        while env is not None:
            depth += 1
            env = env.enclosing
        return f"Environment(names={sorted(self.values)}, depth={depth})"


__all__ = ["Environment"]
