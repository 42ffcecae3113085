"""
Runtime object model for Lox: callables, classes and instances.

Classes:
    LoxCallable: Abstract base of everything that can appear before `(...)`.
    LoxFunction: A user function paired with the scope it was declared in.
    LoxClass: A class; calling it constructs an instance.
    LoxInstance: An object with a class pointer and free-form fields.
    NativeFunction: A callable implemented in Python (e.g. `clock`).
    ReturnSignal: Value produced by a `return` statement.

Returning from a function is not an exception. Executing a statement yields
either None (keep going) or a `ReturnSignal`; blocks and loops stop and hand
the signal outward, and `LoxFunction.call` is the only place that consumes it.
The signal therefore never leaves the function invocation that produced it.

The interpreter passed to `call` must provide
`execute_block(statements, environment) -> ReturnSignal | None`.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from loxlang.lox_ast import Function, Stmt
from loxlang.lox_environment import Environment
from loxlang.lox_errors import LoxRuntimeError
from loxlang.lox_scanner import Token


@dataclass(frozen=True)
class ReturnSignal:
    """A pending `return`; `value` is None for a bare `return;`."""

    value: Any = None


class BlockExecutor(Protocol):  # pragma: no cover
    """What the runtime model needs from the evaluator."""

    def execute_block(
        self, statements: Sequence[Stmt], environment: Environment
    ) -> ReturnSignal | None: ...


class LoxCallable(ABC):
    @abstractmethod
    def call(self, interpreter: BlockExecutor, arguments: list[Any]) -> Any: ...

    @abstractmethod
    def arity(self) -> int: ...


class LoxFunction(LoxCallable):
    """
    A function value: a declaration plus the environment it closes over.

    Attributes:
        declaration (Function): The parsed `fun`/method declaration.
        closure (Environment): Scope the body's new scope is parented on.
        is_initializer (bool): True for a class's `init` method, which always
            evaluates to the bound `this`.
    """

    def __init__(
        self, declaration: Function, closure: Environment, is_initializer: bool = False
    ) -> None:
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    def call(self, interpreter: BlockExecutor, arguments: list[Any]) -> Any:
        """
        Runs the body in a fresh scope with parameters bound positionally.

        Arity is not checked here; extra arguments are ignored and missing
        ones leave their parameters unbound.
        """
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        signal = interpreter.execute_block(self.declaration.body, environment)

        if self.is_initializer:
            return self.closure.get_at(0, "this")
        if signal is not None:
            return signal.value
        return None

    def arity(self) -> int:
        return len(self.declaration.params)

    def bind(self, instance: LoxInstance) -> LoxFunction:
        """Returns a copy whose closure has `this` bound to `instance`."""
        environment = Environment(self.closure)
        environment.define("this", instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def __repr__(self) -> str:
        return f"<fn {self.declaration.name.lexeme}>"


class LoxClass(LoxCallable):
    """
    A class value with an optional superclass.

    Attributes:
        name (str): Class name, as declared.
        superclass (LoxClass | None): Parent in the single-inheritance chain.
        methods (dict[str, LoxFunction]): Methods declared on this class only.
    """

    def __init__(
        self,
        name: str,
        superclass: LoxClass | None = None,
        methods: dict[str, LoxFunction] | None = None,
    ) -> None:
        self.name = name
        self.superclass = superclass
        self.methods: dict[str, LoxFunction] = methods or {}

    def find_method(self, name: str) -> LoxFunction | None:
        """Own methods first, then each superclass toward the root."""
        klass: LoxClass | None = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def call(self, interpreter: BlockExecutor, arguments: list[Any]) -> LoxInstance:
        instance = LoxInstance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def arity(self) -> int:
        initializer = self.find_method("init")
        return 0 if initializer is None else initializer.arity()

    def __repr__(self) -> str:
        return self.name


class LoxInstance:
    """
    An object created by calling a `LoxClass`.

    Fields are schema-less: `set` creates whatever it is given, and fields
    shadow methods of the same name on `get`.
    """

    def __init__(self, klass: LoxClass) -> None:
        self.klass = klass
        self.fields: dict[str, Any] = {}

    def get(self, name: Token) -> Any:
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name: Token, value: Any) -> None:
        self.fields[name.lexeme] = value

    def __repr__(self) -> str:
        return f"{self.klass.name} instance"


class NativeFunction(LoxCallable):
    """A host function exposed to Lox code as a global."""

    def __init__(self, name: str, arity: int, fn: Callable[..., Any]) -> None:
        self.name = name
        self._arity = arity
        self.fn = fn

    def call(self, interpreter: BlockExecutor, arguments: list[Any]) -> Any:
        return self.fn(*arguments)

    def arity(self) -> int:
        return self._arity

    def __repr__(self) -> str:
        return "<native fn>"


def native_globals() -> dict[str, NativeFunction]:
    """Natives installed in every fresh global environment."""
    return {"clock": NativeFunction("clock", 0, time.time)}


__all__ = [
    "LoxCallable",
    "LoxClass",
    "LoxFunction",
    "LoxInstance",
    "NativeFunction",
    "ReturnSignal",
    "native_globals",
]
