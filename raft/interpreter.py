"""
Raft v0.1 - Tree-Walking Interpreter
Executes the statement list produced by the parser.
"""

import sys
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, TextIO

from .lexer import Token, TokenType
from .diagnostics import Reporter
from .values import (
    Value, String, Number, Boolean, Callable, NIL, InternalError,
    to_string, is_truthy, is_equal
)
from .ast_nodes import (
    ASTNode, Expr, Stmt, Literal, Variable, Assign, Grouping, Unary,
    Binary, Logical, ExprStmt, Print, VarDecl, Block, If, While
)


class RaftRuntimeError(Exception):
    def __init__(self, token: Token, message: str):
        super().__init__(f"[RuntimeError] Line {token.line}: {message}")
        self.token = token
        self.message = message


@dataclass(frozen=True, eq=False)
class NativeFunction(Callable):
    """A host function exposed to Raft programs."""
    name: str = ""
    params: int = 0
    fn: object = None

    def arity(self) -> int:
        return self.params

    def call(self, interpreter: "Interpreter", arguments: List[Value]) -> Value:
        return self.fn(*arguments)


class Environment:
    def __init__(self, enclosing: Optional["Environment"] = None):
        self.enclosing = enclosing
        self._values: Dict[str, Value] = {}

    def define(self, name: str, value: Value) -> None:
        # Redefinition is allowed; the last one wins.
        self._values[name] = value

    def get(self, name: Token) -> Value:
        env = self
        while env is not None:
            if name.lexeme in env._values:
                return env._values[name.lexeme]
            env = env.enclosing
        raise RaftRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Value) -> None:
        env = self
        while env is not None:
            if name.lexeme in env._values:
                env._values[name.lexeme] = value
                return
            env = env.enclosing
        raise RaftRuntimeError(name, f"Undefined variable '{name.lexeme}'.")


_ARITHMETIC = {
    TokenType.MINUS: lambda a, b: a - b,
    TokenType.STAR:  lambda a, b: a * b,
}

_COMPARISON = {
    TokenType.GREATER:       lambda a, b: a > b,
    TokenType.GREATER_EQUAL: lambda a, b: a >= b,
    TokenType.LESS:          lambda a, b: a < b,
    TokenType.LESS_EQUAL:    lambda a, b: a <= b,
}


class Interpreter:
    def __init__(self, out: Optional[TextIO] = None, reporter: Optional[Reporter] = None):
        self._out = out
        self.reporter = reporter if reporter is not None else Reporter()
        self.globals = Environment()
        self._env = self.globals

        self.globals.define(
            "clock",
            NativeFunction(name="clock", params=0, fn=lambda: Number(time.time())),
        )

    # ------------------------------------------------------------------ public

    def interpret(self, statements: List[Stmt]) -> bool:
        """Run statements in order. Returns False if a runtime error stopped it."""
        try:
            for stmt in statements:
                self.execute(stmt)
        except RaftRuntimeError as e:
            self.reporter.runtime_error(e)
            return False
        return True

    def execute(self, stmt: Stmt) -> None:
        self._dispatch("_exec", stmt)

    def evaluate(self, expr: Expr) -> Value:
        return self._dispatch("_eval", expr)

    def execute_block(self, statements: List[Stmt], env: Environment) -> None:
        previous = self._env
        try:
            self._env = env
            for stmt in statements:
                self.execute(stmt)
        finally:
            self._env = previous

    def call(self, callee: Value, arguments: List[Value], token: Token) -> Value:
        """Invoke a callable value after checking it accepts the arguments."""
        if not isinstance(callee, Callable):
            raise RaftRuntimeError(token, "Can only call functions and classes.")
        if len(arguments) != callee.arity():
            raise RaftRuntimeError(
                token,
                f"Expected {callee.arity()} arguments but got {len(arguments)}."
            )
        return callee.call(self, arguments)

    # ------------------------------------------------------------------ visitor

    def _dispatch(self, prefix: str, node: ASTNode):
        method = getattr(self, f"{prefix}_{type(node).__name__}", None)
        if method is None:
            raise InternalError(f"No handler for node type {type(node).__name__}")
        return method(node)

    # ------------------------------------------------------------------ statements

    def _exec_ExprStmt(self, stmt: ExprStmt) -> None:
        self.evaluate(stmt.expression)

    def _exec_Print(self, stmt: Print) -> None:
        value = self.evaluate(stmt.expression)
        print(to_string(value), file=self._out or sys.stdout)

    def _exec_VarDecl(self, stmt: VarDecl) -> None:
        value = NIL
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)
        self._env.define(stmt.name.lexeme, value)

    def _exec_Block(self, stmt: Block) -> None:
        self.execute_block(stmt.statements, Environment(self._env))

    def _exec_If(self, stmt: If) -> None:
        if is_truthy(self.evaluate(stmt.condition)):
            self.execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            self.execute(stmt.else_branch)

    def _exec_While(self, stmt: While) -> None:
        while is_truthy(self.evaluate(stmt.condition)):
            self.execute(stmt.body)

    # ------------------------------------------------------------------ expressions

    def _eval_Literal(self, expr: Literal) -> Value:
        return expr.value

    def _eval_Grouping(self, expr: Grouping) -> Value:
        return self.evaluate(expr.expression)

    def _eval_Variable(self, expr: Variable) -> Value:
        return self._env.get(expr.name)

    def _eval_Assign(self, expr: Assign) -> Value:
        value = self.evaluate(expr.value)
        self._env.assign(expr.name, value)
        return value

    def _eval_Logical(self, expr: Logical) -> Value:
        left = self.evaluate(expr.left)
        if expr.operator.type == TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left
        return self.evaluate(expr.right)

    def _eval_Unary(self, expr: Unary) -> Value:
        right = self.evaluate(expr.right)
        if expr.operator.type == TokenType.BANG:
            return Boolean(not is_truthy(right))
        if expr.operator.type == TokenType.MINUS:
            _check_number_operand(expr.operator, right)
            return Number(-right.value)
        raise InternalError(f"Unknown unary operator {expr.operator.lexeme!r}")

    def _eval_Binary(self, expr: Binary) -> Value:
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        op = expr.operator

        if op.type == TokenType.EQUAL_EQUAL:
            return Boolean(is_equal(left, right))
        if op.type == TokenType.BANG_EQUAL:
            return Boolean(not is_equal(left, right))

        if op.type == TokenType.PLUS:
            if isinstance(left, Number) and isinstance(right, Number):
                return Number(left.value + right.value)
            if isinstance(left, String) and isinstance(right, String):
                return String(left.value + right.value)
            raise RaftRuntimeError(op, "Operands must be two numbers or two strings.")

        _check_number_operands(op, left, right)
        if op.type == TokenType.SLASH:
            if right.value == 0:
                raise RaftRuntimeError(op, "Division by zero.")
            return Number(left.value / right.value)
        if op.type in _ARITHMETIC:
            return Number(_ARITHMETIC[op.type](left.value, right.value))
        if op.type in _COMPARISON:
            return Boolean(_COMPARISON[op.type](left.value, right.value))
        raise InternalError(f"Unknown binary operator {op.lexeme!r}")


def _check_number_operand(operator: Token, operand: Value) -> None:
    if not isinstance(operand, Number):
        raise RaftRuntimeError(operator, "Operand must be a number.")


def _check_number_operands(operator: Token, left: Value, right: Value) -> None:
    if not (isinstance(left, Number) and isinstance(right, Number)):
        raise RaftRuntimeError(operator, "Operands must be numbers.")
