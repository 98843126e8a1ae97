"""
Raft v0.1 - AST Node Definitions
Expression and statement nodes produced by the parser. Nodes are frozen;
every parent exclusively owns its children.
"""

from dataclasses import dataclass, field
from typing import Optional, List

from .lexer import Token
from .values import Value


@dataclass(frozen=True)
class ASTNode:
    """Base class for all AST nodes."""


# ── Expressions ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Expr(ASTNode):
    pass


@dataclass(frozen=True)
class Literal(Expr):
    """NUMBER | STRING | true | false | nil"""
    value: Value


@dataclass(frozen=True)
class Variable(Expr):
    """IDENTIFIER"""
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    """IDENTIFIER = assignment"""
    name: Token
    value: Expr


@dataclass(frozen=True)
class Grouping(Expr):
    """( expression )"""
    expression: Expr


@dataclass(frozen=True)
class Unary(Expr):
    """(! | -) unary"""
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Logical(Expr):
    """left (and | or) right, short-circuiting."""
    left: Expr
    operator: Token
    right: Expr


# ── Statements ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Stmt(ASTNode):
    pass


@dataclass(frozen=True)
class ExprStmt(Stmt):
    """expression ;"""
    expression: Expr


@dataclass(frozen=True)
class Print(Stmt):
    """print expression ;"""
    expression: Expr


@dataclass(frozen=True)
class VarDecl(Stmt):
    """var IDENTIFIER (= expression)? ;"""
    name: Token
    initializer: Optional[Expr] = None


@dataclass(frozen=True)
class Block(Stmt):
    """{ declaration* }"""
    statements: List[Stmt] = field(default_factory=list)


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt
