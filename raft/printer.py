"""
Raft v0.1 - AST Printer
Renders parsed nodes as parenthesized prefix text or as JSON.
"""

import json

from .lexer import Token
from .values import Value, String, Number, InternalError, to_string
from .ast_nodes import (
    ASTNode, Literal, Variable, Assign, Grouping, Unary, Binary, Logical,
    ExprStmt, Print, VarDecl, Block, If, While
)


def to_lisp(node: ASTNode) -> str:
    """(+ 1 (* 2 3)) style rendering of an expression or statement."""
    if isinstance(node, Literal):
        if isinstance(node.value, String):
            return f'"{node.value.value}"'
        if isinstance(node.value, Number):
            return f"{node.value.value:g}"
        return to_string(node.value)
    if isinstance(node, Variable):
        return node.name.lexeme
    if isinstance(node, Assign):
        return _parenthesize("=", node.name.lexeme, node.value)
    if isinstance(node, Grouping):
        return _parenthesize("group", node.expression)
    if isinstance(node, Unary):
        return _parenthesize(node.operator.lexeme, node.right)
    if isinstance(node, (Binary, Logical)):
        return _parenthesize(node.operator.lexeme, node.left, node.right)

    if isinstance(node, ExprStmt):
        return _parenthesize(";", node.expression)
    if isinstance(node, Print):
        return _parenthesize("print", node.expression)
    if isinstance(node, VarDecl):
        if node.initializer is None:
            return _parenthesize("var", node.name.lexeme)
        return _parenthesize("var", node.name.lexeme, node.initializer)
    if isinstance(node, Block):
        return _parenthesize("block", *node.statements)
    if isinstance(node, If):
        if node.else_branch is None:
            return _parenthesize("if", node.condition, node.then_branch)
        return _parenthesize("if", node.condition, node.then_branch, node.else_branch)
    if isinstance(node, While):
        return _parenthesize("while", node.condition, node.body)

    raise InternalError(f"Cannot print node type {type(node).__name__}")


def _parenthesize(name: str, *parts) -> str:
    rendered = [p if isinstance(p, str) else to_lisp(p) for p in parts]
    return "(" + " ".join([name] + rendered) + ")"


# ── JSON serialization (for --emit-ast) ──────────────────────────────────────

def to_json(statements) -> str:
    return json.dumps(_node_to_dict(statements), indent=2)


def _node_to_dict(node):
    if node is None:
        return None
    if isinstance(node, list):
        return [_node_to_dict(n) for n in node]
    if isinstance(node, Token):
        return node.lexeme
    if isinstance(node, Value):
        d = {"_type": type(node).__name__}
        if hasattr(node, "value"):
            d["value"] = node.value
        return d
    if not hasattr(node, '__dataclass_fields__'):
        return node  # primitive
    d = {"_type": type(node).__name__}
    for field_name in node.__dataclass_fields__:
        val = getattr(node, field_name)
        d[field_name] = _node_to_dict(val)
    return d
