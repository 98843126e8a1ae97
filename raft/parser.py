"""
Raft v0.1 - Recursive Descent Parser
Converts a token stream into a list of statement nodes.

Each grammar rule is one method. Alternatives are ordered token tests,
``*`` is a loop that re-checks the lookahead token, ``?`` a single test.
"""

from typing import List, Optional
from .lexer import Token, TokenType
from .diagnostics import Reporter
from .values import TRUE, FALSE, NIL
from .ast_nodes import (
    Expr, Stmt, Literal, Variable, Assign, Grouping, Unary, Binary,
    Logical, ExprStmt, Print, VarDecl, Block, If, While
)


class ParseError(Exception):
    def __init__(self, token: Token, message: str):
        super().__init__(f"[ParseError] Line {token.line}: {message}")
        self.token = token
        self.message = message


# Tokens that begin a new declaration; panic mode stops in front of them.
_STATEMENT_STARTS = {
    TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR,
    TokenType.IF, TokenType.WHILE, TokenType.PRINT, TokenType.RETURN,
}


# Nesting bound for statements, groupings, unary and assignment chains.
# One level costs up to 15 Python frames.
_MAX_NESTING = 48


class Parser:
    def __init__(self, tokens: List[Token], reporter: Optional[Reporter] = None):
        self._tokens = tokens
        self._pos = 0
        self._depth = 0
        self._reporter = reporter if reporter is not None else Reporter()

    # ------------------------------------------------------------------ public

    def parse(self) -> List[Stmt]:
        """program -> declaration* EOF"""
        statements = []
        while not self._is_at_end():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    # ------------------------------------------------------------------ declarations

    def _declaration(self) -> Optional[Stmt]:
        """declaration -> varDecl | statement"""
        try:
            if self._match(TokenType.VAR):
                return self._var_declaration()
            return self._nested(self._statement)
        except ParseError as e:
            self._reporter.error_at(e.token, e.message)
            self._synchronize()
            return None

    def _var_declaration(self) -> VarDecl:
        """varDecl -> "var" IDENTIFIER ( "=" expression )? ";" """
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name.")
        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return VarDecl(name=name, initializer=initializer)

    # ------------------------------------------------------------------ statements

    def _statement(self) -> Stmt:
        if self._match(TokenType.FOR):
            return self._for_statement()
        if self._match(TokenType.IF):
            return self._if_statement()
        if self._match(TokenType.PRINT):
            return self._print_statement()
        if self._match(TokenType.WHILE):
            return self._while_statement()
        if self._match(TokenType.LEFT_BRACE):
            return Block(statements=self._block())
        return self._expression_statement()

    def _for_statement(self) -> Stmt:
        """
        forStmt -> "for" "(" ( varDecl | exprStmt | ";" )
                   expression? ";" expression? ")" statement

        Desugared into:  { init; while (cond) { body; incr; } }
        """
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self._match(TokenType.SEMICOLON):
            initializer = None
        elif self._match(TokenType.VAR):
            initializer = self._var_declaration()
        else:
            initializer = self._expression_statement()

        condition = None
        if not self._check(TokenType.SEMICOLON):
            condition = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self._check(TokenType.RIGHT_PAREN):
            increment = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self._nested(self._statement)

        if increment is not None:
            body = Block(statements=[body, ExprStmt(expression=increment)])
        if condition is None:
            condition = Literal(value=TRUE)
        body = While(condition=condition, body=body)

        if initializer is not None:
            body = Block(statements=[initializer, body])
        return body

    def _if_statement(self) -> If:
        """ifStmt -> "if" "(" expression ")" statement ( "else" statement )?"""
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self._nested(self._statement)
        else_branch = None
        if self._match(TokenType.ELSE):
            else_branch = self._nested(self._statement)
        return If(condition=condition, then_branch=then_branch, else_branch=else_branch)

    def _print_statement(self) -> Print:
        value = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return Print(expression=value)

    def _while_statement(self) -> While:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        body = self._nested(self._statement)
        return While(condition=condition, body=body)

    def _block(self) -> List[Stmt]:
        """block -> "{" declaration* "}" """
        statements = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)
        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def _expression_statement(self) -> ExprStmt:
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ExprStmt(expression=expr)

    # ------------------------------------------------------------------ expressions

    def _expression(self) -> Expr:
        return self._assignment()

    def _assignment(self) -> Expr:
        """assignment -> IDENTIFIER "=" assignment | logic_or"""
        expr = self._logic_or()

        if self._match(TokenType.EQUAL):
            equals = self._previous()
            value = self._nested(self._assignment)

            if isinstance(expr, Variable):
                return Assign(name=expr.name, value=value)
            # Reported without raising; parsing continues with the left-hand expression.
            self._reporter.error_at(equals, "Invalid assignment target.")

        return expr

    def _logic_or(self) -> Expr:
        expr = self._logic_and()
        while self._match(TokenType.OR):
            op_tok = self._previous()
            right = self._logic_and()
            expr = Logical(left=expr, operator=op_tok, right=right)
        return expr

    def _logic_and(self) -> Expr:
        expr = self._equality()
        while self._match(TokenType.AND):
            op_tok = self._previous()
            right = self._equality()
            expr = Logical(left=expr, operator=op_tok, right=right)
        return expr

    def _equality(self) -> Expr:
        return self._binary_level(self._comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def _comparison(self) -> Expr:
        return self._binary_level(
            self._term,
            TokenType.GREATER, TokenType.GREATER_EQUAL,
            TokenType.LESS, TokenType.LESS_EQUAL,
        )

    def _term(self) -> Expr:
        return self._binary_level(self._factor, TokenType.MINUS, TokenType.PLUS)

    def _factor(self) -> Expr:
        return self._binary_level(self._unary, TokenType.SLASH, TokenType.STAR)

    def _binary_level(self, operand, *operators: TokenType) -> Expr:
        """Left-associative: operand ( op operand )*"""
        expr = operand()
        while self._match(*operators):
            op_tok = self._previous()
            right = operand()
            expr = Binary(left=expr, operator=op_tok, right=right)
        return expr

    def _unary(self) -> Expr:
        """unary -> ( "!" | "-" ) unary | primary"""
        if self._match(TokenType.BANG, TokenType.MINUS):
            op_tok = self._previous()
            right = self._nested(self._unary)
            return Unary(operator=op_tok, right=right)
        return self._primary()

    def _primary(self) -> Expr:
        if self._match(TokenType.FALSE):
            return Literal(value=FALSE)
        if self._match(TokenType.TRUE):
            return Literal(value=TRUE)
        if self._match(TokenType.NIL):
            return Literal(value=NIL)
        if self._match(TokenType.NUMBER, TokenType.STRING):
            return Literal(value=self._previous().literal)
        if self._match(TokenType.IDENTIFIER):
            return Variable(name=self._previous())

        if self._match(TokenType.LEFT_PAREN):
            expr = self._nested(self._expression)
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expression=expr)

        raise ParseError(self._peek(), "Expect expression.")

    # ------------------------------------------------------------------ helpers

    def _nested(self, rule):
        """Run a recursive rule one level deeper, bounded by _MAX_NESTING."""
        if self._depth >= _MAX_NESTING:
            raise ParseError(self._peek(), "Too much nesting.")
        self._depth += 1
        try:
            return rule()
        finally:
            self._depth -= 1

    def _is_at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _previous(self) -> Token:
        return self._tokens[self._pos - 1]

    def _advance(self) -> Token:
        if not self._is_at_end():
            self._pos += 1
        return self._previous()

    def _check(self, ttype: TokenType) -> bool:
        if self._is_at_end():
            return False
        return self._peek().type == ttype

    def _match(self, *types: TokenType) -> bool:
        for ttype in types:
            if self._check(ttype):
                self._advance()
                return True
        return False

    def _consume(self, ttype: TokenType, message: str) -> Token:
        if self._check(ttype):
            return self._advance()
        raise ParseError(self._peek(), message)

    def _synchronize(self) -> None:
        """Discard tokens until the next statement boundary."""
        self._advance()

        while not self._is_at_end():
            if self._previous().type == TokenType.SEMICOLON:
                return
            if self._peek().type in _STATEMENT_STARTS:
                return
            self._advance()


def parse(tokens: List[Token], reporter: Optional[Reporter] = None) -> List[Stmt]:
    return Parser(tokens, reporter).parse()
