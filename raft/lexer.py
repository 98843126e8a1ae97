"""
Raft v0.1 - Lexer
Tokenizes Raft source code into a flat token stream.
"""

import re
from dataclasses import dataclass
from typing import List, Optional
from enum import Enum, auto

from .diagnostics import Reporter
from .values import Value, String, Number


class TokenType(Enum):
    # Single-character tokens
    LEFT_PAREN    = auto()   # (
    RIGHT_PAREN   = auto()   # )
    LEFT_BRACE    = auto()   # {
    RIGHT_BRACE   = auto()   # }
    COMMA         = auto()   # ,
    DOT           = auto()   # .
    MINUS         = auto()   # -
    PLUS          = auto()   # +
    SEMICOLON     = auto()   # ;
    SLASH         = auto()   # /
    STAR          = auto()   # *
    # One or two character tokens
    BANG          = auto()   # !
    BANG_EQUAL    = auto()   # !=
    EQUAL         = auto()   # =
    EQUAL_EQUAL   = auto()   # ==
    GREATER       = auto()   # >
    GREATER_EQUAL = auto()   # >=
    LESS          = auto()   # <
    LESS_EQUAL    = auto()   # <=
    # Literals
    IDENTIFIER    = auto()
    STRING        = auto()
    NUMBER        = auto()
    # Keywords
    AND           = auto()
    CLASS         = auto()
    ELSE          = auto()
    FALSE         = auto()
    FUN           = auto()
    FOR           = auto()
    IF            = auto()
    NIL           = auto()
    OR            = auto()
    PRINT         = auto()
    RETURN        = auto()
    SUPER         = auto()
    THIS          = auto()
    TRUE          = auto()
    VAR           = auto()
    WHILE         = auto()
    # Sentinel
    EOF           = auto()


KEYWORDS = {
    "and":    TokenType.AND,
    "class":  TokenType.CLASS,
    "else":   TokenType.ELSE,
    "false":  TokenType.FALSE,
    "fun":    TokenType.FUN,
    "for":    TokenType.FOR,
    "if":     TokenType.IF,
    "nil":    TokenType.NIL,
    "or":     TokenType.OR,
    "print":  TokenType.PRINT,
    "return": TokenType.RETURN,
    "super":  TokenType.SUPER,
    "this":   TokenType.THIS,
    "true":   TokenType.TRUE,
    "var":    TokenType.VAR,
    "while":  TokenType.WHILE,
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    literal: Optional[Value]
    line: int

    def __repr__(self):
        return f"Token({self.type.name}, {self.lexeme!r}, line={self.line})"


# Token specification: ordered list of (TokenType, regex) pairs.
# Two-character operators come before their one-character prefixes.
_TOKEN_SPEC = [
    (TokenType.BANG_EQUAL,    r'!='),
    (TokenType.EQUAL_EQUAL,   r'=='),
    (TokenType.GREATER_EQUAL, r'>='),
    (TokenType.LESS_EQUAL,    r'<='),
    (TokenType.BANG,          r'!'),
    (TokenType.EQUAL,         r'='),
    (TokenType.GREATER,       r'>'),
    (TokenType.LESS,          r'<'),
    (TokenType.NUMBER,        r'\d+(?:\.\d+)?'),
    (TokenType.STRING,        r'"[^"]*"'),
    (TokenType.IDENTIFIER,    r'[A-Za-z_][A-Za-z0-9_]*'),
    (TokenType.LEFT_PAREN,    r'\('),
    (TokenType.RIGHT_PAREN,   r'\)'),
    (TokenType.LEFT_BRACE,    r'\{'),
    (TokenType.RIGHT_BRACE,   r'\}'),
    (TokenType.COMMA,         r','),
    (TokenType.DOT,           r'\.'),
    (TokenType.MINUS,         r'-'),
    (TokenType.PLUS,          r'\+'),
    (TokenType.SEMICOLON,     r';'),
    (TokenType.SLASH,         r'/'),
    (TokenType.STAR,          r'\*'),
]

_MASTER_RE = re.compile(
    r'(?:' + '|'.join(f'(?P<T{i}>{spec[1]})' for i, spec in enumerate(_TOKEN_SPEC)) + r')',
    re.ASCII
)

_WHITESPACE_RE = re.compile(r'[ \t\r]+')
_COMMENT_RE    = re.compile(r'//[^\n]*')
_NEWLINE_RE    = re.compile(r'\n')


def tokenize(source: str, reporter: Optional[Reporter] = None) -> List[Token]:
    """
    Convert Raft source string into a list of Tokens ending with EOF.
    Bad characters and unterminated strings are reported and skipped.
    """
    if reporter is None:
        reporter = Reporter()

    tokens: List[Token] = []
    line = 1
    pos = 0
    length = len(source)

    while pos < length:
        # Skip whitespace (not newlines)
        m = _WHITESPACE_RE.match(source, pos)
        if m:
            pos = m.end()
            continue

        # Skip comments
        m = _COMMENT_RE.match(source, pos)
        if m:
            pos = m.end()
            continue

        # Newlines
        m = _NEWLINE_RE.match(source, pos)
        if m:
            line += 1
            pos = m.end()
            continue

        m = _MASTER_RE.match(source, pos)
        if not m:
            if source[pos] == '"':
                # The string pattern failed, so there is no closing quote
                # and the rest of the source belongs to it.
                line += source.count('\n', pos)
                reporter.error(line, "Unterminated string.")
                break
            reporter.error(line, "Unexpected character.")
            pos += 1
            continue

        raw = m.group(0)
        tok_type = None
        for i, (ttype, _) in enumerate(_TOKEN_SPEC):
            if m.group(f'T{i}') is not None:
                tok_type = ttype
                break

        literal = None
        if tok_type == TokenType.IDENTIFIER:
            tok_type = KEYWORDS.get(raw, TokenType.IDENTIFIER)
        elif tok_type == TokenType.NUMBER:
            literal = Number(float(raw))
        elif tok_type == TokenType.STRING:
            literal = String(raw[1:-1])

        # Multi-line strings report the line they end on.
        line += raw.count('\n')
        tokens.append(Token(tok_type, raw, literal, line))
        pos = m.end()

    tokens.append(Token(TokenType.EOF, '', None, line))
    return tokens
