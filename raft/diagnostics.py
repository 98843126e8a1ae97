"""
Raft v0.1 - Diagnostics
Collects the errors reported by the scanner, parser and interpreter.
"""

from dataclasses import dataclass
from typing import List, Optional, TextIO, TYPE_CHECKING

if TYPE_CHECKING:
    from .lexer import Token
    from .interpreter import RaftRuntimeError


@dataclass(frozen=True)
class Diagnostic:
    line: int
    message: str
    where: str = ""

    def __str__(self):
        return f"[line {self.line}] Error{self.where}: {self.message}"


class Reporter:
    """
    Diagnostics sink passed explicitly to each stage.

    Every report is kept in ``diagnostics``; when a stream is given it is
    also written there, one line per report.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream
        self.diagnostics: List[Diagnostic] = []
        self.had_error = False
        self.had_runtime_error = False

    def error(self, line: int, message: str, where: str = "") -> None:
        self._report(Diagnostic(line, message, where))
        self.had_error = True

    def error_at(self, token: "Token", message: str) -> None:
        # Deferred import: the lexer itself reports through this class.
        from .lexer import TokenType

        if token.type == TokenType.EOF:
            self.error(token.line, message, " at end")
        else:
            self.error(token.line, message, f" at '{token.lexeme}'")

    def runtime_error(self, error: "RaftRuntimeError") -> None:
        self.had_runtime_error = True
        diagnostic = Diagnostic(error.token.line, error.message)
        self.diagnostics.append(diagnostic)
        if self._stream is not None:
            print(f"{error.message}\n[line {error.token.line}]", file=self._stream)

    def _report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if self._stream is not None:
            print(str(diagnostic), file=self._stream)
