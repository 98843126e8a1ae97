"""
Raft v0.1 - Runner
Runs the interpreter phases in sequence: scan, parse, execute.
"""

import sys
from typing import List, Optional, TextIO

from .diagnostics import Diagnostic, Reporter
from .lexer import tokenize
from .parser import Parser
from .interpreter import Interpreter
from .printer import to_json

EXIT_STATIC_ERROR = 65
EXIT_RUNTIME_ERROR = 70


class RaftError(Exception):
    """Unified failure raised when a phase reported errors."""

    def __init__(self, diagnostics: List[Diagnostic], exit_code: int):
        super().__init__("\n".join(str(d) for d in diagnostics))
        self.diagnostics = diagnostics
        self.exit_code = exit_code


def run_source(
    source: str,
    interpreter: Optional[Interpreter] = None,
    emit_ast: bool = False,
    debug: bool = False,
    out: Optional[TextIO] = None,
) -> Optional[str]:
    """
    Scan, parse and execute Raft source text.

    Parameters
    ----------
    source      : Raft source code string
    interpreter : interpreter to execute with; globals persist across calls
    emit_ast    : if True, return the AST as JSON instead of executing it
    debug       : print each phase summary to stderr
    out         : stream for ``print`` output when a new interpreter is made

    Returns
    -------
    JSON AST string if emit_ast=True, otherwise None

    Raises
    ------
    RaftError on scan/parse errors (exit code 65) or a runtime error (70)
    """

    def log(msg):
        if debug:
            print(f"[raft] {msg}", file=sys.stderr)

    reporter = Reporter()

    # ── Phase 1: Scanning ─────────────────────────────────────────────────────
    log("Phase 1: Scanning")
    tokens = tokenize(source, reporter)
    log(f"  {len(tokens)-1} tokens produced")

    # ── Phase 2: Parsing ──────────────────────────────────────────────────────
    log("Phase 2: Parsing")
    statements = Parser(tokens, reporter).parse()
    log(f"  {len(statements)} top-level statements")

    if reporter.had_error:
        log(f"  {len(reporter.diagnostics)} errors reported")
        raise RaftError(reporter.diagnostics, EXIT_STATIC_ERROR)

    if emit_ast:
        return to_json(statements)

    # ── Phase 3: Execution ────────────────────────────────────────────────────
    log("Phase 3: Execution")
    if interpreter is None:
        interpreter = Interpreter(out=out, reporter=reporter)
    else:
        interpreter.reporter = reporter
    if not interpreter.interpret(statements):
        raise RaftError(reporter.diagnostics, EXIT_RUNTIME_ERROR)

    log("  Execution finished")
    return None


def run_file(
    input_path: str,
    output_path: Optional[str] = None,
    emit_ast: bool = False,
    debug: bool = False,
) -> None:
    """Read a Raft script and run it, or write its AST to output_path."""
    with open(input_path, "r", encoding="utf-8") as f:
        source = f.read()

    result = run_source(source, emit_ast=emit_ast, debug=debug)

    if result is not None:
        if output_path:
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(result)
        else:
            print(result)
