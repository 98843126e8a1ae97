"""
Raft v0.1 - Command Line Interface

Usage:
    raft                          start an interactive prompt
    raft script.raft [--debug]    run a script
    raft script.raft --emit-ast [-o output.json]
    python -m raft script.raft
"""

import os
import sys
import argparse


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="raft",
        description="Raft v0.1 — a small dynamically-typed scripting language",
    )
    parser.add_argument("script", nargs="?", help="Path to the .raft source file")
    parser.add_argument("-o", "--output", help="Where to write the AST for --emit-ast")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print phase info to stderr",
    )
    parser.add_argument(
        "--emit-ast",
        action="store_true",
        dest="emit_ast",
        help="Emit the parsed AST as JSON instead of running the script",
    )

    args = parser.parse_args(argv)

    from .runner import run_file, RaftError

    if args.script is None:
        repl(debug=args.debug)
        return

    if not os.path.isfile(args.script):
        print(f"[raft] Error: Input file not found: {args.script!r}", file=sys.stderr)
        sys.exit(66)

    try:
        run_file(
            args.script,
            args.output,
            emit_ast=args.emit_ast,
            debug=args.debug,
        )
    except OSError as e:
        print(f"[raft] Error: {e}", file=sys.stderr)
        sys.exit(74)
    except RaftError as e:
        print(str(e), file=sys.stderr)
        sys.exit(e.exit_code)


def repl(stdin=None, debug=False):
    """Run one line at a time, keeping globals between lines."""
    from .interpreter import Interpreter
    from .runner import run_source, RaftError

    stdin = stdin or sys.stdin
    interpreter = Interpreter()
    while True:
        print("> ", end="", flush=True)
        line = stdin.readline()
        if not line:
            print()
            break
        try:
            run_source(line, interpreter=interpreter, debug=debug)
        except RaftError as e:
            print(str(e), file=sys.stderr)


if __name__ == "__main__":
    main()
