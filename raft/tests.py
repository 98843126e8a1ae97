"""
Raft v0.1 - Test Suite
Tests for the Value Model, Lexer, Parser, Interpreter, Printer and Runner.
"""

import sys
import os
import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout, redirect_stderr

# Allow running from project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from raft.values import (
    Value, String, Number, Boolean, Null, Callable, NIL, TRUE, FALSE,
    InternalError, to_string, is_truthy, is_equal
)
from raft.lexer import tokenize, Token, TokenType
from raft.diagnostics import Reporter, Diagnostic
from raft.parser import Parser, parse
from raft.ast_nodes import (
    Literal, Variable, Assign, Grouping, Unary, Binary, Logical,
    ExprStmt, Print, VarDecl, Block, If, While
)
from raft.interpreter import Interpreter, Environment, RaftRuntimeError
from raft.printer import to_lisp, to_json
from raft.runner import run_source, RaftError
from raft.cli import main, repl


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════

def token_types(source: str):
    return [t.type for t in tokenize(source) if t.type != TokenType.EOF]


def parse_(source: str):
    reporter = Reporter()
    stmts = Parser(tokenize(source, reporter), reporter).parse()
    return stmts, reporter


def expr_(source: str):
    """Parse a single expression statement and return its expression."""
    stmts, reporter = parse_(source)
    assert not reporter.had_error, reporter.diagnostics
    return stmts[0].expression


def run_(source: str, interpreter=None):
    """Execute source and return (output, succeeded, reporter)."""
    out = io.StringIO()
    reporter = Reporter()
    if interpreter is None:
        interpreter = Interpreter(out=out, reporter=reporter)
    stmts = Parser(tokenize(source, reporter), reporter).parse()
    ok = interpreter.interpret(stmts)
    return out.getvalue(), ok, interpreter.reporter


def messages(reporter: Reporter):
    return [d.message for d in reporter.diagnostics]


def contains_assign(node) -> bool:
    if isinstance(node, Assign):
        return True
    if isinstance(node, list):
        return any(contains_assign(n) for n in node)
    if hasattr(node, '__dataclass_fields__'):
        return any(contains_assign(getattr(node, f)) for f in node.__dataclass_fields__)
    return False


# ═══════════════════════════════════════════════════════════════════════════════
# Value Model Tests
# ═══════════════════════════════════════════════════════════════════════════════

class TestValues(unittest.TestCase):

    def test_to_string(self):
        self.assertEqual(to_string(String("hello")), "hello")
        self.assertEqual(to_string(Number(3.0)), "3.000000")
        self.assertEqual(to_string(Number(2.5)), "2.500000")
        self.assertEqual(to_string(TRUE), "true")
        self.assertEqual(to_string(FALSE), "false")
        self.assertEqual(to_string(NIL), "nil")
        self.assertEqual(to_string(Callable()), "callable")

    def test_to_string_unknown_variant(self):
        class Stray(Value):
            pass

        with self.assertRaises(InternalError):
            to_string(Stray())

    def test_only_false_and_nil_are_falsey(self):
        self.assertFalse(is_truthy(NIL))
        self.assertFalse(is_truthy(FALSE))
        for value in (TRUE, Number(0), String(""), Callable()):
            self.assertTrue(is_truthy(value), value)

    def test_equal_to_itself(self):
        fn = Callable()
        for value in (String("a"), Number(1.5), TRUE, FALSE, NIL, fn):
            self.assertTrue(is_equal(value, value), value)

    def test_nil_equality(self):
        self.assertTrue(is_equal(NIL, Null()))
        self.assertFalse(is_equal(NIL, Number(0)))
        self.assertFalse(is_equal(Number(0), NIL))
        self.assertFalse(is_equal(NIL, FALSE))

    def test_payload_equality(self):
        self.assertTrue(is_equal(Number(2), Number(2.0)))
        self.assertTrue(is_equal(String("ab"), String("ab")))
        self.assertFalse(is_equal(String("ab"), String("ba")))
        self.assertFalse(is_equal(TRUE, FALSE))

    def test_no_cross_variant_equality(self):
        self.assertFalse(is_equal(Number(0), FALSE))
        self.assertFalse(is_equal(Number(1), TRUE))
        self.assertFalse(is_equal(Number(1), String("1")))
        self.assertFalse(is_equal(String("true"), TRUE))

    def test_callables_compare_by_identity(self):
        self.assertFalse(is_equal(Callable(), Callable()))

    def test_default_callable(self):
        fn = Callable()
        self.assertEqual(fn.arity(), 0)
        self.assertIs(fn.call(None, []), NIL)


# ═══════════════════════════════════════════════════════════════════════════════
# Lexer Tests
# ═══════════════════════════════════════════════════════════════════════════════

class TestLexer(unittest.TestCase):

    def test_var_declaration(self):
        toks = tokenize("var x = 1.5;")
        self.assertEqual(
            [t.type for t in toks],
            [TokenType.VAR, TokenType.IDENTIFIER, TokenType.EQUAL,
             TokenType.NUMBER, TokenType.SEMICOLON, TokenType.EOF],
        )
        self.assertEqual(toks[3].literal, Number(1.5))
        self.assertEqual(toks[1].lexeme, "x")

    def test_string_literal(self):
        toks = tokenize('"hi there"')
        self.assertEqual(toks[0].type, TokenType.STRING)
        self.assertEqual(toks[0].literal, String("hi there"))

    def test_operators(self):
        self.assertEqual(
            token_types("!= == <= >= ! = < > + - * / ( ) { } , ."),
            [TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL, TokenType.LESS_EQUAL,
             TokenType.GREATER_EQUAL, TokenType.BANG, TokenType.EQUAL,
             TokenType.LESS, TokenType.GREATER, TokenType.PLUS, TokenType.MINUS,
             TokenType.STAR, TokenType.SLASH, TokenType.LEFT_PAREN,
             TokenType.RIGHT_PAREN, TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
             TokenType.COMMA, TokenType.DOT],
        )

    def test_keywords_and_identifiers(self):
        self.assertEqual(
            token_types("orchid or nil nilly while"),
            [TokenType.IDENTIFIER, TokenType.OR, TokenType.NIL,
             TokenType.IDENTIFIER, TokenType.WHILE],
        )

    def test_line_tracking(self):
        toks = tokenize("a\nb\nc")
        lines = {t.lexeme: t.line for t in toks if t.type != TokenType.EOF}
        self.assertEqual(lines, {"a": 1, "b": 2, "c": 3})
        self.assertEqual(toks[-1].line, 3)

    def test_multiline_string(self):
        toks = tokenize('"a\nb";')
        self.assertEqual(toks[0].literal, String("a\nb"))
        self.assertEqual(toks[0].line, 2)
        self.assertEqual(toks[1].line, 2)

    def test_comment_ignored(self):
        toks = [t for t in tokenize("// this is a comment\nx") if t.type != TokenType.EOF]
        self.assertEqual(len(toks), 1)
        self.assertEqual(toks[0].lexeme, "x")

    def test_unexpected_character_reported(self):
        reporter = Reporter()
        toks = tokenize("1 @ 2", reporter)
        self.assertEqual([t.type for t in toks],
                         [TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF])
        self.assertEqual(messages(reporter), ["Unexpected character."])

    def test_unterminated_string(self):
        reporter = Reporter()
        toks = tokenize('print "abc', reporter)
        self.assertEqual([t.type for t in toks], [TokenType.PRINT, TokenType.EOF])
        self.assertEqual(messages(reporter), ["Unterminated string."])


# ═══════════════════════════════════════════════════════════════════════════════
# Parser Tests
# ═══════════════════════════════════════════════════════════════════════════════

class TestParser(unittest.TestCase):

    def test_precedence(self):
        expr = expr_("1 + 2 * 3;")
        self.assertIsInstance(expr, Binary)
        self.assertEqual(expr.operator.type, TokenType.PLUS)
        self.assertIsInstance(expr.right, Binary)
        self.assertEqual(expr.right.operator.type, TokenType.STAR)
        self.assertEqual(to_lisp(expr), "(+ 1 (* 2 3))")

    def test_left_associative(self):
        expr = expr_("1 - 2 - 3;")
        self.assertIsInstance(expr.left, Binary)
        self.assertEqual(expr.right, Literal(Number(3.0)))
        self.assertEqual(to_lisp(expr), "(- (- 1 2) 3)")

    def test_assignment_right_associative(self):
        expr = expr_("a = b = 1;")
        self.assertIsInstance(expr, Assign)
        self.assertEqual(expr.name.lexeme, "a")
        self.assertIsInstance(expr.value, Assign)
        self.assertEqual(to_lisp(expr), "(= a (= b 1))")

    def test_logical_precedence(self):
        expr = expr_("a or b and c;")
        self.assertIsInstance(expr, Logical)
        self.assertEqual(expr.operator.type, TokenType.OR)
        self.assertEqual(to_lisp(expr), "(or a (and b c))")

    def test_unary_and_equality(self):
        self.assertEqual(to_lisp(expr_("!-x == y;")), "(== (! (- x)) y)")
        self.assertEqual(to_lisp(expr_("1 < 2 == true;")), "(== (< 1 2) true)")

    def test_grouping(self):
        expr = expr_("(1 + 2) * 3;")
        self.assertIsInstance(expr.left, Grouping)
        self.assertEqual(to_lisp(expr), "(* (group (+ 1 2)) 3)")

    def test_literals(self):
        self.assertEqual(to_string(expr_('"hello";').value), "hello")
        self.assertEqual(to_string(expr_("true;").value), "true")
        self.assertEqual(to_string(expr_("nil;").value), "nil")
        self.assertEqual(expr_("false;"), Literal(FALSE))

    def test_variable(self):
        expr = expr_("count;")
        self.assertIsInstance(expr, Variable)
        self.assertEqual(expr.name.lexeme, "count")

    def test_var_declaration(self):
        stmts, _ = parse_("var a; var b = 2;")
        self.assertIsInstance(stmts[0], VarDecl)
        self.assertIsNone(stmts[0].initializer)
        self.assertEqual(stmts[1].initializer, Literal(Number(2.0)))

    def test_print_and_block(self):
        stmts, _ = parse_("{ print 1; { var a; } }")
        self.assertEqual(len(stmts), 1)
        self.assertIsInstance(stmts[0], Block)
        self.assertIsInstance(stmts[0].statements[0], Print)
        self.assertEqual(to_lisp(stmts[0]), "(block (print 1) (block (var a)))")

    def test_if_else(self):
        stmts, _ = parse_("if (a) print 1; else print 2;")
        self.assertIsInstance(stmts[0], If)
        self.assertEqual(to_lisp(stmts[0]), "(if a (print 1) (print 2))")

    def test_dangling_else_binds_nearest_if(self):
        stmts, _ = parse_("if (a) if (b) print 1; else print 2;")
        self.assertIsNone(stmts[0].else_branch)
        self.assertEqual(to_lisp(stmts[0]), "(if a (if b (print 1) (print 2)))")

    def test_while(self):
        stmts, _ = parse_("while (x < 3) x = x + 1;")
        self.assertIsInstance(stmts[0], While)
        self.assertEqual(to_lisp(stmts[0]), "(while (< x 3) (; (= x (+ x 1))))")

    def test_for_desugars_to_while(self):
        stmts, reporter = parse_("for (var i = 0; i < 3; i = i + 1) print i;")
        self.assertFalse(reporter.had_error)
        outer = stmts[0]
        self.assertIsInstance(outer, Block)
        init, loop = outer.statements
        self.assertIsInstance(init, VarDecl)
        self.assertIsInstance(loop, While)
        self.assertIsInstance(loop.body, Block)
        body, increment = loop.body.statements
        self.assertIsInstance(body, Print)
        self.assertIsInstance(increment, ExprStmt)
        self.assertIsInstance(increment.expression, Assign)
        self.assertEqual(
            to_lisp(outer),
            "(block (var i 0) (while (< i 3) (block (print i) (; (= i (+ i 1))))))",
        )

    def test_for_without_clauses(self):
        stmts, _ = parse_("for (;;) print 1;")
        self.assertIsInstance(stmts[0], While)
        self.assertEqual(stmts[0].condition, Literal(TRUE))
        self.assertIsInstance(stmts[0].body, Print)

    def test_for_with_expression_initializer(self):
        stmts, _ = parse_("for (x = 0; x < 1;) print x;")
        init, loop = stmts[0].statements
        self.assertIsInstance(init, ExprStmt)
        self.assertIsInstance(loop.body, Print)

    def test_hand_built_tokens(self):
        tokens = [
            Token(TokenType.PRINT, "print", None, 1),
            Token(TokenType.NUMBER, "1", Number(1.0), 1),
            Token(TokenType.SEMICOLON, ";", None, 1),
            Token(TokenType.EOF, "", None, 1),
        ]
        self.assertEqual(parse(tokens), [Print(Literal(Number(1.0)))])

    def test_empty_program(self):
        self.assertEqual(parse(tokenize("")), [])


# ═══════════════════════════════════════════════════════════════════════════════
# Error Recovery Tests
# ═══════════════════════════════════════════════════════════════════════════════

class TestRecovery(unittest.TestCase):

    def test_invalid_assignment_target(self):
        stmts, reporter = parse_("1 = 2;")
        self.assertEqual(reporter.diagnostics,
                         [Diagnostic(1, "Invalid assignment target.", " at '='")])
        self.assertEqual(stmts, [ExprStmt(Literal(Number(1.0)))])
        self.assertFalse(contains_assign(stmts))

    def test_invalid_target_keeps_left_expression(self):
        stmts, reporter = parse_("a + b = c;\nprint 1;")
        self.assertEqual(messages(reporter), ["Invalid assignment target."])
        self.assertIsInstance(stmts[0].expression, Binary)
        self.assertIsInstance(stmts[1], Print)

    def test_two_malformed_statements(self):
        stmts, reporter = parse_("print ;\nvar = 1;\nprint 3;")
        self.assertEqual(messages(reporter),
                         ["Expect expression.", "Expect variable name."])
        self.assertEqual([d.line for d in reporter.diagnostics], [1, 2])
        self.assertEqual(len(stmts), 1)
        self.assertIsInstance(stmts[0], Print)

    def test_missing_paren(self):
        stmts, reporter = parse_("print (1 + 2;")
        self.assertEqual(messages(reporter), ["Expect ')' after expression."])
        self.assertEqual(stmts, [])

    def test_missing_semicolons(self):
        _, reporter = parse_("print 1")
        self.assertEqual(reporter.diagnostics,
                         [Diagnostic(1, "Expect ';' after value.", " at end")])
        _, reporter = parse_("var a = 1")
        self.assertEqual(messages(reporter), ["Expect ';' after variable declaration."])
        _, reporter = parse_("a")
        self.assertEqual(messages(reporter), ["Expect ';' after expression."])

    def test_control_flow_messages(self):
        cases = {
            "if 1) print 1;": "Expect '(' after 'if'.",
            "if (1 print 1;": "Expect ')' after if condition.",
            "while 1) print 1;": "Expect '(' after 'while'.",
            "while (1 print 1;": "Expect ')' after condition.",
            "for var i = 0;;) print 1;": "Expect '(' after 'for'.",
            "for (;1 print 1;": "Expect ';' after loop condition.",
            "for (;;1 print 1;": "Expect ')' after for clauses.",
            "{ print 1;": "Expect '}' after block.",
        }
        for source, message in cases.items():
            _, reporter = parse_(source)
            self.assertEqual(messages(reporter)[0], message, source)

    def test_synchronizes_at_statement_keyword(self):
        stmts, reporter = parse_("var x = 1 + * 2 print 3;")
        self.assertEqual(messages(reporter), ["Expect expression."])
        self.assertEqual(stmts, [Print(Literal(Number(3.0)))])

    def test_synchronizes_at_each_declaration_keyword(self):
        following = {
            "var":   ("var a = 1;", VarDecl),
            "for":   ("for (;;) print 1;", While),
            "if":    ("if (true) print 1;", If),
            "while": ("while (false) print 1;", While),
            "print": ("print 1;", Print),
        }
        for keyword, (source, node_type) in following.items():
            stmts, reporter = parse_("1 + * 2 " + source)
            self.assertEqual(messages(reporter), ["Expect expression."], keyword)
            self.assertEqual(len(stmts), 1, keyword)
            self.assertIsInstance(stmts[0], node_type, keyword)

    def test_synchronizes_at_unparsed_keywords(self):
        # class, fun and return are not parsed yet, so the next declaration
        # fails right at the keyword the scan stopped in front of.
        for keyword in ("class", "fun", "return"):
            stmts, reporter = parse_(f"1 + * 2 {keyword} x; print 1;")
            self.assertEqual(
                [d.where for d in reporter.diagnostics],
                [" at '*'", f" at '{keyword}'"],
                keyword,
            )
            self.assertEqual(stmts, [Print(Literal(Number(1.0)))], keyword)

    def test_deep_grouping_is_reported(self):
        for depth in (70, 100, 300):
            source = "print " + "(" * depth + "1" + ")" * depth + ";"
            stmts, reporter = parse_(source)
            self.assertEqual(stmts, [], depth)
            self.assertEqual(messages(reporter), ["Too much nesting."], depth)

    def test_moderate_grouping_parses(self):
        stmts, reporter = parse_("print " + "(" * 30 + "1" + ")" * 30 + ";")
        self.assertFalse(reporter.had_error)
        self.assertIsInstance(stmts[0].expression, Grouping)

    def test_deep_unary_and_assignment_chains(self):
        for source in ("print " + "-" * 500 + "1;", "a = " * 500 + "1;"):
            stmts, reporter = parse_(source)
            self.assertEqual(stmts, [])
            self.assertEqual(messages(reporter), ["Too much nesting."])

    def test_deep_blocks_never_raise(self):
        stmts, reporter = parse_("{" * 300 + "}" * 300)
        self.assertEqual(stmts, [])
        self.assertEqual(messages(reporter)[0], "Too much nesting.")

    def test_error_inside_block(self):
        stmts, reporter = parse_("{ print ; print 1; }")
        self.assertEqual(len(reporter.diagnostics), 1)
        self.assertEqual(len(stmts), 1)
        self.assertEqual(stmts[0].statements, [Print(Literal(Number(1.0)))])

    def test_unclosed_block_builds_nothing(self):
        stmts, reporter = parse_("{ print 1;")
        self.assertEqual(stmts, [])
        self.assertEqual(reporter.diagnostics[0].where, " at end")

    def test_garbage_never_raises(self):
        stmts, reporter = parse_(") ) ) ;;")
        self.assertEqual(stmts, [])
        self.assertTrue(reporter.had_error)

    def test_error_line_numbers(self):
        _, reporter = parse_("print 1;\n\nprint ;")
        self.assertEqual(reporter.diagnostics[0].line, 3)
        self.assertEqual(str(reporter.diagnostics[0]),
                         "[line 3] Error at ';': Expect expression.")

    def test_reporter_stream(self):
        stream = io.StringIO()
        reporter = Reporter(stream)
        Parser(tokenize("print ;"), reporter).parse()
        self.assertEqual(stream.getvalue(), "[line 1] Error at ';': Expect expression.\n")


# ═══════════════════════════════════════════════════════════════════════════════
# Interpreter Tests
# ═══════════════════════════════════════════════════════════════════════════════

class TestInterpreter(unittest.TestCase):

    def test_arithmetic(self):
        out, ok, _ = run_("print 1 + 2 * 3; print (1 + 2) * 3; print 7 / 2; print -4 - 1;")
        self.assertTrue(ok)
        self.assertEqual(out.split(), ["7.000000", "9.000000", "3.500000", "-5.000000"])

    def test_string_concatenation(self):
        out, _, _ = run_('print "ab" + "cd";')
        self.assertEqual(out, "abcd\n")

    def test_comparison_and_equality(self):
        out, _, _ = run_(
            "print 1 < 2; print 2 <= 1; print 0 == false; print nil == nil; "
            'print "a" != "a"; print !nil;'
        )
        self.assertEqual(out.split(), ["true", "false", "false", "true", "false", "true"])

    def test_logical_returns_operand(self):
        out, _, _ = run_('print nil or "x"; print false and 1; print 1 and 2; print 1 or boom;')
        self.assertEqual(out.split(), ["x", "false", "2.000000", "1.000000"])

    def test_for_loop(self):
        out, _, _ = run_("for (var i = 0; i < 3; i = i + 1) print i;")
        self.assertEqual(out.split(), ["0.000000", "1.000000", "2.000000"])

    def test_while_and_if(self):
        out, _, _ = run_(
            "var n = 0; while (n < 5) { n = n + 1; } "
            'if (n == 5) print "five"; else print "other";'
        )
        self.assertEqual(out, "five\n")

    def test_block_scoping(self):
        out, _, _ = run_("var a = 1; var b = 1; { var a = 2; b = 3; print a; } print a; print b;")
        self.assertEqual(out.split(), ["2.000000", "1.000000", "3.000000"])

    def test_uninitialized_is_nil(self):
        out, _, _ = run_("var a; print a;")
        self.assertEqual(out, "nil\n")

    def test_clock_is_callable(self):
        out, _, _ = run_("print clock;")
        self.assertEqual(out, "callable\n")

    def test_runtime_errors(self):
        cases = {
            'print -"a";': "Operand must be a number.",
            '1 + "a";': "Operands must be two numbers or two strings.",
            '"a" < "b";': "Operands must be numbers.",
            "print 1 / 0;": "Division by zero.",
            "print x;": "Undefined variable 'x'.",
            "x = 1;": "Undefined variable 'x'.",
        }
        for source, message in cases.items():
            _, ok, reporter = run_(source)
            self.assertFalse(ok, source)
            self.assertTrue(reporter.had_runtime_error)
            self.assertEqual(messages(reporter), [message], source)

    def test_runtime_error_stops_execution(self):
        out, ok, _ = run_('print 1; print -"a"; print 2;')
        self.assertFalse(ok)
        self.assertEqual(out, "1.000000\n")

    def test_scope_restored_after_error(self):
        interpreter = Interpreter(out=io.StringIO())
        run_("var a = 1; { var a = 2; print b; }", interpreter)
        out = io.StringIO()
        interpreter._out = out
        run_("print a;", interpreter)
        self.assertEqual(out.getvalue(), "1.000000\n")

    def test_call_checks_arity(self):
        interpreter = Interpreter()
        paren = Token(TokenType.RIGHT_PAREN, ")", None, 4)
        clock = interpreter.globals.get(Token(TokenType.IDENTIFIER, "clock", None, 1))
        self.assertIsInstance(interpreter.call(clock, [], paren), Number)
        with self.assertRaises(RaftRuntimeError) as ctx:
            interpreter.call(clock, [NIL], paren)
        self.assertEqual(ctx.exception.message, "Expected 0 arguments but got 1.")
        self.assertEqual(ctx.exception.token.line, 4)

    def test_call_rejects_non_callable(self):
        paren = Token(TokenType.RIGHT_PAREN, ")", None, 1)
        with self.assertRaises(RaftRuntimeError) as ctx:
            Interpreter().call(String("nope"), [], paren)
        self.assertEqual(ctx.exception.message, "Can only call functions and classes.")

    def test_call_custom_callable(self):
        class Twice(Callable):
            def arity(self):
                return 1

            def call(self, interpreter, arguments):
                return Number(arguments[0].value * 2)

        paren = Token(TokenType.RIGHT_PAREN, ")", None, 1)
        result = Interpreter().call(Twice(), [Number(21)], paren)
        self.assertEqual(result, Number(42))

    def test_environment_chain(self):
        outer = Environment()
        inner = Environment(outer)
        name = Token(TokenType.IDENTIFIER, "a", None, 1)
        outer.define("a", Number(1))
        inner.assign(name, Number(2))
        self.assertEqual(outer.get(name), Number(2))
        with self.assertRaises(RaftRuntimeError):
            inner.get(Token(TokenType.IDENTIFIER, "b", None, 1))

    def test_unknown_node_is_internal_error(self):
        with self.assertRaises(InternalError):
            Interpreter().execute(object())


# ═══════════════════════════════════════════════════════════════════════════════
# Printer Tests
# ═══════════════════════════════════════════════════════════════════════════════

class TestPrinter(unittest.TestCase):

    def test_json(self):
        stmts, _ = parse_('var a = 1; print "s";')
        data = json.loads(to_json(stmts))
        self.assertEqual(data[0], {
            "_type": "VarDecl",
            "name": "a",
            "initializer": {"_type": "Literal", "value": {"_type": "Number", "value": 1.0}},
        })
        self.assertEqual(data[1]["expression"]["value"], {"_type": "String", "value": "s"})

    def test_lisp_string_literal(self):
        self.assertEqual(to_lisp(expr_('"a" + b;')), '(+ "a" b)')


# ═══════════════════════════════════════════════════════════════════════════════
# Runner / CLI Tests
# ═══════════════════════════════════════════════════════════════════════════════

class TestRunner(unittest.TestCase):

    def _script(self, source: str) -> str:
        fd, path = tempfile.mkstemp(suffix=".raft")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(source)
        self.addCleanup(os.remove, path)
        return path

    def test_run_source(self):
        out = io.StringIO()
        self.assertIsNone(run_source("print 1;", out=out))
        self.assertEqual(out.getvalue(), "1.000000\n")

    def test_syntax_error_exit_code(self):
        with self.assertRaises(RaftError) as ctx:
            run_source("print ;\nvar = 1;")
        self.assertEqual(ctx.exception.exit_code, 65)
        self.assertEqual(len(ctx.exception.diagnostics), 2)

    def test_runtime_error_exit_code(self):
        with self.assertRaises(RaftError) as ctx:
            run_source("print x;", out=io.StringIO())
        self.assertEqual(ctx.exception.exit_code, 70)

    def test_emit_ast(self):
        data = json.loads(run_source("print 1;", emit_ast=True))
        self.assertEqual(data[0]["_type"], "Print")

    def test_shared_interpreter(self):
        out = io.StringIO()
        interpreter = Interpreter(out=out)
        run_source("var a = 4;", interpreter=interpreter)
        run_source("print a;", interpreter=interpreter)
        self.assertEqual(out.getvalue(), "4.000000\n")

    def test_debug_logs_phases(self):
        err = io.StringIO()
        with redirect_stderr(err):
            run_source("1;", debug=True, out=io.StringIO())
        self.assertIn("[raft] Phase 2: Parsing", err.getvalue())

    def test_cli_runs_script(self):
        path = self._script('print "from file";')
        out = io.StringIO()
        with redirect_stdout(out):
            main([path])
        self.assertEqual(out.getvalue(), "from file\n")

    def test_cli_emit_ast_to_file(self):
        path = self._script("var a;")
        output = path + ".json"
        self.addCleanup(os.remove, output)
        main([path, "--emit-ast", "-o", output])
        with open(output, encoding="utf-8") as f:
            self.assertEqual(json.load(f)[0]["_type"], "VarDecl")

    def test_cli_exit_codes(self):
        err = io.StringIO()
        with redirect_stderr(err):
            with self.assertRaises(SystemExit) as ctx:
                main([self._script("print ;")])
            self.assertEqual(ctx.exception.code, 65)
            with self.assertRaises(SystemExit) as ctx:
                main(["/nonexistent/script.raft"])
            self.assertEqual(ctx.exception.code, 66)
        self.assertIn("Expect expression.", err.getvalue())

    def test_cli_unwritable_output_is_not_missing_input(self):
        path = self._script("var a;")
        output = os.path.join(tempfile.gettempdir(), "raft-no-such-dir", "out.json")
        err = io.StringIO()
        with redirect_stderr(err):
            with self.assertRaises(SystemExit) as ctx:
                main([path, "--emit-ast", "-o", output])
        self.assertEqual(ctx.exception.code, 74)
        self.assertNotIn("Input file not found", err.getvalue())

    def test_repl_keeps_state_and_survives_errors(self):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            repl(stdin=io.StringIO("var a = 2;\nprint ;\nprint a;\n"))
        self.assertIn("2.000000", out.getvalue())
        self.assertIn("Expect expression.", err.getvalue())


if __name__ == "__main__":
    unittest.main(verbosity=2)
