"""Tree-walking interpreter for Bisaya++.

The interpreter executes the `Block` produced by the parser statement by
statement against a single flat `Environment`. All console traffic goes
through an `IOHandler` so that programs can be run against scripted input
in tests.

Every IPAKITA writes one line: a newline is appended to the printed text
unless it already ends with one, so `IPAKITA: "A" & $` does not leave a
blank line behind it.

Debug tracing follows the CLI's `-v` count. With a level above zero the
trace is written to `debug_file`: level 1 logs each executed statement,
level 2 adds declarations and assignments, level 3 adds the outcome of
every condition.
"""

from __future__ import annotations

import math
from typing import Optional, TextIO

from .ast import (
    Assign, Binary, Block, Conditional, ExprStmt, ForLoop, Grouping, Input,
    Literal, Node, Postfix, Print, Unary, VarDecl, Variable, WhileLoop,
)
from .diagnostics import Diagnostics
from .environment import Environment
from .errors import BisayaRuntimeError, LexError
from .io_handler import ConsoleIO, IOHandler
from .lexer import Lexer
from .parser import Parser
from .types import (
    ABSENT, Value, ValueKind, as_condition, is_truthy, to_string, type_name,
    values_equal,
)


class Interpreter:
    """Core interpreter that executes a parsed Bisaya++ program."""
    def __init__(self, io: Optional[IOHandler] = None, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.io = io if io is not None else ConsoleIO()
        self.env = Environment()
        self.debug_level = debug_level
        self.debug_fp: Optional[TextIO] = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str, level: int = 1) -> None:
        if self.debug_level >= level and self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def interpret(self, program: Block) -> None:
        try:
            self.execute_block(program)
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    # Statements

    def execute_block(self, block: Block) -> None:
        for stmt in block.statements:
            self.execute(stmt)

    def execute(self, stmt: Node) -> None:
        self.debug(f"[line {stmt.line}] {type(stmt).__name__}")
        try:
            self._execute(stmt)
        except BisayaRuntimeError as e:
            # Errors from the environment and operators carry no position.
            if e.line is None:
                e.line, e.column = stmt.line, stmt.column
            raise

    def _execute(self, stmt: Node) -> None:
        if isinstance(stmt, Print):
            self.execute_print(stmt)
        elif isinstance(stmt, Input):
            self.execute_input(stmt)
        elif isinstance(stmt, VarDecl):
            for item in stmt.items:
                value = self.evaluate(item.init) if item.init is not None else ABSENT
                stored = self.env.declare(item.name, stmt.declared_type, value)
                self.debug(f"declare {item.name}: {stmt.declared_type.value} = {to_string(stored)}", 2)
        elif isinstance(stmt, ExprStmt):
            self.evaluate(stmt.expr)
        elif isinstance(stmt, Conditional):
            for branch in stmt.branches:
                if branch.condition is None or self.condition(branch.condition, 'KUNG'):
                    self.execute_block(branch.block)
                    break
        elif isinstance(stmt, ForLoop):
            self.execute(stmt.init)
            while self.condition(stmt.condition, 'ALANG SA'):
                self.execute_block(stmt.body)
                self.execute(stmt.update)
        elif isinstance(stmt, WhileLoop):
            while self.condition(stmt.condition, 'SAMTANG'):
                self.execute_block(stmt.body)
        elif isinstance(stmt, Block):
            self.execute_block(stmt)
        else:
            raise BisayaRuntimeError(f"Unknown statement type: {type(stmt).__name__}")

    def execute_print(self, stmt: Print) -> None:
        text = ''.join(to_string(self.evaluate(part)) for part in stmt.parts)
        if not text.endswith('\n'):
            text += '\n'
        self.io.write_output(text)

    def execute_input(self, stmt: Input) -> None:
        names = stmt.names
        line = self.io.read_input("Enter values for: " + ", ".join(names))
        fields = [field.strip() for field in line.split(',')]
        if len(fields) != len(names):
            raise BisayaRuntimeError(f"DAWAT expects {len(names)} value(s) but got {len(fields)}")
        for name, text in zip(names, fields):
            if not self.env.is_declared(name):
                raise BisayaRuntimeError(f"Undefined variable '{name}'")
            try:
                stored = self.env.assign(name, Value.string(text))
            except BisayaRuntimeError as e:
                raise BisayaRuntimeError(f"Invalid input for '{name}': {e.message}") from None
            self.debug(f"input {name} = {to_string(stored)}", 2)

    def condition(self, expr: Node, keyword: str) -> bool:
        value = self.evaluate(expr)
        flag = as_condition(value)
        if flag is None:
            raise BisayaRuntimeError(
                f"{keyword} condition must be a boolean value (OO or DILI), got {to_string(value)} ({type_name(value)})",
                expr.line, expr.column,
            )
        self.debug(f"{keyword} condition at line {expr.line} -> {flag}", 3)
        return flag

    # Expressions

    def evaluate(self, expr: Node) -> Value:
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, Variable):
            return self.env.get(expr.name)
        if isinstance(expr, Grouping):
            return self.evaluate(expr.inner)
        if isinstance(expr, Assign):
            value = self.evaluate(expr.value)
            stored = self.env.assign(expr.name, value)
            self.debug(f"assign {expr.name} = {to_string(stored)}", 2)
            return self.env.get(expr.name)
        if isinstance(expr, Binary):
            return self.eval_binary(expr)
        if isinstance(expr, Unary):
            return self.eval_unary(expr)
        if isinstance(expr, Postfix):
            return self.step(expr.operand, expr.op, prefix=False)
        raise BisayaRuntimeError(f"Unknown expression type: {type(expr).__name__}")

    def eval_unary(self, expr: Unary) -> Value:
        op = expr.op
        if op in ('++', '--'):
            return self.step(expr.operand, op, prefix=True)
        value = self.evaluate(expr.operand)
        if op == 'DILI':
            return Value.boolean(not is_truthy(value))
        if not value.is_numeric:
            raise BisayaRuntimeError(
                f"Unary '{op}' requires a numeric operand, got {to_string(value)} ({type_name(value)})"
            )
        if op == '-':
            return Value(value.kind, -value.data)
        return value

    def step(self, operand: Node, op: str, prefix: bool) -> Value:
        """Apply ++ or -- to a variable; yield the new value when prefix."""
        if not isinstance(operand, Variable):
            raise BisayaRuntimeError(f"Operator '{op}' can only be applied to a variable")
        current = self.env.get_raw(operand.name)
        if not current.is_numeric:
            raise BisayaRuntimeError(
                f"Operator '{op}' requires a numeric variable, but '{operand.name}' holds {type_name(current)}"
            )
        delta = 1 if op == '++' else -1
        stored = self.env.assign(operand.name, Value(current.kind, current.data + delta))
        self.debug(f"assign {operand.name} = {to_string(stored)}", 2)
        return stored if prefix else current

    def eval_binary(self, expr: Binary) -> Value:
        op = expr.op
        if op in ('UG', 'O'):
            left = self.logical_operand(expr.left, op)
            if op == 'UG' and not left:
                return Value.boolean(False)
            if op == 'O' and left:
                return Value.boolean(True)
            return Value.boolean(self.logical_operand(expr.right, op))

        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        if op == '&':
            return Value.string(to_string(left) + to_string(right))
        if op == '==':
            return Value.boolean(values_equal(left, right))
        if op == '<>':
            return Value.boolean(not values_equal(left, right))
        if op in ('<', '<=', '>', '>='):
            self.require_numbers(op, left, right)
            a, b = float(left.data), float(right.data)
            if op == '<':
                return Value.boolean(a < b)
            if op == '<=':
                return Value.boolean(a <= b)
            if op == '>':
                return Value.boolean(a > b)
            return Value.boolean(a >= b)
        if op in ('+', '-', '*', '/', '%'):
            return self.arithmetic(op, left, right)
        raise BisayaRuntimeError(f"Unknown operator {op}")

    def logical_operand(self, expr: Node, op: str) -> bool:
        value = self.evaluate(expr)
        flag = as_condition(value)
        if flag is None:
            raise BisayaRuntimeError(
                f"Operands of {op} must be boolean values (OO or DILI), got {to_string(value)} ({type_name(value)})"
            )
        return flag

    @staticmethod
    def require_numbers(op: str, left: Value, right: Value) -> None:
        if not (left.is_numeric and right.is_numeric):
            raise BisayaRuntimeError(
                f"Operands of '{op}' must be numbers, got {type_name(left)} and {type_name(right)}"
            )

    def arithmetic(self, op: str, left: Value, right: Value) -> Value:
        self.require_numbers(op, left, right)
        if op in ('/', '%') and right.data == 0:
            raise BisayaRuntimeError("Division by zero" if op == '/' else "Modulo by zero")
        if left.kind is ValueKind.INTEGER and right.kind is ValueKind.INTEGER:
            a, b = left.data, right.data
            if op == '+':
                return Value.integer(a + b)
            if op == '-':
                return Value.integer(a - b)
            if op == '*':
                return Value.integer(a * b)
            quotient = truncated_div(a, b)
            if op == '/':
                return Value.integer(quotient)
            return Value.integer(a - b * quotient)
        a, b = float(left.data), float(right.data)
        if op == '+':
            return Value.float_(a + b)
        if op == '-':
            return Value.float_(a - b)
        if op == '*':
            return Value.float_(a * b)
        if op == '/':
            return Value.float_(a / b)
        return Value.float_(math.fmod(a, b))


def truncated_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def parse_program(source: str, diagnostics: Optional[Diagnostics] = None) -> Block:
    """Scan and parse `source`.

    Raises `LexError` listing every scan problem, or `ParseError` at the
    first grammar violation. Both are also left in `diagnostics`.
    """
    if diagnostics is None:
        diagnostics = Diagnostics()
    tokens = Lexer(source, diagnostics).scan_tokens()
    if diagnostics.had_error:
        raise LexError(list(diagnostics.entries))
    return Parser(tokens, diagnostics).parse()


def run_program(source: str, io: Optional[IOHandler] = None, debug_level: int = 0,
                debug_file: str = 'debug.txt') -> Interpreter:
    """Parse and execute `source`; return the interpreter for inspection."""
    program = parse_program(source)
    interpreter = Interpreter(io=io, debug_level=debug_level, debug_file=debug_file)
    interpreter.interpret(program)
    return interpreter
