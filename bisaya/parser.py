"""Recursive-descent parser for Bisaya++.

The parser turns the lexer's token list into a `Block` holding the program's
top-level statements. It stops at the first grammar violation: the problem is
reported to the diagnostics collector and raised as `ParseError`.

Expression precedence, tightest first:

    primary      literal, $, identifier, ( expression )
    postfix      x++  x--
    unary        -  +  ++  --  DILI
    factor       *  /  %
    term         +  -
    comparison   >  >=  <  <=
    equality     ==  <>
    logical      UG, then O
    concatenation  &
    assignment   x = y = 4   (right-associative)

Besides the grammar the parser enforces one static rule: every variable
named in a DAWAT statement must have been declared by a MUGNA that appears
earlier in the token stream. The check is a single linear pass, so a
declaration that only appears later in the file never satisfies it.
"""

from __future__ import annotations

from typing import List, Optional, Set

from .ast import (
    Assign, Binary, Block, Branch, Conditional, ExprStmt, ForLoop, Grouping,
    Input, Literal, Node, Postfix, Print, Unary, VarDecl, VarItem, Variable,
    WhileLoop,
)
from .diagnostics import Diagnostics
from .errors import ParseError
from .tokens import TYPE_KEYWORDS, Token, TokenType
from .types import DeclaredType, Value

T = TokenType


class Parser:
    def __init__(self, tokens: List[Token], diagnostics: Optional[Diagnostics] = None):
        tokens = list(tokens)
        if not tokens or tokens[-1].type is not T.EOF:
            last = tokens[-1] if tokens else None
            line = last.line if last else 1
            column = last.column + len(last.lexeme) if last else 1
            tokens.append(Token(T.EOF, "", None, line, column))
        self.tokens = tokens
        self.pos = 0
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        # Names declared by MUGNA statements parsed so far.
        self.declared: Set[str] = set()

    # Token navigation

    def peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def check(self, *types: TokenType) -> bool:
        return self.peek().type in types

    def advance(self) -> Token:
        token = self.peek()
        if token.type is not T.EOF:
            self.pos += 1
        return token

    def match(self, *types: TokenType) -> bool:
        if self.check(*types):
            self.advance()
            return True
        return False

    def consume(self, expected: TokenType, message: str) -> Token:
        if self.check(expected):
            return self.advance()
        raise self.error(self.peek(), message)

    def error(self, token: Token, message: str) -> ParseError:
        self.diagnostics.report(token.line, token.column, message)
        return ParseError(message, token.line, token.column)

    # Program and statements

    def parse(self) -> Block:
        start = self.consume(T.SUGOD, "Program must start with SUGOD.")
        statements: List[Node] = []
        while not self.check(T.KATAPUSAN, T.EOF):
            statements.append(self.statement())
        self.consume(T.KATAPUSAN, "Program must end with KATAPUSAN.")
        if not self.check(T.EOF):
            raise self.error(self.peek(), "Unexpected tokens after KATAPUSAN.")
        return Block(tuple(statements), start.line, start.column)

    def statement(self) -> Node:
        token = self.peek()
        if self.match(T.IPAKITA):
            return self.print_statement(token)
        if self.match(T.DAWAT):
            return self.input_statement(token)
        if self.match(T.MUGNA):
            return self.var_declaration(token)
        if self.match(T.KUNG):
            return self.conditional(token)
        if self.match(T.ALANG):
            return self.for_loop(token)
        if self.match(T.SAMTANG):
            return self.while_loop(token)
        return self.expression_statement()

    def print_statement(self, keyword: Token) -> Print:
        self.consume(T.COLON, "Expect ':' after IPAKITA.")
        parts = [self.logical_or()]
        while self.match(T.AMPERSAND):
            parts.append(self.logical_or())
        self.match(T.SEMICOLON)
        return Print(tuple(parts), keyword.line, keyword.column)

    def input_statement(self, keyword: Token) -> Input:
        self.consume(T.COLON, "Expect ':' after DAWAT.")
        names: List[str] = []
        while True:
            message = "Expect variable name after ','." if names else "Expect variable name after 'DAWAT:'."
            token = self.consume(T.IDENTIFIER, message)
            name = token.lexeme
            if name not in self.declared:
                raise self.error(
                    token,
                    f"Undefined variable '{name}'. Variables must be declared with MUGNA before using in DAWAT.",
                )
            if name in names:
                raise self.error(
                    token,
                    f"Duplicate variable '{name}' in DAWAT statement. Each variable should appear only once.",
                )
            names.append(name)
            if not self.match(T.COMMA):
                break
        self.match(T.SEMICOLON)
        return Input(tuple(names), keyword.line, keyword.column)

    def var_declaration(self, keyword: Token) -> VarDecl:
        type_token = self.peek()
        if not self.match(*TYPE_KEYWORDS):
            raise self.error(type_token, "Expect a type after MUGNA (NUMERO, TIPIK, LETRA or TINUOD).")
        declared_type = DeclaredType[type_token.type.name]

        items: List[VarItem] = []
        names: Set[str] = set()
        while True:
            name_token = self.consume(T.IDENTIFIER, "Expect variable name.")
            name = name_token.lexeme
            if name in names:
                raise self.error(name_token, f"Cannot declare variable '{name}' twice in the same statement.")
            names.add(name)
            self.declared.add(name)
            init = self.concatenation() if self.match(T.EQUAL) else None
            items.append(VarItem(name, init))
            if not self.match(T.COMMA):
                break
        self.match(T.SEMICOLON)
        return VarDecl(declared_type, tuple(items), keyword.line, keyword.column)

    def conditional(self, keyword: Token) -> Conditional:
        branches = [self.guarded_branch("KUNG")]
        while self.check(T.KUNG) and self.peek(1).type is T.DILI:
            self.advance()
            self.advance()
            branches.append(self.guarded_branch("KUNG DILI"))
        if self.check(T.KUNG) and self.peek(1).type is T.WALA:
            self.advance()
            self.advance()
            branches.append(Branch(None, self.block()))
        return Conditional(tuple(branches), keyword.line, keyword.column)

    def guarded_branch(self, keyword: str) -> Branch:
        self.consume(T.LEFT_PAREN, f"Expect '(' after {keyword}.")
        condition = self.expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after condition.")
        return Branch(condition, self.block())

    def for_loop(self, keyword: Token) -> ForLoop:
        self.consume(T.SA, "Expect SA after ALANG.")
        self.consume(T.LEFT_PAREN, "Expect '(' after ALANG SA.")
        init = self.header_clause()
        self.consume(T.COMMA, "Expect ',' after loop initializer.")
        condition = self.expression()
        self.consume(T.COMMA, "Expect ',' after loop condition.")
        update = self.header_clause()
        self.consume(T.RIGHT_PAREN, "Expect ')' after loop update.")
        body = self.block()
        return ForLoop(init, condition, update, body, keyword.line, keyword.column)

    def header_clause(self) -> ExprStmt:
        token = self.peek()
        return ExprStmt(self.expression(), token.line, token.column)

    def while_loop(self, keyword: Token) -> WhileLoop:
        self.consume(T.LEFT_PAREN, "Expect '(' after SAMTANG.")
        condition = self.expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.block()
        return WhileLoop(condition, body, keyword.line, keyword.column)

    def block(self) -> Block:
        opener = self.consume(T.PUNDOK, "Expect PUNDOK to open a block.")
        self.consume(T.LEFT_BRACE, "Expect '{' after PUNDOK.")
        statements: List[Node] = []
        while not self.check(T.RIGHT_BRACE, T.KATAPUSAN, T.EOF):
            statements.append(self.statement())
        self.consume(T.RIGHT_BRACE, "Expect '}' after block.")
        return Block(tuple(statements), opener.line, opener.column)

    def expression_statement(self) -> ExprStmt:
        token = self.peek()
        expr = self.expression()
        self.match(T.SEMICOLON)
        return ExprStmt(expr, token.line, token.column)

    # Expression parsing

    def expression(self) -> Node:
        return self.assignment()

    # assignment: concatenation ('=' assignment)?
    def assignment(self) -> Node:
        expr = self.concatenation()
        if self.check(T.EQUAL):
            equals = self.advance()
            value = self.assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value, expr.line, expr.column)
            raise self.error(equals, "Invalid assignment target.")
        return expr

    def _binary(self, operand, *operators: TokenType) -> Node:
        node = operand()
        while self.check(*operators):
            op_token = self.advance()
            right = operand()
            node = Binary(node, op_token.lexeme, right, op_token.line, op_token.column)
        return node

    def concatenation(self) -> Node:
        return self._binary(self.logical_or, T.AMPERSAND)

    def logical_or(self) -> Node:
        return self._binary(self.logical_and, T.O)

    def logical_and(self) -> Node:
        return self._binary(self.equality, T.UG)

    def equality(self) -> Node:
        return self._binary(self.comparison, T.EQUAL_EQUAL, T.LT_GT)

    def comparison(self) -> Node:
        return self._binary(self.term, T.GREATER, T.GREATER_EQUAL, T.LESS, T.LESS_EQUAL)

    def term(self) -> Node:
        return self._binary(self.factor, T.PLUS, T.MINUS)

    def factor(self) -> Node:
        return self._binary(self.unary, T.STAR, T.SLASH, T.PERCENT)

    def unary(self) -> Node:
        if self.check(T.PLUS, T.MINUS, T.PLUS_PLUS, T.MINUS_MINUS, T.DILI):
            op_token = self.advance()
            operand = self.unary()
            return Unary(op_token.lexeme, operand, op_token.line, op_token.column)
        return self.postfix()

    def postfix(self) -> Node:
        node = self.primary()
        # A single postfix operator, on the operand's own line. `x++ ++y` and
        # a `++y` line after `x` both read as two statements.
        if self.check(T.PLUS_PLUS, T.MINUS_MINUS) and self.previous().line == self.peek().line:
            op_token = self.advance()
            node = Postfix(node, op_token.lexeme, op_token.line, op_token.column)
        return node

    def primary(self) -> Node:
        token = self.peek()
        if self.match(T.NUMBER):
            return Literal(Value.float_(token.literal), token.line, token.column)
        if self.match(T.STRING, T.ESCAPE_CODE):
            return Literal(Value.string(token.literal), token.line, token.column)
        if self.match(T.CHAR):
            return Literal(Value.text(token.literal), token.line, token.column)
        if self.match(T.DOLLAR):
            return Literal(Value.string("\n"), token.line, token.column)
        if self.match(T.IDENTIFIER):
            return Variable(token.lexeme, token.line, token.column)
        if self.match(T.LEFT_PAREN):
            inner = self.expression()
            self.consume(T.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(inner, token.line, token.column)
        raise self.error(token, "Expect expression.")


def parse_tokens(tokens: List[Token], diagnostics: Optional[Diagnostics] = None) -> Block:
    """Parse a token list into the program's top-level block."""
    return Parser(tokens, diagnostics).parse()
