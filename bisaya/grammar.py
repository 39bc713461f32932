"""Reference LALR grammar for Bisaya++, checked with Lark.

The recursive-descent parser in `parser.py` is what the interpreter uses.
This module states the same syntax declaratively so that it can be read in
one place and used to cross-check the hand-written parser.

Lark does not see the source text. The token list produced by `Lexer` is
serialized as a space-separated string of token kind names (`SUGOD IPAKITA
COLON IDENTIFIER KATAPUSAN`), and every token kind is a terminal matching
its own name. The two-word keywords `KUNG DILI` and `KUNG WALA` are folded
into the single terminals ELSE_IF and ELSE before parsing, since LALR(1)
cannot tell an else-if from a new KUNG statement by one token of lookahead.

Shift/reduce conflicts are resolved by shifting, which gives the same
"longest statement wins" reading as the hand-written parser (for example a
`-` after an expression continues it instead of starting a new statement).

The serialized form carries no line breaks, so the grammar does not check
that a postfix `++`/`--` sits on its operand's line. For `x` followed by a
`++y` line the grammar accepts the postfix reading and the parser takes
the prefix one; both accept the program.
"""

from __future__ import annotations

from bisect import bisect_right
from functools import lru_cache
from typing import List, Tuple

from lark import Lark, Tree
from lark.exceptions import UnexpectedInput, UnexpectedToken

from .errors import ParseError
from .tokens import Token, TokenType

ELSE_IF = "ELSE_IF"
ELSE = "ELSE"

RULES = r"""
    start: SUGOD statement* KATAPUSAN

    ?statement: print_stmt
              | input_stmt
              | var_decl
              | if_stmt
              | for_stmt
              | while_stmt
              | expr_stmt

    print_stmt: IPAKITA COLON logic_or (AMPERSAND logic_or)* SEMICOLON?
    input_stmt: DAWAT COLON IDENTIFIER (COMMA IDENTIFIER)* SEMICOLON?
    var_decl: MUGNA type_name declarator (COMMA declarator)* SEMICOLON?
    type_name: NUMERO | TIPIK | LETRA | TINUOD
    declarator: IDENTIFIER (EQUAL concat)?

    if_stmt: KUNG LEFT_PAREN expression RIGHT_PAREN block else_if* else_block?
    else_if: ELSE_IF LEFT_PAREN expression RIGHT_PAREN block
    else_block: ELSE block
    for_stmt: ALANG SA LEFT_PAREN expression COMMA expression COMMA expression RIGHT_PAREN block
    while_stmt: SAMTANG LEFT_PAREN expression RIGHT_PAREN block
    block: PUNDOK LEFT_BRACE statement* RIGHT_BRACE
    expr_stmt: expression SEMICOLON?

    // Expressions, loosest first
    ?expression: assignment
    ?assignment: IDENTIFIER EQUAL assignment -> assign
               | concat
    ?concat: concat AMPERSAND logic_or | logic_or
    ?logic_or: logic_or O logic_and | logic_and
    ?logic_and: logic_and UG equality | equality
    ?equality: equality (EQUAL_EQUAL | LT_GT) comparison | comparison
    ?comparison: comparison (GREATER | GREATER_EQUAL | LESS | LESS_EQUAL) term | term
    ?term: term (PLUS | MINUS) factor | factor
    ?factor: factor (STAR | SLASH | PERCENT) unary | unary
    ?unary: (PLUS | MINUS | PLUS_PLUS | MINUS_MINUS | DILI) unary | postfix
    ?postfix: primary (PLUS_PLUS | MINUS_MINUS)?
    ?primary: STRING | ESCAPE_CODE | NUMBER | CHAR | DOLLAR | IDENTIFIER
            | LEFT_PAREN expression RIGHT_PAREN

    %ignore " "
"""


def terminal_names() -> List[str]:
    names = [t.name for t in TokenType if t is not TokenType.EOF]
    return names + [ELSE_IF, ELSE]


def grammar_text() -> str:
    """The complete Lark grammar: rules plus one terminal per token kind."""
    terminals = "\n".join(f'    {name}: "{name}"' for name in terminal_names())
    return RULES + "\n" + terminals + "\n"


@lru_cache(maxsize=None)
def grammar_parser() -> Lark:
    return Lark(grammar_text(), parser='lalr', lexer='basic', maybe_placeholders=False)


def serialize(tokens: List[Token]) -> Tuple[str, List[Token], List[int]]:
    """Render tokens as the terminal string Lark parses.

    Returns the text, the source token behind each word and each word's
    offset in the text, so that Lark error positions can be mapped back.
    """
    significant = [t for t in tokens if t.type is not TokenType.EOF]
    words: List[str] = []
    origins: List[Token] = []
    offsets: List[int] = []
    offset = 0
    i = 0
    while i < len(significant):
        token = significant[i]
        name = token.type.name
        if token.type is TokenType.KUNG and i + 1 < len(significant):
            follower = significant[i + 1].type
            if follower is TokenType.DILI:
                name = ELSE_IF
                i += 1
            elif follower is TokenType.WALA:
                name = ELSE
                i += 1
        words.append(name)
        origins.append(token)
        offsets.append(offset)
        offset += len(name) + 1
        i += 1
    return " ".join(words), origins, offsets


def check_syntax(tokens: List[Token]) -> Tree:
    """Parse the token list with the reference grammar.

    Returns the Lark parse tree, or raises `ParseError` positioned at the
    token Lark rejected (the end of input when it ran out of tokens).
    """
    text, origins, offsets = serialize(tokens)
    try:
        return grammar_parser().parse(text)
    except UnexpectedInput as e:
        pos = getattr(e, 'pos_in_stream', None)
        at_end = isinstance(e, UnexpectedToken) and e.token.type == '$END'
        if at_end or pos is None or pos < 0 or not origins:
            end = tokens[-1] if tokens else None
            line = end.line if end else 1
            column = end.column if end else 1
            raise ParseError("Unexpected end of input.", line, column) from None
        token = origins[bisect_right(offsets, pos) - 1]
        raise ParseError(f"Unexpected {token.type} {token.lexeme!r}.", token.line, token.column) from None
