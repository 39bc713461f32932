"""Token definitions for the Bisaya++ lexer.

`TokenType` enumerates every token kind the lexer can produce and `Token`
is the immutable record handed from the lexer to the parser. Keywords are
the uppercase Bisaya words listed in `KEYWORDS`; matching is exact and
case-sensitive, so `sugod` is an ordinary identifier.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Optional, Union


class TokenType(Enum):
    # Punctuation
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    COLON = auto()
    SEMICOLON = auto()
    DOLLAR = auto()

    # Operators
    PLUS = auto()
    PLUS_PLUS = auto()
    MINUS = auto()
    MINUS_MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    AMPERSAND = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    LT_GT = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    ESCAPE_CODE = auto()
    NUMBER = auto()
    CHAR = auto()

    # Keywords
    SUGOD = auto()
    KATAPUSAN = auto()
    IPAKITA = auto()
    DAWAT = auto()
    MUGNA = auto()
    NUMERO = auto()
    TIPIK = auto()
    LETRA = auto()
    TINUOD = auto()
    KUNG = auto()
    WALA = auto()
    DILI = auto()
    UG = auto()
    O = auto()
    PUNDOK = auto()
    ALANG = auto()
    SA = auto()
    SAMTANG = auto()

    EOF = auto()

    def __str__(self) -> str:
        return self.name


KEYWORDS: Dict[str, TokenType] = {
    "SUGOD": TokenType.SUGOD,
    "KATAPUSAN": TokenType.KATAPUSAN,
    "IPAKITA": TokenType.IPAKITA,
    "DAWAT": TokenType.DAWAT,
    "MUGNA": TokenType.MUGNA,
    "NUMERO": TokenType.NUMERO,
    "TIPIK": TokenType.TIPIK,
    "LETRA": TokenType.LETRA,
    "TINUOD": TokenType.TINUOD,
    "KUNG": TokenType.KUNG,
    "WALA": TokenType.WALA,
    "DILI": TokenType.DILI,
    "UG": TokenType.UG,
    "O": TokenType.O,
    "PUNDOK": TokenType.PUNDOK,
    "ALANG": TokenType.ALANG,
    "SA": TokenType.SA,
    "SAMTANG": TokenType.SAMTANG,
}

TYPE_KEYWORDS = (TokenType.NUMERO, TokenType.TIPIK, TokenType.LETRA, TokenType.TINUOD)


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    literal: Optional[Union[float, str]]
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.lexeme!r}, {self.line}:{self.column})"

    def describe(self) -> str:
        """One-line dump used by the CLI token listing."""
        literal = "" if self.literal is None else repr(self.literal)
        return f"{self.line:>4}:{self.column:<4} {str(self.type):<14} {self.lexeme!r:<14} {literal}".rstrip()
