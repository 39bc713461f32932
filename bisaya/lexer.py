"""
Lexer for Bisaya++.

Overview:
- Transforms source text into a list of `Token` objects (see `tokens.py`)
  terminated by a single EOF token.
- Scanning never aborts. Problems (unexpected characters, unterminated
  literals, unknown escape codes) are reported to a `Diagnostics` collector
  and the scan continues with the next character, so that one run reports
  every lexical problem in the file.
- Whitespace, including newlines, is discarded. Lines and columns are
  1-based and every token records the position of its first character.

Bracketed escape codes:
    [&] -> "&"    [n] -> newline    [t] -> tab    ["] -> '"'    ['] -> "'"
    [[] -> "["    []] -> "]"        []  -> ""
Any other body is reported and replaced by an empty string token.

The `--` marker:
    The same two characters start a line comment and spell the decrement
    operator. See `_starts_comment` for the lookahead rule that decides.
"""

from __future__ import annotations

from typing import List, Optional

from .diagnostics import Diagnostics
from .tokens import KEYWORDS, Token, TokenType


SINGLE_CHAR_TOKENS = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "&": TokenType.AMPERSAND,
    "$": TokenType.DOLLAR,
}

ESCAPE_CODES = {
    "&": "&",
    "n": "\n",
    "t": "\t",
    '"': '"',
    "'": "'",
    "": "",
}


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_alpha(c: str) -> bool:
    return c.isalpha() or c == "_"


def _is_alnum(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c)


class Lexer:
    def __init__(self, source: str, diagnostics: Optional[Diagnostics] = None):
        self.source = source
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.tokens: List[Token] = []
        self.pos = 0
        self.line = 1
        self.column = 1
        self._start = 0
        self._start_line = 1
        self._start_column = 1
        # True once a token has been emitted on the current line.
        self._line_has_token = False

    def scan_tokens(self) -> List[Token]:
        while not self.at_end():
            self._start = self.pos
            self._start_line = self.line
            self._start_column = self.column
            self.scan_token()
        self.tokens.append(Token(TokenType.EOF, "", None, self.line, self.column))
        return self.tokens

    # Character helpers

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
            self._line_has_token = False
        else:
            self.column += 1
        return ch

    def peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        if index < len(self.source):
            return self.source[index]
        return "\0"

    def match(self, expected: str) -> bool:
        if self.at_end() or self.source[self.pos] != expected:
            return False
        self.advance()
        return True

    def add(self, token_type: TokenType, literal=None) -> None:
        lexeme = self.source[self._start:self.pos]
        self.tokens.append(Token(token_type, lexeme, literal, self._start_line, self._start_column))
        self._line_has_token = True

    def error(self, message: str) -> None:
        self.diagnostics.report(self._start_line, self._start_column, message)

    # Scanner

    def scan_token(self) -> None:
        c = self.advance()
        if c in " \t\r\n":
            return
        token_type = SINGLE_CHAR_TOKENS.get(c)
        if token_type is not None:
            self.add(token_type)
            return
        if c == "+":
            self.add(TokenType.PLUS_PLUS if self.match("+") else TokenType.PLUS)
        elif c == "-":
            if self.match("-"):
                if self._starts_comment():
                    self.skip_comment()
                else:
                    self.add(TokenType.MINUS_MINUS)
            else:
                self.add(TokenType.MINUS)
        elif c == "=":
            self.add(TokenType.EQUAL_EQUAL if self.match("=") else TokenType.EQUAL)
        elif c == "<":
            if self.match(">"):
                self.add(TokenType.LT_GT)
            elif self.match("="):
                self.add(TokenType.LESS_EQUAL)
            else:
                self.add(TokenType.LESS)
        elif c == ">":
            self.add(TokenType.GREATER_EQUAL if self.match("=") else TokenType.GREATER)
        elif c == '"':
            self.string()
        elif c == "'":
            self.character()
        elif c == "[":
            self.escape_code()
        elif _is_digit(c):
            self.number()
        elif _is_alpha(c):
            self.identifier()
        else:
            self.error(f"Unexpected character: {c!r}")

    def _starts_comment(self) -> bool:
        """Decide whether the `--` just consumed opens a line comment.

        Only a `--` at the start of a line (nothing but whitespace before it
        on that line) can be a comment. There it is a comment when followed
        by whitespace, end of input or a non-identifier character; `--(` is
        a decrement. When followed by an identifier or digit, a space later
        on the line marks comment text (`--note to self`), otherwise it is a
        decrement statement (`--x`).
        """
        if self._line_has_token:
            return False
        nxt = self.peek()
        if self.at_end() or nxt in " \t\r\n":
            return True
        if nxt == "(":
            return False
        if not _is_alnum(nxt):
            return True
        return self._space_ahead_in_line()

    def _space_ahead_in_line(self) -> bool:
        index = self.pos
        while index < len(self.source):
            ch = self.source[index]
            if ch in "\r\n":
                return False
            if ch in " \t":
                return True
            index += 1
        return False

    def skip_comment(self) -> None:
        while not self.at_end() and self.peek() != "\n":
            self.advance()

    def string(self) -> None:
        chars: List[str] = []
        while not self.at_end() and self.peek() != '"':
            chars.append(self.advance())
        if self.at_end():
            self.error("Unterminated string.")
            return
        self.advance()  # closing quote
        self.add(TokenType.STRING, "".join(chars))

    def character(self) -> None:
        # Length is checked when the value is stored into a LETRA slot.
        chars: List[str] = []
        while not self.at_end() and self.peek() not in ("'", "\n"):
            chars.append(self.advance())
        if self.at_end() or self.peek() == "\n":
            self.error("Unterminated character literal - missing closing quote.")
            return
        self.advance()  # closing quote
        self.add(TokenType.CHAR, "".join(chars))

    def escape_code(self) -> None:
        # The opening '[' has been consumed.
        body: List[str] = []
        if self.peek() == "[":
            body.append(self.advance())
            if self.match("]"):
                self.add(TokenType.ESCAPE_CODE, "[")
                return
        if self.peek() == "]" and self.peek(1) == "]":
            self.advance()
            self.advance()
            self.add(TokenType.ESCAPE_CODE, "]")
            return

        while not self.at_end() and self.peek() not in ("]", "\n"):
            body.append(self.advance())
        if self.at_end() or self.peek() == "\n":
            self.error("Unterminated escape code.")
            return
        self.advance()  # closing ']'
        code = "".join(body)
        if code in ESCAPE_CODES:
            self.add(TokenType.ESCAPE_CODE, ESCAPE_CODES[code])
        else:
            self.error(f"Unknown escape code '[{code}]'.")
            self.add(TokenType.ESCAPE_CODE, "")

    def number(self) -> None:
        while _is_digit(self.peek()):
            self.advance()
        if self.peek() == "." and _is_digit(self.peek(1)):
            self.advance()
            while _is_digit(self.peek()):
                self.advance()
        text = self.source[self._start:self.pos]
        self.add(TokenType.NUMBER, float(text))

    def identifier(self) -> None:
        while _is_alnum(self.peek()):
            self.advance()
        text = self.source[self._start:self.pos]
        self.add(KEYWORDS.get(text, TokenType.IDENTIFIER))


def tokenize(source: str, diagnostics: Optional[Diagnostics] = None) -> List[Token]:
    """Convenience wrapper: scan `source` and return its tokens."""
    return Lexer(source, diagnostics).scan_tokens()
