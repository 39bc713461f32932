"""Diagnostic collection shared by the lexer, parser and driver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Diagnostic:
    """A single reported problem with its source position.

    `line` and `column` are 1-based; either may be None when the position is
    unknown (for example a runtime error raised outside any statement).
    """
    line: Optional[int]
    column: Optional[int]
    message: str

    def __str__(self) -> str:
        if self.line is None:
            return f"Error: {self.message}"
        if self.column is None:
            return f"[line {self.line}] Error: {self.message}"
        return f"[line {self.line} col {self.column}] Error: {self.message}"


class Diagnostics:
    """Collects diagnostics for one compilation unit.

    An instance is passed explicitly to every stage that can report
    problems. `had_error` is consulted between lexing and parsing, and
    between parsing and interpretation; `reset` clears it before the next
    unit is compiled with the same collector.
    """

    def __init__(self) -> None:
        self.entries: List[Diagnostic] = []

    @property
    def had_error(self) -> bool:
        return bool(self.entries)

    def report(self, line: Optional[int], column: Optional[int], message: str) -> Diagnostic:
        diagnostic = Diagnostic(line, column, message)
        self.entries.append(diagnostic)
        return diagnostic

    def reset(self) -> None:
        self.entries.clear()

    def format(self) -> str:
        return "\n".join(str(d) for d in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)
