"""Abstract Syntax Tree (AST) definitions for Bisaya++.

The parser builds these nodes once and nothing mutates them afterwards, so
every node is a frozen dataclass and child sequences are tuples. Each node
remembers the line and column of the token that started it; positions are
excluded from equality so that two parses of differently formatted but
equivalent programs compare equal.

Operators are stored as their source spelling ('+', '<>', 'UG', 'DILI',
'++', ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .types import DeclaredType, Value


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


# Expressions


@dataclass(frozen=True)
class Literal(Node):
    value: Value
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Variable(Node):
    name: str
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Assign(Node):
    name: str
    value: Node
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Binary(Node):
    left: Node
    op: str
    right: Node
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Unary(Node):
    op: str
    operand: Node
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Postfix(Node):
    operand: Node
    op: str
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Grouping(Node):
    inner: Node
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


# Statements


@dataclass(frozen=True)
class Block(Node):
    statements: Tuple[Node, ...]
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Print(Node):
    parts: Tuple[Node, ...]
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Input(Node):
    names: Tuple[str, ...]
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class ExprStmt(Node):
    expr: Node
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class VarItem:
    name: str
    init: Optional[Node]  # None when declared without a value


@dataclass(frozen=True)
class VarDecl(Node):
    declared_type: DeclaredType
    items: Tuple[VarItem, ...]
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Branch:
    condition: Optional[Node]  # None for the KUNG WALA branch
    block: Block


@dataclass(frozen=True)
class Conditional(Node):
    branches: Tuple[Branch, ...]
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class ForLoop(Node):
    init: Node
    condition: Node
    update: Node
    body: Block
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class WhileLoop(Node):
    condition: Node
    body: Block
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)
