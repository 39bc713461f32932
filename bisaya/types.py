"""Type definitions and helpers for Bisaya++.

This module defines the runtime value model used by the interpreter and the
coercion rules applied whenever a value is stored into a declared variable.

Runtime values are instances of `Value`, a small tagged variant: a
`ValueKind` tag plus the Python payload for that tag (int, float, a
one-character str, bool, str, or None for ABSENT). Every operator in the
interpreter dispatches on the tag, never on the payload's Python type.

Declared variables have one of four `DeclaredType`s. `coerce` converts an
incoming value to the declared type or raises `TypeError` with a message
meant for the program's author; the environment turns that into a runtime
error.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

TRUE_LITERAL = "OO"
FALSE_LITERAL = "DILI"

_INTEGER_TEXT = re.compile(r"-?\d+")
_DECIMAL_TEXT = re.compile(r"-?\d+\.\d+")
_NUMBER_TEXT = re.compile(r"-?\d+(\.\d+)?")


class ValueKind(Enum):
    INTEGER = "Integer"
    FLOAT = "Float"
    CHARACTER = "Character"
    BOOLEAN = "Boolean"
    STRING = "String"
    ABSENT = "Absent"


@dataclass(frozen=True)
class Value:
    kind: ValueKind
    data: Any = None

    def __repr__(self) -> str:
        return f"{self.kind.value}({self.data!r})"

    @property
    def is_numeric(self) -> bool:
        return self.kind in (ValueKind.INTEGER, ValueKind.FLOAT)

    # Convenience constructors
    @staticmethod
    def integer(n: int) -> 'Value':
        return Value(ValueKind.INTEGER, int(n))

    @staticmethod
    def float_(x: float) -> 'Value':
        return Value(ValueKind.FLOAT, float(x))

    @staticmethod
    def character(c: str) -> 'Value':
        return Value(ValueKind.CHARACTER, c)

    @staticmethod
    def boolean(b: bool) -> 'Value':
        return Value(ValueKind.BOOLEAN, bool(b))

    @staticmethod
    def string(s: str) -> 'Value':
        return Value(ValueKind.STRING, s)

    @staticmethod
    def text(s: str) -> 'Value':
        """A CHARACTER for one-character text, a STRING otherwise."""
        if len(s) == 1:
            return Value(ValueKind.CHARACTER, s)
        return Value(ValueKind.STRING, s)


ABSENT = Value(ValueKind.ABSENT, None)


class DeclaredType(Enum):
    NUMERO = "NUMERO"
    TIPIK = "TIPIK"
    LETRA = "LETRA"
    TINUOD = "TINUOD"


def surface_boolean(flag: bool) -> str:
    return TRUE_LITERAL if flag else FALSE_LITERAL


def format_number(x: float) -> str:
    """Render a float the way the language prints it: 5.0 -> '5', 2.5 -> '2.5'."""
    if math.isfinite(x) and x == int(x):
        return str(int(x))
    return str(x)


def to_string(value: Value) -> str:
    """Convert a runtime value to the text printed or concatenated."""
    kind = value.kind
    if kind is ValueKind.INTEGER:
        return str(value.data)
    if kind is ValueKind.FLOAT:
        return format_number(value.data)
    if kind is ValueKind.BOOLEAN:
        return surface_boolean(value.data)
    if kind in (ValueKind.CHARACTER, ValueKind.STRING):
        return value.data
    if kind is ValueKind.ABSENT:
        return "null"
    raise TypeError(f"unknown value kind {kind}")


def type_name(value: Value) -> str:
    return value.kind.value


def coerce(declared: DeclaredType, value: Value) -> Value:
    """Convert `value` for storage in a variable of type `declared`.

    ABSENT passes through unchanged: a variable declared without an
    initializer holds no value until it is first assigned.
    """
    if value.kind is ValueKind.ABSENT:
        return value
    if declared is DeclaredType.NUMERO:
        return _coerce_numero(value)
    if declared is DeclaredType.TIPIK:
        return _coerce_tipik(value)
    if declared is DeclaredType.LETRA:
        return _coerce_letra(value)
    if declared is DeclaredType.TINUOD:
        return _coerce_tinuod(value)
    raise TypeError(f"unknown declared type {declared}")


def _mismatch(declared: DeclaredType, value: Value) -> TypeError:
    return TypeError(f"Type error: cannot assign {to_string(value)} ({type_name(value)}) to {declared.value}")


def _decimal_error(shown: str) -> TypeError:
    return TypeError(
        "Type error: NUMERO cannot have decimal values. "
        f"Use TIPIK for decimal numbers. Got: {shown}"
    )


def _coerce_numero(value: Value) -> Value:
    if value.kind is ValueKind.INTEGER:
        return value
    if value.kind is ValueKind.FLOAT:
        x = value.data
        if not math.isfinite(x) or x != int(x):
            raise _decimal_error(format_number(x))
        return Value.integer(int(x))
    if value.kind is ValueKind.STRING:
        text = value.data
        if _INTEGER_TEXT.fullmatch(text):
            return Value.integer(int(text))
        if _DECIMAL_TEXT.fullmatch(text):
            raise _decimal_error(text)
    raise _mismatch(DeclaredType.NUMERO, value)


def _coerce_tipik(value: Value) -> Value:
    if value.kind is ValueKind.FLOAT:
        return value
    if value.kind is ValueKind.INTEGER:
        return Value.float_(value.data)
    if value.kind is ValueKind.STRING and _NUMBER_TEXT.fullmatch(value.data):
        return Value.float_(float(value.data))
    raise _mismatch(DeclaredType.TIPIK, value)


def _coerce_letra(value: Value) -> Value:
    if value.kind is ValueKind.CHARACTER:
        return value
    if value.kind is ValueKind.STRING:
        text = value.data
        if len(text) == 0:
            raise TypeError("Type error: LETRA cannot be empty - must be exactly one character")
        if len(text) > 1:
            raise TypeError(f"Type error: LETRA can only hold one character, got: {text}")
        return Value.character(text)
    raise _mismatch(DeclaredType.LETRA, value)


def _coerce_tinuod(value: Value) -> Value:
    if value.kind is ValueKind.BOOLEAN:
        return value
    if value.kind is ValueKind.STRING:
        if value.data == TRUE_LITERAL:
            return Value.boolean(True)
        if value.data == FALSE_LITERAL:
            return Value.boolean(False)
        raise TypeError(f'Type error: TINUOD only accepts "OO" or "DILI", got: {value.data}')
    raise _mismatch(DeclaredType.TINUOD, value)


def project(declared: DeclaredType, value: Value) -> Value:
    """Value as seen by a read: TINUOD booleans surface as "OO"/"DILI"."""
    if declared is DeclaredType.TINUOD and value.kind is ValueKind.BOOLEAN:
        return Value.string(surface_boolean(value.data))
    return value


def is_truthy(value: Value) -> bool:
    """Truthiness used by DILI (logical not)."""
    kind = value.kind
    if kind is ValueKind.ABSENT:
        return False
    if kind is ValueKind.BOOLEAN:
        return value.data
    if kind is ValueKind.STRING:
        return value.data == TRUE_LITERAL
    return True


def as_condition(value: Value):
    """Return the bool a condition value denotes, or None if it is not boolean.

    BOOLEAN values and the surface strings "OO"/"DILI" (how TINUOD variables
    read back) count as booleans.
    """
    if value.kind is ValueKind.BOOLEAN:
        return value.data
    if value.kind is ValueKind.STRING:
        if value.data == TRUE_LITERAL:
            return True
        if value.data == FALSE_LITERAL:
            return False
    return None


def values_equal(a: Value, b: Value) -> bool:
    """Structural equality used by == and <>.

    Numbers compare by value across INTEGER and FLOAT, characters and
    strings compare by text, and booleans compare through their surface
    literal so that a TINUOD variable equals the comparison that produced it.
    """
    if a.is_numeric and b.is_numeric:
        return a.data == b.data
    a, b = _comparable(a), _comparable(b)
    return a.kind is b.kind and a.data == b.data


def _comparable(value: Value) -> Value:
    if value.kind is ValueKind.BOOLEAN:
        return Value.string(surface_boolean(value.data))
    if value.kind is ValueKind.CHARACTER:
        return Value.string(value.data)
    return value
