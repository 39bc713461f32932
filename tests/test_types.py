import pytest

from bisaya.types import (
    ABSENT, DeclaredType, Value, ValueKind, as_condition, coerce, format_number,
    is_truthy, project, to_string, values_equal,
)


def test_text_picks_character_or_string():
    assert Value.text("a").kind is ValueKind.CHARACTER
    assert Value.text("ab").kind is ValueKind.STRING
    assert Value.text("").kind is ValueKind.STRING


def test_format_number_drops_integral_fraction():
    assert format_number(5.0) == "5"
    assert format_number(-3.0) == "-3"
    assert format_number(2.5) == "2.5"


def test_to_string():
    assert to_string(Value.integer(30)) == "30"
    assert to_string(Value.float_(3.5)) == "3.5"
    assert to_string(Value.boolean(True)) == "OO"
    assert to_string(Value.boolean(False)) == "DILI"
    assert to_string(Value.character("c")) == "c"
    assert to_string(ABSENT) == "null"


def test_numero_coercion():
    assert coerce(DeclaredType.NUMERO, Value.float_(4.0)) == Value.integer(4)
    assert coerce(DeclaredType.NUMERO, Value.string("-12")) == Value.integer(-12)
    with pytest.raises(TypeError, match="NUMERO cannot have decimal values"):
        coerce(DeclaredType.NUMERO, Value.float_(3.14))
    with pytest.raises(TypeError, match="Got: 2.5"):
        coerce(DeclaredType.NUMERO, Value.string("2.5"))
    with pytest.raises(TypeError, match="cannot assign abc"):
        coerce(DeclaredType.NUMERO, Value.string("abc"))


def test_tipik_coercion():
    assert coerce(DeclaredType.TIPIK, Value.integer(3)) == Value.float_(3.0)
    assert coerce(DeclaredType.TIPIK, Value.string("2.5")) == Value.float_(2.5)
    with pytest.raises(TypeError):
        coerce(DeclaredType.TIPIK, Value.boolean(True))


def test_letra_coercion():
    assert coerce(DeclaredType.LETRA, Value.string("x")) == Value.character("x")
    with pytest.raises(TypeError, match="LETRA cannot be empty"):
        coerce(DeclaredType.LETRA, Value.string(""))
    with pytest.raises(TypeError, match="LETRA can only hold one character, got: ab"):
        coerce(DeclaredType.LETRA, Value.string("ab"))
    with pytest.raises(TypeError):
        coerce(DeclaredType.LETRA, Value.integer(1))


def test_tinuod_coercion():
    assert coerce(DeclaredType.TINUOD, Value.string("OO")) == Value.boolean(True)
    assert coerce(DeclaredType.TINUOD, Value.string("DILI")) == Value.boolean(False)
    with pytest.raises(TypeError, match='TINUOD only accepts "OO" or "DILI", got: yes'):
        coerce(DeclaredType.TINUOD, Value.string("yes"))


def test_absent_passes_every_type():
    for declared in DeclaredType:
        assert coerce(declared, ABSENT) is ABSENT


def test_project_surfaces_tinuod_booleans():
    assert project(DeclaredType.TINUOD, Value.boolean(True)) == Value.string("OO")
    assert project(DeclaredType.NUMERO, Value.integer(1)) == Value.integer(1)


def test_truthiness():
    assert is_truthy(Value.boolean(True))
    assert is_truthy(Value.string("OO"))
    assert not is_truthy(Value.string("DILI"))
    assert not is_truthy(ABSENT)
    assert is_truthy(Value.integer(0))


def test_condition_values():
    assert as_condition(Value.boolean(False)) is False
    assert as_condition(Value.string("OO")) is True
    assert as_condition(Value.integer(1)) is None
    assert as_condition(Value.string("yes")) is None


def test_equality_across_kinds():
    assert values_equal(Value.integer(5), Value.float_(5.0))
    assert values_equal(Value.character("a"), Value.string("a"))
    assert values_equal(Value.boolean(True), Value.string("OO"))
    assert values_equal(ABSENT, ABSENT)
    assert not values_equal(ABSENT, Value.integer(0))
    assert not values_equal(Value.string("1"), Value.integer(1))
