import pytest

from bisaya.errors import BisayaRuntimeError, InputExhaustedError
from bisaya.interpreter import Interpreter, parse_program, run_program
from bisaya.io_handler import ScriptedIO
from bisaya.types import Value


def run(body, *lines):
    io = ScriptedIO(lines)
    run_program(f"SUGOD\n{body}\nKATAPUSAN", io=io)
    return io.text


def test_declare_assign_and_print():
    io = ScriptedIO()
    run_program("SUGOD MUGNA NUMERO x=10,y=20,z z=x+y IPAKITA: z KATAPUSAN", io=io)
    assert io.text == "30\n"


def test_bracket_escapes_print_literally():
    assert run("IPAKITA: [[] & [&] & []]") == "[&]\n"


def test_each_print_ends_a_line():
    assert run('IPAKITA: "A"\nIPAKITA: "B"') == "A\nB\n"


def test_trailing_newline_is_not_doubled():
    assert run('IPAKITA: "A" & $\nIPAKITA: "B" & [n]') == "A\nB\n"


def test_for_loop_prints_each_iteration():
    source = 'MUGNA NUMERO i\nALANG SA (i=1, i<=3, i++) PUNDOK{ IPAKITA: i & " " }'
    assert run(source) == "1 \n2 \n3 \n"


def test_postfix_yields_old_value():
    assert run('MUGNA NUMERO x = 5\nIPAKITA: x++ & " " & x') == "5 6\n"


def test_prefix_yields_new_value():
    assert run('MUGNA NUMERO x = 5\nIPAKITA: ++x & " " & x') == "6 6\n"


def test_decrement_statements():
    assert run("MUGNA NUMERO x = 5\nx--\n--x\nIPAKITA: x") == "3\n"


def test_chained_assignment():
    assert run('MUGNA NUMERO x, y\nx = y = 4\nIPAKITA: x & " " & y') == "4 4\n"


def test_integer_division_truncates_toward_zero():
    assert run('MUGNA NUMERO a = -7, b = 2\nIPAKITA: a / b & " " & a % b') == "-3 -1\n"


def test_literal_division_is_decimal():
    assert run("IPAKITA: 7 / 2") == "3.5\n"


def test_tipik_prints_integral_values_without_fraction():
    assert run('MUGNA TIPIK t = 3, u = 2.5\nIPAKITA: t & " " & u') == "3 2.5\n"


@pytest.mark.parametrize("expr", ["1 / 0", "1 % 0", "a / b", "a % b", "1.5 / 0"])
def test_division_by_zero(expr):
    with pytest.raises(BisayaRuntimeError, match="by zero"):
        run(f"MUGNA NUMERO a = 1, b = 0\nIPAKITA: {expr}")


def test_numero_rejects_decimal_initializer():
    with pytest.raises(BisayaRuntimeError, match="NUMERO cannot have decimal values"):
        run("MUGNA NUMERO n=3.14")


def test_tinuod_stores_boolean_and_prints_surface_literal():
    io = ScriptedIO()
    interpreter = run_program('SUGOD MUGNA TINUOD t = "OO" IPAKITA: t KATAPUSAN', io=io)
    assert io.text == "OO\n"
    assert interpreter.env.get_raw("t") == Value.boolean(True)


def test_tinuod_from_comparison():
    assert run("MUGNA NUMERO a = 5\nMUGNA TINUOD t = a > 3\nIPAKITA: t") == "OO\n"


def test_tinuod_assignment_yields_surface_value():
    assert run('MUGNA TINUOD a, b\na = b = "DILI"\nIPAKITA: a & b') == "DILIDILI\n"


def test_tinuod_rejects_other_strings():
    with pytest.raises(BisayaRuntimeError, match="TINUOD only accepts"):
        run('MUGNA TINUOD t = "YES"')


def test_letra_rejects_long_text():
    with pytest.raises(BisayaRuntimeError, match="LETRA can only hold one character"):
        run("MUGNA LETRA c = 'ab'")


def test_redeclaration_is_runtime_error():
    with pytest.raises(BisayaRuntimeError, match="Variable 'x' is already declared."):
        run("MUGNA NUMERO x\nMUGNA TIPIK x")


def test_undeclared_read_and_assign():
    with pytest.raises(BisayaRuntimeError, match="Undefined variable 'y'"):
        run("IPAKITA: y")
    with pytest.raises(BisayaRuntimeError, match="Undefined variable 'y'"):
        run("y = 5")


def test_uninitialized_variable_prints_null():
    assert run("MUGNA NUMERO x\nIPAKITA: x") == "null\n"


def test_conditional_chain_picks_first_true_branch():
    source = (
        "MUGNA NUMERO score = 85\n"
        'KUNG (score >= 90) PUNDOK{ IPAKITA: "A" }\n'
        'KUNG DILI (score >= 80) PUNDOK{ IPAKITA: "B" }\n'
        'KUNG DILI (score >= 70) PUNDOK{ IPAKITA: "C" }\n'
        'KUNG WALA PUNDOK{ IPAKITA: "F" }'
    )
    assert run(source) == "B\n"


def test_else_branch_runs_when_nothing_matches():
    assert run('KUNG (1 > 2) PUNDOK{ IPAKITA: "no" }\nKUNG WALA PUNDOK{ IPAKITA: "yes" }') == "yes\n"


def test_condition_must_be_boolean():
    with pytest.raises(BisayaRuntimeError, match="condition must be a boolean"):
        run("MUGNA NUMERO x = 1\nKUNG (x) PUNDOK{ IPAKITA: 1 }")


def test_logical_operands_must_be_boolean():
    with pytest.raises(BisayaRuntimeError, match="must be boolean"):
        run("IPAKITA: 1 UG 2")


def test_logical_operators_short_circuit():
    source = (
        'MUGNA TINUOD f = "DILI"\n'
        "MUGNA NUMERO x = 0\n"
        'KUNG (f UG x / 0 == 1) PUNDOK{ IPAKITA: "no" }\n'
        'KUNG WALA PUNDOK{ IPAKITA: "safe" }\n'
        'IPAKITA: (1 < 2 O x / 0 == 1)'
    )
    assert run(source) == "safe\nOO\n"


def test_not_operator():
    assert run('IPAKITA: DILI ("OO" == "OO")') == "DILI\n"
    assert run('MUGNA TINUOD t = "DILI"\nIPAKITA: DILI t') == "OO\n"


def test_equality_compares_numbers_and_text():
    source = (
        "MUGNA NUMERO n = 5\n"
        "MUGNA TIPIK f = 5.0\n"
        "MUGNA LETRA c = 'a'\n"
        'IPAKITA: (n == f) & (c == "a") & (n <> 6)'
    )
    assert run(source) == "OOOOOO\n"


def test_comparison_requires_numbers():
    with pytest.raises(BisayaRuntimeError, match="must be numbers"):
        run('IPAKITA: "a" < "b"')


def test_unary_minus_requires_number():
    with pytest.raises(BisayaRuntimeError, match="numeric operand"):
        run('IPAKITA: -"a"')


def test_increment_requires_numeric_variable():
    with pytest.raises(BisayaRuntimeError, match="can only be applied to a variable"):
        run("IPAKITA: 5++")
    with pytest.raises(BisayaRuntimeError, match="requires a numeric variable"):
        run('MUGNA TINUOD t = "OO"\nt++')


def test_while_loop():
    source = 'MUGNA NUMERO n = 3\nSAMTANG (n > 0) PUNDOK{ IPAKITA: n\nn-- }'
    assert run(source) == "3\n2\n1\n"


def test_declarations_inside_blocks_stay_visible():
    assert run("KUNG (1 < 2) PUNDOK{ MUGNA NUMERO inner = 7 }\nIPAKITA: inner") == "7\n"


def test_input_assigns_fields_in_order():
    io = ScriptedIO(["3, 4"])
    run_program("SUGOD MUGNA NUMERO a, b DAWAT: a, b IPAKITA: a + b KATAPUSAN", io=io)
    assert io.text == "7\n"
    assert io.prompts == ["Enter values for: a, b"]


def test_input_coerces_each_declared_type():
    source = "MUGNA TIPIK t\nMUGNA LETRA c\nMUGNA TINUOD b\nDAWAT: t, c, b\nIPAKITA: t & c & b"
    assert run(source, "2.5, x, OO") == "2.5xOO\n"


def test_input_field_count_must_match():
    with pytest.raises(BisayaRuntimeError, match="DAWAT expects 2 value\\(s\\) but got 1"):
        run("MUGNA NUMERO a, b\nDAWAT: a, b", "1")


def test_input_rejects_invalid_text():
    with pytest.raises(BisayaRuntimeError, match="Invalid input for 'a'"):
        run("MUGNA NUMERO a\nDAWAT: a", "abc")
    with pytest.raises(BisayaRuntimeError, match="NUMERO cannot have decimal values"):
        run("MUGNA NUMERO a\nDAWAT: a", "2.5")


def test_input_exhausted():
    with pytest.raises(InputExhaustedError):
        run("MUGNA NUMERO a\nDAWAT: a")


def test_runtime_error_carries_statement_line():
    with pytest.raises(BisayaRuntimeError) as exc:
        run("MUGNA NUMERO x = 1\nx = x / 0")
    assert exc.value.line == 3
    assert str(exc.value).startswith("[line 3 col 1] Error:")


def test_output_before_error_is_kept():
    io = ScriptedIO()
    with pytest.raises(BisayaRuntimeError):
        run_program("SUGOD IPAKITA: 1 IPAKITA: 1 / 0 KATAPUSAN", io=io)
    assert io.text == "1\n"


def test_debug_trace_levels(tmp_path):
    source = "SUGOD MUGNA NUMERO x = 1 KUNG (x > 0) PUNDOK{ x = 2 } KATAPUSAN"
    program = parse_program(source)

    quiet = tmp_path / "level1.txt"
    Interpreter(io=ScriptedIO(), debug_level=1, debug_file=str(quiet)).interpret(program)
    trace = quiet.read_text(encoding="utf-8")
    assert "VarDecl" in trace and "Conditional" in trace
    assert "declare" not in trace

    verbose = tmp_path / "level3.txt"
    Interpreter(io=ScriptedIO(), debug_level=3, debug_file=str(verbose)).interpret(program)
    trace = verbose.read_text(encoding="utf-8")
    assert "declare x: NUMERO = 1" in trace
    assert "assign x = 2" in trace
    assert "KUNG condition at line 1 -> True" in trace


@pytest.mark.parametrize("source, expected", [
    ('MUGNA NUMERO a, b = 1, c = 1\na = b\n++c\nIPAKITA: a & " " & b & " " & c', "1 1 2\n"),
    ("MUGNA NUMERO x = 5\nx = 5\n--x\nIPAKITA: x", "4\n"),
    ("MUGNA NUMERO x = 5\n--x\nIPAKITA: x", "4\n"),
    ("MUGNA NUMERO x = 1, y = 7\n++y\nIPAKITA: x & \" \" & y", "1 8\n"),
    ("MUGNA NUMERO x = 1\nIPAKITA: x\n++x\nIPAKITA: x", "1\n2\n"),
    ("MUGNA NUMERO x = 1\nIPAKITA: x\n--x\nIPAKITA: x", "1\n0\n"),
    ("MUGNA NUMERO x = 1, y = 1\nx = y\n-- note\n--y\nIPAKITA: x & \" \" & y", "1 0\n"),
])
def test_prefix_line_after_statement(source, expected):
    assert run(source) == expected
