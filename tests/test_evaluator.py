from __future__ import annotations

import math

import pytest

from rkn import Environment, evaluate, parse_source, run_source
from rkn.errors import DivisionByZero, TypeMismatch, UndefinedVariable


def value(src: str, env: Environment | None = None):
    out = run_source(src, env)
    assert out.ok, out.diagnostics
    return out.value


def error_code(src: str, env: Environment | None = None) -> str:
    out = run_source(src, env)
    assert not out.ok
    errors = [d for d in out.diagnostics if d.is_error]
    assert len(errors) == 1
    return errors[0].code


@pytest.mark.parametrize(
    ("src", "expected"),
    [
        ("1 + 2 * 3", 7),
        ("10 - 3 - 2", 5),
        ("2 ^ 3 ^ 2", 512),
        ("-2 ^ 2", -4),
        ("(-2) ^ 2", 4),
        ("7 / 2", 3.5),
        ("7 % 3", 1),
        ("-7 % 3", 2),
        ("2 ^ -1", 0.5),
        ("5!", 120),
        ("0!", 1),
        ("3! ^ 2", 36),
        ("2 ^ 64", 18446744073709551616),
        ("1 + 2.5", 3.5),
        ("--4", 4),
        ("+4", 4),
    ],
)
def test_arithmetic(src: str, expected: object) -> None:
    assert value(src) == expected


def test_exact_division_stays_integral() -> None:
    v = value("6 / 3")
    assert v == 2 and isinstance(v, int)
    assert isinstance(value("1 / 4"), float)


def test_floats_are_binary64() -> None:
    assert value("0.1 + 0.2") == 0.30000000000000004
    assert value("1e308 + 1") == 1e308


@pytest.mark.parametrize(
    ("src", "expected"),
    [
        ("1 < 2", True),
        ("2 <= 2", True),
        ("3 > 4", False),
        ("1 == 1.0", True),
        ("true != false", True),
        ("not false", True),
        ("true and false", False),
        ("false or true", True),
        ("1 + 1 == 2 and 3 > 2", True),
    ],
)
def test_comparisons_and_logic(src: str, expected: bool) -> None:
    assert value(src) is expected


def test_logical_operators_short_circuit() -> None:
    assert value("false and (1 / 0 == 1)") is False
    assert value("true or undefined_name") is True


def test_division_by_zero_points_at_division() -> None:
    out = run_source("1 + 1 / 0")
    (diag,) = out.diagnostics
    assert diag.code == "E0201"
    assert (diag.span.start.offset, diag.span.end.offset) == (4, 9)
    assert error_code("5 % 0") == "E0201"
    assert error_code("0 ^ -1") == "E0201"


def test_environment_survives_runtime_error() -> None:
    env = run_source("x = 1").env
    out = run_source("x = 2; 1 / 0", env)
    assert not out.ok
    assert out.env is env
    assert value("x + 1", out.env) == 2


def test_undefined_variable_points_at_name() -> None:
    out = run_source("x + 1")
    (diag,) = out.diagnostics
    assert diag.code == "E0203"
    assert (diag.span.start.offset, diag.span.end.offset) == (0, 1)
    assert "'x'" in diag.message


def test_undefined_variable_suggests_close_name() -> None:
    env = run_source("total = 3").env
    out = run_source("totl * 2", env)
    assert any("did you mean 'total'" in n for n in out.diagnostics[0].notes)


def test_assignment_round_trip_and_chaining() -> None:
    env = run_source("x = 5").env
    assert value("x", env) == 5
    env = run_source("a = b = 3").env
    assert value("a + b", env) == 6
    assert value("y = 2; y * 10") == 20


def test_assignment_yields_value() -> None:
    assert value("z = 4") == 4
    assert value("(z = 4) + 1") == 5


@pytest.mark.parametrize(
    ("src", "span"),
    [
        ("true + 1", (0, 8)),
        ("1 and true", (0, 1)),
        ("true and 1", (9, 10)),
        ("not 1", (0, 5)),
        ("-true", (0, 5)),
        ("true < false", (0, 12)),
        ("true == 1", (0, 9)),
        ("3(4)", (0, 4)),
    ],
)
def test_type_mismatch(src: str, span: tuple[int, int]) -> None:
    out = run_source(src)
    (diag,) = out.diagnostics
    assert diag.code == "E0202"
    assert (diag.span.start.offset, diag.span.end.offset) == span


@pytest.mark.parametrize(
    "src",
    ["1e308 * 10", "2 ^ 100000", "10 ^ 400 / 3", "exp(1000)", "100000!", "10.0 ^ 400"],
)
def test_numeric_overflow_is_reported(src: str) -> None:
    assert error_code(src) == "E0204"


def test_huge_integers_are_exact() -> None:
    assert value("2 ^ 200 - 2 ^ 200 + 1") == 1
    assert value("30!") == math.factorial(30)


def test_integer_limit_is_printable() -> None:
    assert value("2 ^ 13999") == 2**13999
    assert len(str(value("10 ^ 4000"))) == 4001
    assert error_code("2 ^ 14000") == "E0204"
    assert error_code("2000!") == "E0204"


def test_inexact_division_of_huge_integers_is_correctly_rounded() -> None:
    assert value("(10 ^ 400 + 1) / 10 ^ 399") == 10.0
    assert value("10 ^ 400 / (3 * 10 ^ 399)") == 10 / 3
    assert error_code("-(10 ^ 400) / 7") == "E0204"


@pytest.mark.parametrize("src", ["sqrt(-1)", "ln(0)", "(-2)!", "(-8) ^ 0.5", "2.5!"])
def test_domain_errors(src: str) -> None:
    assert error_code(src) == "E0205"


def test_builtins_and_constants() -> None:
    assert value("sqrt(16)") == 4.0
    assert value("abs(-3)") == 3
    assert value("max(1, 5, 3)") == 5
    assert value("min(4, 2.5)") == 2.5
    assert value("floor(2.7)") == 2
    assert value("ceil(2.1)") == 3
    assert value("log(1000)") == pytest.approx(3.0)
    assert value("pi") == math.pi
    assert value("cos(0)") == 1.0


def test_builtin_arity_is_checked() -> None:
    assert error_code("sqrt(1, 2)") == "E0202"
    assert error_code("min()") == "E0202"
    assert error_code("sqrt(true)") == "E0202"


def test_shadowing_a_builtin_warns_and_keeps_prelude() -> None:
    out = run_source("pi = 3")
    assert out.ok
    assert out.value == 3
    (diag,) = out.diagnostics
    assert diag.code == "W0301"
    assert not diag.is_error
    assert value("pi", out.env) == 3
    assert out.env.parent is not None
    assert out.env.parent.lookup("pi") == math.pi


def test_evaluate_does_not_mutate_input_env() -> None:
    env = Environment.session()
    res = evaluate(parse_source("x = 1"), env)
    assert res.ok
    assert "x" in res.env
    assert "x" not in env


def test_evaluate_returns_structured_errors() -> None:
    env = Environment.session()
    assert isinstance(evaluate(parse_source("1 / 0"), env).error, DivisionByZero)
    assert isinstance(evaluate(parse_source("nope"), env).error, UndefinedVariable)
    assert isinstance(evaluate(parse_source("true * 2"), env).error, TypeMismatch)


def test_deep_trees_evaluate_without_recursion() -> None:
    n = 20000
    assert value(" + ".join(["1"] * n)) == n
    assert value("x = 0\n" + "x = x + 1\n" * 100 + "x") == 100


def test_empty_program_has_no_value() -> None:
    out = run_source("  # nothing\n;;")
    assert out.ok
    assert out.value is None
