from decimal import Decimal

import pytest
import sympy as sp

from tinycalc.algebra.numeric import (
    DivisionByZeroError,
    NonNumericResultError,
    divide,
    make_number,
    power,
    quantize,
    round_expr,
    to_finite_float,
)


def test_make_number_is_exact():
    assert make_number("0.1") == sp.Rational(1, 10)
    assert make_number(".25") == sp.Rational(1, 4)
    assert make_number("12.") == 12


def test_quantize_rounds_half_away_from_zero():
    assert quantize(Decimal("2.345"), 2) == Decimal("2.35")
    assert quantize(Decimal("-2.345"), 2) == Decimal("-2.35")
    assert quantize(Decimal("0.5"), 0) == Decimal("1")
    assert quantize(Decimal("123456789.123456"), 3) == Decimal("123456789.123")


def test_divide():
    assert divide(sp.Integer(1), sp.Integer(4)) == sp.Rational(1, 4)
    assert divide(sp.Integer(0), sp.Integer(0)) is sp.nan
    with pytest.raises(DivisionByZeroError):
        divide(sp.Integer(1), sp.Integer(0))


def test_power_with_huge_exponent_is_not_exact():
    assert power(sp.Integer(2), sp.Integer(10)) == 1024
    assert power(sp.Integer(2), sp.Integer(10 ** 6)).is_Float


def test_power_switches_on_result_size_not_just_exponent():
    big = sp.Integer(10) ** 4000
    assert power(big, sp.Integer(2)).is_Float
    assert power(sp.Integer(9) ** 4000, sp.Integer(1)) == sp.Integer(9) ** 4000


def test_power_past_float_range_collapses():
    big = sp.Integer(10) ** 4000
    assert power(big, sp.Integer(4000)) is sp.oo
    assert power(-big, sp.Integer(4001)) is sp.zoo
    assert power(1 / big, sp.Integer(4000)) == 0


def test_round_expr():
    assert round_expr(sp.Rational(5, 2)) == 3
    assert round_expr(sp.Rational(-5, 2)) == -3
    assert round_expr(sp.pi, sp.Integer(3)) == sp.Rational(3142, 1000)
    with pytest.raises(ValueError):
        round_expr(sp.pi, sp.Rational(1, 2))
    with pytest.raises(ValueError):
        round_expr(sp.pi, sp.Integer(-1))


def test_to_finite_float():
    assert to_finite_float(sp.Rational(1, 3), 5) == 0.33333
    assert to_finite_float(sp.Rational(3, 10), 5) == 0.3
    assert to_finite_float(sp.Integer(0), 5) == 0.0
    assert to_finite_float(sp.sqrt(2), 10) == 1.4142135624


@pytest.mark.parametrize("expr, error, message", [
    (sp.I, NonNumericResultError, "Result is not a number"),
    (1 + sp.sqrt(-2), NonNumericResultError, "Result is not a number"),
    (sp.nan, NonNumericResultError, "Result is NaN"),
    (sp.zoo, DivisionByZeroError, "Division by zero"),
    (sp.oo, DivisionByZeroError, "Division by zero"),
    (sp.Integer(10) ** 400, DivisionByZeroError, "Division by zero"),
])
def test_to_finite_float_rejects(expr, error, message):
    with pytest.raises(error, match=message):
        to_finite_float(expr, 5)
