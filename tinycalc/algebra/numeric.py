from __future__ import annotations
import math
from decimal import Context, Decimal, ROUND_HALF_UP
from fractions import Fraction
import sympy as sp

DEFAULT_WORKING_DIGITS = 64
# beyond these, exact rational arithmetic is replaced by working-precision floats
MAX_EXACT_EXPONENT = 4096
MAX_EXACT_DIGITS = 4096
# decimal exponent past which a power counts as overflow or underflow
MAX_POWER_MAGNITUDE = 10 ** 6
# a float cannot carry more decimal places than this
MAX_ROUND_PLACES = 350

class ExpressionError(Exception): ...
class DivisionByZeroError(ExpressionError): ...
class NonNumericResultError(ExpressionError): ...

def make_number(text: str) -> sp.Rational:
    """Exact rational for a decimal literal, so 0.1 really is 1/10."""
    frac = Fraction(Decimal(text))
    return sp.Rational(frac.numerator, frac.denominator)

def divide(left: sp.Expr, right: sp.Expr) -> sp.Expr:
    if right.is_zero:
        if left.is_zero:
            return sp.nan
        raise DivisionByZeroError("Division by zero")
    return left / right

def _log10_abs(num: sp.Expr):
    """log10|num| as a Float, or None for zero and non-finite values."""
    if num.is_zero or not num.is_finite:
        return None
    scale = sp.N(sp.log(sp.Abs(num)) / sp.log(10), 15)
    return scale if scale.is_real and scale.is_finite else None

def _exact_digits(value: sp.Expr):
    """Rough count of decimal digits it takes to carry `value` exactly."""
    if value.is_Rational:
        p, q = abs(int(value.p)), int(value.q)
        return max(math.log10(p) if p else 0.0, math.log10(q))
    scale = _log10_abs(sp.N(value, 15))
    return abs(scale) if scale is not None else 0

def power(base: sp.Expr, exponent: sp.Expr, digits: int = DEFAULT_WORKING_DIGITS) -> sp.Expr:
    """base ** exponent, kept exact only while the result stays small.

    Larger results are computed at `digits` precision, and results whose
    decimal exponent passes MAX_POWER_MAGNITUDE collapse to infinity or zero.
    """
    if not (exponent.is_Number and exponent.is_finite and base.is_number):
        return base ** exponent
    size = abs(exponent)
    if size <= MAX_EXACT_EXPONENT and size * _exact_digits(base) <= MAX_EXACT_DIGITS:
        return base ** exponent
    num = sp.N(base, digits)
    scale = _log10_abs(num)
    if scale is not None:
        magnitude = exponent * scale
        if magnitude > MAX_POWER_MAGNITUDE:
            return sp.oo if num.is_positive else sp.zoo
        if magnitude < -MAX_POWER_MAGNITUDE:
            return sp.Integer(0)
    return num ** exponent

def quantize(value: Decimal, places: int) -> Decimal:
    """Round half away from zero to `places` decimals."""
    places = min(places, MAX_ROUND_PLACES)
    ctx = Context(prec=max(value.adjusted(), 0) + places + 2, rounding=ROUND_HALF_UP)
    return value.quantize(Decimal(1).scaleb(-places), context=ctx)

def round_expr(value: sp.Expr, places: sp.Expr = sp.Integer(0),
               digits: int = DEFAULT_WORKING_DIGITS) -> sp.Expr:
    if not places.is_Integer or places.is_negative:
        raise ValueError("Number of decimals in function round must be a non-negative integer")
    num = sp.N(value, digits)
    if not (num.is_Float or num.is_Rational):
        return num
    rounded = quantize(Decimal(str(sp.Float(num, digits))), int(places))
    frac = Fraction(rounded)
    return sp.Rational(frac.numerator, frac.denominator)

def to_finite_float(expr: sp.Expr, precision: int, digits: int = DEFAULT_WORKING_DIGITS) -> float:
    """Evaluate at `digits` significant digits, round to `precision` places and convert.

    Raises NonNumericResultError for complex or NaN results and
    DivisionByZeroError for any infinity, including overflow of the float.
    """
    num = sp.N(expr, digits)
    if num is sp.nan or num.has(sp.nan):
        raise NonNumericResultError("Result is NaN")
    if num.has(sp.zoo, sp.oo, -sp.oo):
        raise DivisionByZeroError("Division by zero")
    if not (num.is_Float or num.is_Rational):
        raise NonNumericResultError("Result is not a number")
    num = sp.Float(num, digits)
    try:
        approx = float(num)
    except OverflowError:
        raise DivisionByZeroError("Division by zero")
    if math.isnan(approx):
        raise NonNumericResultError("Result is NaN")
    if math.isinf(approx):
        raise DivisionByZeroError("Division by zero")
    value = float(quantize(Decimal(str(num)), precision))
    if value == 0:
        # no negative zero
        value = 0.0
    return value
