from __future__ import annotations
from typing import Optional
from .algebra.numeric import DivisionByZeroError, NonNumericResultError, to_finite_float
from .algebra.parsing import (ExpressionSyntaxError, UnknownIdentifierError, find_unknown_identifier,
                              normalize_expression, parse_expression)
from .config import Settings, get_settings
from .core.allowlist import REGISTRY, AllowlistRegistry
from .core.types import EMPTY_DETAIL, Err, ErrorKind, EvaluationRequest, EvaluationResult, Ok

DIVISION_BY_ZERO_DETAIL = "Division by zero"

def _syntax_error(message: str) -> Err:
    return Err(ErrorKind.SYNTAX_ERROR, f"Syntax error: {message}")

def evaluate(expression: str, precision: Optional[int] = None,
             settings: Optional[Settings] = None,
             registry: AllowlistRegistry = REGISTRY) -> EvaluationResult:
    """Evaluate a user-typed arithmetic expression.

    Never raises: every failure comes back as an `Err` carrying the
    user-facing message. Identifiers outside the allowlist are rejected
    before anything is parsed.

    >>> evaluate("0.1 + 0.2")
    Ok(value=0.3)
    >>> evaluate("1/0").error
    'Division by zero'
    """
    settings = settings or get_settings()
    if precision is None:
        precision = settings.precision
    if expression is None:
        expression = ""
    if not isinstance(expression, str):
        return _syntax_error("Expression must be a string")

    trimmed = expression.strip()
    if not trimmed:
        return Err(ErrorKind.EMPTY, EMPTY_DETAIL)
    if len(trimmed) > settings.max_length:
        return _syntax_error(f"Expression exceeds maximum length of {settings.max_length} characters")

    normalized = normalize_expression(trimmed, registry)
    unknown = find_unknown_identifier(normalized, registry)
    if unknown is not None:
        return Err(ErrorKind.UNKNOWN_IDENTIFIER, f"Unknown identifier: {unknown}")

    try:
        expr = parse_expression(normalized, registry,
                                max_depth=settings.max_depth, digits=settings.working_digits)
        value = to_finite_float(expr, max(0, int(precision)), settings.working_digits)
    except (DivisionByZeroError, ZeroDivisionError):
        return Err(ErrorKind.DIVISION_BY_ZERO, DIVISION_BY_ZERO_DETAIL)
    except NonNumericResultError as exc:
        return Err(ErrorKind.NON_NUMERIC_RESULT, str(exc))
    except UnknownIdentifierError as exc:
        return Err(ErrorKind.UNKNOWN_IDENTIFIER, f"Unknown identifier: {exc}")
    except ExpressionSyntaxError as exc:
        return _syntax_error(str(exc))
    except RecursionError:
        return _syntax_error("Expression is nested too deeply")
    except Exception as exc:
        # anything sympy raises on odd input (e.g. min() of non-comparable values)
        msg = str(exc) or type(exc).__name__
        if "division by zero" in msg.lower():
            return Err(ErrorKind.DIVISION_BY_ZERO, DIVISION_BY_ZERO_DETAIL)
        return _syntax_error(msg)
    return Ok(value)

def evaluate_request(request: EvaluationRequest, settings: Optional[Settings] = None) -> EvaluationResult:
    return evaluate(request.expression, request.precision, settings)
