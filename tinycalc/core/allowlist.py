from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Optional
import sympy as sp
from ..algebra.numeric import power, round_expr

ALLOWED_FUNCTIONS = (
    "sin", "cos", "tan", "asin", "acos", "atan",
    "sinh", "cosh", "tanh",
    "log", "log10", "log2", "ln",
    "sqrt", "abs", "ceil", "floor", "round", "trunc", "sign",
    "min", "max", "pow", "exp",
)

ALLOWED_CONSTANTS = (
    "PI", "E", "LN2", "LN10", "LOG2E", "LOG10E", "SQRT1_2", "SQRT2",
)

@dataclass(frozen=True)
class FunctionSpec:
    name: str
    impl: Callable[..., sp.Expr]
    min_args: int = 1
    max_args: Optional[int] = 1   # None: variadic
    takes_digits: bool = False    # impl accepts digits= (working precision)

def _log(x, base=None):
    return sp.log(x) if base is None else sp.log(x, base)

def _trunc(x):
    return sp.sign(x) * sp.floor(sp.Abs(x))

_FUNCS = [
    FunctionSpec("sin", sp.sin), FunctionSpec("cos", sp.cos), FunctionSpec("tan", sp.tan),
    FunctionSpec("asin", sp.asin), FunctionSpec("acos", sp.acos), FunctionSpec("atan", sp.atan),
    FunctionSpec("sinh", sp.sinh), FunctionSpec("cosh", sp.cosh), FunctionSpec("tanh", sp.tanh),
    FunctionSpec("log", _log, 1, 2),
    FunctionSpec("log10", lambda x: sp.log(x, 10)),
    FunctionSpec("log2", lambda x: sp.log(x, 2)),
    FunctionSpec("ln", sp.log),
    FunctionSpec("sqrt", sp.sqrt), FunctionSpec("abs", sp.Abs),
    FunctionSpec("ceil", sp.ceiling), FunctionSpec("floor", sp.floor),
    FunctionSpec("round", round_expr, 1, 2, takes_digits=True),
    FunctionSpec("trunc", _trunc), FunctionSpec("sign", sp.sign),
    FunctionSpec("min", sp.Min, 1, None), FunctionSpec("max", sp.Max, 1, None),
    FunctionSpec("pow", power, 2, 2, takes_digits=True),
    FunctionSpec("exp", sp.exp),
]

FUNCTION_TABLE: Dict[str, FunctionSpec] = {f.name: f for f in _FUNCS}

CONSTANT_TABLE: Dict[str, sp.Expr] = {
    "PI": sp.pi,
    "E": sp.E,
    "LN2": sp.log(2),
    "LN10": sp.log(10),
    "LOG2E": 1 / sp.log(2),
    "LOG10E": 1 / sp.log(10),
    "SQRT1_2": sp.sqrt(2) / 2,
    "SQRT2": sp.sqrt(2),
}

@dataclass(frozen=True)
class AllowlistRegistry:
    """Read-only sets of permitted names: functions lowercase, constants uppercase."""
    functions: FrozenSet[str]
    constants: FrozenSet[str]

    @classmethod
    def build(cls, functions=ALLOWED_FUNCTIONS, constants=ALLOWED_CONSTANTS) -> "AllowlistRegistry":
        return cls(functions=frozenset(f.lower() for f in functions),
                   constants=frozenset(c.upper() for c in constants))

    def is_function(self, name: str) -> bool:
        return name in self.functions

    def is_constant(self, name: str) -> bool:
        return name in self.constants

    def is_allowed(self, name: str) -> bool:
        return name in self.functions or name in self.constants

    def canonical(self, token: str) -> Optional[str]:
        """Canonical spelling of `token`, or None if it is on neither list."""
        lower = token.lower()
        if lower in self.functions:
            return lower
        upper = token.upper()
        if upper in self.constants:
            return upper
        return None

REGISTRY = AllowlistRegistry.build()
