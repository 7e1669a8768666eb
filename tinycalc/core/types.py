from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

EMPTY_DETAIL = "Expression cannot be empty"
IDLE_DETAIL = "empty"
DEFAULT_PRECISION = 5

class ErrorKind(Enum):
    EMPTY = "empty"
    UNKNOWN_IDENTIFIER = "unknown_identifier"
    DIVISION_BY_ZERO = "division_by_zero"
    SYNTAX_ERROR = "syntax_error"
    NON_NUMERIC_RESULT = "non_numeric_result"

@dataclass(frozen=True)
class EvaluationRequest:
    expression: str
    precision: int = DEFAULT_PRECISION

    def __post_init__(self):
        if self.precision < 0:
            raise ValueError(f"precision must be >= 0, got {self.precision}")

@dataclass(frozen=True)
class Ok:
    value: float

    @property
    def ok(self) -> bool:
        return True

    @property
    def has_input(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": True, "value": self.value}

@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    detail: str

    @property
    def ok(self) -> bool:
        return False

    @property
    def error(self) -> str:
        return self.detail

    @property
    def has_input(self) -> bool:
        """False when nothing has been typed yet, so callers can render a neutral state."""
        return self.kind is not ErrorKind.EMPTY

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": False, "error": self.detail}

EvaluationResult = Union[Ok, Err]

# "nothing entered yet", distinct from the EMPTY error returned by evaluate()
IDLE = Err(ErrorKind.EMPTY, IDLE_DETAIL)
