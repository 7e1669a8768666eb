from __future__ import annotations
import logging
from typing import Optional
from .config import Settings, get_settings
from .core.types import IDLE, EvaluationResult, Ok
from .evaluator import evaluate
from .history import CalculationHistory

logger = logging.getLogger(__name__)

class CalculatorSession:
    """Current text, live result and history, as an input surface holds them."""

    def __init__(self, precision: Optional[int] = None, history: Optional[CalculationHistory] = None,
                 settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.precision = self.settings.precision if precision is None else precision
        self.history = history if history is not None else CalculationHistory(self.settings.history_limit)
        self.expression = ""
        self.result: EvaluationResult = IDLE

    @property
    def has_input(self) -> bool:
        return bool(self.expression.strip())

    def set_expression(self, text: str) -> EvaluationResult:
        """Store the text and re-evaluate it for live feedback."""
        self.expression = text
        self.result = evaluate(text, self.precision, self.settings) if self.has_input else IDLE
        return self.result

    def submit(self) -> EvaluationResult:
        # a failed evaluation leaves expression and result untouched
        result = evaluate(self.expression, self.precision, self.settings)
        if not result.ok:
            logger.debug("Submit rejected: %s", result.error)
            return result
        item = self.history.add(self.expression, result.value)
        logger.debug("Stored %s = %s", item.expression, result.value)
        self.expression = ""
        self.result = IDLE
        return result

    def select_history_item(self, item_id: str) -> bool:
        item = self.history.get(item_id)
        if item is None:
            return False
        self.expression = item.expression
        self.result = Ok(item.result)
        return True

    def delete_history_item(self, item_id: str) -> bool:
        return self.history.delete(item_id)

    def clear_history(self):
        self.history.clear()
