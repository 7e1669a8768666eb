from __future__ import annotations
import logging
import re
import time
import uuid
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterator, List, Optional
import pandas as pd
from .algebra.parsing import normalize_expression

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 100
COLUMNS = ["id", "expression", "result", "timestamp"]

_WHITESPACE_RE = re.compile(r"\s+")

@dataclass(frozen=True)
class HistoryItem:
    id: str
    expression: str
    result: float
    timestamp: int  # ms since epoch

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

def add_history_item(history: List[HistoryItem], expression: str, result: Optional[float],
                     limit: int = DEFAULT_HISTORY_LIMIT) -> List[HistoryItem]:
    """Return a new list with the calculation prepended and the oldest entries dropped.

    The stored expression is normalized and stripped of all whitespace. An
    empty expression or a missing result leaves `history` untouched (the same
    list object is returned).
    """
    if not expression or result is None:
        return history
    item = HistoryItem(
        id=str(uuid.uuid4()),
        expression=_WHITESPACE_RE.sub("", normalize_expression(expression)),
        result=result,
        timestamp=int(time.time() * 1000),
    )
    return [item, *history][:limit]

def delete_history_item(history: List[HistoryItem], item_id: str) -> List[HistoryItem]:
    return [item for item in history if item.id != item_id]

class CalculationHistory:
    """Owns a history list and applies the pure helpers above to it."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT, items: Optional[List[HistoryItem]] = None):
        self.limit = max(1, limit)
        self._items: List[HistoryItem] = list(items or [])[: self.limit]

    def add(self, expression: str, result: Optional[float]) -> Optional[HistoryItem]:
        updated = add_history_item(self._items, expression, result, self.limit)
        if updated is self._items:
            return None
        dropped = len(self._items) + 1 - len(updated)
        self._items = updated
        if dropped:
            logger.debug("History full, evicted %d oldest item(s)", dropped)
        return updated[0]

    def delete(self, item_id: str) -> bool:
        before = len(self._items)
        self._items = delete_history_item(self._items, item_id)
        return len(self._items) != before

    def clear(self):
        logger.debug("Clearing %d history item(s)", len(self._items))
        self._items = []

    def get(self, item_id: str) -> Optional[HistoryItem]:
        return next((item for item in self._items if item.id == item_id), None)

    @property
    def items(self) -> List[HistoryItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[HistoryItem]:
        return iter(list(self._items))

    def to_records(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self._items]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.to_records(), columns=COLUMNS)
