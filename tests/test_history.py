import uuid

import pytest

import tinycalc.history as history_module
from tinycalc.history import (
    COLUMNS,
    CalculationHistory,
    HistoryItem,
    add_history_item,
    delete_history_item,
)

MOCK_UUID = "12345678-1234-1234-1234-123456789012"


@pytest.fixture
def fixed_uuid(monkeypatch):
    monkeypatch.setattr(history_module.uuid, "uuid4", lambda: uuid.UUID(MOCK_UUID))


def _items(count):
    return [HistoryItem(id=f"id-{i}", expression="1+1", result=2, timestamp=123) for i in range(count)]


def test_add_prepends_new_item(fixed_uuid):
    result = add_history_item([], "1 + 1", 2)
    assert len(result) == 1
    item = result[0]
    assert item.expression == "1+1"
    assert item.result == 2
    assert item.id == MOCK_UUID
    assert isinstance(item.timestamp, int)


def test_add_is_newest_first():
    history = add_history_item([], "1", 1)
    history = add_history_item(history, "2", 2)
    assert [item.result for item in history] == [2, 1]


def test_add_limits_history_to_100_items():
    current = _items(100)
    result = add_history_item(current, "new expression", 3)
    assert len(result) == 100
    assert result[0].expression == "newexpression"
    assert all(item.id != "id-99" for item in result)
    assert len(current) == 100


def test_add_normalizes_and_strips_whitespace():
    result = add_history_item([], " SIN( pi / 2 ) ", 1)
    assert result[0].expression == "sin(PI/2)"


def test_add_ignores_empty_expression_or_missing_result():
    current = _items(1)
    assert add_history_item(current, "", 2) is current
    assert add_history_item(current, "1+1", None) is current


def test_delete_removes_by_id():
    current = _items(2)
    result = delete_history_item(current, "id-0")
    assert [item.id for item in result] == ["id-1"]


def test_delete_unknown_id_keeps_items():
    current = _items(1)
    assert delete_history_item(current, "non-existent") == current


def test_calculation_history_add_get_delete_clear():
    history = CalculationHistory()
    first = history.add("1 + 2", 3.0)
    second = history.add("2 * 2", 4.0)
    assert len(history) == 2
    assert [item.id for item in history] == [second.id, first.id]
    assert history.get(first.id) == first
    assert history.get("missing") is None
    assert history.delete(first.id) is True
    assert history.delete(first.id) is False
    history.clear()
    assert len(history) == 0


def test_calculation_history_ignores_empty_expression():
    history = CalculationHistory()
    assert history.add("", 1.0) is None
    assert len(history) == 0


def test_calculation_history_evicts_oldest():
    history = CalculationHistory(limit=2)
    history.add("1", 1.0)
    history.add("2", 2.0)
    history.add("3", 3.0)
    assert [item.expression for item in history.items] == ["3", "2"]


def test_items_is_a_copy():
    history = CalculationHistory()
    history.add("1", 1.0)
    history.items.clear()
    assert len(history) == 1


def test_records_and_frame():
    history = CalculationHistory(items=_items(3))
    records = history.to_records()
    assert records[0] == {"id": "id-0", "expression": "1+1", "result": 2, "timestamp": 123}
    frame = history.to_frame()
    assert list(frame.columns) == COLUMNS
    assert len(frame) == 3
    assert frame["id"].tolist() == ["id-0", "id-1", "id-2"]


def test_empty_frame_keeps_columns():
    frame = CalculationHistory().to_frame()
    assert list(frame.columns) == COLUMNS
    assert frame.empty
