import json

import pytest

from henhouse.exceptions import PersistenceError
from henhouse.storage import SCHEMA_VERSION, STATUS_CORRUPT, STATUS_EMPTY, STATUS_OK


def test_missing_slot_loads_as_empty(storage):
    result = storage.load_result("incomes")
    assert result.status == STATUS_EMPTY
    assert storage.load("incomes") == []


def test_save_then_load_round_trips(storage):
    records = [{"id": "a", "amount": "1.50"}, {"id": "b", "amount": "2.00"}]
    storage.save("expenses", records)

    result = storage.load_result("expenses")
    assert result.status == STATUS_OK
    assert result.records == records
    assert not storage.path_for("expenses").with_suffix(".json.tmp").exists()


def test_saved_document_is_versioned(storage):
    storage.save("reminders", [])
    payload = json.loads(storage.path_for("reminders").read_text(encoding="utf-8"))
    assert payload == {"version": SCHEMA_VERSION, "records": []}


def test_corrupted_json_degrades_to_empty(storage):
    storage.path_for("incomes").write_text("{not json", encoding="utf-8")

    result = storage.load_result("incomes")
    assert result.status == STATUS_CORRUPT
    assert result.is_corrupt
    assert "Corrupted JSON" in result.reason
    assert storage.load("incomes") == []


@pytest.mark.parametrize(
    "payload",
    [
        [{"id": "a"}],
        {"version": SCHEMA_VERSION + 1, "records": [{"id": "a"}]},
        {"version": SCHEMA_VERSION, "records": "nope"},
        {"version": SCHEMA_VERSION, "records": [1, 2]},
    ],
)
def test_unexpected_documents_degrade_to_empty(storage, payload):
    storage.path_for("expenses").write_text(json.dumps(payload), encoding="utf-8")
    result = storage.load_result("expenses")
    assert result.is_corrupt
    assert result.records == []


def test_unwritable_slot_raises_persistence_error(storage):
    storage.path_for("incomes").mkdir()
    with pytest.raises(PersistenceError):
        storage.save("incomes", [])


def test_deeply_nested_json_degrades_to_empty(storage):
    storage.path_for("incomes").write_text("[" * 200000 + "]" * 200000, encoding="utf-8")

    result = storage.load_result("incomes")
    assert result.is_corrupt
    assert storage.load("incomes") == []
