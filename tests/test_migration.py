import pytest

from workflow_app.tracker.migration import (
    FlatLogShape,
    NestedLogShape,
    StoreFormatError,
    migrate,
    parse_store,
    resolve_log,
    serialize_store,
)
from workflow_app.tracker.models import DayConfig, DayRecord, TimeRange, TodoList, WorkStatus

LEGACY_STORE = {
    "2024-01-01": {"log": {"9": "NORMAL"}},
    "2024-01-02": {
        "log": {"9": "NORMAL"},
        "config": {
            "sleep": {"start": 0, "end": 7, "enabled": True},
            "out": {"start": 17, "end": 18, "enabled": False},
        },
    },
    "2024-01-03": {
        "log": {"10": "FOCUSED"},
        "todos": [{"id": 0, "text": "Ship it", "completed": True}],
        "config": {
            "sleep1": {"start": 22, "end": 6, "enabled": True},
            "sleep2": {"start": 13, "end": 14, "enabled": True},
            "out": {"start": 18, "end": 19, "enabled": True},
        },
    },
}


def test_missing_config_gets_defaults():
    record = migrate(LEGACY_STORE)["2024-01-01"]
    assert record.config == DayConfig()
    assert record.todos == TodoList()
    assert record.log == {9: WorkStatus.NORMAL}


def test_single_sleep_range_becomes_sleep1():
    record = migrate(LEGACY_STORE)["2024-01-02"]
    assert record.config.sleep1 == TimeRange(0, 7, True)
    assert record.config.sleep2 == TimeRange(13, 14, False)
    assert record.config.out == TimeRange(17, 18, False)


def test_single_sleep_range_without_out_uses_default_out():
    record = migrate({"2024-01-04": {"config": {"sleep": {"start": 23, "end": 8, "enabled": True}}}})["2024-01-04"]
    assert record.config.sleep1 == TimeRange(23, 8, True)
    assert record.config.out == TimeRange(18, 19, True)


def test_current_config_passes_through():
    record = migrate(LEGACY_STORE)["2024-01-03"]
    assert record.config.sleep1 == TimeRange(22, 6, True)
    assert record.config.sleep2 == TimeRange(13, 14, True)
    assert record.todos[0].text == "Ship it"
    assert record.todos[4].text == ""


def test_migrate_is_idempotent():
    once = migrate(LEGACY_STORE)
    assert migrate(once) == once


def test_serialized_store_round_trips():
    once = migrate(LEGACY_STORE)
    assert migrate(parse_store(serialize_store(once))) == once


def test_invalid_log_entries_are_dropped():
    record = migrate({"2024-01-05": {"log": {"9": "NORMAL", "30": "FOCUSED", "10": "NAPPING"}}})["2024-01-05"]
    assert record.log == {9: WorkStatus.NORMAL}


def test_invalid_range_falls_back_to_default():
    raw = {"2024-01-06": {"config": {"sleep1": {"start": 40, "end": 8, "enabled": True}}}}
    record = migrate(raw)["2024-01-06"]
    assert record.config.sleep1 == TimeRange(23, 8, True)


def test_non_mapping_record_becomes_default():
    assert migrate({"2024-01-07": "garbage"})["2024-01-07"] == DayRecord()


def test_flat_log_record_keeps_its_hours():
    record = migrate({"2024-01-08": {"9": "FOCUSED", "10": "SLACKING"}})["2024-01-08"]
    assert record.log == {9: WorkStatus.FOCUSED, 10: WorkStatus.SLACKING}
    assert record.config == DayConfig()


def test_resolve_log_shapes():
    nested = resolve_log({"log": {"8": "NORMAL"}, "todos": []})
    flat = resolve_log({"8": "NORMAL"})
    assert isinstance(nested, NestedLogShape)
    assert isinstance(flat, FlatLogShape)
    assert nested.log == flat.log == {8: WorkStatus.NORMAL}
    assert resolve_log(DayRecord().with_status(3, "SLACKING")).log == {3: WorkStatus.SLACKING}


@pytest.mark.parametrize("payload", ["{not json", "[1, 2]", '"text"'])
def test_parse_store_rejects_unstructured_payloads(payload):
    with pytest.raises(StoreFormatError):
        parse_store(payload)


def test_parse_store_blank_is_empty():
    assert parse_store("  ") == {}


def test_migrate_rejects_non_mapping_store():
    with pytest.raises(StoreFormatError):
        migrate(["2024-01-01"])
