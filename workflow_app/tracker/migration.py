"""Upgrade persisted day records to the current shape.

Two legacy shapes exist in stores written by earlier releases:

* records without a ``config`` section (before per-day ranges existed);
* configs with a single ``sleep`` range instead of ``sleep1``/``sleep2``.

Some very old records also kept the hourly log at the top level instead of
under ``log``. :func:`resolve_log` is the single place that tells the two
log shapes apart; both the migrator and the trend computation go through it.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Union

from .models import (
    DEFAULT_OUT,
    DEFAULT_SLEEP2,
    RANGE_NAMES,
    AppData,
    DayConfig,
    DayLog,
    DayRecord,
    TimeRange,
    TodoList,
    WorkStatus,
    validate_hour,
)

LOGGER = logging.getLogger(__name__)

RECORD_FIELDS = frozenset({"log", "todos", "config"})


class StoreFormatError(ValueError):
    """The persisted payload is not a JSON object keyed by date."""


@dataclass(frozen=True)
class NestedLogShape:
    """Record with its hourly log under a ``log`` field."""

    log: DayLog


@dataclass(frozen=True)
class FlatLogShape:
    """Record that is itself the hourly log."""

    log: DayLog


LogShape = Union[NestedLogShape, FlatLogShape]


def normalize_log(raw: Any, context: str = "") -> DayLog:
    """Coerce hour keys to int and values to :class:`WorkStatus`.

    Entries with an invalid hour or an unknown status are dropped.
    """

    if not isinstance(raw, Mapping):
        if raw not in (None, ""):
            LOGGER.warning("Ignoring non-mapping log %s%r", context, raw)
        return {}
    log: DayLog = {}
    for key, value in raw.items():
        try:
            hour = validate_hour(key)
        except ValueError:
            LOGGER.warning("Dropping log entry %s%r: invalid hour", context, key)
            continue
        status = WorkStatus.parse(value)
        if status is None:
            LOGGER.warning("Dropping log entry %s%r: unknown status %r", context, key, value)
            continue
        log[hour] = status
    return log


def resolve_log(raw: Any, context: str = "") -> LogShape:
    if isinstance(raw, DayRecord):
        return NestedLogShape(dict(raw.log))
    if not isinstance(raw, Mapping):
        return NestedLogShape({})
    if "log" in raw:
        return NestedLogShape(normalize_log(raw["log"], context))
    flat = {key: value for key, value in raw.items() if key not in RECORD_FIELDS}
    return FlatLogShape(normalize_log(flat, context))


def _range_or_default(data: Mapping[str, Any], name: str, fallback: TimeRange, context: str) -> TimeRange:
    try:
        return TimeRange.from_dict(data.get(name), fallback)
    except (TypeError, ValueError):
        LOGGER.warning("Invalid %s range %s%r; using default", name, context, data.get(name))
        return fallback


def migrate_config(raw: Any, context: str = "") -> DayConfig:
    if not raw or not isinstance(raw, Mapping):
        return DayConfig()
    if "sleep" in raw and "sleep1" not in raw:
        LOGGER.debug("Migrating single sleep range %s", context)
        raw = {
            "sleep1": raw["sleep"],
            "sleep2": DEFAULT_SLEEP2.to_dict(),
            "out": raw.get("out") or DEFAULT_OUT.to_dict(),
        }
    defaults = DayConfig()
    return DayConfig(
        **{name: _range_or_default(raw, name, defaults.get(name), context) for name in RANGE_NAMES}
    )


def migrate_record(item: Any, context: str = "") -> DayRecord:
    """Return a complete :class:`DayRecord` for one stored value."""

    if isinstance(item, DayRecord):
        return item.copy()
    if not isinstance(item, Mapping):
        LOGGER.warning("Replacing malformed record %s%r with defaults", context, item)
        return DayRecord()
    todos = item.get("todos")
    return DayRecord(
        log=resolve_log(item, context).log,
        todos=TodoList.from_list(todos) if todos else TodoList(),
        config=migrate_config(item.get("config"), context),
    )


def migrate(raw_store: Mapping[str, Any]) -> AppData:
    """Upgrade every record in a raw store. Running it twice changes nothing."""

    if not isinstance(raw_store, Mapping):
        raise StoreFormatError(f"Store must be an object keyed by date, got {type(raw_store).__name__}")
    return {
        str(date_key): migrate_record(item, f"for {date_key} ")
        for date_key, item in raw_store.items()
    }


def parse_store(text: str) -> Dict[str, Any]:
    """Parse the persisted JSON payload without migrating it."""

    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise StoreFormatError(f"Store is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise StoreFormatError(f"Store must be a JSON object, got {type(data).__name__}")
    return data


def serialize_store(data: Mapping[str, DayRecord], indent: int | None = None) -> str:
    payload = {date_key: data[date_key].to_dict() for date_key in sorted(data)}
    return json.dumps(payload, ensure_ascii=False, indent=indent)
