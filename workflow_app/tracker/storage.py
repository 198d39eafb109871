"""JSON-file persistence for day records."""
from __future__ import annotations

import logging
import os
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple, Union

from .migration import StoreFormatError, migrate, parse_store, serialize_store
from .models import AppData, DayRecord

LOGGER = logging.getLogger(__name__)

DateKey = Union[date, datetime, str]
BACKUP_PREFIX = "workflow_backup_"


def date_key(value: DateKey) -> str:
    """Normalize a date, datetime or ISO string to ``yyyy-MM-dd``."""

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return date.fromisoformat(str(value)).isoformat()


class DayRecordStore:
    """All day records, loaded once and rewritten in full on every save."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._records: AppData = self._load()

    def _load(self) -> AppData:
        if not self.path.exists():
            return {}
        try:
            raw = parse_store(self.path.read_text(encoding="utf-8"))
            records = migrate(raw)
        except (OSError, UnicodeDecodeError, StoreFormatError):
            LOGGER.exception("Failed to load %s; starting with an empty store", self.path)
            return {}
        LOGGER.info("Loaded %s day records from %s", len(records), self.path)
        return records

    def _write(self) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp_path.write_text(serialize_store(self._records), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError:
            LOGGER.exception("Failed to write %s", self.path)
            raise

    def __contains__(self, key: DateKey) -> bool:
        return date_key(key) in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._records))

    def items(self) -> Iterator[Tuple[str, DayRecord]]:
        for key in sorted(self._records):
            yield key, self._records[key].copy()

    def get(self, key: DateKey) -> Optional[DayRecord]:
        record = self._records.get(date_key(key))
        return record.copy() if record is not None else None

    def get_or_default(self, key: DateKey) -> DayRecord:
        """Stored record for the date, or a fresh default that is not persisted."""

        return self.get(key) or DayRecord()

    def save(self, key: DateKey, record: DayRecord) -> None:
        normalized = date_key(key)
        self._records[normalized] = record.copy()
        self._write()
        LOGGER.debug("Saved record for %s", normalized)

    def snapshot(self) -> Dict[str, DayRecord]:
        return {key: record.copy() for key, record in self._records.items()}

    def export_backup(self, directory: Path, today: Optional[date] = None) -> Path:
        """Write the full store as pretty-printed JSON named after the export date."""

        stamp = (today or date.today()).strftime("%Y%m%d")
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / f"{BACKUP_PREFIX}{stamp}.json"
        target.write_text(serialize_store(self._records, indent=2), encoding="utf-8")
        LOGGER.info("Exported %s day records to %s", len(self._records), target)
        return target
