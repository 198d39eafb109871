"""Controllers tying the day-record store, analytics, config and exports together."""
from __future__ import annotations

import json
import logging
import os
import threading
import tomllib
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Callable, List, Optional

from workflow_app.ml import DEFAULT_MODEL

from .analytics import DEFAULT_TREND_DAYS, compute_day_stats, compute_trend, recording_progress
from .models import DayRecord, DayStats, RecordingProgress, TimeRange, TrendPoint, WorkStatus
from .ranges import active_hours
from .storage import DayRecordStore, date_key

if TYPE_CHECKING:
    from reports.excel_export import StatisticsExporter
    from workflow_app.core.ai_service import DailySummaryService

LOGGER = logging.getLogger(__name__)

HOME_ENV = "WORKFLOW_TRACKER_HOME"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "default_config.toml"


def default_config_dir() -> Path:
    override = os.getenv(HOME_ENV)
    return Path(override) if override else Path.home() / ".workflow_tracker"


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


@dataclass
class AppConfig:
    data_path: str = ""
    export_dir: str = ""
    trend_window_days: int = DEFAULT_TREND_DAYS
    gemini_model: str = DEFAULT_MODEL

    @classmethod
    def from_toml(cls, data: dict) -> "AppConfig":
        try:
            window = max(1, int(data.get("trend_window_days", DEFAULT_TREND_DAYS)))
        except (TypeError, ValueError):
            window = DEFAULT_TREND_DAYS
        return cls(
            data_path=str(data.get("data_path", "") or ""),
            export_dir=str(data.get("export_dir", "") or ""),
            trend_window_days=window,
            gemini_model=str(data.get("gemini_model") or DEFAULT_MODEL),
        )

    def to_toml(self) -> str:
        lines = [
            f"data_path = {_quote(self.data_path)}",
            f"export_dir = {_quote(self.export_dir)}",
            f"trend_window_days = {self.trend_window_days}",
            f"gemini_model = {_quote(self.gemini_model)}",
        ]
        return "\n".join(lines) + "\n"


class ConfigManager:
    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self.config_dir = Path(config_dir) if config_dir else default_config_dir()
        self.config_file = self.config_dir / "config.toml"
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config = self._load()

    def _load(self) -> AppConfig:
        if self.config_file.exists():
            try:
                with open(self.config_file, "rb") as fh:
                    return AppConfig.from_toml(tomllib.load(fh))
            except tomllib.TOMLDecodeError:
                LOGGER.exception("Invalid configuration in %s; using defaults", self.config_file)
        with open(DEFAULT_CONFIG_PATH, "rb") as fh:
            config = AppConfig.from_toml(tomllib.load(fh))
        self.save(config)
        return config

    def save(self, config: Optional[AppConfig] = None) -> None:
        cfg = config or self.config
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(cfg.to_toml(), encoding="utf-8")
        LOGGER.info("Saved configuration to %s", self.config_file)

    @property
    def data_path(self) -> Path:
        return Path(self.config.data_path) if self.config.data_path else self.config_dir / "data.json"

    @property
    def export_dir(self) -> Path:
        return Path(self.config.export_dir) if self.config.export_dir else self.config_dir / "exports"


class AppController:
    """Single writer for the store; every mutation targets ``current_date``."""

    def __init__(
        self,
        store: DayRecordStore,
        config_manager: ConfigManager,
        summary_service: Optional[DailySummaryService] = None,
        exporter: Optional[StatisticsExporter] = None,
        today: Optional[date] = None,
    ) -> None:
        self.store = store
        self.config_manager = config_manager
        self.summary_service = summary_service
        self.exporter = exporter
        self.today = today or date.today()
        self.current_date = self.today

    # Navigation
    @property
    def date_str(self) -> str:
        return self.current_date.isoformat()

    def go_to(self, target) -> date:
        self.current_date = date.fromisoformat(date_key(target))
        return self.current_date

    def previous_day(self) -> date:
        return self.go_to(self.current_date - timedelta(days=1))

    def next_day(self) -> date:
        return self.go_to(self.current_date + timedelta(days=1))

    def go_to_today(self) -> date:
        return self.go_to(self.today)

    # Day record mutations
    def day_record(self) -> DayRecord:
        return self.store.get_or_default(self.current_date)

    def _save(self, record: DayRecord) -> DayRecord:
        self.store.save(self.current_date, record)
        return record

    def update_status(self, hour: int, status) -> DayRecord:
        return self._save(self.day_record().with_status(hour, status))

    def clear_status(self, hour: int) -> DayRecord:
        return self._save(self.day_record().without_status(hour))

    def update_todo(self, index: int, text: Optional[str] = None, completed: Optional[bool] = None) -> DayRecord:
        return self._save(self.day_record().with_todo(index, text=text, completed=completed))

    def update_range(self, name: str, start: Optional[int] = None, end: Optional[int] = None) -> DayRecord:
        record = self.day_record()
        current = record.config.get(name)
        updated = TimeRange(
            start=current.start if start is None else start,
            end=current.end if end is None else end,
            enabled=current.enabled,
        )
        return self._save(record.with_config(record.config.with_range(name, updated)))

    def toggle_range(self, name: str) -> DayRecord:
        record = self.day_record()
        current = record.config.get(name)
        updated = TimeRange(current.start, current.end, not current.enabled)
        return self._save(record.with_config(record.config.with_range(name, updated)))

    # Derived values
    def active_hours(self) -> List[int]:
        return active_hours(self.day_record().config)

    def day_stats(self) -> DayStats:
        return compute_day_stats(self.day_record().log)

    def progress(self) -> RecordingProgress:
        return recording_progress(self.day_stats().total_recorded, len(self.active_hours()))

    def trend(self, window_days: Optional[int] = None) -> List[TrendPoint]:
        days = self.config_manager.config.trend_window_days if window_days is None else window_days
        return compute_trend(self.store.snapshot(), self.current_date, days)

    def completed_todos(self) -> int:
        return self.day_record().todos.completed_count

    # Exports
    def export_backup(self, directory: Optional[Path] = None) -> Path:
        return self.store.export_backup(directory or self.config_manager.export_dir, today=self.today)

    def export_statistics(self) -> Path:
        exporter = self.exporter
        if exporter is None:
            from reports.excel_export import StatisticsExporter

            stamp = self.today.strftime("%Y%m%d")
            exporter = StatisticsExporter(self.config_manager.export_dir / f"workflow_stats_{stamp}.xlsx")
        return exporter.export(self.store.snapshot(), self.trend())

    def render_charts(self, path: Optional[Path] = None) -> Path:
        from reports.charts import render_day_charts

        target = path or self.config_manager.export_dir / f"workflow_{self.date_str}.png"
        return render_day_charts(self.day_stats(), self.trend(), target, title=self.date_str)

    # Daily review
    def _summary_service(self) -> DailySummaryService:
        if self.summary_service is None:
            from workflow_app.core.ai_service import DailySummaryService

            self.summary_service = DailySummaryService(self.config_manager.config.gemini_model)
        return self.summary_service

    def summarize_day(self) -> str:
        return self._summary_service().summarize(self.date_str, self.day_record().log)

    def request_summary(self, on_done: Callable[[str], None]) -> threading.Thread:
        return self._summary_service().request_summary(self.date_str, self.day_record().log, on_done)


def parse_status(value: str) -> WorkStatus:
    status = WorkStatus.parse(value)
    if status is None:
        choices = ", ".join(s.value for s in WorkStatus)
        raise ValueError(f"Unknown status {value!r}; expected one of {choices}")
    return status
