"""Excel export utilities for day records and trends."""
from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Iterable, Mapping

import pandas as pd

from workflow_app.tracker.models import DayRecord, TrendPoint

LOGGER = logging.getLogger(__name__)

LOG_COLUMNS = ["Date", "Hour", "Status", "Label"]
TREND_COLUMNS = ["Date", "Slacking", "Normal", "Focused"]


class StatisticsExporter:
    def __init__(self, export_path: Path):
        self.export_path = Path(export_path)
        self.export_path.parent.mkdir(parents=True, exist_ok=True)

    def export(self, records: Mapping[str, DayRecord], trend: Iterable[TrendPoint]) -> Path:
        """Write the hourly log of every record plus the trend window to a workbook."""
        rows = [
            (date_key, hour, status.value, status.label)
            for date_key in sorted(records)
            for hour, status in sorted(records[date_key].log.items())
        ]
        log_df = pd.DataFrame(rows, columns=LOG_COLUMNS)
        log_df["Date"] = pd.to_datetime(log_df["Date"]).dt.date

        trend_df = pd.DataFrame([asdict(point) for point in trend], columns=["date", "slacking", "normal", "focused"])
        trend_df.columns = TREND_COLUMNS

        with pd.ExcelWriter(self.export_path, engine="openpyxl", mode="w") as writer:
            log_df.to_excel(writer, sheet_name="DailyLog", index=False)
            trend_df.to_excel(writer, sheet_name="Trend", index=False)
            meta_df = pd.DataFrame(
                [[datetime.now(), len(records), len(log_df)]], columns=["ExportedAt", "DayCount", "RowCount"]
            )
            meta_df.to_excel(writer, sheet_name="Meta", index=False)
        LOGGER.info("Exported Excel statistics to %s", self.export_path)
        return self.export_path
