import pandas as pd

from reports.charts import render_day_charts
from reports.excel_export import StatisticsExporter
from workflow_app.tracker.analytics import compute_day_stats, compute_trend
from workflow_app.tracker.models import DayRecord, WorkStatus


def _records():
    return {
        "2024-03-14": DayRecord().with_status(9, WorkStatus.NORMAL),
        "2024-03-15": DayRecord().with_status(9, WorkStatus.FOCUSED).with_status(10, WorkStatus.SLACKING),
    }


def test_excel_export_sheets(tmp_path):
    records = _records()
    path = StatisticsExporter(tmp_path / "stats.xlsx").export(records, compute_trend(records, "2024-03-15"))

    log_df = pd.read_excel(path, sheet_name="DailyLog")
    trend_df = pd.read_excel(path, sheet_name="Trend")
    assert list(log_df.columns) == ["Date", "Hour", "Status", "Label"]
    assert len(log_df) == 3
    assert len(trend_df) == 7
    assert trend_df.iloc[-1]["Focused"] == 1


def test_render_charts_writes_png(tmp_path):
    records = _records()
    stats = compute_day_stats(records["2024-03-15"].log)
    path = render_day_charts(stats, compute_trend(records, "2024-03-15"), tmp_path / "out" / "day.png", title="2024-03-15")
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_render_charts_handles_empty_day(tmp_path):
    path = render_day_charts(compute_day_stats({}), compute_trend({}, "2024-03-15"), tmp_path / "empty.png")
    assert path.exists()
