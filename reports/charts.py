"""Chart rendering for the day distribution and the weekly trend."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from workflow_app.tracker.models import DayStats, TrendPoint, WorkStatus  # noqa: E402

LOGGER = logging.getLogger(__name__)

STATUS_COLORS = {
    WorkStatus.SLACKING: "#10b981",
    WorkStatus.NORMAL: "#3b82f6",
    WorkStatus.FOCUSED: "#e11d48",
}


def render_day_charts(stats: DayStats, trend: Sequence[TrendPoint], path: Path, title: str = "") -> Path:
    """Save a PNG with today's distribution pie next to the trend bars."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig, (pie_ax, bar_ax) = plt.subplots(1, 2, figsize=(9, 3.5))

    slices = [
        (status, value)
        for status, value in (
            (WorkStatus.SLACKING, stats.slacking),
            (WorkStatus.NORMAL, stats.normal),
            (WorkStatus.FOCUSED, stats.focused),
        )
        if value > 0
    ]
    if slices:
        pie_ax.pie(
            [value for _status, value in slices],
            labels=[status.value.title() for status, _value in slices],
            colors=[STATUS_COLORS[status] for status, _value in slices],
            wedgeprops={"width": 0.45},
        )
    else:
        pie_ax.text(0.5, 0.5, "No data", ha="center", va="center")
        pie_ax.axis("off")
    pie_ax.set_title(f"Focus {stats.focus_score}%")

    labels = [point.date[5:].replace("-", "/") for point in trend]
    bottom = [0] * len(trend)
    for status, attr in ((WorkStatus.SLACKING, "slacking"), (WorkStatus.NORMAL, "normal"), (WorkStatus.FOCUSED, "focused")):
        values = [getattr(point, attr) for point in trend]
        bar_ax.bar(labels, values, bottom=bottom, color=STATUS_COLORS[status], label=status.value.title())
        bottom = [b + v for b, v in zip(bottom, values)]
    bar_ax.set_ylabel("Hours")
    bar_ax.legend(fontsize="small")

    if title:
        fig.suptitle(title)
    fig.tight_layout()
    fig.savefig(path, format="png")
    plt.close(fig)
    LOGGER.info("Rendered charts to %s", path)
    return path
