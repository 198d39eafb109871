"""Daily review orchestration between day records and the Gemini client."""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from workflow_app.ml import gemini_client
from workflow_app.tracker.models import DayLog

LOGGER = logging.getLogger(__name__)


class DailySummaryService:
    """Produce the prose review of a finished day.

    The review is a side channel: it reads a copy of the log, never writes
    to the store, and always yields text (a fallback message on failure).
    """

    def __init__(self, model_name: Optional[str] = None) -> None:
        self.model_name = model_name or gemini_client.DEFAULT_MODEL

    def summarize(self, date_str: str, log: DayLog) -> str:
        try:
            return gemini_client.generate_daily_analysis(date_str, dict(log), model_name=self.model_name)
        except Exception:  # noqa: BLE001
            LOGGER.exception("Daily summary failed for %s", date_str)
            return gemini_client.UNAVAILABLE_MESSAGE

    def request_summary(self, date_str: str, log: DayLog, on_done: Callable[[str], None]) -> threading.Thread:
        """Run :meth:`summarize` on a daemon thread and pass the text to ``on_done``."""

        snapshot = dict(log)

        def _run() -> None:
            text = self.summarize(date_str, snapshot)
            try:
                on_done(text)
            except Exception:  # pragma: no cover - callback errors stay in the worker
                LOGGER.exception("Summary callback failed for %s", date_str)

        thread = threading.Thread(target=_run, name=f"summary-{date_str}", daemon=True)
        thread.start()
        LOGGER.debug("Requested daily summary for %s", date_str)
        return thread
