"""Gemini-backed daily review text.

The client is configured from the ``GEMINI_API_KEY`` environment variable.
Every failure is turned into a fixed user-facing message so callers never
see an exception.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Optional

import google.generativeai as genai

from workflow_app.ml import DEFAULT_MODEL
from workflow_app.tracker.models import DayLog, WorkStatus

LOGGER = logging.getLogger(__name__)

NO_DATA_MESSAGE = "今天还没有任何记录，无法进行分析。请先记录一些工作状态！"
UNAVAILABLE_MESSAGE = "AI 分析服务暂时不可用，请检查网络或 API Key 设置。"
EMPTY_RESPONSE_MESSAGE = "无法生成分析，请稍后再试。"

PROMPT_TEMPLATE = """你是一个幽默、犀利但富有同理心的工作效率助手。
这是用户在 {date} 的工作状态记录（按小时）：

{log_summary}
请根据这些数据生成一份简短的日报点评（150字以内）。

要求：
1. 风格可以是稍微带点调侃（如果摸鱼多）或者鼓励（如果认真多）。
2. 指出用户今天的时间分配特点。
3. 给出一条简短的改进建议。
4. 不要使用 Markdown 格式，只返回纯文本。
"""


class SummaryUnavailable(RuntimeError):
    """Raised internally when no Gemini model can be configured."""


def _client(model_name: str = DEFAULT_MODEL) -> Any:
    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        raise SummaryUnavailable("GEMINI_API_KEY is not set")
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(model_name)


def build_log_summary(log: DayLog) -> str:
    """One line per recorded hour, in hour order. Empty when nothing is recorded."""

    lines = [
        f"- {hour}:00 to {hour + 1}:00 : {log[hour].label}"
        for hour in sorted(log)
        if log[hour] is not WorkStatus.EMPTY
    ]
    return "".join(line + "\n" for line in lines)


def generate_daily_analysis(date_str: str, log: DayLog, model_name: Optional[str] = None) -> str:
    log_summary = build_log_summary(log)
    if not log_summary:
        return NO_DATA_MESSAGE
    prompt = PROMPT_TEMPLATE.format(date=date_str, log_summary=log_summary)
    try:
        model = _client(model_name or DEFAULT_MODEL)
        result = model.generate_content(prompt)
        text = result.text if result else None
    except SummaryUnavailable as exc:
        LOGGER.warning("Gemini summary unavailable: %s", exc)
        return UNAVAILABLE_MESSAGE
    except Exception:  # noqa: BLE001
        LOGGER.exception("Gemini daily analysis failed")
        return UNAVAILABLE_MESSAGE
    return text.strip() if text and text.strip() else EMPTY_RESPONSE_MESSAGE
