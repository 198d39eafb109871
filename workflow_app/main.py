"""Command-line entry point for the WorkFlow tracker."""
from __future__ import annotations

import argparse
import logging
import os
import sys
import tomllib
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from workflow_app.tracker import __version__
from workflow_app.tracker.analytics import focus_level
from workflow_app.tracker.controllers import AppController, ConfigManager, default_config_dir, parse_status
from workflow_app.tracker.models import HOURS_PER_DAY, RANGE_NAMES, TODO_SLOTS, WorkStatus
from workflow_app.tracker.ranges import in_any_range
from workflow_app.tracker.storage import DayRecordStore

LOGGER = logging.getLogger(__name__)

RANGE_TITLES = {"sleep1": "晚间睡眠", "sleep2": "午间休息", "out": "外出/通勤"}


def _load_api_keys(config_dir: Path) -> None:
    """Copy the Gemini key from ``api_keys.toml`` into the environment if present."""

    path = config_dir / "api_keys.toml"
    if not path.exists():
        return
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        logging.exception("Unable to read API key file %s", path)
        return
    gemini_key = data.get("gemini_api_key")
    if gemini_key and not os.getenv("GEMINI_API_KEY"):
        os.environ["GEMINI_API_KEY"] = gemini_key


def configure_logging(config_dir: Path, verbose: bool = False) -> None:
    log_dir = config_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_dir / "app.log", maxBytes=1024 * 1024, backupCount=3, encoding="utf-8")
    stream = logging.StreamHandler()
    stream.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[handler, stream],
    )
    logging.info("WorkFlow tracker v%s starting", __version__)


def build_controller(config_manager: ConfigManager) -> AppController:
    store = DayRecordStore(config_manager.data_path)
    return AppController(store, config_manager)


def _print_day(controller: AppController) -> None:
    record = controller.day_record()
    ranges = record.config.ranges()
    active = controller.active_hours()
    stats = controller.day_stats()
    progress = controller.progress()

    print(f"{controller.date_str}  ({len(active)} active hours)")
    for hour in range(HOURS_PER_DAY):
        status = record.log.get(hour, WorkStatus.EMPTY)
        marker = "  " if in_any_range(hour, ranges) else "* "
        print(f"{marker}{hour:02d}:00  {status.label}")
    print()
    print(
        f"Focus score: {stats.focus_score}% ({focus_level(stats.focus_score)})  "
        f"slacking={stats.slacking} normal={stats.normal} focused={stats.focused}"
    )
    print(f"Recorded: {progress.percent}%  ({progress.hours_to_record}h left)")
    print()
    for name in RANGE_NAMES:
        time_range = record.config.get(name)
        state = "on " if time_range.enabled else "off"
        print(f"[{state}] {RANGE_TITLES[name]:<6} {time_range.start:02d}:00 -> {time_range.end:02d}:00")
    print()
    print(f"Todos {controller.completed_todos()}/{TODO_SLOTS}")
    for index, item in enumerate(record.todos):
        print(f"  {index}. [{'x' if item.completed else ' '}] {item.text}")


def _print_trend(controller: AppController, days: Optional[int]) -> None:
    for point in controller.trend(days):
        print(f"{point.date}  slacking={point.slacking:2d}  normal={point.normal:2d}  focused={point.focused:2d}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="workflow-tracker", description="Hourly work-status tracker")
    parser.add_argument("--date", help="Day to operate on (YYYY-MM-DD); defaults to today")
    parser.add_argument("--home", type=Path, help="Configuration directory")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("show", help="Show the day log, stats, ranges and todos")

    log_cmd = sub.add_parser("log", help="Record the status of an hour")
    log_cmd.add_argument("hour", type=int)
    log_cmd.add_argument("status", help=", ".join(s.value for s in WorkStatus))

    clear_cmd = sub.add_parser("clear", help="Remove the status of an hour")
    clear_cmd.add_argument("hour", type=int)

    todo_cmd = sub.add_parser("todo", help="Edit a todo slot")
    todo_cmd.add_argument("index", type=int)
    todo_cmd.add_argument("--text")
    done = todo_cmd.add_mutually_exclusive_group()
    done.add_argument("--done", dest="completed", action="store_const", const=True)
    done.add_argument("--undone", dest="completed", action="store_const", const=False)

    range_cmd = sub.add_parser("range", help="Edit an inactive time range")
    range_cmd.add_argument("name", choices=RANGE_NAMES)
    range_cmd.add_argument("--start", type=int)
    range_cmd.add_argument("--end", type=int)
    range_cmd.add_argument("--toggle", action="store_true")

    trend_cmd = sub.add_parser("trend", help="Status counts for the days up to --date")
    trend_cmd.add_argument("--days", type=int)

    sub.add_parser("export", help="Write a JSON backup of every day")
    sub.add_parser("export-stats", help="Write an Excel workbook of logs and trend")
    sub.add_parser("charts", help="Render distribution and trend charts to PNG")
    sub.add_parser("summary", help="Ask Gemini for a review of the day")
    return parser


def run(argv: Optional[List[str]] = None, controller: Optional[AppController] = None) -> int:
    args = build_parser().parse_args(argv)
    if controller is None:
        config_dir = args.home or default_config_dir()
        _load_api_keys(config_dir)
        configure_logging(config_dir, args.verbose)
        controller = build_controller(ConfigManager(config_dir))

    command = args.command or "show"
    try:
        if args.date:
            controller.go_to(args.date)
        if command == "log":
            controller.update_status(args.hour, parse_status(args.status))
        elif command == "clear":
            controller.clear_status(args.hour)
        elif command == "todo":
            controller.update_todo(args.index, text=args.text, completed=args.completed)
        elif command == "range":
            if args.start is not None or args.end is not None:
                controller.update_range(args.name, start=args.start, end=args.end)
            if args.toggle:
                controller.toggle_range(args.name)
        elif command == "trend":
            _print_trend(controller, args.days)
            return 0
        elif command == "export":
            print(controller.export_backup())
            return 0
        elif command == "export-stats":
            print(controller.export_statistics())
            return 0
        elif command == "charts":
            print(controller.render_charts())
            return 0
        elif command == "summary":
            print(controller.summarize_day())
            return 0
    except (ValueError, IndexError, KeyError) as exc:
        LOGGER.info("Rejected %s command: %s", command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2
    _print_day(controller)
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
