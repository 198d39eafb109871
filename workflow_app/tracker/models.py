"""Data models for the WorkFlow tracker."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

HOURS_PER_DAY = 24
TODO_SLOTS = 5
RANGE_NAMES: Tuple[str, ...] = ("sleep1", "sleep2", "out")


class WorkStatus(str, Enum):
    """How the user spent one hour of the day."""

    SLACKING = "SLACKING"
    NORMAL = "NORMAL"
    FOCUSED = "FOCUSED"
    EMPTY = "EMPTY"

    @property
    def score(self) -> Optional[int]:
        """Work intensity score, ``None`` for the unscored EMPTY status."""
        return STATUS_SCORES.get(self)

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

    @property
    def is_recorded(self) -> bool:
        return self is not WorkStatus.EMPTY

    @classmethod
    def parse(cls, value: Any) -> Optional["WorkStatus"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return None


STATUS_SCORES: Dict[WorkStatus, int] = {
    WorkStatus.SLACKING: 0,
    WorkStatus.NORMAL: 1,
    WorkStatus.FOCUSED: 2,
}
MAX_STATUS_SCORE = max(STATUS_SCORES.values())

STATUS_LABELS: Dict[WorkStatus, str] = {
    WorkStatus.EMPTY: "未记录",
    WorkStatus.SLACKING: "摸鱼",
    WorkStatus.NORMAL: "工作",
    WorkStatus.FOCUSED: "努力",
}

DayLog = Dict[int, WorkStatus]


def validate_hour(hour: Any) -> int:
    """Return ``hour`` as an int, raising ``ValueError`` outside 0..23."""

    if isinstance(hour, bool):
        raise ValueError(f"Hour must be an integer, got {hour!r}")
    try:
        value = int(hour)
    except (TypeError, ValueError):
        raise ValueError(f"Hour must be an integer, got {hour!r}") from None
    if value != hour and not isinstance(hour, str):
        raise ValueError(f"Hour must be an integer, got {hour!r}")
    if not 0 <= value < HOURS_PER_DAY:
        raise ValueError(f"Hour {value} outside 0..{HOURS_PER_DAY - 1}")
    return value


@dataclass(frozen=True)
class TimeRange:
    """Half-open hour interval ``[start, end)`` that may wrap past midnight."""

    start: int
    end: int
    enabled: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", validate_hour(self.start))
        object.__setattr__(self, "end", validate_hour(self.end))
        object.__setattr__(self, "enabled", bool(self.enabled))

    @property
    def wraps(self) -> bool:
        return self.start > self.end

    @classmethod
    def from_dict(cls, data: Any, fallback: "TimeRange") -> "TimeRange":
        if not isinstance(data, dict):
            return fallback
        return cls(
            start=data.get("start", fallback.start),
            end=data.get("end", fallback.end),
            enabled=data.get("enabled", fallback.enabled),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start, "end": self.end, "enabled": self.enabled}


DEFAULT_SLEEP1 = TimeRange(23, 8, True)
DEFAULT_SLEEP2 = TimeRange(13, 14, False)
DEFAULT_OUT = TimeRange(18, 19, True)


@dataclass(frozen=True)
class DayConfig:
    """The three inactive ranges of a day: night sleep, nap and time out."""

    sleep1: TimeRange = DEFAULT_SLEEP1
    sleep2: TimeRange = DEFAULT_SLEEP2
    out: TimeRange = DEFAULT_OUT

    def ranges(self) -> Tuple[TimeRange, ...]:
        return tuple(getattr(self, name) for name in RANGE_NAMES)

    def get(self, name: str) -> TimeRange:
        if name not in RANGE_NAMES:
            raise KeyError(f"Unknown range {name!r}; expected one of {', '.join(RANGE_NAMES)}")
        return getattr(self, name)

    def with_range(self, name: str, time_range: TimeRange) -> "DayConfig":
        self.get(name)
        return replace(self, **{name: time_range})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DayConfig":
        defaults = cls()
        return cls(**{name: TimeRange.from_dict(data.get(name), defaults.get(name)) for name in RANGE_NAMES})

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {name: self.get(name).to_dict() for name in RANGE_NAMES}


@dataclass(frozen=True)
class TodoItem:
    id: int
    text: str = ""
    completed: bool = False

    @classmethod
    def from_dict(cls, data: Any, index: int) -> "TodoItem":
        if not isinstance(data, dict):
            return cls(id=index)
        return cls(
            id=index,
            text=str(data.get("text") or ""),
            completed=bool(data.get("completed", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text, "completed": self.completed}


@dataclass(frozen=True)
class TodoList:
    """Exactly five todo slots, addressed by index 0..4."""

    items: Tuple[TodoItem, ...] = field(
        default_factory=lambda: tuple(TodoItem(id=i) for i in range(TODO_SLOTS))
    )

    def __post_init__(self) -> None:
        if len(self.items) != TODO_SLOTS:
            raise ValueError(f"A todo list holds exactly {TODO_SLOTS} items, got {len(self.items)}")

    @staticmethod
    def _check_index(index: int) -> int:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < TODO_SLOTS:
            raise IndexError(f"Todo index {index!r} outside 0..{TODO_SLOTS - 1}")
        return index

    def __getitem__(self, index: int) -> TodoItem:
        return self.items[self._check_index(index)]

    def __iter__(self) -> Iterator[TodoItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return TODO_SLOTS

    def with_item(self, index: int, text: Optional[str] = None, completed: Optional[bool] = None) -> "TodoList":
        current = self[index]
        updated = replace(
            current,
            text=current.text if text is None else text,
            completed=current.completed if completed is None else bool(completed),
        )
        items = list(self.items)
        items[index] = updated
        return TodoList(tuple(items))

    @property
    def completed_count(self) -> int:
        return sum(1 for item in self.items if item.completed)

    @classmethod
    def from_list(cls, data: Any) -> "TodoList":
        """Build from persisted items, synthesizing missing slots and dropping extras."""

        raw = list(data) if isinstance(data, (list, tuple)) else []
        return cls(
            tuple(
                TodoItem.from_dict(raw[i] if i < len(raw) else None, i)
                for i in range(TODO_SLOTS)
            )
        )

    def to_list(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self.items]


@dataclass
class DayRecord:
    """Everything stored for one calendar date."""

    log: DayLog = field(default_factory=dict)
    todos: TodoList = field(default_factory=TodoList)
    config: DayConfig = field(default_factory=DayConfig)

    def copy(self) -> "DayRecord":
        return DayRecord(log=dict(self.log), todos=self.todos, config=self.config)

    def with_status(self, hour: int, status: WorkStatus) -> "DayRecord":
        hour = validate_hour(hour)
        parsed = WorkStatus.parse(status)
        if parsed is None:
            raise ValueError(f"Unknown work status {status!r}")
        record = self.copy()
        record.log[hour] = parsed
        return record

    def without_status(self, hour: int) -> "DayRecord":
        hour = validate_hour(hour)
        record = self.copy()
        record.log.pop(hour, None)
        return record

    def with_todo(self, index: int, text: Optional[str] = None, completed: Optional[bool] = None) -> "DayRecord":
        record = self.copy()
        record.todos = self.todos.with_item(index, text=text, completed=completed)
        return record

    def with_config(self, config: DayConfig) -> "DayRecord":
        record = self.copy()
        record.config = config
        return record

    def to_dict(self) -> Dict[str, Any]:
        return {
            "log": {str(hour): self.log[hour].value for hour in sorted(self.log)},
            "todos": self.todos.to_list(),
            "config": self.config.to_dict(),
        }


AppData = Dict[str, DayRecord]


@dataclass(frozen=True)
class DayStats:
    """Single-day tallies derived from an hourly log."""

    slacking: int = 0
    normal: int = 0
    focused: int = 0
    total_recorded: int = 0
    focus_score: int = 0


@dataclass(frozen=True)
class RecordingProgress:
    percent: int
    hours_to_record: int


@dataclass(frozen=True)
class TrendPoint:
    date: str
    slacking: int = 0
    normal: int = 0
    focused: int = 0
