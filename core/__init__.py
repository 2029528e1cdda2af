# Domain models
from dataclasses import dataclass, field
from typing import Optional

from .calendar import add_days
from .errors import (
    LeitnerError,
    FormatError,
    ValidationError,
    NotFoundError,
    NothingToUndoError,
    NotActionableError,
)


LEVEL_COUNT = 7
DEFAULT_INTERVALS = (1, 2, 4, 8, 16, 32, 64)
THEMES = ("system", "light", "dark")
DEFAULT_THEME = "system"
SCHEMA_VERSION = 3
ACTION_DONE = "done"


@dataclass
class Settings:
    """Schedule-wide settings. ``start_date`` is None before a schedule exists."""
    start_date: Optional[str] = None
    intervals: list[int] = field(default_factory=lambda: list(DEFAULT_INTERVALS))
    theme: str = DEFAULT_THEME
    version: int = SCHEMA_VERSION

    def interval_for(self, level: int) -> int:
        return self.intervals[level - 1]

    def to_dict(self) -> dict:
        return {
            "startDate": self.start_date,
            "intervals": list(self.intervals),
            "theme": self.theme,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        return cls(
            start_date=data.get("startDate"),
            intervals=list(data.get("intervals", DEFAULT_INTERVALS)),
            theme=data.get("theme", DEFAULT_THEME),
            version=data.get("version", SCHEMA_VERSION),
        )


@dataclass
class Level:
    """One of the seven review buckets."""
    level: int
    next_due: str
    last_completed: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "nextDue": self.next_due,
            "lastCompleted": self.last_completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Level":
        return cls(
            level=data["level"],
            next_due=data["nextDue"],
            last_completed=data.get("lastCompleted"),
        )


@dataclass
class LogEntry:
    """A recorded completion.

    ``original_due`` is the level's due date right before the completion;
    undo restores it verbatim.
    """
    date: str
    level: int
    ts: int
    original_due: str
    action: str = ACTION_DONE

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "level": self.level,
            "ts": self.ts,
            "action": self.action,
            "originalDue": self.original_due,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LogEntry":
        return cls(
            date=data["date"],
            level=data["level"],
            ts=data["ts"],
            original_due=data["originalDue"],
            action=data.get("action", ACTION_DONE),
        )


@dataclass
class ScheduleState:
    """Settings, the seven levels and the completion log."""
    settings: Settings = field(default_factory=Settings)
    levels: list[Level] = field(default_factory=list)
    log: list[LogEntry] = field(default_factory=list)

    @property
    def is_initialized(self) -> bool:
        return self.settings.start_date is not None

    def get_level(self, level: int) -> Optional[Level]:
        for lv in self.levels:
            if lv.level == level:
                return lv
        return None

    def to_dict(self) -> dict:
        return {
            "settings": self.settings.to_dict(),
            "levels": [lv.to_dict() for lv in self.levels],
            "log": [entry.to_dict() for entry in self.log],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ScheduleState":
        """Build a state from an already validated blob."""
        levels = [Level.from_dict(item) for item in data.get("levels") or []]
        levels.sort(key=lambda lv: lv.level)
        return cls(
            settings=Settings.from_dict(data["settings"]),
            levels=levels,
            log=[LogEntry.from_dict(item) for item in data.get("log") or []],
        )

    @classmethod
    def blank(cls, theme: str = DEFAULT_THEME) -> "ScheduleState":
        """Pre-initialization (welcome) state."""
        return cls(settings=Settings(theme=theme))


def initialize(start_date: str, intervals=DEFAULT_INTERVALS, theme: str = DEFAULT_THEME) -> ScheduleState:
    """Create a schedule starting on ``start_date``.

    Level N first falls due ``intervals[N-1] - 1`` days after the start, so
    level 1 is due on the start date itself and the first rollout is staggered.
    """
    intervals = list(intervals)
    if len(intervals) != LEVEL_COUNT or any(
        isinstance(n, bool) or not isinstance(n, int) or n <= 0 for n in intervals
    ):
        raise ValueError(f"intervals must be {LEVEL_COUNT} positive integers, got {intervals!r}")
    if theme not in THEMES:
        raise ValueError(f"theme must be one of {', '.join(THEMES)}, got {theme!r}")
    levels = [
        Level(level=i, next_due=add_days(start_date, intervals[i - 1] - 1))
        for i in range(1, LEVEL_COUNT + 1)
    ]
    return ScheduleState(
        settings=Settings(start_date=start_date, intervals=intervals, theme=theme),
        levels=levels,
        log=[],
    )


__all__ = [
    "LEVEL_COUNT",
    "DEFAULT_INTERVALS",
    "THEMES",
    "DEFAULT_THEME",
    "SCHEMA_VERSION",
    "ACTION_DONE",
    "Settings",
    "Level",
    "LogEntry",
    "ScheduleState",
    "initialize",
    "LeitnerError",
    "FormatError",
    "ValidationError",
    "NotFoundError",
    "NothingToUndoError",
    "NotActionableError",
]
