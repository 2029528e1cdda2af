# Schedule Service
"""
Application context around the engine: owns the single live schedule,
the clock and the repository, and saves after every transition.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from core import THEMES, LogEntry, ScheduleState, initialize
from core.calendar import Clock, SystemClock, parse_date
from core.errors import (
    LeitnerError,
    NotActionableError,
    NotFoundError,
    ValidationError,
)
from scheduler import Scheduler, Sections, Summary, default_scheduler
from storage.repository import ScheduleRepository

from .transfer import import_json, read_import, write_export

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Outcome of a user action; failures carry the error instead of raising."""
    ok: bool
    message: str = ""
    entry: Optional[LogEntry] = None
    error: Optional[LeitnerError] = None

    @classmethod
    def failure(cls, error: LeitnerError) -> "ActionResult":
        return cls(ok=False, message=str(error), error=error)


class ScheduleService:
    """Explicit context for every schedule operation."""

    def __init__(self, repository: ScheduleRepository, clock: Optional[Clock] = None,
                 scheduler: Scheduler = default_scheduler):
        self.repository = repository
        self.clock = clock or SystemClock()
        self.scheduler = scheduler
        self.state = ScheduleState.blank()

    def load(self) -> ScheduleState:
        self.state = self.repository.load()
        return self.state

    def save(self) -> None:
        self.repository.save(self.state)

    @property
    def is_initialized(self) -> bool:
        return self.state.is_initialized

    def today(self) -> str:
        return self.clock.today()

    def start(self, start_date: Optional[str] = None) -> ActionResult:
        """Create a new schedule beginning on ``start_date`` (default today)."""
        if self.state.is_initialized:
            return ActionResult(ok=False, message="A schedule already exists; reset it first.")
        start_date = start_date or self.today()
        try:
            parse_date(start_date)
        except LeitnerError as exc:
            return ActionResult.failure(exc)
        self.state = initialize(start_date, theme=self.state.settings.theme)
        self.save()
        logger.info("Started schedule on %s", start_date)
        return ActionResult(ok=True, message=f"Schedule started on {start_date}.")

    def sections(self, today: Optional[str] = None) -> Sections:
        return self.scheduler.classify_levels(self.state, today or self.today())

    def summary(self, today: Optional[str] = None) -> Summary:
        if not self.state.is_initialized:
            raise NotFoundError("No schedule yet; start one first")
        return self.scheduler.summarize(self.state, today or self.today())

    def mark_done(self, level: Optional[int] = None) -> ActionResult:
        """Complete the actionable level today.

        Passing ``level`` asserts which level the caller means; anything but
        the actionable level is refused so the backlog is cleared in order.
        """
        on_date = self.today()
        actionable = self.sections(on_date).actionable
        if actionable is None:
            return ActionResult.failure(NotActionableError(f"Nothing is due on {on_date}"))
        if level is not None and level != actionable.level:
            return ActionResult.failure(NotActionableError(
                f"Level {level} is not actionable; level {actionable.level} "
                f"(due {actionable.next_due}) comes first"
            ))

        try:
            entry = self.scheduler.complete(self.state, actionable.level, on_date, self.clock.now_ms())
        except LeitnerError as exc:
            return ActionResult.failure(exc)
        self.save()
        lv = self.state.get_level(entry.level)
        logger.info("Level %s done on %s, next due %s", entry.level, on_date, lv.next_due)
        return ActionResult(
            ok=True,
            message=f"Marked level {entry.level}. Next due {lv.next_due}.",
            entry=entry,
        )

    def undo(self, level: int, on_date: Optional[str] = None) -> ActionResult:
        on_date = on_date or self.today()
        try:
            entry = self.scheduler.undo(self.state, level, on_date)
        except LeitnerError as exc:
            return ActionResult.failure(exc)
        self.save()
        logger.info("Undid level %s completion of %s", level, on_date)
        return ActionResult(
            ok=True,
            message=f"Undid level {level}. Due again {entry.original_due}.",
            entry=entry,
        )

    def reset(self) -> None:
        """Discard the schedule and its history. Cannot be undone."""
        self.repository.wipe()
        self.state = ScheduleState.blank()
        logger.info("Schedule reset")

    def set_theme(self, theme: str) -> ActionResult:
        if theme not in THEMES:
            return ActionResult.failure(
                ValidationError(f"Unknown theme {theme!r}; choose one of {', '.join(THEMES)}")
            )
        self.state.settings.theme = theme
        self.save()
        return ActionResult(ok=True, message=f"Theme set to {theme}.")

    def export(self, directory: Path) -> Path:
        if not self.state.is_initialized:
            raise NotFoundError("No schedule to export")
        return write_export(self.state, directory, self.today())

    def import_text(self, text: str) -> ActionResult:
        """Replace the schedule with an imported one; keeps the current one on failure."""
        try:
            state = import_json(text)
        except ValidationError as exc:
            return ActionResult.failure(exc)
        return self._replace(state)

    def import_file(self, path: Path) -> ActionResult:
        try:
            state = read_import(path)
        except ValidationError as exc:
            return ActionResult.failure(exc)
        except OSError as exc:
            return ActionResult.failure(ValidationError(f"Import failed: {exc}"))
        return self._replace(state)

    def _replace(self, state: ScheduleState) -> ActionResult:
        self.state = state
        self.save()
        logger.info("Imported schedule starting %s", state.settings.start_date)
        return ActionResult(ok=True, message=f"Imported schedule started on {state.settings.start_date}.")
