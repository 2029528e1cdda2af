"""Leitner Box Scheduling.

Seven levels, each with a fixed interval. A completed level moves its due
date forward by its interval counted from the *previous due date*, not from
the day the review happened, so working through a backlog never pushes a
level's cadence forward.

Due levels are served strictly in due order: the level with the oldest due
date (ties broken by level number) is the only one that may be completed.
"""
from dataclasses import dataclass, field
from typing import Optional, Protocol

from core import ACTION_DONE, LEVEL_COUNT, Level, LogEntry, ScheduleState
from core.calendar import add_days, diff_days, parse_date
from core.errors import NotFoundError, NothingToUndoError


def _due_key(lv: Level) -> tuple[str, int]:
    return (lv.next_due, lv.level)


@dataclass
class Sections:
    """Levels partitioned for a given day."""
    actionable: Optional[Level] = None
    pending: list[Level] = field(default_factory=list)
    upcoming: list[Level] = field(default_factory=list)

    @property
    def due(self) -> list[Level]:
        """Actionable level first, then the ones queued behind it."""
        head = [self.actionable] if self.actionable else []
        return head + self.pending


@dataclass
class Summary:
    """Everything the front end needs to describe the schedule on one day."""
    today: str
    day_number: int
    sections: Sections
    backlog_dates: list[str]
    due_today: list[Level]

    def status_text(self) -> str:
        if self.backlog_dates:
            days = len(self.backlog_dates)
            plural = "s" if days > 1 else ""
            return f"Backlog: {days} day{plural} pending (oldest: {self.backlog_dates[0]})."
        if self.due_today:
            names = ", ".join(f"L{lv.level}" for lv in self.due_today)
            return f"Due today: {names}."
        return "You're all caught up. Next due dates are shown below."


class Scheduler(Protocol):
    """Protocol for schedule engines."""

    def classify_levels(self, state: ScheduleState, today: str) -> Sections:
        ...

    def complete(self, state: ScheduleState, level: int, on_date: str, ts: int) -> LogEntry:
        ...

    def undo(self, state: ScheduleState, level: int, on_date: str) -> LogEntry:
        ...

    def summarize(self, state: ScheduleState, today: str) -> Summary:
        ...


class LeitnerScheduler:
    """Leitner box engine.

    Every method takes the schedule state explicitly and mutates nothing
    but that state; persisting it afterwards is up to the caller.
    """

    @staticmethod
    def classify_levels(state: ScheduleState, today: str) -> Sections:
        """Split the levels into actionable / pending / upcoming for ``today``."""
        parse_date(today)
        ordered = sorted(state.levels, key=_due_key)
        due = [lv for lv in ordered if lv.next_due <= today]
        upcoming = [lv for lv in ordered if lv.next_due > today]
        return Sections(
            actionable=due[0] if due else None,
            pending=due[1:],
            upcoming=upcoming,
        )

    @staticmethod
    def complete(state: ScheduleState, level: int, on_date: str, ts: int) -> LogEntry:
        """Mark ``level`` reviewed on ``on_date``.

        Args:
            state: Schedule to mutate
            level: Level number (1-7)
            on_date: Day the review was performed
            ts: Wall-clock epoch milliseconds, orders same-day entries

        Returns:
            The log entry that was appended

        Raises:
            NotFoundError: no level with that number exists
        """
        parse_date(on_date)
        lv = _require_level(state, level)
        original_due = lv.next_due
        lv.last_completed = on_date
        lv.next_due = add_days(original_due, state.settings.interval_for(level))
        entry = LogEntry(date=on_date, level=level, ts=ts, original_due=original_due)
        state.log.append(entry)
        return entry

    @staticmethod
    def undo(state: ScheduleState, level: int, on_date: str) -> LogEntry:
        """Revert the latest completion of ``level`` recorded on ``on_date``.

        Only the newest completion of a level can be reverted; reverting an
        older one would rewind the due date past a later review.

        Raises:
            NotFoundError: no level with that number exists
            NothingToUndoError: no matching completion, or a newer one exists
        """
        parse_date(on_date)
        lv = _require_level(state, level)

        match_idx = None
        latest_idx = None
        for idx, entry in enumerate(state.log):
            if entry.level != level or entry.action != ACTION_DONE:
                continue
            if latest_idx is None or entry.ts >= state.log[latest_idx].ts:
                latest_idx = idx
            if entry.date == on_date and (match_idx is None or entry.ts >= state.log[match_idx].ts):
                match_idx = idx

        if match_idx is None:
            raise NothingToUndoError(f"Level {level} has no completion on {on_date} to undo")
        if latest_idx != match_idx:
            newer = state.log[latest_idx]
            raise NothingToUndoError(
                f"Level {level} was completed again on {newer.date}; undo that completion first"
            )

        entry = state.log.pop(match_idx)
        lv.next_due = entry.original_due
        lv.last_completed = None
        return entry

    @staticmethod
    def backlog_dates(state: ScheduleState, today: str) -> list[str]:
        """Distinct due dates strictly before ``today``, oldest first."""
        parse_date(today)
        return sorted({lv.next_due for lv in state.levels if lv.next_due < today})

    @staticmethod
    def due_on(state: ScheduleState, date: str) -> list[Level]:
        parse_date(date)
        return sorted((lv for lv in state.levels if lv.next_due == date), key=lambda lv: lv.level)

    @staticmethod
    def day_number(state: ScheduleState, today: str) -> int:
        """1-based day count since the schedule started."""
        if state.settings.start_date is None:
            raise NotFoundError("Schedule has not been started")
        return diff_days(state.settings.start_date, today) + 1

    @classmethod
    def summarize(cls, state: ScheduleState, today: str) -> Summary:
        return Summary(
            today=today,
            day_number=cls.day_number(state, today),
            sections=cls.classify_levels(state, today),
            backlog_dates=cls.backlog_dates(state, today),
            due_today=cls.due_on(state, today),
        )


def _require_level(state: ScheduleState, level: int) -> Level:
    if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= LEVEL_COUNT:
        raise NotFoundError(f"Level must be between 1 and {LEVEL_COUNT}, got {level!r}")
    lv = state.get_level(level)
    if lv is None:
        raise NotFoundError(f"Level {level} does not exist; has the schedule been started?")
    return lv


# Default scheduler instance
default_scheduler = LeitnerScheduler()
