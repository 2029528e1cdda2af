"""Calendar arithmetic on ISO ``YYYY-MM-DD`` date strings.

Dates carry no time of day and no timezone. All arithmetic goes through
proleptic Gregorian day ordinals, so adding days and taking differences
can never be shifted by a daylight-saving transition.
"""
import datetime as dt
import re
import time
from typing import Optional, Protocol

from .errors import FormatError


_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class Clock(Protocol):
    """Protocol for wall-clock sources."""

    def today(self) -> str:
        """Current calendar date as YYYY-MM-DD."""
        ...

    def now_ms(self) -> int:
        """Current wall-clock time in epoch milliseconds."""
        ...


class SystemClock:
    """Clock backed by the machine's wall clock."""

    def today(self) -> str:
        return dt.date.today().isoformat()

    def now_ms(self) -> int:
        return int(time.time() * 1000)


class FixedClock:
    """Settable clock for deterministic scheduling.

    ``now_ms`` advances by one millisecond per call so log entries recorded
    back to back still get distinct, increasing timestamps.
    """

    def __init__(self, today: str, now_ms: int = 0):
        self._today = format_date(parse_date(today))
        self._now_ms = now_ms

    def today(self) -> str:
        return self._today

    def now_ms(self) -> int:
        self._now_ms += 1
        return self._now_ms

    def set_today(self, value: str) -> None:
        self._today = format_date(parse_date(value))

    def advance(self, days: int) -> None:
        self._today = add_days(self._today, days)


def parse_date(value: str) -> dt.date:
    """Parse a YYYY-MM-DD string, raising FormatError on anything else."""
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise FormatError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    try:
        return dt.date.fromisoformat(value)
    except ValueError as exc:
        raise FormatError(f"Invalid date {value!r}: {exc}") from exc


def format_date(value: dt.date) -> str:
    return value.isoformat()


def is_date(value) -> bool:
    """True if ``value`` is a well-formed YYYY-MM-DD string."""
    try:
        parse_date(value)
    except FormatError:
        return False
    return True


def add_days(value: str, days: int) -> str:
    """Return ``value`` shifted by ``days`` (may be negative)."""
    ordinal = parse_date(value).toordinal() + days
    try:
        return format_date(dt.date.fromordinal(ordinal))
    except (ValueError, OverflowError) as exc:
        raise FormatError(f"{value} + {days} days is outside the supported calendar") from exc


def diff_days(a: str, b: str) -> int:
    """Signed number of days from ``a`` to ``b`` (``b - a``)."""
    return parse_date(b).toordinal() - parse_date(a).toordinal()


def today(clock: Optional[Clock] = None) -> str:
    return (clock or SystemClock()).today()
