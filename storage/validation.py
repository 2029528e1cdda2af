"""Structural validation of migrated schedule blobs."""
from typing import Any

from core import ACTION_DONE, LEVEL_COUNT, SCHEMA_VERSION, THEMES, ScheduleState
from core.calendar import is_date
from core.errors import ValidationError


def _require(cond: bool, msg: str, errs: list[str]) -> None:
    if not cond:
        errs.append(msg)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_optional_date(value: Any) -> bool:
    return value is None or is_date(value)


def _validate_settings(settings: Any, errs: list[str]) -> None:
    if not isinstance(settings, dict):
        errs.append("settings must be an object")
        return

    _require("startDate" in settings, "settings.startDate is required", errs)
    _require(
        _is_optional_date(settings.get("startDate")),
        "settings.startDate must be null or a YYYY-MM-DD date",
        errs,
    )

    intervals = settings.get("intervals")
    _require(
        isinstance(intervals, list)
        and len(intervals) == LEVEL_COUNT
        and all(_is_int(n) and n > 0 for n in intervals),
        f"settings.intervals must be {LEVEL_COUNT} positive integers",
        errs,
    )
    _require(settings.get("theme") in THEMES, f"settings.theme must be one of {', '.join(THEMES)}", errs)
    version = settings.get("version")
    _require(
        _is_int(version) and version == SCHEMA_VERSION,
        f"settings.version must be {SCHEMA_VERSION}, got {version!r}",
        errs,
    )


def _validate_levels(levels: Any, errs: list[str]) -> None:
    if not isinstance(levels, list):
        errs.append("levels must be a list")
        return
    _require(len(levels) == LEVEL_COUNT, f"levels must hold exactly {LEVEL_COUNT} entries, got {len(levels)}", errs)

    seen: set[int] = set()
    for i, lv in enumerate(levels):
        if not isinstance(lv, dict):
            errs.append(f"levels[{i}] must be an object")
            continue
        number = lv.get("level")
        if not (_is_int(number) and 1 <= number <= LEVEL_COUNT):
            errs.append(f"levels[{i}].level must be an integer 1..{LEVEL_COUNT}")
        elif number in seen:
            errs.append(f"levels[{i}].level {number} is duplicated")
        else:
            seen.add(number)
        _require(is_date(lv.get("nextDue")), f"levels[{i}].nextDue must be a YYYY-MM-DD date", errs)
        _require("lastCompleted" in lv, f"levels[{i}].lastCompleted is required", errs)
        _require(
            _is_optional_date(lv.get("lastCompleted")),
            f"levels[{i}].lastCompleted must be null or a YYYY-MM-DD date",
            errs,
        )


def _validate_log(log: Any, errs: list[str]) -> None:
    if not isinstance(log, list):
        errs.append("log must be a list")
        return

    for i, entry in enumerate(log):
        if not isinstance(entry, dict):
            errs.append(f"log[{i}] must be an object")
            continue
        _require(is_date(entry.get("date")), f"log[{i}].date must be a YYYY-MM-DD date", errs)
        number = entry.get("level")
        _require(
            _is_int(number) and 1 <= number <= LEVEL_COUNT,
            f"log[{i}].level must be an integer 1..{LEVEL_COUNT}",
            errs,
        )
        _require(_is_int(entry.get("ts")), f"log[{i}].ts must be an integer", errs)
        _require(entry.get("action") == ACTION_DONE, f"log[{i}].action must be {ACTION_DONE!r}", errs)
        _require(is_date(entry.get("originalDue")), f"log[{i}].originalDue must be a YYYY-MM-DD date", errs)


def validation_errors(data: Any) -> list[str]:
    """Return every schema problem in ``data``; empty means valid."""
    if not isinstance(data, dict):
        return [f"schedule must be an object, got {type(data).__name__}"]

    errs: list[str] = []
    settings = data.get("settings")
    _validate_settings(settings, errs)

    if isinstance(settings, dict) and settings.get("startDate") is None:
        # welcome mode: nothing to schedule yet
        _require(not data.get("levels"), "levels must be empty before a schedule is started", errs)
        _require(not data.get("log"), "log must be empty before a schedule is started", errs)
        return errs

    _validate_levels(data.get("levels"), errs)
    _validate_log(data.get("log"), errs)
    return errs


def validate(data: Any) -> ScheduleState:
    """Check a migrated blob against the current schema and build the state.

    Raises:
        ValidationError: with every problem found; nothing is partially accepted
    """
    errs = validation_errors(data)
    if errs:
        raise ValidationError("Invalid schedule data", errs)
    return ScheduleState.from_dict(data)
