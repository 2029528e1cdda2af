"""Schema upgrades for stored schedule blobs.

Each step is additive and idempotent: applying it to data that already
went through it changes nothing. ``migrate`` never mutates its input.
"""
import copy
import logging
from typing import Any, Callable

from core import DEFAULT_INTERVALS, DEFAULT_THEME, SCHEMA_VERSION

logger = logging.getLogger(__name__)


def _is_version(value: Any) -> bool:
    # bool is an int subclass; a flag is not a version
    return isinstance(value, int) and not isinstance(value, bool)


def _stored_version(settings: Any) -> Any:
    """Version tag as stored; only a missing tag means v1."""
    if not isinstance(settings, dict) or "version" not in settings:
        return 1
    return settings["version"]


def _bump(settings: dict, version: int) -> None:
    current = settings.get("version", 1)
    settings["version"] = max(current, version) if _is_version(current) else version


def _backfill_original_due(data: dict) -> None:
    """Entries that never recorded the due date they replaced get their own date.

    Releases up to v2 appended log entries without ``originalDue``, so every
    step below v3 fills them in.
    """
    log = data.get("log")
    if isinstance(log, list):
        for entry in log:
            if isinstance(entry, dict) and "originalDue" not in entry and "date" in entry:
                entry["originalDue"] = entry["date"]


def _fill_settings(settings: dict) -> None:
    if settings.get("theme") is None:
        settings["theme"] = DEFAULT_THEME
    # a reset stored only {"startDate": null}, plus the theme once it was changed
    if settings.get("startDate") is None and "intervals" not in settings:
        settings["intervals"] = list(DEFAULT_INTERVALS)


def upgrade_v1_to_v2(data: dict) -> dict:
    """Backfill ``originalDue`` on log entries and missing settings."""
    _backfill_original_due(data)
    settings = data.get("settings")
    if isinstance(settings, dict):
        _fill_settings(settings)
        _bump(settings, 2)
    return data


def upgrade_v2_to_v3(data: dict) -> dict:
    """Version bump, finishing any backfill v2 data still needs.

    v3 computes the next due date from the previous due date instead of
    the completion date. Due dates stored by older versions are left as is.
    """
    _backfill_original_due(data)
    settings = data.get("settings")
    if isinstance(settings, dict):
        _fill_settings(settings)
        _bump(settings, 3)
    return data


# from-version -> step
UPGRADES: dict[int, Callable[[dict], dict]] = {
    1: upgrade_v1_to_v2,
    2: upgrade_v2_to_v3,
}


def migrate(raw: Any) -> Any:
    """Upgrade a decoded blob to the current schema version.

    Anything that is not a dict, a version tag that is not an integer, and
    data from a newer version are returned unchanged; validation decides
    what to do with them.
    """
    if not isinstance(raw, dict):
        return raw

    data = copy.deepcopy(raw)
    version = _stored_version(data.get("settings"))
    if not _is_version(version) or version < 1:
        return data
    if version > SCHEMA_VERSION:
        logger.warning("Schedule data has version %s, newer than supported %s", version, SCHEMA_VERSION)
        return data

    while version < SCHEMA_VERSION:
        step = UPGRADES[version]
        logger.info("Upgrading schedule data from v%s to v%s", version, version + 1)
        data = step(data)
        version += 1
    return data
