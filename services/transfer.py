# Export / import of schedule files
import json
import logging
from pathlib import Path

from core import ScheduleState
from core.errors import ValidationError
from storage.repository import load_state

logger = logging.getLogger(__name__)


def export_filename(today: str) -> str:
    return f"leitner-schedule-export-{today}.json"


def export_json(state: ScheduleState) -> str:
    """Pretty-printed JSON of the whole schedule."""
    return json.dumps(state.to_dict(), indent=2, ensure_ascii=False)


def write_export(state: ScheduleState, directory: Path, today: str) -> Path:
    """Write the export file into ``directory`` and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(today)
    path.write_text(export_json(state) + "\n", encoding="utf-8")
    logger.info("Exported schedule to %s", path)
    return path


def import_json(text: str) -> ScheduleState:
    """Parse an exported schedule, upgrading older versions.

    Raises:
        ValidationError: the text is not JSON, fails validation, or holds
            no started schedule
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Import failed: not a JSON file ({exc})") from exc

    try:
        state = load_state(raw)
    except ValidationError as exc:
        raise ValidationError("Import failed: invalid schedule file", exc.errors) from exc

    if not state.is_initialized:
        raise ValidationError("Import failed: file contains no started schedule")
    return state


def read_import(path: Path) -> ScheduleState:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ValidationError(f"Import failed: {path} is not UTF-8 text") from exc
    return import_json(text)
