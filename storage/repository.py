import json
import logging
from typing import Any, Optional

from core import ScheduleState
from core.errors import ValidationError

from .migrations import migrate
from .store import Store
from .validation import validate

logger = logging.getLogger(__name__)


STORAGE_KEY = "leitnerScheduleV2"


def load_state(raw: Any) -> ScheduleState:
    """Run a decoded blob through migration, then validation."""
    return validate(migrate(raw))


def decode_state(blob: bytes) -> ScheduleState:
    """Decode UTF-8 JSON bytes into a validated state.

    Raises:
        ValidationError: the bytes are not JSON or the data is invalid
    """
    try:
        raw = json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValidationError(f"Schedule data is not valid JSON: {exc}") from exc
    return load_state(raw)


def encode_state(state: ScheduleState, indent: Optional[int] = None) -> bytes:
    return json.dumps(state.to_dict(), indent=indent, ensure_ascii=False).encode("utf-8")


class ScheduleRepository:
    """Loads and saves the schedule blob under a single store key."""

    def __init__(self, store: Store, key: str = STORAGE_KEY):
        self.store = store
        self.key = key

    def load(self) -> ScheduleState:
        """Load the stored schedule.

        Missing, unreadable or invalid data all yield a blank
        (pre-initialization) state; bad data is never partially accepted.
        """
        blob = self.store.get(self.key)
        if blob is None:
            return ScheduleState.blank()
        try:
            return decode_state(blob)
        except ValidationError as exc:
            logger.warning("Ignoring stored schedule: %s", exc)
            return ScheduleState.blank()

    def save(self, state: ScheduleState) -> None:
        self.store.set(self.key, encode_state(state))

    def wipe(self) -> None:
        self.store.delete(self.key)
