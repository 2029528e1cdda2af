# Storage layer
from .db import connect, SCHEMA_SQL, SQLiteStore
from .migrations import migrate
from .repository import STORAGE_KEY, ScheduleRepository, decode_state, encode_state, load_state
from .store import MemoryStore, Store
from .validation import validate, validation_errors

__all__ = [
    "connect",
    "SCHEMA_SQL",
    "SQLiteStore",
    "MemoryStore",
    "Store",
    "STORAGE_KEY",
    "ScheduleRepository",
    "decode_state",
    "encode_state",
    "load_state",
    "migrate",
    "validate",
    "validation_errors",
]
