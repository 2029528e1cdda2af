"""Key-value blob stores."""
from typing import Optional, Protocol


class Store(Protocol):
    """Protocol for the blob store holding the schedule."""

    def get(self, key: str) -> Optional[bytes]:
        """Return the bytes stored under ``key``, or None."""
        ...

    def set(self, key: str, value: bytes) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStore:
    """Dict-backed store, useful for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None):
        self.data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self.data.pop(key, None)
