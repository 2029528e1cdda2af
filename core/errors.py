"""Error types raised by the scheduling engine and the state pipeline."""
from typing import Iterable, Optional


class LeitnerError(Exception):
    """Base class for every error raised by the scheduler."""


class FormatError(LeitnerError, ValueError):
    """A calendar date string is not a valid YYYY-MM-DD date."""


class ValidationError(LeitnerError, ValueError):
    """A stored or imported blob does not match the current schema.

    ``errors`` keeps every problem found so callers can show all of them
    at once instead of only the first.
    """

    def __init__(self, message: str, errors: Optional[Iterable[str]] = None):
        self.errors = list(errors or [])
        if self.errors:
            message = f"{message}: " + "; ".join(self.errors)
        super().__init__(message)


class NotFoundError(LeitnerError, LookupError):
    """A level number outside 1..7 was referenced."""


class NothingToUndoError(LeitnerError):
    """No completion matches the (date, level) pair being undone."""


class NotActionableError(LeitnerError):
    """The level is not the one the backlog order allows completing now."""
