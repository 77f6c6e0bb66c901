"""Single-slot record of the most recent failure in the session."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog

log = structlog.get_logger("depo_client.service")


@dataclass(frozen=True)
class SessionError:
    """The last failure, as shown to the user."""

    operation: str
    message: str
    kind: str
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_exception(cls, operation: str, exc: BaseException) -> SessionError:
        return cls(operation=operation, message=str(exc), kind=type(exc).__name__)


class ErrorSurface:
    """Created empty, overwritten on every failure, cleared on success or dismissal.

    Nothing here retries; the user re-triggers the intent.
    """

    def __init__(self) -> None:
        self._error: SessionError | None = None

    def get(self) -> SessionError | None:
        return self._error

    def set(self, error: SessionError) -> None:
        self._error = error

    def record(self, operation: str, exc: BaseException) -> SessionError:
        """Store *exc* as the current error and log it."""
        error = SessionError.from_exception(operation, exc)
        self._error = error
        log.warning("session.error", operation=operation, kind=error.kind, message=error.message)
        return error

    def clear(self) -> None:
        self._error = None
