"""Result value returned by every intent handler."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from depo_client.services import ServiceError


class OutcomeStatus(str, enum.Enum):
    OK = "ok"
    SKIPPED = "skipped"  # precondition not met, nothing sent to the backend
    FAILED = "failed"


@dataclass(frozen=True)
class IntentOutcome:
    """How an intent ended. Handlers return this instead of raising."""

    operation: str
    status: OutcomeStatus
    error: ServiceError | None = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.OK

    @classmethod
    def succeeded(cls, operation: str) -> IntentOutcome:
        return cls(operation, OutcomeStatus.OK)

    @classmethod
    def skipped(cls, operation: str, error: ServiceError) -> IntentOutcome:
        return cls(operation, OutcomeStatus.SKIPPED, error)

    @classmethod
    def failed(cls, operation: str, error: ServiceError) -> IntentOutcome:
        return cls(operation, OutcomeStatus.FAILED, error)
