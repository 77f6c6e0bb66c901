"""Dependency Set Store — the refresh protocol.

The set is only ever replaced wholesale from a backend snapshot. There is
no merge path and no optimistic edit: mutations call :meth:`refresh` once
the backend accepted them.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

import structlog

from depo_client.gateway.base import CommandGateway, GatewayError
from depo_client.models.dependency import DependencyRecord, dependency_map
from depo_client.services import PreconditionNotMet, RefreshFailed, StateInvariantViolation
from depo_client.services.error_surface import ErrorSurface
from depo_client.services.outcome import IntentOutcome
from depo_client.services.project_session import ProjectSession

log = structlog.get_logger("depo_client.service")

_EMPTY: Mapping[str, DependencyRecord] = MappingProxyType({})


class DependencyStore:
    """Read-only snapshot of what the backend reports for the open project."""

    def __init__(
        self,
        gateway: CommandGateway,
        session: ProjectSession,
        errors: ErrorSurface,
    ) -> None:
        self._gateway = gateway
        self._session = session
        self._errors = errors
        self._snapshot: Mapping[str, DependencyRecord] = _EMPTY
        self._refresh_count = 0

    @property
    def dependencies(self) -> Mapping[str, DependencyRecord]:
        """Current snapshot; replaced by reference on every refresh."""
        return self._snapshot

    @property
    def refresh_count(self) -> int:
        """Number of snapshots applied since construction."""
        return self._refresh_count

    def get(self, name: str) -> DependencyRecord | None:
        return self._snapshot.get(name)

    def discard(self) -> None:
        """Forget the snapshot (project changed)."""
        self._snapshot = _EMPTY

    async def refresh(self) -> IntentOutcome:
        """Query all dependencies and replace the snapshot.

        On failure the previous snapshot is left untouched and the error
        is recorded on the error surface.
        """
        try:
            path = self._session.require_project()
        except PreconditionNotMet as exc:
            log.debug("store.refresh_skipped", reason=str(exc))
            return IntentOutcome.skipped("refresh", exc)

        try:
            records = dependency_map(await self._gateway.get_project_dependencies(path))
        except (GatewayError, ValueError) as exc:
            failure = RefreshFailed(str(exc))
            self._errors.record("refresh", failure)
            return IntentOutcome.failed("refresh", failure)

        if self._session.path != path:
            # Answer for a project that is no longer open.
            stale = StateInvariantViolation(f"dropped dependency snapshot for '{path}'")
            log.info("store.stale_snapshot", path=path, active=self._session.path)
            return IntentOutcome.skipped("refresh", stale)

        self._snapshot = MappingProxyType(records)
        self._refresh_count += 1
        self._errors.clear()
        log.info("store.refreshed", path=path, count=len(records))
        return IntentOutcome.succeeded("refresh")
