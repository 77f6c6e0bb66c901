"""Mutation Intent Handlers.

Each handler issues exactly one mutating command and, only if the backend
accepted it, asks the store to refresh. The mutation's own response is
never applied to the dependency set.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import structlog

from depo_client.gateway.base import CommandGateway, GatewayError
from depo_client.models.dependency import DependencyRecord
from depo_client.services import (
    BackendMutationFailed,
    DependencyNotSelected,
    EmptyConstraint,
    PreconditionNotMet,
)
from depo_client.services.dependency_store import DependencyStore
from depo_client.services.error_surface import ErrorSurface
from depo_client.services.outcome import IntentOutcome, OutcomeStatus
from depo_client.services.project_session import ProjectSession

log = structlog.get_logger("depo_client.service")


class MutationHandlers:
    """add / delete / update / set-constraint / clear-constraint / build / install."""

    def __init__(
        self,
        gateway: CommandGateway,
        session: ProjectSession,
        store: DependencyStore,
        errors: ErrorSurface,
    ) -> None:
        self._gateway = gateway
        self._session = session
        self._store = store
        self._errors = errors

    async def add(self, record: DependencyRecord | None) -> IntentOutcome:
        if record is None:
            return self._skip("add", DependencyNotSelected("no dependency selected"))
        return await self._mutate(
            "add",
            lambda path: self._gateway.add_dependency(path, record),
            dependency=record.name,
        )

    async def delete(self, name: str) -> IntentOutcome:
        return await self._named("delete", name, self._gateway.delete_dependency)

    async def update(self, name: str) -> IntentOutcome:
        return await self._named("update", name, self._gateway.update_dependency)

    async def set_constraint(self, name: str, constraint: str | None) -> IntentOutcome:
        constraint = constraint.strip() if constraint else ""
        if not constraint:
            return self._skip("set_constraint", EmptyConstraint("version constraint is empty"))
        return await self._named(
            "set_constraint",
            name,
            lambda path, dep: self._gateway.modify_dependency_constraint(path, dep, constraint),
        )

    async def clear_constraint(self, name: str) -> IntentOutcome:
        return await self._named(
            "clear_constraint", name, self._gateway.remove_dependency_constraint
        )

    async def build(self) -> IntentOutcome:
        return await self._mutate("build", self._gateway.build_dependencies)

    async def install(self) -> IntentOutcome:
        return await self._mutate("install", self._gateway.install_dependencies)

    # ── private helpers ───────────────────────────────────────────────

    async def _named(
        self,
        operation: str,
        name: str,
        call: Callable[[str, str], Awaitable[None]],
    ) -> IntentOutcome:
        name = name.strip() if name else ""
        if not name:
            return self._skip(operation, PreconditionNotMet("dependency name is empty"))
        return await self._mutate(operation, lambda path: call(path, name), dependency=name)

    async def _mutate(
        self,
        operation: str,
        call: Callable[[str], Awaitable[None]],
        **context: str,
    ) -> IntentOutcome:
        """Run one gateway call, then refresh on success."""
        try:
            path = self._session.require_project()
        except PreconditionNotMet as exc:
            return self._skip(operation, exc)

        try:
            await call(path)
        except GatewayError as exc:
            failure = BackendMutationFailed(str(exc))
            self._errors.record(operation, failure)
            return IntentOutcome.failed(operation, failure)

        self._errors.clear()
        log.info("intent.applied", operation=operation, path=path, **context)

        refreshed = await self._store.refresh()
        if refreshed.status is OutcomeStatus.FAILED:
            return IntentOutcome.failed(operation, refreshed.error)  # type: ignore[arg-type]
        return IntentOutcome.succeeded(operation)

    @staticmethod
    def _skip(operation: str, exc: PreconditionNotMet) -> IntentOutcome:
        log.debug("intent.skipped", operation=operation, reason=str(exc))
        return IntentOutcome.skipped(operation, exc)
