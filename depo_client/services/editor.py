"""DependencyEditor — the session context owned by the presentation layer.

One editor per session: it owns the project session, the dependency
store, the search workflow, the mutation handlers and the error surface,
and wires project changes to refreshes.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import structlog

from depo_client.gateway.base import CommandGateway, GatewayError
from depo_client.models.dependency import DependencyRecord
from depo_client.services import (
    DependencyNotSelected,
    PreconditionNotMet,
    ProjectInitFailed,
    RefreshFailed,
    StateInvariantViolation,
)
from depo_client.services.dependency_store import DependencyStore
from depo_client.services.error_surface import ErrorSurface, SessionError
from depo_client.services.mutations import MutationHandlers
from depo_client.services.outcome import IntentOutcome
from depo_client.services.project_session import ProjectSession
from depo_client.services.search import SearchState, SearchWorkflow

log = structlog.get_logger("depo_client.service")

# Native directory picker: resolves to a path, or None when the user cancels.
DirectoryPicker = Callable[[], Awaitable[str | None]]


@dataclass(frozen=True)
class EditorView:
    """Immutable snapshot for rendering."""

    project: str | None
    dependencies: tuple[DependencyRecord, ...]
    search_state: SearchState
    candidates: tuple[DependencyRecord, ...]
    selection: DependencyRecord | None
    error: SessionError | None


class DependencyEditor:
    """Client-side state controller for one editing session."""

    def __init__(self, gateway: CommandGateway) -> None:
        self._gateway = gateway
        self.errors = ErrorSurface()
        self.session = ProjectSession()
        self.store = DependencyStore(gateway, self.session, self.errors)
        self.search = SearchWorkflow(gateway, self.session, self.errors)
        self.mutations = MutationHandlers(gateway, self.session, self.store, self.errors)

    # ── project lifecycle ─────────────────────────────────────────────

    async def select_project(self, path: str) -> IntentOutcome:
        """Open an existing project and refresh its dependencies."""
        try:
            changed = self.session.activate(path)
        except PreconditionNotMet as exc:
            return IntentOutcome.skipped("select_project", exc)
        if changed:
            self.store.discard()
            self.search.close()
        return await self.store.refresh()

    async def init_project(self, path: str) -> IntentOutcome:
        """Register *path* with the backend, then open it."""
        path = path.strip() if path else ""
        if not path:
            return IntentOutcome.skipped(
                "init", PreconditionNotMet("project path must not be empty")
            )
        try:
            await self._gateway.init(path)
        except GatewayError as exc:
            failure = ProjectInitFailed(str(exc))
            self.errors.record("init", failure)
            return IntentOutcome.failed("init", failure)
        self.errors.clear()
        log.info("project.initialised", path=path)
        return await self.select_project(path)

    async def choose_project(
        self, picker: DirectoryPicker, *, initialise: bool = True
    ) -> IntentOutcome:
        """Ask the directory picker for a project; cancelling is a no-op."""
        path = await picker()
        if not path:
            return IntentOutcome.skipped(
                "choose_project", PreconditionNotMet("no directory selected")
            )
        if initialise:
            return await self.init_project(path)
        return await self.select_project(path)

    async def refresh(self) -> IntentOutcome:
        return await self.store.refresh()

    # ── add flow ──────────────────────────────────────────────────────

    async def search_dependencies(self, query: str) -> IntentOutcome:
        return await self.search.search(query)

    def select_candidate(self, name: str, constraint: str | None = None) -> IntentOutcome:
        return self.search.select(name, constraint)

    async def confirm_add(self) -> IntentOutcome:
        """Issue the Add intent for the current selection."""
        selection = self.search.selection
        if selection is None:
            return IntentOutcome.skipped("add", DependencyNotSelected("no dependency selected"))
        if self.search.candidate(selection.qualified_name) is None:
            violation = StateInvariantViolation(
                f"selected dependency '{selection.qualified_name}' is no longer a search result"
            )
            self.errors.record("add", violation)
            return IntentOutcome.failed("add", violation)

        outcome = await self.mutations.add(selection)
        # Close the flow once the backend accepted the add, even if the refresh failed.
        if outcome.ok or isinstance(outcome.error, RefreshFailed):
            self.search.close()
        return outcome

    def close_add(self) -> None:
        self.search.close()

    # ── other intents ─────────────────────────────────────────────────

    async def delete(self, name: str) -> IntentOutcome:
        return await self.mutations.delete(name)

    async def update(self, name: str) -> IntentOutcome:
        return await self.mutations.update(name)

    async def set_constraint(self, name: str, constraint: str | None) -> IntentOutcome:
        return await self.mutations.set_constraint(name, constraint)

    async def clear_constraint(self, name: str) -> IntentOutcome:
        return await self.mutations.clear_constraint(name)

    async def build(self) -> IntentOutcome:
        return await self.mutations.build()

    async def install(self) -> IntentOutcome:
        return await self.mutations.install()

    # ── presentation ──────────────────────────────────────────────────

    def dismiss_error(self) -> None:
        self.errors.clear()

    def view(self) -> EditorView:
        deps = self.store.dependencies
        candidates = self.search.results
        return EditorView(
            project=self.session.path,
            dependencies=tuple(deps[name] for name in sorted(deps)),
            search_state=self.search.state,
            candidates=tuple(candidates[name] for name in sorted(candidates)),
            selection=self.search.selection,
            error=self.errors.get(),
        )
