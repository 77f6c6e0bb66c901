"""Search/Selection Workflow — pick a registry candidate before adding it."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from types import MappingProxyType

import structlog

from depo_client.gateway.base import CommandGateway, GatewayError
from depo_client.models.dependency import DependencyRecord, dependency_records
from depo_client.services import (
    CandidateNotFound,
    EmptyQuery,
    PreconditionNotMet,
    SearchFailed,
    StateInvariantViolation,
)
from depo_client.services.error_surface import ErrorSurface
from depo_client.services.outcome import IntentOutcome
from depo_client.services.project_session import ProjectSession

log = structlog.get_logger("depo_client.service")

_EMPTY: Mapping[str, DependencyRecord] = MappingProxyType({})


class SearchState(str, enum.Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    RESULTS = "results"
    SELECTED = "selected"


class SearchWorkflow:
    """Idle -> Searching -> Results -> Selected -> Idle.

    Search results are kept apart from the dependency set; a candidate
    only shows up there after a successful add and the refresh after it.
    Results are keyed by qualified name (``owner/repo`` when the registry
    reports one), so several candidates may share a short name.
    """

    def __init__(
        self,
        gateway: CommandGateway,
        session: ProjectSession,
        errors: ErrorSurface,
    ) -> None:
        self._gateway = gateway
        self._session = session
        self._errors = errors
        self._state = SearchState.IDLE
        self._results: Mapping[str, DependencyRecord] = _EMPTY
        self._selection: DependencyRecord | None = None

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def results(self) -> Mapping[str, DependencyRecord]:
        return self._results

    @property
    def selection(self) -> DependencyRecord | None:
        return self._selection

    def candidate(self, name: str) -> DependencyRecord | None:
        """Look up a candidate by qualified or short name, ignoring case.

        A short name shared by several candidates matches none of them.
        """
        matches = self._matches(name)
        return matches[0] if len(matches) == 1 else None

    def _matches(self, name: str) -> list[DependencyRecord]:
        wanted = name.strip().casefold()
        for key, record in self._results.items():
            if key.casefold() == wanted:
                return [record]
        return [r for r in self._results.values() if r.name.casefold() == wanted]

    async def search(self, query: str) -> IntentOutcome:
        """Query the registry and replace the results wholesale."""
        query = query.strip() if query else ""
        if not query:
            return self._skip("search", EmptyQuery("search query is empty"))
        try:
            path = self._session.require_project()
        except PreconditionNotMet as exc:
            return self._skip("search", exc)

        self._state = SearchState.SEARCHING
        self._selection = None
        try:
            found = dependency_records(await self._gateway.find_dependency(path, query))
        except (GatewayError, ValueError) as exc:
            self._state = SearchState.RESULTS if self._results else SearchState.IDLE
            failure = SearchFailed(str(exc))
            self._errors.record("search", failure)
            return IntentOutcome.failed("search", failure)

        if self._session.path != path:
            # Answer for a project that is no longer open.
            stale = StateInvariantViolation(f"dropped search results for '{path}'")
            log.info("search.stale_results", path=path, active=self._session.path)
            return IntentOutcome.skipped("search", stale)

        results: dict[str, DependencyRecord] = {}
        for record in found:
            results.setdefault(record.qualified_name, record)
        self._results = MappingProxyType(results)
        self._selection = None
        self._state = SearchState.RESULTS
        self._errors.clear()
        log.info("search.results", query=query, count=len(results))
        return IntentOutcome.succeeded("search")

    def select(self, name: str, constraint: str | None = None) -> IntentOutcome:
        """Select a candidate; a non-blank *constraint* replaces its own."""
        if not self._results:
            return self._skip("select", CandidateNotFound("there are no search results"))
        matches = self._matches(name or "")
        if not matches:
            return self._skip("select", CandidateNotFound(f"'{name}' is not a search result"))
        if len(matches) > 1:
            choices = ", ".join(sorted(r.qualified_name for r in matches))
            return self._skip(
                "select", CandidateNotFound(f"'{name}' is ambiguous; pick one of: {choices}")
            )

        record = matches[0]
        constraint = constraint.strip() if constraint else ""
        if constraint:
            record = record.model_copy(update={"version_constraint": constraint})
        self._selection = record
        self._state = SearchState.SELECTED
        log.debug("search.selected", name=record.name, constraint=record.version_constraint)
        return IntentOutcome.succeeded("select")

    def close(self) -> None:
        """Leave the add flow: forget results and selection."""
        self._results = _EMPTY
        self._selection = None
        self._state = SearchState.IDLE

    @staticmethod
    def _skip(operation: str, exc: PreconditionNotMet) -> IntentOutcome:
        log.debug("intent.skipped", operation=operation, reason=str(exc))
        return IntentOutcome.skipped(operation, exc)
