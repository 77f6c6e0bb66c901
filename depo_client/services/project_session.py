"""Project Session State — which project directory is open."""

from __future__ import annotations

import structlog

from depo_client.services import NoActiveProject, PreconditionNotMet, StateInvariantViolation

log = structlog.get_logger("depo_client.service")


class ProjectSession:
    """Holds the active project path. ``Unset`` only at construction."""

    def __init__(self) -> None:
        self._path: str | None = None

    @property
    def path(self) -> str | None:
        return self._path

    def has_project(self) -> bool:
        return self._path is not None

    def require_project(self) -> str:
        """Return the active path or raise :class:`NoActiveProject`."""
        if self._path is None:
            raise NoActiveProject("no project is open")
        return self._path

    def activate(self, path: str) -> bool:
        """Make *path* the active project. Returns True if the project changed."""
        path = path.strip() if path else ""
        if not path:
            raise PreconditionNotMet("project path must not be empty")
        changed = path != self._path
        self._path = path
        if changed:
            log.info("session.project_selected", path=path)
        return changed

    def deselect(self) -> None:
        # Closing a project is not a supported transition.
        raise StateInvariantViolation("closing the active project is not supported")
