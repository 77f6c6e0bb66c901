"""Gateway protocol consumed by the services."""

from __future__ import annotations

from typing import Protocol

from depo_client.models.dependency import DependencyRecord


class GatewayError(Exception):
    """A remote command failed; ``str(exc)`` is the backend's message."""

    def __init__(self, message: str, *, command: str | None = None) -> None:
        self.command = command
        super().__init__(message)


class CommandGateway(Protocol):
    """Asynchronous request/response operations exposed by the backend.

    Every method may raise :class:`GatewayError`.
    """

    async def init(self, project_path: str) -> None: ...

    async def get_project_dependencies(self, project_path: str) -> dict[str, DependencyRecord]: ...

    async def find_dependency(
        self, project_path: str, query: str
    ) -> list[DependencyRecord]: ...

    async def add_dependency(self, project_path: str, record: DependencyRecord) -> None: ...

    async def delete_dependency(self, project_path: str, name: str) -> None: ...

    async def update_dependency(self, project_path: str, name: str) -> None: ...

    async def modify_dependency_constraint(
        self, project_path: str, name: str, new_constraint: str
    ) -> None: ...

    async def remove_dependency_constraint(self, project_path: str, name: str) -> None: ...

    async def build_dependencies(self, project_path: str) -> None: ...

    async def install_dependencies(self, project_path: str) -> None: ...
