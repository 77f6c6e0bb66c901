"""Async HTTP client for the manifest backend's command endpoint."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import httpx
import structlog

from depo_client.core.config import GatewaySettings
from depo_client.gateway.base import GatewayError
from depo_client.models.dependency import DependencyRecord, dependency_map, dependency_records

log = structlog.get_logger("depo_client.gateway")

_COMMAND_PREFIX = "/commands/"

T = TypeVar("T")


class HttpCommandGateway:
    """Thin async wrapper around ``POST /commands/{command}``.

    No retries: a failed call is reported once and the user re-triggers it.
    """

    def __init__(
        self,
        settings: GatewaySettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = settings or GatewaySettings.from_env()
        headers: dict[str, str] = {"Accept": "application/json"}
        if settings.token:
            headers["Authorization"] = f"Bearer {settings.token}"
        self._client = httpx.AsyncClient(
            base_url=settings.backend_url,
            headers=headers,
            timeout=settings.timeout,
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpCommandGateway:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── commands ───────────────────────────────────────────────────────────

    async def init(self, project_path: str) -> None:
        await self._invoke("init", path=project_path)

    async def get_project_dependencies(self, project_path: str) -> dict[str, DependencyRecord]:
        data = await self._invoke("get_project_deps", path=project_path)
        return self._parse("get_project_deps", data, dependency_map)

    async def find_dependency(self, project_path: str, query: str) -> list[DependencyRecord]:
        data = await self._invoke("find_dependency", path=project_path, name=query)
        return self._parse("find_dependency", data, dependency_records)

    async def add_dependency(self, project_path: str, record: DependencyRecord) -> None:
        await self._invoke("add_dependency", path=project_path, dep=record.to_payload())

    async def delete_dependency(self, project_path: str, name: str) -> None:
        await self._invoke("delete_dependency", path=project_path, name=name)

    async def update_dependency(self, project_path: str, name: str) -> None:
        await self._invoke("update_dependency", path=project_path, name=name)

    async def modify_dependency_constraint(
        self, project_path: str, name: str, new_constraint: str
    ) -> None:
        await self._invoke(
            "modify_dependency_constraint",
            path=project_path,
            name=name,
            constraint=new_constraint,
        )

    async def remove_dependency_constraint(self, project_path: str, name: str) -> None:
        await self._invoke("remove_dependency_constraint", path=project_path, name=name)

    async def build_dependencies(self, project_path: str) -> None:
        await self._invoke("build_dependencies", path=project_path)

    async def install_dependencies(self, project_path: str) -> None:
        await self._invoke("install_dependencies", path=project_path)

    # ── internal ───────────────────────────────────────────────────────────

    async def _invoke(self, command: str, **args: Any) -> Any:
        """POST *args* as JSON and return the decoded result (``None`` if empty)."""
        log.debug("gateway.request", command=command)
        try:
            resp = await self._client.post(f"{_COMMAND_PREFIX}{command}", json=args)
        except httpx.HTTPError as exc:
            log.warning("gateway.transport_error", command=command, error=str(exc))
            raise GatewayError(f"{command}: {exc}", command=command) from exc

        if resp.status_code >= 400:
            message = self._error_message(resp)
            log.warning("gateway.command_failed", command=command, status=resp.status_code)
            raise GatewayError(message, command=command)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise GatewayError(f"{command}: response is not valid JSON", command=command) from exc

    @staticmethod
    def _parse(command: str, data: Any, parser: Callable[[Any], T]) -> T:
        try:
            return parser(data)
        except ValueError as exc:
            raise GatewayError(f"{command}: malformed response: {exc}", command=command) from exc

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract the backend's human-readable message from an error response."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ("error", "detail", "message"):
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value
        if isinstance(body, str) and body:
            return body
        text = response.text.strip()
        return text or f"backend returned HTTP {response.status_code}"
