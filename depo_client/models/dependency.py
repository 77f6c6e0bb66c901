"""Dependency record as reported by the manifest backend."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class DependencyRecord(BaseModel):
    """The client's view of one declared/resolved dependency.

    ``name`` is the identity within a project; every other field may be
    missing or change between refreshes.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    version: str | None = None
    version_constraint: str | None = None
    installed: bool | None = None
    full_name: str | None = None
    url: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("dependency name must not be empty")
        return v

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the backend; unset optional fields are omitted."""
        return self.model_dump(exclude_none=True)

    @property
    def qualified_name(self) -> str:
        """``full_name`` (``owner/repo``) when known, else ``name``."""
        return self.full_name or self.name


def dependency_records(payload: Any) -> list[DependencyRecord]:
    """Normalise a backend collection into a list of records.

    Accepts either a JSON object keyed by name or a JSON array of records.
    Object entries without a ``name`` take their key as the name.
    ``None`` is an empty collection. Names may repeat.

    Raises :class:`ValueError` on an unexpected shape (pydantic's
    ``ValidationError`` is a ``ValueError`` subclass).
    """
    if payload is None:
        return []
    if isinstance(payload, Mapping):
        items: Iterable[Any] = [
            {"name": key, **value} if isinstance(value, Mapping) and "name" not in value else value
            for key, value in payload.items()
        ]
    elif isinstance(payload, list):
        items = payload
    else:
        raise ValueError(f"expected object or array of dependencies, got {type(payload).__name__}")
    return [DependencyRecord.model_validate(item) for item in items]


def dependency_map(payload: Any) -> dict[str, DependencyRecord]:
    """Like :func:`dependency_records`, keyed by name; duplicates raise ``ValueError``."""
    result: dict[str, DependencyRecord] = {}
    for record in dependency_records(payload):
        if record.name in result:
            raise ValueError(f"duplicate dependency name '{record.name}'")
        result[record.name] = record
    return result
