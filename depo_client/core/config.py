"""Gateway settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_BACKEND_URL = "http://127.0.0.1:7878"

# Checked in order; GITHUB_TOKEN lets the backend reach private repositories.
TOKEN_VARIABLES = ("DEPO_BACKEND_TOKEN", "GITHUB_TOKEN")

_NO_TIMEOUT = {"", "none", "0"}


@dataclass(frozen=True)
class GatewaySettings:
    """Connection settings for the command backend."""

    backend_url: str = DEFAULT_BACKEND_URL
    timeout: float | None = None
    token: str | None = None

    @classmethod
    def from_env(cls) -> GatewaySettings:
        """Build settings from ``DEPO_*`` environment variables.

        DEPO_BACKEND_URL     — backend base URL
        DEPO_BACKEND_TIMEOUT — seconds; unset / "none" / "0" waits forever
        DEPO_BACKEND_TOKEN   — bearer token (falls back to GITHUB_TOKEN)
        """
        url = os.environ.get("DEPO_BACKEND_URL", DEFAULT_BACKEND_URL).strip().rstrip("/")
        _, token = configured_token()
        return cls(
            backend_url=url or DEFAULT_BACKEND_URL,
            timeout=_parse_timeout(os.environ.get("DEPO_BACKEND_TIMEOUT")),
            token=token,
        )


def configured_token() -> tuple[str | None, str | None]:
    """Return ``(variable, token)`` for the first non-empty token variable."""
    for name in TOKEN_VARIABLES:
        value = os.environ.get(name, "").strip()
        if value:
            return name, value
    return None, None


def _parse_timeout(raw: str | None) -> float | None:
    if raw is None or raw.strip().lower() in _NO_TIMEOUT:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"DEPO_BACKEND_TIMEOUT must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"DEPO_BACKEND_TIMEOUT must be >= 0, got {raw!r}")
    return value
