"""Tests for GatewaySettings.from_env."""

import os
from unittest.mock import patch

import pytest

from depo_client.core.config import DEFAULT_BACKEND_URL, GatewaySettings, configured_token

_KEYS = ["DEPO_BACKEND_URL", "DEPO_BACKEND_TIMEOUT", "DEPO_BACKEND_TOKEN", "GITHUB_TOKEN"]


def _env(**values: str) -> dict[str, str]:
    env = {k: v for k, v in os.environ.items() if k not in _KEYS}
    env.update(values)
    return env


class TestFromEnv:
    def test_defaults(self):
        with patch.dict(os.environ, _env(), clear=True):
            settings = GatewaySettings.from_env()
        assert settings.backend_url == DEFAULT_BACKEND_URL
        assert settings.timeout is None
        assert settings.token is None

    def test_url_trailing_slash_stripped(self):
        with patch.dict(os.environ, _env(DEPO_BACKEND_URL="http://backend:9000/"), clear=True):
            assert GatewaySettings.from_env().backend_url == "http://backend:9000"

    def test_timeout_parsed(self):
        with patch.dict(os.environ, _env(DEPO_BACKEND_TIMEOUT="12.5"), clear=True):
            assert GatewaySettings.from_env().timeout == 12.5

    @pytest.mark.parametrize("raw", ["", "none", "None", "0"])
    def test_timeout_disabled(self, raw):
        with patch.dict(os.environ, _env(DEPO_BACKEND_TIMEOUT=raw), clear=True):
            assert GatewaySettings.from_env().timeout is None

    def test_invalid_timeout(self):
        with patch.dict(os.environ, _env(DEPO_BACKEND_TIMEOUT="soon"), clear=True):
            with pytest.raises(ValueError, match="DEPO_BACKEND_TIMEOUT"):
                GatewaySettings.from_env()

    def test_negative_timeout(self):
        with patch.dict(os.environ, _env(DEPO_BACKEND_TIMEOUT="-1"), clear=True):
            with pytest.raises(ValueError, match=">= 0"):
                GatewaySettings.from_env()

    def test_token_prefers_backend_token(self):
        env = _env(DEPO_BACKEND_TOKEN="abc", GITHUB_TOKEN="ghp_x")
        with patch.dict(os.environ, env, clear=True):
            assert GatewaySettings.from_env().token == "abc"

    def test_token_falls_back_to_github_token(self):
        with patch.dict(os.environ, _env(GITHUB_TOKEN="ghp_x"), clear=True):
            assert GatewaySettings.from_env().token == "ghp_x"


class TestConfiguredToken:
    def test_reports_variable(self):
        with patch.dict(os.environ, _env(GITHUB_TOKEN=" ghp_x "), clear=True):
            assert configured_token() == ("GITHUB_TOKEN", "ghp_x")

    def test_blank_backend_token_falls_through(self):
        with patch.dict(os.environ, _env(DEPO_BACKEND_TOKEN="  ", GITHUB_TOKEN="ghp_x"), clear=True):
            assert configured_token() == ("GITHUB_TOKEN", "ghp_x")

    def test_none_configured(self):
        with patch.dict(os.environ, _env(), clear=True):
            assert configured_token() == (None, None)
