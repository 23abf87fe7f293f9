"""Shared fixtures: isolate tests from the user's config and environment."""

from __future__ import annotations

import pytest

from usagewatch.config import load_config
from usagewatch.infra.token_store import ConfigTokenStore


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the default config path at a temp dir and clear env overrides."""
    path = tmp_path / "usagewatch" / "config.toml"
    monkeypatch.setattr("usagewatch.config.DEFAULT_CONFIG_PATH", path)
    monkeypatch.delenv("USAGEWATCH_SESSION_TOKEN", raising=False)
    monkeypatch.delenv("USAGEWATCH_REFRESH_INTERVAL", raising=False)
    return path


@pytest.fixture
def token_store(tmp_path):
    """Factory for a ConfigTokenStore backed by a temp config file."""

    def _make(token: str = "") -> ConfigTokenStore:
        config = load_config(tmp_path / "store.toml")
        config.auth.session_token = token
        return ConfigTokenStore(config)

    return _make
