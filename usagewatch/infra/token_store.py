"""Persistence for the manually configured session token."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from usagewatch.config import AppConfig, set_value

logger = logging.getLogger(__name__)


@runtime_checkable
class TokenStore(Protocol):
    """Protocol for storing a manually entered session token."""

    def load(self) -> str:
        """Return the stored token, or an empty string."""
        ...

    def save(self, token: str) -> None:
        """Persist *token* for reuse."""
        ...

    def clear(self) -> None:
        """Forget the stored token."""
        ...


class ConfigTokenStore:
    """Keeps the token in the ``[auth]`` table of the TOML config file."""

    KEY = "auth.session_token"

    def __init__(self, config: AppConfig) -> None:
        self._config = config

    @property
    def path(self) -> Path:
        return self._config.config_path

    def load(self) -> str:
        return self._config.auth.session_token

    def save(self, token: str) -> None:
        set_value(self.KEY, token, self.path)
        self._config.auth.session_token = token
        logger.info("Session token saved to %s", self.path)

    def clear(self) -> None:
        set_value(self.KEY, "", self.path)
        self._config.auth.session_token = ""
        logger.info("Session token cleared from %s", self.path)

