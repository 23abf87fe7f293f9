"""Configuration loading: TOML file + environment variable overlay."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

import tomli_w

from usagewatch.models.usage import TimeRange

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "usagewatch"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.toml"

DEFAULT_API_URL = "https://cursor.com/api/dashboard/get-filtered-usage-events"
DEFAULT_COOKIE_NAME = "SESSION"
DEFAULT_REFRESH_INTERVAL = 30

DEFAULT_CONFIG_TOML = """\
[auth]
# Leave empty to discover the token from the editor's local state database
session_token = ""
state_db_path = ""

[refresh]
# Seconds between automatic refreshes, 0 disables auto refresh
interval = 30
lookback = "last24h"

[api]
url = "https://cursor.com/api/dashboard/get-filtered-usage-events"
timeout = 30.0
cookie_name = "SESSION"
"""


@dataclass
class AuthConfig:
    session_token: str = ""
    state_db_path: str = ""


@dataclass
class RefreshConfig:
    interval: int = DEFAULT_REFRESH_INTERVAL
    lookback: TimeRange = TimeRange.LAST_24H


@dataclass
class ApiConfig:
    url: str = DEFAULT_API_URL
    timeout: float = 30.0
    cookie_name: str = DEFAULT_COOKIE_NAME


@dataclass
class AppConfig:
    auth: AuthConfig = field(default_factory=AuthConfig)
    refresh: RefreshConfig = field(default_factory=RefreshConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    config_path: Path = DEFAULT_CONFIG_PATH

    @property
    def resolved_state_db_path(self) -> Path | None:
        if self.auth.state_db_path:
            return Path(self.auth.state_db_path).expanduser()
        return None


def _parse_interval(value) -> int:
    """Coerce a configured refresh interval; negatives and junk disable it."""
    try:
        seconds = int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid refresh interval %r, using default", value)
        return DEFAULT_REFRESH_INTERVAL
    return max(seconds, 0)


def _parse_lookback(value) -> TimeRange:
    try:
        return TimeRange(value)
    except ValueError:
        logger.warning("Invalid lookback %r, using %s", value, TimeRange.LAST_24H.value)
        return TimeRange.LAST_24H


def _env_overlay(config: AppConfig) -> None:
    """Override config values with environment variables where applicable."""
    if token := os.environ.get("USAGEWATCH_SESSION_TOKEN"):
        config.auth.session_token = token
    if interval := os.environ.get("USAGEWATCH_REFRESH_INTERVAL"):
        config.refresh.interval = _parse_interval(interval)


def read_raw(path: Path) -> dict:
    """Read the TOML document at *path*, or the defaults if it doesn't exist."""
    if path.exists():
        with open(path, "rb") as f:
            return tomllib.load(f)
    return tomllib.loads(DEFAULT_CONFIG_TOML)


def write_raw(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        tomli_w.dump(data, f)


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML file with env var overlay."""
    path = config_path or DEFAULT_CONFIG_PATH
    raw = read_raw(path)

    auth_raw = raw.get("auth", {})
    refresh_raw = raw.get("refresh", {})
    api_raw = raw.get("api", {})

    config = AppConfig(
        auth=AuthConfig(
            session_token=auth_raw.get("session_token", ""),
            state_db_path=auth_raw.get("state_db_path", ""),
        ),
        refresh=RefreshConfig(
            interval=_parse_interval(refresh_raw.get("interval", DEFAULT_REFRESH_INTERVAL)),
            lookback=_parse_lookback(refresh_raw.get("lookback", TimeRange.LAST_24H.value)),
        ),
        api=ApiConfig(
            url=api_raw.get("url", DEFAULT_API_URL),
            timeout=float(api_raw.get("timeout", 30.0)),
            cookie_name=api_raw.get("cookie_name", DEFAULT_COOKIE_NAME),
        ),
        config_path=path,
    )

    _env_overlay(config)
    return config


def init_config(config_path: Path | None = None) -> Path:
    """Create default config file."""
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG_TOML)
    return path


def set_value(key: str, value, config_path: Path | None = None) -> None:
    """Set a dot-separated key (e.g. ``refresh.interval``) in the TOML file."""
    path = config_path or DEFAULT_CONFIG_PATH
    data = read_raw(path)

    parts = key.split(".")
    target = data
    for part in parts[:-1]:
        if part not in target:
            target[part] = {}
        target = target[part]
    target[parts[-1]] = value

    write_raw(path, data)
