"""Session credential discovery and resolution.

The credential is the cookie value sent with every usage query. It comes
from, in order of preference:

1. the editor's local state database (``state.vscdb``), which holds the
   signed access token of the logged-in user,
2. a token the user saved earlier (config file or environment),
3. an interactive prompt supplied by the caller.
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import os
import sqlite3
import sys
from collections.abc import Awaitable, Callable
from contextlib import closing
from enum import Enum
from pathlib import Path

from usagewatch.config import DEFAULT_COOKIE_NAME
from usagewatch.infra.token_store import TokenStore

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "cursorAuth/accessToken"
ACCESS_TOKEN_QUERY = "SELECT value FROM ItemTable WHERE key = ?"
USER_ID_SEPARATOR = "::"

TokenPrompt = Callable[[], Awaitable[str | None]]


class CredentialSource(str, Enum):
    DISCOVERED = "discovered"
    STORED = "stored"
    PROMPT = "prompt"
    NONE = "none"


def state_db_path(
    platform: str | None = None,
    home: Path | None = None,
    environ: dict[str, str] | None = None,
) -> Path | None:
    """Return the platform-specific path of the editor's state database.

    Returns None on platforms without a known location.
    """
    platform = platform or sys.platform
    home = home or Path.home()
    environ = os.environ if environ is None else environ
    storage = ("Cursor", "User", "globalStorage", "state.vscdb")

    if platform == "darwin":
        return home.joinpath("Library", "Application Support", *storage)
    if platform == "win32":
        return Path(environ.get("APPDATA", "")).joinpath(*storage)
    if platform.startswith("linux"):
        return home.joinpath(".config", *storage)
    return None


def read_access_token(db_path: Path) -> str | None:
    """Read the stored access token from the state database, read-only."""
    if not db_path.exists():
        return None

    uri = f"{db_path.absolute().as_uri()}?mode=ro"
    try:
        with closing(sqlite3.connect(uri, uri=True)) as conn:
            row = conn.execute(ACCESS_TOKEN_QUERY, (ACCESS_TOKEN_KEY,)).fetchone()
    except sqlite3.Error as e:
        logger.debug("Failed to read access token from %s: %s", db_path, e)
        return None

    if not row or not row[0]:
        return None
    value = row[0]
    if isinstance(value, bytes):
        try:
            value = value.decode("utf-8")
        except UnicodeDecodeError:
            return None
    return str(value).strip() or None


def extract_user_id(token: str) -> str | None:
    """Extract the user id from the ``sub`` claim of a signed token.

    The claim has the form ``"<issuer>|<id>"``.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None

    payload = parts[1]
    try:
        decoded = base64.urlsafe_b64decode(payload + "=" * (-len(payload) % 4))
        claims = json.loads(decoded)
    except (ValueError, UnicodeDecodeError) as e:
        logger.debug("Failed to decode token payload: %s", e)
        return None

    if not isinstance(claims, dict):
        return None
    sub = claims.get("sub")
    if not isinstance(sub, str) or "|" not in sub:
        return None
    return sub.split("|")[1] or None


def build_credential(user_id: str, token: str, cookie_name: str = DEFAULT_COOKIE_NAME) -> str:
    return f"{cookie_name}={user_id}{USER_ID_SEPARATOR}{token}"


def normalize_credential(value: str, cookie_name: str = DEFAULT_COOKIE_NAME) -> str:
    """Ensure a manually supplied value carries the cookie name prefix."""
    value = value.strip()
    prefix = f"{cookie_name}="
    return value if value.startswith(prefix) else prefix + value


def discover_credential(
    db_path: Path | None = None, cookie_name: str = DEFAULT_COOKIE_NAME
) -> str | None:
    """Build a credential from the editor's local state database.

    Every failure yields None; nothing is raised to the caller.
    """
    path = db_path or state_db_path()
    if path is None:
        logger.debug("No known state database location on %s", sys.platform)
        return None

    token = read_access_token(path)
    if not token:
        return None

    user_id = extract_user_id(token)
    if not user_id:
        return None

    return build_credential(user_id, token, cookie_name)


class CredentialResolver:
    """Resolves the session credential from discovery, storage or a prompt."""

    def __init__(
        self,
        token_store: TokenStore,
        prompt: TokenPrompt | None = None,
        db_path: Path | None = None,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        discover: Callable[[Path | None, str], str | None] = discover_credential,
    ) -> None:
        self._store = token_store
        self._prompt = prompt
        self._db_path = db_path
        self._cookie_name = cookie_name
        self._discover = discover
        self._prompt_declined = False
        self.last_source = CredentialSource.NONE

    def reset_prompt(self) -> None:
        """Allow the interactive prompt to be shown again."""
        self._prompt_declined = False

    async def resolve(self) -> str | None:
        """Return the credential, or None if none is configured."""
        try:
            credential = await asyncio.to_thread(
                self._discover, self._db_path, self._cookie_name
            )
        except Exception:
            logger.debug("Token auto-discovery failed", exc_info=True)
            credential = None
        if credential:
            self.last_source = CredentialSource.DISCOVERED
            return credential

        stored = self._store.load()
        if stored and stored.strip():
            self.last_source = CredentialSource.STORED
            return normalize_credential(stored, self._cookie_name)

        if self._prompt is not None and not self._prompt_declined:
            entered = await self._prompt()
            if entered and entered.strip():
                self._store.save(entered.strip())
                self.last_source = CredentialSource.PROMPT
                return normalize_credential(entered, self._cookie_name)
            self._prompt_declined = True

        self.last_source = CredentialSource.NONE
        return None
