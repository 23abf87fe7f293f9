"""AppContext: wires config, credentials, client and scheduler together."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from usagewatch.config import AppConfig, load_config

if TYPE_CHECKING:
    from pathlib import Path

    from usagewatch.infra.credentials import CredentialResolver, TokenPrompt
    from usagewatch.infra.token_store import TokenStore
    from usagewatch.infra.usage_client import UsageClient
    from usagewatch.services.refresh_service import RefreshScheduler

logger = logging.getLogger(__name__)


class AppContext:
    """Central wiring for all application dependencies.

    Lazily builds components on first access. Call `close()` when done to
    stop the scheduler and release the HTTP client.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        config_path: Path | None = None,
        prompt: TokenPrompt | None = None,
    ) -> None:
        self.config = config or load_config(config_path)
        self._prompt = prompt
        self._token_store: TokenStore | None = None
        self._resolver: CredentialResolver | None = None
        self._client: UsageClient | None = None
        self._scheduler: RefreshScheduler | None = None

    async def close(self) -> None:
        """Stop the scheduler and close connections."""
        if self._scheduler is not None:
            await self._scheduler.stop()
        if self._client is not None:
            await self._client.close()
        logger.info("AppContext closed")

    def reload_config(self) -> bool:
        """Re-read the config file and apply refresh settings to the scheduler.

        Returns True if the refresh interval or lookback changed.
        """
        fresh = load_config(self.config.config_path)
        changed = (
            fresh.refresh.interval != self.config.refresh.interval
            or fresh.refresh.lookback != self.config.refresh.lookback
        )
        # Mutate in place: the token store and resolver hold these objects
        self.config.auth.session_token = fresh.auth.session_token
        self.config.refresh.interval = fresh.refresh.interval
        self.config.refresh.lookback = fresh.refresh.lookback

        if changed and self._scheduler is not None:
            self._scheduler.set_time_range(fresh.refresh.lookback)
            self._scheduler.set_interval(fresh.refresh.interval)
        return changed

    @property
    def token_store(self) -> TokenStore:
        if self._token_store is None:
            from usagewatch.infra.token_store import ConfigTokenStore

            self._token_store = ConfigTokenStore(self.config)
        return self._token_store

    @property
    def resolver(self) -> CredentialResolver:
        if self._resolver is None:
            from usagewatch.infra.credentials import CredentialResolver

            self._resolver = CredentialResolver(
                token_store=self.token_store,
                prompt=self._prompt,
                db_path=self.config.resolved_state_db_path,
                cookie_name=self.config.api.cookie_name,
            )
        return self._resolver

    @property
    def client(self) -> UsageClient:
        if self._client is None:
            from usagewatch.infra.usage_client import UsageClient

            self._client = UsageClient(
                url=self.config.api.url,
                timeout=self.config.api.timeout,
            )
        return self._client

    @property
    def scheduler(self) -> RefreshScheduler:
        if self._scheduler is None:
            from usagewatch.services.refresh_service import RefreshScheduler

            self._scheduler = RefreshScheduler(
                resolver=self.resolver,
                client=self.client,
                interval=self.config.refresh.interval,
                time_range=self.config.refresh.lookback,
            )
        return self._scheduler
