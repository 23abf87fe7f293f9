"""Refresh scheduler: keeps the published usage state fresh.

One scheduler owns one timer task and at most one in-flight refresh cycle.
A cycle resolves the credential, fetches the raw records, normalizes and
classifies them and then replaces the published PresentationState in a
single assignment, so consumers only ever see complete snapshots.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from usagewatch.infra.credentials import CredentialResolver
from usagewatch.infra.usage_client import UsageApiError, UsageClient
from usagewatch.models.state import PresentationState, RefreshState
from usagewatch.models.usage import TimeRange
from usagewatch.services.classifier import classify
from usagewatch.services.normalizer import normalize_all

logger = logging.getLogger(__name__)

StateListener = Callable[[PresentationState], None]


class RefreshScheduler:
    """Runs refresh cycles on start, on a timer and on request."""

    def __init__(
        self,
        resolver: CredentialResolver,
        client: UsageClient,
        interval: float = 30,
        time_range: TimeRange = TimeRange.LAST_24H,
    ) -> None:
        self._resolver = resolver
        self._client = client
        self._interval = max(interval, 0)
        self._time_range = time_range
        self._state = PresentationState.loading(time_range)
        self._listeners: list[StateListener] = []
        self._timer_task: asyncio.Task | None = None
        self._cycle_task: asyncio.Task | None = None
        self._started = False

    # --- Published state ---

    @property
    def current(self) -> PresentationState:
        """The latest complete snapshot."""
        return self._state

    @property
    def state(self) -> RefreshState:
        if self.is_refreshing:
            return RefreshState.LOADING
        if not self._started:
            return RefreshState.IDLE
        return self._state.mode

    @property
    def is_refreshing(self) -> bool:
        return self._cycle_task is not None and not self._cycle_task.done()

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def time_range(self) -> TimeRange:
        return self._time_range

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register *listener* for new snapshots. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self, state: PresentationState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Usage state listener failed")

    # --- Lifecycle ---

    def start(self) -> None:
        """Run the first cycle and arm the periodic timer.

        Must be called from a running event loop.
        """
        if self._started:
            return
        self._started = True
        self.request_refresh()
        self._rearm_timer()
        logger.info(
            "Refresh scheduler started (interval=%ss, range=%s)",
            self._interval, self._time_range.value,
        )

    async def stop(self) -> None:
        """Cancel the timer and any in-flight cycle."""
        self._started = False
        self._cancel_timer()
        if self._cycle_task is not None and not self._cycle_task.done():
            self._cycle_task.cancel()
            try:
                await self._cycle_task
            except asyncio.CancelledError:
                pass
        self._cycle_task = None
        logger.info("Refresh scheduler stopped")

    # --- Triggers ---

    def request_refresh(self) -> asyncio.Task | None:
        """Start a cycle unless one is already running.

        Returns the new cycle task, or None when the request was a no-op.
        """
        if self.is_refreshing:
            logger.debug("Refresh already in progress, ignoring request")
            return None
        self._cycle_task = asyncio.ensure_future(self._run_cycle())
        return self._cycle_task

    async def refresh(self) -> PresentationState:
        """Run a cycle (or join the running one) and return the result."""
        task = self.request_refresh() or self._cycle_task
        if task is not None:
            await task
        return self._state

    def set_interval(self, seconds: float) -> None:
        """Change the auto-refresh interval; 0 disables auto refresh.

        The pending timer is cancelled before the new one is armed, so the
        old interval never fires after this call.
        """
        seconds = max(seconds, 0)
        if seconds == self._interval and (self._timer_task is not None or seconds == 0):
            return
        logger.info("Refresh interval changed: %ss -> %ss", self._interval, seconds)
        self._interval = seconds
        if self._started:
            self._rearm_timer()

    def set_time_range(self, time_range: TimeRange) -> None:
        """Use *time_range* as the lookback window from the next cycle on."""
        self._time_range = time_range

    # --- Timer ---

    def _cancel_timer(self) -> None:
        if self._timer_task is not None:
            self._timer_task.cancel()
            self._timer_task = None

    def _rearm_timer(self) -> None:
        self._cancel_timer()
        if self._interval > 0:
            self._timer_task = asyncio.ensure_future(self._timer_loop(self._interval))

    async def _timer_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            logger.debug("Auto refresh timer fired (%ss)", interval)
            self.request_refresh()

    # --- Cycle ---

    async def _run_cycle(self) -> None:
        state = await self._load_state()
        self._publish(state)

    async def _load_state(self) -> PresentationState:
        time_range = self._time_range
        try:
            credential = await self._resolver.resolve()
            if not credential:
                logger.info("No session token configured")
                return PresentationState.no_credential(time_range)

            records = await self._client.fetch_records(credential, time_range)
        except UsageApiError as e:
            logger.warning("Failed to fetch usage data: %s", e)
            return PresentationState.error(time_range)
        except Exception:
            logger.exception("Unexpected error during usage refresh")
            return PresentationState.error(time_range)

        events = normalize_all(records)
        latest = events[0] if events else None
        logger.debug("Refresh cycle loaded %d events", len(events))
        return PresentationState(
            mode=RefreshState.READY,
            latest_event=latest,
            recent_events=tuple(events),
            latest_classification=classify(latest) if latest else None,
            time_range=time_range,
            updated_at=datetime.now(timezone.utc),
        )
