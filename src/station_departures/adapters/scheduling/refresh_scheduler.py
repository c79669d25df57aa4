"""Refresh scheduler for the currently viewed station."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

from station_departures.domain.contracts.refresh_scheduler import RefreshSchedulerProtocol
from station_departures.domain.models.fetch_error import (
    FetchError,
    MalformedResponse,
    NetworkUnavailable,
)
from station_departures.domain.models.fetch_result import FetchResult
from station_departures.domain.models.subscription_state import (
    SchedulerStatus,
    SubscriptionState,
)

if TYPE_CHECKING:
    from types import TracebackType

    from station_departures.adapters.config.app_config import AppConfig
    from station_departures.domain.contracts.subscription_listener import (
        SubscriptionListenerProtocol,
    )
    from station_departures.domain.models.station_detail import StationDetail
    from station_departures.domain.ports import ScheduleRepository

logger = logging.getLogger(__name__)


def _unexpected_error(error: Exception) -> FetchError:
    """Map an exception that escaped the repository onto the fetch error taxonomy."""
    if isinstance(error, OSError):
        return NetworkUnavailable(f"Unexpected connection error: {error}")
    return MalformedResponse(f"Unexpected error: {error}")


class RefreshTrigger(str, Enum):
    """What caused a fetch to be issued."""

    SUBSCRIBE = "subscribe"
    TIMER = "timer"
    MANUAL = "manual"


@dataclass(eq=False)
class _Subscription:
    """Binding between the scheduler and one station."""

    station_id: str
    station_name: str
    active: bool = True
    timer_task: asyncio.Task | None = None
    fetch_task: asyncio.Task | None = None


class RefreshScheduler(RefreshSchedulerProtocol):
    """Polls one subscribed station and owns its subscription state.

    Timer ticks and manual refreshes go through request_refresh(), which
    allows at most one fetch in flight. Results of fetches belonging to a
    torn-down subscription are discarded.
    """

    def __init__(
        self,
        repository: ScheduleRepository,
        config: AppConfig,
        listener: SubscriptionListenerProtocol | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            repository: Repository used to fetch station details.
            config: Application configuration (refresh interval).
            listener: Optional observer notified after every state change.
        """
        self._repository = repository
        self.config = config
        self.listener = listener
        self._state = SubscriptionState()
        self._subscription: _Subscription | None = None

    @property
    def state(self) -> SubscriptionState:
        return self._state

    @property
    def is_busy(self) -> bool:
        """True while a fetch is in flight for the active subscription."""
        return self._state.is_busy

    async def subscribe(self, station_id: str, station_name: str) -> None:
        """Start polling a station, replacing any previous subscription."""
        if self._subscription is not None:
            await self.unsubscribe()

        subscription = _Subscription(station_id=station_id, station_name=station_name)
        self._subscription = subscription
        self._reset_state(station_id, station_name, SchedulerStatus.LOADING)
        logger.info(f"Subscribed to {station_name} ({station_id})")

        self._start_fetch(subscription, RefreshTrigger.SUBSCRIBE)
        self._notify()
        subscription.timer_task = asyncio.create_task(self._timer_loop(subscription))

    def refresh(self) -> bool:
        """Request a manual refresh (pull to refresh)."""
        return self.request_refresh(RefreshTrigger.MANUAL)

    def request_refresh(self, trigger: RefreshTrigger = RefreshTrigger.MANUAL) -> bool:
        """Issue a fetch unless one is already in flight.

        Args:
            trigger: What requested the refresh (timer tick or user action).

        Returns:
            True if a fetch was issued.
        """
        subscription = self._subscription
        if subscription is None or not subscription.active:
            logger.debug(f"Ignoring {trigger.value} refresh without an active subscription")
            return False

        status = self._state.status
        if status in (SchedulerStatus.LOADING, SchedulerStatus.REFRESHING):
            logger.debug(
                f"Ignoring {trigger.value} refresh for {subscription.station_id}: "
                f"fetch already in flight ({status.value})"
            )
            return False

        # Without prior data a retry is another first load
        if status == SchedulerStatus.READY:
            self._state.status = SchedulerStatus.REFRESHING
        else:
            self._state.status = SchedulerStatus.LOADING
        self._start_fetch(subscription, trigger)
        self._notify()
        return True

    async def unsubscribe(self, station_id: str | None = None) -> None:
        """Stop the timer, abandon any in-flight fetch and return to idle."""
        subscription = self._subscription
        if subscription is None:
            return
        if station_id is not None and station_id != subscription.station_id:
            logger.debug(
                f"Not unsubscribing {station_id}: active subscription is {subscription.station_id}"
            )
            return

        subscription.active = False
        self._subscription = None
        pending = [
            task
            for task in (subscription.timer_task, subscription.fetch_task)
            if task is not None and not task.done()
        ]
        for task in pending:
            task.cancel()

        self._reset_state(None, None, SchedulerStatus.IDLE)
        logger.info(f"Unsubscribed from {subscription.station_name} ({subscription.station_id})")
        self._notify()

        for task in pending:
            try:
                await task
            except asyncio.CancelledError:
                logger.debug(f"Cancelled task for {subscription.station_id}")

    async def wait_for_fetch(self) -> None:
        """Wait until the in-flight fetch (if any) has completed or been abandoned."""
        subscription = self._subscription
        if subscription is None or subscription.fetch_task is None:
            return
        if not subscription.fetch_task.done():
            await asyncio.wait({subscription.fetch_task})

    async def close(self) -> None:
        await self.unsubscribe()

    async def __aenter__(self) -> RefreshScheduler:
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _reset_state(
        self, station_id: str | None, station_name: str | None, status: SchedulerStatus
    ) -> None:
        state = self._state
        state.station_id = station_id
        state.station_name = station_name
        state.status = status
        state.detail = None
        state.title = None
        state.last_update = None
        state.last_error = None
        state.fetch_count = 0

    def _start_fetch(self, subscription: _Subscription, trigger: RefreshTrigger) -> None:
        self._state.fetch_count += 1
        logger.debug(
            f"Fetching {subscription.station_id} ({trigger.value}, "
            f"fetch #{self._state.fetch_count})"
        )
        subscription.fetch_task = asyncio.create_task(self._fetch(subscription, trigger))

    async def _fetch(self, subscription: _Subscription, trigger: RefreshTrigger) -> None:
        result: FetchResult[StationDetail]
        try:
            result = await self._repository.fetch_station_detail(subscription.station_id)
        except Exception as e:
            # The repository contract is to return failures; keep the state machine moving anyway
            logger.error(
                f"Unexpected error fetching {subscription.station_id}: {e}",
                exc_info=True,
            )
            result = FetchResult.failure(_unexpected_error(e))

        if not subscription.active or subscription is not self._subscription:
            logger.debug(f"Discarding late result for {subscription.station_id}")
            return

        self._apply_result(subscription, result, trigger)

    def _apply_result(
        self,
        subscription: _Subscription,
        result: FetchResult[StationDetail],
        trigger: RefreshTrigger,
    ) -> None:
        state = self._state
        if result.error is None:
            detail = result.unwrap()
            state.detail = detail
            state.title = subscription.station_name
            state.status = SchedulerStatus.READY
            state.last_update = datetime.now(UTC)
            state.last_error = None
            logger.debug(
                f"Updated {subscription.station_id} with {len(detail.routes)} routes "
                f"({trigger.value})"
            )
        elif state.detail is not None:
            # Refresh is best-effort: keep last known good data
            state.status = SchedulerStatus.READY
            state.last_error = result.error
            logger.warning(
                f"Refresh of {subscription.station_id} failed, keeping stale data: {result.error}"
            )
        else:
            state.status = SchedulerStatus.FAILED
            state.last_error = result.error
            logger.error(f"Loading {subscription.station_id} failed: {result.error}")

        self._notify()

    async def _timer_loop(self, subscription: _Subscription) -> None:
        """Fire refresh ticks at fixed offsets from the subscription start."""
        loop = asyncio.get_running_loop()
        period = self.config.refresh_interval_seconds
        started = loop.time()
        tick = 0
        try:
            while subscription.active:
                # Skip ticks missed while the loop was blocked instead of bursting
                tick = max(tick + 1, int((loop.time() - started) // period) + 1)
                await asyncio.sleep(max(0.0, started + tick * period - loop.time()))
                if not subscription.active:
                    break
                self.request_refresh(RefreshTrigger.TIMER)
        except asyncio.CancelledError:
            logger.debug(f"Refresh timer for {subscription.station_id} cancelled")
            raise

    def _notify(self) -> None:
        if self.listener is None:
            return
        try:
            self.listener.on_state_changed(self._state)
        except Exception as e:
            logger.error(f"Subscription listener failed: {e}", exc_info=True)
