"""Tests for RefreshScheduler state machine."""

import asyncio
import copy
from unittest.mock import MagicMock

import pytest

from station_departures.adapters.config import AppConfig
from station_departures.adapters.scheduling import RefreshScheduler, RefreshTrigger
from station_departures.domain.models import (
    FetchResult,
    MalformedResponse,
    NetworkUnavailable,
    SchedulerStatus,
    SubscriptionState,
)
from tests.builders import FakeScheduleRepository, make_detail, make_entry


@pytest.fixture
def config() -> AppConfig:
    """Config whose timer never fires during a test unless overridden."""
    return AppConfig.for_testing(refresh_interval_seconds=3600)


class RecordingListener:
    """Listener recording every status it is notified with."""

    def __init__(self) -> None:
        self.statuses: list[SchedulerStatus] = []

    def on_state_changed(self, state: SubscriptionState) -> None:
        self.statuses.append(state.status)


@pytest.mark.asyncio
async def test_subscribe_loads_then_becomes_ready(config: AppConfig) -> None:
    """Given a reachable provider, when subscribing, then Loading then Ready with data."""
    repo = FakeScheduleRepository()
    listener = RecordingListener()
    scheduler = RefreshScheduler(repo, config, listener)

    await scheduler.subscribe("A", "Central")
    assert scheduler.state.status == SchedulerStatus.LOADING
    assert scheduler.state.title is None

    await scheduler.wait_for_fetch()

    state = scheduler.state
    assert state.status == SchedulerStatus.READY
    assert state.detail == make_detail(station_id="A")
    assert state.title == "Central"
    assert state.last_update is not None
    assert repo.detail_calls == ["A"]
    assert listener.statuses == [SchedulerStatus.LOADING, SchedulerStatus.READY]
    await scheduler.close()


@pytest.mark.asyncio
async def test_first_load_failure_then_manual_retry_succeeds(config: AppConfig) -> None:
    """Given a failing first fetch, when retrying manually, then Failed becomes Ready."""
    detail = make_detail(station_id="A")
    repo = FakeScheduleRepository(
        results=[
            FetchResult.failure(NetworkUnavailable("Connection failed")),
            FetchResult.success(detail),
        ]
    )
    scheduler = RefreshScheduler(repo, config)

    await scheduler.subscribe("A", "Central")
    await scheduler.wait_for_fetch()

    assert scheduler.state.status == SchedulerStatus.FAILED
    assert scheduler.state.detail is None
    assert isinstance(scheduler.state.last_error, NetworkUnavailable)
    assert scheduler.is_busy is False

    assert scheduler.refresh() is True
    assert scheduler.state.status == SchedulerStatus.LOADING
    await scheduler.wait_for_fetch()

    assert scheduler.state.status == SchedulerStatus.READY
    assert scheduler.state.detail is detail
    assert scheduler.state.last_error is None
    await scheduler.close()


@pytest.mark.asyncio
async def test_refresh_failure_keeps_stale_data(config: AppConfig) -> None:
    """Given loaded data, when a refresh fails, then Ready with the previous data."""
    first = make_detail(routes=(make_entry(short_name="101"),))
    repo = FakeScheduleRepository(
        results=[FetchResult.success(first), FetchResult.failure(MalformedResponse("bad"))]
    )
    scheduler = RefreshScheduler(repo, config)
    await scheduler.subscribe("A", "Central")
    await scheduler.wait_for_fetch()

    assert scheduler.refresh() is True
    assert scheduler.state.status == SchedulerStatus.REFRESHING
    await scheduler.wait_for_fetch()

    assert scheduler.state.status == SchedulerStatus.READY
    assert scheduler.state.detail is first
    assert isinstance(scheduler.state.last_error, MalformedResponse)
    assert scheduler.is_busy is False
    await scheduler.close()


@pytest.mark.asyncio
async def test_refresh_success_replaces_data_wholesale(config: AppConfig) -> None:
    """Given loaded data, when a refresh succeeds, then the new detail replaces the old one."""
    first = make_detail(routes=(make_entry(short_name="101"),))
    second = make_detail(routes=(make_entry(short_name="202"), make_entry(short_name="303")))
    repo = FakeScheduleRepository(results=[FetchResult.success(first), FetchResult.success(second)])
    scheduler = RefreshScheduler(repo, config)
    await scheduler.subscribe("A", "Central")
    await scheduler.wait_for_fetch()

    scheduler.refresh()
    await scheduler.wait_for_fetch()

    assert scheduler.state.detail is second
    await scheduler.close()


@pytest.mark.asyncio
async def test_timer_tick_then_manual_refresh_issues_one_fetch(config: AppConfig) -> None:
    """Given Ready, when a tick is followed by a manual refresh, then exactly one fetch is issued."""
    repo = FakeScheduleRepository(gated=True)
    scheduler = RefreshScheduler(repo, config)
    await scheduler.subscribe("A", "Central")
    repo.release()
    await scheduler.wait_for_fetch()
    assert scheduler.state.status == SchedulerStatus.READY

    assert scheduler.request_refresh(RefreshTrigger.TIMER) is True
    assert scheduler.refresh() is False
    await asyncio.sleep(0)

    assert scheduler.state.status == SchedulerStatus.REFRESHING
    assert len(repo.detail_calls) == 2
    assert scheduler.state.fetch_count == 2

    repo.release()
    await scheduler.wait_for_fetch()
    assert scheduler.state.status == SchedulerStatus.READY
    await scheduler.close()


@pytest.mark.asyncio
async def test_refresh_while_loading_is_noop(config: AppConfig) -> None:
    """Given a first load in flight, when refreshing, then no second fetch is queued."""
    repo = FakeScheduleRepository(gated=True)
    scheduler = RefreshScheduler(repo, config)
    await scheduler.subscribe("A", "Central")

    assert scheduler.refresh() is False
    assert scheduler.request_refresh(RefreshTrigger.TIMER) is False

    repo.release()
    await scheduler.wait_for_fetch()
    assert repo.detail_calls == ["A"]
    await scheduler.close()


@pytest.mark.asyncio
async def test_refresh_without_subscription_is_noop(config: AppConfig) -> None:
    """Given no subscription, when refreshing, then nothing is fetched."""
    repo = FakeScheduleRepository()
    scheduler = RefreshScheduler(repo, config)

    assert scheduler.refresh() is False
    assert repo.detail_calls == []
    assert scheduler.state.status == SchedulerStatus.IDLE


@pytest.mark.asyncio
async def test_unsubscribe_discards_late_result(config: AppConfig) -> None:
    """Given a fetch in flight, when unsubscribing and the fetch completes, then state is untouched."""

    class LateRepository(FakeScheduleRepository):
        async def fetch_station_detail(self, station_id: str) -> FetchResult:
            self.detail_calls.append(station_id)
            try:
                await self._gate.wait()
            except asyncio.CancelledError:
                # Complete anyway once released, as a slow transport would
                await self._gate.wait()
            return FetchResult.success(make_detail(station_id=station_id))

    repo = LateRepository()
    listener = RecordingListener()
    scheduler = RefreshScheduler(repo, config, listener)
    await scheduler.subscribe("A", "Central")
    await asyncio.sleep(0)

    unsubscribing = asyncio.create_task(scheduler.unsubscribe("A"))
    await asyncio.sleep(0)
    snapshot = copy.copy(scheduler.state)
    notifications = len(listener.statuses)
    assert snapshot.status == SchedulerStatus.IDLE

    repo.release()
    await unsubscribing

    assert scheduler.state == snapshot
    assert scheduler.state.detail is None
    assert len(listener.statuses) == notifications


@pytest.mark.asyncio
async def test_unsubscribe_cancels_in_flight_fetch_and_timer(config: AppConfig) -> None:
    """Given an active subscription, when unsubscribing, then fetch and timer tasks stop."""
    repo = FakeScheduleRepository(gated=True)
    scheduler = RefreshScheduler(repo, config)
    await scheduler.subscribe("A", "Central")
    subscription = scheduler._subscription
    assert subscription is not None

    await scheduler.unsubscribe()

    assert subscription.fetch_task is not None and subscription.fetch_task.cancelled()
    assert subscription.timer_task is not None and subscription.timer_task.done()
    assert scheduler.state.status == SchedulerStatus.IDLE
    assert scheduler.refresh() is False


@pytest.mark.asyncio
async def test_unsubscribe_other_station_is_noop(config: AppConfig) -> None:
    """Given a subscription to A, when unsubscribing B, then A stays subscribed."""
    scheduler = RefreshScheduler(FakeScheduleRepository(), config)
    await scheduler.subscribe("A", "Central")
    await scheduler.wait_for_fetch()

    await scheduler.unsubscribe("B")

    assert scheduler.state.station_id == "A"
    assert scheduler.state.status == SchedulerStatus.READY
    await scheduler.close()


@pytest.mark.asyncio
async def test_resubscribe_replaces_previous_subscription(config: AppConfig) -> None:
    """Given a pending fetch for A, when subscribing to B, then only B's data is applied."""
    repo = FakeScheduleRepository(gated=True)
    scheduler = RefreshScheduler(repo, config)
    await scheduler.subscribe("A", "Central")
    await asyncio.sleep(0)

    await scheduler.subscribe("B", "Eastside")
    repo.release()
    await scheduler.wait_for_fetch()

    assert scheduler.state.station_id == "B"
    assert scheduler.state.title == "Eastside"
    assert scheduler.state.detail is not None and scheduler.state.detail.id == "B"
    assert repo.detail_calls == ["A", "B"]
    await scheduler.close()


@pytest.mark.asyncio
async def test_timer_refreshes_periodically() -> None:
    """Given a short interval, when time passes, then the timer issues refreshes."""
    config = AppConfig.for_testing(refresh_interval_seconds=0.05)
    repo = FakeScheduleRepository()
    scheduler = RefreshScheduler(repo, config)

    await scheduler.subscribe("A", "Central")
    await asyncio.sleep(0.18)
    await scheduler.close()

    # Initial load plus ticks at 0.05, 0.10 and 0.15 seconds
    assert 3 <= len(repo.detail_calls) <= 4


@pytest.mark.asyncio
async def test_timer_cadence_ignores_fetch_latency() -> None:
    """Given fetches taking most of the period, when time passes, then each fetch
    starts at a multiple of the period from subscribe."""
    period = 0.1
    latency = 0.06
    loop = asyncio.get_running_loop()
    starts: list[float] = []

    class SlowRepository(FakeScheduleRepository):
        async def fetch_station_detail(self, station_id: str) -> FetchResult:
            starts.append(loop.time())
            await asyncio.sleep(latency)
            return await super().fetch_station_detail(station_id)

    scheduler = RefreshScheduler(
        SlowRepository(), AppConfig.for_testing(refresh_interval_seconds=period)
    )

    subscribed_at = loop.time()
    await scheduler.subscribe("A", "Central")
    await asyncio.sleep(3.5 * period)
    await scheduler.close()

    assert len(starts) >= 4
    for tick, started in enumerate(starts[1:4], start=1):
        # Completion plus one period would land `latency` later than the tick
        assert abs((started - subscribed_at) - tick * period) < latency / 2


@pytest.mark.asyncio
async def test_timer_skips_tick_while_fetch_in_flight() -> None:
    """Given a fetch that never completes, when ticks fire, then no extra fetch is issued."""
    config = AppConfig.for_testing(refresh_interval_seconds=0.02)
    repo = FakeScheduleRepository(gated=True)
    scheduler = RefreshScheduler(repo, config)

    await scheduler.subscribe("A", "Central")
    await asyncio.sleep(0.1)

    assert repo.detail_calls == ["A"]
    await scheduler.close()


@pytest.mark.asyncio
async def test_unexpected_repository_error_does_not_leave_scheduler_busy(
    config: AppConfig,
) -> None:
    """Given a repository raising instead of returning, when fetching, then state leaves Loading."""
    repo = MagicMock()

    async def broken_fetch(station_id: str) -> FetchResult:  # noqa: ARG001
        raise RuntimeError("boom")

    repo.fetch_station_detail = broken_fetch
    scheduler = RefreshScheduler(repo, config)

    await scheduler.subscribe("A", "Central")
    await scheduler.wait_for_fetch()

    assert scheduler.state.status == SchedulerStatus.FAILED
    assert isinstance(scheduler.state.last_error, MalformedResponse)
    assert scheduler.state.last_error.details.kind == "malformed_response"
    assert scheduler.is_busy is False
    await scheduler.close()


@pytest.mark.asyncio
async def test_unexpected_connection_error_is_reported_as_network_unavailable(
    config: AppConfig,
) -> None:
    """Given a repository leaking an OSError, when fetching, then NetworkUnavailable is recorded."""
    repo = MagicMock()

    async def broken_fetch(station_id: str) -> FetchResult:  # noqa: ARG001
        raise ConnectionResetError("reset by peer")

    repo.fetch_station_detail = broken_fetch
    scheduler = RefreshScheduler(repo, config)

    await scheduler.subscribe("A", "Central")
    await scheduler.wait_for_fetch()

    assert scheduler.state.status == SchedulerStatus.FAILED
    assert isinstance(scheduler.state.last_error, NetworkUnavailable)
    await scheduler.close()


@pytest.mark.asyncio
async def test_listener_errors_do_not_break_scheduler(config: AppConfig) -> None:
    """Given a failing listener, when state changes, then the scheduler keeps working."""
    listener = MagicMock()
    listener.on_state_changed.side_effect = RuntimeError("render failed")
    scheduler = RefreshScheduler(FakeScheduleRepository(), config, listener)

    await scheduler.subscribe("A", "Central")
    await scheduler.wait_for_fetch()

    assert scheduler.state.status == SchedulerStatus.READY
    assert listener.on_state_changed.call_count == 2
    await scheduler.close()


@pytest.mark.asyncio
async def test_context_manager_unsubscribes_on_exit(config: AppConfig) -> None:
    """Given a scheduler used as context manager, when the block exits, then it is idle."""
    async with RefreshScheduler(FakeScheduleRepository(), config) as scheduler:
        await scheduler.subscribe("A", "Central")
        await scheduler.wait_for_fetch()

    assert scheduler.state.status == SchedulerStatus.IDLE
    assert scheduler._subscription is None
