"""
Tests for the Pingdom poller.

Tests cover:
- Liveness gauge on success and failure
- Stale-but-present per-check values after a failed fetch
- Publication of every returned check
- Fixed-interval loop
"""

import pytest
from unittest.mock import Mock

from pingdom_exporter.errors import PingdomAPIError, PingdomConnectionError
from pingdom_exporter.metrics import (
    CHECK_RESPONSE_TIME,
    CHECK_RESPONSE_TIME_HISTOGRAM,
    CHECK_STATUS,
    CHECK_STATUS_HISTOGRAM,
    PINGDOM_UP,
)
from pingdom_exporter.poller import Poller
from pingdom_exporter.sinks import MetricSink

from conftest import FakePingdomClient, make_check, sample

SITE_LABELS = {
    "id": "42", "name": "site", "hostname": "x.com",
    "resolution": "5", "paused": "false", "tags": "prod",
}


class StopPolling(Exception):
    pass


# ============================================================================
# SINGLE CYCLE TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_successful_cycle_sets_liveness_and_publishes(prometheus_sink):
    client = FakePingdomClient([make_check()])
    poller = Poller(client, prometheus_sink)

    assert await poller.poll_once() is True

    assert sample(prometheus_sink, PINGDOM_UP) == 1.0
    assert sample(prometheus_sink, CHECK_STATUS, SITE_LABELS) == 2.0
    assert sample(prometheus_sink, CHECK_RESPONSE_TIME, SITE_LABELS) == 733.0
    assert client.calls == [True]


@pytest.mark.asyncio
async def test_failed_cycle_sets_liveness_down(prometheus_sink, fetch_error):
    poller = Poller(FakePingdomClient(fetch_error), prometheus_sink)

    assert await poller.poll_once() is False

    assert sample(prometheus_sink, PINGDOM_UP) == 0.0
    assert poller.consecutive_failures == 1
    assert poller.last_success is None


@pytest.mark.asyncio
async def test_failed_cycle_keeps_previous_check_values(prometheus_sink):
    client = FakePingdomClient(
        [make_check()],
        PingdomAPIError(503, "Service Unavailable"),
    )
    poller = Poller(client, prometheus_sink)

    await poller.poll_once()
    await poller.poll_once()

    assert sample(prometheus_sink, PINGDOM_UP) == 0.0
    assert sample(prometheus_sink, CHECK_STATUS, SITE_LABELS) == 2.0
    assert sample(prometheus_sink, CHECK_RESPONSE_TIME, SITE_LABELS) == 733.0
    assert sample(prometheus_sink, f"{CHECK_STATUS_HISTOGRAM}_count", SITE_LABELS) == 1.0


@pytest.mark.asyncio
async def test_recovery_restores_liveness_and_refreshes(prometheus_sink):
    client = FakePingdomClient(
        [make_check()],
        PingdomConnectionError("timed out"),
        [make_check(status="up", lastresponsetime=120)],
    )
    poller = Poller(client, prometheus_sink)

    for _ in range(3):
        await poller.poll_once()

    assert sample(prometheus_sink, PINGDOM_UP) == 1.0
    assert sample(prometheus_sink, CHECK_STATUS, SITE_LABELS) == 0.0
    assert sample(prometheus_sink, CHECK_RESPONSE_TIME, SITE_LABELS) == 120.0
    assert poller.consecutive_failures == 0
    assert poller.last_success is not None


@pytest.mark.asyncio
async def test_empty_check_list_is_success(prometheus_sink):
    poller = Poller(FakePingdomClient([]), prometheus_sink)

    assert await poller.poll_once() is True
    assert sample(prometheus_sink, PINGDOM_UP) == 1.0


@pytest.mark.asyncio
async def test_every_check_is_published():
    sink = Mock(spec=MetricSink)
    checks = [
        make_check(id=1, status="up"),
        make_check(id=2, status="bogus"),
        make_check(id=3, status="paused"),
    ]
    poller = Poller(FakePingdomClient(checks), sink)

    await poller.poll_once()

    status_writes = [c.args for c in sink.set_gauge.call_args_list if c.args[0] == CHECK_STATUS]
    assert [(labels.id, value) for _, labels, value in status_writes] == [
        ("1", 0), ("2", 100), ("3", -1),
    ]


@pytest.mark.asyncio
async def test_publish_writes_all_four_series():
    sink = Mock(spec=MetricSink)
    poller = Poller(FakePingdomClient([make_check()]), sink)

    await poller.poll_once()

    gauges = {c.args[0]: c.args[2] for c in sink.set_gauge.call_args_list}
    observed = {c.args[0]: c.args[2] for c in sink.observe.call_args_list}
    assert gauges == {PINGDOM_UP: 1, CHECK_STATUS: 2, CHECK_RESPONSE_TIME: 733.0}
    assert observed == {CHECK_RESPONSE_TIME_HISTOGRAM: 733.0, CHECK_STATUS_HISTOGRAM: 0.0}


@pytest.mark.asyncio
async def test_failed_cycle_touches_only_liveness(fetch_error):
    sink = Mock(spec=MetricSink)
    poller = Poller(FakePingdomClient(fetch_error), sink)

    await poller.poll_once()

    sink.set_gauge.assert_called_once_with(PINGDOM_UP, None, 0)
    sink.observe.assert_not_called()


# ============================================================================
# LOOP TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_run_sleeps_fixed_interval_after_each_cycle(prometheus_sink, fetch_error):
    sleeps = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)
        if len(sleeps) == 3:
            raise StopPolling()

    client = FakePingdomClient(fetch_error, fetch_error, [make_check()])
    poller = Poller(client, prometheus_sink, interval=7, sleep=fake_sleep)

    with pytest.raises(StopPolling):
        await poller.run()

    assert sleeps == [7, 7, 7]
    assert len(client.calls) == 3
    assert poller.cycles == 3
    assert sample(prometheus_sink, PINGDOM_UP) == 1.0


@pytest.mark.asyncio
async def test_run_survives_unexpected_error(prometheus_sink):
    liveness = []

    async def fake_sleep(seconds):
        liveness.append(sample(prometheus_sink, PINGDOM_UP))
        if len(liveness) == 3:
            raise StopPolling()

    client = FakePingdomClient([make_check()], TypeError("'int' object is not iterable"),
                               [make_check()])
    poller = Poller(client, prometheus_sink, interval=5, sleep=fake_sleep)

    with pytest.raises(StopPolling):
        await poller.run()

    assert len(client.calls) == 3
    assert liveness == [1.0, 0.0, 1.0]
    assert poller.consecutive_failures == 0
