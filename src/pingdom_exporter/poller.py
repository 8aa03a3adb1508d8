"""
Pingdom Poller

Fetch-map-publish loop. Every `interval` seconds the poller lists all
checks (with tags), translates each one and writes the result through the
MetricSink. A failed fetch only flips the liveness gauge to 0; per-check
series keep their last published values until the next successful cycle.
"""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Protocol

from pingdom_exporter.client import CheckRecord
from pingdom_exporter.errors import FetchError
from pingdom_exporter.logging_config import get_logger, log_error
from pingdom_exporter.mapper import CheckSample, map_check
from pingdom_exporter.metrics import (
    PINGDOM_UP,
    CHECK_STATUS,
    CHECK_RESPONSE_TIME,
    CHECK_RESPONSE_TIME_HISTOGRAM,
    CHECK_STATUS_HISTOGRAM,
)
from pingdom_exporter.sinks import MetricSink

logger = logging.getLogger(__name__)
events = get_logger(__name__)


class CheckSource(Protocol):
    async def list_checks(self, include_tags: bool = True) -> List[CheckRecord]:
        ...


class Poller:
    """
    Owns the polling loop for the lifetime of the process.

    There is no stop method: the loop ends when the task is cancelled or
    the process exits.
    """

    def __init__(
        self,
        client: CheckSource,
        sink: MetricSink,
        interval: float = 10.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Args:
            client: Source of check records (PingdomClient in production)
            sink: Where series values are published
            interval: Seconds to sleep after every cycle, failed or not
            sleep: Awaitable sleep, replaceable in tests
        """
        self.client = client
        self.sink = sink
        self.interval = interval
        self._sleep = sleep

        self.cycles = 0
        self.consecutive_failures = 0
        self.last_success: Optional[datetime] = None

    async def poll_once(self) -> bool:
        """
        Run one fetch-map-publish cycle.

        Returns:
            True if the fetch succeeded and every check was published
        """
        self.cycles += 1
        try:
            checks = await self.client.list_checks(include_tags=True)
        except FetchError as e:
            self.consecutive_failures += 1
            log_error(
                events, e, "poll_cycle_failed",
                consecutive_failures=self.consecutive_failures,
            )
            self.sink.set_gauge(PINGDOM_UP, None, 0)
            return False

        self.sink.set_gauge(PINGDOM_UP, None, 1)
        for check in checks:
            self.publish(map_check(check))

        self.consecutive_failures = 0
        self.last_success = datetime.now()
        events.debug("poll_cycle_complete", checks=len(checks))
        return True

    def publish(self, sample: CheckSample) -> None:
        """Write one check's values to all four per-check series."""
        labels = sample.labels
        self.sink.set_gauge(CHECK_STATUS, labels, sample.status_code)
        self.sink.set_gauge(CHECK_RESPONSE_TIME, labels, sample.response_time_ms)
        self.sink.observe(CHECK_RESPONSE_TIME_HISTOGRAM, labels, sample.response_time_ms)
        self.sink.observe(CHECK_STATUS_HISTOGRAM, labels, sample.up_down)

    async def run(self) -> None:
        """Poll forever at a fixed interval."""
        logger.info(f"Polling Pingdom every {self.interval}s")
        while True:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.consecutive_failures += 1
                logger.error(f"Poll cycle crashed: {e}", exc_info=True)
                self.sink.set_gauge(PINGDOM_UP, None, 0)
            await self._sleep(self.interval)
