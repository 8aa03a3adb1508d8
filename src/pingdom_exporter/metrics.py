"""
Prometheus Series for the Pingdom Exporter

Declares the five exported series:
- Liveness of the last Pingdom API call
- Per-check status and response time gauges
- Per-check response time and up/down histograms

Series are registered once per CollectorRegistry. Each ExporterMetrics
instance owns its registry so tests never collide on duplicate names.
"""

from typing import Dict, Optional, Union

from prometheus_client import (
    CollectorRegistry, Gauge, Histogram,
    generate_latest, CONTENT_TYPE_LATEST
)

# ============================================================================
# Series names and schema
# ============================================================================

PINGDOM_UP = "pingdom_up"
CHECK_STATUS = "pingdom_check_status"
CHECK_RESPONSE_TIME = "pingdom_check_response_time"
CHECK_RESPONSE_TIME_HISTOGRAM = "pingdom_check_response_time_histogram"
CHECK_STATUS_HISTOGRAM = "pingdom_check_status_histogram"

CHECK_LABEL_NAMES = ("id", "name", "hostname", "resolution", "paused", "tags")

RESPONSE_TIME_BUCKETS = (100, 250, 500, 1000, 2000, 5000, 10000)
UP_DOWN_BUCKETS = (0, 1)

Series = Union[Gauge, Histogram]


class ExporterMetrics:
    """The exporter's series, registered on a single registry."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()

        self.up = Gauge(
            PINGDOM_UP,
            'Whether the last pingdom scrape was successfull (1: up, 0: down)',
            registry=self.registry
        )

        self.check_status = Gauge(
            CHECK_STATUS,
            'The current status of the check '
            '(0: up, 1: unconfirmed_down, 2: down, -1: paused, -2: unknown)',
            CHECK_LABEL_NAMES,
            registry=self.registry
        )

        self.check_response_time = Gauge(
            CHECK_RESPONSE_TIME,
            'The response time of last test in milliseconds',
            CHECK_LABEL_NAMES,
            registry=self.registry
        )

        self.check_response_time_histogram = Histogram(
            CHECK_RESPONSE_TIME_HISTOGRAM,
            'The response time test in milliseconds',
            CHECK_LABEL_NAMES,
            buckets=RESPONSE_TIME_BUCKETS,
            registry=self.registry
        )

        self.check_status_histogram = Histogram(
            CHECK_STATUS_HISTOGRAM,
            'The current status of the check (1: up, 0: down)',
            CHECK_LABEL_NAMES,
            buckets=UP_DOWN_BUCKETS,
            registry=self.registry
        )

    @property
    def series(self) -> Dict[str, Series]:
        return {
            PINGDOM_UP: self.up,
            CHECK_STATUS: self.check_status,
            CHECK_RESPONSE_TIME: self.check_response_time,
            CHECK_RESPONSE_TIME_HISTOGRAM: self.check_response_time_histogram,
            CHECK_STATUS_HISTOGRAM: self.check_status_histogram,
        }

    def get_metrics_text(self) -> str:
        """Get all series in Prometheus text format"""
        return generate_latest(self.registry).decode('utf-8')


def get_metrics_content_type() -> str:
    """Get content type for Prometheus metrics"""
    return CONTENT_TYPE_LATEST
