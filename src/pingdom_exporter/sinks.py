"""
MetricSink Interface and Implementations

Provides a pluggable abstraction for publishing exporter series:
- MetricSink: Abstract interface for sinks
- NoOpMetricSink: For tests (does nothing)
- LoggingMetricSink: Logs writes to standard logger
- PrometheusMetricSink: Wraps Prometheus client

The poller only ever writes through this interface and the HTTP layer only
ever reads through render_snapshot(), so the sink is the single shared
resource between them.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from prometheus_client import CollectorRegistry, generate_latest, CONTENT_TYPE_LATEST

from pingdom_exporter.errors import UnknownSeriesError
from pingdom_exporter.metrics import ExporterMetrics

logger = logging.getLogger(__name__)


class MetricSink(ABC):
    """Abstract interface for metric publication.

    Implementations must tolerate concurrent writers and readers.
    """

    content_type: str = "text/plain; charset=utf-8"

    @abstractmethod
    def set_gauge(
        self,
        series: str,
        labels: Optional[Sequence[str]],
        value: float
    ) -> None:
        """Set a gauge value, last write wins per (series, labels).

        Args:
            series: Series name (e.g., "pingdom_check_status")
            labels: Label values in schema order, or None for unlabeled series
            value: Gauge value
        """
        ...

    @abstractmethod
    def observe(
        self,
        series: str,
        labels: Optional[Sequence[str]],
        value: float
    ) -> None:
        """Record a histogram observation.

        Args:
            series: Series name
            labels: Label values in schema order, or None for unlabeled series
            value: Observed value
        """
        ...

    @abstractmethod
    def render_snapshot(self) -> bytes:
        """Render every registered series in the pull exposition format."""
        ...


class NoOpMetricSink(MetricSink):
    """No-op sink for tests - swallows all writes."""

    def set_gauge(self, series, labels, value) -> None:
        """Swallow gauge."""
        pass

    def observe(self, series, labels, value) -> None:
        """Swallow observation."""
        pass

    def render_snapshot(self) -> bytes:
        return b""


class LoggingMetricSink(MetricSink):
    """Sink that logs writes to standard logger."""

    def __init__(self, log_level: int = logging.DEBUG):
        self.log_level = log_level

    def _format_labels(self, labels: Optional[Sequence[str]]) -> str:
        """Format label values for logging."""
        if not labels:
            return ""
        return "{" + ",".join(labels) + "}"

    def set_gauge(self, series, labels, value) -> None:
        """Log gauge write."""
        logger.log(
            self.log_level,
            f"METRIC gauge {series}{self._format_labels(labels)}={value}"
        )

    def observe(self, series, labels, value) -> None:
        """Log histogram observation."""
        logger.log(
            self.log_level,
            f"METRIC histogram {series}{self._format_labels(labels)}={value}"
        )

    def render_snapshot(self) -> bytes:
        return b""


class PrometheusMetricSink(MetricSink):
    """Sink backed by the Prometheus client library.

    Series are declared once by ExporterMetrics. prometheus_client guards
    each child value with its own lock, so writes from the poller and
    concurrent scrapes need no extra locking here.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, metrics: Optional[ExporterMetrics] = None,
                 registry: Optional[CollectorRegistry] = None):
        """Initialize with optional pre-built series or a custom registry.

        Args:
            metrics: Declared series (built on `registry` if omitted)
            registry: Prometheus registry for a freshly built ExporterMetrics
        """
        self.metrics = metrics or ExporterMetrics(registry=registry)
        self.registry = self.metrics.registry
        self._series = self.metrics.series

    def _child(self, series: str, labels: Optional[Sequence[str]]):
        try:
            metric = self._series[series]
        except KeyError:
            raise UnknownSeriesError(series) from None
        if labels:
            return metric.labels(*labels)
        return metric

    def set_gauge(self, series, labels, value) -> None:
        """Set gauge value in Prometheus."""
        self._child(series, labels).set(value)

    def observe(self, series, labels, value) -> None:
        """Observe histogram value in Prometheus."""
        self._child(series, labels).observe(value)

    def render_snapshot(self) -> bytes:
        return generate_latest(self.registry)
