"""
Exporter Error Hierarchy

Custom exceptions raised across the exporter. Fetch failures are the only
errors the poller recovers from; everything else is fatal at startup.
"""

from datetime import datetime
from typing import Any, Dict, Optional


# ============================================================================
# Custom Exception Hierarchy
# ============================================================================

class ExporterException(Exception):
    """Base exception for all exporter-specific errors."""

    def __init__(self, message: str, component: str = "unknown",
                 context: Optional[Dict[str, Any]] = None):
        """Initialize exporter exception with metadata.

        Args:
            message: Error message
            component: Component where error occurred
            context: Additional context data
        """
        self.message = message
        self.component = component
        self.context = context or {}
        self.timestamp = datetime.now()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to structured log format."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "component": self.component,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }


class UsageError(ExporterException):
    """Raised when the command line cannot be turned into a server run."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, component="cli", context=context)


class ConfigurationError(ExporterException):
    """Raised when settings fail validation."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, component="config", context=context)


class UnknownSeriesError(ExporterException):
    """Raised when publishing to a series that was never declared."""

    def __init__(self, series: str):
        super().__init__(
            f"Metric series not registered: {series}",
            component="sink",
            context={"series": series},
        )
        self.series = series


# ============================================================================
# Fetch Errors (recovered by the poller)
# ============================================================================

class FetchError(ExporterException):
    """Raised when the check list could not be fetched from Pingdom."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, component="pingdom_client", context=context)


class PingdomAPIError(FetchError):
    """Pingdom answered with an HTTP error status."""

    def __init__(self, status_code: int, status_desc: str = "", error_message: str = ""):
        self.status_code = status_code
        self.status_desc = status_desc
        self.error_message = error_message
        head = f"{status_code} {status_desc}".strip()
        super().__init__(
            f"{head}: {error_message or 'no error message'}",
            context={"status_code": status_code},
        )


class PingdomConnectionError(FetchError):
    """The request never produced an HTTP response."""
    pass


class PingdomResponseError(FetchError):
    """The response body could not be decoded into check records."""
    pass
