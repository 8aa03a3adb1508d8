"""Pytest configuration and fixtures for the pingdom-exporter test suite."""
import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Ensure the package is importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pingdom_exporter.client import CheckRecord
from pingdom_exporter.errors import FetchError
from pingdom_exporter.sinks import PrometheusMetricSink


# ============================================================================
# CHECK FIXTURES
# ============================================================================

def make_check(**overrides) -> CheckRecord:
    """Build a check record with sensible defaults."""
    data = {
        "id": 42,
        "name": "site",
        "hostname": "x.com",
        "resolution": 5,
        "paused": False,
        "status": "down",
        "lastresponsetime": 733,
        "tags": [{"name": "prod", "type": "a", "count": 1}],
    }
    data.update(overrides)
    return CheckRecord.model_validate(data)


@pytest.fixture
def check_factory():
    return make_check


# ============================================================================
# FAKE CLIENT
# ============================================================================

class FakePingdomClient:
    """Scripted check source: each call pops the next response.

    A response is either a list of checks or an exception instance to raise.
    The last response repeats once the script runs out.
    """

    def __init__(self, *responses):
        self.responses = list(responses) or [[]]
        self.calls: List[Optional[bool]] = []

    async def list_checks(self, include_tags: bool = True) -> List[CheckRecord]:
        self.calls.append(include_tags)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fetch_error():
    return FetchError("connection refused")


# ============================================================================
# SINK FIXTURES
# ============================================================================

@pytest.fixture
def prometheus_sink():
    """PrometheusMetricSink on its own registry."""
    return PrometheusMetricSink()


def sample(sink: PrometheusMetricSink, name: str, labels: Optional[dict] = None):
    """Read one sample value from the sink's registry."""
    return sink.registry.get_sample_value(name, labels or {})
