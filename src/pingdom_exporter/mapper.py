"""
Check status mapping.

Pure translation from a Pingdom check record to the label tuple and the
numeric values published for it. No state, no I/O.
"""

from dataclasses import dataclass
from typing import Dict, NamedTuple

from pingdom_exporter.client import CheckRecord

# Raw status -> signed status code
STATUS_CODES: Dict[str, int] = {
    "unknown": -2,
    "paused": -1,
    "up": 0,
    "unconfirmed_down": 1,
    "down": 2,
}

# Anything Pingdom reports outside STATUS_CODES
INVALID_STATUS_CODE = 100

TAG_DELIMITER = ","


class LabelTuple(NamedTuple):
    """Label values shared by every per-check series, in label-name order."""
    id: str
    name: str
    hostname: str
    resolution: str
    paused: str
    tags: str


@dataclass(frozen=True)
class CheckSample:
    """Everything published for one check in one poll cycle."""
    labels: LabelTuple
    status_code: int
    up_down: float
    response_time_ms: float


def status_code(raw_status: str) -> int:
    """Encode a raw Pingdom status, returning INVALID_STATUS_CODE for unknown strings."""
    return STATUS_CODES.get(raw_status, INVALID_STATUS_CODE)


def up_down_flag(code: int) -> float:
    """1.0 for anything better than unconfirmed_down (up, paused, unknown), else 0.0."""
    return 1.0 if code < 1 else 0.0


def render_paused(check: CheckRecord) -> str:
    # The paused flag from the API is unreliable; a "paused" status wins.
    if check.status == "paused":
        return "true"
    return "true" if check.paused else "false"


def render_tags(check: CheckRecord) -> str:
    # Input order, no sorting, de-duplication or escaping.
    return TAG_DELIMITER.join(check.tag_names)


def build_labels(check: CheckRecord) -> LabelTuple:
    return LabelTuple(
        id=str(check.id),
        name=check.name,
        hostname=check.hostname,
        resolution=str(check.resolution),
        paused=render_paused(check),
        tags=render_tags(check),
    )


def map_check(check: CheckRecord) -> CheckSample:
    """
    Translate one check into its published values.

    Total over all inputs: unrecognized statuses still yield a sample with
    status code INVALID_STATUS_CODE.
    """
    code = status_code(check.status)
    return CheckSample(
        labels=build_labels(check),
        status_code=code,
        up_down=up_down_flag(code),
        response_time_ms=float(check.last_response_time),
    )
