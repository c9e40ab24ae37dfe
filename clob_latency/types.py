"""
Core types for the CLOB latency test.

Measurements are produced by the prober, summaries are derived from them at
the end of a run, and the target is resolved once before collection starts.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union


class EndpointLabel(str, Enum):
    """The three CLOB endpoints measured on every iteration, in call order."""
    BOOK = "CLOB Book"
    PRICE = "CLOB Price"
    MIDPOINT = "CLOB Midpoint"


ENDPOINT_LABELS: tuple[EndpointLabel, ...] = (
    EndpointLabel.BOOK,
    EndpointLabel.PRICE,
    EndpointLabel.MIDPOINT,
)


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# =============================================================================
# Token ID field
# =============================================================================


@dataclass(frozen=True, slots=True)
class RawTokenIds:
    """clobTokenIds delivered as a native JSON array."""
    values: list


@dataclass(frozen=True, slots=True)
class EncodedTokenIds:
    """clobTokenIds delivered as a string holding a JSON-encoded array."""
    text: str


TokenIdsField = Union[RawTokenIds, EncodedTokenIds]


# =============================================================================
# Run data
# =============================================================================


@dataclass(frozen=True, slots=True)
class Target:
    """Token being measured, with the event it was found in."""
    token_id: str
    slug: str
    question: str


@dataclass(frozen=True, slots=True)
class Measurement:
    """
    Result of one timed HTTP GET.

    Attributes:
        id: Iteration number (1-based)
        label: Endpoint label
        timestamp: Completion time (ISO-8601 UTC)
        duration_ms: Wall-clock duration, rounded to 2 decimals
        status: HTTP status code, 0 on network failure
        size_b: Response body size in bytes (successful calls only)
        success: True for a 2xx response
        error_details: Empty on success
    """
    id: int
    label: str
    timestamp: str
    duration_ms: float
    status: int
    size_b: int
    success: bool
    error_details: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.label,
            "timestamp": self.timestamp,
            "duration_ms": self.duration_ms,
            "status": self.status,
            "size_b": self.size_b,
            "success": "YES" if self.success else "NO",
            "error_details": self.error_details,
        }


@dataclass(frozen=True, slots=True)
class EndpointSummary:
    """Aggregated latency for one endpoint label."""
    label: str
    status: str
    samples: Optional[int] = None
    min_ms: Optional[float] = None
    mean_ms: Optional[float] = None
    p95_ms: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "OK"

    def to_dict(self) -> dict:
        """Serialize; FAIL summaries carry no numeric fields."""
        if not self.ok:
            return {"type": self.label, "status": self.status, "error": self.error}
        return {
            "type": self.label,
            "samples": self.samples,
            "min": f"{self.min_ms:.2f}",
            "mean": f"{self.mean_ms:.2f}",
            "p95": f"{self.p95_ms:.2f}",
            "status": self.status,
        }
