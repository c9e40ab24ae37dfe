"""
Latency statistics.

Linear-interpolated percentiles and per-endpoint summaries over a run's
measurements.
"""

import math
from typing import Iterable, Sequence

from .types import EndpointSummary, Measurement

P95 = 0.95


def percentile(values: Sequence[float], p: float) -> float:
    """
    Linearly interpolated order statistic.

    The fractional rank is (n - 1) * p; the result interpolates between the
    two sorted values bracketing it. Returns 0 for an empty sequence.

    Examples:
        percentile([10, 20, 30, 40], 0.5) -> 25.0
        percentile([], 0.95) -> 0
    """
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"p must be in [0, 1], got {p}")
    if not values:
        return 0

    ordered = sorted(values)
    pos = (len(ordered) - 1) * p
    base = math.floor(pos)
    rest = pos - base

    if base + 1 < len(ordered):
        return ordered[base] + rest * (ordered[base + 1] - ordered[base])
    return ordered[base]


def summarize_label(measurements: Iterable[Measurement], label: str) -> EndpointSummary:
    """Build the summary for one endpoint label."""
    relevant = [m for m in measurements if m.label == label]
    durations = [m.duration_ms for m in relevant if m.success]

    if not durations:
        error = relevant[0].error_details if relevant else ""
        return EndpointSummary(label=label, status="FAIL", error=error or "Unknown")

    return EndpointSummary(
        label=label,
        status="OK",
        samples=len(durations),
        min_ms=min(durations),
        mean_ms=sum(durations) / len(durations),
        p95_ms=percentile(durations, P95),
    )


def summarize(measurements: Sequence[Measurement], labels: Iterable[str]) -> list[EndpointSummary]:
    """One summary per label, in label order."""
    return [summarize_label(measurements, label) for label in labels]
