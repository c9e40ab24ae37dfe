"""
Results document and console report.

The JSON document written here is the durable output of a run; its field
names are consumed by downstream tooling and must not change.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

import orjson

from .types import EndpointSummary, Measurement, Target, utc_timestamp

logger = logging.getLogger(__name__)


def results_filename(region: str, epoch_ms: int) -> str:
    """File name for a run, e.g. latency_results_eu-west_1737650000000.json"""
    return f"latency_results_{region}_{epoch_ms}.json"


def build_results_document(
    region: str,
    target: Target,
    summaries: Sequence[EndpointSummary],
    measurements: Sequence[Measurement],
    timestamp: Optional[str] = None,
) -> dict:
    """Assemble the meta / summary / detailed_log document."""
    return {
        "meta": {
            "region": region,
            "slug": target.slug,
            "tokenId": target.token_id,
            "timestamp": timestamp or utc_timestamp(),
        },
        "summary": [s.to_dict() for s in summaries],
        "detailed_log": [m.to_dict() for m in measurements],
    }


def write_results(path: Path, document: dict) -> Path:
    """Write the document as two-space indented JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(document, option=orjson.OPT_INDENT_2))
    logger.info(f"Wrote {len(document['detailed_log'])} measurements to {path}")
    return path


def format_summary_table(summaries: Sequence[EndpointSummary]) -> str:
    """Render summaries as a fixed-width text table."""
    header = f"{'Endpoint':<16} {'Status':<6} {'Samples':>7} {'Min':>9} {'Mean':>9} {'P95':>9}  Error"
    lines = [header, "-" * len(header)]

    for s in summaries:
        if s.ok:
            lines.append(
                f"{s.label:<16} {s.status:<6} {s.samples:>7} "
                f"{s.min_ms:>9.2f} {s.mean_ms:>9.2f} {s.p95_ms:>9.2f}"
            )
        else:
            lines.append(f"{s.label:<16} {s.status:<6} {'-':>7} {'-':>9} {'-':>9} {'-':>9}  {s.error}")

    return "\n".join(lines)
