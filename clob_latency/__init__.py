"""
CLOB Latency - round-trip latency diagnostic for the Polymarket CLOB API

Finds a liquid market, times repeated requests against the book, price and
midpoint endpoints, and writes per-endpoint min / mean / p95 to a JSON file.
"""

__version__ = "0.1.0"

# Core types
from .types import (
    EndpointLabel,
    ENDPOINT_LABELS,
    Measurement,
    Target,
    EndpointSummary,
    RawTokenIds,
    EncodedTokenIds,
    utc_timestamp,
)

# Errors
from .errors import LatencyTestError, DiscoveryError, TargetValidationError

# Config
from .config import ProbeConfig, DEFAULT_HEADERS

# API clients
from .gamma_client import GammaClient, GammaAPIError
from .clob_client import ClobClient, ClobAPIError

# Measurement and statistics
from .prober import measure_request
from .stats import percentile, summarize

# Discovery
from .market_finder import LiquidMarketFinder, parse_token_ids

# Runner
from .runner import LatencyTestRunner, RunResult

__all__ = [
    # Version
    "__version__",
    # Types
    "EndpointLabel",
    "ENDPOINT_LABELS",
    "Measurement",
    "Target",
    "EndpointSummary",
    "RawTokenIds",
    "EncodedTokenIds",
    "utc_timestamp",
    # Errors
    "LatencyTestError",
    "DiscoveryError",
    "TargetValidationError",
    # Config
    "ProbeConfig",
    "DEFAULT_HEADERS",
    # API clients
    "GammaClient",
    "GammaAPIError",
    "ClobClient",
    "ClobAPIError",
    # Measurement and statistics
    "measure_request",
    "percentile",
    "summarize",
    # Discovery
    "LiquidMarketFinder",
    "parse_token_ids",
    # Runner
    "LatencyTestRunner",
    "RunResult",
]
