"""Custom exceptions for the CLOB latency test."""


class LatencyTestError(Exception):
    """Base exception for errors that abort a latency test run."""
    pass


class DiscoveryError(LatencyTestError):
    """Raised when no market can be found that the CLOB accepts."""
    pass


class TargetValidationError(LatencyTestError):
    """Raised when a manually supplied token ID fails its CLOB probe."""
    pass
