"""Utility functions for the CLOB latency test."""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Client-side loggers that would interleave with the progress dots
NOISY_LOGGERS = ("aiohttp.client", "aiohttp.internal", "asyncio")


def setup_logging(name: str, level: str = "INFO") -> logging.Logger:
    """
    Configure logging for a probe run.

    Log lines go to stderr so stdout carries only the progress dots and the
    summary table. Transport loggers stay at WARNING unless running at DEBUG.
    An unknown level name falls back to INFO.

    Returns:
        Logger for `name`
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    transport_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(transport_level)

    return logging.getLogger(name)
