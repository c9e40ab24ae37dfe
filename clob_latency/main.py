#!/usr/bin/env python3
"""
CLOB latency test entry point.

Usage:
    python -m clob_latency
    REGION=eu-west python -m clob_latency --iterations 50
    TOKEN_ID=7132... python -m clob_latency --output-dir results/

Exit codes:
    0 - results written
    1 - no usable target (discovery or manual validation failed)
    2 - invalid configuration
"""

import argparse
import asyncio
import sys
from typing import Optional

from .config import ProbeConfig
from .errors import LatencyTestError
from .runner import LatencyTestRunner
from .util import setup_logging

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clob-latency",
        description="Measure round-trip latency of the Polymarket CLOB market-data API",
    )
    parser.add_argument("--region", help="Region label for the output file (env: REGION)")
    parser.add_argument("--token-id", help="Skip discovery and measure this token (env: TOKEN_ID)")
    parser.add_argument("--iterations", "-n", type=int, help="Iterations to run (env: ITERATIONS)")
    parser.add_argument("--sleep-ms", type=int, help="Delay between iterations (env: SLEEP_MS)")
    parser.add_argument("--output-dir", help="Directory for the results file (env: OUTPUT_DIR)")
    parser.add_argument("--env-file", default=".env", help="Optional .env file (default: .env)")
    parser.add_argument("--log-level", help="Log level (env: LOG_LEVEL)")
    return parser


def load_config(args: argparse.Namespace) -> ProbeConfig:
    """Environment / .env first, command line flags on top."""
    config = ProbeConfig.from_env_file(args.env_file)
    return config.with_overrides(
        region=args.region,
        token_id=args.token_id,
        iterations=args.iterations,
        sleep_ms=args.sleep_ms,
        output_dir=args.output_dir,
        log_level=args.log_level,
    )


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args)
    except ValueError as e:
        logger = setup_logging("clob_latency")
        logger.error(f"Config error: {e}")
        return EXIT_CONFIG
    logger = setup_logging("clob_latency", config.log_level)

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Config error: {error}")
        return EXIT_CONFIG

    runner = LatencyTestRunner(config)
    try:
        asyncio.run(runner.run())
    except LatencyTestError as e:
        logger.critical(str(e))
        print(f"\nCRITICAL ERROR: {e}", file=sys.stderr)
        return EXIT_FATAL

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
