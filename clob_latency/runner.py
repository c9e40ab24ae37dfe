"""
Latency test runner.

Runs one test end to end:
1. Resolve the target token (manual override or discovery)
2. Collect: per iteration, probe book, price and midpoint in sequence
3. Summarize per endpoint
4. Persist the results document and print the summary table

Requests are awaited one at a time. Running them concurrently would change
what the timings mean.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import aiohttp

from .clob_client import ClobAPIError, ClobClient
from .config import ProbeConfig
from .errors import TargetValidationError
from .gamma_client import GammaClient
from .market_finder import LiquidMarketFinder
from .prober import measure_request
from .report import build_results_document, format_summary_table, results_filename, write_results
from .stats import summarize
from .types import ENDPOINT_LABELS, EndpointLabel, EndpointSummary, Measurement, Target

logger = logging.getLogger(__name__)

MANUAL_SLUG = "manual-override"
MANUAL_QUESTION = "Manual Token ID"


@dataclass(frozen=True)
class RunResult:
    """Everything a completed run produced."""
    target: Target
    measurements: list[Measurement]
    summaries: list[EndpointSummary]
    output_path: Path


class LatencyTestRunner:
    """
    Orchestrates a single latency test run.

    Uses the given session if provided, otherwise creates one and closes it
    when the run ends. The configured headers go out on every request either
    way.
    """

    def __init__(self, config: ProbeConfig, session: Optional[aiohttp.ClientSession] = None):
        """
        Initialize runner.

        Args:
            config: Run configuration
            session: Optional externally owned HTTP session
        """
        self._config = config
        self._session = session
        self._owns_session = session is None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure HTTP session is created."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._config.request_timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this runner created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    # -------------------------------------------------------------------------
    # Step 1: target
    # -------------------------------------------------------------------------

    async def resolve_target(self) -> Target:
        """
        Resolve the token to measure.

        Raises:
            TargetValidationError: manual token ID not served by the CLOB
            DiscoveryError: discovery found nothing usable
        """
        session = await self._ensure_session()
        clob = ClobClient(session, self._config.clob_api_url, headers=self._config.headers)

        manual_token_id = self._config.token_id
        if manual_token_id:
            print(f"[CONFIG] Using Manual Token ID: {manual_token_id}")
            print("Skipping Gamma API discovery...")
            try:
                status = await clob.probe_price(manual_token_id)
            except ClobAPIError as e:
                raise TargetValidationError(
                    f"Manual Token ID {manual_token_id} is not responding on CLOB ({e})"
                ) from e
            if status != 200:
                raise TargetValidationError(
                    f"Manual Token ID {manual_token_id} is not responding on CLOB (Status: {status})"
                )
            print("[TARGET LOCKED] Validated manual ID on CLOB.")
            return Target(token_id=manual_token_id, slug=MANUAL_SLUG, question=MANUAL_QUESTION)

        print("Step 1: Discovery (fetching top active markets)...")
        gamma = GammaClient(session, self._config.gamma_api_url, headers=self._config.headers)
        finder = LiquidMarketFinder(gamma, clob, limit=self._config.discovery_limit)
        target = await finder.find_valid_market()
        print(f"[TARGET LOCKED] {target.question}")
        return target

    # -------------------------------------------------------------------------
    # Step 2: collection
    # -------------------------------------------------------------------------

    async def collect(self, target: Target) -> list[Measurement]:
        """
        Probe all three endpoints once per iteration.

        Returns:
            Measurements in call order, exactly 3 per iteration
        """
        session = await self._ensure_session()
        clob = ClobClient(session, self._config.clob_api_url, headers=self._config.headers)
        urls = {
            EndpointLabel.BOOK: clob.book_url(target.token_id),
            EndpointLabel.PRICE: clob.price_url(target.token_id),
            EndpointLabel.MIDPOINT: clob.midpoint_url(target.token_id),
        }

        iterations = self._config.iterations
        delay = self._config.sleep_ms / 1000
        measurements: list[Measurement] = []

        print(f"Step 2: Running {iterations} iterations...")
        for i in range(1, iterations + 1):
            print(".", end="", flush=True)
            for label in ENDPOINT_LABELS:
                measurement = await measure_request(
                    session, label.value, urls[label], i, headers=self._config.headers
                )
                measurements.append(measurement)
            await asyncio.sleep(delay)
        print("\nDone.\n")

        failed = sum(1 for m in measurements if not m.success)
        if failed:
            logger.warning(f"{failed}/{len(measurements)} requests failed")
        return measurements

    # -------------------------------------------------------------------------
    # Steps 3-4: summary and output
    # -------------------------------------------------------------------------

    def persist(
        self,
        target: Target,
        summaries: list[EndpointSummary],
        measurements: list[Measurement],
    ) -> Path:
        """Write the results document; returns its path."""
        region = self._config.region
        filename = results_filename(region, int(time.time() * 1000))
        path = Path(self._config.output_dir) / filename
        document = build_results_document(region, target, summaries, measurements)
        return write_results(path, document)

    async def run(self) -> RunResult:
        """
        Run the full test.

        Raises:
            LatencyTestError: if no target could be resolved; nothing is
                written in that case
        """
        print(f"--- Latency Test (Region: {self._config.region}) ---")
        try:
            target = await self.resolve_target()
            print("-" * 60)
            measurements = await self.collect(target)
        finally:
            await self.close()

        summaries = summarize(measurements, [label.value for label in ENDPOINT_LABELS])
        print(format_summary_table(summaries))

        output_path = self.persist(target, summaries, measurements)
        print(f"[SUCCESS] Saved to: {output_path}")

        return RunResult(
            target=target,
            measurements=measurements,
            summaries=summaries,
            output_path=output_path,
        )
