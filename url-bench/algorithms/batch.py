"""
Batched concurrent executor for a single load test run.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional

from configuration import (
    ATTEMPT_TIMEOUT_SECONDS,
    DISPATCH_BATCH,
    DISPATCH_MODE,
    DISPATCH_MODES,
    NO_RESPONSE_STATUS,
)
from common.inflight_gate import InFlightGate
from models.request import AttemptOutcome, RequestSpec, ResultRecord
from observability.prom import RunMetricsExporter
from systems.http_target import HttpTarget, format_log_line
from systems.probe import is_reachable

logger = logging.getLogger(__name__)


class BatchExecutor:
    """Runs every attempt of one RequestSpec and tallies the outcomes."""

    def __init__(
        self,
        probe: Optional[Callable[[str], Awaitable[bool]]] = None,
        dispatch_mode: Optional[str] = None,
        timeout_seconds: float = ATTEMPT_TIMEOUT_SECONDS,
        metrics: Optional[RunMetricsExporter] = None,
    ):
        """Initialize the executor.

        Args:
            probe: Reachability check awaited once per run (default: systems.probe.is_reachable)
            dispatch_mode: 'batch' for fixed batches drained in sequence, 'pool' for a
                free-flowing gate (default: from configuration)
            timeout_seconds: Per-attempt timeout
            metrics: Optional Prometheus exporter fed with attempt and run metrics
        """
        self.probe = probe or is_reachable
        self.dispatch_mode = dispatch_mode or DISPATCH_MODE
        self.timeout_seconds = timeout_seconds
        self.metrics = metrics

        if self.dispatch_mode not in DISPATCH_MODES:
            raise ValueError(
                f"Unsupported dispatch mode: {self.dispatch_mode}. Must be one of {DISPATCH_MODES}."
            )

        # Gate of the most recent run, kept for inspection
        self.last_gate: Optional[InFlightGate] = None

    async def run_batch(self, spec: RequestSpec) -> ResultRecord:
        """Execute one load test run.

        Args:
            spec: Request specification to run

        Returns:
            Finalized ResultRecord for the run

        Raises:
            SpecValidationError: If the spec's counts cannot drive a run
        """
        spec.validate()
        start_time = time.perf_counter()

        if spec.request_count == 0:
            return ResultRecord(spec.method, spec.url, 0, 0, time.perf_counter() - start_time)

        if not await self.probe(spec.url):
            logger.warning(f"Skipping {spec.request_count} requests to unreachable URL {spec.url}")
            if self.metrics:
                self.metrics.record_run(rejected=True)
            return ResultRecord(
                method=spec.method,
                url=spec.url,
                success_count=0,
                failure_count=spec.request_count,
                elapsed_seconds=time.perf_counter() - start_time,
                log=f"Invalid URL: {spec.url}\n",
            )

        logger.info(
            f"Starting {spec.method} {spec.url}: {spec.request_count} requests, "
            f"concurrency {spec.concurrency}, {self.dispatch_mode} dispatch"
        )

        # One slot per attempt; each attempt writes only its own index
        slots: List[Optional[AttemptOutcome]] = [None] * spec.request_count
        gate = InFlightGate(spec.concurrency)
        self.last_gate = gate

        async with HttpTarget(self.timeout_seconds, connection_limit=spec.concurrency) as target:
            if self.dispatch_mode == DISPATCH_BATCH:
                await self._dispatch_batches(target, spec, gate, slots)
            else:
                await self._dispatch_pool(target, spec, gate, slots)

        successes = sum(1 for outcome in slots if outcome.success)
        failures = spec.request_count - successes
        elapsed = time.perf_counter() - start_time

        if self.metrics:
            self.metrics.record_run(rejected=False)

        logger.info(
            f"Finished {spec.method} {spec.url}: {successes} ok, {failures} failed "
            f"in {elapsed:.3f}s (peak in flight {gate.peak_in_flight()})"
        )

        return ResultRecord(
            method=spec.method,
            url=spec.url,
            success_count=successes,
            failure_count=failures,
            elapsed_seconds=elapsed,
            log="".join(f"{outcome.log_line}\n" for outcome in slots),
        )

    async def _dispatch_batches(self, target, spec, gate, slots):
        """Launch `concurrency` attempts, wait for all of them, repeat."""
        for batch_start in range(0, spec.request_count, spec.concurrency):
            batch_end = min(batch_start + spec.concurrency, spec.request_count)
            await asyncio.gather(
                *(self._attempt(target, spec, gate, slots, i) for i in range(batch_start, batch_end))
            )
            logger.debug(f"Batch {batch_start}-{batch_end - 1} drained for {spec.url}")

    async def _dispatch_pool(self, target, spec, gate, slots):
        """Submit every attempt at once; the gate bounds how many run together."""
        await asyncio.gather(
            *(self._attempt(target, spec, gate, slots, i) for i in range(spec.request_count))
        )

    async def _attempt(self, target: HttpTarget, spec: RequestSpec, gate: InFlightGate,
                       slots: List[Optional[AttemptOutcome]], index: int):
        """Run one attempt under the gate and store its outcome in its slot."""
        async with gate:
            if self.metrics:
                self.metrics.attempt_started()
            try:
                outcome = await target.send(spec)
            except Exception as e:
                logger.error(f"Attempt {index} for {spec.url} failed unexpectedly: {e}")
                outcome = AttemptOutcome(
                    success=False,
                    status=NO_RESPONSE_STATUS,
                    log_line=format_log_line(spec.method, NO_RESPONSE_STATUS, spec.url, f"unexpected error: {e}"),
                )
            finally:
                if self.metrics:
                    self.metrics.attempt_finished()

        slots[index] = outcome
        if self.metrics:
            self.metrics.record_attempt(outcome.success, outcome.duration_seconds)
