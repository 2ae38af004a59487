"""
Simple Prometheus metrics exporter for URL load tests.
"""

import logging
from typing import Optional

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

logger = logging.getLogger(__name__)


class RunMetricsExporter:
    """Prometheus metrics for attempts and runs."""

    def __init__(self, port: int = 9100, registry: Optional[CollectorRegistry] = None):
        self.port = port
        self.registry = registry or REGISTRY
        self.server_started = False

        # Define metrics
        self.attempts_total = Counter(
            'url_bench_attempts_total', 'Total attempts', ['outcome'], registry=self.registry
        )
        self.attempt_duration = Histogram(
            'url_bench_attempt_duration_seconds', 'Attempt duration', registry=self.registry
        )
        self.in_flight = Gauge(
            'url_bench_in_flight_attempts', 'Attempts currently in flight', registry=self.registry
        )
        self.runs_total = Counter(
            'url_bench_runs_total', 'Total runs', ['result'], registry=self.registry
        )

    def start_server(self):
        """Start the Prometheus HTTP server."""
        if not self.server_started:
            try:
                start_http_server(self.port, registry=self.registry)
                self.server_started = True
                logger.info(f"Prometheus server started on port {self.port}")
            except Exception as e:
                logger.error(f"Failed to start Prometheus server: {e}")

    def record_attempt(self, success: bool, duration_seconds: float):
        """Record one finished attempt."""
        try:
            self.attempts_total.labels(outcome="success" if success else "failure").inc()
            self.attempt_duration.observe(duration_seconds)
        except Exception as e:
            logger.error(f"Failed to record attempt metric: {e}")

    def attempt_started(self):
        self.in_flight.inc()

    def attempt_finished(self):
        self.in_flight.dec()

    def record_run(self, rejected: bool):
        """Record one finished run."""
        try:
            self.runs_total.labels(result="rejected" if rejected else "completed").inc()
        except Exception as e:
            logger.error(f"Failed to record run metric: {e}")
