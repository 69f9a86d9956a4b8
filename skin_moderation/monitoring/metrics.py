"""Prometheus metrics for monitoring skin moderation."""

import logging

from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

# Define metrics
TRANSITIONS = Counter(
    "skin_moderation_transitions_total",
    "Number of moderation transitions committed to the metadata store",
    ["action"],
)

MIRROR_WRITE_FAILURES = Counter(
    "skin_moderation_mirror_write_failures_total",
    "Number of mirror marker writes that failed after the metadata commit",
    ["action"],
)

RECONCILED_HASHES = Counter(
    "skin_moderation_reconciled_hashes_total",
    "Per-hash outcomes of reconciliation passes",
    ["marker_set", "result"],
)

RECONCILE_DURATION = Histogram(
    "skin_moderation_reconcile_duration_seconds",
    "Duration of reconciliation passes in seconds",
    buckets=[1.0, 5.0, 15.0, 30.0, 60.0, 120.0, 300.0],
)


class PrometheusExporter:
    """Prometheus metrics exporter for the skin moderation service."""

    def __init__(self, port: int = 8002):
        """
        Initialize the Prometheus exporter.

        Args:
            port: Port to expose metrics on
        """
        self.port = port
        self.server_started = False

    def start_server(self) -> None:
        """Start the Prometheus metrics server."""
        if not self.server_started:
            try:
                start_http_server(self.port)
                self.server_started = True
                logger.info(f"Started Prometheus metrics server on port {self.port}")
            except OSError as e:
                logger.error(f"Failed to start Prometheus metrics server: {str(e)}")

    def record_transition(self, action: str) -> None:
        TRANSITIONS.labels(action=action).inc()

    def record_mirror_failure(self, action: str) -> None:
        MIRROR_WRITE_FAILURES.labels(action=action).inc()

    def record_reconciled(self, marker_set: str, result: str) -> None:
        RECONCILED_HASHES.labels(marker_set=marker_set, result=result).inc()

    def observe_reconcile_duration(self, seconds: float) -> None:
        RECONCILE_DURATION.observe(seconds)
