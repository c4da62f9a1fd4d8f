"""
Prometheus metrics for monitoring position operations.
"""

import logging
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)


class Metrics:
    """
    Prometheus metrics collector.

    Tracks:
    - Operations built (split/merge/redeem)
    - Submissions by outcome (confirmed/reverted/timeout/error)
    - Submission latency (send → receipt)
    """

    def __init__(
        self,
        enabled: bool = True,
        port: Optional[int] = None,
        registry: Optional[CollectorRegistry] = None
    ):
        """
        Initialize metrics.

        Args:
            enabled: Enable metrics collection
            port: Metrics HTTP server port (None = no server)
            registry: Collector registry (default: global registry)
        """
        self.enabled = enabled

        if not self.enabled:
            return

        registry = registry if registry is not None else REGISTRY

        self.operations_built = Counter(
            'ctf_operations_built_total',
            'Position operations built',
            ['kind'],
            registry=registry
        )

        self.submissions = Counter(
            'ctf_submissions_total',
            'Position operation submissions',
            ['kind', 'status'],
            registry=registry
        )

        self.submission_latency = Histogram(
            'ctf_submission_latency_seconds',
            'Time from send to confirmed receipt',
            ['kind'],
            registry=registry
        )

        if port is not None:
            try:
                start_http_server(port, registry=registry)
                logger.info(f"Metrics server started on port {port}")
            except OSError as e:
                logger.error(f"Failed to start metrics server: {e}")

    def track_operation_built(self, kind: str) -> None:
        """Record a built operation."""
        if self.enabled:
            self.operations_built.labels(kind=kind).inc()

    def track_submission(self, kind: str, status: str) -> None:
        """Record a submission outcome."""
        if self.enabled:
            self.submissions.labels(kind=kind, status=status).inc()

    def track_submission_latency(self, kind: str, duration: float) -> None:
        """Record submission latency."""
        if self.enabled:
            self.submission_latency.labels(kind=kind).observe(duration)


# Global metrics instance
_metrics: Optional[Metrics] = None


def get_metrics(enabled: bool = True, port: Optional[int] = None) -> Metrics:
    """Get or create the process-wide metrics instance."""
    global _metrics
    if _metrics is None:
        _metrics = Metrics(enabled=enabled, port=port)
    return _metrics
