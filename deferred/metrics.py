"""
Prometheus metrics for the deferred transport.

Exposes request counters and durations via an HTTP /metrics endpoint.

Usage:
    from deferred.metrics import start_metrics_server, track_request

    start_metrics_server(enabled=True, port=9100)
    track_request("GET", "fulfilled", 0.12)
"""

import logging
import threading

from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

REQUESTS_TOTAL: "Counter" = None  # type: ignore
REQUEST_DURATION: "Histogram" = None  # type: ignore

_metrics_initialized = False
_metrics_lock = threading.Lock()


def init_metrics() -> None:
    """
    Initialize Prometheus metrics (call once at startup).

    Thread-safe via module-level lock; later calls are no-ops.
    """
    global REQUESTS_TOTAL, REQUEST_DURATION
    global _metrics_initialized

    with _metrics_lock:
        if _metrics_initialized:
            return

        # Request counter (labels: method, outcome=fulfilled|rejected)
        REQUESTS_TOTAL = Counter(
            "deferred_requests_total",
            "Total number of transport requests by settlement outcome",
            labelnames=["method", "outcome"],
        )

        REQUEST_DURATION = Histogram(
            "deferred_request_duration_seconds",
            "Duration of transport requests from start to settlement in seconds",
            labelnames=["method"],
            buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0),
        )

        _metrics_initialized = True
        logger.info("Prometheus metrics initialized")


def start_metrics_server(enabled: bool, port: int) -> None:
    """
    Start Prometheus metrics HTTP server in background thread.

    Args:
        enabled: Whether to start metrics server (from DEFERRED_METRICS_ENABLED)
        port: HTTP port for /metrics endpoint (from DEFERRED_METRICS_PORT)
    """
    if not enabled:
        logger.info("Metrics server disabled (DEFERRED_METRICS_ENABLED=false)")
        return

    init_metrics()

    try:
        start_http_server(port, addr="0.0.0.0")
        logger.info(f"Metrics server started on http://0.0.0.0:{port}/metrics")
    except OSError as e:
        logger.error(f"Failed to start metrics server: {e}")


def track_request(method: str, outcome: str, seconds: float) -> None:
    """
    Record one settled request.

    No-op until init_metrics() has run.
    """
    if REQUESTS_TOTAL is not None:
        REQUESTS_TOTAL.labels(method=method, outcome=outcome).inc()
    if REQUEST_DURATION is not None:
        REQUEST_DURATION.labels(method=method).observe(seconds)
