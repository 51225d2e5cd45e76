"""
Prometheus metrics for the kafka binding operator.

Exposes reconcile timings and bind/unbind counts on /metrics when the server
is enabled (KAFKA_BINDING_METRICS_ENABLED=true).

Usage:
    from kafkabinding_operator.metrics import start_metrics_server, track_reconcile_duration

    start_metrics_server(enabled=True, port=8080)

    with track_reconcile_duration("apply"):
        ...
"""

import logging
import threading
from contextlib import contextmanager
from typing import Generator, Optional

from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

RECONCILE_DURATION: Optional[Histogram] = None
WORKLOADS_BOUND: Optional[Counter] = None
WORKLOADS_UNBOUND: Optional[Counter] = None
RECONCILE_FAILURES: Optional[Counter] = None

_metrics_initialized = False
_metrics_lock = threading.Lock()


def init_metrics() -> None:
    """Create the metric objects once. Safe to call repeatedly."""
    global RECONCILE_DURATION, WORKLOADS_BOUND, WORKLOADS_UNBOUND, RECONCILE_FAILURES
    global _metrics_initialized

    with _metrics_lock:
        if _metrics_initialized:
            return

        RECONCILE_DURATION = Histogram(
            "kafkabinding_reconcile_duration_seconds",
            "Duration of binding apply/remove reconciles in seconds",
            labelnames=["operation"],
            buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0),
        )

        WORKLOADS_BOUND = Counter(
            "kafkabinding_workloads_bound_total",
            "Workloads written with the binding applied",
            labelnames=["kind"],
        )

        WORKLOADS_UNBOUND = Counter(
            "kafkabinding_workloads_unbound_total",
            "Workloads written with the binding removed",
            labelnames=["kind"],
        )

        RECONCILE_FAILURES = Counter(
            "kafkabinding_reconcile_failures_total",
            "Reconciles that left the binding not Ready",
            labelnames=["reason"],
        )

        _metrics_initialized = True
        logger.info("Prometheus metrics initialized")


def start_metrics_server(enabled: bool, port: int) -> None:
    """
    Start the /metrics HTTP server in a daemon thread.

    Args:
        enabled: Whether to serve metrics at all
        port: Port to listen on (0.0.0.0)
    """
    if not enabled:
        logger.info("Metrics server disabled (KAFKA_BINDING_METRICS_ENABLED=false)")
        return

    init_metrics()

    try:
        start_http_server(port, addr="0.0.0.0")
        logger.info(f"Metrics server started on http://0.0.0.0:{port}/metrics")
    except OSError as e:
        logger.error(f"Failed to start metrics server: {e}")


@contextmanager
def track_reconcile_duration(operation: str) -> Generator[None, None, None]:
    if RECONCILE_DURATION is None:
        yield
        return

    with RECONCILE_DURATION.labels(operation=operation).time():
        yield


def track_bound(kind: str) -> None:
    if WORKLOADS_BOUND is not None:
        WORKLOADS_BOUND.labels(kind=kind).inc()


def track_unbound(kind: str) -> None:
    if WORKLOADS_UNBOUND is not None:
        WORKLOADS_UNBOUND.labels(kind=kind).inc()


def track_failure(reason: str) -> None:
    if RECONCILE_FAILURES is not None:
        RECONCILE_FAILURES.labels(reason=reason).inc()
