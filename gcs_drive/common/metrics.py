"""
Prometheus metrics for drive operations.

Counts every drive call by operation and outcome and records how long
it took.
"""

import time
from functools import wraps
from typing import Callable

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

storage_operations_total = Counter(
    "storage_operations_total",
    "Total number of drive operations",
    ["operation", "status"],  # exists/put/copy/..., success/failure
    registry=REGISTRY,
)

storage_operation_duration_seconds = Histogram(
    "storage_operation_duration_seconds",
    "Time spent in a drive operation, backend round trips included",
    ["operation"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
    registry=REGISTRY,
)


def track_storage_operation(operation: str):
    """
    Decorator to count and time a drive operation.

    Args:
        operation: Operation label (exists, put, copy, ...)
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            status = "success"
            try:
                return func(*args, **kwargs)
            except Exception:
                status = "failure"
                raise
            finally:
                storage_operation_duration_seconds.labels(
                    operation=operation).observe(time.time() - start_time)
                storage_operations_total.labels(
                    operation=operation, status=status).inc()

        return wrapper
    return decorator


def get_metrics() -> bytes:
    """Get current metrics in Prometheus text format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
