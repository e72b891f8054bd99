"""Prometheus metrics for verbump.

Counts files loaded, versions written, identifiers regenerated and errors,
so long-running build agents can expose them next to their own metrics.
"""

import time

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

# ============ Metrics Definitions ============

FILES_LOADED = Counter(
    'verbump_files_loaded_total',
    'Version-bearing files loaded',
    ['format']
)

VERSIONS_SAVED = Counter(
    'verbump_versions_saved_total',
    'Version slots rewritten',
    ['format', 'slot']
)

IDENTIFIERS_REGENERATED = Counter(
    'verbump_identifiers_regenerated_total',
    'Package/product codes regenerated',
    ['format']
)

ERRORS_TOTAL = Counter(
    'verbump_errors_total',
    'Total number of errors',
    ['error_type']  # FORMAT_ERROR, VERSION_OVERFLOW, FILE_ACCESS_ERROR, ...
)

SAVE_DURATION = Histogram(
    'verbump_save_duration_seconds',
    'Time spent substituting and writing one version slot',
    ['format'],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1, 5]
)


# ============ Helper Functions ============

def record_load(format_name: str):
    FILES_LOADED.labels(format=format_name).inc()


def record_save(format_name: str, slot: str, duration: float):
    """Record one slot rewrite.

    Args:
        format_name: adapter name ('attribute', 'resource', ...)
        slot: slot key ('primary', 'file', 'informational')
        duration: seconds spent on substitution and write
    """
    VERSIONS_SAVED.labels(format=format_name, slot=slot).inc()
    SAVE_DURATION.labels(format=format_name).observe(duration)


def record_identifiers(format_name: str, count: int):
    if count > 0:
        IDENTIFIERS_REGENERATED.labels(format=format_name).inc(count)


def record_error(error_type: str):
    """Record error by type.

    Args:
        error_type: ``error_code`` of the raised VerbumpException
    """
    ERRORS_TOTAL.labels(error_type=error_type).inc()


class SaveTimer:
    """Context manager measuring one save."""

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False

    @property
    def duration(self):
        return time.time() - self.start_time


def get_metrics():
    """Get current metrics in Prometheus format.

    Returns:
        bytes: Prometheus-formatted metrics
    """
    return generate_latest()


def get_content_type():
    """Get Prometheus content type header value."""
    return CONTENT_TYPE_LATEST
