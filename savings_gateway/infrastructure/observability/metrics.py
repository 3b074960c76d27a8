"""Prometheus metrics for monitoring source ingestion and calculation traffic"""

from prometheus_client import Counter, Histogram, Gauge

# Ingestion metrics
source_outcome_counter = Counter(
    "savings_source_ingestion_total",
    "Source ingestion attempts",
    ["outcome"],  # ok | failed
)

source_fetch_failures_counter = Counter(
    "savings_source_fetch_failures_total",
    "Failed source fetches (timeout, HTTP error, unreadable body)",
)

ingestion_duration_histogram = Histogram(
    "savings_ingestion_duration_seconds",
    "Wall time of one full ingestion batch",
    buckets=[1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 60.0],
)

usable_banks_gauge = Gauge(
    "savings_usable_banks",
    "Banks with at least one tier in the loaded snapshot",
)

# Calculation metrics
calculation_counter = Counter(
    "savings_calculation_total",
    "Calculation requests",
    ["mode"],  # bank | custom
)

rejected_calculation_counter = Counter(
    "savings_calculation_rejected_total",
    "Calculation requests rejected for non-positive principal or rate",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_source_outcome(succeeded: bool) -> None:
    """Record one source's contribution to the batch success ratio"""
    source_outcome_counter.labels(outcome="ok" if succeeded else "failed").inc()
