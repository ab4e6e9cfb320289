"""Prometheus metrics for upstream fetch health and report volume"""

from prometheus_client import Counter, Histogram

# Upstream API metrics
upstream_request_duration_histogram = Histogram(
    "upstream_request_duration_seconds",
    "Stripe list API page latency",
    ["kind"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

upstream_page_failures_counter = Counter(
    "upstream_page_failures_total",
    "List page fetches that failed and cut pagination short",
    ["kind"],
)

account_fetch_failures_counter = Counter(
    "account_fetch_failures_total",
    "Accounts skipped in a multi-account report",
)

# Report metrics
report_rows_counter = Counter(
    "report_rows_total",
    "Rows produced by reports before pagination",
    ["view"],  # summary | detail
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_report(view: str, row_count: int) -> None:
    """Record how many rows a report produced"""
    report_rows_counter.labels(view=view).inc(row_count)
