"""Prometheus metrics for match quality, loop volume and rate-table health"""

from prometheus_client import Counter, Histogram

# Scoring metrics
score_counter = Counter(
    "timebank_score_total",
    "Total compatibility scores computed",
    ["priority"],  # low | medium | high | urgent
)

score_histogram = Histogram(
    "timebank_score_value",
    "Distribution of total compatibility scores",
    buckets=[20, 40, 60, 75, 85, 100],
)

# Loop metrics
loops_built_counter = Counter(
    "timebank_loops_built_total",
    "Trade loops built from rosters",
    ["type"],  # two_way | three_way
)

# Rate table metrics
unknown_category_counter = Counter(
    "timebank_unknown_category_total",
    "Credit calculations that fell back to the default rate",
)

market_rate_update_counter = Counter(
    "timebank_market_rate_updates_total",
    "Admin updates to category demand/supply multipliers",
    ["category"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_score(total_score: int, priority: str) -> None:
    """Record score metrics for monitoring match quality"""
    score_counter.labels(priority=priority).inc()
    score_histogram.observe(total_score)


def record_loops(groups) -> None:
    for group in groups:
        loops_built_counter.labels(type=group.type.value).inc()


def record_unknown_category(category: str) -> None:
    # Category is not a label: it is free text from clients
    unknown_category_counter.inc()
