"""Prometheus metrics for TradeMatch.

Defines and exposes operational metrics for monitoring and alerting.
"""

from prometheus_client import Counter, Histogram

# Matching run metrics
matching_runs_total = Counter(
    "tradematch_matching_runs_total",
    "Total matching runs per buy request",
    ["outcome"]  # outcome: completed|skipped|store_error
)

matching_run_duration_seconds = Histogram(
    "tradematch_matching_run_duration_seconds",
    "Time spent on one matching run in seconds",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

matches_created_total = Counter(
    "tradematch_matches_created_total",
    "Total matches persisted by the matching engine"
)

match_write_failures_total = Counter(
    "tradematch_match_write_failures_total",
    "Match writes that did not create a match",
    ["kind"]  # kind: duplicate|write_error
)

match_score = Histogram(
    "tradematch_match_score",
    "Score distribution of admitted matches",
    buckets=[50, 55, 60, 65, 70, 75, 80, 85, 90, 95, 100]
)

# Batch re-matching metrics
rematch_requests_processed_total = Counter(
    "tradematch_rematch_requests_processed_total",
    "Buy requests processed by catalog-wide re-matching"
)

# Notification metrics
notifications_dispatched_total = Counter(
    "tradematch_notifications_dispatched_total",
    "Notification intents handed to a sink",
    ["status"]  # status: success|error
)
