from engagement_dashboard.core.metrics import FETCH_BUCKETS, counter, histogram

FETCH_OUTCOMES = ("ok", "transport_error", "http_error", "invalid_payload")

FETCH_REQUESTS_TOTAL = counter(
    "sheet_fetch_requests_total",
    "Sheet CSV fetches, by outcome.",
    outcome=FETCH_OUTCOMES,
)
FETCH_LATENCY_SECONDS = histogram(
    "sheet_fetch_latency_seconds",
    "Latency of sheet CSV fetches.",
    buckets=FETCH_BUCKETS,
)
