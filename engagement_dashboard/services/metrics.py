from typing import get_args

from engagement_dashboard.core.metrics import FETCH_BUCKETS, counter, gauge, histogram
from engagement_dashboard.domain.models import SyncKind

# idle and syncing are never a tick's final result
TICK_KINDS = tuple(k for k in get_args(SyncKind) if k not in ("idle", "syncing"))

SYNC_RUNS_TOTAL = counter(
    "sync_runs_total", "Sync ticks by resulting status kind.", kind=TICK_KINDS
)
DATASET_REPLACEMENTS_TOTAL = counter(
    "dataset_replacements_total", "Times a changed fetch replaced the dataset."
)
STALE_RESPONSES_TOTAL = counter(
    "stale_responses_total",
    "Fetch responses discarded because a newer fetch had been issued.",
)
SYNC_LOOP_ERRORS_TOTAL = counter(
    "sync_loop_errors_total", "Unexpected exceptions caught by the sync loop."
)
DATASET_RECORDS = gauge("dataset_records", "Records in the currently held dataset.")
SYNC_LATENCY_SECONDS = histogram(
    "sync_latency_seconds",
    "Wall time of a full fetch-parse-apply tick.",
    buckets=FETCH_BUCKETS,
)
