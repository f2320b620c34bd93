from engagement_dashboard.core.metrics import counter

REJECT_REASONS = (
    "missing_member",
    "missing_video_id",
    "missing_updated_at",
    "missing_video_key",
)

ROWS_REJECTED_TOTAL = counter(
    "rows_rejected_total",
    "Sheet rows dropped during parsing, by reason.",
    reason=REJECT_REASONS,
)
TIMESTAMPS_DEFAULTED_TOTAL = counter(
    "timestamps_defaulted_total",
    "Accepted rows whose unreadable timestamp was replaced with parse time.",
)
