"""Turn raw sheet CSV text into typed records.

Parsing is lenient on purpose: a bad number becomes 0, a bad timestamp becomes
"now", and a row without its identifying fields is dropped. Nothing here
raises for bad input; dropped rows are reported through ``ParseResult`` and
the ``dashboard_rows_rejected_total`` counter instead.
"""

from __future__ import annotations

import hashlib
import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from engagement_dashboard.core.config import Settings, settings
from engagement_dashboard.core.logger import get_logger
from engagement_dashboard.domain.models import MetricRecord, SummaryRecord

from .csv_reader import read_dicts, split_rows
from .metrics import ROWS_REJECTED_TOTAL, TIMESTAMPS_DEFAULTED_TOTAL

logger = get_logger("dashboard.record_parser")

_LEADING_INT_RE = re.compile(r"^\s*\+?(\d+)")

# Sheet exports use a handful of layouts besides ISO-8601
_TIMESTAMP_FORMATS = (
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
)

# Positional layout of the summary sheet
SUMMARY_MEMBER_COL = 1
SUMMARY_VIDEO_KEY_COL = 4
SUMMARY_VIEW_COUNT_COL = 5
SUMMARY_LIKE_COUNT_COL = 6
SUMMARY_LIKE_RATIO_COL = 7


@dataclass(frozen=True)
class MetricColumns:
    member: str
    video_id: str
    updated_at: str
    view_count: str
    like_count: str
    comment_count: str

    @classmethod
    def from_settings(cls, cfg: Settings) -> "MetricColumns":
        return cls(
            member=cfg.column_member,
            video_id=cfg.column_video_id,
            updated_at=cfg.column_updated_at,
            view_count=cfg.column_view_count,
            like_count=cfg.column_like_count,
            comment_count=cfg.column_comment_count,
        )

    def ordered(self) -> Tuple[str, ...]:
        return (
            self.member,
            self.video_id,
            self.updated_at,
            self.view_count,
            self.like_count,
            self.comment_count,
        )


@dataclass(frozen=True)
class RowDecision:
    accepted: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class RejectedRow:
    line: int
    reason: str


@dataclass
class ParseResult:
    records: List[MetricRecord] = field(default_factory=list)
    rejected: List[RejectedRow] = field(default_factory=list)
    defaulted_timestamps: int = 0
    fingerprint: str = ""

    @property
    def rows_dropped(self) -> int:
        return len(self.rejected)


@dataclass
class SummaryParseResult:
    records: List[SummaryRecord] = field(default_factory=list)
    rejected: List[RejectedRow] = field(default_factory=list)


def parse_number(value: Any) -> int:
    """Normalize a sheet number such as ``"1,234"`` to an int; junk becomes 0."""
    if value is None:
        return 0
    match = _LEADING_INT_RE.match(str(value).replace(",", ""))
    if not match:
        return 0
    try:
        return int(match.group(1))
    except ValueError:  # past the interpreter's int digit limit
        return 0


def resolve_timezone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def parse_timestamp(
    value: Optional[str], tz: tzinfo, now: datetime
) -> Tuple[datetime, bool]:
    """Parse a sheet timestamp to an aware UTC datetime.

    Returns ``(timestamp, defaulted)``; ``defaulted`` is True when the value
    could not be read and ``now`` was used in its place.
    """
    text = (value or "").strip()
    if not text:
        return now, True
    parsed: Optional[datetime] = None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        for fmt in _TIMESTAMP_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return now, True
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed.astimezone(timezone.utc), False


def evaluate_row(row: Dict[str, str], columns: MetricColumns) -> RowDecision:
    """Accept a metric row only if it identifies member, video and time."""
    if not row.get(columns.member):
        return RowDecision(False, "missing_member")
    if not row.get(columns.video_id):
        return RowDecision(False, "missing_video_id")
    if not row.get(columns.updated_at):
        return RowDecision(False, "missing_updated_at")
    return RowDecision(True)


def evaluate_summary_row(cols: Sequence[str]) -> RowDecision:
    if not _col(cols, SUMMARY_MEMBER_COL):
        return RowDecision(False, "missing_member")
    if not _col(cols, SUMMARY_VIDEO_KEY_COL):
        return RowDecision(False, "missing_video_key")
    return RowDecision(True)


def parse_metric_records(
    text: str,
    columns: Optional[MetricColumns] = None,
    tz_name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ParseResult:
    """Parse a metric sheet into records sorted ascending by ``updated_at``.

    The sort is stable, so rows sharing a timestamp keep their sheet order.
    """
    columns = columns or MetricColumns.from_settings(settings)
    tz = resolve_timezone(tz_name or settings.data_timezone)
    now = now or datetime.now(timezone.utc)

    result = ParseResult()
    accepted: List[Tuple[MetricRecord, Tuple[str, ...]]] = []
    for line, row in read_dicts(text):
        decision = evaluate_row(row, columns)
        if not decision.accepted:
            _reject(result.rejected, line, decision.reason)
            continue
        updated_at, defaulted = parse_timestamp(row[columns.updated_at], tz, now)
        if defaulted:
            result.defaulted_timestamps += 1
            TIMESTAMPS_DEFAULTED_TOTAL.inc()
            logger.debug(
                "timestamp_defaulted_to_now",
                extra={"line": line, "value": row[columns.updated_at]},
            )
        record = MetricRecord(
            member=row[columns.member],
            video_id=row[columns.video_id],
            updated_at=updated_at,
            view_count=parse_number(row.get(columns.view_count)),
            like_count=parse_number(row.get(columns.like_count)),
            comment_count=parse_number(row.get(columns.comment_count)),
        )
        accepted.append((record, tuple(row.get(c, "") for c in columns.ordered())))

    accepted.sort(key=lambda pair: pair[0].updated_at)
    result.records = [record for record, _ in accepted]
    result.fingerprint = dataset_fingerprint(raw for _, raw in accepted)
    if result.rejected:
        logger.info(
            "metric_rows_rejected",
            extra={
                "rows_dropped": result.rows_dropped,
                "rows_accepted": len(result.records),
            },
        )
    return result


def parse_summary_records(text: str) -> SummaryParseResult:
    """Parse the positional summary sheet; the first row is a header."""
    result = SummaryParseResult()
    rows = split_rows(text)
    next(rows, None)  # header
    for line, cols in rows:
        decision = evaluate_summary_row(cols)
        if not decision.accepted:
            _reject(result.rejected, line, decision.reason)
            continue
        result.records.append(
            SummaryRecord(
                member=_col(cols, SUMMARY_MEMBER_COL),
                video_key=_col(cols, SUMMARY_VIDEO_KEY_COL),
                view_count=parse_number(_col(cols, SUMMARY_VIEW_COUNT_COL)),
                like_count=parse_number(_col(cols, SUMMARY_LIKE_COUNT_COL)),
                like_ratio=_col(cols, SUMMARY_LIKE_RATIO_COL),
            )
        )
    return result


def dataset_fingerprint(raw_rows) -> str:
    """Stable digest of accepted rows, used to tell whether a fetch changed."""
    payload = json.dumps([list(r) for r in raw_rows], ensure_ascii=False)
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


def _col(cols: Sequence[str], index: int) -> str:
    return cols[index] if index < len(cols) else ""


def _reject(rejected: List[RejectedRow], line: int, reason: Optional[str]):
    reason = reason or "rejected"
    rejected.append(RejectedRow(line=line, reason=reason))
    ROWS_REJECTED_TOTAL.labels(reason=reason).inc()
    logger.debug("row_rejected", extra={"line": line, "reason": reason})
