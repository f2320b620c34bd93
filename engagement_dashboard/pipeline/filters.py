from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from engagement_dashboard.domain.models import MetricRecord
from engagement_dashboard.domain.time_window import TimeWindow


def cutoff_for(window: TimeWindow, now: datetime) -> Optional[datetime]:
    """Earliest timestamp kept by ``window``; None means no cutoff."""
    duration = window.duration
    if duration is None:
        return None
    return now - duration


def filter_by_time_window(
    records: Sequence[MetricRecord],
    window: TimeWindow,
    now: Optional[datetime] = None,
) -> List[MetricRecord]:
    cutoff = cutoff_for(window, now or datetime.now(timezone.utc))
    if cutoff is None:
        return list(records)
    return [r for r in records if r.updated_at >= cutoff]


def filter_by_members(
    records: Sequence[MetricRecord], selected: Iterable[str]
) -> List[MetricRecord]:
    wanted = set(selected)
    if not wanted:
        return []
    return [r for r in records if r.member in wanted]


def filter_records(
    records: Sequence[MetricRecord],
    window: TimeWindow,
    selected: Iterable[str],
    now: Optional[datetime] = None,
) -> List[MetricRecord]:
    """Records inside ``window`` that belong to a selected member.

    Returns a new list; an empty selection yields an empty list.
    """
    return filter_by_members(filter_by_time_window(records, window, now), selected)
