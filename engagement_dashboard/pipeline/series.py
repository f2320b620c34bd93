"""Reshape filtered records into per-member series on a shared time axis.

Every member's value list is aligned 1:1 with the time axis. A slot holds the
metric value only when the member reported at exactly that timestamp;
otherwise it is None so the chart draws a gap instead of a false zero. When a
member has several records at the same timestamp the first one in dataset
order wins.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from engagement_dashboard.domain.models import Metric, MetricRecord


def build_time_axis(records: Iterable[MetricRecord]) -> List[datetime]:
    return sorted({r.updated_at for r in records})


def members_present(
    selected: Iterable[str], records: Sequence[MetricRecord]
) -> List[str]:
    """Selected members, in selection order, that have at least one record."""
    present = {r.member for r in records}
    return [m for m in selected if m in present]


def index_records(
    records: Iterable[MetricRecord],
) -> Dict[Tuple[str, datetime], MetricRecord]:
    index: Dict[Tuple[str, datetime], MetricRecord] = {}
    for r in records:
        index.setdefault((r.member, r.updated_at), r)
    return index


def build_series(
    records: Sequence[MetricRecord],
    members: Sequence[str],
    metric: Metric,
    time_axis: Optional[Sequence[datetime]] = None,
) -> Dict[str, List[Optional[int]]]:
    """Map each member to its axis-aligned values for ``metric``."""
    axis = build_time_axis(records) if time_axis is None else time_axis
    index = index_records(records)
    out: Dict[str, List[Optional[int]]] = {}
    for member in members:
        values: List[Optional[int]] = []
        for ts in axis:
            record = index.get((member, ts))
            values.append(None if record is None else metric.value_of(record))
        out[member] = values
    return out
