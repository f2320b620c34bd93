from typing import Dict, List, Sequence

from engagement_dashboard.domain.models import SummaryRecord


def group_by_video(records: Sequence[SummaryRecord]) -> Dict[str, List[SummaryRecord]]:
    """Group records by video key; groups keep first-occurrence order."""
    groups: Dict[str, List[SummaryRecord]] = {}
    for record in records:
        groups.setdefault(record.video_key, []).append(record)
    return groups


def rank_summary(records: Sequence[SummaryRecord]) -> Dict[str, List[SummaryRecord]]:
    """Rank each video group by views and mark its top performer.

    Each group is stable-sorted descending by ``view_count`` so that on a tie
    the record listed first in the sheet keeps the top spot. Exactly one
    record per group comes back with ``is_top=True``; input records are not
    modified.
    """
    ranked: Dict[str, List[SummaryRecord]] = {}
    for video_key, group in group_by_video(records).items():
        ordered = sorted(group, key=lambda r: r.view_count, reverse=True)
        ranked[video_key] = [
            r.model_copy(update={"is_top": i == 0}) for i, r in enumerate(ordered)
        ]
    return ranked


def flatten_ranked(ranked: Dict[str, List[SummaryRecord]]) -> List[SummaryRecord]:
    return [r for group in ranked.values() for r in group]
