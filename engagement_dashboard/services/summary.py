from typing import Dict, List, Optional

from engagement_dashboard.core.logger import get_logger
from engagement_dashboard.domain.errors import NotConfigured
from engagement_dashboard.domain.models import SummaryRecord, SummaryRow
from engagement_dashboard.infrastructure.http.sheet_client import SheetClient
from engagement_dashboard.parsing.record_parser import parse_summary_records
from engagement_dashboard.pipeline.ranking import (
    flatten_ranked,
    group_by_video,
    rank_summary,
)

from .state import DashboardState

logger = get_logger("dashboard.summary")

SUMMARY_SOURCE = "summary"


class SummaryService:
    """Loads the summary sheet and ranks members per video.

    The table is recomputed wholesale on every load.
    """

    def __init__(self, state: DashboardState, client: SheetClient):
        self.state = state
        self.client = client

    async def load(self) -> List[SummaryRow]:
        url = self.state.config.urls.summary_sheet_url
        if not url:
            raise NotConfigured(SUMMARY_SOURCE)
        text = await self.client.fetch_csv(url)
        parsed = parse_summary_records(text)
        ranked = rank_summary(parsed.records)
        self.state.replace_summary(flatten_ranked(ranked))
        logger.info(
            "summary_loaded",
            extra={
                "rows": len(parsed.records),
                "videos": len(ranked),
                "rows_dropped": len(parsed.rejected),
            },
        )
        return self.rows(ranked)

    def cached(self) -> Optional[List[SummaryRow]]:
        """Rows from the last successful load, or None before the first one."""
        if not self.state.summary:
            return None
        return self.rows(group_by_video(self.state.summary))

    def rows(self, ranked: Dict[str, List[SummaryRecord]]) -> List[SummaryRow]:
        """Table rows in group order; the last row of each group is flagged."""
        config = self.state.config
        out: List[SummaryRow] = []
        groups = list(ranked.values())
        for gi, group in enumerate(groups):
            for ri, record in enumerate(group):
                out.append(
                    SummaryRow(
                        video_key=record.video_key,
                        video_name=config.display_name(record.video_key),
                        member=record.member,
                        view_count=record.view_count,
                        like_count=record.like_count,
                        like_ratio=record.like_ratio,
                        is_top=record.is_top,
                        group_separator=(
                            ri == len(group) - 1 and gi < len(groups) - 1
                        ),
                    )
                )
        return out
