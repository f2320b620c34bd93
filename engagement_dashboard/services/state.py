from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from engagement_dashboard.core.dashboard_config import DashboardConfig
from engagement_dashboard.domain.models import MetricRecord, SummaryRecord, SyncStatus
from engagement_dashboard.domain.time_window import TimeWindow


class DashboardState:
    """Working set of one dashboard: dataset, filter selections, sync status.

    The dataset is only ever replaced wholesale. Filter selections start from
    the configured defaults and are never persisted. Fetches are tagged with
    increasing sequence numbers so a slow response that lands after a newer
    fetch was issued can be recognised and dropped.
    """

    def __init__(self, config: DashboardConfig):
        self.config = config
        defaults = config.default_settings
        self._source = defaults.current_source
        self._time_window = TimeWindow.parse(
            defaults.current_time_range, default=TimeWindow.DAYS_7
        )
        # dict keys double as an insertion-ordered set
        self._selected: dict[str, None] = dict.fromkeys(defaults.selected_members)
        self._dataset: tuple[MetricRecord, ...] = ()
        self._fingerprint = ""
        self._summary: tuple[SummaryRecord, ...] = ()
        self._issued_sequence = 0
        self.status = SyncStatus(source=self._source)

    # Dataset
    @property
    def dataset(self) -> tuple[MetricRecord, ...]:
        return self._dataset

    @property
    def fingerprint(self) -> str:
        return self._fingerprint

    def has_changed(self, records: Sequence[MetricRecord], fingerprint: str) -> bool:
        return len(records) != len(self._dataset) or fingerprint != self._fingerprint

    def replace_dataset(self, records: Sequence[MetricRecord], fingerprint: str):
        self._dataset = tuple(records)
        self._fingerprint = fingerprint

    def latest_data_at(self) -> Optional[datetime]:
        if not self._dataset:
            return None
        return max(r.updated_at for r in self._dataset)

    # Summary
    @property
    def summary(self) -> tuple[SummaryRecord, ...]:
        return self._summary

    def replace_summary(self, records: Sequence[SummaryRecord]):
        self._summary = tuple(records)

    # Filters
    @property
    def source(self) -> str:
        return self._source

    def set_source(self, source: str):
        self._source = source

    @property
    def time_window(self) -> TimeWindow:
        return self._time_window

    def set_time_window(self, window: TimeWindow):
        self._time_window = window

    @property
    def selected_members(self) -> List[str]:
        return list(self._selected)

    def toggle_member(self, member: str) -> bool:
        """Flip ``member`` in the selection; returns True if now selected."""
        if member in self._selected:
            del self._selected[member]
            return False
        self._selected[member] = None
        return True

    # Fetch sequencing
    def begin_fetch(self) -> int:
        self._issued_sequence += 1
        return self._issued_sequence

    def is_latest(self, sequence: int) -> bool:
        return sequence == self._issued_sequence
