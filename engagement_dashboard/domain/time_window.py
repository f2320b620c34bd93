from datetime import timedelta
from enum import Enum
from typing import Optional


class TimeWindow(str, Enum):
    """Relative recency cutoff applied to the dataset before charting."""

    HOURS_6 = "6h"
    HOURS_12 = "12h"
    DAY_1 = "1d"
    DAYS_3 = "3d"
    DAYS_7 = "7d"
    ALL = "all"

    @property
    def duration(self) -> Optional[timedelta]:
        """Window length, or None for ``all`` (no cutoff)."""
        return _DURATIONS[self]

    @classmethod
    def parse(
        cls, value: str, default: Optional["TimeWindow"] = None
    ) -> "TimeWindow":
        try:
            return cls(value)
        except ValueError:
            if default is None:
                raise
            return default


_DURATIONS = {
    TimeWindow.HOURS_6: timedelta(hours=6),
    TimeWindow.HOURS_12: timedelta(hours=12),
    TimeWindow.DAY_1: timedelta(days=1),
    TimeWindow.DAYS_3: timedelta(days=3),
    TimeWindow.DAYS_7: timedelta(days=7),
    TimeWindow.ALL: None,
}
