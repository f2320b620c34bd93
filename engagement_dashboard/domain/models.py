from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class MetricRecord(BaseModel):
    """One engagement snapshot for a member's video at a point in time."""

    model_config = ConfigDict(frozen=True)

    member: str
    video_id: str
    updated_at: datetime
    view_count: int = Field(0, ge=0)
    like_count: int = Field(0, ge=0)
    comment_count: int = Field(0, ge=0)


class Metric(str, Enum):
    """Charted metrics and the record attribute each one reads."""

    VIEWS = "views"
    LIKES = "likes"
    COMMENTS = "comments"

    @property
    def attribute(self) -> str:
        return {
            Metric.VIEWS: "view_count",
            Metric.LIKES: "like_count",
            Metric.COMMENTS: "comment_count",
        }[self]

    def value_of(self, record: MetricRecord) -> int:
        return getattr(record, self.attribute)


class MemberSeries(BaseModel):
    member: str
    color: str
    values: List[Optional[int]]  # None = no report at this timestamp, not zero


class ChartData(BaseModel):
    metric: Metric
    title: str
    time_axis: List[datetime]
    labels: List[str]
    series: List[MemberSeries]


class ChartsView(BaseModel):
    source: str
    video_name: str
    time_window: str
    has_data: bool
    charts: List[ChartData] = Field(default_factory=list)


class SummaryRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    member: str
    video_key: str
    view_count: int = 0
    like_count: int = 0
    like_ratio: str = ""
    is_top: bool = False


class SummaryRow(BaseModel):
    video_key: str
    video_name: str
    member: str
    view_count: int
    like_count: int
    like_ratio: str
    is_top: bool
    group_separator: bool = False


SyncKind = Literal[
    "idle",
    "syncing",
    "ok",
    "not_configured",
    "transport_error",
    "invalid_payload",
    "stale",
    "error",
]


class SyncStatus(BaseModel):
    kind: SyncKind = "idle"
    message: str = ""
    source: str = ""
    changed: bool = False
    record_count: int = 0
    rows_dropped: int = 0
    latest_data_at: Optional[datetime] = None
    checked_at: Optional[datetime] = None
    sequence: int = 0
