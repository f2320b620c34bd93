from datetime import datetime, timezone

import httpx
import pytest

from engagement_dashboard.core.dashboard_config import DashboardConfig
from engagement_dashboard.infrastructure.http.sheet_client import SheetClient
from engagement_dashboard.services.state import DashboardState

METRIC_HEADER = "成员,视频ID,更新时间,观看次数,点赞数,评论数"


def metric_csv(*rows: str) -> str:
    """Build a metric sheet export from data rows."""
    return "\n".join([METRIC_HEADER, *rows]) + "\n"


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def dashboard_config() -> DashboardConfig:
    return DashboardConfig.model_validate(
        {
            "defaultSettings": {
                "currentSource": "v1",
                "currentTimeRange": "all",
                "selectedMembers": ["A", "B"],
            },
            "memberColors": {"A": "#ff0000"},
            "videoNames": {"v1": "First Video", "v2": "Second Video"},
            "urls": {
                "summarySheetUrl": "https://sheets.test/summary.csv",
                "sheetsUrls": {"v1": "https://sheets.test/v1.csv", "v2": ""},
            },
        }
    )


@pytest.fixture
def state(dashboard_config) -> DashboardState:
    return DashboardState(dashboard_config)


@pytest.fixture
def sample_metric_csv() -> str:
    return metric_csv(
        'A,vid1,2024-01-01T00:00:00Z,"1,000",10,1',
        'B,vid1,2024-01-01T00:00:00Z,"1,500",15,2',
        'A,vid1,2024-01-02T00:00:00Z,"2,000",20,3',
    )


@pytest.fixture
def sample_summary_csv() -> str:
    return (
        "序号,成员,组,日期,视频,观看次数,点赞数,点赞率\n"
        '1,A,g1,d,V1,500,50,"10.0%"\n'
        '2,B,g1,d,V1,"900",90,"10.0%"\n'
        '3,C,g1,d,V2,"1,200",60,"5.0%"\n'
    )


def make_sheet_client(handler) -> SheetClient:
    """SheetClient backed by an httpx.MockTransport handler."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SheetClient(client, retries=1, base_delay=0)


@pytest.fixture(name="metric_csv")
def metric_csv_fixture():
    return metric_csv


@pytest.fixture(name="sheet_client_for")
def sheet_client_for_fixture():
    return make_sheet_client
