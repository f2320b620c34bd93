import pytest

from engagement_dashboard.domain.errors import NotConfigured
from engagement_dashboard.services.summary import SummaryService


class StaticClient:
    def __init__(self, text):
        self.text = text
        self.urls = []

    async def fetch_csv(self, url):
        self.urls.append(url)
        return self.text


@pytest.mark.asyncio
async def test_load_ranks_and_flags_rows(state, sample_summary_csv):
    client = StaticClient(sample_summary_csv)
    rows = await SummaryService(state, client).load()

    assert client.urls == ["https://sheets.test/summary.csv"]
    assert [(r.video_key, r.member, r.is_top) for r in rows] == [
        ("V1", "B", True),
        ("V1", "A", False),
        ("V2", "C", True),
    ]
    assert rows[0].video_name == "V1"
    assert [r.group_separator for r in rows] == [False, True, False]
    assert len(state.summary) == 3


@pytest.mark.asyncio
async def test_display_name_comes_from_video_names(state):
    state.config.video_names["V9"] = "Ninth"
    text = "h\n1,A,x,x,V9,10,1,1%\n"
    rows = await SummaryService(state, StaticClient(text)).load()
    assert rows[0].video_name == "Ninth"


@pytest.mark.asyncio
async def test_missing_summary_url_raises_not_configured(state):
    state.config.urls.summary_sheet_url = ""
    with pytest.raises(NotConfigured):
        await SummaryService(state, StaticClient("")).load()


@pytest.mark.asyncio
async def test_cached_rows_match_last_load(state, sample_summary_csv):
    svc = SummaryService(state, StaticClient(sample_summary_csv))
    assert svc.cached() is None
    loaded = await svc.load()
    assert svc.cached() == loaded
