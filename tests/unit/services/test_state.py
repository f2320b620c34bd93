from engagement_dashboard.core.dashboard_config import DashboardConfig
from engagement_dashboard.domain.time_window import TimeWindow
from engagement_dashboard.services.state import DashboardState


def test_defaults_come_from_config(state):
    assert state.source == "v1"
    assert state.time_window is TimeWindow.ALL
    assert state.selected_members == ["A", "B"]
    assert state.dataset == ()
    assert state.status.kind == "idle"


def test_unknown_default_time_range_falls_back_to_7d():
    config = DashboardConfig.model_validate(
        {"defaultSettings": {"currentTimeRange": "90d"}}
    )
    assert DashboardState(config).time_window is TimeWindow.DAYS_7


def test_toggle_member_keeps_insertion_order(state):
    assert state.toggle_member("A") is False
    assert state.toggle_member("C") is True
    assert state.toggle_member("A") is True
    assert state.selected_members == ["B", "C", "A"]


def test_fetch_sequence_only_latest_applies(state):
    first = state.begin_fetch()
    second = state.begin_fetch()
    assert second > first
    assert state.is_latest(second)
    assert not state.is_latest(first)


def test_change_detection(state):
    assert state.has_changed([], "x") is True
    state.replace_dataset([], "x")
    assert state.has_changed([], "x") is False
    assert state.latest_data_at() is None
