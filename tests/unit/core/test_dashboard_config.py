import json

from engagement_dashboard.core.dashboard_config import (
    DashboardConfig,
    load_dashboard_config,
)


def test_load_reads_original_json_shape(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "defaultSettings": {
                    "currentSource": "v1",
                    "currentTimeRange": "3d",
                    "selectedMembers": ["A"],
                },
                "memberColors": {"A": "#123456"},
                "videoNames": {"v1": "Video One"},
                "urls": {
                    "summarySheetUrl": "https://s/summary",
                    "sheetsUrls": {"v1": "https://s/v1", "v2": ""},
                },
            }
        ),
        encoding="utf-8",
    )
    config = load_dashboard_config(path)
    assert config.default_settings.current_source == "v1"
    assert config.default_settings.current_time_range == "3d"
    assert config.default_settings.selected_members == ["A"]
    assert config.member_colors == {"A": "#123456"}
    assert config.urls.summary_sheet_url == "https://s/summary"
    assert config.source_url("v1") == "https://s/v1"
    assert config.source_url("v2") is None
    assert config.source_url("missing") is None
    assert config.display_name("v1") == "Video One"
    assert config.display_name("v2") == "v2"


def test_missing_file_falls_back_to_empty_defaults(tmp_path, caplog):
    caplog.set_level("ERROR")
    config = load_dashboard_config(tmp_path / "nope.json")
    assert config == DashboardConfig()
    assert config.default_settings.current_time_range == "7d"
    assert config.default_settings.selected_members == []
    assert config.urls.sheets_urls == {}
    assert any("dashboard_config_load_failed" in r.message for r in caplog.records)


def test_malformed_file_falls_back(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_dashboard_config(path) == DashboardConfig()


def test_wrong_types_fall_back(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"memberColors": ["not", "a", "map"]}))
    assert load_dashboard_config(path) == DashboardConfig()
