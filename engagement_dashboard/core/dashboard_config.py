"""Dashboard configuration file.

The file is the JSON document the dashboard was always driven by::

    {
      "defaultSettings": {
        "currentSource": "v1",
        "currentTimeRange": "7d",
        "selectedMembers": ["A", "B"]
      },
      "memberColors": {"A": "#ff0000"},
      "videoNames": {"v1": "First video"},
      "urls": {
        "summarySheetUrl": "https://...",
        "sheetsUrls": {"v1": "https://..."}
      }
    }

A missing or malformed file never stops the service; it falls back to empty
defaults so the loop idles with a ``not_configured`` status.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .logger import get_logger

logger = get_logger("dashboard.config")


class DefaultSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_source: str = Field("", alias="currentSource")
    current_time_range: str = Field("7d", alias="currentTimeRange")
    selected_members: list[str] = Field(default_factory=list, alias="selectedMembers")


class SourceUrls(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary_sheet_url: str = Field("", alias="summarySheetUrl")
    sheets_urls: dict[str, str] = Field(default_factory=dict, alias="sheetsUrls")


class DashboardConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    default_settings: DefaultSettings = Field(
        default_factory=DefaultSettings, alias="defaultSettings"
    )
    member_colors: dict[str, str] = Field(default_factory=dict, alias="memberColors")
    video_names: dict[str, str] = Field(default_factory=dict, alias="videoNames")
    urls: SourceUrls = Field(default_factory=SourceUrls)

    def source_url(self, source: str) -> str | None:
        """Endpoint for ``source``, or None when it has no usable URL."""
        url = self.urls.sheets_urls.get(source)
        return url or None

    def display_name(self, key: str) -> str:
        return self.video_names.get(key) or key


def load_dashboard_config(path: str | Path) -> DashboardConfig:
    try:
        raw = Path(path).read_text(encoding="utf-8")
        config = DashboardConfig.model_validate_json(raw)
    except (OSError, ValidationError, ValueError) as e:
        logger.error(
            "dashboard_config_load_failed",
            extra={"path": str(path), "error": str(e)},
        )
        return DashboardConfig()
    logger.info(
        "dashboard_config_loaded",
        extra={
            "path": str(path),
            "sources": sorted(config.urls.sheets_urls),
            "default_source": config.default_settings.current_source,
        },
    )
    return config
