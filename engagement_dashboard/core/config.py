from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Dashboard configuration file (sources, members, colors)
    dashboard_config_path: str = "config.json"

    # Sync loop
    sync_interval_seconds: float = 60.0
    sync_startup_delay_seconds: float = 1.0

    # Sheet fetching
    fetch_timeout_seconds: float = 30.0
    fetch_retries: int = 1  # 1 = single attempt per tick
    fetch_retry_base_delay_seconds: float = 0.5

    # CSV columns of the per-source metric sheets
    column_member: str = "成员"
    column_video_id: str = "视频ID"
    column_updated_at: str = "更新时间"
    column_view_count: str = "观看次数"
    column_like_count: str = "点赞数"
    column_comment_count: str = "评论数"

    # Naive sheet timestamps are read in this zone; labels are rendered in it
    data_timezone: str = "UTC"

    # Charts
    default_member_color: str = "#64B5F6"

    # Session gate
    default_display_name: str = "User"

    # Logging
    app_log_level: str = "INFO"
    app_log_redaction_patterns: list[str] = [
        "password",
        "token",
        "secret",
        "authorization",
        "cookie",
    ]

    otel_service_name: str = "engagement-dashboard"
    app_environment: str = "production"


settings = Settings()
