from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from engagement_dashboard.core.config import settings
from engagement_dashboard.domain.models import (
    ChartData,
    ChartsView,
    MemberSeries,
    Metric,
)
from engagement_dashboard.parsing.record_parser import resolve_timezone
from engagement_dashboard.pipeline.filters import filter_records
from engagement_dashboard.pipeline.series import (
    build_series,
    build_time_axis,
    members_present,
)

from .state import DashboardState

LABEL_FORMAT = "%m-%d %H:%M"


class ChartService:
    """Builds the three metric charts for the state's current selections.

    Charts are rebuilt from scratch on every call; nothing is cached between
    requests.
    """

    def __init__(self, state: DashboardState):
        self.state = state

    def build(self, now: Optional[datetime] = None) -> ChartsView:
        state = self.state
        config = state.config
        view = ChartsView(
            source=state.source,
            video_name=config.display_name(state.source),
            time_window=state.time_window.value,
            has_data=False,
        )
        filtered = filter_records(
            state.dataset,
            state.time_window,
            state.selected_members,
            now or datetime.now(timezone.utc),
        )
        if not filtered:
            return view

        members = members_present(state.selected_members, filtered)
        axis = build_time_axis(filtered)
        labels = format_labels(axis)
        for metric in Metric:
            values = build_series(filtered, members, metric, time_axis=axis)
            view.charts.append(
                ChartData(
                    metric=metric,
                    title=view.video_name,
                    time_axis=axis,
                    labels=labels,
                    series=[
                        MemberSeries(
                            member=m,
                            color=config.member_colors.get(m)
                            or settings.default_member_color,
                            values=values[m],
                        )
                        for m in members
                    ],
                )
            )
        view.has_data = True
        return view


def format_labels(axis, tz_name: Optional[str] = None) -> list[str]:
    tz = resolve_timezone(tz_name or settings.data_timezone)
    return [ts.astimezone(tz).strftime(LABEL_FORMAT) for ts in axis]
