from fastapi import Depends, HTTPException, Request, status

from engagement_dashboard.infrastructure.http.sheet_client import SheetClient
from engagement_dashboard.services.charts import ChartService
from engagement_dashboard.services.state import DashboardState
from engagement_dashboard.services.summary import SummaryService
from engagement_dashboard.services.sync import SyncService

LOGGED_IN_COOKIE = "isLoggedIn"
CURRENT_USER_COOKIE = "currentUser"
REMEMBER_ME_COOKIE = "rememberMe"


def get_state(request: Request) -> DashboardState:
    return request.app.state.dashboard  # type: ignore[return-value]


def get_sheet_client(request: Request) -> SheetClient:
    return request.app.state.sheet_client  # type: ignore[return-value]


def get_sync_service(request: Request) -> SyncService:
    return request.app.state.sync_service  # type: ignore[return-value]


def get_chart_service(state: DashboardState = Depends(get_state)) -> ChartService:
    return ChartService(state)


def get_summary_service(
    state: DashboardState = Depends(get_state),
    client: SheetClient = Depends(get_sheet_client),
) -> SummaryService:
    return SummaryService(state, client)


def require_session(request: Request) -> str:
    """UX gate only: the dashboard hides itself until the login flag is set."""
    if request.cookies.get(LOGGED_IN_COOKIE) != "true":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="login required"
        )
    return request.cookies.get(CURRENT_USER_COOKIE, "")
