from fastapi import APIRouter, Depends, HTTPException, status

from engagement_dashboard.api.dependencies import (
    get_chart_service,
    get_state,
    get_summary_service,
    get_sync_service,
    require_session,
)
from engagement_dashboard.core.logger import get_logger
from engagement_dashboard.domain.errors import (
    EmptyOrInvalidPayload,
    NotConfigured,
    TransportError,
)
from engagement_dashboard.domain.time_window import TimeWindow
from engagement_dashboard.services.charts import ChartService
from engagement_dashboard.services.state import DashboardState
from engagement_dashboard.services.summary import SummaryService
from engagement_dashboard.services.sync import SyncService

router = APIRouter(prefix="/dashboard", dependencies=[Depends(require_session)])
logger = get_logger("dashboard.api")


@router.get("/charts")
async def charts(svc: ChartService = Depends(get_chart_service)):
    return svc.build()


@router.get("/summary")
async def summary(
    refresh: bool = True, svc: SummaryService = Depends(get_summary_service)
):
    if not refresh:
        cached = svc.cached()
        if cached is not None:
            return {"rows": cached, "cached": True}
    try:
        rows = await svc.load()
    except NotConfigured as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        )
    except (TransportError, EmptyOrInvalidPayload) as e:
        logger.warning("summary_load_failed", extra={"kind": e.kind, "error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"kind": e.kind, "message": str(e)},
        )
    return {"rows": rows, "cached": False}


@router.get("/status")
async def sync_status(state: DashboardState = Depends(get_state)):
    return {
        "status": state.status,
        "latest_data_at": state.latest_data_at(),
        "record_count": len(state.dataset),
    }


@router.get("/sources")
async def sources(state: DashboardState = Depends(get_state)):
    config = state.config
    keys = list(dict.fromkeys([*config.urls.sheets_urls, *config.video_names]))
    return {
        "current": state.source,
        "sources": [
            {
                "key": key,
                "name": config.display_name(key),
                "enabled": config.source_url(key) is not None,
            }
            for key in keys
        ],
    }


@router.put("/source/{source}")
async def select_source(
    source: str,
    state: DashboardState = Depends(get_state),
    sync: SyncService = Depends(get_sync_service),
):
    state.set_source(source)
    logger.info("source_selected", extra={"source": source})
    result = await sync.sync_once()
    return {"source": source, "status": result}


@router.put("/time-window/{window}")
async def select_time_window(
    window: TimeWindow, state: DashboardState = Depends(get_state)
):
    state.set_time_window(window)
    return {"time_window": window.value}


@router.post("/members/{member}/toggle")
async def toggle_member(member: str, state: DashboardState = Depends(get_state)):
    selected = state.toggle_member(member)
    return {
        "member": member,
        "selected": selected,
        "selected_members": state.selected_members,
    }
