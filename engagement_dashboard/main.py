import asyncio
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from engagement_dashboard.api.router import api_router
from engagement_dashboard.core.config import settings
from engagement_dashboard.core.dashboard_config import load_dashboard_config
from engagement_dashboard.core.logger import configure_logging, get_logger
from engagement_dashboard.infrastructure.http.sheet_client import SheetClient
from engagement_dashboard.services.state import DashboardState
from engagement_dashboard.services.sync import SyncService

logger = get_logger("dashboard.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("dashboard_service_starting")
    config = load_dashboard_config(settings.dashboard_config_path)
    app.state.http = httpx.AsyncClient(
        timeout=settings.fetch_timeout_seconds, follow_redirects=True
    )
    app.state.sheet_client = SheetClient(app.state.http)
    app.state.dashboard = DashboardState(config)
    app.state.sync_service = SyncService(app.state.dashboard, app.state.sheet_client)
    app.state.ready_event = asyncio.Event()
    app.state.stop_event = asyncio.Event()
    app.state.sync_task = asyncio.create_task(
        app.state.sync_service.run(app.state.stop_event, app.state)
    )
    try:
        yield
    finally:
        logger.info("dashboard_service_stopping")
        app.state.stop_event.set()
        app.state.sync_task.cancel()
        try:
            await app.state.sync_task
        except asyncio.CancelledError:  # expected during shutdown
            logger.debug("sync_task_cancelled")
        except Exception:  # noqa
            logger.debug("sync_task_non_critical_exit", exc_info=True)
        await app.state.http.aclose()


app = FastAPI(title="Engagement Dashboard", version="0.1.0", lifespan=lifespan)
app.include_router(api_router)

instrumentator = Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=True,
    excluded_handlers=["/docs", "/openapi.json", "/metrics"],
)
instrumentator.instrument(app).expose(app)
