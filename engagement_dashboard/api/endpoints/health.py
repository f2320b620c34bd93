from fastapi import APIRouter, Request, Response

router = APIRouter()


@router.get("/healthz")
async def healthz(request: Request):
    task = getattr(request.app.state, "sync_task", None)
    if task is not None and task.done():
        return Response(status_code=503, content="sync loop not running")
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(request: Request):
    if request.app.state.ready_event.is_set():
        return {"status": "ready"}
    return Response(status_code=503, content="not ready")
