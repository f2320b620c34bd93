from fastapi import APIRouter

from .endpoints import dashboard, health, session

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(session.router)
api_router.include_router(dashboard.router)
