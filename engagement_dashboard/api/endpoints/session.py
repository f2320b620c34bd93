from fastapi import APIRouter, HTTPException, Request, Response, status
from pydantic import BaseModel, Field

from engagement_dashboard.api.dependencies import (
    CURRENT_USER_COOKIE,
    LOGGED_IN_COOKIE,
    REMEMBER_ME_COOKIE,
)
from engagement_dashboard.core.config import settings
from engagement_dashboard.core.logger import get_logger

router = APIRouter(prefix="/session")
logger = get_logger("dashboard.session")


class LoginRequest(BaseModel):
    username: str = Field(..., description="Display name shown in the header")
    remember_me: bool = False


@router.post("/login")
async def login(body: LoginRequest, response: Response):
    username = body.username.strip()
    if not username:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="username must not be empty",
        )
    response.set_cookie(LOGGED_IN_COOKIE, "true", samesite="lax")
    response.set_cookie(CURRENT_USER_COOKIE, username, samesite="lax")
    if body.remember_me:
        response.set_cookie(REMEMBER_ME_COOKIE, "true", samesite="lax")
    logger.info("session_login", extra={"user": username})
    return {"logged_in": True, "user": username}


@router.post("/logout")
async def logout(response: Response):
    for cookie in (LOGGED_IN_COOKIE, CURRENT_USER_COOKIE, REMEMBER_ME_COOKIE):
        response.delete_cookie(cookie)
    return {"logged_in": False}


@router.get("")
async def whoami(request: Request):
    logged_in = request.cookies.get(LOGGED_IN_COOKIE) == "true"
    return {
        "logged_in": logged_in,
        "user": request.cookies.get(CURRENT_USER_COOKIE)
        or settings.default_display_name,
    }
