"""
Authentication API endpoints.

Sign-in is delegated to the external users service: the web client is sent
to its OAuth redirect URL, posts the returned code here, and receives an
HttpOnly session cookie.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from backend.dependencies import get_config, get_current_user, get_users_service
from backend.schemas import RedirectUrlResponse, SessionCreate, SuccessResponse
from organizer.core.config import Config
from organizer.integrations.users_service import UsersServiceClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


def _set_session_cookie(response: Response, config: Config, value: str, max_age: int) -> None:
    response.set_cookie(
        key=config.get("session_cookie_name", default="session_token"),
        value=value,
        max_age=max_age,
        path="/",
        httponly=True,
        secure=True,
        samesite="none",
    )


@router.get("/oauth/google/redirect_url", response_model=RedirectUrlResponse)
async def get_google_redirect_url(
    users: UsersServiceClient = Depends(get_users_service),
):
    """URL the browser should visit to sign in with Google."""
    return RedirectUrlResponse(redirectUrl=users.get_oauth_redirect_url("google"))


@router.post("/sessions", response_model=SuccessResponse)
async def create_session(
    body: SessionCreate,
    response: Response,
    config: Config = Depends(get_config),
    users: UsersServiceClient = Depends(get_users_service),
):
    """Exchange an OAuth code for a session and set the session cookie."""
    if not body.code:
        raise HTTPException(status_code=400, detail="No authorization code provided")

    session_token = users.exchange_code_for_session_token(body.code)
    max_age = int(config.get("session_max_age_days", default=60)) * 24 * 60 * 60
    _set_session_cookie(response, config, session_token, max_age)

    logger.info("Session created")
    return SuccessResponse()


@router.get("/users/me")
async def get_me(user: Dict[str, Any] = Depends(get_current_user)):
    """The signed-in user as returned by the users service."""
    return user


@router.get("/logout", response_model=SuccessResponse)
async def logout(
    request: Request,
    response: Response,
    config: Config = Depends(get_config),
    users: UsersServiceClient = Depends(get_users_service),
):
    """Revoke the remote session (if any) and clear the cookie."""
    session_token = request.cookies.get(
        config.get("session_cookie_name", default="session_token")
    )
    if session_token:
        users.delete_session(session_token)

    _set_session_cookie(response, config, "", 0)
    return SuccessResponse()
