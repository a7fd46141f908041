"""Session routes: log in, log out, and read the caller's profile."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.deps import AUTH_COOKIE, get_db, require_auth
from app.config import get_settings
from app.models.user import User
from app.schemas.auth import LoginRequest, ProfileRead, TokenResponse
from app.services.auth import authenticate_user, create_access_token
from app.services.errors import UnauthenticatedError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> TokenResponse:
    """Exchange credentials for a token, returned in the body and as a cookie."""
    user = authenticate_user(db, body.username, body.password)
    if user is None:
        logger.info("login_failed: username=%s", body.username)
        raise UnauthenticatedError("Invalid username or password")

    lifetime = get_settings().access_token_expire_hours * 3600
    token = create_access_token(data={"sub": user.username})
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        max_age=lifetime,
        path="/",
    )
    logger.info("login_succeeded: user=%s", user.id)
    return TokenResponse(access_token=token, expires_in=lifetime)


@router.post("/logout")
def logout(response: Response) -> dict:
    response.delete_cookie(key=AUTH_COOKIE, path="/")
    return {"detail": "Logged out"}


@router.get("/me", response_model=ProfileRead)
def me(current_user: User = Depends(require_auth)) -> ProfileRead:
    return ProfileRead.model_validate(current_user)
