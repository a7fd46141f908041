"""Authentication service: users, password checks and JWT access tokens.

Tokens carry the username in `sub`. The same token is accepted from the
Authorization header or the browser cookie (see app.api.deps).
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.user import User

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def create_user(
    db: Session,
    username: str,
    password: str,
    email: Optional[str] = None,
    wallet_address: Optional[str] = None,
) -> User:
    """Create a user. `email` receives winner and payout notifications."""
    user = User(username=username, email=email, wallet_address=wallet_address)
    user.set_password(password)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("user_created: id=%s username=%s", user.id, username)
    return user


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    """Return the user when the credentials match, else None."""
    user = get_user_by_username(db, username)
    if user is None or not user.verify_password(password):
        return None
    return user


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a JWT; lifetime defaults to ACCESS_TOKEN_EXPIRE_HOURS."""
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.access_token_expire_hours)
    claims = {**data, "exp": datetime.now(timezone.utc) + expires_delta}
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Return the token claims, or None when the token is invalid or expired."""
    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None


def get_user_from_token(db: Session, token: str) -> Optional[User]:
    """Resolve the caller behind a token; None for bad tokens or unknown users."""
    claims = decode_access_token(token)
    if claims is None:
        return None
    username = claims.get("sub")
    if not username:
        return None
    return get_user_by_username(db, username)
