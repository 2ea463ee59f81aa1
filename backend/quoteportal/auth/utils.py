# backend/quoteportal/auth/utils.py
import datetime as dt
import logging
import jwt
from fastapi import Depends, HTTPException, Request
from passlib.hash import bcrypt
from sqlalchemy.orm import Session
from ..deps import get_db
from ..shared.config import settings
from .models import User

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.verify(password, password_hash)


def create_token(user_id: str) -> str:
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + dt.timedelta(minutes=settings.ACCESS_TTL_MIN),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def _extract_token(request: Request) -> str:
    authz = request.headers.get("authorization")
    if not authz or not authz.lower().startswith("bearer "):
        raise HTTPException(401, "Not authenticated")
    return authz.split(" ", 1)[1]


def current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Resolve the acting user from the bearer token, or fail with 401."""
    token = _extract_token(request)
    try:
        data = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except jwt.ExpiredSignatureError:
        raise HTTPException(401, "Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(401, "Invalid token")
    uid = data.get("sub")
    user = db.get(User, uid) if uid else None
    if not user or not user.is_active:
        logger.warning("rejected token for unknown or disabled user %s", uid)
        raise HTTPException(401, "User disabled")
    return user
