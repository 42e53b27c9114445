# goal_tracker/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from goal_tracker.config import settings

ACCESS_TOKEN_TYPE = "access"
STATUS_LINK_TOKEN_TYPE = "status_link"


def _encode(claims: dict, expires_delta: timedelta) -> str:
    to_encode = claims.copy()
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    claims = {**data, "type": ACCESS_TOKEN_TYPE}
    return _encode(claims, expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))


def decode_token(token: str, expected_type: str) -> dict:
    """Raises JWTError on a bad signature, expiry or wrong token type."""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    if payload.get("type") != expected_type:
        raise JWTError("Unexpected token type")
    return payload


def create_status_link_token(goal_id: str, status: str, email: str) -> str:
    claims = {
        "sub": goal_id,
        "status": status,
        "email": email.lower(),
        "type": STATUS_LINK_TOKEN_TYPE,
    }
    return _encode(claims, timedelta(days=settings.LINK_TOKEN_EXPIRE_DAYS))


def verify_status_link_token(token: str, goal_id: str, status: str, email: str) -> bool:
    try:
        payload = decode_token(token, STATUS_LINK_TOKEN_TYPE)
    except JWTError:
        return False
    return (
        payload.get("sub") == goal_id
        and payload.get("status") == status
        and payload.get("email") == email.lower()
    )
