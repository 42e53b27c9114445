# goal_tracker/core/auth.py
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from goal_tracker.database import get_db
from goal_tracker.models.user import User
from goal_tracker.config import settings
from goal_tracker.core.security import decode_token, ACCESS_TOKEN_TYPE

reusable_oauth2 = HTTPBearer(auto_error=False)

async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: Optional[HTTPAuthorizationCredentials] = Depends(reusable_oauth2)
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if token is None:
        raise credentials_exception
    try:
        payload = decode_token(token.credentials, ACCESS_TOKEN_TYPE)
        user_id: str = payload.get("sub")
        if user_id is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise credentials_exception
    return user


def is_admin_email(email: Optional[str]) -> bool:
    return bool(email) and email.strip().lower() in settings.admin_emails


async def require_admin_email(email: Optional[str] = None) -> str:
    """Admin gate keyed on the ``email`` query parameter."""
    if not is_admin_email(email):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Unauthorized")
    return email
