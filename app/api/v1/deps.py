# app/api/v1/deps.py
import logging
from datetime import date
from typing import Optional

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.core.security import decode_access_token
from app.db.database import get_async_db  # re-exported for the endpoints
from app.db.models.user import User as UserModel
from app.engine.month import Month

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_async_db),
) -> UserModel:
    """
    Resolve the user from `Authorization: Bearer <jwt>`; 401 otherwise.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None or not credentials.credentials:
        logger.info("Auth failed: missing bearer token")
        raise credentials_exception

    claims = decode_access_token(credentials.credentials)
    if not claims or "sub" not in claims:
        raise credentials_exception

    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError):
        logger.info("Auth failed: malformed subject %r", claims.get("sub"))
        raise credentials_exception

    user = await crud.crud_user.get_user(db, user_id=user_id)
    if user is None:
        logger.info("Auth failed: user %s no longer exists", user_id)
        raise credentials_exception
    return user


def get_today() -> date:
    """Calendar day used as "today" by the dashboard. Overridden in tests."""
    return date.today()


def parse_month(value: str) -> Month:
    try:
        return Month.parse(value)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def get_path_month(month: str) -> Month:
    return parse_month(month)


def get_optional_month(month: Optional[str] = Query(None, description="YYYY-MM")) -> Optional[Month]:
    return parse_month(month) if month else None
