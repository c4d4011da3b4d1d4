# app/api/v1/endpoints/users.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import schemas
from app import crud
from app.db import models
from app.api.v1 import deps

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/profile", response_model=schemas.UserResponse)
async def read_profile(current_user: models.User = Depends(deps.get_current_user)):
    return {"user": current_user}


@router.put("/profile", response_model=schemas.UserResponse)
async def update_profile(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    user_in: schemas.UserUpdate,
    current_user: models.User = Depends(deps.get_current_user),
):
    try:
        user = await crud.crud_user.update_user(db, db_obj=current_user, obj_in=user_in)
        return {"message": "Profile updated successfully", "user": user}
    except Exception:
        logger.exception("Error updating profile of user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not update profile")


@router.put("/currency", response_model=schemas.UserResponse)
async def update_currency(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    currency_in: schemas.CurrencyUpdate,
    current_user: models.User = Depends(deps.get_current_user),
):
    """
    Change the display currency (3-letter code, stored upper-cased).
    """
    try:
        user = await crud.crud_user.update_user(
            db, db_obj=current_user, obj_in=schemas.UserUpdate(currency=currency_in.currency)
        )
        return {"message": "Currency updated successfully", "user": user}
    except Exception:
        logger.exception("Error updating currency of user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not update currency")
