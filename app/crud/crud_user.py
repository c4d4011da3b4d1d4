# app/crud/crud_user.py
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Optional

from app.core.config import settings
from app.core.security import get_password_hash, verify_password
from app.crud import crud_category
from app.db.models.user import User as UserModel
from app.schemas.user import UserRegister, UserUpdate

logger = logging.getLogger(__name__)

# --- Read Operations ---

async def get_user(db: AsyncSession, user_id: int) -> Optional[UserModel]:
    result = await db.execute(select(UserModel).filter(UserModel.id == user_id))
    return result.scalar_one_or_none()

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[UserModel]:
    result = await db.execute(select(UserModel).filter(UserModel.email == email.lower()))
    return result.scalar_one_or_none()

# --- Create Operation ---

async def create_user(db: AsyncSession, *, user_in: UserRegister) -> UserModel:
    """
    Create a user with a hashed password and seed the default categories.
    """
    db_user = UserModel(
        email=user_in.email.lower(),
        name=user_in.name,
        password_hash=get_password_hash(user_in.password),
        currency=settings.DEFAULT_CURRENCY,
    )
    db.add(db_user)
    await db.flush()  # need the generated id for the categories

    await crud_category.create_default_categories(db, user_id=db_user.id)
    await db.refresh(db_user)
    logger.info("Registered user %s", db_user.id)
    return db_user

async def authenticate(db: AsyncSession, *, email: str, password: str) -> Optional[UserModel]:
    user = await get_user_by_email(db, email=email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user

# --- Update Operation ---

async def update_user(db: AsyncSession, *, db_obj: UserModel, obj_in: UserUpdate) -> UserModel:
    update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        if hasattr(db_obj, field):
            setattr(db_obj, field, value)

    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    return db_obj
