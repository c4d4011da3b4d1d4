# app/api/v1/endpoints/categories.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from app import schemas
from app import crud
from app.db import models
from app.api.v1 import deps

logger = logging.getLogger(__name__)

router = APIRouter()

# --- Helper dependency: category owned by the current user ---
async def get_owned_category(
    category_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> models.Category:
    category = await crud.crud_category.get_category(db, category_id=category_id, user_id=current_user.id)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.get("/", response_model=List[schemas.Category])
async def read_categories(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
):
    """
    All categories of the current user, ordered by type then name.
    """
    try:
        return await crud.crud_category.get_categories_by_owner(db, user_id=current_user.id)
    except Exception:
        logger.exception("Error reading categories of user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not retrieve categories")


@router.post("/", response_model=schemas.Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    category_in: schemas.CategoryCreate,
    current_user: models.User = Depends(deps.get_current_user),
):
    try:
        existing = await crud.crud_category.get_category_by_name(db, user_id=current_user.id, name=category_in.name)
        if existing:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category with this name already exists")
        return await crud.crud_category.create_category(db, obj_in=category_in, user_id=current_user.id)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error creating category for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not create category")


@router.get("/{category_id}", response_model=schemas.Category)
async def read_category(category: models.Category = Depends(get_owned_category)):
    return category


@router.put("/{category_id}", response_model=schemas.Category)
async def update_category(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    category_in: schemas.CategoryUpdate,
    category: models.Category = Depends(get_owned_category),
):
    """
    Replace name, type, color and icon of a category.
    The new name must not collide with another category of the same user,
    and the type is frozen once transactions use the category.
    """
    try:
        duplicate = await crud.crud_category.get_category_by_name(
            db, user_id=category.user_id, name=category_in.name, exclude_id=category.id
        )
        if duplicate:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category with this name already exists")
        if category_in.type != category.type:
            in_use = await crud.crud_category.count_transactions(db, category_id=category.id)
            if in_use:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Cannot change type of category with existing transactions",
                )
        return await crud.crud_category.update_category(db, db_obj=category, obj_in=category_in)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error updating category %s", category.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not update category")


@router.delete("/{category_id}", response_model=schemas.Message)
async def delete_category(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    category: models.Category = Depends(get_owned_category),
):
    """
    Delete a category. Refused while any transaction still uses it.
    """
    try:
        in_use = await crud.crud_category.count_transactions(db, category_id=category.id)
        if in_use:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete category with existing transactions",
            )
        await crud.crud_category.remove_category(db, db_obj=category)
        return {"message": "Category deleted successfully"}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error deleting category %s", category.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not delete category")
