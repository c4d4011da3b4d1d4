# app/api/v1/endpoints/transactions.py
import logging
import math
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from datetime import date
import uuid

from app import schemas
from app import crud
from app.db import models
from app.db.models.transaction import TransactionType
from app.api.v1 import deps

logger = logging.getLogger(__name__)

router = APIRouter()


async def _check_category(
    db: AsyncSession, *, user_id: int, category_id: uuid.UUID, type_: TransactionType
) -> models.Category:
    """
    The category must be the user's and carry the same type as the transaction.
    """
    category = await crud.crud_category.get_category(db, category_id=category_id, user_id=user_id)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Category not found or does not belong to user"
        )
    if category.type != type_:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Category type ({category.type.value}) does not match transaction type ({type_.value})",
        )
    return category

async def get_owned_transaction(
    transaction_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> models.Transaction:
    transaction = await crud.crud_transaction.get_transaction(
        db, transaction_id=transaction_id, user_id=current_user.id
    )
    if not transaction:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return transaction


@router.get("/", response_model=schemas.TransactionListResponse)
async def read_transactions(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=255),
    category: Optional[uuid.UUID] = Query(None, description="Category id"),
    type: Optional[TransactionType] = Query(None),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
):
    """
    Transactions of the current user, newest first, with filtering and pagination.
    """
    filters = {
        "search": search.strip() if search else None,
        "category_id": category,
        "type": type,
        "start_date": start_date,
        "end_date": end_date,
    }
    try:
        transactions, total_items = await crud.crud_transaction.get_transactions(
            db, user_id=current_user.id, skip=(page - 1) * limit, limit=limit, filters=filters
        )
        total_pages = math.ceil(total_items / limit) if total_items else 0
        return {
            "transactions": transactions,
            "pagination": {
                "current_page": page,
                "total_pages": total_pages,
                "total_items": total_items,
                "items_per_page": limit,
                "has_next_page": page < total_pages,
                "has_prev_page": page > 1,
            },
        }
    except Exception:
        logger.exception("Error reading transactions of user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not retrieve transactions")


@router.post("/", response_model=schemas.Transaction, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    transaction_in: schemas.TransactionCreate,
    current_user: models.User = Depends(deps.get_current_user),
):
    try:
        await _check_category(
            db, user_id=current_user.id, category_id=transaction_in.category_id, type_=transaction_in.type
        )
        return await crud.crud_transaction.create_transaction(db, obj_in=transaction_in, user_id=current_user.id)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error creating transaction for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not create transaction")


@router.get("/{transaction_id}", response_model=schemas.Transaction)
async def read_transaction(transaction: models.Transaction = Depends(get_owned_transaction)):
    return transaction


@router.put("/{transaction_id}", response_model=schemas.Transaction)
async def update_transaction(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    transaction_in: schemas.TransactionUpdate,
    transaction: models.Transaction = Depends(get_owned_transaction),
):
    try:
        await _check_category(
            db, user_id=transaction.user_id, category_id=transaction_in.category_id, type_=transaction_in.type
        )
        return await crud.crud_transaction.update_transaction(db, db_obj=transaction, obj_in=transaction_in)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error updating transaction %s", transaction.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not update transaction")


@router.delete("/{transaction_id}", response_model=schemas.Message)
async def delete_transaction(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    transaction: models.Transaction = Depends(get_owned_transaction),
):
    try:
        await crud.crud_transaction.remove_transaction(db, db_obj=transaction)
        return {"message": "Transaction deleted successfully"}
    except Exception:
        logger.exception("Error deleting transaction %s", transaction.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not delete transaction")
