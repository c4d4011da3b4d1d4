# app/api/v1/endpoints/budgets.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional, Type
from decimal import Decimal

from app import schemas
from app import crud
from app.db import models
from app.api.v1 import deps
from app.engine.aggregation import spent_by_category
from app.engine.inputs import total
from app.engine.month import Month
from app.engine.status import ZERO

logger = logging.getLogger(__name__)

router = APIRouter()


def _serialize(budget: models.Budget, schema: Type[schemas.Budget] = schemas.Budget) -> schemas.Budget:
    out = schema.model_validate(budget)
    out.category_budgets.sort(key=lambda cb: ((cb.category.name if cb.category else ""), str(cb.category_id)))
    return out


@router.get("/", response_model=List[schemas.Budget])
async def read_budgets(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    month: Optional[Month] = Depends(deps.get_optional_month),
):
    """
    Budgets of the current user, newest month first. `?month=YYYY-MM` narrows to one.
    """
    try:
        budgets = await crud.crud_budget.get_budgets_by_owner(db, user_id=current_user.id, month=month)
        return [_serialize(budget) for budget in budgets]
    except Exception:
        logger.exception("Error reading budgets of user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch budgets")


@router.get("/{month}", response_model=schemas.BudgetWithSpending)
async def read_budget(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    month: Month = Depends(deps.get_path_month),
):
    """
    One month's budget with spent and remaining amounts per budgeted category.
    """
    budget = await crud.crud_budget.get_budget_by_month(db, user_id=current_user.id, month=month)
    if not budget:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")

    try:
        records = await crud.crud_transaction.get_month_spending(db, user_id=current_user.id, month=month)
        by_category = spent_by_category(records)
        limits = {cb.category_id: Decimal(cb.budget_amount) for cb in budget.category_budgets}

        out = _serialize(budget, schemas.BudgetWithSpending)
        out.total_spent = float(total(records))
        for line in out.category_budgets:
            spent = by_category.get(line.category_id, ZERO)
            line.spent = float(spent)
            line.remaining = float(limits[line.category_id] - spent)
        return out
    except Exception:
        logger.exception("Error reading budget %s of user %s", month, current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch budget")


@router.post("/", response_model=schemas.BudgetResponse)
async def create_budget(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    budget_in: schemas.BudgetCreate,
    current_user: models.User = Depends(deps.get_current_user),
):
    """
    Set the budget of a month. An existing budget for that month is replaced
    as a whole, category lines included.
    """
    try:
        budget = await crud.crud_budget.replace_budget(db, obj_in=budget_in, user_id=current_user.id)
        return {"message": "Budget created successfully", "budget": _serialize(budget)}
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Error creating budget for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create budget")


@router.put("/{month}", response_model=schemas.BudgetResponse)
async def update_budget(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    budget_in: schemas.BudgetUpdate,
    current_user: models.User = Depends(deps.get_current_user),
    month: Month = Depends(deps.get_path_month),
):
    try:
        db_budget = await crud.crud_budget.get_budget_by_month(db, user_id=current_user.id, month=month)
        if not db_budget:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")

        budget = await crud.crud_budget.update_budget(db, db_obj=db_budget, obj_in=budget_in)
        return {"message": "Budget updated successfully", "budget": _serialize(budget)}
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Error updating budget %s of user %s", month, current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update budget")


@router.delete("/{month}", response_model=schemas.Message)
async def delete_budget(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    month: Month = Depends(deps.get_path_month),
):
    try:
        db_budget = await crud.crud_budget.get_budget_by_month(db, user_id=current_user.id, month=month)
        if not db_budget:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")

        await crud.crud_budget.remove_budget(db, db_obj=db_budget)
        return {"message": "Budget deleted successfully"}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error deleting budget %s of user %s", month, current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete budget")
