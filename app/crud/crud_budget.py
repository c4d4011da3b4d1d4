# app/crud/crud_budget.py
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from typing import Optional, List, Sequence
from decimal import Decimal

from app.crud import crud_category
from app.db.models.budget import Budget as BudgetModel, CategoryBudget as CategoryBudgetModel
from app.engine.inputs import BudgetPlan, CategoryAllocation
from app.engine.month import Month
from app.schemas.budget import BudgetCreate, BudgetUpdate, CategoryBudgetIn

logger = logging.getLogger(__name__)


def _with_categories(stmt):
    return stmt.options(
        selectinload(BudgetModel.category_budgets).selectinload(CategoryBudgetModel.category)
    )

def sorted_category_budgets(budget: BudgetModel) -> List[CategoryBudgetModel]:
    """Category budgets in a stable order: category name, then id."""
    return sorted(
        budget.category_budgets,
        key=lambda cb: ((cb.category.name if cb.category else ""), str(cb.category_id)),
    )

# --- Read Operations ---

async def get_budget_by_month(db: AsyncSession, *, user_id: int, month: Month) -> Optional[BudgetModel]:
    stmt = _with_categories(
        select(BudgetModel).filter(
            BudgetModel.user_id == user_id,
            BudgetModel.year == month.year,
            BudgetModel.month == month.month,
        )
    ).execution_options(populate_existing=True)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()

async def get_budgets_by_owner(
    db: AsyncSession, *, user_id: int, month: Optional[Month] = None
) -> List[BudgetModel]:
    """
    Budgets of a user, newest month first; optionally only the one for `month`.
    """
    stmt = select(BudgetModel).filter(BudgetModel.user_id == user_id)
    if month is not None:
        stmt = stmt.filter(BudgetModel.year == month.year, BudgetModel.month == month.month)
    stmt = _with_categories(stmt).order_by(BudgetModel.year.desc(), BudgetModel.month.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())

async def load_budget_plan(db: AsyncSession, *, user_id: int, month: Month) -> Optional[BudgetPlan]:
    """
    The month's budget as an engine plan, or None when no budget is set.
    """
    budget = await get_budget_by_month(db, user_id=user_id, month=month)
    if budget is None:
        return None
    allocations = tuple(
        CategoryAllocation(
            category_id=cb.category_id,
            budget_amount=Decimal(cb.budget_amount),
            category_name=cb.category.name if cb.category else "",
            category_color=cb.category.color if cb.category else None,
            category_icon=cb.category.icon if cb.category else None,
        )
        for cb in sorted_category_budgets(budget)
    )
    return BudgetPlan(month=month, total_budget=Decimal(budget.total_budget), allocations=allocations)

# --- Validation ---

async def validate_category_budgets(
    db: AsyncSession,
    *,
    user_id: int,
    total_budget: Decimal,
    category_budgets: Sequence[CategoryBudgetIn],
) -> None:
    """
    Raise ValueError unless every category is the user's, listed once, and
    the category amounts fit inside `total_budget`.
    """
    ids = [cb.category_id for cb in category_budgets]
    if len(set(ids)) != len(ids):
        raise ValueError("Each category can only be budgeted once per month")

    found = await crud_category.get_categories_by_ids(db, user_id=user_id, category_ids=ids)
    if len(found) != len(set(ids)):
        raise ValueError("Some categories do not exist or do not belong to user")

    allocated = sum((cb.budget_amount for cb in category_budgets), Decimal("0"))
    if allocated > total_budget:
        raise ValueError("Sum of category budgets cannot exceed total budget")

def _build_category_budgets(category_budgets: Sequence[CategoryBudgetIn]) -> List[CategoryBudgetModel]:
    return [
        CategoryBudgetModel(category_id=cb.category_id, budget_amount=cb.budget_amount)
        for cb in category_budgets
    ]

# --- Create / Replace Operation ---

async def replace_budget(db: AsyncSession, *, obj_in: BudgetCreate, user_id: int) -> BudgetModel:
    """
    Create the month's budget, discarding any existing one for that month.

    Delete and create happen in the request's transaction, so a failure
    anywhere leaves the previous budget untouched.
    """
    month = Month.parse(obj_in.month)
    await validate_category_budgets(
        db, user_id=user_id, total_budget=obj_in.total_budget, category_budgets=obj_in.category_budgets
    )

    existing = await get_budget_by_month(db, user_id=user_id, month=month)
    if existing is not None:
        logger.info("Replacing budget %s for %s of user %s", existing.id, month, user_id)
        await db.delete(existing)
        await db.flush()

    db_obj = BudgetModel(
        year=month.year,
        month=month.month,
        total_budget=obj_in.total_budget,
        user_id=user_id,
        category_budgets=_build_category_budgets(obj_in.category_budgets),
    )
    db.add(db_obj)
    await db.flush()
    return await get_budget_by_month(db, user_id=user_id, month=month)

# --- Update Operation ---

async def update_budget(db: AsyncSession, *, db_obj: BudgetModel, obj_in: BudgetUpdate) -> BudgetModel:
    """
    Partial update. A provided category list replaces the stored one entirely;
    checks run against the values the budget will have afterwards.
    """
    update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
    total_budget = update_data.get("total_budget", Decimal(db_obj.total_budget))

    if obj_in.category_budgets is not None:
        new_lines: Sequence[CategoryBudgetIn] = obj_in.category_budgets
    else:
        new_lines = [
            CategoryBudgetIn(category_id=cb.category_id, budget_amount=Decimal(cb.budget_amount))
            for cb in db_obj.category_budgets
        ]
    await validate_category_budgets(
        db, user_id=db_obj.user_id, total_budget=total_budget, category_budgets=new_lines
    )

    if "total_budget" in update_data:
        db_obj.total_budget = total_budget

    if obj_in.category_budgets is not None:
        db_obj.category_budgets.clear()
        await db.flush()  # old lines must be gone before re-adding the same categories
        db_obj.category_budgets.extend(_build_category_budgets(obj_in.category_budgets))

    db.add(db_obj)
    await db.flush()
    return await get_budget_by_month(db, user_id=db_obj.user_id, month=db_obj.period)

# --- Delete Operation ---

async def remove_budget(db: AsyncSession, *, db_obj: BudgetModel) -> BudgetModel:
    await db.delete(db_obj)
    await db.flush()
    return db_obj
