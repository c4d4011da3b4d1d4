# app/api/v1/endpoints/dashboard.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Literal, Optional, Union
from datetime import date

from app import schemas
from app import crud
from app.db import models
from app.db.models.transaction import TransactionType
from app.api.v1 import deps
from app.engine import Month, build_month_history, compute_daily_allowance, compute_month_overview

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/summary", response_model=schemas.DashboardSummary)
async def read_summary(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    today: date = Depends(deps.get_today),
):
    """
    All-time balance, current month totals and the five latest transactions.
    """
    try:
        month = Month.from_date(today)
        all_time = await crud.crud_transaction.get_totals(db, user_id=current_user.id)
        this_month = await crud.crud_transaction.get_totals(
            db, user_id=current_user.id, start_date=month.first_day, end_date=month.last_day
        )
        recent = await crud.crud_transaction.get_recent_transactions(db, user_id=current_user.id, limit=5)
        return {
            "balance": all_time["income"] - all_time["expenses"],
            "total_income": all_time["income"],
            "total_expenses": all_time["expenses"],
            "monthly_income": this_month["income"],
            "monthly_expenses": this_month["expenses"],
            "transaction_count": all_time["count"],
            "recent_transactions": recent,
        }
    except Exception:
        logger.exception("Dashboard summary error for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.get("/monthly-stats", response_model=List[schemas.MonthlyStat])
async def read_monthly_stats(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    today: date = Depends(deps.get_today),
    months: int = Query(12, ge=1, le=120),
):
    try:
        return await crud.crud_transaction.get_monthly_stats(db, user_id=current_user.id, months=months, today=today)
    except Exception:
        logger.exception("Monthly stats error for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.get("/category-breakdown", response_model=List[schemas.CategoryBreakdownItem])
async def read_category_breakdown(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    today: date = Depends(deps.get_today),
    period: Literal["month", "year", "all"] = Query("month"),
):
    """
    Amount per category and type for the current month, current year or all time.
    """
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    if period == "month":
        month = Month.from_date(today)
        start_date, end_date = month.first_day, month.last_day
    elif period == "year":
        start_date, end_date = date(today.year, 1, 1), date(today.year, 12, 31)

    try:
        return await crud.crud_transaction.get_category_breakdown(
            db, user_id=current_user.id, start_date=start_date, end_date=end_date
        )
    except Exception:
        logger.exception("Category breakdown error for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.get("/trends", response_model=List[schemas.TrendPoint])
async def read_trends(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    today: date = Depends(deps.get_today),
    period: Literal["week", "month", "year"] = Query("month"),
    type: TransactionType = Query(TransactionType.expense),
):
    """
    Daily totals over the last week or month, monthly totals over the last year.
    """
    since, by_month = crud.crud_transaction.trend_start(period, today)
    try:
        return await crud.crud_transaction.get_trends(
            db, user_id=current_user.id, type_=type, since=since, by_month=by_month
        )
    except Exception:
        logger.exception("Trends error for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


# --- Budget views ---

@router.get("/budget-overview", response_model=Union[schemas.BudgetOverview, schemas.NoBudget])
async def read_budget_overview(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    today: date = Depends(deps.get_today),
):
    """
    Spending against the current month's budget, overall and per category.
    """
    month = Month.from_date(today)
    try:
        plan = await crud.crud_budget.load_budget_plan(db, user_id=current_user.id, month=month)
        if plan is None:
            return schemas.NoBudget()
        records = await crud.crud_transaction.get_month_spending(db, user_id=current_user.id, month=month)
        return schemas.BudgetOverview.model_validate(compute_month_overview(plan, records))
    except Exception:
        logger.exception("Budget overview error for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.get("/daily-budget", response_model=Union[schemas.DailyBudget, schemas.NoBudget])
async def read_daily_budget(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    today: date = Depends(deps.get_today),
):
    """
    Today's re-balanced allowance: what is left of the month spread over the
    days that are left, today included.
    """
    month = Month.from_date(today)
    try:
        plan = await crud.crud_budget.load_budget_plan(db, user_id=current_user.id, month=month)
        if plan is None:
            return schemas.NoBudget()
        records = await crud.crud_transaction.get_month_spending(db, user_id=current_user.id, month=month)
        allowance = compute_daily_allowance(plan, records, today.day)
        return schemas.DailyBudget.model_validate(allowance)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Daily budget error for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.get("/daily-budget-history", response_model=schemas.DailyBudgetHistory)
async def read_daily_budget_history(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    today: date = Depends(deps.get_today),
    month: Optional[Month] = Depends(deps.get_optional_month),
):
    """
    Day-by-day limits and spending for a month (current month by default).
    A month without a budget still answers 200, flagged with `hasBudget: false`.
    """
    month = month or Month.from_date(today)
    try:
        plan = await crud.crud_budget.load_budget_plan(db, user_id=current_user.id, month=month)
        if plan is None:
            return schemas.DailyBudgetHistory(
                has_budget=False,
                error="No budget found for this month",
                month=str(month),
                year=month.year,
            )
        records = await crud.crud_transaction.get_month_spending(db, user_id=current_user.id, month=month)
        return schemas.DailyBudgetHistory.model_validate(build_month_history(plan, records, today))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Daily budget history error for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
