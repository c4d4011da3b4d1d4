# app/crud/crud_transaction.py
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload
from sqlalchemy import delete as sqlalchemy_delete
from sqlalchemy import func, case, desc, and_
from typing import Optional, List, Dict, Any, Tuple
from datetime import date, timedelta
import uuid
from decimal import Decimal

from app.db.models.transaction import Transaction as TransactionModel, TransactionType
from app.db.models.category import Category as CategoryModel
from app.engine.inputs import SpendingRecord
from app.engine.month import Month
from app.schemas.transaction import TransactionCreate, TransactionUpdate

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# --- Read Operations ---

async def get_transaction(db: AsyncSession, *, transaction_id: uuid.UUID, user_id: int) -> Optional[TransactionModel]:
    """
    Transaction by id with its category loaded, only if owned by `user_id`.
    """
    result = await db.execute(
        select(TransactionModel)
        .options(joinedload(TransactionModel.category))
        .filter(TransactionModel.id == transaction_id, TransactionModel.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()

async def get_transactions(
    db: AsyncSession,
    *,
    user_id: int,
    skip: int = 0,
    limit: int = 20,
    filters: Dict[str, Any]
) -> Tuple[List[TransactionModel], int]:
    """
    Filtered, paginated transactions of a user, newest first.
    Returns (page of transactions, total count matching the filters).
    """
    conditions = [TransactionModel.user_id == user_id]
    if filters.get("search"):
        conditions.append(TransactionModel.description.ilike(f"%{filters['search']}%"))
    if filters.get("category_id"):
        conditions.append(TransactionModel.category_id == filters["category_id"])
    if filters.get("type"):
        conditions.append(TransactionModel.type == TransactionType(filters["type"]))
    if filters.get("start_date"):
        conditions.append(TransactionModel.date >= filters["start_date"])
    if filters.get("end_date"):
        conditions.append(TransactionModel.date <= filters["end_date"])

    count_query = select(func.count(TransactionModel.id)).where(and_(*conditions))
    total_count = (await db.execute(count_query)).scalar_one()

    query = (
        select(TransactionModel)
        .options(joinedload(TransactionModel.category))
        .where(and_(*conditions))
        .order_by(desc(TransactionModel.date), desc(TransactionModel.created_at))
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all()), total_count

async def get_recent_transactions(db: AsyncSession, *, user_id: int, limit: int = 5) -> List[TransactionModel]:
    result = await db.execute(
        select(TransactionModel)
        .options(joinedload(TransactionModel.category))
        .filter(TransactionModel.user_id == user_id)
        .order_by(desc(TransactionModel.date), desc(TransactionModel.created_at))
        .limit(limit)
    )
    return list(result.scalars().all())

async def get_month_spending(db: AsyncSession, *, user_id: int, month: Month) -> List[SpendingRecord]:
    """
    Expense rows of one month as plain records for the budget engine.
    """
    result = await db.execute(
        select(
            TransactionModel.amount,
            TransactionModel.date,
            TransactionModel.type,
            TransactionModel.category_id,
        ).filter(
            TransactionModel.user_id == user_id,
            TransactionModel.type == TransactionType.expense,
            TransactionModel.date >= month.first_day,
            TransactionModel.date <= month.last_day,
        )
    )
    return [
        SpendingRecord(amount=Decimal(row.amount), date=row.date, type=row.type.value, category_id=row.category_id)
        for row in result.all()
    ]

# --- Aggregates ---

def _sum_of(type_: TransactionType):
    return func.coalesce(
        func.sum(case((TransactionModel.type == type_, TransactionModel.amount), else_=0)), 0
    )

async def get_totals(
    db: AsyncSession,
    *,
    user_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Income, expense and row count of a user, optionally within a date range.
    """
    stmt = select(
        _sum_of(TransactionType.income).label("income"),
        _sum_of(TransactionType.expense).label("expenses"),
        func.count(TransactionModel.id).label("row_count"),
    ).filter(TransactionModel.user_id == user_id)
    if start_date is not None:
        stmt = stmt.filter(TransactionModel.date >= start_date)
    if end_date is not None:
        stmt = stmt.filter(TransactionModel.date <= end_date)

    row = (await db.execute(stmt)).one()
    return {
        "income": Decimal(row.income or 0),
        "expenses": Decimal(row.expenses or 0),
        "count": int(row.row_count or 0),
    }

async def _rows_since(db: AsyncSession, *, user_id: int, since: Optional[date], type_: Optional[TransactionType] = None):
    stmt = select(TransactionModel.date, TransactionModel.type, TransactionModel.amount).filter(
        TransactionModel.user_id == user_id
    )
    if since is not None:
        stmt = stmt.filter(TransactionModel.date >= since)
    if type_ is not None:
        stmt = stmt.filter(TransactionModel.type == type_)
    return (await db.execute(stmt)).all()

async def get_monthly_stats(db: AsyncSession, *, user_id: int, months: int, today: date) -> List[Dict[str, Any]]:
    """
    Income and expenses per calendar month over the last `months` months
    (current one included), newest month first. Months without rows are omitted.
    """
    since = Month.from_date(today).shift(-(months - 1)).first_day
    stats: Dict[str, Dict[str, Any]] = {}
    for row in await _rows_since(db, user_id=user_id, since=since):
        key = str(Month.from_date(row.date))
        entry = stats.setdefault(key, {"month": key, "income": ZERO, "expenses": ZERO})
        if row.type == TransactionType.income:
            entry["income"] += Decimal(row.amount)
        else:
            entry["expenses"] += Decimal(row.amount)
    return sorted(stats.values(), key=lambda s: s["month"], reverse=True)

async def get_category_breakdown(
    db: AsyncSession, *, user_id: int, start_date: Optional[date] = None, end_date: Optional[date] = None
) -> List[Dict[str, Any]]:
    """
    Summed amount per (category, type), largest first. Zero sums are dropped.
    """
    total = func.sum(TransactionModel.amount).label("amount")
    stmt = (
        select(CategoryModel, TransactionModel.type, total)
        .select_from(TransactionModel)
        .join(CategoryModel, CategoryModel.id == TransactionModel.category_id)
        .filter(TransactionModel.user_id == user_id)
        .group_by(CategoryModel.id, TransactionModel.type)
    )
    if start_date is not None:
        stmt = stmt.filter(TransactionModel.date >= start_date)
    if end_date is not None:
        stmt = stmt.filter(TransactionModel.date <= end_date)

    rows = (await db.execute(stmt)).all()
    breakdown = [
        {"category": category, "type": type_, "amount": Decimal(amount or 0)}
        for category, type_, amount in rows
        if amount and Decimal(amount) > 0
    ]
    breakdown.sort(key=lambda item: (-item["amount"], item["category"].name))
    return breakdown

async def get_trends(
    db: AsyncSession, *, user_id: int, type_: TransactionType, since: Optional[date], by_month: bool
) -> List[Dict[str, Any]]:
    """
    Totals and counts bucketed per day, or per month (keyed by its first day),
    oldest bucket first.
    """
    buckets: Dict[date, Dict[str, Any]] = {}
    for row in await _rows_since(db, user_id=user_id, since=since, type_=type_):
        key = row.date.replace(day=1) if by_month else row.date
        bucket = buckets.setdefault(key, {"period": key.isoformat(), "total": ZERO, "count": 0})
        bucket["total"] += Decimal(row.amount)
        bucket["count"] += 1
    return [buckets[key] for key in sorted(buckets)]

def _same_day_in(month: Month, day: int) -> date:
    return month.day(min(day, month.days))

def trend_start(period: str, today: date) -> Tuple[date, bool]:
    """Start date and month-bucketing flag for a trends period name."""
    current = Month.from_date(today)
    if period == "week":
        return today - timedelta(days=7), False
    if period == "year":
        return _same_day_in(current.shift(-12), today.day), True
    return _same_day_in(current.shift(-1), today.day), False

# --- Create Operation ---

async def create_transaction(db: AsyncSession, *, obj_in: TransactionCreate, user_id: int) -> TransactionModel:
    db_obj = TransactionModel(
        type=obj_in.type,
        amount=obj_in.amount,
        description=obj_in.description,
        date=obj_in.date,
        category_id=obj_in.category_id,
        user_id=user_id,
    )
    db.add(db_obj)
    await db.flush()

    # Re-read with the category attached for the response
    return await get_transaction(db, transaction_id=db_obj.id, user_id=user_id)

# --- Update Operation ---

async def update_transaction(db: AsyncSession, *, db_obj: TransactionModel, obj_in: TransactionUpdate) -> TransactionModel:
    update_data = obj_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if hasattr(db_obj, field):
            setattr(db_obj, field, value)

    db.add(db_obj)
    await db.flush()
    return await get_transaction(db, transaction_id=db_obj.id, user_id=db_obj.user_id)

# --- Delete Operation ---

async def remove_transaction(db: AsyncSession, *, db_obj: TransactionModel) -> TransactionModel:
    await db.execute(sqlalchemy_delete(TransactionModel).where(TransactionModel.id == db_obj.id))
    return db_obj
