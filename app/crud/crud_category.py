# app/crud/crud_category.py
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, delete as sqlalchemy_delete
from typing import Optional, List, Iterable, Dict, Any
import uuid

from app.db.models.category import Category as CategoryModel
from app.db.models.budget import CategoryBudget as CategoryBudgetModel
from app.db.models.transaction import Transaction as TransactionModel, TransactionType
from app.schemas.category import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: List[Dict[str, Any]] = [
    {"name": "Salary", "type": TransactionType.income, "color": "#10B981", "icon": "💰"},
    {"name": "Freelance", "type": TransactionType.income, "color": "#8B5CF6", "icon": "💼"},
    {"name": "Food & Dining", "type": TransactionType.expense, "color": "#EF4444", "icon": "🍽️"},
    {"name": "Transportation", "type": TransactionType.expense, "color": "#F59E0B", "icon": "🚗"},
    {"name": "Shopping", "type": TransactionType.expense, "color": "#EC4899", "icon": "🛒"},
    {"name": "Bills & Utilities", "type": TransactionType.expense, "color": "#6B7280", "icon": "⚡"},
    {"name": "Healthcare", "type": TransactionType.expense, "color": "#14B8A6", "icon": "🏥"},
    {"name": "Entertainment", "type": TransactionType.expense, "color": "#F97316", "icon": "🎬"},
]

# --- Read Operations ---

async def get_category(db: AsyncSession, *, category_id: uuid.UUID, user_id: int) -> Optional[CategoryModel]:
    """
    Category by id, only if it belongs to `user_id`.
    """
    result = await db.execute(
        select(CategoryModel).filter(CategoryModel.id == category_id, CategoryModel.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def get_categories_by_owner(db: AsyncSession, *, user_id: int) -> List[CategoryModel]:
    result = await db.execute(
        select(CategoryModel)
        .filter(CategoryModel.user_id == user_id)
        .order_by(CategoryModel.type, CategoryModel.name)
    )
    return list(result.scalars().all())

async def get_category_by_name(
    db: AsyncSession, *, user_id: int, name: str, exclude_id: Optional[uuid.UUID] = None
) -> Optional[CategoryModel]:
    stmt = select(CategoryModel).filter(CategoryModel.user_id == user_id, CategoryModel.name == name.strip())
    if exclude_id is not None:
        stmt = stmt.filter(CategoryModel.id != exclude_id)
    result = await db.execute(stmt)
    return result.scalars().first()

async def get_categories_by_ids(
    db: AsyncSession, *, user_id: int, category_ids: Iterable[uuid.UUID]
) -> List[CategoryModel]:
    ids = list(set(category_ids))
    if not ids:
        return []
    result = await db.execute(
        select(CategoryModel).filter(CategoryModel.user_id == user_id, CategoryModel.id.in_(ids))
    )
    return list(result.scalars().all())

async def count_transactions(db: AsyncSession, *, category_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count(TransactionModel.id)).filter(TransactionModel.category_id == category_id)
    )
    return int(result.scalar_one())

# --- Create Operations ---

async def create_category(db: AsyncSession, *, obj_in: CategoryCreate, user_id: int) -> CategoryModel:
    db_obj = CategoryModel(
        name=obj_in.name,
        type=obj_in.type,
        color=obj_in.color,
        icon=obj_in.icon,
        user_id=user_id,
    )
    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    return db_obj

async def create_default_categories(db: AsyncSession, *, user_id: int) -> List[CategoryModel]:
    categories = [CategoryModel(user_id=user_id, **data) for data in DEFAULT_CATEGORIES]
    db.add_all(categories)
    await db.flush()
    return categories

# --- Update Operation ---

async def update_category(db: AsyncSession, *, db_obj: CategoryModel, obj_in: CategoryUpdate) -> CategoryModel:
    update_data = obj_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if hasattr(db_obj, field):
            setattr(db_obj, field, value)

    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    return db_obj

# --- Delete Operation ---

async def remove_category(db: AsyncSession, *, db_obj: CategoryModel) -> CategoryModel:
    """
    Delete a category and the budget lines that pointed at it.

    Callers must check `count_transactions` first; transactions are never
    deleted along with their category.
    """
    await db.execute(
        sqlalchemy_delete(CategoryBudgetModel).where(CategoryBudgetModel.category_id == db_obj.id)
    )
    await db.execute(sqlalchemy_delete(CategoryModel).where(CategoryModel.id == db_obj.id))
    logger.info("Deleted category %s of user %s", db_obj.id, db_obj.user_id)
    return db_obj
