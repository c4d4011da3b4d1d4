# app/db/models/category.py
import uuid
from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, Uuid, func, Enum as SQLAlchemyEnum
from sqlalchemy.orm import relationship
from app.db.base_class import Base
from app.db.models.transaction import TransactionType

class Category(Base):
    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False)
    # Transactions filed under this category must carry the same type
    type = Column(SQLAlchemyEnum(TransactionType, name="category_type_enum", create_constraint=True), nullable=False)
    color = Column(String(7), nullable=False)
    icon = Column(String(50), nullable=False)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="categories")
    transactions = relationship("Transaction", back_populates="category", passive_deletes=True)
    category_budgets = relationship("CategoryBudget", back_populates="category", cascade="all, delete-orphan", passive_deletes=True)
