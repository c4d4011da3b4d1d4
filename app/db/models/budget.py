# app/db/models/budget.py
import uuid
from sqlalchemy import Column, Integer, Numeric, DateTime, ForeignKey, Uuid, func, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base_class import Base
from app.engine.month import Month

class Budget(Base):
    __tablename__ = "budgets"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    total_budget = Column(Numeric(12, 2), nullable=False)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="budgets")
    category_budgets = relationship(
        "CategoryBudget",
        back_populates="budget",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "year", "month", name="uq_budget_user_month"),
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_budget_month_range"),
        CheckConstraint("total_budget >= 0", name="ck_budget_total_non_negative"),
    )

    @property
    def period(self) -> Month:
        return Month(self.year, self.month)

    @property
    def month_key(self) -> str:
        return str(self.period)


class CategoryBudget(Base):
    __tablename__ = "category_budgets"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    budget_amount = Column(Numeric(12, 2), nullable=False)

    budget_id = Column(Uuid, ForeignKey("budgets.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Uuid, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    budget = relationship("Budget", back_populates="category_budgets")
    category = relationship("Category", back_populates="category_budgets")

    __table_args__ = (
        UniqueConstraint("budget_id", "category_id", name="uq_category_budget_budget_category"),
        CheckConstraint("budget_amount >= 0", name="ck_category_budget_non_negative"),
    )
