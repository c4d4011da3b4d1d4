# app/schemas/budget.py
from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
import uuid

from app.engine.month import Month
from app.schemas.base import CamelModel
from app.schemas.category import CategorySummary

class CategoryBudgetIn(CamelModel):
    category_id: uuid.UUID
    budget_amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)

class BudgetCreate(CamelModel):
    month: str
    total_budget: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    category_budgets: List[CategoryBudgetIn] = Field(default_factory=list)

    @field_validator("month")
    @classmethod
    def validate_month(cls, v: str) -> str:
        return str(Month.parse(v))

class BudgetUpdate(CamelModel):
    total_budget: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    category_budgets: Optional[List[CategoryBudgetIn]] = None

class CategoryBudget(CamelModel):
    id: uuid.UUID
    category_id: uuid.UUID
    budget_amount: float
    category: Optional[CategorySummary] = None

class CategoryBudgetWithSpending(CategoryBudget):
    spent: float = 0.0
    remaining: float = 0.0

class Budget(CamelModel):
    id: uuid.UUID
    month: str = Field(validation_alias="month_key")
    year: int
    total_budget: float
    category_budgets: List[CategoryBudget] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class BudgetWithSpending(Budget):
    total_spent: float = 0.0
    category_budgets: List[CategoryBudgetWithSpending] = Field(default_factory=list)

class BudgetResponse(CamelModel):
    message: str
    budget: Budget
