# app/schemas/dashboard.py
from pydantic import AliasChoices, Field
from typing import List, Literal, Optional
from datetime import date
import uuid

from app.db.models.transaction import TransactionType
from app.engine.history import DayPeriod
from app.engine.status import BudgetStatus
from app.schemas.base import CamelModel
from app.schemas.category import CategorySummary
from app.schemas.transaction import Transaction


class NoBudget(CamelModel):
    has_budget: Literal[False] = False
    message: str = "No budget set for current month"


# --- Aggregation ---

class CategoryBudgetStatus(CamelModel):
    category_id: uuid.UUID
    category_name: str
    category_color: Optional[str] = None
    category_icon: Optional[str] = None
    budget_amount: float
    spent: float
    remaining: float
    percentage: int
    status: BudgetStatus

class BudgetOverview(CamelModel):
    has_budget: Literal[True] = True
    month: str
    total_budget: float
    total_spent: float
    remaining_budget: float
    budget_used_percentage: Optional[int] = Field(
        None, validation_alias=AliasChoices("used_percentage", "budgetUsedPercentage", "budget_used_percentage")
    )
    status: BudgetStatus
    category_budgets: List[CategoryBudgetStatus]
    transaction_count: int


# --- Daily allowance ---

class CategoryDailyBudget(CamelModel):
    category_id: uuid.UUID
    category_name: str
    category_color: Optional[str] = None
    category_icon: Optional[str] = None
    total_budget: float
    monthly_spent: float
    remaining_budget: float
    original_daily_limit: float
    adjusted_daily_limit: float
    today_spent: float
    today_remaining: float
    status: BudgetStatus

class DailyBudget(CamelModel):
    has_budget: Literal[True] = True
    current_date: date
    current_day: int
    days_in_month: int
    remaining_days_in_month: int
    total_budget: float
    spent_before_today: float
    total_spent_this_month: float
    remaining_budget: float
    original_daily_limit: float
    adjusted_daily_limit: float
    today_spent: float
    today_remaining: float
    overall_status: BudgetStatus
    category_daily_budgets: List[CategoryDailyBudget]
    today_transaction_count: int


# --- History ---

class DayCategoryBreakdown(CamelModel):
    category_id: uuid.UUID
    category_name: str
    category_color: Optional[str] = None
    category_icon: Optional[str] = None
    daily_limit: float
    spent: float
    remaining: float
    status: BudgetStatus

class HistoryDay(CamelModel):
    date: date
    day: int
    period: DayPeriod
    is_today: bool
    is_past_day: bool
    daily_limit: float
    actual_spent: float
    remaining: float
    status: BudgetStatus
    transaction_count: int
    category_breakdown: List[DayCategoryBreakdown]

class DailyBudgetHistory(CamelModel):
    has_budget: bool = True
    error: Optional[str] = None
    month: str
    year: int
    total_budget: float = 0.0
    total_spent: float = 0.0
    average_daily_spent: float = 0.0
    original_daily_limit: float = 0.0
    elapsed_days: int = 0
    daily_data: List[HistoryDay] = Field(default_factory=list)


# --- Summaries ---

class DashboardSummary(CamelModel):
    balance: float
    total_income: float
    total_expenses: float
    monthly_income: float
    monthly_expenses: float
    transaction_count: int
    recent_transactions: List[Transaction]

class MonthlyStat(CamelModel):
    month: str
    income: float = 0.0
    expenses: float = 0.0

class CategoryBreakdownItem(CamelModel):
    category: CategorySummary
    type: TransactionType
    amount: float

class TrendPoint(CamelModel):
    period: str
    total: float
    count: int
