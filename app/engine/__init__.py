# app/engine/__init__.py
from .month import Month
from .status import BudgetStatus, classify, percentage_of, round_percentage
from .inputs import BudgetPlan, CategoryAllocation, SpendingRecord
from .aggregation import CategoryOverview, MonthOverview, compute_month_overview
from .allowance import (
    CategoryDailyAllowance,
    DailyAllowance,
    InvalidReferenceDay,
    compute_daily_allowance,
)
from .history import DayCategoryBreakdown, DayPeriod, HistoryDay, MonthHistory, build_month_history
