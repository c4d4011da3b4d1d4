# app/engine/history.py
import enum
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Hashable, Iterable, List, Optional

from app.engine.allowance import compute_daily_allowance
from app.engine.inputs import BudgetPlan, SpendingRecord, month_expenses, total
from app.engine.month import Month
from app.engine.status import BudgetStatus, ZERO


class DayPeriod(str, enum.Enum):
    past = "past"
    today = "today"
    future = "future"


@dataclass
class DayCategoryBreakdown:
    category_id: Hashable
    category_name: str
    category_color: Optional[str]
    category_icon: Optional[str]
    daily_limit: Decimal
    spent: Decimal
    remaining: Decimal
    status: BudgetStatus


@dataclass
class HistoryDay:
    date: date
    day: int
    period: DayPeriod
    is_today: bool
    is_past_day: bool
    daily_limit: Decimal
    actual_spent: Decimal
    remaining: Decimal
    status: BudgetStatus
    transaction_count: int
    category_breakdown: List[DayCategoryBreakdown] = field(default_factory=list)


@dataclass
class MonthHistory:
    month: str
    year: int
    total_budget: Decimal
    total_spent: Decimal
    average_daily_spent: Decimal
    original_daily_limit: Decimal
    elapsed_days: int
    daily_data: List[HistoryDay] = field(default_factory=list)
    has_budget: bool = True


def day_period(month: Month, day: int, today: date) -> DayPeriod:
    """Where `day` of `month` sits relative to `today`: whole earlier months are past, later ones future."""
    current = Month.from_date(today)
    if month < current:
        return DayPeriod.past
    if month > current:
        return DayPeriod.future
    if day < today.day:
        return DayPeriod.past
    if day == today.day:
        return DayPeriod.today
    return DayPeriod.future


def build_month_history(
    plan: BudgetPlan,
    records: Iterable[SpendingRecord],
    today: date,
) -> MonthHistory:
    """
    Replay the daily allowance for every day of the plan's month.

    Each day uses itself as the reference day, so its limit is the one that
    would have been shown on that morning. `today` is only used to label days
    as past/today/future and to count elapsed days for the average.
    """
    month = plan.month
    days_in_month = month.days
    expenses = list(month_expenses(month, records))
    total_spent = total(expenses)

    daily_data = []
    for day in range(1, days_in_month + 1):
        allowance = compute_daily_allowance(plan, expenses, day, days_in_month)
        period = day_period(month, day, today)

        breakdown = [
            DayCategoryBreakdown(
                category_id=c.category_id,
                category_name=c.category_name,
                category_color=c.category_color,
                category_icon=c.category_icon,
                daily_limit=c.adjusted_daily_limit,
                spent=c.today_spent,
                remaining=c.adjusted_daily_limit - c.today_spent,
                status=c.status,
            )
            for c in allowance.category_daily_budgets
            if c.today_spent > ZERO or c.adjusted_daily_limit > ZERO
        ]

        daily_data.append(
            HistoryDay(
                date=month.day(day),
                day=day,
                period=period,
                is_today=period is DayPeriod.today,
                is_past_day=period is not DayPeriod.future,
                daily_limit=allowance.adjusted_daily_limit,
                actual_spent=allowance.today_spent,
                remaining=allowance.adjusted_daily_limit - allowance.today_spent,
                status=allowance.overall_status,
                transaction_count=allowance.today_transaction_count,
                category_breakdown=breakdown,
            )
        )

    elapsed_days = sum(1 for d in daily_data if d.is_past_day)
    average = total_spent / elapsed_days if elapsed_days else ZERO

    return MonthHistory(
        month=str(month),
        year=month.year,
        total_budget=plan.total_budget,
        total_spent=total_spent,
        average_daily_spent=average,
        original_daily_limit=plan.total_budget / days_in_month,
        elapsed_days=elapsed_days,
        daily_data=daily_data,
    )
