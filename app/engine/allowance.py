# app/engine/allowance.py
"""
Daily spending allowance.

A flat `total / days` limit ignores what already happened this month. Here the
limit for a reference day is re-derived from what is left of the budget
(total minus everything spent before that day) spread over the days still
ahead, the reference day included. Overspending early shrinks the following
days' limits and underspending grows them.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Hashable, Iterable, List, Optional

from app.engine.aggregation import spent_by_category
from app.engine.inputs import BudgetPlan, SpendingRecord, month_expenses, total
from app.engine.status import BudgetStatus, ZERO, classify


class InvalidReferenceDay(ValueError):
    pass


@dataclass
class Rebalance:
    total_budget: Decimal
    spent_before: Decimal
    remaining_budget: Decimal
    remaining_days: int
    original_daily_limit: Decimal
    adjusted_daily_limit: Decimal
    today_spent: Decimal
    today_remaining: Decimal
    status: BudgetStatus


@dataclass
class CategoryDailyAllowance:
    category_id: Hashable
    category_name: str
    category_color: Optional[str]
    category_icon: Optional[str]
    total_budget: Decimal
    monthly_spent: Decimal
    remaining_budget: Decimal
    original_daily_limit: Decimal
    adjusted_daily_limit: Decimal
    today_spent: Decimal
    today_remaining: Decimal
    status: BudgetStatus


@dataclass
class DailyAllowance:
    current_date: date
    current_day: int
    days_in_month: int
    remaining_days_in_month: int
    total_budget: Decimal
    spent_before_today: Decimal
    total_spent_this_month: Decimal
    remaining_budget: Decimal
    original_daily_limit: Decimal
    adjusted_daily_limit: Decimal
    today_spent: Decimal
    today_remaining: Decimal
    overall_status: BudgetStatus
    today_transaction_count: int
    category_daily_budgets: List[CategoryDailyAllowance] = field(default_factory=list)


def rebalance(
    total_budget: Decimal,
    spent_before: Decimal,
    today_spent: Decimal,
    reference_day: int,
    days_in_month: int,
) -> Rebalance:
    original = total_budget / days_in_month
    remaining_budget = total_budget - spent_before
    remaining_days = days_in_month - reference_day + 1
    adjusted = remaining_budget / remaining_days if remaining_days > 0 else original
    # A deficit is still visible through remaining_budget.
    adjusted = max(ZERO, adjusted)
    return Rebalance(
        total_budget=total_budget,
        spent_before=spent_before,
        remaining_budget=remaining_budget,
        remaining_days=remaining_days,
        original_daily_limit=original,
        adjusted_daily_limit=adjusted,
        today_spent=today_spent,
        today_remaining=max(ZERO, adjusted - today_spent),
        status=classify(today_spent, adjusted),
    )


def compute_daily_allowance(
    plan: BudgetPlan,
    records: Iterable[SpendingRecord],
    reference_day: int,
    days_in_month: Optional[int] = None,
) -> DailyAllowance:
    """
    Re-balanced limit for `reference_day` of the plan's month, for the whole
    budget and for every budgeted category.

    Raises InvalidReferenceDay when the day is outside the month.
    """
    if days_in_month is None:
        days_in_month = plan.month.days
    if not 1 <= days_in_month <= plan.month.days:
        raise InvalidReferenceDay(
            f"days_in_month must be within 1..{plan.month.days} for {plan.month}, got {days_in_month}"
        )
    if not 1 <= reference_day <= days_in_month:
        raise InvalidReferenceDay(
            f"Reference day {reference_day} is outside 1..{days_in_month} for {plan.month}"
        )

    expenses = list(month_expenses(plan.month, records))
    before = [r for r in expenses if r.date.day < reference_day]
    today = [r for r in expenses if r.date.day == reference_day]

    overall = rebalance(plan.total_budget, total(before), total(today), reference_day, days_in_month)

    before_by_category = spent_by_category(before)
    today_by_category = spent_by_category(today)
    categories = []
    for allocation in plan.allocations:
        spent_before = before_by_category.get(allocation.category_id, ZERO)
        spent_today = today_by_category.get(allocation.category_id, ZERO)
        per_category = rebalance(
            allocation.budget_amount, spent_before, spent_today, reference_day, days_in_month
        )
        categories.append(
            CategoryDailyAllowance(
                category_id=allocation.category_id,
                category_name=allocation.category_name,
                category_color=allocation.category_color,
                category_icon=allocation.category_icon,
                total_budget=allocation.budget_amount,
                monthly_spent=spent_before + spent_today,
                remaining_budget=per_category.remaining_budget,
                original_daily_limit=per_category.original_daily_limit,
                adjusted_daily_limit=per_category.adjusted_daily_limit,
                today_spent=spent_today,
                today_remaining=per_category.today_remaining,
                status=per_category.status,
            )
        )

    return DailyAllowance(
        current_date=plan.month.day(reference_day),
        current_day=reference_day,
        days_in_month=days_in_month,
        remaining_days_in_month=overall.remaining_days,
        total_budget=plan.total_budget,
        spent_before_today=overall.spent_before,
        total_spent_this_month=overall.spent_before + overall.today_spent,
        remaining_budget=overall.remaining_budget,
        original_daily_limit=overall.original_daily_limit,
        adjusted_daily_limit=overall.adjusted_daily_limit,
        today_spent=overall.today_spent,
        today_remaining=overall.today_remaining,
        overall_status=overall.status,
        today_transaction_count=len(today),
        category_daily_budgets=categories,
    )
