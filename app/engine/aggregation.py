# app/engine/aggregation.py
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Hashable, Iterable, List, Optional

from app.engine.inputs import BudgetPlan, SpendingRecord, month_expenses, total
from app.engine.status import BudgetStatus, ZERO, classify, percentage_of, round_percentage


@dataclass
class CategoryOverview:
    category_id: Hashable
    category_name: str
    category_color: Optional[str]
    category_icon: Optional[str]
    budget_amount: Decimal
    spent: Decimal
    remaining: Decimal
    percentage: int
    status: BudgetStatus


@dataclass
class MonthOverview:
    month: str
    total_budget: Decimal
    total_spent: Decimal
    remaining_budget: Decimal
    # None when the total budget is zero and a percentage is meaningless
    used_percentage: Optional[int]
    status: BudgetStatus
    transaction_count: int
    category_budgets: List[CategoryOverview] = field(default_factory=list)


def spent_by_category(records: Iterable[SpendingRecord]) -> Dict[Hashable, Decimal]:
    sums: Dict[Hashable, Decimal] = defaultdict(lambda: ZERO)
    for record in records:
        sums[record.category_id] += record.amount
    return sums


def compute_month_overview(plan: BudgetPlan, records: Iterable[SpendingRecord]) -> MonthOverview:
    """
    Spend-to-date against a monthly budget, overall and per budgeted category.

    Only expense records dated inside the plan's month count. Category budgets
    are reported as stored even when their sum no longer matches the total.
    """
    expenses = list(month_expenses(plan.month, records))
    total_spent = total(expenses)
    by_category = spent_by_category(expenses)

    categories = []
    for allocation in plan.allocations:
        spent = by_category.get(allocation.category_id, ZERO)
        categories.append(
            CategoryOverview(
                category_id=allocation.category_id,
                category_name=allocation.category_name,
                category_color=allocation.category_color,
                category_icon=allocation.category_icon,
                budget_amount=allocation.budget_amount,
                spent=spent,
                remaining=allocation.budget_amount - spent,
                percentage=round_percentage(percentage_of(spent, allocation.budget_amount)) or 0,
                status=classify(spent, allocation.budget_amount),
            )
        )

    return MonthOverview(
        month=str(plan.month),
        total_budget=plan.total_budget,
        total_spent=total_spent,
        remaining_budget=plan.total_budget - total_spent,
        used_percentage=round_percentage(percentage_of(total_spent, plan.total_budget)),
        status=classify(total_spent, plan.total_budget),
        transaction_count=len(expenses),
        category_budgets=categories,
    )
