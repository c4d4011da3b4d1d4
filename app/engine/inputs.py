# app/engine/inputs.py
# Plain read-only snapshots the engine works on. The crud layer builds them
# from ORM rows so the calculations never touch a session.
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Hashable, Iterable, Iterator, Optional, Tuple

from app.engine.month import Month

EXPENSE = "expense"


@dataclass(frozen=True)
class CategoryAllocation:
    category_id: Hashable
    budget_amount: Decimal
    category_name: str = ""
    category_color: Optional[str] = None
    category_icon: Optional[str] = None


@dataclass(frozen=True)
class BudgetPlan:
    month: Month
    total_budget: Decimal
    allocations: Tuple[CategoryAllocation, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SpendingRecord:
    amount: Decimal
    date: date
    type: str
    category_id: Hashable

    @property
    def is_expense(self) -> bool:
        return self.type == EXPENSE


def month_expenses(month: Month, records: Iterable[SpendingRecord]) -> Iterator[SpendingRecord]:
    """Expense records dated inside `month`; income and out-of-month rows are skipped."""
    return (r for r in records if r.is_expense and r.date in month)


def total(records: Iterable[SpendingRecord]) -> Decimal:
    return sum((r.amount for r in records), Decimal("0"))
