from datetime import date
from decimal import Decimal

import pytest

from app.engine.allowance import InvalidReferenceDay, compute_daily_allowance, rebalance
from app.engine.inputs import BudgetPlan, CategoryAllocation, SpendingRecord
from app.engine.month import Month
from app.engine.status import BudgetStatus

JUNE = Month(2024, 6)  # 30 days
JULY = Month(2024, 7)  # 31 days


def expense(amount, day, category="food", month=JUNE):
    return SpendingRecord(Decimal(amount), month.day(day), "expense", category)


def june_plan(total="3000", food="1500"):
    return BudgetPlan(JUNE, Decimal(total), (CategoryAllocation("food", Decimal(food), "Food"),))


def test_first_day_uses_the_flat_limit():
    allowance = compute_daily_allowance(june_plan(), [], 1)
    assert allowance.original_daily_limit == Decimal("100")
    assert allowance.adjusted_daily_limit == Decimal("100")
    assert allowance.remaining_days_in_month == 30
    assert allowance.current_date == date(2024, 6, 1)


def test_overspending_spreads_over_remaining_days():
    plan = BudgetPlan(JUNE, Decimal("1000"))
    allowance = compute_daily_allowance(plan, [expense("500", 1)], 2)
    assert allowance.spent_before_today == Decimal("500")
    assert allowance.remaining_budget == Decimal("500")
    assert allowance.remaining_days_in_month == 29
    assert allowance.adjusted_daily_limit == Decimal("500") / 29
    assert round(allowance.adjusted_daily_limit, 2) == Decimal("17.24")


def test_original_limit_is_flat_and_exact():
    plan = BudgetPlan(JULY, Decimal("2790"))
    for day in (1, 15, 31):
        allowance = compute_daily_allowance(plan, [expense("700", 2, month=JULY)], day)
        assert allowance.original_daily_limit == Decimal("90")


def test_even_spending_keeps_the_limit():
    plan = BudgetPlan(JULY, Decimal("3100"))
    records = [expense("100", day, month=JULY) for day in range(1, 11)]
    allowance = compute_daily_allowance(plan, records, 11)
    assert allowance.adjusted_daily_limit == Decimal("100")
    assert allowance.total_spent_this_month == Decimal("1000")


def test_last_day_gets_everything_that_is_left():
    plan = BudgetPlan(JULY, Decimal("3100"))
    allowance = compute_daily_allowance(plan, [expense("3010", 3, month=JULY)], 31)
    assert allowance.remaining_days_in_month == 1
    assert allowance.adjusted_daily_limit == Decimal("90")


def test_today_spending_does_not_change_todays_limit():
    records = [expense("40", 1), expense("80", 1)]
    allowance = compute_daily_allowance(june_plan(), records, 1)
    assert allowance.adjusted_daily_limit == Decimal("100")
    assert allowance.today_spent == Decimal("120")
    assert allowance.today_remaining == Decimal("0")
    assert allowance.today_transaction_count == 2
    assert allowance.overall_status is BudgetStatus.over


def test_spending_after_reference_day_is_ignored():
    allowance = compute_daily_allowance(june_plan(), [expense("900", 20)], 10)
    assert allowance.total_spent_this_month == Decimal("0")
    assert allowance.adjusted_daily_limit == Decimal("3000") / 21


def test_exhausted_budget_clamps_limit_to_zero():
    allowance = compute_daily_allowance(june_plan(), [expense("3500", 1)], 10)
    assert allowance.remaining_budget == Decimal("-500")
    assert allowance.adjusted_daily_limit == Decimal("0")
    assert allowance.overall_status is BudgetStatus.good

    spent_today = compute_daily_allowance(june_plan(), [expense("3500", 1), expense("1", 10)], 10)
    assert spent_today.overall_status is BudgetStatus.over


def test_category_limits_rebalance_independently():
    allowance = compute_daily_allowance(june_plan(), [expense("300", 1), expense("200", 1, "rent")], 2)
    food = allowance.category_daily_budgets[0]
    assert food.original_daily_limit == Decimal("50")
    assert food.adjusted_daily_limit == Decimal("1200") / 29
    assert food.monthly_spent == Decimal("300")
    assert allowance.adjusted_daily_limit == Decimal("2500") / 29


@pytest.mark.parametrize("day", [0, 31, -1])
def test_reference_day_outside_month_raises(day):
    with pytest.raises(InvalidReferenceDay):
        compute_daily_allowance(june_plan(), [], day)


def test_invalid_reference_day_is_a_value_error():
    with pytest.raises(ValueError):
        compute_daily_allowance(BudgetPlan(JULY, Decimal("10")), [], 32)


def test_rebalance_status_uses_adjusted_limit():
    result = rebalance(Decimal("1000"), Decimal("0"), Decimal("80"), 1, 10)
    assert result.adjusted_daily_limit == Decimal("100")
    assert result.status is BudgetStatus.warning


def test_zero_total_budget_gives_zero_limits():
    plan = BudgetPlan(JUNE, Decimal("0"))
    idle = compute_daily_allowance(plan, [], 1)
    assert idle.original_daily_limit == Decimal("0")
    assert idle.adjusted_daily_limit == Decimal("0")
    assert idle.overall_status is BudgetStatus.good

    spent = compute_daily_allowance(plan, [expense("5", 4)], 4)
    assert spent.original_daily_limit == Decimal("0")
    assert spent.adjusted_daily_limit == Decimal("0")
    assert spent.overall_status is BudgetStatus.over


@pytest.mark.parametrize("days_in_month", [0, 31])
def test_days_in_month_outside_the_month_raises(days_in_month):
    with pytest.raises(InvalidReferenceDay):
        compute_daily_allowance(june_plan(), [], 1, days_in_month)
