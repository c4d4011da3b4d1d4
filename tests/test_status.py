from decimal import Decimal

import pytest

from app.engine.status import BudgetStatus, classify, percentage_of, round_percentage


@pytest.mark.parametrize(
    "spent, limit, expected",
    [
        ("0", "1000", BudgetStatus.good),
        ("799", "1000", BudgetStatus.good),
        ("79.9", "100", BudgetStatus.good),
        ("80", "100", BudgetStatus.warning),
        ("99.99", "100", BudgetStatus.warning),
        ("100", "100", BudgetStatus.over),
        ("150", "100", BudgetStatus.over),
    ],
)
def test_classify_thresholds(spent, limit, expected):
    assert classify(Decimal(spent), Decimal(limit)) is expected


def test_zero_limit_is_over_only_when_something_was_spent():
    assert classify(Decimal("0.01"), Decimal("0")) is BudgetStatus.over
    assert classify(Decimal("0"), Decimal("0")) is BudgetStatus.good
    assert classify(Decimal("5"), Decimal("-10")) is BudgetStatus.over


def test_percentage_is_none_for_non_positive_limit():
    assert percentage_of(Decimal("10"), Decimal("0")) is None
    assert round_percentage(None) is None


def test_round_percentage_rounds_half_up():
    assert round_percentage(percentage_of(Decimal("1"), Decimal("8"))) == 13  # 12.5
    assert round_percentage(percentage_of(Decimal("1"), Decimal("3"))) == 33
    assert round_percentage(percentage_of(Decimal("2"), Decimal("3"))) == 67
