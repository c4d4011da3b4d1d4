# app/engine/status.py
import enum
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

ZERO = Decimal("0")
HUNDRED = Decimal("100")

WARNING_PERCENTAGE = Decimal("80")
OVER_PERCENTAGE = Decimal("100")


class BudgetStatus(str, enum.Enum):
    good = "good"
    warning = "warning"
    over = "over"


def percentage_of(spent: Decimal, limit: Decimal) -> Optional[Decimal]:
    """Unrounded spent/limit ratio in percent, or None when the limit is not positive."""
    if limit <= ZERO:
        return None
    return spent * HUNDRED / limit


def round_percentage(value: Optional[Decimal]) -> Optional[int]:
    if value is None:
        return None
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def classify(spent: Decimal, limit: Decimal) -> BudgetStatus:
    """
    good below 80% of the limit, warning from 80% up to 100%, over from 100%.
    Any spending against a zero (or negative) limit is over.
    """
    percentage = percentage_of(spent, limit)
    if percentage is None:
        return BudgetStatus.over if spent > ZERO else BudgetStatus.good
    if percentage >= OVER_PERCENTAGE:
        return BudgetStatus.over
    if percentage >= WARNING_PERCENTAGE:
        return BudgetStatus.warning
    return BudgetStatus.good
