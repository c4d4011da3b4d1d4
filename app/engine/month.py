# app/engine/month.py
import calendar
import re
from dataclasses import dataclass
from datetime import date

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True, order=True)
class Month:
    """
    A budgeting period: one calendar month.

    Free-form "YYYY-MM" strings are parsed once at the API boundary with
    `Month.parse`; everything behind it works with this typed pair.
    """
    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month number must be between 1 and 12, got {self.month}")
        if not 1 <= self.year <= 9999:
            raise ValueError(f"Year must be between 1 and 9999, got {self.year}")

    @classmethod
    def parse(cls, value: str) -> "Month":
        match = _MONTH_RE.match(value.strip()) if isinstance(value, str) else None
        if not match:
            raise ValueError("Month must be in YYYY-MM format")
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def from_date(cls, value: date) -> "Month":
        return cls(value.year, value.month)

    @property
    def days(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.days)

    def day(self, number: int) -> date:
        return date(self.year, self.month, number)

    def shift(self, months: int) -> "Month":
        """Month `months` steps away (negative goes back in time)."""
        index = self.year * 12 + (self.month - 1) + months
        return Month(index // 12, index % 12 + 1)

    def __contains__(self, value: date) -> bool:
        return value.year == self.year and value.month == self.month

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
