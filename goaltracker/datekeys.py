"""
Date keys and month math for habit calendars.

A date key is the canonical "YYYY-MM-DD" string of a calendar day. Month
values are "YYYY-MM" strings on the wire and YearMonth inside the code.
"""
import re
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime

_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")


def date_key(d: date) -> str:
    # local calendar fields as-is, no timezone conversion
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def is_date_key(value: str) -> bool:
    if not isinstance(value, str) or not _DATE_KEY_RE.match(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def parse_date_key(value: str) -> date:
    """'2024-03-05' -> date(2024, 3, 5). Raises ValueError on anything else."""
    if not is_date_key(value):
        raise ValueError(f"Bad date key {value!r} (expected YYYY-MM-DD)")
    return datetime.strptime(value, "%Y-%m-%d").date()


@dataclass(frozen=True, order=True)
class YearMonth:
    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")
        if not 1 <= self.year <= 9999:
            raise ValueError(f"Year out of range: {self.year}")

    @classmethod
    def parse(cls, period: str) -> "YearMonth":
        """'2024-03' -> YearMonth(2024, 3)."""
        m = _PERIOD_RE.match((period or "").strip())
        if not m:
            raise ValueError(f"Invalid period {period!r}, expected YYYY-MM")
        return cls(int(m.group(1)), int(m.group(2)))

    @classmethod
    def of(cls, d: date) -> "YearMonth":
        return cls(d.year, d.month)

    @classmethod
    def current(cls) -> "YearMonth":
        return cls.of(date.today())

    def previous(self) -> "YearMonth":
        if self.month == 1:
            return YearMonth(self.year - 1, 12)
        return YearMonth(self.year, self.month - 1)

    def next(self) -> "YearMonth":
        if self.month == 12:
            return YearMonth(self.year + 1, 1)
        return YearMonth(self.year, self.month + 1)

    def day(self, n: int) -> date:
        return date(self.year, self.month, n)

    def label(self) -> str:
        # "March 2024"; English month names regardless of locale
        return f"{_MONTH_NAMES[self.month - 1]} {self.year}"

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def days_in_month(ym: YearMonth) -> int:
    return monthrange(ym.year, ym.month)[1]


def first_weekday_of_month(ym: YearMonth) -> int:
    """Weekday of the 1st, 0 = Sunday .. 6 = Saturday."""
    # date.weekday() is Monday = 0
    return (ym.day(1).weekday() + 1) % 7
