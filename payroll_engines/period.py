"""
Pay period resolution.

Turns a payroll month ("YYYY-MM") and a pay frequency into concrete
calendar bounds.  Pure; "today" is a parameter, never read from the clock.

Rules:
    Monthly       1st .. last day of the month
    Semi-Monthly  1st .. split day when *today* is on or before the split
                  day, otherwise 1st .. last day of the month
    Weekly        1st .. 7th
    Bi-Weekly     1st .. 14th

The Semi-Monthly rule keys off the processing date, not the target month,
so reprocessing a past month can yield different bounds depending on when
it runs.  Callers that need reproducible bounds pass a fixed ``today``.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta

from payroll_kernel.domain.payslip import PayFrequency

DEFAULT_SEMI_MONTHLY_SPLIT_DAY = 15


@dataclass(frozen=True)
class PayPeriod:
    """Inclusive calendar bounds of one pay period."""

    start: date
    end: date

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def parse_month(month: str) -> tuple[int, int]:
    """Split "YYYY-MM" into (year, month).

    Raises:
        ValueError: malformed string or month outside 1..12.
    """
    year_text, sep, month_text = month.partition("-")
    if not sep:
        raise ValueError(f"Payroll month must be YYYY-MM, got {month!r}")
    year, month_num = int(year_text), int(month_text)
    if not 1 <= month_num <= 12:
        raise ValueError(f"Payroll month out of range: {month!r}")
    return year, month_num


def month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def resolve_pay_period(
    month: str,
    frequency: PayFrequency,
    today: date,
    semi_monthly_split_day: int = DEFAULT_SEMI_MONTHLY_SPLIT_DAY,
) -> PayPeriod:
    """Calendar bounds for ``month`` at ``frequency``."""
    year, month_num = parse_month(month)
    start = date(year, month_num, 1)

    match frequency:
        case PayFrequency.MONTHLY:
            end = month_end(year, month_num)
        case PayFrequency.SEMI_MONTHLY:
            if today.day <= semi_monthly_split_day:
                end = date(year, month_num, semi_monthly_split_day)
            else:
                end = month_end(year, month_num)
        case PayFrequency.WEEKLY:
            end = start + timedelta(days=6)
        case PayFrequency.BI_WEEKLY:
            end = start + timedelta(days=13)
        case _:
            end = month_end(year, month_num)

    return PayPeriod(start=start, end=end)
