"""
Module: payroll_engines.proration
Responsibility:
    Decide whether an employee is payable in a pay period at all and, if
    so, which span of the period they actually worked.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - 0 <= days <= total_days.
    - is_prorated is True exactly when days < total_days.
    - Every prorated amount is round(amount × days / total_days, 2).

Failure modes:
    - InactiveEmployeeError from ``check_eligibility``.

Usage:
    check_eligibility(employee, period)
    info = calculate_proration(employee, period)
    basic = prorate(employee.basic_salary, info)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from payroll_engines.period import PayPeriod
from payroll_kernel.domain.employee import (
    PRORATION_EVENT_TYPES,
    Employee,
    EmploymentStatus,
)
from payroll_kernel.domain.values import round_money
from payroll_kernel.exceptions import InactiveEmployeeError
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.proration")


class ProrationReason(str, Enum):
    """Why a payslip covers less than, or differs within, the period."""

    JOIN = "Join"
    EXIT = "Exit"
    JOIN_AND_EXIT = "Join & Exit"
    TRANSFER = "Transfer"
    PROMOTION = "Promotion"
    SALARY_REVISION = "Salary Revision"


@dataclass(frozen=True)
class ProrationInfo:
    """Worked span of an employee within a pay period."""

    days: int
    total_days: int
    is_prorated: bool
    effective_start: date
    effective_end: date
    reason: ProrationReason | None = None

    @property
    def ratio(self) -> Decimal:
        return Decimal(self.days) / Decimal(self.total_days)


def _ineligibility_reason(employee: Employee, period: PayPeriod) -> str | None:
    if employee.status != EmploymentStatus.ACTIVE:
        return f"status is {employee.status.value}"
    if (
        employee.termination is not None
        and employee.termination.last_working_day < period.start
    ):
        return "terminated before the period start"
    if employee.joining_date > period.end:
        return "joins after the period end"
    return None


def is_employee_active(employee: Employee, period: PayPeriod) -> bool:
    """True when the employee is payable for at least part of ``period``."""
    return _ineligibility_reason(employee, period) is None


def check_eligibility(employee: Employee, period: PayPeriod) -> None:
    """
    Raises:
        InactiveEmployeeError: status is not Active, the last working day
            precedes the period, or the joining date follows it.
    """
    reason = _ineligibility_reason(employee, period)
    if reason is not None:
        logger.info("employee_ineligible", extra={
            "employee_id": employee.employee_id,
            "period_start": period.start.isoformat(),
            "period_end": period.end.isoformat(),
            "reason": reason,
        })
        raise InactiveEmployeeError(
            employee.employee_id, period.start, period.end, reason,
        )


def calculate_proration(
    employee: Employee,
    period: PayPeriod,
    enabled: bool = True,
) -> ProrationInfo:
    """
    Worked span of ``employee`` within ``period``.

    Joining inside the period clamps the start ("Join"); a last working day
    inside the period clamps the end ("Exit", or "Join & Exit").  Otherwise
    the first Transfer / Promotion / Salary Revision inside the period is
    reported as the reason without clamping anything.

    With ``enabled`` False the full period is paid; the reason is still
    reported.
    """
    total_days = period.total_days
    actual_start = period.start
    actual_end = period.end
    reason: ProrationReason | None = None

    if employee.joining_date > period.start:
        actual_start = employee.joining_date
        reason = ProrationReason.JOIN

    if employee.termination is not None:
        last_day = employee.termination.last_working_day
        if last_day < period.end:
            actual_end = last_day
            reason = (
                ProrationReason.JOIN_AND_EXIT if reason else ProrationReason.EXIT
            )

    if reason is None:
        for event in employee.lifecycle_history:
            if event.type in PRORATION_EVENT_TYPES and period.contains(event.event_date):
                reason = ProrationReason(event.type.value)
                break

    days = (actual_end - actual_start).days + 1
    days = max(0, min(days, total_days))
    if not enabled:
        days = total_days

    info = ProrationInfo(
        days=days,
        total_days=total_days,
        is_prorated=days < total_days,
        effective_start=actual_start,
        effective_end=actual_end,
        reason=reason,
    )
    if info.is_prorated or reason is not None:
        logger.debug("proration_applied", extra={
            "employee_id": employee.employee_id,
            "days": days,
            "total_days": total_days,
            "reason": reason.value if reason else None,
        })
    return info


def prorate(amount: Decimal, proration: ProrationInfo) -> Decimal:
    """Scale a period-level amount by the worked-day ratio, to the cent."""
    if not proration.is_prorated:
        return round_money(amount)
    return round_money(amount * proration.days / proration.total_days)
