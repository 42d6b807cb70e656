"""
Module: payroll_engines.earnings
Responsibility:
    Compute the earnings side of a payslip: basic salary, allowances,
    bonuses, overtime and commissions, and their gross total.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Basic salary and allowances are prorated by the worked-day ratio;
      an unprorated basic equals the monthly rate exactly.
    - Percentage-of-basic allowances resolve against the monthly rate and
      are prorated once.
    - Bonuses and commissions are period-level grants, never prorated.
    - Missing overtime rule or commission data yields empty item lists.
    - Gross = basic + Σallowances + Σbonuses + Σovertime + Σcommissions.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from payroll_engines.proration import ProrationInfo, prorate
from payroll_engines.salary_structure import component_items
from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.employee import ComponentKind, SalaryComponent
from payroll_kernel.domain.facts import AttendanceRecord, BonusRecord, CommissionRecord
from payroll_kernel.domain.payslip import PayslipItem, PayslipItemType
from payroll_kernel.domain.rules import OvertimeRule
from payroll_kernel.domain.values import percent_of, round_money, sum_amounts
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.earnings")


@dataclass(frozen=True)
class EarningsResult:
    """Earnings side of a payslip."""

    basic_salary: Decimal
    allowances: tuple[PayslipItem, ...]
    bonuses: tuple[PayslipItem, ...]
    overtime: tuple[PayslipItem, ...]
    commissions: tuple[PayslipItem, ...]
    applied_bonuses: tuple[BonusRecord, ...]

    @property
    def total_allowances(self) -> Decimal:
        return sum_amounts(i.amount for i in self.allowances)

    @property
    def total_bonuses(self) -> Decimal:
        return sum_amounts(i.amount for i in self.bonuses)

    @property
    def total_overtime(self) -> Decimal:
        return sum_amounts(i.amount for i in self.overtime)

    @property
    def total_commissions(self) -> Decimal:
        return sum_amounts(i.amount for i in self.commissions)

    @property
    def gross_salary(self) -> Decimal:
        return (
            self.basic_salary
            + self.total_allowances
            + self.total_bonuses
            + self.total_overtime
            + self.total_commissions
        )


def calculate_basic_salary(monthly_basic: Decimal, proration: ProrationInfo) -> Decimal:
    if not proration.is_prorated:
        return monthly_basic
    return prorate(monthly_basic, proration)


def calculate_bonuses(
    bonuses: Sequence[BonusRecord],
    employee_id: str,
    month: str,
) -> tuple[tuple[PayslipItem, ...], tuple[BonusRecord, ...]]:
    """Approved bonuses for the employee whose month is unset or matches."""
    applied = tuple(b for b in bonuses if b.applies_to(employee_id, month))
    items = tuple(
        PayslipItem(
            name=f"{b.type} Bonus",
            amount=round_money(b.amount),
            type=PayslipItemType.BONUS,
            effective_date=b.effective_date,
        )
        for b in applied
    )
    return items, applied


def calculate_overtime(
    attendance: Sequence[AttendanceRecord],
    monthly_basic: Decimal,
    rule: OvertimeRule | None,
    working_days_per_month: int,
) -> tuple[PayslipItem, ...]:
    """
    Overtime pay from attendance overtime hours.

    hourly rate = monthly basic / (working days per month × standard hours)
    """
    if rule is None:
        return ()
    hours = sum_amounts(a.overtime_hours for a in attendance)
    if hours <= 0:
        return ()
    hourly_rate = monthly_basic / (working_days_per_month * rule.standard_hours_per_day)
    amount = round_money(hours * hourly_rate * rule.multiplier)
    return (
        PayslipItem(
            name=f"Overtime ({hours} hrs @ {rule.multiplier}x)",
            amount=amount,
            type=PayslipItemType.OVERTIME,
        ),
    )


def calculate_commissions(
    commissions: Sequence[CommissionRecord],
    employee_id: str,
    month: str,
) -> tuple[PayslipItem, ...]:
    items: list[PayslipItem] = []
    for record in commissions:
        if record.employee_id != employee_id or record.month != month:
            continue
        if record.amount is not None:
            amount = record.amount
        else:
            amount = percent_of(record.sales_amount, record.rate)
        items.append(
            PayslipItem(
                name=record.description,
                amount=round_money(amount),
                type=PayslipItemType.COMMISSION,
            )
        )
    return tuple(items)


class EarningsCalculator:
    """
    Earnings stage of the payroll pipeline.

    Contract:
        Pure; all inputs are keyword arguments, nothing is mutated.
    """

    @traced_engine(
        "earnings", "1.0",
        fingerprint_fields=(
            "employee_id", "month", "monthly_basic", "structure", "bonuses",
            "attendance", "commissions",
        ),
    )
    def calculate(
        self,
        *,
        employee_id: str,
        month: str,
        monthly_basic: Decimal,
        structure: Sequence[SalaryComponent],
        proration: ProrationInfo,
        bonuses: Sequence[BonusRecord] = (),
        attendance: Sequence[AttendanceRecord] = (),
        commissions: Sequence[CommissionRecord] = (),
        overtime_rule: OvertimeRule | None = None,
        working_days_per_month: int = 26,
    ) -> EarningsResult:
        t0 = time.monotonic()

        basic_salary = calculate_basic_salary(monthly_basic, proration)
        allowances = component_items(
            structure,
            ComponentKind.ALLOWANCE,
            monthly_basic,
            proration,
            PayslipItemType.ALLOWANCE,
        )
        bonus_items, applied = calculate_bonuses(bonuses, employee_id, month)
        overtime = calculate_overtime(
            attendance, monthly_basic, overtime_rule, working_days_per_month,
        )
        commission_items = calculate_commissions(commissions, employee_id, month)

        result = EarningsResult(
            basic_salary=basic_salary,
            allowances=allowances,
            bonuses=bonus_items,
            overtime=overtime,
            commissions=commission_items,
            applied_bonuses=applied,
        )

        logger.info("earnings_calculated", extra={
            "employee_id": employee_id,
            "month": month,
            "basic_salary": str(basic_salary),
            "allowance_count": len(allowances),
            "bonus_count": len(bonus_items),
            "gross_salary": str(result.gross_salary),
            "duration_ms": round((time.monotonic() - t0) * 1000, 2),
        })
        return result
