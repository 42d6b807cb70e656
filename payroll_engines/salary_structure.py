"""
Effective-dated salary structure resolution.

An employee's salary structure is a flat list of component versions, each
with its own ``[effective_date, end_date]`` interval.  The structure for a
pay period is the sub-list overlapping the period, in input order.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from payroll_engines.period import PayPeriod
from payroll_engines.proration import ProrationInfo, prorate
from payroll_kernel.domain.employee import (
    CalculationMode,
    ComponentKind,
    ProjectAssignment,
    SalaryComponent,
)
from payroll_kernel.domain.payslip import PayslipItem, PayslipItemType
from payroll_kernel.domain.values import percent_of


def overlaps_period(start: date, end: date | None, period: PayPeriod) -> bool:
    """True when ``[start, end]`` intersects the period (open end = ongoing)."""
    if end is not None and end < period.start:
        return False
    if start > period.end:
        return False
    return True


def effective_salary_structure(
    components: Iterable[SalaryComponent],
    period: PayPeriod,
) -> tuple[SalaryComponent, ...]:
    return tuple(
        c for c in components
        if overlaps_period(c.effective_date, c.end_date, period)
    )


def active_assignments(
    assignments: Iterable[ProjectAssignment],
    period: PayPeriod,
) -> tuple[ProjectAssignment, ...]:
    return tuple(
        a for a in assignments
        if overlaps_period(a.effective_date, a.end_date, period)
    )


def resolve_component_amount(
    component: SalaryComponent,
    monthly_basic: Decimal,
) -> Decimal:
    """Full-period amount of a component, before proration."""
    if component.calculation_mode == CalculationMode.PERCENTAGE_OF_BASIC:
        return percent_of(monthly_basic, component.amount)
    return component.amount


def component_items(
    structure: Sequence[SalaryComponent],
    kind: ComponentKind,
    monthly_basic: Decimal,
    proration: ProrationInfo,
    item_type: PayslipItemType,
) -> tuple[PayslipItem, ...]:
    """Prorated payslip lines for every component of ``kind``."""
    return tuple(
        PayslipItem(
            name=c.display_name,
            amount=prorate(resolve_component_amount(c, monthly_basic), proration),
            type=item_type,
            component_id=c.component_id,
            is_taxable=c.is_taxable,
        )
        for c in structure
        if c.kind == kind
    )
