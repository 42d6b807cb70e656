"""
Module: payroll_engines.cost_allocation
Responsibility:
    Split an employee's payroll totals across the projects they are
    assigned to during the pay period.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - No rows unless multi-project allocation is enabled and at least one
      assignment overlaps the period.
    - A lone overlapping assignment takes the whole cost (factor 1).
    - Factor precedence per assignment: percentage / 100, then hours /
      total declared hours (only when at least two assignments declare
      hours), then 1 / n.
    - Factors are NOT re-normalized.  When they do not sum to 1 a warning
      is returned; exact partitions need percentages summing to 100.
    - Each row amount is rounded to the cent.

Usage:
    outcome = CostAllocator().allocate(
        assignments=active,
        totals=CostTotals(...),
        period=period,
    )
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from payroll_engines.period import PayPeriod
from payroll_engines.salary_structure import active_assignments
from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.employee import ProjectAssignment
from payroll_kernel.domain.payslip import PayrollCostAllocation
from payroll_kernel.domain.values import HUNDRED, ZERO, round_money, sum_amounts
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.cost_allocation")

ONE = Decimal("1")
_FACTOR_TOLERANCE = Decimal("0.000001")


@dataclass(frozen=True)
class CostTotals:
    """Payslip totals to be split across projects."""

    basic_salary: Decimal
    allowances: Decimal
    bonuses: Decimal
    deductions: Decimal
    net_amount: Decimal


@dataclass(frozen=True)
class AllocationOutcome:
    allocations: tuple[PayrollCostAllocation, ...]
    warnings: tuple[str, ...] = ()

    @property
    def total_net(self) -> Decimal:
        return sum_amounts(a.net_amount for a in self.allocations)


def allocation_factors(assignments: Sequence[ProjectAssignment]) -> list[Decimal]:
    """Share of cost for each overlapping assignment, in input order."""
    count = len(assignments)
    if count == 1:
        return [ONE]

    # Hours weight only applies between two or more hour-declaring assignments
    with_hours = [a.hours_per_month for a in assignments if a.hours_per_month]
    total_hours = sum_amounts(with_hours) if len(with_hours) >= 2 else ZERO
    factors: list[Decimal] = []
    for assignment in assignments:
        if assignment.percentage:
            factors.append(assignment.percentage / HUNDRED)
        elif assignment.hours_per_month and total_hours > 0:
            factors.append(assignment.hours_per_month / total_hours)
        else:
            factors.append(ONE / count)
    return factors


class CostAllocator:
    """
    Project cost allocation stage.

    Contract:
        Pure; returns rows plus any warnings, never raises on unbalanced
        factors.
    """

    @traced_engine("cost_allocation", "1.0", fingerprint_fields=("totals", "period"))
    def allocate(
        self,
        *,
        assignments: Sequence[ProjectAssignment],
        totals: CostTotals,
        period: PayPeriod,
        enabled: bool = True,
    ) -> AllocationOutcome:
        t0 = time.monotonic()

        if not enabled:
            return AllocationOutcome(allocations=())

        active = active_assignments(assignments, period)
        if not active:
            return AllocationOutcome(allocations=())

        factors = allocation_factors(active)
        rows = tuple(
            PayrollCostAllocation(
                project_id=assignment.project_id,
                factor=factor,
                basic_salary=round_money(totals.basic_salary * factor),
                allowances=round_money(totals.allowances * factor),
                bonuses=round_money(totals.bonuses * factor),
                deductions=round_money(totals.deductions * factor),
                net_amount=round_money(totals.net_amount * factor),
                percentage=assignment.percentage,
                hours=assignment.hours_per_month,
            )
            for assignment, factor in zip(active, factors)
        )

        warnings: list[str] = []
        factor_sum = sum_amounts(factors)
        if abs(factor_sum - ONE) > _FACTOR_TOLERANCE:
            warnings.append(
                f"Project allocation factors sum to {round_money(factor_sum * HUNDRED)}%, "
                f"not 100%; allocated costs do not match payslip totals"
            )
            logger.warning("cost_allocation_unbalanced", extra={
                "factor_sum": str(factor_sum),
                "project_ids": [a.project_id for a in active],
            })

        logger.info("cost_allocation_completed", extra={
            "project_count": len(rows),
            "net_amount": str(totals.net_amount),
            "allocated_net": str(sum_amounts(r.net_amount for r in rows)),
            "duration_ms": round((time.monotonic() - t0) * 1000, 2),
        })
        return AllocationOutcome(allocations=rows, warnings=tuple(warnings))
