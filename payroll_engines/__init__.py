"""
Module: payroll_engines
Responsibility:
    Package entrypoint that re-exports the pure payroll calculation stages.
    This is the canonical import surface for ``payroll_services``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import payroll_kernel (and sibling engine modules).
    MUST NOT import payroll_services or payroll_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Dates are passed in as explicit parameters.
    - Decimal-only arithmetic: floats are forbidden for money.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    The stage classes are traced via ``@traced_engine`` (see
    ``payroll_engines.tracer``), emitting PAYROLL_ENGINE_TRACE log records
    with engine name, version, input fingerprint and duration.
"""

from payroll_engines.cost_allocation import (
    AllocationOutcome,
    CostAllocator,
    CostTotals,
    allocation_factors,
)
from payroll_engines.deductions import (
    DeductionCalculator,
    DeductionsResult,
    calculate_progressive_tax,
    calculate_taxable_income,
)
from payroll_engines.earnings import EarningsCalculator, EarningsResult
from payroll_engines.period import PayPeriod, parse_month, resolve_pay_period
from payroll_engines.proration import (
    ProrationInfo,
    ProrationReason,
    calculate_proration,
    check_eligibility,
    is_employee_active,
    prorate,
)
from payroll_engines.salary_structure import (
    active_assignments,
    effective_salary_structure,
    overlaps_period,
)

__all__ = [
    # Period
    "PayPeriod",
    "parse_month",
    "resolve_pay_period",
    # Proration
    "ProrationInfo",
    "ProrationReason",
    "calculate_proration",
    "check_eligibility",
    "is_employee_active",
    "prorate",
    # Salary structure
    "active_assignments",
    "effective_salary_structure",
    "overlaps_period",
    # Earnings
    "EarningsCalculator",
    "EarningsResult",
    # Deductions
    "DeductionCalculator",
    "DeductionsResult",
    "calculate_progressive_tax",
    "calculate_taxable_income",
    # Cost allocation
    "AllocationOutcome",
    "CostAllocator",
    "CostTotals",
    "allocation_factors",
]
