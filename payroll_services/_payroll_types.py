"""
Result types for the payroll services.

Frozen dataclasses with tuples for immutable collections.  Errors and
warnings are plain strings collected per employee, never raised out of a
cycle.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from payroll_kernel.domain.payslip import Payslip


@dataclass(frozen=True)
class PayrollCalculationResult:
    """Outcome of one employee's calculation.

    ``payslip`` is None when the employee is not payable in the period; the
    reason is then in ``errors``.
    """

    payslip: Payslip | None
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def succeeded(self) -> bool:
        return self.payslip is not None


@dataclass(frozen=True)
class PayrollCycleResult:
    """Outcome of a whole cycle: payslips in employee input order."""

    cycle_id: str
    payslips: tuple[Payslip, ...] = field(default_factory=tuple)
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
