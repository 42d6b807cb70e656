"""
Payslip Domain Models (``payroll_kernel.domain.payslip``).

Responsibility
--------------
The engine's output types: pay cycles, itemized payslip lines, per-project
cost allocations, the audit snapshot and the payslip itself.

Invariants enforced
-------------------
* All models are ``frozen=True``; a payslip is created once per
  (employee, cycle) and never mutated.  The cycle id is stamped with
  ``dataclasses.replace``, producing a new object.
* ``net_salary == gross_salary - total_all_deductions`` exactly.
* ``PayslipItemType`` is a closed set; per-kind totals are computed
  exhaustively over it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from payroll_kernel.domain.employee import ProjectAssignment, SalaryComponent
    from payroll_kernel.domain.facts import BonusRecord, PayrollAdjustment


class PayFrequency(str, Enum):
    MONTHLY = "Monthly"
    SEMI_MONTHLY = "Semi-Monthly"
    WEEKLY = "Weekly"
    BI_WEEKLY = "Bi-Weekly"


class PayslipItemType(str, Enum):
    """Kind of a payslip line."""

    ALLOWANCE = "Allowance"
    BONUS = "Bonus"
    OVERTIME = "Overtime"
    COMMISSION = "Commission"
    DEDUCTION = "Deduction"
    TAX = "Tax"
    STATUTORY = "Statutory"
    LOAN = "Loan"
    ADJUSTMENT = "Adjustment"


class PayslipStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"
    PARTIALLY_PAID = "Partially Paid"
    VOID = "Void"


@dataclass(frozen=True)
class PayrollCycle:
    """A payroll run as identified by the external orchestration layer."""

    id: str
    month: str  # "YYYY-MM"
    frequency: PayFrequency = PayFrequency.MONTHLY


@dataclass(frozen=True)
class PayslipItem:
    """The atomic line of any payslip section."""

    name: str
    amount: Decimal
    type: PayslipItemType
    effective_date: date | None = None
    component_id: str | None = None
    is_taxable: bool = False


@dataclass(frozen=True)
class PayrollCostAllocation:
    """One project's share of an employee's payroll cost."""

    project_id: str
    factor: Decimal
    basic_salary: Decimal
    allowances: Decimal
    bonuses: Decimal
    deductions: Decimal
    net_amount: Decimal
    percentage: Decimal | None = None
    hours: Decimal | None = None

    @property
    def amount(self) -> Decimal:
        """Cost charged to the project (the net share)."""
        return self.net_amount


@dataclass(frozen=True)
class PayslipSnapshot:
    """Frozen copy of exactly the inputs that produced a payslip."""

    salary_structure: tuple[SalaryComponent, ...]
    project_assignments: tuple[ProjectAssignment, ...]
    bonuses: tuple[BonusRecord, ...]
    adjustments: tuple[PayrollAdjustment, ...]
    attendance_days: int
    working_days: int


@dataclass(frozen=True)
class Payslip:
    """An itemized payslip for one employee and one pay period."""

    id: str
    employee_id: str
    month: str
    issue_date: date
    pay_period_start: date
    pay_period_end: date

    basic_salary: Decimal
    allowances: tuple[PayslipItem, ...]
    total_allowances: Decimal
    bonuses: tuple[PayslipItem, ...]
    total_bonuses: Decimal
    overtime: tuple[PayslipItem, ...]
    total_overtime: Decimal
    commissions: tuple[PayslipItem, ...]
    total_commissions: Decimal
    gross_salary: Decimal

    deductions: tuple[PayslipItem, ...]
    total_deductions: Decimal
    tax_deductions: tuple[PayslipItem, ...]
    total_tax: Decimal
    statutory_deductions: tuple[PayslipItem, ...]
    total_statutory: Decimal
    loan_deductions: tuple[PayslipItem, ...]
    total_loan_deductions: Decimal
    adjustments: tuple[PayslipItem, ...]
    total_adjustments: Decimal
    total_all_deductions: Decimal

    taxable_income: Decimal
    net_salary: Decimal
    cost_allocations: tuple[PayrollCostAllocation, ...]

    is_prorated: bool
    proration_days: int
    total_days: int
    proration_reason: str | None

    generated_at: datetime
    snapshot: PayslipSnapshot
    payroll_cycle_id: str | None = None
    status: PayslipStatus = PayslipStatus.PENDING
    paid_amount: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def items(self) -> tuple[PayslipItem, ...]:
        """Every line on the payslip, earnings first."""
        return (
            self.allowances
            + self.bonuses
            + self.overtime
            + self.commissions
            + self.deductions
            + self.tax_deductions
            + self.statutory_deductions
            + self.loan_deductions
            + self.adjustments
        )

    def items_of_type(self, item_type: PayslipItemType) -> tuple[PayslipItem, ...]:
        return tuple(i for i in self.items if i.type == item_type)
