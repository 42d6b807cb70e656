"""
Period-scoped payroll facts (``payroll_kernel.domain.facts``).

Bonuses, ad-hoc adjustments, attendance, commissions and loan installments
are supplied by the external facts store, keyed by employee id and,
optionally, by the payroll month ("YYYY-MM") they target.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from payroll_kernel.domain.payslip import PayslipItemType


class BonusStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    PAID = "Paid"


class AdjustmentType(str, Enum):
    """Direction of an adjustment."""

    EARNING = "Earning"
    DEDUCTION = "Deduction"


class AdjustmentStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    APPLIED = "Applied"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LEAVE = "Leave"
    HALF_DAY = "Half Day"
    HOLIDAY = "Holiday"


@dataclass(frozen=True)
class BonusRecord:
    """A bonus grant; paid verbatim when approved for the month."""

    id: str
    employee_id: str
    type: str  # e.g. "Performance", "Festival"
    amount: Decimal
    effective_date: date
    status: BonusStatus = BonusStatus.PENDING
    payroll_month: str | None = None

    def applies_to(self, employee_id: str, month: str) -> bool:
        return (
            self.employee_id == employee_id
            and self.status == BonusStatus.APPROVED
            and (self.payroll_month is None or self.payroll_month == month)
        )


@dataclass(frozen=True)
class PayrollAdjustment:
    """An ad-hoc earning or deduction recorded against an employee."""

    id: str
    employee_id: str
    description: str
    amount: Decimal
    type: AdjustmentType
    effective_date: date
    category: PayslipItemType = PayslipItemType.ADJUSTMENT
    status: AdjustmentStatus = AdjustmentStatus.ACTIVE
    payroll_month: str | None = None

    def targets(self, employee_id: str, month: str) -> bool:
        """Belongs to this employee and month, regardless of status."""
        return self.employee_id == employee_id and (
            self.payroll_month is None or self.payroll_month == month
        )


@dataclass(frozen=True)
class AttendanceRecord:
    """One day of attendance; ``overtime_hours`` feeds the overtime rule."""

    employee_id: str
    day: date
    status: AttendanceStatus
    overtime_hours: Decimal = Decimal("0")


@dataclass(frozen=True)
class CommissionRecord:
    """
    Commission earned in a month.

    Either a flat ``amount`` or ``sales_amount`` × ``rate`` percent.
    """

    employee_id: str
    month: str
    description: str = "Commission"
    amount: Decimal | None = None
    sales_amount: Decimal | None = None
    rate: Decimal | None = None

    def __post_init__(self) -> None:
        if self.amount is None and (self.sales_amount is None or self.rate is None):
            raise ValueError(
                "Commission needs an amount, or both sales_amount and rate"
            )


@dataclass(frozen=True)
class LoanInstallment:
    """A scheduled loan or salary-advance repayment due in a month."""

    loan_id: str
    employee_id: str
    month: str
    amount: Decimal
    description: str = "Loan Repayment"
