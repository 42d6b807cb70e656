"""
Employee Domain Models (``payroll_kernel.domain.employee``).

Frozen value objects for the employee directory records the engine reads:
the employee, its versioned salary components, its project assignments,
its lifecycle history and its termination record.  The engine never
mutates any of these.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from payroll_kernel.logging_config import get_logger

logger = get_logger("domain.employee")


class EmploymentStatus(str, Enum):
    """Employment status as recorded by the directory."""

    ACTIVE = "Active"
    TERMINATED = "Terminated"
    RESIGNED = "Resigned"
    ON_LEAVE = "On Leave"
    SUSPENDED = "Suspended"


class LifecycleEventType(str, Enum):
    """Lifecycle history event kinds."""

    HIRE = "Hire"
    TRANSFER = "Transfer"
    PROMOTION = "Promotion"
    SALARY_REVISION = "Salary Revision"
    TERMINATION = "Termination"


# Events that mark a payslip as affected mid-period (informational only)
PRORATION_EVENT_TYPES = frozenset({
    LifecycleEventType.TRANSFER,
    LifecycleEventType.PROMOTION,
    LifecycleEventType.SALARY_REVISION,
})


class CalculationMode(str, Enum):
    """How a salary component amount is resolved."""

    FIXED_AMOUNT = "Fixed Amount"
    PERCENTAGE_OF_BASIC = "Percentage of Basic"


class ComponentKind(str, Enum):
    """Whether a salary component adds to or subtracts from pay."""

    ALLOWANCE = "Allowance"
    DEDUCTION = "Deduction"


@dataclass(frozen=True)
class SalaryComponent:
    """
    One effective-dated version of a salary component.

    ``amount`` is a currency amount for FIXED_AMOUNT and a percentage
    (e.g. 10 for 10%) for PERCENTAGE_OF_BASIC.  Several versions of the same
    ``component_id`` may coexist; only those overlapping the pay period apply.
    """

    component_id: str
    calculation_mode: CalculationMode
    amount: Decimal
    effective_date: date
    end_date: date | None = None
    kind: ComponentKind = ComponentKind.ALLOWANCE
    name: str | None = None
    is_taxable: bool = False

    @property
    def display_name(self) -> str:
        return self.name or f"Component {self.component_id}"


@dataclass(frozen=True)
class ProjectAssignment:
    """An employee's assignment to a project, weighted by percent or hours."""

    project_id: str
    effective_date: date
    end_date: date | None = None
    percentage: Decimal | None = None
    hours_per_month: Decimal | None = None


@dataclass(frozen=True)
class LifecycleEvent:
    """A dated entry in the employee's lifecycle history."""

    type: LifecycleEventType
    event_date: date
    description: str = ""


@dataclass(frozen=True)
class TerminationRecord:
    """Termination details; ``last_working_day`` bounds the final payslip."""

    last_working_day: date
    reason: str = ""


@dataclass(frozen=True)
class Employee:
    """An employee as supplied by the external directory."""

    id: str
    employee_id: str  # human-facing code, used in messages
    name: str
    status: EmploymentStatus
    joining_date: date
    basic_salary: Decimal  # monthly basic rate
    termination: TerminationRecord | None = None
    lifecycle_history: tuple[LifecycleEvent, ...] = field(default_factory=tuple)
    salary_structure: tuple[SalaryComponent, ...] = field(default_factory=tuple)
    project_assignments: tuple[ProjectAssignment, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.basic_salary < 0:
            logger.warning(
                "employee_negative_basic_salary",
                extra={
                    "employee_id": self.employee_id,
                    "basic_salary": str(self.basic_salary),
                },
            )
            raise ValueError("basic_salary cannot be negative")
