"""
Pure domain layer.

Immutable records and value helpers with NO dependencies on storage,
network or the wall clock.  All domain objects are frozen dataclasses.
"""

from payroll_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from payroll_kernel.domain.employee import (
    CalculationMode,
    ComponentKind,
    Employee,
    EmploymentStatus,
    LifecycleEvent,
    LifecycleEventType,
    ProjectAssignment,
    SalaryComponent,
    TerminationRecord,
)
from payroll_kernel.domain.facts import (
    AdjustmentStatus,
    AdjustmentType,
    AttendanceRecord,
    AttendanceStatus,
    BonusRecord,
    BonusStatus,
    CommissionRecord,
    LoanInstallment,
    PayrollAdjustment,
)
from payroll_kernel.domain.payslip import (
    PayFrequency,
    PayrollCostAllocation,
    PayrollCycle,
    Payslip,
    PayslipItem,
    PayslipItemType,
    PayslipSnapshot,
    PayslipStatus,
)
from payroll_kernel.domain.rules import (
    OvertimeRule,
    PayrollEngineConfig,
    StatutoryConfiguration,
    TaxConfiguration,
    TaxSlab,
)
from payroll_kernel.domain.values import round_money

__all__ = [
    # Clock
    "Clock",
    "DeterministicClock",
    "SystemClock",
    # Employee directory
    "CalculationMode",
    "ComponentKind",
    "Employee",
    "EmploymentStatus",
    "LifecycleEvent",
    "LifecycleEventType",
    "ProjectAssignment",
    "SalaryComponent",
    "TerminationRecord",
    # Period facts
    "AdjustmentStatus",
    "AdjustmentType",
    "AttendanceRecord",
    "AttendanceStatus",
    "BonusRecord",
    "BonusStatus",
    "CommissionRecord",
    "LoanInstallment",
    "PayrollAdjustment",
    # Output
    "PayFrequency",
    "PayrollCostAllocation",
    "PayrollCycle",
    "Payslip",
    "PayslipItem",
    "PayslipItemType",
    "PayslipSnapshot",
    "PayslipStatus",
    # Rules
    "OvertimeRule",
    "PayrollEngineConfig",
    "StatutoryConfiguration",
    "TaxConfiguration",
    "TaxSlab",
    # Values
    "round_money",
]
