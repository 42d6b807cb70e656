"""
PayrollEngine -- public call surface of the payroll engine.

Usage:
    from payroll_services import PayrollEngine
    from payroll_kernel.domain import PayFrequency, PayrollEngineConfig

    engine = PayrollEngine(PayrollEngineConfig(working_days_per_month=22))
    result = engine.calculate_employee_payroll(
        employee, "2024-03", PayFrequency.MONTHLY,
        bonuses=[], adjustments=[], attendance=[],
        tax_config=tax_table,
    )
    if result.payslip is not None:
        print(result.payslip.net_salary)

The engine holds only its configuration and clock; it performs no I/O and
keeps no state between calls.
"""

from __future__ import annotations

from collections.abc import Sequence

from payroll_kernel.domain.clock import Clock
from payroll_kernel.domain.employee import Employee
from payroll_kernel.domain.facts import (
    AttendanceRecord,
    BonusRecord,
    CommissionRecord,
    LoanInstallment,
    PayrollAdjustment,
)
from payroll_kernel.domain.payslip import PayFrequency, PayrollCycle
from payroll_kernel.domain.rules import (
    PayrollEngineConfig,
    StatutoryConfiguration,
    TaxConfiguration,
)
from payroll_services._payroll_types import PayrollCalculationResult, PayrollCycleResult
from payroll_services.calculation import EmployeePayrollCalculator
from payroll_services.cycle_processor import CycleProcessor


class PayrollEngine:
    """Facade over the per-employee calculator and the cycle processor."""

    def __init__(
        self,
        config: PayrollEngineConfig | None = None,
        clock: Clock | None = None,
    ):
        self._calculator = EmployeePayrollCalculator(config, clock)
        self._cycle_processor = CycleProcessor(self._calculator)

    @property
    def config(self) -> PayrollEngineConfig:
        return self._calculator.config

    def calculate_employee_payroll(
        self,
        employee: Employee,
        month: str,
        frequency: PayFrequency,
        bonuses: Sequence[BonusRecord],
        adjustments: Sequence[PayrollAdjustment],
        attendance: Sequence[AttendanceRecord],
        tax_config: TaxConfiguration | None = None,
        statutory_configs: Sequence[StatutoryConfiguration] | None = None,
        commissions: Sequence[CommissionRecord] = (),
        loans: Sequence[LoanInstallment] = (),
    ) -> PayrollCalculationResult:
        return self._calculator.calculate(
            employee, month, frequency, bonuses, adjustments, attendance,
            tax_config, statutory_configs, commissions, loans,
        )

    def process_payroll_cycle(
        self,
        cycle: PayrollCycle,
        employees: Sequence[Employee],
        bonuses: Sequence[BonusRecord],
        adjustments: Sequence[PayrollAdjustment],
        attendance: Sequence[AttendanceRecord],
        tax_config: TaxConfiguration | None = None,
        statutory_configs: Sequence[StatutoryConfiguration] | None = None,
        commissions: Sequence[CommissionRecord] = (),
        loans: Sequence[LoanInstallment] = (),
        max_workers: int | None = None,
    ) -> PayrollCycleResult:
        return self._cycle_processor.process(
            cycle, employees, bonuses, adjustments, attendance,
            tax_config, statutory_configs, commissions, loans,
            max_workers=max_workers,
        )
