"""
EmployeePayrollCalculator -- runs the payroll pipeline for one employee.

Contract:
    period -> eligibility -> proration -> salary structure -> earnings
    -> deductions -> cost allocation -> payslip.  Every stage is a pure
    function of its inputs; this class only wires them together and
    collects errors and warnings.

Failure modes:
    - Ineligible employee: no payslip, one error string.
    - Malformed dates/amounts: not caught here; they propagate to the caller.
"""

from __future__ import annotations

from collections.abc import Sequence

from payroll_engines.cost_allocation import CostAllocator, CostTotals
from payroll_engines.deductions import DeductionCalculator
from payroll_engines.earnings import EarningsCalculator
from payroll_engines.period import PayPeriod, resolve_pay_period
from payroll_engines.proration import calculate_proration, check_eligibility
from payroll_engines.salary_structure import active_assignments, effective_salary_structure
from payroll_kernel.domain.clock import Clock, SystemClock
from payroll_kernel.domain.employee import Employee
from payroll_kernel.domain.facts import (
    AttendanceRecord,
    BonusRecord,
    CommissionRecord,
    LoanInstallment,
    PayrollAdjustment,
)
from payroll_kernel.domain.payslip import PayFrequency
from payroll_kernel.domain.rules import (
    PayrollEngineConfig,
    StatutoryConfiguration,
    TaxConfiguration,
)
from payroll_kernel.exceptions import InactiveEmployeeError
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_services._payroll_types import PayrollCalculationResult
from payroll_services.assembler import PayslipAssembler

logger = get_logger("services.calculation")


class EmployeePayrollCalculator:
    """Per-employee payroll pipeline."""

    def __init__(
        self,
        config: PayrollEngineConfig | None = None,
        clock: Clock | None = None,
    ):
        self._config = config or PayrollEngineConfig()
        self._clock = clock or SystemClock()
        self._earnings = EarningsCalculator()
        self._deductions = DeductionCalculator()
        self._allocator = CostAllocator()
        self._assembler = PayslipAssembler(self._clock)

    @property
    def config(self) -> PayrollEngineConfig:
        return self._config

    def resolve_period(self, month: str, frequency: PayFrequency) -> PayPeriod:
        return resolve_pay_period(
            month,
            frequency,
            today=self._clock.today(),
            semi_monthly_split_day=self._config.semi_monthly_split_day,
        )

    def calculate(
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
        with LogContext.bind(employee_id=employee.id, month=month):
            return self._calculate(
                employee, month, frequency, bonuses, adjustments, attendance,
                tax_config, statutory_configs or (), commissions, loans,
            )

    def _calculate(
        self,
        employee: Employee,
        month: str,
        frequency: PayFrequency,
        bonuses: Sequence[BonusRecord],
        adjustments: Sequence[PayrollAdjustment],
        attendance: Sequence[AttendanceRecord],
        tax_config: TaxConfiguration | None,
        statutory_configs: Sequence[StatutoryConfiguration],
        commissions: Sequence[CommissionRecord],
        loans: Sequence[LoanInstallment],
    ) -> PayrollCalculationResult:
        config = self._config
        warnings: list[str] = []

        period = self.resolve_period(month, frequency)
        if frequency == PayFrequency.SEMI_MONTHLY:
            # Bounds depend on the processing date, not on the target month.
            logger.warning("semi_monthly_period_from_processing_date", extra={
                "month": month,
                "period_start": period.start.isoformat(),
                "period_end": period.end.isoformat(),
                "processing_date": self._clock.today().isoformat(),
            })

        try:
            check_eligibility(employee, period)
        except InactiveEmployeeError as exc:
            return PayrollCalculationResult(payslip=None, errors=(str(exc),))

        proration = calculate_proration(employee, period, enabled=config.enable_proration)
        structure = effective_salary_structure(employee.salary_structure, period)
        employee_attendance = tuple(
            a for a in attendance
            if a.employee_id == employee.id and period.contains(a.day)
        )

        earnings = self._earnings.calculate(
            employee_id=employee.id,
            month=month,
            monthly_basic=employee.basic_salary,
            structure=structure,
            proration=proration,
            bonuses=bonuses,
            attendance=employee_attendance,
            commissions=commissions,
            overtime_rule=config.overtime_rule,
            working_days_per_month=config.working_days_per_month,
        )
        deductions = self._deductions.calculate(
            employee_id=employee.id,
            month=month,
            monthly_basic=employee.basic_salary,
            gross_salary=earnings.gross_salary,
            structure=structure,
            allowances=earnings.allowances,
            proration=proration,
            tax_config=tax_config,
            statutory_configs=statutory_configs,
            loans=loans,
            adjustments=adjustments,
        )

        net_salary = earnings.gross_salary - deductions.total_all
        if net_salary < 0:
            warnings.append(
                f"Employee {employee.employee_id} has negative net salary {net_salary}"
            )

        assignments = active_assignments(employee.project_assignments, period)
        allocation = self._allocator.allocate(
            assignments=assignments,
            totals=CostTotals(
                basic_salary=earnings.basic_salary,
                allowances=earnings.total_allowances,
                bonuses=earnings.total_bonuses,
                deductions=deductions.total_all,
                net_amount=net_salary,
            ),
            period=period,
            enabled=config.enable_multi_project,
        )
        warnings.extend(allocation.warnings)

        payslip = self._assembler.assemble(
            employee=employee,
            month=month,
            period=period,
            proration=proration,
            earnings=earnings,
            deductions=deductions,
            allocation=allocation,
            structure=structure,
            assignments=assignments,
            adjustments=adjustments,
            attendance=employee_attendance,
        )

        if warnings:
            logger.warning("employee_payroll_warnings", extra={
                "employee_id": employee.employee_id,
                "warnings": warnings,
            })
        return PayrollCalculationResult(payslip=payslip, warnings=tuple(warnings))
