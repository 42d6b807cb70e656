"""
CycleProcessor -- runs the payroll pipeline for every employee of a cycle.

Contract:
    - Employees not payable in the cycle's period are reported as one error
      string each and skipped.
    - Each remaining employee is calculated independently; any exception
      raised for one employee (a typed ``PayrollEngineError`` or a failure
      on a malformed fact record) is recorded and that employee is skipped.
      One failure never aborts the batch.
    - Every payslip is stamped with the cycle id (a new frozen object).
    - Output order follows the employee input order, whether employees run
      sequentially or on a thread pool.

Non-goals:
    - No idempotency guard: the engine always recomputes.  Consumers skip
      employees that already have a payslip for the cycle.
    - No persistence and no payment-status transitions.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

from payroll_engines.proration import check_eligibility
from payroll_kernel.domain.employee import Employee
from payroll_kernel.domain.facts import (
    AttendanceRecord,
    BonusRecord,
    CommissionRecord,
    LoanInstallment,
    PayrollAdjustment,
)
from payroll_kernel.domain.payslip import PayrollCycle, Payslip
from payroll_kernel.domain.rules import StatutoryConfiguration, TaxConfiguration
from payroll_kernel.exceptions import InactiveEmployeeError, PayrollEngineError
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_services._payroll_types import PayrollCalculationResult, PayrollCycleResult
from payroll_services.calculation import EmployeePayrollCalculator

logger = get_logger("services.cycle_processor")


class CycleProcessor:
    """Batch payroll over a cycle's employee population."""

    def __init__(self, calculator: EmployeePayrollCalculator):
        self._calculator = calculator

    def process(
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
        """
        Args:
            max_workers: Run employees on a thread pool of this size.
                None or 1 runs them sequentially; results are identical.
        """
        start_time = time.monotonic()
        with LogContext.bind(cycle_id=cycle.id, month=cycle.month):
            period = self._calculator.resolve_period(cycle.month, cycle.frequency)
            logger.info("payroll_cycle_started", extra={
                "frequency": cycle.frequency.value,
                "period_start": period.start.isoformat(),
                "period_end": period.end.isoformat(),
                "employee_count": len(employees),
            })

            errors: list[str] = []
            eligible: list[Employee] = []
            for employee in employees:
                try:
                    check_eligibility(employee, period)
                except InactiveEmployeeError as exc:
                    errors.append(str(exc))
                    continue
                eligible.append(employee)

            def run(employee: Employee) -> PayrollCalculationResult:
                return self._process_employee(
                    employee, cycle, bonuses, adjustments, attendance,
                    tax_config, statutory_configs, commissions, loans,
                )

            if max_workers and max_workers > 1 and len(eligible) > 1:
                with ThreadPoolExecutor(max_workers=max_workers) as pool:
                    results = list(pool.map(run, eligible))
            else:
                results = [run(employee) for employee in eligible]

            payslips: list[Payslip] = []
            warnings: list[str] = []
            for result in results:
                if result.payslip is not None:
                    payslips.append(replace(result.payslip, payroll_cycle_id=cycle.id))
                errors.extend(result.errors)
                warnings.extend(result.warnings)

            duration_ms = round((time.monotonic() - start_time) * 1000, 2)
            logger.info("payroll_cycle_completed", extra={
                "payslip_count": len(payslips),
                "skipped_count": len(employees) - len(payslips),
                "error_count": len(errors),
                "warning_count": len(warnings),
                "duration_ms": duration_ms,
            })

        return PayrollCycleResult(
            cycle_id=cycle.id,
            payslips=tuple(payslips),
            errors=tuple(errors),
            warnings=tuple(warnings),
        )

    def _process_employee(
        self,
        employee: Employee,
        cycle: PayrollCycle,
        bonuses: Sequence[BonusRecord],
        adjustments: Sequence[PayrollAdjustment],
        attendance: Sequence[AttendanceRecord],
        tax_config: TaxConfiguration | None,
        statutory_configs: Sequence[StatutoryConfiguration] | None,
        commissions: Sequence[CommissionRecord],
        loans: Sequence[LoanInstallment],
    ) -> PayrollCalculationResult:
        # Worker threads start with an empty context
        with LogContext.bind(cycle_id=cycle.id):
            try:
                return self._calculator.calculate(
                    employee,
                    cycle.month,
                    cycle.frequency,
                    bonuses,
                    adjustments,
                    [a for a in attendance if a.employee_id == employee.id],
                    tax_config,
                    statutory_configs,
                    commissions,
                    loans,
                )
            except PayrollEngineError as exc:
                logger.error("employee_payroll_failed", extra={
                    "employee_id": employee.employee_id,
                    "error_code": exc.code,
                    "error": str(exc),
                })
                return PayrollCalculationResult(
                    payslip=None,
                    errors=(f"Employee {employee.employee_id}: [{exc.code}] {exc}",),
                )
            except Exception as exc:
                # Malformed fact records fail one employee, never the cycle
                logger.exception("employee_payroll_failed", extra={
                    "employee_id": employee.employee_id,
                    "error_code": type(exc).__name__,
                    "error": str(exc),
                })
                return PayrollCalculationResult(
                    payslip=None,
                    errors=(
                        f"Employee {employee.employee_id}: [{type(exc).__name__}] {exc}",
                    ),
                )
