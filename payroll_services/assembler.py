"""
PayslipAssembler -- packages computed payroll sections into a Payslip.

Contract:
    Pure combination step.  Reads the stage results, never mutates any
    input record, and returns a new frozen ``Payslip`` with a fresh id,
    ``status=Pending``, ``paid_amount=0`` and an audit snapshot of exactly
    the inputs used.

Invariants enforced:
    - net_salary == gross_salary - total_all_deductions.
    - Timestamps come from the injected Clock.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from uuid import uuid4

from payroll_engines.cost_allocation import AllocationOutcome
from payroll_engines.deductions import DeductionsResult
from payroll_engines.earnings import EarningsResult
from payroll_engines.period import PayPeriod
from payroll_engines.proration import ProrationInfo
from payroll_kernel.domain.clock import Clock, SystemClock
from payroll_kernel.domain.employee import Employee, ProjectAssignment, SalaryComponent
from payroll_kernel.domain.facts import AttendanceRecord, AttendanceStatus, PayrollAdjustment
from payroll_kernel.domain.payslip import Payslip, PayslipSnapshot, PayslipStatus
from payroll_kernel.logging_config import get_logger

logger = get_logger("services.assembler")


class PayslipAssembler:
    """Builds immutable payslips from stage results."""

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or SystemClock()

    def assemble(
        self,
        *,
        employee: Employee,
        month: str,
        period: PayPeriod,
        proration: ProrationInfo,
        earnings: EarningsResult,
        deductions: DeductionsResult,
        allocation: AllocationOutcome,
        structure: Sequence[SalaryComponent],
        assignments: Sequence[ProjectAssignment],
        adjustments: Sequence[PayrollAdjustment],
        attendance: Sequence[AttendanceRecord],
    ) -> Payslip:
        now = self._clock.now()
        gross = earnings.gross_salary
        net = gross - deductions.total_all

        snapshot = PayslipSnapshot(
            salary_structure=tuple(structure),
            project_assignments=tuple(assignments),
            bonuses=earnings.applied_bonuses,
            adjustments=tuple(a for a in adjustments if a.employee_id == employee.id),
            attendance_days=sum(
                1 for a in attendance if a.status == AttendanceStatus.PRESENT
            ),
            working_days=proration.total_days,
        )

        payslip = Payslip(
            id=f"payslip-{employee.id}-{month}-{uuid4().hex[:12]}",
            employee_id=employee.id,
            month=month,
            issue_date=now.date(),
            pay_period_start=period.start,
            pay_period_end=period.end,
            basic_salary=earnings.basic_salary,
            allowances=earnings.allowances,
            total_allowances=earnings.total_allowances,
            bonuses=earnings.bonuses,
            total_bonuses=earnings.total_bonuses,
            overtime=earnings.overtime,
            total_overtime=earnings.total_overtime,
            commissions=earnings.commissions,
            total_commissions=earnings.total_commissions,
            gross_salary=gross,
            deductions=deductions.deductions,
            total_deductions=deductions.total_deductions,
            tax_deductions=deductions.tax,
            total_tax=deductions.total_tax,
            statutory_deductions=deductions.statutory,
            total_statutory=deductions.total_statutory,
            loan_deductions=deductions.loans,
            total_loan_deductions=deductions.total_loans,
            adjustments=deductions.adjustments,
            total_adjustments=deductions.total_adjustments,
            total_all_deductions=deductions.total_all,
            taxable_income=deductions.taxable_income,
            net_salary=net,
            cost_allocations=allocation.allocations,
            is_prorated=proration.is_prorated,
            proration_days=proration.days,
            total_days=proration.total_days,
            proration_reason=proration.reason.value if proration.reason else None,
            generated_at=now,
            snapshot=snapshot,
            status=PayslipStatus.PENDING,
            paid_amount=Decimal("0"),
        )

        logger.info("payslip_assembled", extra={
            "payslip_id": payslip.id,
            "employee_id": employee.employee_id,
            "month": month,
            "gross_salary": str(gross),
            "net_salary": str(net),
            "is_prorated": proration.is_prorated,
            "cost_allocation_count": len(allocation.allocations),
        })
        return payslip
