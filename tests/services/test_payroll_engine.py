"""
End-to-end tests for PayrollEngine.calculate_employee_payroll.

Covers:
- Full payslip roll-up and the net identity
- Proration on join, with proration disabled
- Ineligible employees
- Semi-Monthly bounds from the processing date
- Cost allocation wiring and warnings
- Overtime, commissions and loans
- Snapshot contents
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from payroll_kernel.domain.clock import DeterministicClock
from payroll_kernel.domain.employee import ComponentKind, EmploymentStatus, ProjectAssignment
from payroll_kernel.domain.facts import (
    AdjustmentType,
    AttendanceRecord,
    AttendanceStatus,
    CommissionRecord,
    LoanInstallment,
)
from payroll_kernel.domain.payslip import PayFrequency, PayslipItemType, PayslipStatus
from payroll_kernel.domain.rules import OvertimeRule, PayrollEngineConfig
from payroll_services import PayrollEngine
from tests.factories import fixed_component, make_adjustment, make_bonus, make_employee


def _calculate(engine, employee, month="2024-03", frequency=PayFrequency.MONTHLY, **kwargs):
    kwargs.setdefault("bonuses", [])
    kwargs.setdefault("adjustments", [])
    kwargs.setdefault("attendance", [])
    return engine.calculate_employee_payroll(employee, month, frequency, **kwargs)


class TestFullPayslip:

    def test_roll_up(self, engine, two_slab_tax, social_security):
        employee = make_employee(
            structure=(
                fixed_component("HRA", "500"),
                fixed_component("PF", "300", kind=ComponentKind.DEDUCTION),
            ),
        )
        adjustment = make_adjustment(amount="100")

        result = _calculate(
            engine, employee,
            bonuses=[make_bonus(amount="500")],
            adjustments=[adjustment],
            tax_config=two_slab_tax,
            statutory_configs=[social_security],
        )

        assert result.succeeded
        assert result.errors == ()
        payslip = result.payslip
        assert payslip.basic_salary == Decimal("3000")
        assert payslip.total_allowances == Decimal("500.00")
        assert payslip.total_bonuses == Decimal("500.00")
        assert payslip.gross_salary == Decimal("4000.00")
        assert payslip.total_deductions == Decimal("300.00")
        # 1000 at 10% + 3000 at 20%
        assert payslip.taxable_income == Decimal("4000.00")
        assert payslip.total_tax == Decimal("700.00")
        # 5% of the 2000 cap
        assert payslip.total_statutory == Decimal("100.00")
        assert payslip.total_adjustments == Decimal("100.00")
        assert payslip.total_all_deductions == Decimal("1200.00")
        assert payslip.net_salary == Decimal("2800.00")
        assert payslip.net_salary == payslip.gross_salary - payslip.total_all_deductions

    def test_payslip_metadata(self, engine):
        payslip = _calculate(engine, make_employee()).payslip

        assert payslip.id.startswith("payslip-emp-1-2024-03-")
        assert payslip.employee_id == "emp-1"
        assert payslip.issue_date == date(2024, 3, 20)
        assert payslip.generated_at == datetime(2024, 3, 20, 9, 0, 0, tzinfo=timezone.utc)
        assert payslip.pay_period_start == date(2024, 3, 1)
        assert payslip.pay_period_end == date(2024, 3, 31)
        assert payslip.status == PayslipStatus.PENDING
        assert payslip.paid_amount == Decimal("0")
        assert payslip.payroll_cycle_id is None
        assert not payslip.is_prorated
        assert payslip.proration_days == payslip.total_days == 31
        assert payslip.proration_reason is None

    def test_payslip_ids_unique_per_calculation(self, engine):
        first = _calculate(engine, make_employee()).payslip
        second = _calculate(engine, make_employee()).payslip
        assert first.id != second.id

    def test_no_tax_or_statutory_configuration(self, engine):
        payslip = _calculate(engine, make_employee()).payslip
        assert payslip.tax_deductions == ()
        assert payslip.statutory_deductions == ()
        assert payslip.net_salary == Decimal("3000")

    def test_items_by_type(self, engine):
        employee = make_employee(structure=(fixed_component("HRA", "500"),))
        payslip = _calculate(
            engine, employee, adjustments=[make_adjustment(amount="25")],
        ).payslip
        assert [i.name for i in payslip.items_of_type(PayslipItemType.ALLOWANCE)] == ["Component HRA"]
        assert len(payslip.items_of_type(PayslipItemType.ADJUSTMENT)) == 1


class TestProration:

    def test_join_mid_month(self, engine):
        employee = make_employee(joining_date=date(2024, 4, 10))
        payslip = _calculate(engine, employee, month="2024-04").payslip

        assert payslip.basic_salary == Decimal("2100.00")
        assert payslip.is_prorated
        assert payslip.proration_days == 21
        assert payslip.total_days == 30
        assert payslip.proration_reason == "Join"

    def test_exit_mid_month(self, engine):
        employee = make_employee(basic_salary="3100", last_working_day=date(2024, 3, 15))
        payslip = _calculate(engine, employee).payslip
        assert payslip.basic_salary == Decimal("1500.00")
        assert payslip.proration_reason == "Exit"

    def test_proration_disabled(self, clock):
        engine = PayrollEngine(PayrollEngineConfig(enable_proration=False), clock)
        employee = make_employee(joining_date=date(2024, 4, 10))
        payslip = _calculate(engine, employee, month="2024-04").payslip
        assert payslip.basic_salary == Decimal("3000")
        assert not payslip.is_prorated


class TestEligibility:

    def test_inactive_employee_yields_error_not_payslip(self, engine):
        employee = make_employee(status=EmploymentStatus.SUSPENDED)
        result = _calculate(engine, employee)

        assert result.payslip is None
        assert not result.succeeded
        assert len(result.errors) == 1
        assert "is not active during this period" in result.errors[0]

    def test_future_joiner(self, engine):
        result = _calculate(engine, make_employee(joining_date=date(2024, 5, 1)))
        assert result.payslip is None

    def test_negative_net_is_warned(self, engine):
        employee = make_employee(basic_salary="100")
        result = _calculate(engine, employee, adjustments=[make_adjustment(amount="500")])

        assert result.payslip.net_salary == Decimal("-400.00")
        assert any("negative net salary" in w for w in result.warnings)


class TestSemiMonthly:

    def test_processed_before_split_day(self, captured_logs):
        clock = DeterministicClock(datetime(2024, 3, 10, tzinfo=timezone.utc))
        engine = PayrollEngine(clock=clock)
        payslip = _calculate(engine, make_employee(), frequency=PayFrequency.SEMI_MONTHLY).payslip

        assert payslip.pay_period_end == date(2024, 3, 15)
        assert payslip.total_days == 15
        assert not payslip.is_prorated
        assert any(
            r["message"] == "semi_monthly_period_from_processing_date"
            for r in captured_logs()
        )

    def test_processed_after_split_day(self, engine):
        payslip = _calculate(engine, make_employee(), frequency=PayFrequency.SEMI_MONTHLY).payslip
        assert payslip.pay_period_end == date(2024, 3, 31)


class TestCostAllocation:

    def test_net_split_across_projects(self, engine):
        employee = make_employee(
            basic_salary="1000",
            assignments=(
                ProjectAssignment("P-1", date(2024, 1, 1), percentage=Decimal("60")),
                ProjectAssignment("P-2", date(2024, 1, 1), percentage=Decimal("40")),
            ),
        )
        result = _calculate(engine, employee)

        rows = result.payslip.cost_allocations
        assert [(r.project_id, r.net_amount) for r in rows] == [
            ("P-1", Decimal("600.00")),
            ("P-2", Decimal("400.00")),
        ]
        assert result.warnings == ()

    def test_unbalanced_allocation_warning_reaches_result(self, engine):
        employee = make_employee(
            assignments=(
                ProjectAssignment("P-1", date(2024, 1, 1), percentage=Decimal("50")),
                ProjectAssignment("P-2", date(2024, 1, 1), percentage=Decimal("20")),
            ),
        )
        result = _calculate(engine, employee)
        assert any("70.00%" in w for w in result.warnings)

    def test_multi_project_disabled(self, clock):
        engine = PayrollEngine(PayrollEngineConfig(enable_multi_project=False), clock)
        employee = make_employee(
            assignments=(ProjectAssignment("P-1", date(2024, 1, 1)),),
        )
        assert _calculate(engine, employee).payslip.cost_allocations == ()


class TestOtherEarningsAndDeductions:

    def test_overtime_when_rule_configured(self, clock):
        engine = PayrollEngine(
            PayrollEngineConfig(working_days_per_month=26, overtime_rule=OvertimeRule()),
            clock,
        )
        employee = make_employee(basic_salary="2080")
        attendance = [
            AttendanceRecord("emp-1", date(2024, 3, 4), AttendanceStatus.PRESENT, Decimal("4")),
            AttendanceRecord("emp-2", date(2024, 3, 4), AttendanceStatus.PRESENT, Decimal("8")),
            AttendanceRecord("emp-1", date(2024, 4, 1), AttendanceStatus.PRESENT, Decimal("8")),
        ]
        payslip = _calculate(engine, employee, attendance=attendance).payslip

        assert payslip.total_overtime == Decimal("60.00")
        assert payslip.gross_salary == Decimal("2140.00")
        assert payslip.snapshot.attendance_days == 1

    def test_overtime_ignored_without_rule(self, engine):
        attendance = [
            AttendanceRecord("emp-1", date(2024, 3, 4), AttendanceStatus.PRESENT, Decimal("4")),
        ]
        payslip = _calculate(engine, make_employee(), attendance=attendance).payslip
        assert payslip.overtime == ()

    def test_commissions_and_loans(self, engine):
        payslip = _calculate(
            engine,
            make_employee(),
            commissions=[
                CommissionRecord(employee_id="emp-1", month="2024-03", amount=Decimal("150")),
            ],
            loans=[LoanInstallment("loan-1", "emp-1", "2024-03", Decimal("250"))],
        ).payslip

        assert payslip.total_commissions == Decimal("150.00")
        assert payslip.total_loan_deductions == Decimal("250.00")
        assert payslip.net_salary == Decimal("2900.00")

    def test_earning_adjustment_increases_net(self, engine):
        payslip = _calculate(
            engine,
            make_employee(),
            adjustments=[make_adjustment(amount="200", type=AdjustmentType.EARNING)],
        ).payslip
        assert payslip.total_adjustments == Decimal("-200.00")
        assert payslip.net_salary == Decimal("3200.00")


class TestSnapshot:

    def test_snapshot_captures_inputs(self, engine):
        component = fixed_component("HRA", "500")
        expired = fixed_component("OLD", "50", end_date=date(2023, 12, 31))
        assignment = ProjectAssignment("P-1", date(2024, 1, 1))
        own = make_adjustment(amount="10")
        other = make_adjustment(employee_id="emp-2", amount="20")
        bonus = make_bonus(amount="300")

        employee = make_employee(structure=(component, expired), assignments=(assignment,))
        snapshot = _calculate(
            engine, employee, bonuses=[bonus], adjustments=[own, other],
        ).payslip.snapshot

        assert snapshot.salary_structure == (component,)
        assert snapshot.project_assignments == (assignment,)
        assert snapshot.bonuses == (bonus,)
        assert snapshot.adjustments == (own,)
        assert snapshot.working_days == 31


class TestLogging:

    def test_context_bound_during_calculation(self, engine, captured_logs):
        _calculate(engine, make_employee())
        assembled = [r for r in captured_logs() if r["message"] == "payslip_assembled"]
        assert len(assembled) == 1
        assert assembled[0]["employee_id"] == "emp-1"
        assert assembled[0]["month"] == "2024-03"

    def test_engine_traces_emitted(self, engine, captured_logs):
        _calculate(engine, make_employee())
        engines = {
            r["engine_name"] for r in captured_logs()
            if r["message"] == "PAYROLL_ENGINE_TRACE"
        }
        assert engines == {"earnings", "deductions", "cost_allocation"}


@pytest.mark.parametrize("month", ["2024-3x", "March"])
def test_malformed_month_raises(engine, month):
    with pytest.raises(ValueError):
        _calculate(engine, make_employee(), month=month)
