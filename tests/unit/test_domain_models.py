"""
Tests for domain records and rule tables.

Covers:
- Employee and component construction guards
- Tax slab table validation
- Overtime rule and engine settings ranges
- Bonus and adjustment targeting
- Deterministic clock
- Exception codes
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from payroll_kernel.domain.clock import DeterministicClock, SystemClock
from payroll_kernel.domain.facts import BonusStatus, CommissionRecord
from payroll_kernel.domain.payslip import PayrollCostAllocation
from payroll_kernel.domain.rules import (
    OvertimeRule,
    PayrollEngineConfig,
    TaxConfiguration,
    TaxSlab,
)
from payroll_kernel.exceptions import (
    ConfigurationError,
    EligibilityError,
    InactiveEmployeeError,
    InvalidEngineConfigError,
    InvalidTaxSlabError,
    PayrollEngineError,
)
from tests.factories import fixed_component, make_adjustment, make_bonus, make_employee


class TestEmployee:

    def test_negative_basic_rejected(self):
        with pytest.raises(ValueError, match="basic_salary"):
            make_employee(basic_salary="-1")

    def test_zero_basic_allowed(self):
        assert make_employee(basic_salary="0").basic_salary == Decimal("0")

    def test_component_display_name(self):
        assert fixed_component("HRA", "10").display_name == "Component HRA"


class TestTaxConfiguration:

    def _slab(self, low, high=None, rate="10"):
        return TaxSlab(
            min_income=Decimal(low),
            max_income=Decimal(high) if high is not None else None,
            rate=Decimal(rate),
        )

    def test_valid_table(self):
        config = TaxConfiguration(slabs=(self._slab("0", "1000"), self._slab("1000")))
        assert config.name == "Income Tax"
        assert config.exempt_component_ids == frozenset()

    def test_inverted_range(self):
        with pytest.raises(InvalidTaxSlabError) as exc_info:
            TaxConfiguration(slabs=(self._slab("1000", "500"),))
        assert exc_info.value.slab_index == 0

    def test_not_ascending(self):
        with pytest.raises(InvalidTaxSlabError, match="ascend"):
            TaxConfiguration(slabs=(self._slab("1000", "2000"), self._slab("0", "1000")))

    def test_overlap(self):
        with pytest.raises(InvalidTaxSlabError, match="overlaps"):
            TaxConfiguration(slabs=(self._slab("0", "1000"), self._slab("900")))

    def test_slab_after_unbounded(self):
        with pytest.raises(InvalidTaxSlabError, match="unbounded"):
            TaxConfiguration(slabs=(self._slab("0"), self._slab("1000")))

    def test_gap_between_slabs_allowed(self):
        TaxConfiguration(slabs=(self._slab("0", "1000"), self._slab("1500")))

    def test_negative_rate(self):
        with pytest.raises(ValueError):
            self._slab("0", rate="-1")


class TestEngineSettings:

    def test_defaults(self):
        config = PayrollEngineConfig()
        assert config.working_days_per_month == 26
        assert config.enable_proration
        assert config.enable_multi_project
        assert config.overtime_rule is None

    @pytest.mark.parametrize("field, value", [
        ("working_days_per_month", 0),
        ("working_days_per_month", 32),
        ("semi_monthly_split_day", 29),
    ])
    def test_out_of_range(self, field, value):
        with pytest.raises(InvalidEngineConfigError) as exc_info:
            PayrollEngineConfig(**{field: value})
        assert exc_info.value.field_name == field

    def test_overtime_rule_must_be_positive(self):
        with pytest.raises(InvalidEngineConfigError):
            OvertimeRule(multiplier=Decimal("0"))
        with pytest.raises(InvalidEngineConfigError):
            OvertimeRule(standard_hours_per_day=Decimal("-8"))


class TestFactTargeting:

    def test_bonus_applies_only_when_approved(self):
        assert make_bonus().applies_to("emp-1", "2024-03")
        assert not make_bonus(status=BonusStatus.PAID).applies_to("emp-1", "2024-03")

    def test_bonus_month_filter(self):
        bonus = make_bonus(payroll_month="2024-03")
        assert bonus.applies_to("emp-1", "2024-03")
        assert not bonus.applies_to("emp-1", "2024-04")
        assert not bonus.applies_to("emp-2", "2024-03")

    def test_adjustment_targets_ignores_status(self):
        adjustment = make_adjustment(payroll_month="2024-03")
        assert adjustment.targets("emp-1", "2024-03")
        assert not adjustment.targets("emp-1", "2024-02")

    def test_commission_needs_amount_or_sales_and_rate(self):
        with pytest.raises(ValueError, match="sales_amount and rate"):
            CommissionRecord(employee_id="emp-1", month="2024-03")
        with pytest.raises(ValueError):
            CommissionRecord(employee_id="emp-1", month="2024-03", sales_amount=Decimal("100"))

    def test_commission_accepts_either_form(self):
        assert CommissionRecord(employee_id="emp-1", month="2024-03", amount=Decimal("5")).amount
        rated = CommissionRecord(
            employee_id="emp-1", month="2024-03",
            sales_amount=Decimal("1000"), rate=Decimal("2"),
        )
        assert rated.amount is None


class TestCostAllocationRow:

    def test_amount_is_net(self):
        row = PayrollCostAllocation(
            project_id="P-1",
            factor=Decimal("0.5"),
            basic_salary=Decimal("500"),
            allowances=Decimal("0"),
            bonuses=Decimal("0"),
            deductions=Decimal("100"),
            net_amount=Decimal("400"),
        )
        assert row.amount == Decimal("400")


class TestClock:

    def test_deterministic_clock(self):
        fixed = datetime(2024, 3, 31, 23, 0, tzinfo=timezone.utc)
        clock = DeterministicClock(fixed)
        assert clock.now() == clock.now() == fixed
        assert clock.today() == date(2024, 3, 31)

        clock.advance(3600)
        assert clock.now() == fixed + timedelta(hours=1)
        assert clock.today() == date(2024, 4, 1)

        clock.set_time(fixed)
        assert clock.now() == fixed

    def test_advance_by_days(self):
        clock = DeterministicClock(datetime(2024, 3, 14, tzinfo=timezone.utc))
        clock.advance(0, days=2)
        assert clock.today() == date(2024, 3, 16)

    def test_naive_instant_rejected(self):
        with pytest.raises(ValueError):
            DeterministicClock(datetime(2024, 3, 1))

    def test_system_clock_is_utc(self):
        assert SystemClock().now().tzinfo is not None


class TestExceptions:

    def test_hierarchy_and_codes(self):
        error = InactiveEmployeeError("E-1", date(2024, 3, 1), date(2024, 3, 31), "status is Suspended")
        assert isinstance(error, EligibilityError)
        assert isinstance(error, PayrollEngineError)
        assert error.code == "INACTIVE_EMPLOYEE"

        slab_error = InvalidTaxSlabError(2, "overlaps the previous slab")
        assert isinstance(slab_error, ConfigurationError)
        assert slab_error.code == "INVALID_TAX_SLAB"
        assert "index 2" in str(slab_error)

    def test_base_code(self):
        assert PayrollEngineError.code == "PAYROLL_ENGINE_ERROR"
