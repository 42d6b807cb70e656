"""
Rule tables and engine settings (``payroll_kernel.domain.rules``).

Tax slabs, statutory contribution rules, the overtime rule and the engine
configuration.  Rule tables come from the external configuration store
(see ``payroll_config``); the engine evaluates them generically.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from payroll_kernel.exceptions import InvalidEngineConfigError, InvalidTaxSlabError
from payroll_kernel.logging_config import get_logger

logger = get_logger("domain.rules")


@dataclass(frozen=True)
class TaxSlab:
    """One bracket of a progressive tax table; ``rate`` is a percentage."""

    min_income: Decimal
    rate: Decimal
    max_income: Decimal | None = None  # None = unbounded
    fixed_amount: Decimal | None = None

    def __post_init__(self) -> None:
        if self.rate < 0:
            raise ValueError("Tax slab rate cannot be negative")


@dataclass(frozen=True)
class TaxConfiguration:
    """
    Progressive tax table.

    Guarantees:
        - ``slabs`` are ascending by ``min_income`` and non-overlapping.
        - ``exempt_component_ids`` names deduction components that reduce
          taxable income.
    """

    slabs: tuple[TaxSlab, ...]
    exempt_component_ids: frozenset[str] = field(default_factory=frozenset)
    name: str = "Income Tax"

    def __post_init__(self) -> None:
        previous: TaxSlab | None = None
        for index, slab in enumerate(self.slabs):
            if slab.max_income is not None and slab.max_income <= slab.min_income:
                raise InvalidTaxSlabError(index, "max_income must exceed min_income")
            if previous is not None:
                if slab.min_income <= previous.min_income:
                    raise InvalidTaxSlabError(index, "slabs must ascend by min_income")
                if previous.max_income is None:
                    raise InvalidTaxSlabError(index, "follows an unbounded slab")
                if slab.min_income < previous.max_income:
                    raise InvalidTaxSlabError(index, "overlaps the previous slab")
            previous = slab


@dataclass(frozen=True)
class StatutoryConfiguration:
    """A rate-based statutory contribution (e.g. social insurance)."""

    type: str
    employee_contribution_rate: Decimal
    employer_contribution_rate: Decimal | None = None
    max_salary_limit: Decimal | None = None


@dataclass(frozen=True)
class OvertimeRule:
    """Overtime pay: hourly basic rate × ``multiplier`` per overtime hour."""

    multiplier: Decimal = Decimal("1.5")
    standard_hours_per_day: Decimal = Decimal("8")

    def __post_init__(self) -> None:
        if self.multiplier <= 0:
            raise InvalidEngineConfigError("multiplier", self.multiplier, "must be positive")
        if self.standard_hours_per_day <= 0:
            raise InvalidEngineConfigError(
                "standard_hours_per_day", self.standard_hours_per_day, "must be positive",
            )


@dataclass(frozen=True)
class PayrollEngineConfig:
    """
    Engine settings, passed explicitly into every call.

        config = PayrollEngineConfig(
            working_days_per_month=22,
            enable_multi_project=False,
        )
    """

    country_code: str | None = None
    state_code: str | None = None
    working_days_per_month: int = 26
    enable_proration: bool = True
    enable_multi_project: bool = True
    semi_monthly_split_day: int = 15
    overtime_rule: OvertimeRule | None = None

    def __post_init__(self) -> None:
        if not 1 <= self.working_days_per_month <= 31:
            raise InvalidEngineConfigError(
                "working_days_per_month", self.working_days_per_month, "must be 1..31",
            )
        if not 1 <= self.semi_monthly_split_day <= 28:
            raise InvalidEngineConfigError(
                "semi_monthly_split_day", self.semi_monthly_split_day, "must be 1..28",
            )
        logger.debug(
            "payroll_engine_config_initialized",
            extra={
                "working_days_per_month": self.working_days_per_month,
                "enable_proration": self.enable_proration,
                "enable_multi_project": self.enable_multi_project,
                "overtime_enabled": self.overtime_rule is not None,
            },
        )
