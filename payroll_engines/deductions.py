"""
Module: payroll_engines.deductions
Responsibility:
    Compute the deduction side of a payslip: structural deductions,
    progressive income tax, statutory contributions, loan repayments and
    ad-hoc adjustments.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Progressive tax is non-decreasing in taxable income for a fixed
      slab table; it is accumulated at full precision and rounded once.
    - Taxable income is never negative.
    - No tax configuration => no tax items; no statutory rules => no
      statutory items.  Neither is an error.
    - Adjustment lines carry their economic sign (earnings positive,
      deductions negative); ``total_adjustments`` is expressed in the
      deduction direction so that
      net = gross - (deductions + tax + statutory + loans + adjustments).

Usage:
    tax = calculate_progressive_tax(Decimal("1500"), slabs)
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from payroll_engines.proration import ProrationInfo, prorate
from payroll_engines.salary_structure import component_items
from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.employee import ComponentKind, SalaryComponent
from payroll_kernel.domain.facts import (
    AdjustmentStatus,
    AdjustmentType,
    LoanInstallment,
    PayrollAdjustment,
)
from payroll_kernel.domain.payslip import PayslipItem, PayslipItemType
from payroll_kernel.domain.rules import StatutoryConfiguration, TaxConfiguration, TaxSlab
from payroll_kernel.domain.values import ZERO, percent_of, round_money, sum_amounts
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.deductions")


@dataclass(frozen=True)
class DeductionsResult:
    """Deduction side of a payslip, itemized and rolled up."""

    deductions: tuple[PayslipItem, ...]
    tax: tuple[PayslipItem, ...]
    statutory: tuple[PayslipItem, ...]
    loans: tuple[PayslipItem, ...]
    adjustments: tuple[PayslipItem, ...]
    taxable_income: Decimal

    @property
    def total_deductions(self) -> Decimal:
        return sum_amounts(i.amount for i in self.deductions)

    @property
    def total_tax(self) -> Decimal:
        return sum_amounts(i.amount for i in self.tax)

    @property
    def total_statutory(self) -> Decimal:
        return sum_amounts(i.amount for i in self.statutory)

    @property
    def total_loans(self) -> Decimal:
        return sum_amounts(i.amount for i in self.loans)

    @property
    def total_adjustments(self) -> Decimal:
        """Net reduction of pay from adjustments (negative when they add pay)."""
        return -sum_amounts(i.amount for i in self.adjustments)

    @property
    def total_all(self) -> Decimal:
        return (
            self.total_deductions
            + self.total_tax
            + self.total_statutory
            + self.total_loans
            + self.total_adjustments
        )


def calculate_progressive_tax(taxable_income: Decimal, slabs: Sequence[TaxSlab]) -> Decimal:
    """
    Cumulative slab tax.

    For each slab below the income, taxes the part of the income inside the
    slab at the slab rate and adds the slab's fixed amount.
    """
    total = ZERO
    for slab in sorted(slabs, key=lambda s: s.min_income):
        if taxable_income <= slab.min_income:
            continue
        upper = taxable_income
        if slab.max_income is not None:
            upper = min(taxable_income, slab.max_income)
        total += percent_of(upper - slab.min_income, slab.rate)
        if slab.fixed_amount:
            total += slab.fixed_amount
    return round_money(total)


def calculate_taxable_income(
    gross_salary: Decimal,
    allowances: Sequence[PayslipItem],
    deductions: Sequence[PayslipItem],
    tax_config: TaxConfiguration | None,
) -> Decimal:
    """
    Gross plus taxable allowances, minus tax-exempt deductions, floored at 0.
    """
    taxable = gross_salary + sum_amounts(a.amount for a in allowances if a.is_taxable)
    if tax_config is not None and tax_config.exempt_component_ids:
        taxable -= sum_amounts(
            d.amount for d in deductions
            if d.component_id in tax_config.exempt_component_ids
        )
    return max(ZERO, taxable)


def calculate_tax(
    taxable_income: Decimal,
    tax_config: TaxConfiguration | None,
) -> tuple[PayslipItem, ...]:
    if tax_config is None:
        return ()
    tax = calculate_progressive_tax(taxable_income, tax_config.slabs)
    if tax <= 0:
        return ()
    return (PayslipItem(name=tax_config.name, amount=tax, type=PayslipItemType.TAX),)


def calculate_statutory(
    gross_salary: Decimal,
    configs: Sequence[StatutoryConfiguration],
    proration: ProrationInfo,
) -> tuple[PayslipItem, ...]:
    """Employee contributions on gross, capped at each rule's salary limit."""
    items: list[PayslipItem] = []
    for config in configs:
        if not config.employee_contribution_rate:
            continue
        base = gross_salary
        if config.max_salary_limit:
            base = min(base, config.max_salary_limit)
        contribution = percent_of(base, config.employee_contribution_rate)
        items.append(
            PayslipItem(
                name=config.type,
                amount=prorate(contribution, proration),
                type=PayslipItemType.STATUTORY,
            )
        )
    return tuple(items)


def calculate_loan_deductions(
    installments: Sequence[LoanInstallment],
    employee_id: str,
    month: str,
) -> tuple[PayslipItem, ...]:
    return tuple(
        PayslipItem(
            name=i.description,
            amount=round_money(i.amount),
            type=PayslipItemType.LOAN,
        )
        for i in installments
        if i.employee_id == employee_id and i.month == month
    )


def calculate_adjustments(
    adjustments: Sequence[PayrollAdjustment],
    employee_id: str,
    month: str,
) -> tuple[PayslipItem, ...]:
    """Active adjustments for the employee and month, signed, never prorated."""
    items: list[PayslipItem] = []
    for adj in adjustments:
        if adj.status != AdjustmentStatus.ACTIVE or not adj.targets(employee_id, month):
            continue
        amount = round_money(adj.amount)
        if adj.type == AdjustmentType.DEDUCTION:
            amount = -amount
        items.append(
            PayslipItem(
                name=adj.description,
                amount=amount,
                type=adj.category,
                effective_date=adj.effective_date,
            )
        )
    return tuple(items)


class DeductionCalculator:
    """
    Deduction stage of the payroll pipeline.

    Contract:
        Pure; all inputs are keyword arguments, nothing is mutated.
    """

    @traced_engine(
        "deductions", "1.0",
        fingerprint_fields=(
            "employee_id", "month", "gross_salary", "structure", "loans",
            "adjustments",
        ),
    )
    def calculate(
        self,
        *,
        employee_id: str,
        month: str,
        monthly_basic: Decimal,
        gross_salary: Decimal,
        structure: Sequence[SalaryComponent],
        allowances: Sequence[PayslipItem],
        proration: ProrationInfo,
        tax_config: TaxConfiguration | None = None,
        statutory_configs: Sequence[StatutoryConfiguration] = (),
        loans: Sequence[LoanInstallment] = (),
        adjustments: Sequence[PayrollAdjustment] = (),
    ) -> DeductionsResult:
        t0 = time.monotonic()

        deductions = component_items(
            structure,
            ComponentKind.DEDUCTION,
            monthly_basic,
            proration,
            PayslipItemType.DEDUCTION,
        )
        taxable_income = calculate_taxable_income(
            gross_salary, allowances, deductions, tax_config,
        )
        tax = calculate_tax(taxable_income, tax_config)
        statutory = calculate_statutory(gross_salary, statutory_configs, proration)
        loan_items = calculate_loan_deductions(loans, employee_id, month)
        adjustment_items = calculate_adjustments(adjustments, employee_id, month)

        result = DeductionsResult(
            deductions=deductions,
            tax=tax,
            statutory=statutory,
            loans=loan_items,
            adjustments=adjustment_items,
            taxable_income=taxable_income,
        )

        logger.info("deductions_calculated", extra={
            "employee_id": employee_id,
            "month": month,
            "taxable_income": str(taxable_income),
            "total_tax": str(result.total_tax),
            "total_statutory": str(result.total_statutory),
            "total_all_deductions": str(result.total_all),
            "tax_configured": tax_config is not None,
            "statutory_rule_count": len(statutory_configs),
            "duration_ms": round((time.monotonic() - t0) * 1000, 2),
        })
        return result
