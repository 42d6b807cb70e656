"""
Payroll services: payslip assembly, per-employee calculation, cycle
processing, and the ``PayrollEngine`` facade.
"""

from payroll_services._payroll_types import PayrollCalculationResult, PayrollCycleResult
from payroll_services.assembler import PayslipAssembler
from payroll_services.calculation import EmployeePayrollCalculator
from payroll_services.cycle_processor import CycleProcessor
from payroll_services.engine import PayrollEngine

__all__ = [
    "CycleProcessor",
    "EmployeePayrollCalculator",
    "PayrollCalculationResult",
    "PayrollCycleResult",
    "PayrollEngine",
    "PayslipAssembler",
]
