"""
Payroll Kernel

Foundation for the payroll engine:
- Immutable domain records (employees, period facts, rule tables, payslips)
- Decimal-only money rounding
- Typed exceptions with machine-readable codes
- Structured JSON logging and an injectable clock
"""

__version__ = "0.1.0"
