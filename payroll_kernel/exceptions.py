"""
Typed exception hierarchy for the payroll engine.

Every error carries a ``code`` class attribute (machine-readable, stable
across message wording changes) and keeps its context as attributes so it
survives logging and serialization.

    PayrollEngineError (base)
    |
    +-- EligibilityError
    |   +-- InactiveEmployeeError
    |
    +-- ConfigurationError
        +-- InvalidTaxSlabError
        +-- InvalidEngineConfigError

Category        | Code                    | When Raised
----------------|-------------------------|----------------------------------------
Eligibility     | INACTIVE_EMPLOYEE       | Employee not active during pay period
----------------|-------------------------|----------------------------------------
Configuration   | INVALID_TAX_SLAB        | Slabs overlap or are not ascending
                | INVALID_ENGINE_CONFIG   | Engine settings out of range

Handling pattern:

    try:
        check_eligibility(employee, period)
    except InactiveEmployeeError as e:
        errors.append(str(e))   # recorded, never aborts the cycle

Missing tax or statutory configuration is NOT an error; it means "no
applicable charge" and yields empty item lists.
"""

from datetime import date


class PayrollEngineError(Exception):
    """
    Base exception for all payroll engine errors.

    All subclasses must have a ``code`` class attribute.
    """

    code: str = "PAYROLL_ENGINE_ERROR"


# Eligibility


class EligibilityError(PayrollEngineError):
    """Base exception for eligibility failures."""

    code: str = "ELIGIBILITY_ERROR"


class InactiveEmployeeError(EligibilityError):
    """Employee is not active at any point of the pay period."""

    code: str = "INACTIVE_EMPLOYEE"

    def __init__(
        self,
        employee_id: str,
        period_start: date,
        period_end: date,
        reason: str,
    ):
        self.employee_id = employee_id
        self.period_start = period_start
        self.period_end = period_end
        self.reason = reason
        super().__init__(
            f"Employee {employee_id} is not active during this period "
            f"({period_start.isoformat()} to {period_end.isoformat()}): {reason}"
        )


# Configuration


class ConfigurationError(PayrollEngineError):
    """Base exception for invalid engine or rule-table configuration."""

    code: str = "CONFIGURATION_ERROR"


class InvalidTaxSlabError(ConfigurationError):
    """Tax slabs overlap, are out of order, or have an inverted range."""

    code: str = "INVALID_TAX_SLAB"

    def __init__(self, slab_index: int, detail: str):
        self.slab_index = slab_index
        self.detail = detail
        super().__init__(f"Invalid tax slab at index {slab_index}: {detail}")


class InvalidEngineConfigError(ConfigurationError):
    """A payroll engine setting is out of range."""

    code: str = "INVALID_ENGINE_CONFIG"

    def __init__(self, field_name: str, value: object, detail: str):
        self.field_name = field_name
        self.value = value
        self.detail = detail
        super().__init__(f"Invalid engine config {field_name}={value!r}: {detail}")
