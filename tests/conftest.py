"""
Pytest fixtures for the payroll engine test suite.

Provides:
- Structured logging configured for every test, plus a JSON log capture
- A deterministic clock and an engine wired to it
- Common rule tables (tax slabs, statutory rules)
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO

import pytest

from payroll_kernel.domain.clock import DeterministicClock
from payroll_kernel.domain.rules import (
    PayrollEngineConfig,
    StatutoryConfiguration,
    TaxConfiguration,
    TaxSlab,
)
from payroll_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from payroll_services import PayrollEngine


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture payroll_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, engine):
            engine.process_payroll_cycle(...)
            logs = captured_logs()
            assert any(r["message"] == "payroll_cycle_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("payroll_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Engine fixtures
# =============================================================================


@pytest.fixture
def clock():
    """Clock fixed on 2024-03-20 (after the Semi-Monthly split day)."""
    return DeterministicClock(datetime(2024, 3, 20, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def engine_config():
    return PayrollEngineConfig()


@pytest.fixture
def engine(engine_config, clock):
    return PayrollEngine(engine_config, clock)


@pytest.fixture
def two_slab_tax():
    """0-1000 at 10%, above 1000 at 20%."""
    return TaxConfiguration(
        slabs=(
            TaxSlab(min_income=Decimal("0"), max_income=Decimal("1000"), rate=Decimal("10")),
            TaxSlab(min_income=Decimal("1000"), rate=Decimal("20")),
        ),
    )


@pytest.fixture
def social_security():
    return StatutoryConfiguration(
        type="Social Security",
        employee_contribution_rate=Decimal("5"),
        max_salary_limit=Decimal("2000"),
    )
