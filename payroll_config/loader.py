"""
Configuration Loader (``payroll_config.loader``).

Responsibility
--------------
Loads YAML configuration files and parses them into the frozen rule and
settings dataclasses of ``payroll_kernel.domain.rules``: the engine
settings, the progressive tax table and the statutory contribution rules.

Invariants enforced
-------------------
* All parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; no silent defaults for required fields.
* Money and rates are parsed to ``Decimal`` through ``str`` so YAML floats
  never leak binary rounding into payroll arithmetic.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys in parsed dict  -> ``KeyError`` propagates.
* Quoted or non-boolean engine flags  -> ``ValueError``.
* Invalid slab layout  -> ``InvalidTaxSlabError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from payroll_kernel.domain.rules import (
    OvertimeRule,
    PayrollEngineConfig,
    StatutoryConfiguration,
    TaxConfiguration,
    TaxSlab,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_decimal(value: Any) -> Decimal:
    """
    Parse a Decimal from a YAML scalar.

    Raises:
        ValueError: for booleans, None, or non-numeric text.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Cannot parse decimal from {value!r}")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Cannot parse decimal from {value!r}") from exc


def parse_bool(value: Any) -> bool:
    """
    Parse a YAML boolean.

    Raises:
        ValueError: for anything but an unquoted ``true``/``false``.
    """
    if not isinstance(value, bool):
        raise ValueError(f"Expected a boolean, got {value!r}")
    return value


def _optional_decimal(data: dict[str, Any], key: str) -> Decimal | None:
    value = data.get(key)
    return None if value is None else parse_decimal(value)


def parse_overtime_rule(data: dict[str, Any]) -> OvertimeRule:
    return OvertimeRule(
        multiplier=parse_decimal(data.get("multiplier", "1.5")),
        standard_hours_per_day=parse_decimal(data.get("standard_hours_per_day", "8")),
    )


def parse_engine_config(data: dict[str, Any]) -> PayrollEngineConfig:
    """Parse engine settings; every key is optional."""
    overtime = data.get("overtime")
    return PayrollEngineConfig(
        country_code=data.get("country_code"),
        state_code=data.get("state_code"),
        working_days_per_month=int(data.get("working_days_per_month", 26)),
        enable_proration=parse_bool(data.get("enable_proration", True)),
        enable_multi_project=parse_bool(data.get("enable_multi_project", True)),
        semi_monthly_split_day=int(data.get("semi_monthly_split_day", 15)),
        overtime_rule=parse_overtime_rule(overtime) if overtime else None,
    )


def parse_tax_slab(data: dict[str, Any]) -> TaxSlab:
    return TaxSlab(
        min_income=parse_decimal(data["min_income"]),
        rate=parse_decimal(data["rate"]),
        max_income=_optional_decimal(data, "max_income"),
        fixed_amount=_optional_decimal(data, "fixed_amount"),
    )


def parse_tax_configuration(data: dict[str, Any]) -> TaxConfiguration:
    """
    Parse a progressive tax table.

    Raises:
        KeyError: if ``slabs`` or a slab's ``min_income`` / ``rate`` is missing.
        InvalidTaxSlabError: if slabs overlap or are not ascending.
    """
    return TaxConfiguration(
        slabs=tuple(parse_tax_slab(s) for s in data["slabs"]),
        exempt_component_ids=frozenset(data.get("exempt_component_ids", ())),
        name=data.get("name", "Income Tax"),
    )


def parse_statutory_configuration(data: dict[str, Any]) -> StatutoryConfiguration:
    return StatutoryConfiguration(
        type=data["type"],
        employee_contribution_rate=parse_decimal(data["employee_contribution_rate"]),
        employer_contribution_rate=_optional_decimal(data, "employer_contribution_rate"),
        max_salary_limit=_optional_decimal(data, "max_salary_limit"),
    )


def load_engine_config(path: Path) -> PayrollEngineConfig:
    return parse_engine_config(load_yaml_file(path).get("engine", {}))


def load_tax_configuration(path: Path) -> TaxConfiguration | None:
    """Tax table from the ``tax`` section; None when the file has none."""
    section = load_yaml_file(path).get("tax")
    return parse_tax_configuration(section) if section else None


def load_statutory_configurations(path: Path) -> tuple[StatutoryConfiguration, ...]:
    return tuple(
        parse_statutory_configuration(s)
        for s in load_yaml_file(path).get("statutory", ())
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
