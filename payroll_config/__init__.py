"""
payroll_config -- YAML-backed configuration for the payroll engine.

Responsibility:
    Turns one configuration-set file into the explicit values the engine
    takes on every call: ``PayrollEngineConfig``, the ``TaxConfiguration``
    and the ``StatutoryConfiguration`` rules.  The engine itself never
    reads files; callers load a set here and pass its parts in.

Audit relevance:
    Every load emits a ``PAYROLL_CONFIG_TRACE`` log record carrying the
    set's SHA-256 checksum, so each payroll run can be tied back to the
    exact configuration that governed it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from payroll_config.loader import (
    compute_checksum,
    load_yaml_file,
    parse_engine_config,
    parse_statutory_configuration,
    parse_tax_configuration,
)
from payroll_kernel.domain.rules import (
    PayrollEngineConfig,
    StatutoryConfiguration,
    TaxConfiguration,
)

_logger = logging.getLogger("payroll_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


@dataclass(frozen=True)
class PayrollConfigSet:
    """Everything the engine needs from configuration, plus its checksum."""

    engine: PayrollEngineConfig
    tax: TaxConfiguration | None
    statutory: tuple[StatutoryConfiguration, ...]
    checksum: str
    source: str


def load_config_set(path: Path | None = None) -> PayrollConfigSet:
    """
    Load a configuration set (default: the bundled ``sets/default.yaml``).

    Raises:
        FileNotFoundError: the file does not exist.
        yaml.YAMLError: the file is not valid YAML.
        KeyError / ValueError: a required key is missing or malformed.
    """
    path = path or DEFAULT_CONFIG_PATH
    data = load_yaml_file(path)

    tax_section = data.get("tax")
    config_set = PayrollConfigSet(
        engine=parse_engine_config(data.get("engine", {})),
        tax=parse_tax_configuration(tax_section) if tax_section else None,
        statutory=tuple(
            parse_statutory_configuration(s) for s in data.get("statutory", ())
        ),
        checksum=compute_checksum(data),
        source=str(path),
    )

    _logger.info(
        "PAYROLL_CONFIG_TRACE",
        extra={
            "trace_type": "PAYROLL_CONFIG_TRACE",
            "source": config_set.source,
            "checksum": config_set.checksum,
            "tax_slab_count": len(config_set.tax.slabs) if config_set.tax else 0,
            "statutory_rule_count": len(config_set.statutory),
        },
    )
    return config_set


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "PayrollConfigSet",
    "load_config_set",
]
