"""
payroll_engines.tracer -- ``@traced_engine`` decorator for calculation stages.

Each call of a decorated stage emits one ``PAYROLL_ENGINE_TRACE`` record:

    engine_name, engine_version  which stage, which rule version
    input_fingerprint            SHA-256 (16 hex chars) of selected kwargs
    duration_ms                  wall time of the call
    function                     qualified name of the wrapped callable

Two runs over the same employee data produce the same fingerprints, which
is how a recomputed payslip is matched to the run that first produced it.

Invariants enforced:
    - Canonical form is order-independent for mappings and stable for
      Decimal, date, Enum and dataclass values.
    - The decorator reads kwargs only; it never alters them or the result.
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import time
from collections.abc import Callable, Mapping
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from payroll_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")

TRACE_TYPE = "PAYROLL_ENGINE_TRACE"


def _canonicalize(value: Any) -> str:
    match value:
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case Enum():
            return _canonicalize(value.value)
        case str():
            return value
        case int() | float() | Decimal():
            return str(value)
        case date():
            return value.isoformat()
        case Mapping():
            items = sorted((str(k), _canonicalize(v)) for k, v in value.items())
            return "{" + ",".join(f"{k}:{v}" for k, v in items) + "}"
        case list() | tuple() | frozenset() | set():
            parts = [_canonicalize(v) for v in value]
            if isinstance(value, (set, frozenset)):
                parts.sort()
            return "[" + ",".join(parts) + "]"
        case _ if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return type(value).__name__ + _canonicalize({
                f.name: getattr(value, f.name) for f in dataclasses.fields(value)
            })
        case _:
            return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    kwargs: Mapping[str, Any],
) -> str:
    """Deterministic 16-hex-char digest of ``kwargs`` restricted to the fields.

    A missing field hashes the same as an explicit None.
    """
    canonical = "|".join(
        f"{name}={_canonicalize(kwargs.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Wrap a stage entrypoint so every call emits PAYROLL_ENGINE_TRACE.

    Args:
        engine_name: Stage identifier (e.g. "deductions").
        engine_version: Version of the stage's rules (e.g. "1.0").
        fingerprint_fields: Keyword arguments hashed into the fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = (
                compute_input_fingerprint(fingerprint_fields, kwargs)
                if fingerprint_fields else ""
            )
            started = time.monotonic()
            result = func(*args, **kwargs)
            _logger.info(TRACE_TYPE, extra={
                "trace_type": TRACE_TYPE,
                "engine_name": engine_name,
                "engine_version": engine_version,
                "input_fingerprint": fingerprint,
                "duration_ms": round((time.monotonic() - started) * 1000, 2),
                "function": func.__qualname__,
            })
            return result

        return wrapper

    return decorator
