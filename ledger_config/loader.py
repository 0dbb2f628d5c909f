"""
Settings Loader (``ledger_config.loader``).

Responsibility
--------------
Loads a YAML settings file and parses it into a frozen
``ledger_config.schema.LedgerSettings``.  Callers should go through
``ledger_config.get_active_config()``; the functions here are exposed for
tests and tooling.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Missing sections or keys fall back to the schema defaults; unknown keys
  are rejected so typos never pass silently.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  canonical settings content.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Wrong shape or out-of-range values -> ``ConfigValidationError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from ledger_config.schema import LedgerSettings

# section -> {yaml key: settings field}
_LAYOUT: dict[str, dict[str, str]] = {
    "ledger": {
        "currency_code": "currency_code",
        "currency_suffix": "currency_suffix",
    },
    "stock": {"low_stock_ratio": "low_stock_ratio"},
    "payments": {"allow_overpayment": "allow_overpayment"},
    "reporting": {"top_n": "top_n"},
}


class ConfigValidationError(ValueError):
    """Settings file has the wrong shape or out-of-range values."""

    code: str = "CONFIG_VALIDATION_ERROR"

    def __init__(self, source: str, errors: list[str]):
        self.source = source
        self.errors = errors
        super().__init__(
            f"Settings validation failed for {source}:\n"
            + "\n".join(f"  - {e}" for e in errors)
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


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _parse_decimal(value: Any) -> Decimal:
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"not a number: {value!r}") from e


def validate_settings(settings: LedgerSettings) -> list[str]:
    """Return a list of human-readable problems (empty when valid)."""
    errors: list[str] = []
    if not settings.currency_code or len(settings.currency_code) != 3:
        errors.append(f"ledger.currency_code must be a 3-letter code, got {settings.currency_code!r}")
    if not settings.currency_suffix.strip():
        errors.append("ledger.currency_suffix must not be empty")
    if settings.low_stock_ratio < 1:
        errors.append(f"stock.low_stock_ratio must be >= 1, got {settings.low_stock_ratio}")
    if settings.top_n < 1:
        errors.append(f"reporting.top_n must be >= 1, got {settings.top_n}")
    return errors


def parse_settings(data: dict[str, Any], source: str = "<memory>") -> LedgerSettings:
    """
    Parse ``LedgerSettings`` from a loaded YAML mapping.

    Preconditions:
        - ``data`` maps section names to mappings of keys.
    Postconditions:
        - Returns validated settings whose ``checksum`` identifies ``data``.
    Raises:
        ConfigValidationError: on unknown sections/keys, wrong types or
            out-of-range values.
    """
    errors: list[str] = []
    values: dict[str, Any] = {}

    for section, body in data.items():
        layout = _LAYOUT.get(section)
        if layout is None:
            errors.append(f"unknown section {section!r}")
            continue
        if not isinstance(body, dict):
            errors.append(f"section {section!r} must be a mapping")
            continue
        for key, raw in body.items():
            field_name = layout.get(key)
            if field_name is None:
                errors.append(f"unknown key {section}.{key}")
                continue
            values[field_name] = raw

    try:
        if "low_stock_ratio" in values:
            values["low_stock_ratio"] = _parse_decimal(values["low_stock_ratio"])
        if "top_n" in values:
            values["top_n"] = int(values["top_n"])
        if "allow_overpayment" in values and not isinstance(values["allow_overpayment"], bool):
            errors.append("payments.allow_overpayment must be true or false")
        for name in ("currency_code", "currency_suffix"):
            if name in values:
                values[name] = str(values[name]).strip()
    except (TypeError, ValueError) as e:
        errors.append(str(e))

    if errors:
        raise ConfigValidationError(source, errors)

    settings = LedgerSettings(**values, checksum=compute_checksum(data))
    problems = validate_settings(settings)
    if problems:
        raise ConfigValidationError(source, problems)
    return settings


def load_settings(path: Path) -> LedgerSettings:
    """Load and parse one settings file."""
    return parse_settings(load_yaml_file(path), source=str(path))
