"""
ledger_config -- single public entrypoint for ledger settings.

Responsibility:
    Provides the ONLY way to obtain settings at runtime through
    ``get_active_config()``.  Engines never read files or environment
    variables; they receive a ``LedgerSettings`` (or fall back to
    ``DEFAULT_SETTINGS``).

Architecture position:
    Configuration -- YAML-driven, validated at load time.
    Sits above ``ledger_kernel`` and below ``ledger_engines``.  The kernel
    MUST NEVER import from ``ledger_config``.

Failure modes:
    - ``FileNotFoundError`` -- settings file does not exist.
    - ``ConfigValidationError`` -- wrong shape or out-of-range values.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``LEDGER_CONFIG_TRACE`` log entry with the source path and checksum,
    tying every derived figure to the settings that produced it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ledger_config.loader import ConfigValidationError, load_settings
from ledger_config.schema import DEFAULT_SETTINGS, LedgerSettings

_logger = logging.getLogger("ledger_kernel.config")

# Default settings file
DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(path: Path | None = None) -> LedgerSettings:
    """The ONLY public configuration entrypoint.

    Args:
        path: Override path to a settings YAML file.
            Defaults to ledger_config/sets/default.yaml.

    Returns:
        Validated, frozen ``LedgerSettings``.

    Raises:
        FileNotFoundError: If the settings file does not exist.
        ConfigValidationError: If validation fails.
    """
    source = path or DEFAULT_CONFIG_PATH
    settings = load_settings(source)

    _logger.info(
        "LEDGER_CONFIG_TRACE",
        extra={
            "trace_type": "LEDGER_CONFIG_TRACE",
            "config_path": str(source),
            "checksum": settings.checksum,
            "currency_code": settings.currency_code,
            "allow_overpayment": settings.allow_overpayment,
        },
    )
    return settings


__all__ = [
    "ConfigValidationError",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_SETTINGS",
    "LedgerSettings",
    "get_active_config",
]
