"""
Ledger Kernel - shared foundation for the workshop ledger engines.

Provides:
- Immutable domain records supplied by the workshop API
- Derived value objects (date ranges, salary cycles)
- Typed exceptions with machine-readable codes
- Structured JSON logging
"""

__version__ = "0.1.0"
