# backend/currency_archive/utils/__init__.py
"""
Cross-cutting utilities.

- logging: Logging configuration with correlation ID support
- context: Request context (correlation IDs) and context-preserving submits
- date_utils: Calendar helpers used by the rate services

Usage:
    from currency_archive.utils import setup_logging
    from currency_archive.utils import get_correlation_id, set_correlation_id
"""

from currency_archive.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
    submit_with_context,
)
from currency_archive.utils.logging import setup_logging

__all__ = [
    # Logging
    "setup_logging",
    # Context
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "submit_with_context",
]
