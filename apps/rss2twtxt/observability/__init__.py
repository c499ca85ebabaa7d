"""Observability module for request monitoring.

This module provides:
- Structured logging with request context
- Root logger configuration (text or JSON)
"""

from .logger import (
    StructuredFormatter,
    StructuredLogger,
    clear_context,
    configure_logging,
    get_logger,
    set_context,
)

__all__ = [
    "StructuredFormatter",
    "StructuredLogger",
    "clear_context",
    "configure_logging",
    "get_logger",
    "set_context",
]
