"""
Observability Infrastructure

Structured logging for the progress pipeline.
"""

from .logging import (
    add_context,
    clear_context,
    get_logger,
    log_error,
    setup_logging,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "add_context",
    "clear_context",
    "log_error",
]
