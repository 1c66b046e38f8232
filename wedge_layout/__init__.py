"""
wedge_layout: parametric annotation layout for wedge engineering drawings.

The command line entry point is main.py.
"""

from wedge_layout.logging_config import (
    setup_logging,
    get_logger,
    configure_default_logging,
    log_timing,
    timed,
    LogContext,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "configure_default_logging",
    "log_timing",
    "timed",
    "LogContext",
]
