"""Observability module for storygraph.

Provides structured logging via structlog with rich console output.
"""

from storygraph.observability.logging import (
    close_file_logging,
    configure_logging,
    get_logger,
)

__all__ = [
    "close_file_logging",
    "configure_logging",
    "get_logger",
]
