"""Shared telemetry: logging setup and request-scoped log context."""

from app.shared.telemetry.logging import (
    RequestIdFilter,
    get_logger,
    request_id_var,
    setup_logging,
)

__all__ = [
    "RequestIdFilter",
    "get_logger",
    "request_id_var",
    "setup_logging",
]
