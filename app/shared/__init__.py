"""Shared utilities: telemetry and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.telemetry import get_logger, setup_logging
from app.shared.utils import (
    ensure_utc,
    generate_cuid,
    require_utc,
    utc_now,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "require_utc",
]
