"""Core module exports."""

from taloutline.core.errors import (
    ConfigError,
    DocumentError,
    ErrorCode,
    InternalError,
    TalOutlineError,
)
from taloutline.core.logging import (
    clear_scan_id,
    configure_default_logging,
    configure_logging,
    get_logger,
    get_scan_id,
    set_scan_id,
)
from taloutline.core.progress import pluralize, spinner, status

__all__ = [
    # Errors
    "ConfigError",
    "DocumentError",
    "ErrorCode",
    "InternalError",
    "TalOutlineError",
    # Logging
    "clear_scan_id",
    "configure_default_logging",
    "configure_logging",
    "get_logger",
    "get_scan_id",
    "set_scan_id",
    # Progress
    "pluralize",
    "spinner",
    "status",
]
