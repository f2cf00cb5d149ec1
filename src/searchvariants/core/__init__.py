"""Core module exports."""

from searchvariants.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    SearchVariantsError,
    VariantError,
)
from searchvariants.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "SearchVariantsError",
    "VariantError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
