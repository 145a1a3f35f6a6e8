"""
Validation and error handling for the memwatch package.

This module provides input validation and the exception hierarchy used
across the application.
"""

from .exceptions import (
    DiscoveryError,
    EmptyAggregateInputError,
    ErrorSeverity,
    InvalidArgumentError,
    MonitorError,
    PageSizeUnavailableError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
)
from .validators import (
    PID_COLLECTION_TYPES,
    is_pid_scalar,
    normalize_pid,
    normalize_pid_collection,
    validate_bool,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    # Exceptions
    "DiscoveryError",
    "EmptyAggregateInputError",
    "ErrorSeverity",
    "InvalidArgumentError",
    "MonitorError",
    "PageSizeUnavailableError",
    "ValidationError",
    # Error handling
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    # Validators
    "PID_COLLECTION_TYPES",
    "is_pid_scalar",
    "normalize_pid",
    "normalize_pid_collection",
    "validate_bool",
    "validate_enum_choice",
    "validate_positive_float",
    "validate_positive_integer",
]
