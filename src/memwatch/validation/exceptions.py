"""
Exception types and error handling helpers.

Validation failures are raised to the caller; runtime failures local to one
process or one discovery pass are logged through ``handle_error`` and never
stop the monitor.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)
_module_logger = logger


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Raised when user-supplied monitor input is rejected.

    ``field_name`` names the offending argument or TOML key and ``value``
    holds what was passed.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class InvalidArgumentError(ValidationError):
    """Malformed construction or watch-set input. Fatal to the call only."""


class MonitorError(Exception):
    """Base class for runtime conditions raised by monitor components."""


class DiscoveryError(MonitorError):
    """The process table could not be enumerated."""


class PageSizeUnavailableError(MonitorError):
    """The OS page size could not be determined."""


class EmptyAggregateInputError(MonitorError, ValueError):
    """Raised when merging a snapshot map with no entries."""


# Severities whose log record carries the traceback.
_TRACEBACK_SEVERITIES = {ErrorSeverity.DEBUG, ErrorSeverity.CRITICAL}


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log ``error`` as ``Error in <context>: <error>`` and optionally re-raise it.

    Args:
        error: The exception being handled
        context: What the caller was doing, e.g. "refreshing child processes"
        severity: ErrorSeverity or its lowercase name; selects the log level
        reraise: Re-raise ``error`` after logging
        logger: Logger to write to, defaults to this module's logger
    """
    target = logger or _module_logger
    level = ErrorSeverity(severity.lower()) if isinstance(severity, str) else severity

    log_method = getattr(target, level.value)
    log_method(f"Error in {context}: {error}", exc_info=level in _TRACEBACK_SEVERITIES)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Log a CLI error and exit with ``exit_code`` (default 1)."""
    exit_code = kwargs.pop('exit_code', 1)
    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)
    sys.exit(exit_code)
