"""
System page size resolution.
"""

import logging
import os

from ..validation import ErrorSeverity, PageSizeUnavailableError, handle_error
from .commands import run_command

logger = logging.getLogger(__name__)

# Used whenever the OS cannot report its page size.
DEFAULT_PAGE_SIZE = 4096


class PageSizeProvider:
    """
    Resolves the OS memory page size in bytes.

    ``os.sysconf`` is tried first, then ``getconf PAGE_SIZE``. When both fail
    ``DEFAULT_PAGE_SIZE`` is returned; ``resolve`` never raises.
    """

    def __init__(self, default: int = DEFAULT_PAGE_SIZE):
        self.default = default

    def resolve(self) -> int:
        try:
            page_size = self.query()
        except PageSizeUnavailableError as e:
            handle_error(
                error=e,
                context=f"resolving page size, using default {self.default}",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )
            return self.default
        logger.debug(f"Resolved page size: {page_size} bytes")
        return page_size

    def query(self) -> int:
        """
        Ask the OS for its page size.

        Raises:
            PageSizeUnavailableError: If no method reports a positive value
        """
        try:
            page_size = os.sysconf("SC_PAGE_SIZE")
            if page_size > 0:
                return page_size
        except (AttributeError, ValueError, OSError) as e:
            # sysconf is missing on Windows and SC_PAGE_SIZE on some platforms
            logger.debug(f"os.sysconf page size unavailable: {e}")

        return_code, stdout, stderr = run_command(["getconf", "PAGE_SIZE"])
        if return_code == 0:
            try:
                page_size = int(stdout.strip())
            except ValueError:
                page_size = 0
            if page_size > 0:
                return page_size

        raise PageSizeUnavailableError(
            f"page size could not be determined (getconf: {stderr.strip() or stdout.strip()!r})"
        )
