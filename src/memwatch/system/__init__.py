"""
System interaction for the memwatch package.

This module wraps the OS collaborators of the monitor: page size
resolution, child process discovery and command execution.
"""

from .commands import run_command
from .page_size import DEFAULT_PAGE_SIZE, PageSizeProvider
from .processes import ProcessTreeDiscoverer

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "PageSizeProvider",
    "ProcessTreeDiscoverer",
    "run_command",
]
