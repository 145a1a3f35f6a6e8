"""
Memory source factory.
"""

import logging

from .base import AbstractMemorySource
from .psutil_source import PsutilMemorySource
from .statm import ProcStatmSource

logger = logging.getLogger(__name__)


def create_memory_source(name: str = "auto") -> AbstractMemorySource:
    """
    Create a memory record source by name.

    Args:
        name: "statm", "psutil", or "auto" to prefer statm when /proc is mounted

    Raises:
        ValueError: If the source name is unknown
    """
    if name == "statm":
        return ProcStatmSource()
    elif name == "psutil":
        return PsutilMemorySource()
    elif name == "auto":
        statm = ProcStatmSource()
        if statm.is_available():
            logger.debug("Using /proc statm memory source")
            return statm
        logger.debug("/proc not available, using psutil memory source")
        return PsutilMemorySource()
    else:
        raise ValueError(f"Unknown memory source: {name}")
