"""
Memory record collection for process monitoring.

This package provides:

- An abstract interface for sources of raw page-count records
- A /proc statm source (Linux) and a psutil source (portable)
- A factory selecting a source by name
- The per-process snapshot reader converting records to megabytes
"""

from .base import AbstractMemorySource
from .factory import create_memory_source
from .psutil_source import PsutilMemorySource
from .reader import ProcessSnapshotReader
from .statm import ProcStatmSource

__all__ = [
    "AbstractMemorySource",
    "ProcStatmSource",
    "ProcessSnapshotReader",
    "PsutilMemorySource",
    "create_memory_source",
]
