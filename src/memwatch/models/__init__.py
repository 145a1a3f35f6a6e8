"""
Data models for the memwatch package.

Sample models:
- Raw page-count records read from the OS
- Per-process memory samples in megabytes
- Snapshot maps keyed by process id

Configuration models:
- Immutable monitor settings and their defaults
"""

from .config import (
    DEFAULT_MAX_WORKERS,
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_SOURCE,
    MonitorConfig,
)
from .samples import (
    BYTES_PER_MB,
    MEMORY_FIELDS,
    MemorySample,
    RawMemoryRecord,
    SnapshotMap,
)

__all__ = [
    # Configuration
    "DEFAULT_MAX_WORKERS",
    "DEFAULT_POLL_INTERVAL_MS",
    "DEFAULT_SOURCE",
    "MonitorConfig",
    # Samples
    "BYTES_PER_MB",
    "MEMORY_FIELDS",
    "MemorySample",
    "RawMemoryRecord",
    "SnapshotMap",
]
