"""
Configuration data models.
"""

from dataclasses import dataclass
from typing import Tuple

DEFAULT_POLL_INTERVAL_MS = 1000.0
DEFAULT_MAX_WORKERS = 4
DEFAULT_SOURCE = "auto"


@dataclass(frozen=True)
class MonitorConfig:
    """
    Validated, immutable settings of one MemoryMonitor.

    Build instances through ``build_monitor_config`` or
    ``validate_monitor_config``; the dataclass itself does not validate.
    """

    # Explicitly watched process ids, deduplicated, in order of first occurrence.
    root_ids: Tuple[int, ...]
    poll_interval_ms: float = DEFAULT_POLL_INTERVAL_MS
    # Also watch direct children of every root id.
    track_descendants: bool = False
    # Upper bound on concurrent per-process reads in one tick.
    max_workers: int = DEFAULT_MAX_WORKERS
    # Memory record source: "auto", "statm" or "psutil".
    source: str = DEFAULT_SOURCE

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000.0
