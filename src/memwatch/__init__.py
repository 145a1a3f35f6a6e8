"""
memwatch: process memory telemetry poller.

This package samples the memory accounting of a set of processes, and
optionally their direct children, at a fixed interval and pushes every
snapshot to subscribers.

The package is organized into specialized modules:
- config: Configuration building, TOML loading and validation
- models: Memory samples and configuration data structures
- validation: Input validation and the exception hierarchy
- system: Page size resolution and child process discovery
- collectors: Memory record sources and the per-process reader
- monitoring: The polling engine, aggregation and subscriptions
- cli: Command-line interface

Usage:
    From command line:
        memwatch --pid 1234 --children

    Programmatically:
        from memwatch import MemoryMonitor, merge_samples
        with MemoryMonitor(root_id=1234, poll_interval_ms=500) as monitor:
            monitor.subscribe(lambda snapshot: print(merge_samples(snapshot)))
            ...
"""

from .config import build_monitor_config, load_monitor_config
from .models import MemorySample, MonitorConfig, RawMemoryRecord, SnapshotMap
from .monitoring import MemoryMonitor, MonitorState, Subscription, merge_samples
from .validation import (
    DiscoveryError,
    EmptyAggregateInputError,
    InvalidArgumentError,
    MonitorError,
    PageSizeUnavailableError,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    # Engine
    "MemoryMonitor",
    "MonitorState",
    "Subscription",
    "merge_samples",
    # Configuration
    "MonitorConfig",
    "build_monitor_config",
    "load_monitor_config",
    # Models
    "MemorySample",
    "RawMemoryRecord",
    "SnapshotMap",
    # Errors
    "DiscoveryError",
    "EmptyAggregateInputError",
    "InvalidArgumentError",
    "MonitorError",
    "PageSizeUnavailableError",
    "ValidationError",
]
