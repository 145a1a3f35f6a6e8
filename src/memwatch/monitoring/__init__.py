"""
Memory monitoring engine, aggregation and snapshot delivery.
"""

from .aggregator import merge_samples
from .engine import MemoryMonitor, MonitorState
from .scheduler import PeriodicTask
from .subscription import SubscriberRegistry, Subscription

__all__ = [
    "MemoryMonitor",
    "MonitorState",
    "PeriodicTask",
    "SubscriberRegistry",
    "Subscription",
    "merge_samples",
]
