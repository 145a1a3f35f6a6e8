"""
Subscriber fan-out for snapshot maps.
"""

import logging
import threading
from typing import Callable, List

from ..models.samples import SnapshotMap
from ..validation import ErrorSeverity, handle_error

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[SnapshotMap], None]


class Subscription:
    """Handle returned by ``subscribe``; ``cancel`` stops further deliveries."""

    def __init__(self, registry: "SubscriberRegistry", callback: SnapshotCallback):
        self._registry = registry
        self.callback = callback
        self.active = True

    def cancel(self) -> None:
        self._registry.unsubscribe(self)

    def __repr__(self) -> str:
        return f"Subscription(callback={self.callback!r}, active={self.active})"


class SubscriberRegistry:
    """
    Thread-safe list of snapshot subscribers.

    Every subscriber receives the full snapshot map once per emission. A
    subscriber that raises is logged and does not affect the others.
    """

    def __init__(self):
        self._subscriptions: List[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: SnapshotCallback) -> Subscription:
        if not callable(callback):
            raise TypeError(f"Subscriber must be callable, got {type(callback).__name__}")
        subscription = Subscription(self, callback)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            subscription.active = False
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def clear(self) -> None:
        """Detach every subscriber."""
        with self._lock:
            for subscription in self._subscriptions:
                subscription.active = False
            self._subscriptions.clear()

    def emit(self, snapshot: SnapshotMap) -> int:
        """
        Deliver a snapshot to all active subscribers.

        Returns:
            Number of subscribers the snapshot was delivered to
        """
        with self._lock:
            subscriptions = list(self._subscriptions)

        delivered = 0
        for subscription in subscriptions:
            # A subscriber earlier in this round may have cancelled it.
            if not subscription.active:
                continue
            try:
                subscription.callback(snapshot)
                delivered += 1
            except Exception as e:
                handle_error(
                    error=e,
                    context=f"snapshot subscriber {subscription.callback!r}",
                    severity=ErrorSeverity.WARNING,
                    reraise=False,
                    logger=logger,
                )
        return delivered

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)
