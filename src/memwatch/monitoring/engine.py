"""
Memory monitoring engine.

This module provides the MemoryMonitor, which periodically samples the
memory of a set of processes (and optionally their direct children) and
pushes each complete snapshot map to subscribers.
"""

import itertools
import logging
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from ..collectors import ProcessSnapshotReader, create_memory_source
from ..config.validators import build_monitor_config
from ..models.config import DEFAULT_MAX_WORKERS, DEFAULT_SOURCE, MonitorConfig
from ..models.samples import MemorySample, SnapshotMap
from ..system import PageSizeProvider, ProcessTreeDiscoverer
from ..validation import (
    PID_COLLECTION_TYPES,
    DiscoveryError,
    ErrorSeverity,
    InvalidArgumentError,
    handle_error,
    is_pid_scalar,
    normalize_pid,
)
from .aggregator import merge_samples
from .scheduler import PeriodicTask
from .subscription import SnapshotCallback, SubscriberRegistry, Subscription

logger = logging.getLogger(__name__)


class MonitorState(Enum):
    """Lifecycle states of a MemoryMonitor."""
    CREATED = "created"
    INITIALIZED = "initialized"
    RUNNING = "running"
    STOPPED = "stopped"


class MemoryMonitor:
    """
    Polls per-process memory usage and publishes snapshot maps.

    Two periodic tasks share the configured interval: descendant refresh
    (only when ``track_descendants`` is set) and snapshot collection. They
    exchange state only through immutable values swapped in one assignment:

    - the explicit id tuple, replaced by ``add_watch_ids``
    - the descendant tuple, replaced by ``refresh_descendants``
    - the snapshot map, a read-only view over a dict built fresh each tick

    A tick reads all watched processes concurrently on a thread pool.
    Processes that cannot be read are omitted from that tick's map. Results of
    a tick that finishes after a newer one, or after ``stop``, are discarded.

    Usage:
        monitor = MemoryMonitor(root_id=os.getpid(), track_descendants=True)
        monitor.subscribe(lambda snapshot: print(len(snapshot)))
        monitor.initialize()
        ...
        monitor.stop()
    """

    def __init__(
        self,
        root_id: Optional[Union[int, str]] = None,
        root_ids: Optional[Iterable[Union[int, str]]] = None,
        poll_interval_ms: Optional[float] = None,
        track_descendants: bool = False,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
        source: str = DEFAULT_SOURCE,
        reader: Optional[ProcessSnapshotReader] = None,
        discoverer: Optional[ProcessTreeDiscoverer] = None,
        page_size_provider: Optional[PageSizeProvider] = None,
    ):
        """
        Validate the configuration and prepare the monitor. Nothing is
        scheduled until ``initialize`` is called.

        Args:
            root_id: A single process id to watch
            root_ids: A list, tuple or set of process ids to watch
            poll_interval_ms: Poll interval in milliseconds (default 1000)
            track_descendants: Also watch direct children of the root ids
            max_workers: Maximum concurrent reads per tick
            source: Memory record source, "auto", "statm" or "psutil"
            reader: Snapshot reader, built from ``source`` when omitted
            discoverer: Child process discoverer
            page_size_provider: Page size resolver

        Raises:
            InvalidArgumentError: If the configuration is invalid
        """
        self.config: MonitorConfig = build_monitor_config(
            root_id=root_id,
            root_ids=root_ids,
            poll_interval_ms=poll_interval_ms,
            track_descendants=track_descendants,
            max_workers=max_workers,
            source=source,
        )
        self._reader = reader or ProcessSnapshotReader(create_memory_source(self.config.source))
        self._discoverer = discoverer or ProcessTreeDiscoverer()
        self._page_size_provider = page_size_provider or PageSizeProvider()

        if self.config.track_descendants and not self._discoverer.is_supported():
            raise InvalidArgumentError(
                "track_descendants is not supported: processes cannot be enumerated",
                field_name="track_descendants",
                value=True,
            )

        self._state = MonitorState.CREATED
        # Guards state transitions and the snapshot swap + emission.
        self._lock = threading.RLock()
        self._ids_lock = threading.Lock()

        self._explicit_ids: Tuple[int, ...] = self.config.root_ids
        self._descendants: Tuple[int, ...] = ()
        self._snapshot: SnapshotMap = MappingProxyType({})
        self._page_size: Optional[int] = None

        self._tick_counter = itertools.count(1)
        self._published_tick = 0
        self._tasks: List[PeriodicTask] = []
        self._subscribers = SubscriberRegistry()
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="MemwatchReader",
        )

        logger.info(
            f"MemoryMonitor created for PIDs {list(self.config.root_ids)}, "
            f"interval {self.config.poll_interval_ms}ms, "
            f"descendants {'on' if self.config.track_descendants else 'off'}"
        )

    @classmethod
    def from_config(cls, config: MonitorConfig, **collaborators: Any) -> "MemoryMonitor":
        """Create a monitor from an existing MonitorConfig."""
        return cls(
            root_ids=list(config.root_ids),
            poll_interval_ms=config.poll_interval_ms,
            track_descendants=config.track_descendants,
            max_workers=config.max_workers,
            source=config.source,
            **collaborators,
        )

    # --- Properties ---

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is MonitorState.RUNNING

    @property
    def page_size(self) -> int:
        """Page size in bytes, resolved once and cached for the monitor's lifetime."""
        if self._page_size is None:
            self._page_size = self._page_size_provider.resolve()
        return self._page_size

    @property
    def snapshot(self) -> SnapshotMap:
        """The snapshot map published by the latest completed tick."""
        return self._snapshot

    @property
    def descendants(self) -> Tuple[int, ...]:
        """Child ids found by the latest successful discovery pass."""
        return self._descendants

    # --- Lifecycle ---

    def initialize(self) -> None:
        """
        Resolve the page size and start polling.

        With descendant tracking enabled, one discovery pass runs before the
        schedules are armed so the first snapshot already includes children.
        Calling this on a monitor that was already initialized or stopped is
        a no-op.
        """
        with self._lock:
            if self._state is not MonitorState.CREATED:
                logger.warning(f"MemoryMonitor.initialize() ignored in state {self._state.value}")
                return

            page_size = self.page_size
            if self.config.track_descendants:
                self.refresh_descendants()
            self._state = MonitorState.INITIALIZED

            interval = self.config.poll_interval_seconds
            if self.config.track_descendants:
                self._tasks.append(
                    PeriodicTask("memwatch-descendants", interval, self.refresh_descendants)
                )
            self._tasks.append(
                PeriodicTask("memwatch-snapshots", interval, self.collect_snapshot)
            )
            for task in self._tasks:
                task.start()
            self._state = MonitorState.RUNNING

        logger.info(
            f"MemoryMonitor running: page size {page_size} bytes, "
            f"{len(self._tasks)} periodic task(s)"
        )

    def stop(self, timeout: float = 5.0) -> None:
        """
        Cancel both schedules, detach all subscribers and release the read pool.

        Safe to call while a tick is in flight and from a subscriber callback.
        No snapshot is emitted after this returns. Idempotent.

        Args:
            timeout: Seconds to wait for each periodic task to exit
        """
        with self._lock:
            if self._state is MonitorState.STOPPED:
                return
            self._state = MonitorState.STOPPED
            self._subscribers.clear()
            tasks = list(self._tasks)
            self._tasks.clear()

        for task in tasks:
            task.stop(timeout=timeout)
        # In-flight reads may finish; their results are discarded.
        self._executor.shutdown(wait=False, cancel_futures=True)
        logger.info("MemoryMonitor stopped")

    def __enter__(self) -> "MemoryMonitor":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    # --- Subscriptions ---

    def subscribe(self, callback: SnapshotCallback) -> Subscription:
        """
        Register a callback receiving every emitted snapshot map.

        Returns:
            Subscription whose ``cancel`` detaches the callback
        """
        return self._subscribers.subscribe(callback)

    # --- Watch set ---

    def add_watch_ids(self, ids: Union[int, str, Iterable[Union[int, str]]]) -> List[int]:
        """
        Add one id or a collection of ids to the explicit watch list.

        Malformed entries are dropped. The additions apply from the next tick;
        a tick already in flight keeps the watch set it started with.

        Args:
            ids: A single id or a list, tuple or set of ids

        Returns:
            Ids that were not watched explicitly before

        Raises:
            InvalidArgumentError: If ids is neither a scalar id nor a collection
        """
        if is_pid_scalar(ids):
            candidates = [ids]
        elif isinstance(ids, PID_COLLECTION_TYPES):
            candidates = list(ids)
        else:
            raise InvalidArgumentError(
                f"Expected an id or a collection of ids, got {type(ids).__name__}",
                field_name="ids",
                value=ids,
            )

        added: List[int] = []
        with self._ids_lock:
            current = list(self._explicit_ids)
            for candidate in candidates:
                try:
                    pid = normalize_pid(candidate)
                except InvalidArgumentError:
                    logger.debug(f"Dropping malformed watch id {candidate!r}")
                    continue
                if pid not in current:
                    current.append(pid)
                    added.append(pid)
            self._explicit_ids = tuple(current)

        if added:
            logger.debug(f"Added watch ids {added}")
        return added

    def compute_watch_set(self) -> FrozenSet[int]:
        """Union of explicit ids and the latest discovered children."""
        return frozenset(self._explicit_ids).union(self._descendants)

    # --- Ticks ---

    def refresh_descendants(self) -> Tuple[int, ...]:
        """
        Run one discovery pass over the configured root ids.

        On failure the previous descendant list is kept.

        Returns:
            The descendant tuple in effect after the pass
        """
        if not self.config.track_descendants:
            return self._descendants
        try:
            children = self._discoverer.descendants_of_many(self.config.root_ids)
        except DiscoveryError as e:
            handle_error(
                error=e,
                context="refreshing child processes, keeping previous list",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )
            return self._descendants

        descendants = tuple(children)
        if descendants != self._descendants:
            logger.debug(f"Child processes changed: {list(self._descendants)} -> {list(descendants)}")
        self._descendants = descendants
        return descendants

    def collect_snapshot(self) -> SnapshotMap:
        """
        Run one snapshot-collection tick and emit the result.

        The snapshot map is emitted even when empty, meaning no watched
        process could be observed.

        Returns:
            The snapshot map published by this tick, or the current one if
            this tick's result was discarded
        """
        if self._state is MonitorState.STOPPED:
            return self._snapshot

        tick = next(self._tick_counter)
        watch_set = self.compute_watch_set()
        samples = self._read_all(watch_set, self.page_size)
        snapshot: SnapshotMap = MappingProxyType(samples)

        with self._lock:
            if self._state is MonitorState.STOPPED:
                logger.debug(f"Discarding tick {tick}: monitor stopped")
                return self._snapshot
            if tick < self._published_tick:
                logger.debug(f"Discarding tick {tick}: tick {self._published_tick} already published")
                return self._snapshot
            self._published_tick = tick
            self._snapshot = snapshot
            delivered = self._subscribers.emit(snapshot)

        logger.debug(
            f"Tick {tick}: {len(snapshot)}/{len(watch_set)} processes sampled, "
            f"delivered to {delivered} subscriber(s)"
        )
        return snapshot

    def get_merged_sample(self) -> MemorySample:
        """
        Sum of all samples in the current snapshot map.

        Raises:
            EmptyAggregateInputError: If the current snapshot map is empty
        """
        return merge_samples(self._snapshot)

    def _read_all(self, pids: FrozenSet[int], page_size: int) -> Dict[int, MemorySample]:
        """Read every pid concurrently and wait for all reads to resolve."""
        futures: List[Tuple[int, Future]] = []
        try:
            for pid in sorted(pids):
                futures.append((pid, self._executor.submit(self._reader.read, pid, page_size)))
        except RuntimeError:
            # stop() shut the pool down mid-submission.
            logger.debug("Read pool shut down during tick")

        samples: Dict[int, MemorySample] = {}
        for pid, future in futures:
            try:
                sample = future.result()
            except CancelledError:
                continue
            except Exception as e:
                logger.warning(f"Unexpected error sampling PID {pid}: {e}", exc_info=False)
                continue
            if sample is not None:
                samples[pid] = sample
        return samples
