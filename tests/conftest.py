"""
Pytest configuration and shared fixtures for the memwatch test suite.

This module provides fake OS collaborators (memory source, child process
discoverer, page size provider) so the monitor can be tested without
depending on real processes.
"""

import shutil
import sys
import tempfile
import threading
import time
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from memwatch.collectors import AbstractMemorySource, ProcessSnapshotReader
from memwatch.models import RawMemoryRecord
from memwatch.monitoring import MemoryMonitor
from memwatch.system import PageSizeProvider


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# Raw page counts used throughout the suite.
SAMPLE_RAW = RawMemoryRecord(size=100, resident=50, share=10, text=5, lib=0, data=20, dt=0)
OTHER_RAW = RawMemoryRecord(size=300, resident=120, share=30, text=15, lib=0, data=60, dt=0)


# ============================================================================
# Fake Collaborators
# ============================================================================


class FakeMemorySource(AbstractMemorySource):
    """
    In-memory record source.

    ``records`` maps pid -> RawMemoryRecord, None (process gone) or an
    exception instance to raise. ``block`` makes the next fetch of a pid wait
    until the returned event is set.
    """

    name = "fake"

    def __init__(self, records: Optional[Dict[int, object]] = None):
        self.records: Dict[int, object] = dict(records or {})
        self.calls: List[int] = []
        self.entered: Dict[int, threading.Event] = {}
        self._gates: Dict[int, List[threading.Event]] = {}
        self._lock = threading.Lock()

    def block(self, pid: int) -> threading.Event:
        gate = threading.Event()
        with self._lock:
            self._gates.setdefault(pid, []).append(gate)
            self.entered[pid] = threading.Event()
        return gate

    def fetch(self, pid: int) -> Optional[RawMemoryRecord]:
        with self._lock:
            self.calls.append(pid)
            value = self.records.get(pid)
            gates = self._gates.get(pid)
            gate = gates.pop(0) if gates else None
            entered = self.entered.get(pid)
        if gate is not None:
            entered.set()
            gate.wait(timeout=5.0)
        if isinstance(value, Exception):
            raise value
        return value


class FakeDiscoverer:
    """Child process discoverer returning a configurable list."""

    def __init__(self, children: Iterable[int] = (), supported: bool = True):
        self.children = list(children)
        self.supported = supported
        self.error: Optional[Exception] = None
        self.calls = 0

    def is_supported(self) -> bool:
        return self.supported

    def descendants_of_many(self, root_pids: Iterable[int]) -> List[int]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.children)


class FixedPageSizeProvider(PageSizeProvider):
    """Page size provider that never touches the OS."""

    def __init__(self, page_size: int = 4096):
        super().__init__()
        self.page_size = page_size
        self.calls = 0

    def resolve(self) -> int:
        self.calls += 1
        return self.page_size


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def fake_source():
    return FakeMemorySource({1: SAMPLE_RAW, 2: OTHER_RAW})


@pytest.fixture
def fake_discoverer():
    return FakeDiscoverer()


@pytest.fixture
def page_size_provider():
    return FixedPageSizeProvider(4096)


@pytest.fixture
def make_monitor(fake_source, fake_discoverer, page_size_provider):
    """
    Factory building MemoryMonitors wired to the fake collaborators.

    Every monitor created through the factory is stopped at teardown.
    """
    monitors: List[MemoryMonitor] = []

    def _make(**kwargs) -> MemoryMonitor:
        kwargs.setdefault("root_ids", [1, 2])
        # Long interval: timers never fire unless a test asks for it.
        kwargs.setdefault("poll_interval_ms", 60_000)
        kwargs.setdefault("reader", ProcessSnapshotReader(fake_source))
        kwargs.setdefault("discoverer", fake_discoverer)
        kwargs.setdefault("page_size_provider", page_size_provider)
        monitor = MemoryMonitor(**kwargs)
        monitors.append(monitor)
        return monitor

    yield _make

    for monitor in monitors:
        monitor.stop(timeout=1.0)


class SnapshotRecorder:
    """Subscriber callback recording every snapshot it receives."""

    def __init__(self):
        self.snapshots = []
        self.received = threading.Event()
        self._lock = threading.Lock()

    def __call__(self, snapshot):
        with self._lock:
            self.snapshots.append(snapshot)
        self.received.set()

    def wait_for(self, count: int, timeout: float = 5.0) -> bool:
        """Wait until at least ``count`` snapshots were received."""
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            with self._lock:
                if len(self.snapshots) >= count:
                    return True
            time.sleep(0.01)
        return False


@pytest.fixture
def recorder():
    return SnapshotRecorder()
