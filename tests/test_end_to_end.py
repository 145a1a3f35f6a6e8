"""
End-to-end tests: a full monitor with fake and real process sources.
"""

import os
import subprocess
import sys
import time
from pathlib import Path

import pytest

from conftest import SAMPLE_RAW, FakeMemorySource, FixedPageSizeProvider
from memwatch import MemoryMonitor, MemorySample, merge_samples
from memwatch.collectors import ProcessSnapshotReader, ProcStatmSource

requires_proc = pytest.mark.skipif(
    not Path("/proc/self/statm").exists(), reason="requires /proc"
)


@pytest.mark.integration
def test_vanished_process_omitted_and_merge_matches_survivor(recorder):
    source = FakeMemorySource({1001: SAMPLE_RAW, 1002: None})
    monitor = MemoryMonitor(
        root_ids=[1001, "1002"],
        poll_interval_ms=20,
        reader=ProcessSnapshotReader(source),
        page_size_provider=FixedPageSizeProvider(4096),
    )
    monitor.subscribe(recorder)

    with monitor:
        assert recorder.wait_for(1)

    snapshot = recorder.snapshots[0]
    expected = MemorySample.from_raw(SAMPLE_RAW, 4096)
    assert list(snapshot) == [1001]
    assert merge_samples(snapshot) == expected
    assert expected.size == 0.390625


@pytest.mark.integration
@requires_proc
def test_nonexistent_process_reads_none():
    reader = ProcessSnapshotReader(ProcStatmSource())

    assert reader.read(2 ** 22 + 1, 4096) is None


@pytest.mark.integration
@pytest.mark.slow
@requires_proc
def test_real_child_process_discovered(recorder):
    child = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(30)"])
    try:
        monitor = MemoryMonitor(
            root_id=os.getpid(),
            poll_interval_ms=50,
            track_descendants=True,
            source="statm",
        )
        monitor.subscribe(recorder)
        with monitor:
            assert child.pid in monitor.descendants
            deadline = time.monotonic() + 5.0
            while time.monotonic() < deadline:
                if recorder.snapshots and child.pid in recorder.snapshots[-1]:
                    break
                time.sleep(0.05)

        snapshot = recorder.snapshots[-1]
        assert os.getpid() in snapshot
        assert child.pid in snapshot
        assert snapshot[child.pid].resident > 0
        assert merge_samples(snapshot).resident >= snapshot[os.getpid()].resident
    finally:
        child.kill()
        child.wait(timeout=5.0)
