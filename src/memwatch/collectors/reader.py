"""
Per-process snapshot reading.
"""

import logging
from typing import Optional

from ..models.samples import MemorySample
from .base import AbstractMemorySource

logger = logging.getLogger(__name__)


class ProcessSnapshotReader:
    """
    Reads one process's memory record and converts it to megabytes.

    Every failure that concerns a single process (it exited, access was
    denied, the record was malformed) is reported as None so the caller can
    omit the process from the current tick.
    """

    def __init__(self, source: AbstractMemorySource):
        self.source = source

    def read(self, pid: int, page_size: int) -> Optional[MemorySample]:
        """
        Args:
            pid: Process id to sample.
            page_size: Bytes per page.

        Returns:
            MemorySample in MB, or None if the process could not be sampled.
        """
        self.source.bind_page_size(page_size)
        try:
            record = self.source.fetch(pid)
        except ValueError as e:
            logger.debug(f"Malformed memory record for PID {pid}: {e}")
            return None

        if record is None:
            logger.debug(f"Process {pid} not found")
            return None
        return MemorySample.from_raw(record, page_size)
