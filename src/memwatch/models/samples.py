"""
Memory sample data models.

This module contains the raw page-count record read from the OS and the
converted per-process sample expressed in megabytes.
"""

from dataclasses import asdict, dataclass
from typing import Dict, Mapping, Tuple

# Field order matches the columns of /proc/<pid>/statm.
MEMORY_FIELDS: Tuple[str, ...] = ("size", "resident", "share", "text", "lib", "data", "dt")

BYTES_PER_MB = 1024 ** 2


@dataclass(frozen=True)
class RawMemoryRecord:
    """
    Memory accounting for one process, in pages.

    Attributes:
        size: Total program size.
        resident: Resident set size.
        share: Resident shared pages (backed by a file).
        text: Text (code).
        lib: Library pages, unused since Linux 2.6 and always 0.
        data: Data + stack.
        dt: Dirty pages, unused since Linux 2.6 and always 0.
    """

    size: int
    resident: int
    share: int
    text: int
    lib: int
    data: int
    dt: int

    @classmethod
    def from_statm(cls, contents: str) -> "RawMemoryRecord":
        """
        Parse the contents of a statm file.

        Args:
            contents: A single line of at least seven integers.

        Raises:
            ValueError: If fewer than seven integer columns are present.
        """
        columns = contents.split()
        if len(columns) < len(MEMORY_FIELDS):
            raise ValueError(
                f"statm record has {len(columns)} columns, expected {len(MEMORY_FIELDS)}"
            )
        return cls(*(int(column) for column in columns[:len(MEMORY_FIELDS)]))


@dataclass(frozen=True)
class MemorySample:
    """
    Immutable memory sample of a single process, all values in MB.

    Each value is ``pages * page_size / 2**20``.
    """

    size: float
    resident: float
    share: float
    text: float
    lib: float
    data: float
    dt: float

    @classmethod
    def from_raw(cls, record: RawMemoryRecord, page_size: int) -> "MemorySample":
        """Convert a page-count record to megabytes using ``page_size`` bytes per page."""
        return cls(**{
            name: getattr(record, name) * page_size / BYTES_PER_MB
            for name in MEMORY_FIELDS
        })

    @classmethod
    def zero(cls) -> "MemorySample":
        return cls(*(0.0 for _ in MEMORY_FIELDS))

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


# Latest sample per process id, replaced wholesale on every tick.
SnapshotMap = Mapping[int, MemorySample]

