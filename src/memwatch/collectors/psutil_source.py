"""
Memory record source using the 'psutil' library.

psutil reports memory in bytes; values are converted back to page counts so
the source satisfies the same contract as the statm reader. Fields that the
platform does not provide (everything but rss and vms outside Linux) are 0.
"""

import logging
from typing import Optional

import psutil

from ..models.samples import RawMemoryRecord
from ..system.page_size import PageSizeProvider
from .base import AbstractMemorySource

logger = logging.getLogger(__name__)

# RawMemoryRecord field -> psutil memory_info attribute
_PSUTIL_FIELDS = {
    "size": "vms",
    "resident": "rss",
    "share": "shared",
    "text": "text",
    "lib": "lib",
    "data": "data",
    "dt": "dirty",
}


class PsutilMemorySource(AbstractMemorySource):
    """
    Portable memory record source built on ``psutil.Process.memory_info()``.

    Attributes:
        page_size: Bytes per page used to turn psutil byte counts into pages.
            Replaced by the reader with the monitor's page size before each
            read, so pages convert back to the same byte counts. Resolved with
            PageSizeProvider on first use when never set.
    """

    name = "psutil"

    def __init__(self, page_size: Optional[int] = None):
        self._page_size = page_size

    @property
    def page_size(self) -> int:
        if self._page_size is None:
            self._page_size = PageSizeProvider().resolve()
        return self._page_size

    def bind_page_size(self, page_size: int) -> None:
        self._page_size = page_size

    def fetch(self, pid: int) -> Optional[RawMemoryRecord]:
        try:
            mem_info = psutil.Process(pid).memory_info()
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            # These are expected and should not be treated as errors.
            return None

        page_size = self.page_size
        return RawMemoryRecord(**{
            field: int(getattr(mem_info, attr, 0)) // page_size
            for field, attr in _PSUTIL_FIELDS.items()
        })
