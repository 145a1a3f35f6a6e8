"""
Defines the abstract interface for memory record sources.

A source fetches the raw page-count accounting of one process. Sources
return None for processes that no longer exist or cannot be read; they never
raise for such expected conditions.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..models.samples import RawMemoryRecord

logger = logging.getLogger(__name__)


class AbstractMemorySource(ABC):
    """
    Abstract base class for memory record sources.

    Implementations must not keep any handle open between calls: each
    ``fetch`` acquires and releases its own resources.
    """

    name: str = "abstract"

    @abstractmethod
    def fetch(self, pid: int) -> Optional[RawMemoryRecord]:
        """
        Read the memory accounting record of a process.

        Args:
            pid: Process id to read.

        Returns:
            The record in pages, or None if the process is gone or unreadable.

        Raises:
            ValueError: If the record was read but could not be parsed.
        """
        pass

    def bind_page_size(self, page_size: int) -> None:
        """Use ``page_size`` for any byte to page conversion. Sources reporting pages ignore it."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
