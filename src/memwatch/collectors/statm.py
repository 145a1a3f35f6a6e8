"""
Memory record source reading ``/proc/<pid>/statm``.

Linux only. The file holds seven page counts: size, resident, shared, text,
lib, data and dt.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.samples import RawMemoryRecord
from .base import AbstractMemorySource

logger = logging.getLogger(__name__)


class ProcStatmSource(AbstractMemorySource):
    """Reads raw page counts from the proc filesystem."""

    name = "statm"

    def __init__(self, proc_root: Path = Path("/proc")):
        self.proc_root = Path(proc_root)

    def is_available(self) -> bool:
        return (self.proc_root / "self" / "statm").exists()

    def fetch(self, pid: int) -> Optional[RawMemoryRecord]:
        statm_path = self.proc_root / str(pid) / "statm"
        try:
            with open(statm_path, "r") as f_statm:
                contents = f_statm.read()
        except (FileNotFoundError, ProcessLookupError):
            # The process exited, this is routine.
            return None
        except OSError as e:
            logger.debug(f"Cannot read {statm_path}: {e}")
            return None

        if not contents.strip():
            return None
        return RawMemoryRecord.from_statm(contents)

    def __repr__(self) -> str:
        return f"ProcStatmSource(proc_root={str(self.proc_root)!r})"
