"""
Child process discovery.

Discovery is a single scan of the process table matching each process's
parent id against the roots. Only DIRECT children are found: a grandchild
reports its own parent, not the root, so it is never matched. Callers who
need deeper trees must register intermediate processes as roots themselves.
"""

import logging
from typing import Dict, Iterable, List

import psutil

from ..validation import DiscoveryError

logger = logging.getLogger(__name__)


class ProcessTreeDiscoverer:
    """Finds the direct children of one or more root processes using psutil."""

    def is_supported(self) -> bool:
        """Return True if the platform lets psutil enumerate processes."""
        try:
            psutil.pids()
        except (psutil.Error, OSError) as e:
            logger.warning(f"Process enumeration unavailable: {e}")
            return False
        return True

    def descendants_of(self, root_pid: int) -> List[int]:
        """
        Return the ids of processes whose parent is ``root_pid``.

        Returns an empty list when the process table cannot be read.
        """
        try:
            return self.descendants_of_many([root_pid])
        except DiscoveryError as e:
            logger.warning(f"Child discovery for PID {root_pid} failed: {e}")
            return []

    def descendants_of_many(self, root_pids: Iterable[int]) -> List[int]:
        """
        Return the direct children of every root in one scan.

        Ids are unique and ordered by the scan. Processes that vanish or deny
        access during the scan are skipped.

        Raises:
            DiscoveryError: If the process table itself cannot be enumerated
        """
        roots = set(root_pids)
        children: List[int] = []
        for pid, ppid in self._parent_links().items():
            if ppid in roots and pid not in roots:
                children.append(pid)
        logger.debug(f"Discovered {len(children)} children of {sorted(roots)}")
        return children

    def _parent_links(self) -> Dict[int, int]:
        """Map pid -> ppid for every process psutil can see."""
        links: Dict[int, int] = {}
        try:
            # process_iter skips processes that exit mid-scan and sets
            # attributes it cannot read to None.
            for proc in psutil.process_iter(["pid", "ppid"]):
                ppid = proc.info.get("ppid")
                if ppid is not None:
                    links[proc.info["pid"]] = ppid
        except (psutil.Error, OSError) as e:
            raise DiscoveryError(f"Cannot enumerate processes: {e}") from e
        return links
