"""
Aggregation of per-process samples.
"""

import math

from ..models.samples import MEMORY_FIELDS, MemorySample, SnapshotMap
from ..validation import EmptyAggregateInputError


def merge_samples(snapshot: SnapshotMap) -> MemorySample:
    """
    Sum every field across all samples of a snapshot map.

    ``math.fsum`` is exact up to the final rounding, so the result does not
    depend on the iteration order of the map.

    Raises:
        EmptyAggregateInputError: If the snapshot map has no entries
    """
    samples = list(snapshot.values())
    if not samples:
        raise EmptyAggregateInputError("Cannot merge an empty snapshot map")

    return MemorySample(**{
        name: math.fsum(getattr(sample, name) for sample in samples)
        for name in MEMORY_FIELDS
    })
