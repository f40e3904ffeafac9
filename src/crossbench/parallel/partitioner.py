"""
Splits a workload's independent units into contiguous, balanced ranges.

Partitions over one workload are pairwise disjoint and cover [0, units)
exactly once, which is what lets workers write the shared output buffer
without any locking.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional

import numpy as np

from crossbench.errors import InvalidWorkload


@dataclass(frozen=True)
class Partition:
    """A contiguous unit range [start, end) and, once bound, its output view."""

    index: int
    start: int
    end: int
    view: Optional[np.ndarray] = field(default=None, compare=False, repr=False)

    @property
    def size(self) -> int:
        return self.end - self.start


def partition(units: int, workers: int) -> List[Partition]:
    """
    Produce min(workers, units) partitions covering [0, units).

    The first ``units % count`` partitions take one extra unit so sizes never
    differ by more than one. With fewer units than workers each unit gets its
    own partition and the surplus workers stay idle.
    """
    if units <= 0:
        raise InvalidWorkload(f"Cannot partition {units} work units")
    if workers < 1:
        raise InvalidWorkload(f"Worker count must be >= 1, got {workers}")

    count = min(workers, units)
    base, extra = divmod(units, count)

    partitions: List[Partition] = []
    start = 0
    for index in range(count):
        size = base + 1 if index < extra else base
        partitions.append(Partition(index=index, start=start, end=start + size))
        start += size
    return partitions


def bind_partitions(partitions: List[Partition], buffer: np.ndarray, stride: int) -> List[Partition]:
    """Attach each partition's disjoint slice of ``buffer`` (``stride`` elements per unit)."""
    units = partitions[-1].end if partitions else 0
    if buffer.shape[0] != units * stride:
        raise InvalidWorkload(
            f"Output buffer holds {buffer.shape[0]} elements, expected {units} units x {stride}"
        )
    return [replace(p, view=buffer[p.start * stride:p.end * stride]) for p in partitions]
