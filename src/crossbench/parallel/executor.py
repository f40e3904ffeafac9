"""
Worker-pool execution of a compiled kernel over disjoint partitions.

A pool is created per invocation and torn down before ``run`` returns. The
caller only ever sees the merged buffer after every partition has finished or
failed; a failed partition is recorded, its slice reset to zero, and the rest
of the run carries on.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

import numpy as np

from crossbench.errors import InvalidWorkload, PartitionFailure
from crossbench.kernels.base import Kernel
from crossbench.parallel.partitioner import Partition, bind_partitions, partition

Logger = Callable[[str], None]


@dataclass
class ExecutionResult:
    """Merged output buffer plus per-partition failure records."""

    buffer: np.ndarray
    partitions: List[Partition] = field(default_factory=list)
    failures: List[PartitionFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class WorkerPoolExecutor:
    """Dispatches one task per partition to a fixed-size thread pool."""

    def __init__(self, workers: int, logger: Optional[Logger] = None) -> None:
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise InvalidWorkload(f"Worker count must be a positive integer, got {workers!r}")
        self.workers = workers
        self.logger = logger or (lambda msg: None)

    def run(self, kernel: Kernel, workload, inputs: Tuple[Any, ...]) -> ExecutionResult:
        """Compiled multi-threaded execution; blocks until every partition is done."""
        buffer = kernel.allocate(workload)
        units = kernel.unit_count(workload)
        if units == 0:
            return ExecutionResult(buffer=buffer)

        partitions = bind_partitions(partition(units, self.workers), buffer, kernel.stride(workload))
        failures: List[PartitionFailure] = []

        with ThreadPoolExecutor(
            max_workers=len(partitions), thread_name_prefix=f"{kernel.algorithm.value}_worker"
        ) as pool:
            futures = {
                pool.submit(kernel.run_range, inputs, part.view, workload, part.start, part.end): part
                for part in partitions
            }
            # Join barrier: nothing is returned until every future settles.
            done, _ = wait(futures)
            for future in done:
                part = futures[future]
                exc = future.exception()
                if exc is not None:
                    failures.append(self._record_failure(part, exc))

        failures.sort(key=lambda f: f.partition.index)
        return ExecutionResult(buffer=buffer, partitions=partitions, failures=failures)

    def run_single(self, kernel: Kernel, workload, inputs: Tuple[Any, ...]) -> ExecutionResult:
        """Degenerate case: one partition spanning the workload, run on the calling thread."""
        buffer = kernel.allocate(workload)
        units = kernel.unit_count(workload)
        if units == 0:
            return ExecutionResult(buffer=buffer)

        partitions = bind_partitions(partition(units, 1), buffer, kernel.stride(workload))
        failures: List[PartitionFailure] = []
        whole = partitions[0]
        try:
            kernel.run_range(inputs, whole.view, workload, whole.start, whole.end)
        except Exception as exc:  # pylint: disable=broad-except
            failures.append(self._record_failure(whole, exc))
        return ExecutionResult(buffer=buffer, partitions=partitions, failures=failures)

    def _record_failure(self, part: Partition, exc: BaseException) -> PartitionFailure:
        # The kernel may have written part of its slice before raising.
        part.view[...] = 0
        failure = PartitionFailure(part, exc)
        self.logger(str(failure))
        return failure
