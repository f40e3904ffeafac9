"""
Error kinds raised and recorded by the benchmarking engine.

None of these is fatal to a benchmark suite: the harness records them against
the algorithm/variant they belong to and moves on to the next test.
"""

from __future__ import annotations

from typing import Any, Optional


class BenchmarkError(Exception):
    """Base class for every engine error."""


class InvalidWorkload(BenchmarkError, ValueError):
    """Workload parameters are out of range (sizes, viewport, counts)."""


class InvalidPayload(BenchmarkError, ValueError):
    """A structured payload or array crossing the runtime boundary is malformed."""


class NotReady(BenchmarkError, RuntimeError):
    """The compiled runtime has not finished initialising."""

    def __init__(self, state: Any, cause: Optional[BaseException] = None) -> None:
        self.state = state
        self.cause = cause
        message = f"Compiled runtime is not ready (state: {getattr(state, 'value', state)})"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class KernelError(BenchmarkError, RuntimeError):
    """A kernel failed outside of a partition (marshalling, merge, fold)."""

    def __init__(self, algorithm: Any, variant: Any, cause: BaseException) -> None:
        self.algorithm = algorithm
        self.variant = variant
        self.cause = cause
        super().__init__(
            f"{getattr(algorithm, 'value', algorithm)}/{getattr(variant, 'value', variant)} failed: {cause}"
        )


class MissingVariant(BenchmarkError, LookupError):
    """The requested callable is not registered on the execution side."""

    def __init__(self, algorithm: Any, variant: Any) -> None:
        self.algorithm = algorithm
        self.variant = variant
        super().__init__(
            f"No callable registered for {getattr(algorithm, 'value', algorithm)}"
            f"/{getattr(variant, 'value', variant)}"
        )


class PartitionFailure(BenchmarkError):
    """
    Record of a single worker failing on its partition.

    Executors collect these instead of raising them; the partition's output
    slice is left at its zero value and the run completes.
    """

    def __init__(self, partition: Any, cause: BaseException) -> None:
        self.partition = partition
        self.cause = cause
        super().__init__(
            f"Partition {partition.index} [{partition.start}, {partition.end}) failed: {cause}"
        )
