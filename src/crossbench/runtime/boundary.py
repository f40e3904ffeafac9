"""
The call boundary between the orchestrating caller and the compiled runtime.

Numeric arrays cross as typed, contiguous 1-D numpy buffers; structured
parameters cross as JSON and are decoded into typed workload records on the
compiled side. Every call checks runtime readiness first, partition failures
come back as records, and anything else the kernel raises is wrapped in a
KernelError.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import numpy as np

from crossbench.errors import BenchmarkError, InvalidPayload, KernelError, PartitionFailure
from crossbench.kernels.base import Algorithm, Kernel, Variant
from crossbench.kernels.factory import KERNEL_CLASSES
from crossbench.kernels.workloads import WORKLOAD_TYPES, WorkloadSpec, field_names
from crossbench.parallel.executor import ExecutionResult, WorkerPoolExecutor
from crossbench.runtime.handle import RuntimeHandle

Logger = Callable[[str], None]

# JSON types accepted for each workload field
_FIELD_TYPES = {
    "size": (int,),
    "width": (int,),
    "height": (int,),
    "max_iter": (int,),
    "iterations": (int,),
    "samples": (int,),
    "xmin": (int, float),
    "xmax": (int, float),
    "ymin": (int, float),
    "ymax": (int, float),
    "data": (str,),
    "matrix_a": (list,),
    "matrix_b": (list,),
}


@dataclass
class BoundaryResult:
    """Return value of a boundary call plus what happened to its partitions."""

    value: Any
    partitions: int = 0
    failures: List[PartitionFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def marshal_array(values: Any, dtype: Any, expected_count: int) -> np.ndarray:
    """
    Convert ``values`` to a contiguous 1-D buffer of ``dtype``.

    Element order and count are preserved exactly. Nested, ragged or
    non-numeric input and count mismatches raise InvalidPayload.
    """
    try:
        if isinstance(values, np.ndarray):
            arr = values
        else:
            arr = np.asarray(values)
    except (TypeError, ValueError) as exc:
        raise InvalidPayload(f"Array is not numeric: {exc}") from exc

    if arr.ndim != 1:
        raise InvalidPayload(f"Expected a flat array, got {arr.ndim} dimensions")
    if arr.shape[0] != expected_count:
        raise InvalidPayload(f"Expected {expected_count} elements, got {arr.shape[0]}")
    if arr.dtype.kind not in "biuf":
        raise InvalidPayload(f"Array is not numeric (dtype {arr.dtype})")
    if arr.dtype != np.dtype(dtype):
        if not np.can_cast(arr.dtype, dtype, casting="same_kind"):
            raise InvalidPayload(f"Cannot pass {arr.dtype} as {np.dtype(dtype)} without losing values")
        arr = arr.astype(dtype)
    return np.ascontiguousarray(arr)


def decode_payload(algorithm: Algorithm, payload: Union[str, bytes, Mapping[str, Any]]) -> WorkloadSpec:
    """
    Decode a JSON (or already-parsed) payload into the algorithm's workload record.

    Shape problems (bad JSON, unknown or missing fields, wrong JSON types)
    raise InvalidPayload; value problems are left to the record and raise
    InvalidWorkload.
    """
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            payload = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidPayload(f"Payload is not valid JSON: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise InvalidPayload(f"Payload must be an object, got {type(payload).__name__}")

    expected = field_names(algorithm)
    unknown = sorted(set(payload) - set(expected))
    missing = [name for name in expected if name not in payload]
    if unknown:
        raise InvalidPayload(f"{algorithm.value}: unknown fields {unknown}")
    if missing:
        raise InvalidPayload(f"{algorithm.value}: missing fields {missing}")

    for name in expected:
        value = payload[name]
        allowed = _FIELD_TYPES[name]
        if isinstance(value, bool) or not isinstance(value, allowed):
            raise InvalidPayload(
                f"{algorithm.value}.{name}: expected {'/'.join(t.__name__ for t in allowed)}, "
                f"got {type(value).__name__}"
            )
        if isinstance(value, list):
            for item in value:
                if isinstance(item, bool) or not isinstance(item, (int, float)):
                    raise InvalidPayload(
                        f"{algorithm.value}.{name}: elements must be numbers, got {type(item).__name__}"
                    )

    return WORKLOAD_TYPES[algorithm](**{name: payload[name] for name in expected})


class CompiledBoundary:
    """Routes compiled-variant calls through readiness checks, marshalling and the executor."""

    def __init__(
        self,
        runtime: RuntimeHandle,
        workers: int,
        logger: Optional[Logger] = None,
        kernels: Optional[Mapping[Algorithm, Kernel]] = None,
    ) -> None:
        self.runtime = runtime
        self.logger = logger or (lambda msg: None)
        self.executor = WorkerPoolExecutor(workers, logger=self.logger)
        self.kernels: Dict[Algorithm, Kernel] = {algorithm: cls() for algorithm, cls in KERNEL_CLASSES.items()}
        self.kernels.update(kernels or {})

    @property
    def workers(self) -> int:
        return self.executor.workers

    def call(self, algorithm: Algorithm, variant: Variant, workload: WorkloadSpec) -> BoundaryResult:
        """Run a compiled variant of ``algorithm`` on ``workload``."""
        self.runtime.require_ready()
        if not variant.is_compiled:
            raise InvalidPayload(f"{variant.value} does not cross the compiled boundary")
        if getattr(workload, "algorithm", None) is not algorithm:
            raise InvalidPayload(
                f"{algorithm.value} cannot run a {type(workload).__name__} payload"
            )

        kernel: Kernel = self.kernels[algorithm]
        inputs = kernel.marshal(workload, marshal_array)
        try:
            if variant is Variant.COMPILED_PARALLEL:
                result: ExecutionResult = self.executor.run(kernel, workload, inputs)
            else:
                result = self.executor.run_single(kernel, workload, inputs)
            value = kernel.finalize(workload, result.buffer)
        except BenchmarkError:
            raise
        except Exception as exc:  # pylint: disable=broad-except
            raise KernelError(algorithm, variant, exc) from exc

        return BoundaryResult(value=value, partitions=len(result.partitions), failures=result.failures)

    def call_json(self, algorithm: Algorithm, variant: Variant, payload: Union[str, bytes, Mapping[str, Any]]):
        """Decode a structured payload on the compiled side, then ``call``."""
        self.runtime.require_ready()
        return self.call(algorithm, variant, decode_payload(algorithm, payload))
