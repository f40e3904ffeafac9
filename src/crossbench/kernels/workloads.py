"""
Immutable workload records, one per algorithm.

Each record validates its parameters on construction and raises
InvalidWorkload before any run is started.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any, Dict, Type, Union

import numpy as np

from crossbench.errors import InvalidWorkload
from crossbench.kernels.base import Algorithm


def _require_int(name: str, value: Any, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidWorkload(f"{name} must be an integer, got {type(value).__name__}")
    if value < minimum:
        raise InvalidWorkload(f"{name} must be >= {minimum}, got {value}")


def _require_finite(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise InvalidWorkload(f"{name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise InvalidWorkload(f"{name} must be finite, got {value}")


def _frozen_matrix(name: str, values: Any, size: int) -> np.ndarray:
    try:
        arr = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidWorkload(f"{name} must hold numbers: {exc}") from exc
    if arr.ndim != 1:
        raise InvalidWorkload(f"{name} must be a flat array, got {arr.ndim} dimensions")
    if arr.shape[0] != size * size:
        raise InvalidWorkload(f"{name} must hold {size * size} elements, got {arr.shape[0]}")
    if not np.isfinite(arr).all():
        raise InvalidWorkload(f"{name} must hold finite numbers")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class MatrixWorkload:
    size: int
    matrix_a: np.ndarray
    matrix_b: np.ndarray

    algorithm = Algorithm.MATRIX_MULTIPLY

    def __post_init__(self) -> None:
        _require_int("size", self.size, 1)
        object.__setattr__(self, "matrix_a", _frozen_matrix("matrix_a", self.matrix_a, self.size))
        object.__setattr__(self, "matrix_b", _frozen_matrix("matrix_b", self.matrix_b, self.size))

    def describe(self) -> str:
        return f"{self.size}x{self.size}"


@dataclass(frozen=True)
class MandelbrotWorkload:
    width: int
    height: int
    xmin: float
    xmax: float
    ymin: float
    ymax: float
    max_iter: int

    algorithm = Algorithm.MANDELBROT

    def __post_init__(self) -> None:
        _require_int("width", self.width, 1)
        _require_int("height", self.height, 1)
        _require_int("max_iter", self.max_iter, 1)
        for name in ("xmin", "xmax", "ymin", "ymax"):
            _require_finite(name, getattr(self, name))
        if self.xmin > self.xmax or self.ymin > self.ymax:
            raise InvalidWorkload(
                f"Malformed viewport: x [{self.xmin}, {self.xmax}], y [{self.ymin}, {self.ymax}]"
            )

    def describe(self) -> str:
        return f"{self.width}x{self.height}, max_iter={self.max_iter}"


@dataclass(frozen=True)
class HashWorkload:
    data: bytes
    iterations: int

    algorithm = Algorithm.HASH_DIFFUSION

    def __post_init__(self) -> None:
        if isinstance(self.data, str):
            try:
                object.__setattr__(self, "data", self.data.encode("utf-8"))
            except UnicodeEncodeError as exc:
                raise InvalidWorkload(f"data is not encodable as UTF-8: {exc}") from exc
        elif isinstance(self.data, (bytearray, memoryview)):
            object.__setattr__(self, "data", bytes(self.data))
        elif not isinstance(self.data, bytes):
            raise InvalidWorkload(f"data must be text or bytes, got {type(self.data).__name__}")
        # Zero iterations is the identity case and returns the seed.
        _require_int("iterations", self.iterations, 0)

    def describe(self) -> str:
        return f"{len(self.data)} bytes x {self.iterations} iterations"


@dataclass(frozen=True)
class RayTraceWorkload:
    width: int
    height: int
    samples: int

    algorithm = Algorithm.RAY_TRACE

    def __post_init__(self) -> None:
        _require_int("width", self.width, 1)
        _require_int("height", self.height, 1)
        _require_int("samples", self.samples, 1)

    def describe(self) -> str:
        return f"{self.width}x{self.height}, {self.samples} samples"


WorkloadSpec = Union[MatrixWorkload, MandelbrotWorkload, HashWorkload, RayTraceWorkload]

WORKLOAD_TYPES: Dict[Algorithm, Type] = {
    Algorithm.MATRIX_MULTIPLY: MatrixWorkload,
    Algorithm.MANDELBROT: MandelbrotWorkload,
    Algorithm.HASH_DIFFUSION: HashWorkload,
    Algorithm.RAY_TRACE: RayTraceWorkload,
}


def field_names(algorithm: Algorithm):
    """Return the ordered parameter names of an algorithm's workload record."""
    return [f.name for f in fields(WORKLOAD_TYPES[algorithm])]
