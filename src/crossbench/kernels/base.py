from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, Tuple

import numpy as np


class Algorithm(Enum):
    """The four benchmarked algorithms."""

    MATRIX_MULTIPLY = "MatrixMultiply"
    MANDELBROT = "Mandelbrot"
    HASH_DIFFUSION = "HashDiffusion"
    RAY_TRACE = "RayTrace"


class Variant(Enum):
    """Execution modes. INTERPRETED is the speedup baseline."""

    INTERPRETED = "Interpreted"
    COMPILED_SINGLE = "CompiledSingle"
    COMPILED_PARALLEL = "CompiledParallel"

    @property
    def is_compiled(self) -> bool:
        return self is not Variant.INTERPRETED


BASELINE = Variant.INTERPRETED

# Marshals (values, dtype, expected_count) into a contiguous 1-D buffer.
ArrayMarshaller = Callable[[Any, Any, int], np.ndarray]


class Kernel(ABC):
    """
    Adapter between a workload record and the two kernel renditions.

    The interpreted rendition computes the whole workload in pure Python.
    The compiled rendition computes a unit range [start, end) and writes it
    into the view it is given, so the executor can replicate it per partition.
    """

    algorithm: Algorithm
    dtype: Any = np.float64
    rtol: float = 0.0
    atol: float = 0.0

    @abstractmethod
    def unit_count(self, workload) -> int:
        """Number of independent work units (rows, iteration blocks)."""
        pass

    @abstractmethod
    def stride(self, workload) -> int:
        """Output elements written per work unit."""
        pass

    @abstractmethod
    def marshal(self, workload, to_buffer: ArrayMarshaller) -> Tuple[Any, ...]:
        """Return the typed input buffers the compiled kernel reads."""
        pass

    @abstractmethod
    def run_interpreted(self, workload) -> Any:
        """Compute the full workload in pure Python."""
        pass

    @abstractmethod
    def run_range(self, inputs: Tuple[Any, ...], view: np.ndarray, workload, start: int, end: int) -> None:
        """Compute units [start, end) into ``view`` with the compiled kernel."""
        pass

    @abstractmethod
    def warm_up(self) -> None:
        """Trigger JIT compilation on a tiny input."""
        pass

    def allocate(self, workload) -> np.ndarray:
        return np.zeros(self.unit_count(workload) * self.stride(workload), dtype=self.dtype)

    def finalize(self, workload, buffer: np.ndarray) -> Any:
        """Turn the merged output buffer into the callable's return value."""
        return buffer

    def outputs_match(self, expected: Any, actual: Any) -> bool:
        """Compare two variants' outputs within this kernel's tolerance."""
        if isinstance(expected, int) or isinstance(actual, int):
            return int(expected) == int(actual)
        expected_arr = np.asarray(expected)
        actual_arr = np.asarray(actual)
        if expected_arr.shape != actual_arr.shape:
            return False
        if self.rtol == 0.0 and self.atol == 0.0:
            return bool(np.array_equal(expected_arr, actual_arr))
        return bool(np.allclose(expected_arr, actual_arr, rtol=self.rtol, atol=self.atol))

    def get_info(self) -> Dict[str, Any]:
        """Return kernel metadata."""
        return {
            'algorithm': self.algorithm.value,
            'dtype': np.dtype(self.dtype).name,
            'rtol': self.rtol,
            'atol': self.atol,
            'type': self.__class__.__name__,
        }
