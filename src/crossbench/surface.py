"""
The twelve benchmark callables, three per algorithm.

Interpreted callables run in-process and return plain lists or an int.
Compiled callables need a READY ``RuntimeHandle`` and return numpy arrays (or
an int for the hash); parallel ones take an explicit ``workers`` count, which
defaults to the number of logical CPUs.
"""

from typing import Any, List, Optional, Sequence, Union

import numpy as np

from crossbench.kernels.base import Algorithm, Variant
from crossbench.kernels.factory import KERNEL_CLASSES
from crossbench.kernels.workloads import (
    HashWorkload,
    MandelbrotWorkload,
    MatrixWorkload,
    RayTraceWorkload,
    WorkloadSpec,
)
from crossbench.runtime.boundary import CompiledBoundary
from crossbench.runtime.handle import RuntimeHandle
from crossbench.utils.cpu import default_worker_count


def _interpreted(workload: WorkloadSpec) -> Any:
    return KERNEL_CLASSES[workload.algorithm]().run_interpreted(workload)


def _single(workload: WorkloadSpec, runtime: RuntimeHandle) -> Any:
    boundary = CompiledBoundary(runtime, 1)
    return boundary.call(workload.algorithm, Variant.COMPILED_SINGLE, workload).value


def _parallel(workload: WorkloadSpec, runtime: RuntimeHandle, workers: Optional[int]) -> Any:
    boundary = CompiledBoundary(runtime, default_worker_count() if workers is None else workers)
    return boundary.call(workload.algorithm, Variant.COMPILED_PARALLEL, workload).value


# MatrixMultiply

def matrix_multiply_interpreted(matrix_a: Sequence[float], matrix_b: Sequence[float], size: int) -> List[float]:
    return _interpreted(MatrixWorkload(size=size, matrix_a=matrix_a, matrix_b=matrix_b))


def matrix_multiply_compiled_single(matrix_a, matrix_b, size: int, runtime: RuntimeHandle) -> np.ndarray:
    return _single(MatrixWorkload(size=size, matrix_a=matrix_a, matrix_b=matrix_b), runtime)


def matrix_multiply_compiled_parallel(
    matrix_a, matrix_b, size: int, runtime: RuntimeHandle, workers: Optional[int] = None
) -> np.ndarray:
    workload = MatrixWorkload(size=size, matrix_a=matrix_a, matrix_b=matrix_b)
    return _parallel(workload, runtime, workers)


# Mandelbrot

def mandelbrot_interpreted(
    width: int, height: int, xmin: float, xmax: float, ymin: float, ymax: float, max_iter: int
) -> List[int]:
    return _interpreted(MandelbrotWorkload(width, height, xmin, xmax, ymin, ymax, max_iter))


def mandelbrot_compiled_single(
    width: int, height: int, xmin: float, xmax: float, ymin: float, ymax: float, max_iter: int,
    runtime: RuntimeHandle,
) -> np.ndarray:
    return _single(MandelbrotWorkload(width, height, xmin, xmax, ymin, ymax, max_iter), runtime)


def mandelbrot_compiled_parallel(
    width: int, height: int, xmin: float, xmax: float, ymin: float, ymax: float, max_iter: int,
    runtime: RuntimeHandle, workers: Optional[int] = None,
) -> np.ndarray:
    workload = MandelbrotWorkload(width, height, xmin, xmax, ymin, ymax, max_iter)
    return _parallel(workload, runtime, workers)


# HashDiffusion

def hash_diffusion_interpreted(data: Union[str, bytes], iterations: int) -> int:
    return _interpreted(HashWorkload(data=data, iterations=iterations))


def hash_diffusion_compiled_single(data: Union[str, bytes], iterations: int, runtime: RuntimeHandle) -> int:
    return _single(HashWorkload(data=data, iterations=iterations), runtime)


def hash_diffusion_compiled_parallel(
    data: Union[str, bytes], iterations: int, runtime: RuntimeHandle, workers: Optional[int] = None
) -> int:
    return _parallel(HashWorkload(data=data, iterations=iterations), runtime, workers)


# RayTrace

def ray_trace_interpreted(width: int, height: int, samples: int) -> List[float]:
    return _interpreted(RayTraceWorkload(width=width, height=height, samples=samples))


def ray_trace_compiled_single(width: int, height: int, samples: int, runtime: RuntimeHandle) -> np.ndarray:
    return _single(RayTraceWorkload(width=width, height=height, samples=samples), runtime)


def ray_trace_compiled_parallel(
    width: int, height: int, samples: int, runtime: RuntimeHandle, workers: Optional[int] = None
) -> np.ndarray:
    workload = RayTraceWorkload(width=width, height=height, samples=samples)
    return _parallel(workload, runtime, workers)


CALLABLES = {
    (Algorithm.MATRIX_MULTIPLY, Variant.INTERPRETED): matrix_multiply_interpreted,
    (Algorithm.MATRIX_MULTIPLY, Variant.COMPILED_SINGLE): matrix_multiply_compiled_single,
    (Algorithm.MATRIX_MULTIPLY, Variant.COMPILED_PARALLEL): matrix_multiply_compiled_parallel,
    (Algorithm.MANDELBROT, Variant.INTERPRETED): mandelbrot_interpreted,
    (Algorithm.MANDELBROT, Variant.COMPILED_SINGLE): mandelbrot_compiled_single,
    (Algorithm.MANDELBROT, Variant.COMPILED_PARALLEL): mandelbrot_compiled_parallel,
    (Algorithm.HASH_DIFFUSION, Variant.INTERPRETED): hash_diffusion_interpreted,
    (Algorithm.HASH_DIFFUSION, Variant.COMPILED_SINGLE): hash_diffusion_compiled_single,
    (Algorithm.HASH_DIFFUSION, Variant.COMPILED_PARALLEL): hash_diffusion_compiled_parallel,
    (Algorithm.RAY_TRACE, Variant.INTERPRETED): ray_trace_interpreted,
    (Algorithm.RAY_TRACE, Variant.COMPILED_SINGLE): ray_trace_compiled_single,
    (Algorithm.RAY_TRACE, Variant.COMPILED_PARALLEL): ray_trace_compiled_parallel,
}
