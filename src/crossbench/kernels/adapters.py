from typing import Any, Tuple

import numpy as np

from . import compiled, interpreted
from .base import Algorithm, ArrayMarshaller, Kernel
from .workloads import HashWorkload, MandelbrotWorkload, MatrixWorkload, RayTraceWorkload


class MatrixMultiplyKernel(Kernel):
    """Dense matrix product; one unit is one output row."""

    algorithm = Algorithm.MATRIX_MULTIPLY
    dtype = np.float64
    # LLVM may vectorise the inner loop; results agree to rounding.
    rtol = 1e-9
    atol = 1e-12

    def unit_count(self, workload: MatrixWorkload) -> int:
        return workload.size

    def stride(self, workload: MatrixWorkload) -> int:
        return workload.size

    def marshal(self, workload: MatrixWorkload, to_buffer: ArrayMarshaller) -> Tuple[Any, ...]:
        count = workload.size * workload.size
        return (
            to_buffer(workload.matrix_a, np.float64, count),
            to_buffer(workload.matrix_b, np.float64, count),
        )

    def run_interpreted(self, workload: MatrixWorkload):
        return interpreted.matrix_multiply(
            workload.matrix_a.tolist(), workload.matrix_b.tolist(), workload.size
        )

    def run_range(self, inputs, view, workload: MatrixWorkload, start: int, end: int) -> None:
        matrix_a, matrix_b = inputs
        compiled.matrix_multiply_rows(matrix_a, matrix_b, view, workload.size, start, end)

    def warm_up(self) -> None:
        out = np.zeros(4, dtype=np.float64)
        eye = np.array([1.0, 0.0, 0.0, 1.0])
        # Workload matrices are read-only; compile that signature up front.
        eye.setflags(write=False)
        compiled.matrix_multiply_rows(eye, eye, out, 2, 0, 2)


class MandelbrotKernel(Kernel):
    """Escape-time raster; one unit is one pixel row."""

    algorithm = Algorithm.MANDELBROT
    dtype = np.int32

    def unit_count(self, workload: MandelbrotWorkload) -> int:
        return workload.height

    def stride(self, workload: MandelbrotWorkload) -> int:
        return workload.width

    def marshal(self, workload: MandelbrotWorkload, to_buffer: ArrayMarshaller) -> Tuple[Any, ...]:
        return ()

    def run_interpreted(self, workload: MandelbrotWorkload):
        return interpreted.mandelbrot(
            workload.width, workload.height,
            workload.xmin, workload.xmax, workload.ymin, workload.ymax,
            workload.max_iter,
        )

    def run_range(self, inputs, view, workload: MandelbrotWorkload, start: int, end: int) -> None:
        compiled.mandelbrot_rows(
            view, workload.width, workload.height,
            float(workload.xmin), float(workload.xmax),
            float(workload.ymin), float(workload.ymax),
            workload.max_iter, start, end,
        )

    def warm_up(self) -> None:
        out = np.zeros(1, dtype=np.int32)
        compiled.mandelbrot_rows(out, 1, 1, 0.0, 0.0, 0.0, 0.0, 2, 0, 1)


class HashDiffusionKernel(Kernel):
    """
    Iterated multiply-33 / rotate-5 diffusion.

    One unit is one iteration block. Blocks are independent, so the output
    buffer holds one 32-bit digest per block and ``finalize`` folds them in
    iteration order after the join.
    """

    algorithm = Algorithm.HASH_DIFFUSION
    dtype = np.int64

    def unit_count(self, workload: HashWorkload) -> int:
        return workload.iterations

    def stride(self, workload: HashWorkload) -> int:
        return 1

    def marshal(self, workload: HashWorkload, to_buffer: ArrayMarshaller) -> Tuple[Any, ...]:
        raw = np.frombuffer(workload.data, dtype=np.uint8)
        return (to_buffer(raw, np.uint8, len(workload.data)),)

    def run_interpreted(self, workload: HashWorkload):
        return interpreted.hash_diffusion(workload.data, workload.iterations)

    def run_range(self, inputs, view, workload: HashWorkload, start: int, end: int) -> None:
        (data,) = inputs
        compiled.hash_blocks(data, view, start, end)

    def finalize(self, workload: HashWorkload, buffer: np.ndarray) -> int:
        return int(compiled.hash_fold(buffer))

    def warm_up(self) -> None:
        out = np.zeros(2, dtype=np.int64)
        compiled.hash_blocks(np.frombuffer(b"warm", dtype=np.uint8), out, 0, 2)
        compiled.hash_fold(out)


class RayTraceKernel(Kernel):
    """Single-sphere Lambertian ray tracer; one unit is one image row."""

    algorithm = Algorithm.RAY_TRACE
    dtype = np.float64
    rtol = 1e-9
    atol = 1e-12

    def unit_count(self, workload: RayTraceWorkload) -> int:
        return workload.height

    def stride(self, workload: RayTraceWorkload) -> int:
        return workload.width * 3

    def marshal(self, workload: RayTraceWorkload, to_buffer: ArrayMarshaller) -> Tuple[Any, ...]:
        return ()

    def run_interpreted(self, workload: RayTraceWorkload):
        return interpreted.ray_trace(workload.width, workload.height, workload.samples)

    def run_range(self, inputs, view, workload: RayTraceWorkload, start: int, end: int) -> None:
        compiled.ray_trace_rows(view, workload.width, workload.height, workload.samples, start, end)

    def warm_up(self) -> None:
        out = np.zeros(12, dtype=np.float64)
        compiled.ray_trace_rows(out, 2, 2, 1, 0, 2)
