from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from crossbench.errors import InvalidWorkload
from .adapters import HashDiffusionKernel, MandelbrotKernel, MatrixMultiplyKernel, RayTraceKernel
from .base import Algorithm, Kernel, Variant
from .workloads import (
    HashWorkload,
    MandelbrotWorkload,
    MatrixWorkload,
    RayTraceWorkload,
    WorkloadSpec,
)

KERNEL_CLASSES = {
    Algorithm.MATRIX_MULTIPLY: MatrixMultiplyKernel,
    Algorithm.MANDELBROT: MandelbrotKernel,
    Algorithm.HASH_DIFFUSION: HashDiffusionKernel,
    Algorithm.RAY_TRACE: RayTraceKernel,
}


def parse_algorithm(name: Any) -> Algorithm:
    """Accept an Algorithm, its value ("RayTrace") or its member name ("RAY_TRACE")."""
    if isinstance(name, Algorithm):
        return name
    for algorithm in Algorithm:
        if name in (algorithm.value, algorithm.name):
            return algorithm
    raise InvalidWorkload(f"Unknown algorithm: {name}")


def parse_variant(name: Any) -> Variant:
    if isinstance(name, Variant):
        return name
    for variant in Variant:
        if name in (variant.value, variant.name):
            return variant
    raise InvalidWorkload(f"Unknown variant: {name}")


class KernelFactory:
    """Creates kernels and fresh workloads from the ``workloads`` config section."""

    def __init__(self, workload_config: Optional[Mapping[str, Any]] = None, seed: Optional[int] = None):
        """
        Initialize factory.

        Args:
            workload_config: Mapping of algorithm name to parameter block.
            seed: Seed for randomized inputs (matrix contents). None draws
                  fresh entropy on every workload.
        """
        self.workload_config = dict(workload_config or {})
        self.seed = seed

    def create_kernel(self, algorithm: Algorithm) -> Kernel:
        return KERNEL_CLASSES[parse_algorithm(algorithm)]()

    def create_workload(self, algorithm: Algorithm, params: Optional[Mapping[str, Any]] = None) -> WorkloadSpec:
        """Build a new, validated workload; ``params`` override the config block."""
        algorithm = parse_algorithm(algorithm)
        merged: Dict[str, Any] = dict(self.workload_config.get(algorithm.value, {}))
        merged.update(params or {})

        try:
            if algorithm is Algorithm.MATRIX_MULTIPLY:
                return self._matrix_workload(merged)
            if algorithm is Algorithm.MANDELBROT:
                width = merged["width"]
                # 4:3 raster unless a height is given
                height = merged.get("height", int(width * 0.75) if isinstance(width, int) else width)
                return MandelbrotWorkload(
                    width=width,
                    height=height,
                    xmin=merged.get("xmin", -2.5),
                    xmax=merged.get("xmax", 1.5),
                    ymin=merged.get("ymin", -1.5),
                    ymax=merged.get("ymax", 1.5),
                    max_iter=merged.get("max_iter", 150),
                )
            if algorithm is Algorithm.HASH_DIFFUSION:
                data = merged.get("data", "")
                repeat = merged.get("repeat", 1)
                if isinstance(repeat, bool) or not isinstance(repeat, int) or repeat < 0:
                    raise InvalidWorkload(f"repeat must be an integer >= 0, got {repeat!r}")
                if isinstance(data, str):
                    data = data * repeat
                return HashWorkload(data=data, iterations=merged["iterations"])
            return RayTraceWorkload(
                width=merged["width"], height=merged["height"], samples=merged.get("samples", 1)
            )
        except KeyError as exc:
            raise InvalidWorkload(f"{algorithm.value}: missing parameter {exc}") from exc

    def _matrix_workload(self, params: Dict[str, Any]) -> MatrixWorkload:
        size = params["size"]
        matrix_a = params.get("matrix_a")
        matrix_b = params.get("matrix_b")
        if matrix_a is None or matrix_b is None:
            if isinstance(size, bool) or not isinstance(size, int) or size < 1:
                raise InvalidWorkload(f"size must be a positive integer, got {size!r}")
            rng = np.random.default_rng(self.seed)
            if matrix_a is None:
                matrix_a = rng.random(size * size)
            if matrix_b is None:
                matrix_b = rng.random(size * size)
        return MatrixWorkload(size=size, matrix_a=matrix_a, matrix_b=matrix_b)

    def get_all_algorithms(self) -> List[Dict[str, Any]]:
        """List every algorithm with its kernel metadata."""
        return [self.create_kernel(algorithm).get_info() for algorithm in Algorithm]
