from .base import BASELINE, Algorithm, Kernel, Variant
from .adapters import HashDiffusionKernel, MandelbrotKernel, MatrixMultiplyKernel, RayTraceKernel
from .factory import KernelFactory, parse_algorithm, parse_variant
from .workloads import (
    HashWorkload,
    MandelbrotWorkload,
    MatrixWorkload,
    RayTraceWorkload,
    WorkloadSpec,
)

__all__ = [
    'Algorithm',
    'Variant',
    'BASELINE',
    'Kernel',
    'MatrixMultiplyKernel',
    'MandelbrotKernel',
    'HashDiffusionKernel',
    'RayTraceKernel',
    'KernelFactory',
    'parse_algorithm',
    'parse_variant',
    'MatrixWorkload',
    'MandelbrotWorkload',
    'HashWorkload',
    'RayTraceWorkload',
    'WorkloadSpec',
]
