"""Cross-runtime benchmarks: interpreted vs compiled vs compiled-parallel kernels."""

from .errors import (
    BenchmarkError,
    InvalidPayload,
    InvalidWorkload,
    KernelError,
    MissingVariant,
    NotReady,
    PartitionFailure,
)
from .kernels import Algorithm, Variant
from .runtime import RuntimeHandle

__version__ = "0.1.0"

__all__ = [
    'BenchmarkError',
    'InvalidPayload',
    'InvalidWorkload',
    'KernelError',
    'MissingVariant',
    'NotReady',
    'PartitionFailure',
    'Algorithm',
    'Variant',
    'RuntimeHandle',
]
