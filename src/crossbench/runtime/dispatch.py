"""
Typed function table over the closed set {Algorithm x Variant}.

External callers name callables as ``<algorithm><Variant>`` strings
(``mandelbrotCompiledParallel``). Those names are parsed into enum pairs once,
up front, so an unknown name is rejected before anything runs.
"""

from __future__ import annotations

from functools import partial
from typing import Callable, Dict, Iterable, Iterator, Mapping, Tuple

from crossbench.errors import InvalidPayload, MissingVariant
from crossbench.kernels.base import Algorithm, Kernel, Variant
from crossbench.kernels.factory import KERNEL_CLASSES
from crossbench.kernels.workloads import WorkloadSpec
from crossbench.runtime.boundary import BoundaryResult, CompiledBoundary

Key = Tuple[Algorithm, Variant]
Entry = Callable[[WorkloadSpec], BoundaryResult]


def callable_name(algorithm: Algorithm, variant: Variant) -> str:
    """``(MATRIX_MULTIPLY, COMPILED_SINGLE)`` -> ``"matrixMultiplyCompiledSingle"``."""
    name = algorithm.value
    return name[0].lower() + name[1:] + variant.value


_NAMES: Dict[str, Key] = {
    callable_name(algorithm, variant): (algorithm, variant)
    for algorithm in Algorithm
    for variant in Variant
}


def parse_callable_name(name: str) -> Key:
    try:
        return _NAMES[name]
    except KeyError:
        raise ValueError(f"Unknown callable '{name}'. Valid names: {', '.join(sorted(_NAMES))}") from None


def _interpreted_entry(kernel: Kernel, workload: WorkloadSpec) -> BoundaryResult:
    if getattr(workload, "algorithm", None) is not kernel.algorithm:
        raise InvalidPayload(f"{kernel.algorithm.value} cannot run a {type(workload).__name__} payload")
    return BoundaryResult(value=kernel.run_interpreted(workload), partitions=1)


class FunctionTable:
    """Maps each registered (algorithm, variant) pair to its callable."""

    def __init__(self, entries: Mapping[Key, Entry]) -> None:
        self._entries: Dict[Key, Entry] = {}
        for key, entry in entries.items():
            if (
                not isinstance(key, tuple)
                or len(key) != 2
                or not isinstance(key[0], Algorithm)
                or not isinstance(key[1], Variant)
            ):
                raise ValueError(f"Function table keys must be (Algorithm, Variant) pairs, got {key!r}")
            if not callable(entry):
                raise ValueError(f"Entry for {callable_name(*key)} is not callable")
            self._entries[key] = entry

    @classmethod
    def default(cls, boundary: CompiledBoundary) -> "FunctionTable":
        """All twelve callables: interpreted in-process, compiled through ``boundary``."""
        entries: Dict[Key, Entry] = {}
        for algorithm, kernel_cls in KERNEL_CLASSES.items():
            entries[(algorithm, Variant.INTERPRETED)] = partial(_interpreted_entry, kernel_cls())
            for variant in (Variant.COMPILED_SINGLE, Variant.COMPILED_PARALLEL):
                entries[(algorithm, variant)] = partial(boundary.call, algorithm, variant)
        return cls(entries)

    def resolve(self, algorithm: Algorithm, variant: Variant) -> Entry:
        try:
            return self._entries[(algorithm, variant)]
        except KeyError:
            raise MissingVariant(algorithm, variant) from None

    def invoke(self, algorithm: Algorithm, variant: Variant, workload: WorkloadSpec) -> BoundaryResult:
        return self.resolve(algorithm, variant)(workload)

    def without(self, keys: Iterable[Key]) -> "FunctionTable":
        """Copy of this table with ``keys`` unregistered."""
        dropped = set(keys)
        return FunctionTable({k: v for k, v in self._entries.items() if k not in dropped})

    def names(self) -> Iterator[str]:
        return (callable_name(*key) for key in self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def resolve_name(table: FunctionTable, name: str) -> Entry:
    """Look up an external callable name; unknown names fail before any lookup."""
    return table.resolve(*parse_callable_name(name))
