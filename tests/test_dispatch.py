"""Tests for the typed {Algorithm x Variant} function table."""

import pytest

from crossbench.errors import MissingVariant
from crossbench.kernels.base import Algorithm, Variant
from crossbench.kernels.workloads import HashWorkload
from crossbench.runtime.dispatch import FunctionTable, callable_name, parse_callable_name, resolve_name


class TestCallableNames:
    def test_external_names(self) -> None:
        assert callable_name(Algorithm.MATRIX_MULTIPLY, Variant.COMPILED_PARALLEL) == "matrixMultiplyCompiledParallel"
        assert callable_name(Algorithm.RAY_TRACE, Variant.INTERPRETED) == "rayTraceInterpreted"

    def test_parse_round_trips_all_twelve(self) -> None:
        for algorithm in Algorithm:
            for variant in Variant:
                assert parse_callable_name(callable_name(algorithm, variant)) == (algorithm, variant)

    @pytest.mark.parametrize("name", ["quicksortInterpreted", "mandelbrotCompiled", "MandelbrotInterpreted", ""])
    def test_unknown_names_fail_at_parse_time(self, name: str) -> None:
        with pytest.raises(ValueError):
            parse_callable_name(name)


class TestFunctionTable:
    def test_default_registers_twelve(self, boundary) -> None:
        table = FunctionTable.default(boundary)
        assert len(table) == 12
        assert set(table.names()) == {callable_name(a, v) for a in Algorithm for v in Variant}

    def test_rejects_non_enum_keys(self) -> None:
        with pytest.raises(ValueError):
            FunctionTable({("Mandelbrot", "Interpreted"): lambda w: None})

    def test_rejects_non_callable_entries(self) -> None:
        with pytest.raises(ValueError):
            FunctionTable({(Algorithm.MANDELBROT, Variant.INTERPRETED): 42})

    def test_missing_variant(self, boundary) -> None:
        key = (Algorithm.HASH_DIFFUSION, Variant.COMPILED_PARALLEL)
        table = FunctionTable.default(boundary).without([key])
        assert key not in table
        with pytest.raises(MissingVariant) as info:
            table.resolve(*key)
        assert info.value.algorithm is Algorithm.HASH_DIFFUSION
        assert info.value.variant is Variant.COMPILED_PARALLEL

    def test_interpreted_and_compiled_agree(self, boundary) -> None:
        table = FunctionTable.default(boundary)
        workload = HashWorkload(data="dispatch", iterations=6)
        values = {v: table.invoke(Algorithm.HASH_DIFFUSION, v, workload).value for v in Variant}
        assert len(set(values.values())) == 1

    def test_resolve_name(self, boundary) -> None:
        table = FunctionTable.default(boundary)
        entry = resolve_name(table, "hashDiffusionInterpreted")
        assert entry(HashWorkload(data="", iterations=0)).value == 0x12345678
