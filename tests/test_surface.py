"""Tests for the twelve public benchmark callables."""

import numpy as np
import pytest

from crossbench import surface
from crossbench.errors import InvalidWorkload, NotReady
from crossbench.kernels.base import Algorithm, Variant
from crossbench.runtime.handle import RuntimeHandle


class TestSurface:
    def test_exactly_three_callables_per_algorithm(self) -> None:
        assert len(surface.CALLABLES) == 12
        for algorithm in Algorithm:
            assert {v for (a, v) in surface.CALLABLES if a is algorithm} == set(Variant)

    def test_matrix_multiply(self, runtime) -> None:
        a, identity = [1, 2, 3, 4], [1, 0, 0, 1]
        assert surface.matrix_multiply_interpreted(a, identity, 2) == [1.0, 2.0, 3.0, 4.0]
        assert surface.matrix_multiply_compiled_single(a, identity, 2, runtime=runtime).tolist() == [1, 2, 3, 4]
        parallel = surface.matrix_multiply_compiled_parallel(a, identity, 2, runtime=runtime, workers=2)
        assert parallel.tolist() == [1, 2, 3, 4]

    def test_mandelbrot(self, runtime) -> None:
        args = (6, 4, -2.5, 1.5, -1.5, 1.5, 20)
        expected = surface.mandelbrot_interpreted(*args)
        assert isinstance(expected, list) and len(expected) == 24
        assert surface.mandelbrot_compiled_single(*args, runtime=runtime).tolist() == expected
        assert surface.mandelbrot_compiled_parallel(*args, runtime=runtime, workers=3).tolist() == expected

    def test_hash_diffusion(self, runtime) -> None:
        expected = surface.hash_diffusion_interpreted("surface", 9)
        assert isinstance(expected, int)
        assert surface.hash_diffusion_compiled_single("surface", 9, runtime=runtime) == expected
        assert surface.hash_diffusion_compiled_parallel("surface", 9, runtime=runtime) == expected

    def test_ray_trace(self, runtime) -> None:
        expected = surface.ray_trace_interpreted(4, 3, 1)
        assert len(expected) == 4 * 3 * 3
        assert np.allclose(surface.ray_trace_compiled_single(4, 3, 1, runtime=runtime), expected)
        assert np.allclose(surface.ray_trace_compiled_parallel(4, 3, 1, runtime=runtime, workers=2), expected)

    def test_compiled_requires_ready_runtime(self) -> None:
        with pytest.raises(NotReady):
            surface.hash_diffusion_compiled_single("x", 1, runtime=RuntimeHandle())

    def test_invalid_workload_surfaces_immediately(self, runtime) -> None:
        with pytest.raises(InvalidWorkload):
            surface.ray_trace_compiled_parallel(0, 3, 1, runtime=runtime, workers=2)
