"""
Shared pytest fixtures for crossbench tests.

Compiling the numba kernels takes a few seconds, so one initialised
RuntimeHandle is shared by the whole session.
"""

import numpy as np
import pytest

from crossbench.kernels.workloads import HashWorkload, MandelbrotWorkload, MatrixWorkload, RayTraceWorkload
from crossbench.runtime.boundary import CompiledBoundary
from crossbench.runtime.handle import RuntimeHandle


@pytest.fixture(scope="session")
def runtime() -> RuntimeHandle:
    return RuntimeHandle().initialize()


@pytest.fixture()
def boundary(runtime: RuntimeHandle) -> CompiledBoundary:
    return CompiledBoundary(runtime, workers=3)


@pytest.fixture()
def small_workloads():
    """One small workload per algorithm, with sizes that do not divide evenly by 3."""
    rng = np.random.default_rng(7)
    return [
        MatrixWorkload(size=7, matrix_a=rng.random(49), matrix_b=rng.random(49)),
        MandelbrotWorkload(width=13, height=10, xmin=-2.5, xmax=1.5, ymin=-1.5, ymax=1.5, max_iter=60),
        HashWorkload(data="The quick brown fox jumps over the lazy dog. ", iterations=11),
        RayTraceWorkload(width=9, height=7, samples=2),
    ]


@pytest.fixture()
def quiet_config():
    """Harness settings small enough to run the whole suite in a test."""
    return {
        "experiment_params": {"seed": 1},
        "harness": {
            "iterations": 2,
            "warmup_iterations": 1,
            "yield_between_iterations_sec": 0,
            "verify_outputs": True,
        },
        "parallelism": {
            "workers": 3,
            "measurement": {"collect_cpu_percent": False},
        },
        "workloads": {
            "MatrixMultiply": {"size": 6},
            "Mandelbrot": {"width": 12, "height": 9, "max_iter": 40},
            "HashDiffusion": {"data": "abc", "repeat": 4, "iterations": 10},
            "RayTrace": {"width": 8, "height": 6, "samples": 1},
        },
    }


@pytest.fixture()
def silent():
    return lambda msg: None
