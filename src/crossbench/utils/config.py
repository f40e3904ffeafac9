"""
Benchmark configuration.

``config/benchmark.json`` at the project root is deep-merged over the
built-in defaults below. Harness numbers are validated at load time so a bad
file fails before any benchmark starts.
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from crossbench.errors import InvalidWorkload
from crossbench.kernels.base import Algorithm, Variant

project_root = Path(__file__).parent.parent.parent.parent
DEFAULT_CONFIG_PATH = project_root / "config" / "benchmark.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    "experiment_params": {
        "seed": 42,
    },
    "harness": {
        "iterations": 5,
        "warmup_iterations": 1,
        "yield_between_iterations_sec": 0.01,
        "verify_outputs": True,
    },
    "parallelism": {
        "workers": None,
        "measurement": {
            "collect_cpu_percent": False,
            "sample_interval_sec": 0.25,
        },
    },
    "algorithms": [algorithm.value for algorithm in Algorithm],
    "variants": [variant.value for variant in Variant],
    "workloads": {
        "MatrixMultiply": {"size": 128},
        "Mandelbrot": {
            "width": 320,
            "xmin": -2.5,
            "xmax": 1.5,
            "ymin": -1.5,
            "ymax": 1.5,
            "max_iter": 150,
        },
        "HashDiffusion": {
            "data": "The quick brown fox jumps over the lazy dog. ",
            "repeat": 10,
            "iterations": 2000,
        },
        "RayTrace": {"width": 200, "height": 150, "samples": 10},
    },
}


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Return ``base`` updated recursively with ``override``; inputs are not modified."""
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _check_int(section: str, name: str, value: Any, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise InvalidWorkload(f"{section}.{name} must be an integer >= {minimum}, got {value!r}")


def validate_config(config: Mapping[str, Any]) -> None:
    harness = config["harness"]
    _check_int("harness", "iterations", harness["iterations"], 1)
    _check_int("harness", "warmup_iterations", harness["warmup_iterations"], 0)
    pause = harness["yield_between_iterations_sec"]
    if isinstance(pause, bool) or not isinstance(pause, (int, float)) or pause < 0:
        raise InvalidWorkload(f"harness.yield_between_iterations_sec must be >= 0, got {pause!r}")

    workers = config["parallelism"]["workers"]
    if workers is not None:
        _check_int("parallelism", "workers", workers, 1)

    known_algorithms = {a.value for a in Algorithm} | {a.name for a in Algorithm}
    for name in config["algorithms"]:
        if name not in known_algorithms:
            raise InvalidWorkload(f"Unknown algorithm in config: {name!r}")
    known_variants = {v.value for v in Variant} | {v.name for v in Variant}
    for name in config["variants"]:
        if name not in known_variants:
            raise InvalidWorkload(f"Unknown variant in config: {name!r}")


def load_config(
    config_path: Optional[str] = None, overrides: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """
    Load and validate the benchmark configuration.

    Args:
        config_path: JSON file to merge over the defaults. When omitted, the
                     project's ``config/benchmark.json`` is used if present.
        overrides: Extra settings merged last (CLI flags, tests).
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is None and DEFAULT_CONFIG_PATH.exists():
        config_path = str(DEFAULT_CONFIG_PATH)
    if config_path is not None:
        with open(config_path, "r", encoding="utf-8") as fh:
            config = deep_merge(config, json.load(fh))
    if overrides:
        config = deep_merge(config, overrides)
    validate_config(config)
    return config
