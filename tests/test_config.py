"""Tests for configuration loading and validation."""

import json

import pytest

from crossbench.errors import InvalidWorkload
from crossbench.utils.config import DEFAULT_CONFIG, deep_merge, load_config


class TestLoadConfig:
    def test_file_merges_over_defaults(self, tmp_path) -> None:
        path = tmp_path / "bench.json"
        path.write_text(json.dumps({"harness": {"iterations": 9}, "workloads": {"RayTrace": {"samples": 3}}}))
        config = load_config(str(path))
        assert config["harness"]["iterations"] == 9
        assert config["harness"]["warmup_iterations"] == DEFAULT_CONFIG["harness"]["warmup_iterations"]
        assert config["workloads"]["RayTrace"] == {"width": 200, "height": 150, "samples": 3}

    def test_overrides_win(self, tmp_path) -> None:
        path = tmp_path / "bench.json"
        path.write_text(json.dumps({"parallelism": {"workers": 2}}))
        config = load_config(str(path), overrides={"parallelism": {"workers": 6}})
        assert config["parallelism"]["workers"] == 6

    def test_project_config_is_valid(self) -> None:
        config = load_config()
        assert config["algorithms"] == ["MatrixMultiply", "Mandelbrot", "HashDiffusion", "RayTrace"]

    def test_missing_file_raises(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.json"))

    def test_defaults_are_not_mutated(self) -> None:
        load_config(overrides={"harness": {"iterations": 99}})
        assert DEFAULT_CONFIG["harness"]["iterations"] == 5

    @pytest.mark.parametrize("overrides", [
        {"harness": {"iterations": 0}},
        {"harness": {"warmup_iterations": -1}},
        {"harness": {"yield_between_iterations_sec": -0.5}},
        {"parallelism": {"workers": 0}},
        {"parallelism": {"workers": "four"}},
        {"algorithms": ["Quicksort"]},
        {"variants": ["Turbo"]},
    ])
    def test_rejects_invalid_values(self, overrides) -> None:
        with pytest.raises(InvalidWorkload):
            load_config(overrides=overrides)


class TestDeepMerge:
    def test_nested(self) -> None:
        merged = deep_merge({"a": {"b": 1, "c": 2}, "d": [1]}, {"a": {"c": 3}, "d": [2, 3]})
        assert merged == {"a": {"b": 1, "c": 3}, "d": [2, 3]}
