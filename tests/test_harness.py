"""Tests for the benchmark harness state flow and error handling."""

import json
import threading
import time

import pytest

from crossbench.errors import NotReady
from crossbench.benchmarks.harness import BenchmarkHarness, main
from crossbench.kernels.adapters import HashDiffusionKernel, MandelbrotKernel
from crossbench.kernels.base import Algorithm, Variant
from crossbench.runtime.boundary import BoundaryResult, CompiledBoundary
from crossbench.runtime.dispatch import FunctionTable
from crossbench.runtime.handle import RuntimeHandle, RuntimeState


class FailingWarmUp(HashDiffusionKernel):
    def warm_up(self) -> None:
        raise RuntimeError("no compiler")


class LowerHalfFails(MandelbrotKernel):
    def run_range(self, inputs, view, workload, start, end):
        if start >= workload.height // 2:
            raise RuntimeError("lower half")
        super().run_range(inputs, view, workload, start, end)


class BlockingWarmUp(HashDiffusionKernel):
    def __init__(self, release: threading.Event):
        self.release = release

    def warm_up(self) -> None:
        self.release.wait(5)
        super().warm_up()


class RacedHandle(RuntimeHandle):
    """Another thread starts initialising between the harness's state check and its call."""

    def __init__(self):
        self.release = threading.Event()
        super().__init__(kernels=[BlockingWarmUp(self.release)])
        self.racer = None

    def initialize(self):
        if self.racer is None:
            self.racer = threading.Thread(target=RuntimeHandle.initialize, args=(self,), daemon=True)
            self.racer.start()
            while self.state is RuntimeState.UNINITIALIZED:
                time.sleep(0.001)
            threading.Timer(0.05, self.release.set).start()
        return super().initialize()


def only(config, *algorithms):
    config["algorithms"] = [a.value for a in algorithms]
    return config


class TestRunAll:
    def test_full_suite(self, quiet_config, runtime, silent) -> None:
        report = BenchmarkHarness(config=quiet_config, runtime=runtime, logger=silent).run_all()

        rows = report.rows()
        assert len(rows) == 12
        assert [r["algorithm"] for r in rows[::3]] == [a.value for a in Algorithm]
        for comparison in report.comparisons:
            for variant, summary in comparison.summaries.items():
                assert summary.error is None
                assert [s.iteration for s in summary.samples] == [1, 2]
                assert all(s.elapsed_ms > 0 for s in summary.samples)
                assert summary.anomalies == 0
                if variant.is_compiled:
                    assert summary.output_matches is True
            assert comparison.speedup(Variant.INTERPRETED) == pytest.approx(1.0)
            assert comparison.speedup(Variant.COMPILED_PARALLEL) is not None

    def test_initializes_uninitialized_runtime(self, quiet_config, silent) -> None:
        handle = RuntimeHandle(kernels=[HashDiffusionKernel()])
        harness = BenchmarkHarness(
            config=only(quiet_config, Algorithm.HASH_DIFFUSION), runtime=handle, logger=silent
        )
        harness.run_all()
        assert handle.state is RuntimeState.READY

    def test_waits_when_initialization_races(self, quiet_config) -> None:
        lines = []
        handle = RacedHandle()
        report = BenchmarkHarness(
            config=only(quiet_config, Algorithm.HASH_DIFFUSION), runtime=handle, logger=lines.append
        ).run_all()

        assert handle.state is RuntimeState.READY
        assert "Waiting for compiled runtime..." in lines
        for summary in report[Algorithm.HASH_DIFFUSION].summaries.values():
            assert summary.error is None
            assert len(summary.samples) == 2

    def test_worker_count_comes_from_config(self, quiet_config, runtime, silent) -> None:
        quiet_config["parallelism"]["workers"] = 5
        harness = BenchmarkHarness(config=quiet_config, runtime=runtime, logger=silent)
        assert harness.workers == 5

    def test_console_output(self, quiet_config, runtime) -> None:
        lines = []
        BenchmarkHarness(
            config=only(quiet_config, Algorithm.MANDELBROT), runtime=runtime, logger=lines.append
        ).run_all()
        text = "\n".join(lines)
        assert "CROSS-RUNTIME BENCHMARK" in text
        assert "Progress:" in text
        assert "CompiledParallel" in text


class TestErrorHandling:
    def test_missing_variant_is_zero_result(self, quiet_config, runtime, silent) -> None:
        key = (Algorithm.RAY_TRACE, Variant.COMPILED_SINGLE)
        table = FunctionTable.default(CompiledBoundary(runtime, 3)).without([key])
        report = BenchmarkHarness(config=quiet_config, runtime=runtime, table=table, logger=silent).run_all()

        summary = report[Algorithm.RAY_TRACE].summaries[Variant.COMPILED_SINGLE]
        assert summary.error.startswith("MissingVariant")
        assert summary.samples == []
        assert summary.mean_ms == 0.0
        assert report[Algorithm.RAY_TRACE].speedup(Variant.COMPILED_SINGLE) is None
        # The rest of the suite still ran.
        assert report[Algorithm.RAY_TRACE].summaries[Variant.COMPILED_PARALLEL].error is None
        assert len(report.rows()) == 12

    def test_not_ready_runtime(self, quiet_config, silent) -> None:
        handle = RuntimeHandle(kernels=[FailingWarmUp()])
        report = BenchmarkHarness(
            config=only(quiet_config, Algorithm.HASH_DIFFUSION), runtime=handle, logger=silent
        ).run_all()

        comparison = report[Algorithm.HASH_DIFFUSION]
        assert handle.state is RuntimeState.FAILED
        assert comparison.summaries[Variant.INTERPRETED].error is None
        for variant in (Variant.COMPILED_SINGLE, Variant.COMPILED_PARALLEL):
            assert comparison.summaries[variant].error.startswith("NotReady")
            assert comparison.speedup(variant) is None

    def test_failing_iteration_is_zero_time_sample(self, quiet_config, runtime, boundary, silent) -> None:
        calls = []

        def flaky(workload):
            calls.append(workload)
            # Call 1 is the warm-up, call 2 the first timed iteration.
            if len(calls) == 2:
                raise RuntimeError("transient")
            return boundary.call(Algorithm.HASH_DIFFUSION, Variant.COMPILED_SINGLE, workload)

        baseline = FunctionTable.default(boundary).resolve(Algorithm.HASH_DIFFUSION, Variant.INTERPRETED)
        table = FunctionTable({
            (Algorithm.HASH_DIFFUSION, Variant.INTERPRETED): baseline,
            (Algorithm.HASH_DIFFUSION, Variant.COMPILED_SINGLE): flaky,
        })
        quiet_config["variants"] = ["Interpreted", "CompiledSingle"]
        report = BenchmarkHarness(
            config=only(quiet_config, Algorithm.HASH_DIFFUSION), runtime=runtime, table=table, logger=silent
        ).run_all()

        summary = report[Algorithm.HASH_DIFFUSION].summaries[Variant.COMPILED_SINGLE]
        first, second = summary.samples
        assert first.elapsed_ms == 0.0
        assert "transient" in first.error
        assert second.error is None and second.elapsed_ms > 0
        assert summary.mean_ms == pytest.approx(second.elapsed_ms / 2)
        assert summary.anomalies == 1
        assert summary.output_matches is True

    def test_invalid_workload_reports_every_variant(self, quiet_config, runtime, silent) -> None:
        quiet_config["workloads"]["RayTrace"]["width"] = 0
        report = BenchmarkHarness(config=quiet_config, runtime=runtime, logger=silent).run_all()

        for summary in report[Algorithm.RAY_TRACE].summaries.values():
            assert summary.error.startswith("InvalidWorkload")
            assert summary.samples == []
        assert report[Algorithm.MANDELBROT].summaries[Variant.COMPILED_PARALLEL].error is None

    def test_malformed_workload_values_do_not_abort_suite(self, quiet_config, runtime, silent) -> None:
        quiet_config["workloads"]["HashDiffusion"]["repeat"] = 2.5
        quiet_config["workloads"]["MatrixMultiply"] = {
            "size": 2,
            "matrix_a": ["a", "b", "c", "d"],
            "matrix_b": [1.0, 0.0, 0.0, 1.0],
        }
        report = BenchmarkHarness(config=quiet_config, runtime=runtime, logger=silent).run_all()

        assert len(report.rows()) == 12
        for algorithm in (Algorithm.HASH_DIFFUSION, Algorithm.MATRIX_MULTIPLY):
            for summary in report[algorithm].summaries.values():
                assert summary.error.startswith("InvalidWorkload")
                assert summary.samples == []
        for algorithm in (Algorithm.MANDELBROT, Algorithm.RAY_TRACE):
            for summary in report[algorithm].summaries.values():
                assert summary.error is None

    def test_partition_failures_are_anomalies(self, quiet_config, runtime, silent) -> None:
        boundary = CompiledBoundary(runtime, 3, kernels={Algorithm.MANDELBROT: LowerHalfFails()})
        report = BenchmarkHarness(
            config=only(quiet_config, Algorithm.MANDELBROT),
            runtime=runtime,
            table=FunctionTable.default(boundary),
            logger=silent,
        ).run_all()

        parallel = report[Algorithm.MANDELBROT].summaries[Variant.COMPILED_PARALLEL]
        assert all(s.partition_failures > 0 for s in parallel.samples)
        assert parallel.anomalies > 0
        assert parallel.output_matches is False

    def test_verification_can_be_disabled(self, quiet_config, runtime, silent) -> None:
        quiet_config["harness"]["verify_outputs"] = False
        report = BenchmarkHarness(
            config=only(quiet_config, Algorithm.MATRIX_MULTIPLY), runtime=runtime, logger=silent
        ).run_all()
        for summary in report[Algorithm.MATRIX_MULTIPLY].summaries.values():
            assert summary.output_matches is None

    def test_run_variant_does_not_start_when_not_ready(self, quiet_config, silent) -> None:
        harness = BenchmarkHarness(config=quiet_config, runtime=RuntimeHandle(), logger=silent)
        workload = harness.factory.create_workload(Algorithm.HASH_DIFFUSION)
        summary, output = harness.run_variant(Algorithm.HASH_DIFFUSION, Variant.COMPILED_SINGLE, workload)
        assert output is None
        assert summary.error.startswith(NotReady.__name__)


class TestMain:
    def test_json_output(self, tmp_path, quiet_config, capsys) -> None:
        config_file = tmp_path / "bench.json"
        config_file.write_text(json.dumps(quiet_config), encoding="utf-8")

        main(["--config", str(config_file), "--iterations", "1", "--workers", "2",
              "--algorithms", "HashDiffusion", "--json"])

        report = json.loads(capsys.readouterr().out)
        assert report["workers"] == 2
        assert report["iterations"] == 1
        assert [r["variant"] for r in report["rows"]] == ["Interpreted", "CompiledSingle", "CompiledParallel"]
        assert report["rows"][0]["speedup_vs_baseline"] == pytest.approx(1.0)

    def test_invalid_config_exits(self, tmp_path, capsys) -> None:
        with pytest.raises(SystemExit) as info:
            main(["--iterations", "0"])
        assert info.value.code == 2
        assert "iterations" in capsys.readouterr().err
