"""
Benchmark harness.

Drives every configured algorithm through the three execution variants,
strictly one algorithm, one variant and one iteration at a time:

    Setup -> WarmUp -> TimedRun(i=1..N) -> Aggregate -> Reported

Nothing that goes wrong inside a single test stops the suite. Missing
callables, an unready compiled runtime and invalid workloads become
zero-result entries; a raising iteration becomes a zero-time sample.
"""

import argparse
import json
import sys
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from crossbench.errors import InvalidWorkload, MissingVariant, NotReady
from crossbench.kernels.base import BASELINE, Algorithm, Variant
from crossbench.kernels.factory import KernelFactory, parse_algorithm, parse_variant
from crossbench.kernels.workloads import WorkloadSpec
from crossbench.runtime.boundary import CompiledBoundary
from crossbench.runtime.dispatch import FunctionTable
from crossbench.runtime.handle import RuntimeHandle, RuntimeState
from crossbench.utils.config import load_config
from crossbench.utils.console import banner, format_duration, progress_bar
from crossbench.utils.cpu import CPUSampler, default_worker_count
from crossbench.utils.timer import HighPrecisionTimer
from .report import ComparisonResult, SuiteReport, TimingSample, VariantSummary

Logger = Callable[[str], None]


class BenchmarkHarness:
    """
    Sequential benchmark driver.

    The compiled runtime is an injected ``RuntimeHandle``; the harness only
    initialises it when it is still UNINITIALIZED and otherwise works with
    whatever state it finds. The function table defaults to all twelve
    callables routed through a ``CompiledBoundary`` sized from the config.
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        runtime: Optional[RuntimeHandle] = None,
        table: Optional[FunctionTable] = None,
        logger: Logger = print,
    ):
        self.config = load_config(config_path, overrides=config)
        self.log = logger

        harness_config = self.config['harness']
        self.iterations = harness_config['iterations']
        self.warmup_iterations = harness_config['warmup_iterations']
        self.pause = harness_config['yield_between_iterations_sec']
        self.verify_outputs = harness_config['verify_outputs']

        parallel_config = self.config['parallelism']
        self.workers = parallel_config['workers'] or default_worker_count()
        self.measurement_flags = parallel_config.get('measurement', {})

        self.algorithms: List[Algorithm] = [parse_algorithm(name) for name in self.config['algorithms']]
        # Baseline first so compiled outputs can be checked against it
        requested = {parse_variant(name) for name in self.config['variants']}
        self.variants: List[Variant] = [variant for variant in Variant if variant in requested]

        self.factory = KernelFactory(self.config['workloads'], seed=self.config['experiment_params']['seed'])
        self.runtime = runtime if runtime is not None else RuntimeHandle(logger=self.log)
        if table is None:
            table = FunctionTable.default(CompiledBoundary(self.runtime, self.workers, logger=self.log))
        self.table = table

    def run_all(self) -> SuiteReport:
        """Run every configured algorithm and return the comparison report."""
        self.log(banner("CROSS-RUNTIME BENCHMARK"))
        self.log(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        self.log(f"Algorithms: {', '.join(a.value for a in self.algorithms)}")
        self.log(f"Variants: {', '.join(v.value for v in self.variants)}")
        self.log(f"Iterations: {self.iterations} (+{self.warmup_iterations} warm-up) | Workers: {self.workers}")
        self.log("=" * 80)

        self._prepare_runtime()

        start_time = time.time()
        comparisons: List[ComparisonResult] = []
        total = len(self.algorithms)
        for i, algorithm in enumerate(self.algorithms, 1):
            self.log(f"\n[{i}/{total}] {algorithm.value}")
            comparisons.append(self.run_algorithm(algorithm))

            elapsed = time.time() - start_time
            remaining = elapsed / i * (total - i)
            self.log(f"  Progress: {progress_bar(i, total, width=30)}")
            self.log(f"  Elapsed: {format_duration(elapsed)} | Remaining: ~{format_duration(remaining)}")

        report = SuiteReport(comparisons, workers=self.workers, iterations=self.iterations)
        self.log("")
        self.log(banner("RESULTS"))
        self.log(report.render_table())
        self.log("=" * 80)
        self.log(f"Total time: {format_duration(time.time() - start_time)}")
        return report

    def _prepare_runtime(self) -> None:
        if not any(variant.is_compiled for variant in self.variants):
            return
        if self.runtime.state is RuntimeState.UNINITIALIZED:
            self.log("Compiling kernels...")
            try:
                self.runtime.initialize()
                self.log(f"  ✓ Compiled runtime ready in {self.runtime.compile_seconds:.2f}s")
            except NotReady as exc:
                if self.runtime.state is RuntimeState.INITIALIZING:
                    # Another caller got there first
                    self.log("Waiting for compiled runtime...")
                    self.runtime.wait()
                else:
                    self.log(f"  ✗ {exc}")
        elif self.runtime.state is RuntimeState.INITIALIZING:
            self.log("Waiting for compiled runtime...")
            self.runtime.wait()

    def run_algorithm(self, algorithm: Algorithm) -> ComparisonResult:
        """Setup once, then run each variant against the same workload."""
        kernel = self.factory.create_kernel(algorithm)
        try:
            workload = self.factory.create_workload(algorithm)
        except InvalidWorkload as exc:
            self.log(f"  ✗ Invalid workload: {exc}")
            return ComparisonResult(
                algorithm=algorithm,
                summaries={v: VariantSummary.empty(algorithm, v, f"InvalidWorkload: {exc}") for v in self.variants},
            )

        self.log(f"  Workload: {workload.describe()}")
        summaries: Dict[Variant, VariantSummary] = {}
        reference: Any = None
        for variant in self.variants:
            summary, output = self.run_variant(algorithm, variant, workload)
            if variant is BASELINE:
                reference = output
            elif self.verify_outputs and reference is not None and output is not None:
                summary.output_matches = kernel.outputs_match(reference, output)
            summaries[variant] = summary
            self._log_summary(summary)

        comparison = ComparisonResult(algorithm=algorithm, summaries=summaries)
        for variant in self.variants:
            ratio = comparison.speedup(variant)
            if variant is not BASELINE and ratio is not None:
                self.log(f"    {variant.value} speedup: {ratio:.2f}x")
        return comparison

    def run_variant(self, algorithm: Algorithm, variant: Variant, workload: WorkloadSpec):
        """
        Warm up, then time exactly ``iterations`` runs of one variant.

        Returns the summary and the first output produced (warm-up or timed),
        or None when no run succeeded.
        """
        try:
            entry = self.table.resolve(algorithm, variant)
            if variant.is_compiled:
                self.runtime.require_ready()
        except (MissingVariant, NotReady) as exc:
            return VariantSummary.empty(algorithm, variant, f"{type(exc).__name__}: {exc}"), None

        output = None
        for _ in range(self.warmup_iterations):
            try:
                result = entry(workload)
                if output is None:
                    output = result.value
            except Exception as exc:  # pylint: disable=broad-except
                self.log(f"    ⚠ {variant.value} warm-up failed: {exc}")

        sampler = CPUSampler(
            enabled=self.measurement_flags.get('collect_cpu_percent', False),
            interval=self.measurement_flags.get('sample_interval_sec', 0.25),
        )
        samples: List[TimingSample] = []
        sampler.start()
        try:
            for i in range(1, self.iterations + 1):
                sample, value = self._timed_run(algorithm, variant, entry, workload, i)
                samples.append(sample)
                if output is None and sample.error is None:
                    output = value
                if self.pause and i < self.iterations:
                    time.sleep(self.pause)
        finally:
            sampler.stop()

        summary = VariantSummary(
            algorithm=algorithm,
            variant=variant,
            samples=samples,
            avg_cpu_percent=sampler.average(),
        )
        return summary, output

    def _timed_run(self, algorithm: Algorithm, variant: Variant, entry, workload: WorkloadSpec,
                   iteration: int):
        timer = HighPrecisionTimer()
        timer.start()
        try:
            result = entry(workload)
        except Exception as exc:  # pylint: disable=broad-except
            self.log(f"    ✗ {variant.value} iteration {iteration} failed: {exc}")
            return TimingSample(algorithm, variant, iteration, 0.0, error=f"{type(exc).__name__}: {exc}"), None
        timer.stop()

        for failure in result.failures:
            self.log(f"    ⚠ {variant.value} iteration {iteration}: {failure}")
        sample = TimingSample(
            algorithm, variant, iteration, timer.elapsed_ms, partition_failures=len(result.failures)
        )
        return sample, result.value

    def _log_summary(self, summary: VariantSummary) -> None:
        if summary.error and not summary.samples:
            self.log(f"    ✗ {summary.variant.value:<18} {summary.error}")
            return
        stats = summary.stats
        line = (
            f"    {'✓' if not summary.anomalies else '⚠'} {summary.variant.value:<18} "
            f"{summary.mean_ms:10.3f}±{stats['std']:.3f} ms"
        )
        if summary.output_matches is not None:
            line += " (output ✓)" if summary.output_matches else " (output ✗)"
        if summary.anomalies:
            line += f" [{summary.anomalies} anomalies]"
        self.log(line)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run cross-runtime kernel benchmarks")
    parser.add_argument(
        "--config",
        default=None,
        help="Optional path to benchmark configuration JSON",
    )
    parser.add_argument("--iterations", type=int, default=None, help="Timed iterations per variant")
    parser.add_argument("--workers", type=int, default=None, help="Worker threads for the parallel variant")
    parser.add_argument(
        "--algorithms",
        nargs="+",
        default=None,
        choices=[a.value for a in Algorithm],
        help="Subset of algorithms to run",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON on stdout")
    args = parser.parse_args(argv)

    overrides: Dict[str, Any] = {}
    if args.iterations is not None:
        overrides.setdefault('harness', {})['iterations'] = args.iterations
    if args.workers is not None:
        overrides.setdefault('parallelism', {})['workers'] = args.workers
    if args.algorithms:
        overrides['algorithms'] = args.algorithms

    logger: Logger = (lambda msg: None) if args.json else print
    try:
        harness = BenchmarkHarness(config_path=args.config, config=overrides, logger=logger)
    except InvalidWorkload as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(2)

    report = harness.run_all()
    if args.json:
        print(json.dumps(report.to_dict(), indent=2))


if __name__ == "__main__":
    main()
