"""
Timing samples, per-variant summaries and the cross-variant comparison.

Speedups are always taken against the interpreted baseline:
``speedup(variant) = mean(baseline) / mean(variant)``. A ratio above 1 means
the variant is faster. When either mean is zero (nothing ran, or every
iteration failed) the ratio is undefined and reported as ``None``.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from crossbench.kernels.base import BASELINE, Algorithm, Variant
from crossbench.utils.stats import StatisticsCollector


@dataclass(frozen=True)
class TimingSample:
    algorithm: Algorithm
    variant: Variant
    iteration: int
    elapsed_ms: float
    error: Optional[str] = None
    partition_failures: int = 0

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class VariantSummary:
    """Everything recorded for one (algorithm, variant) pair."""

    algorithm: Algorithm
    variant: Variant
    samples: List[TimingSample] = field(default_factory=list)
    error: Optional[str] = None
    output_matches: Optional[bool] = None
    avg_cpu_percent: Optional[float] = None

    @classmethod
    def empty(cls, algorithm: Algorithm, variant: Variant, error: str) -> "VariantSummary":
        """Zero-result entry for a variant that could not run at all."""
        return cls(algorithm=algorithm, variant=variant, error=error)

    @property
    def mean_ms(self) -> float:
        # Failed iterations stay in as zero-time samples
        return StatisticsCollector.mean([s.elapsed_ms for s in self.samples])

    @property
    def stats(self) -> Dict[str, Any]:
        return StatisticsCollector.compute_stats([s.elapsed_ms for s in self.samples])

    @property
    def failed_iterations(self) -> int:
        return sum(1 for s in self.samples if s.failed)

    @property
    def anomalies(self) -> int:
        """Failed iterations plus failed partitions across all samples."""
        return self.failed_iterations + sum(s.partition_failures for s in self.samples)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'algorithm': self.algorithm.value,
            'variant': self.variant.value,
            'mean_time_ms': self.mean_ms,
            'stats': self.stats,
            'samples_ms': [s.elapsed_ms for s in self.samples],
            'error': self.error,
            'anomalies': self.anomalies,
            'output_matches': self.output_matches,
            'avg_cpu_percent': self.avg_cpu_percent,
        }


def speedup(baseline_ms: float, variant_ms: float) -> Optional[float]:
    if baseline_ms <= 0 or variant_ms <= 0:
        return None
    return baseline_ms / variant_ms


@dataclass(frozen=True)
class ComparisonResult:
    """The variants of one algorithm side by side. Read-only once built."""

    algorithm: Algorithm
    summaries: Mapping[Variant, VariantSummary]

    def __post_init__(self) -> None:
        object.__setattr__(self, 'summaries', MappingProxyType(dict(self.summaries)))

    @property
    def baseline(self) -> Optional[VariantSummary]:
        return self.summaries.get(BASELINE)

    def speedup(self, variant: Variant) -> Optional[float]:
        summary = self.summaries.get(variant)
        if summary is None or self.baseline is None:
            return None
        return speedup(self.baseline.mean_ms, summary.mean_ms)

    def rows(self) -> List[Dict[str, Any]]:
        return [
            {
                'algorithm': self.algorithm.value,
                'variant': variant.value,
                'mean_time_ms': summary.mean_ms,
                'speedup_vs_baseline': self.speedup(variant),
            }
            for variant, summary in self.summaries.items()
        ]


def _average(values: List[Optional[float]]) -> Optional[float]:
    present = [v for v in values if v is not None]
    return sum(present) / len(present) if present else None


class SuiteReport:
    """All comparisons of one suite run plus the aggregate summary."""

    def __init__(self, comparisons: List[ComparisonResult], workers: int, iterations: int) -> None:
        self.comparisons = list(comparisons)
        self.workers = workers
        self.iterations = iterations

    def __getitem__(self, algorithm: Algorithm) -> ComparisonResult:
        for comparison in self.comparisons:
            if comparison.algorithm is algorithm:
                return comparison
        raise KeyError(algorithm)

    def rows(self) -> List[Dict[str, Any]]:
        """One ``{algorithm, variant, mean_time_ms, speedup_vs_baseline}`` row per entry."""
        rows: List[Dict[str, Any]] = []
        for comparison in self.comparisons:
            rows.extend(comparison.rows())
        return rows

    def summary(self) -> Dict[str, Any]:
        single = _average([c.speedup(Variant.COMPILED_SINGLE) for c in self.comparisons])
        parallel = _average([c.speedup(Variant.COMPILED_PARALLEL) for c in self.comparisons])

        best: Optional[Dict[str, Any]] = None
        for comparison in self.comparisons:
            for variant in comparison.summaries:
                if variant is BASELINE:
                    continue
                ratio = comparison.speedup(variant)
                if ratio is not None and (best is None or ratio > best['speedup']):
                    best = {
                        'algorithm': comparison.algorithm.value,
                        'variant': variant.value,
                        'speedup': ratio,
                    }

        return {
            'avg_single_speedup': single,
            'avg_parallel_speedup': parallel,
            'parallel_vs_single': parallel / single if single and parallel is not None else None,
            'best_improvement': best,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            'workers': self.workers,
            'iterations': self.iterations,
            'rows': self.rows(),
            'details': [s.to_dict() for c in self.comparisons for s in c.summaries.values()],
            'summary': self.summary(),
        }

    def render_table(self) -> str:
        lines = [
            f"{'Algorithm':<16} {'Variant':<18} {'Mean (ms)':>12} {'Speedup':>9}  Notes",
            "-" * 80,
        ]
        for comparison in self.comparisons:
            for variant, summary in comparison.summaries.items():
                ratio = comparison.speedup(variant)
                ratio_text = f"{ratio:.2f}x" if ratio is not None else "n/a"
                lines.append(
                    f"{comparison.algorithm.value:<16} {variant.value:<18} "
                    f"{summary.mean_ms:>12.3f} {ratio_text:>9}  {_notes(summary)}"
                )

        summary = self.summary()
        lines.append("-" * 80)
        lines.append(f"Average single-thread speedup: {_ratio(summary['avg_single_speedup'])}")
        lines.append(f"Average parallel speedup:      {_ratio(summary['avg_parallel_speedup'])}")
        lines.append(f"Parallel vs single-thread:     {_ratio(summary['parallel_vs_single'])}")
        best = summary['best_improvement']
        if best is not None:
            lines.append(f"Best improvement: {best['algorithm']} {best['variant']} ({best['speedup']:.2f}x)")
        return "\n".join(lines)


def _ratio(value: Optional[float]) -> str:
    return f"{value:.2f}x" if value is not None else "n/a"


def _notes(summary: VariantSummary) -> str:
    notes = []
    if summary.error:
        notes.append(f"✗ {summary.error}")
    if summary.output_matches is True:
        notes.append("✓ output")
    elif summary.output_matches is False:
        notes.append("✗ output mismatch")
    if summary.anomalies:
        notes.append(f"{summary.anomalies} anomalies")
    if summary.avg_cpu_percent is not None:
        notes.append(f"cpu {summary.avg_cpu_percent:.0f}%")
    return ", ".join(notes)
