from .harness import BenchmarkHarness, main
from .report import ComparisonResult, SuiteReport, TimingSample, VariantSummary, speedup

__all__ = [
    'BenchmarkHarness',
    'main',
    'ComparisonResult',
    'SuiteReport',
    'TimingSample',
    'VariantSummary',
    'speedup',
]
