from typing import Dict, List

import numpy as np


class StatisticsCollector:
    """Descriptive statistics for timing samples."""

    @staticmethod
    def compute_stats(values: List[float]) -> Dict:
        """Compute basic statistics from a list of values."""
        if not values:
            return {
                'mean': 0.0,
                'median': 0.0,
                'std': 0.0,
                'min': 0.0,
                'max': 0.0,
                'p95': 0.0,
                'count': 0,
            }
        arr = np.array(values, dtype=np.float64)
        return {
            'mean': float(np.mean(arr)),
            'median': float(np.median(arr)),
            'std': float(np.std(arr)),
            'min': float(np.min(arr)),
            'max': float(np.max(arr)),
            'p95': float(np.percentile(arr, 95)),
            'count': int(arr.size),
        }

    @staticmethod
    def mean(values: List[float]) -> float:
        """Arithmetic mean; 0.0 for an empty list."""
        return float(np.mean(values)) if values else 0.0

