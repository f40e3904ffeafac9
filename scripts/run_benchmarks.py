#!/usr/bin/env python3
"""
Convenience wrapper to run the full benchmark suite.

Usage:
    python scripts/run_benchmarks.py [--config config/benchmark.json] [--iterations N]
                                     [--workers N] [--algorithms A ...] [--json]
"""

from crossbench.benchmarks.harness import main


if __name__ == "__main__":
    main()
