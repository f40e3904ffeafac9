#!/usr/bin/env python3
"""
Smoke test for every benchmark callable.
Runs all twelve callables once on small inputs and prints a pass/fail table.
"""

import argparse
import sys
import time
import traceback
from typing import Any, Callable, Dict, List

import numpy as np

from crossbench import surface
from crossbench.kernels.base import Algorithm, Variant
from crossbench.kernels.factory import KERNEL_CLASSES
from crossbench.runtime.handle import RuntimeHandle
from crossbench.utils.cpu import default_worker_count

SMALL_INPUTS: Dict[Algorithm, Dict[str, Any]] = {
    Algorithm.MATRIX_MULTIPLY: {
        'matrix_a': [float(i) for i in range(16)],
        'matrix_b': np.eye(4).ravel().tolist(),
        'size': 4,
    },
    Algorithm.MANDELBROT: {
        'width': 16, 'height': 12, 'xmin': -2.5, 'xmax': 1.5, 'ymin': -1.5, 'ymax': 1.5, 'max_iter': 50,
    },
    Algorithm.HASH_DIFFUSION: {
        'data': "The quick brown fox jumps over the lazy dog. ",
        'iterations': 16,
    },
    Algorithm.RAY_TRACE: {
        'width': 8, 'height': 6, 'samples': 2,
    },
}


def check_algorithm(algorithm: Algorithm, runtime: RuntimeHandle, workers: int, verbose: bool) -> List[Dict]:
    """Run the three callables of one algorithm and compare them to the interpreted output."""
    kernel = KERNEL_CLASSES[algorithm]()
    params = SMALL_INPUTS[algorithm]
    results = []
    reference = None

    for variant in Variant:
        fn: Callable = surface.CALLABLES[(algorithm, variant)]
        kwargs = dict(params)
        if variant is Variant.COMPILED_SINGLE:
            kwargs['runtime'] = runtime
        elif variant is Variant.COMPILED_PARALLEL:
            kwargs['runtime'] = runtime
            kwargs['workers'] = workers

        result = {'algorithm': algorithm.value, 'variant': variant.value, 'status': 'unknown', 'error': None}
        print(f"  Testing {variant.value}...", end=' ')
        try:
            start_time = time.perf_counter()
            output = fn(**kwargs)
            result['time_ms'] = (time.perf_counter() - start_time) * 1000
            if variant is Variant.INTERPRETED:
                reference = output
                result['status'] = 'success'
            elif reference is not None and not kernel.outputs_match(reference, output):
                result['status'] = 'failed'
                result['error'] = 'output differs from interpreted'
            else:
                result['status'] = 'success'
            mark = "✓" if result['status'] == 'success' else "✗"
            print(f"{mark} ({result['time_ms']:.3f} ms)")
        except Exception as e:  # pylint: disable=broad-except
            result['status'] = 'error'
            result['error'] = str(e)
            print(f"✗ {e}")
            if verbose:
                traceback.print_exc()
        results.append(result)
    return results


def print_summary_table(results: List[Dict]) -> None:
    print("\n" + "=" * 80)
    print("CALLABLE SUMMARY TABLE")
    print("=" * 80)
    print(f"{'Algorithm':<16} {'Variant':<18} {'S':<3} {'Time(ms)':<12} Error")
    print("-" * 80)
    for r in results:
        status_symbol = "✓" if r['status'] == 'success' else "✗"
        time_ms = f"{r['time_ms']:.3f}" if r.get('time_ms') is not None else "N/A"
        print(f"{r['algorithm']:<16} {r['variant']:<18} {status_symbol:<3} {time_ms:<12} {r['error'] or ''}")
    print("=" * 80)


def main() -> int:
    parser = argparse.ArgumentParser(description="Run every benchmark callable once on small inputs")
    parser.add_argument("--workers", type=int, default=None, help="Worker threads for parallel callables")
    parser.add_argument("--verbose", action="store_true", help="Print tracebacks for errors")
    args = parser.parse_args()

    workers = args.workers or default_worker_count()
    print("Compiling kernels...", end=' ', flush=True)
    runtime = RuntimeHandle()
    try:
        runtime.initialize()
        print(f"✓ ({runtime.compile_seconds:.2f}s)")
    except Exception as e:  # pylint: disable=broad-except
        print(f"✗ {e}")

    results: List[Dict] = []
    for algorithm in Algorithm:
        print(f"\n{algorithm.value}")
        results.extend(check_algorithm(algorithm, runtime, workers, args.verbose))

    print_summary_table(results)
    failed = [r for r in results if r['status'] != 'success']
    print(f"\nTotal callables tested: {len(results)}")
    print(f"Successful: {len(results) - len(failed)}")
    print(f"Failed/Errors: {len(failed)}")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
