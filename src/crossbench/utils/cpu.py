import threading
import time
from typing import Any, Dict, List, Optional

import psutil


def default_worker_count() -> int:
    """Logical CPUs visible to this process; 1 when psutil cannot tell."""
    return psutil.cpu_count(logical=True) or 1


class CPUSampler:
    """Background sampler for psutil-based CPU utilization."""

    def __init__(self, enabled: bool, interval: float) -> None:
        self.enabled = enabled
        self.interval = max(interval, 0.05)
        self.samples: List[Dict[str, Any]] = []
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._process = psutil.Process() if enabled else None
        self._cpu_count = default_worker_count()

    def start(self) -> None:
        if not self.enabled or self._process is None:
            return
        self.samples = []
        self._stop_event.clear()
        # First call only primes psutil's per-process counters
        self._process.cpu_percent(interval=None)
        self._thread = threading.Thread(target=self._run, name="cpu-sampler", daemon=True)
        self._thread.start()

    def stop(self) -> List[Dict[str, Any]]:
        if not self.enabled:
            return []
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=2)
            self._thread = None
        return self.samples

    def average(self) -> Optional[float]:
        """Mean normalised process CPU percent over the collected samples."""
        if not self.samples:
            return None
        return sum(s["process_cpu"] for s in self.samples) / len(self.samples)

    def _run(self) -> None:
        if self._process is None:
            return
        while not self._stop_event.wait(self.interval):
            # Process percent can exceed 100 on multi-core; normalise to 0-100
            process_cpu_raw = self._process.cpu_percent(interval=None)
            self.samples.append({
                "timestamp": time.time(),
                "process_cpu": process_cpu_raw / self._cpu_count,
                "process_cpu_raw": process_cpu_raw,
            })
