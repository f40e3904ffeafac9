import time


class HighPrecisionTimer:
    """High-precision timer for performance measurements."""

    def __init__(self):
        self.start_time = None
        self.elapsed = None

    def start(self):
        """Start timing."""
        self.start_time = time.perf_counter()

    def stop(self) -> float:
        """Stop timing and return elapsed time in seconds."""
        if self.start_time is None:
            raise RuntimeError("Timer not started")
        self.elapsed = time.perf_counter() - self.start_time
        return self.elapsed

    @property
    def elapsed_ms(self) -> float:
        if self.elapsed is None:
            raise RuntimeError("Timer not stopped")
        return self.elapsed * 1000.0

    def __enter__(self) -> "HighPrecisionTimer":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

