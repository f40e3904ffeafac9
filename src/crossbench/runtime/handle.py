"""
Lifecycle of the compiled runtime.

The handle is created by the caller and passed to whatever needs the compiled
side; nothing reads a module-level readiness flag. Initialising means JIT
compiling every compiled kernel once so later calls measure execution only.
"""

from __future__ import annotations

import threading
import time
from enum import Enum
from typing import Callable, Iterable, List, Optional

from crossbench.errors import NotReady
from crossbench.kernels.base import Kernel
from crossbench.kernels.factory import KERNEL_CLASSES

Logger = Callable[[str], None]


class RuntimeState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class RuntimeHandle:
    """Tracks and drives the compiled runtime through its lifecycle."""

    def __init__(self, kernels: Optional[Iterable[Kernel]] = None, logger: Optional[Logger] = None) -> None:
        self.kernels: List[Kernel] = (
            list(kernels) if kernels is not None else [cls() for cls in KERNEL_CLASSES.values()]
        )
        self.logger = logger or (lambda msg: None)
        self.compile_seconds: Optional[float] = None
        self._state = RuntimeState.UNINITIALIZED
        self._error: Optional[BaseException] = None
        self._lock = threading.Lock()
        self._settled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> RuntimeState:
        return self._state

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    @property
    def is_ready(self) -> bool:
        return self._state is RuntimeState.READY

    def initialize(self) -> "RuntimeHandle":
        """
        Compile every kernel on the calling thread.

        Idempotent once READY. Raises NotReady if compilation fails or another
        thread is already initialising.
        """
        with self._lock:
            if self._state is RuntimeState.READY:
                return self
            if self._state is RuntimeState.INITIALIZING:
                raise NotReady(self._state)
            self._state = RuntimeState.INITIALIZING
            self._error = None
            self._settled.clear()

        start = time.perf_counter()
        try:
            for kernel in self.kernels:
                kernel.warm_up()
        except Exception as exc:  # pylint: disable=broad-except
            with self._lock:
                self._state = RuntimeState.FAILED
                self._error = exc
                self._settled.set()
            self.logger(f"Compiled runtime failed to initialise: {exc}")
            raise NotReady(RuntimeState.FAILED, exc) from exc

        with self._lock:
            self.compile_seconds = time.perf_counter() - start
            self._state = RuntimeState.READY
            self._settled.set()
        self.logger(f"Compiled runtime ready ({len(self.kernels)} kernels, {self.compile_seconds:.2f}s)")
        return self

    def initialize_async(self) -> threading.Thread:
        """Start initialisation on a daemon thread; pair with ``wait``."""

        def _target() -> None:
            try:
                self.initialize()
            except NotReady:
                pass  # state and error are kept on the handle

        self._thread = threading.Thread(target=_target, name="runtime-init", daemon=True)
        self._thread.start()
        return self._thread

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until READY or FAILED; return True only when READY."""
        self._settled.wait(timeout)
        return self.is_ready

    def require_ready(self) -> None:
        """Fail fast with NotReady unless the runtime is READY."""
        state = self._state
        if state is not RuntimeState.READY:
            raise NotReady(state, self._error)
