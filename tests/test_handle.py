"""Tests for the compiled-runtime lifecycle."""

import threading

import pytest

from crossbench.errors import NotReady
from crossbench.kernels.adapters import HashDiffusionKernel
from crossbench.runtime.handle import RuntimeHandle, RuntimeState


class FailingWarmUp(HashDiffusionKernel):
    def warm_up(self) -> None:
        raise RuntimeError("no compiler")


class BlockingWarmUp(HashDiffusionKernel):
    def __init__(self, release: threading.Event):
        self.release = release

    def warm_up(self) -> None:
        self.release.wait(5)
        super().warm_up()


class TestRuntimeHandle:
    def test_starts_uninitialized(self) -> None:
        handle = RuntimeHandle()
        assert handle.state is RuntimeState.UNINITIALIZED
        assert not handle.is_ready
        with pytest.raises(NotReady):
            handle.require_ready()

    def test_initialize_reaches_ready(self) -> None:
        messages = []
        handle = RuntimeHandle(kernels=[HashDiffusionKernel()], logger=messages.append)
        assert handle.initialize() is handle
        assert handle.state is RuntimeState.READY
        assert handle.compile_seconds is not None
        handle.require_ready()
        assert any("ready" in m for m in messages)

    def test_initialize_is_idempotent(self) -> None:
        handle = RuntimeHandle(kernels=[HashDiffusionKernel()]).initialize()
        seconds = handle.compile_seconds
        handle.initialize()
        assert handle.compile_seconds == seconds

    def test_failure_moves_to_failed(self) -> None:
        handle = RuntimeHandle(kernels=[FailingWarmUp()])
        with pytest.raises(NotReady) as info:
            handle.initialize()
        assert handle.state is RuntimeState.FAILED
        assert isinstance(handle.error, RuntimeError)
        assert info.value.cause is handle.error
        with pytest.raises(NotReady):
            handle.require_ready()

    def test_async_initialize_and_wait(self) -> None:
        release = threading.Event()
        handle = RuntimeHandle(kernels=[BlockingWarmUp(release)])
        thread = handle.initialize_async()
        assert not handle.wait(timeout=0.05)
        assert handle.state is RuntimeState.INITIALIZING
        with pytest.raises(NotReady):
            handle.initialize()
        release.set()
        assert handle.wait(timeout=5)
        thread.join(timeout=5)
        assert handle.state is RuntimeState.READY

    def test_async_failure_is_kept_on_handle(self) -> None:
        handle = RuntimeHandle(kernels=[FailingWarmUp()])
        handle.initialize_async()
        assert handle.wait(timeout=5) is False
        assert handle.state is RuntimeState.FAILED
