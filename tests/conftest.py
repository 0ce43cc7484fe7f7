"""Pytest configuration with shared surfaces and a thread-spawning check."""

import os
from concurrent.futures import ThreadPoolExecutor, TimeoutError

import numpy as np
import pytest

from bicubickit import BicubicSurface

__all__ = ["extra_threads_ok"]


@pytest.fixture(autouse=True, scope="session")
def _limit_blas_threads():
    os.environ.setdefault("OMP_NUM_THREADS", "1")
    os.environ.setdefault("OPENBLAS_NUM_THREADS", "1")
    os.environ.setdefault("MKL_NUM_THREADS", "1")
    os.environ.setdefault("VECLIB_MAXIMUM_THREADS", "1")
    os.environ.setdefault("NUMEXPR_NUM_THREADS", "1")


@pytest.fixture(scope="session")
def threads_ok():
    """Return a callable that checks thread-spawning capability.

    The returned function has signature `check(n=2, timeout=1.0) -> bool` and
    returns True if at least `n` threads can be started and joined within `timeout`.
    """
    def _can_spawn(n: int = 2, timeout: float = 1.0) -> bool:
        try:
            with ThreadPoolExecutor(max_workers=n) as ex:
                futs = [ex.submit(lambda: None) for _ in range(n)]
                for f in futs:
                    f.result(timeout=timeout)
            return True
        except (RuntimeError, MemoryError, OSError, TimeoutError):
            return False
    return _can_spawn


@pytest.fixture(scope="session")
def extra_threads_ok(threads_ok):
    """Convenience: True iff we can start >= 2 threads (common case)."""
    return threads_ok(2)


@pytest.fixture
def product_surface():
    """Surface through f(x, y) = x * y on the 4x4 integer grid."""
    x = np.arange(4.0)
    y = np.arange(4.0)
    return BicubicSurface(x, y, np.outer(x, y))


@pytest.fixture
def wavy_surface():
    """Surface through sin(x) * cos(y) on an irregular 7x6 grid."""
    x = np.linspace(0.0, 3.0, 7)
    y = np.array([0.0, 0.4, 1.1, 1.5, 2.3, 3.0])
    f = np.sin(x)[:, None] * np.cos(y)[None, :]
    return BicubicSurface(x, y, f)
