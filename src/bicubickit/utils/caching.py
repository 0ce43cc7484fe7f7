"""Provides :func:`wrap_patch_cache`."""
from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache, wraps

import numpy as np


def wrap_patch_cache(
    function: Callable[[int, int], np.ndarray],
    *,
    maxsize: int | None = 256,
) -> Callable[[int, int], np.ndarray]:
    """Creates a bounded cache for per-patch coefficient arrays.

    The cached arrays are marked read-only so that one caller cannot corrupt
    the coefficients handed out to another.

    Args:
        function: Maps patch indices ``(i, j)`` to a coefficient array.
        maxsize: The size of the cache. ``None`` means unbounded and ``0``
            disables caching altogether.

    Returns:
        A caching wrapper of :func:`function`. With ``maxsize == 0`` the
        wrapper still exposes ``cache_info`` and ``cache_clear`` but
        recomputes on every call.
    """
    @lru_cache(maxsize=maxsize)
    def cached_wrapper(i: int, j: int) -> np.ndarray:
        coeffs = np.asarray(function(i, j), dtype=float)
        coeffs.setflags(write=False)
        return coeffs

    @wraps(function)
    def wrapped(i: int, j: int) -> np.ndarray:
        return cached_wrapper(int(i), int(j))

    # Ensure that the lru_cache attributes are preserved.
    # Hijacked from https://stackoverflow.com/a/52332109
    wrapped.cache_info = cached_wrapper.cache_info
    wrapped.cache_clear = cached_wrapper.cache_clear

    return wrapped
