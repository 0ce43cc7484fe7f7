"""Configuration for bicubic surfaces.

This config controls how a :class:`~bicubickit.bicubic_surface.BicubicSurface`
caches assembled patches, how aggressively evaluation reuses the patch held
in a hint, and how the smoothness parameter is turned into a spline penalty.
"""

from __future__ import annotations

from bicubickit.errors import SurfaceConstructionError

__all__ = ["SurfaceConfig", "DEFAULT_CONFIG"]

_SMOOTHING_SCALES = ("relative", "absolute")


class SurfaceConfig:
    """Configuration for bicubic surfaces.

    This config controls how a surface caches assembled patches, whether
    the adjacent-patch probe is used, and how smoothness maps to the
    smoothing-spline penalty.
    """

    def __init__(
        self,
        patch_cache_size: int | None = 256,
        nearby_search: bool = True,
        smoothing_scale: str = "relative",
    ):
        """Initialize configuration.

        Args:
            patch_cache_size:
                Maximum number of assembled patches whose 16 coefficients
                are kept in the surface-wide LRU cache. ``None`` keeps every
                patch ever assembled; ``0`` disables the cache so each
                lookup that misses the hint reassembles the patch.

            nearby_search:
                If ``True``, a point that leaves the patch held in the hint
                is first looked for among the adjacent patches before a
                general search. Disabling it is mostly useful when
                benchmarking the lookup tiers against each other.

            smoothing_scale:
                How the smoothness ``s`` in ``[0, 1)`` becomes the penalty
                weight ``lam`` of the smoothing spline.

                - ``"relative"``: ``lam = s / (1 - s) * h**3`` with ``h``
                  the mean knot spacing of the fitted axis, so the amount
                  of smoothing does not depend on the axis units.
                - ``"absolute"``: ``lam = s / (1 - s)``.

        Raises:
            SurfaceConstructionError: If any value is out of range.
        """
        if patch_cache_size is not None:
            if int(patch_cache_size) < 0:
                raise SurfaceConstructionError(
                    "patch_cache_size must be None or a non-negative integer."
                )
            patch_cache_size = int(patch_cache_size)
        if smoothing_scale not in _SMOOTHING_SCALES:
            raise SurfaceConstructionError(
                f"smoothing_scale must be one of {_SMOOTHING_SCALES}; "
                f"got {smoothing_scale!r}."
            )

        self.patch_cache_size = patch_cache_size
        self.nearby_search = bool(nearby_search)
        self.smoothing_scale = smoothing_scale

    def __repr__(self) -> str:
        return (
            f"SurfaceConfig(patch_cache_size={self.patch_cache_size!r}, "
            f"nearby_search={self.nearby_search!r}, "
            f"smoothing_scale={self.smoothing_scale!r})"
        )


DEFAULT_CONFIG = SurfaceConfig()
