"""Access statistics for bicubic surfaces.

Every evaluation through a surface is tallied in one of its counters. The
counters are shared by all hints and handles referring to the surface and
are updated without synchronization, so concurrent evaluations may lose
counts. They are advisory diagnostics only and never influence results.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = ["AccessStatistics", "format_access_statistics"]


class AccessStatistics:
    """Monotonic access counters of one surface.

    Attributes:
        accesses: Total number of evaluations.
        same_point: Evaluations answered from the hint's memoized point.
        same_patch: Evaluations on the patch already held in the hint.
        nearby_patch: Evaluations resolved on a patch adjacent to the hint's.
    """

    __slots__ = ("accesses", "same_point", "same_patch", "nearby_patch")

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Sets all counters to zero."""
        self.accesses = 0
        self.same_point = 0
        self.same_patch = 0
        self.nearby_patch = 0

    @property
    def searched(self) -> int:
        """Evaluations that needed a general patch search."""
        return self.accesses - self.same_point - self.same_patch - self.nearby_patch

    def as_dict(self) -> Dict[str, int]:
        """Returns the counters as a plain dictionary."""
        return {
            "accesses": self.accesses,
            "same_point": self.same_point,
            "same_patch": self.same_patch,
            "nearby_patch": self.nearby_patch,
            "searched": self.searched,
        }

    def __repr__(self) -> str:
        return (
            f"AccessStatistics(accesses={self.accesses}, same_point={self.same_point}, "
            f"same_patch={self.same_patch}, nearby_patch={self.nearby_patch})"
        )


def format_access_statistics(
    stats: Dict[str, Any] | AccessStatistics,
    *,
    meta: Optional[Dict[str, Any]] = None,
    decimals: int = 1,
) -> str:
    """Format access statistics into a human-readable string.

    Args:
      stats: An :class:`AccessStatistics` or the dictionary returned by
        :meth:`AccessStatistics.as_dict`.
      meta: Optional metadata dictionary to include in the output.
      decimals: Number of decimal places for the percentages.

    Returns:
      A formatted string summarizing how accesses were resolved.
    """
    if isinstance(stats, AccessStatistics):
        stats = stats.as_dict()
    if not isinstance(stats, dict):
        return "‹statistics unavailable›"

    total = int(stats.get("accesses", 0))
    lines = ["=== Surface Access Statistics ==="]
    if meta:
        lines.append("Meta:")
        for k, v in meta.items():
            lines.append(f"  {k}: {v}")

    lines.append(f"accesses     : {total}")
    for key in ("same_point", "same_patch", "nearby_patch", "searched"):
        count = int(stats.get(key, 0))
        share = 100.0 * count / total if total else 0.0
        lines.append(f"{key:<13}: {count} ({share:.{decimals}f}%)")
    return "\n".join(lines)
