"""Grid data, patches, hints and the evaluation engine."""

from .engine import SurfaceEngine
from .grid_data import GridData
from .hint import PatchHint
from .patch import Patch
from .statistics import AccessStatistics, format_access_statistics

__all__ = [
    "AccessStatistics",
    "GridData",
    "Patch",
    "PatchHint",
    "SurfaceEngine",
    "format_access_statistics",
]
