"""Shared typing aliases for BicubicKit."""

from __future__ import annotations

from typing import Sequence, TypeAlias

import numpy as np
from numpy.typing import NDArray

Array: TypeAlias = NDArray[np.floating]

Point: TypeAlias = Sequence[float] | NDArray[np.floating]
Components: TypeAlias = Sequence[int]
