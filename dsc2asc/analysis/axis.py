from __future__ import annotations

import numpy as np

from dsc2asc.models.descriptor import ScanInterval


def reconstruct_axis(interval: ScanInterval, n_samples: int) -> np.ndarray:
    """
    2Theta value of every sample: ``start + i * step`` for i in [0, n_samples).

    No plausibility checks: a zero step yields a constant axis, a negative step
    a descending one, NaN start/step propagate as NaN.
    """
    n = int(n_samples)
    if n < 0:
        raise ValueError(f"n_samples must be >= 0, got {n}")
    return float(interval.start) + np.arange(n, dtype=np.float64) * float(interval.step)
