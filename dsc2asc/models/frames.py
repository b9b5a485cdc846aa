from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import pandas as pd

from dsc2asc.models.descriptor import ScanInterval


@dataclass(frozen=True)
class IntervalFrame:
    """
    In-memory representation of one decoded interval (one sibling binary file).

    Notes
    - 'two_theta' is reconstructed from interval start/step, never read from the file.
    - 'intensity' holds the float32 samples widened to float64.
    """
    index: int
    interval: ScanInterval
    source_name: str
    df: pd.DataFrame
    warnings: Tuple[str, ...] = ()

    @property
    def n_samples(self) -> int:
        return int(len(self.df))
