from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


# Human-readable labels for the descriptor keys shown in the GUI / CLI summary.
GENERAL_LABELS: Dict[str, str] = {
    "method": "Scan method",
    "l1": "K-Alpha1 (Å)",
    "l2": "K-Alpha2 (Å)",
    "lm": "Lambda avg (Å)",
    "beta": "K-Beta (Å)",
    "r": "K-Alpha2/K-Alpha1",
}

GONIOMETER_LABELS: Dict[str, str] = {
    "monotype": "Monochromator",
    "sampthick": "Sample thickness (mm)",
    "tubeang": "Tube angle",
}

METHOD_NAMES: Dict[str, str] = {"1": "2Θ-Θ", "2": "2Θ", "3": "Θ"}


@dataclass(frozen=True)
class ScanInterval:
    """
    One contiguous, linearly stepped scan segment from the [Intervals] section.

    start, end, step: angles in degrees (NaN when the field could not be parsed).
    status: 0 means no data file exists for this interval; None if unparsable.
    file_extension: lower-cased extension (no dot) of the sibling binary file.

    'end' is informational only: the true sample count comes from the file size.
    """
    start: float
    end: float
    step: float
    status: Optional[int]
    file_extension: str

    @property
    def is_eligible(self) -> bool:
        return self.status != 0

    def label(self, index: int) -> str:
        return f"{index + 1}: {self.start:g}° - {self.end:g}°"


@dataclass(frozen=True)
class ScanDescriptor:
    """
    Parsed content of one .dsc descriptor.

    Notes
    - intervals keep declaration order; UI selection and lookups are index based.
    - general/goniometer keys are lower-cased, values trimmed.
    """
    comments: Tuple[str, ...] = ()
    general: Dict[str, str] = field(default_factory=dict)
    goniometer: Dict[str, str] = field(default_factory=dict)
    intervals: Tuple[ScanInterval, ...] = ()

    @property
    def is_valid(self) -> bool:
        return len(self.intervals) > 0

    def eligible_intervals(self) -> List[Tuple[int, ScanInterval]]:
        return [(i, iv) for i, iv in enumerate(self.intervals) if iv.is_eligible]

    def metadata_summary(self) -> List[Tuple[str, str]]:
        """Rows (label, value) for the known general/goniometer keys, in file order."""
        rows: List[Tuple[str, str]] = []
        for k, v in self.general.items():
            if k not in GENERAL_LABELS:
                continue
            if k == "method":
                v = METHOD_NAMES.get(v, v)
            rows.append((GENERAL_LABELS[k], v))
        for k, v in self.goniometer.items():
            if k in GONIOMETER_LABELS:
                rows.append((GONIOMETER_LABELS[k], v))
        rows.append(("Total intervals", str(len(self.intervals))))
        return rows
