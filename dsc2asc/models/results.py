from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class ConvertedDocument:
    """One text document produced from one interval."""

    name: str
    text: str
    interval_index: int
    mime_type: str = "text/plain"


@dataclass(frozen=True)
class IntervalFailure:
    """An eligible interval whose file was found but could not be converted."""

    interval_index: int
    name: str
    message: str


@dataclass(frozen=True)
class ConversionResult:
    """Container for everything produced by one conversion run.

    Attributes
    ----------
    base_name:
        Descriptor base name the output names were derived from.
    documents:
        Converted documents, in descriptor order.
    n_eligible:
        Intervals with status != 0 (a data file is expected).
    n_convertible:
        Eligible intervals whose sibling file was found.
    failures:
        Per-interval errors; these never abort the batch.
    warnings:
        Informational diagnostics (e.g. ignored trailing bytes).
    """

    base_name: str
    documents: Tuple[ConvertedDocument, ...] = ()
    n_eligible: int = 0
    n_convertible: int = 0
    failures: Tuple[IntervalFailure, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def n_converted(self) -> int:
        return len(self.documents)

    @property
    def single(self) -> Optional[ConvertedDocument]:
        if len(self.documents) == 1:
            return self.documents[0]
        return None
