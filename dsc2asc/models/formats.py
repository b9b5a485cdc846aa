"""Output format profiles.

A FormatProfile groups every parameter that affects the text written for one
interval into one frozen dataclass.  It can be:

- Picked from the built-in ``FORMATS`` registry by key
- Overridden field-by-field via ``dataclasses.replace()``
- Serialized to/from a dict for JSON settings
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class FormatProfile:
    """Frozen description of one text output format.

    Fields
    ------
    key : str
        Registry key (``"asc"``, ``"csv_std"``, ...).
    extension : str
        Output file extension including the dot (``".asc"``).
    delimiter : str
        Separator between the X and Y column.
    decimal_separator : str
        Replaces the ``.`` of each formatted number when not ``"."``.
    mime_type : str
        Content type of a single downloaded document.
    label : str
        Text shown in the format dropdown.
    x_precision, y_precision : int
        Fixed number of decimals for 2Theta and intensity.
    """

    key: str
    extension: str
    delimiter: str
    decimal_separator: str = "."
    mime_type: str = "text/plain"
    label: str = ""

    x_precision: int = 4
    y_precision: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> FormatProfile:
        d = dict(d)
        for k in ("x_precision", "y_precision"):
            if k in d:
                d[k] = int(d[k])
        return cls(**d)


FORMATS: Dict[str, FormatProfile] = {
    "asc": FormatProfile(
        key="asc", extension=".asc", delimiter=" ", decimal_separator=".",
        mime_type="text/plain", label="ASC (space, 1.5)",
    ),
    "csv_std": FormatProfile(
        key="csv_std", extension=".csv", delimiter=",", decimal_separator=".",
        mime_type="text/csv", label="CSV (comma, 1.5)",
    ),
    "csv_ru": FormatProfile(
        key="csv_ru", extension=".csv", delimiter=";", decimal_separator=",",
        mime_type="text/csv", label="CSV (semicolon, 1,5)",
    ),
}

DEFAULT_FORMAT = "asc"


def get_format(key: str) -> FormatProfile:
    try:
        return FORMATS[key]
    except KeyError:
        raise ValueError(f"Unknown format '{key}'. Known formats: {', '.join(FORMATS)}") from None
