from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Sequence

import numpy as np

from dsc2asc.models.formats import FormatProfile
from dsc2asc.models.frames import IntervalFrame


# float64 magnitudes reach 1e308; the quantized value must fit in the precision.
_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP)


def format_number(value: float, precision: int, decimal_separator: str = ".") -> str:
    """
    Fixed-point text for one value.

    Rounds the exact binary value half away from zero, so 123.25 gives
    123.3 at one decimal. Non-finite values are written as NaN / Infinity /
    -Infinity. The decimal separator is a plain textual substitution of the
    single '.'.
    """
    v = float(value)
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "Infinity" if v > 0 else "-Infinity"
    q = Decimal(v).quantize(Decimal(1).scaleb(-int(precision)), context=_CONTEXT)
    s = format(q, "f")
    if decimal_separator != ".":
        s = s.replace(".", decimal_separator, 1)
    return s


def serialize_pairs(xs: Sequence[float], ys: Sequence[float], profile: FormatProfile) -> str:
    """
    Render paired values as ``X<delimiter>Y\\n`` records (no header).

    xs and ys must have the same length; a mismatch raises ValueError instead
    of silently truncating.
    """
    x = np.asarray(xs, dtype=np.float64).ravel()
    y = np.asarray(ys, dtype=np.float64).ravel()
    if x.size != y.size:
        raise ValueError(f"length mismatch: {x.size} x values vs {y.size} y values")

    delim = profile.delimiter
    dec = profile.decimal_separator
    xp = int(profile.x_precision)
    yp = int(profile.y_precision)
    return "".join(
        f"{format_number(a, xp, dec)}{delim}{format_number(b, yp, dec)}\n"
        for a, b in zip(x.tolist(), y.tolist())
    )


def serialize_frame(frame: IntervalFrame, profile: FormatProfile) -> str:
    return serialize_pairs(frame.df["two_theta"].to_numpy(), frame.df["intensity"].to_numpy(), profile)
