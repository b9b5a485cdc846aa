from __future__ import annotations

import io
import math
import zipfile
from pathlib import Path
from typing import Optional

from dsc2asc.ingest.discovery import archive_name
from dsc2asc.models.frames import IntervalFrame
from dsc2asc.models.results import ConversionResult


PREVIEW_MAX_POINTS = 5000


def decimate_for_preview(frame: IntervalFrame, max_points: int = PREVIEW_MAX_POINTS):
    """
    Keep every k-th sample so at most ~max_points remain (k = ceil(n / max_points)).

    Decimation only, no interpolation; exports always use the full frame.
    Returns (x, y) numpy arrays.
    """
    x = frame.df["two_theta"].to_numpy()
    y = frame.df["intensity"].to_numpy()
    k = max(1, int(math.ceil(len(x) / float(max(1, int(max_points))))))
    if k <= 1:
        return x, y
    return x[::k], y[::k]


def bundle_zip(result: ConversionResult, encoding: str = "utf-8") -> bytes:
    """Zip archive holding every converted document, in descriptor order."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for doc in result.documents:
            zf.writestr(doc.name, doc.text.encode(encoding))
    return buf.getvalue()


def write_outputs(
    result: ConversionResult,
    out_dir: str | Path,
    *,
    encoding: str = "utf-8",
) -> Optional[Path]:
    """Write the conversion to disk.

    Parameters
    ----------
    result : ConversionResult
        Output of ``convert_descriptor``.
    out_dir : Path
        Target directory (created if missing).
    encoding : str
        Text encoding of the written documents.

    Returns
    -------
    Path or None
        The single document when exactly one interval was converted, the
        ``<base>_converted.zip`` archive when several were, None when nothing
        was converted.
    """
    if result.n_converted == 0:
        return None

    out = Path(out_dir).expanduser()
    out.mkdir(parents=True, exist_ok=True)

    single = result.single
    if single is not None:
        path = out / single.name
        # newline="" keeps the '\n' record terminator on every platform
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(single.text)
        return path

    path = out / archive_name(result.base_name)
    path.write_bytes(bundle_zip(result, encoding=encoding))
    return path
