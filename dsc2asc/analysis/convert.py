from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from dsc2asc.analysis.axis import reconstruct_axis
from dsc2asc.analysis.serialize import serialize_frame
from dsc2asc.ingest.descriptor_parser import require_valid
from dsc2asc.ingest.discovery import FileResolver, output_name, sibling_name
from dsc2asc.ingest.samples import decode_samples, trailing_bytes
from dsc2asc.models.descriptor import ScanDescriptor, ScanInterval
from dsc2asc.models.formats import FormatProfile
from dsc2asc.models.frames import IntervalFrame
from dsc2asc.models.results import ConversionResult, ConvertedDocument, IntervalFailure


def build_interval_frame(index: int, interval: ScanInterval, buffer: bytes, source_name: str) -> IntervalFrame:
    """Decode one sibling buffer and pair it with its reconstructed 2Theta axis."""
    y = decode_samples(buffer)
    x = reconstruct_axis(interval, len(y))

    warnings: List[str] = []
    rem = trailing_bytes(buffer)
    if rem:
        warnings.append(f"{source_name}: ignored {rem} trailing byte(s) (partial float32 sample)")
    if len(y) == 0:
        warnings.append(f"{source_name}: file holds no samples")

    df = pd.DataFrame({"two_theta": x, "intensity": y.astype(np.float64)})
    return IntervalFrame(index=index, interval=interval, source_name=source_name, df=df, warnings=tuple(warnings))


def read_interval(
    descriptor: ScanDescriptor,
    index: int,
    resolver: FileResolver,
    *,
    base_name: str,
) -> Optional[IntervalFrame]:
    """
    Decode a single interval (chart preview).

    Returns None when the interval expects no data (status 0) or its sibling
    file is absent. Resolver errors propagate to the caller.
    """
    if not 0 <= int(index) < len(descriptor.intervals):
        raise IndexError(f"interval index {index} out of range (0..{len(descriptor.intervals) - 1})")
    interval = descriptor.intervals[index]
    if not interval.is_eligible:
        return None
    buffer = resolver(interval)
    if buffer is None:
        return None
    return build_interval_frame(index, interval, buffer, sibling_name(base_name, interval))


def output_names(descriptor: ScanDescriptor, base_name: str, profile: FormatProfile) -> Dict[int, str]:
    """
    Output name per eligible interval index.

    Intervals that share a file extension get a 1-based ordinal so that no two
    documents of one conversion collide.
    """
    eligible = descriptor.eligible_intervals()
    counts = Counter(iv.file_extension for _, iv in eligible)
    seen: Counter = Counter()
    names: Dict[int, str] = {}
    for i, iv in eligible:
        if counts[iv.file_extension] > 1:
            seen[iv.file_extension] += 1
            names[i] = output_name(base_name, iv, profile, ordinal=seen[iv.file_extension])
        else:
            names[i] = output_name(base_name, iv, profile)
    return names


def convert_descriptor(
    descriptor: ScanDescriptor,
    resolver: FileResolver,
    profile: FormatProfile,
    *,
    base_name: str,
) -> ConversionResult:
    """
    Convert every eligible interval whose sibling file the resolver provides.

    Policy:
      - descriptor without intervals -> InvalidDescriptorError
      - status 0 -> skipped, not counted as eligible
      - resolver returns None -> skipped, counted as eligible only
      - any error while reading/decoding/serializing one interval -> IntervalFailure,
        the remaining intervals are still converted
      - documents keep descriptor order
    """
    require_valid(descriptor, source=base_name)
    names = output_names(descriptor, base_name, profile)

    documents: List[ConvertedDocument] = []
    failures: List[IntervalFailure] = []
    warnings: List[str] = []
    n_eligible = 0
    n_convertible = 0

    for index, interval in descriptor.eligible_intervals():
        n_eligible += 1
        name = names[index]
        try:
            buffer = resolver(interval)
        except Exception as e:
            # a file that exists but cannot be read still counts as found
            n_convertible += 1
            failures.append(IntervalFailure(interval_index=index, name=name, message=f"{type(e).__name__}: {e}"))
            continue
        if buffer is None:
            continue
        n_convertible += 1

        try:
            frame = build_interval_frame(index, interval, buffer, sibling_name(base_name, interval))
            text = serialize_frame(frame, profile)
        except Exception as e:
            failures.append(IntervalFailure(interval_index=index, name=name, message=f"{type(e).__name__}: {e}"))
            continue

        warnings.extend(frame.warnings)
        documents.append(
            ConvertedDocument(name=name, text=text, interval_index=index, mime_type=profile.mime_type)
        )

    return ConversionResult(
        base_name=base_name,
        documents=tuple(documents),
        n_eligible=n_eligible,
        n_convertible=n_convertible,
        failures=tuple(failures),
        warnings=tuple(warnings),
    )
