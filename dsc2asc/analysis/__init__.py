"""Analysis package - axis reconstruction, serialization, conversion, export.

Pipeline per eligible interval:
  sibling bytes -> decode_samples -> reconstruct_axis -> serialize_pairs

Key entry points:
- convert_descriptor: full conversion of one descriptor into a ConversionResult
- read_interval: decode one interval for the chart preview
- write_outputs / bundle_zip: single document or zip archive on disk
"""

from .axis import reconstruct_axis
from .convert import convert_descriptor, read_interval
from .export import bundle_zip, decimate_for_preview, write_outputs
from .serialize import serialize_pairs

__all__ = [
    "reconstruct_axis",
    "convert_descriptor",
    "read_interval",
    "bundle_zip",
    "decimate_for_preview",
    "write_outputs",
    "serialize_pairs",
]
