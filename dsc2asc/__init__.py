"""dsc2asc -- Python tooling for converting X-ray diffractometer scans.

A scan is stored as a textual ``.dsc`` descriptor plus one binary sibling
file per scan interval (raw little-endian float32 intensities).

This package provides tools for:
- Parsing the sectioned descriptor into an immutable ScanDescriptor
- Locating sibling data files on disk or in uploaded file sets
- Decoding raw float32 intensity buffers
- Reconstructing the 2Theta axis from interval start/step
- Serializing (2Theta, intensity) pairs to ASC / CSV text
- Bundling several converted intervals into a zip archive

Key principles:
- Lenient parsing: malformed descriptor lines are skipped, never fatal
- Continue on error: one bad interval never aborts a batch conversion
- Traceability: diagnostics travel with the results as warning strings

Main subpackages:
- analysis: axis reconstruction, serialization, conversion, export
- gui: interactive ipywidgets GUI
- ingest: descriptor parser, sample decoder, sibling file discovery
- models: data models (ScanDescriptor, FormatProfile, ConversionResult)
"""

__all__ = []
