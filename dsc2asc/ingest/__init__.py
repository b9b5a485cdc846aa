"""Ingest package - descriptor parsing, sample decoding and sibling discovery.

This package handles:
- Parsing the sectioned .dsc descriptor text ([Comment], [General],
  [Goniometer], [Intervals])
- Decoding raw little-endian float32 sibling files
- Deriving sibling/output names and resolving sibling files on disk or
  from uploaded file sets

Key entry points:
- parse_descriptor / load_descriptor: text or file -> ScanDescriptor
- decode_samples: bytes -> float32 samples
- DirectoryResolver / MappingResolver: interval -> sibling bytes or None

Design principle:
- Parsing is lenient: malformed lines are skipped, never raised
- Only a descriptor without intervals is a hard failure
"""
