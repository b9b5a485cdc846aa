from __future__ import annotations

import numpy as np


FLOAT32_SIZE = 4
SAMPLE_DTYPE = np.dtype("<f4")


def trailing_bytes(buffer: bytes) -> int:
    """Number of bytes past the last whole float32 sample (0..3)."""
    return len(buffer) % FLOAT32_SIZE


def decode_samples(buffer: bytes) -> np.ndarray:
    """
    Decode a raw sibling file into intensity samples.

    Contract:
      - little-endian IEEE-754 float32, no header, file order
      - sample count = len(buffer) // 4; a partial trailing sample is ignored
      - NaN/Inf values pass through unchanged
    """
    n = len(buffer) // FLOAT32_SIZE
    if n == 0:
        return np.empty(0, dtype=SAMPLE_DTYPE)
    return np.frombuffer(buffer, dtype=SAMPLE_DTYPE, count=n)
