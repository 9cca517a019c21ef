"""Raw ADC byte -> calibrated value.

    value = (b - 128) * scale * 10.7 / 256 - offset

evaluated in float64 in exactly that order, then cast to float32. Code 128 is
the logical zero. The vectorised forms below produce bit-identical results.
"""
from __future__ import annotations

import numpy as np


ZERO_CODE = 128
VOLTAGE_RANGE = 10.7
ADC_RESOLUTION = 256


def sample_to_value(b: int, scale: float, offset: float) -> np.float32:
    """Convert one raw byte (0..255)."""
    v = (float(b) - ZERO_CODE) * scale * VOLTAGE_RANGE / ADC_RESOLUTION
    v -= offset
    return np.float32(v)


def samples_to_values(raw: np.ndarray, scale: float, offset: float) -> np.ndarray:
    """Convert an array of raw bytes; returns float32 with the same shape."""
    v = (np.asarray(raw, dtype=np.float64) - ZERO_CODE) * float(scale) * VOLTAGE_RANGE / ADC_RESOLUTION
    v -= float(offset)
    return v.astype(np.float32)


def transform_table(scale: float, offset: float) -> np.ndarray:
    """
    Lookup table of shape (256,) float32: ``table[b] == sample_to_value(b, scale, offset)``.

    Indexing a uint8 array with it converts a whole block at once.
    """
    return samples_to_values(np.arange(ADC_RESOLUTION, dtype=np.uint8), scale, offset)
