"""Normalization of audio samples into the 16-bit signed domain.

Every sample entering the codec is reduced to an int16 amplitude first.
The conversions are lossy and never raise:

- int16 samples pass through (out-of-range integers are clamped);
- int32 samples keep their high 16 bits;
- float samples are scaled by 32768 and truncated toward zero, saturating at
  the int16 bounds, with NaN mapped to 0.
"""

import logging
import math
from collections.abc import Iterable, Iterator

import numpy as np

from .constants import FLOAT_SCALE, INT32_SHIFT, MAX_INT16, MIN_INT16

logger = logging.getLogger(__name__)

__all__ = [
    "clamp_int16",
    "float_to_int16",
    "int32_to_int16",
    "to_int16",
    "normalize_array",
    "normalize_samples",
]


def clamp_int16(value: int) -> int:
    """Saturate an integer to the int16 range."""
    return max(MIN_INT16, min(MAX_INT16, int(value)))


def float_to_int16(value: float) -> int:
    """Convert a float sample in [-1, 1) to int16."""
    value = float(value)
    if math.isnan(value):
        return 0
    scaled = value * FLOAT_SCALE
    if scaled >= MAX_INT16:
        return MAX_INT16
    if scaled <= MIN_INT16:
        return MIN_INT16
    return int(scaled)


def int32_to_int16(value: int) -> int:
    """Convert an int32 sample to int16 by keeping its high half.

    "Halve" means halving the bit width, not the value: the sample is
    shifted right by 16 bits (truncating toward negative infinity), so the
    full int32 range maps onto the full int16 range and
    ``int32_to_int16(1000) == 0``.
    """
    return clamp_int16(int(value) >> INT32_SHIFT)


def to_int16(value, dtype=None) -> int:
    """Normalize a single sample to int16.

    Args:
        value: The sample value
        dtype: Source sample type (int16, int32 or a float type). When None,
            it is inferred from the value: floats use the float rule, numpy
            int32 values the int32 rule, anything else is treated as int16.

    Returns:
        The sample as a Python int in [-32768, 32767]
    """
    if dtype is None:
        dtype = getattr(value, "dtype", None)
        if dtype is None:
            dtype = np.float32 if isinstance(value, float) else np.int16
    dtype = np.dtype(dtype)

    if dtype.kind == "f":
        return float_to_int16(value)
    if dtype == np.int32:
        return int32_to_int16(value)
    return clamp_int16(value)


def normalize_array(samples: np.ndarray) -> np.ndarray:
    """Vectorized counterpart of to_int16() for a whole numpy array."""
    samples = np.asarray(samples)
    if samples.dtype.kind == "f":
        scaled = np.nan_to_num(samples.astype(np.float64) * FLOAT_SCALE, nan=0.0)
        return np.clip(np.trunc(scaled), MIN_INT16, MAX_INT16).astype(np.int16)
    if samples.dtype == np.int32:
        return (samples.astype(np.int64) >> INT32_SHIFT).astype(np.int16)
    return np.clip(samples.astype(np.int64), MIN_INT16, MAX_INT16).astype(np.int16)


def normalize_samples(samples: Iterable, dtype=None) -> Iterator[int]:
    """Lazily normalize a sequence of samples to int16.

    Numpy arrays are converted in one vectorized step; other iterables are
    converted one sample at a time so that streaming sources stay lazy.
    """
    if isinstance(samples, np.ndarray):
        if dtype is not None:
            samples = samples.astype(dtype, copy=False)
        logger.debug("normalize_samples(): array of %s, dtype=%s", samples.size, samples.dtype)
        for sample in normalize_array(samples.ravel()):
            yield int(sample)
        return

    for sample in samples:
        yield to_int16(sample, dtype)
