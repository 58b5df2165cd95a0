"""Core helpers for the hilly-sounds codec.

This module contains the sample domain constants, sample normalization and
the output audio configuration.
"""

from .constants import MAX_CHANNEL, MAX_INT16, MIN_INT16, OPAQUE, SAMPLE_RANGE
from .output_config import OutputConfig
from .samples import normalize_array, normalize_samples, to_int16

__all__ = [
    "OutputConfig",
    "normalize_array",
    "normalize_samples",
    "to_int16",
    "MAX_CHANNEL",
    "MAX_INT16",
    "MIN_INT16",
    "OPAQUE",
    "SAMPLE_RANGE",
]
