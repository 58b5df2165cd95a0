"""Numeric constants shared by the codec."""

# 16-bit signed sample domain: -2^15 .. 2^15 - 1
MAX_INT16 = 2**15 - 1  # 32767
MIN_INT16 = -(2**15)  # -32768

# Number of distinct 16-bit samples, i.e. one full turn of the hue wheel
SAMPLE_RANGE = 2**16  # 65536

# Float samples in [-1, 1) are scaled by this before truncation
FLOAT_SCALE = 2**15  # 32768

# 32-bit integer samples keep their high half
INT32_SHIFT = 16

# 8-bit color channels
MAX_CHANNEL = 2**8 - 1  # 255
OPAQUE = MAX_CHANNEL

__all__ = [
    "MAX_INT16",
    "MIN_INT16",
    "SAMPLE_RANGE",
    "FLOAT_SCALE",
    "INT32_SHIFT",
    "MAX_CHANNEL",
    "OPAQUE",
]
