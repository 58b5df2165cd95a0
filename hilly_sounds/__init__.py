"""Encode audio samples into images along space-filling curves, and back."""

__version__ = "0.1.0"

from .codec import Decoder, Encoder, decode_image, encode_image  # noqa: E402, F401
from .core import OutputConfig  # noqa: E402, F401
from .strategy import (  # noqa: E402, F401
    ColorStrategy,
    HilbertSpaceStrategy,
    HueColorStrategy,
    LineSpaceStrategy,
    Preset,
    SpaceStrategy,
    SpaceStrategyAdapter,
)
