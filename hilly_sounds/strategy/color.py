"""Mapping strategies between colors and samples."""

import colorsys
import logging
from abc import ABC, abstractmethod

from hilly_sounds.core.constants import MAX_CHANNEL, MIN_INT16, OPAQUE, SAMPLE_RANGE
from hilly_sounds.core.samples import clamp_int16

logger = logging.getLogger(__name__)

__all__ = [
    "ColorStrategy",
    "HueColorStrategy",
]


class ColorStrategy(ABC):
    """A mapping between sound samples and RGBA colors.

    Both functions must accept any value of their domain without raising.
    Ideally each is the inverse of the other, but there are more colors than
    samples, so the mapping cannot be bijective. Colors outside the image of
    sample_to_color() should map to a best guess rather than produce
    artifacts.
    """

    @abstractmethod
    def sample_to_color(self, sample: int) -> tuple[int, int, int, int]:
        """Convert an int16 sample to an RGBA color."""
        raise NotImplementedError()

    @abstractmethod
    def color_to_sample(self, color) -> int:
        """Convert an RGB or RGBA color to an int16 sample."""
        raise NotImplementedError()


def _to_channel(component: float) -> int:
    return max(0, min(MAX_CHANNEL, int(MAX_CHANNEL * component)))


class HueColorStrategy(ColorStrategy):
    """A color strategy that encodes the amplitude as a hue angle.

    The sample range is spread over one full turn of the color wheel:
    -32768 is hue 0 (red), 0 is half a turn (cyan). Saturation and value are
    fixed for the whole image.

    At saturation = value = 1.0, the hue wheel only has 6 * 255 distinct
    steps, so a round trip through a color is off by at most
    MAX_ROUND_TRIP_ERROR, measured around the wheel: samples just below
    32767 quantize to pure red and read back as -32768.
    """

    MAX_ROUND_TRIP_ERROR = 44

    def __init__(self, saturation: float = 1.0, value: float = 1.0):
        if not 0.0 <= saturation <= 1.0:
            raise ValueError(f"saturation must be in [0, 1], got {saturation}")
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"value must be in [0, 1], got {value}")
        logger.debug("HueColorStrategy(%s, %s)", saturation, value)
        self._saturation = float(saturation)
        self._value = float(value)

    @property
    def saturation(self) -> float:
        return self._saturation

    @property
    def value(self) -> float:
        return self._value

    def sample_to_color(self, sample):
        hue = (clamp_int16(sample) - MIN_INT16) / SAMPLE_RANGE
        red, green, blue = colorsys.hsv_to_rgb(hue, self._saturation, self._value)
        return (_to_channel(red), _to_channel(green), _to_channel(blue), OPAQUE)

    def color_to_sample(self, color):
        # alpha is not read
        red, green, blue = (int(channel) / MAX_CHANNEL for channel in tuple(color)[:3])
        hue, _, _ = colorsys.rgb_to_hsv(red, green, blue)
        return clamp_int16(int(hue * SAMPLE_RANGE + MIN_INT16))

    def __repr__(self):
        return f"HueColorStrategy(saturation={self._saturation}, value={self._value})"
