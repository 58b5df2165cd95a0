"""Streaming conversion between sample sequences and RGBA pixel grids.

The Encoder walks a space strategy index by index, pairing each coordinate
with the color of the next sample. The Decoder walks the same coordinates
over a finished image and turns each pixel back into a sample.
"""

import logging
from collections.abc import Iterable

import numpy as np
from PIL import Image

from .core.samples import normalize_samples
from .strategy.color import ColorStrategy
from .strategy.space import SpaceStrategy

logger = logging.getLogger(__name__)

__all__ = [
    "Encoder",
    "Decoder",
    "encode_image",
    "decode_image",
]

_EXHAUSTED = object()

# Transparent black, for pixels no sample reached
DEFAULT_BACKGROUND = (0, 0, 0, 0)


def _plane_coord(coord: tuple[int, ...]) -> tuple[int, int]:
    """Return the (x, y) part of a coordinate, y being 0 for a line."""
    if len(coord) == 1:
        return coord[0], 0
    return coord[0], coord[1]


def _as_pixel_array(image) -> np.ndarray:
    """Return the pixels of `image` as a (height, width, channels) array."""
    if isinstance(image, Image.Image):
        if image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGBA")
        return np.asarray(image)

    pixels = np.asarray(image)
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise ValueError(f"expected an RGB or RGBA pixel grid, got an array of shape {pixels.shape}")
    return pixels


class Encoder:
    """Iterator of (coordinate, color) pairs, one per input sample.

    Iteration stops as soon as either the space is full (remaining samples
    are left unread) or the samples run out (the rest of the space is left
    empty), so exactly min(size, number of samples) pairs are produced. An
    Encoder is good for a single pass.
    """

    def __init__(
        self,
        samples: Iterable,
        color_strategy: ColorStrategy,
        space_strategy: SpaceStrategy,
        dtype=None,
    ):
        """Initialize the Encoder.

        Args:
            samples: Input samples, int16 values or anything normalize_samples() accepts
            color_strategy: Strategy turning samples into colors
            space_strategy: Strategy turning indices into coordinates
            dtype: Source sample type, inferred from the samples when None
        """
        self._index = 0
        self._samples = normalize_samples(samples, dtype)
        self._color_strategy = color_strategy
        self._space_strategy = space_strategy
        self._size = space_strategy.size()
        logger.debug("Encoder(%r, %r): capacity %s", color_strategy, space_strategy, self._size)

    @property
    def index(self) -> int:
        """Number of pairs produced so far."""
        return self._index

    @property
    def color_strategy(self) -> ColorStrategy:
        return self._color_strategy

    @property
    def space_strategy(self) -> SpaceStrategy:
        return self._space_strategy

    def __iter__(self):
        return self

    def __next__(self) -> tuple[tuple[int, ...], tuple[int, int, int, int]]:
        if self._index >= self._size:
            raise StopIteration

        sample = next(self._samples, _EXHAUSTED)
        if sample is _EXHAUSTED:
            logger.debug("Encoder: input exhausted after %s samples", self._index)
            self._size = self._index
            raise StopIteration

        coord = self._space_strategy.index_to_coord(self._index)
        if coord is None:
            raise RuntimeError(f"could not get coordinate from index {self._index}")
        self._index += 1

        return coord, self._color_strategy.sample_to_color(sample)

    def __length_hint__(self):
        return self._size - self._index


class Decoder:
    """Iterator of samples read from an image along a space strategy.

    The image must have exactly the width and height declared by the space
    strategy. Exactly size() samples are produced, whatever the pixels hold.
    A Decoder is good for a single pass and does no locking; drive it from
    one thread at a time.
    """

    def __init__(self, image, color_strategy: ColorStrategy, space_strategy: SpaceStrategy):
        """Initialize the Decoder.

        Args:
            image: PIL image or (height, width, 3|4) uint8 array
            color_strategy: Strategy turning colors into samples
            space_strategy: Strategy turning indices into coordinates

        Raises:
            ValueError: If the image extent differs from the space strategy's
        """
        pixels = _as_pixel_array(image)
        height, width = pixels.shape[:2]
        expected = (space_strategy.width, space_strategy.height)
        if (width, height) != expected:
            raise ValueError(
                f"image is {width}x{height} but the space strategy expects {expected[0]}x{expected[1]}"
            )

        self._index = 0
        self._pixels = pixels
        self._color_strategy = color_strategy
        self._space_strategy = space_strategy
        self._size = space_strategy.size()
        logger.debug("Decoder(%r, %r): %s samples", color_strategy, space_strategy, self._size)

    @property
    def index(self) -> int:
        """Number of samples produced so far."""
        return self._index

    @property
    def size(self) -> int:
        """Total number of samples this decoder produces."""
        return self._size

    def __iter__(self):
        return self

    def __next__(self) -> int:
        if self._index >= self._size:
            raise StopIteration

        coord = self._space_strategy.index_to_coord(self._index)
        if coord is None:
            raise RuntimeError(f"could not get coordinate from index {self._index}")
        self._index += 1

        x, y = _plane_coord(coord)
        return self._color_strategy.color_to_sample(self._pixels[y, x])

    def __len__(self):
        return self._size - self._index


def encode_image(
    samples: Iterable,
    color_strategy: ColorStrategy,
    space_strategy: SpaceStrategy,
    background=DEFAULT_BACKGROUND,
    dtype=None,
) -> np.ndarray:
    """Encode samples into a new RGBA pixel grid.

    The grid is sized to the space strategy (width = length(0), height =
    length(1)). Pixels never reached because the samples ran out keep the
    `background` color.

    Returns:
        A (height, width, 4) uint8 array
    """
    pixels = np.empty((space_strategy.height, space_strategy.width, 4), dtype=np.uint8)
    pixels[:, :] = background

    encoder = Encoder(samples, color_strategy, space_strategy, dtype=dtype)
    for coord, color in encoder:
        x, y = _plane_coord(coord)
        pixels[y, x] = color

    logger.debug("encode_image(): %s of %s pixels written", encoder.index, space_strategy.size())
    return pixels


def decode_image(image, sink, color_strategy: ColorStrategy, space_strategy: SpaceStrategy) -> int:
    """Decode an image into `sink`, in order.

    Args:
        image: PIL image or (height, width, 3|4) uint8 array
        sink: Any object with an append(sample) method

    Returns:
        The number of samples written
    """
    decoder = Decoder(image, color_strategy, space_strategy)
    for sample in decoder:
        sink.append(sample)

    logger.debug("decode_image(): %s samples written", decoder.index)
    return decoder.index
