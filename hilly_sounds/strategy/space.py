"""Mapping strategies between time and space.

A space strategy turns the index of a sample (its position along the time
axis) into a coordinate in an N-dimensional grid.
"""

import logging
import math
from abc import ABC, abstractmethod

from hilbertcurve.hilbertcurve import HilbertCurve

logger = logging.getLogger(__name__)

__all__ = [
    "SpaceStrategy",
    "SpaceStrategyAdapter",
    "HilbertSpaceStrategy",
    "LineSpaceStrategy",
]


class SpaceStrategy(ABC):
    """A mapping between a linear index and an N-dimensional coordinate.

    Subclasses set `dimensions` and implement index_to_coord() and length().
    """

    dimensions: int = 0

    @abstractmethod
    def index_to_coord(self, index: int) -> tuple[int, ...] | None:
        """Convert an index to a point in space.

        Args:
            index: Position along the time axis, starting at 0

        Returns:
            A tuple of `dimensions` integers for all 0 <= index < size(),
            None once the index reaches size()
        """
        raise NotImplementedError()

    @abstractmethod
    def length(self, dimension: int) -> int:
        """Return the number of distinct values of the given dimension."""
        raise NotImplementedError()

    def size(self) -> int:
        """Return how many indices this space holds.

        By default, this is the product of the lengths of all dimensions.
        """
        return math.prod(self.length(dimension) for dimension in range(self.dimensions))

    @property
    def width(self) -> int:
        return self.length(0)

    @property
    def height(self) -> int:
        return self.length(1) if self.dimensions > 1 else 1

    def _check_index(self, index: int) -> bool:
        """Return True if `index` is inside the space, raising on negative indices."""
        if index < 0:
            raise ValueError(f"index must be non-negative, got {index}")
        return index < self.size()

    def _check_dimension(self, dimension: int) -> None:
        if not 0 <= dimension < self.dimensions:
            raise ValueError(f"dimension must be in [0, {self.dimensions}), got {dimension}")

    def __repr__(self):
        lengths = ", ".join(str(self.length(d)) for d in range(self.dimensions))
        return f"{self.__class__.__name__}({lengths})"


class SpaceStrategyAdapter(SpaceStrategy):
    """Adapt a space strategy of a lower dimension into a higher dimension.

    The extra dimensions are padded with zeros and have a length of 1, so a
    line can be used wherever a plane is expected. The capacity is the one of
    the inner strategy.
    """

    def __init__(self, inner: SpaceStrategy, dimensions: int = 2):
        if inner.dimensions >= dimensions:
            raise ValueError(
                f"can only adapt to a higher dimension: {inner.dimensions} -> {dimensions}"
            )
        logger.debug("SpaceStrategyAdapter(%r, %s)", inner, dimensions)
        self._inner = inner
        self.dimensions = dimensions

    @property
    def inner(self) -> SpaceStrategy:
        return self._inner

    def index_to_coord(self, index):
        coord = self._inner.index_to_coord(index)
        if coord is None:
            return None
        return coord + (0,) * (self.dimensions - self._inner.dimensions)

    def length(self, dimension):
        self._check_dimension(dimension)
        if dimension < self._inner.dimensions:
            return self._inner.length(dimension)
        return 1

    def size(self):
        return self._inner.size()


class HilbertSpaceStrategy(SpaceStrategy):
    """Walk a square grid along a two-dimensional Hilbert curve.

    Consecutive indices always land on neighbouring cells, so patterns that
    are close in time stay close in the image.
    """

    dimensions = 2

    def __init__(self, size_exp: int):
        """Initialize the strategy.

        Args:
            size_exp: Base-2 exponent of the side length
        """
        if size_exp < 0:
            raise ValueError(f"size_exp must be non-negative, got {size_exp}")
        logger.debug("HilbertSpaceStrategy(%s)", size_exp)
        self._size_exp = size_exp
        # hilbertcurve needs at least one iteration; a 1x1 grid is handled directly
        self._curve = HilbertCurve(size_exp, 2) if size_exp > 0 else None

    @classmethod
    def from_size(cls, size: int) -> "HilbertSpaceStrategy":
        """Build the strategy from a side length, which must be a power of two."""
        if size <= 0 or size & (size - 1):
            raise ValueError(f"size must be a power of two, got {size}")
        return cls(size.bit_length() - 1)

    @property
    def size_exp(self) -> int:
        return self._size_exp

    @property
    def side(self) -> int:
        return 1 << self._size_exp

    def index_to_coord(self, index):
        if not self._check_index(index):
            return None
        if self._curve is None:
            return (0, 0)
        x, y = self._curve.point_from_distance(index)
        return (int(x), int(y))

    def length(self, dimension):
        self._check_dimension(dimension)
        return self.side

    def size(self):
        return 1 << (2 * self._size_exp)


class LineSpaceStrategy(SpaceStrategy):
    """The identity embedding of the index into one dimension."""

    dimensions = 1

    def __init__(self, length: int):
        if length < 0:
            raise ValueError(f"length must be non-negative, got {length}")
        logger.debug("LineSpaceStrategy(%s)", length)
        self._length = length

    def index_to_coord(self, index):
        if not self._check_index(index):
            return None
        return (index,)

    def length(self, dimension):
        self._check_dimension(dimension)
        return self._length

    def size(self):
        return self._length
