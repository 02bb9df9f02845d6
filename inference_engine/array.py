"""
array.py
~~~~~~~~

Dense N-dimensional tensor used by every operator.

An Array is a flat, row-major buffer of float64 values together with an
ordered shape descriptor. The product of the dimensions always equals the
number of stored values.
"""

import logging
from typing import Any, Iterable, Sequence, Tuple

import numpy as np

from inference_engine.exceptions import ShapeMismatch

# Configure module logger
logger = logging.getLogger(__name__)


def _element_count(dimensions: Sequence[int]) -> int:
    """Return the number of elements described by a shape."""
    return int(np.prod(dimensions, dtype=np.int64))


def _as_dimensions(dimensions: Sequence[Any]) -> Tuple[int, ...]:
    """Convert a shape to a tuple of ints, rejecting non-integral sizes."""
    result = []
    for d in dimensions:
        if int(d) != d:
            raise ShapeMismatch(f"Dimension {d!r} is not an integer")
        result.append(int(d))
    return tuple(result)


class Array:
    """
    Flat float buffer plus shape.

    ``data`` is always a one-dimensional ``numpy.ndarray`` of float64;
    ``dimensions`` is a tuple of ints.
    """

    def __init__(self, data: Iterable[float], dimensions: Sequence[int]):
        """
        Build an array from values and a shape.

        Args:
            data: Values in row-major order (any sequence or numpy array)
            dimensions: Size of each axis

        Raises:
            ShapeMismatch: If the product of dimensions differs from the
                number of values, or a dimension is negative
                or not an integer
        """
        buffer = np.array(data, dtype=np.float64).reshape(-1)
        dimensions = _as_dimensions(dimensions)

        if any(d < 0 for d in dimensions):
            raise ShapeMismatch(f"Negative dimension in shape {list(dimensions)}")
        if _element_count(dimensions) != buffer.size:
            raise ShapeMismatch(
                f"Shape {list(dimensions)} holds {_element_count(dimensions)} "
                f"elements but {buffer.size} values were given"
            )

        self.data = buffer
        self.dimensions = dimensions

    @classmethod
    def empty(cls) -> 'Array':
        """Return an array with no data and shape ``(0,)``."""
        return cls([], (0,))

    @classmethod
    def zeros(cls, dimensions: Sequence[int]) -> 'Array':
        """Return a zero-filled array of the given shape."""
        return cls(np.zeros(_element_count(dimensions)), dimensions)

    def __len__(self) -> int:
        return int(self.data.size)

    @property
    def n_dim(self) -> int:
        """Number of dimensions in the shape descriptor."""
        return len(self.dimensions)

    def copy_from(self, other: 'Array') -> None:
        """
        Overwrite this array with the contents and shape of another.

        The existing buffer is written in place when both arrays hold the
        same number of values; otherwise it is replaced.

        Args:
            other: Array to copy from
        """
        if len(self) == len(other):
            np.copyto(self.data, other.data)
        else:
            logger.debug(f"Reallocating buffer: {len(self)} -> {len(other)} values")
            self.data = other.data.copy()
        self.dimensions = tuple(other.dimensions)

    def reshape(self, dimensions: Sequence[int]) -> None:
        """
        Change the shape descriptor without moving any data.

        Args:
            dimensions: New shape, must describe the same element count

        Raises:
            ShapeMismatch: If the element count would change
        """
        dimensions = _as_dimensions(dimensions)
        if _element_count(dimensions) != len(self):
            raise ShapeMismatch(
                f"Cannot reshape {len(self)} values to {list(dimensions)}"
            )
        self.dimensions = dimensions

    def copy(self) -> 'Array':
        """Return an independent copy of this array."""
        return Array(self.data.copy(), self.dimensions)

    def to_numpy(self) -> np.ndarray:
        """Return the data as a numpy view with this array's shape."""
        return self.data.reshape(self.dimensions)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Array):
            return NotImplemented
        return (self.dimensions == other.dimensions
                and np.array_equal(self.data, other.data))

    # Arrays are mutable
    __hash__ = None

    def __repr__(self) -> str:
        return f"Array(data={self.data.tolist()}, dimensions={list(self.dimensions)})"

    @property
    def shape(self) -> Tuple[int, ...]:
        """Alias of ``dimensions`` matching numpy naming."""
        return self.dimensions
