"""
render.py
~~~~~~~~~

Text output helpers: ASCII art for grey-scale images and picking the
winning class from a classifier output.
"""

from typing import List, Tuple

import numpy as np

from inference_engine.array import Array
from inference_engine.config import GRAY_SCALE_CHARS
from inference_engine.exceptions import ShapeMismatch


def ascii_art(image: Array, height: int, width: int) -> List[str]:
    """
    Render an image as lines of characters.

    Pixel values are expected in [0, 1]; each value ``x`` is drawn with
    ``GRAY_SCALE_CHARS[min(int(x * 10), 9)]``.

    Args:
        image: Array holding at least ``height * width`` values
        height: Number of rows
        width: Number of columns

    Returns:
        One string per row
    """
    if len(image) < height * width:
        raise ShapeMismatch(
            f"Image of {len(image)} values is too small for {height}x{width}"
        )

    last = len(GRAY_SCALE_CHARS) - 1
    indices = np.clip((image.data[:height * width] * 10).astype(int), 0, last)
    return [
        ''.join(GRAY_SCALE_CHARS[i] for i in row)
        for row in indices.reshape(height, width)
    ]


def predict(result: Array) -> Tuple[int, float]:
    """
    Return the index and value of the highest score.

    Ties resolve to the first index.
    """
    if len(result) == 0:
        raise ShapeMismatch("Cannot pick a class from an empty result")
    index = int(np.argmax(result.data))
    return index, float(result.data[index])
