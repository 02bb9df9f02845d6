"""
operators.py
~~~~~~~~~~~~

Layer operators for the inference pipeline.

Every operator consumes one Array and produces one Array. The output is
held in a buffer owned by the operator: it is allocated on first use and
rewritten in place on every later call, so the Array returned by
``execute`` is only valid until the next ``execute`` on the same instance.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence

import numpy as np

from inference_engine.array import Array
from inference_engine.exceptions import ShapeMismatch, DimensionMismatch

# Configure module logger
logger = logging.getLogger(__name__)


class Operator(ABC):
    """Base class for all layers."""

    def __init__(self):
        self.output = Array.empty()

    @property
    def name(self) -> str:
        """Layer kind, used in logs and error reports."""
        return type(self).__name__

    @abstractmethod
    def execute(self, input: Array) -> Array:
        """
        Apply the layer to ``input``.

        Args:
            input: Array produced by the previous layer

        Returns:
            The operator's output buffer

        Raises:
            ShapeMismatch: If the input cannot be consumed by this layer
        """

    def count_parameters(self) -> int:
        """Number of trainable scalar values held by the layer."""
        return 0

    def initialize_output(self, size: int, dimensions: Sequence[int]) -> None:
        """
        Allocate the output buffer if it is still empty.

        Args:
            size: Number of values the buffer must hold
            dimensions: Shape of the buffer
        """
        if len(self.output) == 0:
            logger.debug(f"{self.name}: allocating output buffer of {size} values")
            self.output = Array(np.zeros(size), dimensions)

    def __repr__(self) -> str:
        return f"{self.name}()"


class Flatten(Operator):
    """Collapse any input to a single dimension, keeping element order."""

    def execute(self, input: Array) -> Array:
        self.initialize_output(len(input), [len(input)])
        self.output.copy_from(input)
        self.output.reshape([len(input)])
        return self.output


class ReLU(Operator):
    """Element-wise ``max(x, 0)``."""

    def execute(self, input: Array) -> Array:
        if len(self.output) and len(self.output) != len(input):
            # Explicit resize: the buffer was sized for a different input
            logger.debug(f"{self.name}: resizing output {len(self.output)} -> {len(input)}")
            self.output = Array.empty()
        self.initialize_output(len(input), input.dimensions)

        # fmax maps NaN to 0.0
        np.fmax(input.data, 0.0, out=self.output.data)
        self.output.reshape(input.dimensions)
        return self.output


class LinearCombination(Operator):
    """
    Affine layer: ``output[j] = bias[j] + sum_i input[i] * weights[i, j]``.

    Weights are stored row-major with one row per input value and
    ``len(bias)`` columns.
    """

    def __init__(self, weights: Iterable[float], bias: Iterable[float],
                 weights_dimensions: Optional[Sequence[int]] = None):
        """
        Build the layer from flat weights and a bias vector.

        Args:
            weights: Flat row-major weight matrix
            bias: One value per output
            weights_dimensions: Optional shape of the weight matrix,
                defaults to a single dimension

        Raises:
            DimensionMismatch: If bias is empty or its length does not
                divide the number of weights
            ShapeMismatch: If ``weights_dimensions`` does not match the
                number of weights
            DimensionMismatch: If a multi-dimensional ``weights_dimensions``
                does not end with ``len(bias)`` columns
        """
        super().__init__()
        weights = np.asarray(weights, dtype=np.float64).reshape(-1)
        bias = np.asarray(bias, dtype=np.float64).reshape(-1)

        if bias.size == 0:
            raise DimensionMismatch("Bias must hold at least one value")
        if weights.size % bias.size != 0:
            raise DimensionMismatch(
                f"{weights.size} weights cannot be split into rows of "
                f"{bias.size} columns"
            )

        if weights_dimensions is None:
            weights_dimensions = [weights.size]
        elif len(weights_dimensions) > 1 and int(weights_dimensions[-1]) != bias.size:
            raise DimensionMismatch(
                f"Weight matrix of shape {list(weights_dimensions)} does not have "
                f"{bias.size} columns"
            )
        self.weights = Array(weights, weights_dimensions)
        self.bias = Array(bias, [bias.size])

    @property
    def input_size(self) -> int:
        """Number of input values the layer accepts."""
        return len(self.weights) // len(self.bias)

    @property
    def output_size(self) -> int:
        """Number of values the layer produces."""
        return len(self.bias)

    def execute(self, input: Array) -> Array:
        if len(input) * len(self.bias) != len(self.weights):
            logger.warning(
                f"{self.name}: input of {len(input)} values does not match "
                f"{self.input_size}x{self.output_size} weights"
            )
            raise DimensionMismatch(
                f"Input of {len(input)} values does not match weight matrix "
                f"of {self.input_size} rows and {self.output_size} columns"
            )

        self.initialize_output(self.output_size, self.bias.dimensions)

        matrix = self.weights.data.reshape(self.input_size, self.output_size)
        # input may be this layer's own output buffer
        product = input.data @ matrix

        out = self.output.data
        out.fill(0.0)
        out += product
        out += self.bias.data
        return self.output

    def count_parameters(self) -> int:
        return len(self.weights) + len(self.bias)

    def __repr__(self) -> str:
        return f"{self.name}(in={self.input_size}, out={self.output_size})"


class SoftMax(Operator):
    """Normalised exponentials, stabilised by subtracting the maximum."""

    def execute(self, input: Array) -> Array:
        if len(input) == 0:
            raise ShapeMismatch("SoftMax needs at least one value")
        if len(self.output) and len(self.output) != len(input):
            self.output = Array.empty()
        self.initialize_output(len(input), input.dimensions)

        out = self.output.data
        np.subtract(input.data, input.data.max(), out=out)
        np.exp(out, out=out)
        out /= out.sum()
        self.output.reshape(input.dimensions)
        return self.output
