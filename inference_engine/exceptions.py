"""
exceptions.py
~~~~~~~~~~~~~

Error types raised by the inference engine.
"""

from typing import Any


class InferenceEngineError(Exception):
    """Base class for every error raised by the engine."""


class ShapeMismatch(InferenceEngineError, ValueError):
    """An array shape does not agree with its data or with an operator."""


class DimensionMismatch(ShapeMismatch):
    """Weights, bias and input lengths of a linear layer do not line up."""


class OperatorExecutionError(InferenceEngineError):
    """
    An operator failed while a network was running inference.

    The original error is chained as ``__cause__``.
    """

    def __init__(self, index: int, operator: Any, error: Exception):
        self.index = index
        self.operator = operator
        self.error = error
        name = getattr(operator, 'name', type(operator).__name__)
        super().__init__(f"Operator {index} ({name}) failed: {error}")


class ParameterFileError(InferenceEngineError):
    """A parameter or dataset archive is missing expected entries."""
