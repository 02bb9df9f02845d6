"""
inference_engine package
~~~~~~~~~~~~~~~~~~~~~~~~

Minimal feed-forward neural network inference engine.
Contains the Array tensor type, the layer operators and the Network
pipeline that chains them, plus small helpers for loading parameters
and rendering MNIST digits.
"""

from inference_engine.array import Array
from inference_engine.exceptions import (
    InferenceEngineError,
    ShapeMismatch,
    DimensionMismatch,
    OperatorExecutionError,
    ParameterFileError
)
from inference_engine.operators import (
    Operator,
    Flatten,
    ReLU,
    LinearCombination,
    SoftMax
)
from inference_engine.network import Network

__version__ = "1.0.0"

__all__ = [
    "Array",
    "InferenceEngineError",
    "ShapeMismatch",
    "DimensionMismatch",
    "OperatorExecutionError",
    "ParameterFileError",
    "Operator",
    "Flatten",
    "ReLU",
    "LinearCombination",
    "SoftMax",
    "Network",
]
