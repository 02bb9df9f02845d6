"""
network.py
~~~~~~~~~~

Sequential pipeline of operators.

A Network applies its operators in insertion order, feeding each one the
output of the previous. Shape compatibility between neighbouring layers is
only checked when inference runs.
"""

import logging
from typing import Dict, Iterator, List, Tuple, Any

from inference_engine.array import Array
from inference_engine.exceptions import InferenceEngineError, OperatorExecutionError
from inference_engine.operators import Operator

# Configure module logger
logger = logging.getLogger(__name__)


class Network:
    """
    Ordered collection of operators run as a single forward pass.

    A network is reusable across any number of inference calls. It is not
    safe to run one instance from several threads at once.
    """

    def __init__(self):
        self._operators: List[Operator] = []
        self.input = Array.empty()

    def add_operator(self, operator: Operator) -> None:
        """
        Append an operator to the end of the pipeline.

        Args:
            operator: Layer to append

        Raises:
            TypeError: If ``operator`` is not an Operator
        """
        if not isinstance(operator, Operator):
            raise TypeError(f"Expected an Operator, got {type(operator).__name__}")
        self._operators.append(operator)
        logger.debug(f"Added {operator!r} at position {len(self._operators) - 1}")

    @property
    def operators(self) -> Tuple[Operator, ...]:
        """Operators in execution order."""
        return tuple(self._operators)

    def __len__(self) -> int:
        return len(self._operators)

    def __iter__(self) -> Iterator[Operator]:
        return iter(self._operators)

    def count_parameters(self) -> int:
        """Total number of trainable values across all operators."""
        return sum(operator.count_parameters() for operator in self._operators)

    def summary(self) -> List[Dict[str, Any]]:
        """
        Describe each layer of the pipeline.

        Returns:
            One dict per operator with its position, name and parameter count
        """
        return [
            {
                'index': index,
                'operator': operator.name,
                'parameters': operator.count_parameters()
            }
            for index, operator in enumerate(self._operators)
        ]

    def execute_inference(self, input: Array) -> Array:
        """
        Run a forward pass.

        Args:
            input: Array fed to the first operator

        Returns:
            A copy of the last operator's output (a copy of ``input`` when
            the network is empty)

        Raises:
            OperatorExecutionError: If any operator rejects its input; the
                remaining operators are not run
        """
        self.input.copy_from(input)

        result = self.input
        for index, operator in enumerate(self._operators):
            try:
                result = operator.execute(result)
            except InferenceEngineError as e:
                logger.warning(f"Inference aborted at operator {index} ({operator.name}): {e}")
                raise OperatorExecutionError(index, operator, e) from e
            logger.debug(f"Operator {index} ({operator.name}) -> shape {list(result.dimensions)}")

        return result.copy()

    def __repr__(self) -> str:
        layers = ', '.join(repr(operator) for operator in self._operators)
        return f"Network([{layers}])"
