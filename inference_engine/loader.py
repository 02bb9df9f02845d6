"""
loader.py
~~~~~~~~~

Load pre-trained parameters and image datasets from NumPy ``.npz``
archives, and assemble the MNIST classifier topology.

Parameter archives hold ``weights_1``, ``bias_1``, ``weights_2``,
``bias_2``, ... where ``weights_n`` is an (inputs x outputs) matrix (or its
flat row-major form) and ``bias_n`` has one value per output.
"""

import os
import logging
from typing import List, Sequence, Tuple

import numpy as np

from inference_engine.array import Array
from inference_engine.config import IMAGE_SIZE
from inference_engine.exceptions import ParameterFileError
from inference_engine.network import Network
from inference_engine.operators import Flatten, LinearCombination, ReLU, SoftMax

# Configure module logger
logger = logging.getLogger(__name__)

LayerParameters = Tuple[np.ndarray, np.ndarray]


def load_parameters(filepath: str) -> List[LayerParameters]:
    """
    Read layer weights and biases from an ``.npz`` archive.

    Args:
        filepath: Path to the archive

    Returns:
        List of (weights, bias) pairs in layer order

    Raises:
        ParameterFileError: If the file is missing or layers are incomplete
    """
    if not os.path.exists(filepath):
        raise ParameterFileError(f"Parameter file not found: {filepath}")

    layers = []
    with np.load(filepath) as data:
        n = 1
        while f'weights_{n}' in data.files:
            if f'bias_{n}' not in data.files:
                raise ParameterFileError(f"{filepath}: 'weights_{n}' has no matching 'bias_{n}'")
            layers.append((data[f'weights_{n}'], data[f'bias_{n}']))
            n += 1

    if not layers:
        raise ParameterFileError(f"{filepath}: no 'weights_1' entry found")

    logger.info(f"Loaded {len(layers)} layer(s) from {filepath}")
    return layers


def load_images(filepath: str, key: str = 'images',
                image_size: Sequence[int] = IMAGE_SIZE) -> List[Array]:
    """
    Read a stack of images from an ``.npz`` archive.

    Args:
        filepath: Path to the archive
        key: Name of the image entry
        image_size: Shape given to each image

    Returns:
        One Array per image
    """
    if not os.path.exists(filepath):
        raise ParameterFileError(f"Dataset file not found: {filepath}")

    with np.load(filepath) as data:
        if key not in data.files:
            raise ParameterFileError(f"{filepath}: no '{key}' entry found")
        images = data[key]

    if images.ndim == 0:
        raise ParameterFileError(f"{filepath}: '{key}' is a scalar, expected a stack of images")
    if len(images) == 0:
        logger.warning(f"{filepath}: '{key}' holds no images")
        return []

    pixels = int(np.prod(image_size))
    images = images.reshape(len(images), -1)
    if images.shape[1] != pixels:
        raise ParameterFileError(
            f"{filepath}: images hold {images.shape[1]} values, expected {pixels}"
        )

    logger.info(f"Loaded {len(images)} image(s) from {filepath}")
    return [Array(image, image_size) for image in images]


def build_classifier(parameters: Sequence[LayerParameters]) -> Network:
    """
    Assemble Flatten -> (Linear -> ReLU)* -> Linear -> SoftMax.

    Args:
        parameters: (weights, bias) per linear layer, in order

    Returns:
        Network ready for inference
    """
    if not parameters:
        raise ParameterFileError("At least one linear layer is required")

    network = Network()
    network.add_operator(Flatten())
    for n, (weights, bias) in enumerate(parameters):
        weights = np.asarray(weights)
        network.add_operator(LinearCombination(weights.reshape(-1), bias, weights.shape))
        if n < len(parameters) - 1:
            network.add_operator(ReLU())
    network.add_operator(SoftMax())

    logger.info(f"Built classifier with {network.count_parameters()} parameters")
    return network
