"""
config.py
~~~~~~~~~

Runtime settings and logging setup.

Values can be overridden through environment variables:
- LOG_LEVEL: logging level name (default INFO)
- INFERENCE_SAMPLE_COUNT: number of dataset images the driver classifies
"""

import os
import logging

# MNIST images are 28x28 grey-scale
IMAGE_SIZE = (28, 28)

# Darkest to brightest
GRAY_SCALE_CHARS = (" ", ".", ":", "-", "=", "+", "*", "#", "%", "@")

SEPARATOR = "-" * 46

DEFAULT_SAMPLE_COUNT = 3


def get_sample_count() -> int:
    """Return the number of images to classify, from the environment."""
    value = os.getenv('INFERENCE_SAMPLE_COUNT')
    if value is None:
        return DEFAULT_SAMPLE_COUNT
    try:
        count = int(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Ignoring invalid INFERENCE_SAMPLE_COUNT={value!r}"
        )
        return DEFAULT_SAMPLE_COUNT
    return max(count, 0)


def configure_logging() -> None:
    """Set up root logging from the LOG_LEVEL environment variable."""
    log_level_str = os.getenv('LOG_LEVEL', 'INFO').upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
