#!/usr/bin/env python3
"""
Classify MNIST digits with a pre-trained feed-forward network.

Builds the Flatten -> Linear -> ReLU -> Linear -> ReLU -> Linear -> SoftMax
pipeline from a parameter archive, then renders the first images of a
dataset as ASCII art and prints the predicted digit for each.

Usage:
    python scripts/run_inference.py [--parameters data/classifier.npz]
                                    [--dataset data/digits.npz] [--count 3]

Set LOG_LEVEL=DEBUG to trace every operator.
"""

import os
import sys
import argparse
import logging
from typing import List, Optional

from inference_engine import InferenceEngineError
from inference_engine.config import (
    IMAGE_SIZE,
    SEPARATOR,
    configure_logging,
    get_sample_count
)
from inference_engine.loader import build_classifier, load_images, load_parameters
from inference_engine.render import ascii_art, predict

logger = logging.getLogger(__name__)


def non_negative_int(value: str) -> int:
    """argparse type accepting integers >= 0."""
    try:
        count = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if count < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {count}")
    return count


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line options."""
    script_dir = os.path.dirname(os.path.abspath(__file__))
    data_dir = os.path.join(os.path.dirname(script_dir), 'data')

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument('--parameters', default=os.path.join(data_dir, 'classifier.npz'),
                        help='archive holding weights_<n> and bias_<n> entries')
    parser.add_argument('--dataset', default=os.path.join(data_dir, 'digits.npz'),
                        help="archive holding an 'images' entry")
    parser.add_argument('--count', type=non_negative_int, default=get_sample_count(),
                        help='number of images to classify')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the classifier and return the process exit status."""
    configure_logging()
    args = parse_args(argv)

    try:
        images = load_images(args.dataset)
        print(f"Dataset contains {len(images)} items")

        print("Network initialization... ", end='')
        network = build_classifier(load_parameters(args.parameters))
        print("Done")
        print(f"Inference engine has {network.count_parameters()} parameters")
        print(SEPARATOR)
        print(SEPARATOR)

        height, width = IMAGE_SIZE
        for image in images[:args.count]:
            for line in ascii_art(image, height, width):
                print(repr(line))
            digit, score = predict(network.execute_inference(image))
            print(f"Above image represents number '{digit}' (score: {score})")
            print(SEPARATOR)
            print(SEPARATOR)

    except InferenceEngineError as e:
        logger.exception(f"Inference failed: {e}")
        return 1

    print("Dataset exhausted")
    return 0


if __name__ == '__main__':
    sys.exit(main())
