"""
Raster helpers. Images are numpy arrays of shape (height, width, 4),
dtype uint8, RGBA.
"""

import cv2
import numpy as np

CHANNELS = 4


def new_raster(width, height):
    """Allocate a fully transparent RGBA raster"""
    return np.zeros((height, width, CHANNELS), dtype=np.uint8)


def as_rgba(image):
    """
    Return the image as a 4-channel RGBA array.

    Grayscale and RGB inputs are expanded with an opaque alpha channel.
    RGBA input is returned as-is (no copy).

    Raises:
        ValueError: If the array is not a 2D grayscale or 3/4 channel image
    """
    image = np.asarray(image)
    if image.dtype != np.uint8:
        raise ValueError(f"Expected a uint8 image, got {image.dtype}")

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
    if image.ndim == 3 and image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_RGB2RGBA)
    if image.ndim == 3 and image.shape[2] == CHANNELS:
        return image
    raise ValueError(f"Unsupported image shape {image.shape}")

