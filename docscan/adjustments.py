"""
Cosmetic adjustments applied to a rectified document: filter presets and
rotation.

Filter presets are chains of CSS-style filter functions (contrast,
brightness, saturate, grayscale) evaluated on normalised RGB with the
result clamped after each step. Alpha is never touched.
"""

import logging
import math

import cv2
import numpy as np

from .raster import as_rgba

FILTER_PRESETS = {
    "magic": (("contrast", 1.4), ("brightness", 1.2), ("saturate", 1.1)),
    "grayscale": (("grayscale", 1.0),),
    "bw": (("grayscale", 1.0), ("contrast", 2.5), ("brightness", 1.1)),
    "none": (),
}

# Preset selected after every fresh crop
DEFAULT_FILTER = "magic"


def _saturate_matrix(amount):
    s = amount
    return np.array([
        [0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s]])


def _grayscale_matrix(amount):
    g = 1.0 - min(max(amount, 0.0), 1.0)
    return np.array([
        [0.2126 + 0.7874 * g, 0.7152 - 0.7152 * g, 0.0722 - 0.0722 * g],
        [0.2126 - 0.2126 * g, 0.7152 + 0.2848 * g, 0.0722 - 0.0722 * g],
        [0.2126 - 0.2126 * g, 0.7152 - 0.7152 * g, 0.0722 + 0.9278 * g]])


def _apply_function(rgb, name, amount):
    """Apply one filter function to an (..., 3) float array in [0, 1]"""
    if name == "brightness":
        out = rgb * amount
    elif name == "contrast":
        out = (rgb - 0.5) * amount + 0.5
    elif name == "saturate":
        out = rgb @ _saturate_matrix(amount).T
    elif name == "grayscale":
        out = rgb @ _grayscale_matrix(amount).T
    else:
        raise ValueError(f"Unknown filter function '{name}'")
    return np.clip(out, 0.0, 1.0)


def apply_filter(image, preset=DEFAULT_FILTER):
    """
    Apply a named filter preset.

    Args:
        image: RGBA, RGB or grayscale uint8 raster
        preset: One of FILTER_PRESETS ("magic", "grayscale", "bw", "none")

    Returns:
        New RGBA raster with the same alpha channel

    Raises:
        ValueError: If the preset name is unknown
    """
    if preset not in FILTER_PRESETS:
        raise ValueError(f"Unknown filter '{preset}', expected one of {sorted(FILTER_PRESETS)}")

    out = as_rgba(image).copy()
    steps = FILTER_PRESETS[preset]
    if not steps:
        return out

    rgb = out[..., :3].astype(np.float64) / 255.0
    for name, amount in steps:
        rgb = _apply_function(rgb, name, amount)
    out[..., :3] = np.rint(rgb * 255.0).astype(np.uint8)
    return out


def rotated_size(width, height, degrees):
    """Canvas (width, height) that holds an image rotated by degrees"""
    angle = math.radians(degrees)
    sin, cos = abs(math.sin(angle)), abs(math.cos(angle))
    return int(width * cos + height * sin), int(width * sin + height * cos)


def rotate_image(image, degrees):
    """
    Rotate clockwise by an arbitrary angle.

    Quarter turns are exact. Other angles are rendered onto an expanded
    canvas large enough for the whole image, transparent outside it.

    Args:
        image: RGBA, RGB or grayscale uint8 raster
        degrees: Clockwise rotation in degrees

    Returns:
        New RGBA raster
    """
    image = as_rgba(image)

    if degrees % 90 == 0:
        quarter = int(degrees // 90) % 4
        if quarter == 0:
            return image.copy()
        rotation_code = {
            1: cv2.ROTATE_90_CLOCKWISE,
            2: cv2.ROTATE_180,
            3: cv2.ROTATE_90_COUNTERCLOCKWISE,
        }[quarter]
        return cv2.rotate(image, rotation_code)

    height, width = image.shape[:2]
    new_width, new_height = rotated_size(width, height, degrees)

    # OpenCV angles are counter-clockwise
    matrix = cv2.getRotationMatrix2D((width / 2.0, height / 2.0), -degrees, 1.0)
    matrix[0, 2] += (new_width - width) / 2.0
    matrix[1, 2] += (new_height - height) / 2.0

    logging.debug("Rotating %dx%d image by %.1f deg onto %dx%d canvas",
                  width, height, degrees, new_width, new_height)
    return cv2.warpAffine(image, matrix, (new_width, new_height),
                          flags=cv2.INTER_LINEAR,
                          borderMode=cv2.BORDER_CONSTANT,
                          borderValue=(0, 0, 0, 0))


def process_image(image, rotation=0, preset=DEFAULT_FILTER):
    """Filter then rotate, as done when saving or downloading a scan"""
    return rotate_image(apply_filter(image, preset), rotation)
