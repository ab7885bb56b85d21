"""
Reading and writing rasters. Images come back as RGBA uint8 arrays.
"""

import logging
import os

import cv2
import numpy as np
from PIL import Image
from pillow_heif import register_heif_opener  # For HEIC file support

from .raster import as_rgba

# Register HEIF opener with Pillow to enable HEIC support
register_heif_opener()

HEIC_EXTENSIONS = ('.heic', '.heif')
# Formats without an alpha channel
OPAQUE_EXTENSIONS = ('.jpg', '.jpeg', '.bmp')
DEFAULT_DPI = 300


def is_heic(path):
    return str(path).lower().endswith(HEIC_EXTENSIONS)


def _bgr_to_rgb(image):
    """Reorder an OpenCV-decoded array (BGR/BGRA/gray) to RGB/RGBA"""
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    if image.ndim == 3 and image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
    if image.ndim == 3 and image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
    return image


def load_image(path):
    """
    Load an image from disk as RGBA, keeping any alpha channel it has.

    Standard formats are decoded by OpenCV with all channels intact;
    HEIC/HEIF go through Pillow. Images without alpha come back opaque.

    Raises:
        FileNotFoundError: If the file is missing or cannot be decoded
    """
    path = os.fspath(path)
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Could not read image at: {path}")

    if is_heic(path):
        with Image.open(path) as pil_image:
            image = np.array(pil_image.convert('RGBA'))
    else:
        image = cv2.imread(path, cv2.IMREAD_UNCHANGED)
        if image is None:
            raise FileNotFoundError(f"Could not decode image at: {path}")
        image = _bgr_to_rgb(image)

    logging.debug("Loaded %s (%dx%d)", path, image.shape[1], image.shape[0])
    return as_rgba(image)


def read_dpi(path, default=DEFAULT_DPI):
    """
    Read the horizontal DPI stored in an image's metadata.

    Returns:
        int DPI, or default if the file has none
    """
    try:
        with Image.open(path) as pil_image:
            dpi_info = pil_image.info.get('dpi')
    except OSError:
        logging.warning("Could not read DPI from %s, using %d", path, default)
        return default
    if dpi_info and dpi_info[0]:
        # DPI info is a tuple (x_dpi, y_dpi), use x_dpi
        return int(round(float(dpi_info[0])))
    return default


def save_image(image, path, dpi=DEFAULT_DPI):
    """
    Save a raster with DPI metadata.

    Formats without transparency (JPEG, BMP) drop the alpha channel.

    Returns:
        The path written
    """
    path = os.fspath(path)
    pil_image = Image.fromarray(np.ascontiguousarray(as_rgba(image)))
    if path.lower().endswith(OPAQUE_EXTENSIONS):
        pil_image = pil_image.convert('RGB')

    pil_image.save(path, dpi=(dpi, dpi))
    logging.info("Saved %s @ %d DPI", path, dpi)
    return path


def suggest_output_path(path, suffix):
    """
    Suggest an output file beside the input: <name>_<suffix><ext>.

    HEIC inputs are saved as PNG; JPEG is normalised to .jpg.
    """
    directory = os.path.dirname(path)
    name_without_ext, ext = os.path.splitext(os.path.basename(path))

    ext = ext.lower()
    if ext == '.jpeg':
        ext = '.jpg'
    elif ext in HEIC_EXTENSIONS or ext not in ('.jpg', '.png', '.bmp'):
        ext = '.png'
    return os.path.join(directory, f"{name_without_ext}_{suffix}{ext}")
