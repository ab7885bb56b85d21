"""
CornerEditor - State of the crop screen: four draggable corners over a
source image, and the crop that turns them into a RectifiedDocument.
"""

import logging

import numpy as np

from .adjustments import DEFAULT_FILTER
from .document import RectifiedDocument
from .geometry import CORNER_LABELS, as_corner_array, default_corners
from .raster import as_rgba
from .rectifier import rectify

# Grab radius around a corner, in screen pixels
HIT_RADIUS_PX = 20


class CornerEditor:
    """
    Holds the corner set being adjusted for one source image.

    Coordinates passed in and out are in source-image pixels. The display
    scale (screen pixels per image pixel) only widens or narrows the grab
    radius.
    """

    def __init__(self, source, corners=None, document=None):
        """
        Start editing a source image.

        Args:
            source: Source raster
            corners: Initial corners; defaults to the stored corners of
                     document, then to a 10% inset from each edge
            document: Existing RectifiedDocument being re-cropped (optional);
                      its id is kept by apply_crop()
        """
        self.source = as_rgba(source)
        self.height, self.width = self.source.shape[:2]
        self.document = document

        if corners is None and document is not None and document.corners is not None:
            corners = document.corners
        if corners is None:
            corners = default_corners(self.width, self.height)
        self.corners = as_corner_array(corners)

        self.dragging = None  # index of the corner being dragged

    @classmethod
    def for_document(cls, document):
        """Re-open a gallery document on its original source image"""
        if document.source is None:
            raise ValueError(f"Document {document.id} has no source image to re-crop")
        return cls(document.source, document=document)

    def get_corners(self):
        """Copy of the current corners, ordered TL, TR, BR, BL"""
        return self.corners.copy()

    def corner_near(self, x, y, scale=1.0):
        """
        Find the corner closest to a position, within the grab radius.

        Args:
            x: X coordinate in image pixels
            y: Y coordinate in image pixels
            scale: Display scale; the radius is HIT_RADIUS_PX / scale

        Returns:
            int: Corner index, or None if no corner is close enough
        """
        threshold = HIT_RADIUS_PX / scale
        distances = np.hypot(self.corners[:, 0] - x, self.corners[:, 1] - y)
        index = int(np.argmin(distances))
        if distances[index] < threshold:
            return index
        return None

    def clamp(self, x, y):
        """Clamp a position to the image bounds"""
        return min(max(x, 0.0), float(self.width)), min(max(y, 0.0), float(self.height))

    def start_drag(self, x, y, scale=1.0):
        """
        Begin dragging the corner under the pointer, if any.

        Returns:
            bool: True if a corner was grabbed
        """
        self.dragging = self.corner_near(x, y, scale)
        return self.dragging is not None

    def drag_to(self, x, y):
        """
        Move the grabbed corner, keeping it inside the image.

        Returns:
            bool: True if a corner moved
        """
        if self.dragging is None:
            return False
        self.corners[self.dragging] = self.clamp(x, y)
        return True

    def end_drag(self):
        self.dragging = None

    def move_corner(self, index, x, y):
        """Place a corner directly (clamped to the image)"""
        if not 0 <= index < 4:
            raise IndexError(f"Corner index must be 0-3, got {index}")
        self.corners[index] = self.clamp(x, y)

    def reset(self):
        """Put the corners back to the default inset"""
        self.corners = default_corners(self.width, self.height)
        self.dragging = None

    def apply_crop(self):
        """
        Rectify the current corners into a document.

        A re-cropped document keeps its id; rotation is reset to 0 and the
        filter to the default preset.

        Returns:
            RectifiedDocument
        """
        corners = self.get_corners()
        logging.info("Applying crop with corners %s",
                     ", ".join(f"{label}=({x:.0f}, {y:.0f})"
                               for label, (x, y) in zip(CORNER_LABELS, corners)))
        image = rectify(self.source, corners)

        fields = dict(image=image, source=self.source, corners=corners,
                      rotation=0.0, filter=DEFAULT_FILTER)
        if self.document is not None:
            fields["id"] = self.document.id
        return RectifiedDocument(**fields)
