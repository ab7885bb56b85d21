"""
Exception types raised by the scanning library.
"""


class DocScanError(Exception):
    """Base class for errors reported by docscan."""


class InvalidCornersError(DocScanError, ValueError):
    """Raised when a corner set does not hold exactly four (x, y) points."""


class DegenerateGeometryError(DocScanError):
    """Raised by validate_corners when the quadrilateral has no usable area."""


class SelectionLimitError(DocScanError):
    """Raised when a gallery selection is empty or would exceed two documents."""
