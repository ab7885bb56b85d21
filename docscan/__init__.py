"""
Docscan library - perspective correction of photographed documents and
ID card sheet composition.
"""

from .adjustments import FILTER_PRESETS, apply_filter, process_image, rotate_image
from .corner_editor import CornerEditor
from .document import Gallery, RectifiedDocument
from .errors import (
    DegenerateGeometryError,
    DocScanError,
    InvalidCornersError,
    SelectionLimitError,
)
from .image_io import load_image, save_image
from .linear_solver import solve
from .projective import compute_transform, map_point, map_points
from .rectifier import output_shape, rectify, validate_corners
from .sheet_composer import compose
from .unit_converter import UnitConverter

__all__ = [
    'FILTER_PRESETS',
    'apply_filter',
    'process_image',
    'rotate_image',
    'CornerEditor',
    'Gallery',
    'RectifiedDocument',
    'DocScanError',
    'DegenerateGeometryError',
    'InvalidCornersError',
    'SelectionLimitError',
    'load_image',
    'save_image',
    'solve',
    'compute_transform',
    'map_point',
    'map_points',
    'output_shape',
    'rectify',
    'validate_corners',
    'compose',
    'UnitConverter',
]
