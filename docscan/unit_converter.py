"""
Unit conversion between pixels and physical lengths (cm, mm, inches).
The sheet composer relies on the fixed 118.11 px/cm factor at 300 DPI.
"""

# Conversion constants
REFERENCE_DPI = 300
PX_PER_CM = 118.11  # at REFERENCE_DPI

UNIT_LABELS = {
    "pixels": "px",
    "mm": "mm",
    "cm": "cm",
    "inches": "in",
}


def cm_to_px(cm, dpi=REFERENCE_DPI):
    """Convert centimetres to (fractional) pixels"""
    return cm * PX_PER_CM * dpi / REFERENCE_DPI


def px_to_cm(pixels, dpi=REFERENCE_DPI):
    """Convert pixels to centimetres"""
    return pixels * REFERENCE_DPI / (PX_PER_CM * dpi)


class UnitConverter:
    """
    Handles conversion between pixels and physical units at a given DPI.

    Supports four unit types:
    - pixels: Direct pixel measurements
    - cm: Centimetres (fixed 118.11 px/cm at 300 DPI)
    - mm: Millimetres (tenths of a centimetre)
    - inches: Inches (DPI pixels per inch)
    """

    def __init__(self, units="cm", dpi=REFERENCE_DPI):
        """
        Initialize the unit converter.

        Args:
            units: Default unit type ("pixels", "mm", "cm" or "inches")
            dpi: Dots per inch for conversion (default: 300)
        """
        self._check_units(units)
        if dpi <= 0:
            raise ValueError("DPI must be positive")
        self.units = units
        self.dpi = dpi

    @staticmethod
    def _check_units(units):
        if units not in UNIT_LABELS:
            raise ValueError(f"Unknown units '{units}', expected one of {sorted(UNIT_LABELS)}")

    def units_to_pixels(self, value, units=None):
        """
        Convert a length to pixels.

        Args:
            value: Length in the given units
            units: Override the default units (optional)

        Returns:
            Float pixel value
        """
        if units is None:
            units = self.units
        self._check_units(units)

        if units == "pixels":
            return float(value)
        elif units == "inches":
            return value * self.dpi
        elif units == "mm":
            return cm_to_px(value / 10.0, self.dpi)
        else:  # cm
            return cm_to_px(value, self.dpi)

    def pixels_to_units(self, pixels, units=None):
        """
        Convert pixels to a physical length.

        Args:
            pixels: Pixel value to convert
            units: Override the default units (optional)

        Returns:
            Float value in target units
        """
        if units is None:
            units = self.units
        self._check_units(units)

        if units == "pixels":
            return float(pixels)
        elif units == "inches":
            return pixels / self.dpi
        elif units == "mm":
            return px_to_cm(pixels, self.dpi) * 10.0
        else:  # cm
            return px_to_cm(pixels, self.dpi)

    def convert_units(self, value, from_units, to_units):
        """Convert a value from one unit system to another, via pixels"""
        return self.pixels_to_units(self.units_to_pixels(value, from_units), to_units)

    def get_unit_label(self, units=None):
        """Short display label for a unit type ("px", "mm", "cm" or "in")"""
        if units is None:
            units = self.units
        self._check_units(units)
        return UNIT_LABELS[units]
