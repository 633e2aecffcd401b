"""
Constants and fixed parameters for metgeoms package.

This module defines standard pressure levels, tick spacing for geographic
axes, styling constants and the z-order used to stack chart layers.
"""

# ============================================================================
# Geographic Axes
# ============================================================================

DEGREE_SIGN = "°"

# Default tick spacing in degrees
LONGITUDE_TICK_SPACING = 60.0
LATITUDE_TICK_SPACING = 30.0

# ============================================================================
# Pressure Levels
# ============================================================================

# Mandatory levels in hPa, surface to stratosphere
STANDARD_PRESSURE_LEVELS = [
    1000, 925, 850, 700, 500, 400, 300, 250, 200, 150, 100, 70, 50, 30, 20, 10,
]

# ============================================================================
# Contour Defaults
# ============================================================================

DEFAULT_BINS = 10
DEFAULT_CMAP = "viridis"

# Contour Line Styling
CONTOUR_LINE_COLOR = "black"
CONTOUR_LINE_WIDTH = 0.5

# Contour Label Styling
LABEL_FONT_SIZE = 8
LABEL_FORMAT = "%g"
LABEL_HALO_COLOR = "white"
LABEL_HALO_WIDTH = 2.2

# ============================================================================
# Illumination
# ============================================================================

# Degrees counterclockwise from north; 60 puts the sun in the north-west
SUN_ANGLE = 60.0
RELIEF_ALTITUDE = 45.0

TANAKA_LIGHT_COLOR = "white"
TANAKA_DARK_COLOR = "#333333"
TANAKA_WIDTH_RANGE = (0.1, 1.2)

# ============================================================================
# Vector Fields
# ============================================================================

VECTOR_COLOR = "black"
STREAMLINE_CMAP = "Greys"

# ============================================================================
# Layer Stacking
# ============================================================================

ZORDER = {
    "relief": 0,
    "fill": 1,
    "tanaka": 3,
    "lines": 3,
    "labels": 4,
    "streamlines": 5,
    "vectors": 6,
}

# ============================================================================
# Color Strip Layout
# ============================================================================

COLORSTRIP_LABEL_SIZE = 8
COLORSTRIP_FRACTION = 0.05
COLORSTRIP_PAD = 0.08
