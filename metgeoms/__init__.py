"""
metgeoms - Filled contours and field charts for tabular meteorological data.

This package turns long tables of gridded samples (longitude, latitude,
value) into filled-contour polygons tagged with their level and interior
value, and draws them together with contour lines and labels, Tanaka
contours, relief shading, vectors and streamlines on Matplotlib axes.

Quick Start:
    >>> from metgeoms import create_plot
    >>>
    >>> # Save a chart
    >>> create_plot(df, "lon", "lat", "hgt", output_path="hgt500.png",
    ...             layers=("fill", "lines", "labels"))

    >>> # Draw filled contours on your own axes
    >>> from metgeoms import contour_fill
    >>> fig, ax = plt.subplots()
    >>> contour_fill(ax, df, "lon", "lat", "hgt", na_fill="spline")

Advanced Usage:
    >>> # Direct access to the computation
    >>> from metgeoms import Config, compute_contour_regions
    >>>
    >>> config = Config(binwidth=60, exclude=[5400])
    >>> regions = compute_contour_regions(df, "lon", "lat", "hgt", config=config)
    >>> for region in regions:
    ...     print(region.level, region.interior_value, region.component)
"""

__version__ = "0.1.0"

# Initialize logging with default settings
from .logging_config import setup_logging
setup_logging()

# Core constants and configuration
from .constants import STANDARD_PRESSURE_LEVELS, ZORDER
from .config import Config

# Calculations
from . import calculations
from .calculations import (
    FieldGrid,
    check_grid,
    validate_grid,
    impute_grid,
    resolve_fill_policy,
    Reject,
    Constant,
    Aggregate,
    SplineInterpolate,
    make_breaks,
    ContourRegion,
    compute_contour_regions,
)

# Rendering components
from .rendering import (
    FieldChart,
    PolygonPrimitive,
    emit_polygons,
    draw_polygons,
    add_colorstrip,
    discrete_norm,
    scale_x_longitude,
    scale_y_longitude,
    scale_x_latitude,
    scale_y_latitude,
    scale_y_level,
)

# User-facing API
from .api import contour_fill, create_plot

# Exceptions
from .exceptions import (
    MetGeomsError,
    MalformedGridError,
    UnsupportedPolicyError,
    InvalidParameterError,
    RenderError,
)

__all__ = [
    # Version
    "__version__",

    # Configuration
    "Config",
    "STANDARD_PRESSURE_LEVELS",
    "ZORDER",
    "setup_logging",

    # Calculations
    "calculations",
    "FieldGrid",
    "check_grid",
    "validate_grid",
    "impute_grid",
    "resolve_fill_policy",
    "Reject",
    "Constant",
    "Aggregate",
    "SplineInterpolate",
    "make_breaks",
    "ContourRegion",
    "compute_contour_regions",

    # Rendering
    "FieldChart",
    "PolygonPrimitive",
    "emit_polygons",
    "draw_polygons",
    "add_colorstrip",
    "discrete_norm",
    "scale_x_longitude",
    "scale_y_longitude",
    "scale_x_latitude",
    "scale_y_latitude",
    "scale_y_level",

    # API
    "contour_fill",
    "create_plot",

    # Exceptions
    "MetGeomsError",
    "MalformedGridError",
    "UnsupportedPolicyError",
    "InvalidParameterError",
    "RenderError",
]
