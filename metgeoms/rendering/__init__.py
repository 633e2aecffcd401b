"""
Rendering subsystem for metgeoms.

This module draws computed field geometry on Matplotlib axes. Filled
contours are emitted as polygon primitives coloured by interior value;
the remaining layers (contour lines and labels, Tanaka contours, relief
shading, vectors and streamlines) wrap the matching Matplotlib artists.

Main Classes:
    FieldChart: Orchestrates a complete chart from a long table of samples

Key Features:
    - Polygon emission with per-region interior values
    - Bold, haloed contour labels
    - Illuminated (Tanaka) contours and hill-shade relief
    - Longitude, latitude and pressure-level axis scales
    - Discrete colour-strip legend

Example:
    >>> from metgeoms.rendering import FieldChart
    >>> chart = FieldChart()
    >>> fig, ax = chart.render(df, "lon", "lat", "hgt", layers=("fill", "lines"))
    >>> chart.save_chart("chart.png")
"""

from .polygons import PolygonPrimitive, emit_polygons, draw_polygons, default_norm
from .layers import (
    complete_grid,
    draw_contour_lines,
    label_contours,
    draw_tanaka,
    draw_relief,
    draw_vectors,
    draw_streamlines,
)
from .scales import (
    LongitudeFormatter,
    LatitudeFormatter,
    scale_x_longitude,
    scale_y_longitude,
    scale_x_latitude,
    scale_y_latitude,
    scale_y_level,
)
from .guides import discrete_norm, add_colorstrip
from .chart import FieldChart, LAYER_ORDER

__all__ = [
    "PolygonPrimitive",
    "emit_polygons",
    "draw_polygons",
    "default_norm",
    "complete_grid",
    "draw_contour_lines",
    "label_contours",
    "draw_tanaka",
    "draw_relief",
    "draw_vectors",
    "draw_streamlines",
    "LongitudeFormatter",
    "LatitudeFormatter",
    "scale_x_longitude",
    "scale_y_longitude",
    "scale_x_latitude",
    "scale_y_latitude",
    "scale_y_level",
    "discrete_norm",
    "add_colorstrip",
    "FieldChart",
    "LAYER_ORDER",
]
