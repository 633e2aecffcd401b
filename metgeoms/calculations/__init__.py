"""
Field computations for metgeoms.

This module turns tabular field samples into geometry ready to draw:

- grid: validate that samples form a complete rectangular lattice
- impute: fill missing lattice cells under an explicit policy
- breaks: explicit or generated break sets
- contours: filled-contour regions tagged by level and interior value,
  and plain contour lines
- illumination: Tanaka contour lighting and relief shading

Example:
    >>> from metgeoms.calculations import compute_contour_regions
    >>> regions = compute_contour_regions(df, "lon", "lat", "hgt", na_fill="spline")
    >>> print(f"{len(regions)} regions over {len({r.level for r in regions})} levels")
"""

from .grid import (
    FieldGrid,
    GridReport,
    check_grid,
    validate_grid,
    to_grid,
    table_from_dataarray,
)
from .impute import (
    Reject,
    Constant,
    Aggregate,
    SplineInterpolate,
    resolve_fill_policy,
    impute_grid,
)
from .breaks import make_breaks, resolve_breaks, validate_breaks
from .contours import (
    ContourRegion,
    break_field,
    compute_contour_regions,
    contour_lines,
)
from .illumination import tanaka_segments, hillshade, sun_vector

__all__ = [
    "FieldGrid",
    "GridReport",
    "check_grid",
    "validate_grid",
    "to_grid",
    "table_from_dataarray",
    "Reject",
    "Constant",
    "Aggregate",
    "SplineInterpolate",
    "resolve_fill_policy",
    "impute_grid",
    "make_breaks",
    "resolve_breaks",
    "validate_breaks",
    "ContourRegion",
    "break_field",
    "compute_contour_regions",
    "contour_lines",
    "tanaka_segments",
    "hillshade",
    "sun_vector",
]
