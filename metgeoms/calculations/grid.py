"""
Rectangular grid validation for tabular field samples.

Field samples arrive as long tables with one row per (x, y, z) sample. Before
any geometric processing the table has to describe a complete rectangular
lattice: every combination of the distinct x and y values present exactly
once. This module checks that, reports the offending coordinate pairs, and
reshapes complete tables into 2-D arrays.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import xarray as xr

from ..exceptions import InvalidParameterError, MalformedGridError

logger = logging.getLogger("metgeoms.calculations.grid")

Pair = Tuple[float, float]


@dataclass(frozen=True, eq=False)
class GridReport:
    """Outcome of a grid check.

    Attributes:
        x_values: Sorted distinct x coordinates.
        y_values: Sorted distinct y coordinates.
        missing: (x, y) pairs with no sample, or whose only sample has a NaN value.
        duplicated: (x, y) pairs sampled more than once.
    """

    x_values: np.ndarray
    y_values: np.ndarray
    missing: List[Pair] = field(default_factory=list)
    duplicated: List[Pair] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.missing and not self.duplicated

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.y_values.size, self.x_values.size)


@dataclass(frozen=True, eq=False)
class FieldGrid:
    """A complete field on a rectangular lattice.

    ``z`` has shape ``(len(y), len(x))`` so that rows follow the y axis, the
    layout expected by Matplotlib and contourpy.
    """

    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    x_name: str = "x"
    y_name: str = "y"
    z_name: str = "z"

    @property
    def shape(self) -> Tuple[int, int]:
        return self.z.shape

    def meshgrid(self) -> Tuple[np.ndarray, np.ndarray]:
        return np.meshgrid(self.x, self.y)

    def sample_points(self) -> np.ndarray:
        """Return an (n, 2) array of sample coordinates in z's flattened order."""
        xx, yy = self.meshgrid()
        return np.column_stack([xx.ravel(), yy.ravel()])

    def to_table(self) -> pd.DataFrame:
        xx, yy = self.meshgrid()
        return pd.DataFrame({
            self.x_name: xx.ravel(),
            self.y_name: yy.ravel(),
            self.z_name: self.z.ravel(),
        })


def require_columns(table: pd.DataFrame, *columns: Optional[str]) -> None:
    """Raise InvalidParameterError if any named column is absent from *table*."""
    if not isinstance(table, pd.DataFrame):
        raise InvalidParameterError(
            f"Expected a pandas DataFrame, got {type(table).__name__}"
        )
    absent = [c for c in columns if c is not None and c not in table.columns]
    if absent:
        raise InvalidParameterError(
            f"Column(s) {absent} not found. Available columns: {list(table.columns)}"
        )


def _as_pairs(index: pd.MultiIndex) -> List[Pair]:
    return [(float(a), float(b)) for a, b in index]


def check_grid(
    table: pd.DataFrame,
    x: str,
    y: str,
    z: Optional[str] = None
) -> GridReport:
    """
    Describe how far *table* is from a complete rectangular grid.

    Rows whose ``z`` value is NaN still contribute their coordinates to the
    lattice but count as missing cells.

    Args:
        table: Long table of samples
        x: Name of the first spatial axis column
        y: Name of the second spatial axis column
        z: Optional name of the value column

    Returns:
        GridReport with the lattice axes and any missing/duplicated pairs

    Raises:
        InvalidParameterError: If a named column is missing
    """
    require_columns(table, x, y, z)

    coords = table[[x, y]]
    bad_coords = coords.isna().any(axis=1)
    if bad_coords.any():
        logger.warning(f"Ignoring {int(bad_coords.sum())} row(s) with NaN coordinates")
        table = table.loc[~bad_coords]

    x_values = np.sort(pd.unique(table[x]))
    y_values = np.sort(pd.unique(table[y]))

    present = table
    if z is not None:
        present = table.loc[table[z].notna()]

    counts = present.groupby([x, y]).size()
    duplicated = _as_pairs(counts.index[counts.to_numpy() > 1])

    full = pd.MultiIndex.from_product([x_values, y_values], names=[x, y])
    missing = _as_pairs(full.difference(counts.index))

    report = GridReport(
        x_values=x_values,
        y_values=y_values,
        missing=missing,
        duplicated=duplicated,
    )
    logger.debug(
        f"Grid check: {x_values.size}x{y_values.size} lattice, "
        f"{len(missing)} missing, {len(duplicated)} duplicated"
    )
    return report


def validate_grid(
    table: pd.DataFrame,
    x: str,
    y: str,
    z: Optional[str] = None
) -> GridReport:
    """
    Verify that *table* forms a complete rectangular grid.

    Args:
        table: Long table of samples
        x: Name of the first spatial axis column
        y: Name of the second spatial axis column
        z: Optional name of the value column (NaN values count as missing)

    Returns:
        GridReport for the (complete) grid

    Raises:
        MalformedGridError: If any cell is missing or sampled more than once
        InvalidParameterError: If a named column is missing

    Example:
        >>> report = validate_grid(df, "lon", "lat", "hgt")
        >>> report.shape
        (73, 144)
    """
    report = check_grid(table, x, y, z)
    if not report.complete:
        raise MalformedGridError(report.missing, report.duplicated)
    return report


def to_grid(
    table: pd.DataFrame,
    x: str,
    y: str,
    z: str
) -> FieldGrid:
    """
    Reshape a complete long table into a FieldGrid.

    Raises:
        MalformedGridError: If the table is not a complete grid
    """
    report = validate_grid(table, x, y, z)
    # Same rows check_grid counted: known coordinates and a known value
    usable = table[[x, y]].notna().all(axis=1) & table[z].notna()
    wide = table.loc[usable].pivot(index=y, columns=x, values=z)
    wide = wide.reindex(index=report.y_values, columns=report.x_values)
    return FieldGrid(
        x=np.asarray(report.x_values, dtype=float),
        y=np.asarray(report.y_values, dtype=float),
        z=wide.to_numpy(dtype=float),
        x_name=x,
        y_name=y,
        z_name=z,
    )


def _find_coord(da: xr.DataArray, name_options: Sequence[str]) -> Optional[str]:
    for name in name_options:
        if name in da.coords:
            return name
    return None


def table_from_dataarray(
    da: xr.DataArray,
    x: Optional[str] = None,
    y: Optional[str] = None,
    name: Optional[str] = None
) -> pd.DataFrame:
    """
    Convert a 2-D DataArray into a long (x, y, value) table.

    Coordinate names are detected among common spellings (lon/longitude/x and
    lat/latitude/y) unless given explicitly.

    Args:
        da: Two-dimensional DataArray with 1-D coordinates
        x: Name of the x coordinate (default: auto-detect)
        y: Name of the y coordinate (default: auto-detect)
        name: Name of the value column (default: da.name or "value")

    Returns:
        DataFrame with columns [x, y, name]

    Raises:
        InvalidParameterError: If coordinates cannot be found or data is not 2-D
    """
    x = x or _find_coord(da, ("lon", "longitude", "x"))
    y = y or _find_coord(da, ("lat", "latitude", "y"))
    if x is None or y is None:
        raise InvalidParameterError(
            f"Data must have x/y (or lon/lat) coordinates. Found coords={list(da.coords)}"
        )
    if da.ndim != 2:
        raise InvalidParameterError(f"Expected 2-D data, got dims={da.dims}")

    name = name or da.name or "value"
    frame = da.rename(name).to_dataframe().reset_index()
    return frame[[x, y, name]]
