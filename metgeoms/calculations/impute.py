"""
Missing-value imputation for rectangular field grids.

Contouring needs a value at every lattice cell. When a table has holes, a
fill policy decides how they are filled:

- ``Reject``: refuse incomplete grids (raises MalformedGridError)
- ``Constant(value)``: every missing cell takes a fixed value
- ``Aggregate(func)``: every missing cell takes ``func(known_values)``
- ``SplineInterpolate()``: bivariate cubic interpolation from the known
  samples, nearest-neighbour outside their convex hull

The policies form a closed set; ``resolve_fill_policy`` maps the loose values
users pass as ``na_fill`` onto one of them.
"""

import logging
import numbers
from dataclasses import dataclass
from typing import Any, Callable, Union

import numpy as np
import pandas as pd
from scipy.interpolate import griddata
from scipy.spatial import QhullError

from .grid import check_grid, require_columns
from ..exceptions import MalformedGridError, UnsupportedPolicyError

logger = logging.getLogger("metgeoms.calculations.impute")


@dataclass(frozen=True)
class Reject:
    """Refuse to fill; incomplete grids are an error."""


@dataclass(frozen=True)
class Constant:
    value: float


@dataclass(frozen=True)
class Aggregate:
    """Fill with one summary of all known values, e.g. ``Aggregate(np.nanmean)``."""

    func: Callable[[np.ndarray], float]


@dataclass(frozen=True)
class SplineInterpolate:
    """Fill by cubic interpolation of the surrounding known samples."""


FillPolicy = Union[Reject, Constant, Aggregate, SplineInterpolate]

AGGREGATE_FUNCTIONS = {
    "mean": np.nanmean,
    "median": np.nanmedian,
    "min": np.nanmin,
    "max": np.nanmax,
}


def resolve_fill_policy(value: Any) -> FillPolicy:
    """
    Map a user-facing ``na_fill`` value to a fill policy.

    Args:
        value: A FillPolicy instance, None/False/"reject", True/"spline",
               a number, a callable, or an aggregate name
               ("mean", "median", "min", "max")

    Returns:
        The matching FillPolicy

    Raises:
        UnsupportedPolicyError: If *value* cannot be interpreted

    Example:
        >>> resolve_fill_policy("mean")
        Aggregate(func=<function nanmean ...>)
        >>> resolve_fill_policy(0)
        Constant(value=0.0)
    """
    if isinstance(value, (Reject, Constant, Aggregate, SplineInterpolate)):
        return value
    if value is None or value is False:
        return Reject()
    if value is True:
        return SplineInterpolate()
    if isinstance(value, str):
        name = value.strip().lower()
        if name == "reject":
            return Reject()
        if name == "spline":
            return SplineInterpolate()
        if name in AGGREGATE_FUNCTIONS:
            return Aggregate(AGGREGATE_FUNCTIONS[name])
        raise UnsupportedPolicyError(
            f"Unknown na_fill policy '{value}'. Use 'reject', 'spline', "
            f"{', '.join(repr(k) for k in AGGREGATE_FUNCTIONS)}, a number or a function"
        )
    if isinstance(value, numbers.Real):
        if not np.isfinite(value):
            raise UnsupportedPolicyError(f"Constant na_fill must be finite, got {value}")
        return Constant(float(value))
    if callable(value):
        return Aggregate(value)
    raise UnsupportedPolicyError(
        f"Unsupported na_fill value of type {type(value).__name__}: {value!r}"
    )


def _spline_fill(known_xy: np.ndarray, known_z: np.ndarray, target_xy: np.ndarray) -> np.ndarray:
    estimates = np.full(len(target_xy), np.nan)
    try:
        estimates = griddata(known_xy, known_z, target_xy, method="cubic")
    except (QhullError, ValueError) as e:
        # Too few or collinear samples for a triangulation
        logger.debug(f"Cubic interpolation unavailable ({e}); using nearest neighbour")

    outside = np.isnan(estimates)
    if outside.any():
        logger.debug(f"{int(outside.sum())} cell(s) outside the known hull, using nearest neighbour")
        estimates[outside] = griddata(known_xy, known_z, target_xy[outside], method="nearest")
    return estimates


def impute_grid(
    table: pd.DataFrame,
    x: str,
    y: str,
    z: str,
    policy: Any
) -> pd.DataFrame:
    """
    Return a complete copy of *table* with every missing cell filled.

    Missing cells are lattice points absent from the table and rows whose
    value is NaN. Columns other than x, y and z are carried over for existing
    rows and left empty for added rows. The input is never modified.

    Args:
        table: Long table of samples
        x: Name of the first spatial axis column
        y: Name of the second spatial axis column
        z: Name of the value column
        policy: FillPolicy, or any value accepted by resolve_fill_policy

    Returns:
        New DataFrame covering the full lattice, sorted by (y, x)

    Raises:
        MalformedGridError: If the grid is incomplete under a Reject policy,
            or if an (x, y) pair is sampled more than once
        UnsupportedPolicyError: If the policy is not recognized

    Example:
        >>> filled = impute_grid(df, "lon", "lat", "hgt", Constant(0.0))
    """
    policy = resolve_fill_policy(policy)
    require_columns(table, x, y, z)

    report = check_grid(table, x, y, z)
    if report.duplicated:
        raise MalformedGridError(report.missing, report.duplicated)

    if not report.missing:
        logger.debug("Grid is complete, nothing to impute")
        return table.sort_values([y, x], ignore_index=True)

    if isinstance(policy, Reject):
        raise MalformedGridError(report.missing)

    logger.info(f"Imputing {len(report.missing)} missing cell(s) with {type(policy).__name__}")

    full = pd.MultiIndex.from_product([report.x_values, report.y_values], names=[x, y])
    # NaN-valued rows are dropped here and come back as gaps after reindexing
    complete = (
        table.loc[table[x].notna() & table[y].notna() & table[z].notna()]
        .set_index([x, y])
        .reindex(full)
        .reset_index()
    )

    gaps = complete[z].isna().to_numpy()
    known = complete.loc[~gaps]
    known_z = known[z].to_numpy(dtype=float)
    if known_z.size == 0:
        raise MalformedGridError(report.missing, message="Cannot impute a grid with no known values")

    if isinstance(policy, Constant):
        fill = np.full(int(gaps.sum()), policy.value)
    elif isinstance(policy, Aggregate):
        fill = np.full(int(gaps.sum()), float(policy.func(known_z)))
    elif isinstance(policy, SplineInterpolate):
        fill = _spline_fill(
            known[[x, y]].to_numpy(dtype=float),
            known_z,
            complete.loc[gaps, [x, y]].to_numpy(dtype=float),
        )
    else:
        raise UnsupportedPolicyError(f"Unhandled fill policy: {policy!r}")

    complete[z] = complete[z].astype(float)
    complete.loc[gaps, z] = fill

    logger.debug(f"Imputed values range: {np.min(fill):.4g} to {np.max(fill):.4g}")

    return complete.sort_values([y, x], ignore_index=True)
