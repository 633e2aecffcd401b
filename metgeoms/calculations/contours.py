"""
Filled-contour regions with interior-value tagging.

A field is split into bands ``level <= z < next_level`` at each break. Every
connected polygon of a band (outer ring plus holes) becomes one
ContourRegion tagged with:

- ``level``: the break at the bottom of the band
- ``interior_value``: the largest sample inside the polygon

Two polygons of the same band are therefore told apart by what they contain,
not only by the level that bounds them, so a hill and a basin that both
cross 150 never share one colour. Polygons touching the grid boundary are
closed along the edge of the grid.

Contour tracing itself is done by contourpy, the engine behind Matplotlib's
``contour``/``contourf``.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import contourpy
import numpy as np
import pandas as pd
from matplotlib.path import Path
from scipy.interpolate import RegularGridInterpolator

from .breaks import resolve_breaks, validate_breaks
from .grid import FieldGrid, check_grid, require_columns, to_grid
from .impute import impute_grid, resolve_fill_policy
from ..config import Config
from ..exceptions import InvalidParameterError

logger = logging.getLogger("metgeoms.calculations.contours")


@dataclass(frozen=True, eq=False)
class ContourRegion:
    """One closed polygon of a contour band.

    Attributes:
        level: Break at the bottom of the band.
        interior_value: Representative value strictly inside the polygon.
        component: Discovery index, unique within one computation.
        vertices: (n, 2) vertices of the outer ring followed by any holes.
        codes: Matplotlib path codes for ``vertices``.
        upper: Break at the top of the band (inf for the top band).
        group: Facet key when the table was split by extra columns.
    """

    level: float
    interior_value: float
    component: int
    vertices: np.ndarray
    codes: np.ndarray
    upper: float = np.inf
    group: Tuple[Any, ...] = ()

    @property
    def key(self) -> Tuple[float, float, int]:
        return (self.level, self.interior_value, self.component)

    @property
    def rings(self) -> List[np.ndarray]:
        return split_rings(self.vertices, self.codes)

    @property
    def exterior(self) -> np.ndarray:
        return self.rings[0]

    @property
    def holes(self) -> List[np.ndarray]:
        return self.rings[1:]

    @property
    def path(self) -> Path:
        return Path(self.vertices, self.codes)


def split_rings(vertices: np.ndarray, codes: np.ndarray) -> List[np.ndarray]:
    """Split a compound path into its closed rings at each MOVETO."""
    starts = np.flatnonzero(codes == Path.MOVETO)
    ends = np.append(starts[1:], len(codes))
    return [vertices[s:e] for s, e in zip(starts, ends)]


def _is_excluded(level: float, exclude: Iterable[float]) -> bool:
    return any(np.isclose(level, float(e)) for e in exclude)


def _inside(rings: Sequence[np.ndarray], points: np.ndarray, tol: float) -> np.ndarray:
    """Points inside the outer ring (boundary included) and not strictly inside a hole."""
    # The sign of radius grows or shrinks a ring depending on its orientation
    outer = Path(rings[0])
    mask = outer.contains_points(points, radius=tol) | outer.contains_points(points, radius=-tol)
    for hole in rings[1:]:
        if not mask.any():
            break
        hole_path = Path(hole)
        mask &= ~(
            hole_path.contains_points(points, radius=tol)
            & hole_path.contains_points(points, radius=-tol)
        )
    return mask


class _InteriorSampler:
    """Pick the interior value of polygons from one band of a grid."""

    def __init__(self, grid: FieldGrid, level: float, upper: float):
        self.grid = grid
        self.level = level
        self.upper = upper
        values = grid.z.ravel()
        in_band = (values >= level) & (values < upper)
        self.points = grid.sample_points()[in_band]
        self.values = values[in_band]
        # Samples on a polygon's edge or corner still count as inside
        spacing = min(np.min(np.diff(grid.x)), np.min(np.diff(grid.y)))
        self.tol = 1e-6 * float(spacing)
        self._interpolator = None

    def __call__(self, rings: Sequence[np.ndarray]) -> float:
        if self.values.size:
            mask = _inside(rings, self.points, self.tol)
            if mask.any():
                return float(self.values[mask].max())
        return self._from_interpolation(rings[0])

    def _from_interpolation(self, exterior: np.ndarray) -> float:
        # Sliver polygons between grid points hold no sample at all
        if self._interpolator is None:
            self._interpolator = RegularGridInterpolator(
                (self.grid.y, self.grid.x), self.grid.z,
                bounds_error=False, fill_value=None,
            )
        cx, cy = exterior[:-1].mean(axis=0)
        value = float(self._interpolator([[cy, cx]])[0])
        value = max(value, self.level)
        if np.isfinite(self.upper):
            value = min(value, float(np.nextafter(self.upper, -np.inf)))
        return value


def break_field(
    grid: FieldGrid,
    breaks: Sequence[float],
    exclude: Iterable[float] = (),
    start: int = 0
) -> List[ContourRegion]:
    """
    Partition a complete grid into contour regions.

    Regions come out grouped by ascending level and, within a level, in the
    order contourpy discovers them; later regions are meant to be drawn on
    top. A sample exactly equal to a break belongs to the band above it.
    Values below the lowest break produce no region.

    Args:
        grid: Complete field grid (no NaN values)
        breaks: Strictly increasing break levels
        exclude: Levels whose regions are skipped
        start: First component index to assign

    Returns:
        List of ContourRegion

    Raises:
        InvalidParameterError: If the grid is smaller than 2x2, holds NaN
            values, or the breaks are not strictly increasing
    """
    levels = validate_breaks(breaks)
    z = np.asarray(grid.z, dtype=float)
    if z.ndim != 2 or z.shape[0] < 2 or z.shape[1] < 2:
        raise InvalidParameterError(f"Need at least a 2x2 grid to contour, got shape {z.shape}")
    if not np.all(np.isfinite(z)):
        raise InvalidParameterError("Grid holds NaN values; impute it before contouring")

    logger.info(f"Breaking {z.shape[1]}x{z.shape[0]} field into {levels.size} level(s)")

    xx, yy = grid.meshgrid()
    # contourpy fills lower < z <= upper; on -z that becomes level <= z < upper
    generator = contourpy.contour_generator(xx, yy, -z, fill_type=contourpy.FillType.OuterCode)

    top = float(z.max())
    ceiling = top + max(1.0, abs(top))
    regions: List[ContourRegion] = []
    component = start

    for i, level in enumerate(levels):
        level = float(level)
        upper = float(levels[i + 1]) if i + 1 < levels.size else np.inf

        if _is_excluded(level, exclude):
            logger.debug(f"Skipping excluded level {level:g}")
            continue
        if level > top:
            break

        fill_upper = upper if np.isfinite(upper) else ceiling
        polygons, path_codes = generator.filled(-fill_upper, -level)
        sampler = _InteriorSampler(grid, level, upper)

        for vertices, codes in zip(polygons, path_codes):
            rings = split_rings(vertices, codes)
            regions.append(
                ContourRegion(
                    level=level,
                    interior_value=sampler(rings),
                    component=component,
                    vertices=vertices,
                    codes=codes,
                    upper=upper,
                )
            )
            component += 1

        logger.debug(f"Level {level:g}: {len(polygons)} region(s)")

    logger.info(f"Contour breaking complete: {len(regions)} region(s)")
    return regions


def _iter_groups(table: pd.DataFrame, by: Optional[Sequence[str]]):
    if not by:
        yield (), table
        return
    for key, frame in table.groupby(list(by), sort=True):
        yield (key if isinstance(key, tuple) else (key,)), frame


def compute_contour_regions(
    table: pd.DataFrame,
    x: str,
    y: str,
    z: str,
    breaks: Any = None,
    na_fill: Any = None,
    exclude: Optional[Iterable[float]] = None,
    by: Optional[Sequence[str]] = None,
    config: Optional[Config] = None
) -> List[ContourRegion]:
    """
    Validate, impute if needed, and break a tabular field into contour regions.

    The imputer only runs when the grid is incomplete. Breaks are resolved
    once over the whole table so that facets share the same levels.

    Args:
        table: Long table of samples
        x: Name of the first spatial axis column
        y: Name of the second spatial axis column
        z: Name of the value column
        breaks: Sequence of levels, a generator ``(zmin, zmax) -> levels``,
                or None to use config.bins / config.binwidth
        na_fill: Missing-value policy (default: config.na_fill)
        exclude: Levels to suppress (default: config.exclude)
        by: Extra columns splitting the table into independent facets
        config: Configuration object (default: a new Config)

    Returns:
        List of ContourRegion, facet by facet

    Raises:
        MalformedGridError: If a facet is incomplete and na_fill rejects it
        UnsupportedPolicyError: If na_fill is not a recognized policy
        InvalidParameterError: If columns are missing or breaks are invalid

    Example:
        >>> regions = compute_contour_regions(df, "lon", "lat", "hgt", breaks=[5400, 5500, 5600])
        >>> sorted({r.level for r in regions})
        [5400.0, 5500.0, 5600.0]
    """
    if config is None:
        config = Config()
    if na_fill is None:
        na_fill = config.na_fill
    if exclude is None:
        exclude = config.exclude
    by = list(by) if by else []

    policy = resolve_fill_policy(na_fill)
    require_columns(table, x, y, z, *by)

    levels = resolve_breaks(breaks, table[z].to_numpy(dtype=float), config)

    regions: List[ContourRegion] = []
    for key, frame in _iter_groups(table, by):
        if not check_grid(frame, x, y, z).complete:
            frame = impute_grid(frame, x, y, z, policy)
        grid = to_grid(frame, x, y, z)
        found = break_field(grid, levels, exclude=exclude, start=len(regions))
        if key:
            found = [replace(region, group=key) for region in found]
        regions.extend(found)

    return regions


def contour_lines(
    grid: FieldGrid,
    breaks: Sequence[float]
) -> List[Tuple[float, np.ndarray]]:
    """
    Trace contour lines of a complete grid at each break.

    Returns:
        List of (level, (n, 2) vertices) pairs, ascending by level
    """
    levels = validate_breaks(breaks)
    xx, yy = grid.meshgrid()
    generator = contourpy.contour_generator(
        xx, yy, np.asarray(grid.z, dtype=float), line_type=contourpy.LineType.Separate
    )
    lines = []
    for level in levels:
        for vertices in generator.lines(float(level)):
            if len(vertices) >= 2:
                lines.append((float(level), vertices))
    return lines
