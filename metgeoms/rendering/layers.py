"""
Individual rendering functions for field layers.

This module provides the low-level drawing functions for gridded fields on
Matplotlib axes: contour lines and their labels, illuminated (Tanaka)
contours, relief shading, arrows and streamlines. Each function takes a
validated FieldGrid (or a table plus column names for vector fields) and
returns the Matplotlib artist it created.
"""

import logging
from typing import Any, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import matplotlib.colors as mcolors
import matplotlib.patheffects as pe
import numpy as np
import pandas as pd
from matplotlib.collections import LineCollection

from ..calculations.breaks import validate_breaks
from ..calculations.grid import FieldGrid, check_grid, to_grid
from ..calculations.illumination import hillshade, tanaka_segments
from ..calculations.impute import impute_grid, resolve_fill_policy
from ..config import Config
from ..constants import (
    LABEL_HALO_WIDTH,
    STREAMLINE_CMAP,
    VECTOR_COLOR,
    ZORDER,
)
from ..exceptions import InvalidParameterError

logger = logging.getLogger("metgeoms.rendering.layers")


def _config(config: Optional[Config]) -> Config:
    return config if config is not None else Config()


def _cell_extent(grid: FieldGrid) -> Tuple[float, float, float, float]:
    """Image extent that centres each pixel on its grid point."""
    half_dx = 0.5 * float(np.mean(np.diff(grid.x)))
    half_dy = 0.5 * float(np.mean(np.diff(grid.y)))
    return (
        float(grid.x[0]) - half_dx,
        float(grid.x[-1]) + half_dx,
        float(grid.y[0]) - half_dy,
        float(grid.y[-1]) + half_dy,
    )


def _is_evenly_spaced(values: np.ndarray) -> bool:
    steps = np.diff(values)
    return values.size >= 2 and bool(np.all(steps > 0)) and np.allclose(
        steps, (values[-1] - values[0]) / (values.size - 1)
    )


def complete_grid(
    table: pd.DataFrame,
    x: str,
    y: str,
    z: str,
    na_fill: Any = None,
    config: Optional[Config] = None
) -> FieldGrid:
    """
    Build a FieldGrid from a table, imputing missing cells only if needed.

    Raises:
        MalformedGridError: If the grid is incomplete and na_fill rejects it
        UnsupportedPolicyError: If na_fill is not a recognized policy
    """
    config = _config(config)
    policy = resolve_fill_policy(config.na_fill if na_fill is None else na_fill)
    if not check_grid(table, x, y, z).complete:
        table = impute_grid(table, x, y, z, policy)
    return to_grid(table, x, y, z)


def draw_contour_lines(
    ax: plt.Axes,
    grid: FieldGrid,
    breaks: Sequence[float],
    config: Optional[Config] = None,
    colors: Optional[Any] = None,
    linewidths: Optional[float] = None,
    **kwargs
) -> Any:
    """
    Draw plain contour lines at each break.

    Args:
        ax: Matplotlib axes
        grid: Complete field grid
        breaks: Contour levels
        config: Configuration with line colour and width
        colors: Override line colour
        linewidths: Override line width
        **kwargs: Passed to ``ax.contour``

    Returns:
        ContourSet for labeling
    """
    config = _config(config)
    levels = validate_breaks(breaks)
    logger.info(f"Rendering {levels.size} contour lines")

    kwargs.setdefault("zorder", ZORDER["lines"])
    return ax.contour(
        grid.x, grid.y, grid.z,
        levels=levels,
        colors=colors if colors is not None else config.line_color,
        linewidths=linewidths if linewidths is not None else config.line_width,
        **kwargs
    )


def label_contours(
    ax: plt.Axes,
    contour_set: Any,
    config: Optional[Config] = None,
    levels: Optional[Sequence[float]] = None,
    fmt: Optional[Any] = None,
    fontsize: Optional[float] = None,
    halo_color: Optional[str] = None,
    **kwargs
) -> List[Any]:
    """
    Add inline labels to contour lines, bold with a halo so they stay
    readable over filled contours.

    Args:
        ax: Matplotlib axes holding the contours
        contour_set: ContourSet from draw_contour_lines (or ``ax.contour``)
        config: Configuration with label styling
        levels: Subset of levels to label (default: all)
        fmt: printf-style string or callable formatting each level
        fontsize: Label font size
        halo_color: Colour of the stroke drawn behind the text
        **kwargs: Passed to ``ax.clabel``

    Returns:
        List of Text artists

    Example:
        >>> cs = draw_contour_lines(ax, grid, levels, config)
        >>> label_contours(ax, cs, config, fmt="%d")
    """
    config = _config(config)
    if contour_set is None:
        logger.warning("Cannot label contours: contour_set is None")
        return []

    clabel_kwargs = dict(
        inline=True,
        fontsize=fontsize if fontsize is not None else config.label_fontsize,
        fmt=fmt if fmt is not None else config.label_fmt,
    )
    clabel_kwargs.update(kwargs)
    if levels is not None:
        clabel_kwargs["levels"] = levels

    texts = ax.clabel(contour_set, **clabel_kwargs)
    halo = halo_color if halo_color is not None else config.label_halo_color
    for text in texts:
        text.set_fontweight('bold')
        text.set_path_effects([
            pe.Stroke(linewidth=LABEL_HALO_WIDTH, foreground=halo),
            pe.Normal(),
        ])
        text.set_zorder(ZORDER["labels"])

    logger.info(f"Added {len(texts)} contour labels")
    return texts


def draw_tanaka(
    ax: plt.Axes,
    grid: FieldGrid,
    breaks: Sequence[float],
    config: Optional[Config] = None,
    sun_angle: Optional[float] = None,
    light: Optional[str] = None,
    dark: Optional[str] = None,
    width_range: Optional[Tuple[float, float]] = None,
    **kwargs
) -> Optional[LineCollection]:
    """
    Draw illuminated (Tanaka) contour lines.

    Segments on slopes facing the sun are drawn in the light colour, the rest
    in the dark colour; width grows with how directly the slope faces (or
    turns away from) the sun.

    Args:
        ax: Matplotlib axes
        grid: Complete field grid
        breaks: Contour levels
        config: Configuration with Tanaka defaults
        sun_angle: Sun direction in degrees counterclockwise from north
        light: Colour of lit segments
        dark: Colour of shaded segments
        width_range: (min, max) line width
        **kwargs: Passed to LineCollection

    Returns:
        The LineCollection added to *ax*, or None without contour lines
    """
    config = _config(config)
    sun_angle = config.tanaka_sun_angle if sun_angle is None else sun_angle
    light = light or config.tanaka_light
    dark = dark or config.tanaka_dark
    min_width, max_width = width_range or config.tanaka_width_range

    logger.info(f"Rendering Tanaka contours (sun at {sun_angle:g} deg)")

    segments, illumination = tanaka_segments(grid, breaks, sun_angle=sun_angle)
    if len(segments) == 0:
        return None

    light_rgba = np.array(mcolors.to_rgba(light))
    dark_rgba = np.array(mcolors.to_rgba(dark))
    colors = np.where((illumination > 0)[:, None], light_rgba, dark_rgba)
    widths = min_width + (max_width - min_width) * np.abs(illumination)

    kwargs.setdefault("zorder", ZORDER["tanaka"])
    kwargs.setdefault("capstyle", "round")
    collection = LineCollection(segments, colors=colors, linewidths=widths, **kwargs)
    ax.add_collection(collection)
    ax.autoscale_view()

    logger.debug(f"Tanaka: {len(segments)} segments drawn")
    return collection


def draw_relief(
    ax: plt.Axes,
    grid: FieldGrid,
    config: Optional[Config] = None,
    sun_angle: Optional[float] = None,
    altitude: Optional[float] = None,
    vert_exag: Optional[float] = None,
    cmap: str = "gray",
    **kwargs
) -> Any:
    """
    Draw a hill-shade image of the field.

    Args:
        ax: Matplotlib axes
        grid: Complete field grid
        config: Configuration with relief defaults
        sun_angle: Sun direction in degrees counterclockwise from north
        altitude: Sun altitude in degrees
        vert_exag: Vertical exaggeration
        cmap: Colormap for the shade values (default: gray)
        **kwargs: Passed to ``ax.imshow`` (alpha, interpolation, ...)

    Returns:
        AxesImage
    """
    config = _config(config)
    shade = hillshade(
        grid,
        sun_angle=config.tanaka_sun_angle if sun_angle is None else sun_angle,
        altitude=config.relief_altitude if altitude is None else altitude,
        vert_exag=config.relief_vert_exag if vert_exag is None else vert_exag,
    )
    logger.info("Rendering relief shading")

    kwargs.setdefault("zorder", ZORDER["relief"])
    kwargs.setdefault("interpolation", "bilinear")
    return ax.imshow(
        shade,
        extent=_cell_extent(grid),
        origin="lower",
        aspect="auto",
        cmap=cmap,
        vmin=0.0,
        vmax=1.0,
        **kwargs
    )


def draw_vectors(
    ax: plt.Axes,
    table: pd.DataFrame,
    x: str,
    y: str,
    dx: str,
    dy: str,
    config: Optional[Config] = None,
    skip: Optional[int] = None,
    min_mag: Optional[float] = None,
    pivot: str = "middle",
    scale: Optional[float] = None,
    key_length: Optional[float] = None,
    key_label: Optional[str] = None,
    na_fill: Any = None,
    **kwargs
) -> Any:
    """
    Draw arrows for a 2-D vector field.

    Args:
        ax: Matplotlib axes
        table: Long table with coordinates and vector components
        x, y: Coordinate column names
        dx, dy: Vector component column names
        config: Configuration with vector defaults
        skip: Draw every n-th arrow along each axis
        min_mag: Hide arrows shorter than this magnitude
        pivot: Part of the arrow anchored at the grid point
        scale: Data units per arrow length unit (Matplotlib quiver ``scale``)
        key_length: Length of a reference arrow to add as a key
        key_label: Label of the reference arrow
        na_fill: Missing-value policy for incomplete grids
        **kwargs: Passed to ``ax.quiver``

    Returns:
        Quiver

    Example:
        >>> draw_vectors(ax, winds, "lon", "lat", "u", "v", skip=2, key_length=10, key_label="10 m/s")
    """
    config = _config(config)
    skip = config.vector_skip if skip is None else int(skip)
    min_mag = config.vector_min_mag if min_mag is None else min_mag
    if skip < 1:
        raise InvalidParameterError("skip must be >= 1")

    u_grid = complete_grid(table, x, y, dx, na_fill, config)
    v_grid = complete_grid(table, x, y, dy, na_fill, config)

    sl = (slice(None, None, skip), slice(None, None, skip))
    xx, yy = u_grid.meshgrid()
    u = u_grid.z[sl]
    v = v_grid.z[sl]

    magnitude = np.hypot(u, v)
    hidden = magnitude < min_mag
    if hidden.any():
        logger.debug(f"Hiding {int(hidden.sum())} arrows below magnitude {min_mag:g}")
    u = np.ma.masked_where(hidden, u)
    v = np.ma.masked_where(hidden, v)

    logger.info(f"Rendering {int((~hidden).sum())} vectors")

    kwargs.setdefault("zorder", ZORDER["vectors"])
    kwargs.setdefault("color", VECTOR_COLOR)
    quiver = ax.quiver(xx[sl], yy[sl], u, v, pivot=pivot, scale=scale, **kwargs)

    if key_length is not None:
        ax.quiverkey(
            quiver, 0.9, 1.02, key_length,
            key_label if key_label is not None else f"{key_length:g}",
            labelpos="E", coordinates="axes",
        )
    return quiver


def draw_streamlines(
    ax: plt.Axes,
    table: pd.DataFrame,
    x: str,
    y: str,
    dx: str,
    dy: str,
    config: Optional[Config] = None,
    density: Optional[float] = None,
    color_by_magnitude: bool = True,
    cmap: str = STREAMLINE_CMAP,
    linewidth: float = 0.8,
    na_fill: Any = None,
    **kwargs
) -> Any:
    """
    Draw streamlines of a 2-D vector field.

    Args:
        ax: Matplotlib axes
        table: Long table with coordinates and vector components
        x, y: Coordinate column names (evenly spaced)
        dx, dy: Vector component column names
        config: Configuration with streamline density
        density: Streamline density
        color_by_magnitude: Colour lines by vector magnitude instead of a fixed colour
        cmap: Colormap used with color_by_magnitude
        linewidth: Line width
        na_fill: Missing-value policy for incomplete grids
        **kwargs: Passed to ``ax.streamplot``

    Returns:
        StreamplotSet

    Raises:
        InvalidParameterError: If the coordinates are not evenly spaced
    """
    config = _config(config)
    density = config.streamline_density if density is None else density

    u_grid = complete_grid(table, x, y, dx, na_fill, config)
    v_grid = complete_grid(table, x, y, dy, na_fill, config)

    if not (_is_evenly_spaced(u_grid.x) and _is_evenly_spaced(u_grid.y)):
        raise InvalidParameterError(
            f"Streamlines need evenly spaced '{x}' and '{y}' coordinates"
        )

    logger.info(f"Rendering streamlines (density={density:g})")

    kwargs.setdefault("zorder", ZORDER["streamlines"])
    if color_by_magnitude:
        kwargs.setdefault("color", np.hypot(u_grid.z, v_grid.z))
        kwargs.setdefault("cmap", cmap)
    else:
        kwargs.setdefault("color", VECTOR_COLOR)

    return ax.streamplot(
        u_grid.x, u_grid.y, u_grid.z, v_grid.z,
        density=density,
        linewidth=linewidth,
        **kwargs
    )
