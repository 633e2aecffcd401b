"""
Main API module for metgeoms package.

This module provides simplified user-facing functions. `contour_fill()`
runs validation, imputation, contour breaking and polygon drawing on an
existing axes in one call; `create_plot()` builds a complete chart and
either saves it or returns the figure for interactive use.

Example:
    >>> from metgeoms import create_plot
    >>>
    >>> # Save to file
    >>> create_plot(df, "lon", "lat", "hgt", output_path="hgt.png",
    ...             layers=("fill", "lines", "labels"))
    >>>
    >>> # Interactive use (returns figure and axes)
    >>> fig, ax = create_plot(df, "lon", "lat", "hgt")
    >>> plt.show()
"""

import logging
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple, Union

import pandas as pd
import matplotlib.pyplot as plt
from matplotlib.collections import PathCollection

from .calculations.breaks import resolve_breaks
from .calculations.contours import compute_contour_regions
from .calculations.grid import require_columns
from .config import Config
from .exceptions import MetGeomsError, RenderError
from .rendering import FieldChart, draw_polygons, emit_polygons

logger = logging.getLogger(__name__)


def contour_fill(
    ax: plt.Axes,
    table: pd.DataFrame,
    x: str,
    y: str,
    z: str,
    breaks: Any = None,
    na_fill: Any = None,
    exclude: Optional[Sequence[float]] = None,
    by: Optional[Sequence[str]] = None,
    cmap: Optional[str] = None,
    config: Optional[Config] = None,
    **kwargs
) -> Optional[PathCollection]:
    """
    Draw filled contours of a tabular field on existing axes.

    Args:
        ax: Matplotlib axes
        table: Long table of samples
        x, y: Coordinate column names
        z: Value column name
        breaks: Levels or a break generator (default: from config)
        na_fill: Missing-value policy (default: config.na_fill)
        exclude: Levels whose regions are left out
        by: Facet columns; every facet is drawn on *ax* with shared breaks
        cmap: Colormap name (default: config.cmap)
        config: Optional Config object; if None, uses default configuration
        **kwargs: Passed to draw_polygons (alpha, zorder, norm, ...)

    Returns:
        PathCollection coloured by interior value, or None if no region was found

    Raises:
        MalformedGridError: If the grid is incomplete and na_fill rejects it
        UnsupportedPolicyError: If na_fill is not a recognized policy
        InvalidParameterError: If columns are missing or breaks are invalid

    Example:
        >>> fig, ax = plt.subplots()
        >>> coll = contour_fill(ax, df, "lon", "lat", "hgt", breaks=range(5000, 6000, 60))
        >>> fig.colorbar(coll)
    """
    if config is None:
        config = Config()
        logger.debug("Using default configuration")

    require_columns(table, x, y, z)
    levels = resolve_breaks(breaks, table[z].to_numpy(dtype=float), config)

    logger.info(f"Filling contours of '{z}' at {levels.size} levels")
    regions = compute_contour_regions(
        table, x, y, z,
        breaks=levels,
        na_fill=na_fill,
        exclude=exclude,
        by=by,
        config=config,
    )
    return draw_polygons(
        ax,
        emit_polygons(regions),
        cmap=cmap or config.cmap,
        breaks=levels,
        **kwargs
    )


def create_plot(
    table: pd.DataFrame,
    x: str,
    y: str,
    z: str,
    output_path: Optional[Union[str, Path]] = None,
    config: Optional[Config] = None,
    **options
) -> Union[str, Tuple[plt.Figure, plt.Axes]]:
    """
    Create a field chart from a long table.

    This is the primary API function that handles the complete workflow:
    1. Initialize FieldChart with the configuration
    2. Render the requested layers
    3. Save to file or return figure/axes for interactive use

    Args:
        table: Long table of samples
        x, y: Coordinate column names
        z: Value column name
        output_path: Output file path, relative paths are placed under
                     config.output_dir; if None, returns (fig, ax) for interactive use
        config: Optional Config object; if None, uses default configuration
        **options: Passed to FieldChart.render (u, v, layers, axis_scales,
                   breaks, na_fill, exclude, colorstrip, title, ...)

    Returns:
        If output_path provided: path to saved chart file
        If output_path is None: tuple of (figure, axes) for interactive use

    Raises:
        RenderError: If chart rendering or saving fails; the underlying
            error (e.g. MalformedGridError) is chained as ``__cause__``

    Example:
        >>> path = create_plot(
        ...     df, "lon", "lat", "hgt",
        ...     output_path="hgt.png",
        ...     layers=("relief", "fill", "lines", "labels"),
        ...     axis_scales={"x": "longitude", "y": "latitude"},
        ... )
    """
    logger.info(f"Creating plot of '{z}' over ({x}, {y})")

    if config is None:
        config = Config()
        logger.debug("Using default configuration")

    chart = FieldChart(config=config)

    try:
        fig, ax = chart.render(table, x, y, z, **options)
    except (MetGeomsError, ValueError, TypeError) as e:
        if chart.fig is not None:
            plt.close(chart.fig)
        raise RenderError(f"Failed to render chart: {e}") from e

    if output_path is None:
        logger.info("Returning figure and axes for interactive use")
        return fig, ax

    output_path = Path(output_path)
    try:
        if not output_path.is_absolute():
            config.ensure_directories()
            output_path = config.output_dir / output_path
        logger.info(f"Saving chart to {output_path}")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        saved_path = chart.save_chart(str(output_path))
    except (OSError, ValueError) as e:
        raise RenderError(f"Failed to save chart to {output_path}: {e}") from e
    finally:
        plt.close(fig)

    logger.info(f"Chart saved successfully to {saved_path}")
    return saved_path
