"""
Orchestration module for complete field chart creation.

This module provides the FieldChart class that coordinates grid validation,
contour computation and layer rendering. It manages the workflow from a
long table of samples to a finished chart with all requested layers drawn
in a fixed stacking order.
"""

import logging
import os
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from .guides import add_colorstrip
from .layers import (
    complete_grid,
    draw_contour_lines,
    draw_relief,
    draw_streamlines,
    draw_tanaka,
    draw_vectors,
    label_contours,
)
from .polygons import draw_polygons, emit_polygons
from .scales import (
    scale_x_latitude,
    scale_x_longitude,
    scale_y_latitude,
    scale_y_level,
    scale_y_longitude,
)
from ..calculations.breaks import resolve_breaks
from ..calculations.contours import compute_contour_regions
from ..calculations.grid import FieldGrid, require_columns
from ..config import Config
from ..exceptions import InvalidParameterError

logger = logging.getLogger("metgeoms.rendering.chart")

# Bottom to top; each layer is drawn at its own zorder
LAYER_ORDER = ("relief", "fill", "tanaka", "lines", "labels", "streamlines", "vectors")

AXIS_SCALES = {
    "x": {"longitude": scale_x_longitude, "latitude": scale_x_latitude},
    "y": {
        "longitude": scale_y_longitude,
        "latitude": scale_y_latitude,
        "level": scale_y_level,
    },
}


class FieldChart:
    """
    Orchestrate complete field chart creation.

    The rendering workflow:
    1. Create figure and axes
    2. Resolve one break set for the whole field
    3. Draw the requested layers bottom to top:
       relief, fill, tanaka, lines, labels, streamlines, vectors
    4. Apply axis scales, colour strip and title

    Attributes:
        config: Configuration object with styling and computation settings
        fig: Matplotlib Figure (None until render called)
        ax: Matplotlib Axes (None until render called)

    Example:
        >>> from metgeoms import Config, FieldChart
        >>> chart = FieldChart(Config(binwidth=60, na_fill="spline"))
        >>> fig, ax = chart.render(
        ...     df, "lon", "lat", "hgt", u="u", v="v",
        ...     layers=("fill", "lines", "labels", "vectors"),
        ...     axis_scales={"x": "longitude", "y": "latitude"},
        ... )
        >>> chart.save_chart("hgt500.png")
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config if config is not None else Config()

        self.fig = None
        self.ax = None

        # Artists by layer name, for colour strips and post-processing
        self._rendered_layers: Dict[str, Any] = {}
        self._grid: Optional[FieldGrid] = None

        logger.debug("Initialized FieldChart")

    def create_figure(self) -> Tuple[plt.Figure, plt.Axes]:
        """Create a figure and axes sized and coloured from the configuration."""
        fig = plt.figure(
            figsize=(self.config.figure_width, self.config.figure_height),
            dpi=self.config.default_dpi,
        )
        fig.patch.set_facecolor(self.config.background_color)
        ax = fig.add_subplot(1, 1, 1)
        ax.set_facecolor(self.config.background_color)

        logger.debug(
            f"Created figure: size=({self.config.figure_width}x{self.config.figure_height}), "
            f"dpi={self.config.default_dpi}"
        )
        return fig, ax

    def render(
        self,
        table: pd.DataFrame,
        x: str,
        y: str,
        z: str,
        u: Optional[str] = None,
        v: Optional[str] = None,
        layers: Sequence[str] = ("fill",),
        axis_scales: Optional[Mapping[str, str]] = None,
        breaks: Any = None,
        na_fill: Any = None,
        exclude: Optional[Sequence[float]] = None,
        colorstrip: bool = False,
        colorstrip_label: Optional[str] = None,
        title: Optional[str] = None
    ) -> Tuple[plt.Figure, plt.Axes]:
        """
        Render a chart of field *z* over (*x*, *y*).

        Args:
            table: Long table of samples
            x, y: Coordinate column names
            z: Value column name
            u, v: Vector component columns (needed for vectors/streamlines)
            layers: Layer names from LAYER_ORDER; drawing order is fixed
            axis_scales: Mapping like ``{"x": "longitude", "y": "level"}``
            breaks: Levels or a break generator (default: from config)
            na_fill: Missing-value policy (default: config.na_fill)
            exclude: Levels left out of the fill layer (default: config.exclude)
            colorstrip: Add a discrete colour strip for the fill layer
            colorstrip_label: Title of the colour strip
            title: Axes title

        Returns:
            Tuple of (figure, axes)

        Raises:
            InvalidParameterError: For unknown layers or scales, or missing columns
            MalformedGridError: If the grid is incomplete and na_fill rejects it
            UnsupportedPolicyError: If na_fill is not a recognized policy
        """
        requested = self._check_layers(layers, u, v)
        scales = self._check_scales(axis_scales)
        require_columns(table, x, y, z, u, v)

        logger.info(f"Rendering chart of '{z}' with layers: {', '.join(requested)}")

        self._rendered_layers = {}
        self._grid = None
        self.fig, self.ax = self.create_figure()

        try:
            levels = resolve_breaks(breaks, table[z].to_numpy(dtype=float), self.config)
            self._rendered_layers["breaks"] = levels

            for layer in requested:
                if layer == "relief":
                    self._render_relief_layer(table, x, y, z, na_fill)
                elif layer == "fill":
                    self._render_fill_layer(table, x, y, z, levels, na_fill, exclude)
                elif layer == "tanaka":
                    self._render_tanaka_layer(table, x, y, z, levels, na_fill)
                elif layer == "lines":
                    self._render_lines_layer(table, x, y, z, levels, na_fill)
                elif layer == "labels":
                    self._render_labels_layer(table, x, y, z, levels, na_fill)
                elif layer == "streamlines":
                    self._render_streamlines_layer(table, x, y, u, v, na_fill)
                elif layer == "vectors":
                    self._render_vectors_layer(table, x, y, u, v, na_fill)
        except Exception as e:
            logger.error(f"Error during chart rendering: {e}")
            raise

        self._set_limits(table, x, y)
        for axis, kind in scales.items():
            AXIS_SCALES[axis][kind](self.ax)

        if colorstrip:
            self._add_colorstrip(colorstrip_label or z)

        if title:
            self.ax.set_title(title)

        logger.info("Chart rendering complete")
        return self.fig, self.ax

    @staticmethod
    def _check_layers(layers: Sequence[str], u: Optional[str], v: Optional[str]) -> Tuple[str, ...]:
        if isinstance(layers, str):
            layers = [layers]
        unknown = [name for name in layers if name not in LAYER_ORDER]
        if unknown:
            raise InvalidParameterError(
                f"Unknown layer(s) {unknown}. Available layers: {', '.join(LAYER_ORDER)}"
            )
        if ({"vectors", "streamlines"} & set(layers)) and (u is None or v is None):
            raise InvalidParameterError("Vector and streamline layers need both u and v columns")
        return tuple(name for name in LAYER_ORDER if name in layers)

    @staticmethod
    def _check_scales(axis_scales: Optional[Mapping[str, str]]) -> Dict[str, str]:
        scales = dict(axis_scales or {})
        for axis, kind in scales.items():
            if axis not in AXIS_SCALES or kind not in AXIS_SCALES[axis]:
                raise InvalidParameterError(f"Unsupported scale '{kind}' for axis '{axis}'")
        return scales

    def _field_grid(self, table: pd.DataFrame, x: str, y: str, z: str, na_fill: Any) -> FieldGrid:
        if self._grid is None:
            self._grid = complete_grid(table, x, y, z, na_fill, self.config)
        return self._grid

    def _set_limits(self, table: pd.DataFrame, x: str, y: str) -> None:
        xs = table[x].to_numpy(dtype=float)
        ys = table[y].to_numpy(dtype=float)
        self.ax.set_xlim(np.nanmin(xs), np.nanmax(xs))
        self.ax.set_ylim(np.nanmin(ys), np.nanmax(ys))

    def _render_relief_layer(self, table, x, y, z, na_fill) -> None:
        logger.info("Processing relief layer")
        grid = self._field_grid(table, x, y, z, na_fill)
        self._rendered_layers["relief"] = draw_relief(self.ax, grid, self.config)

    def _render_fill_layer(self, table, x, y, z, levels, na_fill, exclude) -> None:
        logger.info("Processing filled contour layer")
        regions = compute_contour_regions(
            table, x, y, z,
            breaks=levels,
            na_fill=na_fill,
            exclude=exclude,
            config=self.config,
        )
        collection = draw_polygons(
            self.ax, emit_polygons(regions), cmap=self.config.cmap, breaks=levels
        )
        self._rendered_layers["regions"] = regions
        self._rendered_layers["fill"] = collection
        logger.info(f"Filled contour layer rendered: {len(regions)} regions")

    def _render_tanaka_layer(self, table, x, y, z, levels, na_fill) -> None:
        logger.info("Processing Tanaka layer")
        grid = self._field_grid(table, x, y, z, na_fill)
        self._rendered_layers["tanaka"] = draw_tanaka(self.ax, grid, levels, self.config)

    def _render_lines_layer(self, table, x, y, z, levels, na_fill) -> None:
        logger.info("Processing contour line layer")
        grid = self._field_grid(table, x, y, z, na_fill)
        self._rendered_layers["lines"] = draw_contour_lines(self.ax, grid, levels, self.config)

    def _render_labels_layer(self, table, x, y, z, levels, na_fill) -> None:
        logger.info("Processing contour label layer")
        contour_set = self._rendered_layers.get("lines")
        if contour_set is None:
            # Labels without a line layer still need a ContourSet to sit on
            grid = self._field_grid(table, x, y, z, na_fill)
            contour_set = draw_contour_lines(self.ax, grid, levels, self.config, linewidths=0)
        self._rendered_layers["labels"] = label_contours(self.ax, contour_set, self.config)

    def _render_streamlines_layer(self, table, x, y, u, v, na_fill) -> None:
        logger.info("Processing streamline layer")
        self._rendered_layers["streamlines"] = draw_streamlines(
            self.ax, table, x, y, u, v, self.config, na_fill=na_fill
        )

    def _render_vectors_layer(self, table, x, y, u, v, na_fill) -> None:
        logger.info("Processing vector layer")
        self._rendered_layers["vectors"] = draw_vectors(
            self.ax, table, x, y, u, v, self.config, na_fill=na_fill
        )

    def _add_colorstrip(self, label: str) -> None:
        collection = self._rendered_layers.get("fill")
        if collection is None:
            logger.warning("Colour strip requested without a fill layer, skipping")
            return
        self._rendered_layers["colorstrip"] = add_colorstrip(
            self.fig, collection, self._rendered_layers["breaks"], ax=self.ax, label=label
        )

    def get_rendered_layers(self) -> Dict[str, Any]:
        """
        Get dictionary of rendered layers for external access.

        Returns:
            Copy of the layer dict: artists keyed by layer name, plus
            ``"breaks"`` and ``"regions"`` when a fill layer was drawn

        Example:
            >>> fig, ax = chart.render(df, "lon", "lat", "hgt")
            >>> regions = chart.get_rendered_layers()["regions"]
        """
        return self._rendered_layers.copy()

    def save_chart(
        self,
        output_path: str,
        dpi: Optional[int] = None,
        bbox_inches: str = 'tight',
        pad_inches: float = 0.05
    ) -> str:
        """
        Save rendered chart to file.

        Args:
            output_path: Path or string for output file
            dpi: Optional DPI override (uses config.default_dpi if None)
            bbox_inches: Bbox setting for savefig (default: 'tight')
            pad_inches: Padding (inches) around tight bbox

        Returns:
            Path to saved file

        Raises:
            ValueError: If chart has not been rendered yet
        """
        if self.fig is None:
            raise ValueError("Chart has not been rendered yet. Call render() first.")

        if dpi is None:
            dpi = self.config.default_dpi

        logger.info(f"Saving chart to {output_path} (dpi={dpi})")
        self.fig.savefig(
            output_path,
            dpi=dpi,
            bbox_inches=bbox_inches,
            pad_inches=pad_inches,
            facecolor=self.fig.get_facecolor(),
        )

        try:
            file_size = os.path.getsize(output_path)
            logger.info(f"Chart saved: {output_path} ({file_size / 1024:.1f} KB)")
        except OSError:
            logger.info(f"Chart saved: {output_path}")

        return str(output_path)
