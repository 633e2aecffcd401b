"""
Configuration management for metgeoms package.

This module provides configuration options for contour computation and
layer styling: break generation, missing-value policy, excluded levels,
label and illumination styling, figure sizing and output location.

A Config is always passed explicitly to the functions that need it; there
is no module-level default instance.
"""

import json
import numbers
import yaml
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any, List, Optional, Tuple

from .constants import (
    DEFAULT_BINS,
    DEFAULT_CMAP,
    CONTOUR_LINE_COLOR,
    CONTOUR_LINE_WIDTH,
    LABEL_FONT_SIZE,
    LABEL_FORMAT,
    LABEL_HALO_COLOR,
    SUN_ANGLE,
    RELIEF_ALTITUDE,
    TANAKA_LIGHT_COLOR,
    TANAKA_DARK_COLOR,
    TANAKA_WIDTH_RANGE,
)

NA_FILL_NAMES = {"reject", "spline", "mean", "median", "min", "max"}


@dataclass
class Config:
    """Configuration for contour computation and field charts.

    Attributes:
        bins: Approximate number of contour intervals when breaks are generated.
        binwidth: Fixed spacing between generated breaks; overrides ``bins``.
        na_fill: Missing-value policy for incomplete grids. One of "reject",
            "spline", "mean", "median", "min", "max", a boolean (False=reject,
            True=spline) or a number used as a constant fill.
        exclude: Break levels whose regions are never emitted.
        cmap: Colormap name for filled contours.
        line_color: Colour of plain contour lines.
        line_width: Width of plain contour lines in points.
        label_fontsize: Font size of contour labels.
        label_fmt: printf-style format for contour labels.
        label_halo_color: Colour of the stroke drawn behind label text.
        tanaka_sun_angle: Sun direction in degrees counterclockwise from north.
        tanaka_light: Colour of contour segments facing the sun.
        tanaka_dark: Colour of contour segments facing away from the sun.
        tanaka_width_range: (min, max) line width of illuminated contours.
        relief_altitude: Sun altitude in degrees for relief shading.
        relief_vert_exag: Vertical exaggeration for relief shading.
        vector_skip: Draw every n-th arrow along each axis.
        vector_min_mag: Arrows shorter than this magnitude are hidden.
        streamline_density: Density passed to Matplotlib streamplot.
        default_dpi: Resolution for output images (dots per inch).
        figure_width: Width of generated figures in inches.
        figure_height: Height of generated figures in inches.
        background_color: Figure and axes background colour.
        output_dir: Directory for saving generated charts.
    """

    bins: int = DEFAULT_BINS
    binwidth: Optional[float] = None
    na_fill: Any = "reject"
    exclude: List[float] = field(default_factory=list)
    cmap: str = DEFAULT_CMAP
    line_color: str = CONTOUR_LINE_COLOR
    line_width: float = CONTOUR_LINE_WIDTH
    label_fontsize: float = LABEL_FONT_SIZE
    label_fmt: str = LABEL_FORMAT
    label_halo_color: str = LABEL_HALO_COLOR
    tanaka_sun_angle: float = SUN_ANGLE
    tanaka_light: str = TANAKA_LIGHT_COLOR
    tanaka_dark: str = TANAKA_DARK_COLOR
    tanaka_width_range: Tuple[float, float] = TANAKA_WIDTH_RANGE
    relief_altitude: float = RELIEF_ALTITUDE
    relief_vert_exag: float = 1.0
    vector_skip: int = 1
    vector_min_mag: float = 0.0
    streamline_density: float = 1.0
    default_dpi: int = 150
    figure_width: float = 10.0
    figure_height: float = 7.0
    background_color: str = "white"
    output_dir: Path = field(default_factory=lambda: Path("./output"))

    def __post_init__(self):
        """Normalize values that arrive as strings or lists from config files."""
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)
        if isinstance(self.tanaka_width_range, list):
            self.tanaka_width_range = tuple(self.tanaka_width_range)
        if self.exclude is None:
            self.exclude = []

    @classmethod
    def load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a YAML or JSON file.

        Args:
            path: Path to configuration file (.yaml, .yml, or .json).

        Returns:
            Config instance with loaded settings.

        Raises:
            ValueError: If file format is not supported.
            FileNotFoundError: If file does not exist.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, 'r') as f:
            if path.suffix in ['.yaml', '.yml']:
                data = yaml.safe_load(f)
            elif path.suffix == '.json':
                data = json.load(f)
            else:
                raise ValueError(f"Unsupported file format: {path.suffix}. Use .yaml, .yml, or .json")

        return cls(**(data or {}))

    def save_to_file(self, path: Path) -> None:
        """Save configuration to a YAML or JSON file.

        Args:
            path: Path where configuration should be saved.

        Raises:
            ValueError: If file format is not supported.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = asdict(self)
        data['output_dir'] = str(data['output_dir'])
        data['tanaka_width_range'] = list(data['tanaka_width_range'])
        data['exclude'] = [float(v) for v in data['exclude']]

        with open(path, 'w') as f:
            if path.suffix in ['.yaml', '.yml']:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
            elif path.suffix == '.json':
                json.dump(data, f, indent=2)
            else:
                raise ValueError(f"Unsupported file format: {path.suffix}. Use .yaml, .yml, or .json")

    def validate(self) -> bool:
        """Validate configuration parameters.

        Returns:
            True if configuration is valid.

        Raises:
            ValueError: If any configuration parameter is invalid.
        """
        if not isinstance(self.bins, int) or self.bins < 1:
            raise ValueError("bins must be an integer >= 1")

        if self.binwidth is not None and self.binwidth <= 0:
            raise ValueError("binwidth must be positive")

        na_fill = self.na_fill
        if isinstance(na_fill, str):
            if na_fill.strip().lower() not in NA_FILL_NAMES:
                raise ValueError(
                    f"na_fill must be one of {sorted(NA_FILL_NAMES)}, a boolean or a number"
                )
        elif not isinstance(na_fill, (bool, numbers.Real)) and na_fill is not None:
            raise ValueError("na_fill must be a policy name, a boolean or a number")

        if self.line_width <= 0:
            raise ValueError("line_width must be positive")

        if self.label_fontsize <= 0:
            raise ValueError("label_fontsize must be positive")

        if len(self.tanaka_width_range) != 2 or self.tanaka_width_range[0] > self.tanaka_width_range[1]:
            raise ValueError("tanaka_width_range must be a (min, max) pair with min <= max")

        if not (0.0 <= float(self.relief_altitude) <= 90.0):
            raise ValueError("relief_altitude must be in the range [0, 90]")

        if not isinstance(self.vector_skip, int) or self.vector_skip < 1:
            raise ValueError("vector_skip must be an integer >= 1")

        if self.vector_min_mag < 0:
            raise ValueError("vector_min_mag must be non-negative")

        if self.streamline_density <= 0:
            raise ValueError("streamline_density must be positive")

        if self.default_dpi <= 0:
            raise ValueError("default_dpi must be positive")

        if self.figure_width <= 0 or self.figure_height <= 0:
            raise ValueError("Figure dimensions must be positive")

        if not isinstance(self.background_color, str) or not self.background_color:
            raise ValueError("background_color must be a non-empty string")

        return True

    def ensure_directories(self) -> None:
        """Create the output directory if it doesn't exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
