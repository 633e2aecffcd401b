"""
Axis scales for geographic and vertical coordinates.

Longitude and latitude axes get hemisphere-suffixed degree labels
(``120°W``, ``30°S``) at regular spacing. Pressure-level axes are
logarithmic, increase downward and are ticked at the standard levels.
"""

import logging
from typing import Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker

from ..constants import (
    DEGREE_SIGN,
    LATITUDE_TICK_SPACING,
    LONGITUDE_TICK_SPACING,
    STANDARD_PRESSURE_LEVELS,
)

logger = logging.getLogger("metgeoms.rendering.scales")


def wrap_longitude(lon: float) -> float:
    """Wrap a longitude into [-180, 180), keeping 180 itself."""
    wrapped = ((float(lon) + 180.0) % 360.0) - 180.0
    if np.isclose(wrapped, -180.0) and lon > 0:
        return 180.0
    return wrapped


def _degrees(value: float, number_format: str) -> str:
    return f"{abs(value):{number_format}}{DEGREE_SIGN}"


class LongitudeFormatter(mticker.Formatter):
    """Format longitudes as ``120°W``, ``0°``, ``60°E`` or ``180°``."""

    def __init__(self, number_format: str = "g", east: str = "E", west: str = "W"):
        self.number_format = number_format
        self.east = east
        self.west = west

    def __call__(self, x, pos=None):
        lon = wrap_longitude(x)
        if np.isclose(lon, 0.0) or np.isclose(abs(lon), 180.0):
            return _degrees(lon, self.number_format)
        suffix = self.east if lon > 0 else self.west
        return _degrees(lon, self.number_format) + suffix


class LatitudeFormatter(mticker.Formatter):
    """Format latitudes as ``30°S``, ``0°`` or ``60°N``."""

    def __init__(self, number_format: str = "g", north: str = "N", south: str = "S"):
        self.number_format = number_format
        self.north = north
        self.south = south

    def __call__(self, x, pos=None):
        if np.isclose(x, 0.0):
            return _degrees(0.0, self.number_format)
        suffix = self.north if x > 0 else self.south
        return _degrees(x, self.number_format) + suffix


def _apply(axis, spacing: float, formatter: mticker.Formatter) -> None:
    if spacing <= 0:
        raise ValueError("Tick spacing must be positive")
    axis.set_major_locator(mticker.MultipleLocator(spacing))
    axis.set_major_formatter(formatter)


def scale_x_longitude(ax: plt.Axes, ticks: float = LONGITUDE_TICK_SPACING, **formatter_kwargs):
    """Tick the x axis every *ticks* degrees with longitude labels."""
    _apply(ax.xaxis, ticks, LongitudeFormatter(**formatter_kwargs))
    return ax.xaxis


def scale_y_longitude(ax: plt.Axes, ticks: float = LONGITUDE_TICK_SPACING, **formatter_kwargs):
    """Tick the y axis every *ticks* degrees with longitude labels."""
    _apply(ax.yaxis, ticks, LongitudeFormatter(**formatter_kwargs))
    return ax.yaxis


def scale_x_latitude(ax: plt.Axes, ticks: float = LATITUDE_TICK_SPACING, **formatter_kwargs):
    """Tick the x axis every *ticks* degrees with latitude labels."""
    _apply(ax.xaxis, ticks, LatitudeFormatter(**formatter_kwargs))
    return ax.xaxis


def scale_y_latitude(ax: plt.Axes, ticks: float = LATITUDE_TICK_SPACING, **formatter_kwargs):
    """Tick the y axis every *ticks* degrees with latitude labels."""
    _apply(ax.yaxis, ticks, LatitudeFormatter(**formatter_kwargs))
    return ax.yaxis


def scale_y_level(
    ax: plt.Axes,
    levels: Optional[Sequence[float]] = None,
    label: Optional[str] = "Pressure (hPa)"
):
    """
    Turn the y axis into a pressure-level axis.

    The axis becomes logarithmic with high pressure at the bottom; major
    ticks sit at *levels* (default: standard pressure levels) and are labeled
    with plain numbers.

    Args:
        ax: Matplotlib axes with pressure on y
        levels: Tick positions in the axis units
        label: Axis label, or None to leave it unchanged

    Returns:
        The y axis

    Example:
        >>> ax.contourf(lat, plev, temp)
        >>> scale_y_level(ax)
    """
    levels = list(STANDARD_PRESSURE_LEVELS if levels is None else levels)

    ax.set_yscale("log")
    bottom, top = ax.get_ylim()
    if bottom < top:
        ax.set_ylim(top, bottom)

    ax.yaxis.set_major_locator(mticker.FixedLocator(levels))
    ax.yaxis.set_major_formatter(mticker.FuncFormatter(lambda v, pos: f"{v:g}"))
    ax.yaxis.set_minor_locator(mticker.NullLocator())
    if label is not None:
        ax.set_ylabel(label)

    logger.debug(f"Pressure axis with {len(levels)} ticks")
    return ax.yaxis
