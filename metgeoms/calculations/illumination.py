"""
Illumination of gridded fields: Tanaka contours and relief shading.

Both treat the field as terrain lit by a sun placed at ``sun_angle`` degrees
counterclockwise from north (60 puts it in the north-west, the cartographic
convention).
"""

import logging
from typing import Sequence, Tuple

import numpy as np
from matplotlib.colors import LightSource
from scipy.interpolate import RegularGridInterpolator

from .contours import contour_lines
from .grid import FieldGrid
from ..constants import SUN_ANGLE, RELIEF_ALTITUDE

logger = logging.getLogger("metgeoms.calculations.illumination")


def sun_vector(sun_angle: float = SUN_ANGLE) -> np.ndarray:
    """Unit vector pointing from the origin towards the sun."""
    angle = np.radians(sun_angle)
    return np.array([-np.sin(angle), np.cos(angle)])


def _gradient_at(grid: FieldGrid, points: np.ndarray) -> np.ndarray:
    dz_dy, dz_dx = np.gradient(np.asarray(grid.z, dtype=float), grid.y, grid.x)
    # Interpolators take (y, x) ordered points
    yx = points[:, ::-1]
    gx = RegularGridInterpolator((grid.y, grid.x), dz_dx, bounds_error=False, fill_value=None)(yx)
    gy = RegularGridInterpolator((grid.y, grid.x), dz_dy, bounds_error=False, fill_value=None)(yx)
    return np.column_stack([gx, gy])


def tanaka_segments(
    grid: FieldGrid,
    breaks: Sequence[float],
    sun_angle: float = SUN_ANGLE
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split contour lines into segments and compute how lit each one is.

    Illumination is the cosine of the angle between the downhill direction
    at the segment midpoint and the sun direction: +1 for a slope facing the
    sun, -1 for a slope facing away, 0 on flat ground.

    Args:
        grid: Complete field grid
        breaks: Contour levels
        sun_angle: Sun direction in degrees counterclockwise from north

    Returns:
        Tuple of (segments with shape (n, 2, 2), illumination with shape (n,))

    Example:
        >>> segments, light = tanaka_segments(grid, [5400, 5500, 5600])
        >>> lit = segments[light > 0]
    """
    lines = contour_lines(grid, breaks)
    if not lines:
        logger.warning("No contour lines to illuminate")
        return np.empty((0, 2, 2)), np.empty(0)

    segments = np.concatenate(
        [np.stack([vertices[:-1], vertices[1:]], axis=1) for _, vertices in lines]
    )
    midpoints = segments.mean(axis=1)

    gradient = _gradient_at(grid, midpoints)
    magnitude = np.hypot(gradient[:, 0], gradient[:, 1])
    downhill = np.zeros_like(gradient)
    sloped = magnitude > 0
    downhill[sloped] = -gradient[sloped] / magnitude[sloped, None]

    illumination = downhill @ sun_vector(sun_angle)
    logger.debug(
        f"Tanaka: {len(segments)} segments, "
        f"{int((illumination > 0).sum())} facing the sun"
    )
    return segments, illumination


def hillshade(
    grid: FieldGrid,
    sun_angle: float = SUN_ANGLE,
    altitude: float = RELIEF_ALTITUDE,
    vert_exag: float = 1.0
) -> np.ndarray:
    """
    Compute relief shading of a field.

    Args:
        grid: Complete field grid (evenly spaced axes give the best result)
        sun_angle: Sun direction in degrees counterclockwise from north
        altitude: Sun altitude above the horizon in degrees
        vert_exag: Vertical exaggeration applied to z

    Returns:
        Array with the shape of grid.z, values in [0, 1] (1 = fully lit),
        rows in ascending y order
    """
    # LightSource measures azimuth clockwise from north
    azimuth = (360.0 - sun_angle) % 360.0
    light = LightSource(azdeg=azimuth, altdeg=altitude)

    dx = float(np.mean(np.diff(grid.x)))
    dy = float(np.mean(np.diff(grid.y)))
    # hillshade assumes the first row is the top of the image; ours is the bottom
    return light.hillshade(np.asarray(grid.z, dtype=float), vert_exag=vert_exag, dx=dx, dy=-dy)
