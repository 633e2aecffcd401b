"""
Polygon emission for filled-contour regions.

Each ContourRegion becomes one PolygonPrimitive: a Matplotlib path plus the
two tags the region carries. Drawing colours every polygon by its interior
value rather than its level, and keeps emission order so later polygons are
stacked on top.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.colors as mcolors
from matplotlib.collections import PathCollection
from matplotlib.path import Path

from ..calculations.contours import ContourRegion
from ..constants import DEFAULT_CMAP, ZORDER

logger = logging.getLogger("metgeoms.rendering.polygons")


@dataclass(frozen=True, eq=False)
class PolygonPrimitive:
    vertices: np.ndarray
    codes: np.ndarray
    level: float
    interior_value: float

    @property
    def path(self) -> Path:
        return Path(self.vertices, self.codes)


def emit_polygons(regions: Iterable[ContourRegion]) -> List[PolygonPrimitive]:
    """Convert contour regions into polygon primitives, preserving order."""
    return [
        PolygonPrimitive(
            vertices=region.vertices,
            codes=region.codes,
            level=region.level,
            interior_value=region.interior_value,
        )
        for region in regions
    ]


def default_norm(
    breaks: Optional[Sequence[float]],
    cmap: mcolors.Colormap
) -> Optional[mcolors.Normalize]:
    """Discrete norm with one colour per band; values above the top break use the 'over' colour."""
    if breaks is None or len(breaks) < 2:
        return None
    return mcolors.BoundaryNorm(np.asarray(breaks, dtype=float), cmap.N, extend="max")


def draw_polygons(
    ax: plt.Axes,
    primitives: Sequence[PolygonPrimitive],
    cmap: Union[str, mcolors.Colormap, None] = None,
    norm: Optional[mcolors.Normalize] = None,
    breaks: Optional[Sequence[float]] = None,
    **kwargs
) -> Optional[PathCollection]:
    """
    Draw polygon primitives as one collection coloured by interior value.

    Args:
        ax: Matplotlib axes
        primitives: Output of emit_polygons, in drawing order
        cmap: Colormap name or instance (default: viridis)
        norm: Normalization of interior values; when None and *breaks* is
              given, a BoundaryNorm over the breaks
        breaks: Break set used to build the default norm
        **kwargs: Passed to PathCollection (alpha, zorder, ...)

    Returns:
        The PathCollection added to *ax*, or None if there is nothing to draw

    Example:
        >>> regions = compute_contour_regions(df, "lon", "lat", "hgt", breaks=levels)
        >>> coll = draw_polygons(ax, emit_polygons(regions), cmap="RdBu_r", breaks=levels)
    """
    if not primitives:
        logger.warning("No polygons to draw")
        return None

    cmap = plt.get_cmap(cmap or DEFAULT_CMAP)
    if norm is None:
        norm = default_norm(breaks, cmap)

    kwargs.setdefault("zorder", ZORDER["fill"])
    # Edges match faces so adjacent polygons show no seams
    kwargs.setdefault("edgecolors", "face")
    kwargs.setdefault("linewidths", 0.0)
    kwargs.setdefault("antialiaseds", False)

    collection = PathCollection(
        [primitive.path for primitive in primitives],
        cmap=cmap,
        norm=norm,
        **kwargs,
    )
    collection.set_array(np.array([p.interior_value for p in primitives], dtype=float))

    ax.add_collection(collection)
    ax.autoscale_view()

    logger.info(f"Drew {len(primitives)} contour polygons")
    return collection
