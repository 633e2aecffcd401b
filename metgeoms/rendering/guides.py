"""
Discrete colour-strip legend.

A colour strip is a colourbar with one solid block per contour band and
labels either on the block boundaries (the breaks) or centred inside each
block.
"""

import logging
from typing import Any, Callable, Optional, Sequence, Tuple, Union

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.colors as mcolors

from ..constants import COLORSTRIP_FRACTION, COLORSTRIP_LABEL_SIZE, COLORSTRIP_PAD

logger = logging.getLogger("metgeoms.rendering.guides")


def _sample_cmap(cmap_name: Union[str, mcolors.Colormap], n_bins: int, cmap_min: float = 0.0) -> mcolors.ListedColormap:
    """Build a discrete colormap by sampling [cmap_min, 1.0] of a base cmap."""
    base = plt.get_cmap(cmap_name)
    lo = float(np.clip(cmap_min, 0.0, 0.999999))
    if n_bins <= 1:
        colors = [base(1.0)]
    else:
        colors = [base(x) for x in np.linspace(lo, 1.0, n_bins)]
    return mcolors.ListedColormap(colors, name=f"{base.name}_{n_bins}")


def discrete_norm(
    breaks: Sequence[float],
    cmap: Union[str, mcolors.Colormap] = "viridis",
    cmap_min: float = 0.0
) -> Tuple[mcolors.ListedColormap, mcolors.BoundaryNorm]:
    """
    Build a colormap/norm pair with exactly one colour per interval.

    Args:
        breaks: Strictly increasing boundaries
        cmap: Base colormap
        cmap_min: Lower bound in [0, 1) when sampling the base colormap

    Returns:
        Tuple of (ListedColormap, BoundaryNorm)
    """
    boundaries = np.asarray(breaks, dtype=float)
    if boundaries.size < 2:
        raise ValueError("At least two breaks are needed for a discrete norm")
    listed = _sample_cmap(cmap, boundaries.size - 1, cmap_min)
    return listed, mcolors.BoundaryNorm(boundaries, listed.N)


def _format(fmt: Union[str, Callable[[float], str]], value: float) -> str:
    return fmt(value) if callable(fmt) else fmt % value


def add_colorstrip(
    fig: plt.Figure,
    mappable: Any,
    breaks: Optional[Sequence[float]] = None,
    ax: Optional[plt.Axes] = None,
    cax: Optional[plt.Axes] = None,
    inside: bool = False,
    orientation: str = "horizontal",
    label: Optional[str] = None,
    fmt: Union[str, Callable[[float], str]] = "%g"
) -> Any:
    """
    Add a discrete colour-strip legend for a filled-contour layer.

    Args:
        fig: Matplotlib figure
        mappable: Artist carrying cmap/norm (e.g. from draw_polygons)
        breaks: Band boundaries (default: the mappable's BoundaryNorm boundaries)
        ax: Axes to steal space from (ignored when cax is given)
        cax: Axes to draw the strip into
        inside: Label each block at its centre instead of at the boundaries
        orientation: "horizontal" or "vertical"
        label: Legend title
        fmt: printf-style string or callable for tick labels

    Returns:
        Colorbar object, or None when mappable is None

    Example:
        >>> coll = draw_polygons(ax, primitives, breaks=levels)
        >>> add_colorstrip(fig, coll, levels, ax=ax, label="Geopotential (m)")
    """
    if mappable is None:
        logger.warning("Cannot create colour strip: mappable is None")
        return None

    if breaks is None:
        norm = getattr(mappable, "norm", None)
        breaks = getattr(norm, "boundaries", None)
    if breaks is None or len(breaks) < 2:
        raise ValueError("A colour strip needs at least two breaks")
    breaks = np.asarray(breaks, dtype=float)

    cbar = fig.colorbar(
        mappable,
        ax=ax,
        cax=cax,
        orientation=orientation,
        spacing="uniform",
        drawedges=True,
        fraction=COLORSTRIP_FRACTION,
        pad=COLORSTRIP_PAD,
    )

    ticks = 0.5 * (breaks[:-1] + breaks[1:]) if inside else breaks
    cbar.set_ticks(ticks)
    cbar.set_ticklabels([_format(fmt, t) for t in ticks])
    cbar.ax.tick_params(labelsize=COLORSTRIP_LABEL_SIZE, length=0 if inside else 3.5)

    if label:
        cbar.set_label(label)

    logger.info(f"Colour strip created with {breaks.size - 1} blocks")
    return cbar
