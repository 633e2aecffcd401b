import matplotlib.colors as mcolors
import matplotlib.pyplot as plt
import numpy as np
import pytest

from metgeoms.calculations.contours import compute_contour_regions
from metgeoms.rendering.guides import add_colorstrip, discrete_norm
from metgeoms.rendering.polygons import draw_polygons, emit_polygons


def test_discrete_norm_has_one_colour_per_interval():
    cmap, norm = discrete_norm([0, 10, 20, 30], "viridis")
    assert isinstance(cmap, mcolors.ListedColormap)
    assert cmap.N == 3
    assert isinstance(norm, mcolors.BoundaryNorm)
    assert [norm(v) for v in (5, 15, 25)] == [0, 1, 2]


def test_discrete_norm_needs_two_breaks():
    with pytest.raises(ValueError):
        discrete_norm([1.0])


def _filled(ax, bowl, breaks):
    regions = compute_contour_regions(bowl, "lon", "lat", "z", breaks=breaks)
    return draw_polygons(ax, emit_polygons(regions), breaks=breaks)


def test_colorstrip_ticks_on_breaks(bowl):
    breaks = [0, 25, 50, 100]
    fig, ax = plt.subplots()
    cbar = add_colorstrip(fig, _filled(ax, bowl, breaks), breaks, ax=ax, label="z")
    fig.canvas.draw()

    np.testing.assert_allclose(cbar.get_ticks(), breaks)
    assert [t.get_text() for t in cbar.ax.get_xticklabels()] == ["0", "25", "50", "100"]
    assert cbar.ax.get_xlabel() == "z"


def test_colorstrip_labels_inside_blocks(bowl):
    breaks = [0, 20, 40]
    fig, ax = plt.subplots()
    cbar = add_colorstrip(
        fig, _filled(ax, bowl, breaks), ax=ax, inside=True, orientation="vertical", fmt="%.1f"
    )
    fig.canvas.draw()
    np.testing.assert_allclose(cbar.get_ticks(), [10.0, 30.0])
    assert [t.get_text() for t in cbar.ax.get_yticklabels()] == ["10.0", "30.0"]


def test_colorstrip_without_mappable():
    fig, ax = plt.subplots()
    assert add_colorstrip(fig, None, [0, 1]) is None
