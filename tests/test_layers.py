import matplotlib.colors as mcolors
import matplotlib.pyplot as plt
import numpy as np
import pytest
from matplotlib.collections import LineCollection

from metgeoms.calculations.grid import to_grid
from metgeoms.config import Config
from metgeoms.constants import ZORDER
from metgeoms.exceptions import InvalidParameterError, MalformedGridError
from metgeoms.rendering.layers import (
    complete_grid,
    draw_contour_lines,
    draw_relief,
    draw_streamlines,
    draw_tanaka,
    draw_vectors,
    label_contours,
)


def test_complete_grid_imputes_only_when_asked(two_peaks):
    table = two_peaks.drop(index=0)
    with pytest.raises(MalformedGridError):
        complete_grid(table, "lon", "lat", "z")

    grid = complete_grid(table, "lon", "lat", "z", na_fill=0.0)
    assert grid.z[0, 0] == 0.0
    grid = complete_grid(table, "lon", "lat", "z", config=Config(na_fill="max"))
    assert grid.z[0, 0] == 220.0


def test_contour_lines_and_labels(bowl):
    grid = to_grid(bowl, "lon", "lat", "z")
    fig, ax = plt.subplots()
    cs = draw_contour_lines(ax, grid, [10, 25, 50], Config(line_color="red"))
    assert list(cs.levels) == [10.0, 25.0, 50.0]

    texts = label_contours(ax, cs, fmt="%d")
    assert texts
    for text in texts:
        assert text.get_fontweight() == "bold"
        assert text.get_path_effects()
        assert text.get_zorder() == ZORDER["labels"]


def test_label_none_contour_set():
    fig, ax = plt.subplots()
    assert label_contours(ax, None) == []


def test_tanaka_colours_follow_illumination(plane_grid):
    fig, ax = plt.subplots()
    config = Config(tanaka_light="white", tanaka_dark="black", tanaka_width_range=(0.5, 2.0))
    lc = draw_tanaka(ax, plane_grid, [-7.5, -5.0, -2.5], config, sun_angle=0)

    assert isinstance(lc, LineCollection)
    colours = lc.get_colors()
    np.testing.assert_allclose(colours, np.tile(mcolors.to_rgba("white"), (len(colours), 1)))
    np.testing.assert_allclose(lc.get_linewidths(), 2.0)

    lc_dark = draw_tanaka(ax, plane_grid, [-5.0], config, sun_angle=180)
    np.testing.assert_allclose(lc_dark.get_colors()[:, :3], 0.0)


def test_tanaka_without_lines_returns_none(plane_grid):
    fig, ax = plt.subplots()
    assert draw_tanaka(ax, plane_grid, [100.0]) is None


def test_relief_image_covers_cell_extent(bowl):
    grid = to_grid(bowl, "lon", "lat", "z")
    fig, ax = plt.subplots()
    image = draw_relief(ax, grid, Config(relief_altitude=30))
    assert image.get_array().shape == grid.shape
    assert image.get_extent() == pytest.approx([-10.5, 10.5, -7.5, 7.5])
    assert image.get_zorder() == ZORDER["relief"]


def test_vectors_hide_short_arrows(winds):
    fig, ax = plt.subplots()
    quiver = draw_vectors(ax, winds, "lon", "lat", "u", "v", min_mag=1.2)
    assert quiver.N == 121
    # Matplotlib keeps the combined U/V mask on Umask
    hidden = np.ma.getmaskarray(quiver.Umask)
    # Centre and its four neighbours have magnitude < 1.2
    assert hidden.sum() == 5


def test_vectors_skip(winds):
    fig, ax = plt.subplots()
    quiver = draw_vectors(ax, winds, "lon", "lat", "u", "v", skip=2, key_length=5)
    assert quiver.N == 36


def test_vectors_reject_bad_skip(winds):
    fig, ax = plt.subplots()
    with pytest.raises(InvalidParameterError):
        draw_vectors(ax, winds, "lon", "lat", "u", "v", skip=0)


def test_streamlines(winds):
    fig, ax = plt.subplots()
    result = draw_streamlines(ax, winds, "lon", "lat", "u", "v", density=0.5)
    assert len(result.lines.get_segments()) > 0


def test_streamlines_need_even_spacing(winds):
    uneven = winds.copy()
    uneven["lon"] = uneven["lon"] ** 3
    fig, ax = plt.subplots()
    with pytest.raises(InvalidParameterError, match="evenly spaced"):
        draw_streamlines(ax, uneven, "lon", "lat", "u", "v")
