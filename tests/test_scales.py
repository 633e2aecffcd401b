import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import pytest

from metgeoms.constants import STANDARD_PRESSURE_LEVELS
from metgeoms.rendering.scales import (
    LatitudeFormatter,
    LongitudeFormatter,
    scale_x_latitude,
    scale_x_longitude,
    scale_y_latitude,
    scale_y_level,
    wrap_longitude,
)


def _visible(ticks, lo, hi):
    """Locators pad one tick beyond each end of the view."""
    return [float(t) for t in ticks if lo <= t <= hi]


@pytest.mark.parametrize(
    "lon, label",
    [
        (-120, "120°W"),
        (0, "0°"),
        (60, "60°E"),
        (180, "180°"),
        (-180, "180°"),
        (200, "160°W"),
        (359, "1°W"),
        (22.5, "22.5°E"),
    ],
)
def test_longitude_labels(lon, label):
    assert LongitudeFormatter()(lon) == label


@pytest.mark.parametrize(
    "lat, label",
    [(-30, "30°S"), (0, "0°"), (45, "45°N"), (-90, "90°S")],
)
def test_latitude_labels(lat, label):
    assert LatitudeFormatter()(lat) == label


def test_wrap_longitude():
    assert wrap_longitude(190) == -170
    assert wrap_longitude(180) == 180
    assert wrap_longitude(-190) == 170
    assert wrap_longitude(540) == 180


def test_longitude_axis_ticks_every_60_degrees():
    fig, ax = plt.subplots()
    ax.set_xlim(-180, 180)
    scale_x_longitude(ax)
    ticks = _visible(ax.xaxis.get_major_locator().tick_values(-180, 180), -180, 180)
    assert ticks == [-180, -120, -60, 0, 60, 120, 180]
    assert isinstance(ax.xaxis.get_major_formatter(), LongitudeFormatter)


def test_latitude_axis_custom_spacing():
    fig, ax = plt.subplots()
    axis = scale_y_latitude(ax, ticks=15)
    assert axis is ax.yaxis
    ticks = _visible(axis.get_major_locator().tick_values(-30, 30), -30, 30)
    assert ticks == [-30, -15, 0, 15, 30]
    assert isinstance(scale_x_latitude(ax).get_major_formatter(), LatitudeFormatter)


def test_non_positive_spacing_raises():
    fig, ax = plt.subplots()
    with pytest.raises(ValueError):
        scale_x_longitude(ax, ticks=0)


def test_level_axis_is_log_and_inverted():
    fig, ax = plt.subplots()
    ax.set_ylim(100, 1000)
    scale_y_level(ax)

    assert ax.get_yscale() == "log"
    bottom, top = ax.get_ylim()
    assert bottom > top
    assert list(ax.yaxis.get_major_locator().locs) == STANDARD_PRESSURE_LEVELS
    assert ax.yaxis.get_major_formatter()(850, 0) == "850"
    assert isinstance(ax.yaxis.get_minor_locator(), mticker.NullLocator)
    assert ax.get_ylabel() == "Pressure (hPa)"
