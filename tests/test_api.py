import matplotlib.pyplot as plt
import numpy as np
import pytest
from matplotlib.collections import PathCollection

from metgeoms import Config, FieldChart, contour_fill, create_plot
from metgeoms.constants import ZORDER
from metgeoms.exceptions import InvalidParameterError, MalformedGridError, RenderError


def test_contour_fill_draws_on_given_axes(two_peaks):
    fig, ax = plt.subplots()
    collection = contour_fill(ax, two_peaks, "lon", "lat", "z", breaks=[100, 150])
    assert isinstance(collection, PathCollection)
    assert sorted(np.asarray(collection.get_array()).tolist()) == [100.0, 180.0, 220.0]


def test_contour_fill_uses_config_breaks(bowl):
    fig, ax = plt.subplots()
    collection = contour_fill(ax, bowl, "lon", "lat", "z", config=Config(binwidth=50.0, cmap="magma"))
    assert collection.norm.boundaries.tolist() == [0.0, 50.0, 100.0, 150.0]
    assert collection.cmap.name == "magma"


def test_contour_fill_propagates_grid_errors(two_peaks):
    fig, ax = plt.subplots()
    with pytest.raises(MalformedGridError):
        contour_fill(ax, two_peaks.drop(index=3), "lon", "lat", "z", breaks=[100, 150])


def test_create_plot_returns_figure_for_interactive_use(bowl):
    fig, ax = create_plot(bowl, "lon", "lat", "z", layers=("fill", "lines"))
    assert isinstance(fig, plt.Figure)
    assert ax.get_xlim() == (-10.0, 10.0)


def test_create_plot_saves_file(tmp_path, winds):
    output = tmp_path / "charts" / "winds.png"
    saved = create_plot(
        winds, "lon", "lat", "z",
        output_path=output,
        config=Config(default_dpi=50, figure_width=4, figure_height=3),
        u="u", v="v",
        layers=("relief", "fill", "tanaka", "labels", "streamlines", "vectors"),
        axis_scales={"x": "longitude", "y": "latitude"},
        colorstrip=True,
        title="Winds",
    )
    assert saved == str(output)
    assert output.stat().st_size > 0


def test_create_plot_wraps_failures(two_peaks):
    with pytest.raises(RenderError) as excinfo:
        create_plot(two_peaks.drop(index=0), "lon", "lat", "z", breaks=[100, 150])
    assert isinstance(excinfo.value.__cause__, MalformedGridError)


def test_create_plot_rejects_unknown_layer(bowl):
    with pytest.raises(RenderError) as excinfo:
        create_plot(bowl, "lon", "lat", "z", layers=("fill", "isobars"))
    assert isinstance(excinfo.value.__cause__, InvalidParameterError)


def test_chart_layers_stack_in_fixed_order(winds):
    chart = FieldChart(Config(figure_width=4, figure_height=3))
    chart.render(
        winds, "lon", "lat", "z", u="u", v="v",
        layers=["vectors", "lines", "fill", "relief"],
    )
    layers = chart.get_rendered_layers()

    assert layers["relief"].get_zorder() == ZORDER["relief"]
    assert layers["fill"].get_zorder() == ZORDER["fill"]
    assert layers["vectors"].get_zorder() == ZORDER["vectors"]
    assert ZORDER["relief"] < ZORDER["fill"] < ZORDER["lines"] < ZORDER["labels"]
    assert ZORDER["labels"] < ZORDER["streamlines"] < ZORDER["vectors"]
    assert layers["regions"]
    np.testing.assert_array_equal(layers["breaks"], sorted(layers["breaks"]))


def test_chart_labels_without_line_layer(bowl):
    chart = FieldChart()
    chart.render(bowl, "lon", "lat", "z", layers=("labels",), breaks=[25, 50])
    assert chart.get_rendered_layers()["labels"]


def test_chart_level_axis(bowl):
    table = bowl.assign(lat=bowl["lat"] * 50.0 + 500.0)
    chart = FieldChart()
    fig, ax = chart.render(table, "lon", "lat", "z", axis_scales={"y": "level"})
    assert ax.get_yscale() == "log"
    bottom, top = ax.get_ylim()
    assert bottom > top


def test_chart_vectors_need_components(bowl):
    with pytest.raises(InvalidParameterError):
        FieldChart().render(bowl, "lon", "lat", "z", layers=("vectors",))


def test_chart_rejects_unknown_scale(bowl):
    with pytest.raises(InvalidParameterError):
        FieldChart().render(bowl, "lon", "lat", "z", axis_scales={"x": "level"})


def test_save_before_render_raises():
    with pytest.raises(ValueError):
        FieldChart().save_chart("never.png")


def test_create_plot_places_relative_path_under_output_dir(tmp_path, bowl):
    config = Config(output_dir=tmp_path / "charts", default_dpi=40)
    saved = create_plot(bowl, "lon", "lat", "z", output_path="bowl.png", config=config)
    assert saved == str(tmp_path / "charts" / "bowl.png")
    assert (tmp_path / "charts" / "bowl.png").exists()
