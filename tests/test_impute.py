import numpy as np
import pandas as pd
import pytest

from metgeoms.calculations.grid import to_grid
from metgeoms.calculations.impute import (
    Aggregate,
    Constant,
    Reject,
    SplineInterpolate,
    impute_grid,
    resolve_fill_policy,
)
from metgeoms.exceptions import MalformedGridError, UnsupportedPolicyError

from conftest import long_table


def _grid_with_hole(value=10.0):
    """11x11 grid of constant value with (5, 5) left out."""
    table = long_table(np.arange(11.0), np.arange(11.0), np.full((11, 11), value))
    hole = (table["lon"] == 5.0) & (table["lat"] == 5.0)
    return table.loc[~hole].reset_index(drop=True)


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, Reject()),
        (False, Reject()),
        ("reject", Reject()),
        (True, SplineInterpolate()),
        ("Spline", SplineInterpolate()),
        (3, Constant(3.0)),
        (-1.5, Constant(-1.5)),
        (Constant(2.0), Constant(2.0)),
    ],
)
def test_resolve_fill_policy(value, expected):
    assert resolve_fill_policy(value) == expected


def test_resolve_aggregate_names_and_callables():
    assert resolve_fill_policy("mean") == Aggregate(np.nanmean)
    assert resolve_fill_policy("max") == Aggregate(np.nanmax)
    assert resolve_fill_policy(np.median) == Aggregate(np.median)


@pytest.mark.parametrize("value", ["nearest", float("nan"), [1, 2], {"fill": 0}])
def test_unsupported_policy_raises(value):
    with pytest.raises(UnsupportedPolicyError):
        resolve_fill_policy(value)


def test_constant_fills_every_missing_cell():
    table = long_table(np.arange(5.0), np.arange(4.0), np.arange(20.0).reshape(4, 5))
    missing = [(0.0, 0.0), (4.0, 3.0), (2.0, 1.0)]
    for xv, yv in missing:
        table = table.loc[~((table["lon"] == xv) & (table["lat"] == yv))]

    filled = impute_grid(table, "lon", "lat", "z", Constant(-7.0))
    assert len(filled) == 20
    for xv, yv in missing:
        value = filled.loc[(filled["lon"] == xv) & (filled["lat"] == yv), "z"]
        assert value.tolist() == [-7.0]
    # Known cells are untouched
    assert filled.loc[(filled["lon"] == 1.0) & (filled["lat"] == 0.0), "z"].tolist() == [1.0]


def test_mean_fills_hole_with_neighbour_value():
    filled = impute_grid(_grid_with_hole(10.0), "lon", "lat", "z", "mean")
    grid = to_grid(filled, "lon", "lat", "z")
    assert grid.z[5, 5] == pytest.approx(10.0)


def test_spline_reproduces_smooth_field(bowl):
    hole = (bowl["lon"] == 0.0) & (bowl["lat"] == 0.0)
    filled = impute_grid(bowl.loc[~hole], "lon", "lat", "z", SplineInterpolate())
    value = filled.loc[(filled["lon"] == 0.0) & (filled["lat"] == 0.0), "z"].item()
    assert -0.5 < value < 1.0


def test_spline_uses_nearest_outside_known_hull():
    table = long_table(np.arange(4.0), np.arange(4.0), np.arange(16.0).reshape(4, 4))
    corner = (table["lon"] == 3.0) & (table["lat"] == 3.0)
    filled = impute_grid(table.loc[~corner], "lon", "lat", "z", SplineInterpolate())
    value = filled.loc[(filled["lon"] == 3.0) & (filled["lat"] == 3.0), "z"].item()
    assert np.isfinite(value)


def test_reject_names_missing_edge_row():
    table = long_table(np.arange(10.0), np.arange(10.0), np.ones((10, 10)))
    table.loc[table["lat"] == 9.0, "z"] = np.nan

    with pytest.raises(MalformedGridError) as excinfo:
        impute_grid(table, "lon", "lat", "z", Reject())

    expected = [(float(xv), 9.0) for xv in range(10)]
    assert sorted(excinfo.value.missing) == expected
    assert "(0, 9)" in str(excinfo.value)
    assert "(9, 9)" in str(excinfo.value)


def test_duplicates_are_never_imputed():
    table = _grid_with_hole()
    table = pd.concat([table, table.iloc[[0]]], ignore_index=True)
    with pytest.raises(MalformedGridError):
        impute_grid(table, "lon", "lat", "z", Constant(0.0))


def test_complete_grid_is_returned_sorted(bowl):
    shuffled = bowl.sample(frac=1.0, random_state=1)
    result = impute_grid(shuffled, "lon", "lat", "z", Reject())
    assert len(result) == len(bowl)
    assert result["lat"].is_monotonic_increasing


def test_input_table_is_not_modified():
    table = _grid_with_hole()
    before = table.copy()
    impute_grid(table, "lon", "lat", "z", Constant(0.0))
    assert table.equals(before)


def test_extra_columns_are_carried_over():
    table = _grid_with_hole()
    table["station"] = "a"
    filled = impute_grid(table, "lon", "lat", "z", Constant(0.0))
    assert filled["station"].isna().sum() == 1
