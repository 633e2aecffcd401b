import numpy as np
import pytest

from metgeoms.calculations.breaks import make_breaks, resolve_breaks, validate_breaks
from metgeoms.config import Config
from metgeoms.exceptions import InvalidParameterError


def test_binwidth_breaks_cover_range():
    levels = make_breaks(binwidth=4)(1001.2, 1013.9)
    np.testing.assert_allclose(levels, [1000.0, 1004.0, 1008.0, 1012.0, 1016.0])


def test_bins_breaks_are_increasing_and_cover_range():
    levels = make_breaks(bins=5)(0.3, 9.7)
    assert np.all(np.diff(levels) > 0)
    assert levels[0] <= 0.3
    assert levels[-1] >= 9.7


@pytest.mark.parametrize("breaks", [[], [1.0, 1.0], [3.0, 2.0], [0.0, np.inf]])
def test_invalid_breaks_raise(breaks):
    with pytest.raises(InvalidParameterError):
        validate_breaks(breaks)


def test_single_break_is_allowed():
    np.testing.assert_array_equal(validate_breaks([5]), [5.0])


def test_resolve_explicit_breaks_ignores_data():
    levels = resolve_breaks([1, 2, 3], np.array([np.nan, np.nan]))
    np.testing.assert_array_equal(levels, [1.0, 2.0, 3.0])


def test_resolve_generator_ignores_nan():
    z = np.array([np.nan, 2.0, 7.0])
    levels = resolve_breaks(make_breaks(binwidth=5), z)
    np.testing.assert_array_equal(levels, [0.0, 5.0, 10.0])


def test_resolve_uses_config_binwidth():
    levels = resolve_breaks(None, np.array([0.0, 100.0]), Config(binwidth=25.0))
    np.testing.assert_array_equal(levels, [0.0, 25.0, 50.0, 75.0, 100.0])


def test_resolve_all_nan_raises():
    with pytest.raises(InvalidParameterError):
        resolve_breaks(None, np.array([np.nan]))


def test_non_positive_binwidth_raises():
    with pytest.raises(InvalidParameterError):
        make_breaks(binwidth=0)
