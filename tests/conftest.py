"""
Global pytest fixtures for metgeoms unit tests.
Provide small synthetic fields as long tables and FieldGrids.
"""

import logging

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from metgeoms.calculations.grid import FieldGrid


def long_table(x, y, z, x_name="lon", y_name="lat", z_name="z") -> pd.DataFrame:
    """Flatten a (len(y), len(x)) array into a long table."""
    xx, yy = np.meshgrid(x, y)
    return pd.DataFrame({
        x_name: xx.ravel(),
        y_name: yy.ravel(),
        z_name: np.asarray(z, dtype=float).ravel(),
    })


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


@pytest.fixture(autouse=True)
def _reset_logging():
    # Handlers bound to a previous test's captured stderr must not outlive it
    logger = logging.getLogger("metgeoms")
    logger.handlers.clear()
    yield
    logger.handlers.clear()


@pytest.fixture
def two_peaks() -> pd.DataFrame:
    """10x10 field at 100 with single-sample peaks of 180 at (2, 2) and 220 at (7, 7)."""
    x = np.arange(10.0)
    y = np.arange(10.0)
    z = np.full((10, 10), 100.0)
    z[2, 2] = 180.0
    z[7, 7] = 220.0
    return long_table(x, y, z)


@pytest.fixture
def bowl() -> pd.DataFrame:
    """Smooth 21x15 field z = x**2 + y**2 over lon -10..10, lat -7..7."""
    x = np.linspace(-10.0, 10.0, 21)
    y = np.linspace(-7.0, 7.0, 15)
    xx, yy = np.meshgrid(x, y)
    return long_table(x, y, xx**2 + yy**2)


@pytest.fixture
def winds() -> pd.DataFrame:
    """Solid-body rotation on an evenly spaced 11x11 grid."""
    x = np.linspace(-5.0, 5.0, 11)
    y = np.linspace(-5.0, 5.0, 11)
    xx, yy = np.meshgrid(x, y)
    table = long_table(x, y, xx**2 + yy**2)
    table["u"] = -yy.ravel()
    table["v"] = xx.ravel()
    return table


@pytest.fixture
def plane_grid() -> FieldGrid:
    """Plane falling towards the north: z = -y."""
    x = np.linspace(0.0, 10.0, 11)
    y = np.linspace(0.0, 10.0, 11)
    _, yy = np.meshgrid(x, y)
    return FieldGrid(x=x, y=y, z=-yy, x_name="lon", y_name="lat", z_name="z")
