"""
Break sets for contour computation.

A break set is a strictly increasing sequence of levels. Callers pass either
an explicit sequence or a generator called with the data range; when neither
is given the generator is built from the call's Config.
"""

import logging
from typing import Any, Callable, Optional

import numpy as np
from matplotlib.ticker import MaxNLocator

from ..config import Config
from ..exceptions import InvalidParameterError

logger = logging.getLogger("metgeoms.calculations.breaks")

BreakGenerator = Callable[[float, float], np.ndarray]


def make_breaks(binwidth: Optional[float] = None, bins: int = 10) -> BreakGenerator:
    """
    Build a break generator.

    With *binwidth* the breaks are the multiples of binwidth spanning the
    data range; otherwise about *bins* "nice" levels are chosen.

    Args:
        binwidth: Spacing between consecutive breaks
        bins: Approximate number of intervals when binwidth is None

    Returns:
        Function ``(zmin, zmax) -> ndarray`` of increasing breaks

    Example:
        >>> make_breaks(binwidth=4)(1001.2, 1013.9)
        array([1000., 1004., 1008., 1012., 1016.])
    """
    if binwidth is not None:
        if binwidth <= 0:
            raise InvalidParameterError("binwidth must be positive")

        def _fixed_width(zmin: float, zmax: float) -> np.ndarray:
            lo = np.floor(zmin / binwidth) * binwidth
            hi = np.ceil(zmax / binwidth) * binwidth
            return np.arange(lo, hi + binwidth * 0.5, binwidth)

        return _fixed_width

    if bins < 1:
        raise InvalidParameterError("bins must be >= 1")

    locator = MaxNLocator(nbins=bins)

    def _pretty(zmin: float, zmax: float) -> np.ndarray:
        return np.asarray(locator.tick_values(zmin, zmax), dtype=float)

    return _pretty


def validate_breaks(breaks: Any) -> np.ndarray:
    """Return *breaks* as a float array, checking it is finite and strictly increasing."""
    arr = np.asarray(breaks, dtype=float).ravel()
    if arr.size == 0:
        raise InvalidParameterError("Break set is empty")
    if not np.all(np.isfinite(arr)):
        raise InvalidParameterError(f"Break set contains non-finite values: {arr}")
    if arr.size > 1 and not np.all(np.diff(arr) > 0):
        raise InvalidParameterError(f"Breaks must be strictly increasing, got {arr}")
    return arr


def resolve_breaks(
    breaks: Any,
    z: np.ndarray,
    config: Optional[Config] = None
) -> np.ndarray:
    """
    Turn a breaks argument into a concrete break set for field *z*.

    Args:
        breaks: Sequence of levels, a generator ``(zmin, zmax) -> levels``, or
                None to build a generator from *config* (bins/binwidth)
        z: Field values; NaNs are ignored
        config: Configuration consulted when breaks is None

    Returns:
        Strictly increasing float array

    Raises:
        InvalidParameterError: If the field has no finite values or the
            resulting breaks are not strictly increasing
    """
    if breaks is not None and not callable(breaks):
        return validate_breaks(breaks)

    values = np.asarray(z, dtype=float)
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        raise InvalidParameterError("Field has no finite values to derive breaks from")
    zmin, zmax = float(finite.min()), float(finite.max())

    if breaks is None:
        if config is None:
            config = Config()
        breaks = make_breaks(binwidth=config.binwidth, bins=config.bins)

    levels = validate_breaks(breaks(zmin, zmax))
    logger.debug(f"Breaks: {levels.size} levels from {levels[0]:g} to {levels[-1]:g}")
    return levels
