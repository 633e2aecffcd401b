"""
Custom exceptions for metgeoms package.

This module defines exception classes raised by grid validation, imputation,
contour computation and the high-level plotting API.
"""

from typing import List, Optional, Sequence, Tuple

# Number of coordinate pairs spelled out in an error message before truncating.
_MAX_PAIRS_IN_MESSAGE = 20


class MetGeomsError(Exception):
    """Base exception class for all metgeoms errors."""
    pass


class MalformedGridError(MetGeomsError):
    """
    Raised when samples do not form a complete rectangular grid.

    The full list of absent ``(x, y)`` pairs is kept on ``missing`` and pairs
    occurring more than once on ``duplicated``, so callers can report or
    repair them.
    """

    def __init__(
        self,
        missing: Sequence[Tuple[float, float]] = (),
        duplicated: Sequence[Tuple[float, float]] = (),
        message: Optional[str] = None
    ):
        self.missing: List[Tuple[float, float]] = list(missing)
        self.duplicated: List[Tuple[float, float]] = list(duplicated)
        if message is None:
            message = _describe(self.missing, self.duplicated)
        super().__init__(message)


def _format_pairs(pairs: Sequence[Tuple[float, float]]) -> str:
    shown = ", ".join(f"({x:g}, {y:g})" for x, y in pairs[:_MAX_PAIRS_IN_MESSAGE])
    if len(pairs) > _MAX_PAIRS_IN_MESSAGE:
        shown += f", ... ({len(pairs) - _MAX_PAIRS_IN_MESSAGE} more)"
    return shown


def _describe(missing, duplicated) -> str:
    parts = []
    if missing:
        parts.append(f"{len(missing)} missing cell(s): {_format_pairs(missing)}")
    if duplicated:
        parts.append(f"{len(duplicated)} duplicated cell(s): {_format_pairs(duplicated)}")
    if not parts:
        return "Data is not a regular grid"
    return "Data is not a complete regular grid; " + "; ".join(parts)


class UnsupportedPolicyError(MetGeomsError):
    """
    Raised for a missing-value fill policy that cannot be interpreted.

    Valid policies are reject, a constant, an aggregate function or spline
    interpolation (see ``metgeoms.calculations.impute``).
    """
    pass


class InvalidParameterError(MetGeomsError):
    """
    Raised for invalid user inputs.

    This exception is used for parameter validation failures such as
    missing columns, non-increasing break sets or unevenly spaced grids
    passed to streamline rendering.
    """
    pass


class RenderError(MetGeomsError):
    """
    Raised when plot rendering fails.

    Wraps Matplotlib errors raised while drawing layers or saving figures
    through the high-level API.
    """
    pass
