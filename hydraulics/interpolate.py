"""Piecewise-linear table lookup used by the pump curve search."""

from typing import Sequence

import numpy as np

from .errors import InvalidInputError, InterpolationRangeError


def is_ascending(xs: Sequence[float], strict: bool = True) -> bool:
    """True when ``xs`` is sorted ascending (strictly by default)."""
    diffs = np.diff(np.asarray(xs, dtype=float))
    return bool(np.all(diffs > 0)) if strict else bool(np.all(diffs >= 0))


def linear_interpolate(x: float, xs: Sequence[float], ys: Sequence[float]) -> float:
    """
    Interpolate ``y`` at ``x`` from a table sorted by ascending ``xs``.

    Args:
        x: Query value
        xs: Table abscissae, ascending
        ys: Table ordinates

    Returns:
        Interpolated value; exact table points are returned unchanged

    Raises:
        InvalidInputError: Table has fewer than two points or mismatched lengths
        InterpolationRangeError: ``x`` lies outside ``[xs[0], xs[-1]]``
    """
    if len(xs) < 2 or len(xs) != len(ys):
        raise InvalidInputError("Interpolation table must have at least 2 points of matching length")
    if x < xs[0] or x > xs[-1]:
        raise InterpolationRangeError(
            f"Value {x} is outside table range [{xs[0]}, {xs[-1]}]"
        )
    return float(np.interp(x, xs, ys))
