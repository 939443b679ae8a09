"""
4x4 homogeneous transforms.

Transforms act on column vectors, so a geometry matrix holds one point per
column (shape ``(4, n)``) and is transformed with ``m @ points``.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from mdlanim.model.operations import Axis

if TYPE_CHECKING:
    import numpy.typing as npt


def identity() -> npt.NDArray[np.float64]:
    return np.eye(4, dtype=np.float64)


def make_translation(x: float, y: float, z: float) -> npt.NDArray[np.float64]:
    m = identity()
    m[:3, 3] = [x, y, z]
    return m


def make_scale(x: float, y: float, z: float) -> npt.NDArray[np.float64]:
    return np.diag([x, y, z, 1.0]).astype(np.float64)


def make_rotation(axis: Axis | int, radians: float) -> npt.NDArray[np.float64]:
    """
    Generates a rotation about the X, Y or Z axis.

    Args:
        axis: Axis selector (0 = X, 1 = Y, 2 = Z).
        radians: Counter-clockwise angle looking down the axis towards the origin.
    """
    c = math.cos(radians)
    s = math.sin(radians)
    axis = Axis(axis)

    if axis == Axis.X:
        return np.array([
            [1, 0, 0, 0],
            [0, c, -s, 0],
            [0, s, c, 0],
            [0, 0, 0, 1]
        ], dtype=np.float64)
    elif axis == Axis.Y:
        return np.array([
            [ c, 0, s, 0],
            [ 0, 1, 0, 0],
            [-s, 0, c, 0],
            [ 0, 0, 0, 1]
        ], dtype=np.float64)
    return np.array([
        [c, -s, 0, 0],
        [s, c, 0, 0],
        [0, 0, 1, 0],
        [0, 0, 0, 1]
    ], dtype=np.float64)


def compose(a: npt.NDArray[np.float64], b: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Matrix product ``a · b``; ``b`` is applied first."""
    return a @ b
