"""
Flat Phong lighting: one colour per triangle from its surface normal.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

    from mdlanim.config import Lighting


def normalize(v: npt.ArrayLike) -> npt.NDArray[np.float64]:
    v = np.asarray(v, dtype=np.float64)
    n = np.linalg.norm(v)
    if n == 0.0:
        return np.zeros_like(v)
    return v / n


def surface_normal(p0: npt.NDArray[np.float64], p1: npt.NDArray[np.float64], p2: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Unnormalized normal of a counter-clockwise triangle."""
    return np.cross(p1[:3] - p0[:3], p2[:3] - p0[:3])


def get_lighting(normal: npt.ArrayLike, lighting: Lighting) -> tuple[int, int, int]:
    """
    Colour of a surface facing ``normal``.

    Ambient + diffuse + specular terms, each channel clamped to [0, 255].
    """
    n = normalize(normal)
    light = normalize(lighting.light_position)
    view = normalize(lighting.view)
    light_color = np.asarray(lighting.light_color, dtype=np.float64)

    ambient = np.asarray(lighting.ambient, dtype=np.float64) * np.asarray(lighting.ambient_reflect)

    n_dot_l = float(np.dot(n, light))
    diffuse = light_color * np.asarray(lighting.diffuse_reflect) * max(n_dot_l, 0.0)

    specular = np.zeros(3)
    if n_dot_l > 0.0:
        reflected = 2.0 * n_dot_l * n - light
        r_dot_v = max(float(np.dot(reflected, view)), 0.0)
        specular = light_color * np.asarray(lighting.specular_reflect) * r_dot_v ** lighting.specular_exponent

    color = np.clip(ambient + diffuse + specular, 0.0, 255.0)
    return tuple(int(c) for c in color)
