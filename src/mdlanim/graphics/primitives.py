"""
Shape Generators
================
Builds the local-coordinate geometry of the shapes a script can draw.

Every call returns a new geometry matrix, so no generated points survive
from one shape to the next. Polygons are triangles wound counter-clockwise
when seen from outside the solid.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from mdlanim import config

if TYPE_CHECKING:
    import numpy.typing as npt

Point = tuple[float, float, float]


class Geometry:
    """
    Homogeneous points stored one per column.

    Subclasses group consecutive points into edges (2) or triangles (3).
    """
    POINTS_PER_ITEM: int = 1

    def __init__(self) -> None:
        self._points: list[tuple[float, float, float, float]] = []

    def add_point(self, x: float, y: float, z: float) -> None:
        self._points.append((float(x), float(y), float(z), 1.0))

    @property
    def points(self) -> npt.NDArray[np.float64]:
        """(4, n) array of the stored points."""
        if not self._points:
            return np.zeros((4, 0), dtype=np.float64)
        return np.array(self._points, dtype=np.float64).T

    def transformed(self, matrix: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return matrix @ self.points

    def __len__(self) -> int:
        return len(self._points) // self.POINTS_PER_ITEM


class EdgeMatrix(Geometry):
    POINTS_PER_ITEM = 2

    def add_edge(self, p0: Point, p1: Point) -> None:
        self.add_point(*p0)
        self.add_point(*p1)


class PolygonMatrix(Geometry):
    POINTS_PER_ITEM = 3

    def add_polygon(self, p0: Point, p1: Point, p2: Point) -> None:
        self.add_point(*p0)
        self.add_point(*p1)
        self.add_point(*p2)

    def add_quad(self, p0: Point, p1: Point, p2: Point, p3: Point) -> None:
        """Two triangles for a planar quad given counter-clockwise."""
        self.add_polygon(p0, p1, p2)
        self.add_polygon(p0, p2, p3)


def generate_box(corner: Point, size: Point) -> PolygonMatrix:
    """
    Box with its front-top-left corner at ``corner``.

    Args:
        corner: (x, y, z) of the front-top-left corner.
        size: (width, height, depth), extending towards +x, -y and -z.
    """
    x0, y0, z0 = corner
    w, h, d = size
    x1, y1, z1 = x0 + w, y0 - h, z0 - d

    box = PolygonMatrix()
    # front, back
    box.add_quad((x0, y0, z0), (x0, y1, z0), (x1, y1, z0), (x1, y0, z0))
    box.add_quad((x1, y0, z1), (x1, y1, z1), (x0, y1, z1), (x0, y0, z1))
    # right, left
    box.add_quad((x1, y0, z0), (x1, y1, z0), (x1, y1, z1), (x1, y0, z1))
    box.add_quad((x0, y0, z1), (x0, y1, z1), (x0, y1, z0), (x0, y0, z0))
    # top, bottom
    box.add_quad((x0, y0, z1), (x0, y0, z0), (x1, y0, z0), (x1, y0, z1))
    box.add_quad((x0, y1, z0), (x0, y1, z1), (x1, y1, z1), (x1, y1, z0))
    return box


def sphere_points(center: Point, radius: float, step: int) -> npt.NDArray[np.float64]:
    """
    Surface points of a sphere, ``step`` meridians of ``step + 1`` points each.

    Each meridian is a half circle in the xy-plane (pole to pole along x)
    rotated about the x axis.

    Returns:
        (step, step + 1, 3) array indexed by [meridian, position].
    """
    cx, cy, cz = center
    phi = 2.0 * np.pi * np.arange(step) / step
    theta = np.pi * np.arange(step + 1) / step
    phi, theta = np.meshgrid(phi, theta, indexing="ij")

    x = radius * np.cos(theta) + cx
    y = radius * np.sin(theta) * np.cos(phi) + cy
    z = radius * np.sin(theta) * np.sin(phi) + cz
    return np.stack([x, y, z], axis=-1)


def generate_sphere(center: Point, radius: float, resolution: int = config.STEP_3D) -> PolygonMatrix:
    points = sphere_points(center, radius, resolution)
    sphere = PolygonMatrix()

    for i in range(resolution):
        nxt = (i + 1) % resolution
        for j in range(resolution):
            # The first and last bands touch a pole and collapse to one triangle
            if j != 0:
                sphere.add_polygon(points[i, j], points[i, j + 1], points[nxt, j])
            if j != resolution - 1:
                sphere.add_polygon(points[i, j + 1], points[nxt, j + 1], points[nxt, j])
    return sphere


def torus_points(center: Point, r0: float, r1: float, step: int) -> npt.NDArray[np.float64]:
    """
    Surface points of a torus around the y axis.

    Args:
        r0: Radius of the tube.
        r1: Distance from the center to the middle of the tube.

    Returns:
        (step, step, 3) array indexed by [ring, position on the tube].
    """
    cx, cy, cz = center
    phi = 2.0 * np.pi * np.arange(step) / step
    theta = 2.0 * np.pi * np.arange(step) / step
    phi, theta = np.meshgrid(phi, theta, indexing="ij")

    ring = r0 * np.cos(theta) + r1
    x = np.cos(phi) * ring + cx
    y = r0 * np.sin(theta) + cy
    z = -np.sin(phi) * ring + cz
    return np.stack([x, y, z], axis=-1)


def generate_torus(center: Point, r0: float, r1: float, resolution: int = config.STEP_3D) -> PolygonMatrix:
    points = torus_points(center, r0, r1, resolution)
    torus = PolygonMatrix()

    for i in range(resolution):
        ni = (i + 1) % resolution
        for j in range(resolution):
            nj = (j + 1) % resolution
            torus.add_polygon(points[i, j], points[ni, j], points[i, nj])
            torus.add_polygon(points[i, nj], points[ni, j], points[ni, nj])
    return torus


def generate_line(p0: Point, p1: Point) -> EdgeMatrix:
    edges = EdgeMatrix()
    edges.add_edge(p0, p1)
    return edges
