"""
Rasterizer
==========
Draws transformed geometry into a colour buffer guarded by a depth buffer.

Screen coordinates are used directly: x grows to the right, y grows
upwards and larger z is closer to the viewer. Image row 0 is the top of
the screen.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import numba as nb

from mdlanim import config
from mdlanim.graphics.lighting import get_lighting, surface_normal

if TYPE_CHECKING:
    import numpy.typing as npt

    from mdlanim.config import Color, Lighting

logger = logging.getLogger(__name__)


class RenderTarget:
    """
    Colour buffer (height, width, 3) of uint8 plus a float64 depth buffer.
    """

    def __init__(
        self,
        width: int = config.XRES,
        height: int = config.YRES,
        background: Color = (255, 255, 255)
    ) -> None:
        self.width = width
        self.height = height
        self.background = background
        self.color = np.empty((height, width, 3), dtype=np.uint8)
        self.depth = np.empty((height, width), dtype=np.float64)
        self.clear()

    def clear_color(self) -> None:
        self.color[:, :] = self.background

    def clear_depth(self) -> None:
        self.depth.fill(-np.inf)

    def clear(self) -> None:
        self.clear_color()
        self.clear_depth()

    def pixel(self, x: int, y: int) -> tuple[int, int, int]:
        """Colour at screen coordinates (y up)."""
        r, g, b = self.color[self.height - 1 - y, x]
        return int(r), int(g), int(b)

    def is_blank(self) -> bool:
        return bool(np.all(self.color == np.asarray(self.background, dtype=np.uint8)))


@nb.jit(cache=True)
def _plot(color, depth, x, y, z, r, g, b) -> None:
    height = depth.shape[0]
    width = depth.shape[1]
    if x < 0 or x >= width or y < 0 or y >= height:
        return
    row = height - 1 - y
    if z > depth[row, x]:
        depth[row, x] = z
        color[row, x, 0] = r
        color[row, x, 1] = g
        color[row, x, 2] = b


@nb.jit(cache=True)
def _span(color, depth, y, xa, za, xb, zb, r, g, b) -> None:
    if xa > xb:
        xa, xb = xb, xa
        za, zb = zb, za
    width = depth.shape[1]
    # clamp before converting so huge coordinates never reach int()
    x_start = int(max(np.ceil(xa), 0.0))
    x_end = int(min(np.floor(xb), width - 1.0))
    dx = xb - xa
    for x in range(x_start, x_end + 1):
        if dx > 0.0:
            z = za + (x - xa) / dx * (zb - za)
        else:
            z = za if za > zb else zb
        _plot(color, depth, x, y, z, r, g, b)


@nb.jit(cache=True)
def _fill_triangle(color, depth, xs, ys, zs, r, g, b) -> None:
    """Scan-line fill of one triangle, bottom to top, over the visible rows only."""
    order = np.argsort(ys)
    xb, yb, zb = xs[order[0]], ys[order[0]], zs[order[0]]
    xm, ym, zm = xs[order[1]], ys[order[1]], zs[order[1]]
    xt, yt, zt = xs[order[2]], ys[order[2]], zs[order[2]]

    if yt == yb:
        return

    height = depth.shape[0]
    y_start = int(max(np.ceil(yb), 0.0))
    y_end = int(min(np.floor(yt), height - 1.0))
    for y in range(y_start, y_end + 1):
        # long edge: bottom to top
        t = (y - yb) / (yt - yb)
        x0 = xb + t * (xt - xb)
        z0 = zb + t * (zt - zb)
        # short edges: bottom to middle, then middle to top
        if y < ym:
            s = (y - yb) / (ym - yb)
            x1 = xb + s * (xm - xb)
            z1 = zb + s * (zm - zb)
        elif yt > ym:
            s = (y - ym) / (yt - ym)
            x1 = xm + s * (xt - xm)
            z1 = zm + s * (zt - zm)
        else:
            x1 = xm
            z1 = zm
        _span(color, depth, y, x0, z0, x1, z1, r, g, b)


@nb.jit(cache=True)
def _nearest(v):
    return int(np.floor(v + 0.5))


@nb.jit(cache=True)
def _clip_edge(p, q, t0, t1):
    """Liang-Barsky step: narrow [t0, t1] against one boundary p * t <= q."""
    if p == 0.0:
        if q < 0.0:
            return 1.0, 0.0
        return t0, t1
    t = q / p
    if p < 0.0:
        if t > t0:
            t0 = t
    elif t < t1:
        t1 = t
    return t0, t1


@nb.jit(cache=True)
def _line(color, depth, x0, y0, z0, x1, y1, z1, r, g, b) -> None:
    height = depth.shape[0]
    width = depth.shape[1]
    dx = x1 - x0
    dy = y1 - y0
    # one pixel of margin keeps the rounded end pixels of a clipped segment
    t0, t1 = 0.0, 1.0
    t0, t1 = _clip_edge(-dx, x0 + 1.0, t0, t1)
    t0, t1 = _clip_edge(dx, width - x0, t0, t1)
    t0, t1 = _clip_edge(-dy, y0 + 1.0, t0, t1)
    t0, t1 = _clip_edge(dy, height - y0, t0, t1)
    if t0 > t1:
        return
    if t0 > 0.0 or t1 < 1.0:
        dz = z1 - z0
        x0, y0, z0, x1, y1, z1 = (
            x0 + t0 * dx, y0 + t0 * dy, z0 + t0 * dz,
            x0 + t1 * dx, y0 + t1 * dy, z0 + t1 * dz,
        )

    steps = max(abs(_nearest(x1) - _nearest(x0)), abs(_nearest(y1) - _nearest(y0)))
    if steps == 0:
        _plot(color, depth, _nearest(x0), _nearest(y0), max(z0, z1), r, g, b)
        return
    for i in range(steps + 1):
        t = i / steps
        x = _nearest(x0 + t * (x1 - x0))
        y = _nearest(y0 + t * (y1 - y0))
        z = z0 + t * (z1 - z0)
        _plot(color, depth, x, y, z, r, g, b)


def draw_polygons(points: npt.NDArray[np.float64], target: RenderTarget, lighting: Lighting) -> int:
    """
    Draw every front-facing triangle of a polygon matrix.

    Args:
        points: (4, 3n) transformed triangle vertices.
        target: Buffers to draw into.
        lighting: View vector, light and surface reflection constants.

    Returns:
        Number of triangles that survived back-face culling.
    """
    view = np.asarray(lighting.view, dtype=np.float64)
    drawn = 0
    for i in range(0, points.shape[1] - 2, 3):
        tri = points[:, i:i + 3]
        normal = surface_normal(tri[:, 0], tri[:, 1], tri[:, 2])
        if np.dot(normal, view) <= 0.0:
            continue
        r, g, b = get_lighting(normal, lighting)
        _fill_triangle(
            target.color, target.depth,
            np.ascontiguousarray(tri[0], dtype=np.float64),
            np.ascontiguousarray(tri[1], dtype=np.float64),
            np.ascontiguousarray(tri[2], dtype=np.float64),
            r, g, b,
        )
        drawn += 1
    return drawn


def draw_lines(points: npt.NDArray[np.float64], target: RenderTarget, color: Color) -> int:
    """
    Draw every edge of an edge matrix in a flat colour.

    Returns:
        Number of edges drawn.
    """
    r, g, b = color
    drawn = 0
    for i in range(0, points.shape[1] - 1, 2):
        x0, y0, z0 = points[:3, i]
        x1, y1, z1 = points[:3, i + 1]
        _line(target.color, target.depth, float(x0), float(y0), float(z0), float(x1), float(y1), float(z1), r, g, b)
        drawn += 1
    return drawn
