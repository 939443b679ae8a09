"""
Geometry and pixels: transforms, the coordinate-system stack, shape
generators and the z-buffered rasterizer.
"""
from mdlanim.graphics.draw import RenderTarget, draw_lines, draw_polygons
from mdlanim.graphics.stack import TransformStack
