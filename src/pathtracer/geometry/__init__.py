"""Geometry module for shape primitives.

This module provides geometric primitives and their intersection algorithms:

Components:
    sphere: Sphere primitive, the shared HitRecord and spherical UV mapping
    rect: Axis-aligned rectangles in the xy, xz and yz planes
    quadrilateral: Four-sided polygons in a Y-Z plane

Every primitive exposes a hit function returning a HitRecord and a
bounding-box function returning an Aabb. All of them are Taichi functions
(@ti.func) that run inside the rendering kernels.

Ray-object intersection follows the pattern:
    record = hit_shape(ray_origin, ray_direction, shape, t_min, t_max)
"""

from .quadrilateral import (
    Quadrilateral,
    hit_quadrilateral,
    make_quadrilateral,
    point_in_quadrilateral,
    quadrilateral_bounding_box,
)
from .rect import AxisRect, RectAxis, hit_rect, rect_bounding_box
from .sphere import (
    HitRecord,
    Sphere,
    get_sphere_uv,
    hit_sphere,
    make_sphere,
    sphere_bounding_box,
)

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
    "get_sphere_uv",
    "sphere_bounding_box",
    "AxisRect",
    "RectAxis",
    "hit_rect",
    "rect_bounding_box",
    "Quadrilateral",
    "hit_quadrilateral",
    "make_quadrilateral",
    "point_in_quadrilateral",
    "quadrilateral_bounding_box",
]
