"""Axis-aligned rectangle primitive (xy, xz and yz variants).

An axis-aligned rectangle lies in the plane where one coordinate is fixed
at k and spans two closed intervals over the remaining coordinates. The
variant is selected by the index of the fixed axis:

    axis = 0  ->  yz rectangle at x = k, spanning y in [a0, a1], z in [b0, b1]
    axis = 1  ->  xz rectangle at y = k, spanning x in [a0, a1], z in [b0, b1]
    axis = 2  ->  xy rectangle at z = k, spanning x in [a0, a1], y in [b0, b1]

Texture coordinates interpolate linearly across the two spans, so
u = (a - a0) / (a1 - a0) and v = (b - b0) / (b1 - b0). The outward normal
is the positive unit vector of the fixed axis.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.pathtracer.geometry.rect import AxisRect, RectAxis
    >>> # Ceiling light at y = 2 spanning x, z in [-5, 5]
    >>> light = AxisRect(axis=RectAxis.XZ, a0=-5, a1=5, b0=-5, b1=5, k=2)
    >>> # Use hit_rect within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.aabb import Aabb

from .sphere import HitRecord, make_miss_record, set_face_normal

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Half-thickness given to the flat axis of a rectangle's bounding box
RECT_BOX_PADDING = 1e-4


class RectAxis(IntEnum):
    """Index of the coordinate held fixed by a rectangle."""

    YZ = 0
    XZ = 1
    XY = 2


@ti.dataclass
class AxisRect:
    """An axis-aligned rectangle.

    Attributes:
        axis: Index of the fixed coordinate (see RectAxis).
        a0: Lower bound of the first in-plane coordinate.
        a1: Upper bound of the first in-plane coordinate.
        b0: Lower bound of the second in-plane coordinate.
        b1: Upper bound of the second in-plane coordinate.
        k: Value of the fixed coordinate.
    """

    axis: ti.i32
    a0: ti.f32
    a1: ti.f32
    b0: ti.f32
    b1: ti.f32
    k: ti.f32


@ti.func
def split_axes(p: vec3, axis: ti.i32):
    """Split a vector into (fixed, first in-plane, second in-plane) components."""
    fixed = p.z
    a = p.x
    b = p.y
    if axis == 0:
        fixed = p.x
        a = p.y
        b = p.z
    elif axis == 1:
        fixed = p.y
        a = p.x
        b = p.z
    return fixed, a, b


@ti.func
def join_axes(fixed: ti.f32, a: ti.f32, b: ti.f32, axis: ti.i32) -> vec3:
    """Inverse of split_axes."""
    result = vec3(a, b, fixed)
    if axis == 0:
        result = vec3(fixed, a, b)
    elif axis == 1:
        result = vec3(a, fixed, b)
    return result


@ti.func
def hit_rect(
    ray_origin: vec3,
    ray_direction: vec3,
    rect: AxisRect,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-rectangle intersection.

    Solves for the t where the ray crosses the rectangle's plane, then
    rejects hits outside [t_min, t_max] or outside the rectangle's spans.
    Rays parallel to the plane never hit.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        rect: The rectangle to test.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A HitRecord for the intersection, or a miss record.
    """
    o_k, o_a, o_b = split_axes(ray_origin, rect.axis)
    d_k, d_a, d_b = split_axes(ray_direction, rect.axis)

    result = make_miss_record()

    if ti.abs(d_k) > 1e-8:
        t = (rect.k - o_k) / d_k
        if t >= t_min and t <= t_max:
            a = o_a + t * d_a
            b = o_b + t * d_b
            if a >= rect.a0 and a <= rect.a1 and b >= rect.b0 and b <= rect.b1:
                outward_normal = join_axes(1.0, 0.0, 0.0, rect.axis)
                front_face, normal = set_face_normal(ray_direction, outward_normal)
                result = HitRecord(
                    hit=1,
                    t=t,
                    point=ray_origin + t * ray_direction,
                    normal=normal,
                    front_face=front_face,
                    u=(a - rect.a0) / (rect.a1 - rect.a0),
                    v=(b - rect.b0) / (rect.b1 - rect.b0),
                )

    return result


@ti.func
def rect_bounding_box(rect: AxisRect) -> Aabb:
    """Bounding box of the rectangle, padded along its flat axis."""
    lo = join_axes(rect.k - RECT_BOX_PADDING, rect.a0, rect.b0, rect.axis)
    hi = join_axes(rect.k + RECT_BOX_PADDING, rect.a1, rect.b1, rect.axis)
    return Aabb(minimum=lo, maximum=hi)
