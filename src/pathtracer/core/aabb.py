"""Axis-aligned bounding boxes.

Boxes are plain (minimum, maximum) corner pairs. The union of two boxes is
computed with NaN-safe min/max so that a NaN coordinate on one side never
poisons the result, and the ray test is the classic slab method.

The slab test relies on IEEE-754 semantics: a zero direction component gives
an infinite inverse, and the interval comparisons still resolve correctly.

Example:
    >>> # Inside a Taichi kernel:
    >>> # box = surrounding_box(sphere_bounding_box(s0), sphere_bounding_box(s1))
    >>> # if hit_aabb(box, ray.origin, ray.direction, 0.001, 1e30): ...
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Aabb:
    """An axis-aligned box.

    Attributes:
        minimum: The corner with the smallest coordinates.
        maximum: The corner with the largest coordinates.
    """

    minimum: vec3
    maximum: vec3


@ti.func
def _nan_safe_min(a: ti.f32, b: ti.f32) -> ti.f32:
    """Minimum of a and b, returning the other operand when one is NaN."""
    result = a
    if tm.isnan(a):
        result = b
    elif not tm.isnan(b) and b < a:
        result = b
    return result


@ti.func
def _nan_safe_max(a: ti.f32, b: ti.f32) -> ti.f32:
    """Maximum of a and b, returning the other operand when one is NaN."""
    result = a
    if tm.isnan(a):
        result = b
    elif not tm.isnan(b) and b > a:
        result = b
    return result


@ti.func
def surrounding_box(box0: Aabb, box1: Aabb) -> Aabb:
    """Return the smallest box containing both inputs.

    Args:
        box0: First box.
        box1: Second box.

    Returns:
        The axis-wise union of box0 and box1.
    """
    small = vec3(
        _nan_safe_min(box0.minimum.x, box1.minimum.x),
        _nan_safe_min(box0.minimum.y, box1.minimum.y),
        _nan_safe_min(box0.minimum.z, box1.minimum.z),
    )
    big = vec3(
        _nan_safe_max(box0.maximum.x, box1.maximum.x),
        _nan_safe_max(box0.maximum.y, box1.maximum.y),
        _nan_safe_max(box0.maximum.z, box1.maximum.z),
    )
    return Aabb(minimum=small, maximum=big)


@ti.func
def hit_aabb(
    box: Aabb,
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> ti.i32:
    """Slab test of a ray against a box.

    For each axis the entry and exit parameters are computed from the inverse
    direction component, swapped when that component is negative, and used to
    narrow [t_min, t_max]. The test fails as soon as the interval is empty.

    Args:
        box: The box to test.
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        t_min: Lower bound of the ray interval.
        t_max: Upper bound of the ray interval.

    Returns:
        1 if the ray overlaps the box within the interval, 0 otherwise.
    """
    lo = t_min
    hi = t_max
    inside = 1
    for a in ti.static(range(3)):
        if inside == 1:
            inv_d = 1.0 / ray_direction[a]
            t0 = (box.minimum[a] - ray_origin[a]) * inv_d
            t1 = (box.maximum[a] - ray_origin[a]) * inv_d
            if inv_d < 0.0:
                tmp = t0
                t0 = t1
                t1 = tmp
            if t0 > lo:
                lo = t0
            if t1 < hi:
                hi = t1
            if hi <= lo:
                inside = 0
    return inside
