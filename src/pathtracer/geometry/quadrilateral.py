"""Quadrilateral primitive in a Y-Z plane.

A quadrilateral is a four-sided polygon lying in the plane x = k. Its
vertices are given as (z, y) pairs in rotational order (clockwise or
counter-clockwise, without skipping around). Vertices may repeat, which turns
the shape into a triangle.

Intersection finds the plane crossing and then runs a crossing-number
point-in-polygon test over the four edges, so concave shapes are handled.

Texture coordinates are a linear approximation over the polygon's bounding
extents: u = (z - min_z) / (max_z - min_z), v = (y - min_y) / (max_y - min_y).
This is exact only for axis-aligned rectangles; on other shapes the mapping is
approximate, and it degrades near edges when an extent is tiny.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.pathtracer.geometry.quadrilateral import make_quadrilateral
    >>> # Inside a Taichi kernel:
    >>> # quad = make_quadrilateral(vec4(z0, z1, z2, z3), vec4(y0, y1, y2, y3), -8.0)
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.aabb import Aabb

from .sphere import HitRecord, make_miss_record, set_face_normal

# Type aliases using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4

# Half-thickness given to the flat x axis of the bounding box
QUADRILATERAL_BOX_PADDING = 1e-4


@ti.dataclass
class Quadrilateral:
    """A quadrilateral in the plane x = k.

    Attributes:
        zs: The z coordinates of the four vertices, in rotational order.
        ys: The y coordinates of the four vertices, in the same order.
        k: The x coordinate of the plane.
    """

    zs: vec4
    ys: vec4
    k: ti.f32


@ti.func
def make_quadrilateral(zs: vec4, ys: vec4, k: ti.f32) -> Quadrilateral:
    """Create a quadrilateral inside a Taichi kernel."""
    return Quadrilateral(zs=zs, ys=ys, k=k)


@ti.func
def quadrilateral_extents(quad: Quadrilateral) -> vec4:
    """Bounding extents of the vertices as (min_z, max_z, min_y, max_y)."""
    min_z = tm.min(tm.min(quad.zs[0], quad.zs[1]), tm.min(quad.zs[2], quad.zs[3]))
    max_z = tm.max(tm.max(quad.zs[0], quad.zs[1]), tm.max(quad.zs[2], quad.zs[3]))
    min_y = tm.min(tm.min(quad.ys[0], quad.ys[1]), tm.min(quad.ys[2], quad.ys[3]))
    max_y = tm.max(tm.max(quad.ys[0], quad.ys[1]), tm.max(quad.ys[2], quad.ys[3]))
    return vec4(min_z, max_z, min_y, max_y)


@ti.func
def point_in_quadrilateral(z: ti.f32, y: ti.f32, quad: Quadrilateral) -> ti.i32:
    """Crossing-number test of the point (z, y) against the polygon.

    A horizontal ray is cast from the point toward +z and the polygon edges
    it crosses are counted; an odd count means the point is inside.

    Returns:
        1 if the point lies inside the polygon, 0 otherwise.
    """
    crossings = 0
    # Edge i joins vertex i to its predecessor, starting with (0, 3)
    for i in ti.static(range(4)):
        z1 = quad.zs[i]
        y1 = quad.ys[i]
        z2 = quad.zs[ti.static((i + 3) % 4)]
        y2 = quad.ys[ti.static((i + 3) % 4)]
        if (y1 > y) != (y2 > y):
            intersect_z = (z2 - z1) * (y - y1) / (y2 - y1) + z1
            if z < intersect_z:
                crossings += 1
    return crossings % 2


@ti.func
def hit_quadrilateral(
    ray_origin: vec3,
    ray_direction: vec3,
    quad: Quadrilateral,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-quadrilateral intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        quad: The quadrilateral to test.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A HitRecord for the intersection, or a miss record. The outward
        normal is +x.
    """
    result = make_miss_record()

    if ti.abs(ray_direction.x) > 1e-8:
        t = (quad.k - ray_origin.x) / ray_direction.x
        if t >= t_min and t <= t_max:
            p = ray_origin + t * ray_direction
            if point_in_quadrilateral(p.z, p.y, quad) == 1:
                ext = quadrilateral_extents(quad)
                u = 0.0
                v = 0.0
                if ext[1] > ext[0]:
                    u = (p.z - ext[0]) / (ext[1] - ext[0])
                if ext[3] > ext[2]:
                    v = (p.y - ext[2]) / (ext[3] - ext[2])
                front_face, normal = set_face_normal(ray_direction, vec3(1.0, 0.0, 0.0))
                result = HitRecord(
                    hit=1,
                    t=t,
                    point=p,
                    normal=normal,
                    front_face=front_face,
                    u=u,
                    v=v,
                )

    return result


@ti.func
def quadrilateral_bounding_box(quad: Quadrilateral) -> Aabb:
    """Bounding box of the vertices, padded along x."""
    ext = quadrilateral_extents(quad)
    return Aabb(
        minimum=vec3(quad.k - QUADRILATERAL_BOX_PADDING, ext[2], ext[0]),
        maximum=vec3(quad.k + QUADRILATERAL_BOX_PADDING, ext[3], ext[1]),
    )
