"""Scene-level primitive intersection testing.

This module stores every primitive of the scene in Taichi fields and
provides the closest-hit query over all of them. The scene is the aggregate
list: each primitive is tested in turn with the upper t bound shrunk to the
closest hit found so far, so the result is the globally nearest hit.

Primitives reference materials by unified material id; materials are never
copied per primitive.

The scene also keeps its bounding box. Once update_scene_bounds() has run,
rays that miss the (slightly padded) box are rejected before any primitive
is tested.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.pathtracer.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere(ti.math.vec3(0, 0, -1), 0.5, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.aabb import Aabb, hit_aabb, surrounding_box
from src.pathtracer.geometry.quadrilateral import (
    Quadrilateral,
    hit_quadrilateral,
    quadrilateral_bounding_box,
)
from src.pathtracer.geometry.rect import AxisRect, hit_rect, rect_bounding_box
from src.pathtracer.geometry.sphere import (
    HitRecord,
    Sphere,
    hit_sphere,
    sphere_bounding_box,
)

# Type aliases using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Extends the basic HitRecord with material_id for scene-level queries.

    Attributes:
        hit: Whether the ray intersected any primitive (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
        point: The 3D point where the ray intersected the surface.
        normal: The unit surface normal, facing against the incoming ray.
        front_face: Whether the ray hit the front face (1) or back face (0).
        u: First surface texture coordinate.
        v: Second surface texture coordinate.
        material_id: The material ID of the hit primitive. -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    u: ti.f32
    v: ti.f32
    material_id: ti.i32


# Maximum number of primitives supported in the scene
MAX_SPHERES = 1024
MAX_RECTS = 1024
MAX_QUADRILATERALS = 1024

# Padding added around the scene box before culling rays against it
SCENE_BOUNDS_PADDING = 1e-3

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Axis-aligned rectangle storage
# rect_spans holds (a0, a1, b0, b1) for the two in-plane coordinates
rect_axes = ti.field(dtype=ti.i32, shape=MAX_RECTS)
rect_spans = ti.Vector.field(4, dtype=ti.f32, shape=MAX_RECTS)
rect_ks = ti.field(dtype=ti.f32, shape=MAX_RECTS)
rect_material_ids = ti.field(dtype=ti.i32, shape=MAX_RECTS)
num_rects = ti.field(dtype=ti.i32, shape=())

# Quadrilateral storage (vertices as parallel z and y vectors)
quadrilateral_zs = ti.Vector.field(4, dtype=ti.f32, shape=MAX_QUADRILATERALS)
quadrilateral_ys = ti.Vector.field(4, dtype=ti.f32, shape=MAX_QUADRILATERALS)
quadrilateral_ks = ti.field(dtype=ti.f32, shape=MAX_QUADRILATERALS)
quadrilateral_material_ids = ti.field(dtype=ti.i32, shape=MAX_QUADRILATERALS)
num_quadrilaterals = ti.field(dtype=ti.i32, shape=())

# Scene bounding box, valid only after update_scene_bounds()
scene_bounds_min = ti.Vector.field(3, dtype=ti.f32, shape=())
scene_bounds_max = ti.Vector.field(3, dtype=ti.f32, shape=())
scene_bounds_valid = ti.field(dtype=ti.i32, shape=())


def _invalidate_bounds() -> None:
    scene_bounds_valid[None] = 0


def clear_scene() -> None:
    """Clear all primitives from the scene.

    Resets the primitive counts to zero. The actual field data is not
    cleared but will be overwritten when new primitives are added.
    """
    num_spheres[None] = 0
    num_rects[None] = 0
    num_quadrilaterals[None] = 0
    _invalidate_bounds()


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (should be positive).
        material_id: The material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    _invalidate_bounds()
    return idx


def add_rect(
    axis: int,
    a0: float,
    a1: float,
    b0: float,
    b1: float,
    k: float,
    material_id: int = 0,
) -> int:
    """Add an axis-aligned rectangle to the scene.

    Args:
        axis: Index of the fixed coordinate (0 = yz, 1 = xz, 2 = xy).
        a0: Lower bound of the first in-plane coordinate.
        a1: Upper bound of the first in-plane coordinate.
        b0: Lower bound of the second in-plane coordinate.
        b1: Upper bound of the second in-plane coordinate.
        k: Value of the fixed coordinate.
        material_id: The material ID to associate with this rectangle.

    Returns:
        The index of the added rectangle.

    Raises:
        RuntimeError: If the maximum number of rectangles is exceeded.
    """
    idx = num_rects[None]
    if idx >= MAX_RECTS:
        raise RuntimeError(f"Maximum number of rectangles ({MAX_RECTS}) exceeded")
    rect_axes[idx] = axis
    rect_spans[idx] = vec4(a0, a1, b0, b1)
    rect_ks[idx] = k
    rect_material_ids[idx] = material_id
    num_rects[None] = idx + 1
    _invalidate_bounds()
    return idx


def add_quadrilateral(
    zs: tuple[float, float, float, float],
    ys: tuple[float, float, float, float],
    k: float,
    material_id: int = 0,
) -> int:
    """Add a Y-Z plane quadrilateral to the scene.

    Args:
        zs: z coordinates of the four vertices, in rotational order.
        ys: y coordinates of the four vertices, in the same order.
        k: The x coordinate of the plane.
        material_id: The material ID to associate with this quadrilateral.

    Returns:
        The index of the added quadrilateral.

    Raises:
        RuntimeError: If the maximum number of quadrilaterals is exceeded.
    """
    idx = num_quadrilaterals[None]
    if idx >= MAX_QUADRILATERALS:
        raise RuntimeError(f"Maximum number of quadrilaterals ({MAX_QUADRILATERALS}) exceeded")
    quadrilateral_zs[idx] = vec4(zs[0], zs[1], zs[2], zs[3])
    quadrilateral_ys[idx] = vec4(ys[0], ys[1], ys[2], ys[3])
    quadrilateral_ks[idx] = k
    quadrilateral_material_ids[idx] = material_id
    num_quadrilaterals[None] = idx + 1
    _invalidate_bounds()
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_rect_count() -> int:
    """Get the number of rectangles in the scene."""
    return int(num_rects[None])


def get_quadrilateral_count() -> int:
    """Get the number of quadrilaterals in the scene."""
    return int(num_quadrilaterals[None])


@ti.func
def get_sphere(i: ti.i32) -> Sphere:
    return Sphere(center=sphere_centers[i], radius=sphere_radii[i])


@ti.func
def get_rect(i: ti.i32) -> AxisRect:
    s = rect_spans[i]
    return AxisRect(axis=rect_axes[i], a0=s[0], a1=s[1], b0=s[2], b1=s[3], k=rect_ks[i])


@ti.func
def get_quadrilateral(i: ti.i32) -> Quadrilateral:
    return Quadrilateral(zs=quadrilateral_zs[i], ys=quadrilateral_ys[i], k=quadrilateral_ks[i])


@ti.func
def _hit_record_to_scene_hit_record(rec: HitRecord, material_id: ti.i32) -> SceneHitRecord:
    """Attach a material ID to a primitive hit record."""
    return SceneHitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=rec.normal,
        front_face=rec.front_face,
        u=rec.u,
        v=rec.v,
        material_id=material_id,
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        u=0.0,
        v=0.0,
        material_id=-1,
    )


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> SceneHitRecord:
    """Find the closest intersection of a ray with the scene.

    Iterates through all spheres, rectangles and quadrilaterals, shrinking
    the upper bound to the closest hit so far.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A SceneHitRecord containing the closest intersection, or a miss
        record if no intersection was found.
    """
    closest_t = t_max
    result = _make_miss_record()

    may_hit = 1
    if scene_bounds_valid[None] == 1:
        pad = vec3(SCENE_BOUNDS_PADDING, SCENE_BOUNDS_PADDING, SCENE_BOUNDS_PADDING)
        box = Aabb(minimum=scene_bounds_min[None] - pad, maximum=scene_bounds_max[None] + pad)
        may_hit = hit_aabb(box, ray_origin, ray_direction, t_min, t_max)

    if may_hit == 1:
        for i in range(num_spheres[None]):
            rec = hit_sphere(ray_origin, ray_direction, get_sphere(i), t_min, closest_t)
            if rec.hit == 1:
                closest_t = rec.t
                result = _hit_record_to_scene_hit_record(rec, sphere_material_ids[i])

        for i in range(num_rects[None]):
            rec = hit_rect(ray_origin, ray_direction, get_rect(i), t_min, closest_t)
            if rec.hit == 1:
                closest_t = rec.t
                result = _hit_record_to_scene_hit_record(rec, rect_material_ids[i])

        for i in range(num_quadrilaterals[None]):
            rec = hit_quadrilateral(
                ray_origin, ray_direction, get_quadrilateral(i), t_min, closest_t
            )
            if rec.hit == 1:
                closest_t = rec.t
                result = _hit_record_to_scene_hit_record(rec, quadrilateral_material_ids[i])

    return result


# =============================================================================
# Scene Bounds
# =============================================================================


@ti.func
def _grow(box: Aabb, has_box: ti.i32, child: Aabb) -> Aabb:
    """Union of box and child, or child alone when box is still empty."""
    result = child
    if has_box == 1:
        result = surrounding_box(box, child)
    return result


@ti.kernel
def _compute_scene_bounds():
    # Serial union; runs once per scene
    for _ in range(1):
        has_box = 0
        box = Aabb(minimum=vec3(0.0, 0.0, 0.0), maximum=vec3(0.0, 0.0, 0.0))
        for i in range(num_spheres[None]):
            box = _grow(box, has_box, sphere_bounding_box(get_sphere(i)))
            has_box = 1
        for i in range(num_rects[None]):
            box = _grow(box, has_box, rect_bounding_box(get_rect(i)))
            has_box = 1
        for i in range(num_quadrilaterals[None]):
            box = _grow(box, has_box, quadrilateral_bounding_box(get_quadrilateral(i)))
            has_box = 1
        scene_bounds_min[None] = box.minimum
        scene_bounds_max[None] = box.maximum
        scene_bounds_valid[None] = has_box


def update_scene_bounds() -> None:
    """Recompute the scene bounding box and enable ray culling against it."""
    _compute_scene_bounds()


def get_scene_bounding_box() -> tuple[tuple[float, ...], tuple[float, ...]] | None:
    """Bounding box of the whole scene.

    Returns:
        ((min_x, min_y, min_z), (max_x, max_y, max_z)), or None for an empty
        scene, which has no box.
    """
    update_scene_bounds()
    if scene_bounds_valid[None] == 0:
        return None
    lo = scene_bounds_min[None]
    hi = scene_bounds_max[None]
    return (
        (float(lo[0]), float(lo[1]), float(lo[2])),
        (float(hi[0]), float(hi[1]), float(hi[2])),
    )
