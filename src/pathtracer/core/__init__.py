"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure, vector helpers and random sampling
    aabb: Axis-aligned bounding boxes and the slab test
    integrator: Radiance estimator, material dispatch and render kernels
    progressive: ProgressiveRenderer wrapper for batched accumulation

All compute-intensive operations use Taichi kernels.
"""

from .aabb import Aabb, hit_aabb, surrounding_box
from .ray import (
    Ray,
    length_squared,
    make_ray,
    near_zero,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_range,
    random_unit_vector,
    ray_at,
    reflect,
    reflectance,
    refract,
    unit_vector,
    vec3,
)

# Note: integrator and progressive are NOT imported here to avoid circular imports.
# Import directly from src.pathtracer.core.integrator or src.pathtracer.core.progressive.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length_squared",
    "unit_vector",
    "reflect",
    "refract",
    "reflectance",
    "near_zero",
    "random_range",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
    "Aabb",
    "hit_aabb",
    "surrounding_box",
]
