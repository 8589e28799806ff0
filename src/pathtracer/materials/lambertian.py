"""Lambertian (ideal diffuse) material implementation.

A Lambertian surface scatters toward normal + random_unit_vector(), which
distributes directions proportionally to the cosine of the angle from the
normal. The sampling pdf cancels the BRDF's cosine term, so the attenuation
is just the albedo, looked up from the material's texture at the hit.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.pathtracer.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_lambertian(albedo, normal)
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import near_zero, random_unit_vector

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def lambertian_direction(normal: vec3, sample: vec3) -> vec3:
    """Offset the normal by a unit-sphere sample, falling back to the normal."""
    direction = normal + sample

    # normal and the sample nearly cancel
    if near_zero(direction):
        direction = normal

    return direction


@ti.func
def scatter_lambertian(albedo: vec3, normal: vec3):
    """Sample a scattered direction for a Lambertian surface.

    Args:
        albedo: The diffuse reflectance at the hit (texture value).
        normal: The surface normal at the hit point, facing the incoming ray.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). Lambertian
        surfaces always scatter; a degenerate direction falls back to the
        normal.
    """
    return lambertian_direction(normal, random_unit_vector()), albedo, 1


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of Lambertian materials in the scene
MAX_LAMBERTIAN_MATERIALS = 256

# Unified texture id providing each material's albedo
lambertian_texture_ids = ti.field(dtype=ti.i32, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambertian_materials() -> None:
    """Clear all Lambertian materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_lambertian_materials[None] = 0


def add_lambertian_material(texture_id: int) -> int:
    """Add a Lambertian material to the material registry.

    Args:
        texture_id: Unified texture id of the albedo texture.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_lambertian_materials[None]
    if idx >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded"
        )

    lambertian_texture_ids[idx] = texture_id
    num_lambertian_materials[None] = idx + 1
    return idx


def get_lambertian_material_count() -> int:
    """Get the number of Lambertian materials in the registry."""
    return int(num_lambertian_materials[None])


@ti.func
def get_lambertian_texture(material_idx: ti.i32) -> ti.i32:
    """Unified texture id of a Lambertian material's albedo."""
    return lambertian_texture_ids[material_idx]
