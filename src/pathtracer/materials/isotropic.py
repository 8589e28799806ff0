"""Isotropic (volumetric) scattering material.

An isotropic medium forgets the incoming direction: the scattered ray leaves
in a uniformly random direction over the whole sphere, tinted by the
material's texture at the hit.
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import random_unit_vector

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_isotropic(albedo: vec3):
    """Sample a uniformly random scattered direction.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter); isotropic
        media always scatter.
    """
    return random_unit_vector(), albedo, 1


# Maximum number of isotropic materials in the scene
MAX_ISOTROPIC_MATERIALS = 256

isotropic_texture_ids = ti.field(dtype=ti.i32, shape=MAX_ISOTROPIC_MATERIALS)
num_isotropic_materials = ti.field(dtype=ti.i32, shape=())


def clear_isotropic_materials() -> None:
    """Clear all isotropic materials."""
    num_isotropic_materials[None] = 0


def add_isotropic_material(texture_id: int) -> int:
    """Add an isotropic material whose albedo comes from a texture.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_isotropic_materials[None]
    if idx >= MAX_ISOTROPIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of isotropic materials ({MAX_ISOTROPIC_MATERIALS}) exceeded"
        )
    isotropic_texture_ids[idx] = texture_id
    num_isotropic_materials[None] = idx + 1
    return idx


def get_isotropic_material_count() -> int:
    return int(num_isotropic_materials[None])


@ti.func
def get_isotropic_texture(material_idx: ti.i32) -> ti.i32:
    return isotropic_texture_ids[material_idx]
