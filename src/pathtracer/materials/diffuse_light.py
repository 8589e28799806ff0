"""Diffuse area light material.

A diffuse light absorbs every ray that reaches it and emits the value of its
texture at the hit. Emission is the same on both sides of the surface and
may exceed 1.0.

Example:
    >>> from src.pathtracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> light = scene.add_diffuse_light_material(emit=(2.5, 2.5, 2.5))
    >>> scene.add_rect("xz", (-5, 5), (-5, 5), 2.0, light)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# Maximum number of diffuse light materials in the scene
MAX_DIFFUSE_LIGHT_MATERIALS = 256

diffuse_light_texture_ids = ti.field(dtype=ti.i32, shape=MAX_DIFFUSE_LIGHT_MATERIALS)
num_diffuse_light_materials = ti.field(dtype=ti.i32, shape=())


def clear_diffuse_light_materials() -> None:
    """Clear all diffuse light materials."""
    num_diffuse_light_materials[None] = 0


def add_diffuse_light_material(texture_id: int) -> int:
    """Add a diffuse light whose emission comes from a texture.

    Args:
        texture_id: Unified texture id of the emitted radiance.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_diffuse_light_materials[None]
    if idx >= MAX_DIFFUSE_LIGHT_MATERIALS:
        raise RuntimeError(
            f"Maximum number of diffuse light materials ({MAX_DIFFUSE_LIGHT_MATERIALS}) exceeded"
        )
    diffuse_light_texture_ids[idx] = texture_id
    num_diffuse_light_materials[None] = idx + 1
    return idx


def get_diffuse_light_material_count() -> int:
    """Get the number of diffuse light materials in the registry."""
    return int(num_diffuse_light_materials[None])


@ti.func
def get_diffuse_light_texture(material_idx: ti.i32) -> ti.i32:
    """Unified texture id of a light's emission."""
    return diffuse_light_texture_ids[material_idx]
