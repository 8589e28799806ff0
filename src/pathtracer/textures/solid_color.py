"""Solid color texture: the same color everywhere."""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# Maximum number of solid color textures in the scene
MAX_SOLID_TEXTURES = 1024

solid_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SOLID_TEXTURES)
num_solid_textures = ti.field(dtype=ti.i32, shape=())


def clear_solid_textures() -> None:
    """Clear all solid color textures."""
    num_solid_textures[None] = 0


def add_solid_texture(color: tuple[float, float, float]) -> int:
    """Add a solid color texture.

    Colors are linear radiance values and may exceed 1.0 (emitters use this).

    Args:
        color: The color as (R, G, B).

    Returns:
        The index of the added texture.

    Raises:
        RuntimeError: If the maximum number of solid textures is exceeded.
        ValueError: If any component is negative.
    """
    for i, component in enumerate(color):
        if component < 0.0:
            raise ValueError(f"Color component {i} = {component} is negative")

    idx = num_solid_textures[None]
    if idx >= MAX_SOLID_TEXTURES:
        raise RuntimeError(f"Maximum number of solid textures ({MAX_SOLID_TEXTURES}) exceeded")

    solid_colors[idx] = vec3(color[0], color[1], color[2])
    num_solid_textures[None] = idx + 1
    return idx


def get_solid_texture_count() -> int:
    """Get the number of solid color textures."""
    return int(num_solid_textures[None])


@ti.func
def solid_value(texture_idx: ti.i32) -> vec3:
    """Color of a solid texture; independent of (u, v, p)."""
    return solid_colors[texture_idx]
