"""Unified texture ids and texture evaluation.

Textures of every kind share one id space. texture_types[id] records the
kind and texture_type_indices[id] the index inside that kind's storage, the
same scheme the scene manager uses for materials.

texture_value() resolves checker textures down to a leaf texture and then
evaluates it. Checkers may only reference textures registered before them,
so the chain always ends; MAX_TEXTURE_NESTING bounds it inside the kernel.
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.pathtracer.textures.checker import (
    add_checker_texture,
    checker_pick,
    clear_checker_textures,
)
from src.pathtracer.textures.image import (
    add_image_texture,
    clear_image_textures,
    image_value,
)
from src.pathtracer.textures.solid_color import (
    add_solid_texture,
    clear_solid_textures,
    solid_value,
)

# Type alias for 3D vectors
vec3 = tm.vec3


class TextureType(IntEnum):
    """Enumeration of supported texture kinds."""

    SOLID_COLOR = 0
    CHECKER = 1
    IMAGE = 2


# Maximum number of textures across all kinds
MAX_TEXTURES = 2048

# Deepest checker-of-checker chain followed during evaluation
MAX_TEXTURE_NESTING = 8

texture_types = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
texture_type_indices = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
num_textures = ti.field(dtype=ti.i32, shape=())


def clear_textures() -> None:
    """Clear every texture registry and the unified id space."""
    clear_solid_textures()
    clear_checker_textures()
    clear_image_textures()
    num_textures[None] = 0


def get_texture_count() -> int:
    """Get the total number of registered textures."""
    return int(num_textures[None])


def _register(kind: TextureType, type_index: int) -> int:
    texture_id = num_textures[None]
    if texture_id >= MAX_TEXTURES:
        raise RuntimeError(f"Maximum number of textures ({MAX_TEXTURES}) exceeded")
    texture_types[texture_id] = int(kind)
    texture_type_indices[texture_id] = type_index
    num_textures[None] = texture_id + 1
    return texture_id


def validate_texture_id(texture_id: int) -> None:
    """Raise ValueError unless texture_id names a registered texture."""
    if texture_id < 0 or texture_id >= num_textures[None]:
        raise ValueError(f"Invalid texture_id: {texture_id}")


def register_solid_texture(color: tuple[float, float, float]) -> int:
    """Add a solid color texture and return its unified id."""
    return _register(TextureType.SOLID_COLOR, add_solid_texture(color))


def register_checker_texture(even_id: int, odd_id: int) -> int:
    """Add a checker texture over two registered textures.

    Raises:
        ValueError: If either sub-texture id is not registered.
    """
    validate_texture_id(even_id)
    validate_texture_id(odd_id)
    return _register(TextureType.CHECKER, add_checker_texture(even_id, odd_id))


def register_image_texture(pixels) -> int:
    """Add an image texture (pixels may be None) and return its unified id."""
    return _register(TextureType.IMAGE, add_image_texture(pixels))


def get_texture_type_python(texture_id: int) -> TextureType | None:
    """Kind of a texture id, or None for unknown ids (Python side)."""
    if 0 <= texture_id < num_textures[None]:
        return TextureType(int(texture_types[texture_id]))
    return None


@ti.func
def get_texture_type(texture_id: ti.i32) -> ti.i32:
    """Kind of a texture id, or -1 for unknown ids."""
    result = -1
    if 0 <= texture_id < num_textures[None]:
        result = texture_types[texture_id]
    return result


@ti.func
def texture_value(texture_id: ti.i32, u: ti.f32, v: ti.f32, p: vec3) -> vec3:
    """Evaluate a texture at surface coordinates (u, v) and point p.

    Args:
        texture_id: Unified texture id.
        u: First surface texture coordinate.
        v: Second surface texture coordinate.
        p: World-space hit point.

    Returns:
        The texture color. Unknown ids evaluate to black.
    """
    leaf = texture_id
    for _ in range(MAX_TEXTURE_NESTING):
        if get_texture_type(leaf) == int(TextureType.CHECKER):
            leaf = checker_pick(texture_type_indices[leaf], p)

    kind = get_texture_type(leaf)
    color = vec3(0.0, 0.0, 0.0)
    if kind == int(TextureType.SOLID_COLOR):
        color = solid_value(texture_type_indices[leaf])
    elif kind == int(TextureType.IMAGE):
        color = image_value(texture_type_indices[leaf], u, v)
    return color
