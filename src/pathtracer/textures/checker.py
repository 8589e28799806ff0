"""Checker texture: a 3D alternating pattern of two sub-textures.

The pattern is locked to world space rather than to the surface
parametrization. At point p the sign of

    sin(10 * p.x) * sin(10 * p.y) * sin(10 * p.z)

selects the sub-texture: negative picks "odd", anything else picks "even".
Sub-textures are referenced by unified texture id and may themselves be
checkers; resolution happens in textures.registry.texture_value.
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# Maximum number of checker textures in the scene
MAX_CHECKER_TEXTURES = 256

# Frequency of the pattern along each axis
CHECKER_FREQUENCY = 10.0

checker_even_ids = ti.field(dtype=ti.i32, shape=MAX_CHECKER_TEXTURES)
checker_odd_ids = ti.field(dtype=ti.i32, shape=MAX_CHECKER_TEXTURES)
num_checker_textures = ti.field(dtype=ti.i32, shape=())


def clear_checker_textures() -> None:
    """Clear all checker textures."""
    num_checker_textures[None] = 0


def add_checker_texture(even_id: int, odd_id: int) -> int:
    """Add a checker texture over two existing textures.

    Args:
        even_id: Unified texture id used where the sine product is >= 0.
        odd_id: Unified texture id used where the sine product is < 0.

    Returns:
        The index of the added checker.

    Raises:
        RuntimeError: If the maximum number of checker textures is exceeded.
    """
    idx = num_checker_textures[None]
    if idx >= MAX_CHECKER_TEXTURES:
        raise RuntimeError(
            f"Maximum number of checker textures ({MAX_CHECKER_TEXTURES}) exceeded"
        )
    checker_even_ids[idx] = even_id
    checker_odd_ids[idx] = odd_id
    num_checker_textures[None] = idx + 1
    return idx


def get_checker_texture_count() -> int:
    """Get the number of checker textures."""
    return int(num_checker_textures[None])


@ti.func
def is_odd_cell(p: vec3) -> ti.i32:
    """1 if p falls in an "odd" cell of the pattern."""
    sines = (
        ti.sin(CHECKER_FREQUENCY * p.x)
        * ti.sin(CHECKER_FREQUENCY * p.y)
        * ti.sin(CHECKER_FREQUENCY * p.z)
    )
    return sines < 0.0


@ti.func
def checker_pick(checker_idx: ti.i32, p: vec3) -> ti.i32:
    """Unified texture id of the sub-texture visible at p."""
    result = checker_even_ids[checker_idx]
    if is_odd_cell(p):
        result = checker_odd_ids[checker_idx]
    return result
