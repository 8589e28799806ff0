"""Textures module for surface color lookup.

Components:
    solid_color: Constant colors
    checker: 3D checker pattern alternating between two textures
    image: Nearest-pixel lookup into decoded RGB images
    registry: Unified texture ids and texture_value() dispatch

Materials that take a color store a texture id; a plain color becomes a
solid texture.
"""

from .checker import CHECKER_FREQUENCY, checker_pick, is_odd_cell
from .image import load_image
from .registry import (
    MAX_TEXTURES,
    TextureType,
    clear_textures,
    get_texture_count,
    get_texture_type,
    get_texture_type_python,
    register_checker_texture,
    register_image_texture,
    register_solid_texture,
    texture_value,
    validate_texture_id,
)

__all__ = [
    "TextureType",
    "MAX_TEXTURES",
    "CHECKER_FREQUENCY",
    "clear_textures",
    "get_texture_count",
    "get_texture_type",
    "get_texture_type_python",
    "register_solid_texture",
    "register_checker_texture",
    "register_image_texture",
    "validate_texture_id",
    "texture_value",
    "checker_pick",
    "is_odd_cell",
    "load_image",
]
