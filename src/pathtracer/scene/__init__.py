"""Scene module for scene storage, building and ray-scene queries.

Components:
    intersection: Primitive fields and the closest-hit query
    manager: Unified scene manager coordinating primitives, materials and
        textures
    presets: The built-in demo scenes and their camera

Scene data is organized for kernel access:
    - Structure-of-Arrays layout for geometric data
    - Contiguous material ID arrays
    - A cached scene bounding box for early ray rejection
"""

from .intersection import (
    MAX_QUADRILATERALS,
    MAX_RECTS,
    MAX_SPHERES,
    SceneHitRecord,
    add_quadrilateral,
    add_rect,
    add_sphere,
    clear_scene,
    get_quadrilateral_count,
    get_rect_count,
    get_scene_bounding_box,
    get_sphere_count,
    intersect_scene,
    update_scene_bounds,
)
from .manager import (
    MAX_MATERIALS,
    MaterialInfo,
    MaterialType,
    QuadrilateralInfo,
    RectInfo,
    SceneConfig,
    SceneManager,
    SphereInfo,
    TextureInfo,
    get_material_type,
    get_material_type_index,
)
from .presets import SCENES, SceneParams, build_scene, create_scene

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "add_rect",
    "add_quadrilateral",
    "clear_scene",
    "get_sphere_count",
    "get_rect_count",
    "get_quadrilateral_count",
    "intersect_scene",
    "update_scene_bounds",
    "get_scene_bounding_box",
    "MAX_SPHERES",
    "MAX_RECTS",
    "MAX_QUADRILATERALS",
    # Manager module
    "SceneManager",
    "MaterialType",
    "MaterialInfo",
    "TextureInfo",
    "SphereInfo",
    "RectInfo",
    "QuadrilateralInfo",
    "SceneConfig",
    "MAX_MATERIALS",
    "get_material_type",
    "get_material_type_index",
    # Presets
    "SCENES",
    "SceneParams",
    "build_scene",
    "create_scene",
]
