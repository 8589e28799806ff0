"""Unified scene manager for coordinating primitives, materials and textures.

This module provides a high-level scene building API on top of the Taichi
field registries. It tracks which material kind each material ID refers to,
enabling material dispatch in the path tracer, and owns the texture id space
used by textured materials.

The SceneManager maintains:
- A unified material_id space across all material types
- Mapping from material_id to (material_type, type_local_index)
- A unified texture_id space (see textures.registry)
- Methods for adding spheres, axis-aligned rectangles and quadrilaterals
- Nested object lists, flattened into the single scene aggregate
- Scene serialization/configuration support

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.pathtracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> red = scene.add_lambertian_material(albedo=(0.65, 0.05, 0.05))
    >>> light = scene.add_diffuse_light_material(emit=(7.0, 7.0, 7.0))
    >>> scene.add_sphere(center=(4.0, -0.5, 0.0), radius=1.0, material_id=red)
    >>> scene.add_rect("yz", (-1.5, -0.5), (1.0, 4.0), -5.0, light)
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.pathtracer.geometry.rect import RectAxis
from src.pathtracer.logging_config import get_logger
from src.pathtracer.materials.dielectric import (
    MAX_DIELECTRIC_MATERIALS,
    add_dielectric_material,
    clear_dielectric_materials,
    get_dielectric_material_count,
)
from src.pathtracer.materials.diffuse_light import (
    MAX_DIFFUSE_LIGHT_MATERIALS,
    add_diffuse_light_material,
    clear_diffuse_light_materials,
    get_diffuse_light_material_count,
)
from src.pathtracer.materials.isotropic import (
    MAX_ISOTROPIC_MATERIALS,
    add_isotropic_material,
    clear_isotropic_materials,
    get_isotropic_material_count,
)
from src.pathtracer.materials.lambertian import (
    MAX_LAMBERTIAN_MATERIALS,
    add_lambertian_material,
    clear_lambertian_materials,
    get_lambertian_material_count,
)
from src.pathtracer.materials.metal import (
    MAX_METAL_MATERIALS,
    add_metal_material,
    clamp_fuzz,
    clear_metal_materials,
    get_metal_material_count,
)
from src.pathtracer.scene.intersection import (
    MAX_QUADRILATERALS,
    MAX_RECTS,
    MAX_SPHERES,
    add_quadrilateral,
    add_rect,
    add_sphere,
    clear_scene,
    get_quadrilateral_count,
    get_rect_count,
    get_scene_bounding_box,
    get_sphere_count,
)
from src.pathtracer.textures.image import load_image
from src.pathtracer.textures.registry import (
    MAX_TEXTURES,
    TextureType,
    clear_textures,
    get_texture_count,
    register_checker_texture,
    register_image_texture,
    register_solid_texture,
    validate_texture_id,
)

logger = get_logger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

Color = tuple[float, float, float]
Point = tuple[float, float, float]


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the path tracer to determine which
    scattering function to call.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2
    ISOTROPIC = 3
    DIFFUSE_LIGHT = 4


# Maximum number of materials across all types
MAX_MATERIALS = 1280  # 256 per type * 5 types

# Taichi fields for kernel-side material type lookup
# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the type-local index for material_id i
# (e.g., if material_id 5 is the 2nd metal material, material_type_indices[5] = 1)
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())

_RECT_PLANES = {"yz": RectAxis.YZ, "xz": RectAxis.XZ, "xy": RectAxis.XY}


def _clear_material_tracking() -> None:
    """Clear the material tracking fields."""
    num_materials[None] = 0


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a given material ID.

    Args:
        material_id: The unified material ID.

    Returns:
        The material type as an integer (see MaterialType enum).
        Returns -1 for invalid material IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the type-local index for a given material ID.

    Returns:
        The index into the type-specific material array, or -1 for invalid
        material IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result


def parse_rect_plane(plane: str | int) -> RectAxis:
    """Resolve "xy", "xz", "yz" or a RectAxis value.

    Raises:
        ValueError: If the plane is not recognized.
    """
    if isinstance(plane, str):
        key = plane.lower()
        if key not in _RECT_PLANES:
            raise ValueError(f"Unknown rectangle plane: {plane!r}")
        return _RECT_PLANES[key]
    return RectAxis(int(plane))


@dataclass
class TextureInfo:
    """Information about a registered texture.

    Attributes:
        texture_id: The unified texture ID.
        texture_type: The kind of texture.
        params: The texture parameters as provided during creation.
    """

    texture_id: int
    texture_type: TextureType
    params: dict[str, Any]


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The unified material ID.
        material_type: The kind of material.
        type_index: The index within the type-specific material array.
        params: The material parameters as provided during creation.
    """

    material_id: int
    material_type: MaterialType
    type_index: int
    params: dict[str, Any]


@dataclass
class SphereInfo:
    """Information about a sphere in the scene."""

    sphere_index: int
    center: Point
    radius: float
    material_id: int


@dataclass
class RectInfo:
    """Information about an axis-aligned rectangle in the scene.

    Attributes:
        rect_index: The index in the rectangle storage arrays.
        plane: The rectangle's plane ("xy", "xz" or "yz").
        span_a: Bounds of the first in-plane coordinate.
        span_b: Bounds of the second in-plane coordinate.
        k: Value of the fixed coordinate.
        material_id: The material ID assigned to the rectangle.
    """

    rect_index: int
    plane: str
    span_a: tuple[float, float]
    span_b: tuple[float, float]
    k: float
    material_id: int


@dataclass
class QuadrilateralInfo:
    """Information about a quadrilateral in the scene.

    Attributes:
        quadrilateral_index: The index in the quadrilateral storage arrays.
        vertices: The four (z, y) vertices in rotational order.
        k: The x coordinate of the plane.
        material_id: The material ID assigned to the quadrilateral.
    """

    quadrilateral_index: int
    vertices: list[tuple[float, float]]
    k: float
    material_id: int


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        textures: List of texture configurations.
        materials: List of material configurations.
        objects: List of primitive configurations. Entries of type "list"
            hold nested object lists.
    """

    textures: list[dict[str, Any]] = field(default_factory=list)
    materials: list[dict[str, Any]] = field(default_factory=list)
    objects: list[Any] = field(default_factory=list)


def _as_color(values: Sequence[float]) -> Color:
    return (float(values[0]), float(values[1]), float(values[2]))


class SceneManager:
    """Unified scene manager coordinating primitives, materials and textures.

    The SceneManager provides a high-level API for building scenes with
    automatic material and texture tracking. It maintains unified id spaces
    that map to the type-specific registries, enabling the path tracer to
    dispatch to the correct scattering and texture functions.

    Attributes:
        textures: List of TextureInfo for all registered textures.
        materials: List of MaterialInfo for all registered materials.
        spheres: List of SphereInfo for all spheres in the scene.
        rects: List of RectInfo for all rectangles in the scene.
        quadrilaterals: List of QuadrilateralInfo for all quadrilaterals.

    Example:
        >>> scene = SceneManager()
        >>> checker = scene.add_checker_colors((0.2, 0.3, 0.1), (0.9, 0.9, 0.9))
        >>> ground = scene.add_lambertian_material(texture_id=checker)
        >>> glass = scene.add_dielectric_material(ior=1.5)
        >>> scene.add_sphere((0, -1000, 0), 1000, ground)
        >>> scene.add_sphere((0, 1, 0), 1.0, glass)
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.textures: list[TextureInfo] = []
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self.rects: list[RectInfo] = []
        self.quadrilaterals: list[QuadrilateralInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        clear_isotropic_materials()
        clear_diffuse_light_materials()
        _clear_material_tracking()
        clear_textures()
        self.textures.clear()
        self.materials.clear()
        self.spheres.clear()
        self.rects.clear()
        self.quadrilaterals.clear()

    def clear(self) -> None:
        """Clear the entire scene (primitives, materials and textures)."""
        self._clear_all()

    # =========================================================================
    # Texture Management
    # =========================================================================

    def _track_texture(self, texture_id: int, kind: TextureType, params: dict[str, Any]) -> int:
        self.textures.append(TextureInfo(texture_id=texture_id, texture_type=kind, params=params))
        logger.debug("Added %s texture %d", kind.name.lower(), texture_id)
        return texture_id

    def add_solid_texture(self, color: Color) -> int:
        """Add a constant color texture.

        Args:
            color: Linear RGB color. Components may exceed 1.0.

        Returns:
            The unified texture ID.

        Raises:
            RuntimeError: If a texture capacity is exceeded.
            ValueError: If any component is negative.
        """
        texture_id = register_solid_texture(color)
        return self._track_texture(texture_id, TextureType.SOLID_COLOR, {"color": color})

    def add_checker_texture(self, even_id: int, odd_id: int) -> int:
        """Add a checker texture alternating between two existing textures.

        Raises:
            ValueError: If either texture ID is not registered.
        """
        texture_id = register_checker_texture(even_id, odd_id)
        return self._track_texture(
            texture_id, TextureType.CHECKER, {"even": even_id, "odd": odd_id}
        )

    def add_checker_colors(self, even: Color, odd: Color) -> int:
        """Add a checker texture over two new solid colors."""
        even_id = self.add_solid_texture(even)
        odd_id = self.add_solid_texture(odd)
        return self.add_checker_texture(even_id, odd_id)

    def add_image_texture(self, path: str | None) -> int:
        """Add an image texture decoded from a file.

        A file that cannot be read or decoded is logged and produces a texture
        that samples black.

        Args:
            path: Path of the image file, or None for an empty texture.

        Returns:
            The unified texture ID.
        """
        pixels = load_image(path) if path is not None else None
        texture_id = register_image_texture(pixels)
        return self._track_texture(texture_id, TextureType.IMAGE, {"path": path})

    def add_image_texture_from_array(self, pixels: npt.NDArray[np.uint8]) -> int:
        """Add an image texture from an (H, W, 3) uint8 array, row 0 at the top."""
        texture_id = register_image_texture(pixels)
        return self._track_texture(texture_id, TextureType.IMAGE, {"path": None})

    def get_texture_count(self) -> int:
        """Get the total number of textures in the scene."""
        return get_texture_count()

    # =========================================================================
    # Material Management
    # =========================================================================

    def _register_material(
        self,
        material_type: MaterialType,
        type_index: int,
        params: dict[str, Any],
    ) -> int:
        """Assign a unified material ID to a type-local material."""
        material_id = num_materials[None]
        if material_id >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        material_types[material_id] = int(material_type)
        material_type_indices[material_id] = type_index
        num_materials[None] = material_id + 1

        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                material_type=material_type,
                type_index=type_index,
                params=params,
            )
        )
        logger.debug("Added %s material %d", material_type.name.lower(), material_id)
        return material_id

    def _check_material_room(self, type_count: int, type_max: int, label: str) -> None:
        """Raise before anything is registered if a material would not fit."""
        if num_materials[None] >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")
        if type_count >= type_max:
            raise RuntimeError(f"Maximum number of {label} materials ({type_max}) exceeded")

    def _resolve_texture(
        self,
        color: Color | None,
        texture_id: int | None,
        *,
        check_albedo: bool,
    ) -> int:
        """Texture ID for a textured material given either a color or an ID."""
        if (color is None) == (texture_id is None):
            raise ValueError("Provide exactly one of a color or a texture_id")
        if texture_id is not None:
            validate_texture_id(texture_id)
            return texture_id
        if check_albedo:
            for i, component in enumerate(color):
                if component < 0.0 or component > 1.0:
                    raise ValueError(
                        f"Albedo component {i} = {component} is outside [0, 1]. "
                        "This would violate energy conservation."
                    )
        return self.add_solid_texture(color)

    def add_lambertian_material(
        self,
        albedo: Color | None = None,
        texture_id: int | None = None,
    ) -> int:
        """Add a Lambertian (diffuse) material to the scene.

        Args:
            albedo: The diffuse reflectance color as (R, G, B), each in [0, 1].
                A solid texture is created for it.
            texture_id: An existing texture to use as albedo instead.

        Returns:
            The unified material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If both or neither of albedo and texture_id are given,
                an albedo component is outside [0, 1], or the texture ID is
                unknown.
        """
        self._check_material_room(
            get_lambertian_material_count(), MAX_LAMBERTIAN_MATERIALS, "Lambertian"
        )
        tex = self._resolve_texture(albedo, texture_id, check_albedo=True)
        type_index = add_lambertian_material(tex)
        return self._register_material(MaterialType.LAMBERTIAN, type_index, {"texture_id": tex})

    def add_metal_material(self, albedo: Color, fuzz: float = 0.0) -> int:
        """Add a metal (specular reflective) material to the scene.

        Args:
            albedo: The reflective color as (R, G, B), each in [0, 1].
            fuzz: Reflection perturbation radius, clamped to [0, 1].

        Returns:
            The unified material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any albedo component is outside [0, 1].
        """
        self._check_material_room(get_metal_material_count(), MAX_METAL_MATERIALS, "metal")
        type_index = add_metal_material(albedo, fuzz)
        return self._register_material(
            MaterialType.METAL,
            type_index,
            {"albedo": albedo, "fuzz": clamp_fuzz(fuzz)},
        )

    def add_dielectric_material(self, ior: float = 1.5) -> int:
        """Add a dielectric (glass/water) material to the scene.

        Args:
            ior: Index of refraction. Default is 1.5 (typical glass).
                Common values: Air=1.0, Water=1.33, Glass=1.5, Diamond=2.4

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If ior is not positive.
        """
        self._check_material_room(
            get_dielectric_material_count(), MAX_DIELECTRIC_MATERIALS, "dielectric"
        )
        type_index = add_dielectric_material(ior)
        return self._register_material(MaterialType.DIELECTRIC, type_index, {"ior": ior})

    def add_isotropic_material(
        self,
        albedo: Color | None = None,
        texture_id: int | None = None,
    ) -> int:
        """Add an isotropic (volumetric) material, colored by albedo or texture."""
        self._check_material_room(
            get_isotropic_material_count(), MAX_ISOTROPIC_MATERIALS, "isotropic"
        )
        tex = self._resolve_texture(albedo, texture_id, check_albedo=True)
        type_index = add_isotropic_material(tex)
        return self._register_material(MaterialType.ISOTROPIC, type_index, {"texture_id": tex})

    def add_diffuse_light_material(
        self,
        emit: Color | None = None,
        texture_id: int | None = None,
    ) -> int:
        """Add an emissive material.

        Args:
            emit: Emitted radiance as (R, G, B). May exceed 1.0.
            texture_id: An existing texture to emit instead.

        Returns:
            The unified material ID for this material.
        """
        self._check_material_room(
            get_diffuse_light_material_count(), MAX_DIFFUSE_LIGHT_MATERIALS, "diffuse light"
        )
        tex = self._resolve_texture(emit, texture_id, check_albedo=False)
        type_index = add_diffuse_light_material(tex)
        return self._register_material(
            MaterialType.DIFFUSE_LIGHT, type_index, {"texture_id": tex}
        )

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return int(num_materials[None])

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID, or None if not found."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def get_material_type_python(self, material_id: int) -> MaterialType | None:
        """Get the material type for a given material ID (Python side).

        For kernel-side lookup, use the get_material_type() Taichi function.
        """
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id].material_type
        return None

    def _check_material_id(self, material_id: int) -> None:
        if material_id < 0 or material_id >= num_materials[None]:
            raise ValueError(f"Invalid material_id: {material_id}")

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(self, center: Point, radius: float, material_id: int) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere.
            material_id: The unified material ID to assign to the sphere.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If material_id is invalid.
        """
        self._check_material_id(material_id)
        sphere_index = add_sphere(vec3(center[0], center[1], center[2]), radius, material_id)
        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=center,
                radius=radius,
                material_id=material_id,
            )
        )
        return sphere_index

    def add_rect(
        self,
        plane: str | int,
        span_a: tuple[float, float],
        span_b: tuple[float, float],
        k: float,
        material_id: int,
    ) -> int:
        """Add an axis-aligned rectangle to the scene.

        The in-plane coordinates are (x, y) for "xy", (x, z) for "xz" and
        (y, z) for "yz"; k is the value of the remaining coordinate.

        Args:
            plane: "xy", "xz", "yz" or a RectAxis.
            span_a: (min, max) of the first in-plane coordinate.
            span_b: (min, max) of the second in-plane coordinate.
            k: Value of the fixed coordinate.
            material_id: The unified material ID to assign to the rectangle.

        Returns:
            The index of the added rectangle.

        Raises:
            RuntimeError: If the maximum number of rectangles is exceeded.
            ValueError: If the plane or material_id is invalid.
        """
        axis = parse_rect_plane(plane)
        self._check_material_id(material_id)
        rect_index = add_rect(
            int(axis), span_a[0], span_a[1], span_b[0], span_b[1], k, material_id
        )
        self.rects.append(
            RectInfo(
                rect_index=rect_index,
                plane=axis.name.lower(),
                span_a=(span_a[0], span_a[1]),
                span_b=(span_b[0], span_b[1]),
                k=k,
                material_id=material_id,
            )
        )
        return rect_index

    def add_quadrilateral(
        self,
        vertices: Sequence[tuple[float, float]],
        k: float,
        material_id: int,
    ) -> int:
        """Add a quadrilateral in the plane x = k.

        Args:
            vertices: Four (z, y) pairs in clockwise or counter-clockwise order.
            k: The x coordinate of the plane.
            material_id: The unified material ID to assign.

        Returns:
            The index of the added quadrilateral.

        Raises:
            RuntimeError: If the maximum number of quadrilaterals is exceeded.
            ValueError: If there are not exactly four vertices or material_id
                is invalid.
        """
        if len(vertices) != 4:
            raise ValueError(f"A quadrilateral needs 4 vertices, got {len(vertices)}")
        self._check_material_id(material_id)
        zs = tuple(float(vtx[0]) for vtx in vertices)
        ys = tuple(float(vtx[1]) for vtx in vertices)
        quad_index = add_quadrilateral(zs, ys, k, material_id)
        self.quadrilaterals.append(
            QuadrilateralInfo(
                quadrilateral_index=quad_index,
                vertices=[(float(vtx[0]), float(vtx[1])) for vtx in vertices],
                k=k,
                material_id=material_id,
            )
        )
        return quad_index

    def add_object(self, obj: Any) -> None:
        """Add one object description, or a nested list of them.

        Nested lists are flattened into the scene: the closest hit over a list
        of lists is the closest hit over all of their members, and the
        bounding box is the union of all member boxes.

        Args:
            obj: A dict with a "type" key ("sphere", "rect", "quadrilateral",
                or "list" with an "objects" entry), or a list of such items.

        Raises:
            ValueError: If the object type is unknown.
        """
        if isinstance(obj, (list, tuple)):
            for child in obj:
                self.add_object(child)
            return

        obj_type = str(obj.get("type", "")).lower()
        material_id = obj.get("material_id", 0)
        if obj_type == "sphere":
            center = obj.get("center", [0.0, 0.0, 0.0])
            self.add_sphere(_as_color(center), obj.get("radius", 1.0), material_id)
        elif obj_type == "rect":
            span_a = obj.get("span_a", [0.0, 1.0])
            span_b = obj.get("span_b", [0.0, 1.0])
            self.add_rect(
                obj.get("plane", "xy"),
                (span_a[0], span_a[1]),
                (span_b[0], span_b[1]),
                obj.get("k", 0.0),
                material_id,
            )
        elif obj_type == "quadrilateral":
            vertices = [(vtx[0], vtx[1]) for vtx in obj.get("vertices", [])]
            self.add_quadrilateral(vertices, obj.get("k", 0.0), material_id)
        elif obj_type == "list":
            self.add_object(obj.get("objects", []))
        else:
            raise ValueError(f"Unknown object type: {obj_type}")

    def add_objects(self, objects: Iterable[Any]) -> None:
        """Add a sequence of object descriptions (see add_object)."""
        for obj in objects:
            self.add_object(obj)

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_rect_count(self) -> int:
        """Get the number of rectangles in the scene."""
        return get_rect_count()

    def get_quadrilateral_count(self) -> int:
        """Get the number of quadrilaterals in the scene."""
        return get_quadrilateral_count()

    def get_primitive_count(self) -> int:
        """Get the total number of primitives in the scene."""
        return self.get_sphere_count() + self.get_rect_count() + self.get_quadrilateral_count()

    def bounding_box(self) -> tuple[tuple[float, ...], tuple[float, ...]] | None:
        """Union of all primitive boxes, or None for an empty scene."""
        return get_scene_bounding_box()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()

        for tex in self.textures:
            tex_config: dict[str, Any] = {"type": tex.texture_type.name.lower()}
            for key, value in tex.params.items():
                tex_config[key] = list(value) if isinstance(value, tuple) else value
            config.textures.append(tex_config)

        for mat in self.materials:
            mat_config: dict[str, Any] = {"type": mat.material_type.name.lower()}
            for key, value in mat.params.items():
                mat_config[key] = list(value) if isinstance(value, tuple) else value
            config.materials.append(mat_config)

        for sphere in self.spheres:
            config.objects.append(
                {
                    "type": "sphere",
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material_id": sphere.material_id,
                }
            )

        for rect in self.rects:
            config.objects.append(
                {
                    "type": "rect",
                    "plane": rect.plane,
                    "span_a": list(rect.span_a),
                    "span_b": list(rect.span_b),
                    "k": rect.k,
                    "material_id": rect.material_id,
                }
            )

        for quad in self.quadrilaterals:
            config.objects.append(
                {
                    "type": "quadrilateral",
                    "vertices": [list(vtx) for vtx in quad.vertices],
                    "k": quad.k,
                    "material_id": quad.material_id,
                }
            )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration. Textures are
        loaded first, then materials, then objects, so IDs are reproduced in
        order.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        for tex_config in config.textures:
            tex_type = str(tex_config.get("type", "")).lower()
            if tex_type == "solid_color":
                self.add_solid_texture(_as_color(tex_config.get("color", [0.0, 0.0, 0.0])))
            elif tex_type == "checker":
                self.add_checker_texture(tex_config.get("even", 0), tex_config.get("odd", 0))
            elif tex_type == "image":
                self.add_image_texture(tex_config.get("path"))
            else:
                raise ValueError(f"Unknown texture type: {tex_type}")

        for mat_config in config.materials:
            mat_type = str(mat_config.get("type", "")).lower()
            if mat_type == "lambertian":
                self.add_lambertian_material(texture_id=mat_config.get("texture_id", 0))
            elif mat_type == "metal":
                albedo = _as_color(mat_config.get("albedo", [0.8, 0.8, 0.8]))
                self.add_metal_material(albedo, mat_config.get("fuzz", 0.0))
            elif mat_type == "dielectric":
                self.add_dielectric_material(mat_config.get("ior", 1.5))
            elif mat_type == "isotropic":
                self.add_isotropic_material(texture_id=mat_config.get("texture_id", 0))
            elif mat_type == "diffuse_light":
                self.add_diffuse_light_material(texture_id=mat_config.get("texture_id", 0))
            else:
                raise ValueError(f"Unknown material type: {mat_type}")

        self.add_objects(config.objects)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "textures": config.textures,
            "materials": config.materials,
            "objects": config.objects,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'textures', 'materials' and 'objects' keys.
        """
        config = SceneConfig(
            textures=data.get("textures", []),
            materials=data.get("materials", []),
            objects=data.get("objects", []),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        return MAX_SPHERES

    @staticmethod
    def get_max_rects() -> int:
        return MAX_RECTS

    @staticmethod
    def get_max_quadrilaterals() -> int:
        return MAX_QUADRILATERALS

    @staticmethod
    def get_max_materials() -> int:
        return MAX_MATERIALS

    @staticmethod
    def get_max_textures() -> int:
        return MAX_TEXTURES
