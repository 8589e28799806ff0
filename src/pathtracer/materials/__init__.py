"""Materials module for light scattering models.

This module implements the material models used by the path tracer:

Components:
    lambertian: Ideal diffuse reflection, colored by a texture
    metal: Mirror reflection with an optional fuzz radius
    dielectric: Glass-like refraction with Schlick reflectance
    isotropic: Uniform scattering over the sphere of directions
    diffuse_light: Emissive surfaces that never scatter

Each scattering material provides a scatter function returning
(scattered_direction, attenuation, did_scatter), plus a field registry with
add/clear/count functions and per-index getters. Material dispatch by
unified material id lives in core.integrator; the id map lives in
scene.manager.

All scattering computations are implemented as Taichi functions.
"""

from .dielectric import (
    add_dielectric_material,
    clear_dielectric_materials,
    get_dielectric_ior,
    get_dielectric_material_count,
    refraction_ratio,
    scatter_dielectric,
    will_reflect,
)
from .diffuse_light import (
    add_diffuse_light_material,
    clear_diffuse_light_materials,
    get_diffuse_light_material_count,
    get_diffuse_light_texture,
)
from .isotropic import (
    add_isotropic_material,
    clear_isotropic_materials,
    get_isotropic_material_count,
    get_isotropic_texture,
    scatter_isotropic,
)
from .lambertian import (
    add_lambertian_material,
    clear_lambertian_materials,
    get_lambertian_material_count,
    get_lambertian_texture,
    lambertian_direction,
    scatter_lambertian,
)
from .metal import (
    add_metal_material,
    clamp_fuzz,
    clear_metal_materials,
    get_metal_albedo,
    get_metal_fuzz,
    get_metal_material_count,
    scatter_metal,
)

__all__ = [
    # Lambertian
    "scatter_lambertian",
    "lambertian_direction",
    "add_lambertian_material",
    "clear_lambertian_materials",
    "get_lambertian_material_count",
    "get_lambertian_texture",
    # Metal
    "scatter_metal",
    "clamp_fuzz",
    "add_metal_material",
    "clear_metal_materials",
    "get_metal_material_count",
    "get_metal_albedo",
    "get_metal_fuzz",
    # Dielectric
    "refraction_ratio",
    "scatter_dielectric",
    "will_reflect",
    "add_dielectric_material",
    "clear_dielectric_materials",
    "get_dielectric_material_count",
    "get_dielectric_ior",
    # Isotropic
    "scatter_isotropic",
    "add_isotropic_material",
    "clear_isotropic_materials",
    "get_isotropic_material_count",
    "get_isotropic_texture",
    # Diffuse light
    "add_diffuse_light_material",
    "clear_diffuse_light_materials",
    "get_diffuse_light_material_count",
    "get_diffuse_light_texture",
]
