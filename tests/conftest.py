"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42, fast_math=False)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene, material, texture and render state around each test."""
    # Import here to ensure Taichi is initialized first
    from src.pathtracer.core.integrator import reset_render_target, set_background
    from src.pathtracer.materials.dielectric import clear_dielectric_materials
    from src.pathtracer.materials.diffuse_light import clear_diffuse_light_materials
    from src.pathtracer.materials.isotropic import clear_isotropic_materials
    from src.pathtracer.materials.lambertian import clear_lambertian_materials
    from src.pathtracer.materials.metal import clear_metal_materials
    from src.pathtracer.scene.intersection import clear_scene
    from src.pathtracer.scene.manager import _clear_material_tracking
    from src.pathtracer.textures.registry import clear_textures

    def _clear_all():
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        clear_isotropic_materials()
        clear_diffuse_light_materials()
        _clear_material_tracking()
        clear_textures()
        reset_render_target()
        set_background((0.0, 0.0, 0.0))

    _clear_all()

    yield

    _clear_all()
