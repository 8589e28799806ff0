"""Taichi-based Monte Carlo path tracer.

This package renders scenes of spheres, axis-aligned rectangles and
quadrilaterals with diffuse, metal, glass, isotropic and emissive
materials, using Taichi kernels for the per-pixel work.

Subpackages:
    core: Rays, bounding boxes, the radiance estimator and render loop
    geometry: Shape primitives and intersection algorithms
    materials: Scattering and emission models
    textures: Solid, checker and image textures
    scene: Scene storage, the scene manager and built-in scenes
    camera: Thin-lens camera with ray generation
    output: PPM and PNG export

Modules that declare Taichi fields must be imported after ti.init(); see
config.init_taichi(). Initialize with fast_math=False (the init_taichi default)
or the renderer's NaN checks may be folded away.
"""

__version__ = "0.1.0"
