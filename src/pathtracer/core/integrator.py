"""Path tracing integrator for Monte Carlo light transport.

This module implements the radiance estimator and the rendering kernel. A
path starts at the camera, collects the emission of every surface it hits
weighted by the product of the attenuations so far, and ends when it escapes
the scene (picking up the background), is absorbed, or runs out of bounces.

The estimator is the loop form of

    color(ray, depth) = 0                                   if depth <= 0
                      = background                          on a miss
                      = emitted + attenuation * color(scattered, depth - 1)

where absorbed rays contribute only their emission.

Samples are summed per pixel together with a per-pixel sample count; the
output stage divides, gamma-corrects and quantizes.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.pathtracer.core.integrator import render_image, setup_render_target
    >>> from src.pathtracer.scene.presets import create_scene
    >>> from src.pathtracer.camera.thin_lens import setup_camera
    >>>
    >>> scene, camera = create_scene(0)
    >>> setup_camera(camera)
    >>> setup_render_target(400, 225)
    >>> render_image(samples_per_pixel=16, max_depth=50)
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from src.pathtracer.camera.thin_lens import get_ray_jittered
from src.pathtracer.config import MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH
from src.pathtracer.core.ray import Ray, make_ray
from src.pathtracer.logging_config import get_logger
from src.pathtracer.materials.dielectric import get_dielectric_ior, scatter_dielectric
from src.pathtracer.materials.diffuse_light import get_diffuse_light_texture
from src.pathtracer.materials.isotropic import get_isotropic_texture, scatter_isotropic
from src.pathtracer.materials.lambertian import get_lambertian_texture, scatter_lambertian
from src.pathtracer.materials.metal import get_metal_albedo, get_metal_fuzz, scatter_metal
from src.pathtracer.scene.intersection import (
    SceneHitRecord,
    intersect_scene,
    update_scene_bounds,
)
from src.pathtracer.scene.manager import (
    MaterialType,
    get_material_type,
    get_material_type_index,
)
from src.pathtracer.textures.registry import texture_value

logger = get_logger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Default maximum ray bounces (path length)
MAX_DEPTH = 50

# Accepted hit distances; t_min keeps scattered rays off their own surface
T_MIN = 0.001
T_MAX = float("inf")

# =============================================================================
# Background
# =============================================================================

_background = ti.Vector.field(3, dtype=ti.f32, shape=())


def set_background(color: tuple[float, float, float]) -> None:
    """Set the radiance returned by rays that miss every primitive."""
    _background[None] = [float(color[0]), float(color[1]), float(color[2])]


def get_background() -> tuple[float, float, float]:
    """Get the current background radiance."""
    value = _background[None]
    return (float(value[0]), float(value[1]), float(value[2]))


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Sum of sample radiance per pixel (preallocated to max size)
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Sample count per pixel (preallocated to max size)
_sample_count = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# Result slot for the single-ray entry points
_probe_color = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers.
    The buffers are preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT
    to avoid Taichi kernel recompilation issues.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffers to zero."""
    _color_buffer.fill(0.0)
    _sample_count.fill(0)


def reset_render_target() -> None:
    """Forget the render target entirely (dimensions and buffers)."""
    _render_target_initialized[None] = 0
    _image_width[None] = 0
    _image_height[None] = 0
    clear_render_target()


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def scatter_material(material_id: ti.i32, ray_direction: vec3, rec: SceneHitRecord):
    """Dispatch to the scattering function of a material.

    The scattered ray starts at rec.point and keeps the incoming ray's time.
    Textured materials look their color up at (rec.u, rec.v, rec.point).

    Args:
        material_id: The unified material ID.
        ray_direction: The incoming ray direction (any length).
        rec: The hit record at the scattering point.

    Returns:
        A tuple of (did_scatter, attenuation, scattered_direction).
        Diffuse lights and unknown ids never scatter.
    """
    mat_type = get_material_type(material_id)
    type_index = get_material_type_index(material_id)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        albedo = texture_value(get_lambertian_texture(type_index), rec.u, rec.v, rec.point)
        scattered_direction, attenuation, did_scatter = scatter_lambertian(albedo, rec.normal)

    elif mat_type == int(MaterialType.METAL):
        scattered_direction, attenuation, did_scatter = scatter_metal(
            get_metal_albedo(type_index),
            get_metal_fuzz(type_index),
            ray_direction,
            rec.normal,
        )

    elif mat_type == int(MaterialType.DIELECTRIC):
        scattered_direction, attenuation, did_scatter = scatter_dielectric(
            get_dielectric_ior(type_index), ray_direction, rec.normal, rec.front_face
        )

    elif mat_type == int(MaterialType.ISOTROPIC):
        albedo = texture_value(get_isotropic_texture(type_index), rec.u, rec.v, rec.point)
        scattered_direction, attenuation, did_scatter = scatter_isotropic(albedo)

    return did_scatter, attenuation, scattered_direction


@ti.func
def material_emitted(material_id: ti.i32, u: ti.f32, v: ti.f32, p: vec3) -> vec3:
    """Emitted radiance of a material at a surface point.

    Only diffuse lights emit; they emit their texture value on both faces.
    """
    emission = vec3(0.0, 0.0, 0.0)
    if get_material_type(material_id) == int(MaterialType.DIFFUSE_LIGHT):
        texture_id = get_diffuse_light_texture(get_material_type_index(material_id))
        emission = texture_value(texture_id, u, v, p)
    return emission


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def ray_color(ray: Ray, max_depth: ti.i32) -> vec3:
    """Estimate the radiance arriving along a ray.

    Args:
        ray: The ray to trace.
        max_depth: Maximum number of surface interactions. 0 or less
            returns black.

    Returns:
        The radiance estimate (RGB).
    """
    origin = ray.origin
    direction = ray.direction

    radiance = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)

    # Taichi functions cannot break out of loops
    active = 1

    for _ in range(max_depth):
        if active == 1:
            rec = intersect_scene(origin, direction, T_MIN, T_MAX)

            if rec.hit == 0:
                radiance += throughput * _background[None]
                active = 0
            else:
                radiance += throughput * material_emitted(rec.material_id, rec.u, rec.v, rec.point)

                did_scatter, attenuation, scattered_direction = scatter_material(
                    rec.material_id, direction, rec
                )

                if did_scatter == 0:
                    active = 0
                else:
                    throughput *= attenuation
                    origin = rec.point
                    direction = scattered_direction

    return radiance


@ti.func
def _sanitize(color: vec3) -> vec3:
    """Replace NaN or infinite channels with zero."""
    result = color
    for c in ti.static(range(3)):
        if tm.isnan(result[c]) or tm.isinf(result[c]):
            result[c] = 0.0
    return result


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_one_spp(width: ti.i32, height: ti.i32, max_depth: ti.i32):
    """Trace one jittered sample through every pixel and accumulate it."""
    for i, j in ti.ndrange(width, height):
        ray = get_ray_jittered(i, j, width, height)
        color = _sanitize(ray_color(ray, max_depth))
        _color_buffer[i, j] += color
        _sample_count[i, j] += 1


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32, max_depth: ti.i32
):
    # Serial outer loop so that the path loop is not parallelized
    for _ in range(1):
        ray = get_ray_jittered(pixel_i, pixel_j, width, height)
        _probe_color[None] = _sanitize(ray_color(ray, max_depth))


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3, time: ti.f32, max_depth: ti.i32):
    for _ in range(1):
        _probe_color[None] = ray_color(make_ray(origin, direction, time), max_depth)


def _probe_result() -> tuple[float, float, float]:
    color = _probe_color[None]
    return (float(color[0]), float(color[1]), float(color[2]))


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int = MAX_DEPTH,
    time: float = 0.0,
) -> tuple[float, float, float]:
    """Estimate the radiance along one ray (one random path).

    Args:
        origin: Ray origin.
        direction: Ray direction (any nonzero length).
        max_depth: Maximum number of surface interactions.
        time: Ray time.

    Returns:
        Tuple of (R, G, B) radiance.
    """
    _trace_single_ray(vec3(*origin), vec3(*direction), time, max_depth)
    return _probe_result()


def render_sample(pixel_i: int, pixel_j: int, max_depth: int = MAX_DEPTH) -> tuple[float, float, float]:
    """Render a single sample for a specific pixel.

    This is a Python-callable function for testing. For production rendering,
    use render_image() which processes all pixels in parallel. The sample is
    not accumulated.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        max_depth: Maximum number of surface interactions.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    _render_single_pixel(pixel_i, pixel_j, width, height, max_depth)
    return _probe_result()


def render_image(samples_per_pixel: int = 1, max_depth: int = MAX_DEPTH) -> None:
    """Render the image with the specified number of samples per pixel.

    Accumulates samples into the render target. Can be called multiple
    times to add more samples for convergence.

    Args:
        samples_per_pixel: Number of samples to add per pixel.
        max_depth: Maximum number of surface interactions per path.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    update_scene_bounds()

    logger.debug(
        "Rendering %d spp at %dx%d (max_depth=%d)", samples_per_pixel, width, height, max_depth
    )
    for _ in range(samples_per_pixel):
        _render_one_spp(width, height, max_depth)


def get_total_samples() -> int:
    """Get the number of samples accumulated per pixel.

    Returns the sample count from pixel (0, 0), which is the same for all
    pixels after calling render_image().

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    return int(_sample_count[0, 0])


def get_accumulated_image_numpy() -> tuple[np.ndarray, np.ndarray]:
    """Get the accumulated sums and sample counts as NumPy arrays.

    Rows are ordered top row first, as images are stored.

    Returns:
        A tuple (sums, counts) with shapes (height, width, 3) float32 and
        (height, width) int32.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    sums = _color_buffer.to_numpy()[:width, :height, :]
    counts = _sample_count.to_numpy()[:width, :height]

    # (width, height) with bottom-left origin -> (height, width) top row first
    sums = np.flipud(np.transpose(sums, (1, 0, 2)))
    counts = np.flipud(np.transpose(counts, (1, 0)))

    return sums.astype(np.float32), counts.astype(np.int32)
