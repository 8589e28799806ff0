"""Camera models for primary ray generation.

Components:
    thin_lens: Look-at camera with field of view, defocus blur and a
        shutter interval for motion blur

Camera state lives in Taichi fields set by setup_camera(); get_ray() and
get_ray_jittered() are Taichi functions called from the render kernels.
"""

from .thin_lens import (
    ThinLensCamera,
    get_camera_info,
    get_camera_origin,
    get_ray,
    get_ray_jittered,
    setup_camera,
)

__all__ = [
    "ThinLensCamera",
    "setup_camera",
    "get_ray",
    "get_ray_jittered",
    "get_camera_origin",
    "get_camera_info",
]
