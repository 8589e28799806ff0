"""Render configuration and Taichi runtime setup.

RenderConfig gathers the image and sampling parameters of a render together
with the Taichi runtime options. init_taichi() must run before any module
that declares Taichi fields is imported.

Example:
    >>> from src.pathtracer.config import RenderConfig, init_taichi
    >>> config = RenderConfig(image_width=400, samples_per_pixel=16, seed=7)
    >>> init_taichi(config)
    >>> config.image_height
    225
"""

from dataclasses import dataclass

import taichi as ti

from src.pathtracer.logging_config import get_logger

logger = get_logger(__name__)

# Preallocated render target size (see core.integrator)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_ARCHES = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
    "vulkan": ti.vulkan,
    "metal": ti.metal,
}


@dataclass
class RenderConfig:
    """Parameters for a single render.

    Attributes:
        image_width: Output width in pixels.
        aspect_ratio: Width divided by height; the height is derived from it.
        samples_per_pixel: Number of jittered samples accumulated per pixel.
        max_depth: Maximum number of bounces per path.
        background: Radiance returned by rays that escape the scene.
        arch: Taichi backend name ("cpu", "gpu", "cuda", "vulkan", "metal").
        num_threads: CPU worker threads, or None for Taichi's default.
        seed: Seed for Taichi's per-thread random generators.
        fast_math: Allow Taichi's fast-math rewrites. Off by default so that
            NaN checks in the renderer are kept.
    """

    image_width: int = 800
    aspect_ratio: float = 16.0 / 9.0
    samples_per_pixel: int = 100
    max_depth: int = 50
    background: tuple[float, float, float] = (0.0, 0.0, 0.0)
    arch: str = "cpu"
    num_threads: int | None = None
    seed: int = 0
    fast_math: bool = False

    @property
    def image_height(self) -> int:
        """Output height in pixels, truncated from width / aspect_ratio."""
        return int(self.image_width / self.aspect_ratio)

    def validate(self) -> None:
        """Check the configuration.

        Raises:
            ValueError: If a size or count is out of range, or the backend
                name is unknown.
        """
        if self.image_width <= 0 or self.image_height <= 0:
            raise ValueError(
                f"Image size must be positive, got {self.image_width}x{self.image_height}"
            )
        if self.image_width > MAX_IMAGE_WIDTH or self.image_height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.image_width}x{self.image_height}) exceed maximum "
                f"supported ({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.num_threads is not None and self.num_threads <= 0:
            raise ValueError(f"num_threads must be positive, got {self.num_threads}")
        if self.arch not in _ARCHES:
            raise ValueError(f"Unknown Taichi arch: {self.arch!r}")


def init_taichi(config: RenderConfig) -> None:
    """Initialize the Taichi runtime from a render configuration.

    Args:
        config: The render configuration. Validated before use.

    Raises:
        ValueError: If the configuration is invalid.
    """
    config.validate()
    kwargs = {
        "arch": _ARCHES[config.arch],
        "random_seed": config.seed,
        "fast_math": config.fast_math,
    }
    if config.num_threads is not None:
        kwargs["cpu_max_num_threads"] = config.num_threads
    ti.init(**kwargs)
    logger.info(
        "Taichi initialized (arch=%s, threads=%s, seed=%d)",
        config.arch,
        config.num_threads if config.num_threads is not None else "default",
        config.seed,
    )
