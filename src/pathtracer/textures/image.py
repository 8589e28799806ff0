"""Image texture backed by a decoded 8-bit RGB pixel array.

Images are decoded once with Pillow and copied into a single shared texel
pool. Each image texture records where its pixels start in the pool and its
dimensions. Lookups clamp (u, v) to [0, 1], flip v so that image row 0 is the
top of the texture, take the nearest pixel and scale bytes to [0, 1].

A texture whose image failed to load is still registered, with zero width
and height, and samples as black. A missing or corrupt file therefore never
stops a render. An image larger than the free part of the pool is downsampled
to fit, and registered empty once the pool is full.

Example:
    >>> from src.pathtracer.textures.image import load_image
    >>> pixels = load_image("earthmap.jpg")  # None if the file is unusable
    >>> # scene.add_image_texture(pixels)
"""

from pathlib import Path

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm
from PIL import Image as PILImage

from src.pathtracer.logging_config import get_logger

logger = get_logger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Maximum number of image textures in the scene
MAX_IMAGE_TEXTURES = 64

# Shared pool size in texels (one 2048 x 2048 image, or several smaller ones)
MAX_IMAGE_TEXELS = 2048 * 2048

# Bytes per texel (RGB)
CHANNELS = 3

image_texels = ti.field(dtype=ti.u8, shape=MAX_IMAGE_TEXELS * CHANNELS)
image_offsets = ti.field(dtype=ti.i32, shape=MAX_IMAGE_TEXTURES)
image_widths = ti.field(dtype=ti.i32, shape=MAX_IMAGE_TEXTURES)
image_heights = ti.field(dtype=ti.i32, shape=MAX_IMAGE_TEXTURES)
num_image_textures = ti.field(dtype=ti.i32, shape=())
_texel_cursor = ti.field(dtype=ti.i32, shape=())


def load_image(path: str | Path) -> npt.NDArray[np.uint8] | None:
    """Decode an image file into an RGB byte array.

    Args:
        path: Path to any image format Pillow can read.

    Returns:
        Array of shape (height, width, 3) with dtype uint8, row 0 at the top,
        or None if the file is missing, cannot be decoded, or exceeds Pillow's
        decompression bomb limit.
    """
    try:
        with PILImage.open(path) as img:
            pixels = np.asarray(img.convert("RGB"), dtype=np.uint8)
    except (OSError, ValueError, PILImage.DecompressionBombError) as exc:
        logger.warning("Could not load texture image '%s': %s", path, exc)
        return None
    logger.debug("Loaded texture image '%s' (%dx%d)", path, pixels.shape[1], pixels.shape[0])
    return pixels


@ti.kernel
def _upload_texels(offset: ti.i32, data: ti.types.ndarray(dtype=ti.u8, ndim=1)):
    for i in range(data.shape[0]):
        image_texels[offset + i] = data[i]


def _fit_to_pool(pixels: npt.NDArray[np.uint8], available: int) -> npt.NDArray[np.uint8] | None:
    """Downsample an image so it fits in `available` texels, or None if nothing fits."""
    height, width = pixels.shape[0], pixels.shape[1]
    if width * height <= available:
        return pixels

    scale = (available / (width * height)) ** 0.5
    new_width = int(width * scale)
    new_height = min(int(height * scale), available // max(new_width, 1))
    if new_width < 1 or new_height < 1:
        logger.warning("No room in the image texture pool; %dx%d image samples black", width, height)
        return None

    logger.warning(
        "Image texture pool has %d free texels; downsampling %dx%d image to %dx%d",
        available,
        width,
        height,
        new_width,
        new_height,
    )
    resized = PILImage.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)).resize(
        (new_width, new_height), PILImage.Resampling.BILINEAR
    )
    return np.asarray(resized, dtype=np.uint8)


def clear_image_textures() -> None:
    """Clear all image textures and release the texel pool."""
    num_image_textures[None] = 0
    _texel_cursor[None] = 0


def add_image_texture(pixels: npt.NDArray[np.uint8] | None) -> int:
    """Add an image texture.

    Args:
        pixels: Array of shape (height, width, 3) as returned by load_image(),
            or None for a texture with no data (samples black). Images that do
            not fit in the remaining texel pool are downsampled.

    Returns:
        The index of the added image texture.

    Raises:
        RuntimeError: If the texture count is exhausted.
        ValueError: If the array is not an (H, W, 3) image.
    """
    idx = num_image_textures[None]
    if idx >= MAX_IMAGE_TEXTURES:
        raise RuntimeError(f"Maximum number of image textures ({MAX_IMAGE_TEXTURES}) exceeded")

    width = 0
    height = 0
    offset = int(_texel_cursor[None])

    if pixels is not None:
        if pixels.ndim != 3 or pixels.shape[2] != CHANNELS:
            raise ValueError(f"Expected an (H, W, 3) image array, got shape {pixels.shape}")
        pixels = _fit_to_pool(pixels, MAX_IMAGE_TEXELS - offset)

    if pixels is not None:
        height, width = int(pixels.shape[0]), int(pixels.shape[1])
        flat = np.ascontiguousarray(pixels, dtype=np.uint8).reshape(-1)
        if flat.size > 0:
            _upload_texels(offset, flat)
        _texel_cursor[None] = offset + width * height

    image_offsets[idx] = offset
    image_widths[idx] = width
    image_heights[idx] = height
    num_image_textures[None] = idx + 1
    return idx


def get_image_texture_count() -> int:
    """Get the number of image textures."""
    return int(num_image_textures[None])


@ti.func
def image_value(texture_idx: ti.i32, u: ti.f32, v: ti.f32) -> vec3:
    """Nearest-pixel lookup of an image texture.

    Args:
        texture_idx: Index of the image texture.
        u: Horizontal texture coordinate (clamped to [0, 1]).
        v: Vertical texture coordinate (clamped to [0, 1], 1 is the top row).

    Returns:
        The pixel color scaled to [0, 1], or black when there is no data.
    """
    width = image_widths[texture_idx]
    height = image_heights[texture_idx]
    color = vec3(0.0, 0.0, 0.0)

    if width > 0 and height > 0:
        uu = tm.clamp(u, 0.0, 1.0)
        vv = 1.0 - tm.clamp(v, 0.0, 1.0)

        i = ti.cast(uu * ti.cast(width, ti.f32), ti.i32)
        j = ti.cast(vv * ti.cast(height, ti.f32), ti.i32)
        # u or v of exactly 1 lands one past the last pixel
        if i >= width:
            i = width - 1
        if j >= height:
            j = height - 1

        base = (image_offsets[texture_idx] + j * width + i) * CHANNELS
        color = (
            vec3(
                ti.cast(image_texels[base], ti.f32),
                ti.cast(image_texels[base + 1], ti.f32),
                ti.cast(image_texels[base + 2], ti.f32),
            )
            / 255.0
        )

    return color
