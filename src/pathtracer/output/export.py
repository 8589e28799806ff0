"""Image export for accumulated renders.

The renderer hands over per-pixel radiance sums and sample counts. Export
divides, applies gamma 2 (square root), clamps to [0, 0.999] and scales by
256, so a channel average of exactly 1.0 becomes 255.

Supported formats:
    - Plain-text PPM (P3), one pixel per line, top row first
    - PNG and other 8-bit formats via Pillow

Example:
    >>> from src.pathtracer.output.export import save_ppm
    >>> from src.pathtracer.core.integrator import get_accumulated_image_numpy
    >>>
    >>> sums, counts = get_accumulated_image_numpy()
    >>> save_ppm("image.ppm", sums, counts)
"""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.pathtracer.logging_config import get_logger

logger = get_logger(__name__)

# Largest channel fraction before quantization
MAX_CHANNEL_FRACTION = 0.999

# Quantization scale; 256 * 0.999 truncates to 255
CHANNEL_SCALE = 256.0


def to_uint8(
    sums: npt.NDArray[np.floating],
    counts: npt.NDArray[np.integer],
) -> npt.NDArray[np.uint8]:
    """Convert accumulated sums to gamma-corrected 8-bit channels.

    Each channel is int(256 * clamp(sqrt(sum / count), 0, 0.999)). Pixels
    with no samples are black.

    Args:
        sums: Radiance sums of shape (H, W, 3).
        counts: Sample counts of shape (H, W).

    Returns:
        Array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If the shapes do not match.
    """
    sums = np.asarray(sums, dtype=np.float64)
    counts = np.asarray(counts)
    if sums.ndim != 3 or sums.shape[2] != 3 or sums.shape[:2] != counts.shape:
        raise ValueError(
            f"Expected sums (H, W, 3) and counts (H, W), got {sums.shape} and {counts.shape}"
        )

    n = np.maximum(counts, 1).astype(np.float64)[..., np.newaxis]
    average = np.where(counts[..., np.newaxis] > 0, sums / n, 0.0)

    # Negative or NaN averages map to black
    average = np.nan_to_num(np.maximum(average, 0.0), nan=0.0, posinf=1.0)
    corrected = np.clip(np.sqrt(average), 0.0, MAX_CHANNEL_FRACTION)

    return (CHANNEL_SCALE * corrected).astype(np.uint8)


def write_ppm(
    stream: TextIO,
    sums: npt.NDArray[np.floating],
    counts: npt.NDArray[np.integer],
) -> None:
    """Write a plain-text PPM to a text stream.

    The header is "P3", then "width height", then "255"; each following
    line holds one pixel as three integers. Rows are written top row first.

    Args:
        stream: Writable text stream.
        sums: Radiance sums of shape (H, W, 3), top row first.
        counts: Sample counts of shape (H, W).
    """
    pixels = to_uint8(sums, counts)
    height, width = pixels.shape[:2]

    stream.write(f"P3\n{width} {height}\n255\n")
    for row in pixels:
        stream.writelines(f"{r} {g} {b}\n" for r, g, b in row.tolist())


def save_ppm(
    filepath: str | Path,
    sums: npt.NDArray[np.floating],
    counts: npt.NDArray[np.integer],
) -> None:
    """Save accumulated sums as a plain-text PPM file."""
    with open(filepath, "w", encoding="ascii") as f:
        write_ppm(f, sums, counts)
    logger.info("Wrote %s", filepath)


def save_png(
    filepath: str | Path,
    sums: npt.NDArray[np.floating],
    counts: npt.NDArray[np.integer],
) -> None:
    """Save accumulated sums through Pillow (format from the file extension)."""
    pil_image = PILImage.fromarray(to_uint8(sums, counts))
    pil_image.save(filepath)
    logger.info("Wrote %s", filepath)
