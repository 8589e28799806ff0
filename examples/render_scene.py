#!/usr/bin/env python3
"""Render one of the built-in scenes.

This script builds a scene, sets up the camera, renders with progressive
refinement and writes the result as a plain-text PPM (or, for other file
extensions, through Pillow).

Usage:
    python -m examples.render_scene [options]

Options:
    --scene N           Built-in scene 0, 1 or 2 (default: 0)
    --width WIDTH       Image width in pixels (default: 800)
    --samples SAMPLES   Number of samples per pixel (default: 100)
    --max-depth DEPTH   Maximum bounces per path (default: 50)
    --output OUTPUT     Output file path (default: image.ppm)
    --batch-size SIZE   Samples per progress update (default: 10)
    --arch ARCH         Taichi backend (default: cpu)
    --threads N         CPU worker threads (default: Taichi's choice)
    --seed SEED         Random seed (default: 0)
    --log-level LEVEL   Logging level (default: INFO)
    --quiet             Suppress the progress bar

Example:
    python -m examples.render_scene --scene 1 --width 400 --samples 50
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from tqdm import tqdm

from src.pathtracer.config import RenderConfig, init_taichi
from src.pathtracer.logging_config import PACKAGE_LOGGER, get_logger, setup_logging

logger = get_logger(f"{PACKAGE_LOGGER}.render_scene")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a built-in scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        type=int,
        default=0,
        choices=[0, 1, 2],
        help="Built-in scene (default: 0)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=800,
        help="Image width in pixels (default: 800)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum bounces per path (default: 50)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="image.ppm",
        help="Output file path (default: image.ppm)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=10,
        help="Samples per progress update (default: 10)",
    )
    parser.add_argument(
        "--arch",
        type=str,
        default="cpu",
        help="Taichi backend: cpu, gpu, cuda, vulkan or metal (default: cpu)",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=None,
        help="CPU worker threads (default: Taichi's choice)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed (default: 0)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress the progress bar",
    )
    return parser.parse_args()


def render_scene(
    config: RenderConfig,
    scene_id: int = 0,
    output_path: str = "image.ppm",
    batch_size: int = 10,
    quiet: bool = False,
) -> Path:
    """Render a built-in scene and save it to a file.

    Taichi must already be initialized.

    Args:
        config: Image size, sampling and background settings.
        scene_id: Built-in scene number.
        output_path: Output file path (.ppm, or any Pillow format).
        batch_size: Number of samples to render between progress updates.
        quiet: If True, suppress the progress bar.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.pathtracer.camera.thin_lens import setup_camera
    from src.pathtracer.core.integrator import set_background
    from src.pathtracer.core.progressive import ProgressiveRenderer
    from src.pathtracer.scene.presets import SceneParams, create_scene

    params = SceneParams(aspect_ratio=config.aspect_ratio, background=config.background)
    scene, camera = create_scene(scene_id, params, seed=config.seed)
    setup_camera(camera)
    set_background(params.background)

    width, height = config.image_width, config.image_height
    renderer = ProgressiveRenderer(width, height, max_depth=config.max_depth)

    logger.info(
        "Rendering scene %d at %dx%d, %d spp, max depth %d",
        scene_id,
        width,
        height,
        config.samples_per_pixel,
        config.max_depth,
    )
    start_time = time.time()

    with tqdm(total=config.samples_per_pixel, unit="spp", desc="Rendering", disable=quiet) as pbar:
        for current, _ in renderer.render_progressive(config.samples_per_pixel, batch_size):
            pbar.update(current - pbar.n)

    output_file = Path(output_path)
    renderer.save_image(output_file)

    logger.info("Done in %.2fs", time.time() - start_time)
    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()
    setup_logging(args.log_level)

    config = RenderConfig(
        image_width=args.width,
        samples_per_pixel=args.samples,
        max_depth=args.max_depth,
        arch=args.arch,
        num_threads=args.threads,
        seed=args.seed,
    )

    try:
        init_taichi(config)
        render_scene(
            config,
            scene_id=args.scene,
            output_path=args.output,
            batch_size=args.batch_size,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        logger.error("Render failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
