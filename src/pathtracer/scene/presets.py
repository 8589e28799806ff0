"""Built-in demo scenes.

Three scenes are available, selected by number:

- 0: Spheres in front of a red wall and a blue panel, lit by a small
  rectangular light and a glowing sphere.
- 1: A sky-blue and brown backdrop with a dark doorway, two spheres and a
  bright light behind the camera.
- 2: A stained-glass style mosaic of quadrilaterals in the plane x = -8,
  most of them with random colors, lit from behind the camera.

All scenes are viewed by the same camera: from (-15, 0, 0) toward the
origin with a 20 degree vertical field of view, no defocus blur and a
shutter open from 0 to 1. The background is black, so the only light comes
from emissive materials.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.pathtracer.scene.presets import create_scene
    >>> from src.pathtracer.camera.thin_lens import setup_camera
    >>>
    >>> scene, camera = create_scene(1)
    >>> setup_camera(camera)
"""

from dataclasses import dataclass

import numpy as np

from src.pathtracer.camera.thin_lens import ThinLensCamera
from src.pathtracer.logging_config import get_logger
from src.pathtracer.scene.manager import SceneManager

logger = get_logger(__name__)

# =============================================================================
# Scene Parameters
# =============================================================================


@dataclass
class SceneParams:
    """Camera and environment shared by the built-in scenes.

    Attributes:
        lookfrom: Camera position.
        lookat: Point the camera looks at.
        vup: Up direction.
        vfov: Vertical field of view in degrees.
        aspect_ratio: Image width divided by height.
        aperture: Lens diameter (0 = pinhole).
        focus_dist: Distance to the plane of perfect focus.
        time0: Shutter open time.
        time1: Shutter close time.
        background: Radiance of rays that leave the scene.
    """

    lookfrom: tuple[float, float, float] = (-15.0, 0.0, 0.0)
    lookat: tuple[float, float, float] = (0.0, 0.0, 0.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    vfov: float = 20.0
    aspect_ratio: float = 16.0 / 9.0
    aperture: float = 0.0
    focus_dist: float = 5.0
    time0: float = 0.0
    time1: float = 1.0
    background: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def make_camera(self) -> ThinLensCamera:
        """Build the camera described by these parameters."""
        return ThinLensCamera(
            lookfrom=self.lookfrom,
            lookat=self.lookat,
            vup=self.vup,
            vfov=self.vfov,
            aspect_ratio=self.aspect_ratio,
            aperture=self.aperture,
            focus_dist=self.focus_dist,
            time0=self.time0,
            time1=self.time1,
        )


# =============================================================================
# Palette
# =============================================================================

LIGHT_EMISSION = (2.5, 2.5, 2.5)
SPHERE_LIGHT_EMISSION = (7.0, 7.0, 7.0)
BRIGHT_LIGHT_EMISSION = (20.0, 20.0, 20.0)

PALETTE = {
    "red": (0.65, 0.05, 0.05),
    "white": (0.73, 0.73, 0.73),
    "green": (0.12, 0.45, 0.15),
    "yellow": (0.65, 0.65, 0.05),
    "blue": (0.05, 0.05, 0.65),
    "skyblue": (0.53, 0.80, 0.92),
    "brown": (0.47, 0.20, 0.08),
    "darkbrown": (0.345, 0.17, 0.08),
}

# Number of random mosaic colors drawn for scene 2
NUM_RANDOM_COLORS = 100

# Plane of the mosaic in scene 2
MOSAIC_X = -8.0

# Mosaic tiles as ((z, y) x 4, color). A string names a PALETTE entry, an
# int indexes the random colors.
MOSAIC_TILES: tuple[tuple[tuple[tuple[float, float], ...], str | int], ...] = (
    (((-0.8, -0.4), (-0.2, 0.4), (0.4, 0.6), (0.2, -0.2)), "red"),
    (((-0.8, -0.4), (-0.2, 0.4), (-0.6, 0.3), (-0.9, -0.2)), "blue"),
    (((-1.2, -0.3), (-1.1, 0.3), (-0.6, 0.3), (-0.9, -0.2)), "green"),
    (((-0.8, -0.4), (-0.9, -0.2), (-1.2, -0.3), (-1.5, -0.9)), "brown"),
    (((-0.8, -0.4), (-1.5, -0.9), (-0.8, -1.25), (-0.6, -0.6)), "skyblue"),
    (((-0.8, -0.4), (-0.6, -0.6), (0.0, -0.4), (0.2, -0.2)), "yellow"),
    (((-0.6, -0.6), (-0.8, -1.25), (-0.1, -0.6), (0.0, -0.4)), 0),
    (((0.0, -0.4), (-0.1, -0.6), (0.7, -1.0), (0.2, -0.2)), 1),
    (((0.4, 0.6), (0.8, 0.7), (0.6, 0.0), (0.2, -0.2)), 2),
    (((0.2, -0.2), (0.6, 0.0), (1.2, -0.3), (0.7, -1.0)), 3),
    (((1.2, 0.3), (1.4, 0.8), (0.8, 0.7), (0.6, 0.0)), 4),
    (((-0.1, -0.6), (0.7, -1.0), (0.4, -1.25), (-0.8, -1.25)), 5),
    (((1.2, -0.3), (0.6, 0.0), (1.2, 0.3), (1.6, 0.4)), 6),
    (((1.2, 0.3), (1.4, 0.8), (1.5, 1.25), (1.6, 0.4)), 7),
    (((1.5, 1.25), (1.8, 1.25), (2.0, 0.5), (1.6, 0.4)), 8),
    (((1.8, 1.25), (2.25, 1.25), (2.25, 0.4), (2.0, 0.5)), 9),
    (((1.6, 0.4), (2.0, 0.5), (2.25, 0.4), (2.25, 0.1)), 10),
    (((1.6, 0.4), (2.25, 0.1), (2.25, -0.6), (1.2, -0.3)), 11),
    (((1.2, -0.3), (2.25, -0.6), (1.8, -0.8), (0.7, -1.0)), 12),
    (((1.8, -0.8), (2.25, -0.6), (2.25, -1.25), (1.6, -1.1)), 13),
    (((0.7, -1.0), (1.8, -0.8), (1.6, -1.1), (0.4, -1.25)), 14),
    (((1.6, -1.1), (1.6, -1.1), (2.25, -1.25), (0.4, -1.25)), 15),
    (((1.3, 1.25), (1.5, 1.25), (1.4, 0.8), (0.8, 0.7)), 16),
    (((0.9, 1.1), (1.3, 1.25), (0.8, 0.7), (0.4, 0.6)), 17),
    (((0.7, 1.25), (1.3, 1.25), (0.9, 1.1), (0.3, 0.8)), 18),
    (((0.3, 0.8), (1.3, 1.25), (0.4, 0.6), (-0.2, 0.4)), 19),
    (((0.1, 1.25), (0.7, 1.25), (0.3, 0.8), (-0.5, 0.9)), 20),
    (((-0.5, 0.9), (0.3, 0.8), (-0.2, 0.4), (-0.6, 0.3)), 21),
    (((-0.4, 1.25), (0.1, 1.25), (-0.5, 0.9), (-0.8, 0.8)), 22),
    (((-0.9, 1.25), (-0.4, 1.25), (-0.8, 0.8), (-1.1, 0.9)), 23),
    (((-1.1, 0.9), (-0.8, 0.8), (-0.8, 0.8), (-1.1, 0.3)), 99),
    (((-0.8, 0.8), (-0.5, 0.9), (-0.6, 0.3), (-1.1, 0.3)), 24),
    (((-1.9, 0.9), (-1.1, 0.9), (-1.1, 0.3), (-1.7, 0.5)), 25),
    (((-1.5, 1.25), (-0.9, 1.25), (-1.1, 0.9), (-1.9, 0.9)), 26),
    (((-2.25, 1.25), (-1.5, 1.25), (-1.9, 0.9), (-2.25, 0.8)), 27),
    (((-2.25, 0.8), (-1.9, 0.9), (-1.7, 0.5), (-2.25, 0.1)), 28),
    (((-2.25, 0.1), (-1.7, 0.5), (-1.1, 0.3), (-1.9, -0.1)), 29),
    (((-1.9, -0.1), (-1.1, 0.3), (-1.2, -0.3), (-1.8, -0.4)), 30),
    (((-1.8, -0.4), (-1.2, -0.3), (-1.5, -0.9), (-2.0, -0.8)), 31),
    (((-2.0, -0.8), (-1.5, -0.9), (-0.8, -1.25), (-1.7, -1.25)), 32),
    (((-2.25, -0.7), (-2.0, -0.8), (-1.7, -1.25), (-2.25, -1.25)), 33),
    (((-2.25, -0.4), (-1.8, -0.4), (-2.0, -0.8), (-2.25, -0.7)), 34),
    (((-2.25, 0.1), (-1.9, -0.1), (-1.8, -0.4), (-2.25, -0.4)), 35),
)


def _add_palette(scene: SceneManager) -> dict[str, int]:
    """Register one Lambertian material per palette color."""
    return {name: scene.add_lambertian_material(albedo=color) for name, color in PALETTE.items()}


def random_mosaic_colors(
    count: int = NUM_RANDOM_COLORS, seed: int | None = None
) -> list[tuple[float, float, float]]:
    """Draw mosaic colors: red in [0.10, 0.95), green and blue in [0, 1)."""
    rng = np.random.default_rng(seed)
    reds = rng.uniform(0.10, 0.95, size=count)
    greens = rng.uniform(0.0, 1.0, size=count)
    blues = rng.uniform(0.0, 1.0, size=count)
    return [(float(r), float(g), float(b)) for r, g, b in zip(reds, greens, blues)]


# =============================================================================
# Scene Builders
# =============================================================================


def _build_spheres_scene(scene: SceneManager, seed: int | None) -> None:
    colors = _add_palette(scene)
    light = scene.add_diffuse_light_material(emit=LIGHT_EMISSION)
    sphere_light = scene.add_diffuse_light_material(emit=SPHERE_LIGHT_EMISSION)

    scene.add_sphere((4.0, -0.5, 0.0), 1.0, colors["white"])
    scene.add_sphere((0.0, 2.0, 0.0), 2.0, colors["green"])
    scene.add_sphere((-3.0, 1.0, -1.5), 1.0, colors["white"])
    scene.add_sphere((3.0, -1.0, -1.2), 1.2, colors["yellow"])
    scene.add_sphere((-2.0, -1.0, -3.0), 1.2, sphere_light)

    scene.add_rect("yz", (-1.5, -0.5), (1.0, 4.0), -5.0, light)
    scene.add_rect("yz", (0.0, 10.0), (0.0, 10.0), 0.0, colors["red"])
    scene.add_rect("xy", (-10.0, 4.0), (-2.5, 2.5), -3.75, colors["blue"])


def _build_doorway_scene(scene: SceneManager, seed: int | None) -> None:
    colors = _add_palette(scene)
    bright_light = scene.add_diffuse_light_material(emit=BRIGHT_LIGHT_EMISSION)

    scene.add_rect("yz", (-5.0, 5.0), (-5.0, 5.0), -16.0, bright_light)
    scene.add_rect("yz", (0.0, 10.0), (-10.0, 10.0), 0.0, colors["skyblue"])
    scene.add_rect("yz", (-10.0, 0.0), (-10.0, 10.0), -1.0, colors["brown"])
    scene.add_rect("yz", (-0.5, 1.5), (-0.3, 0.3), -5.0, colors["darkbrown"])

    scene.add_sphere((-5.0, 1.8, 0.0), 0.6, colors["green"])
    scene.add_sphere((1.0, 0.0, -4.0), 2.0, colors["yellow"])


def _build_mosaic_scene(scene: SceneManager, seed: int | None) -> None:
    colors = _add_palette(scene)
    light = scene.add_diffuse_light_material(emit=LIGHT_EMISSION)
    scene.add_rect("yz", (-10.0, 10.0), (-10.0, 10.0), -15.0, light)

    random_materials = [
        scene.add_lambertian_material(albedo=color) for color in random_mosaic_colors(seed=seed)
    ]

    for vertices, color in MOSAIC_TILES:
        if isinstance(color, str):
            material_id = colors[color]
        else:
            material_id = random_materials[color]
        scene.add_quadrilateral(vertices, MOSAIC_X, material_id)


SCENES = {
    0: _build_spheres_scene,
    1: _build_doorway_scene,
    2: _build_mosaic_scene,
}


def build_scene(
    scene_id: int,
    scene: SceneManager | None = None,
    seed: int | None = None,
) -> SceneManager:
    """Populate a scene with one of the built-in scenes.

    Args:
        scene_id: 0, 1 or 2.
        scene: Scene to fill. A new SceneManager is created if omitted;
            an existing one is cleared first.
        seed: Seed for the random mosaic colors of scene 2.

    Returns:
        The populated SceneManager.

    Raises:
        ValueError: If scene_id is not a known scene.
    """
    if scene_id not in SCENES:
        raise ValueError(f"Unknown scene {scene_id}; choose one of {sorted(SCENES)}")

    if scene is None:
        scene = SceneManager()
    else:
        scene.clear()

    SCENES[scene_id](scene, seed)
    logger.info(
        "Built scene %d: %d primitives, %d materials",
        scene_id,
        scene.get_primitive_count(),
        scene.get_material_count(),
    )
    return scene


def create_scene(
    scene_id: int = 0,
    params: SceneParams | None = None,
    seed: int | None = None,
) -> tuple[SceneManager, ThinLensCamera]:
    """Build a built-in scene together with its camera.

    Args:
        scene_id: 0, 1 or 2.
        params: Camera and environment. Defaults to SceneParams().
        seed: Seed for the random mosaic colors of scene 2.

    Returns:
        Tuple of (scene, camera).
    """
    if params is None:
        params = SceneParams()
    return build_scene(scene_id, seed=seed), params.make_camera()
