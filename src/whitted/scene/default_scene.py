"""Reference scene: four spheres, three lights and the checkerboard floor.

The scene holds an ivory sphere, a glass sphere, a red rubber sphere and a
mirror sphere, lit by three point lights of different intensity, above the
checkerboard floor at y = -4. The camera sits at the origin looking down +z,
so every object lies at positive z.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.default_scene import create_default_scene
    >>> from src.whitted.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
"""

from src.whitted.camera.pinhole import PinholeCamera
from src.whitted.materials.phong import GLASS, IVORY, MIRROR, RED_RUBBER, MaterialParams
from src.whitted.scene.manager import SceneManager

# =============================================================================
# Reference Scene Constants
# =============================================================================

DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 768
DEFAULT_FOV = 90.0

# (center, radius, material)
DEFAULT_SPHERES: tuple[tuple[tuple[float, float, float], float, MaterialParams], ...] = (
    ((-3.0, 0.0, 16.0), 2.0, IVORY),
    ((-1.0, -1.5, 12.0), 2.0, GLASS),
    ((1.5, -0.5, 18.0), 3.0, RED_RUBBER),
    ((7.0, 5.0, 18.0), 4.0, MIRROR),
)

# (position, intensity)
DEFAULT_LIGHTS: tuple[tuple[tuple[float, float, float], float], ...] = (
    ((-20.0, 20.0, -20.0), 1.5),
    ((30.0, 50.0, 25.0), 1.8),
    ((30.0, 20.0, -30.0), 1.7),
)


def create_default_scene(fov: float = DEFAULT_FOV) -> tuple[SceneManager, PinholeCamera]:
    """Build the reference scene.

    Args:
        fov: Horizontal field of view of the returned camera, in degrees.

    Returns:
        A tuple of (SceneManager, PinholeCamera). Call setup_camera on the
        camera before rendering.
    """
    scene = SceneManager()

    # One material per preset, shared by spheres that use it
    material_ids: dict[MaterialParams, int] = {}
    for center, radius, params in DEFAULT_SPHERES:
        if params not in material_ids:
            material_ids[params] = scene.add_material_params(params)
        scene.add_sphere(center, radius, material_ids[params])

    for position, intensity in DEFAULT_LIGHTS:
        scene.add_light(position, intensity)

    return scene, PinholeCamera(fov=fov)


def create_single_sphere_scene(
    center: tuple[float, float, float] = (-3.0, 0.0, 16.0),
    radius: float = 2.0,
    material: MaterialParams = IVORY,
    lights: tuple[tuple[tuple[float, float, float], float], ...] = (),
) -> tuple[SceneManager, PinholeCamera]:
    """Build a scene with one sphere and optional lights.

    Returns:
        A tuple of (SceneManager, PinholeCamera) with a 90 degree camera.
    """
    scene = SceneManager()
    scene.add_sphere_with_material(center, radius, material)
    for position, intensity in lights:
        scene.add_light(position, intensity)
    return scene, PinholeCamera(fov=DEFAULT_FOV)
