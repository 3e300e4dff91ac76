"""Scene module for scene storage and ray-scene queries.

Components:
    intersection: Sphere storage and nearest-hit queries (spheres + floor)
    lights: Point light storage
    manager: SceneManager coordinating materials, spheres and lights
    default_scene: The reference four-sphere scene

Scene data is stored in Taichi fields in Structure-of-Arrays layout and is
read-only while rendering.
"""

from .default_scene import create_default_scene, create_single_sphere_scene
from .intersection import (
    MAX_SPHERES,
    T_MAX,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
    is_occluded,
)
from .lights import MAX_LIGHTS, add_light, clear_lights, get_light_count
from .manager import LightInfo, MaterialInfo, SceneConfig, SceneManager, SphereInfo

__all__ = [
    # Intersection
    "SceneHitRecord",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "is_occluded",
    "MAX_SPHERES",
    "T_MAX",
    # Lights
    "add_light",
    "clear_lights",
    "get_light_count",
    "MAX_LIGHTS",
    # Manager
    "SceneManager",
    "MaterialInfo",
    "SphereInfo",
    "LightInfo",
    "SceneConfig",
    # Reference scenes
    "create_default_scene",
    "create_single_sphere_scene",
]
