"""Scene manager coordinating spheres, materials and lights.

The SceneManager is the Python-side owner of a scene. It writes materials,
spheres and lights into the Taichi fields read by the kernels and keeps a
plain-Python record of everything it added, so a scene can be exported to
and rebuilt from a JSON-compatible dictionary.

A scene is built once and must not change while a render is running.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> ivory = scene.add_material(1.0, (0.6, 0.3, 0.1, 0.0), (0.4, 0.4, 0.3), 50.0)
    >>> scene.add_sphere((-3.0, 0.0, 16.0), 2.0, ivory)
    >>> scene.add_light((-20.0, 20.0, -20.0), 1.5)
"""

from dataclasses import dataclass, field
from typing import Any

import taichi.math as tm

from src.whitted.materials.phong import (
    MAX_PHONG_MATERIALS,
    MaterialParams,
    add_phong_material,
    clear_phong_materials,
    get_phong_material_count,
)
from src.whitted.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)
from src.whitted.scene.lights import (
    MAX_LIGHTS,
    add_light,
    clear_lights,
    get_light_count,
)

vec3 = tm.vec3


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: Index in the Phong material registry.
        params: The material parameters as provided during creation.
    """

    material_id: int
    params: MaterialParams


@dataclass
class SphereInfo:
    """Information about a sphere in the scene."""

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass
class LightInfo:
    """Information about a point light in the scene."""

    light_index: int
    position: tuple[float, float, float]
    intensity: float


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: List of material configurations.
        spheres: List of sphere configurations.
        lights: List of light configurations.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)


def _as_tuple3(values: Any, name: str) -> tuple[float, float, float]:
    if len(values) != 3:
        raise ValueError(f"{name} needs 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


class SceneManager:
    """Builds a scene of spheres and point lights.

    Creating a SceneManager clears every scene field, so only one scene is
    live at a time.

    Attributes:
        materials: MaterialInfo for all registered materials.
        spheres: SphereInfo for all spheres in the scene.
        lights: LightInfo for all lights in the scene.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self.lights: list[LightInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        clear_scene()
        clear_phong_materials()
        clear_lights()
        self.materials.clear()
        self.spheres.clear()
        self.lights.clear()

    def clear(self) -> None:
        """Remove every material, sphere and light."""
        self._clear_all()

    # =========================================================================
    # Materials
    # =========================================================================

    def add_material(
        self,
        refractive_index: float,
        albedo: tuple[float, float, float, float],
        diffuse_color: tuple[float, float, float],
        specular_exponent: float,
    ) -> int:
        """Register a Phong material.

        Args:
            refractive_index: Refractive index of the object's interior.
            albedo: Weights of (diffuse, specular, reflection, refraction).
            diffuse_color: Surface color as (R, G, B).
            specular_exponent: Phong shininess.

        Returns:
            The material ID.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If a parameter is invalid.
        """
        params = MaterialParams(
            refractive_index=float(refractive_index),
            albedo=tuple(float(a) for a in albedo),
            diffuse_color=tuple(float(c) for c in diffuse_color),
            specular_exponent=float(specular_exponent),
        )
        material_id = add_phong_material(
            params.refractive_index,
            params.albedo,
            params.diffuse_color,
            params.specular_exponent,
        )
        self.materials.append(MaterialInfo(material_id=material_id, params=params))
        return material_id

    def add_material_params(self, params: MaterialParams) -> int:
        """Register a material from a MaterialParams preset."""
        return self.add_material(
            params.refractive_index,
            params.albedo,
            params.diffuse_color,
            params.specular_exponent,
        )

    def get_material_count(self) -> int:
        return get_phong_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        for info in self.materials:
            if info.material_id == material_id:
                return info
        return None

    # =========================================================================
    # Primitives
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere using an existing material.

        Args:
            center: The center of the sphere as (x, y, z).
            radius: The radius of the sphere.
            material_id: ID returned by add_material.

        Returns:
            The sphere index.

        Raises:
            ValueError: If the material ID is unknown or the radius invalid.
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        if not 0 <= material_id < self.get_material_count():
            raise ValueError(f"Invalid material_id: {material_id}")
        center = _as_tuple3(center, "Sphere center")

        sphere_index = add_sphere(vec3(*center), float(radius), material_id)
        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=center,
                radius=float(radius),
                material_id=material_id,
            )
        )
        return sphere_index

    def add_sphere_with_material(
        self,
        center: tuple[float, float, float],
        radius: float,
        params: MaterialParams,
    ) -> tuple[int, int]:
        """Add a sphere with a new material in one call.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_material_params(params)
        sphere_index = self.add_sphere(center, radius, material_id)
        return sphere_index, material_id

    # =========================================================================
    # Lights
    # =========================================================================

    def add_light(self, position: tuple[float, float, float], intensity: float) -> int:
        """Add a point light.

        Raises:
            ValueError: If the intensity is not positive.
            RuntimeError: If the maximum number of lights is exceeded.
        """
        position = _as_tuple3(position, "Light position")
        light_index = add_light(position, float(intensity))
        self.lights.append(
            LightInfo(light_index=light_index, position=position, intensity=float(intensity))
        )
        return light_index

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        return get_sphere_count()

    def get_light_count(self) -> int:
        return get_light_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()

        for mat in self.materials:
            config.materials.append(
                {
                    "refractive_index": mat.params.refractive_index,
                    "albedo": list(mat.params.albedo),
                    "diffuse_color": list(mat.params.diffuse_color),
                    "specular_exponent": mat.params.specular_exponent,
                }
            )

        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material_id": sphere.material_id,
                }
            )

        for light in self.lights:
            config.lights.append(
                {
                    "position": list(light.position),
                    "intensity": light.intensity,
                }
            )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Replace the current scene with the one described by ``config``.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        # Materials first, spheres refer to them by index
        for mat_config in config.materials:
            self.add_material(
                mat_config.get("refractive_index", 1.0),
                mat_config.get("albedo", [1.0, 0.0, 0.0, 0.0]),
                mat_config.get("diffuse_color", [0.0, 0.0, 0.0]),
                mat_config.get("specular_exponent", 0.0),
            )

        for sphere_config in config.spheres:
            self.add_sphere(
                sphere_config.get("center", [0.0, 0.0, 0.0]),
                sphere_config.get("radius", 1.0),
                sphere_config.get("material_id", 0),
            )

        for light_config in config.lights:
            self.add_light(
                light_config.get("position", [0.0, 0.0, 0.0]),
                light_config.get("intensity", 1.0),
            )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "materials": config.materials,
            "spheres": config.spheres,
            "lights": config.lights,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary with 'materials', 'spheres', 'lights'."""
        config = SceneConfig(
            materials=data.get("materials", []),
            spheres=data.get("spheres", []),
            lights=data.get("lights", []),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        return MAX_SPHERES

    @staticmethod
    def get_max_materials() -> int:
        return MAX_PHONG_MATERIALS

    @staticmethod
    def get_max_lights() -> int:
        return MAX_LIGHTS
