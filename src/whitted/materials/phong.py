"""Phong material with four-term albedo for Whitted-style shading.

A material is described by:
    refractive_index: index of the medium inside the surface (1 = vacuum/air)
    albedo: four independent weights for the diffuse, specular, reflected
        and refracted contributions. They need not sum to one.
    diffuse_color: the surface color in [0, 1]^3
    specular_exponent: Phong shininess of the highlight

Materials are registered once while the scene is built and are read-only
during rendering. Kernels receive a fresh ``Material`` value per lookup.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.materials.phong import add_phong_material
    >>> glass = add_phong_material(1.5, (0.0, 0.5, 0.1, 0.8), (0.6, 0.7, 0.8), 125.0)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class Material:
    """Phong material properties as seen from Taichi scope.

    Attributes:
        refractive_index: Refractive index of the object's interior (> 0).
        albedo: Weights of (diffuse, specular, reflection, refraction).
        diffuse_color: Surface color (RGB).
        specular_exponent: Phong shininess (>= 0).
    """

    refractive_index: ti.f32
    albedo: vec4
    diffuse_color: vec3
    specular_exponent: ti.f32


@dataclass(frozen=True)
class MaterialParams:
    """Python-side description of a Phong material."""

    refractive_index: float = 1.0
    albedo: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0)
    diffuse_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    specular_exponent: float = 0.0


# Materials used by the reference scene
IVORY = MaterialParams(1.0, (0.6, 0.3, 0.1, 0.0), (0.4, 0.4, 0.3), 50.0)
GLASS = MaterialParams(1.5, (0.0, 0.5, 0.1, 0.8), (0.6, 0.7, 0.8), 125.0)
RED_RUBBER = MaterialParams(1.0, (0.9, 0.1, 0.0, 0.0), (0.3, 0.1, 0.1), 10.0)
MIRROR = MaterialParams(1.0, (0.0, 10.0, 0.8, 0.0), (1.0, 1.0, 1.0), 1425.0)


@ti.func
def make_material(
    refractive_index: ti.f32,
    albedo: vec4,
    diffuse_color: vec3,
    specular_exponent: ti.f32,
) -> Material:
    return Material(
        refractive_index=refractive_index,
        albedo=albedo,
        diffuse_color=diffuse_color,
        specular_exponent=specular_exponent,
    )


# =============================================================================
# Material Field Storage
# =============================================================================

MAX_PHONG_MATERIALS = 256

phong_refractive_indices = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
phong_albedos = ti.Vector.field(4, dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
phong_diffuse_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
phong_specular_exponents = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
num_phong_materials = ti.field(dtype=ti.i32, shape=())


def clear_phong_materials() -> None:
    """Forget all registered materials.

    Field contents are left in place and overwritten by later additions.
    """
    num_phong_materials[None] = 0


def validate_material(
    refractive_index: float,
    albedo: tuple[float, ...],
    diffuse_color: tuple[float, ...],
    specular_exponent: float,
) -> None:
    """Check material parameters before they reach the GPU fields.

    Raises:
        ValueError: If any parameter is out of its domain.
    """
    if refractive_index <= 0.0:
        raise ValueError(f"Refractive index must be positive, got {refractive_index}")
    if len(albedo) != 4:
        raise ValueError(
            f"Albedo needs 4 weights (diffuse, specular, reflect, refract), got {len(albedo)}"
        )
    if len(diffuse_color) != 3:
        raise ValueError(f"Diffuse color needs 3 components, got {len(diffuse_color)}")
    for i, component in enumerate(diffuse_color):
        if component < 0.0:
            raise ValueError(f"Diffuse color component {i} = {component} is negative")
    if specular_exponent < 0.0:
        raise ValueError(f"Specular exponent must be non-negative, got {specular_exponent}")


def add_phong_material(
    refractive_index: float,
    albedo: tuple[float, float, float, float],
    diffuse_color: tuple[float, float, float],
    specular_exponent: float,
) -> int:
    """Add a material to the registry.

    Args:
        refractive_index: Index of the object's interior (1.0 for opaque
            objects, 1.5 for glass).
        albedo: Weights of (diffuse, specular, reflection, refraction).
        diffuse_color: Surface color as (R, G, B).
        specular_exponent: Phong shininess.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If a parameter is invalid (see validate_material).
    """
    validate_material(refractive_index, albedo, diffuse_color, specular_exponent)

    idx = num_phong_materials[None]
    if idx >= MAX_PHONG_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_PHONG_MATERIALS}) exceeded")

    phong_refractive_indices[idx] = refractive_index
    phong_albedos[idx] = vec4(albedo[0], albedo[1], albedo[2], albedo[3])
    phong_diffuse_colors[idx] = vec3(diffuse_color[0], diffuse_color[1], diffuse_color[2])
    phong_specular_exponents[idx] = specular_exponent
    num_phong_materials[None] = idx + 1
    return idx


def get_phong_material_count() -> int:
    """Get the number of registered materials."""
    return int(num_phong_materials[None])


@ti.func
def get_phong_material(material_idx: ti.i32) -> Material:
    """Build a Material value from the registry entry at ``material_idx``."""
    return make_material(
        phong_refractive_indices[material_idx],
        phong_albedos[material_idx],
        phong_diffuse_colors[material_idx],
        phong_specular_exponents[material_idx],
    )
