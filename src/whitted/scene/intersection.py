"""Scene-level ray intersection.

The scene is every registered sphere plus the bounded checkerboard floor.
Spheres live in Taichi fields (structure-of-arrays layout) and each carries
a material index into the Phong registry. ``intersect_scene`` reports the
nearest hit within ``T_MAX`` together with its point, outward normal and
material.

Spheres are tested first with a strict ``<`` comparison, so on exact ties
the earliest sphere wins, and the floor only wins when strictly closer than
every sphere.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.intersection import add_sphere, clear_scene, vec3
    >>> clear_scene()
    >>> add_sphere(vec3(-3.0, 0.0, 16.0), 2.0, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.whitted.geometry.checkerboard import (
    checkerboard_material,
    checkerboard_normal,
    hit_checkerboard,
)
from src.whitted.geometry.sphere import Sphere, ray_intersect, sphere_normal
from src.whitted.materials.phong import Material, get_phong_material, make_material

vec3 = tm.vec3
vec4 = tm.vec4

# Hits at or beyond this distance are ignored
T_MAX = 1000.0


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection.

    Attributes:
        hit: 1 if the ray hit anything closer than T_MAX, 0 otherwise.
        t: Distance along the ray to the hit. Only valid if hit == 1.
        point: The hit point. Only valid if hit == 1.
        normal: Unit normal at the hit point. Points away from the sphere
            center, or straight up on the floor. Only valid if hit == 1.
        material: Material at the hit point. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material: Material


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres from the scene."""
    num_spheres[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        material_id: Index of the sphere's material in the Phong registry.

    Returns:
        The index of the added sphere.

    Raises:
        ValueError: If the radius is not positive.
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material=make_material(1.0, vec4(1.0, 0.0, 0.0, 0.0), vec3(0.0, 0.0, 0.0), 0.0),
    )


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the nearest surface hit by a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.

    Returns:
        A SceneHitRecord for the closest hit, or a miss record when nothing
        lies closer than T_MAX.
    """
    result = _make_miss_record()

    # Nearest sphere
    spheres_dist = T_MAX
    closest = -1
    for i in range(num_spheres[None]):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        hit, t = ray_intersect(ray_origin, ray_direction, sphere)
        if hit == 1 and t < spheres_dist:
            spheres_dist = t
            closest = i

    if closest >= 0:
        sphere = Sphere(center=sphere_centers[closest], radius=sphere_radii[closest])
        point = ray_origin + spheres_dist * ray_direction
        result = SceneHitRecord(
            hit=1,
            t=spheres_dist,
            point=point,
            normal=sphere_normal(sphere, point),
            material=get_phong_material(sphere_material_ids[closest]),
        )

    # Checkerboard floor, only if strictly in front of every sphere
    plane_hit, plane_t, plane_point = hit_checkerboard(ray_origin, ray_direction)
    if plane_hit == 1 and plane_t < spheres_dist:
        result = SceneHitRecord(
            hit=1,
            t=plane_t,
            point=plane_point,
            normal=checkerboard_normal(),
            material=checkerboard_material(plane_point),
        )

    return result


@ti.func
def is_occluded(ray_origin: vec3, ray_direction: vec3, max_distance: ti.f32) -> ti.i32:
    """Shadow query: 1 if a surface lies strictly closer than ``max_distance``.

    Args:
        ray_origin: The (already offset) shadow ray origin.
        ray_direction: The unit direction toward the light.
        max_distance: Distance from the origin to the light.
    """
    occluded = 0
    rec = intersect_scene(ray_origin, ray_direction)
    if rec.hit == 1:
        if tm.length(rec.point - ray_origin) < max_distance:
            occluded = 1
    return occluded
