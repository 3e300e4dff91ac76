"""Bounded checkerboard floor plane.

The floor is the horizontal plane ``y = PLANE_Y``, visible only inside the
window ``|x| < 10`` and ``10 < z < 30`` in front of the camera. It is a
scene-level constant rather than a stored primitive.

Its material is synthesized per hit: the diffuse color alternates between
white and orange according to the parity of ``floor(0.5 x) + floor(0.5 z)``
and is darkened by a factor 0.3. Every call returns a fresh Material value.
"""

import taichi as ti
import taichi.math as tm

from src.whitted.materials.phong import Material, make_material

vec3 = tm.vec3
vec4 = tm.vec4

PLANE_Y = -4.0
PLANE_HALF_WIDTH = 10.0
PLANE_Z_NEAR = 10.0
PLANE_Z_FAR = 30.0

# Rays this close to parallel with the plane are treated as misses
GRAZING_EPSILON = 1e-3

CHECKER_ODD_COLOR = vec3(1.0, 1.0, 1.0)
CHECKER_EVEN_COLOR = vec3(1.0, 0.7, 0.3)
CHECKER_DARKEN = 0.3


@ti.func
def hit_checkerboard(ray_origin: vec3, ray_direction: vec3):
    """Intersect a ray with the visible part of the checkerboard.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.

    Returns:
        A tuple ``(hit, t, point)``. ``t`` and ``point`` are only valid
        when ``hit == 1``.
    """
    hit = 0
    t = 0.0
    point = vec3(0.0, 0.0, 0.0)

    if ti.abs(ray_direction.y) > GRAZING_EPSILON:
        d = -(ray_origin.y - PLANE_Y) / ray_direction.y
        p = ray_origin + d * ray_direction
        if d > 0.0 and ti.abs(p.x) < PLANE_HALF_WIDTH and p.z > PLANE_Z_NEAR and p.z < PLANE_Z_FAR:
            hit = 1
            t = d
            point = p

    return hit, t, point


@ti.func
def checkerboard_color(point: vec3) -> vec3:
    """Tile color at a point on the plane, already darkened."""
    cell = ti.cast(ti.floor(0.5 * point.x), ti.i32) + ti.cast(ti.floor(0.5 * point.z), ti.i32)
    color = CHECKER_EVEN_COLOR
    if (cell & 1) == 1:
        color = CHECKER_ODD_COLOR
    return color * CHECKER_DARKEN


@ti.func
def checkerboard_material(point: vec3) -> Material:
    """Matte material for the tile under ``point``."""
    return make_material(
        1.0,
        vec4(1.0, 0.0, 0.0, 0.0),
        checkerboard_color(point),
        0.0,
    )


@ti.func
def checkerboard_normal() -> vec3:
    return vec3(0.0, 1.0, 0.0)
