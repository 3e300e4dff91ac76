"""Whitted-style recursive shading.

For a ray hitting a surface the returned color is

    diffuse_color * diffuse * albedo[0]
    + white * specular * albedo[1]
    + reflect_color * albedo[2]
    + refract_color * albedo[3]

where ``diffuse`` and ``specular`` sum the Lambert and Phong terms of every
light that is not shadowed, and ``reflect_color``/``refract_color`` are the
colors of the mirrored and transmitted rays. Rays that miss, or that are
deeper than MAX_DEPTH, return BACKGROUND_COLOR. Nothing is clamped here;
tone mapping happens on output.

Taichi functions cannot recurse, so the ray tree is walked with an explicit
stack. The color is linear in both child colors, so each node adds its local
term scaled by the product of the albedo weights on its path from the root.
Both children are always pushed, even when their weight is zero, so every
branch runs down to the depth cutoff. A primary ray costs at most
2^(MAX_DEPTH+1)-1 scene intersections and the stack never holds more than
MAX_DEPTH + 2 entries.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.core.shading import trace_ray
    >>> from src.whitted.scene.default_scene import create_default_scene
    >>> scene, camera = create_default_scene()
    >>> trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
"""

import math

import taichi as ti
import taichi.math as tm

from src.whitted.core.vector import normalize, offset_origin, reflect, refract
from src.whitted.materials.phong import Material
from src.whitted.scene.intersection import intersect_scene, is_occluded
from src.whitted.scene.lights import get_light_intensity, get_light_position, num_lights

vec3 = tm.vec3

# =============================================================================
# Shading Constants
# =============================================================================

# Rays deeper than this return the background color
MAX_DEPTH = 4

# Deepest stack needed by a depth-first walk of the ray tree
STACK_SIZE = MAX_DEPTH + 2

BACKGROUND_COLOR = vec3(0.2, 0.7, 0.8)
WHITE = vec3(1.0, 1.0, 1.0)


@ti.func
def local_illumination(point: vec3, normal: vec3, view_direction: vec3, material: Material):
    """Sum the diffuse and specular light arriving at a surface point.

    Each light is tested with a shadow ray from the surface (offset to avoid
    self-intersection). A light blocked by anything strictly closer than the
    light itself contributes nothing.

    Args:
        point: The surface point.
        normal: The unit surface normal.
        view_direction: The unit direction of the ray that hit the point.
        material: The surface material.

    Returns:
        A tuple ``(diffuse, specular)`` of scalar light intensities.
    """
    diffuse = 0.0
    specular = 0.0
    for k in range(num_lights[None]):
        to_light = get_light_position(k) - point
        light_distance = tm.length(to_light)
        light_dir = normalize(to_light)
        intensity = get_light_intensity(k)

        shadow_origin = offset_origin(point, normal, light_dir)
        if is_occluded(shadow_origin, light_dir, light_distance) == 0:
            diffuse += intensity * ti.max(0.0, tm.dot(light_dir, normal))
            highlight = ti.max(0.0, tm.dot(reflect(light_dir, normal), view_direction))
            specular += highlight**material.specular_exponent * intensity

    return diffuse, specular


@ti.func
def cast_ray(ray_origin: vec3, ray_direction: vec3, depth: ti.i32) -> vec3:
    """Compute the color seen along a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        depth: Recursion depth of this ray (0 for primary rays).

    Returns:
        The unclamped RGB color.
    """
    stack_origin = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
    stack_direction = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
    stack_weight = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
    stack_depth = ti.Vector.zero(ti.i32, STACK_SIZE)

    for c in ti.static(range(3)):
        stack_origin[0, c] = ray_origin[c]
        stack_direction[0, c] = ray_direction[c]
        stack_weight[0, c] = 1.0
    stack_depth[0] = depth
    top = 1

    color = vec3(0.0, 0.0, 0.0)
    while top > 0:
        top -= 1
        origin = vec3(stack_origin[top, 0], stack_origin[top, 1], stack_origin[top, 2])
        direction = vec3(stack_direction[top, 0], stack_direction[top, 1], stack_direction[top, 2])
        weight = vec3(stack_weight[top, 0], stack_weight[top, 1], stack_weight[top, 2])
        node_depth = stack_depth[top]

        if node_depth > MAX_DEPTH:
            color += weight * BACKGROUND_COLOR
        else:
            rec = intersect_scene(origin, direction)
            if rec.hit == 0:
                color += weight * BACKGROUND_COLOR
            else:
                material = rec.material
                albedo = material.albedo

                diffuse, specular = local_illumination(rec.point, rec.normal, direction, material)
                local = (
                    material.diffuse_color * diffuse * albedo[0]
                    + WHITE * specular * albedo[1]
                )
                color += weight * local

                reflect_dir = normalize(reflect(direction, rec.normal))
                refract_dir = normalize(refract(direction, rec.normal, material.refractive_index))
                reflect_orig = offset_origin(rec.point, rec.normal, reflect_dir)
                refract_orig = offset_origin(rec.point, rec.normal, refract_dir)
                reflect_weight = weight * albedo[2]
                refract_weight = weight * albedo[3]

                # Refraction first so the reflected branch is walked first
                for c in ti.static(range(3)):
                    stack_origin[top, c] = refract_orig[c]
                    stack_direction[top, c] = refract_dir[c]
                    stack_weight[top, c] = refract_weight[c]
                    stack_origin[top + 1, c] = reflect_orig[c]
                    stack_direction[top + 1, c] = reflect_dir[c]
                    stack_weight[top + 1, c] = reflect_weight[c]
                stack_depth[top] = node_depth + 1
                stack_depth[top + 1] = node_depth + 1
                top += 2

    return color


# =============================================================================
# Python Entry Points
# =============================================================================


@ti.kernel
def _trace_ray_kernel(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    depth: ti.i32,
) -> vec3:
    return cast_ray(vec3(ox, oy, oz), vec3(dx, dy, dz), depth)


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
) -> tuple[float, float, float]:
    """Trace a single ray against the current scene.

    Useful for tests and debugging. The direction is normalized here.

    Args:
        origin: Ray origin as (x, y, z).
        direction: Ray direction as (x, y, z); must be non-zero.
        depth: Starting recursion depth.

    Returns:
        The (R, G, B) color seen along the ray.

    Raises:
        ValueError: If the direction is the zero vector or depth is negative.
    """
    if depth < 0:
        raise ValueError(f"Depth must be non-negative, got {depth}")
    norm = math.sqrt(sum(c * c for c in direction))
    if norm == 0.0:
        raise ValueError("Ray direction must be non-zero")
    d = [c / norm for c in direction]
    color = _trace_ray_kernel(origin[0], origin[1], origin[2], d[0], d[1], d[2], depth)
    return (float(color[0]), float(color[1]), float(color[2]))
