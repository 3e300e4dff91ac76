"""Ray data structure and small-vector algebra for the Whitted tracer.

This module provides the Ray dataclass and the vector helpers every other
module builds on: dot products, normalization, scaling, mirror reflection
and Snell refraction. Vectors are Taichi's fixed-size ``vec2``/``vec3``/
``vec4`` types, so component access (``v.x``, ``v[1]``), addition,
subtraction and scalar multiplication come for free.

All helpers are ``@ti.func`` and must be called from Taichi scope.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> @ti.kernel
    ... def bounce() -> vec3:
    ...     return reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))
    >>> bounce()  # [1, 1, 0]
"""

import taichi as ti
import taichi.math as tm

vec2 = tm.vec2
vec3 = tm.vec3
vec4 = tm.vec4

# Offset applied along the normal when spawning secondary rays
RAY_EPSILON = 1e-3


@ti.dataclass
class Ray:
    """A ray with an origin point and a direction.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of travel. Intersection routines assume it
            is unit length, so callers normalize once before querying.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Return the point ``origin + t * direction``."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Algebra
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    return tm.dot(a, b)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> ti.f32:
    """Euclidean norm of ``v``."""
    return ti.sqrt(tm.dot(v, v))


@ti.func
def scale(v: vec3, s: ti.f32) -> vec3:
    return v * s


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale ``v`` to unit length.

    The zero vector has no direction; its result is NaN and callers must
    not pass it.
    """
    return v / length(v)


# =============================================================================
# Reflection and Refraction
# =============================================================================


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Mirror ``incident`` about ``normal``: ``I - 2 (I . N) N``.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The unit surface normal.

    Returns:
        The reflected direction. It has the length of ``incident``.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract_between(incident: vec3, normal: vec3, eta_t: ti.f32, eta_i: ti.f32) -> vec3:
    """Refract ``incident`` through a boundary using Snell's law.

    ``eta_i`` is the refractive index of the medium the ray travels in and
    ``eta_t`` the index of the medium it enters. When the ray arrives from
    the back of the surface (``I . N > 0``) it is leaving the object, so the
    normal is flipped and the two indices swap places. That swap happens at
    most once per call.

    When no real solution exists (total internal reflection) the function
    returns the fixed direction ``(1, 0, 0)`` instead of disabling the
    refracted ray. Rendered output depends on this value.

    Args:
        incident: The unit incoming direction.
        normal: The unit outward surface normal.
        eta_t: Refractive index on the far side of the boundary.
        eta_i: Refractive index on the near side of the boundary.

    Returns:
        The refracted direction (not normalized), or ``(1, 0, 0)`` on total
        internal reflection.
    """
    cos_i = -tm.clamp(tm.dot(incident, normal), -1.0, 1.0)
    n = normal
    n_from = eta_i
    n_to = eta_t
    if cos_i < 0.0:
        cos_i = -cos_i
        n = -normal
        n_from = eta_t
        n_to = eta_i

    eta = n_from / n_to
    k = 1.0 - eta * eta * (1.0 - cos_i * cos_i)

    result = vec3(1.0, 0.0, 0.0)
    if k >= 0.0:
        result = incident * eta + n * (eta * cos_i - ti.sqrt(k))
    return result


@ti.func
def refract(incident: vec3, normal: vec3, eta_t: ti.f32) -> vec3:
    """Refract from vacuum (index 1) into a medium of index ``eta_t``."""
    return refract_between(incident, normal, eta_t, 1.0)


@ti.func
def offset_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Nudge a secondary ray origin off the surface it starts on.

    The point moves ``RAY_EPSILON`` along the normal, toward the side the
    new ray travels into (below the surface for transmitted rays).
    """
    result = point + normal * RAY_EPSILON
    if tm.dot(direction, normal) < 0.0:
        result = point - normal * RAY_EPSILON
    return result
