"""Sphere primitive with geometric ray-sphere intersection.

The intersection works on the ray line rather than a quadratic in t:

    L    = center - origin
    tca  = L . direction           (projection of the center on the ray)
    d2   = L . L - tca^2           (squared distance from center to the line)

If ``d2 > r^2`` the line misses. Otherwise the chord half-length is
``sqrt(r^2 - d2)`` and the roots are ``tca -/+ thc``. The near root is used
unless it lies behind the origin, in which case the origin is inside the
sphere and the far root is used. A sphere entirely behind the origin is a
miss. The direction must be unit length.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.geometry.sphere import Sphere, ray_intersect
    >>> # Use ray_intersect within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
    """

    center: vec3
    radius: ti.f32


@ti.func
def ray_intersect(ray_origin: vec3, ray_direction: vec3, sphere: Sphere):
    """Find the nearest non-negative intersection distance with a sphere.

    A ray tangent to the sphere (``d2 == r^2``) counts as a hit.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test.

    Returns:
        A tuple ``(hit, t)``. ``hit`` is 1 on intersection and 0 otherwise;
        ``t`` is the distance along the ray and only valid when ``hit == 1``.
    """
    to_center = sphere.center - ray_origin
    tca = tm.dot(to_center, ray_direction)
    d2 = tm.dot(to_center, to_center) - tca * tca
    radius2 = sphere.radius * sphere.radius

    hit = 0
    t = 0.0
    if d2 <= radius2:
        thc = ti.sqrt(radius2 - d2)
        t0 = tca - thc
        t1 = tca + thc
        # Origin inside the sphere: the near root is behind it
        if t0 < 0.0:
            t0 = t1
        if t0 >= 0.0:
            hit = 1
            t = t0

    return hit, t


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal at a point on the sphere surface."""
    return tm.normalize(point - sphere.center)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    return Sphere(center=center, radius=radius)
