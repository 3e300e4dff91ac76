"""Geometric primitives and their intersection routines.

Components:
    sphere: Sphere primitive with geometric ray-sphere intersection
    checkerboard: Bounded checkerboard floor with per-hit material

All intersection routines are Taichi functions (@ti.func) and return a hit
flag followed by the distance along the ray.
"""

from .checkerboard import (
    PLANE_Y,
    checkerboard_color,
    checkerboard_material,
    checkerboard_normal,
    hit_checkerboard,
)
from .sphere import Sphere, make_sphere, ray_intersect, sphere_normal

__all__ = [
    "Sphere",
    "make_sphere",
    "ray_intersect",
    "sphere_normal",
    "PLANE_Y",
    "hit_checkerboard",
    "checkerboard_color",
    "checkerboard_material",
    "checkerboard_normal",
]
