"""Core rendering module.

Components:
    vector: Ray data structure and vector algebra (reflect, refract)
    shading: Whitted shading model (cast_ray) with bounded ray depth
    renderer: Framebuffer, rendering kernels and the Renderer class

Note: shading and renderer are NOT imported here because they declare
Taichi fields at import time and pull in the scene modules. Import them
directly from src.whitted.core.shading or src.whitted.core.renderer.
"""

from .vector import (
    RAY_EPSILON,
    Ray,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    offset_origin,
    ray_at,
    reflect,
    refract,
    refract_between,
    scale,
    vec2,
    vec3,
    vec4,
)

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec2",
    "vec3",
    "vec4",
    "dot",
    "length",
    "length_squared",
    "scale",
    "normalize",
    "reflect",
    "refract",
    "refract_between",
    "offset_origin",
    "RAY_EPSILON",
]
