"""Taichi-based Whitted-style ray tracer.

Renders a static scene of spheres, point lights and a checkerboard floor
into an image, with support for:
- Diffuse and Phong specular shading with hard shadows
- Mirror reflection and Snell refraction up to a fixed ray depth
- Hue-preserving tone mapping and binary PPM output

Subpackages:
    core: Vector algebra, shading model and renderer
    geometry: Sphere and checkerboard intersection
    materials: Phong material registry
    scene: Scene storage, lights, scene manager and reference scene
    camera: Pinhole camera ray generation
    preview: Tone mapping, preview window and image export
"""

__version__ = "0.1.0"
