"""Pinhole camera for primary ray generation.

The camera sits at the world origin and looks down +z with +y up. For pixel
(i, j) of a width x height image (j = 0 is the top row) the ray direction is
the normalized vector

    x = (i + 0.5) - width / 2
    y = -(j + 0.5) + height / 2
    z = width / (2 tan(fov / 2))

where ``fov`` is the horizontal field of view. Rays pass through pixel
centers; there is no jitter.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.camera.pinhole import PinholeCamera, setup_camera
    >>> setup_camera(PinholeCamera(fov=90.0))
    >>> # Use get_ray(i, j, width, height) within a Taichi kernel
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.whitted.core.vector import Ray, make_ray, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for the pinhole camera.

    Attributes:
        fov: Horizontal field of view in degrees, in (0, 180).
    """

    fov: float = 90.0


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

CAMERA_ORIGIN = vec3(0.0, 0.0, 0.0)

# tan(fov / 2), set by setup_camera
_tan_half_fov = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Store the camera's field of view for use by kernels.

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If the field of view is outside (0, 180) degrees.
    """
    if not 0.0 < camera.fov < 180.0:
        raise ValueError(f"Field of view must be in (0, 180) degrees, got {camera.fov}")
    _tan_half_fov[None] = math.tan(math.radians(camera.fov) / 2.0)


@ti.func
def get_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through the center of pixel (i, j).

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the camera origin with unit direction.
    """
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)
    x = (ti.cast(pixel_i, ti.f32) + 0.5) - w / 2.0
    y = -(ti.cast(pixel_j, ti.f32) + 0.5) + h / 2.0
    z = w / (2.0 * _tan_half_fov[None])
    return make_ray(CAMERA_ORIGIN, tm.normalize(vec3(x, y, z)))


@ti.kernel
def _ray_direction_kernel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    return get_ray(pixel_i, pixel_j, width, height).direction


def get_ray_direction(
    pixel_i: int, pixel_j: int, width: int, height: int
) -> tuple[float, float, float]:
    """Python-side access to a primary ray direction, for debugging."""
    d = _ray_direction_kernel(pixel_i, pixel_j, width, height)
    return (float(d[0]), float(d[1]), float(d[2]))


def get_camera_info() -> dict[str, float]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with the horizontal ``fov`` in degrees and ``tan_half_fov``.
    """
    tan_half = float(_tan_half_fov[None])
    return {
        "fov": math.degrees(2.0 * math.atan(tan_half)),
        "tan_half_fov": tan_half,
    }
