"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole camera at the origin looking down +z

Pixel (i, j) is addressed with i = 0 at the left column and j = 0 at the
top row. Primary rays pass through pixel centers.
"""

from .pinhole import (
    PinholeCamera,
    get_camera_info,
    get_ray,
    get_ray_direction,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "get_ray",
    "get_ray_direction",
    "get_camera_info",
]
