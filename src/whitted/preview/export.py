"""Image export for rendered framebuffers.

The primary output is binary PPM:

    P6\\n<width> <height>\\n255\\n

followed by width * height * 3 bytes, row-major with the top row first, in
red-green-blue order. Channels are quantized with ``floor(255 * c)`` after
tone mapping; there is no rounding.

Supported formats:
    - PPM (P6, via Pillow)
    - PNG (8-bit, via Pillow)

Example:
    >>> from src.whitted.preview.export import save_ppm
    >>> save_ppm(renderer.get_image_numpy(), "out.ppm")
"""

from __future__ import annotations

from typing import BinaryIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.whitted.preview.display import ToneMapMethod, process_image_for_output


def quantize(image: npt.NDArray[np.float32]) -> npt.NDArray[np.uint8]:
    """Convert tone mapped channels in [0, 1] to bytes with floor(255 * c).

    Args:
        image: Image array with every channel in [0, 1].

    Returns:
        uint8 array of the same shape.

    Raises:
        ValueError: If any channel lies outside [0, 1]. Negative colors mean
            the scene or shading produced invalid light; values above 1 mean
            the image was not tone mapped.
    """
    if np.any(image < 0.0):
        raise ValueError(f"Image contains negative channels (min {float(np.min(image))})")
    if np.any(image > 1.0):
        raise ValueError(
            f"Image contains channels above 1 (max {float(np.max(image))}); tone map it first"
        )
    scaled = np.floor(image.astype(np.float32) * np.float32(255.0))
    return scaled.astype(np.uint8)


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    tone_map: ToneMapMethod = "max",
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Tone map and quantize a linear image.

    Args:
        image: Linear image array of shape (H, W, 3).
        tone_map: Tone mapping method (default "max").
        exposure: Exposure value for exposure tone mapping.

    Returns:
        8-bit image array of shape (H, W, 3).
    """
    return quantize(process_image_for_output(image, tone_map=tone_map, exposure=exposure))


def write_ppm(
    image: npt.NDArray[np.float32],
    sink: BinaryIO,
    *,
    tone_map: ToneMapMethod = "max",
    exposure: float = 1.0,
) -> None:
    """Serialize an image as binary PPM to an open binary stream.

    Args:
        image: Linear image array of shape (H, W, 3), top row first.
        sink: Writable binary file object.
        tone_map: Tone mapping method (default "max").
        exposure: Exposure value for exposure tone mapping.
    """
    pil_image = PILImage.fromarray(image_to_uint8(image, tone_map=tone_map, exposure=exposure))
    pil_image.save(sink, format="PPM")


def save_ppm(
    image: npt.NDArray[np.float32],
    filepath: str,
    *,
    tone_map: ToneMapMethod = "max",
    exposure: float = 1.0,
) -> None:
    """Write an image to a binary PPM file."""
    with open(filepath, "wb") as sink:
        write_ppm(image, sink, tone_map=tone_map, exposure=exposure)


def save_png(
    image: npt.NDArray[np.float32],
    filepath: str,
    *,
    tone_map: ToneMapMethod = "max",
    exposure: float = 1.0,
) -> None:
    """Write an image to an 8-bit PNG file."""
    pil_image = PILImage.fromarray(image_to_uint8(image, tone_map=tone_map, exposure=exposure))
    pil_image.save(filepath, format="PNG")

