"""Tone mapping and Matplotlib preview for rendered images.

The shading model leaves colors unclamped. Before display or export they are
brought into [0, 1]. The default operator, ``"max"``, divides a pixel by its
largest channel whenever that channel exceeds 1, which keeps the hue and
needs no further per-channel clamping for non-negative input.

Example:
    >>> from src.whitted.preview.display import tone_map_max_channel
    >>> tone_map_max_channel(np.array([[[2.0, 1.0, 0.0]]], dtype=np.float32))
    array([[[1. , 0.5, 0. ]]], dtype=float32)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from src.whitted.core.renderer import Renderer


ToneMapMethod = Literal["max", "reinhard", "exposure", "none"]


def tone_map_max_channel(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Scale each pixel by 1 / max(channel) when that maximum exceeds 1.

    Args:
        image: Linear image array of shape (..., 3).

    Returns:
        Image whose pixels all have a maximum channel of at most 1.
    """
    peak = np.max(image, axis=-1, keepdims=True)
    result = image / np.maximum(peak, 1.0)
    return result.astype(np.float32)


def tone_map_reinhard(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Apply Reinhard tone mapping per channel: c / (1 + c)."""
    image = np.maximum(image, 0.0)
    return (image / (1.0 + image)).astype(np.float32)


def tone_map_exposure(
    image: npt.NDArray[np.float32],
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Apply exposure tone mapping per channel: 1 - exp(-c * exposure)."""
    image = np.maximum(image, 0.0)
    return (1.0 - np.exp(-image * exposure)).astype(np.float32)


def process_image_for_output(
    image: npt.NDArray[np.float32],
    tone_map: ToneMapMethod = "max",
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Tone map a rendered image for display or export.

    Args:
        image: Linear image array of shape (H, W, 3).
        tone_map: "max" (hue-preserving rescale), "reinhard", "exposure",
            or "none" to pass values through untouched.
        exposure: Exposure value for exposure tone mapping.

    Returns:
        The tone mapped image as float32.

    Raises:
        ValueError: If the tone mapping method is unknown.
    """
    if tone_map == "max":
        return tone_map_max_channel(image)
    if tone_map == "reinhard":
        return tone_map_reinhard(image)
    if tone_map == "exposure":
        return tone_map_exposure(image, exposure)
    if tone_map == "none":
        return image.astype(np.float32)
    raise ValueError(f"Unknown tone mapping method: {tone_map}")


def show_preview(
    renderer: Renderer,
    *,
    tone_map: ToneMapMethod = "max",
    exposure: float = 1.0,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display the current framebuffer in a Matplotlib window.

    Args:
        renderer: The Renderer whose image to show.
        tone_map: Tone mapping method.
        exposure: Exposure value for exposure tone mapping.
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block until the window is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_output(renderer.get_image_numpy(), tone_map, exposure)
    display_image = np.clip(display_image, 0.0, 1.0)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")
    ax.set_title(title if title is not None else f"Render {renderer.width}x{renderer.height}")

    plt.tight_layout()
    plt.show(block=block)
