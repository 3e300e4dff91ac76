"""Preview module for tone mapping, display and export.

Components:
    display: Tone mapping operators and Matplotlib preview
    export: Quantization and PPM/PNG export via Pillow

Example:
    >>> from src.whitted.preview import save_ppm
    >>> from src.whitted.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(1024, 768)
    >>> renderer.render()
    >>> save_ppm(renderer.get_image_numpy(), "out.ppm")
"""

from src.whitted.preview.display import (
    ToneMapMethod,
    process_image_for_output,
    show_preview,
    tone_map_exposure,
    tone_map_max_channel,
    tone_map_reinhard,
)
from src.whitted.preview.export import (
    image_to_uint8,
    quantize,
    save_png,
    save_ppm,
    write_ppm,
)

__all__ = [
    # Display
    "show_preview",
    "tone_map_max_channel",
    "tone_map_reinhard",
    "tone_map_exposure",
    "process_image_for_output",
    "ToneMapMethod",
    # Export
    "quantize",
    "image_to_uint8",
    "write_ppm",
    "save_ppm",
    "save_png",
]
