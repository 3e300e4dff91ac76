"""Framebuffer and rendering kernels.

Every pixel is independent: the kernel's outermost loop runs over pixel
coordinates, which Taichi executes in parallel. Each framebuffer cell is
written exactly once per render and the scene fields are only read, so no
synchronization is needed beyond the end of the kernel.

The image can be rendered in bands of rows so callers can report progress
between bands. The result does not depend on the band size.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.camera.pinhole import setup_camera
    >>> from src.whitted.core.renderer import Renderer
    >>> from src.whitted.scene.default_scene import create_default_scene
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
    >>> renderer = Renderer(1024, 768)
    >>> renderer.render()
    >>> renderer.save_ppm("out.ppm")
"""

from collections.abc import Callable, Generator
from typing import Any

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.whitted.camera.pinhole import get_ray
from src.whitted.core.shading import cast_ray
from src.whitted.preview.display import ToneMapMethod

vec3 = tm.vec3

# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

# =============================================================================
# Render Target (Framebuffer)
# =============================================================================

# Preallocated to avoid kernel recompilation when the size changes
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Indexed [i, j] with j = 0 the top row
_framebuffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image size and clear the framebuffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Zero the framebuffer."""
    _framebuffer.fill(0.0)


def reset_render_target() -> None:
    """Forget the render target so it must be set up again."""
    _render_target_initialized[None] = 0
    clear_render_target()


def get_image_dimensions() -> tuple[int, int]:
    """Get the active (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_framebuffer() -> "ti.MatrixField":
    """Get the raw framebuffer field.

    Note: This returns the full preallocated buffer. Use get_image_dimensions()
    to determine the active region.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return _framebuffer


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(width: ti.i32, height: ti.i32, row_start: ti.i32, row_end: ti.i32):
    """Shade every pixel in rows [row_start, row_end)."""
    for i, j in ti.ndrange(width, (row_start, row_end)):
        ray = get_ray(i, j, width, height)
        _framebuffer[i, j] = cast_ray(ray.origin, ray.direction, 0)


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    ray = get_ray(pixel_i, pixel_j, width, height)
    return cast_ray(ray.origin, ray.direction, 0)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(row_start: int, row_end: int) -> None:
    """Render a band of rows into the framebuffer.

    Args:
        row_start: First row (inclusive, 0 = top).
        row_end: Last row (exclusive).

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the band lies outside the image.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    if not 0 <= row_start <= row_end <= height:
        raise ValueError(f"Invalid row band [{row_start}, {row_end}) for height {height}")
    if row_start == row_end:
        return
    _render_rows(width, height, row_start, row_end)


def render_image() -> None:
    """Render the whole image in one kernel launch.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    _render_rows(width, height, 0, height)


def render_pixel(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Shade a single pixel without touching the framebuffer.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B), unclamped.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    color = _render_single_pixel(pixel_i, pixel_j, width, height)
    return (float(color[0]), float(color[1]), float(color[2]))


def get_framebuffer_numpy() -> npt.NDArray[np.float32]:
    """Get the framebuffer as a NumPy array.

    Values are the raw, unclamped shading results.

    Returns:
        Array of shape (height, width, 3), row-major with the top row first.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()

    full_image = _framebuffer.to_numpy()
    image = full_image[:width, :height, :]

    # (width, height, 3) -> (height, width, 3)
    image = np.transpose(image, (1, 0, 2))
    return np.ascontiguousarray(image, dtype=np.float32)


class Renderer:
    """Renders the current scene into a framebuffer.

    Wraps the module-level render target with a size, band-wise rendering
    with progress reporting, and output helpers.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).

        Raises:
            ValueError: If dimensions are invalid.
        """
        self._width = width
        self._height = height
        self._rows_done = 0
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def rows_done(self) -> int:
        """Number of rows rendered since the last reset."""
        return self._rows_done

    @property
    def is_complete(self) -> bool:
        return self._rows_done >= self._height

    def reset(self) -> None:
        """Clear the framebuffer, keeping the image size."""
        clear_render_target()
        self._rows_done = 0

    def resize(self, width: int, height: int) -> None:
        """Change the image size and clear the framebuffer."""
        setup_render_target(width, height)
        self._width = width
        self._height = height
        self._rows_done = 0

    def render(
        self,
        rows_per_batch: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render the full image.

        Args:
            rows_per_batch: Rows per kernel launch. None renders the image in
                one launch.
            callback: Optional function called after each batch with
                (rows_done, total_rows).

        Raises:
            ValueError: If rows_per_batch is not positive.
        """
        for rows_done, total in self.render_progressive(rows_per_batch):
            if callback is not None:
                callback(rows_done, total)

    def render_progressive(
        self,
        rows_per_batch: int | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render band by band, yielding progress after each band.

        Rendering restarts from the top row.

        Args:
            rows_per_batch: Rows per kernel launch. None renders the image in
                one launch.

        Yields:
            Tuple of (rows_done, total_rows).

        Raises:
            ValueError: If rows_per_batch is not positive.
        """
        if rows_per_batch is None:
            rows_per_batch = self._height
        if rows_per_batch <= 0:
            raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")

        # Keep the module-level target in sync in case another renderer resized it
        if get_image_dimensions() != (self._width, self._height):
            setup_render_target(self._width, self._height)

        self._rows_done = 0
        while self._rows_done < self._height:
            row_end = min(self._rows_done + rows_per_batch, self._height)
            render_rows(self._rows_done, row_end)
            self._rows_done = row_end
            yield (self._rows_done, self._height)

    def get_framebuffer(self) -> Any:
        """Get the raw Taichi framebuffer field (full preallocated size)."""
        return get_framebuffer()

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the raw (not tone mapped) image, shape (height, width, 3)."""
        return get_framebuffer_numpy()

    def get_image_uint8(
        self, tone_map: ToneMapMethod = "max", exposure: float = 1.0
    ) -> npt.NDArray[np.uint8]:
        """Get the tone mapped, quantized 8-bit image."""
        from src.whitted.preview.export import image_to_uint8

        return image_to_uint8(self.get_image_numpy(), tone_map=tone_map, exposure=exposure)

    def save_ppm(
        self, filepath: str, tone_map: ToneMapMethod = "max", exposure: float = 1.0
    ) -> None:
        """Write the image as a binary PPM (P6) file.

        Args:
            filepath: Output path.
            tone_map: Tone mapping method applied before quantization.
            exposure: Exposure value for exposure tone mapping.
        """
        from src.whitted.preview.export import save_ppm

        save_ppm(self.get_image_numpy(), filepath, tone_map=tone_map, exposure=exposure)

    def save_png(
        self, filepath: str, tone_map: ToneMapMethod = "max", exposure: float = 1.0
    ) -> None:
        from src.whitted.preview.export import save_png

        save_png(self.get_image_numpy(), filepath, tone_map=tone_map, exposure=exposure)

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"rows_done={self.rows_done})"
        )
