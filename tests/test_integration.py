"""End-to-end tests: scene to framebuffer to PPM.

These render small images of real scenes and check properties that hold
regardless of resolution.
"""

import io

import numpy as np

BACKGROUND = (0.2, 0.7, 0.8)


class TestReferenceScene:
    """Render the four-sphere reference scene at low resolution."""

    def _render(self, width=64, height=48):
        from src.whitted.camera.pinhole import setup_camera
        from src.whitted.core.renderer import Renderer
        from src.whitted.scene.default_scene import create_default_scene

        _, camera = create_default_scene()
        setup_camera(camera)
        renderer = Renderer(width, height)
        renderer.render()
        return renderer

    def test_image_is_finite_and_non_negative(self):
        image = self._render().get_image_numpy()

        assert np.all(np.isfinite(image))
        assert np.all(image >= 0.0)

    def test_corners_show_background(self):
        image = self._render().get_image_numpy()

        for j, i in [(0, 0), (0, 63), (47, 0), (47, 63)]:
            assert np.allclose(image[j, i], BACKGROUND, atol=1e-6)

    def test_scene_is_not_all_background(self):
        image = self._render().get_image_numpy()

        differs = np.any(np.abs(image - np.array(BACKGROUND, dtype=np.float32)) > 1e-3, axis=-1)
        assert differs.sum() > 0.05 * differs.size

    def test_ppm_output(self):
        from src.whitted.preview.export import write_ppm

        renderer = self._render(32, 24)
        sink = io.BytesIO()
        write_ppm(renderer.get_image_numpy(), sink)

        data = sink.getvalue()
        header = b"P6\n32 24\n255\n"
        assert data.startswith(header)
        assert len(data) == len(header) + 32 * 24 * 3


class TestSingleSphere:
    """A lone matte sphere lit from the camera position."""

    def test_pixel_facing_the_light_shows_diffuse_color(self):
        """Where the normal points back at the light the Lambert factor is 1."""
        from src.whitted.camera.pinhole import setup_camera
        from src.whitted.core.renderer import render_pixel, setup_render_target
        from src.whitted.materials.phong import MaterialParams
        from src.whitted.scene.default_scene import create_single_sphere_scene

        matte = MaterialParams(1.0, (1.0, 0.0, 0.0, 0.0), (0.4, 0.4, 0.3), 50.0)
        _, camera = create_single_sphere_scene(
            center=(-3.0, 0.0, 16.0),
            radius=2.0,
            material=matte,
            lights=(((0.0, 0.0, 0.0), 1.0),),
        )
        setup_camera(camera)
        setup_render_target(1024, 768)

        # The sphere center projects to x = -96, y = 0 on the image plane at z = 512
        color = render_pixel(415, 383)
        assert np.allclose(color, (0.4, 0.4, 0.3), atol=1e-3)

    def test_pixel_away_from_sphere_is_background(self):
        from src.whitted.camera.pinhole import setup_camera
        from src.whitted.core.renderer import render_pixel, setup_render_target
        from src.whitted.scene.default_scene import create_single_sphere_scene

        _, camera = create_single_sphere_scene()
        setup_camera(camera)
        setup_render_target(1024, 768)

        assert np.allclose(render_pixel(900, 100), BACKGROUND, atol=1e-6)
