"""Unit tests for point light storage."""

import pytest
import taichi as ti


class TestLights:
    """Tests for adding, reading and clearing lights."""

    def test_add_light_returns_index(self):
        from src.whitted.scene.lights import add_light, get_light_count

        assert add_light((-20.0, 20.0, -20.0), 1.5) == 0
        assert add_light((30.0, 50.0, 25.0), 1.8) == 1
        assert get_light_count() == 2

    def test_light_readback_in_kernel(self):
        from src.whitted.scene.lights import add_light, get_light_intensity, get_light_position

        add_light((30.0, 20.0, -30.0), 1.7)

        position = ti.field(dtype=ti.math.vec3, shape=())
        intensity = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            position[None] = get_light_position(0)
            intensity[None] = get_light_intensity(0)

        test_kernel()
        p = position[None]
        assert abs(p[0] - 30.0) < 1e-5
        assert abs(p[1] - 20.0) < 1e-5
        assert abs(p[2] + 30.0) < 1e-5
        assert abs(intensity[None] - 1.7) < 1e-6

    def test_clear_lights(self):
        from src.whitted.scene.lights import add_light, clear_lights, get_light_count

        add_light((0.0, 0.0, 0.0), 1.0)
        clear_lights()
        assert get_light_count() == 0

    def test_rejects_non_positive_intensity(self):
        from src.whitted.scene.lights import add_light

        with pytest.raises(ValueError, match="intensity must be positive"):
            add_light((0.0, 0.0, 0.0), 0.0)

    def test_capacity_exceeded(self):
        from src.whitted.scene.lights import MAX_LIGHTS, add_light

        for i in range(MAX_LIGHTS):
            add_light((float(i), 0.0, 0.0), 1.0)

        with pytest.raises(RuntimeError, match="Maximum number of lights"):
            add_light((0.0, 0.0, 0.0), 1.0)
