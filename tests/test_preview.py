"""Tests for the preview module.

This module tests the preview/display and preview/export functionality including:
- Tone mapping functions (max channel, Reinhard, exposure)
- Quantization to bytes
- Binary PPM and PNG export

Note: Tests avoid displaying actual windows by not calling show_preview
in automated tests. The processing functions are tested directly.
"""

import io
import os
import tempfile

import numpy as np
import pytest
from PIL import Image as PILImage


class TestToneMapMaxChannel:
    """Test hue-preserving max-channel tone mapping."""

    def test_bright_pixel_is_rescaled(self):
        from src.whitted.preview.display import tone_map_max_channel

        image = np.array([[[2.0, 1.0, 0.0]]], dtype=np.float32)
        result = tone_map_max_channel(image)

        assert np.allclose(result, [[[1.0, 0.5, 0.0]]])

    def test_pixel_within_range_is_untouched(self):
        from src.whitted.preview.display import tone_map_max_channel

        image = np.array([[[0.2, 0.7, 0.8]]], dtype=np.float32)
        result = tone_map_max_channel(image)

        assert np.array_equal(result, image)

    def test_pixels_are_independent(self):
        """Each pixel is scaled by its own maximum."""
        from src.whitted.preview.display import tone_map_max_channel

        image = np.array([[[4.0, 2.0, 1.0], [0.5, 0.5, 0.5]]], dtype=np.float32)
        result = tone_map_max_channel(image)

        assert np.allclose(result[0, 0], [1.0, 0.5, 0.25])
        assert np.allclose(result[0, 1], [0.5, 0.5, 0.5])

    def test_output_in_01_range(self):
        from src.whitted.preview.display import tone_map_max_channel

        rng = np.random.default_rng(42)
        image = rng.uniform(0.0, 20.0, size=(8, 8, 3)).astype(np.float32)
        result = tone_map_max_channel(image)

        assert np.all(result >= 0.0)
        assert np.all(result <= 1.0)


class TestOtherToneMaps:
    """Test Reinhard and exposure operators and dispatch."""

    def test_reinhard(self):
        from src.whitted.preview.display import tone_map_reinhard

        image = np.full((2, 2, 3), 10.0, dtype=np.float32)
        assert np.allclose(tone_map_reinhard(image), 10.0 / 11.0, atol=1e-5)

    def test_exposure(self):
        from src.whitted.preview.display import tone_map_exposure

        image = np.ones((2, 2, 3), dtype=np.float32)
        assert np.allclose(tone_map_exposure(image, 2.0), 1.0 - np.exp(-2.0), atol=1e-5)

    def test_default_method_is_max(self):
        from src.whitted.preview.display import process_image_for_output

        image = np.array([[[2.0, 1.0, 0.0]]], dtype=np.float32)
        assert np.allclose(process_image_for_output(image), [[[1.0, 0.5, 0.0]]])

    def test_none_passes_through(self):
        from src.whitted.preview.display import process_image_for_output

        image = np.array([[[2.0, 1.0, 0.0]]], dtype=np.float32)
        assert np.array_equal(process_image_for_output(image, tone_map="none"), image)

    def test_unknown_method_raises(self):
        from src.whitted.preview.display import process_image_for_output

        with pytest.raises(ValueError, match="Unknown tone mapping"):
            process_image_for_output(np.zeros((1, 1, 3), dtype=np.float32), tone_map="bogus")


class TestQuantize:
    """Test conversion of [0, 1] channels to bytes."""

    def test_floor_not_round(self):
        from src.whitted.preview.export import quantize

        image = np.array([[[1.0, 0.999, 0.5]], [[0.0, 0.25, 0.004]]], dtype=np.float32)
        result = quantize(image)

        assert result.dtype == np.uint8
        assert result[0, 0].tolist() == [255, 254, 127]
        assert result[1, 0].tolist() == [0, 63, 1]

    def test_rejects_negative(self):
        from src.whitted.preview.export import quantize

        with pytest.raises(ValueError, match="negative"):
            quantize(np.array([[[-0.1, 0.0, 0.0]]], dtype=np.float32))

    def test_rejects_above_one(self):
        from src.whitted.preview.export import quantize

        with pytest.raises(ValueError, match="tone map it first"):
            quantize(np.array([[[1.5, 0.0, 0.0]]], dtype=np.float32))

    def test_image_to_uint8_tone_maps_first(self):
        from src.whitted.preview.export import image_to_uint8

        image = np.array([[[2.0, 1.0, 0.0]]], dtype=np.float32)
        assert image_to_uint8(image).tolist() == [[[255, 127, 0]]]


class TestPPMExport:
    """Test binary PPM output."""

    def test_exact_bytes(self):
        """Header, then pixels in row-major RGB order, top row first."""
        from src.whitted.preview.export import write_ppm

        image = np.array(
            [
                [[2.0, 1.0, 0.0], [0.5, 0.25, 1.0]],
                [[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]],
            ],
            dtype=np.float32,
        )
        sink = io.BytesIO()
        write_ppm(image, sink)

        expected = b"P6\n2 2\n255\n" + bytes(
            [255, 127, 0, 127, 63, 255, 0, 0, 0, 255, 255, 255]
        )
        assert sink.getvalue() == expected

    def test_save_ppm_file(self):
        from src.whitted.preview.export import save_ppm

        image = np.full((3, 5, 3), 0.5, dtype=np.float32)

        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = os.path.join(tmpdir, "test.ppm")
            save_ppm(image, filepath)

            assert os.path.exists(filepath)
            loaded = PILImage.open(filepath)
            assert loaded.size == (5, 3)
            assert np.array(loaded)[0, 0].tolist() == [127, 127, 127]


class TestPNGExport:
    """Test PNG output."""

    def test_save_png(self):
        from src.whitted.preview.export import save_png

        image = np.zeros((4, 6, 3), dtype=np.float32)
        image[0, 0] = [1.0, 0.0, 0.0]

        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = os.path.join(tmpdir, "test.png")
            save_png(image, filepath)

            loaded = np.array(PILImage.open(filepath))
            assert loaded.shape == (4, 6, 3)
            assert loaded[0, 0].tolist() == [255, 0, 0]

