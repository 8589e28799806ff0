"""Tests for image export (quantization, PPM and Pillow output)."""

import io

import numpy as np
import pytest
from PIL import Image as PILImage


def _single_pixel(value, count=1):
    sums = np.full((1, 1, 3), value, dtype=np.float32)
    counts = np.full((1, 1), count, dtype=np.int32)
    return sums, counts


class TestToUint8:
    def test_unit_average_becomes_255(self):
        from src.pathtracer.output.export import to_uint8

        assert to_uint8(*_single_pixel(4.0, 4))[0, 0].tolist() == [255, 255, 255]

    def test_gamma_two(self):
        """An average of 0.25 is stored as int(256 * 0.5) = 128."""
        from src.pathtracer.output.export import to_uint8

        assert to_uint8(*_single_pixel(0.5, 2))[0, 0].tolist() == [128, 128, 128]

    def test_overbright_is_clamped(self):
        from src.pathtracer.output.export import to_uint8

        assert to_uint8(*_single_pixel(100.0))[0, 0].tolist() == [255, 255, 255]

    def test_zero_count_is_black(self):
        from src.pathtracer.output.export import to_uint8

        assert to_uint8(*_single_pixel(3.0, 0))[0, 0].tolist() == [0, 0, 0]

    def test_negative_and_nan_are_black(self):
        from src.pathtracer.output.export import to_uint8

        sums = np.array([[[-1.0, np.nan, 0.0]]], dtype=np.float32)
        counts = np.ones((1, 1), dtype=np.int32)
        assert to_uint8(sums, counts)[0, 0].tolist() == [0, 0, 0]

    def test_shape_mismatch(self):
        from src.pathtracer.output.export import to_uint8

        with pytest.raises(ValueError):
            to_uint8(np.zeros((2, 3, 3)), np.ones((3, 2)))
        with pytest.raises(ValueError):
            to_uint8(np.zeros((2, 3)), np.ones((2, 3)))


class TestWritePPM:
    def test_header_and_pixels(self):
        from src.pathtracer.output.export import write_ppm

        sums = np.array(
            [
                [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]],
                [[0.25, 0.25, 0.25], [0.0, 0.0, 0.0], [1.0, 1.0, 1.0]],
            ],
            dtype=np.float32,
        )
        counts = np.ones((2, 3), dtype=np.int32)

        stream = io.StringIO()
        write_ppm(stream, sums, counts)

        assert stream.getvalue().splitlines() == [
            "P3",
            "3 2",
            "255",
            "255 0 0",
            "0 255 0",
            "0 0 255",
            "128 128 128",
            "0 0 0",
            "255 255 255",
        ]

    def test_save_ppm(self, tmp_path):
        from src.pathtracer.output.export import save_ppm

        path = tmp_path / "out.ppm"
        save_ppm(path, *_single_pixel(1.0))
        assert path.read_text() == "P3\n1 1\n255\n255 255 255\n"


class TestSavePNG:
    def test_png_matches_quantized_pixels(self, tmp_path):
        from src.pathtracer.output.export import save_png, to_uint8

        rng = np.random.default_rng(0)
        sums = rng.uniform(0.0, 2.0, size=(4, 5, 3)).astype(np.float32)
        counts = np.full((4, 5), 2, dtype=np.int32)

        path = tmp_path / "out.png"
        save_png(path, sums, counts)

        with PILImage.open(path) as img:
            assert img.mode == "RGB"
            assert img.size == (5, 4)
            assert np.array_equal(np.asarray(img), to_uint8(sums, counts))
