"""Tests for the output writer."""

import pytest
from PIL import Image as PILImage

from pgm_dither.core.dither import floyd_steinberg
from pgm_dither.core.image import Image
from pgm_dither.core.reader import decode_pgm, open_image
from pgm_dither.core.writer import encode_pgm, save_output, to_pil


def _make_dithered(width=8, height=6):
    img = Image(width, height, bytes((i * 7) % 256 for i in range(width * height)))
    return floyd_steinberg(img)


class TestEncodePgm:
    def test_exact_bytes(self):
        img = Image(3, 2, bytes([10, 20, 30, 40, 50, 60]))
        assert encode_pgm(img) == b"P5\n3 2\n255\n" + bytes([10, 20, 30, 40, 50, 60])

    def test_readable_by_decoder(self):
        img = _make_dithered(17, 3)
        assert decode_pgm(encode_pgm(img)) == img

    def test_readable_by_pillow(self, tmp_path):
        path = tmp_path / "out.pgm"
        path.write_bytes(encode_pgm(_make_dithered()))
        pil = PILImage.open(str(path))
        assert pil.size == (8, 6)
        assert pil.mode == "L"


class TestToPil:
    def test_mode_and_size(self):
        pil = to_pil(_make_dithered(5, 4))
        assert pil.mode == "L"
        assert pil.size == (5, 4)

    def test_pixels(self):
        img = Image(2, 2, bytes([0, 255, 255, 0]))
        pil = to_pil(img)
        assert pil.getpixel((1, 0)) == 255
        assert pil.getpixel((1, 1)) == 0


class TestSaveOutput:
    def test_save_pgm(self, tmp_path):
        img = _make_dithered()
        output = tmp_path / "result.pgm"
        save_output(img, output)
        assert open_image(output) == img

    @pytest.mark.parametrize(
        "name, fmt",
        [("out.png", "PNG"), ("out.bmp", "BMP"), ("out.gif", "GIF"), ("out.TIFF", "TIFF")],
    )
    def test_save_with_pillow(self, tmp_path, name, fmt):
        img = _make_dithered()
        output = tmp_path / name
        save_output(img, output)
        pil = PILImage.open(str(output))
        assert pil.format == fmt
        assert pil.size == (img.width, img.height)

    def test_png_pixels_survive(self, tmp_path):
        img = _make_dithered()
        output = tmp_path / "out.png"
        save_output(img, output)
        pil = PILImage.open(str(output)).convert("L")
        assert pil.tobytes() == img.pixels

    def test_unsupported_format(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported"):
            save_output(_make_dithered(), tmp_path / "out.jpg")
