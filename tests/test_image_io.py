"""Tests for the P6 pixel-map codec, the mono dump and the Pillow helpers."""

import io

import numpy as np
import pytest

from imconv import Color, Image, PPMFormatError
from imconv.image_io import (
    encode_ppm,
    is_image_file,
    load_image_rgb,
    quantize_to_u8,
    read_ppm,
    read_ppm_header,
    save_png,
    write_ppm,
    write_raw_mono,
)

FOUR_PIXELS = bytes([255, 0, 0, 0, 255, 0, 0, 0, 255, 255, 255, 255])


class TestReadPPM:
    def test_plain_header(self):
        rgb = read_ppm(io.BytesIO(b"P6 2 2 255\n" + FOUR_PIXELS))
        assert rgb.shape == (2, 2, 3)
        assert rgb.dtype == np.uint8
        assert rgb[1, 1].tolist() == [255, 255, 255]
        assert rgb[0, 1].tolist() == [0, 255, 0]

    def test_comment_and_whitespace_runs(self):
        data = b"P6\n# written by hand\n2   2\n\n255\n" + FOUR_PIXELS
        expected = read_ppm(io.BytesIO(b"P6 2 2 255\n" + FOUR_PIXELS))
        np.testing.assert_array_equal(read_ppm(io.BytesIO(data)), expected)

    def test_single_whitespace_byte_after_maxval(self):
        # first sample is 0x20 (a space) and must not be swallowed
        pixel = bytes([0x20, 0x0A, 0x09])
        rgb = read_ppm(io.BytesIO(b"P6 1 1 255 " + pixel))
        assert rgb[0, 0].tolist() == [0x20, 0x0A, 0x09]

    def test_wide_samples_keep_high_byte(self, capsys):
        samples = bytes([0x12, 0x34, 0xFF, 0xFF, 0x00, 0xFF])
        rgb = read_ppm(io.BytesIO(b"P6 1 1 65535\n" + samples))
        assert rgb[0, 0].tolist() == [0x12, 0xFF, 0x00]
        expected = "[warn] maxval 65535: keeping the high byte of each 16-bit sample\n"
        assert capsys.readouterr().out == expected

    def test_small_maxval_copied_raw(self):
        rgb = read_ppm(io.BytesIO(b"P6 1 1 15\n" + bytes([15, 7, 0])))
        assert rgb[0, 0].tolist() == [15, 7, 0]

    def test_header_fields(self):
        fh = io.BytesIO(b"P6 3 4 1023\n")
        assert read_ppm_header(fh) == (3, 4, 1023)

    @pytest.mark.parametrize(
        "data",
        [
            b"P3 1 1 255\n\x00\x00\x00",
            b"P6 1 1\n",
            b"P6 x 1 255\n\x00\x00\x00",
            b"P6 1 1 0\n\x00\x00\x00",
            b"P6 2 2 255\n\x00\x00\x00",
            b"P6 1 1 65535\n\x00\x00\x00",
            b"",
        ],
    )
    def test_malformed_input(self, data):
        with pytest.raises(PPMFormatError):
            read_ppm(io.BytesIO(data))

    def test_missing_file_fails_before_parsing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_ppm(tmp_path / "nope.ppm")
        with pytest.raises(FileNotFoundError):
            Image.from_ppm(tmp_path / "nope.ppm")

    def test_caller_file_left_open(self):
        fh = io.BytesIO(b"P6 2 2 255\n" + FOUR_PIXELS + b"trailing")
        read_ppm(fh)
        assert not fh.closed
        assert fh.read() == b"trailing"


class TestWritePPM:
    def test_header_and_payload(self):
        rgb = np.frombuffer(FOUR_PIXELS, dtype=np.uint8).reshape(2, 2, 3)
        assert encode_ppm(rgb) == b"P6 2 2 255\n" + FOUR_PIXELS

    def test_write_to_path(self, tmp_path):
        rgb = np.frombuffer(FOUR_PIXELS, dtype=np.uint8).reshape(2, 2, 3)
        path = tmp_path / "out.ppm"
        write_ppm(path, rgb)
        np.testing.assert_array_equal(read_ppm(path), rgb)

    def test_rejects_non_u8(self):
        with pytest.raises(TypeError):
            encode_ppm(np.zeros((1, 1, 3), dtype=np.float64))

    def test_quantize_truncates_and_clips(self):
        out = quantize_to_u8(np.array([1.0, 0.5, 0.0, 1.2, -0.1]))
        assert out.tolist() == [255, 127, 0, 255, 0]

    def test_wide_source_written_as_8_bit(self):
        samples = bytes([0xFF, 0x00, 0x00, 0xFF, 0xFF, 0x80])
        im = Image.from_ppm(io.BytesIO(b"P6 1 1 65535\n" + samples), boost=1.0)
        buf = io.BytesIO()
        im.write_ppm(buf)
        assert buf.getvalue() == b"P6 1 1 255\n" + bytes([255, 0, 255])


class TestImageRoundTrip:
    def test_encode_decode_within_quantization(self):
        rng = np.random.default_rng(12)
        src_u8 = rng.integers(0, 256, size=(6, 9, 3), dtype=np.uint8)
        im = Image.from_u8(src_u8, boost=1.0)

        buf = io.BytesIO()
        im.write_ppm(buf)
        buf.seek(0)
        back = Image.from_ppm(buf, boost=1.0)

        assert (back.width, back.height) == (9, 6)
        assert np.max(np.abs(back.rgb - im.rgb)) <= 1.0 / 255.0 + 1e-9

    def test_end_to_end_average(self, tmp_path):
        path = tmp_path / "four.ppm"
        path.write_bytes(b"P6\n2 2\n255\n" + FOUR_PIXELS)
        im = Image.from_ppm(path, boost=1.0)
        assert im.get_avg_color() == Color(0.5, 0.5, 0.5)

    def test_debug_logging(self, tmp_path, capsys):
        path = tmp_path / "four.ppm"
        path.write_bytes(b"P6 2 2 255\n" + FOUR_PIXELS)
        Image.from_ppm(path, boost=1.0, debug=True)
        assert "[debug] [ppm] Loaded: 2x2" in capsys.readouterr().out


class TestRawMono:
    def test_red_channel_dump(self):
        im = Image.from_raw(2, 2, FOUR_PIXELS)
        buf = io.BytesIO()
        im.write_raw_mono(buf)
        assert buf.getvalue() == bytes([255, 0, 0, 255])

    def test_rejects_colour_planes(self):
        with pytest.raises(TypeError):
            write_raw_mono(io.BytesIO(), np.zeros((2, 2, 3), dtype=np.uint8))


class TestPillowHelpers:
    def test_png_round_trip(self, tmp_path):
        rng = np.random.default_rng(13)
        rgb = rng.integers(0, 256, size=(5, 4, 3), dtype=np.uint8)
        path = save_png(tmp_path / "pic.bin", rgb)
        assert path.suffix == ".png"
        assert is_image_file(path)
        np.testing.assert_array_equal(load_image_rgb(path), rgb)

    def test_image_open_and_save(self, tmp_path):
        src = Image.from_raw(2, 2, FOUR_PIXELS)
        path = src.save_png(tmp_path / "four.png")
        im = Image.open(path, boost=1.0)
        assert (im.width, im.height) == (2, 2)
        assert im.get_avg_color() == Color(0.5, 0.5, 0.5)

    def test_non_image_file(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("not an image")
        assert not is_image_file(path)
