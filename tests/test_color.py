"""Tests for Color and Pixel value objects."""

import numpy as np
import pytest

from imconv import Color, Pixel
from imconv.constants import UNASSIGNED_INDEX


class TestDistance:
    """Squared distance between colours."""

    def test_distance_to_self_is_zero(self):
        rng = np.random.default_rng(7)
        for r, g, b in rng.random((20, 3)):
            c = Color(r, g, b)
            assert c.distance_from_color(c) == 0.0

    def test_distance_is_squared(self):
        """No square root: (1,1,0) from black is 2, not sqrt(2)."""
        assert Color(0.0, 0.0, 0.0).distance_from_color(Color(1.0, 1.0, 0.0)) == 2.0

    def test_distance_is_symmetric(self):
        a = Color(0.1, 0.7, 0.3)
        b = Color(0.9, 0.2, 0.4)
        assert a.distance_from_color(b) == pytest.approx(b.distance_from_color(a))


class TestGrayAndColorComponents:
    """Min-decomposition into gray floor and chromatic residual."""

    def test_known_split(self):
        gray, col = Color(0.8, 0.3, 0.5).get_gray_and_color_components()
        assert gray.as_tuple() == (0.3, 0.3, 0.3)
        assert col.r == pytest.approx(0.5)
        assert col.g == 0.0
        assert col.b == pytest.approx(0.2)

    def test_residual_has_zero_channel_and_sums_back(self):
        rng = np.random.default_rng(11)
        for r, g, b in rng.random((50, 3)):
            c = Color(r, g, b)
            gray, col = c.get_gray_and_color_components()
            assert min(col.as_tuple()) == 0.0
            for total, part_g, part_c in zip(c.as_tuple(), gray.as_tuple(), col.as_tuple()):
                assert part_g + part_c == pytest.approx(total)

    def test_gray_input_has_empty_residual(self):
        gray, col = Color(0.4, 0.4, 0.4).get_gray_and_color_components()
        assert gray.as_tuple() == (0.4, 0.4, 0.4)
        assert col.as_tuple() == (0.0, 0.0, 0.0)


class TestCopies:
    """Value-copy helpers."""

    def test_from_color_copies_values(self):
        src = Color(0.1, 0.2, 0.3)
        dst = Color()
        dst.from_color(src)
        src.set(0.9, 0.9, 0.9)
        assert dst.as_tuple() == (0.1, 0.2, 0.3)

    def test_from_pixel_ignores_palette_index(self):
        p = Pixel(0.5, 0.25, 0.75, palette_index=4)
        c = Color()
        c.from_pixel(p)
        assert c == Color(0.5, 0.25, 0.75)

    def test_copy_is_independent(self):
        a = Pixel(0.1, 0.2, 0.3, 2)
        b = a.copy()
        b.r = 1.0
        assert a.r == 0.1
        assert b.palette_index == 2


class TestConversions:
    def test_from_u8(self):
        c = Color.from_u8(255, 0, 51)
        assert c.r == 1.0
        assert c.g == 0.0
        assert c.b == pytest.approx(0.2)

    def test_to_u8_truncates_and_clips(self):
        assert Color(1.0, 0.5, 0.0).to_u8() == (255, 127, 0)
        assert Color(1.5, -0.2, 0.999).to_u8() == (255, 0, 254)

    def test_from_array(self):
        assert Color.from_array(np.array([0.25, 0.5, 0.75])) == Color(0.25, 0.5, 0.75)

    def test_is_gray(self):
        assert Color(0.2, 0.2, 0.2).is_gray
        assert not Color(0.2, 0.2, 0.3).is_gray


class TestPixel:
    def test_default_index_is_unassigned(self):
        p = Pixel(0.1, 0.2, 0.3)
        assert p.palette_index == UNASSIGNED_INDEX
        assert not p.is_assigned

    def test_pixel_is_a_color(self):
        p = Pixel(1.0, 0.0, 0.0, 3)
        assert isinstance(p, Color)
        assert p.distance_from_color(Color(1.0, 0.0, 0.0)) == 0.0
        assert p.is_assigned
