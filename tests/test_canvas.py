"""Tests for Canvas drawing and the translucent Layer."""

import numpy as np
import pytest

from heartwall.canvas import GLYPH_HEIGHT, Canvas, Layer, text_width


class TestCanvasPixels:
    def test_set_and_get(self):
        c = Canvas(10, 8)
        c.set(3, 2, (1, 2, 3))
        assert c.get(3, 2) == (1, 2, 3)
        assert c.buffer.shape == (8, 10, 3)

    def test_out_of_bounds_is_ignored(self):
        c = Canvas(4, 4)
        c.set(-1, 0, (255, 0, 0))
        c.set(4, 4, (255, 0, 0))
        assert c.get(99, 99) == (0, 0, 0)
        assert not c.buffer.any()

    def test_clear(self):
        c = Canvas(4, 3)
        c.clear((9, 8, 7))
        assert c.get(0, 0) == (9, 8, 7)
        assert c.get(3, 2) == (9, 8, 7)

    def test_resize_drops_contents(self):
        c = Canvas(4, 4)
        c.clear((50, 50, 50))
        c.resize(6, 2)
        assert (c.width, c.height) == (6, 2)
        assert c.buffer.shape == (2, 6, 3)
        assert c.get(0, 0) == (0, 0, 0)

    def test_get_buffer_is_packed_rgb(self):
        c = Canvas(3, 2)
        assert len(c.get_buffer()) == 3 * 2 * 3


class TestRect:
    def test_filled_rect_is_clipped(self):
        c = Canvas(10, 10)
        c.rect(-5, -5, 8, 8, (255, 255, 255))
        assert c.get(0, 0) == (255, 255, 255)
        assert c.get(2, 2) == (255, 255, 255)
        assert c.get(3, 3) == (0, 0, 0)

    def test_outline_leaves_inside_empty(self):
        c = Canvas(10, 10)
        c.rect(1, 1, 6, 6, (0, 255, 0), filled=False)
        assert c.get(1, 1) == (0, 255, 0)
        assert c.get(6, 6) == (0, 255, 0)
        assert c.get(3, 3) == (0, 0, 0)

    def test_fully_offscreen_rect_draws_nothing(self):
        c = Canvas(10, 10)
        c.rect(20, 20, 5, 5, (255, 0, 0))
        c.rect(0, 0, 0, 5, (255, 0, 0))
        assert not c.buffer.any()


class TestText:
    def test_text_width(self):
        assert text_width("") == 0
        assert text_width("A") == 3
        assert text_width("AB") == 7
        assert text_width("AB", scale=2) == 14

    def test_draws_within_its_box(self):
        c = Canvas(40, 20)
        c.text(2, 3, "HI", (255, 255, 255), scale=2)
        ys, xs = np.nonzero(c.buffer[:, :, 0])
        assert xs.min() >= 2 and xs.max() < 2 + text_width("HI", 2)
        assert ys.min() >= 3 and ys.max() < 3 + GLYPH_HEIGHT * 2

    def test_lowercase_and_unknown_glyphs(self):
        upper = Canvas(40, 10)
        upper.text(0, 0, "OK", (255, 255, 255))
        lower = Canvas(40, 10)
        lower.text(0, 0, "ok", (255, 255, 255))
        assert np.array_equal(upper.buffer, lower.buffer)

        blank = Canvas(20, 10)
        blank.text(0, 0, "~~", (255, 255, 255))
        assert not blank.buffer.any()


class TestColorHelpers:
    def test_hex(self):
        assert Canvas.hex(0xFF8000) == (255, 128, 0)

    def test_rgb_clamps(self):
        assert Canvas.rgb(-5, 300, 10) == (0, 255, 10)

    def test_shade(self):
        assert Canvas.shade((100, 200, 50), 0.5) == (50, 100, 25)
        assert Canvas.shade((200, 200, 200), 2.0) == (255, 255, 255)

    def test_hsv(self):
        assert Canvas.hsv(0) == (255, 0, 0)
        assert Canvas.hsv(120) == (0, 255, 0)


class TestLayer:
    def test_glow_fades_with_distance(self):
        layer = Layer(60, 60)
        layer.glow(30, 30, 20, (255, 255, 255), 1.0)
        center = layer.pixels[30, 30, 3]
        mid = layer.pixels[30, 40, 3]
        assert center > mid > 0
        assert layer.pixels[30, 55, 3] == 0.0

    def test_disc_is_solid_inside(self):
        layer = Layer(20, 20)
        layer.disc(10, 10, 4, (255, 0, 0), 0.8)
        assert layer.pixels[10, 10, 3] == pytest.approx(0.8)
        assert layer.pixels[10, 10, 0] == pytest.approx(255 * 0.8)
        assert layer.pixels[0, 0, 3] == 0.0

    def test_stacking_never_exceeds_opaque(self):
        layer = Layer(20, 20)
        for _ in range(10):
            layer.disc(10, 10, 5, (255, 255, 255), 0.9)
        assert layer.max_alpha() <= 1.0

    def test_offscreen_shapes_are_ignored(self):
        layer = Layer(10, 10)
        layer.glow(-100, -100, 5, (255, 255, 255), 1.0)
        layer.disc(10, 10, 0, (255, 255, 255), 1.0)
        assert layer.max_alpha() == 0.0

    def test_clear(self):
        layer = Layer(10, 10)
        layer.disc(5, 5, 3, (255, 255, 255), 1.0)
        layer.clear()
        assert layer.max_alpha() == 0.0


class TestComposite:
    def test_blends_premultiplied_overlay(self):
        c = Canvas(2, 1)
        c.clear((0, 0, 100))
        layer = Layer(2, 1)
        layer.pixels[0, 0] = (100.0, 0.0, 0.0, 0.5)
        c.composite(layer)
        assert c.get(0, 0) == (100, 0, 50)
        assert c.get(1, 0) == (0, 0, 100)

    def test_size_mismatch_raises(self):
        with pytest.raises(ValueError, match="layer is"):
            Canvas(4, 4).composite(Layer(5, 4))
