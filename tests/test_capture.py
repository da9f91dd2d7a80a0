"""Tests for headless session capture to GIF."""

import random

import pytest
from PIL import Image

from heartwall.canvas import Canvas
from heartwall.capture import canvas_to_image, record_session, save_gif
from heartwall.clock import FrameClock
from heartwall.wall import HeartWall


class TestCanvasToImage:
    def test_full_size(self):
        canvas = Canvas(8, 4)
        canvas.set(1, 2, (10, 20, 30))
        img = canvas_to_image(canvas)
        assert img.size == (8, 4)
        assert img.getpixel((1, 2)) == (10, 20, 30)

    def test_scaled(self):
        assert canvas_to_image(Canvas(100, 60), scale=0.5).size == (50, 30)


class TestRecordSession:
    def test_records_until_halo_finishes(self, small_config, tmp_path):
        wall = HeartWall(640, 480, config=small_config, clock=FrameClock(),
                         rng=random.Random(3))
        frames = record_session(wall, fps=60, every=8, max_seconds=30, scale=0.25)

        assert frames
        assert all(f.size == (160, 120) for f in frames)
        assert wall.completed
        assert wall.particles is not None and wall.particles.disposed
        assert wall.clock.pending() == 0

        out = save_gif(frames, tmp_path / "wall.gif", frame_ms=133)
        assert out.exists()
        with Image.open(out) as img:
            assert img.format == "GIF"

    def test_stops_at_time_limit(self, config, tmp_path):
        wall = HeartWall(640, 480, config=config, clock=FrameClock(),
                         rng=random.Random(3))
        frames = record_session(wall, fps=60, every=30, max_seconds=1, scale=0.1)
        assert len(frames) == 2
        assert not wall.completed
        assert wall.clock.pending() == 0

    def test_save_without_frames(self, tmp_path):
        with pytest.raises(ValueError):
            save_gif([], tmp_path / "empty.gif", frame_ms=100)
