"""Heart wall: message cards that settle into a heart, then a particle halo."""

from heartwall.canvas import Canvas, Layer
from heartwall.clock import FrameClock
from heartwall.config import WallConfig, load_config
from heartwall.wall import HeartWall
from heartwall.run import run

__all__ = ["Canvas", "Layer", "FrameClock", "HeartWall", "WallConfig", "load_config", "run"]
