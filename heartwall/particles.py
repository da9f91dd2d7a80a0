"""Particle halo shown around the finished heart.

Particles sit just outside the outer edge of each card, pushed away from the
heart's center. They appear as a wave that starts above the heart and spreads
down and outward, fade in, breathe for a while, fade out, and once the last one
is gone the system tears itself down.

All timing is in frames (one `update()` per frame), not milliseconds.
"""

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from heartwall.canvas import Layer
from heartwall.clock import FrameClock
from heartwall.config import DeviceProfile, WallConfig

# (left, top, width, height) of a rendered card
Box = tuple[float, float, float, float]

_EPSILON = 1e-6


def ease_in_out_cubic(t: float) -> float:
    return 4 * t * t * t if t < 0.5 else 1 - (-2 * t + 2) ** 3 / 2


def ease_in_quad(t: float) -> float:
    return t * t


class ParticleStage(Enum):
    PENDING = "pending"
    FADING_IN = "fading_in"
    STEADY = "steady"
    FADING_OUT = "fading_out"
    DEAD = "dead"


@dataclass
class Particle:
    x: float
    y: float
    base_x: float
    base_y: float
    size: float
    target_opacity: float
    phase: float
    pulse_speed: float
    color: tuple[int, int, int, float]
    glow_size: float
    max_lifetime: float
    wave_delay: float
    opacity: float = 0.0
    current_size: Optional[float] = None
    lifetime: float = 0
    has_started: bool = False
    dead: bool = False

    def rgba(self, opacity: Optional[float] = None) -> tuple[int, int, int, float]:
        """The particle's colour with its alpha replaced by `opacity` (default: current)."""
        r, g, b, _ = self.color
        return (r, g, b, self.opacity if opacity is None else opacity)

    def stage(self, fade_in_frames: int = 60, fade_out_frames: int = 80) -> ParticleStage:
        if self.dead:
            return ParticleStage.DEAD
        if not self.has_started:
            return ParticleStage.PENDING
        if self.lifetime < fade_in_frames:
            return ParticleStage.FADING_IN
        if self.lifetime < self.max_lifetime:
            return ParticleStage.STEADY
        if self.lifetime - self.max_lifetime < fade_out_frames:
            return ParticleStage.FADING_OUT
        return ParticleStage.DEAD

    def update(self, fade_in_frames: int = 60, fade_out_frames: int = 80,
               pulse_amplitude: float = 0.15) -> bool:
        """Advance one frame. Returns True while the particle is still alive."""
        if self.dead:
            return False
        if not self.has_started:
            if self.lifetime >= self.wave_delay:
                self.has_started = True
                self.lifetime = 0
            else:
                self.lifetime += 1
                return True

        self.lifetime += 1
        if self.lifetime < fade_in_frames:
            self.opacity = ease_in_out_cubic(self.lifetime / fade_in_frames) * self.target_opacity
            return True
        if self.lifetime < self.max_lifetime:
            self.phase += self.pulse_speed
            self.current_size = self.size * (1 + pulse_amplitude * math.sin(self.phase))
            return True
        progress = (self.lifetime - self.max_lifetime) / fade_out_frames
        if progress < 1:
            self.opacity = self.target_opacity * (1 - ease_in_quad(progress))
            return True
        self.opacity = 0.0
        self.dead = True
        return False


def wave_origin(boxes: list[Box], margin: float) -> tuple[float, float]:
    """Point centered above the cards' bounding box, `margin` past its top edge."""
    min_x = min(b[0] for b in boxes)
    max_x = max(b[0] + b[2] for b in boxes)
    min_y = min(b[1] for b in boxes)
    return ((min_x + max_x) / 2, min_y - margin)


class ParticleSystem:
    """One halo: generates particles from card boxes and animates them to the end.

    Args:
        clock: Frame source for the animation loop.
        config: Lifecycle timings and the wave coefficient.
        profile: Device profile (particle count, margin and size ranges).
        palette: Halo colours as (r, g, b, alpha) tuples.
        rng: Random source for per-particle attributes.
    """

    def __init__(self, clock: FrameClock, config: WallConfig, profile: DeviceProfile,
                 palette: list[tuple[int, int, int, float]], rng: Optional[random.Random] = None):
        self.clock = clock
        self.config = config
        self.profile = profile
        self.palette = palette
        self.rng = rng or random.Random()
        self.particles: list[Particle] = []
        self.layer: Optional[Layer] = None
        self.frames = 0
        self.disposed = False
        self._frame_handle: Optional[int] = None

    @property
    def active(self) -> bool:
        return self.layer is not None and not self.disposed

    def generate(self, boxes: Iterable[Box]) -> list[Particle]:
        """Build the particle set from the current card rectangles."""
        boxes = list(boxes)
        if not boxes:
            return []
        rng = self.rng
        profile = self.profile
        margin = profile.particle_margin

        min_x = min(b[0] for b in boxes)
        max_x = max(b[0] + b[2] for b in boxes)
        min_y = min(b[1] for b in boxes)
        max_y = max(b[1] + b[3] for b in boxes)
        center_x = (min_x + max_x) / 2
        center_y = (min_y + max_y) / 2
        origin_x, origin_y = wave_origin(boxes, margin)

        step = max(1, len(boxes) // max(1, profile.particle_count))
        particles = []
        for left, top, width, height in boxes[::step]:
            card_x = left + width / 2
            card_y = top + height / 2
            dx = card_x - center_x
            dy = card_y - center_y
            distance = math.hypot(dx, dy)
            if distance == 0:
                continue
            nx = dx / distance
            ny = dy / distance
            to_vertical_edge = (width / 2) / max(abs(nx), _EPSILON)
            to_horizontal_edge = (height / 2) / max(abs(ny), _EPSILON)
            edge = min(to_vertical_edge, to_horizontal_edge)
            x = card_x + nx * (edge + margin)
            y = card_y + ny * (edge + margin)

            particles.append(Particle(
                x=x,
                y=y,
                base_x=x,
                base_y=y,
                size=rng.random() * profile.particle_size_spread + profile.particle_size_min,
                target_opacity=rng.random() * 0.6 + 0.4,
                phase=rng.random() * math.pi * 2,
                pulse_speed=rng.random() * 0.02 + 0.01,
                color=rng.choice(self.palette),
                glow_size=rng.random() * profile.glow_size_spread + profile.glow_size_min,
                max_lifetime=rng.random() * self.config.lifetime_spread + self.config.lifetime_min,
                wave_delay=math.hypot(x - origin_x, y - origin_y) * self.config.wave_coefficient,
            ))
        self.particles.extend(particles)
        return particles

    def frame_budget(self) -> int:
        """Upper bound on frames until every current particle is dead."""
        if not self.particles:
            return 0
        cfg = self.config
        longest = max(math.ceil(p.wave_delay) + max(p.max_lifetime, cfg.fade_in_frames)
                      for p in self.particles)
        return int(longest) + cfg.fade_out_frames + 2

    def show(self, boxes: Iterable[Box], width: int, height: int) -> int:
        """Create the overlay, generate particles and start animating.

        Returns the number of particles; with none the system disposes at once.
        """
        if self.disposed:
            return 0
        self.layer = Layer(width, height)
        count = len(self.generate(boxes))
        if self.config.debug:
            print(f"[halo] {count} particles on {width}x{height}")
        if count == 0:
            self.dispose()
            return 0
        self._frame_handle = self.clock.on_next_frame(self._on_frame)
        return count

    def update(self) -> bool:
        """Advance every particle one frame. Returns True while any is alive."""
        cfg = self.config
        alive = False
        for particle in self.particles:
            if particle.update(cfg.fade_in_frames, cfg.fade_out_frames, cfg.pulse_amplitude):
                alive = True
        self.frames += 1
        return alive

    def draw(self, layer: Layer) -> None:
        for p in self.particles:
            if p.opacity <= 0:
                continue
            rgb = p.color[:3]
            layer.glow(p.x, p.y, p.glow_size, rgb, p.opacity)
            layer.disc(p.x, p.y, p.current_size or p.size, rgb, p.opacity)

    def _on_frame(self, now: float) -> None:
        self._frame_handle = None
        if self.layer is None:
            return
        self.layer.clear()
        alive = self.update()
        self.draw(self.layer)
        if alive:
            self._frame_handle = self.clock.on_next_frame(self._on_frame)
        else:
            if self.config.debug:
                print(f"[halo] Finished after {self.frames} frames")
            self.dispose()

    def dispose(self) -> None:
        """Stop animating and release everything. Safe to call repeatedly."""
        if self._frame_handle is not None:
            self.clock.cancel(self._frame_handle)
            self._frame_handle = None
        self.particles = []
        self.layer = None
        self.disposed = True
