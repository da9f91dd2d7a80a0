"""Maps heart slots to pixel positions for the current viewport and card size."""

import math
import random
from dataclasses import dataclass
from typing import Iterable, Optional

from heartwall.config import WallConfig
from heartwall.geometry import Point, compute_heart_positions


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float
    mobile_breakpoint: int = 768

    @property
    def is_mobile(self) -> bool:
        return self.width < self.mobile_breakpoint


@dataclass
class RunningMetrics:
    """Running mean of measured card sizes."""

    width: float
    height: float
    sample_count: int = 0


@dataclass(frozen=True)
class LayoutGeometry:
    card_width: float
    card_height: float
    horizontal_margin: float
    vertical_margin: float
    scale: float
    center_offset_x: float
    center_offset_y: float
    vertical_offset_ratio: float
    vertical_delta: float


@dataclass(frozen=True)
class Placement:
    left: float
    top: float
    jitter_x: float = 0.0


class LayoutCalculator:
    """Owns the heart positions, the card-size running mean and the cached geometry.

    Every mutator calls `invalidate()`; `compute_geometry()` only recomputes
    when the cache is empty.
    """

    def __init__(self, config: WallConfig, viewport: Viewport, rng: Optional[random.Random] = None):
        self.config = config
        self.viewport = viewport
        self.mobile = viewport.is_mobile
        self.rng = rng or random.Random()
        self.positions: list[Point] = compute_heart_positions(config.num_points)
        self.metrics = self._default_metrics()
        self._cache: Optional[LayoutGeometry] = None

    @property
    def profile(self):
        return self.config.profile(self.mobile)

    def _default_metrics(self) -> RunningMetrics:
        profile = self.config.profile(self.mobile)
        return RunningMetrics(profile.card_width, profile.card_height, 0)

    def invalidate(self) -> None:
        self._cache = None

    @property
    def is_cached(self) -> bool:
        return self._cache is not None

    def record_measurement(self, width: float, height: float) -> None:
        """Fold one measured card size into the running mean."""
        if not (math.isfinite(width) and math.isfinite(height)):
            return
        m = self.metrics
        count = m.sample_count + 1
        m.width += (width - m.width) / count
        m.height += (height - m.height) / count
        m.sample_count = count
        self.invalidate()

    def rebase_metrics(self, sizes: Iterable[tuple[float, float]]) -> None:
        """Recompute the mean from every live card (after removals)."""
        sizes = list(sizes)
        if not sizes:
            self.metrics = self._default_metrics()
            self.invalidate()
            return
        avg_w = sum(w for w, _ in sizes) / len(sizes)
        avg_h = sum(h for _, h in sizes) / len(sizes)
        if math.isfinite(avg_w):
            self.metrics.width = avg_w
        if math.isfinite(avg_h):
            self.metrics.height = avg_h
        self.metrics.sample_count = len(sizes)
        self.invalidate()

    def set_viewport(self, viewport: Viewport) -> None:
        if viewport != self.viewport:
            self.viewport = viewport
            self.invalidate()

    def set_device_class(self, mobile: bool) -> bool:
        """Switch layouts. Returns True if the device class actually changed."""
        if mobile == self.mobile:
            return False
        self.mobile = mobile
        self.positions = compute_heart_positions(self.config.num_points)
        self.metrics = self._default_metrics()
        self.invalidate()
        return True

    def compute_geometry(self, viewport: Optional[Viewport] = None,
                         mobile: Optional[bool] = None) -> LayoutGeometry:
        if viewport is not None:
            self.set_viewport(viewport)
        if mobile is not None:
            self.set_device_class(mobile)
        if self._cache is not None:
            return self._cache

        profile = self.profile
        card_w = self.metrics.width if math.isfinite(self.metrics.width) else profile.card_width
        card_h = self.metrics.height if math.isfinite(self.metrics.height) else profile.card_height
        h_margin = profile.horizontal_margin
        v_margin = profile.vertical_margin
        offset_ratio = profile.vertical_offset_ratio
        view_w, view_h = self.viewport.width, self.viewport.height

        avail_w = max(view_w - card_w - h_margin * 2, 0)
        avail_h = max(view_h - card_h - v_margin * 2, 0)
        scale = min(avail_w, avail_h) * profile.scale_ratio

        center_x = h_margin + (avail_w - scale) / 2
        center_y = v_margin + (avail_h - scale) / 2

        # Shift so the gap above the top card equals the gap below the bottom one
        top_edge = center_y + offset_ratio * scale
        bottom_edge = center_y + (1 + offset_ratio) * scale + card_h
        delta = (view_h - bottom_edge - top_edge) / 2
        if not math.isfinite(delta):
            delta = 0.0

        self._cache = LayoutGeometry(
            card_width=card_w,
            card_height=card_h,
            horizontal_margin=h_margin,
            vertical_margin=v_margin,
            scale=scale,
            center_offset_x=center_x,
            center_offset_y=center_y,
            vertical_offset_ratio=offset_ratio,
            vertical_delta=delta,
        )
        return self._cache

    def place_slot(self, index: int, geometry: Optional[LayoutGeometry] = None,
                   jitter: bool = True) -> Placement:
        """Top-left corner for slot `index`, wrapping around the heart."""
        g = geometry or self.compute_geometry()
        x, y = self.positions[index % len(self.positions)]
        jitter_x = (self.rng.random() - 0.5) * self.profile.jitter if jitter else 0.0
        left = g.center_offset_x + x * g.scale + jitter_x
        # No vertical jitter: it would break the top/bottom symmetry
        top = g.center_offset_y + (y + g.vertical_offset_ratio) * g.scale + g.vertical_delta
        return Placement(left, top, jitter_x)

    def relayout_all(self, store) -> int:
        """Move every live card back onto its slot. Returns how many moved."""
        handles = store.handles()
        if not handles:
            return 0
        g = self.compute_geometry()
        moved = 0
        for index, handle in enumerate(handles):
            state = store.get_state(handle)
            if state.maximized or state.closing:
                continue
            x, y = self.positions[index % len(self.positions)]
            left = g.center_offset_x + x * g.scale + state.jitter_x
            top = g.center_offset_y + (y + g.vertical_offset_ratio) * g.scale + g.vertical_delta
            store.set_state(handle, left=left, top=top)
            moved += 1
        return moved
