"""Spawn scheduler - paces card creation until the heart is full.

Pacing has two layers on top of the per-device base interval:

  * Optional fps feedback (``adaptive_spawn``): once per ~1s window the
    measured frame rate slows the interval down (below ``fps_lower``), speeds
    it up (above ``fps_upper``) or lets it drift back toward the base.
  * A fixed "breathing" slowdown over the last ten cards, stretching the
    interval from 1.5x up to 3x just before the halo.

When the active count reaches the maximum the scheduler latches: it stops for
good (visibility changes cannot restart it) and fires the target-reached
callback once, ``halo_delay_ms`` later.
"""

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from heartwall.clock import FrameClock, IdleDeadline
from heartwall.config import FINALE_MESSAGES, MESSAGES, WallConfig
from heartwall.layout import LayoutCalculator


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass
class FpsWindow:
    last_timestamp: Optional[float] = None
    frame_count: int = 0
    accumulated_ms: float = 0.0

    def reset(self, now: Optional[float] = None) -> None:
        self.last_timestamp = now
        self.frame_count = 0
        self.accumulated_ms = 0.0

    def record(self, now: float, window_ms: float = 1000.0) -> Optional[float]:
        """Count a frame at `now`. Returns an fps sample when a window closes."""
        if self.last_timestamp is None:
            self.last_timestamp = now
            return None
        self.accumulated_ms += now - self.last_timestamp
        self.last_timestamp = now
        self.frame_count += 1
        if self.accumulated_ms < window_ms:
            return None
        fps = self.frame_count * 1000.0 / self.accumulated_ms
        self.frame_count = 0
        self.accumulated_ms = 0.0
        return fps


@dataclass
class SpawnState:
    dynamic_interval: int
    burst_size: int = 1
    is_running: bool = False
    has_reached_target: bool = False
    current_position_index: int = 0


def slowdown_factor(remaining: int, window: int = 10, start: float = 1.5, end: float = 3.0) -> float:
    """Interval multiplier for the last `window` cards (1.0 outside it)."""
    if remaining <= 0 or remaining > window:
        return 1.0
    if window == 1:
        return end
    return start + (window - remaining) * (end - start) / (window - 1)


class SpawnScheduler:
    """Creates cards on a timer chain driven by a FrameClock.

    Args:
        clock: Source of timeouts, frames and (optionally) idle callbacks.
        store: Card store; see CardStore for the interface used.
        layout: Supplies slot placements and receives measured card sizes.
        config: Pacing knobs.
        palette_size: Callable returning how many card colours the theme has.
        on_target_reached: Called once, ``halo_delay_ms`` after the latch trips.
        rng: Random source for messages and colours.
    """

    def __init__(self, clock: FrameClock, store, layout: LayoutCalculator, config: WallConfig,
                 palette_size: Callable[[], int] = lambda: 8,
                 on_target_reached: Optional[Callable[[], None]] = None,
                 rng: Optional[random.Random] = None):
        self.clock = clock
        self.store = store
        self.layout = layout
        self.config = config
        self.palette_size = palette_size
        self.on_target_reached = on_target_reached
        self.rng = rng or random.Random()
        self.mobile = layout.mobile
        self.state = SpawnState(dynamic_interval=self.profile.spawn_interval)
        self.status = SchedulerState.IDLE
        self.fps_window = FpsWindow()
        self.last_fps: Optional[float] = None
        self._spawn_handle: Optional[int] = None
        self._spawn_kind: Optional[str] = None
        self._fps_handle: Optional[int] = None
        self._halo_handle: Optional[int] = None

    @property
    def profile(self):
        return self.config.profile(self.mobile)

    @property
    def max_cards(self) -> int:
        return self.profile.max_cards

    @property
    def completed(self) -> bool:
        return self.status is SchedulerState.COMPLETED

    def _debug(self, message: str) -> None:
        if self.config.debug:
            print(f"[scheduler] {message}")

    # --- lifecycle ---------------------------------------------------------

    def start(self) -> bool:
        """Start (or restart) the spawn chain. Returns False once completed."""
        if self.completed or self.state.has_reached_target:
            return False
        self.stop()
        self.status = SchedulerState.RUNNING
        self.state.is_running = True
        if self.config.adaptive_spawn:
            self.fps_window.reset(self.clock.now())
            self._fps_handle = self.clock.on_next_frame(self._fps_frame)
        self._schedule_next()
        self._debug(f"Started, interval={self.state.dynamic_interval}ms, max={self.max_cards}")
        return True

    def stop(self) -> None:
        """Cancel pending callbacks. Safe to call any number of times, in any state."""
        if self._spawn_handle is not None:
            self.clock.cancel(self._spawn_handle)
            self._spawn_handle = None
            self._spawn_kind = None
        if self._fps_handle is not None:
            self.clock.cancel(self._fps_handle)
            self._fps_handle = None
        self.state.is_running = False
        if self.status is SchedulerState.RUNNING:
            self.status = SchedulerState.IDLE
            self._debug("Stopped")

    def dispose(self) -> None:
        self.stop()
        if self._halo_handle is not None:
            self.clock.cancel(self._halo_handle)
            self._halo_handle = None

    def set_profile(self, mobile: bool) -> None:
        """Adopt the other device profile's pacing after a device-class switch."""
        if mobile == self.mobile:
            return
        self.mobile = mobile
        self.state.dynamic_interval = self.profile.spawn_interval
        self.state.burst_size = 1

    # --- pacing ------------------------------------------------------------

    def _fps_frame(self, now: float) -> None:
        self._fps_handle = None
        if not self.state.is_running:
            return
        fps = self.fps_window.record(now, self.config.fps_window_ms)
        if fps is not None:
            self.adjust_pacing(fps)
        self._fps_handle = self.clock.on_next_frame(self._fps_frame)

    def adjust_pacing(self, fps: float) -> None:
        """Feed one fps sample into the interval/burst controller."""
        cfg = self.config
        profile = self.profile
        base = profile.spawn_interval
        interval = self.state.dynamic_interval
        self.last_fps = fps

        if fps < cfg.fps_lower:
            interval = min(profile.spawn_interval_max, math.ceil(interval * cfg.slow_factor))
            self.state.burst_size = 1
        elif fps > cfg.fps_upper:
            interval = max(profile.spawn_interval_min, math.floor(interval * cfg.fast_factor))
            self.state.burst_size = cfg.burst_max if interval <= base * cfg.burst_headroom else 1
        else:
            if interval > base:
                interval = max(base, math.floor(interval * (1 - cfg.drift_factor)))
            elif interval < base:
                interval = min(base, math.ceil(interval * (1 + cfg.drift_factor)))

        self.state.dynamic_interval = interval
        self._debug(f"FPS={fps:.1f}, interval={interval}ms, burst={self.state.burst_size}")

    def current_interval(self) -> int:
        """Delay before the next spawn attempt, including the end-of-run slowdown."""
        interval = self.state.dynamic_interval or self.profile.spawn_interval
        remaining = self.max_cards - self.store.get_active_count()
        factor = slowdown_factor(remaining, self.config.slowdown_window,
                                 self.config.slowdown_start, self.config.slowdown_end)
        if factor != 1.0:
            interval = math.floor(interval * factor)
        return interval

    # --- timer chain -------------------------------------------------------

    def _schedule_next(self) -> None:
        if not self.state.is_running:
            return
        interval = self.current_interval()
        if self.config.use_idle_spawn and self.clock.supports_idle:
            self._spawn_kind = "idle"
            self._spawn_handle = self.clock.on_idle(self._idle_tick, timeout_ms=interval)
        else:
            self._spawn_kind = "timeout"
            self._spawn_handle = self.clock.on_timeout(interval, self._timer_tick)

    def _timer_tick(self) -> None:
        self._spawn_handle = None
        self.try_spawn_once()
        self._schedule_next()

    def _idle_tick(self, deadline: IdleDeadline) -> None:
        self._spawn_handle = None
        if not self.state.is_running:
            return
        if deadline.time_remaining() > self.config.idle_threshold_ms:
            self.try_spawn_once()
        if not self.state.is_running:
            return
        # Idle callbacks can come back every frame; a plain timer sets the pace
        self._spawn_kind = "timeout"
        self._spawn_handle = self.clock.on_timeout(self.current_interval(), self._schedule_next)

    def try_spawn_once(self) -> int:
        """One spawn tick. Returns the number of cards created."""
        if self.state.has_reached_target:
            return 0
        count = self.store.get_active_count()
        self._debug(f"Active cards: {count}, max: {self.max_cards}")
        if count < self.max_cards:
            burst = min(self.state.burst_size or 1, self.max_cards - count)
            for _ in range(burst):
                self.spawn_card()
            return burst
        self._reach_target()
        return 0

    def _reach_target(self) -> None:
        self.state.has_reached_target = True
        self.stop()
        self.status = SchedulerState.COMPLETED
        self._debug("Maximum reached, spawning stopped")
        self._halo_handle = self.clock.on_timeout(self.config.halo_delay_ms, self._fire_target_reached)

    def _fire_target_reached(self) -> None:
        self._halo_handle = None
        if self.on_target_reached is not None:
            self.on_target_reached()

    # --- card creation -----------------------------------------------------

    def pick_message(self, count: int) -> str:
        if count == self.max_cards - 2:
            return FINALE_MESSAGES[0]
        if count == self.max_cards - 1:
            return FINALE_MESSAGES[1]
        return self.rng.choice(MESSAGES)

    def spawn_card(self) -> int:
        """Place, create and measure one card, then trim the wall back to capacity."""
        count = self.store.get_active_count()
        message = self.pick_message(count)
        color_index = self.rng.randrange(max(1, self.palette_size()))
        slot = self.state.current_position_index
        placement = self.layout.place_slot(slot)
        self.state.current_position_index += 1

        handle = self.store.create_card(slot, placement, message, color_index)
        card = self.store.get_state(handle)
        self.layout.record_measurement(card.width, card.height)
        self.evict_over_capacity()
        return handle

    def evict_over_capacity(self) -> int:
        """Remove oldest cards while over capacity, at most `eviction_limit` of them."""
        limit = self.config.eviction_limit
        removed = 0
        while self.store.get_active_count() > self.max_cards:
            if self.store.remove_oldest() is None:
                break
            removed += 1
            if removed >= limit:
                if self.store.get_active_count() > self.max_cards:
                    print(f"[scheduler] Eviction gave up after {removed} removals "
                          f"({self.store.get_active_count()} active, max {self.max_cards})")
                break
        if removed:
            self.layout.rebase_metrics(self.store.sizes())
        return removed
