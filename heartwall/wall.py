"""HeartWall - wires layout, scheduler, card store and halo into one session."""

import random
from typing import Callable, Optional

from heartwall.canvas import Canvas, text_width
from heartwall.cards import CardStore
from heartwall.clock import FrameClock
from heartwall.config import WallConfig, load_config
from heartwall.layout import LayoutCalculator, Viewport
from heartwall.particles import ParticleSystem
from heartwall.scheduler import SpawnScheduler
from heartwall.theme import Theme

HEADER_HEIGHT = 0.16     # fraction of card height
CONTROL_COLORS = [(255, 95, 86), (255, 189, 46), (39, 201, 63)]


class HeartWall:
    """One wall session: cards spawn into a heart, then the halo plays once.

    Args:
        width, height: Initial viewport size in pixels.
        config: Knobs; defaults to `load_config()`.
        clock: Shared FrameClock; a fresh one if omitted.
        store: Card store; a fresh CardStore sized for the device class if omitted.
        theme: Palette provider; follows `config.dark_theme` if omitted.
        rng: Random source shared by layout jitter, messages and the halo.
    """

    def __init__(self, width: int, height: int, config: Optional[WallConfig] = None,
                 clock: Optional[FrameClock] = None, store: Optional[CardStore] = None,
                 theme: Optional[Theme] = None, rng: Optional[random.Random] = None):
        self.config = config or load_config()
        self.clock = clock or FrameClock()
        self.rng = rng or random.Random()
        self.theme = theme or Theme(self.config.dark_theme)
        self.viewport = Viewport(width, height, self.config.mobile_breakpoint)
        self.layout = LayoutCalculator(self.config, self.viewport, self.rng)

        profile = self.layout.profile
        if store is None:
            store = CardStore((profile.card_width, profile.card_height),
                              profile.initial_card_scale, now=self.clock.now)
        self.store = store
        self.scheduler = SpawnScheduler(
            self.clock, self.store, self.layout, self.config,
            palette_size=lambda: len(self.theme.get_color_palette()),
            on_target_reached=self._target_reached,
            rng=self.rng,
        )
        self.particles: Optional[ParticleSystem] = None
        self.visible = True
        self._capacity_listeners: list[Callable[[], None]] = []
        self._capacity_fired = False
        self._resize_handle: Optional[int] = None

    # --- lifecycle ---------------------------------------------------------

    def start(self) -> None:
        self.scheduler.start()

    def stop(self) -> None:
        self.scheduler.stop()

    def dispose(self) -> None:
        self.scheduler.dispose()
        self.clock.cancel(self._resize_handle)
        self._resize_handle = None
        if self.particles is not None:
            self.particles.dispose()

    @property
    def completed(self) -> bool:
        return self.scheduler.state.has_reached_target

    def set_visible(self, visible: bool) -> None:
        """Pause spawning while hidden; resume on return unless already complete."""
        if visible == self.visible:
            return
        self.visible = visible
        if not visible:
            if self.config.debug:
                print("[wall] Hidden, pausing spawns")
            self.scheduler.stop()
        elif not self.completed:
            if self.config.debug:
                print("[wall] Visible, resuming spawns")
            self.scheduler.start()

    # --- capacity event ----------------------------------------------------

    def on_capacity_reached(self, callback: Callable[[], None]) -> None:
        """Register a callback for the single capacity-reached event of this session."""
        self._capacity_listeners.append(callback)

    def _target_reached(self) -> None:
        if self._capacity_fired:
            return
        self._capacity_fired = True
        for callback in self._capacity_listeners:
            callback()
        self.show_halo()

    def show_halo(self) -> int:
        if self.particles is not None:
            return 0
        self.particles = ParticleSystem(
            self.clock, self.config, self.layout.profile,
            self.theme.halo_palette(), rng=self.rng,
        )
        return self.particles.show(self.store.boxes(), int(self.viewport.width),
                                   int(self.viewport.height))

    # --- viewport ----------------------------------------------------------

    def resize(self, width: int, height: int) -> None:
        """Debounced viewport change; the relayout happens after things settle."""
        self.clock.cancel(self._resize_handle)
        self._resize_handle = self.clock.on_timeout(
            self.config.resize_debounce_ms,
            lambda: self._resize_now(width, height),
        )

    def _resize_now(self, width: int, height: int) -> None:
        self._resize_handle = None
        self.relayout(Viewport(width, height, self.config.mobile_breakpoint))

    def relayout(self, viewport: Viewport) -> int:
        """Re-place every card for a new viewport (and possibly device class)."""
        self.viewport = viewport
        self.layout.set_viewport(viewport)
        if self.layout.set_device_class(viewport.is_mobile):
            profile = self.layout.profile
            self.scheduler.set_profile(viewport.is_mobile)
            self.store.resize_cards(profile.card_width, profile.card_height)
            self.layout.rebase_metrics(self.store.sizes())
            if self.config.debug:
                print(f"[wall] Device class now {'mobile' if viewport.is_mobile else 'desktop'}")
        for handle in self.store.handles():
            state = self.store.get_state(handle)
            if state.maximized:
                self.store.set_state(handle, left=0, top=0,
                                     width=viewport.width, height=viewport.height)
        return self.layout.relayout_all(self.store)

    # --- rendering ---------------------------------------------------------

    def toggle_maximize(self, handle: int) -> None:
        """Fill the viewport with one card, or put it back on its slot."""
        if self.store.toggle_maximize(handle):
            self.store.set_state(handle, left=0, top=0,
                                 width=self.viewport.width, height=self.viewport.height)
            return
        profile = self.layout.profile
        self.store.set_state(handle, width=profile.card_width, height=profile.card_height)
        self.layout.relayout_all(self.store)

    def card_scale(self, born_ms: float, initial: float) -> float:
        """Entrance animation: grow from the initial scale to 1 over transition_ms."""
        age = self.clock.now() - born_ms
        if age >= self.config.transition_ms:
            return 1.0
        t = max(0.0, age / self.config.transition_ms)
        return initial + (1.0 - initial) * t

    def render(self, canvas: Canvas) -> None:
        """Draw background, cards (oldest first) and the halo overlay."""
        theme = self.theme
        canvas.clear(theme.background)
        palette = theme.get_color_palette()
        for handle in self.store.handles():
            card = self.store.get_state(handle)
            if card.closing:
                continue
            scale = self.card_scale(card.born_ms, card.scale)
            w, h = card.width * scale, card.height * scale
            x = card.left + (card.width - w) / 2
            y = card.top + (card.height - h) / 2
            color = palette[card.color_index % len(palette)]
            canvas.rect(x, y, w, h, color)
            header = max(4, int(h * HEADER_HEIGHT))
            canvas.rect(x, y, w, header, Canvas.shade(color, 0.8))
            dot = max(2, header // 3)
            for i, dot_color in enumerate(CONTROL_COLORS):
                canvas.rect(x + dot + i * dot * 2, y + (header - dot) / 2, dot, dot, dot_color)

            text_scale = max(1, int(h // 40))
            while text_scale > 1 and text_width(card.message, text_scale) > w - 8:
                text_scale -= 1
            tw = text_width(card.message, text_scale)
            canvas.text(x + (w - tw) / 2, y + header + (h - header - 5 * text_scale) / 2,
                        card.message, theme.text, scale=text_scale)

        if self.particles is not None and self.particles.active:
            layer = self.particles.layer
            if layer.width == canvas.width and layer.height == canvas.height:
                canvas.composite(layer)
