"""End-to-end tests for HeartWall sessions on a virtual clock."""

import random
from dataclasses import replace

import pytest

from heartwall.canvas import Canvas
from heartwall.clock import FrameClock
from heartwall.config import MOBILE
from heartwall.layout import Viewport
from heartwall.scheduler import SchedulerState
from heartwall.theme import Theme
from heartwall.wall import HeartWall


def make_wall(config, width=1280, height=800, **kwargs):
    return HeartWall(width, height, config=config, clock=FrameClock(),
                     rng=random.Random(11), **kwargs)


def run_until(wall, predicate, limit_ms=30_000):
    elapsed = 0.0
    while not predicate():
        wall.clock.step()
        elapsed += 1000 / 60
        assert elapsed < limit_ms, "condition never reached"


# =============================================================================
# Session Tests
# =============================================================================


class TestSession:
    def test_full_session_fills_heart_then_halo_finishes(self, small_config):
        wall = make_wall(small_config)
        reached = []
        wall.on_capacity_reached(lambda: reached.append(wall.clock.now()))
        wall.start()

        run_until(wall, lambda: wall.completed)
        assert wall.store.get_active_count() == 12
        assert reached == []

        run_until(wall, lambda: wall.particles is not None)
        assert len(reached) == 1
        assert wall.particles.active

        run_until(wall, lambda: wall.particles.disposed)
        assert wall.clock.pending() == 0
        assert wall.scheduler.status is SchedulerState.COMPLETED
        assert len(reached) == 1

    def test_capacity_event_fires_once(self, small_config):
        wall = make_wall(small_config)
        reached = []
        wall.on_capacity_reached(lambda: reached.append(1))
        wall._target_reached()
        wall._target_reached()
        assert reached == [1]

    def test_halo_uses_only_live_cards(self, small_config):
        wall = make_wall(small_config)
        wall.start()
        run_until(wall, lambda: wall.completed)
        for handle in wall.store.handles():
            wall.store.close_card(handle)
        assert wall.show_halo() == 0
        assert wall.particles.disposed

    def test_show_halo_only_once(self, small_config):
        wall = make_wall(small_config)
        wall.start()
        run_until(wall, lambda: wall.particles is not None)
        first = wall.particles
        assert wall.show_halo() == 0
        assert wall.particles is first

    def test_dispose_cancels_everything(self, small_config):
        wall = make_wall(small_config)
        wall.start()
        wall.resize(900, 700)
        wall.clock.run_for(100)
        wall.dispose()
        assert wall.clock.pending() == 0


class TestVisibility:
    def test_hidden_pauses_and_visible_resumes(self, small_config):
        wall = make_wall(small_config)
        wall.start()
        wall.clock.run_for(120)
        wall.set_visible(False)
        paused_at = wall.store.get_active_count()
        wall.clock.run_for(2000)
        assert wall.store.get_active_count() == paused_at
        assert wall.scheduler.status is SchedulerState.IDLE

        wall.set_visible(True)
        assert wall.scheduler.status is SchedulerState.RUNNING
        wall.clock.run_for(500)
        assert wall.store.get_active_count() > paused_at

    def test_no_restart_after_completion(self, small_config):
        wall = make_wall(small_config)
        wall.start()
        run_until(wall, lambda: wall.completed)
        wall.store.remove_oldest()
        wall.set_visible(False)
        wall.set_visible(True)
        wall.clock.run_for(2000)
        assert wall.store.get_active_count() == 11
        assert wall.scheduler.status is SchedulerState.COMPLETED

    def test_repeated_visibility_is_noop(self, small_config):
        wall = make_wall(small_config)
        wall.start()
        wall.set_visible(True)
        assert wall.clock.pending() == 1


# =============================================================================
# Viewport Tests
# =============================================================================


class TestResize:
    def test_debounced(self, small_config):
        wall = make_wall(small_config)
        wall.resize(1000, 700)
        wall.clock.advance(200)
        wall.resize(390, 844)
        wall.clock.advance(299)
        assert wall.viewport.width == 1280
        wall.clock.advance(1)
        assert (wall.viewport.width, wall.viewport.height) == (390, 844)

    def test_switch_to_mobile_adopts_profile(self, small_config):
        wall = make_wall(small_config)
        wall.start()
        wall.clock.run_for(300)
        count = wall.store.get_active_count()
        assert count > 0
        wall.stop()

        wall.resize(390, 844)
        wall.clock.advance(small_config.resize_debounce_ms)

        assert wall.layout.mobile
        assert wall.scheduler.mobile
        assert wall.store.card_size == (MOBILE.card_width, MOBILE.card_height)
        assert all(size == (MOBILE.card_width, MOBILE.card_height) for size in wall.store.sizes())
        assert wall.layout.metrics.width == MOBILE.card_width
        assert wall.layout.metrics.sample_count == count

    def test_relayout_keeps_cards_on_screen(self, config):
        wall = make_wall(replace(config, num_points=40))
        for _ in range(40):
            wall.scheduler.spawn_card()
        wall.relayout(Viewport(1000, 700))
        for left, top, w, h in wall.store.boxes():
            assert 0 <= left and left + w <= 1000
            assert 0 <= top and top + h <= 700

    def test_maximized_card_fills_new_viewport(self, small_config):
        wall = make_wall(small_config)
        handle = wall.scheduler.spawn_card()
        wall.toggle_maximize(handle)
        wall.resize(1000, 600)
        wall.clock.advance(small_config.resize_debounce_ms)
        state = wall.store.get_state(handle)
        assert (state.left, state.top, state.width, state.height) == (0, 0, 1000, 600)


class TestMaximize:
    def test_round_trip_restores_slot(self, small_config):
        wall = make_wall(small_config)
        handle = wall.scheduler.spawn_card()
        before = wall.store.get_state(handle)
        slot_left, slot_top = before.left, before.top

        wall.toggle_maximize(handle)
        state = wall.store.get_state(handle)
        assert state.maximized
        assert (state.width, state.height) == (1280, 800)

        wall.toggle_maximize(handle)
        state = wall.store.get_state(handle)
        assert not state.maximized
        assert (state.width, state.height) == (220, 140)
        assert state.left == pytest.approx(slot_left)
        assert state.top == pytest.approx(slot_top)


# =============================================================================
# Rendering Tests
# =============================================================================


class TestRender:
    def test_card_entrance_scale(self, small_config):
        wall = make_wall(small_config)
        assert wall.card_scale(0, 0.7) == pytest.approx(0.7)
        wall.clock.advance(small_config.transition_ms / 2)
        assert wall.card_scale(0, 0.7) == pytest.approx(0.85)
        wall.clock.advance(small_config.transition_ms)
        assert wall.card_scale(0, 0.7) == 1.0

    def test_cards_drawn_over_background(self, small_config):
        wall = make_wall(small_config)
        wall.start()
        wall.clock.run_for(1000)
        canvas = Canvas(1280, 800)
        wall.render(canvas)
        assert canvas.get(0, 0) == wall.theme.background
        for left, top, w, h in wall.store.boxes():
            assert canvas.get(int(left + w / 2), int(top + h / 2)) != wall.theme.background

    def test_light_theme_background(self, small_config):
        wall = make_wall(small_config, theme=Theme(dark=False))
        canvas = Canvas(1280, 800)
        wall.render(canvas)
        assert canvas.get(640, 400) == Theme(dark=False).background

    def test_halo_composited_when_sizes_match(self, small_config):
        wall = make_wall(small_config)
        wall.start()
        run_until(wall, lambda: wall.particles is not None
                  and wall.particles.layer is not None
                  and wall.particles.layer.max_alpha() > 0.2)
        plain = Canvas(1280, 800)
        wall.particles.layer.clear()
        wall.render(plain)
        wall.clock.step()
        with_halo = Canvas(1280, 800)
        wall.render(with_halo)
        assert not (plain.buffer == with_halo.buffer).all()

        # a canvas of another size simply skips the overlay
        wall.render(Canvas(640, 400))


class TestTheme:
    def test_toggle(self):
        theme = Theme()
        assert theme.is_dark_theme()
        dark = theme.get_color_palette()
        theme.toggle()
        assert not theme.is_dark_theme()
        assert theme.get_color_palette() != dark
        assert len(theme.get_color_palette()) == len(dark)

    def test_halo_palette_has_alpha(self):
        for dark in (True, False):
            assert all(len(c) == 4 for c in Theme(dark).halo_palette())
