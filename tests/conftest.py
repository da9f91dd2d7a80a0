"""
Shared pytest fixtures for the heart wall test suite.

Everything runs on a FrameClock stepped by hand, so no test touches real time
or opens a window.
"""

import os
import random
import sys
from dataclasses import replace
from pathlib import Path

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from heartwall.cards import CardStore
from heartwall.clock import FrameClock
from heartwall.config import DESKTOP, MOBILE, WallConfig
from heartwall.layout import LayoutCalculator, Viewport


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def config() -> WallConfig:
    """Stock configuration (185 points, fixed pacing)."""
    return WallConfig()


@pytest.fixture
def small_config() -> WallConfig:
    """A short session: 12 cards at 50ms, so a whole run fits in a few seconds."""
    return WallConfig(
        num_points=12,
        desktop=replace(DESKTOP, max_cards=12, spawn_interval=50),
        mobile=replace(MOBILE, max_cards=12, spawn_interval=50),
    )


@pytest.fixture
def adaptive_config() -> WallConfig:
    """Fps feedback on, with room to create cards for a long time."""
    return WallConfig(
        adaptive_spawn=True,
        desktop=replace(DESKTOP, max_cards=10_000),
    )


# =============================================================================
# Core Object Fixtures
# =============================================================================


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def clock() -> FrameClock:
    return FrameClock()


@pytest.fixture
def viewport() -> Viewport:
    return Viewport(1280, 800)


@pytest.fixture
def store() -> CardStore:
    return CardStore((220, 140))


@pytest.fixture
def layout(config, viewport, rng) -> LayoutCalculator:
    return LayoutCalculator(config, viewport, rng)


@pytest.fixture
def small_layout(small_config, viewport, rng) -> LayoutCalculator:
    return LayoutCalculator(small_config, viewport, rng)


def heart_boxes(layout: LayoutCalculator, count: int) -> list[tuple[float, float, float, float]]:
    """Card rectangles for the first `count` slots, without jitter."""
    g = layout.compute_geometry()
    boxes = []
    for i in range(count):
        p = layout.place_slot(i, g, jitter=False)
        boxes.append((p.left, p.top, g.card_width, g.card_height))
    return boxes
