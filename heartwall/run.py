"""Main run loop - ties together HeartWall, Canvas and Simulator."""

import time

import pygame

from heartwall.canvas import Canvas
from heartwall.config import WallConfig
from heartwall.simulator import Simulator
from heartwall.wall import HeartWall


def run(config: WallConfig | None = None, fps: int = 60, title: str = "Heart Wall",
        width: int = 1280, height: int = 800) -> HeartWall:
    """Main entry point. Runs a wall session in a window until it is closed.

    The wall's FrameClock only moves when this loop steps it: each pass feeds
    it the measured frame time, and whatever is left of the frame budget after
    rendering becomes next frame's idle time.

    Args:
        config: Wall knobs (defaults to the environment via load_config()).
        fps: Target frames per second (default 60).
        title: Window title.
        width: Initial window width in pixels.
        height: Initial window height in pixels.
    """
    wall = HeartWall(width, height, config=config)
    wall.clock.idle_budget_ms = 0.0 if wall.config.use_idle_spawn else None
    canvas = Canvas(width, height)

    def on_key(key: int) -> None:
        if key == pygame.K_t:
            wall.theme.toggle()
        elif key == pygame.K_m:
            handles = wall.store.handles()
            if handles:
                wall.toggle_maximize(handles[-1])

    sim = Simulator(canvas, title=title, on_resize=wall.resize,
                    on_visibility=wall.set_visible, on_key=on_key)
    frame_budget = 1000.0 / fps

    wall.start()
    dt = frame_budget
    try:
        while True:
            started = time.monotonic()
            wall.clock.step(dt)
            wall.render(canvas)
            if wall.clock.supports_idle:
                busy = (time.monotonic() - started) * 1000
                wall.clock.idle_budget_ms = max(0.0, frame_budget - busy)

            if not sim.update():
                break
            dt = sim.tick(fps)
    except KeyboardInterrupt:
        pass
    finally:
        wall.dispose()
        sim.close()
    return wall
