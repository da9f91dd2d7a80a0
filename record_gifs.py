#!/usr/bin/env python3
"""Record animated GIFs of a heart wall session by rendering frames headlessly.

Usage: python record_gifs.py
Output: media/heartwall-*.gif
"""

import os
import random
import sys
from dataclasses import replace

# Prevent pygame from opening windows or printing its banner
os.environ["SDL_VIDEODRIVER"] = "dummy"
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "1"

from pathlib import Path

# Add project root to path
ROOT = Path(__file__).parent
sys.path.insert(0, str(ROOT))

from heartwall.capture import record_session, save_gif
from heartwall.config import load_config
from heartwall.wall import HeartWall

MEDIA_DIR = ROOT / "media"
MEDIA_DIR.mkdir(exist_ok=True)

# GIF settings
SIM_FPS = 60       # Virtual frames per second
KEEP_EVERY = 4     # Keep one frame in four (15 fps GIF)
SCALE = 0.5        # Downscale factor for the GIF
CARDS = 60         # Shorter session than the real thing


def record(name: str, width: int, height: int, dark: bool = True) -> None:
    """Run a shortened session at the given viewport size and save it as a GIF."""
    config = load_config(num_points=CARDS, dark_theme=dark)
    config = replace(
        config,
        desktop=replace(config.desktop, max_cards=CARDS, spawn_interval=60),
        mobile=replace(config.mobile, max_cards=CARDS, spawn_interval=60),
    )
    wall = HeartWall(width, height, config=config, rng=random.Random(7))
    frames = record_session(wall, fps=SIM_FPS, every=KEEP_EVERY, scale=SCALE)
    out_path = save_gif(frames, MEDIA_DIR / f"heartwall-{name}.gif",
                        frame_ms=int(1000 * KEEP_EVERY / SIM_FPS))
    print(f"  Saved {out_path} ({len(frames)} frames)")


RECORDINGS = [
    ("desktop", lambda: record("desktop", 1280, 800)),
    ("mobile",  lambda: record("mobile", 390, 844)),
    ("light",   lambda: record("light", 1280, 800, dark=False)),
]


if __name__ == "__main__":
    print(f"\nRecording heart wall GIFs to {MEDIA_DIR}/\n")

    for name, fn in RECORDINGS:
        try:
            print(f"  Recording {name}...")
            fn()
        except Exception as e:
            print(f"  ERROR recording {name}: {e}")
            import traceback
            traceback.print_exc()

    print(f"\nDone! GIFs saved to {MEDIA_DIR}/")
