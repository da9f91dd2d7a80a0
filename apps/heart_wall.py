"""Heart wall - cards fill a heart, then a halo of light ripples around it.

Keys: T toggles the theme, M maximizes/restores the newest card, ESC quits.
Minimizing the window pauses spawning; resizing relayouts the heart.
"""

import sys

from heartwall import load_config, run


def main() -> None:
    config = load_config()
    # Optional size from the command line: python apps/heart_wall.py 390 844
    width, height = (int(sys.argv[1]), int(sys.argv[2])) if len(sys.argv) >= 3 else (1280, 800)
    wall = run(config, fps=60, title="Heart Wall", width=width, height=height)
    state = "complete" if wall.completed else "interrupted"
    print(f"[wall] Session {state} with {wall.store.get_active_count()} cards")


if __name__ == "__main__":
    main()
