"""Headless capture of a wall session into animated GIF frames."""

from pathlib import Path

from PIL import Image

from heartwall.canvas import Canvas
from heartwall.wall import HeartWall


def canvas_to_image(canvas: Canvas, scale: float = 1.0) -> Image.Image:
    """Convert a Canvas buffer to a (optionally resized) PIL Image."""
    img = Image.frombytes("RGB", (canvas.width, canvas.height), canvas.get_buffer())
    if scale != 1.0:
        img = img.resize(
            (max(1, int(canvas.width * scale)), max(1, int(canvas.height * scale))),
            Image.BILINEAR,
        )
    return img


def record_session(wall: HeartWall, fps: float = 60, every: int = 4,
                   max_seconds: float = 120.0, scale: float = 0.5) -> list[Image.Image]:
    """Step a wall on virtual time until its halo finishes, keeping every `every`th frame.

    Stops early after `max_seconds` of virtual time. The wall is started here
    and disposed before returning.
    """
    canvas = Canvas(int(wall.viewport.width), int(wall.viewport.height))
    frames = []
    dt = 1000.0 / fps
    total = int(max_seconds * fps)

    wall.start()
    try:
        for i in range(total):
            wall.clock.step(dt)
            if i % every == 0:
                wall.render(canvas)
                frames.append(canvas_to_image(canvas, scale))
            if wall.completed and wall.particles is not None and not wall.particles.active:
                break
    finally:
        wall.dispose()
    return frames


def save_gif(frames: list[Image.Image], out_path: Path, frame_ms: int) -> Path:
    """Save frames as a looping GIF (duration in ms per frame)."""
    if not frames:
        raise ValueError("no frames to save")
    frames[0].save(
        out_path,
        save_all=True,
        append_images=frames[1:],
        duration=frame_ms,
        loop=0,
        optimize=True,
    )
    return out_path
