"""RGB pixel canvas plus a translucent overlay layer, both backed by numpy."""

import colorsys

import numpy as np

# Type alias for RGB tuples
Color = tuple[int, int, int]

# Simple 3x5 bitmap font for digits and basic ASCII
# Each char is 3 pixels wide, 5 pixels tall, stored as 5 rows of 3-bit bitmaps
_FONT_3X5 = {
    ' ': [0b000, 0b000, 0b000, 0b000, 0b000],
    '!': [0b010, 0b010, 0b010, 0b000, 0b010],
    ',': [0b000, 0b000, 0b000, 0b010, 0b100],
    '0': [0b111, 0b101, 0b101, 0b101, 0b111],
    '1': [0b010, 0b110, 0b010, 0b010, 0b111],
    '2': [0b111, 0b001, 0b111, 0b100, 0b111],
    '3': [0b111, 0b001, 0b111, 0b001, 0b111],
    '4': [0b101, 0b101, 0b111, 0b001, 0b001],
    '5': [0b111, 0b100, 0b111, 0b001, 0b111],
    '6': [0b111, 0b100, 0b111, 0b101, 0b111],
    '7': [0b111, 0b001, 0b010, 0b010, 0b010],
    '8': [0b111, 0b101, 0b111, 0b101, 0b111],
    '9': [0b111, 0b101, 0b111, 0b001, 0b111],
    ':': [0b000, 0b010, 0b000, 0b010, 0b000],
    '.': [0b000, 0b000, 0b000, 0b000, 0b010],
    '-': [0b000, 0b000, 0b111, 0b000, 0b000],
    '+': [0b000, 0b010, 0b111, 0b010, 0b000],
    'A': [0b010, 0b101, 0b111, 0b101, 0b101],
    'B': [0b110, 0b101, 0b110, 0b101, 0b110],
    'C': [0b011, 0b100, 0b100, 0b100, 0b011],
    'D': [0b110, 0b101, 0b101, 0b101, 0b110],
    'E': [0b111, 0b100, 0b110, 0b100, 0b111],
    'F': [0b111, 0b100, 0b110, 0b100, 0b100],
    'G': [0b011, 0b100, 0b101, 0b101, 0b011],
    'H': [0b101, 0b101, 0b111, 0b101, 0b101],
    'I': [0b111, 0b010, 0b010, 0b010, 0b111],
    'J': [0b001, 0b001, 0b001, 0b101, 0b010],
    'K': [0b101, 0b110, 0b100, 0b110, 0b101],
    'L': [0b100, 0b100, 0b100, 0b100, 0b111],
    'M': [0b101, 0b111, 0b111, 0b101, 0b101],
    'N': [0b101, 0b111, 0b111, 0b111, 0b101],
    'O': [0b010, 0b101, 0b101, 0b101, 0b010],
    'P': [0b110, 0b101, 0b110, 0b100, 0b100],
    'Q': [0b010, 0b101, 0b101, 0b111, 0b011],
    'R': [0b110, 0b101, 0b110, 0b101, 0b101],
    'S': [0b011, 0b100, 0b010, 0b001, 0b110],
    'T': [0b111, 0b010, 0b010, 0b010, 0b010],
    'U': [0b101, 0b101, 0b101, 0b101, 0b111],
    'V': [0b101, 0b101, 0b101, 0b101, 0b010],
    'W': [0b101, 0b101, 0b111, 0b111, 0b101],
    'X': [0b101, 0b101, 0b010, 0b101, 0b101],
    'Y': [0b101, 0b101, 0b010, 0b010, 0b010],
    'Z': [0b111, 0b001, 0b010, 0b100, 0b111],
}

GLYPH_WIDTH = 3
GLYPH_HEIGHT = 5


def text_width(string: str, scale: int = 1, spacing: int = 1) -> int:
    """Pixel width of `string` as drawn by Canvas.text()."""
    if not string:
        return 0
    return len(string) * (GLYPH_WIDTH + spacing) * scale - spacing * scale


class Canvas:
    """Opaque RGB pixel buffer with drawing primitives.

    Pixels live in a numpy array of shape (height, width, 3), dtype uint8, so
    pixel (x, y) is ``buffer[y, x]``.
    """

    def __init__(self, width: int = 1280, height: int = 800):
        self.width = width
        self.height = height
        self.buffer = np.zeros((height, width, 3), dtype=np.uint8)

    def resize(self, width: int, height: int) -> None:
        """Reallocate at a new size. Contents are lost."""
        self.width = width
        self.height = height
        self.buffer = np.zeros((height, width, 3), dtype=np.uint8)

    def clear(self, color: Color = (0, 0, 0)) -> None:
        """Fill entire canvas with a color (default black)."""
        self.buffer[:, :] = color

    def set(self, x: int, y: int, color: Color) -> None:
        """Set a single pixel. Out-of-bounds writes are silently ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.buffer[y, x] = color

    def get(self, x: int, y: int) -> Color:
        """Get a pixel's color. Returns (0,0,0) for out-of-bounds."""
        if 0 <= x < self.width and 0 <= y < self.height:
            r, g, b = self.buffer[y, x]
            return (int(r), int(g), int(b))
        return (0, 0, 0)

    def rect(self, x: float, y: float, w: float, h: float, color: Color, filled: bool = True) -> None:
        """Draw a rectangle, clipped to the canvas. If filled=False, draws outline only."""
        x0, y0 = int(round(x)), int(round(y))
        x1, y1 = x0 + int(round(w)), y0 + int(round(h))
        cx0, cy0 = max(0, x0), max(0, y0)
        cx1, cy1 = min(self.width, x1), min(self.height, y1)
        if cx0 >= cx1 or cy0 >= cy1:
            return
        if filled:
            self.buffer[cy0:cy1, cx0:cx1] = color
            return
        if y0 >= 0:
            self.buffer[y0, cx0:cx1] = color
        if y1 - 1 < self.height:
            self.buffer[y1 - 1, cx0:cx1] = color
        if x0 >= 0:
            self.buffer[cy0:cy1, x0] = color
        if x1 - 1 < self.width:
            self.buffer[cy0:cy1, x1 - 1] = color

    def text(self, x: int, y: int, string: str, color: Color, spacing: int = 1, scale: int = 1) -> None:
        """Draw text using built-in 3x5 pixel font, each font pixel `scale` px square.

        Uppercase only; unknown characters advance like a space.
        """
        cursor_x = int(x)
        y = int(y)
        for ch in string.upper():
            glyph = _FONT_3X5.get(ch)
            if glyph is not None:
                for row_idx, row_bits in enumerate(glyph):
                    for col in range(GLYPH_WIDTH):
                        if row_bits & (1 << (2 - col)):
                            self.rect(cursor_x + col * scale, y + row_idx * scale, scale, scale, color)
            cursor_x += (GLYPH_WIDTH + spacing) * scale

    def composite(self, layer: "Layer") -> None:
        """Alpha-blend a premultiplied overlay on top of the canvas."""
        if layer.width != self.width or layer.height != self.height:
            raise ValueError(
                f"layer is {layer.width}x{layer.height}, canvas is {self.width}x{self.height}"
            )
        alpha = layer.pixels[:, :, 3:4]
        out = layer.pixels[:, :, :3] + self.buffer.astype(np.float32) * (1.0 - alpha)
        self.buffer[:] = np.clip(out, 0, 255).astype(np.uint8)

    @staticmethod
    def hsv(h: float, s: float = 1.0, v: float = 1.0) -> Color:
        """Convert HSV to RGB color tuple. h is 0-360, s and v are 0-1."""
        r, g, b = colorsys.hsv_to_rgb(h / 360.0, s, v)
        return (int(r * 255), int(g * 255), int(b * 255))

    @staticmethod
    def rgb(r: int, g: int, b: int) -> Color:
        """Convenience: clamp and return an RGB tuple."""
        return (max(0, min(255, r)), max(0, min(255, g)), max(0, min(255, b)))

    @staticmethod
    def hex(color: int) -> Color:
        """Convert 0xRRGGBB integer to (R, G, B) tuple."""
        return ((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF)

    @staticmethod
    def shade(color: Color, factor: float) -> Color:
        """Scale a color's brightness, clamped to 0-255."""
        return Canvas.rgb(*(int(c * factor) for c in color))

    def get_buffer(self) -> bytes:
        """Get the entire pixel buffer as packed RGB bytes."""
        return self.buffer.tobytes()


class Layer:
    """Transparent overlay stored as premultiplied RGBA floats (RGB 0-255, A 0-1)."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 4), dtype=np.float32)

    def clear(self) -> None:
        self.pixels[:] = 0.0

    def _window(self, cx: float, cy: float, radius: float):
        """Clipped bounding box around a circle plus per-pixel distance to its center."""
        x0 = max(0, int(cx - radius))
        x1 = min(self.width, int(cx + radius) + 2)
        y0 = max(0, int(cy - radius))
        y1 = min(self.height, int(cy + radius) + 2)
        if x0 >= x1 or y0 >= y1:
            return None
        ys, xs = np.mgrid[y0:y1, x0:x1]
        dist = np.hypot(xs + 0.5 - cx, ys + 0.5 - cy)
        return (slice(y0, y1), slice(x0, x1)), dist

    def _over(self, region, color: Color, alpha: np.ndarray) -> None:
        alpha = np.clip(alpha, 0.0, 1.0).astype(np.float32)
        dst = self.pixels[region]
        keep = (1.0 - alpha)[:, :, None]
        src = np.empty_like(dst)
        src[:, :, 0] = color[0] * alpha
        src[:, :, 1] = color[1] * alpha
        src[:, :, 2] = color[2] * alpha
        src[:, :, 3] = alpha
        self.pixels[region] = src + dst * keep

    def glow(self, cx: float, cy: float, radius: float, color: Color, opacity: float) -> None:
        """Radial gradient: `opacity` at the center fading linearly to 0 at `radius`."""
        if radius <= 0 or opacity <= 0:
            return
        window = self._window(cx, cy, radius)
        if window is None:
            return
        region, dist = window
        alpha = opacity * np.clip(1.0 - dist / radius, 0.0, 1.0)
        self._over(region, color, alpha)

    def disc(self, cx: float, cy: float, radius: float, color: Color, opacity: float) -> None:
        """Solid circle with a one-pixel soft edge."""
        if radius <= 0 or opacity <= 0:
            return
        window = self._window(cx, cy, radius)
        if window is None:
            return
        region, dist = window
        alpha = opacity * np.clip(radius + 0.5 - dist, 0.0, 1.0)
        self._over(region, color, alpha)

    def max_alpha(self) -> float:
        return float(self.pixels[:, :, 3].max()) if self.pixels.size else 0.0
