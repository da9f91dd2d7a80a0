"""Dark/light palettes for cards, background and halo."""

from heartwall.canvas import Canvas, Color
from heartwall.config import (
    CARD_COLORS_DARK,
    CARD_COLORS_LIGHT,
    HALO_COLORS_DARK,
    HALO_COLORS_LIGHT,
)


class Theme:
    def __init__(self, dark: bool = True):
        self.dark = dark

    def is_dark_theme(self) -> bool:
        return self.dark

    def toggle(self) -> None:
        self.dark = not self.dark

    def get_color_palette(self) -> list[Color]:
        colors = CARD_COLORS_DARK if self.dark else CARD_COLORS_LIGHT
        return [Canvas.hex(c) for c in colors]

    def halo_palette(self) -> list[tuple[int, int, int, float]]:
        return list(HALO_COLORS_DARK if self.dark else HALO_COLORS_LIGHT)

    @property
    def background(self) -> Color:
        return (18, 14, 24) if self.dark else (250, 244, 246)

    @property
    def text(self) -> Color:
        return (235, 225, 230) if self.dark else (70, 50, 60)
