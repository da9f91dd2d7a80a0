"""Pygame window that shows the Canvas and reports resize/visibility changes."""

from typing import Callable, Optional

import pygame

from heartwall.canvas import Canvas

ResizeFn = Callable[[int, int], None]
VisibilityFn = Callable[[bool], None]


class Simulator:
    """Opens a resizable window that displays the Canvas contents 1:1.

    Args:
        canvas: Canvas to show; resized along with the window.
        title: Window title.
        on_resize: Called with the new (width, height) after the window is resized.
        on_visibility: Called with False when minimized/hidden, True when restored.
        on_key: Called with the pygame key code of every key press except ESC.
    """

    def __init__(self, canvas: Canvas, title: str = "Heart Wall",
                 on_resize: Optional[ResizeFn] = None,
                 on_visibility: Optional[VisibilityFn] = None,
                 on_key: Optional[Callable[[int], None]] = None):
        self.canvas = canvas
        self.on_resize = on_resize
        self.on_visibility = on_visibility
        self.on_key = on_key

        pygame.init()
        self.screen = pygame.display.set_mode((canvas.width, canvas.height), pygame.RESIZABLE)
        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()

    def update(self) -> bool:
        """Handle events and blit canvas to screen. Returns False if window was closed."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    return False
                if self.on_key:
                    self.on_key(event.key)
            elif event.type == pygame.VIDEORESIZE:
                self._resize(event.w, event.h)
            elif event.type in (pygame.WINDOWMINIMIZED, pygame.WINDOWHIDDEN):
                if self.on_visibility:
                    self.on_visibility(False)
            elif event.type in (pygame.WINDOWRESTORED, pygame.WINDOWSHOWN):
                if self.on_visibility:
                    self.on_visibility(True)

        # surfarray wants (width, height, 3); the canvas is (height, width, 3)
        if self.screen.get_size() == (self.canvas.width, self.canvas.height):
            pygame.surfarray.blit_array(self.screen, self.canvas.buffer.swapaxes(0, 1))
        pygame.display.flip()
        return True

    def _resize(self, width: int, height: int) -> None:
        if (width, height) == (self.canvas.width, self.canvas.height):
            return
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.canvas.resize(width, height)
        if self.on_resize:
            self.on_resize(width, height)

    def tick(self, fps: int = 60) -> float:
        """Limit framerate. Returns milliseconds since the previous tick."""
        return float(self.clock.tick(fps))

    def close(self) -> None:
        pygame.quit()
