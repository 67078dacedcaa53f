"""Bounds-checked RGB pixel canvas.

All drawing primitives clip to the canvas: coordinates outside the image
are silently dropped, so layout mistakes cannot write past the buffer.
Gray levels are theme-aware: on a light canvas they are inverted so that
text and ticks stay readable against the white background.
"""

from __future__ import annotations

import numpy as np
from PIL import Image

from .font import GLYPH_ADVANCE, glyph


class Canvas:
    """RGB image backed by a (height, width, 3) uint8 array."""

    def __init__(self, width: int, height: int, dark: bool = True,
                 pixels: np.ndarray | None = None):
        if pixels is None:
            pixels = np.zeros((height, width, 3), dtype=np.uint8)
        elif pixels.shape != (height, width, 3) or pixels.dtype != np.uint8:
            raise ValueError(
                f"Pixel array must be ({height}, {width}, 3) uint8, got "
                f"{pixels.shape} {pixels.dtype}")
        self.width = width
        self.height = height
        self.dark = dark
        self.pixels = pixels
        self.clear()

    @property
    def background(self) -> int:
        return 0 if self.dark else 255

    def clear(self) -> None:
        self.pixels[...] = self.background

    def gray(self, level: int) -> int:
        """Theme-adjusted gray level."""
        level = max(0, min(255, int(level)))
        return level if self.dark else 255 - level

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int] | None:
        if not self.in_bounds(x, y):
            return None
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    def set_rgb(self, x: int, y: int, rgb) -> None:
        if self.in_bounds(x, y):
            self.pixels[y, x] = rgb

    def set_gray(self, x: int, y: int, level: int) -> None:
        if self.in_bounds(x, y):
            self.pixels[y, x] = self.gray(level)

    def set_index(self, x: int, y: int, palette: np.ndarray, index: int) -> None:
        """Set a pixel to a palette entry."""
        self.set_rgb(x, y, palette[index])

    def tint(self, x: int, y: int, channel: int, level: int) -> None:
        """Tint one pixel towards a primary color.

        On a dark canvas only the given channel is set; on a light one
        the other two channels are lowered instead.
        """
        if not self.in_bounds(x, y):
            return
        level = max(0, min(255, int(level)))
        if self.dark:
            self.pixels[y, x, channel] = level
        else:
            for other in range(3):
                if other != channel:
                    self.pixels[y, x, other] = 255 - level

    def put_column(self, x: int, top: int, colors: np.ndarray) -> None:
        """Write a vertical run of RGB colors starting at (x, top)."""
        if not 0 <= x < self.width:
            return
        start = max(0, top)
        stop = min(self.height, top + len(colors))
        if start < stop:
            self.pixels[start:stop, x] = colors[start - top:stop - top]

    def fill_rect(self, left: int, top: int, width: int, height: int,
                  level: int) -> None:
        """Fill a rectangle with a gray level; empty sizes draw nothing."""
        x0, y0 = max(0, left), max(0, top)
        x1, y1 = min(self.width, left + width), min(self.height, top + height)
        if x0 < x1 and y0 < y1:
            self.pixels[y0:y1, x0:x1] = self.gray(level)

    def hline(self, x1: int, y: int, x2: int, level: int) -> None:
        """Horizontal run from x1 to x2 inclusive."""
        self.fill_rect(min(x1, x2), y, abs(x2 - x1) + 1, 1, level)

    def vline(self, x: int, y1: int, y2: int, level: int) -> None:
        """Vertical run from y1 to y2 inclusive."""
        self.fill_rect(x, min(y1, y2), 1, abs(y2 - y1) + 1, level)

    def draw_text(self, x: int, y: int, text: str, level: int,
                  vertical: bool = False) -> None:
        """Blit text with the fixed-width font.

        Horizontal text runs left to right with its top-left at (x, y).
        Vertical text is the same glyphs transposed, running downwards.
        """
        for char in text:
            mask = glyph(char)
            if vertical:
                mask = mask.T
            rows, cols = np.nonzero(mask)
            for row, col in zip(rows, cols):
                self.set_gray(x + int(col), y + int(row), level)
            if vertical:
                y += GLYPH_ADVANCE
            else:
                x += GLYPH_ADVANCE

    def to_image(self) -> Image.Image:
        """Pillow view of the canvas (copies the pixels)."""
        return Image.fromarray(self.pixels)
