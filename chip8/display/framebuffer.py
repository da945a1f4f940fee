"""Monochrome 64x32 framebuffer with XOR sprite drawing."""

from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np
from PIL import Image

from ..constants import DISPLAY_HEIGHT, DISPLAY_WIDTH, SPRITE_WIDTH


class Framebuffer:
    """Display grid indexed ``[y, x]``.

    The array is owned by the framebuffer; callers only ever receive copies
    so a renderer cannot corrupt emulated state.
    """

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        self.width = width
        self.height = height
        self._pixels = np.zeros((height, width), dtype=bool)

    def clear(self) -> None:
        self._pixels.fill(False)

    def pixel(self, x: int, y: int) -> bool:
        return bool(self._pixels[y % self.height, x % self.width])

    def draw_sprite(self, x: int, y: int, rows: Iterable[int]) -> bool:
        """XOR an 8-pixel wide sprite into the grid.

        The start position wraps around the screen; pixels running off the
        right or bottom edge are clipped.

        Returns:
            True if any lit pixel was switched off (collision).
        """
        x0 = x % self.width
        y0 = y % self.height
        collision = False
        for row_idx, row in enumerate(rows):
            py = y0 + row_idx
            if py >= self.height:
                break
            for bit in range(SPRITE_WIDTH):
                if not (row & (0x80 >> bit)):
                    continue
                px = x0 + bit
                if px >= self.width:
                    break
                if self._pixels[py, px]:
                    collision = True
                self._pixels[py, px] ^= True
        return collision

    def get_display_buffer(self) -> np.ndarray:
        """Get a copy of the grid.

        Returns:
            2D numpy array of pixel values (0 or 1), shape ``(height, width)``
        """
        return self._pixels.astype(np.uint8)

    def snapshot(self) -> Tuple[Tuple[bool, ...], ...]:
        return tuple(tuple(bool(p) for p in row) for row in self._pixels)

    def lit_count(self) -> int:
        return int(np.count_nonzero(self._pixels))

    def render_text(self, on: str = "#", off: str = " ") -> str:
        """Render the grid as text, one line per row, with a border."""
        border = "+" + "-" * self.width + "+"
        lines = [border]
        for row in self._pixels:
            lines.append("|" + "".join(on if p else off for p in row) + "|")
        lines.append(border)
        return "\n".join(lines)

    def to_image(
        self,
        zoom: int = 1,
        on_color: Tuple[int, int, int] = (255, 255, 255),
        off_color: Tuple[int, int, int] = (0, 0, 0),
    ) -> Image.Image:
        """Get the grid as a PIL Image.

        Args:
            zoom: Scaling factor
            on_color: RGB colour of lit pixels
            off_color: RGB colour of dark pixels

        Returns:
            PIL Image in RGB format
        """
        rgb = np.empty((self.height, self.width, 3), dtype=np.uint8)
        rgb[...] = off_color
        rgb[self._pixels] = on_color
        image = Image.fromarray(rgb)
        if zoom != 1:
            image = image.resize(
                (self.width * zoom, self.height * zoom), Image.Resampling.NEAREST
            )
        return image

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Framebuffer):
            return NotImplemented
        return bool(np.array_equal(self._pixels, other._pixels))

    __hash__ = None  # type: ignore[assignment]
