"""64x32 monochrome frame buffer."""

from typing import Iterable

import numpy as np

from .config import DISPLAY_H, DISPLAY_W

# Column offsets of the 8 bits in a sprite row, MSB first
_SPRITE_COLUMNS = np.arange(8)


class FrameBuffer:
    """One byte per pixel, row-major: ``pixels[y, x]``.

    ``pixels.ravel()[y * 64 + x]`` is the same pixel, which is the layout
    hosts expect when they read the buffer as a flat block of video RAM.
    """

    def __init__(self):
        self.pixels = np.zeros((DISPLAY_H, DISPLAY_W), dtype=np.uint8)

    def clear(self):
        self.pixels.fill(0)

    def draw_sprite(self, origin_x: int, origin_y: int, rows: Iterable[int]) -> bool:
        """
        XOR a sprite onto the screen.

        Both axes wrap, so a sprite leaving the right or bottom edge comes
        back in on the left or top.

        Args:
            origin_x: column of the sprite's left edge
            origin_y: row of the sprite's top edge
            rows: one byte per sprite row, MSB is the leftmost pixel

        Returns:
            True if any pixel that was on got switched off
        """
        collision = False
        cols = (origin_x + _SPRITE_COLUMNS) % DISPLAY_W

        for r, byte in enumerate(rows):
            y = (origin_y + r) % DISPLAY_H
            bits = np.unpackbits(np.array([byte & 0xFF], dtype=np.uint8))

            before = self.pixels[y, cols]
            after = before ^ bits
            self.pixels[y, cols] = after

            if np.any((before == 1) & (after == 0)):
                collision = True

        return collision

    def snapshot(self) -> np.ndarray:
        """Read-only copy of the current pixels."""
        frame = self.pixels.copy()
        frame.flags.writeable = False
        return frame
