"""Phosphor glow rendering of a CHIP-8 frame."""

from typing import Tuple

import numpy as np
import pygame

from .config import BLOOM_STRENGTH, BLUR_RADIUS, COLORS, GLOW_UPSCALE, PALETTES


def box_blur(arr: np.ndarray, passes: int = 1) -> np.ndarray:
    """Toroidal 3x3 box blur, repeated ``passes`` times."""
    a = arr.astype(np.float32)
    for _ in range(passes):
        a = (np.roll(a, 1, axis=1) + a + np.roll(a, -1, axis=1)) / 3.0
        a = (np.roll(a, 1, axis=0) + a + np.roll(a, -1, axis=0)) / 3.0
    return a


def colorize(intensity: np.ndarray, color: Tuple[int, int, int]) -> np.ndarray:
    """
    Turn a (height, width) intensity map in 0..1 into an RGB array laid
    out the way ``pygame.surfarray`` wants it: (width, height, 3).
    """
    rgb = np.zeros(intensity.shape[::-1] + (3,), dtype=np.uint8)
    for i, c in enumerate(color):
        rgb[:, :, i] = (intensity.T * c).astype(np.uint8)
    return rgb


class GlowRenderer:
    """Phosphor glow/bloom post-processing effect"""

    def __init__(self, width: int, height: int, scale: int,
                 fg_color: Tuple[int, int, int] = PALETTES['green'],
                 bg_color: Tuple[int, int, int] = COLORS['bg_dark'],
                 bloom_strength: float = BLOOM_STRENGTH,
                 blur_radius: int = BLUR_RADIUS):
        self.width = width
        self.height = height
        self.fg_color = fg_color
        self.bg_color = bg_color
        self.bloom_strength = bloom_strength
        self.blur_radius = blur_radius
        self.final_size = (width * scale, height * scale)

    def glow_map(self, frame: np.ndarray) -> np.ndarray:
        """Blurred, upscaled intensity map of the lit pixels."""
        base = frame.astype(np.float32)
        up = np.kron(base, np.ones((GLOW_UPSCALE, GLOW_UPSCALE), dtype=np.float32))
        glow = box_blur(up, passes=1 + self.blur_radius)
        return np.clip(glow * self.bloom_strength, 0.0, 1.0)

    def render(self, frame: np.ndarray) -> Tuple[pygame.Surface, pygame.Surface]:
        """
        Convert a frame snapshot to glow surfaces

        Args:
            frame: (height, width) 0/1 array from ``Machine.frame()``

        Returns:
            (base_surface, glow_surface) tuple, both at the final size
        """
        base_surf = pygame.surfarray.make_surface(colorize(frame, self.fg_color))
        glow_surf = pygame.surfarray.make_surface(colorize(self.glow_map(frame), self.fg_color))

        base_final = pygame.transform.scale(base_surf, self.final_size)
        glow_final = pygame.transform.smoothscale(glow_surf, self.final_size)
        return base_final, glow_final

    def create_background(self) -> pygame.Surface:
        """Create CRT-style background with scanlines"""
        surf = pygame.Surface(self.final_size)
        surf.fill(self.bg_color)

        line_color = tuple(min(c + 5, 255) for c in self.bg_color)
        for y in range(0, self.final_size[1], 2):
            pygame.draw.line(surf, line_color, (0, y), (self.final_size[0], y))

        return surf
