"""
Frame buffer draw/collision tests.

Sprites are XORed onto a 64x32 torus; a collision is an on pixel turned
off by the sprite.
"""

import numpy as np
import pytest

from chip8vm.display import FrameBuffer


@pytest.fixture
def fb():
    return FrameBuffer()


class TestDrawSprite:

    def test_pixels_msb_first(self, fb):
        assert fb.draw_sprite(0, 0, [0b10100000]) is False
        assert list(fb.pixels[0, :4]) == [1, 0, 1, 0]

    @pytest.mark.parametrize("byte", [0x00, 0x01, 0x3C, 0x80, 0xA5, 0xFF])
    def test_draw_twice_restores_and_collides(self, fb, byte):
        fb.pixels[3, 10:18] = [1, 0, 0, 1, 1, 0, 1, 0]
        before = fb.pixels.copy()

        fb.draw_sprite(10, 3, [byte])
        lit = fb.pixels[3, 10:18].copy()
        collided = fb.draw_sprite(10, 3, [byte])

        assert np.array_equal(fb.pixels, before)
        # Second draw erases whatever the first one left lit under a sprite bit
        sprite_bits = np.unpackbits(np.array([byte], dtype=np.uint8))
        assert collided == bool(np.any(lit & sprite_bits))

    def test_horizontal_wrap(self, fb):
        fb.draw_sprite(60, 0, [0xFF])
        assert list(np.flatnonzero(fb.pixels[0])) == [0, 1, 2, 3, 60, 61, 62, 63]

    def test_vertical_wrap(self, fb):
        fb.draw_sprite(0, 30, [0x80, 0x80, 0x80, 0x80])
        assert list(np.flatnonzero(fb.pixels[:, 0])) == [0, 1, 30, 31]

    def test_origin_wraps(self, fb):
        fb.draw_sprite(64 + 5, 32 + 2, [0x80])
        assert fb.pixels[2, 5] == 1

    def test_collision_needs_on_to_off(self, fb):
        # Turning off pixels that are already off is not a collision
        assert fb.draw_sprite(0, 0, [0xF0]) is False
        assert fb.draw_sprite(4, 0, [0xF0]) is False
        assert fb.draw_sprite(0, 0, [0x08]) is True

    def test_collision_anywhere_in_sprite(self, fb):
        fb.pixels[5, 7] = 1
        assert fb.draw_sprite(0, 0, [0x00] * 5 + [0x01]) is True
        assert fb.pixels[5, 7] == 0

    def test_cells_stay_binary(self, fb):
        for _ in range(3):
            fb.draw_sprite(1, 1, [0xFF, 0x0F, 0xF0])
        assert set(np.unique(fb.pixels)) <= {0, 1}


class TestBuffer:

    def test_clear(self, fb):
        fb.draw_sprite(0, 0, [0xFF] * 8)
        fb.clear()
        assert not fb.pixels.any()

    def test_row_major_flat_address(self, fb):
        fb.draw_sprite(7, 3, [0x80])
        assert fb.pixels.ravel()[3 * 64 + 7] == 1

    def test_snapshot_is_read_only_copy(self, fb):
        snap = fb.snapshot()
        assert snap.shape == (32, 64)
        with pytest.raises(ValueError):
            snap[0, 0] = 1
        fb.draw_sprite(0, 0, [0x80])
        assert snap[0, 0] == 0
