"""The engine's only view of memory, display, keypad and sound."""

from typing import Optional

import numpy as np

from .display import FrameBuffer
from .keypad import Keypad
from .memory import Memory


class Bus:
    """Aggregates the passive devices of the machine.

    The sound flag is written by the CPU every cycle and read by the host.
    """

    def __init__(self):
        self.memory = Memory()
        self.display = FrameBuffer()
        self.keypad = Keypad()
        self.sound_on = False

    def reset(self):
        """Clear RAM (restoring the font), the screen and the sound flag."""
        self.memory.reset()
        self.display.clear()
        self.sound_on = False

    # ─── Memory ───

    def read(self, addr: int) -> int:
        return self.memory.read(addr)

    def write(self, addr: int, value: int):
        self.memory.write(addr, value)

    def read_block(self, addr: int, length: int) -> bytes:
        return self.memory.read_block(addr, length)

    def write_block(self, addr: int, values: bytes):
        self.memory.write_block(addr, values)

    def load(self, data: bytes, start: int):
        self.memory.load(data, start)

    # ─── Display ───

    def draw(self, x: int, y: int, addr: int, length: int) -> bool:
        """Draw ``length`` sprite rows read from ``addr`` at (x, y)."""
        rows = self.memory.read_block(addr, length)
        return self.display.draw_sprite(x, y, rows)

    def clear_screen(self):
        self.display.clear()

    def frame(self) -> np.ndarray:
        return self.display.snapshot()

    # ─── Keypad ───

    def set_key(self, key: Optional[int]):
        self.keypad.set_key(key)

    def get_key(self) -> Optional[int]:
        return self.keypad.get_key()

    def press_key(self, key: int):
        self.keypad.press(key)

    def release_key(self, key: int):
        self.keypad.release(key)
