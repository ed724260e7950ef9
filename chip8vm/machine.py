"""
Host-facing CHIP-8 machine.

This is the whole surface a front end needs: load a ROM, call ``tick`` at
whatever rate it likes, read the frame buffer and the beep flag, and feed
key presses in.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Union

import numpy as np

from .bus import Bus
from .config import PROGRAM_START, Quirks
from .cpu import Chip8CPU, default_random_byte

logger = logging.getLogger(__name__)


class Machine:

    def __init__(self, quirks: Optional[Quirks] = None,
                 random_byte: Callable[[], int] = default_random_byte,
                 log: Optional[logging.Logger] = None):
        self.bus = Bus()
        self.cpu = Chip8CPU(self.bus, random_byte=random_byte, quirks=quirks, log=log)

    @property
    def state(self):
        return self.cpu.state

    def load(self, rom: bytes):
        """Write ROM bytes into memory from 0x200 on."""
        self.bus.load(bytes(rom), PROGRAM_START)
        logger.info("Loaded %d byte ROM at $%03X", len(rom), PROGRAM_START)

    def load_rom_file(self, path: Union[str, Path]) -> bytes:
        """Read a ROM file and load it. Returns the bytes that were loaded."""
        data = Path(path).read_bytes()
        self.load(data)
        return data

    def tick(self):
        self.cpu.tick()

    def reset(self):
        """Back to power-on state. The held key is kept."""
        self.cpu.reset()
        self.bus.reset()
        logger.info("Machine reset")

    def frame(self) -> np.ndarray:
        """Read-only (32, 64) snapshot of the screen, one 0/1 byte per pixel."""
        return self.bus.frame()

    def should_beep(self) -> bool:
        return self.bus.sound_on

    # ─── Keypad ───

    def set_key(self, key: Optional[int]):
        self.bus.set_key(key)

    def get_key(self) -> Optional[int]:
        return self.bus.get_key()

    def press_key(self, key: int):
        self.bus.press_key(key)

    def release_key(self, key: int):
        self.bus.release_key(key)
