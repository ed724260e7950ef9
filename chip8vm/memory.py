"""4K main memory with the built-in font at address 0."""

import logging

from .config import FONTSET, MEMORY_SIZE, PROGRAM_START
from .errors import MemoryAccessError, RomTooLargeError

logger = logging.getLogger(__name__)


class Memory:
    """Flat byte-addressable RAM.

    The font glyphs are copied to 0x000-0x04F on creation and on every
    reset. Nothing stops a program from overwriting them.
    """

    def __init__(self):
        self.data = bytearray(MEMORY_SIZE)
        self._load_fontset()

    def _load_fontset(self):
        """Load built-in font sprites to memory"""
        self.data[0:len(FONTSET)] = bytes(FONTSET)

    def reset(self):
        self.data = bytearray(MEMORY_SIZE)
        self._load_fontset()

    def read(self, addr: int) -> int:
        if not 0 <= addr < MEMORY_SIZE:
            raise MemoryAccessError(addr)
        return self.data[addr]

    def write(self, addr: int, value: int):
        if not 0 <= addr < MEMORY_SIZE:
            raise MemoryAccessError(addr)
        self.data[addr] = value & 0xFF

    def read_block(self, addr: int, length: int) -> bytes:
        """Read ``length`` consecutive bytes starting at ``addr``."""
        end = addr + length
        if addr < 0 or end > MEMORY_SIZE:
            raise MemoryAccessError(end - 1 if addr >= 0 else addr)
        return bytes(self.data[addr:end])

    def write_block(self, addr: int, values: bytes):
        """Write ``values`` from ``addr`` on. Nothing is written unless all fit."""
        end = addr + len(values)
        if addr < 0 or end > MEMORY_SIZE:
            raise MemoryAccessError(end - 1 if addr >= 0 else addr)
        self.data[addr:end] = bytes(v & 0xFF for v in values)

    def load(self, data: bytes, start: int = PROGRAM_START):
        """Copy ``data`` into memory starting at ``start``."""
        capacity = MEMORY_SIZE - start
        if len(data) > capacity:
            raise RomTooLargeError(len(data), capacity)

        self.data[start:start + len(data)] = data
        logger.debug("Wrote %d bytes at $%03X", len(data), start)
