"""Meow Machine: a CHIP-8 virtual machine."""

from .config import EmulatorConfig, Quirks
from .cpu import Chip8CPU, CPUState, PCKind, PCUpdate
from .errors import (Chip8Error, ConfigError, InvalidKeyError, MemoryAccessError,
                     RomTooLargeError, StackUnderflowError)
from .machine import Machine

__version__ = "0.2.0"

__all__ = [
    "Machine", "Chip8CPU", "CPUState", "PCKind", "PCUpdate",
    "EmulatorConfig", "Quirks",
    "Chip8Error", "ConfigError", "InvalidKeyError", "MemoryAccessError",
    "RomTooLargeError", "StackUnderflowError",
]
