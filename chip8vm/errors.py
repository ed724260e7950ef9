"""Exceptions raised by the CHIP-8 machine."""


class Chip8Error(Exception):
    """Base class for every error the machine raises."""


class StackUnderflowError(Chip8Error):
    """00EE executed with an empty call stack."""

    def __init__(self, pc: int):
        self.pc = pc
        super().__init__(f"return with empty call stack at ${pc:03X}")


class MemoryAccessError(Chip8Error, IndexError):
    """Address outside the 4K address space."""

    def __init__(self, address: int, message: str = None):
        self.address = address
        super().__init__(message or f"memory access out of range: ${address:04X}")


class RomTooLargeError(MemoryAccessError):
    """ROM does not fit between the program start and the end of memory."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(
            size,
            f"ROM is {size} bytes, only {capacity} bytes available",
        )


class InvalidKeyError(Chip8Error, ValueError):
    """Key code outside 0-F."""

    def __init__(self, key):
        self.key = key
        super().__init__(f"invalid key code: {key!r}")


class ConfigError(Chip8Error, ValueError):
    """Bad emulator configuration."""
