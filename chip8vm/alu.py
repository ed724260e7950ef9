"""
8-bit arithmetic for the 8XYN family.

Each helper returns ``(result, flag)`` so the CPU decides where the flag
goes (always VF) and tests can check flags without a machine.
"""

from typing import Tuple


def add(a: int, b: int) -> Tuple[int, int]:
    """a + b; flag is 1 on carry out of bit 7."""
    total = a + b
    return total & 0xFF, 1 if total > 0xFF else 0


def sub(a: int, b: int) -> Tuple[int, int]:
    """a - b; flag is 1 when there is NO borrow (b <= a)."""
    return (a - b) & 0xFF, 1 if b <= a else 0


def shr(value: int) -> Tuple[int, int]:
    """Shift right; flag is the bit shifted out."""
    return value >> 1, value & 0x1


def shl(value: int, normalize: bool = False) -> Tuple[int, int]:
    """Shift left; flag is the MSB shifted out.

    By default the flag is the raw masked byte (0x80 or 0). With
    ``normalize`` it is 1 or 0.
    """
    msb = value & 0x80
    if normalize:
        msb = 1 if msb else 0
    return (value << 1) & 0xFF, msb
