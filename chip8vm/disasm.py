"""Opcode to mnemonic, for trace logging and the debug overlay."""

from typing import Iterator, Tuple

from .config import PROGRAM_START

_ALU_OPS = {0x0: "LD", 0x1: "OR", 0x2: "AND", 0x3: "XOR", 0x4: "ADD",
            0x5: "SUB", 0x6: "SHR", 0x7: "SUBN", 0xE: "SHL"}

_MISC_OPS = {0x07: "LD Vx, DT", 0x0A: "LD Vx, K", 0x15: "LD DT, Vx",
             0x18: "LD ST, Vx", 0x1E: "ADD I, Vx", 0x29: "LD F, Vx",
             0x33: "LD B, Vx", 0x55: "LD [I], Vx", 0x65: "LD Vx, [I]"}


def disassemble(opcode: int) -> str:
    """Disassemble opcode to human-readable string"""
    nnn = opcode & 0x0FFF
    nn = opcode & 0x00FF
    n = opcode & 0x000F
    x = (opcode >> 8) & 0x0F
    y = (opcode >> 4) & 0x0F
    op = (opcode >> 12) & 0xF

    if opcode == 0x00E0:
        return "CLS"
    elif opcode == 0x00EE:
        return "RET"
    elif op == 0x1:
        return f"JP ${nnn:03X}"
    elif op == 0x2:
        return f"CALL ${nnn:03X}"
    elif op == 0x3:
        return f"SE V{x:X}, ${nn:02X}"
    elif op == 0x4:
        return f"SNE V{x:X}, ${nn:02X}"
    elif op == 0x5 and n == 0:
        return f"SE V{x:X}, V{y:X}"
    elif op == 0x6:
        return f"LD V{x:X}, ${nn:02X}"
    elif op == 0x7:
        return f"ADD V{x:X}, ${nn:02X}"
    elif op == 0x8 and n in _ALU_OPS:
        return f"{_ALU_OPS[n]} V{x:X}, V{y:X}"
    elif op == 0x9 and n == 0:
        return f"SNE V{x:X}, V{y:X}"
    elif op == 0xA:
        return f"LD I, ${nnn:03X}"
    elif op == 0xB:
        return f"JP V0, ${nnn:03X}"
    elif op == 0xC:
        return f"RND V{x:X}, ${nn:02X}"
    elif op == 0xD:
        return f"DRW V{x:X}, V{y:X}, {n}"
    elif op == 0xE and nn == 0x9E:
        return f"SKP V{x:X}"
    elif op == 0xE and nn == 0xA1:
        return f"SKNP V{x:X}"
    elif op == 0xF and nn in _MISC_OPS:
        return _MISC_OPS[nn].replace("Vx", f"V{x:X}")

    return f"??? ${opcode:04X}"


def disassemble_block(data: bytes, start: int = PROGRAM_START) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(address, opcode, mnemonic)`` for each 2-byte word in ``data``.

    A trailing odd byte is ignored.
    """
    for i in range(0, len(data) - 1, 2):
        opcode = (data[i] << 8) | data[i + 1]
        yield start + i, opcode, disassemble(opcode)
