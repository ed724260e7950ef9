import pytest

from chip8vm.disasm import disassemble, disassemble_block


@pytest.mark.parametrize("opcode,text", [
    (0x00E0, "CLS"),
    (0x00EE, "RET"),
    (0x1ABC, "JP $ABC"),
    (0x2ABC, "CALL $ABC"),
    (0x3042, "SE V0, $42"),
    (0x5120, "SE V1, V2"),
    (0x8AB4, "ADD VA, VB"),
    (0x8ABE, "SHL VA, VB"),
    (0xD125, "DRW V1, V2, 5"),
    (0xE59E, "SKP V5"),
    (0xF30A, "LD V3, K"),
    (0xF733, "LD B, V7"),
    (0xF265, "LD V2, [I]"),
])
def test_mnemonics(opcode, text):
    assert disassemble(opcode) == text


@pytest.mark.parametrize("opcode", [0x0123, 0x5121, 0x800F, 0xE000, 0xF0FF])
def test_unknown(opcode):
    assert disassemble(opcode).startswith("???")


def test_block_addresses():
    listing = list(disassemble_block(b"\x60\x05\x12\x00\xFF"))
    assert listing == [
        (0x200, 0x6005, "LD V0, $05"),
        (0x202, 0x1200, "JP $200"),
    ]
