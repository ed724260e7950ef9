import pytest

from chip8vm import Machine


def assemble(*opcodes):
    """Pack 16-bit opcodes into big-endian ROM bytes."""
    return b"".join(op.to_bytes(2, "big") for op in opcodes)


@pytest.fixture
def machine():
    """Machine with a fixed random source so CXNN is predictable."""
    return Machine(random_byte=lambda: 0xAB)


@pytest.fixture
def run(machine):
    """Load opcodes at 0x200 and tick once per opcode (or ``ticks`` times)."""
    def _run(*opcodes, ticks=None):
        machine.load(assemble(*opcodes))
        for _ in range(len(opcodes) if ticks is None else ticks):
            machine.tick()
        return machine
    return _run
