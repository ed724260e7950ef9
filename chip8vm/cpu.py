"""
CHIP-8 CPU core.

The CPU owns the registers, timers and call stack, and reaches everything
else through a :class:`~chip8vm.bus.Bus`. Each handler returns a
:class:`PCUpdate` describing what happens to the program counter; ``tick``
applies it in one place.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

from . import alu
from .bus import Bus
from .config import (FLAG_REGISTER, GLYPH_HEIGHT, NUM_REGISTERS, PROGRAM_START,
                     Quirks)
from .disasm import disassemble
from .errors import StackUnderflowError

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# PROGRAM COUNTER POLICY
# ═══════════════════════════════════════════════════════════════════════════════

class PCKind(Enum):
    NEXT = 'next'   # +2
    SKIP = 'skip'   # +4
    JUMP = 'jump'   # absolute


@dataclass(frozen=True)
class PCUpdate:
    kind: PCKind
    address: int = 0

    @classmethod
    def jump(cls, address: int) -> 'PCUpdate':
        return cls(PCKind.JUMP, address & 0xFFFF)


NEXT = PCUpdate(PCKind.NEXT)
SKIP = PCUpdate(PCKind.SKIP)


def skip_if(condition: bool) -> PCUpdate:
    return SKIP if condition else NEXT


# ═══════════════════════════════════════════════════════════════════════════════
# DECODING
# ═══════════════════════════════════════════════════════════════════════════════

class Instruction(NamedTuple):
    """A fetched opcode split into its nibbles and operand fields."""
    opcode: int
    p4: int     # bits 12-15
    p3: int     # bits 8-11
    p2: int     # bits 4-7
    p1: int     # bits 0-3

    @classmethod
    def decode(cls, opcode: int) -> 'Instruction':
        return cls(opcode,
                   (opcode >> 12) & 0xF,
                   (opcode >> 8) & 0xF,
                   (opcode >> 4) & 0xF,
                   opcode & 0xF)

    @property
    def x(self) -> int:
        return self.p3

    @property
    def y(self) -> int:
        return self.p2

    @property
    def n(self) -> int:
        return self.p1

    @property
    def nn(self) -> int:
        return self.opcode & 0x00FF

    @property
    def nnn(self) -> int:
        return self.opcode & 0x0FFF

    @property
    def key(self) -> Tuple[int, Optional[int]]:
        """Dispatch key: the high nibble plus whatever else tells the
        instructions of that family apart."""
        if self.p4 == 0x0:
            return 0x0, self.nnn
        if self.p4 in (0x5, 0x8, 0x9):
            return self.p4, self.p1
        if self.p4 in (0xE, 0xF):
            return self.p4, self.nn
        return self.p4, None


# ═══════════════════════════════════════════════════════════════════════════════
# CPU
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class CPUState:
    """CHIP-8 CPU state container"""
    V: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)  # V0-VF
    I: int = 0              # Index register (16-bit)
    PC: int = PROGRAM_START # Program counter
    stack: List[int] = field(default_factory=list)

    delay_timer: int = 0
    sound_timer: int = 0


def default_random_byte() -> int:
    return random.randint(0, 255)


Handler = Callable[[Instruction], PCUpdate]


class Chip8CPU:
    """Fetch/decode/execute engine.

    Args:
        bus: memory, display, keypad and sound flag
        random_byte: source for CXNN, returns 0-255
        quirks: interpreter quirks, defaults to the classic behaviour
        log: logger for the instruction trace
    """

    def __init__(self, bus: Bus,
                 random_byte: Callable[[], int] = default_random_byte,
                 quirks: Optional[Quirks] = None,
                 log: Optional[logging.Logger] = None):
        self.bus = bus
        self.random_byte = random_byte
        self.quirks = quirks or Quirks()
        self.log = log or logger
        self.state = CPUState()
        self._dispatch = self._build_dispatch()

    def _build_dispatch(self) -> Dict[Tuple[int, Optional[int]], Handler]:
        return {
            (0x0, 0x0E0): self._op_00e0,
            (0x0, 0x0EE): self._op_00ee,
            (0x1, None): self._op_1nnn,
            (0x2, None): self._op_2nnn,
            (0x3, None): self._op_3xnn,
            (0x4, None): self._op_4xnn,
            (0x5, 0x0): self._op_5xy0,
            (0x6, None): self._op_6xnn,
            (0x7, None): self._op_7xnn,
            (0x8, 0x0): self._op_8xy0,
            (0x8, 0x1): self._op_8xy1,
            (0x8, 0x2): self._op_8xy2,
            (0x8, 0x3): self._op_8xy3,
            (0x8, 0x4): self._op_8xy4,
            (0x8, 0x5): self._op_8xy5,
            (0x8, 0x6): self._op_8xy6,
            (0x8, 0x7): self._op_8xy7,
            (0x8, 0xE): self._op_8xye,
            (0x9, 0x0): self._op_9xy0,
            (0xA, None): self._op_annn,
            (0xB, None): self._op_bnnn,
            (0xC, None): self._op_cxnn,
            (0xD, None): self._op_dxyn,
            (0xE, 0x9E): self._op_ex9e,
            (0xE, 0xA1): self._op_exa1,
            (0xF, 0x07): self._op_fx07,
            (0xF, 0x0A): self._op_fx0a,
            (0xF, 0x15): self._op_fx15,
            (0xF, 0x18): self._op_fx18,
            (0xF, 0x1E): self._op_fx1e,
            (0xF, 0x29): self._op_fx29,
            (0xF, 0x33): self._op_fx33,
            (0xF, 0x55): self._op_fx55,
            (0xF, 0x65): self._op_fx65,
        }

    def reset(self):
        """Reset registers, timers and stack"""
        self.state = CPUState()

    # ─── Cycle ───

    def fetch(self) -> int:
        """Fetch the 16-bit big-endian opcode at PC without advancing it."""
        pc = self.state.PC
        hi = self.bus.read(pc)
        lo = self.bus.read((pc + 1) & 0xFFFF)
        return (hi << 8) | lo

    def update_timers(self):
        """Count both timers down and drive the sound flag.

        The flag follows the sound timer's value before it is decremented.
        """
        s = self.state
        if s.delay_timer > 0:
            s.delay_timer -= 1

        if s.sound_timer > 0:
            self.bus.sound_on = True
            s.sound_timer -= 1
        else:
            self.bus.sound_on = False

    def tick(self):
        """Execute one fetch-decode-execute cycle."""
        opcode = self.fetch()
        if self.log.isEnabledFor(logging.DEBUG):
            self.log.debug("$%03X  %04X  %-16s I=$%03X V=%s",
                           self.state.PC, opcode, disassemble(opcode),
                           self.state.I, " ".join(f"{v:02X}" for v in self.state.V))

        self.update_timers()

        update = self.execute(opcode)
        self._apply(update)

    def execute(self, opcode: int) -> PCUpdate:
        """Run the handler for ``opcode`` and return its PC policy."""
        instr = Instruction.decode(opcode)
        handler = self._dispatch.get(instr.key)
        if handler is None:
            self.log.debug("Unknown opcode %04X at $%03X, skipping", opcode, self.state.PC)
            return NEXT
        return handler(instr)

    def _apply(self, update: PCUpdate):
        if update.kind is PCKind.NEXT:
            self.state.PC = (self.state.PC + 2) & 0xFFFF
        elif update.kind is PCKind.SKIP:
            self.state.PC = (self.state.PC + 4) & 0xFFFF
        else:
            self.state.PC = update.address

    def _set_with_flag(self, x: int, result: Tuple[int, int]):
        # VF is written last so it holds the flag when x is F
        value, flag = result
        self.state.V[x] = value
        self.state.V[FLAG_REGISTER] = flag

    def _shift(self, i: Instruction, op: Callable[[int], Tuple[int, int]]):
        _, flag = op(self._shift_source(i))
        self.state.V[FLAG_REGISTER] = flag
        # The source is read again, so a shift of VF shifts the flag just written
        self.state.V[i.x] = op(self._shift_source(i))[0]

    # ─── 0x0XXX ───

    def _op_00e0(self, i: Instruction) -> PCUpdate:
        # CLS
        self.bus.clear_screen()
        return NEXT

    def _op_00ee(self, i: Instruction) -> PCUpdate:
        # RET
        if not self.state.stack:
            raise StackUnderflowError(self.state.PC)
        return PCUpdate.jump(self.state.stack.pop())

    # ─── Flow control ───

    def _op_1nnn(self, i: Instruction) -> PCUpdate:
        # JP addr
        return PCUpdate.jump(i.nnn)

    def _op_2nnn(self, i: Instruction) -> PCUpdate:
        # CALL addr
        self.state.stack.append((self.state.PC + 2) & 0xFFFF)
        return PCUpdate.jump(i.nnn)

    def _op_3xnn(self, i: Instruction) -> PCUpdate:
        # SE Vx, byte
        return skip_if(self.state.V[i.x] == i.nn)

    def _op_4xnn(self, i: Instruction) -> PCUpdate:
        # SNE Vx, byte
        return skip_if(self.state.V[i.x] != i.nn)

    def _op_5xy0(self, i: Instruction) -> PCUpdate:
        # SE Vx, Vy
        return skip_if(self.state.V[i.x] == self.state.V[i.y])

    def _op_9xy0(self, i: Instruction) -> PCUpdate:
        # SNE Vx, Vy
        return skip_if(self.state.V[i.x] != self.state.V[i.y])

    def _op_bnnn(self, i: Instruction) -> PCUpdate:
        # JP V0, addr
        return PCUpdate.jump(self.state.V[0] + i.nnn)

    # ─── Loads and immediate arithmetic ───

    def _op_6xnn(self, i: Instruction) -> PCUpdate:
        self.state.V[i.x] = i.nn
        return NEXT

    def _op_7xnn(self, i: Instruction) -> PCUpdate:
        # No carry flag for ADD Vx, byte
        self.state.V[i.x] = (self.state.V[i.x] + i.nn) & 0xFF
        return NEXT

    # ─── 8XYN: ALU operations ───

    def _op_8xy0(self, i: Instruction) -> PCUpdate:
        self.state.V[i.x] = self.state.V[i.y]
        return NEXT

    def _op_8xy1(self, i: Instruction) -> PCUpdate:
        self.state.V[i.x] |= self.state.V[i.y]
        return NEXT

    def _op_8xy2(self, i: Instruction) -> PCUpdate:
        self.state.V[i.x] &= self.state.V[i.y]
        return NEXT

    def _op_8xy3(self, i: Instruction) -> PCUpdate:
        self.state.V[i.x] ^= self.state.V[i.y]
        return NEXT

    def _op_8xy4(self, i: Instruction) -> PCUpdate:
        V = self.state.V
        self._set_with_flag(i.x, alu.add(V[i.x], V[i.y]))
        return NEXT

    def _op_8xy5(self, i: Instruction) -> PCUpdate:
        V = self.state.V
        self._set_with_flag(i.x, alu.sub(V[i.x], V[i.y]))
        return NEXT

    def _op_8xy7(self, i: Instruction) -> PCUpdate:
        V = self.state.V
        self._set_with_flag(i.x, alu.sub(V[i.y], V[i.x]))
        return NEXT

    def _shift_source(self, i: Instruction) -> int:
        return self.state.V[i.y if self.quirks.shift_source_vy else i.x]

    def _op_8xy6(self, i: Instruction) -> PCUpdate:
        # SHR Vx
        self._shift(i, alu.shr)
        return NEXT

    def _op_8xye(self, i: Instruction) -> PCUpdate:
        # SHL Vx
        normalize = self.quirks.normalize_shift_flag
        self._shift(i, lambda value: alu.shl(value, normalize=normalize))
        return NEXT

    # ─── Index, random, draw ───

    def _op_annn(self, i: Instruction) -> PCUpdate:
        self.state.I = i.nnn
        return NEXT

    def _op_cxnn(self, i: Instruction) -> PCUpdate:
        self.state.V[i.x] = (self.random_byte() & 0xFF) & i.nn
        return NEXT

    def _op_dxyn(self, i: Instruction) -> PCUpdate:
        V = self.state.V
        collision = self.bus.draw(V[i.x], V[i.y], self.state.I, i.n)
        V[FLAG_REGISTER] = 1 if collision else 0
        return NEXT

    # ─── EX9E/EXA1: Key operations ───

    def _op_ex9e(self, i: Instruction) -> PCUpdate:
        # SKP Vx
        key = self.bus.get_key()
        return skip_if(key is not None and key == self.state.V[i.x])

    def _op_exa1(self, i: Instruction) -> PCUpdate:
        # SKNP Vx, no key at all counts as "not that key"
        key = self.bus.get_key()
        return skip_if(key is None or key != self.state.V[i.x])

    # ─── FX07-FX65: Misc operations ───

    def _op_fx07(self, i: Instruction) -> PCUpdate:
        self.state.V[i.x] = self.state.delay_timer
        return NEXT

    def _op_fx0a(self, i: Instruction) -> PCUpdate:
        # Spin on this instruction until the key in Vx is held
        key = self.bus.get_key()
        if key is None or key != self.state.V[i.x]:
            return PCUpdate.jump(self.state.PC)
        return NEXT

    def _op_fx15(self, i: Instruction) -> PCUpdate:
        self.state.delay_timer = self.state.V[i.x]
        return NEXT

    def _op_fx18(self, i: Instruction) -> PCUpdate:
        self.state.sound_timer = self.state.V[i.x]
        return NEXT

    def _op_fx1e(self, i: Instruction) -> PCUpdate:
        self.state.I = (self.state.I + self.state.V[i.x]) & 0xFFFF
        return NEXT

    def _op_fx29(self, i: Instruction) -> PCUpdate:
        # Point I at the font glyph for digit Vx
        self.state.I = self.state.V[i.x] * GLYPH_HEIGHT
        return NEXT

    def _op_fx33(self, i: Instruction) -> PCUpdate:
        # BCD
        value = self.state.V[i.x]
        digits = (value // 100, (value // 10) % 10, value % 10)
        self.bus.write_block(self.state.I, bytes(digits))
        return NEXT

    def _op_fx55(self, i: Instruction) -> PCUpdate:
        # Store V0-Vx, I is left unchanged
        self.bus.write_block(self.state.I, bytes(self.state.V[:i.x + 1]))
        return NEXT

    def _op_fx65(self, i: Instruction) -> PCUpdate:
        # Load V0-Vx, I is left unchanged
        self.state.V[:i.x + 1] = list(self.bus.read_block(self.state.I, i.x + 1))
        return NEXT
