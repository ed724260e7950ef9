"""
pygame front end.

Drives :class:`~chip8vm.machine.Machine` at a fixed number of ticks per
60 Hz frame, maps the keyboard onto the hex keypad and draws the screen.
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import pygame

from .config import COLORS, DISPLAY_H, DISPLAY_W, PALETTES, TIMER_HZ, EmulatorConfig
from .disasm import disassemble, disassemble_block
from .errors import Chip8Error
from .machine import Machine
from .renderer import GlowRenderer

logger = logging.getLogger(__name__)

STATUS_H = 25

# Keyboard mapping (QWERTY -> CHIP-8 hex keypad)
# CHIP-8 Keypad:    Keyboard:
# 1 2 3 C          1 2 3 4
# 4 5 6 D          Q W E R
# 7 8 9 E          A S D F
# A 0 B F          Z X C V
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


class StatusBar:
    """Bottom status bar"""

    def __init__(self, y: int, width: int, height: int = STATUS_H):
        self.rect = pygame.Rect(0, y, width, height)
        self.text = "Ready"
        self.beeping = False

    def set_text(self, text: str):
        self.text = text

    def draw(self, surface: pygame.Surface, font: pygame.font.Font):
        pygame.draw.rect(surface, COLORS['status_bg'], self.rect)
        surface.blit(font.render(self.text, True, COLORS['text_dim']),
                     (10, self.rect.y + 5))

        if self.beeping:
            beep = font.render("BEEP", True, COLORS['accent'])
            surface.blit(beep, (self.rect.right - beep.get_width() - 10, self.rect.y + 5))


class Chip8App:
    """pygame window around a :class:`Machine`."""

    def __init__(self, config: EmulatorConfig, rom_path: Optional[Path] = None):
        self.config = config
        self.machine = Machine(quirks=config.quirks)
        self.rom_path = rom_path

        pygame.init()
        pygame.display.set_caption("Meow Machine CHIP-8")

        width, height = DISPLAY_W * config.scale, DISPLAY_H * config.scale
        self.screen = pygame.display.set_mode((width, height + STATUS_H))
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 20)

        self.renderer = GlowRenderer(DISPLAY_W, DISPLAY_H, config.scale,
                                     fg_color=config.fg_color,
                                     bloom_strength=config.bloom_strength,
                                     blur_radius=config.blur_radius)
        self.background = self.renderer.create_background()
        self.status_bar = StatusBar(height, width)

        self.running = True
        self.paused = False
        self.show_debug = False
        self.palette = list(PALETTES).index(config.color)

        if rom_path is not None:
            self._load_rom()

    # ─── Machine control ───

    def _load_rom(self):
        self.machine.reset()
        try:
            self.machine.load_rom_file(self.rom_path)
        except (OSError, Chip8Error) as e:
            logger.error("Failed to load ROM %s: %s", self.rom_path, e)
            self.status_bar.set_text(f"Failed to load ROM: {e}")
            self.paused = True
            return
        self.paused = False
        self.status_bar.set_text(f"Loaded: {self.rom_path.stem}")

    def _reset(self):
        if self.rom_path is not None:
            self._load_rom()
        else:
            self.machine.reset()
        self.status_bar.set_text("Reset")

    def _toggle_pause(self):
        self.paused = not self.paused
        self.status_bar.set_text("Paused" if self.paused else "Running")

    def _step(self):
        self.paused = True
        self._run_cycles(1)
        self.status_bar.set_text(f"Step - PC: ${self.machine.state.PC:03X}")

    def _next_palette(self):
        names = list(PALETTES)
        self.palette = (self.palette + 1) % len(names)
        self.renderer.fg_color = PALETTES[names[self.palette]]
        self.status_bar.set_text(f"Color: {names[self.palette]}")

    def _run_cycles(self, count: int):
        try:
            for _ in range(count):
                self.machine.tick()
        except Chip8Error as e:
            logger.error("Machine halted at $%03X: %s", self.machine.state.PC, e)
            self.status_bar.set_text(f"Halted: {e}")
            self.paused = True

    # ─── Main loop ───

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_p:
                    self._toggle_pause()
                elif event.key == pygame.K_F5:
                    self._reset()
                elif event.key == pygame.K_F10:
                    self._step()
                elif event.key == pygame.K_F2:
                    self.show_debug = not self.show_debug
                elif event.key == pygame.K_F3:
                    self._next_palette()
                elif event.key in KEY_MAP:
                    self.machine.press_key(KEY_MAP[event.key])

            elif event.type == pygame.KEYUP and event.key in KEY_MAP:
                self.machine.release_key(KEY_MAP[event.key])

    def update(self):
        if not self.paused:
            self._run_cycles(self.config.cycles_per_frame)
        self.status_bar.beeping = self.machine.should_beep()

    def render(self):
        self.screen.fill(COLORS['bg_dark'])
        self.screen.blit(self.background, (0, 0))

        base_surf, glow_surf = self.renderer.render(self.machine.frame())
        self.screen.blit(glow_surf, (0, 0), special_flags=pygame.BLEND_ADD)
        self.screen.blit(base_surf, (0, 0), special_flags=pygame.BLEND_ADD)

        if self.show_debug:
            self._render_debug()

        self.status_bar.draw(self.screen, self.font)
        pygame.display.flip()

    def _render_debug(self):
        """Render debug information overlay"""
        s = self.machine.state
        width = self.screen.get_width()

        lines = [
            f"PC: ${s.PC:03X}  I: ${s.I:03X}",
            f"SP: {len(s.stack)}  DT: {s.delay_timer:02X}  ST: {s.sound_timer:02X}",
            "V0-V7: " + " ".join(f"{v:02X}" for v in s.V[:8]),
            "V8-VF: " + " ".join(f"{v:02X}" for v in s.V[8:]),
        ]
        try:
            lines.append(f"OP: {disassemble(self.machine.cpu.fetch())}")
        except Chip8Error:
            lines.append("OP: <out of range>")

        overlay = pygame.Surface((220, 20 + 18 * len(lines)), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 180))
        self.screen.blit(overlay, (width - 230, 5))

        for i, line in enumerate(lines):
            text = self.font.render(line, True, self.renderer.fg_color)
            self.screen.blit(text, (width - 225, 10 + i * 18))

    def run(self):
        while self.running:
            self.handle_events()
            self.update()
            self.render()
            self.clock.tick(TIMER_HZ)

        pygame.quit()


# ═══════════════════════════════════════════════════════════════════════════════
# ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8vm", description="CHIP-8 emulator")
    parser.add_argument("rom", type=Path, help="ROM image to run")
    parser.add_argument("--config", type=Path, help="JSON settings file")
    parser.add_argument("--hz", type=int, help="instructions per second")
    parser.add_argument("--scale", type=int, help="window pixels per CHIP-8 pixel")
    parser.add_argument("--disassemble", action="store_true",
                        help="print a listing of the ROM and exit")
    parser.add_argument("-d", "--debug", action="store_true",
                        help="enable per-instruction trace logging")
    return parser


def load_config(args: argparse.Namespace) -> EmulatorConfig:
    """Settings file first, command line flags on top."""
    config = EmulatorConfig.from_json(args.config) if args.config else EmulatorConfig()

    overrides = {}
    if args.hz is not None:
        overrides['clock_hz'] = args.hz
    if args.scale is not None:
        overrides['scale'] = args.scale
    return replace(config, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.disassemble:
        try:
            data = args.rom.read_bytes()
        except OSError as e:
            logger.error("Cannot read ROM: %s", e)
            return 1
        for addr, opcode, text in disassemble_block(data):
            print(f"{addr:03X}: {opcode:04X}  {text}")
        return 0

    try:
        config = load_config(args)
    except Chip8Error as e:
        logger.error("%s", e)
        return 2

    if not args.rom.exists():
        logger.error("ROM not found: %s", args.rom)
        return 1

    Chip8App(config, args.rom).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
