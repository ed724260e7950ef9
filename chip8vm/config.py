"""
Machine constants and emulator configuration.

Everything the virtual machine treats as fixed lives here as a module-level
constant. The knobs a user may turn (clock speed, display scale, colours,
interpreter quirks) live on :class:`EmulatorConfig`, which can be loaded from
a JSON file.
"""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from .errors import ConfigError

# ═══════════════════════════════════════════════════════════════════════════════
# MACHINE CONSTANTS
# ═══════════════════════════════════════════════════════════════════════════════

DISPLAY_W, DISPLAY_H = 64, 32          # CHIP-8 native resolution

MEMORY_SIZE = 4096                      # 4KB RAM
PROGRAM_START = 0x200                   # Programs load at 0x200
NUM_REGISTERS = 16                      # V0-VF registers
NUM_KEYS = 16                           # 16 hex keys
FLAG_REGISTER = 0xF                     # VF

GLYPH_HEIGHT = 5                        # Bytes per font glyph

# Host timing
DEFAULT_CLOCK_HZ = 500                  # Instructions per second
TIMER_HZ = 60                           # Frame rate of the host loop

# Display defaults
SCALE = 12
BLOOM_STRENGTH = 0.55
BLUR_RADIUS = 1
GLOW_UPSCALE = 4

# CHIP-8 Font (4x5 pixels, stored as 5 bytes each)
FONTSET = [
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
]

# Colors (RGB)
COLORS = {
    'bg_dark': (15, 15, 25),
    'status_bg': (20, 20, 35),
    'text': (200, 200, 200),
    'text_dim': (120, 120, 140),
    'accent': (255, 100, 150),
}

PALETTES: Dict[str, Tuple[int, int, int]] = {
    'green': (0, 255, 128),
    'amber': (255, 176, 0),
    'white': (220, 220, 220),
    'blue': (100, 180, 255),
}


# ═══════════════════════════════════════════════════════════════════════════════
# USER CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════

def _check_type(name: str, value: Any, expected):
    # bool only matches bool, never int or float
    if isinstance(value, bool) != (expected is bool) or not isinstance(value, expected):
        raise ConfigError(f"{name} has the wrong type: {value!r}")


@dataclass
class Quirks:
    """Behaviours that differ between reference interpreters.

    The defaults reproduce the classic table: shifts read Vx, and 8XYE
    stores the raw masked MSB (0x80 or 0) in VF.
    """
    shift_source_vy: bool = False       # 8XY6/8XYE shift Vy into Vx
    normalize_shift_flag: bool = False  # 8XYE stores 1/0 instead of 0x80/0


@dataclass
class EmulatorConfig:
    """Settings for the host front end and the engine's quirks."""
    clock_hz: int = DEFAULT_CLOCK_HZ
    scale: int = SCALE
    color: str = 'green'
    bloom_strength: float = BLOOM_STRENGTH
    blur_radius: int = BLUR_RADIUS
    quirks: Quirks = field(default_factory=Quirks)

    def __post_init__(self):
        for name in ('clock_hz', 'scale', 'blur_radius'):
            _check_type(name, getattr(self, name), int)
        _check_type('bloom_strength', self.bloom_strength, (int, float))
        _check_type('color', self.color, str)

        if self.clock_hz < TIMER_HZ:
            raise ConfigError(f"clock_hz must be at least {TIMER_HZ}, got {self.clock_hz}")
        if self.scale < 1:
            raise ConfigError(f"scale must be positive, got {self.scale}")
        if self.color not in PALETTES:
            raise ConfigError(
                f"unknown color {self.color!r}, expected one of {', '.join(PALETTES)}"
            )

    @property
    def cycles_per_frame(self) -> int:
        return self.clock_hz // TIMER_HZ

    @property
    def fg_color(self) -> Tuple[int, int, int]:
        return PALETTES[self.color]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EmulatorConfig':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(sorted(unknown))}")

        values = dict(data)
        quirks = values.pop('quirks', {})
        if not isinstance(quirks, dict):
            raise ConfigError("'quirks' must be an object")
        quirk_names = {f.name for f in fields(Quirks)}
        bad = set(quirks) - quirk_names
        if bad:
            raise ConfigError(f"unknown quirks: {', '.join(sorted(bad))}")

        for name, value in quirks.items():
            _check_type(name, value, bool)

        return cls(quirks=Quirks(**quirks), **values)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> 'EmulatorConfig':
        """Load settings from a JSON file."""
        try:
            data = json.loads(Path(path).read_text())
        except OSError as e:
            raise ConfigError(f"cannot read config {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"invalid JSON in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"config {path} must contain a JSON object")
        return cls.from_dict(data)
