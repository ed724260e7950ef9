"""Front end pieces that run without opening a window."""

import json

import numpy as np
import pytest

pytest.importorskip("pygame")

from chip8vm.app import KEY_MAP, build_parser, load_config, main  # noqa: E402
from chip8vm.renderer import box_blur, colorize, GlowRenderer  # noqa: E402


class TestRenderer:

    def test_box_blur_keeps_energy(self):
        arr = np.zeros((8, 8), dtype=np.float32)
        arr[4, 4] = 9.0
        blurred = box_blur(arr, passes=2)
        assert blurred.shape == arr.shape
        assert blurred.sum() == pytest.approx(9.0, rel=1e-4)
        assert blurred[4, 4] < 9.0

    def test_colorize_is_surfarray_layout(self):
        frame = np.zeros((32, 64), dtype=np.uint8)
        frame[1, 2] = 1
        rgb = colorize(frame, (10, 20, 30))
        assert rgb.shape == (64, 32, 3)
        assert list(rgb[2, 1]) == [10, 20, 30]
        assert not rgb[1, 2].any()

    def test_glow_map_range(self):
        renderer = GlowRenderer(64, 32, 2, bloom_strength=1.0)
        frame = np.ones((32, 64), dtype=np.uint8)
        glow = renderer.glow_map(frame)
        assert glow.shape == (32 * 4, 64 * 4)
        assert glow.min() >= 0.0
        assert glow.max() <= 1.0


class TestCli:

    def test_keymap_covers_keypad(self):
        assert sorted(KEY_MAP.values()) == list(range(16))

    def test_flags_override_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({'clock_hz': 600, 'scale': 6}))
        args = build_parser().parse_args(["rom.ch8", "--config", str(path), "--hz", "900"])
        config = load_config(args)
        assert config.clock_hz == 900
        assert config.scale == 6

    def test_disassemble_listing(self, tmp_path, capsys):
        rom = tmp_path / "rom.ch8"
        rom.write_bytes(b"\x00\xE0\x12\x00")
        assert main([str(rom), "--disassemble"]) == 0
        out = capsys.readouterr().out
        assert "200: 00E0  CLS" in out
        assert "202: 1200  JP $200" in out

    def test_missing_rom(self, tmp_path):
        assert main([str(tmp_path / "missing.ch8")]) == 1

    def test_wrong_config_type_exits_cleanly(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({'clock_hz': 'fast'}))
        assert main([str(tmp_path / "rom.ch8"), "--config", str(path)]) == 2
