import json

import pytest

from chip8vm import ConfigError, EmulatorConfig, Quirks


class TestEmulatorConfig:

    def test_defaults(self):
        config = EmulatorConfig()
        assert config.clock_hz == 500
        assert config.cycles_per_frame == 8
        assert config.quirks == Quirks()
        assert config.fg_color == (0, 255, 128)

    def test_from_dict(self):
        config = EmulatorConfig.from_dict({
            'clock_hz': 1200,
            'color': 'amber',
            'quirks': {'normalize_shift_flag': True},
        })
        assert config.cycles_per_frame == 20
        assert config.fg_color == (255, 176, 0)
        assert config.quirks.normalize_shift_flag is True
        assert config.quirks.shift_source_vy is False

    @pytest.mark.parametrize("data", [
        {'speed': 10},
        {'quirks': {'load_store_inc': True}},
        {'quirks': []},
        {'color': 'purple'},
        {'clock_hz': 10},
        {'scale': 0},
    ])
    def test_rejects_bad_values(self, data):
        with pytest.raises(ConfigError):
            EmulatorConfig.from_dict(data)

    @pytest.mark.parametrize("data", [
        {'clock_hz': 'fast'},
        {'clock_hz': True},
        {'scale': 2.5},
        {'bloom_strength': 'x'},
        {'color': 3},
        {'quirks': {'shift_source_vy': 'yes'}},
        {'quirks': {'normalize_shift_flag': 1}},
    ])
    def test_rejects_wrong_types(self, data):
        with pytest.raises(ConfigError, match="wrong type"):
            EmulatorConfig.from_dict(data)

    def test_from_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({'scale': 8, 'quirks': {'shift_source_vy': True}}))
        config = EmulatorConfig.from_json(path)
        assert config.scale == 8
        assert config.quirks.shift_source_vy is True

    def test_from_json_invalid(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            EmulatorConfig.from_json(path)

    def test_from_json_missing(self, tmp_path):
        with pytest.raises(ConfigError):
            EmulatorConfig.from_json(tmp_path / "nope.json")

    def test_from_json_not_object(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError):
            EmulatorConfig.from_json(path)
