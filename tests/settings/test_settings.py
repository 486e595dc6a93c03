"""Tests for stored calculator settings and last voltages."""

import json

from voltcalc.settings import (
    CalculatorSettings,
    default_settings,
    last_voltage,
    load_settings,
    remember_voltage,
    save_settings,
    voltage_placeholder,
)


class TestFromDict:
    """Test CalculatorSettings.from_dict sanitising."""

    def test_valid_data(self):
        settings = CalculatorSettings.from_dict(
            {"profile_key": "52V", "max_cell": "4.1", "cutoff": "45.5", "advanced_open": True}
        )

        assert settings.profile_key == 52
        assert settings.max_cell == 4.1
        assert settings.nominal_cell == 3.7
        assert settings.min_cell == 3.0
        assert settings.cutoff == 45.5
        assert settings.advanced_open is True

    def test_unknown_profile_uses_default(self, capsys):
        settings = CalculatorSettings.from_dict({"profile_key": 99}, default_profile=48)

        assert settings.profile_key == 48
        assert "unknown" in capsys.readouterr().err

    def test_invalid_fields_reset_individually(self):
        settings = CalculatorSettings.from_dict(
            {"max_cell": 9, "nominal_cell": "abc", "min_cell": 3.2, "cutoff": -5}
        )

        assert settings.max_cell == 4.2
        assert settings.nominal_cell == 3.7
        assert settings.min_cell == 3.2
        assert settings.cutoff == 0.0

    def test_empty_dict_gives_defaults(self):
        assert CalculatorSettings.from_dict({}) == CalculatorSettings()

    def test_thresholds_property(self):
        thresholds = CalculatorSettings(max_cell=4.1, min_cell=3.2).thresholds

        assert thresholds.max_cell_voltage == 4.1
        assert thresholds.nominal_cell_voltage == 3.7
        assert thresholds.min_cell_voltage == 3.2


class TestLoadSave:
    """Test reading and writing the settings file."""

    def test_missing_file_gives_defaults(self, configured_env):
        assert load_settings() == CalculatorSettings()

    def test_default_profile_from_env(self, configured_env, monkeypatch):
        monkeypatch.setenv("VOLTCALC_PROFILE", "60")
        import voltcalc.env

        voltcalc.env._config = None

        assert default_settings().profile_key == 60
        assert load_settings().profile_key == 60

    def test_unknown_default_profile_falls_back_to_72(self, configured_env, monkeypatch):
        monkeypatch.setenv("VOLTCALC_PROFILE", "99")
        import voltcalc.env

        voltcalc.env._config = None

        assert default_settings().profile_key == 72

    def test_loads_stored(self, stored_settings):
        settings = load_settings()

        assert settings.profile_key == 48
        assert settings.max_cell == 4.15
        assert settings.nominal_cell == 3.6
        assert settings.min_cell == 3.1
        assert settings.cutoff == 40.0
        assert settings.advanced_open is True

    def test_corrupt_file_gives_defaults(self, settings_file, capsys):
        settings_file.write_text("{not json")

        assert load_settings() == CalculatorSettings()
        assert "Failed to load" in capsys.readouterr().err

    def test_non_object_gives_defaults(self, settings_file, capsys):
        settings_file.write_text("[1, 2, 3]")

        assert load_settings() == CalculatorSettings()
        assert "expected a JSON object" in capsys.readouterr().err

    def test_save_then_load(self, configured_env, settings_file):
        settings = CalculatorSettings(profile_key=36, cutoff=30.0, advanced_open=True)

        path = save_settings(settings)

        assert path == settings_file.resolve()
        assert json.loads(settings_file.read_text())["profile_key"] == 36
        assert load_settings() == settings

    def test_save_creates_state_dir(self, tmp_path, monkeypatch):
        state_dir = tmp_path / "nested" / "state"
        monkeypatch.setenv("STATE_DIR", str(state_dir))

        save_settings(CalculatorSettings())

        assert (state_dir / "settings.json").exists()


class TestLastVoltage:
    """Test last voltage memory per profile."""

    def test_none_stored(self, configured_env):
        assert last_voltage(72) is None

    def test_remember_keeps_text_as_typed(self, configured_env):
        remember_voltage(72, " 78.50 ")

        assert last_voltage(72) == "78.50"

    def test_per_profile(self, configured_env, voltages_file):
        remember_voltage(72, "78.5")
        remember_voltage(48, 50.2)

        assert last_voltage(72) == "78.5"
        assert last_voltage(48) == "50.2"
        assert json.loads(voltages_file.read_text()) == {"72": "78.5", "48": "50.2"}

    def test_empty_input_ignored(self, configured_env, voltages_file):
        remember_voltage(72, "")
        remember_voltage(72, None)

        assert not voltages_file.exists()

    def test_corrupt_file_ignored(self, configured_env, voltages_file):
        voltages_file.write_text("garbage")

        assert last_voltage(72) is None
        remember_voltage(72, "80")
        assert last_voltage(72) == "80"


class TestPlaceholder:
    """Test the voltage input hint."""

    def test_nominal_when_nothing_stored(self, configured_env):
        assert voltage_placeholder(72) == "e.g. 72V"
        assert voltage_placeholder(36) == "e.g. 36V"

    def test_last_voltage_when_stored(self, configured_env):
        remember_voltage(48, "52.1")

        assert voltage_placeholder(48) == "e.g. 52.1V"
