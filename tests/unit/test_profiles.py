"""Tests for battery profiles and threshold sanitising."""

import pytest

from voltcalc.errors import InvalidConfiguration
from voltcalc.profiles import (
    DEFAULT_THRESHOLDS,
    PROFILES,
    THRESHOLD_LIMITS,
    BatteryProfile,
    CellThresholds,
    get_profile,
    sanitize_cutoff,
    sanitize_thresholds,
)


class TestProfiles:
    """Test the static profile table."""

    @pytest.mark.parametrize(
        "key,cells",
        [(36, 10), (48, 13), (52, 14), (60, 16), (72, 20)],
    )
    def test_series_cells(self, key, cells):
        assert PROFILES[key].series_cells == cells
        assert PROFILES[key].nominal_voltage == float(key)

    def test_profiles_are_immutable(self):
        with pytest.raises(AttributeError):
            PROFILES[72].series_cells = 21


class TestGetProfile:
    """Test get_profile lookups."""

    @pytest.mark.parametrize("ref", [72, "72", "72V", " 72v ", "72 V"])
    def test_key_variants(self, ref):
        assert get_profile(ref) is PROFILES[72]

    def test_profile_passthrough(self):
        custom = BatteryProfile(key=24, name="24V", series_cells=7, nominal_voltage=24.0)
        assert get_profile(custom) is custom

    @pytest.mark.parametrize("ref", [99, "99", "", "abc", None, 72.0, True, "-72"])
    def test_unknown_raises(self, ref):
        with pytest.raises(InvalidConfiguration):
            get_profile(ref)


class TestSanitizeThresholds:
    """Test sanitize_thresholds."""

    def test_defaults(self):
        assert sanitize_thresholds() == DEFAULT_THRESHOLDS
        assert DEFAULT_THRESHOLDS == CellThresholds(4.2, 3.7, 3.0)

    def test_accepts_strings(self):
        thresholds = sanitize_thresholds("4.15", "3.6", "3.2")
        assert thresholds == CellThresholds(4.15, 3.6, 3.2)

    @pytest.mark.parametrize("name", sorted(THRESHOLD_LIMITS))
    def test_limits_are_inclusive(self, name):
        low, high = THRESHOLD_LIMITS[name]
        field_args = {
            "max_cell_voltage": "max_cell",
            "nominal_cell_voltage": "nominal_cell",
            "min_cell_voltage": "min_cell",
        }
        for value in (low, high):
            thresholds = sanitize_thresholds(**{field_args[name]: value})
            assert getattr(thresholds, name) == value

    def test_out_of_range_resets_only_that_field(self, capsys):
        thresholds = sanitize_thresholds("5.5", "3.6", "3.2")

        assert thresholds.max_cell_voltage == 4.2
        assert thresholds.nominal_cell_voltage == 3.6
        assert thresholds.min_cell_voltage == 3.2
        assert "max_cell_voltage" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "max_cell,nominal,min_cell",
        [
            ("2.9", "4.6", "2.4"),
            ("abc", "", None),
            (float("nan"), float("inf"), "3.6"),
        ],
    )
    def test_invalid_values_reset(self, max_cell, nominal, min_cell):
        assert sanitize_thresholds(max_cell, nominal, min_cell) == DEFAULT_THRESHOLDS

    def test_missing_values_do_not_warn(self, capsys):
        sanitize_thresholds(None, "", None)
        assert capsys.readouterr().err == ""


class TestSanitizeCutoff:
    """Test sanitize_cutoff."""

    @pytest.mark.parametrize(
        "raw,expected",
        [(0, 0.0), ("66", 66.0), (66.5, 66.5), (None, 0.0), ("", 0.0), ("-1", 0.0), ("x", 0.0)],
    )
    def test_values(self, raw, expected):
        assert sanitize_cutoff(raw) == expected
