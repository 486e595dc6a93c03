"""Fixtures for stored settings tests."""

import json

import pytest


@pytest.fixture
def settings_file(configured_env):
    """Path of the settings file under the temp STATE_DIR."""
    return configured_env["state_dir"] / "settings.json"


@pytest.fixture
def voltages_file(configured_env):
    """Path of the last-voltage file under the temp STATE_DIR."""
    return configured_env["state_dir"] / "last_voltages.json"


@pytest.fixture
def stored_settings(settings_file):
    """Settings file for a customised 48V pack."""
    data = {
        "profile_key": 48,
        "max_cell": 4.15,
        "nominal_cell": 3.6,
        "min_cell": 3.1,
        "cutoff": 40,
        "advanced_open": True,
    }
    settings_file.write_text(json.dumps(data))
    return data
