"""Root fixtures for all tests."""

import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Clear calculator env vars and reset config singleton before each test."""
    env_prefixes = (
        "VOLTCALC_",
        "STATE_DIR",
        "OUT_DIR",
    )

    for key in list(os.environ.keys()):
        for prefix in env_prefixes:
            if key.startswith(prefix):
                monkeypatch.delenv(key, raising=False)
                break

    # Reset config singleton
    import voltcalc.env

    voltcalc.env._config = None

    yield

    # Reset again after test
    voltcalc.env._config = None


@pytest.fixture
def tmp_state_dir(tmp_path):
    """Create temp directory for stored settings."""
    state_dir = tmp_path / "state"
    state_dir.mkdir()
    return state_dir


@pytest.fixture
def tmp_out_dir(tmp_path):
    """Create temp directory for rendered output."""
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    return out_dir


@pytest.fixture
def configured_env(tmp_state_dir, tmp_out_dir, monkeypatch):
    """Set up test environment with temp directories."""
    monkeypatch.setenv("STATE_DIR", str(tmp_state_dir))
    monkeypatch.setenv("OUT_DIR", str(tmp_out_dir))
    # Reset config to pick up new values
    import voltcalc.env

    voltcalc.env._config = None
    return {"state_dir": tmp_state_dir, "out_dir": tmp_out_dir}


@pytest.fixture
def pack_72v():
    """The 20-cell 72V profile."""
    from voltcalc.profiles import PROFILES

    return PROFILES[72]


@pytest.fixture
def default_thresholds():
    """Default 4.2 / 3.7 / 3.0 per-cell thresholds."""
    from voltcalc.profiles import CellThresholds

    return CellThresholds()


@pytest.fixture
def project_root():
    """Path to the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def src_root(project_root):
    """Path to the src/voltcalc directory."""
    return project_root / "src" / "voltcalc"


@pytest.fixture
def templates_dir(src_root):
    """Path to the Jinja2 templates directory."""
    return src_root / "templates"
