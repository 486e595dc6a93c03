"""Environment variable parsing and configuration."""

import os
from pathlib import Path
from typing import Optional


def get_int(key: str, default: int) -> int:
    """Get integer env var."""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        return default


def get_bool(key: str, default: bool = False) -> bool:
    """Get boolean env var (0/1, true/false, yes/no)."""
    val = os.environ.get(key, "").lower()
    if not val:
        return default
    return val in ("1", "true", "yes", "on")


def get_path(key: str, default: str) -> Path:
    """Get path env var, expanding user and making absolute."""
    val = os.environ.get(key, default)
    return Path(val).expanduser().resolve()


def get_choice(key: str, choices: tuple[str, ...], default: str) -> str:
    """Get env var restricted to a set of lowercase choices."""
    val = os.environ.get(key, "").strip().lower()
    if val in choices:
        return val
    return default


class Config:
    """Configuration loaded from environment variables."""

    def __init__(self):
        self.debug = get_bool("VOLTCALC_DEBUG", False)

        # Calculator defaults
        self.default_profile = get_int("VOLTCALC_PROFILE", 72)
        self.percent_model = get_choice(
            "VOLTCALC_PERCENT_MODEL", ("linear", "corrected"), "linear"
        )
        self.tip_delay_ms = get_int("VOLTCALC_TIP_DELAY_MS", 300)
        self.chart_theme = get_choice("VOLTCALC_CHART_THEME", ("light", "dark"), "dark")

        # Paths
        self.state_dir = get_path("STATE_DIR", "./data/state")
        self.out_dir = get_path("OUT_DIR", "./out")

    @property
    def settings_file(self) -> Path:
        return self.state_dir / "settings.json"

    @property
    def last_voltages_file(self) -> Path:
        return self.state_dir / "last_voltages.json"


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config
