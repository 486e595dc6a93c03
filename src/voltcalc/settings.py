"""Calculator settings persisted between sessions.

Settings and the last voltage entered per profile live in two JSON files
under STATE_DIR. Missing or unreadable files are never an error: defaults
apply and the calculator keeps working.
"""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

from .env import get_config
from .profiles import (
    DEFAULT_MAX_CELL_VOLTAGE,
    DEFAULT_MIN_CELL_VOLTAGE,
    DEFAULT_NOMINAL_CELL_VOLTAGE,
    PROFILES,
    CellThresholds,
    get_profile,
    sanitize_cutoff,
    sanitize_thresholds,
)
from .errors import InvalidConfiguration
from . import log


@dataclass
class CalculatorSettings:
    """What the rider last configured."""

    profile_key: int = 72
    max_cell: float = DEFAULT_MAX_CELL_VOLTAGE
    nominal_cell: float = DEFAULT_NOMINAL_CELL_VOLTAGE
    min_cell: float = DEFAULT_MIN_CELL_VOLTAGE
    cutoff: float = 0.0
    advanced_open: bool = False

    @property
    def thresholds(self) -> CellThresholds:
        return CellThresholds(
            max_cell_voltage=self.max_cell,
            nominal_cell_voltage=self.nominal_cell,
            min_cell_voltage=self.min_cell,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any], default_profile: int = 72) -> "CalculatorSettings":
        """Build settings from stored data, resetting anything invalid."""
        try:
            profile_key = get_profile(data.get("profile_key", default_profile)).key
        except InvalidConfiguration:
            log.warn(
                f"Stored profile {data.get('profile_key')!r} is unknown, "
                f"using {default_profile}V"
            )
            profile_key = default_profile

        thresholds = sanitize_thresholds(
            data.get("max_cell"),
            data.get("nominal_cell"),
            data.get("min_cell"),
        )
        return cls(
            profile_key=profile_key,
            max_cell=thresholds.max_cell_voltage,
            nominal_cell=thresholds.nominal_cell_voltage,
            min_cell=thresholds.min_cell_voltage,
            cutoff=sanitize_cutoff(data.get("cutoff")),
            advanced_open=bool(data.get("advanced_open", False)),
        )


def _read_json(path: Path) -> Optional[dict[str, Any]]:
    """Load a JSON object from path, or None if absent or unreadable."""
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError) as e:
        log.warn(f"Failed to load {path}: {e}")
        return None
    if not isinstance(data, dict):
        log.warn(f"Ignoring {path}: expected a JSON object")
        return None
    return data


def _write_json(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))


def default_settings() -> CalculatorSettings:
    """Fresh settings using the configured default profile."""
    cfg = get_config()
    key = cfg.default_profile if cfg.default_profile in PROFILES else 72
    return CalculatorSettings(profile_key=key)


def load_settings() -> CalculatorSettings:
    """Load stored settings, falling back to defaults."""
    cfg = get_config()
    defaults = default_settings()
    data = _read_json(cfg.settings_file)
    if data is None:
        log.debug(f"No stored settings at {cfg.settings_file}, using defaults")
        return defaults
    return CalculatorSettings.from_dict(data, default_profile=defaults.profile_key)


def save_settings(settings: CalculatorSettings) -> Path:
    """Persist settings. Returns the path written."""
    cfg = get_config()
    _write_json(cfg.settings_file, settings.to_dict())
    log.debug(f"Saved settings to {cfg.settings_file}")
    return cfg.settings_file


def _last_voltages() -> dict[str, Any]:
    return _read_json(get_config().last_voltages_file) or {}


def remember_voltage(profile_key: int, raw: Any) -> None:
    """Record the last voltage entered for a profile (empty input is ignored)."""
    if raw is None or str(raw).strip() == "":
        return
    voltages = _last_voltages()
    voltages[str(profile_key)] = str(raw).strip()
    _write_json(get_config().last_voltages_file, voltages)


def last_voltage(profile_key: int) -> Optional[str]:
    """Last voltage entered for a profile, as typed."""
    value = _last_voltages().get(str(profile_key))
    return str(value) if value is not None else None


def voltage_placeholder(profile_key: int) -> str:
    """Input hint: the last voltage for the profile, else its nominal voltage."""
    last = last_voltage(profile_key)
    if last:
        return f"e.g. {last}V"
    return f"e.g. {get_profile(profile_key).nominal_voltage:g}V"
