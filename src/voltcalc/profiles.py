"""Battery pack profiles and per-cell voltage thresholds."""

import math
from dataclasses import dataclass
from typing import Any, Optional, Union

from .errors import InvalidConfiguration
from . import log


@dataclass(frozen=True)
class BatteryProfile:
    """Series-connected lithium pack identified by its nominal voltage."""

    key: int
    name: str
    series_cells: int
    nominal_voltage: float


# Scooter packs by nominal voltage (10s/13s/14s/16s/20s)
PROFILES: dict[int, BatteryProfile] = {
    36: BatteryProfile(key=36, name="36V", series_cells=10, nominal_voltage=36.0),
    48: BatteryProfile(key=48, name="48V", series_cells=13, nominal_voltage=48.0),
    52: BatteryProfile(key=52, name="52V", series_cells=14, nominal_voltage=52.0),
    60: BatteryProfile(key=60, name="60V", series_cells=16, nominal_voltage=60.0),
    72: BatteryProfile(key=72, name="72V", series_cells=20, nominal_voltage=72.0),
}

DEFAULT_PROFILE_KEY = 72

ProfileRef = Union[BatteryProfile, int, str]


def get_profile(ref: ProfileRef) -> BatteryProfile:
    """
    Resolve a profile from a key like 72, "72" or "72V".

    Args:
        ref: Profile key or an already resolved BatteryProfile

    Returns:
        The matching BatteryProfile

    Raises:
        InvalidConfiguration: If the key does not name a known profile
    """
    if isinstance(ref, BatteryProfile):
        return ref

    key: Optional[int] = None
    if isinstance(ref, bool):
        key = None
    elif isinstance(ref, int):
        key = ref
    elif isinstance(ref, str):
        text = ref.strip().upper().removesuffix("V").strip()
        if text.isdigit():
            key = int(text)

    if key is None or key not in PROFILES:
        raise InvalidConfiguration(f"Unknown battery profile: {ref!r}")
    return PROFILES[key]


# =============================================================================
# Cell thresholds
# =============================================================================

DEFAULT_MAX_CELL_VOLTAGE = 4.2
DEFAULT_NOMINAL_CELL_VOLTAGE = 3.7
DEFAULT_MIN_CELL_VOLTAGE = 3.0

# Accepted (low, high) range per field, inclusive
THRESHOLD_LIMITS: dict[str, tuple[float, float]] = {
    "max_cell_voltage": (3.0, 5.0),
    "nominal_cell_voltage": (3.0, 4.5),
    "min_cell_voltage": (2.5, 3.5),
}


@dataclass(frozen=True)
class CellThresholds:
    """User-adjustable per-cell voltages defining full, nominal and empty."""

    max_cell_voltage: float = DEFAULT_MAX_CELL_VOLTAGE
    nominal_cell_voltage: float = DEFAULT_NOMINAL_CELL_VOLTAGE
    min_cell_voltage: float = DEFAULT_MIN_CELL_VOLTAGE


DEFAULT_THRESHOLDS = CellThresholds()


def _coerce_finite(value: Any) -> Optional[float]:
    """Coerce a raw setting to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def _sanitize_field(name: str, value: Any) -> float:
    default = getattr(DEFAULT_THRESHOLDS, name)
    low, high = THRESHOLD_LIMITS[name]
    number = _coerce_finite(value)
    if number is None or not low <= number <= high:
        if value not in (None, ""):
            log.warn(f"{name}={value!r} outside [{low}, {high}], reset to {default}")
        return default
    return number


def sanitize_thresholds(
    max_cell: Any = None,
    nominal_cell: Any = None,
    min_cell: Any = None,
) -> CellThresholds:
    """
    Build CellThresholds from raw user input.

    Each field is validated on its own: a missing, unparseable or
    out-of-range value falls back to that field's default without
    touching the others.
    """
    return CellThresholds(
        max_cell_voltage=_sanitize_field("max_cell_voltage", max_cell),
        nominal_cell_voltage=_sanitize_field("nominal_cell_voltage", nominal_cell),
        min_cell_voltage=_sanitize_field("min_cell_voltage", min_cell),
    )


def sanitize_cutoff(value: Any) -> float:
    """Controller cutoff in volts; negative or unparseable values become 0."""
    number = _coerce_finite(value)
    if number is None or number < 0:
        if value not in (None, ""):
            log.warn(f"controller cutoff={value!r} is invalid, reset to 0")
        return 0.0
    return number
