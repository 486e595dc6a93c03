"""Pack voltage bounds and voltage to charge percentage conversion."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Optional

from .errors import InvalidConfiguration, UnparseableVoltage
from .profiles import (
    DEFAULT_THRESHOLDS,
    CellThresholds,
    ProfileRef,
    get_profile,
    sanitize_cutoff,
)


class Bounds(NamedTuple):
    """Pack voltages that map to 0% (v_min) and 100% (v_max)."""

    v_min: float
    v_max: float
    v_nominal: float

    @property
    def span(self) -> float:
        return self.v_max - self.v_min


class ChargeState(str, Enum):
    NO_READING = "no_reading"
    ABOVE_FULL = "above_full"
    BELOW_MINIMUM = "below_minimum"
    IN_RANGE = "in_range"


class PercentModel(str, Enum):
    """How a voltage inside the bounds is turned into a percentage.

    LINEAR interpolates straight between v_min and v_max. CORRECTED bends
    the line at CORRECTED_KNEE so the lower half of the voltage span covers
    less charge than the upper half.
    """

    LINEAR = "linear"
    CORRECTED = "corrected"


# (fraction of voltage span, percent) where the corrected curve changes slope
CORRECTED_KNEE = (0.5, 40.0)


@dataclass(frozen=True)
class ChargeReading:
    percent: float
    state: ChargeState


def resolve_bounds(
    profile: ProfileRef,
    thresholds: Optional[CellThresholds] = None,
    cutoff: Any = 0.0,
) -> Bounds:
    """
    Resolve the charge-percentage bounds of a pack.

    A controller cutoff above zero replaces cells x min_cell_voltage as the
    empty point, since the scooter stops before the cells reach their floor.

    Raises:
        InvalidConfiguration: Unknown profile, no cells, or v_max not above v_min
    """
    profile = get_profile(profile)
    thresholds = thresholds or DEFAULT_THRESHOLDS
    cells = profile.series_cells
    if cells <= 0:
        raise InvalidConfiguration(f"Profile {profile.name} has {cells} series cells")

    cutoff = sanitize_cutoff(cutoff)
    v_max = cells * thresholds.max_cell_voltage
    v_nominal = cells * thresholds.nominal_cell_voltage
    v_min = cutoff if cutoff > 0 else cells * thresholds.min_cell_voltage

    if not v_max > v_min:
        raise InvalidConfiguration(
            f"Full voltage {v_max:.2f}V must exceed empty voltage {v_min:.2f}V"
        )
    return Bounds(v_min=v_min, v_max=v_max, v_nominal=v_nominal)


def parse_voltage(raw: Any) -> float:
    """
    Coerce a raw voltage reading (number or text) to float.

    Raises:
        UnparseableVoltage: If the reading is missing, not numeric, or not finite
    """
    if raw is None or isinstance(raw, bool):
        raise UnparseableVoltage(raw)
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip().rstrip("vV").strip()
        try:
            value = float(text)
        except ValueError:
            raise UnparseableVoltage(raw) from None
    else:
        raise UnparseableVoltage(raw)

    if not math.isfinite(value):
        raise UnparseableVoltage(raw)
    return value


def read_voltage(raw: Any) -> Optional[float]:
    """Lenient parse_voltage: an unusable reading means "no reading yet"."""
    try:
        return parse_voltage(raw)
    except UnparseableVoltage:
        return None


def _corrected_fraction(ratio: float) -> float:
    knee_ratio, knee_pct = CORRECTED_KNEE
    knee = knee_pct / 100
    if ratio <= knee_ratio:
        return ratio * knee / knee_ratio
    return knee + (ratio - knee_ratio) * (1 - knee) / (1 - knee_ratio)


def voltage_to_percentage(
    voltage: float,
    v_min: float,
    v_max: float,
    model: PercentModel = PercentModel.LINEAR,
) -> float:
    """
    Convert pack voltage to a charge percentage between v_min and v_max.

    Args:
        voltage: Pack voltage in volts
        v_min: Voltage shown as 0%
        v_max: Voltage shown as 100%
        model: Interpolation model

    Returns:
        Percentage clamped to 0-100
    """
    if voltage >= v_max:
        return 100.0
    if voltage <= v_min:
        return 0.0

    ratio = (voltage - v_min) / (v_max - v_min)
    if PercentModel(model) is PercentModel.CORRECTED:
        ratio = _corrected_fraction(ratio)
    return min(max(ratio * 100, 0.0), 100.0)


def charge_reading(
    voltage: Optional[float],
    bounds: Bounds,
    model: PercentModel = PercentModel.LINEAR,
) -> ChargeReading:
    """Percentage plus where the reading sits relative to the bounds."""
    if voltage is None:
        return ChargeReading(0.0, ChargeState.NO_READING)
    if voltage > bounds.v_max:
        return ChargeReading(100.0, ChargeState.ABOVE_FULL)
    if voltage < bounds.v_min:
        return ChargeReading(0.0, ChargeState.BELOW_MINIMUM)
    percent = voltage_to_percentage(voltage, bounds.v_min, bounds.v_max, model)
    return ChargeReading(percent, ChargeState.IN_RANGE)
