"""Battery state evaluation.

evaluate() is the single entry point callers use on every input change. It
coerces raw values, resolves the percentage bounds, classifies safety and
picks the advisory, returning a complete EvaluationResult or raising
InvalidConfiguration. It keeps no state between calls.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from .battery import (
    Bounds,
    ChargeState,
    PercentModel,
    charge_reading,
    read_voltage,
    resolve_bounds,
)
from .formatters import format_percent, format_voltage
from .profiles import (
    BatteryProfile,
    CellThresholds,
    ProfileRef,
    get_profile,
    sanitize_cutoff,
)
from .reference import ReferencePoint, generate_reference_points
from .safety import (
    TIER_BADGES,
    ChargeBand,
    SafetyTier,
    Tip,
    advisory,
    charge_band,
    classify_safety,
    status_label,
)
from . import log

if TYPE_CHECKING:
    from .settings import CalculatorSettings


@dataclass(frozen=True)
class EvaluationResult:
    """Everything a rendering surface needs for one reading."""

    profile: BatteryProfile
    bounds: Bounds
    model: PercentModel
    voltage: Optional[float]
    voltage_text: str
    percent: float
    charge_state: ChargeState
    status_label: str
    safety_tier: Optional[SafetyTier]  # None when there is no reading
    charge_band: Optional[ChargeBand]  # Only set for the normal tier
    tip: Tip
    reference_points: list[ReferencePoint] = field(default_factory=list)

    @property
    def has_reading(self) -> bool:
        return self.voltage is not None

    @property
    def percent_text(self) -> str:
        return format_percent(self.percent)

    @property
    def per_cell_voltage(self) -> Optional[float]:
        if self.voltage is None:
            return None
        return self.voltage / self.profile.series_cells

    @property
    def badge(self) -> Optional[str]:
        if self.safety_tier is None:
            return None
        return TIER_BADGES[self.safety_tier]

    def to_dict(self) -> dict[str, Any]:
        """Plain dict suitable for JSON output."""
        return {
            "profile": self.profile.name,
            "series_cells": self.profile.series_cells,
            "model": self.model.value,
            "voltage": self.voltage,
            "voltage_text": self.voltage_text,
            "per_cell_voltage": self.per_cell_voltage,
            "v_min": self.bounds.v_min,
            "v_max": self.bounds.v_max,
            "v_nominal": self.bounds.v_nominal,
            "percent": self.percent,
            "percent_text": self.percent_text,
            "charge_state": self.charge_state.value,
            "status": self.status_label,
            "safety_tier": self.safety_tier.value if self.safety_tier else None,
            "charge_band": self.charge_band.value if self.charge_band else None,
            "tip": {
                "icon": self.tip.icon,
                "title": self.tip.title,
                "text": self.tip.text,
                "severity": self.tip.severity.value,
                "troubleshoot": self.tip.troubleshoot,
            },
            "reference_points": [p.to_dict() for p in self.reference_points],
        }


def evaluate(
    voltage: Any,
    profile: ProfileRef,
    thresholds: Optional[CellThresholds] = None,
    cutoff: Any = 0.0,
    model: PercentModel = PercentModel.LINEAR,
) -> EvaluationResult:
    """
    Evaluate a pack voltage against a battery configuration.

    Args:
        voltage: Reading as a number or text; None or unparseable means no
            reading yet
        profile: Battery profile or its key (e.g. 72 or "72V")
        thresholds: Per-cell voltages; defaults to 4.2/3.7/3.0
        cutoff: Controller low-voltage cutoff in volts, 0 to disable
        model: Percentage model

    Returns:
        EvaluationResult for the reading

    Raises:
        InvalidConfiguration: If the configuration has no valid bounds
    """
    profile = get_profile(profile)
    model = PercentModel(model)
    bounds = resolve_bounds(profile, thresholds, sanitize_cutoff(cutoff))

    value = read_voltage(voltage)
    reading = charge_reading(value, bounds, model)

    tier: Optional[SafetyTier] = None
    band: Optional[ChargeBand] = None
    if value is not None:
        tier = classify_safety(value, profile.series_cells)
        if tier is SafetyTier.NORMAL:
            band = charge_band(reading.percent)

    log.debug(
        f"{profile.name}: {value}V in [{bounds.v_min:.2f}, {bounds.v_max:.2f}] "
        f"-> {reading.percent:.1f}% tier={tier.value if tier else None}"
    )

    return EvaluationResult(
        profile=profile,
        bounds=bounds,
        model=model,
        voltage=value,
        voltage_text=format_voltage(value, voltage),
        percent=reading.percent,
        charge_state=reading.state,
        status_label=status_label(reading),
        safety_tier=tier,
        charge_band=band,
        tip=advisory(value, profile.series_cells, tier, reading),
        reference_points=generate_reference_points(value, bounds.v_min, bounds.v_max, model),
    )


def evaluate_settings(
    settings: "CalculatorSettings",
    voltage: Any,
    model: PercentModel = PercentModel.LINEAR,
) -> EvaluationResult:
    """Evaluate a reading with a caller's stored calculator settings."""
    return evaluate(
        voltage,
        settings.profile_key,
        settings.thresholds,
        settings.cutoff,
        model,
    )
