"""Safety classification and rider advisories.

Safety tiers come from absolute per-cell voltage limits for lithium cells.
They are independent of the charge-percentage bounds in battery.py: a pack
can read 100% and still be overcharged, or 0% (below a controller cutoff)
and still be within safe cell limits.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .battery import ChargeReading, ChargeState


# Per-cell voltage limits (V)
CELL_DAMAGE_VOLTAGE = 2.5  # Permanent damage possible at or below
CELL_SAFE_MIN_VOLTAGE = 3.0  # Undercharged below
CELL_SAFE_MAX_VOLTAGE = 4.2  # Overcharged above
CELL_HIGH_PRESSURE_VOLTAGE = 4.3  # Gas generation at or above
CELL_FIRE_RISK_VOLTAGE = 4.5  # Thermal runaway at or above

# No scooter pack reads this high; usually wiring or the wrong profile
IMPLAUSIBLE_PACK_VOLTAGE = 120.0


class SafetyTier(str, Enum):
    """Safety tiers, most severe first."""

    UNKNOWN = "unknown"
    FIRE_RISK = "fire_risk"
    HIGH_PRESSURE = "high_pressure"
    OVERCHARGED = "overcharged"
    CRITICALLY_LOW = "critically_low"
    DANGEROUSLY_LOW = "dangerously_low"
    NORMAL = "normal"


class ChargeBand(str, Enum):
    FULL = "full"
    WELL_CHARGED = "well_charged"
    GOOD = "good"
    MODERATE = "moderate"
    LOW = "low"
    VERY_LOW = "very_low"
    CRITICAL = "critical"


# (lower percent bound, band, status label), highest first
CHARGE_BANDS: list[tuple[float, ChargeBand, str]] = [
    (95, ChargeBand.FULL, "Fully charged"),
    (80, ChargeBand.WELL_CHARGED, "Well charged"),
    (60, ChargeBand.GOOD, "Good charge"),
    (40, ChargeBand.MODERATE, "Moderate charge"),
    (20, ChargeBand.LOW, "Low charge"),
    (10, ChargeBand.VERY_LOW, "Very low charge"),
    (0, ChargeBand.CRITICAL, "Critical charge"),
]

STATUS_LABELS = {
    ChargeState.NO_READING: "Enter voltage to start",
    ChargeState.ABOVE_FULL: "Above full charge",
    ChargeState.BELOW_MINIMUM: "Below minimum voltage",
}


def classify_safety(voltage: float, series_cells: int) -> SafetyTier:
    """
    Classify a pack voltage into a safety tier.

    Checks run from most to least severe and the first match wins, so
    each voltage lands in exactly one tier.

    Args:
        voltage: Measured pack voltage
        series_cells: Number of cells in series

    Returns:
        The matching SafetyTier
    """
    if voltage <= 0:
        return SafetyTier.UNKNOWN
    if voltage >= series_cells * CELL_FIRE_RISK_VOLTAGE:
        return SafetyTier.FIRE_RISK
    if voltage >= series_cells * CELL_HIGH_PRESSURE_VOLTAGE:
        return SafetyTier.HIGH_PRESSURE
    if voltage > series_cells * CELL_SAFE_MAX_VOLTAGE:
        return SafetyTier.OVERCHARGED
    if voltage <= series_cells * CELL_DAMAGE_VOLTAGE:
        return SafetyTier.CRITICALLY_LOW
    if voltage < series_cells * CELL_SAFE_MIN_VOLTAGE:
        return SafetyTier.DANGEROUSLY_LOW
    return SafetyTier.NORMAL


def charge_band(percent: float) -> ChargeBand:
    """Map a charge percentage to its band."""
    for lower, band, _ in CHARGE_BANDS:
        if percent >= lower:
            return band
    return ChargeBand.CRITICAL


def band_label(band: ChargeBand) -> str:
    for _, candidate, label in CHARGE_BANDS:
        if candidate is band:
            return label
    raise ValueError(f"Unknown charge band: {band!r}")


def status_label(reading: ChargeReading) -> str:
    """Short status line for a charge reading."""
    if reading.state in STATUS_LABELS:
        return STATUS_LABELS[reading.state]
    return band_label(charge_band(reading.percent))


# =============================================================================
# Advisories
# =============================================================================


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"


@dataclass(frozen=True)
class Tip:
    """Advisory card shown next to the reading."""

    icon: str
    title: str
    text: str
    severity: Severity
    troubleshoot: bool = False  # Point the rider at the jumpstart/BMS guide


# Small overlay drawn on the battery graphic
TIER_BADGES: dict[SafetyTier, Optional[str]] = {
    SafetyTier.UNKNOWN: "question",
    SafetyTier.FIRE_RISK: "fire",
    SafetyTier.HIGH_PRESSURE: "triangle",
    SafetyTier.OVERCHARGED: "triangle",
    SafetyTier.CRITICALLY_LOW: "triangle",
    SafetyTier.DANGEROUSLY_LOW: "triangle",
    SafetyTier.NORMAL: None,
}

READY_TIP = Tip(
    icon="💡",
    title="Ready to calculate",
    text="Enter your battery voltage above to get started",
    severity=Severity.INFO,
)

IMPLAUSIBLE_TIP = Tip(
    icon="🚨",
    title="DANGER - Extremely high voltage",
    text=(
        "This voltage is dangerously high and could cause fire or explosion. "
        "DO NOT charge. Check for wiring issues or wrong battery type."
    ),
    severity=Severity.WARNING,
)

BELOW_CUTOFF_TIP = Tip(
    icon="🚨",
    title="Below cutoff",
    text="Voltage is below the usable level. Scooter will stop working. Charge immediately.",
    severity=Severity.WARNING,
)

# Danger tips; "{cell}" is the per-cell voltage at 2 decimals
_TIER_TIPS: dict[SafetyTier, Tip] = {
    SafetyTier.UNKNOWN: Tip(
        icon="🔋",
        title="BMS Protection or No Connection",
        text=(
            "0V reading could mean BMS has cut off power to protect cells, or "
            "there's no connection. Check connections and see troubleshooting "
            "guide for recovery methods."
        ),
        severity=Severity.WARNING,
        troubleshoot=True,
    ),
    SafetyTier.FIRE_RISK: Tip(
        icon="🚨",
        title="EXTREME DANGER - Fire Risk",
        text=(
            "Voltage is {cell}V per cell (≥4.5V limit). SEVERE thermal runaway "
            "risk! DO NOT charge. Disconnect immediately and move to safe area."
        ),
        severity=Severity.WARNING,
    ),
    SafetyTier.HIGH_PRESSURE: Tip(
        icon="🚨",
        title="DANGER - High Pressure",
        text=(
            "Voltage is {cell}V per cell (≥4.3V). Battery under high pressure, "
            "gas generation likely. Stop charging immediately."
        ),
        severity=Severity.WARNING,
    ),
    SafetyTier.OVERCHARGED: Tip(
        icon="⚠️",
        title="OVERCHARGED - Stop charging",
        text=(
            "Voltage is {cell}V per cell (>4.2V safe limit). Stop charging "
            "immediately to prevent damage."
        ),
        severity=Severity.WARNING,
    ),
    SafetyTier.CRITICALLY_LOW: Tip(
        icon="🚨",
        title="CRITICAL - Severe undercharge",
        text=(
            "Voltage is {cell}V per cell (≤2.5V damage threshold). Battery may "
            "be permanently damaged. Use extreme caution."
        ),
        severity=Severity.WARNING,
        troubleshoot=True,
    ),
    SafetyTier.DANGEROUSLY_LOW: Tip(
        icon="🚨",
        title="DANGER - Undercharged",
        text=(
            "Voltage is {cell}V per cell (<3.0V safe minimum). Battery may be "
            "damaged if left this low. Charge carefully."
        ),
        severity=Severity.WARNING,
        troubleshoot=True,
    ),
}

_BAND_TIPS: dict[ChargeBand, Tip] = {
    ChargeBand.FULL: Tip(
        icon="✅",
        title="Fully charged",
        text=(
            "Your battery is fully charged and ready to go! If not riding soon, "
            "consider charging to 80-90% for longevity."
        ),
        severity=Severity.SUCCESS,
    ),
    ChargeBand.WELL_CHARGED: Tip(
        icon="✅",
        title="Well charged",
        text="Battery is well charged and ready for a good ride. This is a great starting point.",
        severity=Severity.SUCCESS,
    ),
    ChargeBand.GOOD: Tip(
        icon="📊",
        title="Good charge",
        text="Battery has a good charge level. Perfect for normal riding conditions.",
        severity=Severity.INFO,
    ),
    ChargeBand.MODERATE: Tip(
        icon="🏠",
        title="Storage range",
        text=(
            "Perfect storage voltage (40-60%)! Ideal for long-term storage to "
            "preserve battery health."
        ),
        severity=Severity.INFO,
    ),
    ChargeBand.LOW: Tip(
        icon="⚠️",
        title="Low charge",
        text="Battery getting low. Range will be significantly reduced - consider charging soon.",
        severity=Severity.WARNING,
    ),
    ChargeBand.VERY_LOW: Tip(
        icon="🔋",
        title="Very low charge",
        text="Battery critically low. Power cutoff may occur soon - charge as soon as possible.",
        severity=Severity.WARNING,
    ),
    ChargeBand.CRITICAL: Tip(
        icon="🚨",
        title="Near cutoff",
        text="Battery is near the cutoff voltage. Scooter may stop working. Charge immediately.",
        severity=Severity.WARNING,
    ),
}


def advisory(
    voltage: Optional[float],
    series_cells: int,
    tier: Optional[SafetyTier],
    reading: ChargeReading,
) -> Tip:
    """
    Pick the advisory for a classified reading.

    Danger tiers take precedence over charge level. A normal-tier pack
    below a controller cutoff gets the below-cutoff advice rather than a
    charge band.
    """
    if voltage is None or tier is None:
        return READY_TIP

    if tier is SafetyTier.FIRE_RISK and voltage > IMPLAUSIBLE_PACK_VOLTAGE:
        return IMPLAUSIBLE_TIP

    if tier in _TIER_TIPS:
        tip = _TIER_TIPS[tier]
        cell = f"{voltage / series_cells:.2f}"
        return Tip(
            icon=tip.icon,
            title=tip.title,
            text=tip.text.format(cell=cell),
            severity=tip.severity,
            troubleshoot=tip.troubleshoot,
        )

    if reading.state is ChargeState.BELOW_MINIMUM:
        return BELOW_CUTOFF_TIP
    return _BAND_TIPS[charge_band(reading.percent)]
