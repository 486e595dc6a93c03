"""Reference voltage/percentage points shown beside a reading."""

import math
from dataclasses import dataclass
from typing import Optional

from .battery import PercentModel, voltage_to_percentage


CURRENT_LABEL = "CURRENT"

# Steps either side of the current reading
WINDOW_STEPS = 3

# Step between points, as a fraction of the current reading
STEP_FRACTION = 0.05

# (fraction of v_max, percent, label) shown when there is no reading
DEFAULT_POINTS: list[tuple[float, float, str]] = [
    (1.0, 100, "Full"),
    (0.9, 90, "90%"),
    (0.8, 80, "80%"),
    (0.6, 60, "60%"),
    (0.4, 40, "40%"),
    (0.2, 20, "20%"),
]
EMPTY_LABEL = "Empty"


@dataclass(frozen=True)
class ReferencePoint:
    voltage: float
    percent: float
    label: str
    is_current: bool = False

    def to_dict(self) -> dict:
        return {
            "voltage": self.voltage,
            "percent": self.percent,
            "label": self.label,
            "is_current": self.is_current,
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up."""
    return int(math.floor(value + 0.5))


def _default_points(v_min: float, v_max: float) -> list[ReferencePoint]:
    points = [
        ReferencePoint(voltage=v_max * fraction, percent=float(percent), label=label)
        for fraction, percent, label in DEFAULT_POINTS
    ]
    points.append(ReferencePoint(voltage=v_min, percent=0.0, label=EMPTY_LABEL))
    return points


def generate_reference_points(
    voltage: Optional[float],
    v_min: float,
    v_max: float,
    model: PercentModel = PercentModel.LINEAR,
) -> list[ReferencePoint]:
    """
    Build the reference table for a reading.

    With a positive reading, returns up to seven points spaced by about 5%
    of the reading and clipped to [v_min, v_max]; the point that lands on
    the reading is labelled CURRENT. Without one, or when the reading is so
    far outside the bounds that no point survives clipping, returns the
    fixed Full..Empty table.

    Args:
        voltage: Current pack voltage, or None
        v_min: Voltage shown as 0%
        v_max: Voltage shown as 100%
        model: Percentage model used for each point

    Returns:
        Points ordered by ascending voltage around a reading, or from Full
        down to Empty for the fixed table
    """
    if voltage is None or voltage <= 0:
        return _default_points(v_min, v_max)

    step = max(1, round_half_up(voltage * STEP_FRACTION))
    start = max(v_min, voltage - step * WINDOW_STEPS)
    end = min(v_max, voltage + step * WINDOW_STEPS)

    points = []
    for i in range(2 * WINDOW_STEPS + 1):
        v = start + i * step
        if v > end + 1e-9:
            break
        percent = voltage_to_percentage(v, v_min, v_max, model)
        is_current = math.isclose(v, voltage, rel_tol=0.0, abs_tol=1e-9)
        label = CURRENT_LABEL if is_current else f"{round_half_up(percent)}%"
        points.append(ReferencePoint(voltage=v, percent=percent, label=label, is_current=is_current))

    if not points:
        return _default_points(v_min, v_max)
    return points
