"""Pick a battery voltage out of text recognised from a multimeter photo.

The recognition itself (camera frame to text) happens elsewhere; this module
only turns the recognised text into candidate numbers and a best guess the
caller can feed to evaluate().
"""

import math
import re
from dataclasses import dataclass, field
from typing import Optional

from .errors import OutOfPlausibleRange
from .profiles import ProfileRef, get_profile
from .safety import CELL_SAFE_MAX_VOLTAGE, CELL_SAFE_MIN_VOLTAGE
from . import log


# Plausible readings: a single cell, or a whole pack
CELL_RANGE = (1.0, 5.0)
PACK_RANGE = (10.0, 100.0)

# Preferred classes when no candidate fits the selected profile
PREFERRED_PACK_RANGE = (30.0, 90.0)
PREFERRED_CELL_RANGE = (3.0, 4.5)

# Longer numbers are counters, timestamps or noise
MAX_TOKEN_LENGTH = 5

_NON_NUMERIC = re.compile(r"[^\d.\s]")
_TOKEN_PATTERNS = [
    re.compile(r"\b(\d{1,2}\.\d{1,3})\b"),  # 78.5, 4.25
    # 78, 84; but not the integer part or decimals of 78.5
    re.compile(r"(?<!\d)(?<!\d\.)(\d{2,3})(?!\d)(?!\.\d)"),
]


@dataclass(frozen=True)
class OcrReading:
    """Numbers found in recognised text and the most likely voltage."""

    best: Optional[float] = None
    numbers: list[float] = field(default_factory=list)
    voltages: list[float] = field(default_factory=list)

    @property
    def found_numbers_only(self) -> bool:
        """Numbers were read, but none of them look like a battery voltage."""
        return self.best is None and bool(self.numbers)


def _number_text(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def check_plausible(value: float) -> float:
    """
    Ensure a recognised number could be a battery voltage.

    Raises:
        OutOfPlausibleRange: If it is not positive and finite, falls outside
            the cell and pack ranges, or looks like some other number
    """
    if not math.isfinite(value) or value <= 0:
        raise OutOfPlausibleRange(value)

    in_cell = CELL_RANGE[0] <= value <= CELL_RANGE[1]
    in_pack = PACK_RANGE[0] <= value <= PACK_RANGE[1]
    if not (in_cell or in_pack):
        raise OutOfPlausibleRange(value)

    if len(_number_text(value)) > MAX_TOKEN_LENGTH:
        raise OutOfPlausibleRange(value)
    if value.is_integer() and value < 10:
        raise OutOfPlausibleRange(value)
    if value > 99.999:
        raise OutOfPlausibleRange(value)
    return value


def is_plausible_voltage(value: float) -> bool:
    try:
        check_plausible(value)
    except OutOfPlausibleRange:
        return False
    return True


def profile_voltage_range(profile: ProfileRef) -> tuple[float, float]:
    """Pack voltages a healthy pack of this profile can read."""
    cells = get_profile(profile).series_cells
    return (cells * CELL_SAFE_MIN_VOLTAGE, cells * CELL_SAFE_MAX_VOLTAGE)


def _first_within(values: list[float], bounds: tuple[float, float]) -> Optional[float]:
    low, high = bounds
    for value in values:
        if low <= value <= high:
            return value
    return None


def extract_voltages(text: Optional[str], profile: Optional[ProfileRef] = None) -> OcrReading:
    """
    Find candidate voltages in recognised text.

    The best guess prefers, in order: a value in the selected profile's
    range, a typical pack voltage, a typical single-cell voltage, and then
    any plausible value. Within each class the lowest value wins.

    Args:
        text: Text returned by the recogniser
        profile: Currently selected battery profile, if any

    Returns:
        OcrReading with every number found, the plausible ones, and the
        best guess (None when nothing is plausible)
    """
    if not text or not isinstance(text, str):
        return OcrReading()

    clean = _NON_NUMERIC.sub(" ", text).strip()

    numbers: set[float] = set()
    voltages: set[float] = set()
    for pattern in _TOKEN_PATTERNS:
        for match in pattern.finditer(clean):
            value = float(match.group(1))
            numbers.add(value)
            try:
                voltages.add(check_plausible(value))
            except OutOfPlausibleRange as e:
                log.debug(f"Discarding OCR candidate: {e}")

    ordered = sorted(voltages)
    best: Optional[float] = None
    if ordered:
        ranges = [PREFERRED_PACK_RANGE, PREFERRED_CELL_RANGE]
        if profile is not None:
            ranges.insert(0, profile_voltage_range(profile))
        for bounds in ranges:
            best = _first_within(ordered, bounds)
            if best is not None:
                break
        if best is None:
            best = ordered[0]

    return OcrReading(best=best, numbers=sorted(numbers), voltages=ordered)
