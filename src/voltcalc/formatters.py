"""Shared formatting functions for display values."""

from typing import Any, Optional

# Most decimals kept from what the user typed
MAX_VOLTAGE_DECIMALS = 3


def voltage_decimals(raw: Any) -> int:
    """
    Number of decimals to show for a voltage as it was entered.

    Text with a fractional part keeps its own precision, capped at three
    places; anything else gets one decimal.
    """
    if isinstance(raw, str) and "." in raw:
        fraction = raw.strip().rstrip("vV").strip().split(".", 1)[1]
        if fraction:
            return min(MAX_VOLTAGE_DECIMALS, len(fraction))
    return 1


def format_voltage(value: Optional[float], raw: Any = None) -> str:
    """Format a pack voltage like "72.0V" or "78.45V" ("-- V" when absent)."""
    if value is None:
        return "-- V"
    return f"{value:.{voltage_decimals(raw)}f}V"


def format_percent(percent: Optional[float]) -> str:
    """Format a percentage: whole numbers without decimals, else one decimal."""
    if percent is None:
        return "N/A"
    if percent % 1 == 0:
        return f"{int(percent)}%"
    return f"{percent:.1f}%"


def format_per_cell(voltage: Optional[float], series_cells: int) -> str:
    """Format the per-cell voltage of a pack reading."""
    if voltage is None or series_cells <= 0:
        return "N/A"
    return f"{voltage / series_cells:.2f} V/cell"


def format_reference_voltage(voltage: float) -> str:
    """Reference table voltages always use one decimal."""
    return f"{voltage:.1f}V"
