"""Matplotlib-based charge curve chart.

Renders percent against pack voltage for the configured bounds, with the
per-cell safety zones shaded and the current reading marked. The SVG
carries data-* attributes so the page can show tooltips.
"""

import io
import json
import re
from dataclasses import dataclass
from typing import Literal, Optional

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for server-side rendering
import matplotlib.pyplot as plt

from .battery import Bounds, PercentModel, voltage_to_percentage
from .reference import ReferencePoint
from .safety import (
    CELL_DAMAGE_VOLTAGE,
    CELL_FIRE_RISK_VOLTAGE,
    CELL_HIGH_PRESSURE_VOLTAGE,
    CELL_SAFE_MAX_VOLTAGE,
    CELL_SAFE_MIN_VOLTAGE,
)
from . import log


# Type alias for theme names
ThemeName = Literal["light", "dark"]

# Samples along the voltage axis
CURVE_SAMPLES = 120


@dataclass(frozen=True)
class ChartTheme:
    """Color palette for chart rendering."""

    name: str
    # Colors as hex values (without #)
    background: str
    canvas: str
    text: str
    axis: str
    grid: str
    line: str
    marker: str
    warning: str  # Includes alpha channel
    danger: str  # Includes alpha channel


CHART_THEMES: dict[ThemeName, ChartTheme] = {
    "light": ChartTheme(
        name="light",
        background="f2f2f7",
        canvas="ffffff",
        text="1c1c1e",
        axis="8e8e93",
        grid="e5e5ea",
        line="30d158",
        marker="0a84ff",
        warning="ff950033",
        danger="ff3b3033",
    ),
    "dark": ChartTheme(
        name="dark",
        background="1c1c1e",
        canvas="2c2c2e",
        text="f2f2f7",
        axis="8e8e93",
        grid="3a3a3c",
        line="32d74b",
        marker="64d2ff",
        warning="ff9f0a40",
        danger="ff453a40",
    ),
}


def _hex_to_rgba(hex_color: str) -> tuple[float, float, float, float]:
    """Convert hex color (without #) to RGBA tuple (0-1 range).

    Accepts 6-char (RGB) or 8-char (RGBA) hex strings.
    """
    r = int(hex_color[0:2], 16) / 255
    g = int(hex_color[2:4], 16) / 255
    b = int(hex_color[4:6], 16) / 255
    a = int(hex_color[6:8], 16) / 255 if len(hex_color) >= 8 else 1.0
    return (r, g, b, a)


def voltage_axis(bounds: Bounds, series_cells: int, voltage: Optional[float] = None) -> tuple[float, float]:
    """X-axis range covering the charge span, the safety limits and the reading."""
    x_min = min(bounds.v_min, series_cells * CELL_DAMAGE_VOLTAGE)
    x_max = max(bounds.v_max, series_cells * CELL_FIRE_RISK_VOLTAGE)
    if voltage is not None and voltage > 0:
        x_min = min(x_min, voltage)
        x_max = max(x_max, voltage)
    return (x_min, x_max)


def charge_curve(
    bounds: Bounds,
    x_range: tuple[float, float],
    model: PercentModel = PercentModel.LINEAR,
    samples: int = CURVE_SAMPLES,
) -> list[tuple[float, float]]:
    """(voltage, percent) samples across x_range."""
    x_min, x_max = x_range
    step = (x_max - x_min) / (samples - 1)
    return [
        (v, voltage_to_percentage(v, bounds.v_min, bounds.v_max, model))
        for v in (x_min + i * step for i in range(samples))
    ]


def safety_zones(series_cells: int, x_range: tuple[float, float]) -> list[tuple[float, float, str]]:
    """Shaded (start, end, kind) spans, kind being "warning" or "danger"."""
    x_min, x_max = x_range
    n = series_cells
    zones = [
        (x_min, n * CELL_DAMAGE_VOLTAGE, "danger"),
        (n * CELL_DAMAGE_VOLTAGE, n * CELL_SAFE_MIN_VOLTAGE, "warning"),
        (n * CELL_SAFE_MAX_VOLTAGE, n * CELL_HIGH_PRESSURE_VOLTAGE, "warning"),
        (n * CELL_HIGH_PRESSURE_VOLTAGE, x_max, "danger"),
    ]
    return [(start, end, kind) for start, end, kind in zones if end > start]


def render_charge_curve_svg(
    bounds: Bounds,
    series_cells: int,
    voltage: Optional[float] = None,
    theme: ChartTheme = CHART_THEMES["dark"],
    model: PercentModel = PercentModel.LINEAR,
    reference_points: Optional[list[ReferencePoint]] = None,
    width: int = 800,
    height: int = 280,
) -> str:
    """Render the charge curve as SVG using matplotlib.

    Args:
        bounds: Charge-percentage bounds
        series_cells: Cells in series, for the safety zones
        voltage: Current reading to mark, if any
        theme: Color theme to apply
        model: Percentage model for the curve
        reference_points: Points to draw on the curve
        width: Chart width in pixels
        height: Chart height in pixels

    Returns:
        SVG string with data-* attributes for tooltips
    """
    x_range = voltage_axis(bounds, series_cells, voltage)
    curve = charge_curve(bounds, x_range, model)

    dpi = 100
    fig, ax = plt.subplots(figsize=(width / dpi, height / dpi), dpi=dpi)

    try:
        fig.patch.set_facecolor(f"#{theme.background}")
        ax.set_facecolor(f"#{theme.canvas}")

        ax.spines['top'].set_visible(False)
        ax.spines['right'].set_visible(False)
        ax.spines['left'].set_color(f"#{theme.grid}")
        ax.spines['bottom'].set_color(f"#{theme.grid}")

        ax.tick_params(colors=f"#{theme.axis}", labelsize=10)
        ax.xaxis.label.set_color(f"#{theme.text}")
        ax.yaxis.label.set_color(f"#{theme.text}")
        ax.set_xlabel("Pack voltage (V)")
        ax.set_ylabel("Charge (%)")

        ax.grid(True, linestyle='-', alpha=0.5, color=f"#{theme.grid}")
        ax.set_axisbelow(True)

        for start, end, kind in safety_zones(series_cells, x_range):
            color = theme.danger if kind == "danger" else theme.warning
            rgba = _hex_to_rgba(color)
            ax.axvspan(start, end, color=f"#{color[:6]}", alpha=rgba[3], linewidth=0)

        ax.plot(
            [v for v, _ in curve],
            [p for _, p in curve],
            color=f"#{theme.line}",
            linewidth=2,
        )

        for point in reference_points or []:
            if point.is_current:
                continue
            ax.plot(point.voltage, point.percent, "o", color=f"#{theme.axis}", markersize=4)

        if voltage is not None and voltage > 0:
            percent = voltage_to_percentage(voltage, bounds.v_min, bounds.v_max, model)
            ax.axvline(voltage, color=f"#{theme.marker}", linestyle="--", linewidth=1)
            ax.plot(voltage, percent, "o", color=f"#{theme.marker}", markersize=8)
        else:
            ax.text(
                0.5, 0.5, "No reading",
                transform=ax.transAxes,
                ha='center', va='center',
                fontsize=12,
                color=f"#{theme.axis}"
            )

        ax.set_xlim(*x_range)
        ax.set_ylim(-5, 105)

        plt.tight_layout(pad=0.5)

        svg_buffer = io.StringIO()
        fig.savefig(svg_buffer, format='svg', bbox_inches='tight', pad_inches=0.1)
        svg_content = svg_buffer.getvalue()

    finally:
        # Ensure figure is closed to prevent memory leaks
        plt.close(fig)

    log.debug(f"Rendered charge curve ({theme.name}, {len(svg_content)} bytes)")
    return _inject_data_attributes(svg_content, bounds, theme.name, x_range, reference_points or [])


def _inject_data_attributes(
    svg: str,
    bounds: Bounds,
    theme_name: str,
    x_range: tuple[float, float],
    reference_points: list[ReferencePoint],
) -> str:
    """Add data-* attributes to the root <svg> element.

    Adds data-theme, data-v-min, data-v-max, data-x-min, data-x-max and a
    data-points JSON array of the reference points.
    """
    data_points = [
        {"v": round(p.voltage, 3), "pct": round(p.percent, 2), "label": p.label}
        for p in reference_points
    ]
    data_points_attr = json.dumps(data_points).replace('"', '&quot;')

    return re.sub(
        r'<svg\b',
        f'<svg data-theme="{theme_name}" '
        f'data-v-min="{bounds.v_min}" data-v-max="{bounds.v_max}" '
        f'data-x-min="{x_range[0]}" data-x-max="{x_range[1]}" '
        f'data-points="{data_points_attr}"',
        svg,
        count=1,
    )
