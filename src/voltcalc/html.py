"""HTML rendering helpers using Jinja2 templates."""

import shutil
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, PackageLoader, select_autoescape

from .engine import EvaluationResult
from .env import get_config
from .formatters import (
    format_percent,
    format_per_cell,
    format_reference_voltage,
)
from .profiles import PROFILES
from .safety import SafetyTier
from .settings import CalculatorSettings, voltage_placeholder
from . import log


# CSS class for the battery graphic per safety tier
TIER_CLASSES = {
    SafetyTier.UNKNOWN: "unknown",
    SafetyTier.FIRE_RISK: "fire-danger",
    SafetyTier.HIGH_PRESSURE: "moderate-danger",
    SafetyTier.OVERCHARGED: "overcharge",
    SafetyTier.CRITICALLY_LOW: "critical-low",
    SafetyTier.DANGEROUSLY_LOW: "danger",
}

# Fill level classes for a normal-tier pack: (lower percent bound, class)
FILL_LEVELS = [
    (80, "level-high"),
    (50, "level-medium"),
    (20, "level-low"),
]

# Singleton Jinja2 environment
_jinja_env: Optional[Environment] = None


def get_jinja_env() -> Environment:
    """Get or create the singleton Jinja2 environment.

    Uses PackageLoader to load templates from src/voltcalc/templates/
    with autoescape enabled for security.
    """
    global _jinja_env
    if _jinja_env is not None:
        return _jinja_env

    env = Environment(
        loader=PackageLoader("voltcalc", "templates"),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )

    # Register custom filters
    env.filters["format_percent"] = format_percent
    env.filters["format_reference_voltage"] = format_reference_voltage

    _jinja_env = env
    return env


def status_class(percent: float) -> str:
    """Status pill class: success from 80%, plain from 20%, then warning, then danger."""
    if percent >= 80:
        return "success"
    if percent >= 20:
        return ""
    if percent >= 10:
        return "warning"
    if percent > 0:
        return "danger"
    return ""


def tier_class(tier: Optional[SafetyTier]) -> str:
    """Battery graphic class for a safety tier ("" when nothing to flag)."""
    if tier is None:
        return ""
    return TIER_CLASSES.get(tier, "")


def fill_class(result: EvaluationResult) -> str:
    """Battery fill color class: tier color when flagged, else by charge level."""
    flagged = tier_class(result.safety_tier)
    if flagged:
        return flagged
    if not result.has_reading:
        return "empty"
    for lower, css in FILL_LEVELS:
        if result.percent >= lower:
            return css
    return "level-critical" if result.percent > 0 else "empty"


def build_profile_options(selected: int) -> list[dict[str, Any]]:
    return [
        {
            "key": key,
            "label": f"{profile.name} ({profile.series_cells}s)",
            "selected": key == selected,
        }
        for key, profile in PROFILES.items()
    ]


def build_page_context(
    result: EvaluationResult,
    settings: CalculatorSettings,
    chart_svg: Optional[str] = None,
) -> dict[str, Any]:
    """Template context for the calculator page."""
    return {
        "page_title": "Scooter Battery Voltage Calculator",
        "result": result,
        "settings": settings,
        "profile_options": build_profile_options(settings.profile_key),
        "placeholder": voltage_placeholder(settings.profile_key),
        "per_cell": format_per_cell(result.voltage, result.profile.series_cells),
        "status_class": status_class(result.percent),
        "tier_class": tier_class(result.safety_tier),
        "fill_class": fill_class(result),
        "fill_width": round(result.percent, 1),
        "bounds": {
            "empty": format_reference_voltage(result.bounds.v_min),
            "nominal": format_reference_voltage(result.bounds.v_nominal),
            "full": format_reference_voltage(result.bounds.v_max),
        },
        "chart_svg": chart_svg,
    }


def render_calculator_page(
    result: EvaluationResult,
    settings: CalculatorSettings,
    chart_svg: Optional[str] = None,
) -> str:
    """Render the calculator page for an evaluation."""
    env = get_jinja_env()
    context = build_page_context(result, settings, chart_svg)
    template = env.get_template("calculator.html")
    return template.render(**context)


def copy_styles() -> None:
    """Copy styles.css to output directory."""
    cfg = get_config()
    # styles.css lives alongside templates in src/voltcalc/templates/
    src = Path(__file__).parent / "templates" / "styles.css"
    dst = cfg.out_dir / "styles.css"

    if src.exists():
        shutil.copy2(src, dst)
        log.debug(f"Copied {src} to {dst}")
    else:
        log.warn(f"styles.css not found at {src}")


def write_page(
    result: EvaluationResult,
    settings: CalculatorSettings,
    chart_svg: Optional[str] = None,
) -> Path:
    """Write index.html (and styles.css) to OUT_DIR. Returns the page path."""
    cfg = get_config()
    cfg.out_dir.mkdir(parents=True, exist_ok=True)
    copy_styles()

    page_path = cfg.out_dir / "index.html"
    page_path.write_text(render_calculator_page(result, settings, chart_svg))
    log.debug(f"Wrote {page_path}")
    return page_path
