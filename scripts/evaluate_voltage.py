#!/usr/bin/env python3
"""
Evaluate a battery voltage with the stored calculator settings.

Usage: evaluate_voltage.py [VOLTAGE]

Without an argument the last voltage entered for the selected profile is
used. Writes the calculator page to OUT_DIR and prints the evaluation as
JSON. Stdout carries only the JSON document; log lines go to stderr so the
output can be piped straight into a JSON parser.
"""

import json
import sys
from contextlib import redirect_stdout
from pathlib import Path
from typing import Optional

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from voltcalc.battery import PercentModel
from voltcalc.charts import CHART_THEMES, render_charge_curve_svg
from voltcalc.engine import EvaluationResult, evaluate_settings
from voltcalc.env import get_config
from voltcalc.errors import InvalidConfiguration
from voltcalc import log
from voltcalc.html import write_page
from voltcalc.settings import last_voltage, load_settings, remember_voltage, save_settings


def evaluate_and_render(argv: list[str]) -> Optional[EvaluationResult]:
    """Evaluate one reading and write the page. None on invalid configuration."""
    cfg = get_config()
    settings = load_settings()

    raw = argv[0] if argv else last_voltage(settings.profile_key)
    if raw is None:
        log.warn(f"No voltage given and none stored for {settings.profile_key}V")

    try:
        result = evaluate_settings(settings, raw, PercentModel(cfg.percent_model))
    except InvalidConfiguration as e:
        log.error(f"Invalid battery configuration: {e}")
        return None

    log.info(
        f"{result.profile.name} {result.voltage_text}: {result.percent_text} "
        f"({result.status_label}) - {result.tip.title}"
    )

    chart_svg = render_charge_curve_svg(
        result.bounds,
        result.profile.series_cells,
        result.voltage,
        CHART_THEMES[cfg.chart_theme],
        result.model,
        result.reference_points,
    )
    page = write_page(result, settings, chart_svg)
    log.info(f"Wrote {page}")

    if result.has_reading:
        remember_voltage(settings.profile_key, raw)
    save_settings(settings)
    return result


def main(argv=None) -> int:
    """Evaluate one reading, render the page and print the result as JSON."""
    argv = sys.argv[1:] if argv is None else argv

    with redirect_stdout(sys.stderr):
        result = evaluate_and_render(argv)
    if result is None:
        return 1

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
