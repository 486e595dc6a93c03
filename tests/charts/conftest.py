"""Fixtures for chart tests."""


import pytest

from voltcalc.battery import resolve_bounds
from voltcalc.charts import CHART_THEMES
from voltcalc.reference import generate_reference_points


@pytest.fixture
def light_theme():
    """Light chart theme."""
    return CHART_THEMES["light"]


@pytest.fixture
def dark_theme():
    """Dark chart theme."""
    return CHART_THEMES["dark"]


@pytest.fixture
def bounds_72v():
    """Default bounds for the 20-cell pack: 60V to 84V."""
    return resolve_bounds(72)


@pytest.fixture
def reference_79v(bounds_72v):
    """Reference points around a 79V reading."""
    return generate_reference_points(79.0, bounds_72v.v_min, bounds_72v.v_max)
