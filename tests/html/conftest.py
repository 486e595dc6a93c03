"""Fixtures for HTML tests."""

import pytest

from voltcalc.engine import evaluate
from voltcalc.settings import CalculatorSettings


@pytest.fixture
def settings_72v():
    """Default settings for the 72V pack."""
    return CalculatorSettings(profile_key=72)


@pytest.fixture
def good_result():
    """79V on a 72V pack: normal tier, good charge."""
    return evaluate("79.0", 72)


@pytest.fixture
def empty_result():
    """No reading yet on a 72V pack."""
    return evaluate(None, 72)


@pytest.fixture
def fire_risk_result():
    """92V on a 72V pack (4.6V per cell)."""
    return evaluate(92, 72)


@pytest.fixture
def sample_svg():
    """Minimal chart markup."""
    return '<svg xmlns="http://www.w3.org/2000/svg" data-theme="dark"><g id="curve"></g></svg>'
