"""Shared fixtures: a fixed clock, fresh inputs and a fresh wizard."""

import pandas as pd
import pytest

from config import EventCategory, InputModel
from defaults import colombian_rules
from wizard import WizardController, WizardStep

FIXED_NOW = pd.Timestamp("2025-07-06 19:00")


def make_inputs(category=EventCategory.MEAL, colombians=0, spicy=False, total=20):
    return InputModel(
        requested_time=FIXED_NOW,
        event_category=category,
        total_participants=total,
        colombian_participants=colombians,
        spicy_factor_present=spicy,
    )


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def inputs():
    return InputModel(requested_time=FIXED_NOW)


@pytest.fixture
def wizard():
    return WizardController(rules=colombian_rules(), clock=lambda: FIXED_NOW)


@pytest.fixture
def walk_to():
    """Advance a wizard from step 0 to the requested step."""

    def _walk(wiz, step):
        while wiz.step < WizardStep(step):
            wiz.advance()
        return wiz

    return _walk
