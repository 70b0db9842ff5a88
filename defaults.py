"""Baseline rules and starting inputs (final formula revision)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import pandas as pd

from config import DelayRules, EventCategory, InputModel


def colombian_rules() -> DelayRules:
    return DelayRules(
        shopping_base=10,
        informal_base=30,
        informal_per_head=5,
        shopping_per_head=3,
        shopping_spicy_per_head=5,
        informal_spicy_surcharge=15,
        formal_base=44,
        formal_per_head=4,
        formal_spicy_surcharge=43,
        stated_informal_spicy_surcharge=20,
    )


def current_time(timezone: Optional[str] = None) -> pd.Timestamp:
    """Now, floored to the minute, optionally in a named time zone."""
    return pd.Timestamp.now(tz=timezone).floor("min")


def default_inputs(now: Optional[datetime] = None) -> InputModel:
    return InputModel(
        requested_time=now if now is not None else current_time(),
        event_category=EventCategory.MEAL,
        total_participants=1,
        colombian_participants=0,
        spicy_factor_present=False,
    )
