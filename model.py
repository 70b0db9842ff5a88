"""
Colombian Time Calculation Engine
Pure functions: collected inputs drive one delay, one arrival time and
one readable breakdown of the arithmetic.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

import pandas as pd

from config import (
    Breakdown,
    CulturalFamily,
    DelayResult,
    DelayRules,
    InputModel,
)

logger = logging.getLogger(__name__)

NO_EFFECT_MESSAGE = "Not enough Colombians to activate the effect! 😅"

Calculator = Callable[..., int]


def _resolve(rules: Optional[DelayRules]) -> DelayRules:
    return rules if rules is not None else DelayRules()


def _per_head(inputs: InputModel, r: DelayRules) -> int:
    if not inputs.event_category.is_informal:
        return r.formal_per_head
    if inputs.event_category.is_shopping:
        return r.shopping_spicy_per_head if inputs.spicy_factor_present else r.shopping_per_head
    return r.informal_per_head


# ---------------------------------------------------------------------------
# Delay calculation
# ---------------------------------------------------------------------------

def delay_components(
    inputs: InputModel, rules: Optional[DelayRules] = None
) -> List[Tuple[str, int]]:
    """Terms of the delay as (label, minutes) pairs, in formula order.

    Shopping never gets the informal spicy surcharge; its spicy effect is
    the higher per-head rate.
    """
    r = _resolve(rules)
    n = inputs.colombian_participants
    category = inputs.event_category
    spicy = inputs.spicy_factor_present

    if n == 0:
        return []

    if category.is_informal:
        base = r.shopping_base if category.is_shopping else r.informal_base
        parts = [("Base", base)]
        if n >= 2:
            per_head = _per_head(inputs, r)
            parts.append((f"{n} × {per_head} min", n * per_head))
        if spicy and not category.is_shopping:
            parts.append(("Spicy factor", r.informal_spicy_surcharge))
        return parts

    parts = [
        ("Base", r.formal_base),
        (f"{n} × {r.formal_per_head} min", n * r.formal_per_head),
    ]
    if spicy:
        parts.append(("Spicy factor", r.formal_spicy_surcharge))
    return parts


def compute_delay_minutes(inputs: InputModel, rules: Optional[DelayRules] = None) -> int:
    return sum(minutes for _, minutes in delay_components(inputs, rules))


def arrival_time(requested_time: datetime, delay_minutes: int) -> pd.Timestamp:
    return pd.Timestamp(requested_time) + pd.Timedelta(minutes=delay_minutes)


_CALCULATORS: Dict[CulturalFamily, Calculator] = {
    CulturalFamily.COLOMBIAN: compute_delay_minutes,
}


def calculator_for(family: CulturalFamily) -> Optional[Calculator]:
    """Calculator for an implemented family, None for placeholders."""
    if not family.is_available:
        return None
    return _CALCULATORS.get(family)


# ---------------------------------------------------------------------------
# Breakdown text
# ---------------------------------------------------------------------------

def calculation_breakdown(
    inputs: InputModel,
    delay_minutes: int,
    rules: Optional[DelayRules] = None,
) -> Breakdown:
    """Explain a delay in the same branch structure as the calculator.

    For informal non-shopping spicy events the text states the
    stated_informal_spicy_surcharge, which does not match what the
    calculator adds; Breakdown.is_consistent reports it.
    """
    r = _resolve(rules)
    n = inputs.colombian_participants
    category = inputs.event_category

    if n == 0:
        return Breakdown(text=NO_EFFECT_MESSAGE, stated_minutes=0, delay_minutes=delay_minutes)

    if category.is_informal:
        base = r.shopping_base if category.is_shopping else r.informal_base
        if n < 2:
            text = f"Base: {base} minutes"
            stated = base
        else:
            per_head = _per_head(inputs, r)
            text = f"Base: {base} min + {n} × {per_head} min"
            stated = base + n * per_head
        if inputs.spicy_factor_present and not category.is_shopping:
            text += f" + {r.stated_informal_spicy_surcharge} min"
            stated += r.stated_informal_spicy_surcharge
    else:
        text = f"Base: {r.formal_base} min + {n} × {r.formal_per_head} min"
        stated = r.formal_base + n * r.formal_per_head
        if inputs.spicy_factor_present:
            text += f" + {r.formal_spicy_surcharge} min"
            stated += r.formal_spicy_surcharge

    text += f" = {delay_minutes} minutes"
    breakdown = Breakdown(text=text, stated_minutes=stated, delay_minutes=delay_minutes)
    if not breakdown.is_consistent:
        logger.debug(
            "Breakdown states %d min but delay is %d min (%s)",
            stated, delay_minutes, category.value,
        )
    return breakdown


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def run_model(
    inputs: InputModel,
    family: CulturalFamily = CulturalFamily.COLOMBIAN,
    rules: Optional[DelayRules] = None,
) -> DelayResult:
    calculator = calculator_for(family)
    if calculator is None:
        raise ValueError(f"No delay calculator for the {family.label} family")

    delay = calculator(inputs, rules)
    return DelayResult(
        delay_minutes=delay,
        arrival_time=arrival_time(inputs.requested_time, delay),
        breakdown=calculation_breakdown(inputs, delay, rules),
    )
