"""
Step wizard for the Colombian Time flow.
Linear chain 0 -> 6 with single-step back edges between the input steps.
Reset is the only way out of the results step.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import IntEnum
from typing import Callable, Optional

from config import CulturalFamily, DelayResult, DelayRules, InputModel
from defaults import current_time, default_inputs
from model import run_model

logger = logging.getLogger(__name__)


class WizardStep(IntEnum):
    FAMILY = 0
    TIME = 1
    EVENT = 2
    TOTAL_PARTICIPANTS = 3
    COLOMBIAN_PARTICIPANTS = 4
    SPICY_FACTOR = 5
    RESULTS = 6


FIRST_INPUT_STEP = WizardStep.TIME
LAST_INPUT_STEP = WizardStep.SPICY_FACTOR

STEP_TITLES = {
    WizardStep.FAMILY: "Choose your cultural family",
    WizardStep.TIME: "Step 1: When is your event?",
    WizardStep.EVENT: "Step 2: What type of event?",
    WizardStep.TOTAL_PARTICIPANTS: "Step 3: How many people total?",
    WizardStep.COLOMBIAN_PARTICIPANTS: "Step 4: The crucial question... 🇨🇴",
    WizardStep.SPICY_FACTOR: "Step 5: The ULTIMATE question... 🌶️",
    WizardStep.RESULTS: "¡Tranquilo, que allá llego!",
}


class InvalidTransition(Exception):
    """A step move the state machine does not allow."""

    def __init__(self, step: WizardStep, action: str):
        self.step = step
        self.action = action
        super().__init__(f"cannot {action} from step {int(step)} ({step.name.lower()})")


class WizardController:
    """Owns the current step and the InputModel of one wizard session.

    The presentation layer edits ``inputs`` directly and moves through the
    steps only via advance, retreat, finalize and reset.
    """

    def __init__(
        self,
        inputs: Optional[InputModel] = None,
        rules: Optional[DelayRules] = None,
        clock: Callable[[], datetime] = current_time,
    ):
        self._clock = clock
        self.inputs = inputs if inputs is not None else default_inputs(clock())
        self.rules = rules
        self._step = WizardStep.FAMILY
        self._family = CulturalFamily.COLOMBIAN
        self._result: Optional[DelayResult] = None

    @property
    def current_step(self) -> int:
        return int(self._step)

    @property
    def step(self) -> WizardStep:
        return self._step

    @property
    def family(self) -> CulturalFamily:
        return self._family

    @property
    def result(self) -> Optional[DelayResult]:
        return self._result

    @property
    def title(self) -> str:
        return STEP_TITLES[self._step]

    @property
    def can_advance(self) -> bool:
        return self._step < WizardStep.RESULTS

    @property
    def can_retreat(self) -> bool:
        return FIRST_INPUT_STEP < self._step <= LAST_INPUT_STEP

    @property
    def progress(self) -> float:
        """Fraction of the five input steps already passed."""
        done = min(max(int(self._step) - int(FIRST_INPUT_STEP), 0), 5)
        return done / 5

    def _move(self, target: WizardStep) -> None:
        logger.debug("Wizard step %s -> %s", self._step.name, target.name)
        self._step = target

    def select_family(self, family: CulturalFamily) -> bool:
        """Pick the cultural family. Placeholder families are ignored."""
        if self._step != WizardStep.FAMILY:
            raise InvalidTransition(self._step, "select a family")
        if not family.is_available:
            logger.info("Cultural family %s is not available yet", family.label)
            return False
        self._family = family
        return True

    def advance(self) -> None:
        if not self.can_advance:
            raise InvalidTransition(self._step, "advance")
        if self._step == LAST_INPUT_STEP:
            self.finalize()
            return
        self._move(WizardStep(self._step + 1))

    def retreat(self) -> None:
        if not self.can_retreat:
            raise InvalidTransition(self._step, "retreat")
        self._move(WizardStep(self._step - 1))

    def finalize(self) -> DelayResult:
        """Compute the delay from the current inputs and show results."""
        if self._step != LAST_INPUT_STEP:
            raise InvalidTransition(self._step, "finalize")

        result = run_model(self.inputs, self._family, self.rules)
        self.inputs.record_result(result.delay_minutes, result.arrival_time)
        self._result = result
        logger.info(
            "Computed %d min delay for %s (%d of %d Colombian, spicy=%s)",
            result.delay_minutes,
            self.inputs.event_category.value,
            self.inputs.colombian_participants,
            self.inputs.total_participants,
            self.inputs.spicy_factor_present,
        )
        self._move(WizardStep.RESULTS)
        return result

    def reset(self) -> None:
        """Start over: default inputs, Colombian family, step 0."""
        self.inputs.restore_defaults(self._clock())
        self._family = CulturalFamily.COLOMBIAN
        self._result = None
        logger.debug("Wizard reset from step %s", self._step.name)
        self._step = WizardStep.FAMILY
