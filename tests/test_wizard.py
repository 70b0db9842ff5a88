"""
Tests for the step wizard state machine.
"""

import pandas as pd
import pytest

from conftest import FIXED_NOW
from config import CulturalFamily, EventCategory
from wizard import STEP_TITLES, InvalidTransition, WizardController, WizardStep


class TestStartState:
    def test_starts_at_family_selection(self, wizard):
        assert wizard.current_step == 0
        assert wizard.step is WizardStep.FAMILY
        assert wizard.family is CulturalFamily.COLOMBIAN
        assert wizard.result is None

    def test_inputs_use_clock(self, wizard):
        assert wizard.inputs.requested_time == FIXED_NOW

    def test_shares_given_inputs(self, inputs):
        wiz = WizardController(inputs=inputs, clock=lambda: FIXED_NOW)
        assert wiz.inputs is inputs

    def test_every_step_has_title(self):
        assert set(STEP_TITLES) == set(WizardStep)


class TestAdvance:
    def test_linear_chain(self, wizard):
        seen = [wizard.current_step]
        while wizard.can_advance:
            wizard.advance()
            seen.append(wizard.current_step)
        assert seen == [0, 1, 2, 3, 4, 5, 6]

    def test_advance_from_results_fails(self, wizard, walk_to):
        walk_to(wizard, WizardStep.RESULTS)
        with pytest.raises(InvalidTransition) as exc:
            wizard.advance()
        assert exc.value.step is WizardStep.RESULTS
        assert exc.value.action == "advance"
        assert wizard.current_step == 6

    def test_advance_from_last_input_computes(self, wizard, walk_to):
        walk_to(wizard, WizardStep.SPICY_FACTOR)
        wizard.inputs.total_participants = 5
        wizard.inputs.colombian_participants = 4
        wizard.inputs.spicy_factor_present = True
        wizard.advance()
        assert wizard.step is WizardStep.RESULTS
        assert wizard.inputs.computed_delay_minutes == 65
        assert wizard.result.delay_minutes == 65


class TestRetreat:
    @pytest.mark.parametrize("step", [WizardStep.FAMILY, WizardStep.TIME, WizardStep.RESULTS])
    def test_retreat_blocked(self, wizard, walk_to, step):
        walk_to(wizard, step)
        with pytest.raises(InvalidTransition):
            wizard.retreat()
        assert wizard.step is step

    def test_back_edges(self, wizard, walk_to):
        walk_to(wizard, WizardStep.SPICY_FACTOR)
        seen = [wizard.current_step]
        while wizard.can_retreat:
            wizard.retreat()
            seen.append(wizard.current_step)
        assert seen == [5, 4, 3, 2, 1]

    def test_back_and_forth_keeps_inputs(self, wizard, walk_to):
        walk_to(wizard, WizardStep.EVENT)
        wizard.inputs.event_category = EventCategory.COURT
        wizard.advance()
        wizard.retreat()
        assert wizard.inputs.event_category is EventCategory.COURT


class TestFinalize:
    @pytest.mark.parametrize("step", [s for s in WizardStep if s is not WizardStep.SPICY_FACTOR])
    def test_only_from_last_input_step(self, wizard, walk_to, step):
        walk_to(wizard, step)
        with pytest.raises(InvalidTransition):
            wizard.finalize()

    def test_stores_result(self, wizard, walk_to):
        walk_to(wizard, WizardStep.SPICY_FACTOR)
        wizard.inputs.event_category = EventCategory.WEDDING
        wizard.inputs.total_participants = 2
        wizard.inputs.colombian_participants = 2
        wizard.inputs.spicy_factor_present = True
        result = wizard.finalize()
        assert result.delay_minutes == 95
        assert wizard.inputs.computed_delay_minutes == 95
        assert wizard.inputs.computed_arrival_time == pd.Timestamp("2025-07-06 20:35")
        assert wizard.current_step == 6

    def test_idempotent_for_same_inputs(self, wizard, walk_to):
        walk_to(wizard, WizardStep.SPICY_FACTOR)
        wizard.inputs.total_participants = 3
        wizard.inputs.colombian_participants = 3
        first = wizard.finalize()
        wizard.reset()
        walk_to(wizard, WizardStep.SPICY_FACTOR)
        wizard.inputs.total_participants = 3
        wizard.inputs.colombian_participants = 3
        second = wizard.finalize()
        assert first == second

    def test_no_colombians_gives_original_time(self, wizard, walk_to):
        walk_to(wizard, WizardStep.RESULTS)
        assert wizard.inputs.computed_delay_minutes == 0
        assert wizard.inputs.computed_arrival_time == FIXED_NOW


class TestReset:
    @pytest.mark.parametrize("step", list(WizardStep))
    def test_reset_from_every_step(self, wizard, walk_to, step):
        walk_to(wizard, step)
        wizard.inputs.total_participants = 9
        wizard.inputs.colombian_participants = 6
        wizard.inputs.event_category = EventCategory.SHOPPING
        wizard.inputs.spicy_factor_present = True
        wizard.reset()

        assert wizard.current_step == 0
        assert wizard.result is None
        assert wizard.family is CulturalFamily.COLOMBIAN
        assert wizard.inputs.total_participants == 1
        assert wizard.inputs.colombian_participants == 0
        assert wizard.inputs.event_category is EventCategory.MEAL
        assert wizard.inputs.spicy_factor_present is False
        assert wizard.inputs.requested_time == FIXED_NOW
        assert wizard.inputs.computed_delay_minutes is None

    def test_reset_keeps_inputs_object(self, wizard, walk_to):
        held = wizard.inputs
        walk_to(wizard, WizardStep.RESULTS)
        wizard.reset()
        assert wizard.inputs is held

    def test_reset_reads_clock(self, walk_to):
        times = iter([pd.Timestamp("2025-01-01 10:00"), pd.Timestamp("2025-01-02 11:00")])
        wiz = WizardController(clock=lambda: next(times))
        walk_to(wiz, WizardStep.RESULTS)
        wiz.reset()
        assert wiz.inputs.requested_time == pd.Timestamp("2025-01-02 11:00")


class TestFamilySelection:
    def test_placeholder_family_is_inert(self, wizard):
        assert wizard.select_family(CulturalFamily.VIETNAMESE) is False
        assert wizard.family is CulturalFamily.COLOMBIAN

    def test_colombian_selectable(self, wizard):
        assert wizard.select_family(CulturalFamily.COLOMBIAN) is True

    def test_only_on_family_step(self, wizard):
        wizard.advance()
        with pytest.raises(InvalidTransition):
            wizard.select_family(CulturalFamily.COLOMBIAN)


class TestNavigationFlags:
    def test_flags_per_step(self, wizard):
        flags = []
        while True:
            flags.append((wizard.current_step, wizard.can_advance, wizard.can_retreat))
            if not wizard.can_advance:
                break
            wizard.advance()
        assert flags == [
            (0, True, False),
            (1, True, False),
            (2, True, True),
            (3, True, True),
            (4, True, True),
            (5, True, True),
            (6, False, False),
        ]

    def test_progress(self, wizard, walk_to):
        assert wizard.progress == 0
        walk_to(wizard, WizardStep.COLOMBIAN_PARTICIPANTS)
        assert wizard.progress == pytest.approx(0.6)
        walk_to(wizard, WizardStep.RESULTS)
        assert wizard.progress == 1

    def test_title_follows_step(self, wizard, walk_to):
        walk_to(wizard, WizardStep.TIME)
        assert wizard.title == "Step 1: When is your event?"
