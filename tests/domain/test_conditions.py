"""Tests for the condition vocabulary and the unit transition table."""

import pytest

from inventory_kernel.domain.conditions import (
    CONDITION_TRANSITIONS,
    INBOUND_CONDITIONS,
    ISSUED_CONDITIONS,
    LOSS_CONDITIONS,
    NEUTRAL_CONDITIONS,
    AssetType,
    ProcurementType,
    StockCondition,
    can_transition,
    validate_condition_transition,
)
from inventory_kernel.exceptions import BadRequestError, InvalidConditionTransitionError


class TestVocabulary:
    def test_condition_values(self):
        assert {c.value for c in StockCondition} == {
            "good-condition",
            "reissued",
            "returned",
            "transferred",
            "for-disposal",
            "lost",
            "stolen",
            "damaged",
            "destroyed",
        }

    def test_every_condition_has_a_transition_row(self):
        assert set(CONDITION_TRANSITIONS) == set(StockCondition)

    def test_condition_groups_are_disjoint_where_expected(self):
        assert not INBOUND_CONDITIONS & NEUTRAL_CONDITIONS
        assert not ISSUED_CONDITIONS & NEUTRAL_CONDITIONS
        assert LOSS_CONDITIONS < NEUTRAL_CONDITIONS

    def test_unit_tracking(self):
        assert not AssetType.CONSUMABLE.is_unit_tracked
        assert AssetType.SEP.is_unit_tracked
        assert AssetType.PPE.is_unit_tracked

    def test_supplier_kept_only_for_competitive_procurement(self):
        assert not ProcurementType.PS_DBM.keeps_supplier
        assert ProcurementType.BIDDING.keeps_supplier
        assert ProcurementType.QUOTATION.keeps_supplier


class TestTransitions:
    @pytest.mark.parametrize(
        "current,target",
        [
            (StockCondition.GOOD_CONDITION, StockCondition.REISSUED),
            (StockCondition.GOOD_CONDITION, StockCondition.TRANSFERRED),
            (StockCondition.REISSUED, StockCondition.RETURNED),
            (StockCondition.REISSUED, StockCondition.LOST),
            (StockCondition.REISSUED, StockCondition.FOR_DISPOSAL),
            (StockCondition.TRANSFERRED, StockCondition.DESTROYED),
            (StockCondition.RETURNED, StockCondition.REISSUED),
            (StockCondition.RETURNED, StockCondition.FOR_DISPOSAL),
        ],
    )
    def test_allowed(self, current, target):
        assert can_transition(current, target)
        validate_condition_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (StockCondition.GOOD_CONDITION, StockCondition.LOST),
            (StockCondition.GOOD_CONDITION, StockCondition.RETURNED),
            (StockCondition.RETURNED, StockCondition.STOLEN),
            (StockCondition.LOST, StockCondition.RETURNED),
            (StockCondition.FOR_DISPOSAL, StockCondition.REISSUED),
        ],
    )
    def test_rejected(self, current, target):
        assert not can_transition(current, target)
        with pytest.raises(InvalidConditionTransitionError) as exc_info:
            validate_condition_transition(current, target)
        assert exc_info.value.current == current.value
        assert exc_info.value.target == target.value

    def test_terminal_conditions_have_no_successors(self):
        for condition in NEUTRAL_CONDITIONS:
            assert CONDITION_TRANSITIONS[condition] == frozenset()

    def test_no_current_condition_is_always_allowed(self):
        validate_condition_transition(None, StockCondition.GOOD_CONDITION)
        validate_condition_transition(None, StockCondition.REISSUED)

    def test_error_is_a_bad_request(self):
        with pytest.raises(BadRequestError):
            validate_condition_transition(StockCondition.LOST, StockCondition.REISSUED)
