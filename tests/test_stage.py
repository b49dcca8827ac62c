"""
Tests for the stage vocabulary and the follow-up transition table.
"""

import pytest

from job_pipeline.errors import NoProgressionDefinedError
from job_pipeline.models.stage import (
    CLOSED_STAGES,
    FOLLOW_UP_STAGES,
    STAGE_LABELS,
    TOUCHPOINT_PROGRESSION,
    Stage,
    is_terminal,
    next_stage,
)


class TestStageLabels:
    """Logical stage <-> store label lookup."""

    def test_every_stage_has_a_label(self):
        assert set(STAGE_LABELS) == set(Stage)

    def test_labels_are_unique(self):
        assert len(set(STAGE_LABELS.values())) == len(STAGE_LABELS)

    def test_label_round_trip(self):
        for stage in Stage:
            assert Stage.from_label(stage.label) is stage

    def test_known_labels(self):
        assert Stage.PENDING_APPROVAL.label == '⏸️ Pending Approval'
        assert Stage.INITIAL_MESSAGE_SENT.label == '💌 Initial message sent'
        assert Stage.CLOSED_LOST.label == '➡️ Closed Lost'

    def test_unknown_and_empty_labels(self):
        """Matching is exact: no glyph stripping or case folding."""
        assert Stage.from_label('Pending Approval') is None
        assert Stage.from_label('📆 touchpoint 1') is None
        assert Stage.from_label('') is None
        assert Stage.from_label(None) is None

    def test_parse_accepts_token_label_or_stage(self):
        assert Stage.parse('touchpoint_1') is Stage.TOUCHPOINT_1
        assert Stage.parse('📆 Touchpoint 1') is Stage.TOUCHPOINT_1
        assert Stage.parse(Stage.TOUCHPOINT_1) is Stage.TOUCHPOINT_1
        assert Stage.parse('bogus') is None
        assert Stage.parse(None) is None


class TestTransitionTable:
    """Follow-up advancement successor lookup."""

    def test_sequence(self):
        assert next_stage(Stage.INITIAL_MESSAGE_SENT) is Stage.TOUCHPOINT_1
        assert next_stage(Stage.TOUCHPOINT_1) is Stage.TOUCHPOINT_2
        assert next_stage(Stage.TOUCHPOINT_2) is Stage.TOUCHPOINT_3
        assert next_stage(Stage.TOUCHPOINT_3) is Stage.CLOSED_LOST

    def test_four_advances_reach_closed_lost_and_fifth_fails(self):
        stage = Stage.INITIAL_MESSAGE_SENT
        for _ in range(4):
            stage = next_stage(stage)
        assert stage is Stage.CLOSED_LOST

        with pytest.raises(NoProgressionDefinedError) as exc_info:
            next_stage(stage)
        assert exc_info.value.stage == Stage.CLOSED_LOST.label

    def test_stages_outside_the_table_raise(self):
        for stage in Stage:
            if stage in TOUCHPOINT_PROGRESSION:
                continue
            with pytest.raises(NoProgressionDefinedError):
                next_stage(stage)

    def test_error_message_names_the_stage(self):
        with pytest.raises(NoProgressionDefinedError) as exc_info:
            next_stage(Stage.LIGHT_ENGAGEMENT)
        assert str(exc_info.value) == (
            'No progression defined for stage: 🧐 Light Engagement'
        )

    def test_unrecognised_stage_uses_raw_label(self):
        with pytest.raises(NoProgressionDefinedError) as exc_info:
            next_stage(None, 'Mystery Stage')
        assert exc_info.value.message == 'No progression defined for stage: Mystery Stage'

    def test_table_is_a_function(self):
        """Each stage has at most one successor and no successor is a follow-up source."""
        assert set(TOUCHPOINT_PROGRESSION) == set(FOLLOW_UP_STAGES)
        assert is_terminal(TOUCHPOINT_PROGRESSION[Stage.TOUCHPOINT_3])

    def test_is_terminal(self):
        for stage in CLOSED_STAGES:
            assert is_terminal(stage)
        assert not is_terminal(Stage.TOUCHPOINT_3)
