"""Tests for dialogscript.grouping."""

from __future__ import annotations

from dialogscript.grouping import (
    flatten_groups,
    group_elements,
    should_show_contd,
    should_show_speaker_label,
)
from dialogscript.models import ElementType, Speaker

from factories import action, dialogue, paren, variant


class TestGroupElements:
    def test_empty(self):
        assert group_elements([]) == []

    def test_same_speaker_run_merges(self, sample_elements):
        groups = group_elements(sample_elements)
        assert len(groups) == 3
        assert groups[0].speaker is Speaker.A
        assert len(groups[0].members) == 3
        assert groups[0].anchor_id == "E1"
        assert groups[1].speaker is None
        assert groups[1].members[0].type is ElementType.ACTION
        assert groups[2].speaker is Speaker.B

    def test_alternating_speakers_split(self):
        elements = [dialogue(Speaker.A, "Hi"), dialogue(Speaker.B, "Yo"), dialogue(Speaker.A, "So")]
        assert [g.speaker for g in group_elements(elements)] == [Speaker.A, Speaker.B, Speaker.A]

    def test_consecutive_actions_are_separate_groups(self):
        groups = group_elements([action("Rain"), action("Thunder")])
        assert len(groups) == 2
        assert all(g.speaker is None for g in groups)

    def test_variants_join_same_speaker_run(self):
        elements = [
            dialogue(Speaker.A, "Hi"),
            variant(ElementType.VOICE_OVER, Speaker.A, "Meanwhile"),
            paren(Speaker.A, "beat"),
        ]
        groups = group_elements(elements)
        assert len(groups) == 1
        assert len(groups[0].members) == 3

    def test_anchor_is_first_member(self):
        first = dialogue(Speaker.B, "One")
        groups = group_elements([first, dialogue(Speaker.B, "Two")])
        assert groups[0].anchor_id == first.id

    def test_flatten_restores_order(self, sample_elements):
        assert flatten_groups(group_elements(sample_elements)) == sample_elements

    def test_regrouping_flattened_is_stable(self, sample_elements):
        groups = group_elements(sample_elements)
        assert group_elements(flatten_groups(groups)) == groups


class TestShouldShowSpeakerLabel:
    def test_first_group_always_labelled(self):
        groups = group_elements([dialogue(Speaker.A, "Hi")])
        assert should_show_speaker_label(0, groups) is True

    def test_speaker_change_labelled(self):
        groups = group_elements([dialogue(Speaker.A, "Hi"), dialogue(Speaker.B, "Yo")])
        assert should_show_speaker_label(1, groups) is True

    def test_after_action_labelled(self):
        groups = group_elements([dialogue(Speaker.A, "Hi"), action("Rain"), dialogue(Speaker.A, "So")])
        assert should_show_speaker_label(2, groups) is True


class TestShouldShowContd:
    def test_same_speaker_after_action(self):
        groups = group_elements([dialogue(Speaker.A, "Hi"), action("Rain"), dialogue(Speaker.A, "So")])
        assert should_show_contd(2, groups) is True

    def test_other_speaker_after_action(self):
        groups = group_elements([dialogue(Speaker.A, "Hi"), action("Rain"), dialogue(Speaker.B, "So")])
        assert should_show_contd(2, groups) is False

    def test_nearest_speaker_decides(self):
        groups = group_elements([
            dialogue(Speaker.A, "Hi"),
            dialogue(Speaker.B, "Yo"),
            action("Rain"),
            dialogue(Speaker.A, "So"),
        ])
        assert should_show_contd(3, groups) is False

    def test_several_actions_in_between(self):
        groups = group_elements([
            dialogue(Speaker.A, "Hi"),
            action("Rain"),
            action("Thunder"),
            dialogue(Speaker.A, "So"),
        ])
        assert should_show_contd(3, groups) is True

    def test_no_action_in_between(self):
        groups = group_elements([dialogue(Speaker.A, "Hi"), dialogue(Speaker.B, "Yo")])
        assert should_show_contd(1, groups) is False

    def test_first_group_never_contd(self):
        groups = group_elements([dialogue(Speaker.A, "Hi")])
        assert should_show_contd(0, groups) is False

    def test_leading_action_only(self):
        groups = group_elements([action("Rain"), dialogue(Speaker.A, "Hi")])
        assert should_show_contd(1, groups) is False

    def test_action_group_itself(self):
        groups = group_elements([dialogue(Speaker.A, "Hi"), action("Rain")])
        assert should_show_contd(1, groups) is False
