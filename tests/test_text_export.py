"""Tests for dialogscript.text_export."""

from __future__ import annotations

from dialogscript.models import ElementType, Speaker
from dialogscript.text_export import export_text

from factories import action, dialogue, paren, variant


class TestExportText:
    def test_empty_script(self):
        assert export_text([]) == ""

    def test_sample_script(self, sample_elements):
        assert export_text(sample_elements, {Speaker.A: "Anna"}) == (
            "Anna: Hello\n\n"
            "(pause)\n\n"
            "There\n\n"
            "SHE LEAVES\n\n"
            "B: Wait!\n\n"
        )

    def test_name_once_per_run(self):
        elements = [dialogue(Speaker.A, "Hello"), paren(Speaker.A, "pause"), dialogue(Speaker.A, "there")]
        assert export_text(elements) == "A: Hello\n\n(pause)\n\nthere\n\n"

    def test_run_starting_with_parenthetical(self):
        elements = [paren(Speaker.A, "softly"), dialogue(Speaker.A, "Hi")]
        assert export_text(elements) == "A: (softly)\n\nHi\n\n"

    def test_contd(self):
        elements = [dialogue(Speaker.A, "Hi"), action("Door slams"), dialogue(Speaker.A, "Again")]
        assert export_text(elements) == "A: Hi\n\nDOOR SLAMS\n\nA (CONT'D): Again\n\n"

    def test_extension(self):
        elements = [variant(ElementType.OFF_SCREEN, Speaker.B, "Over here")]
        assert export_text(elements) == "B (O.S.): Over here\n\n"

    def test_extension_switch_within_run(self):
        elements = [dialogue(Speaker.A, "Hi"), variant(ElementType.VOICE_OVER, Speaker.A, "Later")]
        assert export_text(elements) == "A: Hi\n\nA (V.O.): Later\n\n"

    def test_names_keep_case(self):
        assert export_text([dialogue(Speaker.B, "Yo")], {Speaker.B: "Ben"}) == "Ben: Yo\n\n"
