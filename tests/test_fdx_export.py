"""Tests for dialogscript.fdx_export."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from dialogscript.fdx_export import escape_xml, export_fdx
from dialogscript.models import ElementType, Speaker

from factories import action, dialogue, paren, variant

HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<FinalDraft DocumentType="Script" Template="No" Version="1">\n'
    "<Content>\n"
)
FOOTER = "</Content>\n</FinalDraft>\n"


def _paragraph(kind: str, text: str) -> str:
    return f'<Paragraph Type="{kind}">\n<Text>{text}</Text>\n</Paragraph>\n'


class TestEscapeXml:
    def test_all_special_characters(self):
        assert escape_xml("""<a & "b" 'c'>""") == "&lt;a &amp; &quot;b&quot; &apos;c&apos;&gt;"

    def test_plain(self):
        assert escape_xml("Hello") == "Hello"


class TestExportFdx:
    def test_empty_document(self):
        assert export_fdx([]) == HEADER + FOOTER

    def test_single_line(self):
        assert export_fdx([dialogue(Speaker.A, "Hi")], {Speaker.A: "Anna"}) == (
            HEADER
            + _paragraph("Character", "ANNA")
            + _paragraph("Dialogue", "Hi")
            + FOOTER
        )

    def test_sample_script(self, sample_elements):
        assert export_fdx(sample_elements) == (
            HEADER
            + _paragraph("Character", "A")
            + _paragraph("Dialogue", "Hello")
            + _paragraph("Parenthetical", "(pause)")
            + _paragraph("Dialogue", "There")
            + _paragraph("Action", "SHE LEAVES")
            + _paragraph("Character", "B")
            + _paragraph("Dialogue", "Wait!")
            + FOOTER
        )

    def test_contd_apostrophe_escaped(self):
        fdx = export_fdx([dialogue(Speaker.A, "Hi"), action("Rain"), dialogue(Speaker.A, "Again")])
        assert "<Text>A (CONT&apos;D)</Text>" in fdx

    def test_variant_cue_extension(self):
        fdx = export_fdx([variant(ElementType.OFF_SCREEN, Speaker.B, "Out here")], {Speaker.B: "ben"})
        assert _paragraph("Character", "BEN (O.S.)") in fdx
        assert _paragraph("Dialogue", "Out here") in fdx

    def test_quotes_escaped(self):
        fdx = export_fdx([dialogue(Speaker.A, 'She said "run" & left <fast>')])
        assert "She said &quot;run&quot; &amp; left &lt;fast&gt;" in fdx

    def test_well_formed(self):
        elements = [
            dialogue(Speaker.A, "It's <not> \"fine\" & you know it"),
            paren(Speaker.A, "beat"),
            action("Glass breaks"),
            dialogue(Speaker.A, "See?"),
        ]
        root = ET.fromstring(export_fdx(elements).encode("utf-8"))
        paragraphs = root.findall("./Content/Paragraph")
        assert [p.get("Type") for p in paragraphs] == [
            "Character", "Dialogue", "Parenthetical", "Action", "Character", "Dialogue",
        ]
        assert paragraphs[1].findtext("Text") == "It's <not> \"fine\" & you know it"
        assert paragraphs[4].findtext("Text") == "A (CONT'D)"
