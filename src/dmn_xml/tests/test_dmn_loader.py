"""Tests for the secure DMN loader."""

import unittest

import pytest

from dmn_xml import (
    DMN13_NS,
    DmnXmlParser,
    ErrorUtils,
    XmlEngineUnavailable,
    parse_dmn_content,
    parse_dmn_file,
    xml_engine_available,
)
from dmn_xml import parser as parser_module


class TestDmnXmlParser(unittest.TestCase):
    """Loader behaviour on well-formed and broken input."""

    def setUp(self):
        self.parser = DmnXmlParser()

    def test_parse_minimal_document(self):
        result = self.parser.parse_content(f'<definitions xmlns="{DMN13_NS}" name="x"/>')

        self.assertTrue(result.success)
        self.assertIsNotNone(result.document)
        self.assertEqual(result.document.root.tag, "definitions")
        self.assertEqual(result.document.root.namespace, DMN13_NS)
        self.assertIsNone(result.error_kind)

    def test_syntax_error_reports_position(self):
        result = self.parser.parse_content("<definitions>\n  <decision>\n</definitions>")

        self.assertFalse(result.success)
        self.assertIsNone(result.document)
        self.assertEqual(result.error_kind, "syntax")
        self.assertIn("mismatched tag", result.error_message)
        self.assertEqual(result.line, 3)
        self.assertIsNotNone(result.column)

    def test_garbage_input_is_syntax_error(self):
        result = self.parser.parse_content("<not-xml")

        self.assertFalse(result.success)
        self.assertEqual(result.error_kind, "syntax")
        self.assertEqual(result.line, 1)

    def test_empty_input_is_syntax_error(self):
        result = self.parser.parse_content("")

        self.assertFalse(result.success)
        self.assertEqual(result.error_kind, "syntax")

    def test_byte_order_mark_is_ignored(self):
        result = self.parser.parse_content('\ufeff<definitions name="bom"/>')

        self.assertTrue(result.success)
        self.assertEqual(result.document.root.get("name"), "bom")

    def test_entity_declarations_are_rejected(self):
        content = """<?xml version="1.0"?>
<!DOCTYPE definitions [<!ENTITY boom "boom">]>
<definitions>&boom;</definitions>"""
        result = self.parser.parse_content(content)

        self.assertFalse(result.success)
        self.assertEqual(result.error_kind, "forbidden")
        self.assertTrue(result.error_message)

    def test_diagnostics_collected(self):
        result = self.parser.parse_content(
            f'<definitions xmlns="{DMN13_NS}"><decision id="a"><decisionTable/></decision></definitions>'
        )

        diagnostics = result.diagnostics
        self.assertEqual(diagnostics.root_element_tag, "definitions")
        self.assertEqual(diagnostics.total_elements, 3)
        self.assertEqual(diagnostics.xml_depth, 2)
        self.assertEqual(diagnostics.namespaces_declared, 1)
        self.assertIn("xml_parsed", diagnostics.processing_steps)


class TestErrorUtils(unittest.TestCase):

    def test_extract_position_from_message(self):
        self.assertEqual(
            ErrorUtils.extract_position("not well-formed (invalid token): line 4, column 12"),
            (4, 12),
        )

    def test_extract_position_fallback(self):
        self.assertEqual(ErrorUtils.extract_position("no position", (2, 7)), (2, 7))
        self.assertEqual(ErrorUtils.extract_position("no position"), (None, None))

    def test_first_line(self):
        self.assertEqual(ErrorUtils.first_line("\n  first\nsecond"), "first")


def test_namespace_declarations_recorded(dmn_xml):
    result = parse_dmn_content(dmn_xml)

    assert result.success
    assert result.document.declared_namespaces == [
        ("", DMN13_NS),
        ("cprmv", "https://cprmv.open-regels.nl/0.3.0/"),
    ]


def test_parse_file(tmp_path, dmn_xml):
    path = tmp_path / "model.dmn"
    path.write_text(dmn_xml, encoding="utf-8")

    result = parse_dmn_file(path)

    assert result.success
    assert result.source == str(path)
    assert result.document.find("//d:decision").get("name") == "Eligible"


def test_missing_engine_raises(monkeypatch):
    def unavailable():
        raise XmlEngineUnavailable("defusedxml is not installed")

    monkeypatch.setattr(parser_module, "load_xml_engine", unavailable)

    with pytest.raises(XmlEngineUnavailable):
        DmnXmlParser().parse_content("<definitions/>")


def test_engine_available():
    assert xml_engine_available() is True
