"""Tests for the execution rules layer (CPRMV attributes)."""

import xml.etree.ElementTree as ET

import pytest

from dmn_builders import CPRMV, DMN13, dmn
from dmn_xml import DmnDocument
from dmnlint.validation.execution import cprmv_declared, validate_execution_layer


def _rule(**attrs):
    rendered = "".join(f' cprmv:{name}="{value}"' for name, value in attrs.items())
    return f'<rule id="r1"{rendered}><inputEntry><text>1</text></inputEntry></rule>'


def _body(decision_attrs="", rules=""):
    return (
        f'<decision id="d1" name="D"{decision_attrs}>'
        f'<decisionTable id="t1"><input id="i1"/>{rules}</decisionTable></decision>'
    )


@pytest.fixture
def run(load):
    def _run(body, cprmv=True):
        content = dmn(body, cprmv=cprmv)
        return validate_execution_layer(load(content), content)
    return _run


def test_undeclared_namespace_gives_single_info(run):
    layer = run(_body(), cprmv=False)

    assert layer.codes() == ["EXEC-001"]
    assert layer.issues[0].severity.value == "info"
    assert layer.issues[0].location is None
    assert layer.label == "Execution Rules"


def test_host_in_comment_does_not_activate(load):
    content = dmn("<!-- see https://cprmv.open-regels.nl/ -->" + _body())

    assert validate_execution_layer(load(content), content).codes() == ["EXEC-001"]


def test_declared_namespace_clean_document(run):
    body = _body(
        ' cprmv:rulesetType="decision-table" cprmv:implements="BWBR0002221"',
        _rule(ruleType="temporal-period", confidence="high",
              validFrom="2024-01-01", validUntil="2024-12-31"),
    )

    assert run(body).issues == ()


def test_fallback_to_raw_text_without_declarations():
    content = f'<definitions xmlns="{DMN13}"><!-- {CPRMV} --></definitions>'
    doc = DmnDocument.from_element(ET.fromstring(content))

    assert cprmv_declared(doc, content) is True
    assert cprmv_declared(doc, f'<definitions xmlns="{DMN13}"/>') is False


class TestDecisionAttributes:

    def test_invalid_ruleset_type(self, run):
        layer = run(_body(' cprmv:rulesetType="spreadsheet"'))

        assert layer.codes() == ["EXEC-002"]
        assert layer.issues[0].severity.value == "error"
        assert layer.issues[0].location == '<decision id="d1">'

    @pytest.mark.parametrize("value", ["BWBR000222", "bwbr0002221", "BWB0002221X", ""])
    def test_implements_format(self, run, value):
        layer = run(_body(f' cprmv:implements="{value}"'))

        assert layer.codes() == ["EXEC-003"]
        assert layer.issues[0].severity.value == "warning"


class TestRuleAttributes:

    def test_invalid_rule_type(self, run):
        layer = run(_body(rules=_rule(ruleType="magic")))

        assert layer.codes() == ["EXEC-004"]
        assert layer.issues[0].location == '<rule id="r1">'

    def test_invalid_confidence(self, run):
        assert run(_body(rules=_rule(confidence="certain"))).codes() == ["EXEC-005"]

    @pytest.mark.parametrize("value", ["2024-13-01", "2024-02-30x", "24-01-01", "2024/01/01"])
    def test_invalid_valid_from(self, run, value):
        assert run(_body(rules=_rule(validFrom=value))).codes() == ["EXEC-006"]

    def test_invalid_valid_until(self, run):
        assert run(_body(rules=_rule(validUntil="tomorrow"))).codes() == ["EXEC-007"]

    @pytest.mark.parametrize("valid_from,valid_until", [
        ("2024-06-01", "2024-01-01"),
        ("2024-06-01", "2024-06-01"),
    ])
    def test_period_must_be_increasing(self, run, valid_from, valid_until):
        layer = run(_body(rules=_rule(validFrom=valid_from, validUntil=valid_until)))

        assert layer.codes() == ["EXEC-008"]

    def test_ordering_skipped_when_a_date_is_invalid(self, run):
        layer = run(_body(rules=_rule(validFrom="2025-01-01", validUntil="2024-99-01")))

        assert layer.codes() == ["EXEC-007"]

    def test_temporal_period_requires_both_dates(self, run):
        layer = run(_body(rules=_rule(ruleType="temporal-period")))

        assert layer.codes() == ["EXEC-009", "EXEC-010"]
        assert all(issue.severity.value == "warning" for issue in layer.issues)

    def test_temporal_period_with_empty_until(self, run):
        layer = run(_body(rules=_rule(ruleType="temporal-period", validFrom="2024-01-01", validUntil="")))

        assert layer.codes() == ["EXEC-007", "EXEC-010"]
