"""Pytest configuration and fixtures for DMN loader tests."""

import pytest

from dmn_xml import DmnXmlParser


@pytest.fixture
def parser():
    """Basic parser fixture."""
    return DmnXmlParser()


@pytest.fixture
def dmn_xml():
    """Small DMN 1.3 document with one decision table and a CPRMV prefix."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<definitions xmlns="https://www.omg.org/spec/DMN/20191111/MODEL/"
             xmlns:cprmv="https://cprmv.open-regels.nl/0.3.0/"
             id="defs_1" name="Zorgtoeslag" namespace="https://example.org/dmn">
  <decision id="d_eligible" name="Eligible" cprmv:rulesetType="decision-table">
    <informationRequirement id="ir_1">
      <requiredInput href="#in_age"/>
    </informationRequirement>
    <decisionTable id="dt_1" hitPolicy="FIRST">
      <input id="i_1"><inputExpression typeRef="integer"><text>age</text></inputExpression></input>
      <output id="o_1" name="eligible" typeRef="boolean"/>
      <rule id="r_1" cprmv:confidence="high">
        <inputEntry><text>&gt;= 18</text></inputEntry>
        <outputEntry><text>true</text></outputEntry>
      </rule>
    </decisionTable>
  </decision>
  <inputData id="in_age" name="age"/>
</definitions>
"""
