"""Shared fixtures for dmnlint tests."""

import pytest

from dmn_builders import decision_table, dmn
from dmn_xml import parse_dmn_content
from dmnlint.config import DmnLintConfig


@pytest.fixture
def clean_dmn():
    """A DMN 1.3 document with no errors or warnings in any layer."""
    body = (
        decision_table([['"a"', '"b"'], ['"c"', '"d"']])
        .replace("<decisionTable",
                 '<informationRequirement id="ir_1"><requiredInput href="#input_1"/></informationRequirement>'
                 "<decisionTable", 1)
        + '<inputData id="input_1" name="x0"><variable name="x0" typeRef="string"/></inputData>'
    )
    return dmn(body)


@pytest.fixture
def load():
    """Parse DMN text into a document handle, failing the test on syntax errors."""
    def _load(content):
        result = parse_dmn_content(content)
        assert result.success, result.error_message
        return result.document
    return _load


@pytest.fixture
def sample_config():
    """Default configuration."""
    return DmnLintConfig()
