"""Layer 3 - Execution rules on CPRMV extension attributes.

CPRMV attributes carry regulatory metadata (ruleset/rule typing, confidence,
validity period). They are optional: a document that does not declare the
CPRMV namespace gets a single informational note.
"""

import logging

from dmn_xml import DmnDocument, XmlNode

from .constants import (
    BWB_ID_RE,
    CPRMV_HOST,
    CPRMV_NS,
    CPRMV_PREFIX,
    ISO_DATE_RE,
    VALID_CPRMV_CONFIDENCE,
    VALID_CPRMV_RULE_TYPES,
    VALID_CPRMV_RULESET_TYPES,
)
from .framework import LayerCollector, LayerResult

logger = logging.getLogger(__name__)


def cprmv_attr(node: XmlNode, name: str) -> str | None:
    """CPRMV attribute value, or None when absent."""
    return node.ns_attr(name, CPRMV_NS)


def cprmv_declared(doc: DmnDocument, xml_content: str) -> bool:
    """Whether the document declares the CPRMV namespace.

    Uses the namespace declarations seen while parsing; documents built
    without them fall back to a search of the raw text.
    """
    if doc.declared_namespaces:
        return any(CPRMV_HOST in uri for uri in doc.namespace_uris)
    return CPRMV_HOST in (xml_content or "")


def _check_decision(decision: XmlNode, layer: LayerCollector) -> None:
    ruleset_type = cprmv_attr(decision, "rulesetType")
    if ruleset_type is not None and ruleset_type not in VALID_CPRMV_RULESET_TYPES:
        layer.error(
            "EXEC-002",
            f'{CPRMV_PREFIX}:rulesetType "{ruleset_type}" is not valid. '
            f'Allowed: {", ".join(VALID_CPRMV_RULESET_TYPES)}.',
            decision.location,
        )

    implements = cprmv_attr(decision, "implements")
    if implements is not None and not BWB_ID_RE.match(implements):
        layer.warning(
            "EXEC-003",
            f'{CPRMV_PREFIX}:implements "{implements}" does not match BWB ID format (e.g. BWBR0002221).',
            decision.location,
        )


def _check_rule(rule: XmlNode, layer: LayerCollector) -> None:
    location = rule.location

    rule_type = cprmv_attr(rule, "ruleType")
    if rule_type is not None and rule_type not in VALID_CPRMV_RULE_TYPES:
        layer.error(
            "EXEC-004",
            f'{CPRMV_PREFIX}:ruleType "{rule_type}" is not valid. '
            f'Allowed: {", ".join(VALID_CPRMV_RULE_TYPES)}.',
            location,
        )

    confidence = cprmv_attr(rule, "confidence")
    if confidence is not None and confidence not in VALID_CPRMV_CONFIDENCE:
        layer.error(
            "EXEC-005",
            f'{CPRMV_PREFIX}:confidence "{confidence}" is not valid. Use: low, medium, or high.',
            location,
        )

    valid_from = cprmv_attr(rule, "validFrom")
    from_ok = valid_from is not None and ISO_DATE_RE.match(valid_from) is not None
    if valid_from is not None and not from_ok:
        layer.error(
            "EXEC-006",
            f'{CPRMV_PREFIX}:validFrom "{valid_from}" is not a valid ISO date (YYYY-MM-DD).',
            location,
        )

    valid_until = cprmv_attr(rule, "validUntil")
    until_ok = valid_until is not None and ISO_DATE_RE.match(valid_until) is not None
    if valid_until is not None and not until_ok:
        layer.error(
            "EXEC-007",
            f'{CPRMV_PREFIX}:validUntil "{valid_until}" is not a valid ISO date (YYYY-MM-DD).',
            location,
        )

    # Fixed-width ISO dates order correctly as strings
    if from_ok and until_ok and valid_from >= valid_until:
        layer.error(
            "EXEC-008",
            f'{CPRMV_PREFIX}:validFrom "{valid_from}" must be earlier than '
            f'{CPRMV_PREFIX}:validUntil "{valid_until}".',
            location,
        )

    if rule_type == "temporal-period":
        if not valid_from:
            layer.warning("EXEC-009", f"temporal-period rule is missing {CPRMV_PREFIX}:validFrom.", location)
        if not valid_until:
            layer.warning("EXEC-010", f"temporal-period rule is missing {CPRMV_PREFIX}:validUntil.", location)


def validate_execution_layer(doc: DmnDocument, xml_content: str) -> LayerResult:
    """Check CPRMV attributes on decisions and rules."""
    layer = LayerCollector("execution")

    if not cprmv_declared(doc, xml_content):
        layer.info(
            "EXEC-001",
            "CPRMV namespace not declared. RONL DMN+ attributes (cprmv:*) are optional "
            "but recommended for RONL publishing.",
        )
        return layer.result()

    for decision in doc.find_all("//d:decision"):
        _check_decision(decision, layer)

    for rule in doc.find_all("//d:rule"):
        _check_rule(rule, layer)

    return layer.result()
