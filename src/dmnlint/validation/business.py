"""Layer 2 - Business rules on decision table structure.

Checks hit policies, FEEL type references, rule/column arity and, for
single-match hit policies, duplicate and overlapping rules.
"""

import logging

from dmn_xml import DmnDocument, XmlNode

from .constants import (
    DEFAULT_HIT_POLICY,
    MATCH_ANYTHING,
    SINGLE_MATCH_POLICIES,
    VALID_HIT_POLICIES,
    VALID_TYPE_REFS,
)
from .framework import LayerCollector, LayerResult

logger = logging.getLogger(__name__)


def _decision_location(node: XmlNode) -> str | None:
    decision = node.ancestor("decision")
    return decision.location if decision is not None else None


def _table_location(table: XmlNode) -> str:
    return _decision_location(table) or "<decisionTable>"


def _input_signature(rule: XmlNode) -> tuple[str, ...]:
    return tuple(entry.text.strip() for entry in rule.find_all("d:inputEntry"))


def _is_catch_all(signature: tuple[str, ...]) -> bool:
    return all(cell in MATCH_ANYTHING for cell in signature)


def _rule_reference(rule: XmlNode) -> str:
    rule_id = rule.get("id")
    return f'"{rule_id}"' if rule_id else rule.location


def check_hit_policies(doc: DmnDocument, layer: LayerCollector) -> None:
    for table in doc.find_all("//d:decisionTable"):
        hit_policy = table.get("hitPolicy")
        if hit_policy and hit_policy not in VALID_HIT_POLICIES:
            owner = table.parent
            layer.error(
                "BIZ-001",
                f'hitPolicy "{hit_policy}" is not valid. Allowed: {", ".join(VALID_HIT_POLICIES)}.',
                owner.location if owner is not None else None,
            )


def check_type_refs(doc: DmnDocument, layer: LayerCollector) -> None:
    for expression in doc.find_all("//d:inputExpression"):
        location = _decision_location(expression)
        type_ref = expression.get("typeRef")
        if not type_ref:
            layer.warning(
                "BIZ-002",
                "<inputExpression> is missing typeRef. Declare the type for interoperability.",
                location,
            )
        elif type_ref not in VALID_TYPE_REFS:
            layer.warning("BIZ-003", f'typeRef "{type_ref}" is not a known DMN FEEL type.', location)

    for output in doc.find_all("//d:decisionTable/d:output"):
        location = _decision_location(output)
        type_ref = output.get("typeRef")
        if not type_ref:
            layer.warning("BIZ-004", "<output> column is missing typeRef.", location)
        elif type_ref not in VALID_TYPE_REFS:
            layer.warning("BIZ-005", f'Output typeRef "{type_ref}" is not a known DMN FEEL type.', location)


def check_rule_arity(doc: DmnDocument, layer: LayerCollector) -> None:
    for table in doc.find_all("//d:decisionTable"):
        input_count = len(table.find_all("d:input"))
        output_count = len(table.find_all("d:output"))
        table_location = _table_location(table)

        for rule in table.find_all("d:rule"):
            in_entries = len(rule.find_all("d:inputEntry"))
            out_entries = len(rule.find_all("d:outputEntry"))
            if in_entries != input_count:
                layer.error(
                    "BIZ-006",
                    f"Rule has {in_entries} inputEntry element(s) but the table has "
                    f"{input_count} input column(s).",
                    f"{table_location} > {rule.location}",
                )
            if out_entries != output_count:
                layer.error(
                    "BIZ-007",
                    f"Rule has {out_entries} outputEntry element(s) but the table has "
                    f"{output_count} output column(s).",
                    f"{table_location} > {rule.location}",
                )


def check_rule_overlap(doc: DmnDocument, layer: LayerCollector) -> None:
    """Flag duplicate and catch-all rules in UNIQUE/ANY tables.

    Either condition lets more than one rule match the same input, which a
    single-match hit policy turns into a runtime fault.
    """
    for table in doc.find_all("//d:decisionTable"):
        hit_policy = table.get("hitPolicy") or DEFAULT_HIT_POLICY
        if hit_policy not in SINGLE_MATCH_POLICIES:
            continue

        table_location = _table_location(table)
        rules = [(rule, _input_signature(rule)) for rule in table.find_all("d:rule")]

        first_seen: dict[tuple[str, ...], XmlNode] = {}
        for rule, signature in rules:
            original = first_seen.get(signature)
            if original is None:
                first_seen[signature] = rule
                continue
            layer.error(
                "BIZ-008",
                f"Rule has the same input conditions as rule {_rule_reference(original)}. "
                f"Hit policy {hit_policy} allows only one matching rule.",
                f"{table_location} > {rule.location}",
            )

        catch_alls = [rule for rule, signature in rules if _is_catch_all(signature)]
        has_specific = any(not _is_catch_all(signature) for _, signature in rules)
        if catch_alls and has_specific:
            for rule in catch_alls:
                layer.warning(
                    "BIZ-009",
                    f"Catch-all rule (every input is '-' or empty) overlaps the specific rules "
                    f"of this table under hit policy {hit_policy}.",
                    f"{table_location} > {rule.location}",
                )


def validate_business_layer(doc: DmnDocument) -> LayerResult:
    """Run all decision table checks in a fixed order."""
    layer = LayerCollector("business")
    check_hit_policies(doc, layer)
    check_type_refs(doc, layer)
    check_rule_arity(doc, layer)
    check_rule_overlap(doc, layer)
    logger.debug(f"Business layer found {len(layer.result().issues)} issue(s)")
    return layer.result()
