"""Layer 4 - Interaction rules on DRD wiring.

Cross-checks every informationRequirement against the decisions and input
data declared in the same document.
"""

import logging

from dmn_xml import DmnDocument, XmlNode

from .framework import LayerCollector, LayerResult

logger = logging.getLogger(__name__)


def _index_by_id(nodes: list[XmlNode]) -> dict[str, XmlNode]:
    index: dict[str, XmlNode] = {}
    for node in nodes:
        node_id = node.get("id")
        if node_id:
            index[node_id] = node
    return index


def _href_target(reference: XmlNode) -> str:
    """Same-document fragment reference without the leading '#'."""
    href = reference.get("href") or ""
    return href[1:] if href.startswith("#") else href


def validate_interaction_layer(doc: DmnDocument) -> LayerResult:
    """Validate requirement references, orphaned input data and variable names."""
    layer = LayerCollector("interaction")

    input_data = _index_by_id(doc.find_all("//d:inputData"))
    decisions = _index_by_id(doc.find_all("//d:decision"))
    referenced_inputs: set[str] = set()

    for requirement in doc.find_all("//d:informationRequirement"):
        owner = requirement.parent
        location = owner.location if owner is not None else "<informationRequirement>"

        required_input = requirement.find("d:requiredInput")
        required_decision = requirement.find("d:requiredDecision")

        if required_input is not None:
            target_id = _href_target(required_input)
            if target_id not in input_data:
                layer.error(
                    "INT-001",
                    f'informationRequirement references inputData "#{target_id}" which does not exist.',
                    location,
                )
            else:
                referenced_inputs.add(target_id)

        if required_decision is not None:
            target_id = _href_target(required_decision)
            if target_id not in decisions:
                layer.error(
                    "INT-002",
                    f'informationRequirement references decision "#{target_id}" which does not exist.',
                    location,
                )
            owner_id = owner.get("id") if owner is not None else None
            if owner_id and owner_id == target_id:
                layer.error(
                    "INT-003",
                    "Decision requires itself: self-referential dependency detected.",
                    owner.location,
                )

        if required_input is None and required_decision is None:
            layer.warning(
                "INT-004",
                "<informationRequirement> has neither <requiredInput> nor <requiredDecision>.",
                location,
            )

    for input_id, node in input_data.items():
        if input_id not in referenced_inputs:
            layer.warning(
                "INT-005",
                f'<inputData id="{input_id}"> is not referenced by any informationRequirement '
                f"and will be inaccessible to decisions.",
                node.location,
            )

    for node in doc.find_all("//d:inputData"):
        variable = node.find("d:variable")
        if variable is None:
            continue
        input_name = node.get("name")
        variable_name = variable.get("name")
        if input_name and variable_name and input_name != variable_name:
            layer.warning(
                "INT-006",
                f'<inputData name="{input_name}"> contains <variable name="{variable_name}">; '
                f"names should match for RONL publishing.",
                node.location,
            )

    return layer.result()
